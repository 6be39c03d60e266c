from megaverse.engine.progress import NullReconcileProgress, PhaseTally, ReconcileProgress
from megaverse.engine.reconciler import Reconciler

__all__ = ["NullReconcileProgress", "PhaseTally", "ReconcileProgress", "Reconciler"]
