from megaverse.cli.progress.rich import RichReconcileProgress

__all__ = ["RichReconcileProgress"]
