"""Public API surface for megaverse."""

from megaverse.client import MegaverseClient, RetryPolicy
from megaverse.contracts import (
    AstralObject,
    Cometh,
    ComethDirection,
    ConfigError,
    EmptyGridError,
    Failure,
    GoalMap,
    GridError,
    InvalidGeometryError,
    MalformedResponseError,
    MegaverseConfig,
    MegaverseError,
    Method,
    OutOfBoundsError,
    Polyanet,
    ReconcileResult,
    RemoteError,
    Soloon,
    SoloonColor,
    TerminalRemoteError,
    TransientRemoteError,
    UnknownTypeError,
    delete_target,
)
from megaverse.engine import NullReconcileProgress, PhaseTally, ReconcileProgress, Reconciler
from megaverse.parser import parse_astral_objects
from megaverse.sdk import Megaverse, load_config
from megaverse.state import StateFetcher

__all__ = [
    "AstralObject",
    "Cometh",
    "ComethDirection",
    "ConfigError",
    "EmptyGridError",
    "Failure",
    "GoalMap",
    "GridError",
    "InvalidGeometryError",
    "MalformedResponseError",
    "Megaverse",
    "MegaverseClient",
    "MegaverseConfig",
    "MegaverseError",
    "Method",
    "NullReconcileProgress",
    "OutOfBoundsError",
    "PhaseTally",
    "Polyanet",
    "ReconcileProgress",
    "ReconcileResult",
    "Reconciler",
    "RemoteError",
    "RetryPolicy",
    "Soloon",
    "SoloonColor",
    "StateFetcher",
    "TerminalRemoteError",
    "TransientRemoteError",
    "UnknownTypeError",
    "delete_target",
    "load_config",
    "parse_astral_objects",
]
