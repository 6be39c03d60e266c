"""Public contracts for megaverse."""

from megaverse.contracts.astral import (
    AstralObject,
    Cometh,
    ComethDirection,
    Method,
    Polyanet,
    Soloon,
    SoloonColor,
    delete_target,
)
from megaverse.contracts.config import MegaverseConfig
from megaverse.contracts.exceptions import (
    ConfigError,
    EmptyGridError,
    GridError,
    InvalidGeometryError,
    MalformedResponseError,
    MegaverseError,
    OutOfBoundsError,
    RemoteError,
    TerminalRemoteError,
    TransientRemoteError,
    UnknownTypeError,
)
from megaverse.contracts.goal import GoalMap
from megaverse.contracts.results import Failure, ReconcileResult

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
    "MegaverseConfig",
    "MegaverseError",
    "Method",
    "OutOfBoundsError",
    "Polyanet",
    "ReconcileResult",
    "RemoteError",
    "Soloon",
    "SoloonColor",
    "TerminalRemoteError",
    "TransientRemoteError",
    "UnknownTypeError",
    "delete_target",
]
