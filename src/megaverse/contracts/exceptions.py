"""Exception hierarchy for megaverse.

All megaverse exceptions inherit from :class:`MegaverseError`, so callers can
catch any library error with a single ``except`` clause while still handling
specific failure modes.
"""

from __future__ import annotations


class MegaverseError(Exception):
    """Base exception for all megaverse errors."""


class ConfigError(MegaverseError):
    """Configuration loading or validation failure."""


class GridError(MegaverseError):
    """Base for goal/canvas grids that cannot be used."""


class EmptyGridError(GridError):
    """The grid has no rows, or its first row has no columns."""


class MalformedResponseError(GridError):
    """A remote response is missing required fields or has an unusable shape."""


class UnknownTypeError(MegaverseError):
    """A grid tag or enum token is not part of the known vocabulary."""


class OutOfBoundsError(MegaverseError):
    """Caller-supplied coordinates fall outside the loaded goal map."""

    def __init__(self, row: int, column: int, *, rows: int, cols: int) -> None:
        super().__init__(f"Invalid coordinates ({row}, {column}) for map with {rows} rows and {cols} cols")
        self.row = row
        self.column = column
        self.rows = rows
        self.cols = cols


class RemoteError(MegaverseError):
    """Base remote API failure.

    Attributes:
        status_code: HTTP status of the failing response, ``None`` for transport failures.
    """

    def __init__(self, message: str, *, status_code: int | None = None) -> None:
        super().__init__(message)
        self.status_code = status_code


class TransientRemoteError(RemoteError):
    """Rate-limited or server-side failure that may succeed when retried."""


class TerminalRemoteError(RemoteError):
    """Failure that will not be retried (client error, unexpected status, transport, exhausted retries)."""

    def __init__(self, message: str, *, status_code: int | None = None, attempts: int = 1) -> None:
        super().__init__(message, status_code=status_code)
        self.attempts = attempts


class InvalidGeometryError(MegaverseError):
    """A drawing command does not fit the goal map's shape."""
