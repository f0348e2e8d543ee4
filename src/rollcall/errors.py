"""
Rollcall exception hierarchy.

"No match" and "multiple candidates" are not errors; they are reported
as data on the resolution result. Only unusable input and directory
failures raise.
"""

from typing import Optional


class RollcallError(Exception):
    """Base class for all Rollcall errors."""


class ConfigurationError(RollcallError):
    """Invalid configuration value (unknown backend, casing, tier...)."""


class ParseError(RollcallError, ValueError):
    """Raw name could not be split into a first and a last name."""

    def __init__(self, raw: str, reason: str = "expected at least a first and a last name"):
        self.raw = raw
        self.reason = reason
        super().__init__(f"Cannot parse name {raw!r}: {reason}")


class ResolutionError(RollcallError):
    """Identity resolution could not be completed."""


class DirectoryError(ResolutionError):
    """Base class for failures raised by a directory backend."""


class DirectoryUnavailable(DirectoryError):
    """Directory could not be reached or refused the session."""


class DirectoryQueryError(DirectoryError):
    """Directory was reachable but the query failed."""

    def __init__(self, message: str, query: Optional[str] = None):
        self.query = query
        super().__init__(message if query is None else f"{message} (query: {query})")
