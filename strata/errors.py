"""
Exceptions for user-facing configuration errors.

All expected errors that should be reported to the daemon operator
as clean messages (without stack traces) must inherit from StrataUserError.

Programming errors and bugs should NOT inherit from StrataUserError;
they will propagate with full tracebacks.
"""

from __future__ import annotations

from pathlib import Path
from typing import Optional


class StrataUserError(Exception):
    """
    Base class for all user-facing errors in strata.

    These errors indicate problems that the operator can fix:
    malformed documents, bad import patterns, unreadable files, etc.
    """
    pass


class ParseError(StrataUserError):
    """Raised when a document is not valid TOML/YAML or has a wrong shape."""
    def __init__(self, path: Optional[Path], message: str):
        self.path = path
        self.message = message
        where = f"{path}: " if path is not None else ""
        super().__init__(f"failed to parse config {where}{message}")


class InvalidPatternError(StrataUserError):
    """Raised when an import entry holds malformed wildcard syntax."""
    def __init__(self, pattern: str, reason: str):
        self.pattern = pattern
        self.reason = reason
        super().__init__(f"invalid import pattern {pattern!r}: {reason}")


class ConfigPathError(StrataUserError):
    """Raised when a path cannot be resolved or read."""
    def __init__(self, path: str, reason: str):
        self.path = path
        self.reason = reason
        super().__init__(f"{path}: {reason}")


class DecodeError(StrataUserError):
    """Raised when a plugin section does not fit the requested target."""
    def __init__(self, path: str, message: str):
        self.path = path
        self.message = message
        super().__init__(f"{path}: {message}")


class ConfigMergeError(StrataUserError):
    """Raised when two documents cannot be merged."""
    pass


class ConfigValidationError(StrataUserError):
    """Raised when a versioned document breaks schema rules."""
    pass


__all__ = [
    "StrataUserError",
    "ParseError",
    "InvalidPatternError",
    "ConfigPathError",
    "DecodeError",
    "ConfigMergeError",
    "ConfigValidationError",
]
