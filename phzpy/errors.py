"""Error hierarchy shared by the modeling pipeline.

Every failure that can reach the top-level call is a :class:`PhzError`. The
optional ``qualified_name`` names the dataset that caused it and is appended
to the message.
"""

from __future__ import annotations


class PhzError(Exception):
    """Base class of all pipeline errors."""

    def __init__(self, message: str, qualified_name: object | None = None):
        self.message = message
        self.qualified_name = qualified_name
        super().__init__(message)

    def with_name(self, qualified_name: object) -> "PhzError":
        """Attach the offending dataset name if none is set yet."""

        if self.qualified_name is None:
            self.qualified_name = qualified_name
        return self

    def __str__(self) -> str:
        if self.qualified_name is None:
            return self.message
        return f"{self.message} [{self.qualified_name}]"


class ConfigError(PhzError):
    """Missing or invalid configuration option."""


class ParseError(PhzError):
    """Malformed dataset, filter or reddening-curve file."""


class DomainError(PhzError):
    """Input data outside the domain of an operation."""


class ConvergenceError(PhzError):
    """Adaptive integration did not converge."""


class PhzIOError(PhzError, OSError):
    """File absent, unreadable, or write failure."""


class BuildAborted(PhzError):
    """The photometry build was cancelled by its abort callback."""
