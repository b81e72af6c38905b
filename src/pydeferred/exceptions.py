"""Custom exception hierarchy for pydeferred."""

from __future__ import annotations

from collections.abc import Hashable


class DeferredMapError(Exception):
    """Base exception for all pydeferred errors."""


class DeferredMapConfigError(DeferredMapError):
    """Invalid configuration."""


class InvalidValueError(DeferredMapError, ValueError):
    """A value cannot be stored in the map.

    Raised for ``None`` (absence is represented only by the key not being
    present) and for computations that are not callable.  The map is left
    unchanged when this is raised.
    """

    def __init__(self, message: str, *, key: Hashable | None = None) -> None:
        self.key = key
        super().__init__(message)
