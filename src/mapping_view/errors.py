"""Exceptions raised by read-only mapping views."""

from __future__ import annotations


class MappingViewError(Exception):
    """Base class for mapping view failures."""


class InvalidArgumentError(MappingViewError, ValueError):
    """Raised when a view is constructed from a missing or non-mapping source."""


class KeyNotFoundError(MappingViewError, KeyError):
    """Raised when a key has no entry in the wrapped mapping."""


class ReadOnlyViewError(MappingViewError, TypeError):
    """Raised by every mutating operation on a read-only view."""


class OutOfBoundsError(InvalidArgumentError, IndexError):
    """Raised when a copy target cannot hold every entry from the given offset."""


__all__ = [
    "MappingViewError",
    "InvalidArgumentError",
    "KeyNotFoundError",
    "ReadOnlyViewError",
    "OutOfBoundsError",
]
