"""Read-only, live views over caller-owned mappings."""

from __future__ import annotations

import copy
import logging
import reprlib
from collections.abc import Iterable, Iterator, Mapping, MutableSequence
from dataclasses import dataclass
from typing import Any, Generic, NoReturn, TypeVar

from mapping_view.errors import (
    InvalidArgumentError,
    KeyNotFoundError,
    OutOfBoundsError,
    ReadOnlyViewError,
)

K = TypeVar("K")
V = TypeVar("V")

logger = logging.getLogger(__name__)

_REPR_MAX_ITEMS = 50
_UNSET: Any = object()


@dataclass(frozen=True, slots=True)
class Lookup(Generic[V]):
    """Outcome of a non-raising key lookup."""

    found: bool
    value: V | None = None

    def __bool__(self) -> bool:
        return self.found

    @classmethod
    def missing(cls) -> Lookup[V]:
        return cls(found=False)


class ReadOnlyMappingView(Mapping[K, V]):
    """Live read-only projection of another mapping.

    The view keeps a reference to the source rather than a copy, so changes the
    owner makes to the source show up through the view immediately. Every
    mutating operation raises :class:`ReadOnlyViewError` without touching the
    source.
    """

    __slots__ = ("_data",)

    _data: Mapping[K, V]

    def __init__(self, source: Mapping[K, V] | None = _UNSET) -> None:
        if source is _UNSET:
            data: Mapping[K, V] = {}
            owned = True
        elif source is None:
            raise InvalidArgumentError("source mapping must not be None")
        elif not isinstance(source, Mapping):
            raise InvalidArgumentError(
                f"source must be a mapping, got {type(source).__name__}"
            )
        else:
            data = source
            owned = False
        object.__setattr__(self, "_data", data)
        logger.debug(
            "mapping_view.created",
            extra={"data": {"source_type": type(data).__name__, "owned": owned}},
        )

    # Reads

    def __getitem__(self, key: K) -> V:
        data = self._data
        # Membership first so __missing__ hooks (defaultdict) never insert through the view.
        if key not in data:
            raise KeyNotFoundError(key)
        return data[key]

    def __contains__(self, key: object) -> bool:
        return key in self._data

    def __iter__(self) -> Iterator[K]:
        return iter(self._data)

    def __reversed__(self) -> Iterator[K]:
        return reversed(self._data)  # type: ignore[call-overload]

    def __len__(self) -> int:
        return len(self._data)

    def contains_key(self, key: K) -> bool:
        return key in self._data

    def try_get(self, key: K) -> Lookup[V]:
        """Return the value for ``key`` wrapped in a :class:`Lookup`; never raises for a missing key."""

        data = self._data
        if key not in data:
            return Lookup.missing()
        return Lookup(found=True, value=data[key])

    def contains_entry(self, entry: tuple[K, V]) -> bool:
        """True when ``entry``'s key is present and its stored value compares equal."""

        key, value = entry
        return (key, value) in self.items()

    def entries(self) -> Iterator[tuple[K, V]]:
        """Lazily yield ``(key, value)`` pairs in the source's iteration order."""

        data = self._data
        for key in data:
            yield key, data[key]

    @property
    def count(self) -> int:
        return len(self._data)

    @property
    def is_read_only(self) -> bool:
        return True

    def copy_into(self, target: MutableSequence[tuple[K, V]], offset: int = 0) -> None:
        """Write every ``(key, value)`` pair into ``target`` starting at ``offset``.

        ``target`` is left untouched when it cannot hold all entries.
        """

        if offset < 0:
            raise OutOfBoundsError(f"offset must be non-negative, got {offset}")
        if offset > len(target):
            raise OutOfBoundsError(
                f"offset {offset} is past the end of a target of length {len(target)}"
            )
        snapshot = list(self.entries())
        available = len(target) - offset
        if available < len(snapshot):
            raise OutOfBoundsError(
                f"target has {available} slots from offset {offset}, needs {len(snapshot)}"
            )
        for index, entry in enumerate(snapshot, start=offset):
            target[index] = entry

    def to_dict(self) -> dict[K, V]:
        """Return a shallow copy; unlike the view it does not track the source."""
        return dict(self.entries())

    def __or__(self, other: object) -> dict[K, V]:
        if not isinstance(other, Mapping):
            return NotImplemented
        merged = self.to_dict()
        merged.update(other)
        return merged

    def __ror__(self, other: object) -> dict[K, V]:
        if not isinstance(other, Mapping):
            return NotImplemented
        merged = dict(other)
        merged.update(self.entries())
        return merged

    def __copy__(self) -> ReadOnlyMappingView[K, V]:
        return type(self)(self._data)

    def __deepcopy__(self, memo: dict[int, Any]) -> ReadOnlyMappingView[K, V]:
        clone = object.__new__(type(self))
        memo[id(self)] = clone
        object.__setattr__(clone, "_data", copy.deepcopy(self._data, memo))
        return clone

    @reprlib.recursive_repr()
    def __repr__(self) -> str:
        parts: list[str] = []
        for index, (key, value) in enumerate(self.entries()):
            if index >= _REPR_MAX_ITEMS:
                parts.append(f"...{len(self._data) - index} more")
                break
            parts.append(f"{key!r}: {value!r}")
        return f"{type(self).__name__}({{{', '.join(parts)}}})"

    # Writes

    def __setitem__(self, key: K, value: V) -> NoReturn:
        raise _read_only_error()

    def __delitem__(self, key: K) -> NoReturn:
        raise _read_only_error()

    def __ior__(self, other: object) -> NoReturn:
        raise _read_only_error()

    def setdefault(self, key: K, default: V | None = None) -> NoReturn:
        raise _read_only_error()

    def pop(self, key: K, *default: V) -> NoReturn:
        raise _read_only_error()

    def popitem(self) -> NoReturn:
        raise _read_only_error()

    def update(self, other: Mapping[K, V] | Iterable[tuple[K, V]] = (), /, **kwargs: V) -> NoReturn:
        raise _read_only_error()

    def clear(self) -> NoReturn:
        raise _read_only_error()

    def __setattr__(self, name: str, value: object) -> NoReturn:
        raise _read_only_error()

    def __delattr__(self, name: str) -> NoReturn:
        raise _read_only_error()


def _read_only_error() -> ReadOnlyViewError:
    return ReadOnlyViewError(f"{ReadOnlyMappingView.__name__} is read-only")


def readonly_view(source: Mapping[K, V]) -> ReadOnlyMappingView[K, V]:
    """Wrap ``source`` in a read-only view, reusing it when it already is one."""

    if isinstance(source, ReadOnlyMappingView):
        return source
    return ReadOnlyMappingView(source)


__all__ = ["Lookup", "ReadOnlyMappingView", "readonly_view"]
