from abc import ABC, abstractmethod
from typing import Any, Iterable, Iterator, Mapping

from sortedcontainers import SortedDict  # pyright: ignore[reportMissingTypeStubs]

_END: Any = object()


class Cursor[K, V](ABC):
    """Forward position inside a :class:`Container`.

    A cursor reads its entry live from the container, so a value replaced
    after the cursor was created is what ``value`` returns. Every cursor that
    has run off the end compares equal to the container's ``end()`` cursor.
    """

    @property
    @abstractmethod
    def at_end(self) -> bool:
        raise NotImplementedError()

    @property
    @abstractmethod
    def key(self) -> K:
        raise NotImplementedError()

    @property
    @abstractmethod
    def value(self) -> V:
        raise NotImplementedError()

    @abstractmethod
    def advance(self) -> None:
        """Move to the next entry in container traversal order."""
        raise NotImplementedError()

    @abstractmethod
    def __eq__(self, other: object) -> bool:
        raise NotImplementedError()

    def _ensure_not_at_end(self) -> None:
        if self.at_end:
            raise IndexError('cursor is positioned at the end of its container')


class Container[K, V](ABC):
    """Key-unique associative container driven through cursors.

    Subclasses provide the read and erase primitives. They opt into
    assignment by defining ``assign(key, value)`` (replace in place) and/or
    ``emplace(key, value) -> (cursor, inserted)`` (insert only when absent).
    """

    @abstractmethod
    def size(self) -> int:
        raise NotImplementedError()

    def empty(self) -> bool:
        return self.size() == 0

    @abstractmethod
    def find(self, key: K) -> Cursor[K, V]:
        """Return a cursor at ``key``, or ``end()`` when it is not stored."""
        raise NotImplementedError()

    @abstractmethod
    def begin(self) -> Cursor[K, V]:
        raise NotImplementedError()

    @abstractmethod
    def end(self) -> Cursor[K, V]:
        raise NotImplementedError()

    @abstractmethod
    def erase(self, cursor: Cursor[K, V]) -> None:
        raise NotImplementedError()


class _HashCursor[K, V](Cursor[K, V]):
    _data: dict[K, V]
    _key: Any
    _keys: Iterator[K] | None

    def __init__(self, data: dict[K, V], key: Any = _END, keys: Iterator[K] | None = None) -> None:
        self._data = data
        self._key = key
        self._keys = keys

    @classmethod
    def first(cls, data: dict[K, V]) -> '_HashCursor[K, V]':
        cursor = cls(data, keys=iter(data))
        cursor._step()
        return cursor

    @property
    def at_end(self) -> bool:
        return self._key is _END

    @property
    def key(self) -> K:
        self._ensure_not_at_end()
        return self._key

    @property
    def value(self) -> V:
        return self._data[self.key]

    def advance(self) -> None:
        self._ensure_not_at_end()
        if self._keys is None:
            # Cursors returned by find() resume traversal after their own key.
            self._keys = iter(self._data)
            for key in self._keys:
                if key is self._key or key == self._key:
                    break
        self._step()

    def _step(self) -> None:
        assert self._keys is not None
        self._key = next(self._keys, _END)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, _HashCursor):
            return NotImplemented
        if self._data is not other._data:  # pyright: ignore[reportUnknownMemberType]
            return False
        if self.at_end or other.at_end:
            return self.at_end and other.at_end
        return self._key is other._key or self._key == other._key

    def __repr__(self) -> str:
        return '<HashCursor end>' if self.at_end else f'<HashCursor key={self._key!r}>'


class HashContainer[K, V](Container[K, V]):
    """Hash table container. Traversal follows insertion order.

    Supports both in-place assignment and emplace-on-absence.
    """

    _data: dict[K, V]

    def __init__(self, entries: Mapping[K, V] | Iterable[tuple[K, V]] | None = None) -> None:
        self._data = dict(entries or ())

    def size(self) -> int:
        return len(self._data)

    def find(self, key: K) -> Cursor[K, V]:
        if key in self._data:
            return _HashCursor(self._data, key)
        return self.end()

    def begin(self) -> Cursor[K, V]:
        return _HashCursor.first(self._data)

    def end(self) -> Cursor[K, V]:
        return _HashCursor(self._data)

    def erase(self, cursor: Cursor[K, V]) -> None:
        del self._data[cursor.key]

    def assign(self, key: K, value: V) -> None:
        self._data[key] = value

    def emplace(self, key: K, value: V) -> tuple[Cursor[K, V], bool]:
        if key in self._data:
            return _HashCursor(self._data, key), False
        self._data[key] = value
        return _HashCursor(self._data, key), True


class _SortedCursor[K, V](Cursor[K, V]):
    _data: SortedDict
    _index: int

    def __init__(self, data: SortedDict, index: int) -> None:
        self._data = data
        self._index = index

    @property
    def at_end(self) -> bool:
        return self._index >= len(self._data)

    @property
    def key(self) -> K:
        self._ensure_not_at_end()
        return self._data.peekitem(self._index)[0]

    @property
    def value(self) -> V:
        self._ensure_not_at_end()
        return self._data.peekitem(self._index)[1]

    def advance(self) -> None:
        self._ensure_not_at_end()
        self._index += 1

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, _SortedCursor):
            return NotImplemented
        if self._data is not other._data:  # pyright: ignore[reportUnknownMemberType]
            return False
        if self.at_end or other.at_end:
            return self.at_end and other.at_end
        return self._index == other._index  # pyright: ignore[reportUnknownMemberType]

    def __repr__(self) -> str:
        return '<SortedCursor end>' if self.at_end else f'<SortedCursor index={self._index}>'


class SortedContainer[K, V](Container[K, V]):
    """Ordered container backed by ``sortedcontainers.SortedDict``.

    Traversal follows key order, so keys must be mutually comparable.
    """

    _data: SortedDict

    def __init__(self, entries: Mapping[K, V] | Iterable[tuple[K, V]] | None = None) -> None:
        self._data = SortedDict(entries or ())

    def size(self) -> int:
        return len(self._data)

    def find(self, key: K) -> Cursor[K, V]:
        if key not in self._data:
            return self.end()
        return _SortedCursor(self._data, self._data.bisect_left(key))

    def begin(self) -> Cursor[K, V]:
        return _SortedCursor(self._data, 0)

    def end(self) -> Cursor[K, V]:
        return _SortedCursor(self._data, len(self._data))

    def erase(self, cursor: Cursor[K, V]) -> None:
        del self._data[cursor.key]

    def assign(self, key: K, value: V) -> None:
        self._data[key] = value

    def emplace(self, key: K, value: V) -> tuple[Cursor[K, V], bool]:
        if key in self._data:
            return self.find(key), False
        self._data[key] = value
        return self.find(key), True
