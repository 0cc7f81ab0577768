from enum import Enum
from typing import Any, Iterator

from mapbind.containers import Cursor


class Projection(Enum):
    KEY = 'key'
    VALUE = 'value'
    ITEM = 'item'

    def apply(self, cursor: Cursor[Any, Any]) -> Any:
        match self:
            case Projection.KEY:
                return cursor.key
            case Projection.VALUE:
                return cursor.value
            case Projection.ITEM:
                return cursor.key, cursor.value


class IteratorState(Enum):
    CREATED = 'created'
    YIELDING = 'yielding'
    EXHAUSTED = 'exhausted'


_ITERATOR_NAMES = {
    Projection.KEY: 'KeyIterator',
    Projection.VALUE: 'ValueIterator',
    Projection.ITEM: 'ItemIterator',
}


class EntryIterator[T](Iterator[T]):
    """Single-pass iterator over a ``[first, last)`` cursor range.

    The iterator holds a strong reference to ``owner`` for as long as it is
    alive, which keeps the container behind the cursors from being collected.
    The cursor is only advanced when the next entry is requested, never ahead
    of time.

    Parameters
    ----------
    owner : Any
        Object that owns the container being traversed.
    first : Cursor
        Cursor at the first entry to yield. Advanced in place.
    last : Cursor
        End cursor of the range.
    projection : Projection
        What to yield for each entry.
    name : str | None, optional
        Display name; derived from the projection when omitted.
    """

    state: IteratorState

    def __init__(
        self,
        owner: Any,
        first: Cursor[Any, Any],
        last: Cursor[Any, Any],
        projection: Projection,
        name: str | None = None,
    ) -> None:
        self._owner = owner
        self._cursor = first
        self._last = last
        self._projection = projection
        self.name = name or _ITERATOR_NAMES[projection]
        self.state = IteratorState.CREATED

    @property
    def owner(self) -> Any:
        return self._owner

    @property
    def projection(self) -> Projection:
        return self._projection

    def __iter__(self) -> 'EntryIterator[T]':
        return self

    def __next__(self) -> T:
        match self.state:
            case IteratorState.EXHAUSTED:
                raise StopIteration
            case IteratorState.YIELDING:
                self._cursor.advance()
            case IteratorState.CREATED:
                self.state = IteratorState.YIELDING

        if self._cursor == self._last:
            self.state = IteratorState.EXHAUSTED
            raise StopIteration

        return self._projection.apply(self._cursor)

    def __repr__(self) -> str:
        return f'<{self.name} state={self.state.value}>'


def make_iterator(
    owner: Any,
    first: Cursor[Any, Any],
    last: Cursor[Any, Any],
    projection: Projection = Projection.ITEM,
    name: str | None = None,
) -> EntryIterator[Any]:
    return EntryIterator(owner, first, last, projection, name)


def make_key_iterator(owner: Any, first: Cursor[Any, Any], last: Cursor[Any, Any]) -> EntryIterator[Any]:
    return make_iterator(owner, first, last, Projection.KEY)


def make_value_iterator(owner: Any, first: Cursor[Any, Any], last: Cursor[Any, Any]) -> EntryIterator[Any]:
    return make_iterator(owner, first, last, Projection.VALUE)


def make_item_iterator(owner: Any, first: Cursor[Any, Any], last: Cursor[Any, Any]) -> EntryIterator[Any]:
    return make_iterator(owner, first, last, Projection.ITEM)
