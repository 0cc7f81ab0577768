from typing import TYPE_CHECKING, Any, ClassVar

from mapbind.iterator import EntryIterator, Projection, make_iterator

if TYPE_CHECKING:
    from mapbind.adapter import MapAdapter


class MapView[K, V]:
    """Live projection of a bound map's entries.

    A view references the adapter that owns the container, not a copy of the
    entries, so mutations through any path are visible immediately. Holding
    the view keeps the adapter (and its container) alive.
    """

    projection: ClassVar[Projection]

    def __init__(self, owner: 'MapAdapter[K, V]') -> None:
        self._owner = owner

    @property
    def owner(self) -> 'MapAdapter[K, V]':
        return self._owner

    def __len__(self) -> int:
        return self._owner.container.size()

    def __iter__(self) -> EntryIterator[Any]:
        container = self._owner.container
        return make_iterator(self, container.begin(), container.end(), self.projection)

    def __repr__(self) -> str:
        return f'{type(self).__name__}({list(self)!r})'


class KeyView[K, V](MapView[K, V]):
    projection = Projection.KEY

    def __contains__(self, key: object) -> bool:
        return key in self._owner


class ValueView[K, V](MapView[K, V]):
    projection = Projection.VALUE


class ItemView[K, V](MapView[K, V]):
    projection = Projection.ITEM
