import logging
from typing import Any, ClassVar, Iterator, Mapping, MutableMapping

from mapbind.containers import Container, Cursor
from mapbind.errors import KeyNotFoundError
from mapbind.iterator import make_key_iterator
from mapbind.policy import MutationPolicy
from mapbind.views import ItemView, KeyView, ValueView

logger = logging.getLogger(__name__)


class MapAdapter[K, V](Mapping[K, V]):
    """
    Dict-like front end for a :class:`~mapbind.containers.Container`.

    Concrete adapter classes are produced by :func:`mapbind.bind_map`, which
    fills in the class attributes below. Every operation goes straight to the
    wrapped container; nothing is copied or cached.

    Parameters
    ----------
    container : Container[K, V] | None, optional
        The container to expose. When omitted, an empty instance of
        ``container_type`` is created.

    Attributes
    ----------
    container_type : type[Container]
        The container class this adapter type was bound to.
    key_type : type | None
        Accepted key class; ``None`` accepts any hashable key.
    value_type : type | None
        Accepted value class for assignment; ``None`` accepts anything.
    policy : MutationPolicy
        How assignment is implemented, decided when the type was bound.

    Notes
    -----
    - ``key in adapter`` never raises: keys of the wrong type, unhashable
      keys and keys the container cannot compare are simply not present.
    - Reading or deleting a missing key raises ``KeyNotFoundError``, a
      ``KeyError`` subclass. Reading or deleting with a key of the wrong
      type raises ``TypeError``.
    - ``keys()``, ``values()`` and ``items()`` return new live views on every
      call. Views and iterators keep the adapter alive.

    Examples
    --------
    >>> Inventory = bind_map('Inventory', HashContainer, key_type=str)
    >>> inv = Inventory()
    >>> inv['apples'] = 3
    >>> inv['apples']
    3
    >>> list(inv.items())
    [('apples', 3)]
    """

    container_type: ClassVar[type[Container[Any, Any]]]
    key_type: ClassVar[type[Any] | None] = None
    value_type: ClassVar[type[Any] | None] = None
    policy: ClassVar[MutationPolicy] = MutationPolicy.READ_ONLY

    _container: Container[K, V]

    def __init__(self, container: Container[K, V] | None = None) -> None:
        container_type = getattr(type(self), 'container_type', None)
        if container_type is None:
            raise TypeError(f'{type(self).__name__} is not bound to a container type; use bind_map()')

        if container is None:
            container = container_type()
        elif not isinstance(container, container_type):
            raise TypeError(
                f'{type(self).__name__} wraps {container_type.__name__}, '
                f'got {type(container).__name__}'
            )
        self._container = container

    @property
    def container(self) -> Container[K, V]:
        return self._container

    def __len__(self) -> int:
        return self._container.size()

    def __bool__(self) -> bool:
        return not self._container.empty()

    def __contains__(self, key: object) -> bool:
        try:
            self._check_key(key)
            cursor = self._container.find(key)  # type: ignore[arg-type]
        except Exception:
            # Keys that fail to hash or compare are never stored.
            return False
        return cursor != self._container.end()

    def __getitem__(self, key: K) -> V:
        return self._find(key).value

    def __delitem__(self, key: K) -> None:
        self._container.erase(self._find(key))

    def __iter__(self) -> Iterator[K]:
        return make_key_iterator(self, self._container.begin(), self._container.end())

    def get(self, key: object, default: Any = None) -> Any:
        if key not in self:
            return default
        return self[key]  # type: ignore[index]

    def keys(self) -> KeyView[K, V]:  # type: ignore[override]
        return KeyView(self)

    def values(self) -> ValueView[K, V]:  # type: ignore[override]
        return ValueView(self)

    def items(self) -> ItemView[K, V]:  # type: ignore[override]
        return ItemView(self)

    def __repr__(self) -> str:
        return f'{type(self).__name__}({{' + ', '.join(f'{k!r}: {v!r}' for k, v in self.items()) + '})'

    def _find(self, key: K) -> Cursor[K, V]:
        self._check_key(key)
        cursor = self._container.find(key)
        if cursor == self._container.end():
            raise KeyNotFoundError(key)
        return cursor

    def _check_key(self, key: object) -> None:
        key_type = type(self).key_type
        if key_type is not None and not isinstance(key, key_type):
            raise TypeError(
                f'{type(self).__name__} keys must be {key_type.__name__}, not {type(key).__name__}'
            )
        hash(key)

    def _check_value(self, value: object) -> None:
        value_type = type(self).value_type
        if value_type is not None and not isinstance(value, value_type):
            raise TypeError(
                f'{type(self).__name__} values must be {value_type.__name__}, not {type(value).__name__}'
            )


class MutableMapAdapter[K, V](MapAdapter[K, V], MutableMapping[K, V]):
    """Adapter base for map types that support assignment.

    Inherits ``pop``, ``popitem``, ``clear``, ``update`` and ``setdefault``
    from ``MutableMapping``, all expressed through the primitive operations.
    """


class ReplacingMapAdapter[K, V](MutableMapAdapter[K, V]):
    policy = MutationPolicy.REPLACE

    def __setitem__(self, key: K, value: V) -> None:
        self._check_key(key)
        self._check_value(value)
        self._container.assign(key, value)  # type: ignore[attr-defined]


class ReinsertingMapAdapter[K, V](MutableMapAdapter[K, V]):
    policy = MutationPolicy.REINSERT

    def __setitem__(self, key: K, value: V) -> None:
        self._check_key(key)
        self._check_value(value)
        container: Any = self._container

        cursor, inserted = container.emplace(key, value)
        if not inserted:
            logger.debug('Key %r already present in %s, erasing and re-inserting', key, type(self).__name__)
            container.erase(cursor)
            container.emplace(key, value)
