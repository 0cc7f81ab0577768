from dataclasses import dataclass
from typing import Any, List

from mapbind.errors import BindingError
from mapbind.policy import MutationPolicy


@dataclass(frozen=True)
class BoundMap:
    """Metadata for a map type produced by :func:`mapbind.bind_map`.

    The registry stores these entries so configuration export and lookups
    by name work without holding on to the scope the class was attached to.

    Attributes
    ----------
    name:
        The class name given to the adapter.
    adapter_type:
        The generated adapter class.
    container_type:
        The wrapped container class.
    key_type:
        The accepted key class, or ``None`` for any hashable key.
    value_type:
        The accepted value class, or ``None`` for any value.
    policy:
        The mutation policy selected when binding.
    """

    name: str
    adapter_type: type[Any]
    container_type: type[Any]
    key_type: type[Any] | None
    value_type: type[Any] | None
    policy: MutationPolicy


_REGISTRY: List[BoundMap] = []


def register(entry: BoundMap, *, allow_override: bool = False) -> None:
    """Register a ``BoundMap`` entry in the global registry.

    Parameters
    ----------
    entry:
        The ``BoundMap`` to register.
    allow_override:
        When true, an existing entry with the same name is replaced.

    Raises
    ------
    BindingError
        When ``allow_override`` is false and the name is already bound.
    """

    for index, existing in enumerate(_REGISTRY):
        if existing.name == entry.name:
            if not allow_override:
                raise BindingError(f'Map type "{entry.name}" already bound.')
            _REGISTRY[index] = entry
            return

    _REGISTRY.append(entry)


def lookup(name: str) -> BoundMap | None:
    for entry in _REGISTRY:
        if entry.name == name:
            return entry
    return None


def all_registered() -> List[BoundMap]:
    """Return a shallow copy of all registered map bindings, in binding order."""

    return list(_REGISTRY)
