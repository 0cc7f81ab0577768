import logging
import types
from typing import Any, MutableMapping

from mapbind.adapter import MapAdapter, ReinsertingMapAdapter, ReplacingMapAdapter
from mapbind.containers import Container
from mapbind.errors import BindingError
from mapbind.policy import MutationPolicy, select_policy
from mapbind.registry import BoundMap, lookup, register

logger = logging.getLogger(__name__)

_ADAPTER_BASES: dict[MutationPolicy, type[MapAdapter[Any, Any]]] = {
    MutationPolicy.READ_ONLY: MapAdapter,
    MutationPolicy.REPLACE: ReplacingMapAdapter,
    MutationPolicy.REINSERT: ReinsertingMapAdapter,
}


def bind_map(
    name: str,
    container_type: type[Container[Any, Any]],
    *,
    key_type: type[Any] | None = None,
    value_type: type[Any] | None = None,
    policy: MutationPolicy | str | None = None,
    scope: Any = None,
    allow_override: bool = False,
    doc: str | None = None,
) -> type[MapAdapter[Any, Any]]:
    """Create a dict-like adapter class for a container type.

    The mutation policy is decided here, once per bound type. When it comes
    out as ``READ_ONLY`` the returned class has no ``__setitem__`` at all.

    Parameters
    ----------
    name : str
        Class name of the adapter, also its registry key.
    container_type : type[Container]
        The container class to adapt.
    key_type : type | None, optional
        Accepted key class, by default None (any hashable key)
    value_type : type | None, optional
        Mapped value class. Its ``not_assignable``/``not_copyable`` markers
        feed the policy decision, and assigned values are type checked
        against it, by default None
    policy : MutationPolicy | str | None, optional
        Explicit mutation policy; detected from the value and container
        types when omitted, by default None
    scope : Any, optional
        Module, class or dict to attach the adapter class to under ``name``,
        by default None
    allow_override : bool
        When false, raises a BindingError when ``name`` is already bound,
        by default False
    doc : str | None, optional
        Class docstring, by default None

    Returns
    -------
    type[MapAdapter]
        The new adapter class.

    Raises
    ------
    BindingError
        When ``name`` is already bound and ``allow_override`` is false, when
        ``container_type`` is not a ``Container`` subclass, or when an
        explicit ``policy`` is not supported by the container.
    """
    if not (isinstance(container_type, type) and issubclass(container_type, Container)):
        raise BindingError(f'Cannot bind "{name}": {container_type!r} is not a Container subclass.')

    if not allow_override and lookup(name) is not None:
        raise BindingError(f'Map type "{name}" already bound.')

    selected = select_policy(container_type, value_type, policy)

    namespace: dict[str, Any] = {
        '__doc__': doc or f'Dict-like binding of {container_type.__name__}.',
        '__module__': _scope_module_name(scope),
        'container_type': container_type,
        'key_type': key_type,
        'value_type': value_type,
        'policy': selected,
    }
    adapter_type = types.new_class(
        name, (_ADAPTER_BASES[selected],), exec_body=lambda ns: ns.update(namespace)
    )

    # A scope that rejects the class must not leave a registry entry.
    if scope is not None:
        _attach(scope, name, adapter_type)

    register(
        BoundMap(
            name=name,
            adapter_type=adapter_type,
            container_type=container_type,
            key_type=key_type,
            value_type=value_type,
            policy=selected,
        ),
        allow_override=allow_override,
    )

    logger.info('Bound map %s over %s (policy=%s)', name, container_type.__name__, selected.value)
    return adapter_type


def _scope_module_name(scope: Any) -> str:
    if isinstance(scope, types.ModuleType):
        return scope.__name__
    if isinstance(scope, type):
        return scope.__module__
    return __name__


def _attach(scope: Any, name: str, adapter_type: type[Any]) -> None:
    if isinstance(scope, MutableMapping):
        scope[name] = adapter_type
        return

    if isinstance(scope, type):
        adapter_type.__qualname__ = f'{scope.__qualname__}.{name}'
    setattr(scope, name, adapter_type)
