import builtins
import importlib
import json
import logging
import tomllib
from os import PathLike
from pathlib import Path
from typing import Any, Callable, Mapping, TextIO, cast

from mapbind.adapter import MapAdapter
from mapbind.binder import bind_map
from mapbind.containers import Container, HashContainer, SortedContainer
from mapbind.errors import BindingConfigError, BindingError
from mapbind.policy import select_policy
from mapbind.registry import all_registered, lookup

try:
    import toml  # type: ignore
except ImportError:
    toml = None  # type: ignore

try:
    import yaml  # type: ignore
except ImportError:
    yaml = None  # type: ignore

logger = logging.getLogger(__name__)

CONTAINERS: dict[str, type[Container[Any, Any]]] = {
    'hash': HashContainer,
    'sorted': SortedContainer,
}

AUTO_POLICY = 'auto'


def _yaml_loads(text: str) -> Any:
    if yaml is None:
        raise BindingConfigError('PyYAML is required to read YAML binding files')
    return yaml.safe_load(text)


def _yaml_dump(config: dict[str, Any], handle: TextIO) -> None:
    if yaml is None:
        raise BindingConfigError('PyYAML is required to write YAML binding files')
    yaml.safe_dump(config, handle, sort_keys=False)


def _json_dump(config: dict[str, Any], handle: TextIO) -> None:
    json.dump(config, handle, indent=4, ensure_ascii=False)


def _toml_dump(config: dict[str, Any], handle: TextIO) -> None:
    if toml is None:
        raise BindingConfigError('The toml package is required to write TOML binding files')
    toml.dump(config, handle)


_READERS: dict[str, Callable[[str], Any]] = {
    '.yaml': _yaml_loads,
    '.yml': _yaml_loads,
    '.json': json.loads,
    '.toml': tomllib.loads,
}

_WRITERS: dict[str, Callable[[dict[str, Any], TextIO], None]] = {
    '.yaml': _yaml_dump,
    '.yml': _yaml_dump,
    '.json': _json_dump,
    '.toml': _toml_dump,
}


def _codec[T](path: Path, table: dict[str, T]) -> T:
    suffix = path.suffix.lower()
    if suffix not in table:
        raise BindingConfigError(
            f'Unsupported binding file type "{suffix}" for {path}; use one of: {", ".join(table)}'
        )
    return table[suffix]


def load_bindings_file(path: str | PathLike[str] | Path) -> Mapping[str, Any]:
    """Read a binding file and check it declares a ``maps`` table.

    Entries themselves are validated by :func:`bind_from_config`.

    Raises
    ------
    FileNotFoundError
        When ``path`` does not exist.
    BindingConfigError
        When the suffix is unsupported, the document is not a mapping, or it
        has no ``maps`` table.
    """
    path = Path(path)
    if not path.exists():
        raise FileNotFoundError(f'Binding file not found: {path}')

    config = _codec(path, _READERS)(path.read_text(encoding='utf-8'))
    if not isinstance(config, Mapping):
        raise BindingConfigError(f'{path}: top level must be a mapping')
    _maps_table(cast(Mapping[str, Any], config))

    logger.debug('Loaded binding file %s', path)
    return cast(Mapping[str, Any], config)


def save_bindings_file(path: str | PathLike[str] | Path, config: Mapping[str, Any] | None = None) -> None:
    """Write ``config`` (by default the current registry) as a binding file."""
    path = Path(path)
    writer = _codec(path, _WRITERS)
    if config is None:
        config = describe_bindings()

    path.parent.mkdir(parents=True, exist_ok=True)
    with open(path, 'w', encoding='utf-8') as handle:
        writer(dict(config), handle)


def bind_from_file(
    path: str | PathLike[str] | Path, scope: Any = None, *, allow_override: bool = False
) -> dict[str, type[MapAdapter[Any, Any]]]:
    return bind_from_config(load_bindings_file(path), scope, allow_override=allow_override)


def resolve_type(name: str) -> type[Any]:
    """Resolve a builtin type name (``'str'``) or a dotted path (``'pkg.mod.Cls'``)."""
    if '.' not in name:
        candidate = getattr(builtins, name, None)
        if isinstance(candidate, type):
            return candidate
        raise LookupError(f'Unknown type name: {name}')

    module_name, _, attr = name.rpartition('.')
    try:
        module = importlib.import_module(module_name)
    except ImportError as ex:
        raise LookupError(f'Cannot import module for type: {name}') from ex

    candidate = getattr(module, attr, None)
    if not isinstance(candidate, type):
        raise LookupError(f'Not a type: {name}')
    return candidate


def type_name(type_: type[Any]) -> str:
    if getattr(builtins, type_.__name__, None) is type_:
        return type_.__name__
    return f'{type_.__module__}.{type_.__qualname__}'


def bind_from_config(
    config: Mapping[str, Any], scope: Any = None, *, allow_override: bool = False
) -> dict[str, type[MapAdapter[Any, Any]]]:
    """Bind every map declared under the ``maps`` key of a configuration.

    Each entry is validated before anything is bound; when any entry is
    invalid nothing is bound and all problems are reported together.

    Parameters
    ----------
    config:
        Mapping with a ``maps`` table of ``name -> {container, key_type,
        value_type, policy}``. Only ``container`` is required; ``policy``
        defaults to ``auto``.
    scope:
        Passed through to :func:`mapbind.bind_map`.
    allow_override:
        Passed through to :func:`mapbind.bind_map`.

    Returns
    -------
    dict[str, type[MapAdapter]]
        The bound adapter classes by name, in declaration order.

    Raises
    ------
    BindingConfigError
        When the ``maps`` table is missing or any entry fails validation.
    """
    maps = _maps_table(config)

    errors: list[str] = []
    resolved: dict[str, dict[str, Any]] = {}

    for name, entry in maps.items():
        try:
            resolved[name] = _resolve_entry(name, entry, allow_override)
        except (LookupError, TypeError, BindingError) as exc:
            errors.append(f'{name}: {exc}')

    if errors:
        raise BindingConfigError('Binding configuration failed validation:\n' + '\n'.join(errors))

    return {
        name: bind_map(name, scope=scope, allow_override=allow_override, **kwargs)
        for name, kwargs in resolved.items()
    }


def describe_bindings() -> dict[str, Any]:
    """Export the registry in the shape :func:`bind_from_config` accepts."""
    maps: dict[str, Any] = {}
    for entry in all_registered():
        described: dict[str, Any] = {'container': _container_name(entry.container_type)}
        if entry.key_type is not None:
            described['key_type'] = type_name(entry.key_type)
        if entry.value_type is not None:
            described['value_type'] = type_name(entry.value_type)
        described['policy'] = entry.policy.value
        maps[entry.name] = described
    return {'maps': maps}


def _resolve_entry(name: str, entry: Any, allow_override: bool) -> dict[str, Any]:
    if not isinstance(entry, Mapping):
        raise TypeError('entry must be a mapping')
    entry = cast(Mapping[str, Any], entry)

    if not allow_override and lookup(name) is not None:
        raise BindingError(f'Map type "{name}" already bound.')

    container_name = entry.get('container')
    if not isinstance(container_name, str):
        raise LookupError('missing "container"')
    if container_name in CONTAINERS:
        container_type = CONTAINERS[container_name]
    else:
        container_type = resolve_type(container_name)
    if not issubclass(container_type, Container):
        raise TypeError(f'{container_name} is not a Container subclass')

    key_type = _optional_type(entry, 'key_type')
    value_type = _optional_type(entry, 'value_type')

    policy_name = entry.get('policy', AUTO_POLICY)
    policy = None if policy_name == AUTO_POLICY else policy_name
    # Surfaces unknown or unsupported policies before anything is bound.
    select_policy(container_type, value_type, policy)

    return {
        'container_type': container_type,
        'key_type': key_type,
        'value_type': value_type,
        'policy': policy,
    }


def _optional_type(entry: Mapping[str, Any], field: str) -> type[Any] | None:
    value = entry.get(field)
    if value is None:
        return None
    if not isinstance(value, str):
        raise TypeError(f'"{field}" must be a type name')
    return resolve_type(value)


def _container_name(container_type: type[Any]) -> str:
    for name, registered in CONTAINERS.items():
        if registered is container_type:
            return name
    return type_name(container_type)


def _maps_table(config: Mapping[str, Any]) -> Mapping[str, Any]:
    maps = config.get('maps')
    if not isinstance(maps, Mapping):
        raise BindingConfigError('Binding configuration failed validation:\nmissing "maps" table')
    return cast(Mapping[str, Any], maps)
