import json
from pathlib import Path

import pytest

from mapbind import (
    BindingConfigError,
    MutationPolicy,
    SortedContainer,
    bind_from_config,
    bind_from_file,
    bind_map,
    lookup,
)
from mapbind.config import describe_bindings, load_bindings_file, resolve_type, save_bindings_file

YAML_CONFIG = '''
maps:
  Inventory:
    container: hash
    key_type: str
    value_type: int
  Ranking:
    container: sorted
    key_type: int
    policy: reinsert
'''


def test_load_yaml_and_bind(tmp_path: Path):
    path = tmp_path / 'maps.yaml'
    path.write_text(YAML_CONFIG, encoding='utf-8')

    bound = bind_from_file(path)

    assert list(bound) == ['Inventory', 'Ranking']
    inventory = bound['Inventory']()
    inventory['apples'] = 3
    assert inventory['apples'] == 3

    assert bound['Ranking'].policy is MutationPolicy.REINSERT
    assert bound['Ranking'].container_type is SortedContainer


def test_load_json_and_toml(tmp_path: Path):
    json_path = tmp_path / 'maps.json'
    json_path.write_text(json.dumps({'maps': {'A': {'container': 'hash'}}}), encoding='utf-8')
    assert load_bindings_file(json_path)['maps']['A']['container'] == 'hash'

    toml_path = tmp_path / 'maps.toml'
    toml_path.write_text('[maps.B]\ncontainer = "sorted"\nkey_type = "int"\n', encoding='utf-8')
    assert load_bindings_file(toml_path)['maps']['B'] == {'container': 'sorted', 'key_type': 'int'}


def test_load_errors(tmp_path: Path):
    with pytest.raises(FileNotFoundError):
        load_bindings_file(tmp_path / 'missing.yaml')

    bad_suffix = tmp_path / 'maps.ini'
    bad_suffix.write_text('', encoding='utf-8')
    with pytest.raises(BindingConfigError):
        load_bindings_file(bad_suffix)

    not_mapping = tmp_path / 'maps.json'
    not_mapping.write_text('[1, 2]', encoding='utf-8')
    with pytest.raises(BindingConfigError):
        load_bindings_file(not_mapping)

    no_maps = tmp_path / 'other.json'
    no_maps.write_text('{"tables": {}}', encoding='utf-8')
    with pytest.raises(BindingConfigError):
        load_bindings_file(no_maps)


def test_validation_collects_every_error_and_binds_nothing():
    config = {
        'maps': {
            'Good': {'container': 'hash'},
            'NoContainer': {'key_type': 'str'},
            'BadType': {'container': 'hash', 'key_type': 'nosuchtype'},
            'BadPolicy': {'container': 'hash', 'policy': 'sometimes'},
            'NotAContainer': {'container': 'collections.OrderedDict'},
        }
    }

    with pytest.raises(BindingConfigError) as info:
        bind_from_config(config)

    message = str(info.value)
    for name in ('NoContainer', 'BadType', 'BadPolicy', 'NotAContainer'):
        assert f'{name}:' in message
    assert 'Good:' not in message
    assert lookup('Good') is None


def test_missing_maps_table():
    with pytest.raises(BindingConfigError):
        bind_from_config({'something': 'else'})


def test_already_bound_name_is_a_validation_error():
    bind_map('Taken', SortedContainer)
    with pytest.raises(BindingConfigError):
        bind_from_config({'maps': {'Taken': {'container': 'hash'}}})

    bound = bind_from_config({'maps': {'Taken': {'container': 'hash'}}}, allow_override=True)
    assert lookup('Taken').adapter_type is bound['Taken']  # type: ignore[union-attr]


def test_resolve_type():
    assert resolve_type('int') is int
    assert resolve_type('mapbind.containers.SortedContainer') is SortedContainer
    with pytest.raises(LookupError):
        resolve_type('len')
    with pytest.raises(LookupError):
        resolve_type('no_such_module.Thing')


@pytest.mark.parametrize('suffix', ['.yaml', '.json', '.toml'])
def test_describe_and_save_can_be_reloaded(tmp_path: Path, suffix: str):
    bind_map('Inventory', SortedContainer, key_type=str, value_type=int)
    bind_map('Loose', SortedContainer, policy='read_only')
    described = describe_bindings()

    assert described == {
        'maps': {
            'Inventory': {'container': 'sorted', 'key_type': 'str', 'value_type': 'int', 'policy': 'replace'},
            'Loose': {'container': 'sorted', 'policy': 'read_only'},
        }
    }

    path = tmp_path / 'nested' / f'maps{suffix}'
    save_bindings_file(path)
    assert load_bindings_file(path) == described
