import pytest

from mapbind import HashContainer, KeyNotFoundError, SortedContainer, bind_map


@pytest.fixture(params=[HashContainer, SortedContainer])
def StrIntMap(request):
    return bind_map('StrIntMap', request.param, key_type=str, value_type=int)


def test_empty_map_then_set_and_delete(StrIntMap):
    c = StrIntMap()
    assert len(c) == 0
    assert bool(c) is False

    c['a'] = 1
    assert len(c) == 1
    assert c['a'] == 1
    assert 'a' in c

    c['b'] = 2
    assert len(c) == 2
    assert list(c.keys()) == ['a', 'b']

    del c['a']
    assert len(c) == 1
    assert 'a' not in c
    with pytest.raises(KeyNotFoundError):
        _ = c['a']


def test_missing_key_raises_key_not_found(StrIntMap):
    c = StrIntMap()
    c['x'] = 1

    assert 'nope' not in c
    with pytest.raises(KeyNotFoundError):
        _ = c['nope']
    with pytest.raises(KeyNotFoundError):
        del c['nope']

    # Still a KeyError for callers that only know dict semantics.
    with pytest.raises(KeyError):
        _ = c['nope']


def test_contains_never_raises_for_incompatible_keys(StrIntMap):
    c = StrIntMap()
    c['1'] = 1

    assert 1 not in c
    assert None not in c
    assert ['1'] not in c
    assert {'1': 1} not in c
    assert 1 not in c.keys()
    assert ['1'] not in c.keys()


class Explosive:
    def __hash__(self) -> int:
        raise ValueError('cannot hash')


@pytest.mark.parametrize('container_type', [HashContainer, SortedContainer])
def test_contains_is_false_when_key_hashing_fails_with_any_error(container_type):
    Untyped = bind_map('Untyped', container_type)
    c = Untyped()
    c['a'] = 1

    assert Explosive() not in c
    assert Explosive() not in c.keys()
    assert c.get(Explosive(), 'fallback') == 'fallback'


def test_contains_on_untyped_sorted_map_with_incomparable_key():
    Untyped = bind_map('Untyped', SortedContainer)
    c = Untyped()
    c[1] = 'one'
    c[2] = 'two'

    assert 'a' not in c
    assert [1] not in c
    assert 1 in c


def test_get_and_delete_with_wrong_key_type_raise_type_error(StrIntMap):
    c = StrIntMap()
    with pytest.raises(TypeError):
        _ = c[1]
    with pytest.raises(TypeError):
        del c[1]
    with pytest.raises(TypeError):
        c[1] = 1


def test_set_with_wrong_value_type_raises_type_error(StrIntMap):
    c = StrIntMap()
    with pytest.raises(TypeError):
        c['a'] = 'not an int'
    assert len(c) == 0


def test_set_changes_length_by_zero_or_one(StrIntMap):
    c = StrIntMap()
    c['a'] = 1
    before = len(c)

    c['a'] = 5
    assert len(c) == before
    assert c['a'] == 5

    c['b'] = 6
    assert len(c) == before + 1
    assert c['b'] == 6


def test_get_returns_stored_object_not_a_copy():
    Lists = bind_map('Lists', HashContainer, key_type=str, value_type=list)
    c = Lists()
    c['xs'] = []

    c['xs'].append(1)
    c['xs'].append(2)

    assert c['xs'] == [1, 2]
    assert c['xs'] is c.container.find('xs').value


def test_wraps_existing_container():
    container = HashContainer({'a': 1, 'b': 2})
    Wrapped = bind_map('Wrapped', HashContainer)
    c = Wrapped(container)

    assert c.container is container
    assert dict(c.items()) == {'a': 1, 'b': 2}

    c['c'] = 3
    assert container.size() == 3


def test_rejects_container_of_another_type():
    Wrapped = bind_map('Wrapped', HashContainer)
    with pytest.raises(TypeError):
        Wrapped(SortedContainer())


def test_unbound_adapter_cannot_be_instantiated():
    from mapbind import MapAdapter

    with pytest.raises(TypeError):
        MapAdapter()


def test_mapping_helpers(StrIntMap):
    c = StrIntMap()
    c.update({'a': 1, 'b': 2})
    assert c.get('a') == 1
    assert c.get('z') is None
    assert c.get('z', 0) == 0
    assert c.get(3, 'fallback') == 'fallback'

    assert c.setdefault('c', 3) == 3
    assert c.setdefault('a', 10) == 1

    assert c.pop('b') == 2
    assert 'b' not in c
    assert c.pop('b', None) is None

    c.clear()
    assert len(c) == 0
    assert not c


def test_equality_with_dict(StrIntMap):
    c = StrIntMap()
    c['a'] = 1
    c['b'] = 2
    assert c == {'a': 1, 'b': 2}
    assert c != {'a': 1}


def test_repr(StrIntMap):
    c = StrIntMap()
    c['a'] = 1
    assert repr(c) == "StrIntMap({'a': 1})"


def test_sorted_container_traverses_in_key_order():
    Sorted = bind_map('Sorted', SortedContainer, key_type=int)
    c = Sorted()
    for key in (5, 1, 3):
        c[key] = str(key)

    assert list(c) == [1, 3, 5]
    assert list(c.values()) == ['1', '3', '5']

    del c[3]
    assert list(c.items()) == [(1, '1'), (5, '5')]


def test_iteration_yields_keys_each_call_independently(StrIntMap):
    c = StrIntMap()
    c['a'] = 1
    c['b'] = 2

    first = iter(c)
    second = iter(c)
    assert next(first) == 'a'
    assert list(second) == ['a', 'b']
    assert list(first) == ['b']
