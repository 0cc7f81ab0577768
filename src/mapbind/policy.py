from dataclasses import dataclass
from enum import Enum
from typing import Any

from mapbind.errors import BindingError

ASSIGNABLE_ATTR = '__mapbind_assignable__'
COPYABLE_ATTR = '__mapbind_copyable__'


class MutationPolicy(Enum):
    """How ``map[key] = value`` is carried out for a bound map type."""

    REPLACE = 'replace'
    """Overwrite the slot for the key in place, creating it when absent."""
    REINSERT = 'reinsert'
    """Emplace a fresh entry; when the key exists, erase it and emplace once more."""
    READ_ONLY = 'read_only'
    """No assignment; the adapter does not define ``__setitem__``."""


@dataclass(frozen=True)
class ValueTraits:
    assignable: bool
    copyable: bool


@dataclass(frozen=True)
class ContainerCapabilities:
    assign: bool
    emplace: bool


def not_assignable[T: type](cls: T) -> T:
    """Mark a value type as not replaceable in place.

    Maps holding such values fall back to erase-and-reinsert on assignment.
    """
    setattr(cls, ASSIGNABLE_ATTR, False)
    return cls


def not_copyable[T: type](cls: T) -> T:
    """Mark a value type as not constructible from another instance."""
    setattr(cls, COPYABLE_ATTR, False)
    return cls


def value_traits(value_type: type[Any] | None) -> ValueTraits:
    if value_type is None:
        return ValueTraits(assignable=True, copyable=True)
    return ValueTraits(
        assignable=bool(getattr(value_type, ASSIGNABLE_ATTR, True)),
        copyable=bool(getattr(value_type, COPYABLE_ATTR, True)),
    )


def container_capabilities(container_type: type[Any]) -> ContainerCapabilities:
    return ContainerCapabilities(
        assign=callable(getattr(container_type, 'assign', None)),
        emplace=callable(getattr(container_type, 'emplace', None)),
    )


def select_policy(
    container_type: type[Any],
    value_type: type[Any] | None = None,
    override: MutationPolicy | str | None = None,
) -> MutationPolicy:
    """Decide how assignment works for a container/value type pair.

    Without an override, in-place replacement wins when both the value type
    and the container allow it, then erase-and-reinsert when the value type
    is copyable and the container can emplace, and otherwise the map is
    read-only.

    Parameters
    ----------
    container_type : type
        The container class being bound.
    value_type : type | None, optional
        The mapped value class. ``None`` means any value, which counts as
        both assignable and copyable, by default None
    override : MutationPolicy | str | None, optional
        Explicit policy chosen by the caller, by default None

    Returns
    -------
    MutationPolicy
        The selected policy.

    Raises
    ------
    BindingError
        When ``override`` is not a known policy, or names a policy the
        container has no primitive for.
    """
    capabilities = container_capabilities(container_type)

    if override is not None:
        try:
            policy = MutationPolicy(override)
        except ValueError as ex:
            raise BindingError(f'Unknown mutation policy: {override!r}') from ex

        if policy is MutationPolicy.REPLACE and not capabilities.assign:
            raise BindingError(f'{container_type.__name__} has no assign() for policy "replace".')
        if policy is MutationPolicy.REINSERT and not capabilities.emplace:
            raise BindingError(f'{container_type.__name__} has no emplace() for policy "reinsert".')
        return policy

    traits = value_traits(value_type)
    if traits.assignable and capabilities.assign:
        return MutationPolicy.REPLACE
    if traits.copyable and capabilities.emplace:
        return MutationPolicy.REINSERT
    return MutationPolicy.READ_ONLY
