"""Customization hooks injected through ``ResolverConfig``.

Two extension points exist. A :class:`TypeSubstitution` chooses the class
members are discovered on, and a :class:`MemberTransform` receives the fully
resolved default member list and returns the final one. Both default to the
identity. Exceptions raised by a hook reach the caller of ``resolve``
unchanged and nothing is cached for the requested class.
"""

from __future__ import annotations

import re
from collections.abc import Callable, Mapping, Sequence
from typing import Protocol

from contract_resolution.contract import ResolvedMember


class TypeSubstitution(Protocol):
    """Choose the class a contract is built from."""

    def __call__(self, requested_type: type, /) -> type:
        """Return the class to discover members on."""
        ...


class MemberTransform(Protocol):
    """Filter, reorder or rename the resolved default members."""

    def __call__(
        self,
        resolution_type: type,
        members: Sequence[ResolvedMember],
        /,
    ) -> Sequence[ResolvedMember]:
        """Return the final member list."""
        ...


def identity_type(requested_type: type, /) -> type:
    """Return ``requested_type`` unchanged."""
    return requested_type


def identity_members(
    resolution_type: type,
    members: Sequence[ResolvedMember],
    /,
) -> Sequence[ResolvedMember]:
    """Return ``members`` unchanged."""
    _ = resolution_type
    return members


def is_assignable(value: type, target: type) -> bool:
    """Return whether ``value`` can stand in for ``target``.

    Nominal inheritance always counts. Virtual subclasses registered on an
    ABC count too; structural protocol matching does not.

    Returns:
    -------
    bool
        ``True`` when ``value`` derives from ``target``.
    """
    if target in getattr(value, "__mro__", ()):
        return True
    if getattr(target, "_is_protocol", False):
        return False
    try:
        return issubclass(value, target)
    except TypeError:
        return False


def substitute_types(
    mapping: Mapping[type, type],
    *,
    assignable: bool = False,
) -> TypeSubstitution:
    """Build a substitution from a class mapping.

    With ``assignable`` set, a requested class that is not a key is matched
    against the keys in mapping order using :func:`is_assignable`.

    Returns:
    -------
    TypeSubstitution
        Substitution hook.
    """
    table = dict(mapping)

    def substitute(requested_type: type, /) -> type:
        target = table.get(requested_type)
        if target is not None:
            return target
        if assignable:
            for source, candidate in table.items():
                if is_assignable(requested_type, source):
                    return candidate
        return requested_type

    return substitute


def keep_members(predicate: Callable[[ResolvedMember], bool]) -> MemberTransform:
    """Build a transform keeping the members accepted by ``predicate``.

    Returns:
    -------
    MemberTransform
        Filtering transform.
    """

    def transform(
        resolution_type: type,
        members: Sequence[ResolvedMember],
        /,
    ) -> Sequence[ResolvedMember]:
        _ = resolution_type
        return [member for member in members if predicate(member)]

    return transform


def name_prefix_filter(prefix: str) -> MemberTransform:
    """Build a transform keeping members whose public name starts with ``prefix``.

    Returns:
    -------
    MemberTransform
        Filtering transform.
    """
    return keep_members(lambda member: member.public_name.startswith(prefix))


def name_pattern_filter(pattern: str | re.Pattern[str]) -> MemberTransform:
    """Build a transform keeping members whose public name matches ``pattern``.

    Returns:
    -------
    MemberTransform
        Filtering transform.
    """
    compiled = re.compile(pattern) if isinstance(pattern, str) else pattern
    return keep_members(lambda member: compiled.search(member.public_name) is not None)


def rename_members(names: Mapping[str, str]) -> MemberTransform:
    """Build a transform publishing members under new names.

    Returns:
    -------
    MemberTransform
        Renaming transform; members missing from ``names`` keep their name.
    """
    table = dict(names)

    def transform(
        resolution_type: type,
        members: Sequence[ResolvedMember],
        /,
    ) -> Sequence[ResolvedMember]:
        _ = resolution_type
        return [
            member.renamed(table[member.public_name]) if member.public_name in table else member
            for member in members
        ]

    return transform


def compose_transforms(*transforms: MemberTransform) -> MemberTransform:
    """Chain transforms left to right.

    Returns:
    -------
    MemberTransform
        Transform applying each of ``transforms`` in turn.
    """

    def transform(
        resolution_type: type,
        members: Sequence[ResolvedMember],
        /,
    ) -> Sequence[ResolvedMember]:
        current = members
        for step in transforms:
            current = step(resolution_type, current)
        return current

    return transform


__all__ = [
    "MemberTransform",
    "TypeSubstitution",
    "compose_transforms",
    "identity_members",
    "identity_type",
    "is_assignable",
    "keep_members",
    "name_pattern_filter",
    "name_prefix_filter",
    "rename_members",
    "substitute_types",
]
