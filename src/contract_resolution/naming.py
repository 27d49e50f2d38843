"""Public naming and required-ness of members."""

from __future__ import annotations

from collections.abc import Iterable

from contract_resolution.contract import ResolvedMember
from contract_resolution.members import MemberDescriptor


def public_name(descriptor: MemberDescriptor) -> str:
    """Return the explicit override name, else the attribute name verbatim."""
    return descriptor.override_name or descriptor.name


def resolve_member(descriptor: MemberDescriptor) -> ResolvedMember:
    """Resolve the public name and required flag of one member.

    Returns:
    -------
    ResolvedMember
        Member as it appears in a contract.
    """
    return ResolvedMember(
        public_name=public_name(descriptor),
        member=descriptor,
        required=bool(descriptor.required),
    )


def resolve_members(descriptors: Iterable[MemberDescriptor]) -> tuple[ResolvedMember, ...]:
    """Resolve every descriptor, preserving order.

    Returns:
    -------
    tuple[ResolvedMember, ...]
        Resolved members.
    """
    return tuple(resolve_member(descriptor) for descriptor in descriptors)


__all__ = ["public_name", "resolve_member", "resolve_members"]
