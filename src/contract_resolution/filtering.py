"""Eligibility rules applied to discovered members."""

from __future__ import annotations

from collections.abc import Iterable
from typing import TYPE_CHECKING

from contract_resolution.members import MemberDescriptor

if TYPE_CHECKING:
    from contract_resolution.config import ResolverConfig


def filter_members(
    descriptors: Iterable[MemberDescriptor],
    config: ResolverConfig,
) -> tuple[MemberDescriptor, ...]:
    """Drop ineligible members and place backing members after their owner.

    Static members are always dropped, whatever the search scope. Synthesized
    members are dropped unless ``config.include_synthesized`` is set, in which
    case each one follows the member it backs, whatever name that member is
    published under. Authored members sharing a public name are all kept so
    the contract build can report the collision.

    Returns:
    -------
    tuple[MemberDescriptor, ...]
        Eligible members; empty when nothing qualifies.
    """
    eligible = [
        descriptor
        for descriptor in descriptors
        if not descriptor.is_static
        and (config.include_synthesized or not descriptor.is_synthesized)
    ]
    owners = {descriptor.name for descriptor in eligible if not descriptor.is_synthesized}
    backing: dict[str, list[MemberDescriptor]] = {}
    for descriptor in eligible:
        owner = _owner_name(descriptor)
        if descriptor.is_synthesized and owner in owners:
            backing.setdefault(owner, []).append(descriptor)
    result: list[MemberDescriptor] = []
    for descriptor in eligible:
        if not descriptor.is_synthesized:
            result.append(descriptor)
            result.extend(backing.pop(descriptor.name, ()))
        elif _owner_name(descriptor) not in owners:
            # Owner out of scope: keep the backing member where it was found.
            result.append(descriptor)
    return tuple(result)


def _owner_name(descriptor: MemberDescriptor) -> str:
    return descriptor.logical_name or descriptor.name


__all__ = ["filter_members"]
