"""Resolved members and the immutable contract built from them."""

from __future__ import annotations

import logging
from collections.abc import Iterable

import msgspec

from contract_resolution.errors import ContractBuildError, MemberNameCollisionError
from contract_resolution.members import MemberDescriptor
from contract_resolution.serde import StructBaseStrict, type_label

logger = logging.getLogger(__name__)


class ResolvedMember(StructBaseStrict, frozen=True):
    """Member after naming and inclusion decisions."""

    public_name: str
    member: MemberDescriptor
    required: bool = False

    def renamed(self, public_name: str) -> ResolvedMember:
        """Return a copy published under ``public_name``.

        Returns:
        -------
        ResolvedMember
            Copy with the new public name.
        """
        return msgspec.structs.replace(self, public_name=public_name)


class Contract(StructBaseStrict, frozen=True):
    """Ordered description of the members that take part in serialization.

    ``underlying_type`` is the class a contract was requested for and
    ``resolution_type`` the class members were discovered on; they differ when
    a type substitution applied.
    """

    underlying_type: type
    resolution_type: type
    members: tuple[ResolvedMember, ...] = ()

    @property
    def public_names(self) -> tuple[str, ...]:
        """Public member names in contract order."""
        return tuple(item.public_name for item in self.members)

    @property
    def is_empty(self) -> bool:
        """Whether the contract has no members."""
        return not self.members

    def member(self, public_name: str) -> ResolvedMember | None:
        """Return the member published under ``public_name``.

        Returns:
        -------
        ResolvedMember | None
            Matching member, or ``None`` when missing.
        """
        for item in self.members:
            if item.public_name == public_name:
                return item
        return None


def build_contract(
    resolution_type: type,
    members: Iterable[object],
    *,
    underlying_type: type | None = None,
) -> Contract:
    """Freeze resolved members into a contract.

    Parameters
    ----------
    resolution_type
        Class the members were discovered on.
    members
        Final member list, usually the output of a member transform.
    underlying_type
        Class the contract was requested for. Defaults to ``resolution_type``.

    Returns:
    -------
    Contract
        Immutable contract.

    Raises:
    ------
    ContractBuildError
        When an entry is not a ``ResolvedMember``.
    MemberNameCollisionError
        When two members share a public name.
    """
    target = resolution_type if underlying_type is None else underlying_type
    frozen: list[ResolvedMember] = []
    seen: set[str] = set()
    for item in members:
        if not isinstance(item, ResolvedMember):
            msg = (
                f"Contract for {type_label(target)} received {type(item).__name__}; "
                "expected ResolvedMember."
            )
            raise ContractBuildError(msg)
        if item.public_name in seen:
            raise MemberNameCollisionError(target, item.public_name)
        seen.add(item.public_name)
        frozen.append(item)
    logger.debug(
        "Built contract for %s via %s with %d members",
        type_label(target),
        type_label(resolution_type),
        len(frozen),
    )
    return Contract(
        underlying_type=target,
        resolution_type=resolution_type,
        members=tuple(frozen),
    )


__all__ = ["Contract", "ResolvedMember", "build_contract"]
