"""Tests for member eligibility rules."""

from __future__ import annotations

from contract_resolution.config import ResolverConfig
from contract_resolution.filtering import filter_members
from contract_resolution.inspector import discover_members
from contract_resolution.members import MemberDescriptor, MemberKind, MemberSearch
from tests.test_helpers.models import Clashing, NumberFormat, RenamedTotal, StructTest

_PRIVATE_SEARCH = MemberSearch.INSTANCE | MemberSearch.PUBLIC | MemberSearch.NON_PUBLIC


def _filtered(type_: type, config: ResolverConfig) -> list[str]:
    descriptors = discover_members(type_, config.search)
    return [item.name for item in filter_members(descriptors, config)]


def test_static_members_dropped_for_every_scope() -> None:
    """Static members never survive filtering, even when searched for."""
    config = ResolverConfig(search=MemberSearch.ALL)
    assert _filtered(NumberFormat, config) == ["DecimalSeparator", "_group_size", "GroupSeparator"]


def test_synthesized_members_dropped_by_default() -> None:
    """Backing members are removed unless explicitly included."""
    config = ResolverConfig(search=_PRIVATE_SEARCH)
    assert _filtered(StructTest, config) == [
        "StringField",
        "IntField",
        "StringProperty",
        "IntProperty",
    ]


def test_synthesized_members_follow_their_public_member() -> None:
    """Included backing members come right after the member they back."""
    config = ResolverConfig(search=_PRIVATE_SEARCH, include_synthesized=True)
    assert _filtered(StructTest, config) == [
        "StringField",
        "IntField",
        "StringProperty",
        "_StringProperty",
        "IntProperty",
        "_IntProperty",
    ]


def test_authored_members_sharing_a_name_are_all_kept() -> None:
    """Authored members publishing one name pass through for the build to reject."""
    assert _filtered(Clashing, ResolverConfig()) == ["first", "second"]


def test_renamed_owner_keeps_backing_member_after_it() -> None:
    """A backing member follows its property even when the property is renamed."""
    config = ResolverConfig(search=_PRIVATE_SEARCH, include_synthesized=True)
    assert _filtered(RenamedTotal, config) == ["total", "_total"]


def test_backing_member_follows_owner_declared_later() -> None:
    """Position comes from the owner, not from where the backing member was found."""
    backing = MemberDescriptor(
        name="_total",
        kind=MemberKind.FIELD,
        declaring_type=object,
        logical_name="total",
        is_public=False,
        is_synthesized=True,
    )
    count = MemberDescriptor(name="count", kind=MemberKind.FIELD, declaring_type=object)
    owner = MemberDescriptor(
        name="total",
        kind=MemberKind.PROPERTY,
        declaring_type=object,
        override_name="Total",
    )
    config = ResolverConfig(include_synthesized=True)
    assert filter_members([backing, count, owner], config) == (count, owner, backing)


def test_orphan_synthesized_member_kept_when_included() -> None:
    """A backing member whose public member is out of scope stays when included."""
    orphan = MemberDescriptor(
        name="_size",
        kind=MemberKind.FIELD,
        declaring_type=object,
        logical_name="size",
        is_public=False,
        is_synthesized=True,
    )
    assert filter_members([orphan], ResolverConfig(include_synthesized=True)) == (orphan,)
    assert filter_members([orphan], ResolverConfig()) == ()


def test_empty_input_yields_empty_output() -> None:
    """No descriptors means no members, not an error."""
    assert filter_members([], ResolverConfig()) == ()
