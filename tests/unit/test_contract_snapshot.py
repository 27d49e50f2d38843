"""Tests for contract snapshots and fingerprints."""

from __future__ import annotations

import msgspec

from contract_resolution.config import ResolverConfig
from contract_resolution.hooks import name_prefix_filter, substitute_types
from contract_resolution.members import MemberSearch
from contract_resolution.resolver import ContractResolver
from contract_resolution.snapshot import (
    SNAPSHOT_VERSION,
    contract_fingerprint,
    contract_json,
    contract_to_builtins,
)
from tests.test_helpers.models import Book, Employee, IPerson, StructTest

_MODELS = "tests.test_helpers.models"
_FINGERPRINT_LENGTH = 64


def test_snapshot_labels_types(resolver: ContractResolver) -> None:
    """Snapshots render classes as dotted labels."""
    payload = contract_to_builtins(resolver.resolve(Book))
    assert payload["version"] == SNAPSHOT_VERSION
    assert payload["underlying_type"] == f"{_MODELS}.Book"
    members = payload["members"]
    assert isinstance(members, list)
    assert members[1] == {
        "public_name": "BookPrice",
        "name": "BookPrice",
        "kind": "field",
        "declaring_type": f"{_MODELS}.Book",
        "value_type": "decimal.Decimal",
        "required": True,
    }


def test_snapshot_records_substitution() -> None:
    """Substituted contracts keep both classes in the snapshot."""
    resolver = ContractResolver(ResolverConfig(substitute_type=substitute_types({Employee: IPerson})))
    payload = contract_to_builtins(resolver.resolve(Employee))
    assert payload["underlying_type"] == f"{_MODELS}.Employee"
    assert payload["resolution_type"] == f"{_MODELS}.IPerson"


def test_snapshot_marks_synthesized_members() -> None:
    """Backing members carry their logical name and visibility."""
    search = MemberSearch.INSTANCE | MemberSearch.PUBLIC | MemberSearch.NON_PUBLIC
    resolver = ContractResolver(ResolverConfig(search=search, include_synthesized=True))
    members = contract_to_builtins(resolver.resolve(StructTest))["members"]
    assert isinstance(members, list)
    backing = members[3]
    assert backing["public_name"] == "_StringProperty"
    assert backing["synthesized"] is True
    assert backing["logical_name"] == "StringProperty"
    assert backing["public"] is False


def test_json_preserves_member_order(resolver: ContractResolver) -> None:
    """Encoded snapshots list members in contract order."""
    decoded = msgspec.json.decode(contract_json(resolver.resolve(Book)))
    names = [item["public_name"] for item in decoded["members"]]
    assert names == ["BookName", "BookPrice", "AuthorName", "AuthorAge", "AuthorCountry"]


def test_pretty_json_is_indented(resolver: ContractResolver) -> None:
    """Pretty output is multi-line."""
    assert b"\n  " in contract_json(resolver.resolve(Book), pretty=True)


def test_fingerprint_stable_across_resolvers() -> None:
    """Equal contracts from separate resolvers share a fingerprint."""
    first = contract_fingerprint(ContractResolver().resolve(Book))
    second = contract_fingerprint(ContractResolver().resolve(Book))
    assert first == second
    assert len(first) == _FINGERPRINT_LENGTH


def test_fingerprint_tracks_members() -> None:
    """Different member lists produce different fingerprints."""
    authors = ContractResolver(ResolverConfig(transform_members=name_prefix_filter("A")))
    assert contract_fingerprint(authors.resolve(Book)) != contract_fingerprint(
        ContractResolver().resolve(Book)
    )
