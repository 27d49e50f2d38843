"""Serializable snapshots and fingerprints of contracts."""

from __future__ import annotations

import hashlib

from contract_resolution.contract import Contract, ResolvedMember
from contract_resolution.serde import dumps_json, dumps_msgpack, type_label

SNAPSHOT_VERSION = 1


def _type_text(value: object) -> str | None:
    if value is None:
        return None
    if isinstance(value, str):
        return value
    if isinstance(value, type):
        return type_label(value)
    return repr(value)


def _member_payload(item: ResolvedMember) -> dict[str, object]:
    member = item.member
    payload: dict[str, object] = {
        "public_name": item.public_name,
        "name": member.name,
        "kind": member.kind.value,
        "declaring_type": type_label(member.declaring_type),
        "value_type": _type_text(member.value_type),
        "required": item.required,
    }
    if member.is_synthesized:
        payload["synthesized"] = True
        payload["logical_name"] = member.logical_name
    if not member.is_public:
        payload["public"] = False
    return payload


def contract_to_builtins(contract: Contract) -> dict[str, object]:
    """Return a JSON-compatible payload describing ``contract``.

    Classes are rendered as ``module.qualname``, so the payload is stable
    across processes.

    Returns:
    -------
    dict[str, object]
        Snapshot payload.
    """
    return {
        "version": SNAPSHOT_VERSION,
        "underlying_type": type_label(contract.underlying_type),
        "resolution_type": type_label(contract.resolution_type),
        "members": [_member_payload(item) for item in contract.members],
    }


def contract_json(contract: Contract, *, pretty: bool = False) -> bytes:
    """Return the snapshot payload encoded as JSON.

    Returns:
    -------
    bytes
        JSON payload.
    """
    return dumps_json(contract_to_builtins(contract), pretty=pretty)


def contract_fingerprint(contract: Contract) -> str:
    """Return a SHA-256 fingerprint of the contract snapshot.

    Returns:
    -------
    str
        Hex digest; equal for value-equal contracts.
    """
    return hashlib.sha256(dumps_msgpack(contract_to_builtins(contract))).hexdigest()


__all__ = ["SNAPSHOT_VERSION", "contract_fingerprint", "contract_json", "contract_to_builtins"]
