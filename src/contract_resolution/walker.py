"""Walk object graphs along resolved contracts.

The walker turns instances into ordered mappings keyed by public member
names. Encoding the result is left to msgspec.
"""

from __future__ import annotations

import datetime as dt
import uuid
from collections.abc import Callable, Mapping
from decimal import Decimal
from enum import Enum
from typing import Final, TypeVar

from contract_resolution.members import MemberKind
from contract_resolution.resolver import ContractResolver
from contract_resolution.serde import dumps_json as _dumps_json

T = TypeVar("T")

_MISSING: Final = object()
_SCALAR_TYPES = (
    str,
    int,
    float,
    bool,
    bytes,
    Decimal,
    dt.date,
    dt.time,
    dt.timedelta,
    uuid.UUID,
    Enum,
    type(None),
)


def to_payload(obj: object, resolver: ContractResolver) -> object:
    """Convert ``obj`` into builtins following ``resolver`` contracts.

    Objects whose class has a non-empty contract become ``dict`` instances in
    contract order; mappings and sequences are walked item by item; scalars
    pass through. Fields that were never assigned are omitted.

    Returns:
    -------
    object
        Builtin representation of ``obj``.

    Raises:
    ------
    ValueError
        When the object graph contains a reference loop.
    """
    return _walk(obj, resolver, active=set())


def dumps_json(obj: object, resolver: ContractResolver, *, pretty: bool = False) -> bytes:
    """Encode ``obj`` as JSON following ``resolver`` contracts.

    Returns:
    -------
    bytes
        JSON payload.
    """
    return _dumps_json(to_payload(obj, resolver), pretty=pretty)


def _walk(value: object, resolver: ContractResolver, *, active: set[int]) -> object:
    if isinstance(value, _SCALAR_TYPES):
        return value
    if isinstance(value, Mapping):
        return _enter(
            value,
            active,
            lambda: {key: _walk(item, resolver, active=active) for key, item in value.items()},
        )
    if isinstance(value, (list, tuple, set, frozenset)):
        return _enter(
            value,
            active,
            lambda: [_walk(item, resolver, active=active) for item in value],
        )
    contract = resolver.resolve(type(value))
    if contract.is_empty:
        return value

    def walk_members() -> dict[str, object]:
        payload: dict[str, object] = {}
        for item in contract.members:
            member = item.member
            if member.kind is MemberKind.FIELD:
                raw = getattr(value, member.name, _MISSING)
                if raw is _MISSING:
                    continue
            else:
                raw = getattr(value, member.name)
            payload[item.public_name] = _walk(raw, resolver, active=active)
        return payload

    return _enter(value, active, walk_members)


def _enter(value: object, active: set[int], produce: Callable[[], T]) -> T:
    marker = id(value)
    if marker in active:
        msg = f"Reference loop detected for {type(value).__name__} instance."
        raise ValueError(msg)
    active.add(marker)
    try:
        return produce()
    finally:
        active.discard(marker)


__all__ = ["dumps_json", "to_payload"]
