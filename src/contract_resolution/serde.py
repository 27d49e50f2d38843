"""Shared msgspec policy and helpers."""

from __future__ import annotations

import datetime as dt
from enum import Enum

import msgspec


class StructBaseStrict(
    msgspec.Struct,
    frozen=True,
    kw_only=True,
    omit_defaults=True,
    repr_omit_defaults=True,
    forbid_unknown_fields=True,
):
    """Base struct for strict contracts."""


def type_label(value: type) -> str:
    """Return the dotted ``module.qualname`` label for a class.

    Returns:
    -------
    str
        Stable label that does not depend on object identity.
    """
    return f"{value.__module__}.{value.__qualname__}"


def _enc_hook(obj: object) -> object:
    if isinstance(obj, type):
        return type_label(obj)
    if isinstance(obj, Enum):
        return obj.value
    if isinstance(obj, dt.timedelta):
        return obj.total_seconds()
    # typing constructs such as ``list[int]`` or ``Annotated[...]``
    if hasattr(obj, "__origin__"):
        return repr(obj)
    msg = f"Unsupported type for encoding: {type(obj).__name__}"
    raise TypeError(msg)


# Insertion order is significant: payloads follow contract member order.
JSON_ENCODER = msgspec.json.Encoder(
    enc_hook=_enc_hook,
    decimal_format="number",
    uuid_format="canonical",
)
MSGPACK_ENCODER = msgspec.msgpack.Encoder(
    enc_hook=_enc_hook,
    order="deterministic",
    decimal_format="string",
    uuid_format="canonical",
)


def dumps_json(obj: object, *, pretty: bool = False) -> bytes:
    """Serialize an object to JSON bytes.

    Parameters
    ----------
    obj
        Object to serialize.
    pretty
        Whether to format with indentation.

    Returns:
    -------
    bytes
        JSON payload.
    """
    raw = JSON_ENCODER.encode(obj)
    if not pretty:
        return raw
    return msgspec.json.format(raw, indent=2)


def dumps_msgpack(obj: object) -> bytes:
    """Serialize an object to msgpack bytes with deterministic mapping order.

    Returns:
    -------
    bytes
        Msgpack payload.
    """
    return MSGPACK_ENCODER.encode(obj)


def validation_error_payload(exc: msgspec.ValidationError) -> dict[str, str]:
    """Normalize a msgspec ValidationError for diagnostics.

    Returns:
    -------
    dict[str, str]
        Normalized payload with the error type, summary and optional path.
    """
    summary, _, path = str(exc).partition(" - at `")
    payload = {"type": type(exc).__name__, "summary": summary}
    if path:
        payload["path"] = path.rstrip("`")
    return payload


__all__ = [
    "JSON_ENCODER",
    "MSGPACK_ENCODER",
    "StructBaseStrict",
    "dumps_json",
    "dumps_msgpack",
    "type_label",
    "validation_error_payload",
]
