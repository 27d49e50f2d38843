"""Declared member metadata: explicit names, required markers, backing members.

Metadata can be attached three ways:

- ``typing.Annotated[T, DataMember(...)]`` on a class annotation or on a
  property getter's return annotation,
- the :func:`data_member` decorator on a property,
- native declarations of the class kind: ``msgspec.field(name=...)`` renames
  on msgspec structs and ``dataclasses.field(metadata={"data_member": ...})``
  on dataclasses.

Explicit ``DataMember`` markers take precedence over native declarations.
"""

from __future__ import annotations

import dataclasses
import inspect
import typing
from collections.abc import Callable
from typing import Annotated, Any, TypeVar, get_args, get_origin

import msgspec

from contract_resolution.serde import StructBaseStrict

DATA_MEMBER_ATTR = "__data_member__"
DATACLASS_METADATA_KEY = "data_member"

T = TypeVar("T")


class DataMember(StructBaseStrict, frozen=True):
    """Explicit member declaration.

    Parameters
    ----------
    name
        Public name used instead of the attribute name.
    required
        Whether the member must be present when decoding.
    synthesized
        Marks a member generated to back another member.
    backs
        Name of the member a synthesized member backs.
    """

    name: str | None = None
    required: bool | None = None
    synthesized: bool = False
    backs: str | None = None


def data_member(
    name: str | None = None,
    *,
    required: bool | None = None,
) -> Callable[[T], T]:
    """Attach a :class:`DataMember` declaration to a property.

    The decorator may be placed above or below ``@property``.

    Returns:
    -------
    Callable[[T], T]
        Decorator returning its argument unchanged.
    """
    marker = DataMember(name=name, required=required)

    def decorate(target: T) -> T:
        func = target.fget if isinstance(target, property) else target
        if func is None:
            msg = "data_member() requires a property with a getter."
            raise TypeError(msg)
        setattr(func, DATA_MEMBER_ATTR, marker)
        return target

    return decorate


def split_annotation(hint: object) -> tuple[object, DataMember | None]:
    """Strip ``Annotated`` wrappers and return the first ``DataMember`` found.

    Returns:
    -------
    tuple[object, DataMember | None]
        Underlying value type and the declaration, if any.
    """
    if get_origin(hint) is not Annotated:
        return hint, None
    base, *extras = get_args(hint)
    marker = next((item for item in extras if isinstance(item, DataMember)), None)
    return base, marker


def is_class_var(hint: object) -> bool:
    """Return whether an annotation declares a class-level (static) attribute."""
    if isinstance(hint, str):
        text = hint.strip()
        return text.startswith(("ClassVar", "typing.ClassVar"))
    hint, _ = split_annotation(hint)
    return hint is typing.ClassVar or get_origin(hint) is typing.ClassVar


def own_annotations(cls: type) -> dict[str, object]:
    """Return the annotations declared directly on ``cls``, evaluated when possible.

    Forward references that cannot be evaluated are returned as written.

    Returns:
    -------
    dict[str, object]
        Annotation per attribute name in declaration order.
    """
    raw = _raw_annotations(cls)
    if not raw:
        return {}
    try:
        hints = typing.get_type_hints(cls, include_extras=True)
    except (NameError, TypeError, AttributeError):
        return raw
    return {name: hints.get(name, value) for name, value in raw.items()}


def _raw_annotations(cls: type) -> dict[str, object]:
    try:
        return dict(inspect.get_annotations(cls))
    except NameError:
        # Deferred annotations (3.14+) can hold unresolvable names.
        annotation_format = getattr(inspect, "Format", None)
        if annotation_format is None:
            raise
        return dict(inspect.get_annotations(cls, format=annotation_format.FORWARDREF))


def property_annotation(prop: property) -> tuple[object, DataMember | None]:
    """Return the value type and declaration of a property.

    Returns:
    -------
    tuple[object, DataMember | None]
        Return annotation of the getter and the attached declaration.
    """
    func = prop.fget
    if func is None:
        return None, None
    declared = getattr(func, DATA_MEMBER_ATTR, None)
    try:
        hint = typing.get_type_hints(func, include_extras=True).get("return")
    except (NameError, TypeError, AttributeError):
        hint = getattr(func, "__annotations__", {}).get("return")
    value_type, annotated = split_annotation(hint)
    return value_type, declared or annotated


def native_field_metadata(cls: type, name: str) -> DataMember | None:
    """Return the declaration implied by msgspec or dataclass field definitions.

    Returns:
    -------
    DataMember | None
        Declaration derived from the class kind, or ``None`` for plain classes.
    """
    if isinstance(cls, type) and issubclass(cls, msgspec.Struct):
        return _struct_field_metadata(cls, name)
    if dataclasses.is_dataclass(cls):
        return _dataclass_field_metadata(cls, name)
    return None


def _struct_field_metadata(cls: type[msgspec.Struct], name: str) -> DataMember | None:
    for info in msgspec.structs.fields(cls):
        if info.name != name:
            continue
        renamed = info.encode_name if info.encode_name != info.name else None
        return DataMember(name=renamed, required=info.required)
    return None


def _dataclass_field_metadata(cls: Any, name: str) -> DataMember | None:
    fields = {item.name: item for item in dataclasses.fields(cls)}
    item = fields.get(name)
    if item is None:
        return None
    declared = item.metadata.get(DATACLASS_METADATA_KEY)
    if isinstance(declared, DataMember):
        return declared
    required = item.default is dataclasses.MISSING and item.default_factory is dataclasses.MISSING
    return DataMember(required=required)


def merge_metadata(*candidates: DataMember | None) -> DataMember:
    """Merge declarations, earlier candidates taking precedence per attribute.

    Returns:
    -------
    DataMember
        Combined declaration.
    """
    present = [item for item in candidates if item is not None]
    return DataMember(
        name=next((item.name for item in present if item.name is not None), None),
        required=next((item.required for item in present if item.required is not None), None),
        synthesized=any(item.synthesized for item in present),
        backs=next((item.backs for item in present if item.backs is not None), None),
    )


__all__ = [
    "DATACLASS_METADATA_KEY",
    "DataMember",
    "data_member",
    "is_class_var",
    "merge_metadata",
    "native_field_metadata",
    "own_annotations",
    "property_annotation",
    "split_annotation",
]
