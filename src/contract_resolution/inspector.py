"""Member discovery over Python classes.

Discovery walks the MRO from the most distant ancestor to the class itself.
Per class, annotated attributes come first (annotation order), followed by
properties, unannotated slots and unannotated class attributes in definition
order. A redeclaration in a derived class replaces the ancestor's descriptor
while keeping the ancestor's position.
"""

from __future__ import annotations

import abc
import functools
import logging
import types
import typing
from collections.abc import Iterator
from typing import get_args

import msgspec

from contract_resolution.members import MemberDescriptor, MemberKind, MemberSearch
from contract_resolution.metadata import (
    DataMember,
    is_class_var,
    merge_metadata,
    native_field_metadata,
    own_annotations,
    property_annotation,
    split_annotation,
)

logger = logging.getLogger(__name__)

_SKIPPED_BASES: frozenset[type] = frozenset(
    {
        object,
        abc.ABC,
        typing.Generic,
        typing.Protocol,
        msgspec.Struct,
    }
)
# Bookkeeping attributes set by typing and abc on user classes.
_RUNTIME_NAMES = frozenset({"_is_protocol", "_is_runtime_protocol", "_abc_impl"})
_PROPERTY_TYPES = (property, functools.cached_property)


def discover_members(
    type_: type,
    search: MemberSearch = MemberSearch.DEFAULT,
) -> tuple[MemberDescriptor, ...]:
    """Enumerate the members of ``type_`` selected by ``search``.

    Parameters
    ----------
    type_
        Class to inspect.
    search
        Staticness and accessibility combinations to report.

    Returns:
    -------
    tuple[MemberDescriptor, ...]
        Descriptors in declaration order, base classes first.
    """
    found: dict[str, MemberDescriptor] = {}
    for cls in reversed(type_.__mro__):
        if cls in _SKIPPED_BASES:
            continue
        declared = dict.fromkeys(name for name in vars(cls) if not _is_reserved(name))
        for descriptor in _declared_members(cls):
            found[descriptor.name] = descriptor
            declared.pop(descriptor.name, None)
        # Methods and nested classes hide an inherited member of the same name.
        for name in declared:
            found.pop(name, None)
    selected = tuple(
        descriptor
        for descriptor in found.values()
        if search.selects(is_static=descriptor.is_static, is_public=descriptor.is_public)
    )
    logger.debug(
        "Discovered %d of %d members on %s.%s",
        len(selected),
        len(found),
        type_.__module__,
        type_.__qualname__,
    )
    return selected


def _is_reserved(name: str) -> bool:
    return (name.startswith("__") and name.endswith("__")) or name in _RUNTIME_NAMES


def _declared_members(cls: type) -> Iterator[MemberDescriptor]:
    namespace = vars(cls)
    properties = {name for name, value in namespace.items() if isinstance(value, _PROPERTY_TYPES)}
    annotations = own_annotations(cls)
    for name, hint in annotations.items():
        if _is_reserved(name) or name in properties:
            continue
        yield _field_descriptor(cls, name, hint, properties=properties)
    for name, value in namespace.items():
        # An annotated property is still a property.
        if (name in annotations and name not in properties) or _is_reserved(name):
            continue
        if isinstance(value, _PROPERTY_TYPES):
            yield _property_descriptor(cls, name, value)
        elif isinstance(value, types.MemberDescriptorType):
            yield _field_descriptor(cls, name, None, properties=properties)
        elif _is_plain_value(value):
            yield MemberDescriptor(
                name=name,
                kind=MemberKind.FIELD,
                declaring_type=cls,
                value_type=type(value),
                is_public=not name.startswith("_"),
                is_static=True,
            )


def _is_plain_value(value: object) -> bool:
    if isinstance(value, (staticmethod, classmethod, type)) or callable(value):
        return False
    return not hasattr(type(value), "__get__")


def _field_descriptor(
    cls: type,
    name: str,
    hint: object,
    *,
    properties: set[str],
) -> MemberDescriptor:
    is_static = is_class_var(hint)
    value_type, declared = split_annotation(hint)
    if is_static and not isinstance(value_type, str):
        args = get_args(value_type)
        value_type = args[0] if args else None
    metadata = merge_metadata(declared, native_field_metadata(cls, name))
    backs = _backed_property(name, metadata, properties=properties)
    return MemberDescriptor(
        name=name,
        kind=MemberKind.FIELD,
        declaring_type=cls,
        value_type=value_type,
        logical_name=backs or name,
        is_public=not name.startswith("_"),
        is_static=is_static,
        is_synthesized=backs is not None,
        override_name=metadata.name,
        required=metadata.required,
    )


def _backed_property(name: str, metadata: DataMember, *, properties: set[str]) -> str | None:
    if metadata.synthesized:
        return metadata.backs or name.lstrip("_") or name
    # ``_value`` next to a ``value`` property is the property's storage.
    if name.startswith("_") and not name.startswith("__") and name[1:] in properties:
        return name[1:]
    return None


def _property_descriptor(
    cls: type,
    name: str,
    prop: property | functools.cached_property[object],
) -> MemberDescriptor:
    if isinstance(prop, property):
        value_type, declared = property_annotation(prop)
    else:
        value_type, declared = property_annotation(property(prop.func))
    metadata = merge_metadata(declared)
    return MemberDescriptor(
        name=name,
        kind=MemberKind.PROPERTY,
        declaring_type=cls,
        value_type=value_type,
        logical_name=name,
        is_public=not name.startswith("_"),
        override_name=metadata.name,
        required=metadata.required,
    )


__all__ = ["discover_members"]
