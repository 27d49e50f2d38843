"""Type-to-contract resolution for reflection-based serializers."""

from __future__ import annotations

import importlib
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from contract_resolution.cache import ContractCacheStats
    from contract_resolution.config import (
        ResolverConfig,
        ResolverSettingsSpec,
        load_resolver_settings,
    )
    from contract_resolution.contract import Contract, ResolvedMember, build_contract
    from contract_resolution.errors import (
        ContractBuildError,
        ContractResolutionError,
        MemberNameCollisionError,
        ResolverSettingsError,
        UnsupportedTypeError,
    )
    from contract_resolution.hooks import (
        MemberTransform,
        TypeSubstitution,
        compose_transforms,
        is_assignable,
        keep_members,
        name_pattern_filter,
        name_prefix_filter,
        rename_members,
        substitute_types,
    )
    from contract_resolution.inspector import discover_members
    from contract_resolution.members import MemberDescriptor, MemberKind, MemberSearch
    from contract_resolution.metadata import DataMember, data_member
    from contract_resolution.resolver import ContractResolver
    from contract_resolution.snapshot import (
        contract_fingerprint,
        contract_json,
        contract_to_builtins,
    )
    from contract_resolution.walker import dumps_json, to_payload

__all__ = [
    "Contract",
    "ContractBuildError",
    "ContractCacheStats",
    "ContractResolutionError",
    "ContractResolver",
    "DataMember",
    "MemberDescriptor",
    "MemberKind",
    "MemberNameCollisionError",
    "MemberSearch",
    "MemberTransform",
    "ResolvedMember",
    "ResolverConfig",
    "ResolverSettingsError",
    "ResolverSettingsSpec",
    "TypeSubstitution",
    "UnsupportedTypeError",
    "build_contract",
    "compose_transforms",
    "contract_fingerprint",
    "contract_json",
    "contract_to_builtins",
    "data_member",
    "discover_members",
    "dumps_json",
    "is_assignable",
    "keep_members",
    "name_pattern_filter",
    "load_resolver_settings",
    "name_prefix_filter",
    "rename_members",
    "substitute_types",
    "to_payload",
]

_EXPORT_MAP: dict[str, tuple[str, str]] = {
    "Contract": ("contract_resolution.contract", "Contract"),
    "ContractBuildError": ("contract_resolution.errors", "ContractBuildError"),
    "ContractCacheStats": ("contract_resolution.cache", "ContractCacheStats"),
    "ContractResolutionError": ("contract_resolution.errors", "ContractResolutionError"),
    "ContractResolver": ("contract_resolution.resolver", "ContractResolver"),
    "DataMember": ("contract_resolution.metadata", "DataMember"),
    "MemberDescriptor": ("contract_resolution.members", "MemberDescriptor"),
    "MemberKind": ("contract_resolution.members", "MemberKind"),
    "MemberNameCollisionError": ("contract_resolution.errors", "MemberNameCollisionError"),
    "MemberSearch": ("contract_resolution.members", "MemberSearch"),
    "MemberTransform": ("contract_resolution.hooks", "MemberTransform"),
    "ResolvedMember": ("contract_resolution.contract", "ResolvedMember"),
    "ResolverConfig": ("contract_resolution.config", "ResolverConfig"),
    "ResolverSettingsError": ("contract_resolution.errors", "ResolverSettingsError"),
    "ResolverSettingsSpec": ("contract_resolution.config", "ResolverSettingsSpec"),
    "TypeSubstitution": ("contract_resolution.hooks", "TypeSubstitution"),
    "UnsupportedTypeError": ("contract_resolution.errors", "UnsupportedTypeError"),
    "build_contract": ("contract_resolution.contract", "build_contract"),
    "compose_transforms": ("contract_resolution.hooks", "compose_transforms"),
    "contract_fingerprint": ("contract_resolution.snapshot", "contract_fingerprint"),
    "contract_json": ("contract_resolution.snapshot", "contract_json"),
    "contract_to_builtins": ("contract_resolution.snapshot", "contract_to_builtins"),
    "data_member": ("contract_resolution.metadata", "data_member"),
    "discover_members": ("contract_resolution.inspector", "discover_members"),
    "dumps_json": ("contract_resolution.walker", "dumps_json"),
    "is_assignable": ("contract_resolution.hooks", "is_assignable"),
    "keep_members": ("contract_resolution.hooks", "keep_members"),
    "name_pattern_filter": ("contract_resolution.hooks", "name_pattern_filter"),
    "load_resolver_settings": ("contract_resolution.config", "load_resolver_settings"),
    "name_prefix_filter": ("contract_resolution.hooks", "name_prefix_filter"),
    "rename_members": ("contract_resolution.hooks", "rename_members"),
    "substitute_types": ("contract_resolution.hooks", "substitute_types"),
    "to_payload": ("contract_resolution.walker", "to_payload"),
}


def __getattr__(name: str) -> object:
    export = _EXPORT_MAP.get(name)
    if export is None:
        msg = f"module {__name__!r} has no attribute {name!r}"
        raise AttributeError(msg)
    module_name, attr_name = export
    module = importlib.import_module(module_name)
    value = getattr(module, attr_name)
    globals()[name] = value
    return value


def __dir__() -> list[str]:
    return sorted(__all__)
