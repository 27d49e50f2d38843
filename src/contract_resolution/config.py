"""Resolver configuration and settings loading.

``ResolverConfig`` is the runtime configuration handed to a resolver; it can
carry hook callables. ``ResolverSettingsSpec`` is its serializable subset,
loaded from ``contract_resolution.toml`` or ``[tool.contract_resolution]`` in
``pyproject.toml`` and overridden by environment variables:

- ``CONTRACT_RESOLUTION_MEMBER_SEARCH``: comma separated search flags.
- ``CONTRACT_RESOLUTION_INCLUDE_SYNTHESIZED``: boolean word.
"""

from __future__ import annotations

import logging
import os
from collections.abc import Mapping
from dataclasses import dataclass
from pathlib import Path
from typing import cast

import msgspec

from contract_resolution.errors import ResolverSettingsError
from contract_resolution.hooks import MemberTransform, TypeSubstitution
from contract_resolution.members import MemberSearch
from contract_resolution.serde import StructBaseStrict, validation_error_payload

logger = logging.getLogger(__name__)

CONFIG_FILENAME = "contract_resolution.toml"
PYPROJECT_TABLE = "contract_resolution"
ENV_MEMBER_SEARCH = "CONTRACT_RESOLUTION_MEMBER_SEARCH"
ENV_INCLUDE_SYNTHESIZED = "CONTRACT_RESOLUTION_INCLUDE_SYNTHESIZED"

_TRUE_VALUES = frozenset({"1", "true", "yes", "y", "on"})
_FALSE_VALUES = frozenset({"0", "false", "no", "n", "off"})


class ResolverSettingsSpec(StructBaseStrict, frozen=True):
    """Serializable resolver settings."""

    member_search: tuple[str, ...] = ("instance", "public")
    include_synthesized: bool = False

    def search(self) -> MemberSearch:
        """Return the parsed member search policy.

        Returns:
        -------
        MemberSearch
            Combined search flags.
        """
        return MemberSearch.parse(self.member_search)


@dataclass(frozen=True)
class ResolverConfig:
    """Options governing member discovery for one resolver.

    Parameters
    ----------
    search
        Staticness/accessibility combinations considered during discovery.
        Static members are dropped afterwards regardless.
    include_synthesized
        Keep synthesized backing members next to the member they back.
    substitute_type
        Hook choosing the class members are discovered on.
    transform_members
        Hook producing the final member list from the resolved defaults.
    """

    search: MemberSearch = MemberSearch.DEFAULT
    include_synthesized: bool = False
    substitute_type: TypeSubstitution | None = None
    transform_members: MemberTransform | None = None

    @classmethod
    def from_settings(
        cls,
        settings: ResolverSettingsSpec,
        *,
        substitute_type: TypeSubstitution | None = None,
        transform_members: MemberTransform | None = None,
    ) -> ResolverConfig:
        """Build a runtime config from serializable settings.

        Returns:
        -------
        ResolverConfig
            Runtime configuration.
        """
        return cls(
            search=settings.search(),
            include_synthesized=settings.include_synthesized,
            substitute_type=substitute_type,
            transform_members=transform_members,
        )

    def to_settings(self) -> ResolverSettingsSpec:
        """Return the serializable part of this config.

        Returns:
        -------
        ResolverSettingsSpec
            Settings without hooks.
        """
        return ResolverSettingsSpec(
            member_search=self.search.flag_names(),
            include_synthesized=self.include_synthesized,
        )


def load_resolver_settings(
    config_file: str | Path | None = None,
    *,
    apply_env: bool = True,
) -> ResolverSettingsSpec:
    """Load resolver settings from TOML and the environment.

    An explicit ``config_file`` wins. Otherwise ``contract_resolution.toml``
    and then ``pyproject.toml`` are searched from the current directory up.

    Returns:
    -------
    ResolverSettingsSpec
        Validated settings.

    Raises:
    ------
    ResolverSettingsError
        When an explicit configuration file is missing or any file found is
        invalid.
    """
    settings = ResolverSettingsSpec()
    if config_file is not None:
        path = Path(config_file)
        if not path.exists():
            msg = "Configuration file not found."
            raise ResolverSettingsError(msg, location=str(path))
        payload = _read_toml(path)
        if path.name == "pyproject.toml":
            payload = _tool_table(payload) or {}
        settings = decode_settings(payload, location=str(path))
    else:
        settings = _discover_settings() or settings
    if apply_env:
        settings = apply_env_overrides(settings)
    return settings


def decode_settings(payload: Mapping[str, object], *, location: str) -> ResolverSettingsSpec:
    """Validate a settings mapping.

    Returns:
    -------
    ResolverSettingsSpec
        Validated settings.

    Raises:
    ------
    ResolverSettingsError
        When the payload does not match the settings schema or names an
        unknown search flag.
    """
    try:
        settings = msgspec.convert(dict(payload), type=ResolverSettingsSpec, strict=True)
    except msgspec.ValidationError as exc:
        details = validation_error_payload(exc)
        msg = f"Resolver settings validation failed: {details}"
        raise ResolverSettingsError(msg, location=location) from exc
    try:
        settings.search()
    except ResolverSettingsError as exc:
        raise ResolverSettingsError(str(exc), location=location) from exc
    return settings


def apply_env_overrides(settings: ResolverSettingsSpec) -> ResolverSettingsSpec:
    """Apply ``CONTRACT_RESOLUTION_*`` environment overrides.

    Returns:
    -------
    ResolverSettingsSpec
        Settings with overrides applied.
    """
    updates: dict[str, object] = {}
    search = _env_value(ENV_MEMBER_SEARCH)
    if search is not None:
        names = tuple(item.strip() for item in search.split(",") if item.strip())
        MemberSearch.parse(names)
        updates["member_search"] = names
    include = _env_bool(ENV_INCLUDE_SYNTHESIZED)
    if include is not None:
        updates["include_synthesized"] = include
    if not updates:
        return settings
    return msgspec.structs.replace(settings, **updates)


def _discover_settings() -> ResolverSettingsSpec | None:
    config_path = _find_in_parents(CONFIG_FILENAME)
    if config_path is not None:
        return decode_settings(_read_toml(config_path), location=str(config_path))
    pyproject_path = _find_in_parents("pyproject.toml")
    if pyproject_path is None:
        return None
    nested = _tool_table(_read_toml(pyproject_path))
    if nested is None:
        return None
    return decode_settings(nested, location=f"{pyproject_path}:tool.{PYPROJECT_TABLE}")


def _find_in_parents(filename: str) -> Path | None:
    path = Path.cwd()
    while True:
        candidate = path / filename
        if candidate.exists():
            return candidate
        if path.parent == path:
            return None
        path = path.parent


def _read_toml(path: Path) -> dict[str, object]:
    try:
        payload = msgspec.toml.decode(path.read_text(encoding="utf-8"), type=object, strict=True)
    except msgspec.DecodeError as exc:
        msg = f"Invalid TOML: {exc}"
        raise ResolverSettingsError(msg, location=str(path)) from exc
    if not isinstance(payload, dict):
        msg = f"Expected TOML mapping, got {type(payload).__name__}."
        raise ResolverSettingsError(msg, location=str(path))
    return cast("dict[str, object]", payload)


def _tool_table(pyproject: Mapping[str, object]) -> dict[str, object] | None:
    tool = pyproject.get("tool")
    if not isinstance(tool, dict):
        return None
    nested = tool.get(PYPROJECT_TABLE)
    if not isinstance(nested, dict):
        return None
    return cast("dict[str, object]", nested)


def _env_value(name: str) -> str | None:
    raw = os.environ.get(name)
    if raw is None:
        return None
    stripped = raw.strip()
    return stripped or None


def _env_bool(name: str) -> bool | None:
    value = _env_value(name)
    if value is None:
        return None
    lowered = value.lower()
    if lowered in _TRUE_VALUES:
        return True
    if lowered in _FALSE_VALUES:
        return False
    logger.warning("Invalid boolean for %s: %r", name, value)
    return None


__all__ = [
    "CONFIG_FILENAME",
    "ENV_INCLUDE_SYNTHESIZED",
    "ENV_MEMBER_SEARCH",
    "ResolverConfig",
    "ResolverSettingsSpec",
    "apply_env_overrides",
    "decode_settings",
    "load_resolver_settings",
]
