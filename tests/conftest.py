"""Pytest fixtures for contract resolution tests."""

from __future__ import annotations

import pytest

from contract_resolution.config import ENV_INCLUDE_SYNTHESIZED, ENV_MEMBER_SEARCH
from contract_resolution.resolver import ContractResolver


@pytest.fixture(autouse=True)
def _isolated_env(monkeypatch: pytest.MonkeyPatch) -> None:
    """Keep resolver environment overrides from leaking into tests."""
    monkeypatch.delenv(ENV_MEMBER_SEARCH, raising=False)
    monkeypatch.delenv(ENV_INCLUDE_SYNTHESIZED, raising=False)


@pytest.fixture
def resolver() -> ContractResolver:
    """Return a resolver with the default configuration.

    Returns:
    -------
    ContractResolver
        Fresh resolver with its own cache.
    """
    return ContractResolver()
