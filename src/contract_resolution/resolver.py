"""Contract resolver: the entry point for type-to-contract resolution."""

from __future__ import annotations

import logging
from collections.abc import Iterable, Sequence

from contract_resolution.cache import ContractCache, ContractCacheStats
from contract_resolution.config import ResolverConfig
from contract_resolution.contract import Contract, ResolvedMember, build_contract
from contract_resolution.errors import UnsupportedTypeError
from contract_resolution.filtering import filter_members
from contract_resolution.hooks import identity_members, identity_type
from contract_resolution.inspector import discover_members
from contract_resolution.naming import resolve_members
from contract_resolution.serde import type_label

logger = logging.getLogger(__name__)


class ContractResolver:
    """Resolve classes to contracts under one configuration.

    Each resolver owns its cache; two resolvers never share contracts, so
    differently configured resolvers can be used side by side on the same
    classes. A resolver is safe to share between threads.

    Parameters
    ----------
    config
        Discovery options and hooks. Defaults to ``ResolverConfig()``.
    """

    def __init__(self, config: ResolverConfig | None = None) -> None:
        self._config = config if config is not None else ResolverConfig()
        self._cache = ContractCache()

    @property
    def config(self) -> ResolverConfig:
        """Configuration this resolver was created with."""
        return self._config

    def resolve(self, type_: type) -> Contract:
        """Return the contract for ``type_``, building it on first use.

        Returns:
        -------
        Contract
            Cached or freshly built contract.

        Raises:
        ------
        UnsupportedTypeError
            When ``type_`` is not a class, or a substitution returns a non-class.
        """
        if not isinstance(type_, type):
            raise UnsupportedTypeError(type_)
        return self._cache.get_or_build(type_, lambda: self._build(type_))

    def resolve_many(self, types: Iterable[type]) -> tuple[Contract, ...]:
        """Resolve several classes in order.

        Returns:
        -------
        tuple[Contract, ...]
            One contract per class.
        """
        return tuple(self.resolve(item) for item in types)

    def cache_stats(self) -> ContractCacheStats:
        """Return cache counters for this resolver.

        Returns:
        -------
        ContractCacheStats
            Counter snapshot.
        """
        return self._cache.stats()

    def _build(self, requested: type) -> Contract:
        config = self._config
        substitute = config.substitute_type or identity_type
        transform = config.transform_members or identity_members
        try:
            resolution = substitute(requested)
            if not isinstance(resolution, type):
                raise UnsupportedTypeError(resolution, context="substitute_type")
            descriptors = discover_members(resolution, config.search)
            members: Sequence[ResolvedMember] = transform(
                resolution,
                resolve_members(filter_members(descriptors, config)),
            )
            return build_contract(resolution, members, underlying_type=requested)
        except Exception:
            logger.debug("Contract build failed for %s", type_label(requested), exc_info=True)
            raise


__all__ = ["ContractResolver"]
