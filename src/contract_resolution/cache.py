"""Per-resolver contract cache with single-flight construction."""

from __future__ import annotations

import logging
import threading
from collections.abc import Callable
from dataclasses import dataclass, field

from contract_resolution.contract import Contract
from contract_resolution.serde import StructBaseStrict, type_label

logger = logging.getLogger(__name__)


class ContractCacheStats(StructBaseStrict, frozen=True):
    """Point-in-time cache counters."""

    entries: int = 0
    hits: int = 0
    misses: int = 0
    builds: int = 0
    failures: int = 0


@dataclass
class _KeyLock:
    """Build lock for one key and the number of callers using it."""

    lock: threading.Lock = field(default_factory=threading.Lock)
    users: int = 0


@dataclass
class ContractCache:
    """Contracts keyed by requested class.

    Published contracts are read without locking; hits are tallied in a
    per-thread cell that only the owning thread writes. The first build of a
    key runs under a per-key lock; callers racing on that key wait and reuse
    the published result. A failed build publishes nothing.
    """

    _entries: dict[type, Contract] = field(default_factory=dict, init=False, repr=False)
    _key_locks: dict[type, _KeyLock] = field(default_factory=dict, init=False, repr=False)
    _lock: threading.Lock = field(default_factory=threading.Lock, init=False, repr=False)
    _hit_cells: dict[int, list[int]] = field(default_factory=dict, init=False, repr=False)
    _counters: dict[str, int] = field(
        default_factory=lambda: dict.fromkeys(("misses", "builds", "failures"), 0),
        init=False,
        repr=False,
    )

    def get(self, key: type) -> Contract | None:
        """Return the published contract for ``key``, if any.

        Returns:
        -------
        Contract | None
            Cached contract, or ``None`` when not built yet.
        """
        return self._entries.get(key)

    def get_or_build(self, key: type, build: Callable[[], Contract]) -> Contract:
        """Return the contract for ``key``, building it at most once.

        Exceptions raised by ``build`` propagate unchanged and leave the
        cache as it was.

        Returns:
        -------
        Contract
            Published contract for ``key``.
        """
        cached = self._entries.get(key)
        if cached is not None:
            self._count_hit()
            return cached
        with self._lock:
            key_lock = self._key_locks.get(key)
            if key_lock is None:
                key_lock = self._key_locks[key] = _KeyLock()
            key_lock.users += 1
        try:
            with key_lock.lock:
                return self._build_locked(key, build)
        finally:
            with self._lock:
                key_lock.users -= 1
                if key_lock.users == 0:
                    self._key_locks.pop(key, None)

    def __contains__(self, key: object) -> bool:
        return key in self._entries

    def __len__(self) -> int:
        return len(self._entries)

    def clear(self) -> None:
        """Drop every published contract and reset counters."""
        with self._lock:
            self._entries.clear()
            self._hit_cells.clear()
            for name in self._counters:
                self._counters[name] = 0

    def stats(self) -> ContractCacheStats:
        """Return a snapshot of the cache counters.

        Returns:
        -------
        ContractCacheStats
            Counter snapshot.
        """
        with self._lock:
            hits = sum(cell[0] for cell in list(self._hit_cells.values()))
            return ContractCacheStats(entries=len(self._entries), hits=hits, **self._counters)

    def _build_locked(self, key: type, build: Callable[[], Contract]) -> Contract:
        cached = self._entries.get(key)
        if cached is not None:
            logger.debug("Contract for %s published by a concurrent build", type_label(key))
            self._count_hit()
            return cached
        self._bump("misses")
        try:
            contract = build()
        except Exception:
            self._bump("failures")
            raise
        self._entries[key] = contract
        self._bump("builds")
        return contract

    def _count_hit(self) -> None:
        cell = self._hit_cells.setdefault(threading.get_ident(), [0])
        cell[0] += 1

    def _bump(self, name: str) -> None:
        with self._lock:
            self._counters[name] += 1


__all__ = ["ContractCache", "ContractCacheStats"]
