from __future__ import annotations

from typing import Dict, Iterable, Iterator, Optional, Tuple

from lira_checker.models.rates import RateSnapshot

"""In-process rate cache.

Purpose:
    Hold the most recent successfully fetched RateSnapshot per tracked base
    currency and hand it to request handlers without ever touching the network.

Design:
    - One RateCache per base. Its state is a single reference: None (nothing
      fetched yet) or an immutable RateSnapshot.
    - write() swaps the reference in one assignment; read() returns whatever
      reference is current. Readers therefore see a whole snapshot or None,
      never a mix of two writes.
    - The refresh scheduler is the only writer, so no lock is needed.
    - There is no way back to None: once populated, failed refreshes leave
      the last good snapshot in place.
    - RateBook maps base -> RateCache and is fixed at startup.
"""


class RateCache:
    def __init__(self, base: str):
        self._base = base.upper()
        self._current: Optional[RateSnapshot] = None

    @property
    def base(self) -> str:
        return self._base

    @property
    def is_populated(self) -> bool:
        return self._current is not None

    def read(self) -> Optional[RateSnapshot]:
        return self._current

    def write(self, snapshot: RateSnapshot) -> None:
        if snapshot.base != self._base:
            raise ValueError(
                f"snapshot for {snapshot.base} cannot be stored in the {self._base} cache"
            )
        self._current = snapshot


class RateBook:
    """Fixed set of rate caches, one per tracked base currency."""

    def __init__(self, bases: Iterable[str]):
        caches: Dict[str, RateCache] = {}
        for base in bases:
            code = base.upper()
            caches.setdefault(code, RateCache(code))
        if not caches:
            raise ValueError("at least one base currency must be tracked")
        self._caches = caches

    @property
    def bases(self) -> Tuple[str, ...]:
        return tuple(self._caches)

    def get(self, base: str) -> Optional[RateCache]:
        return self._caches.get(base.upper())

    def read(self, base: str) -> Optional[RateSnapshot]:
        """Current snapshot for base, or None if untracked or not fetched yet."""
        cache = self.get(base)
        return cache.read() if cache is not None else None

    def snapshots(self) -> Tuple[Optional[RateSnapshot], ...]:
        """Current state of every cache, in tracking order."""
        return tuple(cache.read() for cache in self._caches.values())

    def __iter__(self) -> Iterator[RateCache]:
        return iter(self._caches.values())

    def __len__(self) -> int:
        return len(self._caches)
