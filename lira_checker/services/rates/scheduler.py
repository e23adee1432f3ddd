from __future__ import annotations

"""Periodic rate refresh.

One asyncio task fetches every tracked base once per interval and writes the
result into its RateCache. Ticks run strictly one after another: a slow
fetch pushes the next tick back instead of overlapping it. Failures never
leave this module; the cache simply keeps its last good snapshot.
"""
import asyncio
import logging
from dataclasses import asdict, dataclass
from datetime import datetime, timezone
from typing import Any, Callable, Dict, Optional

from lira_checker.core.errors import UpstreamFetchError
from lira_checker.models.rates import RateSnapshot
from lira_checker.services.currencies import SupportedCurrencies
from .base import RateProvider
from .cache_service import RateBook

logger = logging.getLogger("lira_checker.scheduler")


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


@dataclass
class RefreshStats:
    attempts: int = 0
    successes: int = 0
    consecutive_failures: int = 0
    last_attempt: Optional[datetime] = None
    last_success: Optional[datetime] = None
    last_error: Optional[str] = None

    def as_dict(self) -> Dict[str, Any]:
        out = asdict(self)
        for key in ("last_attempt", "last_success"):
            if out[key] is not None:
                out[key] = out[key].isoformat()
        return out


class RefreshScheduler:
    def __init__(
        self,
        provider: RateProvider,
        book: RateBook,
        interval_seconds: float,
        *,
        clock: Callable[[], datetime] = utc_now,
        supported: Optional[SupportedCurrencies] = None,
    ):
        if interval_seconds <= 0:
            raise ValueError("interval_seconds must be positive")
        self._provider = provider
        self._book = book
        self._interval = float(interval_seconds)
        self._clock = clock
        self._supported = supported
        self._stats: Dict[str, RefreshStats] = {b: RefreshStats() for b in book.bases}
        self._task: Optional[asyncio.Task] = None

    @property
    def interval(self) -> float:
        return self._interval

    @property
    def running(self) -> bool:
        return self._task is not None and not self._task.done()

    def stats(self) -> Dict[str, RefreshStats]:
        return dict(self._stats)

    # Single tick ----------------------------------------------
    async def refresh_base(self, base: str) -> bool:
        """Fetch one base and store it. Returns True when the cache was updated."""
        cache = self._book.get(base)
        if cache is None:
            raise KeyError(f"{base} is not tracked")
        stats = self._stats[cache.base]
        stats.attempts += 1
        stats.last_attempt = self._clock()
        try:
            rates = await self._provider.fetch_rates(cache.base)
            snapshot = RateSnapshot(base=cache.base, rates=rates, fetched_at=self._clock())
        except (UpstreamFetchError, ValueError) as e:
            self._record_failure(stats, str(e))
            logger.warning(
                "rate refresh failed for %s: %s",
                cache.base,
                e,
                extra={"base": cache.base, "attempt": stats.attempts},
            )
            return False
        except Exception as e:
            self._record_failure(stats, repr(e))
            logger.exception(
                "unexpected error refreshing %s",
                cache.base,
                extra={"base": cache.base, "attempt": stats.attempts},
            )
            return False

        cache.write(snapshot)
        stats.successes += 1
        stats.consecutive_failures = 0
        stats.last_success = snapshot.fetched_at
        stats.last_error = None
        logger.info(
            "refreshed %d rates for %s",
            len(snapshot.rates),
            cache.base,
            extra={"base": cache.base, "attempt": stats.attempts},
        )
        self._log_unknown_codes(snapshot)
        return True

    async def refresh_once(self) -> int:
        """Refresh every tracked base in turn; returns the number updated."""
        updated = 0
        for base in self._book.bases:
            if await self.refresh_base(base):
                updated += 1
        return updated

    def _log_unknown_codes(self, snapshot: RateSnapshot) -> None:
        if self._supported is None or not logger.isEnabledFor(logging.DEBUG):
            return
        unknown = sorted(c for c in snapshot.rates if c not in self._supported)
        if unknown:
            logger.debug(
                "unknown currencies in %s rates: %s",
                snapshot.base,
                ", ".join(unknown),
                extra={"base": snapshot.base},
            )

    @staticmethod
    def _record_failure(stats: RefreshStats, message: str) -> None:
        stats.consecutive_failures += 1
        stats.last_error = message

    # Loop -----------------------------------------------------
    async def run(self) -> None:
        """Refresh immediately, then once per interval until cancelled."""
        loop = asyncio.get_running_loop()
        logger.info(
            "starting rate refresh every %.1fs for %s",
            self._interval,
            ", ".join(self._book.bases),
        )
        while True:
            started = loop.time()
            try:
                await self.refresh_once()
            except Exception:
                logger.exception("refresh tick failed")
            elapsed = loop.time() - started
            await asyncio.sleep(max(0.0, self._interval - elapsed))

    def start(self) -> None:
        if self.running:
            return
        self._task = asyncio.get_running_loop().create_task(
            self.run(), name="rate-refresh"
        )

    async def stop(self) -> None:
        task, self._task = self._task, None
        if task is None:
            return
        task.cancel()
        try:
            await task
        except asyncio.CancelledError:
            current = asyncio.current_task()
            # Cancellation aimed at the caller, not just the refresh task
            if current is not None and current.cancelling():
                raise
        logger.info("rate refresh stopped")
