from fastapi import APIRouter, Depends

from lira_checker.services.rates.cache_service import RateBook
from lira_checker.services.rates.scheduler import RefreshScheduler
from .deps import get_rate_book, get_scheduler

router = APIRouter(tags=["health"])


@router.get("/health", summary="Cache and refresh state per tracked base")
async def health(
    book: RateBook = Depends(get_rate_book),
    scheduler: RefreshScheduler = Depends(get_scheduler),
):
    stats = scheduler.stats()
    bases = {}
    for cache in book:
        snapshot = cache.read()
        bases[cache.base] = {
            "populated": snapshot is not None,
            "fetched_at": snapshot.fetched_at.isoformat() if snapshot else None,
            "rates": len(snapshot.rates) if snapshot else 0,
            "refresh": stats[cache.base].as_dict(),
        }
    return {
        "status": "ok",
        "scheduler_running": scheduler.running,
        "refresh_interval_seconds": scheduler.interval,
        "bases": bases,
    }
