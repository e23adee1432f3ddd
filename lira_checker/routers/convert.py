from __future__ import annotations

from fastapi import APIRouter, Depends

from lira_checker.models.rates import ConvertOut
from lira_checker.services.currencies import SupportedCurrencies
from lira_checker.services.formatter import format_convert_json, snapshot_for_base
from lira_checker.services.rates.cache_service import RateBook
from .deps import get_rate_book, get_supported_currencies

router = APIRouter(prefix="/convert", tags=["convert"])


@router.get(
    "/{base}",
    response_model=ConvertOut,
    responses={
        204: {"description": "No rates fetched yet for this base"},
        400: {"description": "Base currency is unknown"},
    },
    summary="Conversion table for a base currency",
)
async def convert(
    base: str,
    book: RateBook = Depends(get_rate_book),
    supported: SupportedCurrencies = Depends(get_supported_currencies),
):
    # Untracked bases are crossed through any tracked table holding their rate
    state = snapshot_for_base(book.snapshots(), base)
    return format_convert_json(state, base, supported)
