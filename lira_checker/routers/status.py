from __future__ import annotations

from fastapi import APIRouter, Depends
from fastapi.responses import PlainTextResponse

from lira_checker.core.config import Settings
from lira_checker.core.errors import InvalidCurrencyCode
from lira_checker.services.currencies import SupportedCurrencies
from lira_checker.services.formatter import (
    format_status_text,
    normalize_code,
    parse_targets,
)
from lira_checker.services.rates.cache_service import RateBook
from .deps import get_app_settings, get_rate_book, get_supported_currencies

"""Status router: one-line, human readable rate summaries.

Endpoints:
    - GET /status                    -> configured base vs default targets
    - GET /status/{base}             -> base vs default targets
    - GET /status/{base}/{targets}   -> base vs up to 3 comma-separated targets

204 while no snapshot exists for the base; 400 for unsupported bases.
"""

router = APIRouter(prefix="/status", tags=["status"])

_RESPONSES = {
    204: {"description": "No rates fetched yet for this base"},
    400: {"description": "Unsupported base currency or too many targets"},
}


def _status_response(
    base: str,
    targets: list[str],
    settings: Settings,
    book: RateBook,
    supported: SupportedCurrencies,
) -> PlainTextResponse:
    base = normalize_code(base)
    if base not in supported:
        raise InvalidCurrencyCode(base)
    text = format_status_text(
        book.read(base),
        base,
        targets,
        names=supported,
        default_targets=settings.status_default_targets,
    )
    return PlainTextResponse(text)


@router.get(
    "",
    response_class=PlainTextResponse,
    responses=_RESPONSES,
    summary="Status line for the configured base currency",
)
async def status_default(
    settings: Settings = Depends(get_app_settings),
    book: RateBook = Depends(get_rate_book),
    supported: SupportedCurrencies = Depends(get_supported_currencies),
):
    return _status_response(settings.status_base_currency, [], settings, book, supported)


@router.get(
    "/{base}",
    response_class=PlainTextResponse,
    responses=_RESPONSES,
    summary="Status line for a base currency against the default targets",
)
async def status_for_base(
    base: str,
    settings: Settings = Depends(get_app_settings),
    book: RateBook = Depends(get_rate_book),
    supported: SupportedCurrencies = Depends(get_supported_currencies),
):
    return _status_response(base, [], settings, book, supported)


@router.get(
    "/{base}/{targets}",
    response_class=PlainTextResponse,
    responses=_RESPONSES,
    summary="Status line for a base currency against chosen targets",
)
async def status_for_targets(
    base: str,
    targets: str,
    settings: Settings = Depends(get_app_settings),
    book: RateBook = Depends(get_rate_book),
    supported: SupportedCurrencies = Depends(get_supported_currencies),
):
    return _status_response(base, parse_targets(targets), settings, book, supported)
