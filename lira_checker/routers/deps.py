"""Shared FastAPI dependencies.

Runtime objects are created once in the app factory and parked on
``app.state``; routers pull them from there.
"""

from fastapi import Request

from lira_checker.core.config import Settings
from lira_checker.services.currencies import SupportedCurrencies
from lira_checker.services.rates.cache_service import RateBook
from lira_checker.services.rates.scheduler import RefreshScheduler


def get_app_settings(request: Request) -> Settings:
    return request.app.state.settings


def get_rate_book(request: Request) -> RateBook:
    return request.app.state.rate_book


def get_supported_currencies(request: Request) -> SupportedCurrencies:
    return request.app.state.supported_currencies


def get_scheduler(request: Request) -> RefreshScheduler:
    return request.app.state.scheduler
