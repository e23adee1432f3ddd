from __future__ import annotations

from datetime import datetime, timezone
from typing import Dict, List, Union

import pytest
from fastapi.testclient import TestClient

from lira_checker.core.config import Settings
from lira_checker.core.errors import UpstreamFetchError
from lira_checker.main import create_app
from lira_checker.models.rates import RateSnapshot
from lira_checker.services.rates.base import RateProvider

FETCHED_AT = datetime(2023, 3, 24, 8, 14, 40, tzinfo=timezone.utc)


class ScriptedProvider(RateProvider):
    """Replays a list of outcomes: a rates dict is returned, an exception raised."""

    name = "scripted"

    def __init__(self, outcomes: List[Union[Dict[str, float], Exception]] | None = None):
        self.outcomes = list(outcomes or [])
        self.calls: List[str] = []
        self.closed = False

    async def fetch_rates(self, base_currency: str) -> Dict[str, float]:  # type: ignore[override]
        self.calls.append(base_currency)
        if not self.outcomes:
            raise UpstreamFetchError("no scripted outcome left")
        outcome = self.outcomes.pop(0)
        if isinstance(outcome, Exception):
            raise outcome
        return outcome

    async def aclose(self) -> None:
        self.closed = True


def make_snapshot(base: str = "TRY", rates: Dict[str, float] | None = None, fetched_at=FETCHED_AT) -> RateSnapshot:
    return RateSnapshot(
        base=base,
        rates=rates if rates is not None else {"EUR": 0.04859, "USD": 0.05245},
        fetched_at=fetched_at,
    )


@pytest.fixture
def settings() -> Settings:
    s = Settings(
        exchange_rate_provider="static",
        enable_scheduler=False,
        status_base_currency="TRY",
        tracked_currencies=["TRY"],
        refresh_interval_seconds=30,
    )
    s.init_post_load()
    return s


@pytest.fixture
def provider() -> ScriptedProvider:
    return ScriptedProvider()


@pytest.fixture
def app(settings, provider):
    return create_app(settings_override=settings, provider_override=provider)


@pytest.fixture
def client(app):
    with TestClient(app) as c:
        yield c


@pytest.fixture
def book(app):
    return app.state.rate_book
