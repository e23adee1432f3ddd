import pytest

from lira_checker.core.config import Settings


def _settings(**kwargs):
    base = {"exchange_rate_provider": "static"}
    base.update(kwargs)
    return Settings(**base)


def test_post_load_normalizes_currencies():
    s = _settings(
        status_base_currency=" try ",
        tracked_currencies=["usd", "EUR", "usd", " "],
        status_default_targets=["eur", "usd"],
    )
    s.init_post_load()
    assert s.status_base_currency == "TRY"
    assert s.tracked_currencies == ["TRY", "USD", "EUR"]
    assert s.status_default_targets == ["EUR", "USD"]


def test_defaults():
    s = _settings()
    s.init_post_load()
    assert s.refresh_interval_seconds == 30
    assert s.tracked_currencies == ["TRY"]
    assert s.supported_currencies_path.name == "supported_currencies.json"
    assert s.bind_address() == ("0.0.0.0", 8080)


def test_environment_overrides(monkeypatch):
    monkeypatch.setenv("BIND", "127.0.0.1:9000")
    monkeypatch.setenv("CURRENCY_API_TOKEN", "tok")
    monkeypatch.setenv("REFRESH_INTERVAL_SECONDS", "900")
    monkeypatch.setenv("TRACKED_CURRENCIES", '["TRY", "USD"]')
    s = Settings()
    s.init_post_load()
    assert s.exchange_rate_provider == "fastforex"
    assert s.currency_api_token == "tok"
    assert s.refresh_interval_seconds == 900
    assert s.tracked_currencies == ["TRY", "USD"]
    assert s.bind_address() == ("127.0.0.1", 9000)


@pytest.mark.parametrize(
    "kwargs",
    [
        {"exchange_rate_provider": "carrier-pigeon"},
        {"exchange_rate_provider": "fastforex", "currency_api_token": ""},
        {"refresh_interval_seconds": 0},
        {"http_timeout_seconds": -1},
        {"http_retries": -1},
        {"bind": "localhost"},
        {"bind": "localhost:http"},
        {"bind": "localhost:70000"},
    ],
)
def test_invalid_settings_are_rejected(kwargs):
    with pytest.raises(ValueError):
        _settings(**kwargs).init_post_load()


def test_ipv6_bind_address():
    assert _settings(bind="[::1]:8080").bind_address() == ("::1", 8080)
