"""Status text and convert table rendering."""

from datetime import datetime, timezone

import pytest

from lira_checker.core.errors import InvalidCurrencyCode, NoDataYet, TooManyTargets
from lira_checker.services.currencies import SupportedCurrencies
from lira_checker.services.formatter import (
    display_name,
    format_convert_json,
    format_rate,
    format_status_text,
    parse_targets,
    cross_snapshot,
    snapshot_for_base,
)
from tests.conftest import make_snapshot

SUPPORTED = SupportedCurrencies(
    {
        "TRY": "Turkish Lira",
        "EUR": "Euro",
        "USD": "US Dollar",
        "MZN": "Mozambican Metical",
        "GBP": "British Pound Sterling",
    }
)


def test_status_text_with_default_targets():
    text = format_status_text(make_snapshot(), "TRY")
    assert text == (
        "Lira Status as of 2023-03-24 08:14:40 (UTC): "
        "1 Lira is equal to 0.04859 Euro (0.05245 US-Dollar)"
    )


def test_status_text_with_requested_targets_and_names():
    snap = make_snapshot(rates={"EUR": 0.04859, "USD": 0.05245, "MZN": 3.34824})
    text = format_status_text(snap, "try", ["mzn", "usd", "eur"], names=SUPPORTED)
    assert text.endswith(
        "1 Lira is equal to 3.34824 Mozambican Metical (0.05245 US-Dollar, 0.04859 Euro)"
    )


def test_status_text_drops_missing_targets():
    text = format_status_text(make_snapshot(), "TRY", ["GBP", "USD"])
    assert text.endswith("1 Lira is equal to 0.05245 US-Dollar")


def test_status_text_with_no_matching_targets_has_empty_segment():
    text = format_status_text(make_snapshot(), "TRY", ["GBP", "MZN"])
    assert text == "Lira Status as of 2023-03-24 08:14:40 (UTC): 1 Lira is equal to"


def test_status_text_uses_fixed_precision():
    snap = make_snapshot(rates={"EUR": 0.5, "USD": 1234.123456789})
    text = format_status_text(snap, "TRY")
    assert "0.50000 Euro (1234.12346 US-Dollar)" in text


def test_status_text_without_data():
    with pytest.raises(NoDataYet):
        format_status_text(None, "TRY")
    with pytest.raises(NoDataYet):
        format_status_text(make_snapshot(), "EUR")


def test_status_text_target_limit():
    with pytest.raises(TooManyTargets):
        format_status_text(make_snapshot(), "TRY", ["EUR", "USD", "GBP", "MZN"])
    # duplicates collapse before the limit applies
    format_status_text(make_snapshot(), "TRY", ["EUR", "eur", "USD", "GBP"])


def test_status_text_for_other_base_uses_list_name():
    snap = make_snapshot(base="MZN", rates={"EUR": 0.0145, "USD": 0.0157})
    text = format_status_text(snap, "MZN", names=SUPPORTED)
    assert text.startswith("Mozambican Metical Status as of 2023-03-24 08:14:40 (UTC)")


def test_convert_json_matches_snapshot():
    snap = make_snapshot(
        rates={"MZN": 3.34824, "EUR": 0.04859},
        fetched_at=datetime(2023, 3, 24, 8, 15, 41, tzinfo=timezone.utc),
    )
    assert format_convert_json(snap, "try", SUPPORTED) == {
        "base": "TRY",
        "results": {"MZN": 3.34824, "EUR": 0.04859},
        "updated": "2023-03-24 08:15:41",
    }


def test_convert_json_leaves_out_base_at_parity():
    snap = make_snapshot(rates={"TRY": 1.0, "EUR": 0.04859})
    assert format_convert_json(snap, "TRY")["results"] == {"EUR": 0.04859}


def test_convert_json_rejects_unsupported_base_before_cache():
    with pytest.raises(InvalidCurrencyCode) as exc:
        format_convert_json(None, "xxx", SUPPORTED)
    assert exc.value.code == "XXX"


def test_convert_json_without_data():
    with pytest.raises(NoDataYet):
        format_convert_json(None, "TRY", SUPPORTED)
    with pytest.raises(NoDataYet):
        format_convert_json(make_snapshot(), "EUR", SUPPORTED)


def test_parse_targets():
    assert parse_targets("eur, usd,,EUR , gbp") == ["EUR", "USD", "GBP"]
    assert parse_targets("") == []
    assert parse_targets(None) == []


def test_display_name_fallbacks():
    assert display_name("try") == "Lira"
    assert display_name("MZN", SUPPORTED) == "Mozambican Metical"
    assert display_name("ABC", SUPPORTED) == "ABC"
    assert display_name("ABC") == "ABC"


def test_format_rate():
    assert format_rate(0.048590000001) == "0.04859"
    assert format_rate(3) == "3.00000"


def test_cross_snapshot_rebases_through_source_rates():
    source = make_snapshot(rates={"EUR": 0.04859, "USD": 0.05245, "TRY": 1.0})
    eur = cross_snapshot(source, "eur")
    assert eur.base == "EUR"
    assert eur.fetched_at == source.fetched_at
    assert set(eur.rates) == {"USD", "TRY"}
    assert eur.rates["USD"] == pytest.approx(0.05245 / 0.04859)
    assert eur.rates["TRY"] == pytest.approx(1 / 0.04859)
    assert cross_snapshot(source, "TRY") is source
    assert cross_snapshot(source, "GBP") is None


def test_snapshot_for_base_prefers_direct_table():
    try_snap = make_snapshot()
    eur_snap = make_snapshot(base="EUR", rates={"USD": 1.08})
    assert snapshot_for_base([None, try_snap, eur_snap], "eur") is eur_snap
    crossed = snapshot_for_base([None, try_snap], "USD")
    assert crossed.base == "USD"
    assert crossed.rates["EUR"] == pytest.approx(0.04859 / 0.05245)
    assert snapshot_for_base([None], "TRY") is None
    assert snapshot_for_base([try_snap], "GBP") is None
