from __future__ import annotations

"""Response formatting.

Pure functions turning a cache state (None or a RateSnapshot) into the two
public representations: the one-line status text and the convert table.
No I/O and no state; errors are raised as domain exceptions which the
HTTP layer maps to status codes.
"""
from typing import Dict, Iterable, List, Optional, Sequence

from lira_checker.core.errors import (
    InternalFormattingError,
    InvalidCurrencyCode,
    NoDataYet,
    TooManyTargets,
)
from lira_checker.models.constants import (
    CONVERT_TIMESTAMP_FORMAT,
    DEFAULT_STATUS_TARGETS,
    DISPLAY_NAMES,
    MAX_STATUS_TARGETS,
    RATE_DECIMALS,
    STATUS_TIMESTAMP_FORMAT,
)
from lira_checker.models.rates import RateSnapshot
from lira_checker.services.currencies import SupportedCurrencies


def normalize_code(code: str) -> str:
    return code.strip().upper()


def parse_targets(raw: Optional[str]) -> List[str]:
    """Split 'eur,usd' into ['EUR', 'USD'], dropping blanks and repeats."""
    if not raw:
        return []
    codes = (normalize_code(part) for part in raw.split(","))
    return list(dict.fromkeys(c for c in codes if c))


def display_name(code: str, supported: Optional[SupportedCurrencies] = None) -> str:
    code = normalize_code(code)
    if code in DISPLAY_NAMES:
        return DISPLAY_NAMES[code]
    if supported is not None:
        return supported.name_of(code)
    return code


def format_rate(rate: float) -> str:
    return f"{rate:.{RATE_DECIMALS}f}"


def _require_snapshot(state: Optional[RateSnapshot], base: str) -> RateSnapshot:
    if state is None or state.base != base:
        raise NoDataYet(base)
    return state


def format_status_text(
    state: Optional[RateSnapshot],
    base: str,
    requested_targets: Optional[Sequence[str]] = None,
    names: Optional[SupportedCurrencies] = None,
    default_targets: Iterable[str] = DEFAULT_STATUS_TARGETS,
) -> str:
    """Render the status line, e.g.

    ``Lira Status as of 2023-03-24 08:14:40 (UTC): 1 Lira is equal to 0.04859 Euro (0.05245 US-Dollar)``

    Targets missing from the snapshot are left out; when none remain the
    target segment is simply empty.
    """
    base = normalize_code(base)
    targets = list(dict.fromkeys(normalize_code(t) for t in requested_targets or () if t.strip()))
    if len(targets) > MAX_STATUS_TARGETS:
        raise TooManyTargets(len(targets), MAX_STATUS_TARGETS)
    if not targets:
        targets = [normalize_code(t) for t in default_targets]
    snapshot = _require_snapshot(state, base)

    try:
        parts = []
        for code in targets:
            rate = snapshot.rate_for(code)
            if rate is None:
                continue
            parts.append(f"{format_rate(rate)} {display_name(code, names)}")
        segment = ""
        if parts:
            segment = parts[0]
            if len(parts) > 1:
                segment += f" ({', '.join(parts[1:])})"
        base_name = display_name(base, names)
        fetched = snapshot.fetched_at.strftime(STATUS_TIMESTAMP_FORMAT)
    except (TypeError, ValueError, AttributeError) as e:
        raise InternalFormattingError(f"cannot format status for {base}: {e}") from e
    line = f"{base_name} Status as of {fetched}: 1 {base_name} is equal to {segment}"
    return line.rstrip()


def format_convert_json(
    state: Optional[RateSnapshot],
    base: str,
    supported: Optional[SupportedCurrencies] = None,
) -> Dict[str, object]:
    """Build the ``{base, results, updated}`` table for the convert route."""
    base = normalize_code(base)
    if supported is not None and base not in supported:
        raise InvalidCurrencyCode(base)
    snapshot = _require_snapshot(state, base)

    try:
        results = {
            code: rate
            for code, rate in snapshot.rates.items()
            if not (code == base and rate == 1.0)
        }
        updated = snapshot.fetched_at.strftime(CONVERT_TIMESTAMP_FORMAT)
    except (TypeError, ValueError, AttributeError) as e:
        raise InternalFormattingError(f"cannot format rates for {base}: {e}") from e
    return {"base": snapshot.base, "results": results, "updated": updated}


def cross_snapshot(source: RateSnapshot, base: str) -> Optional[RateSnapshot]:
    """Re-express source's table in terms of base, without any fetch.

    1 base = (1 / rate(source -> base)) source, so
    rate(base -> X) = rate(source -> X) / rate(source -> base), and the source
    currency itself is worth 1 / rate(source -> base). Returns None when the
    source table has no rate for base.
    """
    base = normalize_code(base)
    if source.base == base:
        return source
    via = source.rate_for(base)
    if via is None:
        return None
    rates = {
        code: rate / via
        for code, rate in source.rates.items()
        if code not in (base, source.base)
    }
    rates[source.base] = 1.0 / via
    try:
        return RateSnapshot(base=base, rates=rates, fetched_at=source.fetched_at)
    except ValueError as e:
        raise InternalFormattingError(f"cannot cross {source.base} rates into {base}: {e}") from e


def snapshot_for_base(
    states: Iterable[Optional[RateSnapshot]], base: str
) -> Optional[RateSnapshot]:
    """Pick a snapshot for base: a direct one if fetched, else a crossed one."""
    base = normalize_code(base)
    available = [s for s in states if s is not None]
    for snapshot in available:
        if snapshot.base == base:
            return snapshot
    for snapshot in available:
        crossed = cross_snapshot(snapshot, base)
        if crossed is not None:
            return crossed
    return None
