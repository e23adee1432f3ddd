"""Supported currency list.

Loaded once at startup from a JSON document shaped like::

    {"currencies": {"TRY": "Turkish Lira", "EUR": "Euro", ...}}

and kept read-only for the lifetime of the process. Used to reject unknown
base codes before any rate lookup.
"""

from __future__ import annotations

import json
import logging
from pathlib import Path
from types import MappingProxyType
from typing import Iterator, Mapping, Tuple

from lira_checker.core.errors import CurrencyListError
from lira_checker.models.constants import CURRENCY_CODE_RE

logger = logging.getLogger("lira_checker.currencies")


class SupportedCurrencies:
    def __init__(self, names: Mapping[str, str]):
        self._names = MappingProxyType({c.upper(): n for c, n in names.items()})

    def __contains__(self, code: object) -> bool:
        return isinstance(code, str) and code.strip().upper() in self._names

    def __len__(self) -> int:
        return len(self._names)

    def __iter__(self) -> Iterator[str]:
        return iter(self._names)

    @property
    def codes(self) -> Tuple[str, ...]:
        return tuple(sorted(self._names))

    def name_of(self, code: str) -> str:
        code = code.strip().upper()
        return self._names.get(code, code)


def parse_supported_currencies(raw: str) -> SupportedCurrencies:
    try:
        doc = json.loads(raw)
    except ValueError as e:
        raise CurrencyListError(f"supported currency list is not valid JSON: {e}") from e
    names = doc.get("currencies") if isinstance(doc, dict) else None
    if not isinstance(names, dict) or not names:
        raise CurrencyListError("supported currency list needs a non-empty 'currencies' object")
    bad = [c for c, n in names.items() if not CURRENCY_CODE_RE.match(str(c).upper()) or not isinstance(n, str)]
    if bad:
        raise CurrencyListError(f"invalid entries in supported currency list: {', '.join(map(str, bad))}")
    return SupportedCurrencies(names)


def load_supported_currencies(path: Path) -> SupportedCurrencies:
    try:
        raw = Path(path).read_text(encoding="utf-8")
    except OSError as e:
        raise CurrencyListError(f"unable to read supported currency list {path}: {e}") from e
    supported = parse_supported_currencies(raw)
    logger.info("loaded %d supported currencies from %s", len(supported), path)
    return supported
