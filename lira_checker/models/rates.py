from __future__ import annotations

import math
from dataclasses import dataclass, field
from datetime import datetime, timezone
from types import MappingProxyType
from typing import Any, Dict, Mapping, Optional

from pydantic import BaseModel, ConfigDict

from .constants import CURRENCY_CODE_RE


@dataclass(frozen=True)
class RateSnapshot:
    """All rates for one base currency as returned by a single successful fetch.

    1 unit of ``base`` equals ``rates[target]`` units of target. Instances are
    immutable: a refresh builds a new snapshot, it never edits an old one.
    """

    base: str
    rates: Mapping[str, float]
    fetched_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))

    def __post_init__(self) -> None:
        if not isinstance(self.base, str) or not CURRENCY_CODE_RE.match(self.base):
            raise ValueError(f"invalid base currency code {self.base!r}")
        if not self.rates:
            raise ValueError("rates must not be empty")
        frozen: Dict[str, float] = {}
        for code, value in self.rates.items():
            try:
                rate = float(value)
            except (TypeError, ValueError):
                raise ValueError(f"rate for {code} is not a number: {value!r}") from None
            if not math.isfinite(rate) or rate <= 0:
                raise ValueError(f"rate for {code} must be finite and positive, got {value!r}")
            frozen[code.upper()] = rate
        if self.fetched_at.tzinfo is None:
            raise ValueError("fetched_at must be timezone-aware")
        # Bypass frozen __setattr__ to store the read-only copy
        object.__setattr__(self, "rates", MappingProxyType(frozen))
        object.__setattr__(self, "fetched_at", self.fetched_at.astimezone(timezone.utc))

    def rate_for(self, code: str) -> Optional[float]:
        return self.rates.get(code.upper())


class ProviderPayload(BaseModel):
    """fastforex ``fetch-all`` response body."""

    model_config = ConfigDict(extra="ignore")

    base: str
    results: Dict[str, Any]
    updated: str


class ConvertOut(BaseModel):
    base: str
    results: Dict[str, float]
    updated: str
