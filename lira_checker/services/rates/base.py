from __future__ import annotations

"""Rate provider abstraction.

A provider turns a base currency code into a mapping target code -> factor
(1 unit of base = factor units of target) or raises UpstreamFetchError.
"""
from abc import ABC, abstractmethod
from typing import Dict


class RateProvider(ABC):
    name: str = "abstract"

    @abstractmethod
    async def fetch_rates(self, base_currency: str) -> Dict[str, float]:
        """Return all known rates for base_currency."""
        raise NotImplementedError

    async def aclose(self) -> None:
        """Release network resources, if any."""
