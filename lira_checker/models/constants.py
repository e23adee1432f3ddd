"""Formatting constants and display names for the status line."""

import re
from typing import Dict, Tuple

CURRENCY_CODE_RE = re.compile(r"^[A-Z0-9]{3,4}$")

DEFAULT_STATUS_TARGETS: Tuple[str, ...] = ("EUR", "USD")
MAX_STATUS_TARGETS = 3
RATE_DECIMALS = 5

STATUS_TIMESTAMP_FORMAT = "%Y-%m-%d %H:%M:%S (UTC)"
CONVERT_TIMESTAMP_FORMAT = "%Y-%m-%d %H:%M:%S"

# Short names used in the status line; anything else falls back to the
# supported-currency list name, then to the code itself.
DISPLAY_NAMES: Dict[str, str] = {
    "TRY": "Lira",
    "EUR": "Euro",
    "USD": "US-Dollar",
    "GBP": "Pound",
    "CHF": "Franc",
    "JPY": "Yen",
    "CNY": "Yuan",
    "RUB": "Ruble",
    "INR": "Rupee",
    "BTC": "Bitcoin",
}
