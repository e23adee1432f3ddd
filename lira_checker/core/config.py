from functools import lru_cache
from pathlib import Path
from typing import List, Tuple

from pydantic_settings import BaseSettings, SettingsConfigDict

_PACKAGE_DIR = Path(__file__).resolve().parent.parent

ALLOWED_RATE_PROVIDERS = {"fastforex", "static"}


class Settings(BaseSettings):
    """Application settings loaded from environment with defaults.

    Environment variable mapping follows pydantic's rules (e.g., BIND, CURRENCY_API_TOKEN,
    REFRESH_INTERVAL_SECONDS, STATUS_BASE_CURRENCY, TRACKED_CURRENCIES).
    """

    model_config = SettingsConfigDict(env_file=".env", case_sensitive=False)

    # Basic app metadata
    app_name: str = "Lira Checker"
    debug: bool = False
    version: str = "0.1.0"

    # Server
    bind: str = "0.0.0.0:8080"

    # Rate provider
    exchange_rate_provider: str = "fastforex"
    currency_api_token: str = ""
    currency_api_base_url: str = "https://api.fastforex.io"
    http_timeout_seconds: float = 10.0
    http_retries: int = 0
    http_backoff_seconds: float = 0.5

    # Refresh schedule
    enable_scheduler: bool = True
    refresh_interval_seconds: float = 30.0

    # Currencies
    status_base_currency: str = "TRY"
    status_default_targets: List[str] = ["EUR", "USD"]
    tracked_currencies: List[str] = ["TRY"]
    supported_currencies_path: Path = _PACKAGE_DIR / "data" / "supported_currencies.json"

    def init_post_load(self) -> None:
        """Normalize currency codes and validate provider / schedule values."""
        self.status_base_currency = self.status_base_currency.strip().upper()
        self.status_default_targets = [
            c.strip().upper() for c in self.status_default_targets if c.strip()
        ]
        tracked = [c.strip().upper() for c in self.tracked_currencies if c.strip()]
        # The status base is always refreshed
        if self.status_base_currency not in tracked:
            tracked.insert(0, self.status_base_currency)
        self.tracked_currencies = list(dict.fromkeys(tracked))

        if self.exchange_rate_provider not in ALLOWED_RATE_PROVIDERS:
            raise ValueError(
                f"Unsupported exchange_rate_provider '{self.exchange_rate_provider}'. Allowed: {ALLOWED_RATE_PROVIDERS}"
            )
        if self.exchange_rate_provider == "fastforex" and not self.currency_api_token:
            raise ValueError("CURRENCY_API_TOKEN is required for the fastforex provider")
        if self.refresh_interval_seconds <= 0:
            raise ValueError("refresh_interval_seconds must be positive")
        if self.http_timeout_seconds <= 0:
            raise ValueError("http_timeout_seconds must be positive")
        if self.http_retries < 0:
            raise ValueError("http_retries must not be negative")
        self.bind_address()

    def bind_address(self) -> Tuple[str, int]:
        """Split BIND ('host:port') into its parts."""
        host, sep, port = self.bind.rpartition(":")
        if not sep or not host or not port.isdigit():
            raise ValueError(f"Invalid bind address '{self.bind}', expected host:port")
        port_no = int(port)
        if not 0 < port_no < 65536:
            raise ValueError(f"Invalid bind port {port_no}")
        return host.strip("[]"), port_no


@lru_cache
def get_settings() -> Settings:
    settings = Settings()
    settings.init_post_load()
    return settings
