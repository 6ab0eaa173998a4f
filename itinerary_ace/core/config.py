from functools import lru_cache
from pathlib import Path
from typing import Optional

from pydantic import AnyHttpUrl
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment with defaults.

    Environment variable mapping follows pydantic's rules (e.g., APP_NAME, DEBUG,
    DATA_DIR, DB_FILENAME, EXCHANGE_RATE_PROVIDER, EXCHANGERATE_API_KEY).
    """

    model_config = SettingsConfigDict(
        env_file=".env", case_sensitive=False, extra="ignore"
    )

    # Basic app metadata
    app_name: str = "Itinerary Ace"
    debug: bool = True
    version: str = "0.1.0"

    # Data & persistence
    data_dir: Path = Path("data")
    db_filename: str = "itinerary_ace.sqlite3"
    db_path: Optional[Path] = None  # derived if not provided

    # Exchange rates: "exchangerate-api" needs EXCHANGERATE_API_KEY, "static" serves built-in defaults
    exchange_rate_provider: str = "exchangerate-api"
    exchange_api_base_url: AnyHttpUrl = "https://v6.exchangerate-api.com/v6"
    exchangerate_api_key: Optional[str] = None
    http_timeout_seconds: float = 5.0
    refresh_rates_on_startup: bool = False
    reference_currency: str = "USD"

    def init_post_load(self) -> None:
        """Finalize derived fields and ensure directories exist."""
        if self.db_path is None:
            self.db_path = self.data_dir / self.db_filename
        self.data_dir.mkdir(parents=True, exist_ok=True)
        allowed = {"exchangerate-api", "static"}
        if self.exchange_rate_provider not in allowed:
            raise ValueError(
                f"Unsupported exchange_rate_provider '{self.exchange_rate_provider}'. Allowed: {allowed}"
            )
        self.reference_currency = self.reference_currency.upper()
        if len(self.reference_currency) != 3:
            raise ValueError(
                f"Unsupported reference_currency '{self.reference_currency}'"
            )

    @property
    def has_exchange_api_key(self) -> bool:
        key = (self.exchangerate_api_key or "").strip()
        return bool(key) and key != "YOUR_EXCHANGERATE_API_KEY_HERE"


@lru_cache
def get_settings() -> Settings:
    settings = Settings()
    settings.init_post_load()
    return settings
