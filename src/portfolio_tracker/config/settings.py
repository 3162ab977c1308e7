"""Application settings and configuration."""

from pathlib import Path
from typing import Optional

from pydantic_settings import BaseSettings, SettingsConfigDict


def get_default_data_dir() -> Path:
    """Return the default data directory."""
    return Path.home() / ".portfolio-tracker"


class Settings(BaseSettings):
    """Application configuration loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    app_name: str = "Portfolio Growth Tracker"
    app_version: str = "0.1.0"

    # Data directory (SQLite database lives here)
    data_dir: Optional[Path] = None

    # Database URL (derived from data_dir if not set explicitly)
    database_url: Optional[str] = None

    log_level: str = "INFO"

    # Growth analysis
    lookback_days: int = 365
    history_fetch_workers: int = 1

    # Live price cache freshness; 0 disables cache reads
    live_price_cache_minutes: int = 15

    # External calls
    http_timeout_seconds: float = 10.0
    http_retries: int = 2
    master_refresh_hours: float = 24.0
    master_retry_seconds: int = 60
    session_cooldown_seconds: int = 300

    # Pricing
    currency: str = "INR"
    gold_fallback_rate: float = 7200.0
    home_exchange_suffix: str = ".NS"
    alternate_exchange_suffix: str = ".BO"
    yahoo_gold_symbol: str = "XAUINR=X"

    # Brokerage (Angel One SmartAPI) credentials
    smartapi_client_id: Optional[str] = None
    smartapi_password: Optional[str] = None
    smartapi_api_key: Optional[str] = None
    smartapi_totp_secret: Optional[str] = None

    # Provider endpoints
    smartapi_base_url: str = "https://apiconnect.angelone.in"
    scrip_master_url: str = (
        "https://margincalculator.angelbroking.com/OpenAPI_File/files/OpenAPIScripMaster.json"
    )
    amfi_nav_all_url: str = "https://www.amfiindia.com/spages/NAVAll.txt"
    mfapi_base_url: str = "https://api.mfapi.in"
    safegold_base_url: str = "https://www.safegold.com"

    def get_data_dir(self) -> Path:
        """Get the data directory, creating it if needed."""
        data_dir = self.data_dir or get_default_data_dir()
        data_dir.mkdir(parents=True, exist_ok=True)
        return data_dir

    def get_database_url(self) -> str:
        """Get database URL, deriving from data_dir if not set."""
        if self.database_url:
            return self.database_url
        db_path = self.get_data_dir() / "portfolio.db"
        return f"sqlite:///{db_path}"

    @property
    def smartapi_configured(self) -> bool:
        """True when every brokerage credential is present."""
        return all(
            (
                self.smartapi_client_id,
                self.smartapi_password,
                self.smartapi_api_key,
                self.smartapi_totp_secret,
            )
        )


# Global settings instance (can be replaced at runtime)
_settings: Optional[Settings] = None


def get_settings() -> Settings:
    """Return the current settings instance."""
    global _settings
    if _settings is None:
        _settings = Settings()
    return _settings


def set_settings(settings: Settings) -> None:
    """Set the global settings instance (used by tests)."""
    global _settings
    _settings = settings


def reset_settings() -> None:
    """Reset settings to force reload."""
    global _settings
    _settings = None
