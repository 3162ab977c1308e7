"""Core utilities and shared functionality."""

from portfolio_tracker.core.timezone import (
    now_ist,
    today_ist,
    to_ist,
    parse_datetime_ist,
    parse_provider_date,
    IST_TZ,
)
from portfolio_tracker.core.exceptions import (
    AppError,
    ValidationError,
    NotFoundError,
    LedgerReadError,
    ProviderError,
)

__all__ = [
    "now_ist",
    "today_ist",
    "to_ist",
    "parse_datetime_ist",
    "parse_provider_date",
    "IST_TZ",
    "AppError",
    "ValidationError",
    "NotFoundError",
    "LedgerReadError",
    "ProviderError",
]
