"""mfapi.in client: full NAV history per AMFI scheme code."""

import logging
from decimal import Decimal
from typing import Optional

from portfolio_tracker.config.settings import get_settings
from portfolio_tracker.core.exceptions import ProviderError
from portfolio_tracker.core.timezone import parse_provider_date
from portfolio_tracker.providers.base import PriceSeries, to_price
from portfolio_tracker.providers.http_client import HttpClient

logger = logging.getLogger(__name__)

PROVIDER = "mfapi"


class MfApiClient:
    """Reads /mf/{scheme_code}: {"data": [{"date": "dd-mm-yyyy", "nav": "..."}]}, newest first."""

    def __init__(self, http: Optional[HttpClient] = None, base_url: Optional[str] = None):
        self._http = http or HttpClient(PROVIDER)
        self._base_url = (base_url or get_settings().mfapi_base_url).rstrip("/")

    def fetch_nav_history(self, scheme_code: str) -> PriceSeries:
        """Every published NAV for the scheme; raises ProviderError if none parse."""
        payload = self._http.get_json(f"{self._base_url}/mf/{scheme_code}")
        rows = payload.get("data") if isinstance(payload, dict) else None
        if not rows:
            raise ProviderError(PROVIDER, f"no NAV data for scheme {scheme_code}")

        series: PriceSeries = {}
        for row in rows:
            try:
                day = parse_provider_date(row["date"], dayfirst=True)
                nav = to_price(row["nav"])
            except (KeyError, TypeError, ValueError):
                logger.debug("Skipping unparseable NAV row for %s: %r", scheme_code, row)
                continue
            if nav > 0:
                series[day] = nav

        if not series:
            raise ProviderError(PROVIDER, f"no usable NAV rows for scheme {scheme_code}")
        return series

    def fetch_latest_nav(self, scheme_code: str) -> Decimal:
        """Most recent NAV for the scheme."""
        series = self.fetch_nav_history(scheme_code)
        return series[max(series)]
