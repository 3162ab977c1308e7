"""SafeGold client: daily 24K gold rate history and the live buy rate."""

import logging
import re
from datetime import date
from decimal import Decimal
from typing import Optional

from bs4 import BeautifulSoup

from portfolio_tracker.config.settings import get_settings
from portfolio_tracker.core.exceptions import ProviderError
from portfolio_tracker.core.timezone import parse_provider_date
from portfolio_tracker.providers.base import PriceSeries, to_price
from portfolio_tracker.providers.http_client import BROWSER_HEADERS, HttpClient

logger = logging.getLogger(__name__)

PROVIDER = "safegold"

# The homepage embeds the base buy price as: var bp = "13916.09";
_BASE_PRICE_RE = re.compile(r"""var\s+bp\s*=\s*["']([0-9.]+)["']""")
_AMOUNT_RE = re.compile(r"([0-9,]+(?:\.[0-9]{1,2})?)")
_RUPEE_AMOUNT_RE = re.compile(r"₹\s*([0-9,]+(?:\.[0-9]{1,2})?)")

# Plausible INR per gram; anything outside is a scrape error
MIN_RATE = Decimal("5000")
MAX_RATE = Decimal("20000")


class SafeGoldClient:
    def __init__(self, http: Optional[HttpClient] = None, base_url: Optional[str] = None):
        self._http = http or HttpClient(PROVIDER)
        self._base_url = (base_url or get_settings().safegold_base_url).rstrip("/")

    def fetch_gold_history(self, start: date, end: date) -> PriceSeries:
        """Daily rate per gram over [start, end]; raises ProviderError if none."""
        payload = self._http.get_json(
            f"{self._base_url}/user-trends/gold-rates",
            params={
                "start_date": start.isoformat(),
                "end_date": end.isoformat(),
                "frequency": "d",
            },
            headers=BROWSER_HEADERS,
        )
        rows = payload.get("data") if isinstance(payload, dict) else None
        if not rows:
            raise ProviderError(PROVIDER, f"no gold rates between {start} and {end}")

        series: PriceSeries = {}
        for row in rows:
            try:
                day = parse_provider_date(row["date"])
                rate = to_price(row["rate"])
            except (KeyError, TypeError, ValueError):
                continue
            if rate > 0:
                series[day] = rate

        if not series:
            raise ProviderError(PROVIDER, "gold rate payload had no usable rows")
        logger.info("Fetched %d gold rate points from SafeGold", len(series))
        return series

    def fetch_live_rate(self) -> Decimal:
        """Scrape the current 24K buy rate per gram from the homepage."""
        html = self._http.get_text(f"{self._base_url}/", headers=BROWSER_HEADERS)
        return parse_live_rate(html)


def parse_live_rate(html: str) -> Decimal:
    """
    Extract the 24K buy rate per gram from the homepage.

    Tried in order: the embedded ``var bp`` script variable, the
    ``.livePrice_buy h4 span`` element, then the first rupee amount in the
    page text. Only values within [MIN_RATE, MAX_RATE] are accepted.
    """
    match = _BASE_PRICE_RE.search(html)
    if match:
        rate = _plausible(match.group(1))
        if rate is not None:
            logger.debug("SafeGold rate from script variable: %s", rate)
            return rate

    soup = BeautifulSoup(html, "html.parser")

    element = soup.select_one(".livePrice_buy h4 span")
    if element is not None:
        amount = _AMOUNT_RE.search(element.get_text(strip=True))
        rate = _plausible(amount.group(1)) if amount else None
        if rate is not None:
            logger.debug("SafeGold rate from live price element: %s", rate)
            return rate

    for amount in _RUPEE_AMOUNT_RE.finditer(soup.get_text(" ", strip=True)):
        rate = _plausible(amount.group(1))
        if rate is not None:
            logger.debug("SafeGold rate from page text: %s", rate)
            return rate

    raise ProviderError(PROVIDER, "no plausible gold rate found on page")


def _plausible(raw: str) -> Optional[Decimal]:
    try:
        rate = to_price(raw)
    except ValueError:
        return None
    return rate if MIN_RATE <= rate <= MAX_RATE else None
