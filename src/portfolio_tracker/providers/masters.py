"""
Symbol master downloads.

- Angel One OpenAPI scrip master: JSON list of
  {"token", "symbol", "name", "exch_seg", ...} used to map an equity symbol
  to a (token, exchange) pair for the candle API.
- AMFI NAVAll.txt: ';'-separated scheme rows carrying one or two ISINs, used
  to map a fund ISIN to its AMFI scheme code.
"""

import logging
import re
from dataclasses import dataclass
from typing import Optional

from portfolio_tracker.config.settings import get_settings
from portfolio_tracker.core.exceptions import ProviderError
from portfolio_tracker.providers.http_client import HttpClient

logger = logging.getLogger(__name__)

ISIN_RE = re.compile(r"^INF[A-Z0-9]{9}$")

_EQUITY_EXCHANGES = ("NSE", "BSE")


@dataclass(frozen=True)
class ExchangeToken:
    """Brokerage instrument token on one exchange segment."""

    token: str
    exchange: str


class ScripIndex:
    """
    Lookup structure over the scrip master.

    Resolution order: NSE "<SYMBOL>-EQ", then BSE exact symbol, then the
    first NSE/BSE row whose name contains the symbol.
    """

    def __init__(self, rows: list[dict]):
        self._nse_eq: dict[str, ExchangeToken] = {}
        self._bse: dict[str, ExchangeToken] = {}
        self._names: list[tuple[str, ExchangeToken]] = []

        for row in rows:
            try:
                exchange = str(row["exch_seg"]).upper()
                symbol = str(row["symbol"]).upper()
                token = str(row["token"])
            except (KeyError, TypeError):
                continue
            if exchange not in _EQUITY_EXCHANGES:
                continue
            entry = ExchangeToken(token=token, exchange=exchange)
            if exchange == "NSE" and symbol.endswith("-EQ"):
                self._nse_eq.setdefault(symbol, entry)
            elif exchange == "BSE":
                self._bse.setdefault(symbol, entry)
            self._names.append((str(row.get("name") or "").upper(), entry))

    def __len__(self) -> int:
        return len(self._names)

    def lookup(self, symbol: str) -> Optional[ExchangeToken]:
        key = symbol.strip().upper()
        if not key:
            return None
        found = self._nse_eq.get(f"{key}-EQ") or self._bse.get(key)
        if found:
            return found
        for name, entry in self._names:
            if key in name:
                return entry
        return None


def parse_amfi_nav_all(text: str) -> dict[str, str]:
    """Map every ISIN found in NAVAll.txt to the scheme code in the row's first field."""
    mapping: dict[str, str] = {}
    for line in text.splitlines():
        parts = line.split(";")
        if len(parts) < 4:
            continue
        code = parts[0].strip()
        if not code:
            continue
        for field in parts:
            value = field.strip()
            if ISIN_RE.match(value):
                mapping[value] = code
    return mapping


def download_scrip_master(http: Optional[HttpClient] = None, url: Optional[str] = None) -> ScripIndex:
    http = http or HttpClient("scrip-master")
    url = url or get_settings().scrip_master_url
    rows = http.get_json(url)
    if not isinstance(rows, list) or not rows:
        raise ProviderError(http.provider, "scrip master is empty or malformed")
    index = ScripIndex(rows)
    logger.info("Loaded scrip master: %d equity instruments", len(index))
    return index


def download_amfi_map(http: Optional[HttpClient] = None, url: Optional[str] = None) -> dict[str, str]:
    http = http or HttpClient("amfi")
    url = url or get_settings().amfi_nav_all_url
    mapping = parse_amfi_nav_all(http.get_text(url))
    if not mapping:
        raise ProviderError(http.provider, "NAVAll.txt contained no ISIN mappings")
    logger.info("Loaded AMFI master: %d ISIN mappings", len(mapping))
    return mapping
