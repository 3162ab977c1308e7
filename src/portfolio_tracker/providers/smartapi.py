"""
Angel One SmartAPI: session management and historical candles.

SmartApiSession is a process-wide service. Login is lazy and single-flight:
concurrent callers block on the lock and reuse the session the first caller
obtained. After a failed login no further attempt is made until the cooldown
has elapsed.
"""

import logging
import threading
import time
from datetime import date
from typing import Callable, Optional

import pyotp

from portfolio_tracker.config.settings import Settings, get_settings
from portfolio_tracker.core.exceptions import ProviderError
from portfolio_tracker.core.timezone import parse_provider_date
from portfolio_tracker.providers.base import PriceSeries, to_price
from portfolio_tracker.providers.http_client import HttpClient
from portfolio_tracker.providers.masters import ExchangeToken

logger = logging.getLogger(__name__)

PROVIDER = "smartapi"

LOGIN_PATH = "/rest/auth/angelbroking/user/v1/loginByPassword"
CANDLE_PATH = "/rest/secure/angelbroking/historical/v1/getCandleData"

# Candle rows are [timestamp, open, high, low, close, volume]
_CLOSE_INDEX = 4

TOTP_RETRY_DELAY_SECONDS = 1.0


def _base_headers(api_key: str) -> dict:
    return {
        "Content-Type": "application/json",
        "Accept": "application/json",
        "X-UserType": "USER",
        "X-SourceID": "WEB",
        "X-ClientLocalIP": "127.0.0.1",
        "X-ClientPublicIP": "127.0.0.1",
        "X-MACAddress": "00:00:00:00:00:00",
        "X-PrivateKey": api_key,
    }


class SmartApiSession:
    """Lazily acquired SmartAPI JWT with failure cooldown."""

    def __init__(
        self,
        settings: Optional[Settings] = None,
        http: Optional[HttpClient] = None,
        clock: Callable[[], float] = time.monotonic,
        sleep: Callable[[float], None] = time.sleep,
    ):
        self._settings = settings or get_settings()
        self._http = http or HttpClient(PROVIDER)
        self._clock = clock
        self._sleep = sleep
        self._lock = threading.Lock()
        self._jwt: Optional[str] = None
        self._last_failed_at: Optional[float] = None
        self.login_attempts = 0

    @property
    def configured(self) -> bool:
        return self._settings.smartapi_configured

    @property
    def base_url(self) -> str:
        return self._settings.smartapi_base_url.rstrip("/")

    @property
    def last_failed_at(self) -> Optional[float]:
        return self._last_failed_at

    def get_token(self) -> Optional[str]:
        """Return a valid JWT, logging in if needed; None when unavailable."""
        if self._jwt:
            return self._jwt
        if not self.configured:
            logger.debug("SmartAPI credentials not configured")
            return None

        with self._lock:
            # Another caller may have logged in while we waited
            if self._jwt:
                return self._jwt
            if self._in_cooldown():
                logger.warning("Skipping SmartAPI login: last attempt failed recently")
                return None

            try:
                self._jwt = self._login(retry_totp=True)
                self._last_failed_at = None
                logger.info("SmartAPI session generated")
            except ProviderError as e:
                self._last_failed_at = self._clock()
                logger.warning("SmartAPI login failed: %s", e.message)
            return self._jwt

    def invalidate(self) -> None:
        """Drop the current JWT so the next caller logs in again."""
        with self._lock:
            self._jwt = None

    def headers(self, jwt: str) -> dict:
        headers = _base_headers(self._settings.smartapi_api_key or "")
        headers["Authorization"] = f"Bearer {jwt}"
        return headers

    def _in_cooldown(self) -> bool:
        if self._last_failed_at is None:
            return False
        elapsed = self._clock() - self._last_failed_at
        return elapsed < self._settings.session_cooldown_seconds

    def _login(self, retry_totp: bool) -> str:
        self.login_attempts += 1
        s = self._settings
        try:
            totp = pyotp.TOTP(s.smartapi_totp_secret).now()
        except (TypeError, ValueError) as e:
            # binascii.Error for a secret that is not base32
            raise ProviderError(PROVIDER, "invalid TOTP secret") from e
        payload = {
            "clientcode": s.smartapi_client_id,
            "password": s.smartapi_password,
            "totp": totp,
        }
        body = self._http.post_json(
            f"{self.base_url}{LOGIN_PATH}",
            payload,
            headers=_base_headers(s.smartapi_api_key or ""),
        )
        if isinstance(body, dict) and body.get("status") and body.get("data"):
            jwt = body["data"].get("jwtToken")
            if jwt:
                return jwt

        message = (body.get("message") if isinstance(body, dict) else None) or "unknown error"
        # TOTP codes are time-windowed; one retry on the next code
        if retry_totp and "totp" in message.lower():
            logger.info("SmartAPI rejected TOTP, retrying in %.0fs", TOTP_RETRY_DELAY_SECONDS)
            self._sleep(TOTP_RETRY_DELAY_SECONDS)
            return self._login(retry_totp=False)
        raise ProviderError(PROVIDER, f"login rejected: {message}")


class SmartApiClient:
    """Historical daily candles for a mapped exchange token."""

    def __init__(self, session: SmartApiSession, http: Optional[HttpClient] = None):
        self._session = session
        self._http = http or HttpClient(PROVIDER)

    def fetch_candles(self, token: ExchangeToken, start: date, end: date) -> PriceSeries:
        """Daily closes over [start, end]; raises ProviderError if none."""
        jwt = self._session.get_token()
        if not jwt:
            raise ProviderError(PROVIDER, "no session available")

        body = self._http.post_json(
            f"{self._session.base_url}{CANDLE_PATH}",
            {
                "exchange": token.exchange,
                "symboltoken": token.token,
                "interval": "ONE_DAY",
                "fromdate": f"{start.isoformat()} 09:15",
                "todate": f"{end.isoformat()} 15:30",
            },
            headers=self._session.headers(jwt),
        )

        if not isinstance(body, dict) or not body.get("status"):
            message = body.get("message") if isinstance(body, dict) else "malformed response"
            if isinstance(body, dict) and str(body.get("errorcode", "")).startswith("AG80"):
                # Expired or invalid token
                self._session.invalidate()
            raise ProviderError(PROVIDER, f"candle request for {token.token} failed: {message}")

        series: PriceSeries = {}
        for row in body.get("data") or []:
            try:
                day = parse_provider_date(row[0])
                close = to_price(row[_CLOSE_INDEX])
            except (IndexError, TypeError, ValueError):
                continue
            if close > 0:
                series[day] = close

        if not series:
            raise ProviderError(PROVIDER, f"no candles for token {token.token} ({token.exchange})")
        logger.info("Fetched %d candles for token %s (%s)", len(series), token.token, token.exchange)
        return series
