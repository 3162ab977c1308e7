"""Shared HTTP session for JSON/text price providers."""

import logging
from typing import Any, Optional

import requests
from requests.adapters import HTTPAdapter
from urllib3.util.retry import Retry

from portfolio_tracker.config.settings import get_settings
from portfolio_tracker.core.exceptions import ProviderError

logger = logging.getLogger(__name__)

BROWSER_HEADERS = {
    "User-Agent": (
        "Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36 "
        "(KHTML, like Gecko) Chrome/120.0 Safari/537.36"
    ),
    "Accept": "text/html,application/xhtml+xml,application/json;q=0.9,*/*;q=0.8",
    "Accept-Language": "en-US,en;q=0.5",
}


def make_session(retries: Optional[int] = None) -> requests.Session:
    """Build a requests session that retries idempotent calls on 429/5xx."""
    if retries is None:
        retries = get_settings().http_retries
    session = requests.Session()
    retry = Retry(
        total=retries,
        backoff_factor=0.4,
        status_forcelist=[429, 500, 502, 503, 504],
        allowed_methods=["GET"],
        raise_on_status=False,
    )
    adapter = HTTPAdapter(max_retries=retry)
    session.mount("http://", adapter)
    session.mount("https://", adapter)
    return session


class HttpClient:
    """
    Thin wrapper over a requests session.

    Every call is bounded by a timeout; any transport error, HTTP error status
    or undecodable body is raised as ProviderError tagged with the provider name.
    """

    def __init__(
        self,
        provider: str,
        session: Optional[requests.Session] = None,
        timeout: Optional[float] = None,
    ):
        self._provider = provider
        self._session = session or make_session()
        self._timeout = timeout if timeout is not None else get_settings().http_timeout_seconds

    @property
    def provider(self) -> str:
        return self._provider

    def get_json(self, url: str, params: Optional[dict] = None, headers: Optional[dict] = None) -> Any:
        response = self._request("GET", url, params=params, headers=headers)
        return self._decode_json(response)

    def post_json(self, url: str, payload: dict, headers: Optional[dict] = None) -> Any:
        response = self._request("POST", url, json=payload, headers=headers)
        return self._decode_json(response)

    def get_text(self, url: str, params: Optional[dict] = None, headers: Optional[dict] = None) -> str:
        response = self._request("GET", url, params=params, headers=headers)
        return response.text or ""

    def _request(self, method: str, url: str, **kwargs) -> requests.Response:
        try:
            response = self._session.request(method, url, timeout=self._timeout, **kwargs)
        except requests.RequestException as e:
            raise ProviderError(self._provider, f"{method} {url} failed: {e}") from e

        if response.status_code >= 400:
            raise ProviderError(self._provider, f"{method} {url} returned HTTP {response.status_code}")

        logger.debug("%s %s -> %s", method, url, response.status_code)
        return response

    def _decode_json(self, response: requests.Response) -> Any:
        try:
            return response.json()
        except ValueError as e:
            raise ProviderError(self._provider, f"invalid JSON from {response.url}") from e
