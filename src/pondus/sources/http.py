"""HTTP session used by the API-backed sources."""

from __future__ import annotations

import logging
import time
from typing import Any

import requests
from requests.adapters import HTTPAdapter
from urllib3.util.retry import Retry

from pondus.shared.constants import Network
from pondus.shared.logging import log_api_call

logger = logging.getLogger(__name__)


def create_session() -> requests.Session:
    """Create a session with the pondus User-Agent and retries on 5xx."""
    session = requests.Session()

    retry_strategy = Retry(
        total=Network.MAX_RETRIES,
        status_forcelist=list(Network.RETRY_STATUS_CODES),
        backoff_factor=Network.BACKOFF_FACTOR,
        allowed_methods=["HEAD", "GET", "OPTIONS"],
        raise_on_status=False,
    )
    adapter = HTTPAdapter(max_retries=retry_strategy)

    session.headers["User-Agent"] = Network.USER_AGENT
    session.mount("https://", adapter)
    session.mount("http://", adapter)

    return session


def http_error_reason(error: requests.HTTPError) -> str:
    """Render an HTTP failure as ``"HTTP 404 Not Found"``."""
    response = error.response
    if response is None:
        return f"HTTP error: {error}"
    reason = (response.reason or "").strip()
    return f"HTTP {response.status_code} {reason}".rstrip()


class HttpClient:
    """Thin wrapper over a ``requests.Session`` with a fixed timeout.

    Every call is logged through ``log_api_call``. Non-2xx responses raise
    ``requests.HTTPError``.
    """

    def __init__(self, timeout: float, session: requests.Session | None = None) -> None:
        self.timeout = timeout
        self.session = session or create_session()

    def __enter__(self) -> HttpClient:
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()

    def close(self) -> None:
        self.session.close()

    def get(
        self,
        url: str,
        *,
        params: dict[str, Any] | None = None,
        headers: dict[str, str] | None = None,
    ) -> requests.Response:
        start = time.perf_counter()
        response = self.session.get(url, params=params, headers=headers, timeout=self.timeout)
        log_api_call(
            logger,
            url,
            "GET",
            status_code=response.status_code,
            duration_ms=(time.perf_counter() - start) * 1000,
        )
        response.raise_for_status()
        return response

    def get_json(
        self,
        url: str,
        *,
        params: dict[str, Any] | None = None,
        headers: dict[str, str] | None = None,
    ) -> Any:
        merged = {"Accept": Network.ACCEPT_JSON, **(headers or {})}
        return self.get(url, params=params, headers=merged).json()

    def get_text(self, url: str) -> str:
        return self.get(url).text
