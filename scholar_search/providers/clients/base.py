"""Shared HTTP client utilities with retry and error handling."""

from __future__ import annotations

import logging
from datetime import datetime, timezone
from email.utils import parsedate_to_datetime
from typing import Any, Dict, Optional

import requests
from tenacity import (
    RetryCallState,
    Retrying,
    retry_if_exception_type,
    stop_after_attempt,
    wait_exponential,
)

from scholar_search.providers.proxy import Proxy

logger = logging.getLogger(__name__)

DEFAULT_HEADERS: Dict[str, str] = {
    "User-Agent": "scholar-search",
    "Accept": "application/json",
}

RETRYABLE_STATUS_CODES = {429, 500, 502, 503, 504}

_shared_session: Optional[requests.Session] = None


class ClientError(Exception):
    """Base exception for upstream source failures."""

    def __init__(self, message: str, *, source: str = "") -> None:
        super().__init__(message)
        self.message = message
        self.source = source


class TransportError(ClientError):
    """Raised when the request cannot complete (network unreachable, proxy down)."""


class RetrievalError(ClientError):
    """Raised when the upstream signals a non-success status."""

    def __init__(
        self,
        message: str,
        *,
        source: str = "",
        status: Optional[int] = None,
        body_excerpt: Optional[str] = None,
    ) -> None:
        super().__init__(message, source=source)
        self.status = status
        self.body_excerpt = body_excerpt


class RateLimitedError(RetrievalError):
    """Raised when the upstream service responds with a rate limit (HTTP 429)."""

    def __init__(self, message: str, *, source: str = "", retry_after: Optional[float] = None) -> None:
        super().__init__(message, source=source, status=429)
        self.retry_after = retry_after


class ParseError(ClientError):
    """Raised when a response body cannot be read under the expected schema."""


class RetryableResponseError(Exception):
    """Internal exception used to trigger retries for retryable responses."""

    def __init__(self, response: requests.Response):
        super().__init__("Retryable response received")
        self.response = response


def _get_shared_session() -> requests.Session:
    """Return a shared :class:`requests.Session` with default headers."""

    global _shared_session
    if _shared_session is None:
        _shared_session = requests.Session()
        _shared_session.headers.update(DEFAULT_HEADERS)
    return _shared_session


def _parse_retry_after(value: Optional[str]) -> Optional[float]:
    if not value:
        return None

    if value.isdigit():
        return float(value)

    try:
        retry_time = parsedate_to_datetime(value)
    except (TypeError, ValueError):
        return None

    if retry_time is None:
        return None

    if retry_time.tzinfo is None:
        retry_time = retry_time.replace(tzinfo=timezone.utc)

    delay = (retry_time - datetime.now(timezone.utc)).total_seconds()
    return max(delay, 0.0)


_fallback_wait = wait_exponential(multiplier=0.5, min=0.5, max=8)

_BODY_EXCERPT_LIMIT = 200


def _retry_wait(retry_state: RetryCallState) -> float:
    """Custom wait strategy honoring Retry-After headers when available."""

    wait_seconds: Optional[float] = None
    if retry_state.outcome is not None and retry_state.outcome.failed:
        exception = retry_state.outcome.exception()
        if isinstance(exception, RetryableResponseError):
            wait_seconds = _parse_retry_after(exception.response.headers.get("Retry-After"))

    if wait_seconds is not None:
        return wait_seconds

    return _fallback_wait(retry_state)


def _sanitize_excerpt(text: str, max_length: int) -> str:
    cleaned = " ".join(text.split())
    return cleaned[:max_length]


def _get_body_excerpt(response: requests.Response) -> Optional[str]:
    try:
        body_text = response.text
    except (UnicodeDecodeError, LookupError):
        return None

    if not body_text:
        return None

    return _sanitize_excerpt(body_text, _BODY_EXCERPT_LIMIT)


class BaseHttpClient:
    """Base class providing shared HTTP behavior for source clients.

    ``max_attempts`` defaults to a single attempt: failures surface immediately
    and the aggregator reports them per source. Raise it to retry 429/5xx
    responses and transport errors with exponential backoff.
    """

    BASE_URL = ""
    SOURCE = ""

    def __init__(
        self,
        *,
        session: Optional[requests.Session] = None,
        base_url: Optional[str] = None,
        timeout: float = 30.0,
        proxy: Optional[Proxy] = None,
        max_attempts: int = 1,
        source: Optional[str] = None,
    ) -> None:
        self.session = session or _get_shared_session()
        self.base_url = base_url or self.BASE_URL
        self.timeout = timeout
        self.proxy = proxy
        self.max_attempts = max(1, max_attempts)
        self.source = source or self.SOURCE

    def _build_url(self, path: str, params: Optional[Dict[str, Any]]) -> tuple[str, Optional[Dict[str, Any]]]:
        url = f"{self.base_url}{path}"
        if self.proxy is None:
            return url, params

        # The relay receives the complete target URL, query string included.
        prepared = requests.Request("GET", url, params=params).prepare()
        return self.proxy(prepared.url or url), None

    def _send(self, method: str, url: str, **kwargs: Any) -> requests.Response:
        response = self.session.request(method, url, timeout=self.timeout, **kwargs)
        if response.status_code in RETRYABLE_STATUS_CODES:
            raise RetryableResponseError(response)
        return response

    def _send_with_retries(self, method: str, url: str, **kwargs: Any) -> requests.Response:
        retrying = Retrying(
            reraise=True,
            stop=stop_after_attempt(self.max_attempts),
            wait=_retry_wait,
            retry=retry_if_exception_type((requests.RequestException, RetryableResponseError)),
        )
        return retrying(self._send, method, url, **kwargs)

    def _request(
        self,
        method: str,
        path: str,
        *,
        params: Optional[Dict[str, Any]] = None,
        headers: Optional[Dict[str, str]] = None,
        **kwargs: Any,
    ) -> requests.Response:
        url, params = self._build_url(path, params)
        logger.debug("%s request: %s %s params=%s", self.source or "http", method, url, params)
        try:
            response = self._send_with_retries(method, url, params=params, headers=headers, **kwargs)
        except RetryableResponseError as exc:
            response = exc.response
        except requests.RequestException as exc:
            raise TransportError(f"Request failed: {exc}", source=self.source) from exc

        return self._handle_response(response)

    def _handle_response(self, response: requests.Response) -> requests.Response:
        status = response.status_code
        if 200 <= status < 300:
            return response

        excerpt = _get_body_excerpt(response)
        logger.warning(
            "%s responded with status=%s excerpt=%s", self.source or "upstream", status, excerpt
        )
        if status == 429:
            retry_after = _parse_retry_after(response.headers.get("Retry-After"))
            raise RateLimitedError(
                f"Error querying {self.source or 'upstream'}: rate limit exceeded (429)",
                source=self.source,
                retry_after=retry_after,
            )

        reason = "upstream service error" if status >= 500 else "request rejected"
        raise RetrievalError(
            f"Error querying {self.source or 'upstream'}: {reason} ({status})",
            source=self.source,
            status=status,
            body_excerpt=excerpt,
        )


__all__ = [
    "BaseHttpClient",
    "ClientError",
    "ParseError",
    "RateLimitedError",
    "RetrievalError",
    "TransportError",
]
