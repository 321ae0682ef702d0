"""
HTTP client for the patient API with bounded retry and exponential backoff.

Every request runs through a small state machine::

    ATTEMPTING --2xx + JSON body--------------------------> SUCCESS
    ATTEMPTING --429/500/503, network or body error------> WAITING   (budget left)
    ATTEMPTING --429/500/503, network or body error------> FATAL_ERROR (budget spent)
    ATTEMPTING --any other non-2xx------------------------> FATAL_ERROR
    WAITING    --sleep, double backoff (capped)-----------> ATTEMPTING

A 429 waits for the larger of its Retry-After header and the current
backoff. The credential header is attached to every request and cannot be
overridden by caller-supplied headers.
"""
import math
import time
from enum import Enum
from typing import Any, Callable, Dict, Optional

import httpx

from patient_risk.config.settings import PatientApiSettings
from patient_risk.utils.errors import HttpStatusError, PatientApiError, TransportFailure
from patient_risk.utils.logger import get_logger
from patient_risk.utils.sanitize import sanitize_text

logger = get_logger(__name__)


class RetryState(str, Enum):
    """States of a single logical request."""

    ATTEMPTING = "attempting"
    WAITING = "waiting"
    SUCCESS = "success"
    FATAL_ERROR = "fatal_error"


def parse_retry_after(value: Optional[str]) -> Optional[float]:
    """
    Parse a Retry-After header given in seconds.

    Returns:
        Seconds to wait, or None if the header is absent or not a
        non-negative number (HTTP-date values are ignored)
    """
    if value is None or not value.strip():
        return None
    try:
        seconds = float(value.strip())
    except ValueError:
        return None
    if not math.isfinite(seconds) or seconds < 0:
        return None
    return seconds


def is_retryable(error: PatientApiError) -> bool:
    if isinstance(error, TransportFailure):
        return True
    return isinstance(error, HttpStatusError) and error.retryable


class ResilientHttpClient:
    """Synchronous JSON client that retries transient patient API failures."""

    def __init__(
        self,
        settings: PatientApiSettings,
        client: Optional[httpx.Client] = None,
        sleep: Callable[[float], None] = time.sleep,
    ):
        """
        Initialize the client.

        Args:
            settings: API settings (credential, retry budget, backoff bounds)
            client: Optional pre-built httpx client; one is created (and
                closed by `close()`) when omitted
            sleep: Function used for backoff waits, in seconds
        """
        self.settings = settings
        self._owns_client = client is None
        self._client = client or httpx.Client(
            timeout=settings.timeout_seconds,
            follow_redirects=True,
        )
        self._sleep = sleep

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.close()

    def close(self) -> None:
        if self._owns_client:
            self._client.close()

    def _headers(self, headers: Optional[Dict[str, str]]) -> Dict[str, str]:
        credential = self.settings.api_key_header
        merged = {
            k: v for k, v in (headers or {}).items()
            if k.lower() != credential.lower()
        }
        merged[credential] = self.settings.api_key
        return merged

    def _attempt(self, method: str, url: str, headers: Dict[str, str], **kwargs: Any) -> Any:
        """Perform one HTTP exchange, raising a PatientApiError on any failure."""
        try:
            response = self._client.request(method, url, headers=headers, **kwargs)
        except httpx.HTTPError as e:
            raise TransportFailure(f"{method} {url} failed: {e}", url=url) from e

        if not response.is_success:
            raise HttpStatusError(
                response.status_code,
                body=response.text,
                url=url,
                retry_after_seconds=parse_retry_after(response.headers.get("retry-after")),
            )

        try:
            return response.json()
        except ValueError as e:
            raise TransportFailure(f"{method} {url} returned an unreadable body: {e}", url=url) from e

    def _wait_ms(self, error: PatientApiError, backoff_ms: int) -> float:
        if isinstance(error, HttpStatusError) and error.retry_after_seconds is not None:
            return max(error.retry_after_seconds * 1000, backoff_ms)
        return backoff_ms

    def request(
        self,
        method: str,
        url: str,
        headers: Optional[Dict[str, str]] = None,
        **kwargs: Any,
    ) -> Any:
        """
        Send a request and return the decoded JSON body.

        Args:
            method: HTTP method
            url: Absolute URL
            headers: Extra headers merged under the credential header
            **kwargs: Passed through to httpx (params, json, ...)

        Returns:
            Parsed JSON response body

        Raises:
            HttpStatusError: Non-retryable status, or a retryable one on the last attempt
            TransportFailure: Network or body errors on the last attempt
        """
        max_attempts = self.settings.max_retries + 1
        backoff_ms = self.settings.initial_backoff_ms
        merged_headers = self._headers(headers)

        state = RetryState.ATTEMPTING
        attempt = 0
        wait_ms = 0.0
        body: Any = None
        last_error: Optional[PatientApiError] = None

        while state in (RetryState.ATTEMPTING, RetryState.WAITING):
            if state is RetryState.ATTEMPTING:
                attempt += 1
                try:
                    body = self._attempt(method, url, merged_headers, **kwargs)
                    state = RetryState.SUCCESS
                except PatientApiError as e:
                    last_error = e
                    if not is_retryable(e):
                        logger.error(
                            "Patient API request failed",
                            method=method,
                            url=url,
                            status_code=e.status_code,
                            error=sanitize_text(e.message),
                        )
                        state = RetryState.FATAL_ERROR
                    elif attempt >= max_attempts:
                        logger.error(
                            "Patient API retry budget exhausted",
                            method=method,
                            url=url,
                            attempts=attempt,
                            error=sanitize_text(e.message),
                        )
                        state = RetryState.FATAL_ERROR
                    else:
                        wait_ms = self._wait_ms(e, backoff_ms)
                        state = RetryState.WAITING
            else:
                logger.warning(
                    "Retrying patient API request",
                    method=method,
                    url=url,
                    attempt=attempt,
                    wait_ms=wait_ms,
                    error=sanitize_text(last_error.message),
                )
                self._sleep(wait_ms / 1000.0)
                backoff_ms = min(backoff_ms * 2, self.settings.max_backoff_ms)
                state = RetryState.ATTEMPTING

        if state is RetryState.FATAL_ERROR:
            raise last_error

        logger.debug("Patient API request succeeded", method=method, url=url, attempts=attempt)
        return body

    def get_json(self, url: str, params: Optional[Dict[str, Any]] = None) -> Any:
        return self.request("GET", url, params=params)

    def post_json(self, url: str, payload: Any) -> Any:
        return self.request(
            "POST",
            url,
            headers={"Content-Type": "application/json"},
            json=payload,
        )
