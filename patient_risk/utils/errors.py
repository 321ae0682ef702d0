"""Custom exception classes."""
from typing import Optional

# Upper bound on how much of an error response body is kept
BODY_SNIPPET_LIMIT = 200

# Statuses treated as transient (rate limiting, server overload)
RETRYABLE_STATUS_CODES = frozenset({429, 500, 503})


class AppError(Exception):
    """Base application error."""

    def __init__(
        self,
        message: str,
        status_code: int = 500,
        code: Optional[str] = None,
        details: Optional[dict] = None,
    ):
        self.message = message
        self.status_code = status_code
        self.code = code or "APP_ERROR"
        self.details = details or {}
        super().__init__(self.message)


class ConfigurationError(AppError):
    """Invalid or missing configuration."""

    def __init__(self, message: str, details: Optional[dict] = None):
        super().__init__(
            message=message,
            status_code=500,
            code="CONFIGURATION_ERROR",
            details=details or {},
        )


class PatientApiError(AppError):
    """Base error for failures talking to the patient API."""


class HttpStatusError(PatientApiError):
    """The patient API answered with a non-2xx status."""

    def __init__(
        self,
        status_code: int,
        body: str = "",
        url: Optional[str] = None,
        retry_after_seconds: Optional[float] = None,
    ):
        self.body_snippet = (body or "")[:BODY_SNIPPET_LIMIT]
        self.url = url
        self.retry_after_seconds = retry_after_seconds
        super().__init__(
            message=f"HTTP {status_code}: {self.body_snippet}",
            status_code=status_code,
            code="HTTP_STATUS_ERROR",
            details={"url": url} if url else {},
        )

    @property
    def retryable(self) -> bool:
        """Whether the status is one the client backs off and retries on."""
        return self.status_code in RETRYABLE_STATUS_CODES


class TransportFailure(PatientApiError):
    """Network failure or undecodable response body."""

    def __init__(self, message: str, url: Optional[str] = None):
        super().__init__(
            message=message,
            status_code=502,
            code="TRANSPORT_FAILURE",
            details={"url": url} if url else {},
        )
