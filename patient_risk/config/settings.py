"""Patient API client configuration.

All values can be set through environment variables (or a local `.env`
file). The resulting settings object is passed explicitly to the HTTP
client and the paginator; nothing reads configuration from module state.
"""
from typing import Any, Optional

from pydantic import Field, ValidationError, field_validator
from pydantic_settings import BaseSettings

from patient_risk.utils.errors import ConfigurationError

DEFAULT_BASE_URL = "https://assessment.ksensetech.com/api"

# The remote API rejects page sizes above this
MAX_PAGE_SIZE = 20


class PatientApiSettings(BaseSettings):
    """Connection, paging and retry settings for the patient API."""

    api_key: str = Field(..., alias="API_KEY")
    api_key_header: str = Field("x-api-key", alias="PATIENT_API_KEY_HEADER")
    base_url: str = Field(DEFAULT_BASE_URL, alias="PATIENT_API_BASE_URL")

    # Paging
    page_size: int = Field(MAX_PAGE_SIZE, alias="PATIENT_API_PAGE_SIZE", ge=1, le=MAX_PAGE_SIZE)
    page_delay_ms: int = Field(120, alias="PATIENT_API_PAGE_DELAY_MS", ge=0)

    # Retry / backoff
    max_retries: int = Field(8, alias="PATIENT_API_MAX_RETRIES", ge=0)
    initial_backoff_ms: int = Field(300, alias="PATIENT_API_INITIAL_BACKOFF_MS", ge=0)
    max_backoff_ms: int = Field(5000, alias="PATIENT_API_MAX_BACKOFF_MS", ge=0)
    timeout_seconds: float = Field(30.0, alias="PATIENT_API_TIMEOUT_SECONDS", gt=0)

    # Logging
    log_level: str = Field("INFO", alias="LOG_LEVEL")
    log_format: str = Field("console", alias="LOG_FORMAT")
    log_file: Optional[str] = Field(None, alias="LOG_FILE")

    class Config:
        env_file = ".env"
        case_sensitive = False
        extra = "ignore"
        populate_by_name = True  # Allow both field name and alias

    @field_validator("api_key")
    @classmethod
    def api_key_not_blank(cls, v: str) -> str:
        if not v or not v.strip():
            raise ValueError("API key must not be blank")
        return v.strip()

    @field_validator("base_url")
    @classmethod
    def strip_trailing_slash(cls, v: str) -> str:
        if not v or not v.strip():
            raise ValueError("Base URL must not be blank")
        return v.strip().rstrip("/")

    @field_validator("log_format")
    @classmethod
    def known_log_format(cls, v: str) -> str:
        v = v.strip().lower()
        if v not in ("json", "console"):
            raise ValueError("LOG_FORMAT must be 'json' or 'console'")
        return v

    @property
    def patients_url(self) -> str:
        return f"{self.base_url}/patients"

    @property
    def submit_url(self) -> str:
        return f"{self.base_url}/submit-assessment"


def load_settings(**overrides: Any) -> PatientApiSettings:
    """
    Build settings from the environment, applying explicit overrides.

    Args:
        **overrides: Field values that take precedence over the environment
            (None values are ignored)

    Returns:
        Validated settings

    Raises:
        ConfigurationError: If a setting is missing or invalid
    """
    values = {k: v for k, v in overrides.items() if v is not None}
    try:
        return PatientApiSettings(**values)
    except ValidationError as e:
        fields = [".".join(str(p) for p in err["loc"]) for err in e.errors()]
        raise ConfigurationError(
            "Invalid patient API configuration",
            details={"fields": fields},
        ) from e
