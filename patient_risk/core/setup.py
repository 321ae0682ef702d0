"""
Process startup.

Loads the environment, configures logging and builds the settings object,
in that order: settings and logging both read environment variables that
may come from a local `.env` file.
"""
from typing import Any

from dotenv import load_dotenv

from patient_risk.config.settings import PatientApiSettings, load_settings
from patient_risk.utils.logger import configure_logging, get_logger
from patient_risk.utils.sanitize import mask_secret


def setup_application(**overrides: Any) -> PatientApiSettings:
    """
    Initialize environment, logging and configuration.

    Args:
        **overrides: Settings that take precedence over the environment
            (e.g. values given on the command line)

    Returns:
        Validated settings

    Raises:
        ConfigurationError: If the configuration is missing or invalid
    """
    load_dotenv()

    settings = load_settings(**overrides)

    configure_logging(
        log_level=settings.log_level,
        log_format=settings.log_format,
        log_file=settings.log_file,
    )

    logger = get_logger(__name__)
    logger.info(
        "Configuration loaded",
        base_url=settings.base_url,
        api_key=mask_secret(settings.api_key),
        page_size=settings.page_size,
        max_retries=settings.max_retries,
    )
    return settings
