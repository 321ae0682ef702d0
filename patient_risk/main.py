"""
Command-line entry point.

Fetches every patient record, classifies them, submits the result set and
prints both the submitted payload and the API response as JSON on stdout.
Log output goes to stderr.

Usage:
    API_KEY=... python -m patient_risk [--log-level DEBUG] [--log-format json]
"""
import argparse
import json
import sys
from typing import Any, List, Optional, Tuple

from patient_risk.config.settings import PatientApiSettings
from patient_risk.core.setup import setup_application
from patient_risk.models.schemas import AssessmentResultSet
from patient_risk.services.analysis.aggregator import analyze_patients
from patient_risk.services.integrations.patients_api import PatientsApiClient
from patient_risk.utils.errors import AppError, ConfigurationError
from patient_risk.utils.logger import configure_logging, get_logger

logger = get_logger(__name__)


def run_assessment(
    settings: PatientApiSettings,
    api: Optional[PatientsApiClient] = None,
) -> Tuple[AssessmentResultSet, Any]:
    """
    Fetch, analyze and submit.

    Nothing is submitted unless every page was fetched successfully.

    Args:
        settings: API settings
        api: Optional pre-built API client (a new one is created and closed otherwise)

    Returns:
        (submitted result set, API response body)

    Raises:
        PatientApiError: If fetching or submission fails
    """
    owns_api = api is None
    api = api or PatientsApiClient(settings)
    try:
        logger.info("Fetching patients")
        patients = api.fetch_all_patients()

        logger.info("Analyzing patients", count=len(patients))
        results = analyze_patients(patients)

        response = api.submit_assessment(results)
        return results, response
    finally:
        if owns_api:
            api.close()


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="patient-risk",
        description="Score patient records from the assessment API and submit the results.",
    )
    parser.add_argument("--base-url", help="API base URL (default: PATIENT_API_BASE_URL)")
    parser.add_argument(
        "--log-level",
        choices=["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"],
        type=str.upper,
        help="Log level (default: LOG_LEVEL or INFO)",
    )
    parser.add_argument(
        "--log-format",
        choices=["json", "console"],
        help="Log output format (default: LOG_FORMAT or console)",
    )
    return parser


def main(argv: Optional[List[str]] = None) -> int:
    """Run the assessment; returns the process exit code."""
    args = build_parser().parse_args(argv)

    try:
        settings = setup_application(
            base_url=args.base_url,
            log_level=args.log_level,
            log_format=args.log_format,
        )
    except ConfigurationError as e:
        configure_logging()
        logger.error("Configuration error", error=e.message, **e.details)
        return 1

    try:
        results, response = run_assessment(settings)
    except AppError as e:
        logger.error("Assessment run failed", error=e.message, code=e.code, status_code=e.status_code)
        return 1
    except Exception as e:
        logger.exception("Unexpected error during assessment run", error_type=type(e).__name__)
        return 1

    print("--- SUBMITTED PAYLOAD ---")
    print(json.dumps(results.model_dump(), indent=2))
    print("--- API RESPONSE ---")
    print(json.dumps(response, indent=2))
    return 0


if __name__ == "__main__":
    sys.exit(main())
