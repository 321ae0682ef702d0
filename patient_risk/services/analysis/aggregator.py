"""Aggregate per-patient scores into the submission result set."""
from typing import Any, Iterable, List

from patient_risk.config.risk_thresholds import FEVER_THRESHOLD
from patient_risk.models.schemas import AssessmentResultSet
from patient_risk.services.parsing.fields import is_non_empty_string, parse_number
from patient_risk.services.risk.data_quality import find_data_quality_issues
from patient_risk.services.risk.scorer import assess_patient, is_high_risk
from patient_risk.utils.logger import get_logger
from patient_risk.utils.sanitize import hash_identifier

logger = get_logger(__name__)


def analyze_patients(records: Iterable[Any]) -> AssessmentResultSet:
    """
    Classify every patient record.

    Records without a usable patient_id (including entries that are not
    objects at all) are skipped and appear in no list. Output lists are
    deduplicated and sorted, so the result depends only on the set of
    records, not on their order or repetition.

    Args:
        records: Raw patient records as returned by the API

    Returns:
        AssessmentResultSet ready for submission
    """
    high_risk: List[str] = []
    fever: List[str] = []
    data_quality: List[str] = []
    skipped = 0
    total = 0

    for record in records:
        total += 1
        if not isinstance(record, dict) or not is_non_empty_string(record.get("patient_id")):
            skipped += 1
            continue

        patient_id = record["patient_id"]
        assessment = assess_patient(record)
        if is_high_risk(assessment):
            high_risk.append(patient_id)

        temperature = parse_number(record.get("temperature"))
        if temperature is not None and temperature >= FEVER_THRESHOLD:
            fever.append(patient_id)

        issues = find_data_quality_issues(record)
        if issues:
            data_quality.append(patient_id)
            logger.debug(
                "Data quality issue",
                patient=hash_identifier(patient_id),
                fields=issues,
            )

    results = AssessmentResultSet.from_ids(
        high_risk_patients=high_risk,
        fever_patients=fever,
        data_quality_issues=data_quality,
    )
    logger.info(
        "Patients analyzed",
        records=total,
        skipped_without_id=skipped,
        **results.counts(),
    )
    return results
