"""
Per-patient risk scoring.

Combines the three clinical rules into a RiskAssessment:

- Blood pressure: 0 (unparsable), 1 normal, 2 elevated, 3 stage 1, 4 stage 2
- Temperature: 0 normal or unparsable, 1 low fever, 2 high fever
- Age: 0 unparsable, 1 up to 65, 2 over 65

The total ranges from 0 to 8. Scoring is pure and never raises, so a single
malformed record cannot stop the analysis of the others.
"""
from typing import Any, Mapping

from patient_risk.config.risk_thresholds import HIGH_RISK_THRESHOLD
from patient_risk.models.schemas import RiskAssessment
from patient_risk.services.risk.rules.blood_pressure import score_blood_pressure
from patient_risk.services.risk.rules.vitals import score_age, score_temperature


def assess_patient(record: Mapping[str, Any]) -> RiskAssessment:
    """
    Score a single patient record.

    Args:
        record: Raw patient record

    Returns:
        RiskAssessment with the per-category scores and their total
    """
    patient_id = record.get("patient_id")
    return RiskAssessment(
        patient_id=patient_id if isinstance(patient_id, str) else None,
        bp_score=score_blood_pressure(record.get("blood_pressure")),
        temp_score=score_temperature(record.get("temperature")),
        age_score=score_age(record.get("age")),
    )


def is_high_risk(assessment: RiskAssessment) -> bool:
    return assessment.total >= HIGH_RISK_THRESHOLD
