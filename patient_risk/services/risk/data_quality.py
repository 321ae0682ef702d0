"""Data-quality checks for patient records."""
from typing import Any, List, Mapping

from patient_risk.services.parsing.fields import parse_blood_pressure, parse_number

BLOOD_PRESSURE = "blood_pressure"
TEMPERATURE = "temperature"
AGE = "age"


def find_data_quality_issues(record: Mapping[str, Any]) -> List[str]:
    """
    List the required fields of a record that cannot be parsed.

    Args:
        record: Raw patient record

    Returns:
        Field names in the order blood_pressure, temperature, age; empty when
        every field parses
    """
    issues = []
    if not parse_blood_pressure(record.get(BLOOD_PRESSURE)).valid:
        issues.append(BLOOD_PRESSURE)
    if parse_number(record.get(TEMPERATURE)) is None:
        issues.append(TEMPERATURE)
    if parse_number(record.get(AGE)) is None:
        issues.append(AGE)
    return issues


def has_data_quality_issue(record: Mapping[str, Any]) -> bool:
    """True if blood pressure, temperature or age fails to parse."""
    return bool(find_data_quality_issues(record))
