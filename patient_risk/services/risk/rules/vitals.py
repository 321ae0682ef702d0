"""Temperature and age scoring rules."""
from typing import Any

from patient_risk.config import risk_thresholds as t
from patient_risk.services.parsing.fields import parse_number


def score_temperature(raw: Any) -> int:
    """
    Score a raw temperature (°F) from 0 to 2.

    Values between the published brackets (e.g. 99.55) score 0, as do
    unparsable values.
    """
    temp = parse_number(raw)
    if temp is None:
        return 0
    if temp <= t.TEMP_NORMAL_MAX:
        return 0
    if t.TEMP_LOW_FEVER_MIN <= temp <= t.TEMP_LOW_FEVER_MAX:
        return 1
    if temp >= t.TEMP_HIGH_FEVER_MIN:
        return 2
    return 0


def score_age(raw: Any) -> int:
    """Score a raw age: 2 above 65, 1 for any other parsable age, 0 otherwise."""
    age = parse_number(raw)
    if age is None:
        return 0
    if age > t.AGE_SENIOR_ABOVE:
        return 2
    return 1
