"""Blood pressure scoring rule."""
from typing import Any

from patient_risk.config import risk_thresholds as t
from patient_risk.services.parsing.fields import parse_blood_pressure

# Scores
INVALID = 0
NORMAL = 1
ELEVATED = 2
STAGE_1 = 3
STAGE_2 = 4


def systolic_stage(systolic: float) -> int:
    """Stage of a systolic value alone (0 when it falls between brackets)."""
    if systolic < t.SYSTOLIC_NORMAL_BELOW:
        return NORMAL
    if t.SYSTOLIC_NORMAL_BELOW <= systolic <= t.SYSTOLIC_ELEVATED_MAX:
        return ELEVATED
    if t.SYSTOLIC_STAGE_1_MIN <= systolic <= t.SYSTOLIC_STAGE_1_MAX:
        return STAGE_1
    if systolic >= t.SYSTOLIC_STAGE_2_MIN:
        return STAGE_2
    return INVALID


def diastolic_stage(diastolic: float) -> int:
    """Stage of a diastolic value alone. There is no diastolic "elevated" stage."""
    if diastolic < t.DIASTOLIC_NORMAL_BELOW:
        return NORMAL
    if t.DIASTOLIC_NORMAL_BELOW <= diastolic <= t.DIASTOLIC_STAGE_1_MAX:
        return STAGE_1
    if diastolic >= t.DIASTOLIC_STAGE_2_MIN:
        return STAGE_2
    return INVALID


def score_blood_pressure(raw: Any) -> int:
    """
    Score a raw blood pressure reading from 0 to 4.

    Normal (1) and Elevated (2) require both halves to qualify. Any other
    valid reading is Stage 1 (3) or Stage 2 (4), whichever the higher-risk
    half indicates. Unparsable readings score 0.
    """
    bp = parse_blood_pressure(raw)
    if not bp.valid:
        return INVALID

    systolic, diastolic = bp.systolic, bp.diastolic

    if systolic < t.SYSTOLIC_NORMAL_BELOW and diastolic < t.DIASTOLIC_NORMAL_BELOW:
        return NORMAL
    if (
        t.SYSTOLIC_NORMAL_BELOW <= systolic <= t.SYSTOLIC_ELEVATED_MAX
        and diastolic < t.DIASTOLIC_NORMAL_BELOW
    ):
        return ELEVATED

    stage = max(systolic_stage(systolic), diastolic_stage(diastolic))
    return STAGE_2 if stage >= STAGE_2 else STAGE_1
