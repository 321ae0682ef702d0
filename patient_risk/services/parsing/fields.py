"""Parsers for raw patient record fields.

Records arrive as untyped JSON, so every field may be missing, empty, of the
wrong type or malformed. The parsers here never raise: anything that cannot
be read as a finite number yields None, and blood pressure readings that do
not split cleanly into two numbers are marked invalid.
"""
import math
import re
from typing import Any, Optional

from patient_risk.models.schemas import INVALID_BLOOD_PRESSURE, Number, ParsedBloodPressure

# Plain decimal literal: optional sign, digits with optional fraction, optional exponent.
# Python-only spellings (underscores, "nan", "inf") do not match.
_DECIMAL_RE = re.compile(r"[+-]?(?:\d+\.?\d*|\.\d+)(?:[eE][+-]?\d+)?", re.ASCII)

# Unsigned hex, binary or octal integer literal ("0x1F", "0b101", "0o17").
_PREFIXED_INT_RE = re.compile(r"0(?:[xX][0-9a-fA-F]+|[bB][01]+|[oO][0-7]+)", re.ASCII)


def is_non_empty_string(value: Any) -> bool:
    """Return True for strings containing at least one non-whitespace character."""
    return isinstance(value, str) and bool(value.strip())


def _finite_int(value: int) -> Optional[int]:
    # Integers beyond the double range are treated as infinite
    try:
        float(value)
    except OverflowError:
        return None
    return value


def parse_number(raw: Any) -> Optional[Number]:
    """
    Parse a numeric field strictly.

    Args:
        raw: Native number or numeric string

    Returns:
        The number (native numbers unchanged, decimal strings as float,
        hex/binary/octal strings as int), or None if the value is missing,
        blank, non-numeric or not finite
    """
    # bool is an int subclass but never a measurement
    if isinstance(raw, bool):
        return None
    if isinstance(raw, int):
        return _finite_int(raw)
    if isinstance(raw, float):
        return raw if math.isfinite(raw) else None
    if not is_non_empty_string(raw):
        return None

    text = raw.strip()
    if _PREFIXED_INT_RE.fullmatch(text):
        return _finite_int(int(text, 0))
    if not _DECIMAL_RE.fullmatch(text):
        return None
    value = float(text)
    return value if math.isfinite(value) else None


def parse_blood_pressure(raw: Any) -> ParsedBloodPressure:
    """
    Parse a "<systolic>/<diastolic>" reading.

    Args:
        raw: Raw blood_pressure field

    Returns:
        ParsedBloodPressure with both values set and valid=True, or the
        all-None invalid reading if either half is missing or non-numeric
    """
    if not is_non_empty_string(raw):
        return INVALID_BLOOD_PRESSURE

    parts = raw.split("/")
    if len(parts) != 2:
        return INVALID_BLOOD_PRESSURE

    systolic = parse_number(parts[0])
    diastolic = parse_number(parts[1])
    if systolic is None or diastolic is None:
        return INVALID_BLOOD_PRESSURE

    return ParsedBloodPressure(systolic=systolic, diastolic=diastolic, valid=True)
