"""Value models for parsed fields, per-patient scores and the submission payload."""
from typing import Iterable, List, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, computed_field

Number = Union[int, float]


class ParsedBloodPressure(BaseModel):
    """Blood pressure reading split into its two numeric halves."""

    model_config = ConfigDict(frozen=True)

    systolic: Optional[Number] = None
    diastolic: Optional[Number] = None
    valid: bool = False


INVALID_BLOOD_PRESSURE = ParsedBloodPressure()


class RiskAssessment(BaseModel):
    """Per-patient risk scores."""

    model_config = ConfigDict(frozen=True)

    patient_id: Optional[str] = None
    bp_score: int = Field(0, ge=0, le=4)
    temp_score: int = Field(0, ge=0, le=2)
    age_score: int = Field(0, ge=0, le=2)

    @computed_field
    @property
    def total(self) -> int:
        return self.bp_score + self.temp_score + self.age_score


def _utf16_key(value: str) -> bytes:
    return value.encode("utf-16-be", "surrogatepass")


def _unique_sorted(ids: Iterable[str]) -> List[str]:
    # Ordered by UTF-16 code unit, so astral characters sort below U+E000..U+FFFF
    return sorted(set(ids), key=_utf16_key)


class AssessmentResultSet(BaseModel):
    """
    Result set submitted to the assessment endpoint.

    Each list holds patient identifiers with no duplicates, in ascending
    order, so equal inputs always serialize to the same payload.
    """

    high_risk_patients: List[str] = Field(default_factory=list)
    fever_patients: List[str] = Field(default_factory=list)
    data_quality_issues: List[str] = Field(default_factory=list)

    @classmethod
    def from_ids(
        cls,
        high_risk_patients: Iterable[str] = (),
        fever_patients: Iterable[str] = (),
        data_quality_issues: Iterable[str] = (),
    ) -> "AssessmentResultSet":
        """Build a result set, deduplicating and sorting each list."""
        return cls(
            high_risk_patients=_unique_sorted(high_risk_patients),
            fever_patients=_unique_sorted(fever_patients),
            data_quality_issues=_unique_sorted(data_quality_issues),
        )

    def counts(self) -> dict:
        return {
            "high_risk_patients": len(self.high_risk_patients),
            "fever_patients": len(self.fever_patients),
            "data_quality_issues": len(self.data_quality_issues),
        }
