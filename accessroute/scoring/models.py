"""Accessibility score and confidence models."""

from datetime import datetime
from enum import StrEnum

from pydantic import BaseModel, ConfigDict, Field

_GRADE_A_MIN: float = 85.0
_GRADE_B_MIN: float = 70.0
_GRADE_C_MIN: float = 55.0
_GRADE_D_MIN: float = 40.0


class Grade(StrEnum):
    """Letter grade of an overall score."""

    A = "A"
    B = "B"
    C = "C"
    D = "D"
    F = "F"

    @classmethod
    def from_score(cls, score: float) -> "Grade":
        if score >= _GRADE_A_MIN:
            return cls.A
        if score >= _GRADE_B_MIN:
            return cls.B
        if score >= _GRADE_C_MIN:
            return cls.C
        if score >= _GRADE_D_MIN:
            return cls.D
        return cls.F

    @property
    def rank(self) -> int:
        """0 for A through 4 for F."""
        return list(Grade).index(self)


class RecommendationCategory(StrEnum):
    """Caller-facing verdict on a scored route."""

    EXCELLENT = "excellent"
    GOOD = "good"
    ACCEPTABLE = "acceptable"
    DIFFICULT = "difficult"
    AVOID = "avoid"

    @classmethod
    def from_score(cls, score: float) -> "RecommendationCategory":
        return _CATEGORY_BY_GRADE[Grade.from_score(score)]


_CATEGORY_BY_GRADE: dict[Grade, RecommendationCategory] = {
    Grade.A: RecommendationCategory.EXCELLENT,
    Grade.B: RecommendationCategory.GOOD,
    Grade.C: RecommendationCategory.ACCEPTABLE,
    Grade.D: RecommendationCategory.DIFFICULT,
    Grade.F: RecommendationCategory.AVOID,
}


class ScoringMethod(StrEnum):
    """Which computation produced a score."""

    BASELINE = "baseline"
    AHP = "ahp"
    HEURISTIC = "heuristic"


class AccessibilityScore(BaseModel):
    """Multi-criteria accessibility score of a route, each part 0-100."""

    model_config = ConfigDict(frozen=True)

    traversability: float = Field(ge=0, le=100)
    safety: float = Field(ge=0, le=100)
    comfort: float = Field(ge=0, le=100)
    overall: float = Field(ge=0, le=100)
    grade: Grade
    user_specific_adjustment: float = 0.0
    method: ScoringMethod


class DataFreshness(StrEnum):
    """How recent the underlying reports are."""

    HIGH = "high"
    MEDIUM = "medium"
    LOW = "low"


class VerificationStatus(StrEnum):
    """Share of reports confirmed by moderators."""

    VERIFIED = "verified"
    ESTIMATED = "estimated"
    UNVERIFIED = "unverified"


class ConfidenceFactors(BaseModel):
    """Inputs the confidence estimate was derived from."""

    model_config = ConfigDict(frozen=True)

    obstacle_age: float = Field(ge=0)
    validation_count: int = Field(ge=0)
    verified_obstacles: int = Field(ge=0)
    route_popularity: float = Field(ge=0, le=100)


class RouteConfidence(BaseModel):
    """How far a route score can be trusted."""

    model_config = ConfigDict(frozen=True)

    overall: float = Field(ge=0, le=100)
    data_freshness: DataFreshness
    community_validation: int = Field(ge=0)
    verification_status: VerificationStatus
    last_verified: datetime | None = None
    factors: ConfidenceFactors
