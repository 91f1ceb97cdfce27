"""
Pydantic models for GradeAid scoring.

These models define the schemas for:
- The AI analysis payload (questions and overall assessment)
- Score results and their per-component breakdown
- Graded submissions and audit records for reproducibility

Analysis models mirror the camelCase JSON produced upstream and are lenient
about optional fields. Result models use strict validation.
"""

import json
import math
from datetime import datetime, timezone
from decimal import Decimal
from enum import Enum
from hashlib import sha256
from typing import Annotated, Any, Literal
from uuid import UUID, uuid4

from pydantic import (
    BaseModel,
    BeforeValidator,
    ConfigDict,
    Field,
    computed_field,
    field_validator,
)
from pydantic.alias_generators import to_camel


def _coerce_text(v: Any) -> str:
    if v is None:
        return ""
    if isinstance(v, str):
        return v
    if isinstance(v, (list, tuple)):
        return "\n".join(str(item) for item in v)
    return str(v)


def _coerce_text_list(v: Any) -> tuple[str, ...]:
    if v is None:
        return ()
    if isinstance(v, str):
        return (v,)
    if isinstance(v, (list, tuple)):
        return tuple(item if isinstance(item, str) else str(item) for item in v)
    if isinstance(v, dict):
        return ()
    return (str(v),)


def _coerce_ordinal(v: Any) -> int:
    # Labels like "Q1" or negative ordinals mean the number is unknown
    if isinstance(v, bool):
        return 0
    if isinstance(v, int):
        return v if v >= 0 else 0
    if isinstance(v, str) and v.strip().isdecimal():
        return int(v.strip())
    return 0


def _coerce_reported_score(v: Any) -> float | None:
    if isinstance(v, bool) or not isinstance(v, (int, float, str)):
        return None
    try:
        value = float(v)
    except (OverflowError, ValueError):
        return None
    return value if math.isfinite(value) else None


def _coerce_mapping(v: Any) -> dict[str, Any]:
    return v if isinstance(v, dict) else {}


Text = Annotated[str, BeforeValidator(_coerce_text)]
TextList = Annotated[tuple[str, ...], BeforeValidator(_coerce_text_list)]
Ordinal = Annotated[int, BeforeValidator(_coerce_ordinal)]
ReportedScore = Annotated[float | None, BeforeValidator(_coerce_reported_score)]
Extras = Annotated[dict[str, Any], BeforeValidator(_coerce_mapping)]


class GradingMethod(str, Enum):
    """Scoring policy applied to a submission."""

    ACCURACY_ONLY = "accuracy_only"  # Share of correct questions
    WEIGHTED_CRITERIA = "weighted_criteria"  # Skills and accuracy blend


LetterGrade = Literal["A", "B", "C", "D", "F"]


# ==============================================================================
# Analysis Models
# ==============================================================================


class AnalysisModel(BaseModel):
    """Base for models parsed from the upstream analysis JSON."""

    model_config = ConfigDict(
        frozen=True,
        alias_generator=to_camel,
        populate_by_name=True,
        extra="ignore",
    )


class QuestionResult(AnalysisModel):
    """
    Analysis of a single question.

    Only ``accuracy`` takes part in scoring; everything else is carried
    through for display and falls back to its default when malformed.
    """

    number: Ordinal = Field(
        default=0,
        ge=0,
        description="Question ordinal, 0 when unknown",
    )

    accuracy: bool = Field(
        default=False,
        description="Whether the question was answered correctly",
    )

    score: ReportedScore = Field(
        default=None,
        description="Per-question score reported by the model, unused for grading",
    )

    process_evaluation: Text = ""
    completeness_evaluation: Text = ""
    presentation_evaluation: Text = ""
    feedback: Text = ""
    common_mistakes: TextList = ()
    concepts_covered: TextList = ()
    learning_objectives: TextList = ()
    remedial_suggestions: TextList = ()
    challenge_extensions: TextList = ()

    @field_validator("accuracy", mode="before")
    @classmethod
    def default_accuracy(cls, v: Any) -> Any:
        """Treat a null accuracy as incorrect."""
        return False if v is None else v


class SkillAssessment(AnalysisModel):
    """A 0-5 skill rating with its supporting observations."""

    score: float | None = Field(
        default=None,
        description="Rating on a 0-5 scale; missing counts as 0",
    )

    strengths: TextList = ()
    weaknesses: TextList = ()
    progress_indicators: Extras = Field(default_factory=dict)
    key_concepts_mastery: Extras = Field(default_factory=dict)


class LearningPath(AnalysisModel):
    short_term: TextList = ()
    medium_term: TextList = ()
    long_term: TextList = ()


class SkillGaps(AnalysisModel):
    critical: TextList = ()
    moderate: TextList = ()
    minor: TextList = ()


class NextSteps(AnalysisModel):
    practice: TextList = ()
    review: TextList = ()
    advance: TextList = ()


class OverallAssessment(AnalysisModel):
    """
    Submission-wide assessment.

    The two skill ratings feed the weighted policy. The remaining
    qualitative fields are carried through unchanged.
    """

    technical_skills: SkillAssessment | None = None
    conceptual_understanding: SkillAssessment | None = None

    total_score: ReportedScore = Field(
        default=None,
        description="Score suggested by the model, never trusted for grading",
    )

    grading_method: Text = ""
    major_strengths: TextList = ()
    areas_for_improvement: TextList = ()
    recommendations: TextList = ()
    teacher_summary: Text = ""
    learning_path: LearningPath = Field(default_factory=LearningPath)
    skill_gaps: SkillGaps = Field(default_factory=SkillGaps)
    next_steps: NextSteps = Field(default_factory=NextSteps)

    @field_validator("technical_skills", "conceptual_understanding", mode="before")
    @classmethod
    def wrap_bare_rating(cls, v: Any) -> Any:
        """Accept a bare number as the rating itself."""
        if isinstance(v, (int, float)) and not isinstance(v, bool):
            return {"score": v}
        return v

    @field_validator("learning_path", "skill_gaps", "next_steps", mode="before")
    @classmethod
    def default_section(cls, v: Any) -> Any:
        return v if isinstance(v, (dict, AnalysisModel)) else {}


class AnalysisResult(AnalysisModel):
    """
    Root of the analysis payload for one graded submission.

    ``overall_assessment`` may be absent here so partial payloads can be
    represented; scoring rejects them.
    """

    questions: tuple[QuestionResult, ...] = Field(
        ...,
        description="Per-question results in display order",
    )

    overall_assessment: OverallAssessment | None = None

    meta: Extras = Field(default_factory=dict)

    def canonical_json(self) -> str:
        """Serialize deterministically for hashing."""
        return json.dumps(
            self.model_dump(mode="json", by_alias=True),
            sort_keys=True,
            separators=(",", ":"),
        )


# ==============================================================================
# Score Models
# ==============================================================================


class ScoreResult(BaseModel):
    """Final score and the policy that produced it."""

    model_config = ConfigDict(frozen=True, strict=True)

    score: int = Field(
        ...,
        ge=0,
        le=100,
        description="Overall percentage",
    )

    method: GradingMethod = Field(
        ...,
        description="Scoring policy that was applied",
    )


class ScoreComponent(BaseModel):
    """One weighted input to the overall score."""

    model_config = ConfigDict(frozen=True, strict=True)

    name: str
    weight: Decimal = Field(..., ge=0, le=1)
    percentage: int = Field(..., ge=0, le=100)


class ScoreBreakdown(BaseModel):
    """Per-component view of a score."""

    model_config = ConfigDict(frozen=True, strict=True)

    method: GradingMethod
    components: tuple[ScoreComponent, ...] = Field(..., min_length=1)

    @computed_field  # type: ignore[prop-decorator]
    @property
    def total_weight(self) -> Decimal:
        """Sum of component weights."""
        return sum((c.weight for c in self.components), Decimal(0))

    def component(self, name: str) -> ScoreComponent:
        """Look up a component by name."""
        for c in self.components:
            if c.name == name:
                return c
        raise KeyError(name)


# ==============================================================================
# Submission and Audit Models
# ==============================================================================


class GradedSubmission(BaseModel):
    """
    Score record for one submission, ready for persistence.

    Stored alongside the unchanged analysis payload.
    """

    model_config = ConfigDict(frozen=True, strict=True)

    submission_id: UUID = Field(
        default_factory=uuid4,
        description="Unique identifier for this submission",
    )

    subject: str = Field(
        ...,
        description="Subject label as provided by the caller",
    )

    score: int = Field(..., ge=0, le=100)

    method: GradingMethod

    letter_grade: LetterGrade

    passed: bool = Field(
        ...,
        description="Whether the score reached the configured passing score",
    )

    breakdown: ScoreBreakdown

    graded_at: datetime = Field(
        default_factory=lambda: datetime.now(timezone.utc),
        description="Timestamp when grading was completed",
    )


class AuditRecord(BaseModel):
    """
    Immutable audit record for reproducibility.

    Contains hashes of the analysis and the result so that re-scoring the same
    payload can be verified to yield the same outcome.
    """

    model_config = ConfigDict(frozen=True, strict=True)

    audit_id: UUID = Field(
        default_factory=uuid4,
        description="Unique identifier for this audit record",
    )

    timestamp: datetime = Field(
        default_factory=lambda: datetime.now(timezone.utc),
        description="Timestamp of the grading operation",
    )

    submission_id: UUID

    analysis_hash: str = Field(
        ...,
        description="SHA-256 hash of the canonical analysis JSON",
    )

    subject: str

    method: GradingMethod

    result_hash: str = Field(
        ...,
        description="SHA-256 hash of the score and method",
    )

    @staticmethod
    def compute_hash(content: str) -> str:
        """Compute SHA-256 hash of content."""
        return sha256(content.encode("utf-8")).hexdigest()
