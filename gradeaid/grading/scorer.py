"""
Grading policy engine.

Turns an AI analysis of a submission into a 0-100 score. Quantitative
subjects are scored on question accuracy alone; every other subject blends
technical skills, conceptual understanding and question accuracy.

Every function here is pure: no I/O, no logging, no shared mutable state.
"""

from collections.abc import Mapping, Sequence
from decimal import ROUND_HALF_UP, Decimal
from types import MappingProxyType
from typing import Any, TypeVar

from pydantic import ValidationError as PydanticValidationError

from gradeaid.models import (
    AnalysisResult,
    GradingMethod,
    LetterGrade,
    OverallAssessment,
    QuestionResult,
    ScoreBreakdown,
    ScoreComponent,
    ScoreResult,
    SkillAssessment,
)


# Subjects graded on accuracy only, compared after case folding
QUANTITATIVE_SUBJECTS = frozenset({"math", "mathematics"})

SCORE_WEIGHTS: Mapping[str, Decimal] = MappingProxyType(
    {
        "technical_skills": Decimal("0.30"),
        "conceptual_understanding": Decimal("0.30"),
        "question_accuracy": Decimal("0.40"),
    }
)

SKILL_SCALE_MAX = Decimal(5)
SKILL_TO_PERCENTAGE = Decimal(20)  # 0-5 scale to 0-100

MIN_SCORE = 0
MAX_SCORE = 100

GRADE_THRESHOLDS: tuple[tuple[int, LetterGrade], ...] = (
    (90, "A"),
    (80, "B"),
    (70, "C"),
    (60, "D"),
)

_N = TypeVar("_N", int, float, Decimal)


class ScoringError(Exception):
    """Base class for scoring failures."""


class ValidationError(ScoringError):
    """
    Raised when the analysis payload is missing required parts.

    This is a caller error: surface it to the client, don't retry.
    """

    def __init__(self, message: str, field: str | None = None):
        self.field = field
        super().__init__(message)


class ComputationError(ScoringError):
    """
    Raised when a scoring invariant is violated.

    Indicates a defect in the engine or an unusable upstream value.
    """

    def __init__(self, message: str, value: Any = None):
        self.value = value
        super().__init__(message)


# ==============================================================================
# Subject Classification
# ==============================================================================


def classify_subject(subject: str | None) -> GradingMethod:
    """
    Select the grading method for a subject label.

    Only an exact case-insensitive match on "math" or "mathematics" selects
    accuracy-only grading. "Mathematics club" or " math" are general subjects.

    Args:
        subject: Free-text subject label; None or empty is a general subject.

    Returns:
        The grading method to apply.
    """
    if isinstance(subject, str) and subject.casefold() in QUANTITATIVE_SUBJECTS:
        return GradingMethod.ACCURACY_ONLY
    return GradingMethod.WEIGHTED_CRITERIA


# ==============================================================================
# Score Computation
# ==============================================================================


def compute_accuracy_score(questions: Sequence[QuestionResult]) -> int:
    """
    Percentage of questions answered correctly.

    An empty sequence scores 0: the denominator falls back to 1 so a
    submission with no extracted questions gets a defined result.

    Args:
        questions: Question results, possibly empty.

    Returns:
        Integer percentage, rounded half up.
    """
    correct = sum(1 for q in questions if q.accuracy is True)
    total = len(questions) or 1
    return _round_half_up(Decimal(100 * correct) / Decimal(total))


def compute_weighted_score(
    assessment: OverallAssessment, questions: Sequence[QuestionResult]
) -> int:
    """
    Weighted blend of skill ratings and question accuracy.

    Skill ratings are clamped to 0-5 before scaling, so a malformed rating
    such as 7 cannot push the result past 100.

    Args:
        assessment: Overall assessment carrying the two skill ratings.
        questions: Question results for the accuracy component.

    Returns:
        Integer percentage in [0, 100].

    Raises:
        ValidationError: If the assessment is missing.
        ComputationError: If the weights are inconsistent or a rating is not a
            finite number.
    """
    if assessment is None:
        raise ValidationError("Overall assessment is required", field="overallAssessment")

    _check_weights()

    technical = _skill_percentage(assessment.technical_skills, "technical_skills")
    conceptual = _skill_percentage(
        assessment.conceptual_understanding, "conceptual_understanding"
    )
    accuracy = Decimal(compute_accuracy_score(questions))

    weighted_total = (
        technical * SCORE_WEIGHTS["technical_skills"]
        + conceptual * SCORE_WEIGHTS["conceptual_understanding"]
        + accuracy * SCORE_WEIGHTS["question_accuracy"]
    )

    return _clamp(_round_half_up(weighted_total), MIN_SCORE, MAX_SCORE)


def calculate_score(
    analysis: AnalysisResult | Mapping[str, Any] | None, subject: str | None
) -> ScoreResult:
    """
    Score an analysis for a subject.

    Args:
        analysis: Parsed analysis, either as a model or as the raw mapping
            produced upstream.
        subject: Subject label used to pick the grading method.

    Returns:
        The score together with the method used.

    Raises:
        ValidationError: If the analysis is absent, has no question sequence
            or no overall assessment.
        ComputationError: If the computed score breaks the 0-100 integer
            invariant.
    """
    return _score(coerce_analysis(analysis), classify_subject(subject))


def score_breakdown(
    analysis: AnalysisResult | Mapping[str, Any] | None, subject: str | None
) -> ScoreBreakdown:
    """
    Per-component percentages behind a score.

    Accuracy-only grading has a single component carrying the full weight.
    Weighted grading reports each skill and question accuracy separately.
    """
    return _breakdown(coerce_analysis(analysis), classify_subject(subject))


def score_analysis(
    result: AnalysisResult, method: GradingMethod
) -> tuple[ScoreResult, ScoreBreakdown]:
    """
    Score and break down an analysis that was already validated.

    For callers that ran ``coerce_analysis`` themselves and need both views
    without validating the payload again.
    """
    score = _score(result, method)
    return score, _breakdown(result, method)


def _score(result: AnalysisResult, method: GradingMethod) -> ScoreResult:
    if method is GradingMethod.ACCURACY_ONLY:
        score = compute_accuracy_score(result.questions)
    else:
        score = compute_weighted_score(result.overall_assessment, result.questions)  # type: ignore[arg-type]

    _check_score(score)
    return ScoreResult(score=score, method=method)


def _breakdown(result: AnalysisResult, method: GradingMethod) -> ScoreBreakdown:
    accuracy = compute_accuracy_score(result.questions)

    if method is GradingMethod.ACCURACY_ONLY:
        components: tuple[ScoreComponent, ...] = (
            ScoreComponent(name="question_accuracy", weight=Decimal(1), percentage=accuracy),
        )
    else:
        assessment = result.overall_assessment
        if assessment is None:
            raise ValidationError("Overall assessment is required", field="overallAssessment")
        _check_weights()
        components = (
            ScoreComponent(
                name="technical_skills",
                weight=SCORE_WEIGHTS["technical_skills"],
                percentage=_round_half_up(
                    _skill_percentage(assessment.technical_skills, "technical_skills")
                ),
            ),
            ScoreComponent(
                name="conceptual_understanding",
                weight=SCORE_WEIGHTS["conceptual_understanding"],
                percentage=_round_half_up(
                    _skill_percentage(
                        assessment.conceptual_understanding, "conceptual_understanding"
                    )
                ),
            ),
            ScoreComponent(
                name="question_accuracy",
                weight=SCORE_WEIGHTS["question_accuracy"],
                percentage=accuracy,
            ),
        )

    return ScoreBreakdown(method=method, components=components)


def get_scoring_weights() -> dict[str, Decimal]:
    """Return a copy of the weighted-criteria weights."""
    return dict(SCORE_WEIGHTS)


def letter_grade(score: int | float) -> LetterGrade:
    """Map a percentage to a letter grade (A-F)."""
    normalized = _clamp(score, MIN_SCORE, MAX_SCORE)
    for threshold, grade in GRADE_THRESHOLDS:
        if normalized >= threshold:
            return grade
    return "F"


# ==============================================================================
# Input Validation
# ==============================================================================


def coerce_analysis(analysis: AnalysisResult | Mapping[str, Any] | None) -> AnalysisResult:
    """
    Validate an analysis at the scoring boundary.

    Args:
        analysis: Model instance or raw mapping.

    Returns:
        A validated AnalysisResult with an overall assessment.

    Raises:
        ValidationError: If required parts are missing or malformed.
    """
    if analysis is None:
        raise ValidationError("Analysis result is required", field="analysis")

    if isinstance(analysis, AnalysisResult):
        result = analysis
    elif isinstance(analysis, Mapping):
        questions = analysis.get("questions")
        if questions is None:
            raise ValidationError("Questions array is required", field="questions")
        if isinstance(questions, (str, bytes)) or not isinstance(questions, Sequence):
            raise ValidationError(
                f"Questions must be a sequence, got {type(questions).__name__}",
                field="questions",
            )

        try:
            result = AnalysisResult.model_validate(analysis)
        except PydanticValidationError as e:
            first = e.errors()[0]
            location = ".".join(str(part) for part in first["loc"])
            raise ValidationError(
                f"Malformed analysis result at '{location}': {first['msg']}",
                field=location,
            ) from e
    else:
        raise ValidationError(
            f"Analysis result must be a mapping, got {type(analysis).__name__}",
            field="analysis",
        )

    if result.overall_assessment is None:
        raise ValidationError("Overall assessment is required", field="overallAssessment")

    return result


# ==============================================================================
# Helpers
# ==============================================================================


def _skill_percentage(skill: SkillAssessment | None, name: str) -> Decimal:
    """Scale a 0-5 rating to 0-100, treating a missing rating as 0."""
    raw = skill.score if skill is not None and skill.score is not None else 0
    value = Decimal(str(raw))
    if not value.is_finite():
        raise ComputationError(f"{name} score is not a finite number: {raw}", value=raw)
    return _clamp(value, Decimal(0), SKILL_SCALE_MAX) * SKILL_TO_PERCENTAGE


def _check_weights() -> None:
    total = sum(SCORE_WEIGHTS.values(), Decimal(0))
    if total != Decimal(1):
        raise ComputationError(f"Scoring weights must sum to 1, got {total}", value=total)


def _check_score(score: Any) -> None:
    # bool is an int subclass
    if isinstance(score, bool) or not isinstance(score, int):
        raise ComputationError(f"Invalid score calculated: {score!r}", value=score)
    if not MIN_SCORE <= score <= MAX_SCORE:
        raise ComputationError(f"Score out of range: {score}", value=score)


def _round_half_up(value: Decimal) -> int:
    return int(value.quantize(Decimal(1), rounding=ROUND_HALF_UP))


def _clamp(value: _N, low: _N, high: _N) -> _N:
    return max(low, min(value, high))
