"""
Grading Module.

Pure scoring policy plus the service that logs, audits and persists scores.
"""

from gradeaid.grading.engine import GradingService, SubmissionStore
from gradeaid.grading.scorer import (
    ComputationError,
    ScoringError,
    ValidationError,
    calculate_score,
    classify_subject,
    compute_accuracy_score,
    compute_weighted_score,
    get_scoring_weights,
    letter_grade,
    score_analysis,
    score_breakdown,
)

__all__ = [
    "ComputationError",
    "GradingService",
    "ScoringError",
    "SubmissionStore",
    "ValidationError",
    "calculate_score",
    "classify_subject",
    "compute_accuracy_score",
    "compute_weighted_score",
    "get_scoring_weights",
    "letter_grade",
    "score_analysis",
    "score_breakdown",
]
