"""
Grading service - the orchestrator around the scoring engine.

Scores a submission, derives its letter grade and pass status, builds an
audit record and hands the outcome to an injected store.
"""

from collections.abc import Mapping
from typing import Any, Protocol
from uuid import UUID, uuid4

from gradeaid.config import Settings, get_settings
from gradeaid.grading.scorer import (
    ComputationError,
    ValidationError,
    classify_subject,
    coerce_analysis,
    letter_grade,
    score_analysis,
)
from gradeaid.logging_config import get_logger
from gradeaid.models import AnalysisResult, AuditRecord, GradedSubmission

logger = get_logger(__name__)


class SubmissionStore(Protocol):
    """Persistence collaborator for graded submissions."""

    def save(
        self,
        submission: GradedSubmission,
        analysis: AnalysisResult,
        audit: AuditRecord,
    ) -> None: ...


class GradingService:
    """
    Scores analysed submissions.

    The scoring itself is delegated to the pure functions in
    ``gradeaid.grading.scorer``; this class adds logging, auditing and
    persistence on top.
    """

    def __init__(
        self,
        settings: Settings | None = None,
        store: SubmissionStore | None = None,
    ):
        """
        Initialize the grading service.

        Args:
            settings: Configuration settings. Uses global settings if not provided.
            store: Where graded submissions are saved. Nothing is persisted
                when omitted.
        """
        self._settings = settings or get_settings()
        self._store = store

    def grade(
        self,
        analysis: AnalysisResult | Mapping[str, Any] | None,
        subject: str | None,
        submission_id: UUID | None = None,
    ) -> tuple[GradedSubmission, AuditRecord]:
        """
        Grade an analysed submission.

        Args:
            analysis: Analysis payload, as a model or raw mapping.
            subject: Subject label for the submission. None is recorded as
                an empty label and graded as a general subject.
            submission_id: Identifier to record; generated if omitted.

        Returns:
            Tuple of (GradedSubmission, AuditRecord).

        Raises:
            ValidationError: If the analysis is malformed.
            ComputationError: If scoring breaks an invariant.
        """
        submission_id = submission_id or uuid4()
        subject = subject if isinstance(subject, str) else ""
        log = logger.bind(submission_id=str(submission_id), subject=subject)

        try:
            result = coerce_analysis(analysis)
            score, breakdown = score_analysis(result, classify_subject(subject))
        except ValidationError as e:
            log.warning("Rejected analysis ({}): {}", e.field, e)
            raise
        except ComputationError as e:
            log.error("Scoring invariant violated: {} (value={!r})", e, e.value)
            raise

        log.debug(
            "Scored {} question(s) using {}", len(result.questions), score.method.value
        )

        submission = GradedSubmission(
            submission_id=submission_id,
            subject=subject,
            score=score.score,
            method=score.method,
            letter_grade=letter_grade(score.score),
            passed=score.score >= self._settings.passing_score,
            breakdown=breakdown,
        )

        audit = self._create_audit(result, submission)

        if self._store is not None:
            self._store.save(submission, result, audit)
            log.debug("Saved graded submission")

        log.info(
            "Final score {}% ({}) via {}",
            submission.score,
            submission.letter_grade,
            submission.method.value,
        )
        return submission, audit

    def _create_audit(
        self, analysis: AnalysisResult, submission: GradedSubmission
    ) -> AuditRecord:
        """
        Create an audit record for the grading operation.

        Args:
            analysis: The validated analysis.
            submission: The graded submission.

        Returns:
            Immutable AuditRecord.
        """
        result_content = f"{submission.score}|{submission.method.value}"

        return AuditRecord(
            submission_id=submission.submission_id,
            analysis_hash=AuditRecord.compute_hash(analysis.canonical_json()),
            subject=submission.subject,
            method=submission.method,
            result_hash=AuditRecord.compute_hash(result_content),
        )
