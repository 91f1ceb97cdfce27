"""
Pytest configuration and fixtures.

Provides common test fixtures for all test modules.
"""

import json
import tempfile
from pathlib import Path
from typing import Any, Generator
from unittest.mock import MagicMock

import pytest

from gradeaid.config import Settings
from gradeaid.models import AnalysisResult, OverallAssessment, QuestionResult, SkillAssessment


# ==============================================================================
# Directory Fixtures
# ==============================================================================


@pytest.fixture
def temp_dir() -> Generator[Path, None, None]:
    """Create a temporary directory for test files."""
    with tempfile.TemporaryDirectory() as tmpdir:
        yield Path(tmpdir)


# ==============================================================================
# Analysis Payload Fixtures
# ==============================================================================


def _questions(*accuracies: bool) -> tuple[QuestionResult, ...]:
    """Build numbered question results from accuracy flags."""
    return tuple(
        QuestionResult(number=i, accuracy=accuracy)
        for i, accuracy in enumerate(accuracies, start=1)
    )


def _assessment(
    technical: float | None = None, conceptual: float | None = None
) -> OverallAssessment:
    """Build an overall assessment with the given skill ratings."""
    return OverallAssessment(
        technical_skills=SkillAssessment(score=technical) if technical is not None else None,
        conceptual_understanding=(
            SkillAssessment(score=conceptual) if conceptual is not None else None
        ),
    )


@pytest.fixture
def make_questions():
    """Factory for question results."""
    return _questions


@pytest.fixture
def make_assessment():
    """Factory for overall assessments."""
    return _assessment


@pytest.fixture
def sample_analysis_payload() -> dict[str, Any]:
    """Analysis as it arrives from upstream: camelCase JSON, parsed."""
    return {
        "questions": [
            {
                "number": 1,
                "accuracy": True,
                "score": 10,
                "processEvaluation": "Clear thesis supported by two quotations.",
                "completenessEvaluation": "All parts of the prompt addressed.",
                "presentationEvaluation": "Well organized paragraphs.",
                "feedback": "Strong opening argument.",
                "commonMistakes": [],
                "conceptsCovered": ["thesis statements", "textual evidence"],
                "learningObjectives": ["Support claims with evidence"],
                "remedialSuggestions": [],
                "challengeExtensions": ["Compare with a second text"],
            },
            {
                "number": 2,
                "accuracy": False,
                "score": 4,
                "processEvaluation": "Misreads the narrator's motive.",
                "feedback": "Revisit chapter three before answering.",
                "commonMistakes": ["Confuses narrator with author"],
            },
        ],
        "overallAssessment": {
            "totalScore": 85,
            "gradingMethod": "weighted",
            "technicalSkills": {
                "score": 4,
                "strengths": ["Grammar", "Sentence variety"],
                "weaknesses": ["Citation format"],
                "progressIndicators": {"grammar": "improving"},
            },
            "conceptualUnderstanding": {
                "score": 3,
                "strengths": ["Theme identification"],
                "weaknesses": ["Character motivation"],
                "keyConceptsMastery": {"theme": 4},
            },
            "majorStrengths": ["Clear writing"],
            "areasForImprovement": ["Close reading"],
            "recommendations": ["Annotate while reading"],
            "teacherSummary": "Solid essay with one interpretive slip.",
            "learningPath": {
                "shortTerm": ["Reread chapter three"],
                "mediumTerm": ["Practice character analysis"],
                "longTerm": ["Comparative essays"],
            },
            "skillGaps": {"critical": [], "moderate": ["Inference"], "minor": ["MLA"]},
            "nextSteps": {"practice": ["Short responses"], "review": [], "advance": []},
        },
        "meta": {"timeSpent": 12, "subjectAlignment": ["english"]},
    }


@pytest.fixture
def sample_analysis(sample_analysis_payload: dict[str, Any]) -> AnalysisResult:
    """The sample payload parsed into an AnalysisResult."""
    return AnalysisResult.model_validate(sample_analysis_payload)


@pytest.fixture
def math_analysis() -> AnalysisResult:
    """Mathematics analysis with two of four questions correct."""
    return AnalysisResult(
        questions=_questions(True, True, False, False),
        overall_assessment=_assessment(technical=2, conceptual=2),
    )


# ==============================================================================
# Settings Fixtures
# ==============================================================================


@pytest.fixture
def test_settings(temp_dir: Path) -> Settings:
    """Create test settings."""
    return Settings(
        log_level="DEBUG",
        passing_score=70,
        output_directory=temp_dir / "output",
    )


# ==============================================================================
# Mock Fixtures
# ==============================================================================


@pytest.fixture
def mock_store() -> MagicMock:
    """Stand-in for the submission store."""
    return MagicMock()


# ==============================================================================
# File Fixtures
# ==============================================================================


@pytest.fixture
def analysis_file(temp_dir: Path, sample_analysis_payload: dict[str, Any]) -> Path:
    """Write the sample analysis payload to disk."""
    file_path = temp_dir / "analysis.json"
    file_path.write_text(json.dumps(sample_analysis_payload), encoding="utf-8")
    return file_path
