"""
GradeAid CLI Application.

Provides a command-line interface for scoring saved AI analyses
and inspecting the grading policy.
"""

import json
from pathlib import Path
from typing import Annotated, Optional

import typer
from rich.console import Console
from rich.panel import Panel
from rich.table import Table

from gradeaid.config import get_settings
from gradeaid.grading import (
    ComputationError,
    GradingService,
    ValidationError,
    classify_subject,
    get_scoring_weights,
)
from gradeaid.logging_config import setup_logging
from gradeaid.models import AuditRecord, GradedSubmission, GradingMethod

# Create Typer app
app = typer.Typer(
    name="gradeaid",
    help="Score AI paper analyses with GradeAid's grading policy",
    add_completion=False,
)

console = Console()

METHOD_DESCRIPTIONS = {
    GradingMethod.ACCURACY_ONLY: "Based on answer accuracy",
    GradingMethod.WEIGHTED_CRITERIA: (
        "Based on technical skills, conceptual understanding, and question accuracy"
    ),
}


@app.callback()
def main() -> None:
    """Configure logging before any command runs."""
    settings = get_settings()
    setup_logging(settings.log_level, settings.log_file, settings.log_serialize)


@app.command()
def score(
    analysis_file: Annotated[Path, typer.Argument(help="Path to the analysis JSON file")],
    subject: Annotated[str, typer.Option("--subject", "-s", help="Subject of the assignment")],
    output: Annotated[
        Optional[Path],
        typer.Option("--output", "-o", help="Output file path for the JSON report"),
    ] = None,
    verbose: Annotated[
        bool,
        typer.Option("--verbose", "-v", help="Show the score breakdown"),
    ] = False,
) -> None:
    """
    Score a saved analysis for a subject.

    Mathematics is graded on answer accuracy; every other subject on a
    weighted blend of skills and accuracy.
    """
    settings = get_settings()

    if not analysis_file.exists():
        console.print(f"[red]Error:[/red] Analysis file not found: {analysis_file}")
        raise typer.Exit(1)

    try:
        data = json.loads(analysis_file.read_text(encoding="utf-8"))
    except json.JSONDecodeError as e:
        console.print(f"[red]Invalid JSON:[/red] {e}")
        raise typer.Exit(1)

    try:
        service = GradingService(settings)
        submission, audit = service.grade(data, subject)
    except ValidationError as e:
        console.print(f"[red]Validation Error:[/red] {e}")
        raise typer.Exit(1)
    except ComputationError as e:
        console.print(f"[red]Computation Error:[/red] {e}")
        raise typer.Exit(2)

    _display_results(submission, settings.passing_score, verbose)

    if output:
        saved_path = _save_report(submission, audit, output)
        console.print(f"\n[green]Report saved to:[/green] {saved_path}")


@app.command()
def classify(
    subject: Annotated[str, typer.Argument(help="Subject label to classify")],
) -> None:
    """Show which grading method applies to a subject."""
    method = classify_subject(subject)
    console.print(f"{subject!r}: [bold]{method.value}[/bold]")
    console.print(f"[dim]{METHOD_DESCRIPTIONS[method]}[/dim]")


@app.command()
def weights() -> None:
    """Show the weights used for weighted-criteria grading."""
    table = Table(title="Weighted Criteria")
    table.add_column("Component", style="cyan")
    table.add_column("Weight", justify="right")

    for name, weight in get_scoring_weights().items():
        table.add_row(name, f"{weight * 100:.0f}%")

    console.print(table)


def _display_results(
    submission: GradedSubmission, passing_score: int, verbose: bool = False
) -> None:
    """Display the score panel and, if verbose, the breakdown table."""
    score_color = (
        "green"
        if submission.score >= passing_score
        else "yellow" if submission.score >= 50 else "red"
    )
    console.print(
        Panel(
            f"[{score_color}][bold]{submission.score}%[/bold] "
            f"({submission.letter_grade})[/{score_color}]\n"
            f"[dim]{METHOD_DESCRIPTIONS[submission.method]}[/dim]",
            title="Overall Grade",
        )
    )

    if verbose:
        table = Table(title="Score Breakdown")
        table.add_column("Component", style="cyan")
        table.add_column("Weight", justify="right")
        table.add_column("Score", justify="right")

        for component in submission.breakdown.components:
            table.add_row(
                component.name,
                f"{component.weight * 100:.0f}%",
                f"{component.percentage}%",
            )

        console.print(table)


def _save_report(submission: GradedSubmission, audit: AuditRecord, output: Path) -> Path:
    """Write the submission and audit record as JSON."""
    output.parent.mkdir(parents=True, exist_ok=True)
    report = {
        "submission": submission.model_dump(mode="json"),
        "audit": audit.model_dump(mode="json"),
    }
    output.write_text(json.dumps(report, indent=2), encoding="utf-8")
    return output


if __name__ == "__main__":
    app()
