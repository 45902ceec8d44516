"""CLI for the Persona Sharpener engine.

Provides command-line access to the question bank, alignment scoring,
persona clarity and validation summaries over JSON files exported from
the web application.
"""

import json
import logging
import sys
from pathlib import Path
from typing import Any, Optional

import click
import yaml
from pydantic import BaseModel, ValidationError
from rich.console import Console
from rich.markup import escape
from rich.panel import Panel
from rich.table import Table

from .alignment import calculate_alignment
from .clarity import calculate_avg_confidence, calculate_clarity, get_unsure_count
from .config import EngineConfig, load_config, save_default_config
from .confidence import get_confidence_color
from .persona_builder import build_persona_display
from .questions import (
    QUESTION_SEQUENCE,
    get_question_by_id,
    get_question_text,
    get_questions_by_category,
)
from .schema import MatchType, QuestionCategory
from .validation import compute_validation_summary

console = Console()

MATCH_STYLES = {
    MatchType.EXACT: "green",
    MatchType.PARTIAL: "yellow",
    MatchType.NONE: "red",
}


@click.group()
@click.version_option(version="1.0.0", prog_name="persona-sharpener")
@click.option(
    "--config", "config_path",
    type=click.Path(exists=True),
    help="Path to a persona-config.yaml file"
)
@click.option(
    "--verbose", "-v",
    is_flag=True,
    help="Show debug logging"
)
@click.pass_context
def main(ctx: click.Context, config_path: Optional[str], verbose: bool):
    """Persona Validation & Clarity Engine.

    Scores how closely real customers agree with a founder's persona
    assumptions, and how complete the founder's persona is.
    """
    if verbose:
        logging.basicConfig(level=logging.DEBUG, format="%(levelname)s %(name)s: %(message)s")

    try:
        ctx.obj = load_config(Path(config_path) if config_path else None)
    except (OSError, yaml.YAMLError, ValidationError) as e:
        console.print(f"[red]Error loading config:[/red] {escape(str(e))}")
        sys.exit(1)


def load_json_file(path: str) -> Any:
    """Load a JSON input file, exiting with a readable error on failure."""
    try:
        with open(path, "r", encoding="utf-8") as f:
            return json.load(f)
    except json.JSONDecodeError as e:
        console.print(f"[red]Error parsing {path}:[/red] {escape(str(e))}")
        sys.exit(1)
    except OSError as e:
        console.print(f"[red]Error reading {path}:[/red] {escape(str(e))}")
        sys.exit(1)


def load_responses_file(path: str) -> Any:
    """Load a responses file: a JSON list, or an object keyed by question id."""
    data = load_json_file(path)
    if not isinstance(data, (list, dict)):
        console.print(f"[red]Error:[/red] {path} must hold a JSON list or object of responses")
        sys.exit(1)
    return data


def parse_cli_value(text: str) -> Any:
    """Parse a command-line value as JSON, falling back to the plain string."""
    try:
        return json.loads(text)
    except json.JSONDecodeError:
        return text


def output_json(result: BaseModel) -> None:
    print(result.model_dump_json(indent=2, by_alias=True))


@main.command("questions")
@click.option(
    "--category", "-c",
    type=click.Choice([c.value for c in QuestionCategory]),
    help="Only show questions from this category"
)
@click.option(
    "--validation",
    is_flag=True,
    help="Show validator wording (questions without one are hidden)"
)
def questions_cmd(category: Optional[str], validation: bool):
    """List the question bank in answer order."""
    questions = get_questions_by_category(category) if category else list(QUESTION_SEQUENCE)
    if validation:
        questions = [q for q in questions if q.validation_question]

    table = Table(show_header=True, header_style="bold")
    table.add_column("ID", style="cyan", no_wrap=True)
    table.add_column("Type")
    table.add_column("Category")
    table.add_column("Field")
    table.add_column("Question")

    for q in questions:
        table.add_row(q.id, q.type.value, q.category.value, q.field, get_question_text(q, validation))

    console.print(table)
    console.print(f"\n{len(questions)} questions")


@main.command("align")
@click.argument("question_id")
@click.argument("reference")
@click.argument("candidate")
@click.option(
    "--json-output", "-j",
    is_flag=True,
    help="Output raw JSON instead of formatted text"
)
def align_cmd(question_id: str, reference: str, candidate: str, json_output: bool):
    """Score a validator answer against a founder assumption.

    REFERENCE and CANDIDATE are JSON values; bare words are read as strings.

    Examples:
        persona-sharpener align age-range younger middle
        persona-sharpener align tech-savvy 50 70
        persona-sharpener align dealbreakers '["too-slow","privacy"]' '["privacy"]'
    """
    result = calculate_alignment(question_id, parse_cli_value(reference), parse_cli_value(candidate))

    if json_output:
        output_json(result)
        return

    if get_question_by_id(question_id) is None:
        console.print(f"[yellow]Warning: unknown question '{escape(question_id)}'[/yellow]")

    style = MATCH_STYLES[result.match_type]
    console.print(Panel(
        f"[bold {style}]{result.score}[/bold {style}] / 100  "
        f"([{style}]{result.match_type.value}[/{style}])\n{result.explanation}",
        title=f"Alignment: {question_id}",
    ))


@main.command("clarity")
@click.argument("responses_file", type=click.Path(exists=True))
@click.option(
    "--json-output", "-j",
    is_flag=True,
    help="Output raw JSON instead of formatted text"
)
def clarity_cmd(responses_file: str, json_output: bool):
    """Score the completeness of a founder's persona answers.

    RESPONSES_FILE holds a JSON list of responses, or an object keyed by
    question id.
    """
    responses = load_responses_file(responses_file)
    try:
        clarity = calculate_clarity(responses)
        avg_confidence = calculate_avg_confidence(responses)
        unsure = get_unsure_count(responses)
    except ValidationError as e:
        console.print(f"[red]Invalid responses:[/red] {escape(str(e))}")
        sys.exit(1)

    if json_output:
        print(json.dumps({
            "clarity": clarity.model_dump(),
            "avgConfidence": avg_confidence,
            "unsureCount": unsure,
        }, indent=2))
        return

    table = Table(show_header=True, header_style="bold", title="Persona Clarity")
    table.add_column("Category")
    table.add_column("Score", justify="right")
    for name, score in clarity.model_dump().items():
        if name != "overall":
            table.add_row(name, str(score))
    table.add_row("[bold]overall[/bold]", f"[bold]{clarity.overall}[/bold]")

    console.print(table)
    console.print(f"Average confidence: {avg_confidence}")
    console.print(f"Unsure answers: {unsure}")


@main.command("persona")
@click.argument("responses_file", type=click.Path(exists=True))
@click.option("--id", "persona_id", default="persona", help="Persona id")
@click.option("--name", "-n", help="Persona name extracted from the brain dump")
@click.option(
    "--json-output", "-j",
    is_flag=True,
    help="Output raw JSON instead of formatted text"
)
def persona_cmd(responses_file: str, persona_id: str, name: Optional[str], json_output: bool):
    """Build a persona profile from a founder's responses."""
    responses = load_responses_file(responses_file)
    try:
        persona = build_persona_display(persona_id, responses, name=name)
    except ValidationError as e:
        console.print(f"[red]Invalid responses:[/red] {escape(str(e))}")
        sys.exit(1)

    if json_output:
        output_json(persona)
        return

    lines = [
        f"[italic]{persona.summary}[/italic]",
        "",
        f"Clarity: {persona.clarity.overall}%",
        f"Average confidence: {persona.avg_confidence}",
        f"Unsure answers: {persona.unsure_count}",
    ]
    if persona.quote:
        lines.insert(1, f'"{persona.quote}"')
    console.print(Panel("\n".join(lines), title=f"[bold]{persona.archetype}[/bold]"))


@main.command("summary")
@click.argument("validation_file", type=click.Path(exists=True))
@click.option(
    "--json-output", "-j",
    is_flag=True,
    help="Output raw JSON instead of formatted text"
)
@click.pass_obj
def summary_cmd(config: EngineConfig, validation_file: str, json_output: bool):
    """Summarize validator responses against the founder's assumptions.

    VALIDATION_FILE is a JSON object with "sessions", "founderResponses"
    and "validationResponses" lists.
    """
    data = load_json_file(validation_file)
    if not isinstance(data, dict):
        console.print("[red]Error:[/red] expected a JSON object")
        sys.exit(1)

    try:
        summary = compute_validation_summary(
            data.get("sessions", []),
            data.get("founderResponses", []),
            data.get("validationResponses", []),
            config=config,
        )
    except ValidationError as e:
        console.print(f"[red]Invalid validation data:[/red] {escape(str(e))}")
        sys.exit(1)

    if json_output:
        output_json(summary)
        return

    level = summary.confidence_level
    color = get_confidence_color(level.confidence_percent)
    console.print("\n[bold blue]Validation Summary[/bold blue]")
    console.print(
        f"Sessions: {summary.total_sessions} "
        f"({summary.completed_sessions} completed, {summary.in_progress_sessions} in progress, "
        f"{summary.abandoned_sessions} abandoned)"
    )
    console.print(f"Responses: {summary.total_responses} across {summary.questions_with_responses} questions")
    overall = summary.overall_alignment_score
    console.print(f"Overall alignment: {overall if overall is not None else 'n/a'}")
    console.print(f"Confidence: [{color}]{level.label}[/{color}] - {level.message}")

    if summary.top_misalignments:
        table = Table(show_header=True, header_style="bold", title="Top Misalignments")
        table.add_column("Question")
        table.add_column("Category")
        table.add_column("Alignment", justify="right")
        table.add_column("Responses", justify="right")
        for m in summary.top_misalignments:
            table.add_row(m.question_text, m.category, str(m.alignment_score), str(m.response_count))
        console.print(table)


@main.command("init-config")
@click.option(
    "--out", "-o",
    type=click.Path(),
    default="persona-config.yaml",
    help="Output path for the configuration file"
)
@click.option(
    "--force", "-f",
    is_flag=True,
    help="Overwrite existing config file"
)
def init_config_cmd(out: str, force: bool):
    """Generate a default configuration file.

    Example:
        persona-sharpener init-config --out my-config.yaml
    """
    out_path = Path(out)
    if out_path.exists() and not force:
        console.print(f"[red]Error:[/red] Config file already exists: {out}")
        console.print("Use --force to overwrite")
        sys.exit(1)

    try:
        save_default_config(out_path)
    except OSError as e:
        console.print(f"[red]Error creating config:[/red] {escape(str(e))}")
        sys.exit(1)

    console.print(f"[green]✓[/green] Config file created: {out}")
    console.print("\nThe engine will look for config in this order:")
    console.print("  1. PERSONA_SHARPENER_CONFIG environment variable")
    console.print("  2. ./persona-config.yaml (current directory)")
    console.print("  3. ~/.config/persona-sharpener/config.yaml")


if __name__ == "__main__":
    main()
