"""CLI interface using typer + rich."""

from __future__ import annotations

import asyncio
import json
import logging
from pathlib import Path

from dotenv import load_dotenv

load_dotenv()

import typer
from rich.console import Console
from rich.logging import RichHandler
from rich.panel import Panel
from rich.progress import Progress, SpinnerColumn, TextColumn
from rich.table import Table

from interview_feedback.clients.llm_client import LLMClient
from interview_feedback.clients.transcript_client import TranscriptClient
from interview_feedback.config import load_config
from interview_feedback.models.feedback import CategoryRating, FeedbackSummary
from interview_feedback.models.job import JobInfo
from interview_feedback.pipeline.categories import display_categories
from interview_feedback.pipeline.normalizer import normalize_feedback_markdown
from interview_feedback.pipeline.orchestrator import FeedbackOptions, FeedbackPipeline
from interview_feedback.pipeline.prompt_builder import build_prompt
from interview_feedback.pipeline.sanitizer import sanitize_transcript
from interview_feedback.pipeline.summary_parser import parse_summary

app = typer.Typer(
    name="interview-feedback",
    help="AI mock interview feedback generator",
    no_args_is_help=True,
)
console = Console()


def _setup_logging(verbose: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(message)s",
        handlers=[RichHandler(console=console, show_path=False)],
        force=True,
    )


def _read_file(path: Path, label: str) -> str:
    if not path.exists():
        console.print(f"[red]{label} not found: {path}[/red]")
        raise typer.Exit(1)
    return path.read_text(encoding="utf-8")


def _job_info(title: str, description: str | None, description_file: Path | None, level: str) -> JobInfo:
    if description_file is not None:
        description = _read_file(description_file, "Job description file")
    return JobInfo(title=title, description=description or "", experience_level=level)


def _category_table(categories: list[CategoryRating], summary: FeedbackSummary | None = None) -> Table:
    title = f"Overall Rating: {summary.overall_rating:g}/10" if summary is not None else "Categories"
    table = Table(title=title)
    table.add_column("Category")
    table.add_column("Rating", justify="right")
    table.add_column("Summary")
    for category in categories:
        rating = f"{category.rating:g}" if category.rating is not None else "-"
        table.add_row(category.name, rating, category.summary or "")
    return table


@app.command()
def generate(
    chat_id: str = typer.Argument(help="Interview chat id in the transcript store"),
    title: str = typer.Option(..., "--title", help="Role title"),
    name: str = typer.Option(..., "--name", help="Interviewee name"),
    level: str = typer.Option("", "--level", help="Experience level"),
    description: str = typer.Option(None, "--description", help="Job description text"),
    description_file: Path = typer.Option(None, "--description-file", help="Job description file"),
    json_summary: bool = typer.Option(False, "--json-summary", help="Ask for a leading JSON summary"),
    output: Path = typer.Option(None, "--output", "-o", help="Output file path (.md)"),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Debug logging"),
) -> None:
    """Generate normalized interview feedback for a stored chat."""
    _setup_logging(verbose)
    config = load_config()
    job = _job_info(title, description, description_file, level)

    llm = LLMClient(timeout=config.llm.timeout, max_retries=config.llm.max_retries)
    transcripts = TranscriptClient(
        base_url=config.transcript.base_url,
        page_size=config.transcript.page_size,
        timeout=config.transcript.timeout,
    )
    pipeline = FeedbackPipeline(
        llm,
        transcripts,
        model=config.llm.model,
        step_limit=config.generation.step_limit,
        temperature=config.generation.temperature,
        max_messages=config.transcript.max_messages,
        max_message_length=config.transcript.max_message_length,
        max_job_description_length=config.prompt.max_job_description_length,
        max_tokens=config.llm.max_tokens,
    )
    options = FeedbackOptions(
        include_json_summary=json_summary or config.generation.include_json_summary,
    )

    async def _run():
        try:
            return await pipeline.run(chat_id, job, name, options, on_phase=on_phase)
        finally:
            await transcripts.aclose()

    with Progress(
        SpinnerColumn(),
        TextColumn("[progress.description]{task.description}"),
        console=console,
    ) as progress:
        task = progress.add_task("Generating feedback...", total=None)

        def on_phase(phase: str, detail: str) -> None:
            progress.update(task, description=detail)

        result = asyncio.run(_run())

    if output is None:
        console.print(result.markdown)
    else:
        output.parent.mkdir(parents=True, exist_ok=True)
        output.write_text(result.markdown, encoding="utf-8")
        console.print(f"[green]Feedback saved: {output}[/green]")

    if result.categories:
        console.print(_category_table(result.categories, result.summary))

    meta = result.metadata
    console.print(
        Panel(
            f"Messages: {meta['message_count']} | Model: {meta['model']}"
            f"\nTokens: {meta['input_tokens']} in / {meta['output_tokens']} out"
            f"\nElapsed: {result.elapsed_seconds:.1f}s",
            title="Run",
        )
    )


@app.command()
def prompt(
    transcript_file: Path = typer.Argument(help="JSON file with a list of raw chat turns"),
    title: str = typer.Option(..., "--title", help="Role title"),
    name: str = typer.Option(..., "--name", help="Interviewee name"),
    level: str = typer.Option("", "--level", help="Experience level"),
    description: str = typer.Option(None, "--description", help="Job description text"),
    description_file: Path = typer.Option(None, "--description-file", help="Job description file"),
    json_summary: bool = typer.Option(False, "--json-summary", help="Ask for a leading JSON summary"),
) -> None:
    """Print the prompt that would be sent for a local transcript."""
    config = load_config()
    try:
        turns = json.loads(_read_file(transcript_file, "Transcript file"))
    except json.JSONDecodeError as exc:
        console.print(f"[red]Transcript file is not valid JSON: {exc}[/red]")
        raise typer.Exit(1)
    if not isinstance(turns, list):
        console.print("[red]Transcript file must contain a JSON list of turns[/red]")
        raise typer.Exit(1)

    transcript = sanitize_transcript(
        turns,
        max_messages=config.transcript.max_messages,
        max_text_length=config.transcript.max_message_length,
    )
    text = build_prompt(
        transcript,
        _job_info(title, description, description_file, level),
        name,
        json_summary,
        max_job_description_length=config.prompt.max_job_description_length,
    )
    typer.echo(text)


@app.command()
def normalize(
    file: Path = typer.Argument(help="Saved model output"),
    output: Path = typer.Option(None, "--output", "-o", help="Output file path (.md)"),
) -> None:
    """Rebuild a saved model output into canonical feedback markdown."""
    normalized = normalize_feedback_markdown(_read_file(file, "File"))
    if output is None:
        typer.echo(normalized, nl=False)
        return
    output.parent.mkdir(parents=True, exist_ok=True)
    output.write_text(normalized, encoding="utf-8")
    console.print(f"[green]Normalized feedback saved: {output}[/green]")


@app.command()
def summary(
    file: Path = typer.Argument(help="Saved model output"),
) -> None:
    """Show the category ratings of a saved model output.

    Uses the leading JSON summary when valid, otherwise the section headings.
    """
    raw = _read_file(file, "File")
    parsed = parse_summary(raw).summary
    categories = display_categories(parsed, normalize_feedback_markdown(raw))
    if not categories:
        console.print("[yellow]No summary or rated sections found[/yellow]")
        raise typer.Exit(1)
    console.print(_category_table(categories, parsed))


if __name__ == "__main__":
    app()
