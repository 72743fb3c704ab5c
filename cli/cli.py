"""Looptimer developer CLI.

Runs the API server, seeds the template library and exercises the timer
core (flattening, time parsing, AI generation) from the command line.
"""

import asyncio
import json
import os
from pathlib import Path
from typing import NoReturn

import typer
import uvicorn
from loguru import logger
from pydantic import ValidationError
from rich.console import Console
from rich.json import JSON
from rich.panel import Panel
from rich.table import Table
from rich.text import Text
from sqlalchemy import text

from looptimer.ai.cost import DEFAULT_SAMPLE_PROMPT, calculate_workout_generation_cost, get_prompt_stats
from looptimer.ai.generation import generate_workout, make_agent_completion
from looptimer.config.settings import settings
from looptimer.core.errors import LooptimerError
from looptimer.core.logger import setup_logger
from looptimer.db.session import get_session
from looptimer.main import init_database
from looptimer.templates.seed import TemplateLibraryError, load_builtin_templates, seed_templates
from looptimer.timers.export import parse_timer_from_json
from looptimer.timers.flatten import build_playback
from looptimer.timers.models import AdvancedConfig
from looptimer.timers.service import build_limited_playback
from looptimer.timers.time_format import format_time, parse_time_input

# Initialize Rich console for output
console = Console()

# Initialize Typer app
app = typer.Typer(
    name="looptimer-cli",
    help="Looptimer CLI - server, template library and timer tools",
    add_completion=False,
)

DEFAULT_HOST = os.getenv("SERVER_HOST", "127.0.0.1")


def _setup_logging(debug: bool = False) -> None:
    setup_logger(settings, level="DEBUG" if debug else None)


def _exit_with_error(message: str, code: int = 1) -> NoReturn:
    console.print(f"[red]Error:[/red] {message}", style="bold red")
    raise typer.Exit(code=code)


def _load_config_file(path: Path) -> tuple[str, AdvancedConfig]:
    """Read either an exported timer document or a bare timer config."""
    try:
        content = path.read_text(encoding="utf-8")
    except OSError as e:
        _exit_with_error(f"Cannot read {path}: {e}")

    imported = parse_timer_from_json(content)
    if imported.success and imported.data is not None:
        return imported.data.timer.name, imported.data.timer.data

    try:
        return path.stem, AdvancedConfig.model_validate_json(content)
    except ValidationError as e:
        _exit_with_error(f"{path} is neither a timer export nor a timer config ({imported.error}; {e.error_count()} errors)")


@app.command()
def serve(
    host: str = typer.Option(DEFAULT_HOST, "--host", "-h", help="Host to bind to"),
    port: int = typer.Option(8000, "--port", "-p", help="Port to bind to"),
    reload: bool = typer.Option(False, "--reload", help="Enable auto-reload"),
) -> None:
    """Run the FastAPI server with uvicorn."""
    _setup_logging()
    logger.info(f"Starting FastAPI server on {host}:{port} (reload={reload})")
    uvicorn.run("looptimer.main:app", host=host, port=port, reload=reload)


@app.command()
def check_db() -> None:
    """Verify the configured database is reachable."""
    _setup_logging()
    try:
        with get_session() as session:
            session.execute(text("SELECT 1"))
        ok, message = True, "Connected to database"
    except Exception as e:
        ok, message = False, f"Connection failed: {e!s}"

    console.print(
        Panel(
            Text("Database connection OK" if ok else "Database connection failed", style="bold green" if ok else "bold red"),
            subtitle=message,
            border_style="green" if ok else "red",
        )
    )
    if not ok:
        console.print("\n[yellow]Configuration help:[/yellow]")
        console.print("  Set DATABASE_URL, e.g. sqlite:///./looptimer.db or postgresql://user@localhost:5432/looptimer")
        raise typer.Exit(code=1)


@app.command("seed-templates")
def seed_templates_command(
    dry_run: bool = typer.Option(False, "--dry-run", help="Only validate the template library"),
) -> None:
    """Create tables and upsert the built-in template library."""
    _setup_logging()
    try:
        templates = load_builtin_templates()
    except TemplateLibraryError as e:
        _exit_with_error(f"{e.code}: {e.message}")

    table = Table(title="Built-in templates")
    table.add_column("ID", style="cyan")
    table.add_column("Name")
    table.add_column("Category", style="magenta")
    table.add_column("Total", justify="right")
    for template in templates:
        total = build_playback(template.config).formatted_total
        table.add_row(template.id, template.name, template.category.value, total)
    console.print(table)

    if dry_run:
        console.print(f"[yellow]Dry run: {len(templates)} templates validated, nothing written[/yellow]")
        return

    init_database(seed=False)
    with get_session() as session:
        count = seed_templates(session, templates)
    console.print(f"[green]Seeded {count} templates[/green]")


@app.command()
def playback(
    file: Path = typer.Argument(..., exists=True, dir_okay=False, help="Timer export or config JSON file"),
    as_json: bool = typer.Option(False, "--json", help="Print the playback script as JSON"),
) -> None:
    """Show the flattened playback script of a timer file."""
    name, config = _load_config_file(file)
    try:
        script = build_limited_playback(config, settings.max_playback_intervals)
    except LooptimerError as e:
        _exit_with_error(e.message)

    if as_json:
        console.print(JSON(script.model_dump_json(by_alias=True)))
        return

    table = Table(title=f"{name} - {script.interval_count} intervals, {script.formatted_total}")
    table.add_column("#", justify="right", style="dim")
    table.add_column("Name")
    table.add_column("Type", style="magenta")
    table.add_column("Duration", justify="right")
    table.add_column("Loops", style="cyan")
    for interval in script.intervals:
        loops = " > ".join(f"{p.iteration}/{p.loops}" for p in interval.loop_path)
        table.add_row(str(interval.position + 1), interval.name, interval.type.value, format_time(interval.duration), loops)
    console.print(table)


@app.command()
def parse_time(value: str = typer.Argument(..., help='Time such as "1:30" or "90"')) -> None:
    """Parse a time entry the way the editor does."""
    seconds = parse_time_input(value)
    console.print(f"{value!r} -> [bold]{seconds}[/bold] seconds ({format_time(seconds)})")


@app.command()
def ai_cost(
    prompt: str = typer.Argument(DEFAULT_SAMPLE_PROMPT, help="Prompt to estimate"),
    model: str = typer.Option(settings.ai_model, "--model", "-m", help="Priced model name"),
) -> None:
    """Estimate tokens and USD cost of one AI generation request."""
    try:
        cost = calculate_workout_generation_cost(prompt, model)
    except ValueError as e:
        _exit_with_error(str(e))
    stats = get_prompt_stats(prompt)

    table = Table(title=f"AI generation cost ({cost.model})")
    table.add_column("Call")
    table.add_column("Input tokens", justify="right")
    table.add_column("Output tokens", justify="right")
    table.add_column("Cost (USD)", justify="right", style="green")
    table.add_row("Router", str(cost.router_input_tokens), str(cost.router_output_tokens), f"${cost.router_cost:.6f}")
    table.add_row("Workout", str(cost.workout_input_tokens), str(cost.workout_output_tokens), f"${cost.workout_cost:.6f}")
    table.add_row("Total", str(cost.total_input_tokens), str(cost.total_output_tokens), f"${cost.total_cost:.6f}")
    console.print(table)
    console.print(
        f"[dim]Prompt characters: {stats.total_characters} (~{stats.total_tokens} tokens); "
        f"about {cost.requests_per_dollar} requests per dollar[/dim]"
    )


@app.command()
def generate(
    prompt: str = typer.Argument(..., help="Workout description"),
    output_file: Path | None = typer.Option(None, "--output", "-o", help="Write the config to this file"),
    debug: bool = typer.Option(False, "--debug", help="Enable debug logging"),
) -> None:
    """Generate a timer config with the configured AI provider."""
    _setup_logging(debug)
    if not settings.ai_api_key:
        _exit_with_error(f"No API key configured for AI provider '{settings.ai_provider}'")

    try:
        result = asyncio.run(generate_workout(prompt, make_agent_completion()))
    except LooptimerError as e:
        for detail in e.details:
            console.print(f"  [yellow]- {detail}[/yellow]")
        _exit_with_error(f"{e.code}: {e.message}")

    document = json.dumps(result.config, indent=2, ensure_ascii=False)
    if output_file:
        output_file.write_text(document, encoding="utf-8")
        console.print(f"[green]Wrote {output_file} (attempt {result.attempt})[/green]")
    else:
        console.print(JSON(document))
        console.print(f"[dim]Generated on attempt {result.attempt}[/dim]")


if __name__ == "__main__":
    app()
