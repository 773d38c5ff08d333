"""Command-line interface for the fracturing stage voice log."""

import json
import logging
import sys
from pathlib import Path
from typing import Optional

import structlog
import typer
from rich.console import Console
from rich.panel import Panel
from rich.table import Table

from fracvoice.config.settings import get_settings
from fracvoice.models import (
    STAGE_COLUMNS,
    Alternative,
    HighlightState,
    RecognitionResult,
    format_quantity,
)
from fracvoice.services.export import export_csv
from fracvoice.services.storage import (
    StorageError,
    delete_snapshot,
    load_snapshot,
    save_snapshot,
)
from fracvoice.services.workbook import (
    EDITABLE_FIELDS,
    StageWorkbook,
    UtteranceOutcome,
    WorkbookError,
)

# Configure structlog for CLI
structlog.configure(
    processors=[
        structlog.stdlib.filter_by_level,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.add_log_level,
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.JSONRenderer(),
    ],
    wrapper_class=structlog.stdlib.BoundLogger,
    context_class=dict,
    logger_factory=structlog.stdlib.LoggerFactory(),
    cache_logger_on_first_use=True,
)

app = typer.Typer(
    name="fracvoice",
    help="Fracturing stage voice log - capture stage data and track wellbore volumes",
    add_completion=False,
)
console = Console()

ROW_STYLES = {
    HighlightState.WHITE: "",
    HighlightState.YELLOW: "black on yellow",
    HighlightState.RED: "bold white on red",
}


@app.callback()
def main(
    ctx: typer.Context,
    state: Optional[Path] = typer.Option(
        None,
        "--state",
        "-s",
        help="Workbook state file (default: STATE_FILE setting)",
    ),
    verbose: bool = typer.Option(
        False,
        "--verbose",
        "-v",
        help="Enable verbose logging",
    ),
) -> None:
    """Fracturing stage voice log."""
    settings = get_settings()
    if verbose:
        logging.basicConfig(level=logging.DEBUG)
    else:
        logging.basicConfig(level=getattr(logging, settings.log_level.upper(), logging.WARNING))

    ctx.obj = state or Path(settings.state_file)


def _open_workbook(ctx: typer.Context) -> StageWorkbook:
    """Load the workbook and persist it after every update."""
    state_path: Path = ctx.obj
    try:
        snapshot = load_snapshot(state_path)
    except StorageError as e:
        console.print(f"[red]Error:[/red] {e}")
        sys.exit(1)

    if snapshot is None:
        workbook = StageWorkbook()
    else:
        workbook = StageWorkbook.from_snapshot(snapshot)

    workbook.subscribe(lambda snap: save_snapshot(snap, state_path))
    return workbook


def _run(action) -> None:
    try:
        action()
    except WorkbookError as e:
        console.print(f"[red]Error:[/red] {e}")
        sys.exit(1)


@app.command()
def say(
    ctx: typer.Context,
    text: str = typer.Argument(..., help="Recognized utterance text"),
    confidence: float = typer.Option(1.0, "--confidence", "-c", min=0.0, max=1.0),
) -> None:
    """Fill the next open stage from an utterance."""
    workbook = _open_workbook(ctx)
    result = RecognitionResult(alternatives=[Alternative(transcript=text, confidence=confidence)])

    workbook.session.start()
    try:
        outcome = workbook.handle_recognition([result])
    finally:
        workbook.session.stop()

    _display_outcome(outcome)


@app.command()
def recognize(
    ctx: typer.Context,
    results_path: Path = typer.Argument(
        ...,
        help="JSON file with a list of recognition results",
        exists=True,
        file_okay=True,
        dir_okay=False,
        readable=True,
    ),
) -> None:
    """Fill the next open stage from raw recognizer results."""
    workbook = _open_workbook(ctx)

    try:
        with open(results_path, "r", encoding="utf-8") as f:
            data = json.load(f)
        results = [RecognitionResult.model_validate(item) for item in data]
    except (json.JSONDecodeError, ValueError) as e:
        console.print(f"[red]Invalid results file:[/red] {e}")
        sys.exit(1)

    workbook.session.start()
    try:
        outcome = workbook.handle_recognition(results)
    finally:
        workbook.session.stop()

    _display_outcome(outcome)


@app.command()
def edit(
    ctx: typer.Context,
    row: int = typer.Argument(..., help="Row number (1-based)"),
    field: str = typer.Argument(..., help=f"One of: {', '.join(EDITABLE_FIELDS)}"),
    value: str = typer.Argument(..., help="New cell text"),
) -> None:
    """Edit a stage cell by hand."""
    workbook = _open_workbook(ctx)
    _run(lambda: workbook.edit_stage(row - 1, field, value))
    _display_table(workbook)


@app.command("add-row")
def add_row(ctx: typer.Context) -> None:
    """Append an empty stage row."""
    workbook = _open_workbook(ctx)
    index = workbook.add_stage()
    console.print(f"[green]Added row {index + 1}[/green]")


@app.command("delete-row")
def delete_row(
    ctx: typer.Context,
    row: Optional[int] = typer.Argument(None, help="Row number (1-based)"),
) -> None:
    """Delete a stage row."""
    workbook = _open_workbook(ctx)
    _run(lambda: workbook.delete_stage(None if row is None else row - 1))
    console.print(f"[green]Deleted row {row}[/green]")


@app.command()
def capacity(
    ctx: typer.Context,
    ground: Optional[float] = typer.Option(None, "--ground", "-g", help="Ground manifold volume"),
    wellbore: Optional[float] = typer.Option(None, "--wellbore", "-w", help="Wellbore volume"),
) -> None:
    """Set ground and/or wellbore volume."""
    workbook = _open_workbook(ctx)
    workbook.set_capacity(ground_volume=ground, wellbore_volume=wellbore)
    _display_capacity(workbook)


@app.command()
def wellbore(
    ctx: typer.Context,
    depth: float = typer.Option(..., "--depth", help="Section depth (m)"),
    diameter: float = typer.Option(..., "--diameter", help="Outer diameter (mm)"),
    wall: float = typer.Option(..., "--wall", help="Wall thickness (mm)"),
) -> None:
    """Compute the wellbore volume from pipe geometry."""
    workbook = _open_workbook(ctx)
    volume = workbook.apply_wellbore_geometry(depth, diameter, wall)
    console.print(f"[green]Wellbore volume:[/green] {volume:.1f}")
    _display_capacity(workbook)


@app.command()
def title(
    ctx: typer.Context,
    text: str = typer.Argument(..., help="Well and section title"),
) -> None:
    """Set the workbook title."""
    workbook = _open_workbook(ctx)
    workbook.set_title(text)
    console.print(f"[green]Title:[/green] {text}")


@app.command()
def show(ctx: typer.Context) -> None:
    """Display the stage table and the wellbore capacity stack."""
    workbook = _open_workbook(ctx)
    _display_table(workbook)
    _display_segments(workbook)


@app.command()
def export(
    ctx: typer.Context,
    directory: Optional[Path] = typer.Option(
        None,
        "--dir",
        "-d",
        help="Output directory (default: EXPORT_DIR setting)",
    ),
) -> None:
    """Export the stage table as CSV."""
    workbook = _open_workbook(ctx)
    path = export_csv(workbook.snapshot(), directory or Path(get_settings().export_dir))
    console.print(f"[green]Exported to:[/green] {path}")


@app.command()
def reset(
    ctx: typer.Context,
    yes: bool = typer.Option(False, "--yes", "-y", help="Skip confirmation"),
) -> None:
    """Reset the workbook to a single empty row."""
    if not yes and not typer.confirm("Reset all data?"):
        raise typer.Abort()

    delete_snapshot(ctx.obj)
    workbook = _open_workbook(ctx)
    workbook.reset()
    console.print("[green]Workbook reset[/green]")


@app.command()
def info() -> None:
    """Display system information and configuration."""
    from fracvoice import __version__

    settings = get_settings()

    console.print(
        Panel.fit(
            "[bold blue]Fracturing Stage Voice Log[/bold blue]",
            border_style="blue",
        )
    )

    table = Table(show_header=False, box=None)
    table.add_column("Setting", style="dim")
    table.add_column("Value")

    table.add_row("Version", __version__)
    table.add_row("Confidence Threshold", str(settings.confidence_threshold))
    table.add_row("Pressure Keyword", settings.pressure_keyword)
    table.add_row("Display Height", str(settings.display_height))
    table.add_row("Undo Depth", str(settings.max_undo))
    table.add_row("State File", settings.state_file)
    table.add_row("Export Dir", settings.export_dir)

    console.print(table)


def _display_outcome(outcome: UtteranceOutcome) -> None:
    if outcome.confidence is not None:
        console.print(f"[dim]Confidence:[/dim] {outcome.confidence * 100:.1f}%")

    if not outcome.line:
        console.print("[yellow]No usable values recognized[/yellow]")
        return

    console.print(f"[dim]Recognized:[/dim] {outcome.line}")
    if outcome.filled:
        console.print(f"[green]Filled row {outcome.stage_index + 1}[/green]")
    else:
        console.print("[yellow]No open row - add a row first[/yellow]")


def _display_capacity(workbook: StageWorkbook) -> None:
    cap = workbook.capacity
    console.print(
        f"[dim]Ground:[/dim] {cap.ground_volume:.1f}  "
        f"[dim]Wellbore:[/dim] {cap.wellbore_volume:.1f}  "
        f"[dim]Total:[/dim] {cap.total_volume:.1f}"
    )


def _display_table(workbook: StageWorkbook) -> None:
    """Display the stage table with highlight colors.

    Args:
        workbook: The workbook to display.
    """
    console.print(f"\n[bold]{workbook.title}[/bold]")
    _display_capacity(workbook)

    table = Table(show_lines=False)
    table.add_column("#", style="dim", justify="right")
    for column in STAGE_COLUMNS:
        table.add_column(column)

    for idx, stage in enumerate(workbook.stages, 1):
        table.add_row(str(idx), *stage.display_row(), style=ROW_STYLES[stage.highlight])

    console.print(table)
    console.print(f"[dim]Benchmark:[/dim] {format_quantity(workbook.benchmark)}")


def _display_segments(workbook: StageWorkbook) -> None:
    if not workbook.segments:
        console.print("\n[dim]Wellbore display empty[/dim]")
        return

    console.print("\n[bold]Wellbore[/bold]")
    table = Table(show_header=True, box=None)
    table.add_column("Row", justify="right")
    table.add_column("Segment")
    table.add_column("Height", justify="right")

    for segment in workbook.segments:
        table.add_row(
            str(segment.stage_index + 1),
            segment.label,
            f"{segment.height:.1f}",
            style=ROW_STYLES[segment.highlight],
        )

    console.print(table)


if __name__ == "__main__":
    app()
