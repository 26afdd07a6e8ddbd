"""CLI entry point for LabelScan."""

from pathlib import Path

import click
from rich.console import Console
from rich.markup import escape
from rich.panel import Panel
from rich.progress import Progress, SpinnerColumn, TextColumn
from rich.table import Table

from labelscan.api.services.scan_service import ScanService
from labelscan.config import get_settings
from labelscan.logger import get_logger
from labelscan.models.scan import ScanResult
from labelscan.services.analysis_model import build_analysis_model
from labelscan.services.history import SQLiteHistoryStore

console = Console()
logger = get_logger(__name__)

RISK_STYLES = {
    "Safe": "green",
    "Caution": "yellow",
    "Toxic/Unhealthy": "red",
    "Unknown": "dim",
}


@click.group()
@click.version_option(version="0.1.0", prog_name="labelscan")
def cli():
    """LabelScan: safety and nutrition analysis for photographed products.

    Snap a label, a fresh food item, or any object and get a verdict.
    """
    pass


def _history_store(settings) -> SQLiteHistoryStore:
    return SQLiteHistoryStore(
        settings.history_db_path,
        key=settings.history_key,
        max_entries=settings.history_limit,
    )


def _risk_label(scan: ScanResult) -> str:
    style = RISK_STYLES.get(scan.risk_level.value, "white")
    return f"[{style}]{scan.risk_level.value}[/{style}]"


@cli.command()
@click.argument("images", nargs=-1, type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.option("--no-save", is_flag=True, help="Do not store the results in scan history")
def scan(images: tuple[Path, ...], no_save: bool):
    """Analyze one or more images in a single batch."""
    logger.info("=" * 60)
    logger.info(f"Scan command started with {len(images)} images")

    if not images:
        console.print("[red]Error:[/red] Give at least one image to scan.")
        raise SystemExit(1)

    try:
        settings = get_settings()
        model = build_analysis_model(settings)
        logger.debug("Settings loaded successfully")
    except Exception as e:
        logger.error(f"Configuration error: {e}")
        console.print(f"[red]Configuration error:[/red] {escape(str(e))}")
        console.print("Make sure ANTHROPIC_API_KEY (or GEMINI_API_KEY with AI_PROVIDER=gemini) is set")
        raise SystemExit(1)

    service = ScanService(settings, model=model, history=_history_store(settings))

    try:
        with Progress(
            SpinnerColumn(),
            TextColumn("[progress.description]{task.description}"),
            console=console,
        ) as progress:
            task = progress.add_task(f"Analyzing {len(images)} images...", total=None)
            results = service.scan([path.read_bytes() for path in images], save=not no_save)
            progress.update(task, completed=True)

    except ValueError as e:
        logger.error(f"Rejected batch: {e}")
        console.print(f"[red]Error:[/red] {escape(str(e))}")
        raise SystemExit(1)

    for path, result in zip(images, results):
        _display_scan(result, title=path.name)

    if not no_save:
        console.print(f"[dim]Saved {len(results)} scans to history ({settings.history_db_path})[/dim]")


@cli.command()
@click.option("--limit", "-n", type=int, default=20, help="Number of scans to show (default: 20)")
def history(limit: int):
    """List recent scans, newest first."""
    settings = get_settings()
    scans = _history_store(settings).list(limit)

    if not scans:
        console.print("[yellow]No scans in history.[/yellow]")
        return

    table = Table(title="Scan History", show_header=True)
    table.add_column("ID", style="dim")
    table.add_column("Verdict", style="bold", max_width=40)
    table.add_column("Category")
    table.add_column("Risk")

    for item in scans:
        table.add_row(item.id, escape(item.verdict), escape(item.category), _risk_label(item))

    console.print(table)


@cli.command()
@click.argument("scan_id")
def show(scan_id: str):
    """Show the full analysis of a stored scan."""
    settings = get_settings()
    item = _history_store(settings).get_by_id(scan_id)

    if item is None:
        console.print(f"[red]Error:[/red] Scan {scan_id} not found")
        raise SystemExit(1)

    _display_scan(item, title=item.id)


@cli.command()
@click.option("--host", default="127.0.0.1", help="Bind address (default: 127.0.0.1)")
@click.option("--port", "-p", type=int, default=8080, help="Port (default: 8080)")
def serve(host: str, port: int):
    """Run the HTTP API."""
    import uvicorn

    logger.info(f"Serving API on {host}:{port}")
    uvicorn.run("labelscan.api.main:app", host=host, port=port)


def _display_scan(result: ScanResult, title: str):
    """Display one analysis result."""
    console.print()
    lines = [
        f"[bold]{escape(result.verdict)}[/bold]",
        f"Category: {escape(result.category)}    Risk: {_risk_label(result)}",
    ]
    if result.estimated_weight:
        lines.append(f"Estimated weight: {escape(result.estimated_weight)}")
    lines.append("")
    lines.append(escape(result.reasoning))
    if result.legal_issues:
        lines.append("")
        lines.append(f"[red]Legal issues:[/red] {escape(result.legal_issues)}")

    console.print(Panel("\n".join(lines), title=escape(title), border_style=RISK_STYLES.get(result.risk_level.value, "blue")))

    if result.nutrition:
        n = result.nutrition
        console.print(
            f"[bold]Nutrition:[/bold] {escape(n.calories)} | protein {escape(n.protein)} | "
            f"carbs {escape(n.carbs)} | fat {escape(n.fat)}"
        )
        if n.vitamins:
            console.print(f"[dim]Vitamins: {escape(', '.join(n.vitamins))}[/dim]")

    if result.ingredients:
        table = Table(show_header=True)
        table.add_column("Ingredient", style="bold")
        table.add_column("Quantity", justify="right")
        table.add_column("Risk")
        table.add_column("Notes", max_width=50)

        for ingredient in result.ingredients:
            style = RISK_STYLES.get(ingredient.risk.value, "white")
            table.add_row(
                escape(ingredient.name),
                escape(ingredient.quantity or "-"),
                f"[{style}]{ingredient.risk.value}[/{style}]",
                escape(ingredient.description),
            )

        console.print(table)

    if result.search_query:
        console.print(f"[dim]Learn more: {escape(result.search_query)}[/dim]")


if __name__ == "__main__":
    cli()
