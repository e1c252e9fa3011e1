"""
CLI Main - Typer-based command-line interface.

Usage:
    siteanalyst analyze path/to/offering.pdf --output analysis.json
    siteanalyst analyze path/to/offering.pdf --geocode
    siteanalyst sections
    siteanalyst serve
"""

from __future__ import annotations

import asyncio
import json
import logging
from pathlib import Path

import typer
from rich.console import Console
from rich.progress import Progress, SpinnerColumn, TextColumn
from rich.table import Table

from siteanalyst.config import AggregateExtractionError, SiteAnalystError, get_settings
from siteanalyst.domains.extraction import DEFAULT_REGISTRY, LocationAnalysisRecord

app = typer.Typer(
    name="siteanalyst",
    help="SiteAnalyst - Location analysis from real estate PDFs",
    add_completion=False,
)
console = Console()


@app.callback()
def configure(
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Debug logging"),
) -> None:
    """Configure logging for every command."""
    level = "DEBUG" if verbose else get_settings().log_level.upper()
    logging.basicConfig(level=level, format="%(levelname)s %(name)s: %(message)s")


@app.command()
def analyze(
    pdf_path: Path = typer.Argument(..., help="Path to PDF file"),
    output: Path | None = typer.Option(None, "--output", "-o", help="Output JSON path"),
    geocode: bool = typer.Option(False, "--geocode", "-g", help="Geocode land sale addresses"),
) -> None:
    """Extract a complete location analysis from a PDF."""
    if not pdf_path.exists():
        console.print(f"[red]Error:[/red] File not found: {pdf_path}")
        raise typer.Exit(1)

    asyncio.run(_analyze_async(pdf_path, output, geocode))


async def _analyze_async(pdf_path: Path, output: Path | None, geocode: bool) -> None:
    """Async analysis implementation."""
    from siteanalyst.adapters.gemini import GeminiClient, GeminiConfig
    from siteanalyst.domains.extraction import GeminiSectionBackend, SectionOrchestrator

    settings = get_settings()

    with Progress(
        SpinnerColumn(),
        TextColumn("[progress.description]{task.description}"),
        console=console,
    ) as progress:
        task = progress.add_task("Initializing...", total=None)

        gemini = GeminiClient(GeminiConfig.from_settings(settings))
        orchestrator = SectionOrchestrator(GeminiSectionBackend(gemini))

        progress.update(
            task, description=f"Extracting {len(orchestrator.sections)} sections..."
        )

        try:
            record = await orchestrator.extract_all(pdf_path.read_bytes())
        except AggregateExtractionError as e:
            progress.stop()
            console.print(f"\n[red]Extraction Incomplete[/red]: {e.message}\n")
            console.print(_failure_table(e))
            raise typer.Exit(1)
        except SiteAnalystError as e:
            progress.stop()
            console.print(f"[red]Error:[/red] [{e.code.value}] {e.message}")
            raise typer.Exit(1)

        payload = record.to_payload()

        if geocode:
            progress.update(task, description="Geocoding land sales...")
            payload["geocodedSales"] = await _geocode_sales(record)

    console.print("\n[green]Extraction Complete[/green]\n")
    console.print(_summary_table(record))

    if output:
        output.write_text(json.dumps(payload, indent=2))
        console.print(f"\n[green]Saved to:[/green] {output}")


async def _geocode_sales(record: LocationAnalysisRecord) -> list[dict]:
    from siteanalyst.adapters.geocoding import GeocodingClient, GeocodingConfig

    client = GeocodingClient(GeocodingConfig.from_settings(get_settings()))
    try:
        results = await client.geocode_many(s.address for s in record.land_sales.recent_sales)
    finally:
        await client.close()

    located = sum(r.success for r in results)
    console.print(f"[dim]Geocoded {located}/{len(results)} land sale addresses[/dim]")
    return [r.model_dump() for r in results]


def _summary_table(record: LocationAnalysisRecord) -> Table:
    """Summarize a record, one row per section."""
    table = Table(title=record.property_name.property_name or "Location Analysis")
    table.add_column("Section", style="cyan")
    table.add_column("Summary", style="green")
    table.add_column("Confidence", justify="right")

    rows = {
        "supplyPipeline": (
            f"{len(record.supply_pipeline.yearly_supply)} years, "
            f"{len(record.supply_pipeline.nearby_projects)} nearby projects"
        ),
        "landSales": (
            f"{len(record.land_sales.recent_sales)} sales, "
            f"avg {record.land_sales.market_trends.average_psf}/SF"
        ),
        "demographics": (
            f"median income {record.demographics.income_stats.median_income:,}, "
            f"growth {record.demographics.income_stats.growth_rate}"
        ),
        "proximityInsights": f"walk score {record.proximity_insights.scores.walk_score}",
        "zoningOverlays": record.zoning_overlays.current.designation,
        "riskFactors": ", ".join(
            f"{r.title} ({r.severity.value})" for r in record.risk_factors
        ),
        "submarket": record.submarket.submarket,
        "propertyType": record.property_type.property_type,
        "propertyName": record.property_name.property_name,
    }
    for section, summary in rows.items():
        confidence = record.confidence.get(section)
        table.add_row(section, summary, f"{confidence:.0%}" if confidence is not None else "-")
    return table


def _failure_table(error: AggregateExtractionError) -> Table:
    """List every failed section with each of its field errors."""
    table = Table(title="Failed Sections")
    table.add_column("Section", style="cyan")
    table.add_column("Field", style="yellow")
    table.add_column("Message", style="red")

    for failure in error.failures:
        for i, field_error in enumerate(failure.errors):
            table.add_row(
                failure.section.value if i == 0 else "",
                field_error.field,
                field_error.message,
            )
    return table


@app.command()
def sections() -> None:
    """List the sections extracted from each document."""
    table = Table(title="Sections")
    table.add_column("#", justify="right", style="dim")
    table.add_column("Section", style="cyan")
    table.add_column("Shape")

    for i, descriptor in enumerate(DEFAULT_REGISTRY, 1):
        table.add_row(str(i), descriptor.section.value, descriptor.data_schema)

    console.print(table)


@app.command()
def serve(
    host: str | None = typer.Option(None, "--host", "-h", help="Host to bind"),
    port: int | None = typer.Option(None, "--port", "-p", help="Port to bind"),
    reload: bool = typer.Option(False, "--reload", "-r", help="Enable auto-reload"),
) -> None:
    """Start the API server."""
    import uvicorn

    settings = get_settings()
    host = host or settings.api_host
    port = port or settings.api_port

    console.print("\n[green]Starting SiteAnalyst API server[/green]")
    console.print(f"[dim]http://{host}:{port}[/dim]\n")

    uvicorn.run(
        "siteanalyst.interfaces.api:create_app",
        host=host,
        port=port,
        reload=reload,
        factory=True,
    )


@app.command()
def version() -> None:
    """Show version information."""
    from siteanalyst import __version__

    console.print(f"SiteAnalyst v{__version__}")


def main() -> None:
    """CLI entry point."""
    app()


if __name__ == "__main__":
    main()
