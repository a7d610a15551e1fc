from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

import typer

from cli.client import ApiClient
from cli.config import CLIConfig, load_config
from cli.render import render_created, render_metrics, render_range
from services.measurements import build_default_service
from services.seeding import DEFAULT_DAYS, generate_measurements


@dataclass
class CLIState:
    config: CLIConfig
    client: ApiClient


app = typer.Typer(
    help="Utilities for querying and feeding the measurements service.",
    context_settings={"help_option_names": ["-h", "--help"]},
)


def _get_state(ctx: typer.Context) -> CLIState:
    state = ctx.obj
    if not isinstance(state, CLIState):
        raise typer.Exit(code=1, message="CLI state is uninitialized.")
    return state


@app.callback()
def main(
    ctx: typer.Context,
    base_url: Optional[str] = typer.Option(
        None,
        "--base-url",
        "-b",
        help="API base URL (defaults to API_BASE_URL env or http://localhost:8000).",
    ),
    timeout: Optional[float] = typer.Option(
        None,
        "--timeout",
        help="Seconds to wait for each HTTP response.",
    ),
) -> None:
    """Entry point for the CLI."""
    config = load_config(base_url=base_url, timeout=timeout)
    client = ApiClient(config)
    ctx.obj = CLIState(config=config, client=client)
    ctx.call_on_close(client.close)


@app.command("query")
def query_command(
    ctx: typer.Context,
    field: str = typer.Argument(..., help="field1, field2 or field3."),
    start_date: str = typer.Argument(..., help="First day, YYYY-MM-DD."),
    end_date: str = typer.Argument(..., help="Last day, YYYY-MM-DD."),
    page: Optional[int] = typer.Option(None, "--page", "-p", help="Page number (default 1)."),
    limit: Optional[int] = typer.Option(None, "--limit", "-l", help="Page size (default 500)."),
) -> None:
    """List one field's values between two days."""
    state = _get_state(ctx)
    payload = state.client.query_range(field, start_date, end_date, page=page, limit=limit)
    render_range(payload)


@app.command("metrics")
def metrics_command(
    ctx: typer.Context,
    field: str = typer.Argument(..., help="field1, field2 or field3."),
    start_date: Optional[str] = typer.Option(None, "--start", help="First day, YYYY-MM-DD."),
    end_date: Optional[str] = typer.Option(None, "--end", help="Last day, YYYY-MM-DD."),
) -> None:
    """Show avg/min/max/stdDev/count for one field."""
    state = _get_state(ctx)
    payload = state.client.get_metrics(field, start_date=start_date, end_date=end_date)
    render_metrics(payload)


@app.command("ingest")
def ingest_command(
    ctx: typer.Context,
    field1: float = typer.Argument(...),
    field2: float = typer.Argument(...),
    field3: float = typer.Argument(...),
    timestamp: Optional[str] = typer.Option(
        None, "--timestamp", "-t", help="ISO-8601 instant; defaults to now on the server."
    ),
) -> None:
    """Send a single measurement to the API."""
    state = _get_state(ctx)
    payload = state.client.create_measurement(field1, field2, field3, timestamp=timestamp)
    render_created(payload)


@app.command("seed")
def seed_command(
    days: int = typer.Option(DEFAULT_DAYS, "--days", min=1, help="Days of hourly samples."),
    yes: bool = typer.Option(False, "--yes", "-y", help="Skip the confirmation prompt."),
) -> None:
    """Replace the configured store's contents with generated data."""
    if not yes:
        typer.confirm("This deletes every stored measurement. Continue?", abort=True)
    service = build_default_service(workers=1)
    try:
        count = service.seed(generate_measurements(days=days))
    finally:
        service.shutdown()
        build_default_service.cache_clear()
    typer.secho(f"Seeded {count} measurements.", fg=typer.colors.GREEN)
