from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

import typer

from cli.client import ApiClient
from cli.config import CLIConfig, load_config
from cli.render import render_points, render_reading, render_summary
from models.records import ChartView, Metric


@dataclass
class CLIState:
    config: CLIConfig
    client: ApiClient


app = typer.Typer(
    help="Utilities for interacting with the realtime sensor feed service.",
    context_settings={"help_option_names": ["-h", "--help"]},
)


def _get_state(ctx: typer.Context) -> CLIState:
    state = ctx.obj
    if not isinstance(state, CLIState):
        raise typer.Exit(code=1)
    return state


@app.callback()
def main(
    ctx: typer.Context,
    base_url: Optional[str] = typer.Option(
        None,
        "--base-url",
        "-b",
        help="Feed API base URL (defaults to API_BASE_URL env or http://localhost:8000).",
    ),
    timeout: Optional[float] = typer.Option(
        None,
        "--timeout",
        help="Seconds to wait when connecting to the service.",
    ),
) -> None:
    """Entry point for the CLI."""
    config = load_config(base_url=base_url, timeout=timeout)
    client = ApiClient(config)
    ctx.obj = CLIState(config=config, client=client)
    ctx.call_on_close(client.close)


@app.command("summary")
def summary_command(ctx: typer.Context) -> None:
    """Show statistics of the dataset being replayed."""
    state = _get_state(ctx)
    render_summary(state.client.get_summary())


@app.command("points")
def points_command(
    ctx: typer.Context,
    view: ChartView = typer.Option(ChartView.minute, "--view", help="Chart resolution."),
    metric: Metric = typer.Option(Metric.temperature, "--metric", help="Series to show."),
) -> None:
    """Print historical chart points, aggregated per minute or hour."""
    state = _get_state(ctx)
    points = state.client.get_points(view.value, metric.value)
    render_points(points, metric.value)


@app.command("stream")
def stream_command(
    ctx: typer.Context,
    limit: Optional[int] = typer.Option(
        None,
        "--limit",
        "-n",
        min=1,
        help="Stop after this many readings.",
    ),
) -> None:
    """Follow the live feed, printing one line per tick."""
    state = _get_state(ctx)
    typer.echo(f"Streaming from {state.config.base_url} ...")
    received = 0
    for reading in state.client.stream(limit=limit):
        render_reading(reading)
        received += 1
    typer.secho(f"Stream ended after {received} readings.", fg=typer.colors.GREEN)
