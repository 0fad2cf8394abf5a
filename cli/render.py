from __future__ import annotations

from typing import Any, Dict, Iterable, Optional

import typer


def echo_heading(text: str) -> None:
    typer.secho(text, bold=True)


def echo_key_values(pairs: Iterable[tuple[str, Any]]) -> None:
    for key, value in pairs:
        typer.echo(f"{key}: {value}")


def _fmt(value: Optional[float], unit: str) -> str:
    if value is None:
        return "-"
    return f"{value:.2f} {unit}"


def render_summary(payload: Dict[str, Any]) -> None:
    echo_heading("Dataset")
    echo_key_values(
        [
            ("temperature_samples", payload.get("temperature_samples")),
            ("power_samples", payload.get("power_samples")),
            ("first_time", payload.get("first_time")),
            ("last_time", payload.get("last_time")),
            ("mean_temperature", _fmt(payload.get("mean_temperature"), "°C")),
            ("total_energy", _fmt(payload.get("total_kwh"), "kWh")),
        ]
    )


def render_points(points: Iterable[Dict[str, Any]], metric: str) -> None:
    echo_heading(f"Points ({metric})")
    rows = list(points)
    if not rows:
        typer.echo("No points available.")
        return
    unit = "°C" if metric == "temperature" else "kWh"
    for point in rows:
        typer.echo(f"  {point.get('date')}  {_fmt(point.get(metric), unit)}")


def render_reading(payload: Dict[str, Any]) -> None:
    typer.echo(
        f"{payload.get('time')}  "
        f"temp={_fmt(payload.get('temperature'), '°C')}  "
        f"avg={_fmt(payload.get('avg_temperature'), '°C')}  "
        f"tick={_fmt(payload.get('power'), 'kWh')}  "
        f"total={_fmt(payload.get('total_power'), 'kWh')}"
    )
