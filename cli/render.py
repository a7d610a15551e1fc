from __future__ import annotations

from typing import Any, Dict, Iterable

import typer


def echo_heading(text: str) -> None:
    typer.secho(text, bold=True)


def echo_key_values(pairs: Iterable[tuple[str, Any]]) -> None:
    for key, value in pairs:
        typer.echo(f"{key}: {value}")


def render_range(payload: Dict[str, Any]) -> None:
    meta = payload.get("meta") or {}
    field = meta.get("field")
    echo_heading("Range Query")
    echo_key_values(
        [
            ("field", field),
            ("range", f"{meta.get('start_date')} .. {meta.get('end_date')}"),
            ("page", meta.get("page")),
            ("limit", meta.get("limit")),
            ("total", meta.get("total")),
            ("returned", meta.get("returned")),
        ]
    )

    typer.echo()
    echo_heading("Data")
    for point in payload.get("data") or []:
        typer.echo(f"  {point.get('timestamp')}  {point.get(field)}")


def render_metrics(payload: Dict[str, Any]) -> None:
    echo_heading("Metrics")
    date_range = payload.get("range")
    if date_range:
        described = f"{date_range.get('start_date') or '-'} .. {date_range.get('end_date') or '-'}"
    else:
        described = "all time"
    echo_key_values(
        [
            ("field", payload.get("field")),
            ("range", described),
            ("count", payload.get("count")),
            ("avg", payload.get("avg")),
            ("min", payload.get("min")),
            ("max", payload.get("max")),
            ("stdDev", payload.get("stdDev")),
        ]
    )


def render_created(payload: Dict[str, Any]) -> None:
    echo_heading(payload.get("message") or "Measurement created")
    data = payload.get("data") or {}
    echo_key_values(
        [
            ("timestamp", data.get("timestamp")),
            ("field1", data.get("field1")),
            ("field2", data.get("field2")),
            ("field3", data.get("field3")),
        ]
    )
