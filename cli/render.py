from __future__ import annotations

from typing import Any, Iterable

import typer

from cli.config import CLIConfig
from services.simulation import SimulationSummary


def echo_heading(text: str) -> None:
    typer.secho(text, bold=True)


def echo_key_values(pairs: Iterable[tuple[str, Any]]) -> None:
    for key, value in pairs:
        typer.echo(f"{key}: {value}")


def render_banner(config: CLIConfig) -> None:
    broker = config.broker
    echo_heading("AsyncAPI MQTT Client")
    echo_key_values(
        [
            ("document", f"{broker.title} v{broker.version}"),
            ("broker", broker.broker_url),
            ("topic", broker.topic),
        ]
    )
    typer.echo()


def render_publish_result(value: float, topic: str, success: bool) -> None:
    if success:
        typer.secho(f"Published {value}°C to {topic}", fg=typer.colors.GREEN)
    else:
        typer.secho(f"Failed to publish {value}°C to {topic}", fg=typer.colors.RED, err=True)


def render_summary(summary: SimulationSummary) -> None:
    typer.echo()
    echo_heading("Simulation Summary")
    echo_key_values(
        [
            ("readings", summary.readings),
            ("published", summary.published),
            ("failed", summary.failed),
        ]
    )
