from __future__ import annotations

from enum import Enum
from pathlib import Path
from typing import NoReturn, Optional

import typer

from cli.config import SAMPLE_TEMPERATURE, CLIConfig, load_config
from cli.render import render_banner, render_publish_result, render_summary
from logging_config import configure_logging
from services.errors import ConfigurationError, FormatError, SchemaError
from services.publisher import TemperatureClient, build_temperature_client
from services.simulation import simulate_temperature


class LogLevel(str, Enum):
    debug = "DEBUG"
    info = "INFO"
    warning = "WARNING"
    error = "ERROR"
    critical = "CRITICAL"


app = typer.Typer(
    help="Publish temperature readings to an MQTT broker described by an AsyncAPI document.",
    context_settings={"help_option_names": ["-h", "--help"]},
    add_completion=False,
)


def _build_client(config: CLIConfig) -> TemperatureClient:
    return build_temperature_client(
        config.broker,
        keepalive=config.keepalive,
        wait_timeout=config.wait_timeout,
    )


def _fail(message: str) -> NoReturn:
    typer.secho(message, fg=typer.colors.RED, err=True)
    raise typer.Exit(code=1)


@app.command()
def main(
    host: Optional[str] = typer.Option(None, "--host", help="MQTT broker host."),
    port: Optional[int] = typer.Option(None, "--port", min=1, max=65535, help="MQTT broker port."),
    temperature: Optional[float] = typer.Option(
        None,
        "--temperature",
        "-t",
        help="Specific temperature value to send.",
    ),
    simulate: bool = typer.Option(
        False,
        "--simulate",
        help="Generate random temperature values until interrupted.",
    ),
    interval: Optional[float] = typer.Option(
        None,
        "--interval",
        min=0,
        help="Seconds between simulated readings (defaults to SIMULATION_INTERVAL env or 5).",
    ),
    retries: Optional[int] = typer.Option(
        None,
        "--retries",
        min=1,
        help="Publish attempts per reading (defaults to PUBLISH_MAX_ATTEMPTS env or 3).",
    ),
    asyncapi: Optional[Path] = typer.Option(
        None,
        "--asyncapi",
        dir_okay=False,
        help="AsyncAPI document describing servers, channel and payload schema.",
    ),
    server: Optional[str] = typer.Option(
        None,
        "--server",
        help="Server name to use from the AsyncAPI document.",
    ),
    log_level: Optional[LogLevel] = typer.Option(
        None,
        "--log-level",
        case_sensitive=False,
        help="Logging level (defaults to LOG_LEVEL env or INFO).",
    ),
) -> None:
    """Publish a single reading, or simulate a stream of readings."""
    configure_logging(level=log_level.value if log_level else None)

    try:
        config = load_config(
            host=host,
            port=port,
            asyncapi=asyncapi,
            server=server,
            retries=retries,
            interval=interval,
        )
    except ConfigurationError as exc:
        _fail(f"Configuration error: {exc}")

    render_banner(config)
    client = _build_client(config)

    if simulate:
        summary = simulate_temperature(client, config.interval)
        render_summary(summary)
        return

    value = temperature if temperature is not None else SAMPLE_TEMPERATURE
    if temperature is None:
        typer.echo(f"No temperature specified. Using sample value {SAMPLE_TEMPERATURE}°C")

    try:
        success = client.publish_temperature(value, retries=config.max_attempts)
    except (FormatError, SchemaError, TypeError) as exc:
        _fail(f"Invalid payload: {exc}")

    render_publish_result(value, config.broker.topic, success)
    if not success:
        raise typer.Exit(code=1)
