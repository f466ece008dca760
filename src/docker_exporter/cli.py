"""CLI for the Docker exporter.

Provides a command-line interface using Typer for:
- Serving metrics over HTTP
- Running a single scrape to stdout
- Inspecting and generating configuration
"""

from __future__ import annotations

import sys
from pathlib import Path

import typer
from pydantic import ValidationError
from rich.console import Console
from rich.markup import escape
from rich.table import Table

from docker_exporter.core.config import ExporterSettings, load_config
from docker_exporter.core.exceptions import ExporterError
from docker_exporter.exporter import DockerExporter
from docker_exporter.utils.logging import setup_logging

app = typer.Typer(
    name="docker-exporter",
    help="Prometheus exporter for Docker container metrics",
    add_completion=False,
)

console = Console(stderr=True)


def _load_settings(config: Path | None, **overrides: object) -> ExporterSettings:
    try:
        return load_config(config, **overrides)
    except (FileNotFoundError, ValueError, ValidationError) as e:
        console.print(f"[bold red]Error loading config: {e}[/]")
        raise typer.Exit(1) from e


def _connect(settings: ExporterSettings) -> DockerExporter:
    try:
        return DockerExporter.from_settings(settings)
    except ExporterError as e:
        console.print(f"[bold red]{e}[/]")
        raise typer.Exit(1) from e


@app.command()
def serve(
    config: Path | None = typer.Option(
        None, "--config", "-c", help="Optional configuration file (YAML/JSON)"
    ),
    host: str | None = typer.Option(None, "--host", help="Listen address (overrides config)"),
    port: int | None = typer.Option(None, "--port", "-p", help="Listen port (overrides config)"),
    log_level: str | None = typer.Option(None, "--log-level", "-l", help="Logging level"),
    log_file: Path | None = typer.Option(
        None, "--log-file", help="Write logs to file in addition to console"
    ),
    json_logs: bool = typer.Option(
        False, "--json-logs", help="Output logs in JSON format (for programmatic parsing)"
    ),
) -> None:
    """Serve container metrics on /metrics."""
    from docker_exporter.server import run_server

    settings = _load_settings(config, host=host, port=port, log_level=log_level)
    setup_logging(
        level=settings.log_level,
        log_file=log_file,
        json_format=json_logs,
        rich_console=not json_logs,
    )

    exporter = _connect(settings)
    try:
        run_server(exporter, settings.host, settings.port)
    finally:
        exporter.close()


@app.command()
def scrape(
    config: Path | None = typer.Option(
        None, "--config", "-c", help="Optional configuration file (YAML/JSON)"
    ),
    log_level: str = typer.Option("WARNING", "--log-level", "-l", help="Logging level"),
) -> None:
    """Run one collection cycle and print the metrics to stdout."""
    settings = _load_settings(config)
    setup_logging(level=log_level)

    with _connect(settings) as exporter:
        try:
            body = exporter.scrape()
        except ExporterError as e:
            console.print(f"[bold red]Scrape failed: {e}[/]")
            raise typer.Exit(1) from e

    sys.stdout.write(body)


@app.command()
def show_config(
    config: Path | None = typer.Option(
        None, "--config", "-c", help="Optional configuration file (YAML/JSON)"
    ),
) -> None:
    """Show the effective settings."""
    settings = _load_settings(config)
    _show_config_summary(settings)


@app.command()
def init_config(
    output: Path = typer.Option(
        Path("exporter.yaml"), "--output", "-o", help="Output configuration file"
    ),
) -> None:
    """Generate a sample configuration file."""
    sample_config = """\
# Docker Exporter Configuration
# Values can also come from the environment: EXPORTER_<NAME>, or DOCKER_LOG_* for the log options.

# Log line metrics (DOCKER_LOG_METRICS)
log_metrics: false

# Count lines matching log_custom_query (DOCKER_LOG_CUSTOM_METRICS)
log_custom_metrics: false
log_custom_query: '\\"(err|error|ERR|ERROR)\\"'

# List stopped containers so they are counted in docker_containers_down_count
include_stopped: true

# Network counters: "first" interface only, or "sum" over all interfaces
network_mode: first

# Concurrency and deadlines of the per-container queries
# request_timeout_seconds must not exceed task_timeout_seconds
max_workers: 16
task_timeout_seconds: 10
request_timeout_seconds: 10

# HTTP server
host: 0.0.0.0
port: 9333

log_level: INFO
"""
    output.parent.mkdir(parents=True, exist_ok=True)
    output.write_text(sample_config)
    console.print(f"[bold green]Sample configuration written to {output}[/]")


def _show_config_summary(settings: ExporterSettings) -> None:
    """Display the exporter settings."""
    table = Table(title="Exporter Configuration")
    table.add_column("Setting", style="cyan")
    table.add_column("Value", style="white")

    table.add_row("Listen", f"{settings.host}:{settings.port}")
    table.add_row("Log Metrics", str(settings.log_metrics))
    table.add_row("Custom Log Metrics", str(settings.log_custom_metrics))
    if settings.log_custom_metrics:
        table.add_row("Custom Log Query", escape(settings.log_custom_query))
    table.add_row("Include Stopped", str(settings.include_stopped))
    table.add_row("Network Mode", settings.network_mode.value)
    table.add_row("Max Workers", str(settings.max_workers))
    table.add_row("Task Timeout", f"{settings.task_timeout_seconds:g}s")
    table.add_row("Request Timeout", f"{settings.request_timeout_seconds:g}s")
    table.add_row("Log Level", settings.log_level)

    Console().print(table)


if __name__ == "__main__":
    app()
