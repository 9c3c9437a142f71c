"""CLI commands for inspecting, testing, and packaging intents."""

from __future__ import annotations

import asyncio
import json
from pathlib import Path
from typing import Any, Optional

import typer
from rich.console import Console
from rich.table import Table

from action_engine.bootstrap import build_default_service_container
from action_engine.core.config import Settings, settings
from action_engine.core.exceptions import IntentLoadError
from action_engine.services import ServiceContainer
from action_engine.services.action_package import default_endpoint, generate_action_package

app = typer.Typer(name="intents", help="Inspect, test, and package intents")
console = Console()


def _intents_dir_option() -> Any:
    return typer.Option(
        None, "--dir", "-d", help="Directory of intent definitions (defaults to INTENTS_DIR)"
    )


def _get_services(intents_dir: Optional[Path]) -> ServiceContainer:
    """Build the service container, overriding the intents directory if given."""
    effective: Settings = settings
    if intents_dir is not None:
        effective = settings.model_copy(update={"INTENTS_DIR": intents_dir})
    try:
        return build_default_service_container(effective)
    except IntentLoadError as e:
        console.print(f"[red]Error:[/red] {e}")
        raise typer.Exit(1) from e


def _parse_query(pairs: list[str]) -> dict[str, str]:
    query: dict[str, str] = {}
    for pair in pairs:
        key, sep, value = pair.partition("=")
        if not sep or not key:
            raise typer.BadParameter(f"Expected key=value, got {pair!r}", param_hint="--query")
        query[key] = value
    return query


@app.command("list")
def list_intents(intents_dir: Optional[Path] = _intents_dir_option()) -> None:
    """List registered intents."""
    services = _get_services(intents_dir)
    intents = services.registry.intents()

    if not intents:
        console.print("[dim]No intents registered.[/dim]")
        return

    table = Table(title="Intents")
    table.add_column("Intent", style="cyan")
    table.add_column("Description")
    table.add_column("Queries")

    for name, intent in intents.items():
        table.add_row(name, intent.description or "-", ", ".join(intent.queries or []))

    console.print(table)


@app.command("test")
def test_intent(
    name: str = typer.Argument("main", help="Short intent name (e.g. main)"),
    query: list[str] = typer.Option([], "--query", "-q", help="Query argument as key=value"),
    intents_dir: Optional[Path] = _intents_dir_option(),
) -> None:
    """Run an intent against a mock request and print the response."""
    services = _get_services(intents_dir)
    if services.dispatcher is None:
        console.print("[red]Error:[/red] No dispatcher configured")
        raise typer.Exit(1)
    result = asyncio.run(services.dispatcher.test_intent(name, _parse_query(query)))
    console.print_json(json.dumps({"headers": result.headers, "body": result.body}))


@app.command("package")
def package(
    endpoint: Optional[str] = typer.Option(
        None, "--endpoint", help="Fulfillment URL (defaults to BASE_URL/api/v1/action)"
    ),
    output: Optional[Path] = typer.Option(None, "--output", "-o", help="Write to this file"),
    intents_dir: Optional[Path] = _intents_dir_option(),
) -> None:
    """Generate an action package for the registered intents."""
    services = _get_services(intents_dir)
    action_package = generate_action_package(
        services.registry,
        project_id=settings.PROJECT_ID,
        version_label=settings.VERSION_LABEL,
        invocation_name=settings.INVOCATION_NAME,
        voice_name=settings.VOICE_NAME,
        language_code=settings.LANGUAGE_CODE,
        endpoint=endpoint or default_endpoint(settings.BASE_URL),
    )
    text = json.dumps(action_package, indent=2)
    if output is None:
        console.print_json(text)
        return
    output.write_text(text + "\n", encoding="utf-8")
    console.print(f"[green]Action package written to {output}[/green]")


__all__ = ["app"]
