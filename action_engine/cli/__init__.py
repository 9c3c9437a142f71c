"""CLI commands for action-engine."""

import typer

from action_engine.cli.intents import app as intents_app

main_app = typer.Typer(
    name="action-engine",
    help="Conversation action engine CLI",
    no_args_is_help=True,
)
main_app.add_typer(intents_app, name="intents")


def main() -> None:
    """Entry point for the CLI."""
    main_app()


__all__ = ["main", "main_app"]
