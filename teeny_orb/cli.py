"""The teeny-orb command line: root command, configuration and entry point."""

from __future__ import annotations

import os
import sys
from pathlib import Path
from typing import Any

import click
import yaml

from .commands import generate, review, session

_CONFIG_NAME = ".teeny-orb.yaml"
_TRUE_WORDS = {"1", "t", "true"}


def init_config(config_file: str | None = None) -> dict[str, Any]:
    """Load settings from ``config_file`` or ``$HOME/.teeny-orb.yaml``.

    A missing or unreadable file yields an empty mapping.
    """
    path = Path(config_file) if config_file else Path.home() / _CONFIG_NAME
    try:
        with open(path, encoding="utf-8") as handle:
            data = yaml.safe_load(handle)
    except (OSError, yaml.YAMLError):
        return {}

    print(f"Using config file: {path}", file=sys.stderr)
    return dict(data) if isinstance(data, dict) else {}


def _env_flag(name: str, default: bool) -> bool:
    value = os.environ.get(name)
    if value is None:
        return default
    return value.strip().lower() in _TRUE_WORDS


@click.group(
    invoke_without_command=True,
    short_help="AI-powered coding assistant with container isolation",
)
@click.option(
    "--config", default="", help="config file (default is $HOME/.teeny-orb.yaml)"
)
@click.option("--project", default="", help="project directory to work with")
@click.option("--verbose", is_flag=True, default=False, help="enable verbose output")
@click.pass_context
def root(ctx: click.Context, config: str, project: str, verbose: bool) -> None:
    """teeny-orb is an AI-powered coding assistant that executes all operations
    within containerized environments for security and isolation. It bridges LLM
    capabilities with local development through the Model Context Protocol (MCP)."""
    settings = init_config(config or None)
    # Precedence: command-line flag, then environment, then config file.
    settings["project"] = (
        project or os.environ.get("PROJECT") or str(settings.get("project") or "")
    )
    settings["verbose"] = verbose or _env_flag(
        "VERBOSE", bool(settings.get("verbose", False))
    )
    ctx.obj = settings

    if ctx.invoked_subcommand is None:
        click.echo("Starting interactive coding session...")
        click.echo("Type 'help' for available commands or 'exit' to quit.")


root.add_command(generate)
root.add_command(review)
root.add_command(session)


def main(argv: list[str] | None = None) -> int:
    """Run the command line and return the process exit status."""
    try:
        result = root.main(args=argv, prog_name="teeny-orb", standalone_mode=False)
    except click.ClickException as err:
        print(f"Error: {err.format_message()}", file=sys.stderr)
        return 1
    except click.Abort:
        print("Error: aborted", file=sys.stderr)
        return 1
    return result if isinstance(result, int) else 0


if __name__ == "__main__":
    sys.exit(main())