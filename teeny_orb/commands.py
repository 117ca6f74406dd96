"""Subcommands: code generation, code review and session management."""

from __future__ import annotations

import click

from .registry import get_registry
from .types import Manager, ResourceLimits, SessionConfig, SessionError

_PHASE_NOTE = "(This feature will be implemented in Phase 2: LLM Integration)"

_DOCKER_LIMITS = ResourceLimits(cpu_shares=512, memory=536870912)  # 512MB


@click.command(short_help="Generate code from natural language description")
@click.argument("prompt")
def generate(prompt: str) -> None:
    """Generate code from a natural language description using AI assistance."""
    click.echo(f"Generating code for: {prompt}")
    click.echo(_PHASE_NOTE)


@click.command(short_help="Review code file for improvements")
@click.argument("file")
def review(file: str) -> None:
    """Analyze existing code for improvements and suggestions."""
    click.echo(f"Reviewing file: {file}")
    click.echo(_PHASE_NOTE)


@click.group(short_help="Manage sessions")
def session() -> None:
    """Create and manage sessions for coding (host-based by default,
    containerized with --docker)."""


@session.command("create", short_help="Create a new session")
@click.option(
    "--docker",
    is_flag=True,
    default=False,
    help="Use Docker containers for session isolation",
)
@click.option(
    "--workdir",
    default="",
    help="Working directory for the session "
    "(defaults to current directory for host sessions)",
)
@click.option(
    "--image",
    default="alpine:latest",
    show_default=True,
    help="Docker image to use (only applies when --docker is set)",
)
def session_create(docker: bool, workdir: str, image: str) -> None:
    """Create a new session for coding (runs on host by default,
    use --docker for containerized execution)."""
    registry = get_registry()

    manager: Manager
    if docker:
        try:
            manager = registry.docker_manager()
        except SessionError as err:
            raise click.ClickException(f"failed to get Docker manager: {err}") from err
    else:
        manager = registry.host_manager()

    config = SessionConfig(work_dir=workdir, environment={"TERM": "xterm-256color"})
    if docker:
        config.image = image
        config.limits = ResourceLimits(
            cpu_shares=_DOCKER_LIMITS.cpu_shares, memory=_DOCKER_LIMITS.memory
        )

    try:
        created = manager.create_session(config)
    except SessionError as err:
        raise click.ClickException(f"failed to create session: {err}") from err

    kind = "container" if docker else "host"
    click.echo(f"Created {kind} session: {created.id}")
    click.echo(f"Status: {created.status}")
    if not docker and workdir:
        click.echo(f"Working directory: {workdir}")


@session.command("list", short_help="List active sessions")
def session_list() -> None:
    """List active sessions."""
    sessions = get_registry().all_sessions()
    if not sessions:
        click.echo("No active sessions")
        return

    click.echo("Active sessions:")
    for active in sessions:
        click.echo(f"  ID: {active.id}, Status: {active.status}")


@session.command("stop", short_help="Stop a session")
@click.argument("session_id")
def session_stop(session_id: str) -> None:
    """Stop a session."""
    try:
        found = get_registry().get_session(session_id)
    except SessionError as err:
        raise click.ClickException(f"session not found: {err}") from err

    try:
        found.close()
    except SessionError as err:
        raise click.ClickException(f"failed to stop session: {err}") from err

    click.echo(f"Session {session_id} stopped")