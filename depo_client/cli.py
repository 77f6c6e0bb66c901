"""CLI entry point: depo-client.

Subcommands (run against the backend at DEPO_BACKEND_URL):
    depo-client init                          # Register the project directory
    depo-client list                          # Show declared dependencies
    depo-client add fmt -c "^10.0"            # Search, pick, and add a dependency
    depo-client delete fmt
    depo-client update fmt
    depo-client constraint fmt --new "^11"    # or --remove
    depo-client build | install
    depo-client token check                   # Show whether a backend token is set
"""

from __future__ import annotations

import asyncio
import os
import sys
from collections.abc import Awaitable, Callable
from typing import TypeVar

import click

from depo_client.core.config import TOKEN_VARIABLES, GatewaySettings, configured_token
from depo_client.core.logging import setup_logging
from depo_client.gateway.http import HttpCommandGateway
from depo_client.models.dependency import DependencyRecord
from depo_client.services.editor import DependencyEditor
from depo_client.services.outcome import IntentOutcome, OutcomeStatus

T = TypeVar("T")


def _make_gateway() -> HttpCommandGateway:
    return HttpCommandGateway(GatewaySettings.from_env())


def _run(fn: Callable[[DependencyEditor], Awaitable[T]]) -> T:
    """Run *fn* against a fresh editor and close the gateway afterwards."""

    async def _main() -> T:
        gateway = _make_gateway()
        try:
            return await fn(DependencyEditor(gateway))
        finally:
            await gateway.close()

    return asyncio.run(_main())


def _fail(outcome: IntentOutcome) -> None:
    label = "Skipped" if outcome.status is OutcomeStatus.SKIPPED else "Error"
    click.echo(f"{label}: {outcome.operation}: {outcome.error}", err=True)
    sys.exit(1)


def _format(dep: DependencyRecord) -> str:
    line = f"{dep.name} : {dep.version or '-'}"
    if dep.version_constraint:
        line += f"  (constraint {dep.version_constraint})"
    if dep.installed is not None:
        line += "  [installed]" if dep.installed else "  [not installed]"
    return line


def _project(ctx: click.Context) -> str:
    return ctx.obj["project"]


@click.group()
@click.option(
    "-p",
    "--project",
    default=None,
    type=click.Path(file_okay=False),
    help="Project directory (default: current directory)",
)
@click.option("--log-level", default=None, help="Log level (default: DEPO_LOG_LEVEL or INFO)")
@click.option(
    "--log-format",
    default=None,
    type=click.Choice(["console", "json"]),
    help="Log format (default: DEPO_LOG_FORMAT or console)",
)
@click.pass_context
def main(ctx: click.Context, project: str | None, log_level: str | None, log_format: str | None) -> None:
    """Edit a project's dependency manifest through the manifest backend."""
    setup_logging(log_level, log_format)
    ctx.ensure_object(dict)
    ctx.obj["project"] = os.path.abspath(project or os.getcwd())


@main.command()
@click.pass_context
def init(ctx: click.Context) -> None:
    """Create a new package in the project directory."""
    project = _project(ctx)
    outcome = _run(lambda editor: editor.init_project(project))
    if not outcome.ok:
        _fail(outcome)
    click.echo(f"Initialized new package in {project}")


@main.command(name="list")
@click.pass_context
def list_dependencies(ctx: click.Context) -> None:
    """List all dependencies of the project."""
    project = _project(ctx)

    async def _list(editor: DependencyEditor) -> tuple[IntentOutcome, tuple[DependencyRecord, ...]]:
        outcome = await editor.select_project(project)
        return outcome, editor.view().dependencies

    outcome, deps = _run(_list)
    if not outcome.ok:
        _fail(outcome)
    if not deps:
        click.echo("No dependencies.")
        return
    for dep in deps:
        click.echo(_format(dep))


@main.command()
@click.argument("name")
@click.option("-c", "--constraint", default=None, help="Optional version constraint")
@click.option("--pick", default=None, help="Candidate to add: owner/repo or name")
@click.pass_context
def add(ctx: click.Context, name: str, constraint: str | None, pick: str | None) -> None:
    """Search the registry for NAME and add the chosen dependency."""
    project = _project(ctx)

    async def _add(editor: DependencyEditor) -> IntentOutcome | None:
        opened = await editor.select_project(project)
        if not opened.ok:
            return opened
        found = await editor.search_dependencies(name)
        if not found.ok:
            return found

        candidates = editor.view().candidates
        if not candidates:
            click.echo(f"No dependencies found for '{name}'")
            return None

        choice = pick
        if choice is None:
            if len(candidates) == 1:
                choice = candidates[0].qualified_name
            else:
                for candidate in candidates:
                    detail = f"  {candidate.url}" if candidate.url else ""
                    click.echo(f"  {candidate.qualified_name}{detail}")
                choice = click.prompt(
                    "Select a dependency",
                    type=click.Choice([c.qualified_name for c in candidates], case_sensitive=False),
                    default=candidates[0].qualified_name,
                )

        selected = editor.select_candidate(choice, constraint)
        if not selected.ok:
            return selected
        return await editor.confirm_add()

    outcome = _run(_add)
    if outcome is None:
        return
    if not outcome.ok:
        _fail(outcome)
    click.echo("Dependency added.")


@main.command()
@click.argument("name")
@click.pass_context
def delete(ctx: click.Context, name: str) -> None:
    """Remove a dependency from the project."""
    _mutate(ctx, lambda editor: editor.delete(name), f"Removed {name}.")


@main.command()
@click.argument("name")
@click.pass_context
def update(ctx: click.Context, name: str) -> None:
    """Update a dependency to the latest matching version."""
    _mutate(ctx, lambda editor: editor.update(name), f"Updated {name}.")


@main.command()
@click.argument("name")
@click.option("-n", "--new", "new_constraint", default=None, help="Set a new version constraint")
@click.option("--remove", is_flag=True, help="Remove the existing version constraint")
@click.pass_context
def constraint(ctx: click.Context, name: str, new_constraint: str | None, remove: bool) -> None:
    """Modify the version constraint of a dependency."""
    if remove and new_constraint is not None:
        raise click.UsageError("use either --new or --remove, not both")
    if remove:
        _mutate(ctx, lambda editor: editor.clear_constraint(name), f"Constraint removed from {name}.")
    elif new_constraint is not None:
        _mutate(
            ctx,
            lambda editor: editor.set_constraint(name, new_constraint),
            f"Constraint for {name} set to {new_constraint}.",
        )
    else:
        raise click.UsageError("one of --new or --remove is required")


@main.command()
@click.pass_context
def build(ctx: click.Context) -> None:
    """Build all dependencies for the project."""
    _mutate(ctx, lambda editor: editor.build(), "Build finished.")


@main.command()
@click.pass_context
def install(ctx: click.Context) -> None:
    """Install all dependencies for the project."""
    _mutate(ctx, lambda editor: editor.install(), "Install finished.")


@main.group()
def token() -> None:
    """Inspect the backend token configuration."""


@token.command()
def check() -> None:
    """Check whether a backend token is configured."""
    variable, value = configured_token()
    if value is None:
        click.echo("No backend token found")
        click.echo(f"Set {' or '.join(TOKEN_VARIABLES)} to add one")
        return
    click.echo(f"Backend token is configured ({variable})")
    # Short tokens are not echoed at all.
    if len(value) > 8:
        click.echo(f"Token: ...{value[-4:]}")


def _mutate(
    ctx: click.Context,
    intent: Callable[[DependencyEditor], Awaitable[IntentOutcome]],
    success: str,
) -> None:
    """Open the project, run one intent, report its outcome."""
    project = _project(ctx)

    async def _go(editor: DependencyEditor) -> IntentOutcome:
        opened = await editor.select_project(project)
        if not opened.ok:
            return opened
        return await intent(editor)

    outcome = _run(_go)
    if not outcome.ok:
        _fail(outcome)
    click.echo(success)
