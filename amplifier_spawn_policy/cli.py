"""Command-line interface for inspecting spawn policy decisions.

Read-only: loads a config file and a session store snapshot, prints the
decision. Nothing is written back.
"""

from __future__ import annotations

import logging
import sys
from pathlib import Path

import click
from rich.markup import escape
from rich.table import Table

from . import __version__
from .console import console
from .depth import trace_spawn_chain
from .exceptions import SpawnPolicyError
from .io import load_session_store
from .io import load_spawn_policy_config
from .models import SessionRecord
from .models import SpawnPolicyConfig
from .policy import is_nested_spawn_allowed
from .policy import resolve_nested_spawn_settings
from .policy import resolve_nested_tools_policy
from .session_key import normalize_agent_id
from .session_key import resolve_agent_id_from_session_key

_config_option = click.option(
    "--config",
    "-c",
    "config_path",
    type=click.Path(dir_okay=False, path_type=Path),
    default=None,
    help="YAML config file (defaults: nested spawning disabled)",
)
_store_option = click.option(
    "--store",
    "-s",
    "store_path",
    type=click.Path(dir_okay=False, path_type=Path),
    default=None,
    help="Session store JSON snapshot used to walk spawnedBy chains",
)


def _load_config(config_path: Path | None) -> SpawnPolicyConfig:
    if config_path is None:
        return SpawnPolicyConfig()
    try:
        return load_spawn_policy_config(config_path)
    except SpawnPolicyError as e:
        console.print(f"[red]Error:[/red] {escape(str(e))}", soft_wrap=True)
        sys.exit(2)


def _load_store(store_path: Path | None) -> dict[str, SessionRecord] | None:
    if store_path is None:
        return None
    try:
        return load_session_store(store_path)
    except SpawnPolicyError as e:
        console.print(f"[red]Error:[/red] {escape(str(e))}", soft_wrap=True)
        sys.exit(2)


def _format_tools(tools: list[str] | None) -> str:
    if tools is None:
        return "[dim](not set)[/dim]"
    return ", ".join(tools) if tools else "[dim](empty)[/dim]"


@click.group(invoke_without_command=True)
@click.option("--verbose", "-v", is_flag=True, help="Enable debug logging")
@click.version_option(__version__, prog_name="amplifier-spawn-policy")
@click.pass_context
def cli(ctx: click.Context, verbose: bool):
    """Inspect sub-agent spawn depth and nested spawn policy."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )
    if ctx.invoked_subcommand is None:
        click.echo("\n" + ctx.get_help())
        ctx.exit()


@cli.command("depth")
@click.argument("session_key")
@_store_option
def depth_cmd(session_key: str, store_path: Path | None):
    """Show the spawn depth of SESSION_KEY and how it was resolved."""
    store = _load_store(store_path)
    chain = trace_spawn_chain(session_key, store)

    table = Table(show_header=False, box=None, padding=(0, 2))
    table.add_column("Key", style="dim")
    table.add_column("Value")
    table.add_row("Session", chain.session_key or "[dim](empty)[/dim]")
    table.add_row("Depth", f"[bold]{chain.depth}[/bold]")
    table.add_row("Resolved by", chain.stop_reason)
    if chain.ancestors:
        table.add_row("Ancestors", " -> ".join(chain.ancestors))
    if chain.truncated:
        table.add_row("Note", "[yellow]chain truncated at absolute depth cap[/yellow]")

    console.print(table)


@cli.command("check")
@click.argument("session_key")
@click.option(
    "--agent",
    "-a",
    "agent_id",
    default=None,
    help="Requester agent id (default: taken from the session key)",
)
@_config_option
@_store_option
def check_cmd(
    session_key: str,
    agent_id: str | None,
    config_path: Path | None,
    store_path: Path | None,
):
    """Check whether SESSION_KEY may spawn another sub-agent.

    Exits 0 when the spawn is allowed and 1 when it is denied.
    """
    cfg = _load_config(config_path)
    store = _load_store(store_path)
    requester = agent_id or resolve_agent_id_from_session_key(session_key)

    decision = is_nested_spawn_allowed(session_key, requester, cfg, store)

    if decision.allowed:
        console.print("[green]✓ Spawn allowed[/green]")
    else:
        console.print(f"[red]✗ Spawn denied:[/red] {decision.reason}", soft_wrap=True)
    console.print(f"  Agent:         {normalize_agent_id(requester)}")
    console.print(f"  Current depth: {decision.current_depth}")
    console.print(f"  Max depth:     {decision.max_depth}")

    if not decision.allowed:
        sys.exit(1)


@cli.command("tools")
@click.argument("agent_id")
@click.option(
    "--depth",
    "-d",
    "spawn_depth",
    type=int,
    required=True,
    help="Depth the spawned session would occupy",
)
@_config_option
def tools_cmd(agent_id: str, spawn_depth: int, config_path: Path | None):
    """Show the nested tools policy for AGENT_ID at a spawn depth."""
    cfg = _load_config(config_path)
    policy = resolve_nested_tools_policy(cfg, agent_id, spawn_depth)

    if policy is None:
        console.print(
            f"No nested tools policy for {normalize_agent_id(agent_id)} "
            f"at depth {spawn_depth} (ordinary tool policy applies)",
            soft_wrap=True,
        )
        return

    settings = resolve_nested_spawn_settings(cfg, agent_id)
    console.print(f"[bold]Nested tools policy[/bold] for {normalize_agent_id(agent_id)}")
    console.print(f"  Allow: {_format_tools(policy.allow)}")
    console.print(f"  Deny:  {_format_tools(policy.deny)}")
    console.print(f"  [dim]maxSpawnDepth: {settings.max_spawn_depth}[/dim]")


def main() -> None:
    """Console script entry point."""
    cli()


if __name__ == "__main__":
    main()
