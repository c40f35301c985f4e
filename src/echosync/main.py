"""CLI handling for echosync.

This module provides the command-line interface for echosync, handling
argument parsing via click, logging configuration, and dispatching to the
service coroutines.

Usage:
    echosync [--verbose] run [--paused] [OPTIONS]
    echosync [--verbose] sync [OPTIONS]
    echosync [--verbose] status [--state-file PATH]

While ``run`` is active, send SIGUSR1 to toggle sync on or off.
"""

from __future__ import annotations

from pathlib import Path

import click

from echosync.config import SyncConfig, config_options, state_file_option
from echosync.errors import PersistenceError
from echosync.main_logging import configure_logging
from echosync.notifier import format_preview


@click.group()
@click.option(
    "--verbose",
    is_flag=True,
    help="Enable DEBUG-level logging",
)
def main(verbose: bool) -> None:
    """Keep this device's clipboard in sync with your desktop."""
    configure_logging(verbose)


@main.command()
@click.option(
    "--paused",
    is_flag=True,
    help="Start stopped unless a previous session is being resumed",
)
@config_options
def run(config: SyncConfig, paused: bool) -> None:
    """Run clipboard sync until interrupted."""
    import asyncio

    from echosync.service import run_service

    try:
        asyncio.run(run_service(config, paused=paused))
    except PersistenceError as e:
        raise click.ClickException(str(e)) from e


@main.command()
@config_options
def sync(config: SyncConfig) -> None:
    """Run a single sync pass and exit."""
    import asyncio

    from echosync.service import run_once

    try:
        changed = asyncio.run(run_once(config))
    except PersistenceError as e:
        raise click.ClickException(str(e)) from e
    click.echo("Clipboard synced" if changed else "Clipboard already in sync")


@main.command()
@state_file_option
def status(state_file: Path | None) -> None:
    """Show persisted sync state."""
    import asyncio

    from echosync.service import read_status
    from echosync.state_store import StateStore

    try:
        info = asyncio.run(read_status(StateStore(state_file)))
    except PersistenceError as e:
        raise click.ClickException(str(e)) from e

    click.echo(f"Sync: {'enabled' if info['enabled'] else 'stopped'}")
    for label, key in (
        ("Last copied on this device", "last_local"),
        ("Last copied from desktop", "last_remote"),
    ):
        value = info[key]
        shown = format_preview(value) if isinstance(value, str) else "Empty"
        click.echo(f"{label}: {shown}")
