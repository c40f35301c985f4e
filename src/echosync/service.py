#!/usr/bin/env python3
"""Service entry points for echosync.

This module wires the adapters into a SyncSession and provides the
coroutines behind each CLI command:
- run_service: long-running sync process with signal-driven control
- run_once: a single manual reconciliation pass
- read_status: persisted sync state for display

Signals understood by run_service:
- SIGINT/SIGTERM: exit, leaving the persisted flag untouched so the next
  run resumes
- SIGUSR1: toggle sync on or off
- SIGTSTP/SIGCONT: visibility changes (background mode only)
"""

from __future__ import annotations

import asyncio
import logging
import signal
from typing import TYPE_CHECKING

from echosync.constants import LAST_LOCAL_KEY, LAST_REMOTE_KEY, SYNC_ENABLED_KEY
from echosync.local_clipboard import LocalClipboard
from echosync.notifier import ConsoleNotifier, DesktopNotifier
from echosync.remote import RemoteClipboard
from echosync.session import SyncMode, SyncSession
from echosync.state_store import StateStore
from echosync.sync_loop import run_sync_pass
from echosync.sync_state import SyncState
from echosync.visibility import SignalVisibilityObserver

if TYPE_CHECKING:
    from echosync.config import SyncConfig
    from echosync.lifecycle import SyncController

logger = logging.getLogger(__name__)


def build_session(config: SyncConfig, remote: RemoteClipboard) -> SyncSession:
    """Create a stopped session from configuration.

    Args:
        config: Command settings.
        remote: An open relay client.

    Returns:
        A SyncSession using the device clipboard and the configured store.
    """
    return SyncSession(
        local=LocalClipboard(),
        remote=remote,
        store=StateStore(config.state_file),
        notifier=ConsoleNotifier(),
        interval=config.interval,
    )


async def run_service(config: SyncConfig, paused: bool = False) -> None:
    """Run clipboard sync until SIGINT or SIGTERM.

    Resumes a previously enabled session; otherwise starts one unless
    paused is set.

    Args:
        config: Command settings.
        paused: Stay stopped at startup unless resuming.
    """
    from echosync.lifecycle import SyncController

    async with RemoteClipboard(
        config.push_url, config.pull_url, timeout=config.timeout
    ) as remote:
        session = build_session(config, remote)
        controller = SyncController(
            session,
            desktop_notifier=DesktopNotifier(),
            console_notifier=ConsoleNotifier(),
            observer=SignalVisibilityObserver(),
        )

        shutdown_requested = asyncio.Event()
        toggles: set[asyncio.Task[SyncMode]] = set()
        loop = asyncio.get_running_loop()
        loop.add_signal_handler(signal.SIGINT, shutdown_requested.set)
        loop.add_signal_handler(signal.SIGTERM, shutdown_requested.set)
        loop.add_signal_handler(signal.SIGUSR1, _schedule_toggle, controller, toggles)

        try:
            mode = await controller.resume()
            if mode is SyncMode.STOPPED and not paused:
                await controller.start()
            await shutdown_requested.wait()
        finally:
            for signum in (signal.SIGINT, signal.SIGTERM, signal.SIGUSR1):
                loop.remove_signal_handler(signum)
            if toggles:
                await asyncio.gather(*toggles, return_exceptions=True)
            await controller.shutdown()
        logger.debug("Shutdown complete")


def _schedule_toggle(
    controller: SyncController, toggles: set[asyncio.Task[SyncMode]]
) -> None:
    """Run controller.toggle() from a signal handler."""
    if toggles:
        logger.debug("Toggle already in progress, ignoring signal")
        return
    task = asyncio.ensure_future(controller.toggle())
    toggles.add(task)
    task.add_done_callback(toggles.discard)


async def run_once(config: SyncConfig) -> bool:
    """Run a single reconciliation pass.

    Args:
        config: Command settings.

    Returns:
        True if any change was propagated.
    """
    async with RemoteClipboard(
        config.push_url, config.pull_url, timeout=config.timeout
    ) as remote:
        session = build_session(config, remote)
        session.state = await SyncState.load(session.store)
        return await run_sync_pass(session)


async def read_status(store: StateStore) -> dict[str, str | bool | None]:
    """Summarize persisted sync state.

    Args:
        store: The durable state store.

    Returns:
        Mapping with ``enabled``, ``last_local`` and ``last_remote``.
    """
    values = await store.snapshot()
    return {
        "enabled": values.get(SYNC_ENABLED_KEY) == "true",
        "last_local": values.get(LAST_LOCAL_KEY),
        "last_remote": values.get(LAST_REMOTE_KEY),
    }
