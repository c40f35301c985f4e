#!/usr/bin/env python3
"""Reconciliation scheduling.

This module provides the tick loop that drives both reconciliation
cycles on a fixed interval, the single error boundary wrapped around each
cycle run, and the out-of-band pass used on start and when the process
returns to the foreground.

Cycles share the session's cycle_lock, so only one runs at a time and its
cache updates are visible to the next. The lock is FIFO: cycles launched
in registration order on the same tick run in that order, which is what
lets a local change win over a simultaneous desktop change.
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Awaitable, Callable
from typing import TYPE_CHECKING

from echosync.errors import SyncError
from echosync.sync_handlers import sync_local_to_remote, sync_remote_to_local

if TYPE_CHECKING:
    from echosync.session import SyncSession

logger = logging.getLogger(__name__)

Cycle = Callable[["SyncSession"], Awaitable[bool]]

# Registration order is significant: local changes are pushed before the
# desktop value is pulled within a tick.
CYCLES: tuple[tuple[str, Cycle], ...] = (
    ("local-to-remote", sync_local_to_remote),
    ("remote-to-local", sync_remote_to_local),
)


async def run_guarded_cycle(session: SyncSession, name: str, cycle: Cycle) -> bool:
    """Run one cycle under the session lock, containing its failures.

    Args:
        session: The active sync session.
        name: Cycle name used in log messages.
        cycle: The cycle coroutine function.

    Returns:
        True if the cycle propagated a change, False on no-op or failure.
    """
    async with session.cycle_lock:
        try:
            return await cycle(session)
        except SyncError as e:
            logger.warning("%s cycle failed: %s", name, e)
            return False


async def run_sync_pass(session: SyncSession) -> bool:
    """Run every cycle once, in registration order.

    Args:
        session: The active sync session.

    Returns:
        True if any cycle propagated a change.
    """
    logger.debug("Performing clipboard sync pass")
    changed = False
    for name, cycle in CYCLES:
        if await run_guarded_cycle(session, name, cycle):
            changed = True
    logger.debug("Sync pass completed %s", "with changes" if changed else "no changes")
    return changed


def launch_due_cycles(session: SyncSession) -> None:
    """Start every cycle whose previous run has finished.

    A cycle still in flight is skipped for this tick rather than started
    twice.

    Args:
        session: The active sync session.
    """
    for name, cycle in CYCLES:
        previous = session.in_flight.get(name)
        if previous is not None and not previous.done():
            logger.debug("%s cycle still running, skipping tick", name)
            continue
        session.in_flight[name] = asyncio.create_task(
            run_guarded_cycle(session, name, cycle), name=f"echosync-{name}"
        )


async def run_sync_loop(session: SyncSession) -> None:
    """Launch the cycles every session.interval seconds until cancelled.

    Cancelling this task stops future ticks only; cycles already running
    are left to finish and can be awaited with drain_cycles().

    Args:
        session: The active sync session.
    """
    while True:
        await asyncio.sleep(session.interval)
        launch_due_cycles(session)


async def drain_cycles(session: SyncSession) -> None:
    """Wait for in-flight cycles to complete without cancelling them.

    Args:
        session: The sync session being stopped.
    """
    pending = [task for task in session.in_flight.values() if not task.done()]
    if pending:
        logger.debug("Draining %d in-flight cycle(s)", len(pending))
        results = await asyncio.gather(*pending, return_exceptions=True)
        for result in results:
            if isinstance(result, BaseException):
                logger.error("Cycle ended with unexpected error: %r", result)
    session.in_flight.clear()
