#!/usr/bin/env python3
"""Clipboard reconciliation cycles.

This module provides the two cycles run on every tick:
- sync_local_to_remote: publish a new local clipboard value to the relay
- sync_remote_to_local: apply a new desktop value to the local clipboard

Both raise SyncError subclasses on I/O failure; the cycle boundary in
sync_loop catches and logs them.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from echosync.constants import LAST_LOCAL_KEY, LAST_REMOTE_KEY
from echosync.notifier import format_preview
from echosync.protocol import validate_content_size

if TYPE_CHECKING:
    from echosync.session import SyncSession

logger = logging.getLogger(__name__)


async def sync_local_to_remote(session: SyncSession) -> bool:
    """Publish a changed local clipboard value to the relay.

    The cached and persisted local value advance before the push, so a
    failed push is not retried for the same value; the next detected
    local change is sent instead.

    Args:
        session: The active sync session.

    Returns:
        True if a new local value was detected and recorded.

    Raises:
        PlatformError: If the clipboard cannot be read.
        PersistenceError: If the new value cannot be persisted. The cache
            is left untouched so the change is picked up again next tick.
        NetworkError: If the push fails after the value was recorded.
    """
    current = await session.local.read()
    if current is None or not session.state.should_push(current):
        return False

    if not validate_content_size(current):
        logger.warning("Local clipboard exceeds 10 MB limit, skipping")
        session.state.skipped_local = current
        return False

    await session.store.set(LAST_LOCAL_KEY, current)
    session.state.record_pushed(current)
    await session.remote.push(current)
    logger.info("Sent %d characters to desktop", len(current))
    return True


async def sync_remote_to_local(session: SyncSession) -> bool:
    """Apply a changed desktop value to the local clipboard.

    The value is applied only when it is non-empty, differs from the last
    applied desktop value, and is not an echo of the current local value.
    The clipboard is written before state is persisted so that a failed
    write leaves the value eligible on the next tick.

    Args:
        session: The active sync session.

    Returns:
        True if a desktop value was applied.

    Raises:
        NetworkError: If the pull fails.
        PlatformError: If the clipboard cannot be written.
        PersistenceError: If the applied value cannot be persisted.
    """
    incoming = await session.remote.pull()
    if incoming is None or not session.state.should_apply(incoming):
        return False

    if not validate_content_size(incoming):
        logger.warning("Desktop clipboard exceeds 10 MB limit, skipping")
        session.state.skipped_remote = incoming
        return False

    await session.local.write(incoming)
    await session.store.update(
        {LAST_REMOTE_KEY: incoming, LAST_LOCAL_KEY: incoming}
    )
    session.state.record_applied(incoming)
    logger.info("Updated clipboard with %d characters from desktop", len(incoming))

    await session.notifier.notify(
        "Echo - Clipboard Synced",
        f"Updated clipboard: {format_preview(incoming)}",
    )
    return True
