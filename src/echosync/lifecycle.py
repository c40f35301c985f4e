#!/usr/bin/env python3
"""Sync lifecycle control.

The controller owns the SyncSession and moves it between three modes:

    STOPPED ──start──▶ BACKGROUND   (desktop notifications available)
    STOPPED ──start──▶ FOREGROUND   (fallback, console notifications)
    BACKGROUND/FOREGROUND ──stop──▶ STOPPED

Only the sync-enabled flag is persisted. At process start resume()
re-enters a running mode when the flag is set, without announcing a new
start to the user beyond the mode notification.

The visibility observer is only registered in background mode: returning
to the foreground triggers an immediate pass, going to the background
posts a reminder.
"""

from __future__ import annotations

import asyncio
import logging
from contextlib import suppress
from typing import TYPE_CHECKING

from echosync.constants import SYNC_ENABLED_KEY
from echosync.errors import PermissionDenied, PersistenceError
from echosync.session import SyncMode
from echosync.sync_loop import drain_cycles, run_sync_loop, run_sync_pass
from echosync.sync_state import SyncState

if TYPE_CHECKING:
    from echosync.notifier import Notifier
    from echosync.session import SyncSession
    from echosync.visibility import SignalVisibilityObserver

logger = logging.getLogger(__name__)


class SyncController:
    """Start, stop and supervise a sync session.

    Args:
        session: The session to drive. Its notifier is replaced on every
            start according to the mode entered.
        desktop_notifier: Notifier whose acquisition grants background mode.
        console_notifier: Notifier used in foreground mode and for stop
            messages.
        observer: Visibility observer registered in background mode, or
            None to run without one.
    """

    def __init__(
        self,
        session: SyncSession,
        desktop_notifier: Notifier,
        console_notifier: Notifier,
        observer: SignalVisibilityObserver | None = None,
    ) -> None:
        self.session = session
        self.desktop_notifier = desktop_notifier
        self.console_notifier = console_notifier
        self.observer = observer

    @property
    def mode(self) -> SyncMode:
        return self.session.mode

    async def _persist_enabled(self, enabled: bool) -> None:
        try:
            await self.session.store.set_flag(SYNC_ENABLED_KEY, enabled)
        except PersistenceError as e:
            logger.warning("Failed to persist sync state: %s", e)

    async def _enter_mode(self) -> SyncMode:
        """Pick background or foreground mode and its notifier."""
        try:
            await self.desktop_notifier.acquire()
        except PermissionDenied as e:
            logger.info("Background sync unavailable (%s), syncing in foreground", e)
            self.session.notifier = self.console_notifier
            return SyncMode.FOREGROUND
        self.session.notifier = self.desktop_notifier
        return SyncMode.BACKGROUND

    async def start(self) -> SyncMode:
        """Start synchronization.

        Restarting a running session replaces its schedule. The cache is
        reloaded from the durable store, one pass runs immediately, and
        periodic ticks are scheduled afterwards.

        Returns:
            The mode entered.
        """
        if self.session.running:
            await self._halt()

        try:
            self.session.state = await SyncState.load(self.session.store)
        except PersistenceError as e:
            logger.warning("Failed to load sync state, starting fresh: %s", e)
            self.session.state = SyncState()

        mode = await self._enter_mode()
        self.session.mode = mode
        await self._persist_enabled(True)

        if mode is SyncMode.BACKGROUND and self.observer is not None:
            self.observer.start(self.handle_visibility_change)

        title = (
            "Echo - Background Sync Started"
            if mode is SyncMode.BACKGROUND
            else "Echo - Foreground Sync Started"
        )
        await self.session.notifier.notify(
            title, f"Syncing clipboard every {self.session.interval:g}s."
        )

        await run_sync_pass(self.session)
        self.session.scheduler = asyncio.create_task(
            run_sync_loop(self.session), name="echosync-scheduler"
        )
        logger.info("Clipboard sync started in %s mode", mode.value)
        return mode

    async def resume(self) -> SyncMode:
        """Restore the previous session if sync was enabled at last exit.

        Returns:
            The mode entered, or STOPPED if sync was not enabled.
        """
        try:
            enabled = await self.session.store.get_flag(SYNC_ENABLED_KEY)
        except PersistenceError as e:
            logger.warning("Failed to check sync state: %s", e)
            return SyncMode.STOPPED
        if not enabled:
            return SyncMode.STOPPED
        logger.info("Resuming previously running clipboard sync")
        return await self.start()

    async def stop(self) -> None:
        """Stop synchronization and persist the disabled flag.

        Cycles already running are allowed to finish.
        """
        await self._halt()
        await self._persist_enabled(False)
        await self.console_notifier.notify("Echo - Sync Stopped")
        logger.info("Clipboard sync stopped")

    async def toggle(self) -> SyncMode:
        """Start when stopped, stop when running.

        Returns:
            The mode after toggling.
        """
        if self.session.running:
            await self.stop()
            return SyncMode.STOPPED
        return await self.start()

    async def shutdown(self) -> None:
        """Halt for process exit, keeping the persisted flag so the next
        process resumes."""
        await self._halt()

    async def _halt(self) -> None:
        """Cancel future ticks, remove the observer and drain cycles."""
        scheduler = self.session.scheduler
        if scheduler is not None:
            scheduler.cancel()
            with suppress(asyncio.CancelledError):
                await scheduler
            self.session.scheduler = None
        if self.observer is not None:
            self.observer.stop()
        await drain_cycles(self.session)
        self.session.mode = SyncMode.STOPPED

    async def handle_visibility_change(self, visible: bool) -> None:
        """React to the process entering or leaving the foreground.

        Args:
            visible: True when the process returned to the foreground.
        """
        if self.session.mode is not SyncMode.BACKGROUND:
            return
        if visible:
            logger.debug("Returned to foreground, syncing immediately")
            await run_sync_pass(self.session)
        else:
            await self.session.notifier.notify(
                "Echo - Background Sync",
                "Clipboard syncing will continue when you return to the app.",
            )
