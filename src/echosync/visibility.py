#!/usr/bin/env python3
"""Process visibility tracking via job-control signals.

A terminal process goes to the background when the user suspends it
(SIGTSTP, usually Ctrl+Z) and comes back when it is continued (SIGCONT,
from ``fg`` or ``bg``). The observer turns these signals into visibility
callbacks on the running event loop. Because handling SIGTSTP replaces
the default stop action, the observer stops the process itself with
SIGSTOP once the callback has run.
"""

from __future__ import annotations

import asyncio
import logging
import os
import signal
from collections.abc import Awaitable, Callable

logger = logging.getLogger(__name__)

VisibilityCallback = Callable[[bool], Awaitable[None]]


class SignalVisibilityObserver:
    """Report foreground/background transitions of the current process."""

    def __init__(self) -> None:
        self._loop: asyncio.AbstractEventLoop | None = None
        self._on_change: VisibilityCallback | None = None
        self._tasks: set[asyncio.Task[None]] = set()

    @property
    def active(self) -> bool:
        """True while signal handlers are installed."""
        return self._loop is not None

    def start(self, on_change: VisibilityCallback) -> None:
        """Install SIGCONT and SIGTSTP handlers.

        Args:
            on_change: Coroutine function called with True when the
                process returns to the foreground and False when it is
                about to be suspended.
        """
        loop = asyncio.get_running_loop()
        self._on_change = on_change
        loop.add_signal_handler(signal.SIGCONT, self._spawn, True)
        loop.add_signal_handler(signal.SIGTSTP, self._spawn, False)
        self._loop = loop
        logger.debug("Visibility observer registered")

    def _spawn(self, visible: bool) -> None:
        task = asyncio.ensure_future(self._run(visible))
        self._tasks.add(task)
        task.add_done_callback(self._tasks.discard)

    async def _run(self, visible: bool) -> None:
        assert self._on_change is not None
        try:
            await self._on_change(visible)
        finally:
            if not visible:
                os.kill(os.getpid(), signal.SIGSTOP)

    def stop(self) -> None:
        """Remove the signal handlers, restoring default job control."""
        if self._loop is None:
            return
        self._loop.remove_signal_handler(signal.SIGCONT)
        self._loop.remove_signal_handler(signal.SIGTSTP)
        self._loop = None
        logger.debug("Visibility observer removed")
