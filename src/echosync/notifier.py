#!/usr/bin/env python3
"""User-facing notifications.

Two sinks are provided:
- ConsoleNotifier: prints to stderr, always available (foreground mode)
- DesktopNotifier: posts desktop notifications through notify-send
  (freedesktop) or osascript (macOS); acquiring it is what grants
  background mode

Notification failures are logged and never raised: a missing toast must
not stall synchronization.
"""

from __future__ import annotations

import asyncio
import logging
import shutil
import sys
from abc import ABC, abstractmethod

import click

from echosync.constants import PREVIEW_LENGTH
from echosync.errors import PermissionDenied

logger = logging.getLogger(__name__)

APP_NAME: str = "Echo"


def format_preview(text: str, limit: int = PREVIEW_LENGTH) -> str:
    """Shorten clipboard text for display.

    Args:
        text: Clipboard text.
        limit: Number of characters kept.

    Returns:
        The first ``limit`` characters, followed by "..." when the text was
        longer than that.
    """
    if len(text) > limit:
        return text[:limit] + "..."
    return text


def _applescript_escape(text: str) -> str:
    """Escape text for use inside an AppleScript string literal."""
    return text.replace("\\", "\\\\").replace('"', '\\"')


class Notifier(ABC):
    """Notification sink interface."""

    async def acquire(self) -> None:
        """Ensure notifications can be delivered.

        Raises:
            PermissionDenied: If this sink cannot deliver notifications.
        """

    @abstractmethod
    async def notify(self, title: str, body: str = "") -> None:
        """Deliver a notification."""


class ConsoleNotifier(Notifier):
    """Write notifications to stderr."""

    async def notify(self, title: str, body: str = "") -> None:
        message = f"{title}: {body}" if body else title
        click.echo(message, err=True)


class DesktopNotifier(Notifier):
    """Post desktop notifications via the platform's command-line tool."""

    def __init__(self) -> None:
        self.command: str | None = None

    async def acquire(self) -> None:
        tool = "osascript" if sys.platform == "darwin" else "notify-send"
        path = shutil.which(tool)
        if path is None:
            raise PermissionDenied(f"{tool} not found, desktop notifications unavailable")
        self.command = path

    def _argv(self, title: str, body: str) -> list[str]:
        assert self.command is not None
        if sys.platform == "darwin":
            title_safe = _applescript_escape(title)
            body_safe = _applescript_escape(body)
            script = f'display notification "{body_safe}" with title "{title_safe}"'
            return [self.command, "-e", script]
        return [self.command, "--app-name", APP_NAME, title, body]

    async def notify(self, title: str, body: str = "") -> None:
        if self.command is None:
            logger.debug("Desktop notifier not acquired, dropping %r", title)
            return
        try:
            proc = await asyncio.create_subprocess_exec(
                *self._argv(title, body),
                stdout=asyncio.subprocess.DEVNULL,
                stderr=asyncio.subprocess.DEVNULL,
            )
            returncode = await proc.wait()
        except OSError as e:
            logger.warning("Failed to post notification: %s", e)
            return
        if returncode != 0:
            logger.warning("Notification command exited with %d", returncode)
