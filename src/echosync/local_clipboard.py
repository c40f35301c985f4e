"""Device clipboard access via pyperclip.

pyperclip calls block on the platform clipboard tool (xclip, wl-copy,
pbcopy, ...), so both operations run in a worker thread to keep the event
loop responsive while a clipboard owner is slow to answer.
"""

from __future__ import annotations

import asyncio
import logging

import pyperclip

from echosync.errors import PlatformError

logger = logging.getLogger(__name__)


class LocalClipboard:
    """Read and write the text contents of the device clipboard."""

    async def read(self) -> str | None:
        """Return the current clipboard text.

        Returns:
            The clipboard text, or None if the clipboard is empty or holds
            something other than text.

        Raises:
            PlatformError: If the clipboard mechanism is unavailable.
        """
        try:
            content = await asyncio.to_thread(pyperclip.paste)
        except pyperclip.PyperclipException as e:
            raise PlatformError(f"Clipboard read failed: {e}") from e
        if not isinstance(content, str) or not content:
            return None
        return content

    async def write(self, value: str) -> None:
        """Replace the clipboard text.

        Writing the value the clipboard already holds leaves it unchanged.

        Args:
            value: Text to place on the clipboard.

        Raises:
            PlatformError: If the clipboard mechanism is unavailable.
        """
        try:
            await asyncio.to_thread(pyperclip.copy, value)
        except pyperclip.PyperclipException as e:
            raise PlatformError(f"Clipboard write failed: {e}") from e
        logger.debug("Set clipboard to %d characters", len(value))
