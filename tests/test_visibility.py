#!/usr/bin/env python3
"""Tests for the signal-based visibility observer."""
import asyncio
import signal
from unittest.mock import patch

import pytest

from echosync.visibility import SignalVisibilityObserver


@pytest.mark.asyncio
async def test_start_and_stop_manage_signal_handlers() -> None:
    """Test SIGCONT and SIGTSTP handlers are installed and removed."""
    observer = SignalVisibilityObserver()
    loop = asyncio.get_running_loop()

    async def on_change(visible: bool) -> None:
        pass

    with patch.object(loop, "add_signal_handler") as mock_add, patch.object(
        loop, "remove_signal_handler"
    ) as mock_remove:
        observer.start(on_change)
        assert observer.active
        observer.stop()
        assert not observer.active

    added = {call.args[0] for call in mock_add.call_args_list}
    removed = {call.args[0] for call in mock_remove.call_args_list}
    assert added == {signal.SIGCONT, signal.SIGTSTP}
    assert removed == {signal.SIGCONT, signal.SIGTSTP}


@pytest.mark.asyncio
async def test_resume_signal_reports_visible() -> None:
    """Test SIGCONT reports the process as visible without stopping it."""
    observer = SignalVisibilityObserver()
    seen: list[bool] = []

    async def on_change(visible: bool) -> None:
        seen.append(visible)

    loop = asyncio.get_running_loop()
    with patch.object(loop, "add_signal_handler"), patch(
        "echosync.visibility.os.kill"
    ) as mock_kill:
        observer.start(on_change)
        await observer._run(True)

    assert seen == [True]
    mock_kill.assert_not_called()


@pytest.mark.asyncio
async def test_suspend_signal_reports_hidden_then_stops() -> None:
    """Test SIGTSTP runs the callback before stopping the process."""
    observer = SignalVisibilityObserver()
    order: list[str] = []

    async def on_change(visible: bool) -> None:
        order.append(f"callback:{visible}")

    loop = asyncio.get_running_loop()
    with patch.object(loop, "add_signal_handler"), patch(
        "echosync.visibility.os.kill", side_effect=lambda pid, sig: order.append("kill")
    ) as mock_kill:
        observer.start(on_change)
        await observer._run(False)

    assert order == ["callback:False", "kill"]
    assert mock_kill.call_args.args[1] == signal.SIGSTOP


def test_stop_without_start_is_noop() -> None:
    """Test stop is safe when no handlers were installed."""
    SignalVisibilityObserver().stop()
