"""Runtime configuration for echosync commands.

Every setting is a click option with an ECHOSYNC_* environment variable
fallback; config_options() attaches them to a command and hands the
command a single SyncConfig.
"""

from __future__ import annotations

import functools
from collections.abc import Callable
from dataclasses import dataclass
from pathlib import Path
from typing import Any

import click

from echosync.constants import (
    DEFAULT_INTERVAL,
    DEFAULT_PULL_URL,
    DEFAULT_PUSH_URL,
    DEFAULT_TIMEOUT,
)


@dataclass(frozen=True)
class SyncConfig:
    """Settings shared by the sync commands.

    Attributes:
        push_url: Relay endpoint receiving local values.
        pull_url: Relay endpoint returning desktop values.
        interval: Seconds between reconciliation ticks.
        timeout: HTTP request timeout in seconds.
        state_file: Durable state location, or None for the per-user default.
    """

    push_url: str = DEFAULT_PUSH_URL
    pull_url: str = DEFAULT_PULL_URL
    interval: float = DEFAULT_INTERVAL
    timeout: float = DEFAULT_TIMEOUT
    state_file: Path | None = None


def state_file_option(func: Callable[..., Any]) -> Callable[..., Any]:
    """Attach the --state-file option."""
    return click.option(
        "--state-file",
        type=click.Path(dir_okay=False, path_type=Path),
        envvar="ECHOSYNC_STATE_FILE",
        default=None,
        help="Durable state file (default: per-user data directory)",
    )(func)


def config_options(func: Callable[..., Any]) -> Callable[..., Any]:
    """Attach the sync settings to a click command.

    The decorated command receives a ``config`` keyword argument instead
    of the individual options.
    """

    @click.option(
        "--push-url",
        envvar="ECHOSYNC_PUSH_URL",
        default=DEFAULT_PUSH_URL,
        show_default=True,
        help="Relay endpoint for publishing local clipboard values",
    )
    @click.option(
        "--pull-url",
        envvar="ECHOSYNC_PULL_URL",
        default=DEFAULT_PULL_URL,
        show_default=True,
        help="Relay endpoint for fetching desktop clipboard values",
    )
    @click.option(
        "--interval",
        type=click.FloatRange(min=0, min_open=True),
        envvar="ECHOSYNC_INTERVAL",
        default=DEFAULT_INTERVAL,
        show_default=True,
        help="Seconds between sync ticks",
    )
    @click.option(
        "--timeout",
        type=click.FloatRange(min=0, min_open=True),
        envvar="ECHOSYNC_TIMEOUT",
        default=DEFAULT_TIMEOUT,
        show_default=True,
        help="HTTP request timeout in seconds",
    )
    @state_file_option
    @functools.wraps(func)
    def wrapper(
        *args: Any,
        push_url: str,
        pull_url: str,
        interval: float,
        timeout: float,
        state_file: Path | None,
        **kwargs: Any,
    ) -> Any:
        config = SyncConfig(
            push_url=push_url,
            pull_url=pull_url,
            interval=interval,
            timeout=timeout,
            state_file=state_file,
        )
        return func(*args, config=config, **kwargs)

    return wrapper
