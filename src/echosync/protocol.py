#!/usr/bin/env python3
"""
Batch envelope encoding for the clipboard relay.

The relay speaks the tRPC batch format: every request payload is a mapping
keyed by call index, and every response is a list indexed the same way.
echosync only ever issues single-call batches, so index "0" is used
throughout.

Push body (POST):
    {"0": {"json": {"item": <text>, "device": "mobile"}}}

Pull query (GET, URL-encoded into the ``input`` parameter):
    {"0": {"json": {"device": "desktop"}}}

Pull response:
    [{"result": {"data": {"json": {"item": <text>}}}}]

Responses that do not match this shape are treated as "no data" rather
than as errors so the client tolerates schema drift on the relay side.
"""
from __future__ import annotations

import json
from typing import Any

from echosync.constants import LOCAL_DEVICE, REMOTE_DEVICE

# Maximum size of clipboard text in bytes (10 MB, UTF-8 encoded).
# Larger values are neither pushed nor applied.
MAX_CONTENT_SIZE: int = 10485760


def encode_push_body(item: str, device: str = LOCAL_DEVICE) -> dict[str, Any]:
    """
    Build the JSON body for a push request.

    Args:
        item: Clipboard text to send.
        device: Origin tag attached to the item.

    Returns:
        Batch envelope ready to be serialized as the request body.
    """
    return {"0": {"json": {"item": item, "device": device}}}


def encode_pull_params(device: str = REMOTE_DEVICE) -> dict[str, str]:
    """
    Build the query parameters for a pull request.

    The envelope is serialized compactly; URL encoding is left to the HTTP
    client.

    Args:
        device: Origin tag of the value being requested.

    Returns:
        Mapping with the single ``input`` query parameter.
    """
    envelope = {"0": {"json": {"device": device}}}
    return {"input": json.dumps(envelope, separators=(",", ":"))}


def decode_pull_response(data: Any) -> str | None:
    """
    Extract the clipboard item from a pull response.

    Args:
        data: Parsed JSON response body.

    Returns:
        The item text, or None if the response carries no item or does not
        have the expected shape.
    """
    try:
        item = data[0]["result"]["data"]["json"]["item"]
    except (KeyError, IndexError, TypeError):
        return None
    if not isinstance(item, str):
        return None
    return item


def validate_content_size(text: str) -> bool:
    """
    Check if clipboard text is within the allowed size.

    Args:
        text: Clipboard text to validate.

    Returns:
        True if the UTF-8 encoding is at most MAX_CONTENT_SIZE bytes.
    """
    return len(text.encode("utf-8")) <= MAX_CONTENT_SIZE
