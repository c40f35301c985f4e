#!/usr/bin/env python3
"""
Unit tests for the relay batch envelope.

Tests push body and pull query encoding, tolerant response decoding and
content size validation.
"""
import json

from echosync.protocol import (
    MAX_CONTENT_SIZE,
    decode_pull_response,
    encode_pull_params,
    encode_push_body,
    validate_content_size,
)


def test_encode_push_body_wraps_item_in_batch_envelope() -> None:
    """Test push body is keyed by call index with mobile origin."""
    assert encode_push_body("hello") == {
        "0": {"json": {"item": "hello", "device": "mobile"}}
    }


def test_encode_pull_params_requests_desktop_value() -> None:
    """Test pull query carries the desktop origin in the input parameter."""
    params = encode_pull_params()
    assert set(params) == {"input"}
    assert json.loads(params["input"]) == {"0": {"json": {"device": "desktop"}}}


def test_encode_pull_params_is_compact() -> None:
    """Test pull input is serialized without whitespace."""
    assert encode_pull_params()["input"] == '{"0":{"json":{"device":"desktop"}}}'


def test_decode_pull_response_returns_item() -> None:
    """Test the item is extracted from a well-formed response."""
    data = [{"result": {"data": {"json": {"item": "from desktop"}}}}]
    assert decode_pull_response(data) == "from desktop"


def test_decode_pull_response_null_item() -> None:
    """Test a null item means no data."""
    data = [{"result": {"data": {"json": {"item": None}}}}]
    assert decode_pull_response(data) is None


def test_decode_pull_response_missing_fields() -> None:
    """Test missing fields are treated as no data, not errors."""
    assert decode_pull_response([{"result": {"data": {"json": None}}}]) is None
    assert decode_pull_response([{"result": {}}]) is None
    assert decode_pull_response([]) is None
    assert decode_pull_response({}) is None
    assert decode_pull_response(None) is None


def test_decode_pull_response_non_string_item() -> None:
    """Test a non-string item is treated as no data."""
    data = [{"result": {"data": {"json": {"item": 42}}}}]
    assert decode_pull_response(data) is None


def test_validate_content_size_within_limit() -> None:
    """Test content at the limit is accepted."""
    assert validate_content_size("a" * MAX_CONTENT_SIZE) is True


def test_validate_content_size_over_limit() -> None:
    """Test content over the limit is rejected."""
    assert validate_content_size("a" * (MAX_CONTENT_SIZE + 1)) is False


def test_validate_content_size_counts_encoded_bytes() -> None:
    """Test multi-byte characters count by their UTF-8 length."""
    assert validate_content_size("é" * (MAX_CONTENT_SIZE // 2 + 1)) is False
