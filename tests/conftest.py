from __future__ import annotations

import json
from typing import Any

import pytest


def make_event(event_type: str | None, section: str | None = None, **fields: Any) -> dict[str, Any]:
    """Build a decoded event with the given fields under data.<section>."""
    data: dict[str, Any] = {}
    if section is not None:
        data[section] = fields
    event: dict[str, Any] = {"data": data}
    if event_type is not None:
        event["type"] = event_type
    return event


def encode(event: dict[str, Any]) -> bytes:
    return json.dumps(event).encode("utf-8")


@pytest.fixture
def process_event():
    def _make(**fields: Any) -> bytes:
        return encode(make_event("process", "process", **fields))

    return _make


@pytest.fixture
def network_event():
    def _make(**fields: Any) -> bytes:
        return encode(make_event("network", "network", **fields))

    return _make


@pytest.fixture
def file_event():
    def _make(**fields: Any) -> bytes:
        return encode(make_event("file", "file", **fields))

    return _make
