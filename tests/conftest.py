"""Pytest configuration and shared fixtures."""

from __future__ import annotations

from typing import Any

import pytest


@pytest.fixture
def sample_map() -> dict[str, Any]:
    """Small map mixing an int and an inline array."""
    return {"a": 1, "b": [2, 3]}


@pytest.fixture
def sample_map_bytes() -> bytes:
    """Expected encoding of sample_map."""
    # map[2], raw[1] "a", 1, raw[1] "b", array[2], 2, 3
    return bytes([0xF9, 0x83, 0x61, 0x01, 0x83, 0x62, 0xF1, 0x02, 0x03])


@pytest.fixture
def sample_series() -> dict[str, Any]:
    """Time-series style query result."""
    return {
        "columns": ["time", "value"],
        "name": "cpu.load",
        "points": [[1_700_000_000 + i * 60, i * 0.25 - 1.0] for i in range(12)],
        "tags": {"host": "db-01", "region": "eu-west"},
        "truncated": False,
        "total": 12,
        "next": None,
    }
