"""Listing open positions."""

from __future__ import annotations

from typing import Any

from ...endpoint import define_endpoint
from .position import Position


def _positions(data: Any) -> list[Position]:
    if not isinstance(data, list):
        raise TypeError(f"expected a list of positions, got {type(data).__name__}")
    return [Position.from_json(item) for item in data]


ListPositions = define_endpoint(
    "ListPositions",
    path="/v2/positions",
    output=_positions,
    doc="List all open positions. Takes no input.",
)
