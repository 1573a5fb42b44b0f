"""Definitions surrounding tradable assets."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

from ...endpoint import define_endpoint
from ...errors import NotFound


@dataclass(frozen=True, slots=True)
class Asset:
    id: str
    symbol: str
    asset_class: str
    exchange: str
    status: str
    tradable: bool
    marginable: bool
    shortable: bool
    easy_to_borrow: bool

    @classmethod
    def from_json(cls, data: dict[str, Any]) -> Asset:
        return cls(
            id=data["id"],
            symbol=data["symbol"],
            # "class" on the wire
            asset_class=data["class"],
            exchange=data["exchange"],
            status=data["status"],
            tradable=bool(data["tradable"]),
            marginable=bool(data.get("marginable", False)),
            shortable=bool(data.get("shortable", False)),
            easy_to_borrow=bool(data.get("easy_to_borrow", False)),
        )


GetAsset = define_endpoint(
    "GetAsset",
    path=lambda symbol: f"/v2/assets/{symbol}",
    output=Asset.from_json,
    errors={404: NotFound},
    doc="Retrieve an asset by symbol or asset id.",
)
