"""Open positions."""

from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal
from typing import Any

from ...endpoint import define_endpoint
from ...errors import NotFound
from ...types import _decimal, _opt_decimal


@dataclass(frozen=True, slots=True)
class Position:
    asset_id: str
    symbol: str
    exchange: str
    asset_class: str
    side: str
    qty: Decimal
    avg_entry_price: Decimal
    market_value: Decimal | None
    cost_basis: Decimal
    unrealized_pl: Decimal | None
    unrealized_plpc: Decimal | None
    current_price: Decimal | None
    lastday_price: Decimal | None
    change_today: Decimal | None

    @classmethod
    def from_json(cls, data: dict[str, Any]) -> Position:
        # price derived fields are null outside of market data coverage
        return cls(
            asset_id=data["asset_id"],
            symbol=data["symbol"],
            exchange=data["exchange"],
            asset_class=data["asset_class"],
            side=data["side"],
            qty=_decimal(data["qty"]),
            avg_entry_price=_decimal(data["avg_entry_price"]),
            market_value=_opt_decimal(data.get("market_value")),
            cost_basis=_decimal(data["cost_basis"]),
            unrealized_pl=_opt_decimal(data.get("unrealized_pl")),
            unrealized_plpc=_opt_decimal(data.get("unrealized_plpc")),
            current_price=_opt_decimal(data.get("current_price")),
            lastday_price=_opt_decimal(data.get("lastday_price")),
            change_today=_opt_decimal(data.get("change_today")),
        )


GetPosition = define_endpoint(
    "GetPosition",
    path=lambda symbol: f"/v2/positions/{symbol}",
    output=Position.from_json,
    errors={404: NotFound},
    doc="Retrieve the open position in the given symbol.",
)
