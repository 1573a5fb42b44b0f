"""Listing orders."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from typing import Any

from ...endpoint import define_endpoint
from .order import Order


class Status(str, Enum):
    OPEN = "open"
    CLOSED = "closed"
    ALL = "all"


class Direction(str, Enum):
    ASC = "asc"
    DESC = "desc"


@dataclass(frozen=True, slots=True)
class OrdersReq:
    """Filters for :data:`ListOrders`. Unset fields are left to the server."""

    status: Status = Status.OPEN
    limit: int | None = None
    after: datetime | None = None
    until: datetime | None = None
    direction: Direction | None = None
    symbols: tuple[str, ...] = ()

    def to_query(self) -> dict[str, Any]:
        return {
            "status": Status(self.status).value,
            "limit": self.limit,
            "after": self.after.isoformat() if self.after else None,
            "until": self.until.isoformat() if self.until else None,
            "direction": Direction(self.direction).value if self.direction else None,
            "symbols": ",".join(self.symbols) if self.symbols else None,
        }


def _orders(data: Any) -> list[Order]:
    if not isinstance(data, list):
        raise TypeError(f"expected a list of orders, got {type(data).__name__}")
    return [Order.from_json(item) for item in data]


ListOrders = define_endpoint(
    "ListOrders",
    path="/v2/orders",
    query=lambda req: (req or OrdersReq()).to_query(),
    output=_orders,
    doc="List orders. Input is an :class:`OrdersReq` or ``None`` for open orders.",
)
