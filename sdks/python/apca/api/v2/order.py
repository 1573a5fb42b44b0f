"""Orders: the order type itself and the single-order endpoints.

Submitting an order::

    order = await client.issue(CreateOrder, OrderReq(
        symbol="AAPL",
        qty=Decimal("1"),
        side=Side.BUY,
        type=OrderType.LIMIT,
        limit_price=Decimal("150.00"),
    ))
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from decimal import Decimal
from enum import Enum
from typing import Any

from ...endpoint import define_endpoint
from ...errors import InvalidInput, NotFound, NotPermitted
from ...types import _decimal, _opt_decimal, _opt_timestamp, _timestamp


class Side(str, Enum):
    BUY = "buy"
    SELL = "sell"


class OrderType(str, Enum):
    MARKET = "market"
    LIMIT = "limit"
    STOP = "stop"
    STOP_LIMIT = "stop_limit"
    TRAILING_STOP = "trailing_stop"


class TimeInForce(str, Enum):
    DAY = "day"
    GTC = "gtc"
    OPG = "opg"
    CLS = "cls"
    IOC = "ioc"
    FOK = "fok"


@dataclass(frozen=True, slots=True)
class Order:
    """An order as reported by the trading API.

    ``status``, ``type``, ``side`` and ``time_in_force`` are kept as the
    strings the server sent; new values show up without a client update.
    """

    id: str
    client_order_id: str
    status: str
    symbol: str
    asset_id: str
    asset_class: str
    qty: Decimal | None
    filled_qty: Decimal
    type: str
    side: str
    time_in_force: str
    created_at: datetime
    updated_at: datetime | None = None
    submitted_at: datetime | None = None
    filled_at: datetime | None = None
    canceled_at: datetime | None = None
    limit_price: Decimal | None = None
    stop_price: Decimal | None = None
    filled_avg_price: Decimal | None = None
    extended_hours: bool = False

    @classmethod
    def from_json(cls, data: dict[str, Any]) -> Order:
        return cls(
            id=data["id"],
            client_order_id=data["client_order_id"],
            status=data["status"],
            symbol=data["symbol"],
            asset_id=data["asset_id"],
            asset_class=data["asset_class"],
            # notional orders carry no quantity
            qty=_opt_decimal(data.get("qty")),
            filled_qty=_decimal(data["filled_qty"]),
            type=data.get("order_type", data.get("type")),
            side=data["side"],
            time_in_force=data["time_in_force"],
            created_at=_timestamp(data["created_at"]),
            updated_at=_opt_timestamp(data.get("updated_at")),
            submitted_at=_opt_timestamp(data.get("submitted_at")),
            filled_at=_opt_timestamp(data.get("filled_at")),
            canceled_at=_opt_timestamp(data.get("canceled_at")),
            limit_price=_opt_decimal(data.get("limit_price")),
            stop_price=_opt_decimal(data.get("stop_price")),
            filled_avg_price=_opt_decimal(data.get("filled_avg_price")),
            extended_hours=bool(data.get("extended_hours", False)),
        )


@dataclass(frozen=True, slots=True)
class OrderReq:
    """Input of :data:`CreateOrder`."""

    symbol: str
    qty: Decimal
    side: Side
    type: OrderType = OrderType.MARKET
    time_in_force: TimeInForce = TimeInForce.DAY
    limit_price: Decimal | None = None
    stop_price: Decimal | None = None
    extended_hours: bool = False
    client_order_id: str | None = None

    def to_json(self) -> dict[str, Any]:
        body: dict[str, Any] = {
            "symbol": self.symbol,
            "qty": str(self.qty),
            "side": Side(self.side).value,
            "type": OrderType(self.type).value,
            "time_in_force": TimeInForce(self.time_in_force).value,
        }
        if self.limit_price is not None:
            body["limit_price"] = str(self.limit_price)
        if self.stop_price is not None:
            body["stop_price"] = str(self.stop_price)
        if self.extended_hours:
            body["extended_hours"] = True
        if self.client_order_id is not None:
            body["client_order_id"] = self.client_order_id
        return body


CreateOrder = define_endpoint(
    "CreateOrder",
    method="POST",
    path="/v2/orders",
    body=lambda req: req.to_json(),
    output=Order.from_json,
    errors={403: NotPermitted, 422: InvalidInput},
    doc="Submit an order. Input is an :class:`OrderReq`.",
)

GetOrder = define_endpoint(
    "GetOrder",
    path=lambda order_id: f"/v2/orders/{order_id}",
    output=Order.from_json,
    errors={404: NotFound},
    doc="Retrieve an order by its server-assigned id.",
)

GetOrderByClientId = define_endpoint(
    "GetOrderByClientId",
    path="/v2/orders:by_client_order_id",
    query=lambda client_order_id: {"client_order_id": client_order_id},
    output=Order.from_json,
    errors={404: NotFound},
    doc="Retrieve an order by the client order id it was submitted with.",
)

DeleteOrder = define_endpoint(
    "DeleteOrder",
    method="DELETE",
    path=lambda order_id: f"/v2/orders/{order_id}",
    ok=(204,),
    errors={404: NotFound},
    doc="Cancel an open order. Converts to ``None`` on success.",
)
