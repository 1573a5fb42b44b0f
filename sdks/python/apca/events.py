"""Typed events and the streams that produce them.

Every event is a frozen dataclass, so updates can be matched
structurally::

    async with client.subscribe(TradeUpdates) as updates:
        async for update in updates:
            match update:
                case TradeUpdate(event="fill", order=order):
                    print(f"filled {order.filled_qty} {order.symbol}")
                case TradeUpdate(event="canceled"):
                    print("canceled")
                case _:
                    pass
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from decimal import Decimal
from typing import Any

from .api.v2.order import Order
from .streaming import EventStream, FramePolicy
from .types import _decimal, _opt_decimal, _opt_timestamp, _timestamp


# ---------------------------------------------------------------------------
# Trade updates
# ---------------------------------------------------------------------------

@dataclass(frozen=True, slots=True)
class TradeUpdate:
    """A change to one of the account's orders.

    ``event`` is the wire name of what happened (``new``, ``fill``,
    ``partial_fill``, ``canceled``, ``expired``, ``rejected``, ...). The
    price and quantity fields are only set for fills.
    """

    event: str
    order: Order
    timestamp: datetime | None = None
    price: Decimal | None = None
    qty: Decimal | None = None
    position_qty: Decimal | None = None

    @classmethod
    def from_json(cls, data: dict[str, Any]) -> TradeUpdate:
        return cls(
            event=data["event"],
            order=Order.from_json(data["order"]),
            timestamp=_opt_timestamp(data.get("timestamp")),
            price=_opt_decimal(data.get("price")),
            qty=_opt_decimal(data.get("qty")),
            position_qty=_opt_decimal(data.get("position_qty")),
        )


class TradeUpdates(EventStream[TradeUpdate]):
    """Order status changes of the account.

    Frames that are not trade updates raise
    :class:`~apca.errors.StreamDecodeError` from the iterator.
    """

    stream = "trade_updates"
    unrecognized = FramePolicy.ERROR

    @classmethod
    def parse(cls, data: Any) -> TradeUpdate:
        return TradeUpdate.from_json(data)


# ---------------------------------------------------------------------------
# Account updates
# ---------------------------------------------------------------------------

@dataclass(frozen=True, slots=True)
class AccountUpdate:
    """A change to the account's balances or status."""

    id: str
    status: str
    currency: str
    cash: Decimal
    cash_withdrawable: Decimal
    created_at: datetime
    updated_at: datetime | None = None
    deleted_at: datetime | None = None

    @classmethod
    def from_json(cls, data: dict[str, Any]) -> AccountUpdate:
        return cls(
            id=data["id"],
            status=data["status"],
            currency=data["currency"],
            cash=_decimal(data["cash"]),
            cash_withdrawable=_decimal(data["cash_withdrawable"]),
            created_at=_timestamp(data["created_at"]),
            updated_at=_opt_timestamp(data.get("updated_at")),
            deleted_at=_opt_timestamp(data.get("deleted_at")),
        )


class AccountUpdates(EventStream[AccountUpdate]):
    """Balance and status changes of the account.

    Frames that are not account updates are dropped.
    """

    stream = "account_updates"
    unrecognized = FramePolicy.IGNORE

    @classmethod
    def parse(cls, data: Any) -> AccountUpdate:
        return AccountUpdate.from_json(data)
