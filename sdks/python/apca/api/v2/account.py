"""The account of the authenticated user."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from decimal import Decimal
from typing import Any

from ...endpoint import define_endpoint
from ...types import _decimal, _int, _timestamp


@dataclass(frozen=True, slots=True)
class Account:
    """Trading account details as reported by ``GET /v2/account``."""

    id: str
    status: str
    currency: str
    cash: Decimal
    buying_power: Decimal
    equity: Decimal
    last_equity: Decimal
    portfolio_value: Decimal
    pattern_day_trader: bool
    trading_blocked: bool
    transfers_blocked: bool
    account_blocked: bool
    daytrade_count: int
    created_at: datetime

    @classmethod
    def from_json(cls, data: dict[str, Any]) -> Account:
        return cls(
            id=data["id"],
            status=data["status"],
            currency=data["currency"],
            cash=_decimal(data["cash"]),
            buying_power=_decimal(data["buying_power"]),
            equity=_decimal(data["equity"]),
            last_equity=_decimal(data["last_equity"]),
            portfolio_value=_decimal(data["portfolio_value"]),
            pattern_day_trader=bool(data.get("pattern_day_trader", False)),
            trading_blocked=bool(data.get("trading_blocked", False)),
            transfers_blocked=bool(data.get("transfers_blocked", False)),
            account_blocked=bool(data.get("account_blocked", False)),
            daytrade_count=_int(data.get("daytrade_count", 0)),
            created_at=_timestamp(data["created_at"]),
        )


GetAccount = define_endpoint(
    "GetAccount",
    path="/v2/account",
    output=Account.from_json,
    doc="Retrieve the account of the authenticated user. Takes no input.",
)
