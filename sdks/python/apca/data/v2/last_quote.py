"""The most recent quote for a symbol."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from decimal import Decimal
from typing import Any

from ...endpoint import DATA, define_endpoint
from ...types import _decimal, _int, _timestamp


@dataclass(frozen=True, slots=True)
class Quote:
    symbol: str
    time: datetime
    ask_price: Decimal
    ask_size: int
    bid_price: Decimal
    bid_size: int

    @classmethod
    def from_json(cls, data: dict[str, Any]) -> Quote:
        quote = data["quote"]
        return cls(
            symbol=data["symbol"],
            time=_timestamp(quote["t"]),
            ask_price=_decimal(quote["ap"]),
            ask_size=_int(quote["as"]),
            bid_price=_decimal(quote["bp"]),
            bid_size=_int(quote["bs"]),
        )


GetLatestQuote = define_endpoint(
    "GetLatestQuote",
    base=DATA,
    path=lambda symbol: f"/v2/stocks/{symbol}/quotes/latest",
    output=Quote.from_json,
    doc="Retrieve the latest quote for a symbol.",
)
