"""Historical aggregate bars.

Requests are paginated: pass the ``next_page_token`` of one response as
``page_token`` of the next request until it comes back ``None``.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from decimal import Decimal
from enum import Enum
from typing import Any

from ...endpoint import DATA, define_endpoint
from ...errors import InvalidInput
from ...types import _decimal, _int, _timestamp


class TimeFrame(str, Enum):
    MINUTE = "1Min"
    HOUR = "1Hour"
    DAY = "1Day"


@dataclass(frozen=True, slots=True)
class BarsReq:
    symbol: str
    start: datetime
    end: datetime
    timeframe: TimeFrame = TimeFrame.DAY
    limit: int | None = None
    page_token: str | None = None


@dataclass(frozen=True, slots=True)
class Bar:
    time: datetime
    open: Decimal
    high: Decimal
    low: Decimal
    close: Decimal
    volume: int

    @classmethod
    def from_json(cls, data: dict[str, Any]) -> Bar:
        return cls(
            time=_timestamp(data["t"]),
            open=_decimal(data["o"]),
            high=_decimal(data["h"]),
            low=_decimal(data["l"]),
            close=_decimal(data["c"]),
            volume=_int(data["v"]),
        )


@dataclass(frozen=True, slots=True)
class Bars:
    symbol: str
    bars: list[Bar] = field(default_factory=list)
    next_page_token: str | None = None

    @classmethod
    def from_json(cls, data: dict[str, Any]) -> Bars:
        # "bars" is null, not empty, when the range holds no data
        return cls(
            symbol=data["symbol"],
            bars=[Bar.from_json(bar) for bar in data.get("bars") or []],
            next_page_token=data.get("next_page_token"),
        )


def _bars_query(req: BarsReq) -> dict[str, Any]:
    return {
        "start": req.start.isoformat(),
        "end": req.end.isoformat(),
        "timeframe": TimeFrame(req.timeframe).value,
        "limit": req.limit,
        "page_token": req.page_token,
    }


GetBars = define_endpoint(
    "GetBars",
    base=DATA,
    path=lambda req: f"/v2/stocks/{req.symbol}/bars",
    query=_bars_query,
    output=Bars.from_json,
    errors={422: InvalidInput},
    doc="Retrieve historical bars for one symbol. Input is a :class:`BarsReq`.",
)
