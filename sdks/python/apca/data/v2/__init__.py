"""Version 2 of the market data API."""

from .bars import Bar, Bars, BarsReq, GetBars, TimeFrame
from .last_quote import GetLatestQuote, Quote

__all__ = [
    "Bar",
    "Bars",
    "BarsReq",
    "TimeFrame",
    "GetBars",
    "Quote",
    "GetLatestQuote",
]
