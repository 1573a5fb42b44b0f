#!/usr/bin/env python3
"""003 — Market Data (Python SDK)

Fetch the latest quote and a day of hourly bars from the market data API.
Both endpoints live on the data host (APCA_API_DATA_URL) but are issued
through the same client.

What you'll learn:
- Issuing market data endpoints
- Paging through bars with next_page_token

Run:
    APCA_API_KEY_ID=PK... APCA_API_SECRET_KEY=... python main.py [SYMBOL]
"""

import asyncio
import sys
from dataclasses import replace
from datetime import datetime, timedelta, timezone

from apca import BarsReq, Client, GetBars, GetLatestQuote, TimeFrame


async def main(symbol: str):
    async with Client.from_env() as client:
        quote = await client.issue(GetLatestQuote, symbol)
        print(f"{symbol} bid {quote.bid_price} x {quote.bid_size} / ask {quote.ask_price} x {quote.ask_size}")

        end = datetime.now(timezone.utc) - timedelta(minutes=15)
        req = BarsReq(symbol=symbol, start=end - timedelta(days=1), end=end, timeframe=TimeFrame.HOUR)
        while True:
            page = await client.issue(GetBars, req)
            for bar in page.bars:
                print(f"  {bar.time:%Y-%m-%d %H:%M}  o={bar.open} h={bar.high} l={bar.low} c={bar.close} v={bar.volume}")
            if page.next_page_token is None:
                break
            req = replace(req, page_token=page.next_page_token)


if __name__ == "__main__":
    asyncio.run(main(sys.argv[1] if len(sys.argv) > 1 else "AAPL"))
