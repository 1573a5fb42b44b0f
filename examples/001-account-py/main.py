#!/usr/bin/env python3
"""001 — Account and Orders (Python SDK)

The simplest apca program: read credentials from the environment, fetch the
account, place a limit order far below the market and cancel it again.

What you'll learn:
- Creating a Client from APCA_* environment variables
- Issuing endpoints and reading typed results
- Handling documented API errors

Run:
    APCA_API_KEY_ID=PK... APCA_API_SECRET_KEY=... python main.py
"""

import asyncio
from decimal import Decimal

from apca import (
    Client,
    CreateOrder,
    DeleteOrder,
    GetAccount,
    ListOrders,
    NotPermitted,
    OrderReq,
    OrderType,
    Side,
)


async def main():
    async with Client.from_env() as client:
        account = await client.issue(GetAccount)
        print(f"Account:       {account.id} ({account.status})")
        print(f"Buying power:  {account.buying_power} {account.currency}")

        try:
            order = await client.issue(CreateOrder, OrderReq(
                symbol="AAPL",
                qty=Decimal("1"),
                side=Side.BUY,
                type=OrderType.LIMIT,
                limit_price=Decimal("1.00"),
            ))
        except NotPermitted as exc:
            print(f"Order rejected: {exc}")
            return

        print(f"\nSubmitted {order.side} {order.qty} {order.symbol} @ {order.limit_price} ({order.status})")

        open_orders = await client.issue(ListOrders)
        print(f"Open orders:   {len(open_orders)}")

        await client.issue(DeleteOrder, order.id)
        print(f"Canceled {order.id}")


if __name__ == "__main__":
    asyncio.run(main())
