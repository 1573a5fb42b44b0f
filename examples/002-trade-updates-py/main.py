#!/usr/bin/env python3
"""002 — Trade Updates (Python SDK)

Subscribe to the account's order events over the streaming API and print
each one as it arrives. Place or cancel an order from another terminal (or
the dashboard) to see events flow.

What you'll learn:
- Opening a subscription with `async with client.subscribe(...)`
- Matching typed events structurally
- Telling a lost connection apart from an undecodable frame

Run:
    APCA_API_KEY_ID=PK... APCA_API_SECRET_KEY=... python main.py
"""

import asyncio
import logging

from apca import Client, StreamDecodeError, StreamTransportError, TradeUpdate, TradeUpdates


async def watch(client: Client) -> None:
    async with client.subscribe(TradeUpdates) as updates:
        print("Listening for trade updates (Ctrl-C to stop)...")
        while True:
            try:
                update = await anext(updates)
            except StopAsyncIteration:
                print("Server closed the stream")
                return
            except StreamDecodeError as exc:
                print(f"  skipped frame: {exc}")
                continue

            match update:
                case TradeUpdate(event="fill", order=order, price=price):
                    print(f"  filled {order.filled_qty} {order.symbol} @ {price}")
                case TradeUpdate(event=event, order=order):
                    print(f"  {event}: {order.symbol} {order.id}")


async def main():
    logging.basicConfig(level=logging.INFO)
    async with Client.from_env() as client:
        try:
            await watch(client)
        except StreamTransportError as exc:
            print(f"Connection lost: {exc}")


if __name__ == "__main__":
    try:
        asyncio.run(main())
    except KeyboardInterrupt:
        pass
