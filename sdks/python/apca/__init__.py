"""apca — typed async client for the Alpaca trading and market data APIs.

Quick start::

    import asyncio
    from apca import Client, GetAccount, TradeUpdate, TradeUpdates

    async def main():
        async with Client.from_env() as client:
            account = await client.issue(GetAccount)
            print(account.buying_power)

            async with client.subscribe(TradeUpdates) as updates:
                async for update in updates:
                    match update:
                        case TradeUpdate(event="fill", order=order):
                            print(f"filled {order.qty} {order.symbol}")

    asyncio.run(main())
"""

# Core client and the two contracts it dispatches on
from .client import Client
from .endpoint import ConvertResult, Endpoint, Err, Ok, define_endpoint, unwrap
from .streaming import EventStream, FramePolicy, Subscription
from .types import ApiInfo, Credentials

# Error hierarchy
from .errors import (
    ApcaError,
    ApiError,
    ConfigError,
    HandshakeError,
    InvalidInput,
    MalformedBody,
    NotFound,
    NotPermitted,
    RequestError,
    StreamDecodeError,
    StreamError,
    StreamTransportError,
    TransportError,
    UnexpectedStatus,
)

# Trading API endpoints and domain types
from .api.v2 import (
    Account,
    Asset,
    CreateOrder,
    DeleteOrder,
    GetAccount,
    GetAsset,
    GetOrder,
    GetOrderByClientId,
    GetPosition,
    ListOrders,
    ListPositions,
    Order,
    OrderReq,
    OrdersReq,
    OrderType,
    Position,
    Side,
    TimeInForce,
)

# Market data endpoints
from .data.v2 import Bar, Bars, BarsReq, GetBars, GetLatestQuote, Quote, TimeFrame

# Event streams
from .events import AccountUpdate, AccountUpdates, TradeUpdate, TradeUpdates

__all__ = [
    # Client & contracts
    "Client",
    "ApiInfo",
    "Credentials",
    "Endpoint",
    "define_endpoint",
    "ConvertResult",
    "Ok",
    "Err",
    "unwrap",
    "EventStream",
    "FramePolicy",
    "Subscription",
    # Errors
    "ApcaError",
    "ConfigError",
    "RequestError",
    "TransportError",
    "UnexpectedStatus",
    "MalformedBody",
    "ApiError",
    "NotFound",
    "NotPermitted",
    "InvalidInput",
    "StreamError",
    "HandshakeError",
    "StreamDecodeError",
    "StreamTransportError",
    # Trading API
    "Account",
    "GetAccount",
    "Asset",
    "GetAsset",
    "Order",
    "OrderReq",
    "OrderType",
    "Side",
    "TimeInForce",
    "CreateOrder",
    "GetOrder",
    "GetOrderByClientId",
    "DeleteOrder",
    "OrdersReq",
    "ListOrders",
    "Position",
    "GetPosition",
    "ListPositions",
    # Market data API
    "Bar",
    "Bars",
    "BarsReq",
    "TimeFrame",
    "GetBars",
    "Quote",
    "GetLatestQuote",
    # Events
    "TradeUpdate",
    "TradeUpdates",
    "AccountUpdate",
    "AccountUpdates",
]
