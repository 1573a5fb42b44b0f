"""Version 2 of the trading API."""

from .account import Account, GetAccount
from .asset import Asset, GetAsset
from .order import (
    CreateOrder,
    DeleteOrder,
    GetOrder,
    GetOrderByClientId,
    Order,
    OrderReq,
    OrderType,
    Side,
    TimeInForce,
)
from .orders import Direction, ListOrders, OrdersReq, Status
from .position import GetPosition, Position
from .positions import ListPositions

__all__ = [
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
    "Status",
    "Direction",
    "ListOrders",
    "Position",
    "GetPosition",
    "ListPositions",
]
