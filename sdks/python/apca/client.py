"""apca client: issues endpoint requests and opens event subscriptions.

Example::

    async with Client.from_env() as client:
        account = await client.issue(GetAccount)
        print(account.equity)

        order = await client.issue(CreateOrder, OrderReq(
            symbol="SPY", qty=Decimal("1"), side=Side.BUY,
        ))

        async with client.subscribe(TradeUpdates) as updates:
            async for update in updates:
                match update:
                    case TradeUpdate(event="fill", order=filled):
                        print(f"filled {filled.symbol}")
"""

from __future__ import annotations

import logging
from typing import Any, Mapping, TypeVar

import httpx
import websockets

from .endpoint import SECRET_HEADER, Endpoint, unwrap
from .errors import TransportError
from .streaming import Connect, EventStream, Subscription
from .types import ApiInfo

logger = logging.getLogger("apca.client")

I = TypeVar("I")
O = TypeVar("O")
E = TypeVar("E")


def _mask_headers(headers: Mapping[str, str]) -> dict[str, str]:
    """Copy ``headers`` with the secret replaced, for logging."""
    masked = dict(headers)
    for key in masked:
        if key.lower() == SECRET_HEADER.lower():
            masked[key] = "***"
    return masked


def _format_body(body: bytes) -> str:
    if not body:
        return ""
    try:
        return body.decode("utf-8")
    except UnicodeDecodeError:
        return f"<binary data: {len(body)} bytes>"


class Client:
    """Async client for the Alpaca trading and market data APIs.

    Use as an async context manager to release the connection pool::

        async with Client(api_info) as client:
            ...

    ``http_client`` and ``connect`` replace the HTTP connection pool and the
    WebSocket connect function; an injected ``http_client`` is left open by
    :meth:`close`.
    """

    def __init__(
        self,
        api_info: ApiInfo,
        *,
        http_client: httpx.AsyncClient | None = None,
        connect: Connect | None = None,
    ):
        self._api_info = api_info
        self._owns_http = http_client is None
        self._http = http_client if http_client is not None else httpx.AsyncClient()
        self._connect = connect if connect is not None else websockets.connect

    @classmethod
    def from_env(cls, **kwargs: Any) -> Client:
        """Create a client from the ``APCA_*`` environment variables."""
        return cls(ApiInfo.from_env(), **kwargs)

    @property
    def api_info(self) -> ApiInfo:
        return self._api_info

    # -- Async context manager ---------------------------------------------

    async def __aenter__(self) -> Client:
        return self

    async def __aexit__(self, *_exc: object) -> None:
        await self.close()

    async def close(self) -> None:
        """Close the connection pool if this client created it."""
        if self._owns_http:
            await self._http.aclose()

    # -- Requests ----------------------------------------------------------

    async def issue(self, endpoint: type[Endpoint[I, O]], input: I = None) -> O:
        """Issue a request to ``endpoint`` and decode the response.

        Returns the endpoint's output. Raises
        :class:`~apca.errors.TransportError` if no response was received,
        otherwise whichever :class:`~apca.errors.RequestError` the
        endpoint's conversion produced.
        """
        request = endpoint.request(self._api_info, input)
        if logger.isEnabledFor(logging.DEBUG):
            logger.debug(
                "HTTP request: %s %s headers=%s body=%s",
                request.method,
                request.url,
                _mask_headers(request.headers),
                _format_body(request.content),
            )
        else:
            logger.info("HTTP request: %s to %s", request.method, request.url)

        try:
            # send() reads the complete body before returning
            response = await self._http.send(request)
        except httpx.RequestError as exc:
            logger.info("HTTP request to %s failed: %s", request.url, exc)
            raise TransportError(f"{request.method} {request.url} failed: {exc}") from exc

        status = response.status_code
        body = response.content
        logger.info("HTTP status: %s", status)
        if logger.isEnabledFor(logging.DEBUG):
            logger.debug("HTTP body: %s", _format_body(body))

        return unwrap(endpoint.convert(status, body))

    # -- Streaming ---------------------------------------------------------

    def subscribe(self, stream: type[EventStream[E]]) -> Subscription[E]:
        """Create a subscription to ``stream``.

        The connection is opened by ``async with`` (or
        :meth:`Subscription.open`)::

            async with client.subscribe(TradeUpdates) as updates:
                async for update in updates:
                    ...
        """
        return Subscription(stream, self._api_info, self._connect)
