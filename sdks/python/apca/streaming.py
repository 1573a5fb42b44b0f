"""Streaming API for apca.

Provides :class:`EventStream` (the contract a subscribable feed implements)
and :class:`Subscription` (the live connection exposing a feed as an async
iterator of typed events)::

    async with client.subscribe(TradeUpdates) as events:
        async for update in events:
            print(update.event, update.order.symbol)

A background task reads frames off the socket and hands decoded events to
the consumer through a queue holding at most one item, so reading pauses
while the consumer is busy.
"""

from __future__ import annotations

import asyncio
import enum
import json
import logging
from typing import Any, Awaitable, Callable, ClassVar, Generic, Optional, TypeVar
from urllib.parse import urlsplit, urlunsplit

from websockets.exceptions import ConnectionClosedOK, WebSocketException

from .errors import ApcaError, HandshakeError, StreamDecodeError, StreamTransportError
from .types import _DECODE_ERRORS, ApiInfo, Credentials

logger = logging.getLogger("apca.streaming")

E = TypeVar("E")

Connect = Callable[[str], Awaitable[Any]]

# Failures of the socket itself, as opposed to the protocol spoken over it.
_TRANSPORT_ERRORS = (WebSocketException, OSError, asyncio.TimeoutError)


class FramePolicy(enum.Enum):
    """What a subscription does with a frame that is not a valid event."""

    IGNORE = "ignore"
    """Drop the frame and keep reading."""

    ERROR = "error"
    """Raise :class:`~apca.errors.StreamDecodeError` from the iterator.

    The subscription stays open; iterating again continues with the next
    frame.
    """


# ---------------------------------------------------------------------------
# Contract
# ---------------------------------------------------------------------------

class EventStream(Generic[E]):
    """Base class for stream definitions.

    Subclasses name the feed in :attr:`stream`, declare their
    :attr:`unrecognized` policy and implement :meth:`parse`.
    """

    stream: ClassVar[str]
    unrecognized: ClassVar[FramePolicy] = FramePolicy.ERROR

    @classmethod
    def url(cls, api_info: ApiInfo) -> str:
        """The WebSocket URL: the API host under ``/stream`` with a ws scheme."""
        parts = urlsplit(api_info.api_base)
        scheme = "ws" if parts.scheme == "http" else "wss"
        return urlunsplit((scheme, parts.netloc, parts.path.rstrip("/") + "/stream", "", ""))

    @classmethod
    def auth_message(cls, credentials: Credentials) -> dict[str, Any]:
        return {
            "action": "authenticate",
            "data": {
                "key_id": credentials.key_id.decode(),
                "secret_key": credentials.secret.decode(),
            },
        }

    @classmethod
    def listen_message(cls) -> dict[str, Any]:
        return {"action": "listen", "data": {"streams": [cls.stream]}}

    @classmethod
    async def handshake(cls, ws: Any, credentials: Credentials) -> None:
        """Authenticate and start listening to :attr:`stream`.

        Raises :class:`~apca.errors.HandshakeError` if the server rejects
        either step or answers with something unexpected.
        """
        await ws.send(json.dumps(cls.auth_message(credentials)))
        reply = await _recv_json(ws)
        if reply.get("stream") != "authorization":
            raise HandshakeError(f"expected authorization reply, got {reply!r}")
        status = _reply_data(reply).get("status")
        if status != "authorized":
            raise HandshakeError(f"authentication failed: {status!r}", details=reply)

        await ws.send(json.dumps(cls.listen_message()))
        reply = await _recv_json(ws)
        if reply.get("stream") != "listening":
            raise HandshakeError(f"expected listening reply, got {reply!r}")
        streams = _reply_data(reply).get("streams")
        if not isinstance(streams, list):
            raise HandshakeError(f"malformed listening reply: {reply!r}")
        if cls.stream not in streams:
            raise HandshakeError(f"server did not subscribe to {cls.stream!r}", details=reply)

    @classmethod
    def decode(cls, frame: str | bytes) -> E:
        """Decode one inbound frame into an event.

        Raises :class:`~apca.errors.StreamDecodeError` for anything that is
        not a well-formed message of this stream.
        """
        try:
            message = json.loads(frame)
        except _DECODE_ERRORS as exc:
            raise StreamDecodeError(f"frame is not JSON: {exc}", frame) from exc
        if not isinstance(message, dict) or message.get("stream") != cls.stream:
            raise StreamDecodeError(f"frame is not a {cls.stream!r} message", frame)
        try:
            return cls.parse(message.get("data"))
        except _DECODE_ERRORS as exc:
            raise StreamDecodeError(f"malformed {cls.stream!r} message: {exc}", frame) from exc

    @classmethod
    def parse(cls, data: Any) -> E:
        raise NotImplementedError(f"{cls.__name__} does not define parse")


async def _recv_json(ws: Any) -> dict[str, Any]:
    frame = await ws.recv()
    try:
        message = json.loads(frame)
    except _DECODE_ERRORS as exc:
        raise HandshakeError(f"handshake reply is not JSON: {exc}") from exc
    if not isinstance(message, dict):
        raise HandshakeError(f"handshake reply is not an object: {message!r}")
    return message


def _reply_data(reply: dict[str, Any]) -> dict[str, Any]:
    data = reply.get("data")
    if not isinstance(data, dict):
        raise HandshakeError(f"handshake reply carries no data object: {reply!r}")
    return data


# ---------------------------------------------------------------------------
# Subscription
# ---------------------------------------------------------------------------

_END = object()


class Subscription(Generic[E]):
    """A live subscription to one :class:`EventStream`.

    Created by :meth:`~apca.Client.subscribe`; the connection is opened by
    ``async with`` or :meth:`open` and released by :meth:`close`. Iterating
    yields events in the order their frames arrived. A lost connection
    raises a final :class:`~apca.errors.StreamTransportError`; a clean
    remote close just ends the iteration. Either way the connection is
    released once the stream ends.

    Breaking out of ``async for`` does not stop the subscription. Only
    :meth:`close`, or leaving ``async with``, cancels it and closes the
    socket.
    """

    def __init__(
        self,
        stream: type[EventStream[E]],
        api_info: ApiInfo,
        connect: Connect,
    ):
        self._stream = stream
        self._api_info = api_info
        self._connect = connect
        self._ws: Any = None
        self._queue: asyncio.Queue = asyncio.Queue(maxsize=1)
        self._task: Optional[asyncio.Task] = None
        self._closed = False
        self._finished = False

    @property
    def stream(self) -> type[EventStream[E]]:
        return self._stream

    @property
    def closed(self) -> bool:
        return self._closed

    async def open(self) -> Subscription[E]:
        """Connect, perform the handshake and start reading frames."""
        if self._ws is not None or self._closed:
            raise ApcaError("ALREADY_OPENED", "subscription can only be opened once")
        url = self._stream.url(self._api_info)
        logger.info("Subscribing to %s at %s", self._stream.stream, url)
        try:
            self._ws = await self._connect(url)
        except _TRANSPORT_ERRORS as exc:
            self._closed = True
            raise StreamTransportError(f"failed to connect to {url}: {exc}") from exc

        try:
            await self._stream.handshake(self._ws, self._api_info.credentials)
        except _TRANSPORT_ERRORS as exc:
            await self.close()
            raise StreamTransportError(f"connection lost during handshake: {exc}") from exc
        except Exception:
            await self.close()
            raise

        self._task = asyncio.get_running_loop().create_task(self._read_loop())
        return self

    async def close(self) -> None:
        """Stop reading, drop buffered events and close the connection."""
        if self._closed and self._ws is None:
            return
        self._closed = True
        task, self._task = self._task, None
        try:
            if task is not None:
                task.cancel()
                try:
                    await task
                except asyncio.CancelledError:
                    # Propagate only a cancellation of the caller.
                    current = asyncio.current_task()
                    if current is not None and current.cancelling():
                        raise
                except Exception as exc:
                    logger.debug("%s reader ended with %r", self._stream.stream, exc)
        finally:
            # Wake a consumer blocked on the queue.
            while not self._queue.empty():
                self._queue.get_nowait()
            self._queue.put_nowait(_END)
            if self._ws is not None:
                ws, self._ws = self._ws, None
                try:
                    await ws.close()
                except _TRANSPORT_ERRORS as exc:
                    logger.debug("Error closing %s connection: %s", self._stream.stream, exc)

    aclose = close

    async def __aenter__(self) -> Subscription[E]:
        return await self.open()

    async def __aexit__(self, *_exc: object) -> None:
        await self.close()

    def __aiter__(self) -> Subscription[E]:
        return self

    async def __anext__(self) -> E:
        if self._closed or self._finished:
            raise StopAsyncIteration
        if self._task is None:
            raise ApcaError("NOT_CONNECTED", "subscription is not open")
        item = await self._queue.get()
        if self._closed:
            raise StopAsyncIteration
        if item is _END:
            self._finished = True
            await self.close()
            raise StopAsyncIteration
        if isinstance(item, StreamTransportError):
            self._finished = True
            await self.close()
            raise item
        if isinstance(item, StreamDecodeError):
            raise item
        return item

    async def _read_loop(self) -> None:
        """Read frames until the connection ends, queueing decoded events."""
        stream = self._stream
        try:
            while True:
                frame = await self._ws.recv()
                try:
                    event = stream.decode(frame)
                except StreamDecodeError as exc:
                    if stream.unrecognized is FramePolicy.IGNORE:
                        logger.debug("Ignoring %s frame: %s", stream.stream, exc)
                        continue
                    logger.warning("Undecodable %s frame: %s", stream.stream, exc)
                    await self._queue.put(exc)
                    continue
                await self._queue.put(event)
        except ConnectionClosedOK:
            logger.info("%s connection closed by server", stream.stream)
            await self._queue.put(_END)
        except _TRANSPORT_ERRORS as exc:
            logger.warning("%s connection lost: %s", stream.stream, exc)
            await self._queue.put(
                StreamTransportError(f"{stream.stream} connection lost: {exc}")
            )
        except Exception as exc:
            logger.exception("%s reader failed", stream.stream)
            await self._queue.put(
                StreamTransportError(f"{stream.stream} reader failed: {exc!r}")
            )
