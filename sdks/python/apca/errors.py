"""apca error types.

Everything the package raises derives from :class:`ApcaError`. Failures of
:meth:`~apca.Client.issue` derive from :class:`RequestError`, failures of a
subscription from :class:`StreamError`.
"""

from __future__ import annotations

import json


class ApcaError(Exception):
    """Base error for apca operations."""

    code = "APCA_ERROR"

    def __init__(self, code: str, message: str, details=None):
        super().__init__(message)
        self.code = code
        self.message = message
        self.details = details


class ConfigError(ApcaError):
    """Raised when the API configuration is incomplete."""

    code = "CONFIG"

    def __init__(self, message: str, details=None):
        super().__init__(self.code, message, details)


# ---------------------------------------------------------------------------
# Request errors
# ---------------------------------------------------------------------------

class RequestError(ApcaError):
    """Base for every error an endpoint invocation can produce.

    ``status`` is the HTTP status code, or ``None`` when the request never
    got that far. ``body`` holds the raw response body.
    """

    code = "REQUEST_FAILED"

    def __init__(
        self,
        message: str,
        *,
        status: int | None = None,
        body: bytes = b"",
        details=None,
    ):
        super().__init__(self.code, message, details)
        self.status = status
        self.body = body


class TransportError(RequestError):
    """The request could not be sent or its response not received."""

    code = "TRANSPORT"


class UnexpectedStatus(RequestError):
    """The server answered with a status code the endpoint does not document."""

    code = "UNEXPECTED_STATUS"

    def __init__(self, status: int, body: bytes = b""):
        super().__init__(f"unexpected HTTP status {status}", status=status, body=body)


class MalformedBody(RequestError):
    """The response body does not match the schema for its status code."""

    code = "MALFORMED_BODY"

    def __init__(self, status: int, body: bytes, cause: Exception):
        super().__init__(
            f"malformed response body for HTTP status {status}: {cause}",
            status=status,
            body=body,
            details=cause,
        )


class ApiError(RequestError):
    """A documented error status with a parsed error document.

    ``api_code`` is Alpaca's own numeric error code, when present.
    """

    code = "API_ERROR"

    def __init__(
        self,
        message: str,
        *,
        status: int | None = None,
        body: bytes = b"",
        api_code: int | None = None,
    ):
        super().__init__(message, status=status, body=body)
        self.api_code = api_code

    @classmethod
    def from_body(cls, status: int, body: bytes) -> ApiError:
        """Parse Alpaca's ``{"code": ..., "message": ...}`` error document."""
        data = json.loads(body)
        message = data["message"]
        if not isinstance(message, str):
            raise TypeError(f"error message must be a string, got {type(message).__name__}")
        api_code = data.get("code")
        if api_code is not None and not isinstance(api_code, int):
            raise TypeError(f"error code must be an integer, got {type(api_code).__name__}")
        return cls(message, status=status, body=body, api_code=api_code)


class NotFound(ApiError):
    """The addressed resource does not exist."""

    code = "NOT_FOUND"


class NotPermitted(ApiError):
    """The account may not perform this operation (e.g. insufficient buying power)."""

    code = "NOT_PERMITTED"


class InvalidInput(ApiError):
    """The request was rejected as invalid."""

    code = "INVALID_INPUT"


# ---------------------------------------------------------------------------
# Stream errors
# ---------------------------------------------------------------------------

class StreamError(ApcaError):
    """Base for errors raised by a subscription."""

    code = "STREAM_ERROR"

    def __init__(self, message: str, details=None):
        super().__init__(self.code, message, details)


class HandshakeError(StreamError):
    """The server did not accept the authentication or listen request."""

    code = "HANDSHAKE"


class StreamDecodeError(StreamError):
    """An inbound frame could not be decoded into an event."""

    code = "STREAM_DECODE"

    def __init__(self, message: str, frame: str | bytes = b""):
        super().__init__(message, details=frame)
        self.frame = frame


class StreamTransportError(StreamError):
    """The connection could not be opened or was lost."""

    code = "STREAM_TRANSPORT"
