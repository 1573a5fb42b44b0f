"""The endpoint contract: building requests and converting responses.

An endpoint is a class, never instantiated, that describes one API
operation. :meth:`Endpoint.request` turns an input value into an
``httpx.Request`` and :meth:`Endpoint.convert` turns the eventual status
code and body into ``Ok(output)`` or ``Err(error)``::

    GetOrder = define_endpoint(
        "GetOrder",
        path=lambda order_id: f"/v2/orders/{order_id}",
        output=Order.from_json,
        errors={404: NotFound},
    )

    match GetOrder.convert(status, body):
        case Ok(order):
            ...
        case Err(NotFound()):
            ...
"""

from __future__ import annotations

import json
import sys
from dataclasses import dataclass
from types import MappingProxyType
from typing import Any, Callable, ClassVar, Generic, Mapping, TypeVar, Union

import httpx

from .errors import ApiError, MalformedBody, RequestError, UnexpectedStatus
from .types import _DECODE_ERRORS, ApiInfo

I = TypeVar("I")
O = TypeVar("O")
T = TypeVar("T")

API = "api"
DATA = "data"

KEY_ID_HEADER = "APCA-API-KEY-ID"
SECRET_HEADER = "APCA-API-SECRET-KEY"


# ---------------------------------------------------------------------------
# Conversion result
# ---------------------------------------------------------------------------

@dataclass(frozen=True, slots=True)
class Ok(Generic[T]):
    """Successful conversion carrying the endpoint's output."""

    value: T


@dataclass(frozen=True, slots=True)
class Err:
    """Failed conversion carrying a :class:`~apca.errors.RequestError`."""

    error: RequestError


ConvertResult = Union[Ok[T], Err]


def unwrap(result: ConvertResult[T]) -> T:
    """Return the value of an :class:`Ok` or raise the error of an :class:`Err`."""
    if isinstance(result, Err):
        raise result.error
    return result.value


# ---------------------------------------------------------------------------
# Endpoint contract
# ---------------------------------------------------------------------------

class Endpoint(Generic[I, O]):
    """Base class for endpoint definitions.

    Subclasses set the class attributes and override :meth:`path` (and,
    as needed, :meth:`query`, :meth:`body` and :meth:`parse`).
    :meth:`request` and :meth:`convert` are the same for every endpoint.
    """

    method: ClassVar[str] = "GET"
    base: ClassVar[str] = API
    ok: ClassVar[frozenset[int]] = frozenset({200})
    errors: ClassVar[Mapping[int, type[ApiError]]] = MappingProxyType({})

    @classmethod
    def path(cls, input: I) -> str:
        raise NotImplementedError(f"{cls.__name__} does not define a path")

    @classmethod
    def query(cls, input: I) -> Mapping[str, Any] | None:
        return None

    @classmethod
    def body(cls, input: I) -> Any:
        return None

    @classmethod
    def parse(cls, data: Any) -> O:
        """Turn the decoded JSON of a successful response into the output."""
        return data

    @classmethod
    def parse_body(cls, body: bytes) -> O:
        return cls.parse(json.loads(body))

    @classmethod
    def request(cls, api_info: ApiInfo, input: I) -> httpx.Request:
        """Build the signed request for ``input``. Performs no I/O."""
        base_url = api_info.data_base if cls.base == DATA else api_info.api_base
        url = base_url.rstrip("/") + cls.path(input)
        headers = {
            KEY_ID_HEADER: api_info.credentials.key_id,
            SECRET_HEADER: api_info.credentials.secret,
        }
        query = cls.query(input)
        params = None
        if query:
            params = {k: v for k, v in query.items() if v is not None}
        body = cls.body(input)
        if body is None:
            return httpx.Request(cls.method, url, params=params, headers=headers)
        return httpx.Request(cls.method, url, params=params, headers=headers, json=body)

    @classmethod
    def convert(cls, status: int, body: bytes) -> ConvertResult[O]:
        """Map a status code and raw body to ``Ok(output)`` or ``Err(error)``.

        Total and deterministic: parse failures become
        :class:`~apca.errors.MalformedBody`, undocumented status codes
        :class:`~apca.errors.UnexpectedStatus`.
        """
        if status in cls.ok:
            try:
                return Ok(cls.parse_body(body))
            except _DECODE_ERRORS as exc:
                return Err(MalformedBody(status, body, exc))

        error_cls = cls.errors.get(status)
        if error_cls is None:
            return Err(UnexpectedStatus(status, body))
        try:
            return Err(error_cls.from_body(status, body))
        except _DECODE_ERRORS as exc:
            return Err(MalformedBody(status, body, exc))


# ---------------------------------------------------------------------------
# Declaration helper
# ---------------------------------------------------------------------------

def _empty_body(cls, body: bytes) -> None:
    return None


def define_endpoint(
    name: str,
    *,
    path: str | Callable[[Any], str],
    method: str = "GET",
    output: Callable[[Any], Any] | None = None,
    ok: tuple[int, ...] = (200,),
    errors: Mapping[int, type[ApiError]] | None = None,
    query: Callable[[Any], Mapping[str, Any] | None] | None = None,
    body: Callable[[Any], Any] | None = None,
    base: str = API,
    doc: str | None = None,
) -> type[Endpoint]:
    """Create an :class:`Endpoint` subclass from a compact declaration.

    ``path`` is either a fixed string or a callable of the input.
    ``output`` decodes the JSON of a successful response; ``None`` means the
    success response carries no body and converts to ``None``.
    """
    if base not in (API, DATA):
        raise ValueError(f"unknown API base {base!r}")

    namespace: dict[str, Any] = {
        "__doc__": doc,
        "__module__": sys._getframe(1).f_globals.get("__name__", __name__),
        "method": method,
        "base": base,
        "ok": frozenset(ok),
        "errors": MappingProxyType(dict(errors or {})),
    }
    if callable(path):
        namespace["path"] = classmethod(lambda cls, input: path(input))
    else:
        namespace["path"] = classmethod(lambda cls, input: path)
    if query is not None:
        namespace["query"] = classmethod(lambda cls, input: query(input))
    if body is not None:
        namespace["body"] = classmethod(lambda cls, input: body(input))
    if output is None:
        namespace["parse_body"] = classmethod(_empty_body)
    else:
        namespace["parse"] = classmethod(lambda cls, data: output(data))
    return type(name, (Endpoint,), namespace)
