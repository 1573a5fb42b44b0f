"""Connection settings and shared value decoding for apca.

:class:`ApiInfo` bundles the two API base URLs with the account's
:class:`Credentials`. It is usually loaded from the environment::

    info = ApiInfo.from_env()
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from datetime import datetime
from decimal import Decimal
from typing import Any

from .errors import ConfigError

ENV_API_BASE_URL = "APCA_API_BASE_URL"
ENV_API_DATA_URL = "APCA_API_DATA_URL"
ENV_KEY_ID = "APCA_API_KEY_ID"
ENV_SECRET = "APCA_API_SECRET_KEY"

DEFAULT_API_BASE_URL = "https://paper-api.alpaca.markets"
DEFAULT_DATA_BASE_URL = "https://data.alpaca.markets"

# Everything a wire decoder may raise on input it does not understand.
# json.JSONDecodeError and UnicodeDecodeError are ValueErrors,
# decimal.InvalidOperation is an ArithmeticError, and deeply nested JSON
# raises RecursionError.
_DECODE_ERRORS = (
    ValueError,
    TypeError,
    KeyError,
    IndexError,
    AttributeError,
    ArithmeticError,
    RecursionError,
)


@dataclass(frozen=True, slots=True)
class Credentials:
    """The key pair authenticating every request.

    The secret is never part of ``repr``.
    """

    key_id: bytes
    secret: bytes

    def __repr__(self) -> str:
        return f"Credentials(key_id={self.key_id!r}, secret=<redacted>)"


@dataclass(frozen=True, slots=True)
class ApiInfo:
    """Where to reach the API and how to authenticate."""

    api_base: str
    credentials: Credentials
    data_base: str = DEFAULT_DATA_BASE_URL

    @classmethod
    def from_env(cls) -> ApiInfo:
        """Read the API settings from ``APCA_*`` environment variables.

        The base URLs fall back to the paper trading and market data
        defaults. A missing or empty key id or secret raises
        :class:`~apca.errors.ConfigError`.
        """
        api_base = os.environ.get(ENV_API_BASE_URL, "").strip() or DEFAULT_API_BASE_URL
        data_base = os.environ.get(ENV_API_DATA_URL, "").strip() or DEFAULT_DATA_BASE_URL
        key_id = _require_env(ENV_KEY_ID)
        secret = _require_env(ENV_SECRET)
        return cls(
            api_base=api_base,
            data_base=data_base,
            credentials=Credentials(key_id=key_id.encode(), secret=secret.encode()),
        )


def _require_env(name: str) -> str:
    value = os.environ.get(name, "")
    if not value:
        raise ConfigError(f"environment variable {name} is not set")
    return value


# ---------------------------------------------------------------------------
# Wire value decoding shared by the domain types
# ---------------------------------------------------------------------------

def _decimal(raw: Any) -> Decimal:
    # Alpaca sends amounts as strings; floats go through str to keep their
    # printed precision.
    if isinstance(raw, bool) or not isinstance(raw, (str, int, float)):
        raise TypeError(f"expected a number, got {type(raw).__name__}")
    value = Decimal(str(raw))
    if not value.is_finite():
        raise ValueError(f"expected a finite number, got {raw!r}")
    return value


def _int(raw: Any) -> int:
    if isinstance(raw, bool):
        raise TypeError("expected an integer, got bool")
    if isinstance(raw, int):
        return raw
    if isinstance(raw, float) and raw.is_integer():
        return int(raw)
    if isinstance(raw, float):
        raise ValueError(f"expected an integer, got {raw!r}")
    raise TypeError(f"expected an integer, got {type(raw).__name__}")


def _opt_decimal(raw: Any) -> Decimal | None:
    return None if raw is None else _decimal(raw)


def _timestamp(raw: Any) -> datetime:
    """Parse an RFC 3339 timestamp, truncating nanoseconds to microseconds."""
    if not isinstance(raw, str):
        raise TypeError(f"expected a timestamp string, got {type(raw).__name__}")
    value = raw.replace("Z", "+00:00") if raw.endswith("Z") else raw
    if "." in value:
        head, _, rest = value.partition(".")
        digits = len(rest) - len(rest.lstrip("0123456789"))
        value = f"{head}.{rest[:min(digits, 6)].ljust(6, '0')}{rest[digits:]}"
    parsed = datetime.fromisoformat(value)
    if parsed.tzinfo is None:
        raise ValueError(f"timestamp without timezone: {raw!r}")
    return parsed


def _opt_timestamp(raw: Any) -> datetime | None:
    return None if raw is None else _timestamp(raw)
