"""Tests for the endpoint contract: request building and result conversion."""

import json
from decimal import Decimal

import pytest

from apca import (
    ApiInfo,
    CreateOrder,
    Credentials,
    DeleteOrder,
    Endpoint,
    Err,
    GetAccount,
    GetAsset,
    GetBars,
    GetLatestQuote,
    GetOrder,
    GetOrderByClientId,
    GetPosition,
    InvalidInput,
    ListOrders,
    ListPositions,
    MalformedBody,
    NotFound,
    NotPermitted,
    Ok,
    Order,
    OrderReq,
    OrdersReq,
    OrderType,
    Side,
    UnexpectedStatus,
    define_endpoint,
    unwrap,
)
from apca.api.v2.orders import Status
from apca.data.v2 import BarsReq, TimeFrame

API_INFO = ApiInfo(
    api_base="https://paper-api.example.test/",
    data_base="https://data.example.test",
    credentials=Credentials(key_id=b"PKTESTKEY", secret=b"s3cr3t/+="),
)

ORDER_JSON = {
    "id": "904837e3-3b76-47ec-b432-046db621571b",
    "client_order_id": "904837e3-3b76-47ec-b432-046db621571b",
    "created_at": "2021-03-16T18:38:01.942282Z",
    "updated_at": "2021-03-16T18:38:01.942282Z",
    "submitted_at": "2021-03-16T18:38:01.937734Z",
    "filled_at": None,
    "canceled_at": None,
    "asset_id": "b0b6dd9d-8b9b-48a9-ba46-b9d54906e415",
    "symbol": "AAPL",
    "asset_class": "us_equity",
    "qty": "1",
    "filled_qty": "0",
    "filled_avg_price": None,
    "order_type": "limit",
    "type": "limit",
    "side": "buy",
    "time_in_force": "day",
    "limit_price": "107.00",
    "stop_price": None,
    "status": "accepted",
    "extended_hours": False,
}


def body(obj) -> bytes:
    return json.dumps(obj).encode()


# ---------------------------------------------------------------------------
# Request building
# ---------------------------------------------------------------------------

class TestRequest:

    def test_credential_headers_passed_through_unmodified(self):
        for endpoint, input in [
            (GetAccount, None),
            (GetOrder, "abc"),
            (ListOrders, OrdersReq(status=Status.ALL, limit=5)),
            (CreateOrder, OrderReq(symbol="AAPL", qty=Decimal("1"), side=Side.BUY)),
        ]:
            request = endpoint.request(API_INFO, input)
            assert request.headers["APCA-API-KEY-ID"] == "PKTESTKEY"
            assert request.headers["APCA-API-SECRET-KEY"] == "s3cr3t/+="

    def test_url_joins_base_and_path(self):
        request = GetAccount.request(API_INFO, None)
        assert request.method == "GET"
        assert str(request.url) == "https://paper-api.example.test/v2/account"

    def test_path_built_from_input(self):
        request = GetOrder.request(API_INFO, "904837e3")
        assert request.url.path == "/v2/orders/904837e3"

    def test_query_omits_unset_fields(self):
        request = ListOrders.request(API_INFO, OrdersReq(status=Status.CLOSED, limit=10))
        assert dict(request.url.params) == {"status": "closed", "limit": "10"}

    def test_query_default_input(self):
        request = ListOrders.request(API_INFO, None)
        assert dict(request.url.params) == {"status": "open"}

    def test_symbols_joined(self):
        request = ListOrders.request(API_INFO, OrdersReq(symbols=("AAPL", "SPY")))
        assert request.url.params["symbols"] == "AAPL,SPY"

    def test_client_order_id_query(self):
        request = GetOrderByClientId.request(API_INFO, "my-id")
        assert request.url.path == "/v2/orders:by_client_order_id"
        assert request.url.params["client_order_id"] == "my-id"

    def test_json_body_for_writes(self):
        req = OrderReq(
            symbol="AAPL",
            qty=Decimal("2"),
            side=Side.SELL,
            type=OrderType.LIMIT,
            limit_price=Decimal("150.25"),
        )
        request = CreateOrder.request(API_INFO, req)
        assert request.method == "POST"
        assert request.headers["content-type"] == "application/json"
        assert json.loads(request.content) == {
            "symbol": "AAPL",
            "qty": "2",
            "side": "sell",
            "type": "limit",
            "time_in_force": "day",
            "limit_price": "150.25",
        }

    def test_no_body_for_reads(self):
        request = GetOrder.request(API_INFO, "abc")
        assert request.content == b""
        assert "content-type" not in request.headers

    def test_data_endpoints_use_data_base(self):
        from datetime import datetime, timezone

        req = BarsReq(
            symbol="AAPL",
            start=datetime(2021, 2, 1, tzinfo=timezone.utc),
            end=datetime(2021, 2, 2, tzinfo=timezone.utc),
            timeframe=TimeFrame.HOUR,
        )
        request = GetBars.request(API_INFO, req)
        assert request.url.host == "data.example.test"
        assert request.url.path == "/v2/stocks/AAPL/bars"
        assert request.url.params["timeframe"] == "1Hour"
        assert "page_token" not in request.url.params

    @pytest.mark.parametrize("endpoint, input, host, path", [
        (GetAsset, "AAPL", "paper-api.example.test", "/v2/assets/AAPL"),
        (GetPosition, "AAPL", "paper-api.example.test", "/v2/positions/AAPL"),
        (ListPositions, None, "paper-api.example.test", "/v2/positions"),
        (GetLatestQuote, "AAPL", "data.example.test", "/v2/stocks/AAPL/quotes/latest"),
    ])
    def test_read_endpoint_routes(self, endpoint, input, host, path):
        request = endpoint.request(API_INFO, input)
        assert request.method == "GET"
        assert request.url.host == host
        assert request.url.path == path

    def test_request_is_deterministic(self):
        a = GetOrder.request(API_INFO, "abc")
        b = GetOrder.request(API_INFO, "abc")
        assert a.url == b.url
        assert a.headers == b.headers


# ---------------------------------------------------------------------------
# Result conversion
# ---------------------------------------------------------------------------

class TestConvert:

    def test_ok_status_parses_output(self):
        result = GetOrder.convert(200, body(ORDER_JSON))
        assert isinstance(result, Ok)
        assert result.value == Order.from_json(ORDER_JSON)
        assert result.value.limit_price == Decimal("107.00")

    def test_round_trip_of_domain_object(self):
        original = Order.from_json(ORDER_JSON)
        result = GetOrder.convert(200, body(ORDER_JSON))
        assert unwrap(result) == original

    def test_invalid_json_on_success_is_malformed(self):
        result = GetOrder.convert(200, b"{not json")
        assert isinstance(result, Err)
        assert isinstance(result.error, MalformedBody)
        assert result.error.status == 200
        assert result.error.body == b"{not json"

    def test_wrong_shape_on_success_is_malformed(self):
        result = GetOrder.convert(200, body({"id": "only-an-id"}))
        assert isinstance(result.error, MalformedBody)

    def test_bad_number_is_malformed(self):
        broken = dict(ORDER_JSON, filled_qty="many")
        result = GetOrder.convert(200, body(broken))
        assert isinstance(result.error, MalformedBody)

    def test_invalid_utf8_is_malformed(self):
        result = GetOrder.convert(200, b"\xff\xfe\x00")
        assert isinstance(result.error, MalformedBody)

    def test_undocumented_status_is_unexpected(self):
        result = GetAccount.convert(404, b"")
        assert isinstance(result, Err)
        assert isinstance(result.error, UnexpectedStatus)
        assert result.error.status == 404

    def test_unexpected_status_keeps_raw_body(self):
        result = GetAccount.convert(500, b"<html>oops</html>")
        assert result.error.body == b"<html>oops</html>"

    def test_undeclared_success_status_is_unexpected(self):
        result = GetOrder.convert(201, body(ORDER_JSON))
        assert isinstance(result.error, UnexpectedStatus)
        assert result.error.status == 201

    def test_documented_error_parsed(self):
        result = GetOrder.convert(404, body({"code": 40410000, "message": "order not found"}))
        assert isinstance(result.error, NotFound)
        assert result.error.message == "order not found"
        assert result.error.api_code == 40410000
        assert result.error.status == 404

    def test_each_documented_code_has_its_own_variant(self):
        forbidden = CreateOrder.convert(403, body({"code": 40310000, "message": "insufficient buying power"}))
        invalid = CreateOrder.convert(422, body({"message": "qty must be > 0"}))
        assert isinstance(forbidden.error, NotPermitted)
        assert isinstance(invalid.error, InvalidInput)
        assert invalid.error.api_code is None

    def test_documented_error_with_bad_body_is_malformed(self):
        result = GetOrder.convert(404, b"not found")
        assert isinstance(result.error, MalformedBody)
        assert result.error.status == 404

    def test_documented_error_with_non_string_message_is_malformed(self):
        result = GetOrder.convert(404, body({"message": 42}))
        assert isinstance(result.error, MalformedBody)

    def test_empty_success_body(self):
        assert DeleteOrder.convert(204, b"") == Ok(None)

    def test_list_output(self):
        result = ListOrders.convert(200, body([ORDER_JSON, ORDER_JSON]))
        assert len(unwrap(result)) == 2

    def test_list_output_rejects_object(self):
        result = ListOrders.convert(200, body(ORDER_JSON))
        assert isinstance(result.error, MalformedBody)

    @pytest.mark.parametrize("status", [100, 200, 204, 301, 400, 401, 403, 404, 422, 429, 500, 503, 599])
    @pytest.mark.parametrize("raw", [b"", b"null", b"[]", b"{}", b"\x00\x01", body(ORDER_JSON)])
    def test_conversion_is_total(self, status, raw):
        for endpoint in (GetAccount, GetOrder, CreateOrder, DeleteOrder, ListOrders):
            result = endpoint.convert(status, raw)
            assert isinstance(result, (Ok, Err))

    def test_deeply_nested_body_is_malformed(self):
        nested = b"[" * 100000 + b"]" * 100000
        for endpoint, status in [(GetAccount, 200), (ListOrders, 200), (GetOrder, 404), (CreateOrder, 422)]:
            result = endpoint.convert(status, nested)
            assert isinstance(result, Err)
            assert isinstance(result.error, MalformedBody)
            assert result.error.status == status

    def test_fractional_volume_is_malformed(self):
        bars = {"symbol": "AAPL", "bars": [{"t": "2021-02-01T16:01:00Z", "o": 1, "h": 1, "l": 1, "c": 1, "v": 1.5}]}
        result = GetBars.convert(200, body(bars))
        assert isinstance(result.error, MalformedBody)

    def test_conversion_is_deterministic(self):
        first = GetOrder.convert(404, body({"message": "gone"}))
        second = GetOrder.convert(404, body({"message": "gone"}))
        assert type(first.error) is type(second.error)
        assert first.error.message == second.error.message
        assert GetOrder.convert(200, body(ORDER_JSON)) == GetOrder.convert(200, body(ORDER_JSON))

    def test_unwrap_raises_error(self):
        with pytest.raises(UnexpectedStatus):
            unwrap(GetAccount.convert(418, b""))


# ---------------------------------------------------------------------------
# Declarations
# ---------------------------------------------------------------------------

class TestDefineEndpoint:

    def test_builds_endpoint_subclass(self):
        Ping = define_endpoint("Ping", path="/v1/ping", output=lambda data: data["pong"])
        assert issubclass(Ping, Endpoint)
        assert Ping.__name__ == "Ping"
        assert Ping.__module__ == __name__
        assert unwrap(Ping.convert(200, b'{"pong": true}')) is True

    def test_declared_errors_are_read_only(self):
        with pytest.raises(TypeError):
            GetOrder.errors[500] = NotFound  # type: ignore[index]

    def test_rejects_unknown_base(self):
        with pytest.raises(ValueError):
            define_endpoint("Broken", path="/", base="elsewhere")

    def test_subclassing_is_equivalent(self):
        class GetClock(Endpoint):
            @classmethod
            def path(cls, input):
                return "/v2/clock"

        request = GetClock.request(API_INFO, None)
        assert request.url.path == "/v2/clock"
        assert unwrap(GetClock.convert(200, b'{"is_open": false}')) == {"is_open": False}

    def test_missing_path_raises(self):
        with pytest.raises(NotImplementedError):
            Endpoint.request(API_INFO, None)
