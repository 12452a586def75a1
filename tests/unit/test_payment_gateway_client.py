"""Unit tests for TossPaymentsClient using httpx.MockTransport."""

import base64
import json

import httpx
import pytest

from src.wm_common.errors import ConfigurationError, PaymentGatewayError
from src.wm_payment.infrastructure.gateway_client import TossPaymentsClient, basic_auth_header


def _client(handler) -> TossPaymentsClient:  # type: ignore[no-untyped-def]
    return TossPaymentsClient(
        secret_key="test_sk_123",
        base_url="https://gateway.test",
        timeout=5.0,
        transport=httpx.MockTransport(handler),
    )


def test_basic_auth_header_has_trailing_colon() -> None:
    header = basic_auth_header("test_sk_123")
    assert header.startswith("Basic ")
    assert base64.b64decode(header[6:]).decode() == "test_sk_123:"


async def test_confirm_success() -> None:
    seen: dict[str, object] = {}

    def handler(request: httpx.Request) -> httpx.Response:
        seen["url"] = str(request.url)
        seen["auth"] = request.headers["authorization"]
        seen["body"] = json.loads(request.content)
        return httpx.Response(
            200,
            json={
                "paymentKey": "pk_1",
                "orderId": "ORD-20261016-101500-ABC",
                "status": "DONE",
                "method": "카드",
                "totalAmount": 64000,
                "approvedAt": "2026-10-16T10:15:30+09:00",
            },
        )

    result = await _client(handler).confirm("pk_1", "ORD-20261016-101500-ABC", 64000)

    assert seen["url"] == "https://gateway.test/v1/payments/confirm"
    assert seen["auth"] == basic_auth_header("test_sk_123")
    assert seen["body"] == {
        "paymentKey": "pk_1",
        "orderId": "ORD-20261016-101500-ABC",
        "amount": 64000,
    }
    assert result.status == "DONE"
    assert result.method == "카드"
    assert result.total_amount == 64000
    assert result.approved_at == "2026-10-16T10:15:30+09:00"


async def test_missing_fields_fall_back_to_request() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(200, json={})

    result = await _client(handler).confirm("pk_2", "ORD-X", 1000)

    assert result.payment_key == "pk_2"
    assert result.order_id == "ORD-X"
    assert result.total_amount == 1000
    assert result.approved_at is None


async def test_gateway_rejection_is_verbatim() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(
            400,
            json={"code": "ALREADY_PROCESSED_PAYMENT", "message": "이미 처리된 결제 입니다."},
        )

    with pytest.raises(PaymentGatewayError) as exc_info:
        await _client(handler).confirm("pk_1", "ORD-X", 1000)

    assert exc_info.value.gateway_code == "ALREADY_PROCESSED_PAYMENT"
    assert exc_info.value.gateway_message == "이미 처리된 결제 입니다."
    assert exc_info.value.gateway_status == 400


async def test_non_json_error_body() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(502, text="<html>bad gateway</html>")

    with pytest.raises(PaymentGatewayError) as exc_info:
        await _client(handler).confirm("pk_1", "ORD-X", 1000)
    assert exc_info.value.gateway_code == "HTTP_502"


async def test_transport_failure_is_network_error() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectTimeout("timed out", request=request)

    with pytest.raises(PaymentGatewayError) as exc_info:
        await _client(handler).confirm("pk_1", "ORD-X", 1000)
    assert exc_info.value.gateway_code == "NETWORK_ERROR"


async def test_empty_secret_fails_before_network() -> None:
    calls: list[httpx.Request] = []

    def handler(request: httpx.Request) -> httpx.Response:
        calls.append(request)
        return httpx.Response(200, json={})

    client = TossPaymentsClient(
        secret_key="", base_url="https://gateway.test", transport=httpx.MockTransport(handler)
    )
    with pytest.raises(ConfigurationError):
        await client.confirm("pk_1", "ORD-X", 1000)
    assert calls == []
