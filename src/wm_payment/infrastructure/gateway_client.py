"""Toss Payments confirmation client.

POST {base}/v1/payments/confirm  {paymentKey, orderId, amount}
Authorization: Basic base64("{secret_key}:")

Non-2xx responses carry {code, message}; both are surfaced verbatim through
PaymentGatewayError. Transport failures map to code NETWORK_ERROR. Retrying
is safe: the confirmation service short-circuits on payment_key.
"""

import base64
import logging
from dataclasses import dataclass
from typing import Any

import httpx

from config.settings import settings
from src.wm_common.errors import ConfigurationError, PaymentGatewayError

logger = logging.getLogger(__name__)

CONFIRM_PATH = "/v1/payments/confirm"


@dataclass(frozen=True)
class GatewayConfirmation:
    payment_key: str
    order_id: str
    status: str
    method: str
    total_amount: int
    approved_at: str | None


def basic_auth_header(secret_key: str) -> str:
    token = base64.b64encode(f"{secret_key}:".encode()).decode()
    return f"Basic {token}"


class TossPaymentsClient:
    def __init__(
        self,
        secret_key: str | None = None,
        base_url: str | None = None,
        timeout: float | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self._secret_key = settings.TOSS_SECRET_KEY if secret_key is None else secret_key
        self._base_url = (base_url or settings.TOSS_API_BASE_URL).rstrip("/")
        self._timeout = timeout or settings.PAYMENT_GATEWAY_TIMEOUT_SECONDS
        self._transport = transport

    async def confirm(self, payment_key: str, order_id: str, amount: int) -> GatewayConfirmation:
        if not self._secret_key:
            raise ConfigurationError("TOSS_SECRET_KEY is not configured")

        headers = {
            "Authorization": basic_auth_header(self._secret_key),
            "Content-Type": "application/json",
        }
        body = {"paymentKey": payment_key, "orderId": order_id, "amount": amount}

        try:
            async with httpx.AsyncClient(
                base_url=self._base_url, timeout=self._timeout, transport=self._transport
            ) as client:
                response = await client.post(CONFIRM_PATH, json=body, headers=headers)
        except httpx.HTTPError as exc:
            logger.error("Payment gateway unreachable: order=%s: %s", order_id, exc)
            raise PaymentGatewayError("NETWORK_ERROR", f"Payment gateway unreachable: {exc}") from exc

        payload = _json_or_empty(response)
        if response.is_error:
            code = str(payload.get("code") or f"HTTP_{response.status_code}")
            message = str(payload.get("message") or "Payment confirmation failed")
            logger.error(
                "Payment confirmation rejected: order=%s status=%d code=%s message=%s",
                order_id,
                response.status_code,
                code,
                message,
            )
            raise PaymentGatewayError(code, message, response.status_code)

        return GatewayConfirmation(
            payment_key=payload.get("paymentKey") or payment_key,
            order_id=payload.get("orderId") or order_id,
            status=payload.get("status") or "DONE",
            method=payload.get("method") or "card",
            total_amount=int(payload.get("totalAmount") or amount),
            approved_at=payload.get("approvedAt"),
        )


def _json_or_empty(response: httpx.Response) -> dict[str, Any]:
    try:
        data = response.json()
    except ValueError:
        return {}
    return data if isinstance(data, dict) else {}
