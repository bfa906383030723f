"""
Razorpay Orders API client.
Creates gateway orders over HTTPS and checks checkout callback signatures.
"""
import hashlib
import hmac
import logging
import time
from typing import Any

import httpx
import pybreaker

from storefront.core.config import settings
from storefront.services.circuit_breaker import gateway_breaker
from storefront.utils.metrics import gateway_request_duration_seconds, gateway_requests_total

logger = logging.getLogger(__name__)


class GatewayError(Exception):
    """Raised when the gateway call fails; status_code is None for transport errors."""

    def __init__(self, message: str, status_code: int | None = None, detail: dict[str, Any] | None = None):
        super().__init__(message)
        self.status_code = status_code
        self.detail = detail or {}


class RazorpayClient:
    """Thin client for POST /orders plus signature helpers."""

    def __init__(
        self,
        key_id: str,
        key_secret: str,
        api_url: str = "https://api.razorpay.com/v1",
        timeout: float = 10.0,
        transport: httpx.BaseTransport | None = None,
        breaker: pybreaker.CircuitBreaker | None = None,
    ) -> None:
        self.key_id = key_id
        self.key_secret = key_secret
        self.api_url = api_url.rstrip("/")
        self.timeout = timeout
        self.transport = transport
        self.breaker = breaker

    def is_available(self) -> bool:
        """Check if Razorpay credentials are configured."""
        return bool(self.key_id and self.key_secret)

    def create_order(
        self,
        amount: int,
        currency: str,
        receipt: str,
        notes: dict[str, str] | None = None,
    ) -> dict[str, Any]:
        """
        Create a gateway order. amount is in minor units.
        Returns the order object exactly as the gateway sent it.
        """
        if not self.is_available():
            raise GatewayError("Razorpay credentials are not configured")

        payload: dict[str, Any] = {
            "amount": amount,
            "currency": currency,
            "receipt": receipt,
            "payment_capture": 1,  # auto-capture
        }
        if notes:
            payload["notes"] = notes

        if self.breaker is None:
            return self._post_order(payload)
        try:
            return self.breaker.call(self._post_order, payload)
        except pybreaker.CircuitBreakerError as e:
            raise GatewayError(f"Payment gateway temporarily unavailable: {e}") from e

    def _post_order(self, payload: dict[str, Any]) -> dict[str, Any]:
        started = time.monotonic()
        try:
            with httpx.Client(timeout=self.timeout, transport=self.transport) as client:
                response = client.post(
                    f"{self.api_url}/orders",
                    auth=(self.key_id, self.key_secret),
                    json=payload,
                )
        except httpx.HTTPError as e:
            gateway_requests_total.labels(status="transport_error").inc()
            raise GatewayError(f"Razorpay request failed: {type(e).__name__}") from e
        finally:
            gateway_request_duration_seconds.observe(time.monotonic() - started)

        gateway_requests_total.labels(status=str(response.status_code)).inc()
        if response.status_code >= 400:
            raise GatewayError(
                f"Razorpay returned HTTP {response.status_code}",
                status_code=response.status_code,
                detail=_error_detail(response),
            )
        order = response.json()
        if not isinstance(order, dict) or not order.get("id"):
            raise GatewayError("Razorpay response has no order id", status_code=response.status_code)
        return order

    def compute_signature(self, order_id: str, payment_id: str) -> str:
        """Hex HMAC-SHA256 of "order_id|payment_id" keyed with the key secret."""
        message = f"{order_id}|{payment_id}".encode("utf-8")
        return hmac.new(self.key_secret.encode("utf-8"), message, hashlib.sha256).hexdigest()

    def verify_signature(self, order_id: str, payment_id: str, signature: str) -> bool:
        if not self.key_secret:
            # Signatures are never accepted under an empty key
            logger.error("signature_check_without_secret", extra={"order_id": order_id})
            return False
        expected = self.compute_signature(order_id, payment_id)
        return hmac.compare_digest(expected.encode("utf-8"), signature.encode("utf-8"))


def _error_detail(response: httpx.Response) -> dict[str, Any]:
    """Razorpay wraps errors as {"error": {"code", "description", ...}}."""
    try:
        body = response.json()
    except ValueError:
        return {}
    error = body.get("error") if isinstance(body, dict) else None
    if not isinstance(error, dict):
        return {}
    return {k: error[k] for k in ("code", "description", "reason") if k in error}


def get_gateway_client() -> RazorpayClient:
    return RazorpayClient(
        key_id=settings.razorpay_key_id,
        key_secret=settings.razorpay_key_secret,
        api_url=settings.razorpay_api_url,
        timeout=settings.http_client_timeout,
        breaker=gateway_breaker,
    )
