"""Tests for RazorpayClient — order creation over httpx, signatures, circuit breaker."""
import base64
import hashlib
import hmac
import json

import httpx
import pybreaker
import pytest

from storefront.services.gateway.client import GatewayError, RazorpayClient


class TestCreateOrder:
    def test_posts_order_with_basic_auth(self, gateway, gateway_stub):
        order = gateway.create_order(amount=19900, currency="INR", receipt="rcpt_1")

        assert order["id"] == "order_test1"
        assert order["amount"] == 19900
        request = gateway_stub.requests[0]
        assert request.url == "https://api.razorpay.test/v1/orders"
        expected_auth = base64.b64encode(b"rzp_test_key:s3cr3t").decode()
        assert request.headers["Authorization"] == f"Basic {expected_auth}"
        payload = json.loads(request.content)
        assert payload == {
            "amount": 19900,
            "currency": "INR",
            "receipt": "rcpt_1",
            "payment_capture": 1,
        }

    def test_notes_forwarded(self, gateway, gateway_stub):
        gateway.create_order(amount=100, currency="INR", receipt="r", notes={"product_id": "p"})
        assert json.loads(gateway_stub.requests[0].content)["notes"] == {"product_id": "p"}

    def test_order_returned_verbatim(self):
        body = {"id": "order_X", "entity": "order", "amount": 500, "extra": {"nested": True}}
        client = RazorpayClient(
            "key", "secret",
            transport=httpx.MockTransport(lambda r: httpx.Response(200, json=body)),
        )
        assert client.create_order(500, "INR", "r") == body

    def test_http_error_raises_gateway_error(self, gateway, gateway_stub):
        gateway_stub.status_code = 401
        with pytest.raises(GatewayError) as exc_info:
            gateway.create_order(amount=100, currency="INR", receipt="r")
        assert exc_info.value.status_code == 401
        assert exc_info.value.detail["code"] == "BAD_REQUEST_ERROR"

    def test_transport_error_raises_gateway_error(self):
        def fail(request):
            raise httpx.ConnectError("connection refused", request=request)

        client = RazorpayClient("key", "secret", transport=httpx.MockTransport(fail))
        with pytest.raises(GatewayError) as exc_info:
            client.create_order(100, "INR", "r")
        assert exc_info.value.status_code is None

    def test_response_without_id_rejected(self):
        client = RazorpayClient(
            "key", "secret",
            transport=httpx.MockTransport(lambda r: httpx.Response(200, json={"entity": "order"})),
        )
        with pytest.raises(GatewayError):
            client.create_order(100, "INR", "r")

    def test_missing_credentials(self, gateway_stub):
        client = RazorpayClient("", "", transport=httpx.MockTransport(gateway_stub.handler))
        assert client.is_available() is False
        with pytest.raises(GatewayError):
            client.create_order(100, "INR", "r")
        assert gateway_stub.requests == []


class TestCircuitBreaker:
    def test_open_breaker_short_circuits(self, gateway_stub):
        gateway_stub.status_code = 500
        breaker = pybreaker.CircuitBreaker(fail_max=2, reset_timeout=60)
        client = RazorpayClient(
            "key", "secret",
            transport=httpx.MockTransport(gateway_stub.handler),
            breaker=breaker,
        )

        for _ in range(3):
            with pytest.raises(GatewayError):
                client.create_order(100, "INR", "r")

        assert breaker.current_state == pybreaker.STATE_OPEN
        assert len(gateway_stub.requests) == 2


class TestSignature:
    def test_known_vector(self):
        client = RazorpayClient("key", "s3cr3t")
        expected = hmac.new(b"s3cr3t", b"order_abc|pay_xyz", hashlib.sha256).hexdigest()

        assert client.compute_signature("order_abc", "pay_xyz") == expected
        assert client.verify_signature("order_abc", "pay_xyz", expected) is True

    @pytest.mark.parametrize("signature", ["", "deadbeef", "order_abc|pay_xyz", "ü"])
    def test_other_strings_rejected(self, signature):
        client = RazorpayClient("key", "s3cr3t")
        assert client.verify_signature("order_abc", "pay_xyz", signature) is False

    def test_signature_bound_to_payment(self):
        client = RazorpayClient("key", "s3cr3t")
        signature = client.compute_signature("order_abc", "pay_xyz")
        assert client.verify_signature("order_abc", "pay_other", signature) is False

    def test_signature_bound_to_secret(self):
        signature = RazorpayClient("key", "other").compute_signature("order_abc", "pay_xyz")
        assert RazorpayClient("key", "s3cr3t").verify_signature("order_abc", "pay_xyz", signature) is False

    def test_empty_secret_rejects_everything(self):
        client = RazorpayClient("key", "")
        signature = hmac.new(b"", b"order_abc|pay_xyz", hashlib.sha256).hexdigest()
        assert client.verify_signature("order_abc", "pay_xyz", signature) is False
