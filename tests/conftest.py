"""
Shared fixtures: in-memory SQLite ledger, seeded catalog, Razorpay client on httpx.MockTransport.
Environment is set before storefront.core.config is imported.
"""
import os

os.environ["DATABASE_URL"] = "sqlite:///:memory:"
os.environ["RAZORPAY_KEY_ID"] = "rzp_test_key"
os.environ["RAZORPAY_KEY_SECRET"] = "s3cr3t"
os.environ["BASE_URL"] = "http://shop.test"
os.environ["ADMIN_API_KEY"] = "admin-test-key"
os.environ["STATIC_DIR"] = "__no_static__"
os.environ["DOWNLOAD_TOKEN_TTL_MIN"] = "60"
os.environ["DOWNLOAD_SINGLE_USE"] = "false"
os.environ["CURRENCY"] = "INR"

import json

import httpx
import pytest
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from storefront.db.base import Base
from storefront.models import payment, product  # noqa: F401
from storefront.services.catalog.service import ProductService
from storefront.services.gateway.client import RazorpayClient


@pytest.fixture
def engine():
    eng = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(bind=eng)
    yield eng
    eng.dispose()


@pytest.fixture
def session_factory(engine):
    factory = sessionmaker(bind=engine, autocommit=False, autoflush=False)
    db = factory()
    ProductService(db).seed_default_products()
    db.close()
    return factory


@pytest.fixture
def db(session_factory):
    session = session_factory()
    yield session
    session.close()


class GatewayStub:
    """Records requests to the Razorpay API and answers with canned responses."""

    def __init__(self) -> None:
        self.requests: list[httpx.Request] = []
        self.status_code = 200
        self.counter = 0

    def handler(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        if self.status_code >= 400:
            return httpx.Response(
                self.status_code,
                json={"error": {"code": "BAD_REQUEST_ERROR", "description": "failure"}},
            )
        self.counter += 1
        data = json.loads(request.content)
        return httpx.Response(
            200,
            json={
                "id": f"order_test{self.counter}",
                "entity": "order",
                "amount": data["amount"],
                "currency": data["currency"],
                "receipt": data["receipt"],
                "status": "created",
            },
        )


@pytest.fixture
def gateway_stub():
    return GatewayStub()


@pytest.fixture
def gateway(gateway_stub):
    return RazorpayClient(
        key_id="rzp_test_key",
        key_secret="s3cr3t",
        api_url="https://api.razorpay.test/v1",
        transport=httpx.MockTransport(gateway_stub.handler),
    )
