"""
Request/response bodies for /api/create-order and /api/verify-payment.
Required fields are optional here: missing values are reported by the services as InvalidRequest (400).
"""
from typing import Any

from pydantic import BaseModel, ConfigDict


class CreateOrderIn(BaseModel):
    model_config = ConfigDict(extra="ignore")

    productId: str | None = None
    buyerName: str | None = None
    buyerEmail: str | None = None


class CreateOrderOut(BaseModel):
    order: dict[str, Any]
    keyId: str  # public key id for the checkout widget (never the secret)


class VerifyPaymentIn(BaseModel):
    model_config = ConfigDict(extra="ignore")

    razorpay_order_id: str | None = None
    razorpay_payment_id: str | None = None
    razorpay_signature: str | None = None


class ProductRef(BaseModel):
    id: str
    title: str


class VerifyPaymentOut(BaseModel):
    success: bool
    message: str
    downloadUrl: str
    product: ProductRef
