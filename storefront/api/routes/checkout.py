"""
Checkout API: create a Razorpay order, verify the checkout callback.
Errors raised by the services are rendered as {"error": ...} by the handlers in storefront.main.
"""
from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from storefront.api.deps import get_gateway
from storefront.core.config import settings
from storefront.db.session import get_db
from storefront.schemas.checkout import CreateOrderIn, CreateOrderOut, VerifyPaymentIn, VerifyPaymentOut
from storefront.services.gateway.client import RazorpayClient
from storefront.services.orders.service import OrderService
from storefront.services.payments.service import PaymentService


router = APIRouter(prefix="/api", tags=["checkout"])


@router.post("/create-order", response_model=CreateOrderOut)
def create_order(
    body: CreateOrderIn,
    db: Session = Depends(get_db),
    gateway: RazorpayClient = Depends(get_gateway),
):
    service = OrderService(db, gateway)
    order = service.create_order(body.productId, body.buyerName, body.buyerEmail)
    return {"order": order, "keyId": settings.razorpay_key_id}


@router.post("/verify-payment", response_model=VerifyPaymentOut)
def verify_payment(
    body: VerifyPaymentIn,
    db: Session = Depends(get_db),
    gateway: RazorpayClient = Depends(get_gateway),
):
    service = PaymentService(db, gateway)
    return service.verify_payment(
        body.razorpay_order_id,
        body.razorpay_payment_id,
        body.razorpay_signature,
    )
