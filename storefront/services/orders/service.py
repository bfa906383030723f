"""
OrderService — creates a gateway order for a product and records it as pending.

Responsibilities:
- Validate the request and resolve the product
- Convert the catalog price to gateway minor units (price * 100)
- Create the Razorpay order; on success write a `created` ledger entry
"""
import logging
import secrets
import time
from typing import Any

from sqlalchemy.orm import Session

from storefront.core.config import settings
from storefront.core.errors import InvalidRequest, NotFound, UpstreamError
from storefront.models.payment import STATUS_CREATED, PaymentRecord
from storefront.services.catalog.service import ProductService
from storefront.services.gateway.client import GatewayError, RazorpayClient
from storefront.services.ledger.service import LedgerService
from storefront.utils.currency import to_minor_units
from storefront.utils.metrics import orders_created_total, orders_failed_total

logger = logging.getLogger(__name__)

RECEIPT_MAX_LENGTH = 40  # Razorpay limit


def build_receipt(product_id: str, now_ms: int | None = None) -> str:
    """
    rcpt_{product}_{epoch_ms}_{random}. The random suffix keeps receipts unique
    for orders created in the same millisecond; it survives truncation.
    """
    if now_ms is None:
        now_ms = int(time.time() * 1000)
    suffix = f"_{now_ms}_{secrets.token_hex(4)}"
    prefix = f"rcpt_{product_id}"[: RECEIPT_MAX_LENGTH - len(suffix)]
    return f"{prefix}{suffix}"


class OrderService:
    def __init__(self, db: Session, gateway: RazorpayClient):
        self.db = db
        self.gateway = gateway
        self.products = ProductService(db)
        self.ledger = LedgerService(db)

    def create_order(
        self,
        product_id: str | None,
        buyer_name: str | None = None,
        buyer_email: str | None = None,
    ) -> dict[str, Any]:
        if not product_id or not product_id.strip():
            raise InvalidRequest("Missing productId")

        product = self.products.get(product_id)
        if product is None:
            raise NotFound("Product not found")

        amount = to_minor_units(product.price)
        receipt = build_receipt(product.id)
        try:
            order = self.gateway.create_order(
                amount=amount,
                currency=settings.currency,
                receipt=receipt,
                notes={"product_id": product.id},
            )
        except GatewayError as e:
            orders_failed_total.labels(reason="gateway").inc()
            logger.error(
                "order_create_failed",
                extra={
                    "product_id": product.id,
                    "receipt": receipt,
                    "status_code": e.status_code,
                    "error": str(e),
                },
            )
            raise UpstreamError("Failed to create order") from e

        self.ledger.put(
            order["id"],
            PaymentRecord(
                status=STATUS_CREATED,
                product_id=product.id,
                product_title=product.title,
                amount=amount,
                currency=settings.currency,
                receipt=receipt,
                buyer_name=buyer_name or None,
                buyer_email=buyer_email or None,
            ),
        )
        orders_created_total.labels(product_id=product.id).inc()
        logger.info(
            "order_created",
            extra={"order_id": order["id"], "product_id": product.id, "amount": amount, "receipt": receipt},
        )
        return order
