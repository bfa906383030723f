"""
PaymentService — verification of Razorpay checkout callbacks.

Responsibilities:
- Check the callback signature (HMAC-SHA256 over "order_id|payment_id")
- Move the ledger entry created -> paid exactly once
- Mint the download token and build the download URL
"""
import logging
import secrets
from datetime import datetime, timedelta
from typing import Any, Callable

from sqlalchemy.orm import Session

from storefront.core.config import settings
from storefront.core.errors import InvalidRequest, NotFound, SignatureInvalid
from storefront.models.payment import STATUS_PAID, PaymentRecord
from storefront.services.catalog.service import ProductService
from storefront.services.gateway.client import RazorpayClient
from storefront.services.ledger.service import LedgerService
from storefront.utils.clock import utcnow
from storefront.utils.metrics import payments_verified_total, signature_failures_total

logger = logging.getLogger(__name__)

TOKEN_BYTES = 32  # token_urlsafe(32) -> 43 characters


def mint_download_token() -> str:
    return secrets.token_urlsafe(TOKEN_BYTES)


def build_download_url(token: str) -> str:
    return f"{settings.public_base_url}/download/{token}"


class PaymentService:
    def __init__(
        self,
        db: Session,
        gateway: RazorpayClient,
        clock: Callable[[], datetime] = utcnow,
    ):
        self.db = db
        self.gateway = gateway
        self.clock = clock
        self.ledger = LedgerService(db)
        self.products = ProductService(db)

    def verify_payment(
        self,
        order_id: str | None,
        payment_id: str | None,
        signature: str | None,
    ) -> dict[str, Any]:
        if not order_id or not payment_id or not signature:
            raise InvalidRequest("Missing parameters")

        if not self.gateway.verify_signature(order_id, payment_id, signature):
            signature_failures_total.inc()
            logger.warning("signature_mismatch", extra={"order_id": order_id, "payment_id": payment_id})
            raise SignatureInvalid("Invalid signature")

        record = self.ledger.get(order_id)
        if record is None:
            raise NotFound("Order not found on server")

        if record.status == STATUS_PAID:
            return self._replay(record, payment_id)

        token = mint_download_token()
        expires_at = self.clock() + timedelta(minutes=settings.download_token_ttl_min)
        if not self.ledger.mark_paid(order_id, payment_id, signature, token, expires_at):
            # A concurrent request won the created -> paid transition
            self.db.expire_all()
            record = self.ledger.get(order_id)
            return self._replay(record, payment_id)

        payments_verified_total.labels(product_id=record.product_id).inc()
        logger.info(
            "payment_verified",
            extra={"order_id": order_id, "payment_id": payment_id, "product_id": record.product_id},
        )
        return self._response(record, token)

    def _replay(self, record: PaymentRecord, payment_id: str) -> dict[str, Any]:
        """Same verified callback sent twice: hand back the link minted the first time."""
        if record.gateway_payment_id != payment_id:
            logger.warning(
                "payment_already_paid",
                extra={"order_id": record.order_id, "payment_id": payment_id},
            )
            raise InvalidRequest("Order already paid")
        if not record.download_token:
            raise InvalidRequest("Download link already used")
        logger.info("payment_verify_replayed", extra={"order_id": record.order_id})
        return self._response(record, record.download_token)

    def _response(self, record: PaymentRecord, token: str) -> dict[str, Any]:
        product = self.products.get(record.product_id)
        return {
            "success": True,
            "message": "Payment verified",
            "downloadUrl": build_download_url(token),
            "product": {
                "id": record.product_id,
                "title": product.title if product else record.product_title,
            },
        }
