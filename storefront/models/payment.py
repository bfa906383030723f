"""
PaymentRecord model — the ledger of gateway orders.
order_id is the Razorpay order id; download_token is unique across the ledger.
"""
from datetime import datetime, timezone

from sqlalchemy import Column, DateTime, Integer, String

from storefront.db.base import Base


STATUS_CREATED = "created"
STATUS_PAID = "paid"


class PaymentRecord(Base):
    __tablename__ = "payments"

    order_id = Column(String, primary_key=True)
    status = Column(String, nullable=False, default=STATUS_CREATED)  # created / paid
    product_id = Column(String, nullable=False, index=True)
    product_title = Column(String, nullable=False)
    amount = Column(Integer, nullable=False)          # minor units (paise)
    currency = Column(String, nullable=False, default="INR")
    receipt = Column(String, nullable=True)
    buyer_name = Column(String, nullable=True)
    buyer_email = Column(String, nullable=True)
    created_at = Column(
        DateTime(timezone=True),
        nullable=False,
        default=lambda: datetime.now(timezone.utc),
    )

    # Filled on verification
    gateway_payment_id = Column(String, nullable=True)
    signature = Column(String, nullable=True)
    download_token = Column(String, nullable=True, unique=True, index=True)
    download_expires_at = Column(DateTime(timezone=True), nullable=True)
    paid_at = Column(DateTime(timezone=True), nullable=True)

    download_count = Column(Integer, nullable=False, default=0)
    downloaded_at = Column(DateTime(timezone=True), nullable=True)

    def to_dict(self) -> dict:
        return {
            "orderId": self.order_id,
            "status": self.status,
            "productId": self.product_id,
            "productTitle": self.product_title,
            "amount": self.amount,
            "currency": self.currency,
            "receipt": self.receipt,
            "buyerName": self.buyer_name,
            "buyerEmail": self.buyer_email,
            "createdAt": _iso(self.created_at),
            "paymentId": self.gateway_payment_id,
            "downloadExpiresAt": _iso(self.download_expires_at),
            "paidAt": _iso(self.paid_at),
            "downloadCount": self.download_count,
            "downloadedAt": _iso(self.downloaded_at),
        }


def _iso(value: datetime | None) -> str | None:
    return value.isoformat() if value else None
