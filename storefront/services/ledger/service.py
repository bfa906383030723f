"""
LedgerService — persisted mapping order_id -> PaymentRecord.

Each mutation is one transaction keyed by order_id. The created -> paid
transition is a conditional UPDATE, so concurrent verifications of the same
order cannot both mint a token.
"""
import logging
from datetime import datetime

from sqlalchemy.orm import Session

from storefront.models.payment import STATUS_CREATED, STATUS_PAID, PaymentRecord
from storefront.utils.clock import utcnow

logger = logging.getLogger(__name__)


class LedgerService:
    def __init__(self, db: Session):
        self.db = db

    def get(self, order_id: str) -> PaymentRecord | None:
        return self.db.query(PaymentRecord).filter(PaymentRecord.order_id == order_id).one_or_none()

    def put(self, order_id: str, record: PaymentRecord) -> PaymentRecord:
        """Insert or fully overwrite one entry."""
        record.order_id = order_id
        existing = self.get(order_id)
        if existing is not None and existing is not record:
            # Replace the row so no column of the old entry survives
            self.db.delete(existing)
            self.db.flush()
        self.db.add(record)
        self.db.commit()
        self.db.refresh(record)
        return record

    def find_by_token(self, token: str) -> PaymentRecord | None:
        if not token:
            return None
        return (
            self.db.query(PaymentRecord)
            .filter(PaymentRecord.download_token == token)
            .one_or_none()
        )

    def mark_paid(
        self,
        order_id: str,
        payment_id: str,
        signature: str,
        token: str,
        expires_at: datetime,
    ) -> bool:
        """
        Atomically move a created record to paid.
        Returns False if the record is missing or already paid.
        """
        updated = (
            self.db.query(PaymentRecord)
            .filter(
                PaymentRecord.order_id == order_id,
                PaymentRecord.status == STATUS_CREATED,
            )
            .update(
                {
                    PaymentRecord.status: STATUS_PAID,
                    PaymentRecord.gateway_payment_id: payment_id,
                    PaymentRecord.signature: signature,
                    PaymentRecord.download_token: token,
                    PaymentRecord.download_expires_at: expires_at,
                    PaymentRecord.paid_at: utcnow(),
                },
                synchronize_session=False,
            )
        )
        self.db.commit()
        if updated != 1:
            logger.warning("ledger_mark_paid_skipped", extra={"order_id": order_id})
            return False
        return True

    def record_download(self, order_id: str) -> None:
        self.db.query(PaymentRecord).filter(PaymentRecord.order_id == order_id).update(
            {
                PaymentRecord.download_count: PaymentRecord.download_count + 1,
                PaymentRecord.downloaded_at: utcnow(),
            },
            synchronize_session=False,
        )
        self.db.commit()

    def consume_token(self, order_id: str, token: str) -> bool:
        """Single-use invalidation. Returns False if the token was already consumed."""
        updated = (
            self.db.query(PaymentRecord)
            .filter(
                PaymentRecord.order_id == order_id,
                PaymentRecord.download_token == token,
            )
            .update(
                {
                    PaymentRecord.download_token: None,
                    PaymentRecord.download_count: PaymentRecord.download_count + 1,
                    PaymentRecord.downloaded_at: utcnow(),
                },
                synchronize_session=False,
            )
        )
        self.db.commit()
        return updated == 1

    def list_all(self) -> dict[str, PaymentRecord]:
        records = self.db.query(PaymentRecord).order_by(PaymentRecord.created_at.asc()).all()
        return {r.order_id: r for r in records}
