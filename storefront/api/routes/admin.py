"""
Admin API: read-only view of the payment ledger.
All routes require the X-Admin-Key header (see storefront.api.deps.require_admin).
"""
from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from storefront.api.deps import require_admin
from storefront.db.session import get_db
from storefront.services.ledger.service import LedgerService


router = APIRouter(prefix="/admin", tags=["admin"], dependencies=[Depends(require_admin)])


@router.get("/payments")
def list_payments(db: Session = Depends(get_db)) -> dict:
    ledger = LedgerService(db)
    return {order_id: record.to_dict() for order_id, record in ledger.list_all().items()}
