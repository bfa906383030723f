from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from storefront.db.session import get_db
from storefront.schemas.products import ProductOut
from storefront.services.catalog.service import ProductService


router = APIRouter(prefix="/api", tags=["products"])


@router.get("/products", response_model=list[ProductOut])
def list_products(db: Session = Depends(get_db)) -> list[ProductOut]:
    service = ProductService(db)
    return [ProductOut.model_validate(p) for p in service.list_products()]
