"""
ProductService — read-only product catalog.

The catalog is seeded once at startup (from products_seed_file or the built-in
defaults) and never mutated by the checkout flow.
"""
import json
import logging
from pathlib import Path

from sqlalchemy.orm import Session

from storefront.models.product import Product

logger = logging.getLogger(__name__)


DEFAULT_PRODUCTS = [
    {
        "id": "prod-ebook-1",
        "title": "Mastering Productivity (eBook)",
        "description": "100 pages of productivity hacks and templates.",
        "price": 199,
        "filename": "mastering-productivity.pdf",
        "thumbnail": "/assets/ebook-thumb.png",
    },
    {
        "id": "prod-templates-1",
        "title": "UI Kit & Templates",
        "description": "Collection of 20 modern UI templates (Figma).",
        "price": 499,
        "filename": "ui-kit-templates.zip",
        "thumbnail": "/assets/templates-thumb.png",
    },
]


class ProductService:
    def __init__(self, db: Session):
        self.db = db

    def list_products(self) -> list[Product]:
        return self.db.query(Product).order_by(Product.order_index.asc(), Product.id.asc()).all()

    def get(self, product_id: str) -> Product | None:
        return self.db.query(Product).filter(Product.id == product_id).one_or_none()

    def seed_default_products(self, seed_file: str | None = None) -> int:
        """Seed an empty catalog. Returns the number of products added (0 if already seeded)."""
        if self.db.query(Product).count() > 0:
            return 0
        items = load_seed_file(seed_file) if seed_file else DEFAULT_PRODUCTS
        for index, item in enumerate(items):
            self.db.add(_product_from_dict(item, index))
        self.db.commit()
        logger.info("products_seeded", extra={"count": len(items)})
        return len(items)


def load_seed_file(path: str) -> list[dict]:
    data = json.loads(Path(path).read_text(encoding="utf-8"))
    if not isinstance(data, list):
        raise ValueError(f"Product seed file must contain a JSON array: {path}")
    return data


def _product_from_dict(item: dict, index: int) -> Product:
    # priceINR is the key used by legacy products.json files
    price = item.get("price", item.get("priceINR"))
    if not item.get("id") or price is None or not item.get("filename"):
        raise ValueError(f"Product seed entry needs id, price and filename: {item!r}")
    return Product(
        id=item["id"],
        title=item.get("title", item["id"]),
        description=item.get("description", ""),
        price=int(price),
        filename=item["filename"],
        thumbnail=item.get("thumbnail", ""),
        order_index=item.get("order_index", index),
    )
