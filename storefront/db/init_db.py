"""
Schema creation and catalog seeding, run once at application startup.
"""
import logging

from sqlalchemy.engine import Engine
from sqlalchemy.orm import sessionmaker

from storefront.db.base import Base
from storefront.models import payment, product  # noqa: F401  (register tables)
from storefront.services.catalog.service import ProductService

logger = logging.getLogger(__name__)


def init_db(engine: Engine, seed_file: str | None = None) -> None:
    Base.metadata.create_all(bind=engine)
    db = sessionmaker(bind=engine, autocommit=False, autoflush=False)()
    try:
        ProductService(db).seed_default_products(seed_file)
    finally:
        db.close()
