"""
Product model — digital goods sold through the storefront.
Seeded once at startup, read-only afterwards.
"""
from sqlalchemy import Column, Integer, String

from storefront.db.base import Base


class Product(Base):
    __tablename__ = "products"

    id = Column(String, primary_key=True)
    title = Column(String, nullable=False)
    description = Column(String, nullable=False, default="")
    price = Column(Integer, nullable=False)          # major units; gateway charge is price * 100
    filename = Column(String, nullable=False)        # relative to settings.downloads_dir
    thumbnail = Column(String, nullable=False, default="")
    order_index = Column(Integer, nullable=False, default=0)
