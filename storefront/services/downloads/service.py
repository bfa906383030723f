"""
DownloadService — resolves a download token to a file on disk.
Expired tokens stay in the ledger; single-use mode clears the token after the first download.
"""
import logging
import os
from dataclasses import dataclass
from datetime import datetime
from typing import Callable

from sqlalchemy.orm import Session

from storefront.core.config import settings
from storefront.core.errors import Expired, NotFound
from storefront.services.catalog.service import ProductService
from storefront.services.ledger.service import LedgerService
from storefront.utils.clock import as_utc, utcnow
from storefront.utils.metrics import downloads_total

logger = logging.getLogger(__name__)


@dataclass
class DownloadResult:
    path: str
    filename: str
    order_id: str


class DownloadService:
    def __init__(
        self,
        db: Session,
        downloads_dir: str | None = None,
        single_use: bool | None = None,
        clock: Callable[[], datetime] = utcnow,
    ):
        self.db = db
        self.downloads_dir = downloads_dir if downloads_dir is not None else settings.downloads_dir
        self.single_use = settings.download_single_use if single_use is None else single_use
        self.clock = clock
        self.ledger = LedgerService(db)
        self.products = ProductService(db)

    def resolve_download(self, token: str) -> DownloadResult:
        record = self.ledger.find_by_token(token)
        if record is None:
            downloads_total.labels(outcome="not_found").inc()
            raise NotFound("Invalid or expired download link.")

        if record.download_expires_at is None or self.clock() >= as_utc(record.download_expires_at):
            downloads_total.labels(outcome="expired").inc()
            logger.info("download_expired", extra={"order_id": record.order_id})
            raise Expired("Download link has expired.")

        product = self.products.get(record.product_id)
        if product is None:
            downloads_total.labels(outcome="not_found").inc()
            logger.warning("download_product_missing", extra={"order_id": record.order_id, "product_id": record.product_id})
            raise NotFound("Product not found")

        path = self._resolve_path(product.filename)
        if path is None:
            downloads_total.labels(outcome="not_found").inc()
            logger.error("download_file_missing", extra={"order_id": record.order_id, "product_id": product.id})
            raise NotFound("File not found on server")

        if self.single_use:
            if not self.ledger.consume_token(record.order_id, token):
                # Another request consumed it first
                downloads_total.labels(outcome="not_found").inc()
                raise NotFound("Invalid or expired download link.")
        else:
            self.ledger.record_download(record.order_id)

        downloads_total.labels(outcome="served").inc()
        logger.info("download_served", extra={"order_id": record.order_id, "product_id": product.id})
        return DownloadResult(
            path=path,
            filename=os.path.basename(product.filename),
            order_id=record.order_id,
        )

    def _resolve_path(self, filename: str) -> str | None:
        """Absolute path under downloads_dir, or None if missing or outside it."""
        base = os.path.realpath(self.downloads_dir)
        path = os.path.realpath(os.path.join(base, filename))
        if os.path.commonpath([base, path]) != base:
            return None
        if not os.path.isfile(path):
            return None
        return path
