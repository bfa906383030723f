from fastapi import APIRouter, Depends
from fastapi.responses import FileResponse, PlainTextResponse
from sqlalchemy.orm import Session

from storefront.core.errors import CheckoutError
from storefront.db.session import get_db
from storefront.services.downloads.service import DownloadService


router = APIRouter(tags=["downloads"])


@router.get("/download/{token}")
def download(token: str, db: Session = Depends(get_db)):
    """Stream the purchased file; 404/410 are answered in plain text."""
    service = DownloadService(db)
    try:
        result = service.resolve_download(token)
    except CheckoutError as e:
        return PlainTextResponse(e.message, status_code=e.status_code)
    return FileResponse(
        result.path,
        filename=result.filename,
        media_type="application/octet-stream",
    )
