import hmac

from fastapi import Header, HTTPException

from storefront.core.config import settings
from storefront.services.gateway.client import RazorpayClient, get_gateway_client


def get_gateway() -> RazorpayClient:
    return get_gateway_client()


def require_admin(x_admin_key: str | None = Header(default=None)) -> None:
    # Admin routes stay closed until a key is configured
    if not settings.admin_api_key:
        raise HTTPException(status_code=503, detail="admin api disabled")
    if not x_admin_key or not hmac.compare_digest(
        x_admin_key.encode("utf-8"), settings.admin_api_key.encode("utf-8")
    ):
        raise HTTPException(status_code=401, detail="unauthorized")
