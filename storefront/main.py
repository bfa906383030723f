"""
Main FastAPI application for the storefront.
Serves the product catalog, checkout, downloads, admin ledger view, health and metrics.
"""
import logging
import os
import time
from contextlib import asynccontextmanager
from uuid import uuid4

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from fastapi.staticfiles import StaticFiles
from starlette.exceptions import HTTPException as StarletteHTTPException

from storefront.api.routes import admin, checkout, downloads, health, products
from storefront.core.config import settings
from storefront.core.errors import CheckoutError
from storefront.core.logging import configure_logging
from storefront.db.init_db import init_db
from storefront.db.session import engine
from storefront.utils.metrics import router as metrics_router

logger = logging.getLogger("storefront")


@asynccontextmanager
async def lifespan(app: FastAPI):
    configure_logging()
    init_db(engine, settings.products_seed_file)
    if not settings.razorpay_key_id or not settings.razorpay_key_secret:
        logger.warning("razorpay_credentials_missing")
    logger.info("server_started", extra={"base_url": settings.public_base_url})
    yield
    engine.dispose()
    logger.info("server_stopped")


app = FastAPI(
    title="Storefront API",
    description="Digital product checkout with Razorpay",
    version="1.0.0",
    lifespan=lifespan,
)

# CORS
origins = settings.cors_origins_list
if not origins:
    origins = ["http://localhost:3000", "http://127.0.0.1:3000"]
app.add_middleware(
    CORSMiddleware,
    allow_origins=origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.middleware("http")
async def log_requests(request: Request, call_next):
    request_id = request.headers.get(settings.request_id_header) or uuid4().hex
    started = time.monotonic()
    response = await call_next(request)
    response.headers[settings.request_id_header] = request_id
    logger.info(
        "request",
        extra={
            "request_id": request_id,
            "method": request.method,
            "path": request.url.path,
            "status_code": response.status_code,
            "latency_ms": round((time.monotonic() - started) * 1000, 1),
        },
    )
    return response


# Error handlers: every failure is answered as {"error": "..."}
@app.exception_handler(CheckoutError)
async def checkout_error_handler(request: Request, exc: CheckoutError) -> JSONResponse:
    return JSONResponse(status_code=exc.status_code, content={"error": exc.message})


@app.exception_handler(RequestValidationError)
async def validation_error_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    return JSONResponse(status_code=400, content={"error": "Invalid request body"})


@app.exception_handler(StarletteHTTPException)
async def http_error_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    return JSONResponse(status_code=exc.status_code, content={"error": exc.detail}, headers=exc.headers)


@app.exception_handler(Exception)
async def unhandled_error_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.exception("unhandled_error", extra={"path": request.url.path})
    return JSONResponse(status_code=500, content={"error": "Internal server error"})


# Routers
app.include_router(health.router, tags=["health"])
app.include_router(products.router)
app.include_router(checkout.router)
app.include_router(downloads.router)
app.include_router(admin.router)
app.include_router(metrics_router)

# Browser UI (optional), mounted last so API routes take precedence
if os.path.isdir(settings.static_dir):
    app.mount("/", StaticFiles(directory=settings.static_dir, html=True), name="static")


def run() -> None:
    import uvicorn

    uvicorn.run("storefront.main:app", host="0.0.0.0", port=settings.port)
