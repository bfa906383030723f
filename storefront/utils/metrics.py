"""
Prometheus-based metrics for production monitoring.
Provides /metrics endpoint for scraping.
"""
from prometheus_client import Counter, Histogram, Gauge, generate_latest, CONTENT_TYPE_LATEST
from fastapi import APIRouter, Response


# Counters
orders_created_total = Counter(
    "orders_created_total",
    "Total number of gateway orders created",
    ["product_id"],
)

orders_failed_total = Counter(
    "orders_failed_total",
    "Total number of failed order creations",
    ["reason"],
)

payments_verified_total = Counter(
    "payments_verified_total",
    "Total number of verified payments",
    ["product_id"],
)

signature_failures_total = Counter(
    "signature_failures_total",
    "Total number of rejected payment signatures",
)

downloads_total = Counter(
    "downloads_total",
    "Total download attempts by outcome",
    ["outcome"],  # served, not_found, expired
)

gateway_requests_total = Counter(
    "gateway_requests_total",
    "Total payment gateway API requests",
    ["status"],
)

circuit_breaker_state = Gauge(
    "circuit_breaker_state",
    "Circuit breaker state (0=closed, 1=open)",
    ["name"],
)

# Histograms
gateway_request_duration_seconds = Histogram(
    "gateway_request_duration_seconds",
    "Payment gateway API request duration",
    buckets=[0.1, 0.25, 0.5, 1, 2, 5, 10],
)


# Metrics endpoint router
router = APIRouter()


@router.get("/metrics")
def metrics_endpoint() -> Response:
    """Prometheus metrics endpoint for scraping."""
    return Response(
        content=generate_latest(),
        media_type=CONTENT_TYPE_LATEST,
    )
