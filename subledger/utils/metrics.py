"""
Prometheus-based metrics for production monitoring.
Provides /metrics endpoint for scraping.
"""
from prometheus_client import Counter, Gauge, generate_latest, CONTENT_TYPE_LATEST
from fastapi import APIRouter, Response


# Counters
ledger_operations_total = Counter(
    "ledger_operations_total",
    "Total ledger calls by outcome (ok or error code)",
    ["operation", "outcome"],
)

ledger_payments_received_total = Counter(
    "ledger_payments_received_total",
    "Total amount credited to the ledger balance",
    ["kind"],  # subscribe, payment
)

ledger_funds_paid_out_total = Counter(
    "ledger_funds_paid_out_total",
    "Total amount transferred to the owner",
    ["reason"],  # withdrawal, self_destruct
)

# Gauges
ledger_balance = Gauge(
    "ledger_balance",
    "Current ledger balance after the last committed custody change",
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
