"""Prometheus metrics for contribution volume, ledger failures and request latency"""

from decimal import Decimal

from prometheus_client import Counter, Histogram

# Registration metrics
registration_counter = Counter(
    "coop_contributions_registered_total",
    "Contribution registrations committed",
    ["payment_type"],  # single_tract | full_payment
)

contribution_amount_counter = Counter(
    "coop_contribution_amount_total",
    "Total amount registered in contributions",
    ["payment_type"],
)

registration_failure_counter = Counter(
    "coop_contribution_failures_total",
    "Failed contribution registrations",
    ["kind"],  # ErrorKind value
)

# Catalog metrics
periods_created_counter = Counter(
    "coop_periods_created_total",
    "Contribution periods created",
)

# Service health
request_duration_histogram = Histogram(
    "http_request_duration_seconds",
    "HTTP request latency",
    ["method", "endpoint", "status"],
)


def record_registration(is_full_payment: bool, amount: Decimal) -> None:
    """Record a committed registration by payment type"""
    payment_type = "full_payment" if is_full_payment else "single_tract"
    registration_counter.labels(payment_type=payment_type).inc()
    contribution_amount_counter.labels(payment_type=payment_type).inc(float(amount))


def record_registration_failure(kind: str) -> None:
    registration_failure_counter.labels(kind=kind).inc()
