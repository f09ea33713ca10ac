"""
Prometheus instrumentation for the booking flow.
Exposed at the /metrics endpoint.
"""

from prometheus_client import Counter, Histogram, Gauge, generate_latest, CONTENT_TYPE_LATEST
from fastapi import Response

# Booking metrics
booking_attempts = Counter(
    'cinebook_booking_attempts_total',
    'Total booking attempts',
    ['status']  # success, conflict, rejected, error
)

booking_latency = Histogram(
    'cinebook_booking_latency_seconds',
    'Booking creation latency',
    buckets=[0.001, 0.005, 0.01, 0.025, 0.05, 0.1, 0.25, 0.5, 1.0]
)

booking_cancellations = Counter(
    'cinebook_booking_cancellations_total',
    'Booking cancellations',
    ['result']  # cancelled, rejected
)

# Seat inventory metrics
seat_operations = Counter(
    'cinebook_seat_operations_total',
    'Seats reserved or released',
    ['operation']  # reserve, release
)

seat_conflicts = Counter(
    'cinebook_seat_conflicts_total',
    'Reservations that lost a race for an already booked seat'
)

inventory_rollback_failures = Counter(
    'cinebook_inventory_rollback_failures_total',
    'Compensating seat releases that failed'
)

# Cache metrics
cache_operations = Counter(
    'cinebook_cache_operations_total',
    'Cache operations',
    ['operation', 'result']  # get/set, hit/miss
)

redis_available = Gauge(
    'cinebook_redis_available',
    'Redis connection state (1=connected, 0=unavailable)'
)


def metrics_endpoint() -> Response:
    """Render the default registry in the Prometheus text format."""
    return Response(
        content=generate_latest(),
        media_type=CONTENT_TYPE_LATEST
    )


def record_booking_attempt(status: str):
    """Status: success, conflict, rejected, error"""
    booking_attempts.labels(status=status).inc()


def record_cancellation(cancelled: bool):
    booking_cancellations.labels(result="cancelled" if cancelled else "rejected").inc()


def record_seat_operation(operation: str, count: int):
    seat_operations.labels(operation=operation).inc(count)


def record_cache_operation(operation: str, hit: bool):
    result = "hit" if hit else "miss"
    cache_operations.labels(operation=operation, result=result).inc()
