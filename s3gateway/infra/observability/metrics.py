from prometheus_client import Counter, Histogram, make_asgi_app

# Route templates (e.g. /api/v1/bucket/{bucket}/objects) keep label cardinality low.
REQUESTS = Counter(
    "http_requests_total",
    "Total HTTP requests",
    ["method", "route", "status"],
)

LATENCY = Histogram(
    "http_request_duration_seconds",
    "Request latency in seconds",
    ["method", "route"],
)

STORAGE_REQUESTS = Counter(
    "storage_requests_total",
    "Calls made to the object storage backend",
    ["operation", "outcome"],
)

metrics_app = make_asgi_app()
