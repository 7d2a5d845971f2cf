from prometheus_client import Counter, Histogram


REQUESTS = Counter("kindrewrite_requests_total", "Total API requests", ["endpoint"])
ERRORS = Counter("kindrewrite_errors_total", "Failed API requests", ["endpoint", "kind"])
LATENCY = Histogram(
    "kindrewrite_request_latency_seconds",
    "Request latency",
    ["endpoint"],
    buckets=(0.005, 0.05, 0.1, 0.2, 0.5, 1, 2, 5, 10)
)
