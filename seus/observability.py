from prometheus_client import Counter, Histogram, generate_latest, CONTENT_TYPE_LATEST
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request
from starlette.responses import Response
import time

# Metrics definitions
HTTP_REQUESTS_TOTAL = Counter(
    "seus_http_requests_total",
    "Total HTTP requests",
    ["method", "path", "status"]
)

HTTP_REQUEST_DURATION_SECONDS = Histogram(
    "seus_http_request_duration_seconds",
    "HTTP request duration in seconds",
    ["method", "path"],
    buckets=[0.01, 0.05, 0.1, 0.5, 1.0, 5.0]
)

CODES_CREATED_TOTAL = Counter("seus_codes_created_total", "Total short codes created")
CODES_EXISTING_TOTAL = Counter("seus_codes_existing_total", "Create requests answered with an existing code")
CODE_COLLISIONS_TOTAL = Counter("seus_code_collisions_total", "Generated codes that collided with a stored code")
CACHE_HITS = Counter("seus_cache_hits_total", "Total cache hits")
CACHE_MISSES = Counter("seus_cache_misses_total", "Total cache misses")
REDIRECT_TOTAL = Counter("seus_redirect_total", "Total redirects")
REDIRECT_404_TOTAL = Counter("seus_redirect_404_total", "Total failed redirects (404)")


def metric_path(path: str) -> str:
    # Short codes would explode label cardinality
    if path in ("/api/create", "/api/metrics", "/api/health"):
        return path
    if path.startswith("/api/"):
        return "/api/{other}"
    if len(path) > 1 and "/" not in path[1:]:
        return "/{code}"
    return "/{other}"


class PrometheusMiddleware(BaseHTTPMiddleware):
    async def dispatch(self, request: Request, call_next):
        start_time = time.perf_counter()

        response = await call_next(request)

        process_time = time.perf_counter() - start_time
        path = metric_path(request.url.path)

        HTTP_REQUESTS_TOTAL.labels(method=request.method, path=path, status=str(response.status_code)).inc()
        HTTP_REQUEST_DURATION_SECONDS.labels(method=request.method, path=path).observe(process_time)

        return response

def metrics_endpoint(request: Request):
    return Response(generate_latest(), media_type=CONTENT_TYPE_LATEST)
