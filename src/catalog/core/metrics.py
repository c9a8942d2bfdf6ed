from prometheus_client import Counter

REQUEST_COUNT = Counter(
    "http_requests_total",
    "Total number of HTTP requests",
    ["method", "path", "status_code"],
)

PRODUCT_OPERATION_ERRORS = Counter(
    "product_operation_errors_total",
    "Total number of failed product operations",
    ["operation"],
)

CACHE_HITS = Counter("cache_hits_total", "Total number of cache hits")
CACHE_MISSES = Counter("cache_misses_total", "Total number of cache misses")
CACHE_FLUSHES = Counter("cache_flushes_total", "Total number of global cache flushes")
