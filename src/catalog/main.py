# src/catalog/main.py
import logging
from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request, Response
from fastapi.middleware.cors import CORSMiddleware
from prometheus_client import CONTENT_TYPE_LATEST, generate_latest
from slowapi import Limiter
from slowapi.middleware import SlowAPIMiddleware
from slowapi.util import get_remote_address
from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint

from catalog.api.dependencies import close_resources
from catalog.api.errors import register_exception_handlers
from catalog.api.v1.router import api_router
from catalog.core.config import get_settings
from catalog.core.metrics import REQUEST_COUNT

settings = get_settings()

logging.basicConfig(
    level=settings.log_level.upper(),
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)
logger = logging.getLogger(__name__)


class MetricsMiddleware(BaseHTTPMiddleware):
    async def dispatch(self, request: Request, call_next: RequestResponseEndpoint) -> Response:
        response = await call_next(request)
        REQUEST_COUNT.labels(
            method=request.method,
            path=request.url.path,
            status_code=str(response.status_code),
        ).inc()
        return response


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    logger.info("Starting %s %s", settings.app_name, settings.app_version)
    yield
    # Shutdown: Datenbank-Engine und Cache-Verbindungen schließen
    await close_resources()


limiter = Limiter(key_func=get_remote_address, default_limits=[settings.rate_limit])

app = FastAPI(
    title=settings.app_name,
    version=settings.app_version,
    debug=settings.debug,
    docs_url="/docs",
    redoc_url="/redoc",
    openapi_url="/openapi.json",
    lifespan=lifespan,
)

# Fehler -> einheitliches Envelope
register_exception_handlers(app)

# Rate Limiting
app.state.limiter = limiter
app.add_middleware(SlowAPIMiddleware)

# Metrics Middleware
app.add_middleware(MetricsMiddleware)

# CORS
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_methods=["GET", "POST", "PUT", "PATCH", "DELETE"],
    allow_headers=["Content-Type"],
)

app.include_router(api_router)


@app.get("/healthz", tags=["Health"])
@limiter.exempt
async def health_check() -> dict[str, object]:
    return {"success": True, "status": "ok", "version": settings.app_version}


@app.get("/readyz", tags=["Health"])
@limiter.exempt
async def readiness_check() -> dict[str, object]:
    return {"success": True, "status": "ready"}


@app.get("/metrics", tags=["Monitoring"])
@limiter.exempt
async def metrics_endpoint() -> Response:
    return Response(content=generate_latest(), media_type=CONTENT_TYPE_LATEST)
