import logging
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI, Depends, Request, status
from fastapi.responses import JSONResponse, RedirectResponse

from .api import links
from .config import Settings
from .database import Database
from .dependencies import get_service
from .exceptions import GenerationExhausted, StoreUnavailable
from .middleware import RequestIdMiddleware
from .observability import PrometheusMiddleware, metrics_endpoint, REDIRECT_TOTAL, REDIRECT_404_TOTAL
from .redis import RedisCache
from .registry import CodeRegistry
from .schemas import ErrorResponse
from .services.shortener import ShortenerService

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    settings: Settings = app.state.settings
    database = Database(settings)
    if settings.CREATE_TABLES:
        await database.create_all()
    cache = RedisCache(settings.REDIS_URL, ttl=settings.CACHE_TTL_SECONDS)
    await cache.connect()

    app.state.database = database
    app.state.cache = cache
    app.state.service = ShortenerService(
        CodeRegistry(database, timeout=settings.STORE_TIMEOUT_SECONDS),
        code_length=settings.CODE_LENGTH,
        max_attempts=settings.MAX_GENERATION_ATTEMPTS,
        cache=cache,
    )
    logger.info(f"Serving {settings.DOMAIN} with {settings.CODE_LENGTH}-character codes")
    try:
        yield
    finally:
        await cache.close()
        await database.close()


async def store_unavailable_handler(request: Request, exc: StoreUnavailable):
    logger.error(f"Store error on {request.url.path}: {exc}", exc_info=exc)
    body = ErrorResponse(status=status.HTTP_503_SERVICE_UNAVAILABLE, message="Store unavailable, retry later")
    return JSONResponse(status_code=body.status, content=body.model_dump(exclude_none=True))


async def generation_exhausted_handler(request: Request, exc: GenerationExhausted):
    logger.error(str(exc))
    body = ErrorResponse(status=status.HTTP_500_INTERNAL_SERVER_ERROR, message="Could not generate unique code")
    return JSONResponse(status_code=body.status, content=body.model_dump(exclude_none=True))


def create_app(settings: Optional[Settings] = None) -> FastAPI:
    settings = settings or Settings()

    app = FastAPI(
        title="seus",
        description="A URL shortening redirect service",
        version="1.0.0",
        lifespan=lifespan,
    )
    app.state.settings = settings

    app.add_middleware(PrometheusMiddleware)
    app.add_middleware(RequestIdMiddleware)

    app.add_exception_handler(StoreUnavailable, store_unavailable_handler)
    app.add_exception_handler(GenerationExhausted, generation_exhausted_handler)

    app.add_route("/api/metrics", metrics_endpoint)

    app.include_router(links.router, prefix="/api")

    @app.get("/api/health")
    async def health():
        return {"status": "ok"}

    @app.get("/{code}")
    async def redirect_to_url(code: str, request: Request, service: ShortenerService = Depends(get_service)):
        url = await service.resolve(code)
        if url is None:
            REDIRECT_404_TOTAL.inc()
            body = ErrorResponse(status=status.HTTP_404_NOT_FOUND, message="Code not found", code=code)
            return JSONResponse(status_code=body.status, content=body.model_dump(exclude_none=True))

        REDIRECT_TOTAL.inc()
        client = request.client.host if request.client else "-"
        logger.info(f"Redirecting {client} with code {code} to {url}")
        return RedirectResponse(url=url, status_code=status.HTTP_307_TEMPORARY_REDIRECT)

    return app
