import logging

from fastapi import FastAPI, Request, status
from fastapi.responses import RedirectResponse

from .config import Settings

logger = logging.getLogger(__name__)


def https_target(request: Request, settings: Settings) -> str:
    target = f"https://{settings.DOMAIN}"
    if settings.HTTPS_PORT != 443:
        target += f":{settings.HTTPS_PORT}"
    target += request.url.path
    if request.url.query:
        target += "?" + request.url.query
    return target


def create_redirect_app(settings: Settings) -> FastAPI:
    """Plain-HTTP listener that upgrades every request to HTTPS."""
    app = FastAPI(title="seus HTTP redirect", docs_url=None, redoc_url=None, openapi_url=None)

    @app.api_route("/{path:path}", methods=["GET", "HEAD", "POST", "PUT", "DELETE", "PATCH", "OPTIONS"])
    async def upgrade(request: Request):
        target = https_target(request, settings)
        logger.info(f"redirect to: {target}")
        return RedirectResponse(url=target, status_code=status.HTTP_308_PERMANENT_REDIRECT)

    return app
