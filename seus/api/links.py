import logging

from fastapi import APIRouter, Depends, Request, status
from fastapi.responses import JSONResponse

from ..config import Settings
from ..dependencies import get_service, get_settings
from ..exceptions import InvalidURL
from ..schemas import ShortLinkResponse
from ..services.shortener import ShortenerService

logger = logging.getLogger(__name__)

router = APIRouter()


def _json(body: ShortLinkResponse) -> JSONResponse:
    return JSONResponse(status_code=body.status, content=body.model_dump(exclude_none=True))


@router.get("/create", response_model=ShortLinkResponse, response_model_exclude_none=True)
async def create_short_link(
    request: Request,
    service: ShortenerService = Depends(get_service),
    settings: Settings = Depends(get_settings),
):
    urls = request.query_params.getlist("url")
    if len(urls) != 1:
        return _json(ShortLinkResponse(
            status=status.HTTP_400_BAD_REQUEST,
            message="No URL Specified (or too many)",
        ))

    try:
        result = await service.create(urls[0])
    except InvalidURL as e:
        logger.info(f"Rejected {e.url!r}: unexpected characters")
        return _json(ShortLinkResponse(
            status=status.HTTP_400_BAD_REQUEST,
            message="Unexpected characters in URL, allowed are: [a-zA-Z0-9_.-]",
        ))

    if result.created:
        status_code, message = status.HTTP_201_CREATED, "Code inserted correctly"
    else:
        status_code, message = status.HTTP_200_OK, "Code already exists"

    return _json(ShortLinkResponse(
        status=status_code,
        message=message,
        url=result.url,
        code=result.code,
        encoded=f"{settings.DOMAIN}/{result.code}",
    ))
