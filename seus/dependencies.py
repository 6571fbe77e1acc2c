from fastapi import Request

from .config import Settings
from .services.shortener import ShortenerService


def get_settings(request: Request) -> Settings:
    return request.app.state.settings


def get_service(request: Request) -> ShortenerService:
    return request.app.state.service
