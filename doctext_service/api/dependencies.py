import hmac

from fastapi import Header, Request

from doctext_service.processor.fetcher import DocumentFetcher
from doctext_service.processor.processor import Processor
from doctext_service.settings import Settings
from doctext_service.utils.errors import AuthError


def get_app_settings(request: Request) -> Settings:
    return request.app.state.settings


def get_processor(request: Request) -> Processor:
    return request.app.state.processor


def get_fetcher(request: Request) -> DocumentFetcher:
    return request.app.state.fetcher


async def verify_api_key(request: Request, x_api_key: str | None = Header(default=None)) -> None:
    """
        :description: Rejects the request with 401 unless it carries the configured x-api-key,
                      no-op when no key is configured
        :param x_api_key: value of the x-api-key header, if any
    """
    settings = get_app_settings(request)
    if not settings.API_KEY_ENABLED:
        return

    expected = str(settings.OCR_API_KEY).encode("utf-8")
    if x_api_key is None or not hmac.compare_digest(x_api_key.encode("utf-8"), expected):
        raise AuthError()
