from fastapi import APIRouter, Depends
from fastapi.responses import ORJSONResponse

from doctext_service.api.dependencies import get_app_settings
from doctext_service.dto.health_response import HealthResponse
from doctext_service.dto.info_response import InfoResponse
from doctext_service.settings import Settings
from doctext_service.utils.utils import get_app_info, get_service_descriptor

health_api = APIRouter()


@health_api.get("/", response_model=HealthResponse, response_class=ORJSONResponse)
@health_api.get("/healthz", response_model=HealthResponse, response_class=ORJSONResponse)
def health(settings: Settings = Depends(get_app_settings)) -> ORJSONResponse:
    return ORJSONResponse(content=get_service_descriptor(settings))


@health_api.get("/api/info", response_model=InfoResponse, response_class=ORJSONResponse)
def info(settings: Settings = Depends(get_app_settings)) -> ORJSONResponse:
    return ORJSONResponse(content=get_app_info(settings))
