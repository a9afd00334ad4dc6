from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import ORJSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from doctext_service.api import api
from doctext_service.api.middleware import UploadSizeLimitMiddleware
from doctext_service.processor.fetcher import DocumentFetcher
from doctext_service.processor.processor import Processor
from doctext_service.settings import Settings, get_settings
from doctext_service.utils.errors import ServiceError, UnclassifiedError
from doctext_service.utils.utils import setup_logging


def register_exception_handlers(app: FastAPI) -> None:
    """
        :description: Renders service errors and routing errors as {"error": ...} JSON, unhandled exceptions as a 500
        :param app: FastAPI application to register the handlers on
    """
    log = setup_logging(component_name="api", log_level=app.state.settings.LOG_LEVEL)

    @app.exception_handler(ServiceError)
    async def service_error_handler(request: Request, exc: ServiceError) -> ORJSONResponse:
        log.warning("%s %s -> %s (%s): %s", request.method, request.url.path,
                    exc.status_code, exc.category.value, exc)
        return ORJSONResponse(status_code=exc.status_code, content=exc.body)

    @app.exception_handler(StarletteHTTPException)
    async def http_error_handler(request: Request, exc: StarletteHTTPException) -> ORJSONResponse:
        log.warning("%s %s -> %s: %s", request.method, request.url.path, exc.status_code, exc.detail)
        return ORJSONResponse(status_code=exc.status_code, content={"error": exc.detail}, headers=exc.headers)

    @app.exception_handler(Exception)
    async def unexpected_error_handler(request: Request, exc: Exception) -> ORJSONResponse:
        log.exception("unexpected error on %s %s", request.method, request.url.path)
        error = UnclassifiedError()
        return ORJSONResponse(status_code=error.status_code, content=error.body)


def create_app(settings: Settings | None = None,
               processor: Processor | None = None,
               fetcher: DocumentFetcher | None = None) -> FastAPI:
    """
        :description: Creates the FastAPI application with CORS, upload limits, API routes and error handlers
        :param settings: immutable settings, read from the environment when omitted
        :param processor: document processor, built from the settings when omitted
        :param fetcher: remote document fetcher, built from the settings when omitted
        :return: FastAPI application instance
    """

    settings = settings or get_settings()
    log = setup_logging(component_name="app", log_level=settings.LOG_LEVEL)

    app = FastAPI(title="Document Text Service",
                  description="PDF text extraction and image OCR API",
                  version=settings.OCR_SERVICE_VERSION,
                  default_response_class=ORJSONResponse,
                  debug=settings.DEBUG_MODE)

    app.state.settings = settings
    app.state.processor = processor or Processor(settings)
    app.state.fetcher = fetcher or DocumentFetcher(settings)

    app.include_router(api)
    register_exception_handlers(app)

    # added first so it sits inside CORS and its 400s carry CORS headers
    app.add_middleware(UploadSizeLimitMiddleware,
                       max_body_size=settings.MAX_UPLOAD_SIZE + settings.OCR_SERVICE_MULTIPART_OVERHEAD,
                       error_message=f"File too large (max {settings.MAX_UPLOAD_SIZE_LABEL})")
    app.add_middleware(CORSMiddleware,
                       allow_origins=settings.OCR_SERVICE_CORS_ORIGINS,
                       allow_methods=settings.OCR_SERVICE_CORS_METHODS,
                       allow_headers=["*"])

    log.info("%s %s ready | api key %s | max upload %s", settings.OCR_SERVICE_NAME, settings.OCR_SERVICE_VERSION,
             "enabled" if settings.API_KEY_ENABLED else "disabled", settings.MAX_UPLOAD_SIZE_LABEL)

    return app
