import logging
from typing import Any

from fastapi import APIRouter, Depends, Request
from fastapi.responses import ORJSONResponse
from starlette.concurrency import run_in_threadpool
from starlette.datastructures import UploadFile
from starlette.exceptions import HTTPException as StarletteHTTPException
from starlette.formparsers import MultiPartException

from doctext_service.api.dependencies import get_app_settings, get_fetcher, get_processor, verify_api_key
from doctext_service.dto.extraction_result import DocumentKind
from doctext_service.dto.parse_request import ParseRequest
from doctext_service.dto.process_response import ErrorResponse, OcrResponse, ParseResponse
from doctext_service.processor.fetcher import DocumentFetcher
from doctext_service.processor.processor import UNSUPPORTED_FILE_TYPE_MESSAGE, Processor
from doctext_service.settings import Settings
from doctext_service.utils.errors import (
    ClientInputError,
    ExtractionError,
    ServiceError,
    UnclassifiedError,
    UpstreamFetchError,
)

log = logging.getLogger("api")

process_api = APIRouter(dependencies=[Depends(verify_api_key)])

_ERROR_RESPONSES: dict[int | str, dict[str, Any]] = {
    400: {"model": ErrorResponse},
    401: {"model": ErrorResponse},
    500: {"model": ErrorResponse},
}


async def _read_json_object(request: Request) -> dict[str, Any]:
    try:
        payload = await request.json()
    except ValueError:
        return {}
    return payload if isinstance(payload, dict) else {}


def _single_upload(files: list[Any], settings: Settings) -> UploadFile:
    uploads = [item for item in files if isinstance(item, UploadFile)]
    if not uploads:
        raise ClientInputError("No file uploaded")
    if len(uploads) > 1:
        raise UnclassifiedError(message="more than one file uploaded under field 'file'")

    upload = uploads[0]
    if upload.size is not None and upload.size > settings.MAX_UPLOAD_SIZE:
        raise ClientInputError(f"File too large (max {settings.MAX_UPLOAD_SIZE_LABEL})")
    return upload


@process_api.post("/parse", response_model=ParseResponse,
                  responses={**_ERROR_RESPONSES, 502: {"model": ErrorResponse}})
async def parse_url(request: Request,
                    fetcher: DocumentFetcher = Depends(get_fetcher),
                    processor: Processor = Depends(get_processor)) -> ORJSONResponse:
    """
        :description: Fetches the PDF behind `file_url` and returns its trimmed text
    """
    file_url = ParseRequest.model_validate(await _read_json_object(request)).resolved_url()
    if file_url is None:
        raise ClientInputError("Missing file_url")

    try:
        stream = await fetcher.fetch(file_url)
        result = await run_in_threadpool(processor.extract, stream, DocumentKind.PDF, file_url)
    except UpstreamFetchError:
        raise
    except Exception as exception:
        log.error("parse-url error for %s: %s", file_url, exception)
        raise ExtractionError(str(exception), error="Failed to parse document",
                              expose_message=False) from exception

    return ORJSONResponse(content=ParseResponse(extracted_text=result.text).model_dump())


@process_api.post("/api/ocr", response_model=OcrResponse, responses=_ERROR_RESPONSES)
async def ocr_upload(request: Request,
                     settings: Settings = Depends(get_app_settings),
                     processor: Processor = Depends(get_processor)) -> ORJSONResponse:
    """
        :description: Extracts text from a multipart upload under field `file`,
                      PDFs through text extraction and images through OCR
    """
    try:
        form = await request.form()
    except (StarletteHTTPException, MultiPartException) as exception:
        log.error("malformed multipart body: %s", exception)
        raise UnclassifiedError(message=str(exception)) from exception

    try:
        upload = _single_upload(form.getlist("file"), settings)
        content_type = upload.content_type or ""

        kind = DocumentKind.from_content_type(content_type)
        if kind is DocumentKind.UNSUPPORTED:
            raise ClientInputError(UNSUPPORTED_FILE_TYPE_MESSAGE)

        try:
            stream = await upload.read()
            result = await run_in_threadpool(processor.extract, stream, kind, upload.filename or "")
        except ServiceError:
            raise
        except Exception as exception:
            log.error("OCR upload error: %s", exception)
            raise ExtractionError(str(exception)) from exception
    finally:
        await form.close()

    response = OcrResponse(success=True, text=result.text, file_type=content_type)
    return ORJSONResponse(content=response.model_dump(by_alias=True))
