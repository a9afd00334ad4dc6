"""Utility helpers for the document text service.

Shared by the API and processor layers: service descriptors for the health and
info endpoints, response shaping, and logging setup.
"""

import logging
import sys
from typing import Any

from doctext_service.settings import Settings


def get_service_descriptor(settings: Settings) -> dict[str, Any]:
    """Return the static payload served by `/` and `/healthz`."""
    return {
        "ok": True,
        "service": settings.OCR_SERVICE_NAME,
        "endpoints": {
            "parseUrl": "POST /parse",
            "ocrUpload": "POST /api/ocr",
            "health": "GET /healthz",
        },
    }


def get_app_info(settings: Settings) -> dict:
    """Return general information about the application.

    Used by the `/api/info` endpoint.

    Args:
        settings: Active service settings.

    Returns:
        dict: Application information (name, version, OCR model, config summary).
    """
    return {"service_app_name": settings.OCR_SERVICE_NAME,
            "service_version": settings.OCR_SERVICE_VERSION,
            "service_model": f"tesseract:{settings.TESSERACT_LANGUAGE}",
            "config": f"max_upload={settings.MAX_UPLOAD_SIZE_LABEL}; auth={settings.API_KEY_ENABLED}"}


def finalize_output_text(output_text: str | None) -> str:
    """Normalize extracted text: absent -> "", trimmed, valid UTF-8."""
    if not output_text:
        return ""
    return str(output_text).encode("utf-8", errors="replace").decode("utf-8").strip()


def setup_logging(component_name: str = "config_logger", log_level: int = 20) -> logging.Logger:
    """Configure a logger that writes to stdout with a consistent format.

    Args:
        component_name: Logger name to configure.
        log_level: Logging level to set on the logger and handler.

    Returns:
        logging.Logger: Configured logger instance.
    """
    root_logger = logging.getLogger(component_name)
    log_format = '[%(asctime)s] [%(levelname)s] %(name)s: %(message)s'
    log_handler = logging.StreamHandler(sys.stdout)
    log_handler.setFormatter(logging.Formatter(fmt=log_format))
    log_handler.setLevel(level=log_level)
    root_logger.setLevel(level=log_level)
    root_logger.propagate = False

    # only add the handler if a previous one does not exists
    handler_exists = False
    for h in root_logger.handlers:
        if isinstance(h, logging.StreamHandler) and h.level is log_handler.level:
            handler_exists = True
            break

    if not handler_exists:
        root_logger.addHandler(log_handler)

    return root_logger
