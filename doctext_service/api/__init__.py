from doctext_service.api.api import api

__all__ = ["api"]
