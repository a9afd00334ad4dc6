from __future__ import annotations

from enum import Enum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field


class DocumentKind(str, Enum):
    """Closed set of document kinds an upload can be dispatched to."""

    PDF = "pdf"
    IMAGE = "image"
    UNSUPPORTED = "unsupported"

    @classmethod
    def from_content_type(cls, content_type: str | None) -> DocumentKind:
        """Classify a declared content type.

        Only the exact ``application/pdf`` type counts as PDF and any
        ``image/*`` type counts as an image; everything else is unsupported.
        """
        declared = (content_type or "").strip()
        if declared == "application/pdf":
            return cls.PDF
        if declared.startswith("image/"):
            return cls.IMAGE
        return cls.UNSUPPORTED


class ExtractionResult(BaseModel):
    """Text produced for one document. Built once, never mutated."""

    model_config = ConfigDict(frozen=True)

    text: str = ""
    """Trimmed text; empty when the document has no text."""

    source_type: DocumentKind
    """Which collaborator produced the text, pdf or image."""

    metadata: dict[str, Any] = Field(default_factory=dict)
    """Document metadata such as pages, confidence, and timing."""
