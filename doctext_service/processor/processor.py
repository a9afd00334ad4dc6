from __future__ import annotations

import time
from typing import Any

from doctext_service.dto.extraction_result import DocumentKind, ExtractionResult
from doctext_service.processor.extractors import ImageOcrEngine, PdfTextExtractor
from doctext_service.settings import Settings
from doctext_service.utils.errors import ClientInputError, ExtractionError
from doctext_service.utils.utils import finalize_output_text, setup_logging

UNSUPPORTED_FILE_TYPE_MESSAGE = "Unsupported file type. Upload a PDF or image."


class Processor:

    def __init__(self, settings: Settings,
                 pdf_extractor: PdfTextExtractor | None = None,
                 ocr_engine: ImageOcrEngine | None = None):
        self.log = setup_logging(component_name="processor", log_level=settings.LOG_LEVEL)
        self.log.debug("log level set to : " + str(settings.LOG_LEVEL))
        self.pdf_extractor = pdf_extractor or PdfTextExtractor(self.log)
        self.ocr_engine = ocr_engine or ImageOcrEngine(self.log, settings)

    def _run_collaborator(self, stream: bytes, kind: DocumentKind) -> tuple[str, dict[str, Any]]:
        if kind is DocumentKind.PDF:
            return self.pdf_extractor.extract(stream)
        if kind is DocumentKind.IMAGE:
            return self.ocr_engine.extract(stream)
        raise ClientInputError(UNSUPPORTED_FILE_TYPE_MESSAGE)

    def extract(self, stream: bytes, kind: DocumentKind, file_name: str = "") -> ExtractionResult:
        """ Extracts the text of a document whose kind is already known.
        PDFs go through text-layer extraction, images through tesseract OCR.
        This is blocking work; async callers should run it in a thread.

        Args:
            stream (bytes): raw document bytes
            kind (DocumentKind): classified kind of the document
            file_name (str, optional): used for logging only

        Raises:
            ClientInputError: kind is UNSUPPORTED
            ExtractionError: the extractor or the OCR engine failed, the
                underlying failure message is kept in `message`

        Returns:
            ExtractionResult: trimmed text, source type and doc metadata
        """

        self.log.info("Processing file: %s | kind: %s | %d bytes", file_name or "<unnamed>", kind.value, len(stream))
        start_time = time.time()

        try:
            output_text, doc_metadata = self._run_collaborator(stream, kind)
        except ClientInputError:
            raise
        except Exception as exception:
            self.log.error("%s extraction failed for %s: %s", kind.value, file_name or "<unnamed>", exception)
            raise ExtractionError(str(exception)) from exception

        elapsed_time = float(round(time.time() - start_time, 4))
        doc_metadata["elapsed_time"] = elapsed_time

        self.log.info("Finished processing file: " + (file_name or "<unnamed>") + " | Elapsed time: "
                      + str(elapsed_time) + " seconds")

        return ExtractionResult(text=finalize_output_text(output_text), source_type=kind, metadata=doc_metadata)
