from __future__ import annotations

import time
from io import BytesIO
from logging import Logger
from typing import Any

import pypdfium2 as pdfium
from PIL import Image
from tesserocr import PyTessBaseAPI

from doctext_service.settings import Settings


class PdfTextExtractor:
    """Reads the embedded text layer of a PDF with pdfium. No rendering, no OCR."""

    def __init__(self, log: Logger) -> None:
        self.log = log

    def extract(self, stream: bytes) -> tuple[str, dict[str, Any]]:
        """ Extracts the text of every page of a PDF byte stream.

        Args:
            stream (bytes): raw PDF bytes.

        Raises:
            ValueError: empty stream.
            pdfium.PdfiumError: pdfium could not open the document.

        Returns:
            tuple[str, dict]: the page texts joined by blank lines and the doc metadata (page count)
        """
        if not stream:
            raise ValueError("Empty PDF file provided")

        doc_metadata: dict[str, Any] = {}
        page_texts: list[str] = []

        start_time = time.time()
        pdf = pdfium.PdfDocument(stream)
        try:
            doc_metadata["pages"] = len(pdf)
            for page in pdf:
                textpage = page.get_textpage()
                page_texts.append(textpage.get_text_range().replace("\r\n", "\n").replace("\r", "\n"))
                textpage.close()
                page.close()
        finally:
            pdf.close()

        # pages are separated by a blank line
        output_text = "\n\n".join(page_texts)

        self.log.info("PDF text extraction finished | pages: %s | Elapsed : %.4f seconds",
                      doc_metadata["pages"], time.time() - start_time)

        return output_text, doc_metadata


class ImageOcrEngine:
    """Runs tesseract over a single raster image."""

    def __init__(self, log: Logger, settings: Settings) -> None:
        self.log = log
        self.tessdata_prefix = settings.TESSDATA_PREFIX
        self.language = settings.TESSERACT_LANGUAGE
        self.convert_grayscale = settings.OCR_CONVERT_GRAYSCALE_IMAGES

    def _load_image(self, stream: bytes) -> Image.Image:
        with Image.open(BytesIO(stream)) as imgf:
            return imgf.convert("L") if self.convert_grayscale else imgf.convert("RGB")

    def _init_tesseract_api(self) -> PyTessBaseAPI:
        tess_api = PyTessBaseAPI(path=self.tessdata_prefix, lang=self.language)  # type: ignore
        self.log.debug("Initialised tesseract api for language: %s", self.language)
        return tess_api

    def extract(self, stream: bytes) -> tuple[str, dict[str, Any]]:
        """ Recognises the text of an image byte stream.

        Args:
            stream (bytes): raw image bytes, any format Pillow can open.

        Raises:
            ValueError: empty stream.
            PIL.UnidentifiedImageError: not an image Pillow understands.
            RuntimeError: tesseract failed to initialise.

        Returns:
            tuple[str, dict]: recognised text and the doc metadata (pages, mean word confidence)
        """
        if not stream:
            raise ValueError("Empty image file provided")

        image = self._load_image(stream)
        doc_metadata: dict[str, Any] = {"pages": 1}

        start_time = time.time()
        tess_api = self._init_tesseract_api()
        try:
            tess_api.SetImage(image)
            output_text = tess_api.GetUTF8Text()
            confidences = tess_api.AllWordConfidences()
        finally:
            tess_api.End()

        len_confidence = 1 if len(confidences) == 0 else len(confidences)
        doc_metadata["confidence"] = round(sum(confidences) / len_confidence, 4)

        self.log.info(f"OCR processing finished | Elapsed : {time.time() - start_time:.4f} seconds")

        return output_text, doc_metadata
