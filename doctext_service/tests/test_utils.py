import logging
import unittest
from unittest.mock import patch

from pydantic import ValidationError

from doctext_service.settings import DEFAULT_CORS_ORIGINS, Settings, default_tessdata_prefix
from doctext_service.utils.errors import (
    AuthError,
    ClientInputError,
    ErrorCategory,
    ExtractionError,
    UnclassifiedError,
    UpstreamFetchError,
    status_for_category,
)
from doctext_service.utils.utils import finalize_output_text, get_service_descriptor, setup_logging

from .utils_helpers import make_settings


class TestErrorMapping(unittest.TestCase):

    def test_status_for_every_category(self):
        expected = {
            ErrorCategory.CLIENT_INPUT: 400,
            ErrorCategory.AUTH: 401,
            ErrorCategory.UPSTREAM_FETCH: 502,
            ErrorCategory.EXTRACTION: 500,
            ErrorCategory.UNCLASSIFIED: 500,
        }
        for category in ErrorCategory:
            with self.subTest(category=category):
                self.assertEqual(status_for_category(category), expected[category])

    def test_error_bodies(self):
        self.assertEqual(ClientInputError("No file uploaded").body, {"error": "No file uploaded"})
        self.assertEqual(AuthError().body, {"error": "Unauthorized"})
        self.assertEqual(UpstreamFetchError(404).body, {"error": "Failed to fetch PDF (404)"})
        self.assertEqual(UnclassifiedError(message="internal detail").body, {"error": "Unexpected error"})

    def test_extraction_message_can_be_hidden(self):
        exposed = ExtractionError("bad xref")
        hidden = ExtractionError("bad xref", error="Failed to parse document", expose_message=False)
        self.assertEqual(exposed.body, {"error": "Failed to process file", "message": "bad xref"})
        self.assertEqual(hidden.body, {"error": "Failed to parse document"})
        self.assertEqual(hidden.status_code, 500)


class TestSettings(unittest.TestCase):

    def test_defaults(self):
        with patch.dict("os.environ", {}, clear=True):
            settings = Settings()
        self.assertEqual(settings.PORT, 8080)
        self.assertIsNone(settings.OCR_API_KEY)
        self.assertFalse(settings.API_KEY_ENABLED)
        self.assertEqual(settings.MAX_UPLOAD_SIZE, 10 * 1024 * 1024)
        self.assertEqual(settings.MAX_UPLOAD_SIZE_LABEL, "10MB")
        self.assertEqual(settings.OCR_SERVICE_CORS_ORIGINS, DEFAULT_CORS_ORIGINS)
        self.assertEqual(settings.OCR_SERVICE_CORS_METHODS, ["POST", "GET", "OPTIONS"])
        self.assertEqual(settings.TESSERACT_LANGUAGE, "eng")

    def test_reads_environment(self):
        env = {
            "PORT": "9000",
            "OCR_API_KEY": "k3y",
            "OCR_SERVICE_CORS_ORIGINS": '["https://a.example.com"]',
            "OCR_SERVICE_MAX_UPLOAD_SIZE": "2097152",
        }
        with patch.dict("os.environ", env, clear=True):
            settings = Settings()
        self.assertEqual(settings.PORT, 9000)
        self.assertEqual(settings.OCR_API_KEY, "k3y")
        self.assertTrue(settings.API_KEY_ENABLED)
        self.assertEqual(settings.OCR_SERVICE_CORS_ORIGINS, ["https://a.example.com"])
        self.assertEqual(settings.MAX_UPLOAD_SIZE_LABEL, "2MB")

    def test_empty_api_key_disables_auth(self):
        with patch.dict("os.environ", {"OCR_API_KEY": ""}, clear=True):
            self.assertFalse(Settings().API_KEY_ENABLED)

    def test_whitespace_api_key_enables_auth(self):
        with patch.dict("os.environ", {"OCR_API_KEY": "   "}, clear=True):
            settings = Settings()
        self.assertEqual(settings.OCR_API_KEY, "   ")
        self.assertTrue(settings.API_KEY_ENABLED)

    def test_tessdata_prefix_defaults_per_platform(self):
        with patch.dict("os.environ", {}, clear=True):
            self.assertEqual(Settings().TESSDATA_PREFIX, default_tessdata_prefix())
        with patch("doctext_service.settings.platform", "darwin"):
            self.assertEqual(default_tessdata_prefix(), "/opt/homebrew/share/tessdata")
        with patch("doctext_service.settings.platform", "linux"), \
                patch("doctext_service.settings.os.path.exists", return_value=False):
            self.assertEqual(default_tessdata_prefix(), "/usr/share/tesseract-ocr/4.00/tessdata")
        self.assertEqual(make_settings(OCR_TESSDATA_PREFIX="/srv/tessdata").TESSDATA_PREFIX, "/srv/tessdata")

    def test_settings_are_immutable(self):
        settings = make_settings()
        with self.assertRaises(ValidationError):
            settings.OCR_API_KEY = "late"  # type: ignore[misc]

    def test_rejects_invalid_limits(self):
        with self.assertRaises(ValidationError):
            make_settings(OCR_SERVICE_MAX_UPLOAD_SIZE=0)
        with self.assertRaises(ValidationError):
            make_settings(PORT=70000)

    def test_size_labels(self):
        self.assertEqual(make_settings(OCR_SERVICE_MAX_UPLOAD_SIZE=512 * 1024).MAX_UPLOAD_SIZE_LABEL, "512KB")
        self.assertEqual(make_settings(OCR_SERVICE_MAX_UPLOAD_SIZE=1000).MAX_UPLOAD_SIZE_LABEL, "1000 bytes")


class TestHelpers(unittest.TestCase):

    def test_finalize_output_text(self):
        self.assertEqual(finalize_output_text(None), "")
        self.assertEqual(finalize_output_text(""), "")
        self.assertEqual(finalize_output_text("\n\t  some text \n\n"), "some text")
        self.assertEqual(finalize_output_text("line one\nline two\n"), "line one\nline two")

    def test_service_descriptor_uses_configured_name(self):
        descriptor = get_service_descriptor(make_settings(OCR_SERVICE_NAME="Other OCR"))
        self.assertIs(descriptor["ok"], True)
        self.assertEqual(descriptor["service"], "Other OCR")

    def test_setup_logging_adds_single_handler(self):
        logger = setup_logging(component_name="doctext_test_logger", log_level=logging.INFO)
        setup_logging(component_name="doctext_test_logger", log_level=logging.INFO)
        self.assertEqual(len(logger.handlers), 1)
        self.assertFalse(logger.propagate)
        self.assertEqual(logger.level, logging.INFO)
