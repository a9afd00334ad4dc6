import os
from functools import lru_cache
from pathlib import Path
from sys import platform
from typing import Any

from pydantic import AliasChoices, Field, computed_field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

DEFAULT_CORS_ORIGINS: list[str] = [
    "http://localhost:3000",
    "https://your-frontend.example.com",
]

DEFAULT_MAX_UPLOAD_SIZE: int = 10 * 1024 * 1024


def default_tessdata_prefix() -> str:
    if platform in ("linux", "linux2"):
        tessdata_prefix = "/usr/share/tesseract-ocr/5/tessdata"
        if not os.path.exists(tessdata_prefix):
            tessdata_prefix = "/usr/share/tesseract-ocr/4.00/tessdata"
        return tessdata_prefix
    return "/opt/homebrew/share/tessdata"


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=None, extra="ignore", frozen=True)

    OCR_SERVICE_NAME: str = Field("GovProp OCR", min_length=1)
    OCR_SERVICE_VERSION: str = Field(
        "dev",
        min_length=1,
        validation_alias=AliasChoices("OCR_SERVICE_VERSION", "OCR_SERVICE_IMAGE_RELEASE_VERSION"),
    )
    OCR_SERVICE_LOG_LEVEL: int = Field(20, ge=0, le=50)
    OCR_SERVICE_DEBUG_MODE: bool = Field(False)

    PORT: int = Field(8080, ge=1, le=65535)

    # unset or "" disables the x-api-key check
    OCR_API_KEY: str | None = None

    OCR_SERVICE_CORS_ORIGINS: list[str] = Field(default_factory=lambda: list(DEFAULT_CORS_ORIGINS))
    OCR_SERVICE_CORS_METHODS: list[str] = Field(default_factory=lambda: ["POST", "GET", "OPTIONS"])

    OCR_SERVICE_MAX_UPLOAD_SIZE: int = Field(DEFAULT_MAX_UPLOAD_SIZE, gt=0)
    # slack for multipart boundaries and part headers on top of the file itself
    OCR_SERVICE_MULTIPART_OVERHEAD: int = Field(64 * 1024, ge=0)

    OCR_TESSDATA_PREFIX: str = Field(default_factory=default_tessdata_prefix, min_length=1)
    OCR_SERVICE_TESSERACT_LANG: str = Field("eng", min_length=1)
    OCR_CONVERT_GRAYSCALE_IMAGES: bool = Field(True)

    @field_validator("OCR_API_KEY", mode="before")
    @classmethod
    def empty_key_disables_auth(cls, value: Any) -> Any:
        if value == "":
            return None
        return value

    @field_validator("OCR_SERVICE_CORS_METHODS", mode="before")
    @classmethod
    def normalize_methods(cls, value: Any) -> Any:
        if isinstance(value, list):
            return [str(method).upper() for method in value]
        return value

    @computed_field  # type: ignore[prop-decorator]
    @property
    def LOG_LEVEL(self) -> int:
        # 50 - CRITICAL, 40 - ERROR, 30 - WARNING, 20 - INFO, 10 - DEBUG, 0 - NOTSET
        return self.OCR_SERVICE_LOG_LEVEL

    @computed_field  # type: ignore[prop-decorator]
    @property
    def DEBUG_MODE(self) -> bool:
        return self.OCR_SERVICE_DEBUG_MODE

    @computed_field  # type: ignore[prop-decorator]
    @property
    def ROOT_DIR(self) -> str:
        return str(Path(__file__).resolve().parents[1])

    @computed_field  # type: ignore[prop-decorator]
    @property
    def API_KEY_ENABLED(self) -> bool:
        return self.OCR_API_KEY is not None

    @computed_field  # type: ignore[prop-decorator]
    @property
    def MAX_UPLOAD_SIZE(self) -> int:
        return self.OCR_SERVICE_MAX_UPLOAD_SIZE

    @computed_field  # type: ignore[prop-decorator]
    @property
    def MAX_UPLOAD_SIZE_LABEL(self) -> str:
        size = self.OCR_SERVICE_MAX_UPLOAD_SIZE
        if size % (1024 * 1024) == 0:
            return f"{size // (1024 * 1024)}MB"
        if size % 1024 == 0:
            return f"{size // 1024}KB"
        return f"{size} bytes"

    @computed_field  # type: ignore[prop-decorator]
    @property
    def TESSDATA_PREFIX(self) -> str:
        return self.OCR_TESSDATA_PREFIX

    @computed_field  # type: ignore[prop-decorator]
    @property
    def TESSERACT_LANGUAGE(self) -> str:
        return self.OCR_SERVICE_TESSERACT_LANG


@lru_cache
def get_settings() -> Settings:
    """Return the process-wide settings, read once from the environment."""
    return Settings()  # type: ignore[call-arg]
