from pydantic import BaseModel, ConfigDict, Field


class ParseResponse(BaseModel):
    """Response payload for /parse."""

    extracted_text: str = Field(..., description="Trimmed text of the fetched PDF.")


class OcrResponse(BaseModel):
    """Response payload for /api/ocr."""

    model_config = ConfigDict(populate_by_name=True)

    success: bool = Field(True, description="True when text extraction completed.")
    text: str = Field(..., description="Extracted or OCR'd text, trimmed.")
    file_type: str = Field(..., alias="fileType", description="Declared content type of the upload.")


class ErrorResponse(BaseModel):
    """Error payload shared by every endpoint."""

    error: str = Field(..., description="Generic error message.")
    message: str | None = Field(default=None, description="Underlying failure detail, /api/ocr only.")
