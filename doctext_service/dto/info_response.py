from pydantic import BaseModel, Field


class InfoResponse(BaseModel):
    """Response payload for the /api/info endpoint."""

    service_app_name: str = Field(..., description="Service name.")
    service_version: str = Field(..., description="Service version string.")
    service_model: str = Field(..., description="OCR engine and language in use.")
    config: str = Field(..., description="Summary of the active limits and auth mode.")
