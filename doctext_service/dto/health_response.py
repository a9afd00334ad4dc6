from pydantic import BaseModel, Field


class HealthResponse(BaseModel):
    """Response payload for the / and /healthz endpoints."""

    ok: bool = Field(True, description="Always true while the process is serving.")
    service: str = Field(..., description="Service display name.")
    endpoints: dict[str, str] = Field(..., description="Available endpoints keyed by purpose.")
