from typing import Any

from pydantic import BaseModel, ConfigDict, Field


class ParseRequest(BaseModel):
    """JSON payloads sent to /parse."""

    model_config = ConfigDict(extra="ignore")

    file_url: Any = Field(default=None, description="URL of the PDF to fetch and parse.")

    def resolved_url(self) -> str | None:
        """Return the URL if it is a non-empty string, otherwise None."""
        if isinstance(self.file_url, str) and self.file_url.strip():
            return self.file_url.strip()
        return None
