"""
This file is used to create a FastAPI application that will be served by a ASGI server
"""
import uvicorn

from doctext_service.app import create_app
from doctext_service.settings import get_settings

settings = get_settings()

app = create_app(settings)

if __name__ == "__main__":
    uvicorn.run(app, host="0.0.0.0", port=settings.PORT, reload=False)
