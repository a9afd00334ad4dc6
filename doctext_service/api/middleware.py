from fastapi.responses import ORJSONResponse
from starlette.datastructures import Headers
from starlette.types import ASGIApp, Message, Receive, Scope, Send

from doctext_service.utils.errors import ClientInputError

_BODY_METHODS = frozenset({"POST", "PUT", "PATCH"})


class UploadSizeLimitMiddleware:
    """Rejects request bodies larger than `max_body_size` before routing.

    The declared Content-Length is checked up front; chunked bodies are
    counted as they are received and fail the request once over the limit.
    """

    def __init__(self, app: ASGIApp, max_body_size: int, error_message: str) -> None:
        self.app = app
        self.max_body_size = max_body_size
        self.error_message = error_message

    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
        if scope["type"] != "http" or scope["method"] not in _BODY_METHODS:
            await self.app(scope, receive, send)
            return

        content_length = Headers(scope=scope).get("content-length")
        if content_length is not None and content_length.isdigit() and int(content_length) > self.max_body_size:
            response = ORJSONResponse(status_code=400, content={"error": self.error_message})
            await response(scope, receive, send)
            return

        received = 0

        async def limited_receive() -> Message:
            nonlocal received
            message = await receive()
            if message["type"] == "http.request":
                received += len(message.get("body", b""))
                if received > self.max_body_size:
                    raise ClientInputError(self.error_message)
            return message

        await self.app(scope, limited_receive, send)
