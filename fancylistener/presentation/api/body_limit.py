"""Request body size limit — pure ASGI middleware.

Checks the declared ``Content-Length`` up front and counts the bytes that
actually arrive, so chunked uploads without a length are capped too.
"""

import logging

from fastapi import HTTPException, status
from starlette.datastructures import Headers
from starlette.responses import JSONResponse
from starlette.types import ASGIApp, Message, Receive, Scope, Send

logger = logging.getLogger(__name__)


class RequestBodyTooLarge(HTTPException):
    """Raised from ``receive`` once the streamed body passes the limit.

    Subclassing HTTPException lets FastAPI's body parsing re-raise it
    unchanged, so it reaches the application's exception handlers as a 413.
    """

    def __init__(self, limit: int):
        self.limit = limit
        super().__init__(
            status_code=status.HTTP_413_REQUEST_ENTITY_TOO_LARGE,
            detail="Request body too large",
        )


class BodySizeLimitMiddleware:
    """Answers 413 for bodies larger than ``max_bytes``."""

    def __init__(self, app: ASGIApp, max_bytes: int):
        self.app = app
        self.max_bytes = max_bytes

    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
        if scope["type"] != "http":
            await self.app(scope, receive, send)
            return

        declared = Headers(scope=scope).get("content-length")
        if declared is not None:
            try:
                size = int(declared)
            except ValueError:
                await _reject(scope, receive, send, status.HTTP_400_BAD_REQUEST, "Invalid Content-Length")
                return
            if size > self.max_bytes:
                logger.warning(
                    "Rejected %s %s: declared body of %d bytes exceeds %d",
                    scope["method"], scope["path"], size, self.max_bytes,
                )
                await _reject(
                    scope, receive, send,
                    status.HTTP_413_REQUEST_ENTITY_TOO_LARGE, "Request body too large",
                )
                return

        received = 0
        response_started = False

        async def limited_receive() -> Message:
            nonlocal received
            message = await receive()
            if message["type"] == "http.request":
                received += len(message.get("body", b""))
                if received > self.max_bytes:
                    logger.warning(
                        "Rejected %s %s: streamed body passed %d bytes",
                        scope["method"], scope["path"], self.max_bytes,
                    )
                    raise RequestBodyTooLarge(self.max_bytes)
            return message

        async def tracking_send(message: Message) -> None:
            nonlocal response_started
            if message["type"] == "http.response.start":
                response_started = True
            await send(message)

        try:
            await self.app(scope, limited_receive, tracking_send)
        except RequestBodyTooLarge:
            if response_started:
                raise
            await _reject(
                scope, receive, send,
                status.HTTP_413_REQUEST_ENTITY_TOO_LARGE, "Request body too large",
            )


async def _reject(scope: Scope, receive: Receive, send: Send, status_code: int, message: str) -> None:
    response = JSONResponse(status_code=status_code, content={"success": False, "message": message})
    await response(scope, receive, send)
