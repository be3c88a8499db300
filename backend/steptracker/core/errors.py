"""Error taxonomy shared by the tracking core and the HTTP layer.

The core raises these; `register_exception_handlers` turns them into the same
`{"detail": ...}` bodies FastAPI produces for `HTTPException`.
"""
import logging

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

logger = logging.getLogger(__name__)


class TrackerError(Exception):
    status_code = 400

    def __init__(self, detail: str):
        super().__init__(detail)
        self.detail = detail


class InvalidStateError(TrackerError):
    """A session transition was attempted from the wrong phase."""

    status_code = 409


class ValidationError(TrackerError):
    """Malformed input at the boundary (dates, coordinates, counts)."""

    status_code = 422


def register_exception_handlers(app: FastAPI) -> None:
    @app.exception_handler(TrackerError)
    async def _tracker_error(request: Request, exc: TrackerError):
        logger.info("%s %s -> %s: %s", request.method, request.url.path, exc.status_code, exc.detail)
        return JSONResponse(status_code=exc.status_code, content={"detail": exc.detail})
