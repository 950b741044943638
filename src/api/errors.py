"""Translation of domain errors into HTTP responses."""

import logging

from fastapi import Request
from fastapi.responses import JSONResponse

from src.core.exceptions import AIGenerationError, PortfolError

logger = logging.getLogger(__name__)


async def portfol_error_handler(request: Request, exc: PortfolError) -> JSONResponse:
    """
    Map a domain error to its status code.

    AI failures use the ``{"error": ...}`` body the stream consumer expects;
    everything else follows FastAPI's ``{"detail": ...}`` shape.
    """
    if exc.status_code >= 500:
        logger.error(f"{request.method} {request.url.path} failed: {exc.message}")
    else:
        logger.warning(f"{request.method} {request.url.path}: {exc.message}")

    if isinstance(exc, AIGenerationError):
        return JSONResponse(status_code=exc.status_code, content={"error": exc.message})
    return JSONResponse(status_code=exc.status_code, content={"detail": exc.message})
