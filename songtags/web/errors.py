"""
Mapping from core exceptions to HTTP responses.

Status codes:
- NotFoundError (incl. LabelNotFoundError) -> 404
- ValidationError (incl. SuperLabelEmptyComponentsError) -> 400
- ConflictError -> 409

Anything else is left to the framework (500).
"""

from __future__ import annotations

import logging

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from songtags.core import ConflictError, CoreError, LabelNotFoundError, NotFoundError, ValidationError

logger = logging.getLogger(__name__)


def status_for(error: CoreError) -> int:
    if isinstance(error, NotFoundError):
        return 404
    if isinstance(error, ValidationError):
        return 400
    if isinstance(error, ConflictError):
        return 409
    return 500


def register_error_handlers(app: FastAPI) -> None:
    """Install a handler turning CoreError into `{"error": message}` responses."""

    @app.exception_handler(CoreError)
    async def core_error_handler(request: Request, exc: CoreError) -> JSONResponse:
        status = status_for(exc)
        body: dict[str, object] = {"error": str(exc)}
        if isinstance(exc, LabelNotFoundError):
            body["missingLabelIds"] = list(exc.missing_label_ids)
        logger.debug("%s %s -> %d: %s", request.method, request.url.path, status, exc)
        return JSONResponse(status_code=status, content=body)
