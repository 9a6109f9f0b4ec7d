"""
Label Mode Routes for songtags.

- /api/libraries/{library_id}/modes: mode CRUD
- /api/libraries/{library_id}/modes/{mode_id}/labels/{label_id}: attach/detach
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any

from fastapi import APIRouter, Body, HTTPException, Response

from songtags.web.serializers import (
    mode_deletion_to_dict,
    mode_detail_to_dict,
    mode_listing_to_dict,
    to_dict,
)

if TYPE_CHECKING:
    from songtags.core.modes import LabelModeService

logger = logging.getLogger(__name__)

router = APIRouter(tags=["modes"])

# References set during route registration
_mode_service: LabelModeService | None = None


def register_mode_routes(app, mode_service: LabelModeService) -> None:
    """
    Register label mode routes with the FastAPI app.

    Args:
        app: FastAPI application instance
        mode_service: LabelModeService backing the endpoints
    """
    global _mode_service
    _mode_service = mode_service
    app.include_router(router)


def _require_service() -> LabelModeService:
    if _mode_service is None:
        raise HTTPException(status_code=503, detail="Server not initialized")
    return _mode_service


@router.get("/api/libraries/{library_id}/modes")
async def list_modes(library_id: str) -> dict[str, Any]:
    listing = await _require_service().list_modes(library_id)
    return mode_listing_to_dict(listing)


@router.post("/api/libraries/{library_id}/modes", status_code=201)
async def create_mode(library_id: str, body: dict[str, Any] = Body(...)) -> dict[str, Any]:
    mode = await _require_service().create_mode(library_id, body.get("name"))
    return {"mode": to_dict(mode)}


@router.get("/api/libraries/{library_id}/modes/{mode_id}")
async def get_mode(library_id: str, mode_id: str) -> dict[str, Any]:
    detail = await _require_service().get_mode(library_id, mode_id)
    return mode_detail_to_dict(detail)


@router.delete("/api/libraries/{library_id}/modes/{mode_id}")
async def delete_mode(library_id: str, mode_id: str) -> dict[str, Any]:
    deletion = await _require_service().delete_mode(library_id, mode_id)
    return mode_deletion_to_dict(deletion)


@router.post("/api/libraries/{library_id}/modes/{mode_id}/labels/{label_id}")
async def attach_label(
    library_id: str, mode_id: str, label_id: str, response: Response
) -> dict[str, Any]:
    """Include a label in a mode. 201 when the edge is new, 200 when it already existed."""
    result = await _require_service().attach_label(library_id, mode_id, label_id)
    response.status_code = 201 if result.created else 200
    return {"modeLabel": to_dict(result.mode_label), "created": result.created}


@router.delete("/api/libraries/{library_id}/modes/{mode_id}/labels/{label_id}")
async def detach_label(library_id: str, mode_id: str, label_id: str) -> dict[str, Any]:
    deleted = await _require_service().detach_label(library_id, mode_id, label_id)
    return {"deletedJoinCount": deleted}
