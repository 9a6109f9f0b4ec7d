"""
Label and Tagging Routes for songtags.

- /api/libraries/{library_id}/labels: REGULAR/SUPER label management
- /api/libraries/{library_id}/songs/{song_id}/labels: tagging
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any

from fastapi import APIRouter, Body, HTTPException, Response

from songtags.core import ValidationError
from songtags.web.serializers import (
    label_deletion_to_dict,
    label_detail_to_dict,
    label_to_dict,
    to_dict,
)

if TYPE_CHECKING:
    from songtags.core.labels import LabelService
    from songtags.core.libraries import LibraryService
    from songtags.core.tagging import TaggingService

logger = logging.getLogger(__name__)

router = APIRouter(tags=["labels"])

# References set during route registration
_library_service: LibraryService | None = None
_label_service: LabelService | None = None
_tagging_service: TaggingService | None = None


def register_label_routes(
    app,
    library_service: LibraryService,
    label_service: LabelService,
    tagging_service: TaggingService,
) -> None:
    """
    Register label and tagging routes with the FastAPI app.

    Args:
        app: FastAPI application instance
        library_service: LibraryService used to resolve libraries
        label_service: LabelService for label CRUD
        tagging_service: TaggingService for song/label edges
    """
    global _library_service, _label_service, _tagging_service
    _library_service = library_service
    _label_service = label_service
    _tagging_service = tagging_service
    app.include_router(router)


def _require_services() -> tuple[LibraryService, LabelService, TaggingService]:
    if _library_service is None or _label_service is None or _tagging_service is None:
        raise HTTPException(status_code=503, detail="Server not initialized")
    return _library_service, _label_service, _tagging_service


def _component_ids(body: dict[str, Any]) -> list[str] | None:
    ids = body.get("componentLabelIds")
    if ids is None:
        return None
    if not isinstance(ids, list) or not all(isinstance(x, str) for x in ids):
        raise ValidationError("componentLabelIds must be a non-empty array")
    return ids


# =============================================================================
# Labels
# =============================================================================


@router.get("/api/libraries/{library_id}/labels")
async def list_labels(library_id: str, type: str | None = None) -> dict[str, Any]:
    libraries, labels, _ = _require_services()
    await libraries.get_library(library_id)
    rows = await labels.list_labels(library_id, label_type=type)
    return {"count": len(rows), "labels": [label_to_dict(label) for label in rows]}


@router.post("/api/libraries/{library_id}/labels", status_code=201)
async def create_regular_label(library_id: str, body: dict[str, Any] = Body(...)) -> dict[str, Any]:
    _, labels, _ = _require_services()
    label = await labels.create_regular_label(library_id, body.get("name"))
    return {"label": label_to_dict(label)}


@router.post("/api/libraries/{library_id}/labels/super", status_code=201)
async def create_super_label(library_id: str, body: dict[str, Any] = Body(...)) -> dict[str, Any]:
    _, labels, _ = _require_services()
    detail = await labels.create_super_label(library_id, body.get("name"), _component_ids(body))
    return label_detail_to_dict(detail)


@router.get("/api/libraries/{library_id}/labels/{label_id}")
async def get_label(library_id: str, label_id: str) -> dict[str, Any]:
    _, labels, _ = _require_services()
    detail = await labels.get_label(library_id, label_id)
    return label_detail_to_dict(detail)


@router.put("/api/libraries/{library_id}/labels/{label_id}/components")
async def replace_components(
    library_id: str, label_id: str, body: dict[str, Any] = Body(...)
) -> dict[str, Any]:
    _, labels, _ = _require_services()
    detail = await labels.replace_super_components(library_id, label_id, _component_ids(body))
    return label_detail_to_dict(detail)


@router.delete("/api/libraries/{library_id}/labels/{label_id}")
async def delete_label(library_id: str, label_id: str) -> dict[str, Any]:
    _, labels, _ = _require_services()
    deletion = await labels.delete_label(library_id, label_id)
    return label_deletion_to_dict(deletion)


# =============================================================================
# Tagging
# =============================================================================


@router.get("/api/libraries/{library_id}/songs/{song_id}/labels")
async def get_song_labels(library_id: str, song_id: str) -> dict[str, Any]:
    _, _, tagging = _require_services()
    edges = await tagging.get_song_labels(library_id, song_id)
    return {"count": len(edges), "songLabels": [to_dict(e) for e in edges]}


@router.post("/api/libraries/{library_id}/songs/{song_id}/labels/{label_id}")
async def add_song_label(
    library_id: str, song_id: str, label_id: str, response: Response
) -> dict[str, Any]:
    """Tag a song. 201 when the edge is new, 200 when it already existed."""
    _, _, tagging = _require_services()
    result = await tagging.add_label_to_song(library_id, song_id, label_id)
    response.status_code = 201 if result.created else 200
    return {"songLabel": to_dict(result.song_label)}


@router.delete("/api/libraries/{library_id}/songs/{song_id}/labels/{label_id}")
async def remove_song_label(library_id: str, song_id: str, label_id: str) -> dict[str, Any]:
    _, _, tagging = _require_services()
    deleted = await tagging.remove_label_from_song(library_id, song_id, label_id)
    return {"deleted": True, "deletedJoinCount": deleted}
