"""
Filter Routes for songtags.

- POST /api/libraries/{library_id}/songs/filter: AND-filter songs by labels
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any

from fastapi import APIRouter, Body, HTTPException

from songtags.core import ValidationError
from songtags.web.serializers import filter_result_to_dict

if TYPE_CHECKING:
    from songtags.core.filtering import FilterEngine
    from songtags.core.libraries import LibraryService

logger = logging.getLogger(__name__)

router = APIRouter(tags=["filter"])

# References set during route registration
_filter_engine: FilterEngine | None = None
_library_service: LibraryService | None = None


def register_filter_routes(
    app,
    filter_engine: FilterEngine,
    library_service: LibraryService,
) -> None:
    """
    Register filter routes with the FastAPI app.

    Args:
        app: FastAPI application instance
        filter_engine: FilterEngine used to evaluate selections
        library_service: LibraryService used to resolve the library
    """
    global _filter_engine, _library_service
    _filter_engine = filter_engine
    _library_service = library_service
    app.include_router(router)


def parse_label_ids(body: dict[str, Any] | None) -> list[str]:
    """
    Extract `labelIds` from a filter request body.

    A missing body, missing key, or null value means "no filter".
    """
    if body is None:
        return []
    label_ids = body.get("labelIds")
    if label_ids is None:
        return []
    if not isinstance(label_ids, list) or not all(isinstance(x, str) for x in label_ids):
        raise ValidationError("labelIds must be an array of strings")
    return label_ids


@router.post("/api/libraries/{library_id}/songs/filter")
async def filter_songs(
    library_id: str,
    body: dict[str, Any] | None = Body(default=None),
) -> dict[str, Any]:
    """Return songs carrying every label in the selection (SUPER labels expanded)."""
    if _filter_engine is None or _library_service is None:
        raise HTTPException(status_code=503, detail="Server not initialized")

    label_ids = parse_label_ids(body)
    await _library_service.get_library(library_id)

    result = await _filter_engine.filter_songs_by_labels(library_id, label_ids)
    return filter_result_to_dict(result)
