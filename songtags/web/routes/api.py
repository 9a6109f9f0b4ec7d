"""
REST API Routes for songtags.

Provides REST endpoints for the web UI and external integrations:
- /api/status: Server status
- /api/libraries: Library creation, lookup and bootstrap
- /api/libraries/{library_id}/songs: Song CRUD
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any, get_args

from fastapi import APIRouter, Body, HTTPException

from songtags import __version__
from songtags.core import ValidationError
from songtags.core.db.models import NewSong
from songtags.core.db.ordering import SongsOrderBy
from songtags.web.serializers import (
    bootstrap_to_dict,
    library_to_dict,
    song_deletion_to_dict,
    to_dict,
)

if TYPE_CHECKING:
    from songtags.core.libraries import LibraryService
    from songtags.core.library_db import LibraryDb
    from songtags.core.songs import SongService

logger = logging.getLogger(__name__)

router = APIRouter(tags=["api"])

# References set during route registration
_db: LibraryDb | None = None
_library_service: LibraryService | None = None
_song_service: SongService | None = None

_SONG_ORDERINGS: tuple[str, ...] = get_args(SongsOrderBy)
_SONG_PATCH_FIELDS = ("displayTitle", "displayArtist")


def register_api_routes(
    app,
    db: LibraryDb,
    library_service: LibraryService,
    song_service: SongService,
) -> None:
    """
    Register API routes with the FastAPI app.

    Args:
        app: FastAPI application instance
        db: LibraryDb, used for status reporting
        library_service: LibraryService for library endpoints
        song_service: SongService for song endpoints
    """
    global _db, _library_service, _song_service
    _db = db
    _library_service = library_service
    _song_service = song_service
    app.include_router(router)


def _require_services() -> tuple[LibraryService, SongService]:
    if _library_service is None or _song_service is None:
        raise HTTPException(status_code=503, detail="Server not initialized")
    return _library_service, _song_service


def _optional_str(payload: dict[str, Any], key: str) -> str | None:
    value = payload.get(key)
    if value is not None and not isinstance(value, str):
        raise ValidationError(f"{key} must be a string")
    return value


def new_song_from_payload(payload: dict[str, Any]) -> NewSong:
    """Build a NewSong from a camelCase request payload."""
    metadata = payload.get("metadata")
    if metadata is None:
        metadata = {}
    if not isinstance(metadata, dict):
        raise ValidationError("metadata must be an object")

    return NewSong(
        display_title=_optional_str(payload, "displayTitle") or "",
        display_artist=_optional_str(payload, "displayArtist") or "",
        official_title=_optional_str(payload, "officialTitle"),
        official_artist=_optional_str(payload, "officialArtist"),
        metadata=metadata,
    )


def song_patch_from_payload(payload: dict[str, Any]) -> dict[str, str | None]:
    """Validate a song update payload; only display fields may change."""
    unknown = [key for key in payload if key not in _SONG_PATCH_FIELDS]
    if unknown:
        raise ValidationError(
            f"Unknown fields: {', '.join(unknown)}. Allowed: {', '.join(_SONG_PATCH_FIELDS)}"
        )
    return {
        "display_title": _optional_str(payload, "displayTitle"),
        "display_artist": _optional_str(payload, "displayArtist"),
    }


# =============================================================================
# Server Status
# =============================================================================


@router.get("/api/status")
async def server_status() -> dict[str, Any]:
    """Get server status and basic info."""
    if _db is None:
        raise HTTPException(status_code=503, detail="Server not initialized")

    return {
        "server": "songtags",
        "version": __version__,
        "database_open": _db.is_open,
    }


# =============================================================================
# Libraries
# =============================================================================


@router.post("/api/libraries", status_code=201)
async def create_library(body: dict[str, Any] | None = Body(default=None)) -> dict[str, Any]:
    libraries, _ = _require_services()
    name = (body or {}).get("name")
    library = await libraries.create_library(name)
    return {"library": library_to_dict(library)}


@router.get("/api/libraries/{library_id}")
async def get_library(library_id: str) -> dict[str, Any]:
    libraries, _ = _require_services()
    library = await libraries.get_library(library_id)
    return {"library": library_to_dict(library)}


@router.get("/api/libraries/{library_id}/bootstrap")
async def get_bootstrap(library_id: str) -> dict[str, Any]:
    """Library with all songs, labels, modes and join rows."""
    libraries, _ = _require_services()
    bootstrap = await libraries.get_bootstrap(library_id)
    return bootstrap_to_dict(bootstrap)


# =============================================================================
# Songs
# =============================================================================


@router.post("/api/libraries/{library_id}/songs", status_code=201)
async def create_song(library_id: str, body: dict[str, Any] = Body(...)) -> dict[str, Any]:
    _, songs = _require_services()
    song = await songs.create_song(library_id, new_song_from_payload(body))
    return {"song": to_dict(song)}


@router.get("/api/libraries/{library_id}/songs")
async def list_songs(library_id: str, order_by: str = "title") -> dict[str, Any]:
    libraries, songs = _require_services()
    if order_by not in _SONG_ORDERINGS:
        raise ValidationError(f"order_by must be one of: {', '.join(_SONG_ORDERINGS)}")

    await libraries.get_library(library_id)
    rows = await songs.list_songs(library_id, order_by=order_by)
    return {"count": len(rows), "songs": [to_dict(s) for s in rows]}


@router.get("/api/libraries/{library_id}/songs/{song_id}")
async def get_song(library_id: str, song_id: str) -> dict[str, Any]:
    _, songs = _require_services()
    song = await songs.get_song(library_id, song_id)
    return {"song": to_dict(song)}


@router.put("/api/libraries/{library_id}/songs/{song_id}")
async def update_song(
    library_id: str, song_id: str, body: dict[str, Any] = Body(...)
) -> dict[str, Any]:
    _, songs = _require_services()
    song = await songs.update_song(library_id, song_id, **song_patch_from_payload(body))
    return {"song": to_dict(song)}


@router.delete("/api/libraries/{library_id}/songs/{song_id}")
async def delete_song(library_id: str, song_id: str) -> dict[str, Any]:
    _, songs = _require_services()
    deletion = await songs.delete_song(library_id, song_id)
    return song_deletion_to_dict(deletion)
