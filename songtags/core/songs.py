from __future__ import annotations

import logging
import uuid
from dataclasses import dataclass
from typing import Mapping

import aiosqlite

from songtags.core import ConflictError, NotFoundError, ValidationError
from songtags.core.db.models import NewSong, SongRow, normalize_name, normalize_text, song_norm_key
from songtags.core.db.ordering import SongsOrderBy
from songtags.core.library_db import LibraryDb

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class SongDeletion:
    deleted_song_id: str
    song_labels: int


def new_song_id() -> str:
    return f"song_{uuid.uuid4()}"


def build_song_row(library_id: str, song_id: str, song: NewSong) -> SongRow:
    """
    Materialize a SongRow with derived normalized fields.

    Normalization prefers the official title/artist when present, falling
    back to the display values.
    """
    display_title = normalize_text(song.display_title)
    display_artist = normalize_text(song.display_artist)
    if display_title is None or display_artist is None:
        raise ValidationError("displayTitle and displayArtist are required")

    official_title = normalize_text(song.official_title)
    official_artist = normalize_text(song.official_artist)
    title_for_norm = official_title or display_title
    artist_for_norm = official_artist or display_artist

    return SongRow(
        library_id=library_id,
        song_id=song_id,
        display_title=display_title,
        display_artist=display_artist,
        official_title=official_title,
        official_artist=official_artist,
        norm_title=normalize_name(title_for_norm),
        norm_artist=normalize_name(artist_for_norm),
        norm_key=song_norm_key(title_for_norm, artist_for_norm),
        metadata=dict(song.metadata),
    )


class SongService:
    def __init__(self, *, db: LibraryDb) -> None:
        self._db = db

    async def create_song(self, library_id: str, song: NewSong) -> SongRow:
        if await self._db.get_library(library_id) is None:
            raise NotFoundError("Library not found")
        if not isinstance(song.metadata, Mapping):
            raise ValidationError("metadata must be an object")

        row = build_song_row(library_id, new_song_id(), song)
        if not row.norm_key:
            raise ValidationError("title/artist must contain at least one letter or digit")

        if await self._db.get_song_by_norm_key(library_id, row.norm_key) is not None:
            raise ConflictError("A song with this title and artist already exists in this library")
        try:
            await self._db.insert_song(row)
        except aiosqlite.IntegrityError as e:
            raise ConflictError(
                "A song with this title and artist already exists in this library"
            ) from e

        logger.info("Created song %s (%s - %s)", row.song_id, row.display_artist, row.display_title)
        return row

    async def get_song(self, library_id: str, song_id: str) -> SongRow:
        song = await self._db.get_song(library_id, song_id)
        if song is None:
            raise NotFoundError("Song not found in this library")
        return song

    async def list_songs(
        self, library_id: str, *, order_by: SongsOrderBy = "title"
    ) -> list[SongRow]:
        return await self._db.list_songs(library_id, order_by=order_by)

    async def update_song(
        self,
        library_id: str,
        song_id: str,
        *,
        display_title: str | None = None,
        display_artist: str | None = None,
    ) -> SongRow:
        """
        Edit a song's display fields and recompute its normalized key.

        Fields left as None keep their current value. Raises ConflictError
        when the new key collides with another song in the library.
        """
        current = await self.get_song(library_id, song_id)

        if display_title is not None and normalize_text(display_title) is None:
            raise ValidationError("displayTitle must be a non-empty string")
        if display_artist is not None and normalize_text(display_artist) is None:
            raise ValidationError("displayArtist must be a non-empty string")

        row = build_song_row(
            library_id,
            song_id,
            NewSong(
                display_title=display_title or current.display_title,
                display_artist=display_artist or current.display_artist,
                official_title=current.official_title,
                official_artist=current.official_artist,
                metadata=current.metadata,
            ),
        )
        if not row.norm_key:
            raise ValidationError("title/artist must contain at least one letter or digit")

        existing = await self._db.get_song_by_norm_key(library_id, row.norm_key)
        if existing is not None and existing.song_id != song_id:
            raise ConflictError("Update would create a duplicate song in this library")
        try:
            updated = await self._db.update_song(row)
        except aiosqlite.IntegrityError as e:
            raise ConflictError("Update would create a duplicate song in this library") from e
        if not updated:
            raise NotFoundError("Song not found in this library")

        logger.info("Updated song %s (%s - %s)", song_id, row.display_artist, row.display_title)
        return row

    async def delete_song(self, library_id: str, song_id: str) -> SongDeletion:
        """Delete a song together with its label edges."""
        await self.get_song(library_id, song_id)
        counts = await self._db.delete_song(library_id, song_id)
        if not counts["songs"]:
            raise NotFoundError("Song not found in this library")

        logger.info("Deleted song %s from %s: %s", song_id, library_id, counts)
        return SongDeletion(deleted_song_id=song_id, song_labels=counts["song_labels"])
