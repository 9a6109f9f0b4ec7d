"""
Attaching and detaching labels to/from songs.

Only REGULAR labels are stored on songs. SUPER labels are rejected; they
exist only as filter shorthands that expand to their components.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass

from songtags.core import NotFoundError, ValidationError
from songtags.core.db.models import SongLabelRow, SuperLabel
from songtags.core.library_db import LibraryDb

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class TagResult:
    """Outcome of a tagging call; `created` is False when the edge already existed."""

    song_label: SongLabelRow
    created: bool


class TaggingService:
    def __init__(self, *, db: LibraryDb) -> None:
        self._db = db

    async def add_label_to_song(self, library_id: str, song_id: str, label_id: str) -> TagResult:
        """
        Tag a song with a REGULAR label. Idempotent: tagging twice keeps one edge.
        """
        if await self._db.get_song(library_id, song_id) is None:
            raise NotFoundError("Song not found in this library")

        label = await self._db.get_label(library_id, label_id)
        if label is None:
            raise NotFoundError("Label not found in this library")
        if isinstance(label, SuperLabel):
            raise ValidationError(
                "Cannot attach SUPER labels to songs. Only REGULAR labels are allowed."
            )

        created = await self._db.add_song_label(library_id, song_id, label_id)
        if created:
            logger.debug("Tagged song %s with %s", song_id, label_id)
        return TagResult(
            song_label=SongLabelRow(library_id=library_id, song_id=song_id, label_id=label_id),
            created=created,
        )

    async def remove_label_from_song(self, library_id: str, song_id: str, label_id: str) -> int:
        """Remove a tag. Returns the number of deleted edges (0 or 1)."""
        deleted = await self._db.remove_song_label(library_id, song_id, label_id)
        if deleted:
            logger.debug("Untagged song %s from %s", song_id, label_id)
        return deleted

    async def get_song_labels(self, library_id: str, song_id: str) -> list[SongLabelRow]:
        return await self._db.list_song_labels(library_id, song_id)
