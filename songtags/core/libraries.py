from __future__ import annotations

import logging
import uuid
from dataclasses import dataclass

from songtags.core import NotFoundError, ValidationError
from songtags.core.db.models import (
    Label,
    LabelModeLabelRow,
    LabelModeRow,
    LibraryRow,
    SongLabelRow,
    SongRow,
    SuperLabelComponentRow,
    normalize_text,
)
from songtags.core.library_db import LibraryDb

logger = logging.getLogger(__name__)

DEFAULT_LIBRARY_NAME = "My Library"


@dataclass(frozen=True, slots=True)
class LibraryBootstrap:
    """Everything a client needs to render one library, loaded in one call."""

    library: LibraryRow
    songs: tuple[SongRow, ...]
    labels: tuple[Label, ...]
    song_labels: tuple[SongLabelRow, ...]
    super_label_components: tuple[SuperLabelComponentRow, ...]
    label_modes: tuple[LabelModeRow, ...]
    label_mode_labels: tuple[LabelModeLabelRow, ...]


def new_library_id() -> str:
    return f"lib_{uuid.uuid4()}"


class LibraryService:
    """Creates libraries and resolves library ids for the other services."""

    def __init__(self, *, db: LibraryDb) -> None:
        self._db = db

    async def create_library(self, name: str | None = None) -> LibraryRow:
        if name is not None and not isinstance(name, str):
            raise ValidationError("name must be a string")
        clean_name = normalize_text(name) or DEFAULT_LIBRARY_NAME
        library = await self._db.create_library(new_library_id(), clean_name)
        logger.info("Created library %s (%s)", library.library_id, library.name)
        return library

    async def get_library(self, library_id: str) -> LibraryRow:
        library = await self._db.get_library(library_id)
        if library is None:
            raise NotFoundError("Library not found")
        return library

    async def list_libraries(self) -> list[LibraryRow]:
        return await self._db.list_libraries()

    async def get_bootstrap(self, library_id: str) -> LibraryBootstrap:
        """Load a library with all of its songs, labels, modes, and edges."""
        library = await self.get_library(library_id)
        return LibraryBootstrap(
            library=library,
            songs=tuple(await self._db.list_songs(library_id)),
            labels=tuple(await self._db.list_labels(library_id)),
            song_labels=tuple(await self._db.list_library_song_labels(library_id)),
            super_label_components=tuple(await self._db.list_library_components(library_id)),
            label_modes=tuple(await self._db.list_modes(library_id)),
            label_mode_labels=tuple(await self._db.list_mode_labels(library_id)),
        )
