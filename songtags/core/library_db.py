"""
Song/label library database access layer.

Goals:
- SQLite + aiosqlite, async/await friendly.
- Keep schema small, but leave room to evolve (via user_version migrations).
- Implement the read contracts the filtering engine consumes
  (see `songtags.core.store.LabelStore`).

This module is intentionally independent of the web layer.

Note:
- Models/DTOs and normalization helpers live in `songtags.core.db.models`
- Schema/migrations live in `songtags.core.db.schema`
- Query functions live in `songtags.core.db.queries_*` modules
- `LibraryDb` remains the public facade used by the rest of the codebase
"""

from __future__ import annotations

import asyncio
from contextlib import asynccontextmanager
from pathlib import Path
from typing import Any, AsyncIterator, Iterable, Mapping, Sequence

import aiosqlite

from songtags.core.db import (
    queries_labels,
    queries_libraries,
    queries_modes,
    queries_songs,
    queries_tagging,
)
from songtags.core.db.models import (
    Label,
    LabelModeLabelRow,
    LabelModeRow,
    LabelType,
    LibraryRow,
    SongLabelRow,
    SongRow,
    SuperLabelComponentRow,
)
from songtags.core.db.ordering import LabelsOrderBy, SongsOrderBy
from songtags.core.db.schema import ensure_schema as ensure_schema_sql

__all__ = [
    "LabelModeLabelRow",
    "LabelModeRow",
    "LibraryDb",
    "LibraryRow",
    "SongRow",
    "SongLabelRow",
    "SuperLabelComponentRow",
]


class LibraryDb:
    """
    Async access layer for the song/label DB.

    Usage:
        db = LibraryDb("songtags.db")
        await db.open()
        await db.ensure_schema()
        ... queries ...
        await db.close()

    Notes:
    - This class is designed to be injected into other components.
    - Connections are not pooled; for now we keep a single connection.
    - Writes are serialized by a lock and run inside one savepoint each:
      committed on success, rolled back on failure. Concurrent requests
      share the connection, so no write may commit while another holds
      a savepoint open.
    """

    def __init__(self, db_path: str | Path) -> None:
        self._db_path = str(db_path)
        self._conn: aiosqlite.Connection | None = None
        self._write_lock = asyncio.Lock()

    @property
    def is_open(self) -> bool:
        return self._conn is not None

    @property
    def path(self) -> str:
        return self._db_path

    async def open(self) -> None:
        if self._conn is not None:
            return
        self._conn = await aiosqlite.connect(self._db_path)
        self._conn.row_factory = aiosqlite.Row

        await self._conn.execute("PRAGMA foreign_keys = ON;")
        await self._conn.execute("PRAGMA journal_mode = WAL;")
        await self._conn.execute("PRAGMA synchronous = NORMAL;")

    async def close(self) -> None:
        if self._conn is None:
            return
        async with self._write_lock:
            await self._conn.close()
            self._conn = None

    def _require_conn(self) -> aiosqlite.Connection:
        if self._conn is None:
            raise RuntimeError("LibraryDb is not open. Call await db.open() first.")
        return self._conn

    @asynccontextmanager
    async def _transaction(self) -> AsyncIterator[aiosqlite.Connection]:
        """Hold the write lock across one savepoint and its commit."""
        conn = self._require_conn()
        async with self._write_lock:
            await conn.execute("SAVEPOINT write_sp;")
            try:
                yield conn
            except BaseException:
                await conn.execute("ROLLBACK TO SAVEPOINT write_sp;")
                await conn.execute("RELEASE SAVEPOINT write_sp;")
                raise
            await conn.execute("RELEASE SAVEPOINT write_sp;")
            await conn.commit()

    async def ensure_schema(self) -> None:
        """Create or migrate schema to current version."""
        conn = self._require_conn()
        async with self._write_lock:
            await ensure_schema_sql(conn)

    async def execute(self, sql: str, params: Sequence[Any] | Mapping[str, Any] = ()) -> None:
        """Run a single statement in its own committed transaction."""
        async with self._transaction() as conn:
            await conn.execute(sql, params)

    # ===========================================================================
    # Libraries
    # ===========================================================================

    async def create_library(self, library_id: str, name: str) -> LibraryRow:
        async with self._transaction() as conn:
            await queries_libraries.insert_library(conn, library_id, name)
        row = await self.get_library(library_id)
        if row is None:
            raise RuntimeError(f"Library {library_id} vanished right after insert.")
        return row

    async def get_library(self, library_id: str) -> LibraryRow | None:
        return await queries_libraries.get_library(self._require_conn(), library_id)

    async def list_libraries(self) -> list[LibraryRow]:
        return await queries_libraries.list_libraries(self._require_conn())

    # ===========================================================================
    # Songs
    # ===========================================================================

    async def insert_song(self, song: SongRow) -> None:
        async with self._transaction() as conn:
            await queries_songs.insert_song(conn, song)

    async def update_song(self, song: SongRow) -> bool:
        """Overwrite an existing song's fields. Returns False if it does not exist."""
        async with self._transaction() as conn:
            updated = await queries_songs.update_song(conn, song)
        return updated > 0

    async def delete_song(self, library_id: str, song_id: str) -> dict[str, int]:
        """
        Delete a song and its label edges.

        Returns per-table deletion counts.
        """
        async with self._transaction() as conn:
            song_labels = await queries_tagging.delete_song_labels_for_song(
                conn, library_id, song_id
            )
            songs = await queries_songs.delete_song(conn, library_id, song_id)
        return {"songs": songs, "song_labels": song_labels}

    async def get_song(self, library_id: str, song_id: str) -> SongRow | None:
        return await queries_songs.get_song(self._require_conn(), library_id, song_id)

    async def get_song_by_norm_key(self, library_id: str, norm_key: str) -> SongRow | None:
        return await queries_songs.get_song_by_norm_key(self._require_conn(), library_id, norm_key)

    async def list_songs(
        self, library_id: str, *, order_by: SongsOrderBy = "title"
    ) -> list[SongRow]:
        return await queries_songs.list_songs(self._require_conn(), library_id, order_by=order_by)

    async def count_songs(self, library_id: str) -> int:
        return await queries_songs.count_songs(self._require_conn(), library_id)

    # ===========================================================================
    # Labels
    # ===========================================================================

    async def get_label(self, library_id: str, label_id: str) -> Label | None:
        return await queries_labels.get_label(self._require_conn(), library_id, label_id)

    async def get_label_by_norm_name(self, library_id: str, norm_name: str) -> Label | None:
        return await queries_labels.get_label_by_norm_name(
            self._require_conn(), library_id, norm_name
        )

    async def list_labels(
        self,
        library_id: str,
        *,
        label_type: LabelType | None = None,
        order_by: LabelsOrderBy = "name",
    ) -> list[Label]:
        return await queries_labels.list_labels(
            self._require_conn(), library_id, label_type=label_type, order_by=order_by
        )

    async def insert_label(
        self, label: Label, *, component_label_ids: Iterable[str] = ()
    ) -> None:
        """Insert a label and (for SUPER labels) its component edges atomically."""
        async with self._transaction() as conn:
            await queries_labels.insert_label(conn, label)
            await queries_labels.insert_components(
                conn, label.library_id, label.label_id, component_label_ids
            )

    async def replace_super_label_components(
        self, library_id: str, super_label_id: str, regular_label_ids: Iterable[str]
    ) -> list[SuperLabelComponentRow]:
        async with self._transaction() as conn:
            await queries_labels.delete_components_of_super(conn, library_id, super_label_id)
            await queries_labels.insert_components(
                conn, library_id, super_label_id, regular_label_ids
            )
        return await self.find_super_label_components(library_id, super_label_id)

    async def delete_label(self, label: Label) -> dict[str, int]:
        """
        Delete a label and every edge that references it.

        Returns per-table deletion counts.
        """
        library_id, label_id = label.library_id, label.label_id

        song_labels = 0
        async with self._transaction() as conn:
            if label.type is LabelType.REGULAR:
                song_labels = await queries_tagging.delete_song_labels_for_label(
                    conn, library_id, label_id
                )
                components = await queries_labels.delete_components_using_regular(
                    conn, library_id, label_id
                )
            else:
                components = await queries_labels.delete_components_of_super(
                    conn, library_id, label_id
                )
            mode_labels = await queries_modes.delete_mode_labels_for_label(
                conn, library_id, label_id
            )
            await queries_labels.delete_label(conn, library_id, label_id)

        return {
            "song_labels": song_labels,
            "super_label_components": components,
            "label_mode_labels": mode_labels,
        }

    async def list_library_components(self, library_id: str) -> list[SuperLabelComponentRow]:
        return await queries_labels.list_library_components(self._require_conn(), library_id)

    # ===========================================================================
    # Tagging
    # ===========================================================================

    async def add_song_label(self, library_id: str, song_id: str, label_id: str) -> bool:
        async with self._transaction() as conn:
            return await queries_tagging.insert_song_label(conn, library_id, song_id, label_id)

    async def remove_song_label(self, library_id: str, song_id: str, label_id: str) -> int:
        async with self._transaction() as conn:
            return await queries_tagging.delete_song_label(conn, library_id, song_id, label_id)

    async def list_song_labels(self, library_id: str, song_id: str) -> list[SongLabelRow]:
        return await queries_tagging.list_song_labels(self._require_conn(), library_id, song_id)

    async def list_library_song_labels(self, library_id: str) -> list[SongLabelRow]:
        return await queries_tagging.list_library_song_labels(self._require_conn(), library_id)

    # ===========================================================================
    # Label modes
    # ===========================================================================

    async def insert_mode(self, mode: LabelModeRow) -> None:
        async with self._transaction() as conn:
            await queries_modes.insert_mode(conn, mode)

    async def get_mode(self, library_id: str, mode_id: str) -> LabelModeRow | None:
        return await queries_modes.get_mode(self._require_conn(), library_id, mode_id)

    async def get_mode_by_norm_name(self, library_id: str, norm_name: str) -> LabelModeRow | None:
        return await queries_modes.get_mode_by_norm_name(
            self._require_conn(), library_id, norm_name
        )

    async def list_modes(self, library_id: str) -> list[LabelModeRow]:
        return await queries_modes.list_modes(self._require_conn(), library_id)

    async def delete_mode(self, library_id: str, mode_id: str) -> dict[str, int]:
        """Delete a mode and its label edges. Returns per-table deletion counts."""
        async with self._transaction() as conn:
            mode_labels = await queries_modes.delete_mode_labels_for_mode(
                conn, library_id, mode_id
            )
            await queries_modes.delete_mode(conn, library_id, mode_id)
        return {"mode_labels": mode_labels}

    async def add_mode_label(self, library_id: str, mode_id: str, label_id: str) -> bool:
        async with self._transaction() as conn:
            return await queries_modes.insert_mode_label(conn, library_id, mode_id, label_id)

    async def remove_mode_label(self, library_id: str, mode_id: str, label_id: str) -> int:
        async with self._transaction() as conn:
            return await queries_modes.delete_mode_label(conn, library_id, mode_id, label_id)

    async def list_mode_labels(
        self, library_id: str, mode_id: str | None = None
    ) -> list[LabelModeLabelRow]:
        return await queries_modes.list_mode_labels(self._require_conn(), library_id, mode_id)

    # ===========================================================================
    # Filtering read contracts (LabelStore)
    # ===========================================================================

    async def find_labels_by_ids(self, library_id: str, label_ids: Sequence[str]) -> list[Label]:
        return await queries_labels.find_labels_by_ids(self._require_conn(), library_id, label_ids)

    async def find_super_label_components(
        self, library_id: str, super_label_id: str
    ) -> list[SuperLabelComponentRow]:
        return await queries_labels.find_super_label_components(
            self._require_conn(), library_id, super_label_id
        )

    async def find_song_label_edges_for_labels(
        self, library_id: str, label_ids: Sequence[str]
    ) -> list[SongLabelRow]:
        return await queries_tagging.find_song_label_edges_for_labels(
            self._require_conn(), library_id, label_ids
        )

    async def find_songs_by_ids(self, library_id: str, song_ids: Sequence[str]) -> list[SongRow]:
        return await queries_songs.find_songs_by_ids(self._require_conn(), library_id, song_ids)

    async def find_all_songs(self, library_id: str) -> list[SongRow]:
        return await queries_songs.list_songs(self._require_conn(), library_id, order_by="title")
