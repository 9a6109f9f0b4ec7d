"""
Song-related DB queries.

Design:
- Functions are *pure DB helpers*: they take an open `aiosqlite.Connection`
  and return materialized dataclasses.
- Every query is scoped by `library_id`.
- These functions assume `conn.row_factory = aiosqlite.Row`.

Important:
- Do NOT interpolate user input into SQL. The only dynamic SQL here is the
  `?` placeholder list for IN clauses and ORDER BY fragments from
  `songtags.core.db.ordering`.
"""

from __future__ import annotations

import json
from typing import Sequence

import aiosqlite

from songtags.core.db.models import SongRow
from songtags.core.db.ordering import SongsOrderBy, songs_order_clause


def _row_to_song(row: aiosqlite.Row) -> SongRow:
    """Convert an aiosqlite Row to a SongRow dataclass."""
    try:
        raw_metadata = row["metadata"]
    except (KeyError, IndexError):
        raw_metadata = None

    metadata = json.loads(raw_metadata) if raw_metadata else {}

    return SongRow(
        library_id=str(row["library_id"]),
        song_id=str(row["song_id"]),
        display_title=row["display_title"],
        display_artist=row["display_artist"],
        official_title=row["official_title"],
        official_artist=row["official_artist"],
        norm_title=row["norm_title"],
        norm_artist=row["norm_artist"],
        norm_key=row["norm_key"],
        metadata=metadata,
    )


def _placeholders(count: int) -> str:
    return ", ".join("?" for _ in range(count))


async def insert_song(conn: aiosqlite.Connection, song: SongRow) -> None:
    await conn.execute(
        """
        INSERT INTO songs(
            song_id, library_id,
            display_title, display_artist, official_title, official_artist,
            norm_title, norm_artist, norm_key, metadata
        ) VALUES (
            :song_id, :library_id,
            :display_title, :display_artist, :official_title, :official_artist,
            :norm_title, :norm_artist, :norm_key, :metadata
        )
        """,
        {
            "song_id": song.song_id,
            "library_id": song.library_id,
            "display_title": song.display_title,
            "display_artist": song.display_artist,
            "official_title": song.official_title,
            "official_artist": song.official_artist,
            "norm_title": song.norm_title,
            "norm_artist": song.norm_artist,
            "norm_key": song.norm_key,
            "metadata": json.dumps(song.metadata),
        },
    )


async def get_song(conn: aiosqlite.Connection, library_id: str, song_id: str) -> SongRow | None:
    cursor = await conn.execute(
        "SELECT * FROM songs WHERE library_id = ? AND song_id = ?;",
        (library_id, song_id),
    )
    row = await cursor.fetchone()
    return _row_to_song(row) if row else None


async def get_song_by_norm_key(
    conn: aiosqlite.Connection, library_id: str, norm_key: str
) -> SongRow | None:
    cursor = await conn.execute(
        "SELECT * FROM songs WHERE library_id = ? AND norm_key = ?;",
        (library_id, norm_key),
    )
    row = await cursor.fetchone()
    return _row_to_song(row) if row else None


async def list_songs(
    conn: aiosqlite.Connection,
    library_id: str,
    *,
    order_by: SongsOrderBy = "title",
) -> list[SongRow]:
    order_clause = songs_order_clause(order_by)
    cursor = await conn.execute(
        f"""
        SELECT * FROM songs s
        WHERE s.library_id = ?
        {order_clause};
        """,
        (library_id,),
    )
    rows = await cursor.fetchall()
    return [_row_to_song(r) for r in rows]


async def count_songs(conn: aiosqlite.Connection, library_id: str) -> int:
    cursor = await conn.execute(
        "SELECT COUNT(*) AS c FROM songs WHERE library_id = ?;", (library_id,)
    )
    row = await cursor.fetchone()
    return int(row["c"]) if row else 0


async def find_songs_by_ids(
    conn: aiosqlite.Connection,
    library_id: str,
    song_ids: Sequence[str],
) -> list[SongRow]:
    ids = list(dict.fromkeys(song_ids))
    if not ids:
        return []
    cursor = await conn.execute(
        f"""
        SELECT * FROM songs s
        WHERE s.library_id = ? AND s.song_id IN ({_placeholders(len(ids))})
        {songs_order_clause("title")};
        """,
        (library_id, *ids),
    )
    rows = await cursor.fetchall()
    return [_row_to_song(r) for r in rows]


async def update_song(conn: aiosqlite.Connection, song: SongRow) -> int:
    """Overwrite the editable and derived fields of an existing song."""
    cursor = await conn.execute(
        """
        UPDATE songs SET
            display_title = :display_title,
            display_artist = :display_artist,
            official_title = :official_title,
            official_artist = :official_artist,
            norm_title = :norm_title,
            norm_artist = :norm_artist,
            norm_key = :norm_key,
            metadata = :metadata
        WHERE library_id = :library_id AND song_id = :song_id
        """,
        {
            "song_id": song.song_id,
            "library_id": song.library_id,
            "display_title": song.display_title,
            "display_artist": song.display_artist,
            "official_title": song.official_title,
            "official_artist": song.official_artist,
            "norm_title": song.norm_title,
            "norm_artist": song.norm_artist,
            "norm_key": song.norm_key,
            "metadata": json.dumps(song.metadata),
        },
    )
    return cursor.rowcount


async def delete_song(conn: aiosqlite.Connection, library_id: str, song_id: str) -> int:
    cursor = await conn.execute(
        "DELETE FROM songs WHERE library_id = ? AND song_id = ?;",
        (library_id, song_id),
    )
    return cursor.rowcount
