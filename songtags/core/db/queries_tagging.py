"""
Song <-> label edge queries (the `song_labels` join table).

Important:
- Inserts are `INSERT OR IGNORE` against the composite primary key, so
  tagging is idempotent and a (song, label) pair never has two edges.
"""

from __future__ import annotations

from typing import Sequence

import aiosqlite

from songtags.core.db.models import SongLabelRow


def _row_to_edge(row: aiosqlite.Row) -> SongLabelRow:
    return SongLabelRow(
        library_id=str(row["library_id"]),
        song_id=str(row["song_id"]),
        label_id=str(row["label_id"]),
    )


async def insert_song_label(
    conn: aiosqlite.Connection, library_id: str, song_id: str, label_id: str
) -> bool:
    """Insert an edge. Returns False if it already existed."""
    cursor = await conn.execute(
        "INSERT OR IGNORE INTO song_labels(library_id, song_id, label_id) VALUES (?, ?, ?);",
        (library_id, song_id, label_id),
    )
    return cursor.rowcount > 0


async def delete_song_label(
    conn: aiosqlite.Connection, library_id: str, song_id: str, label_id: str
) -> int:
    cursor = await conn.execute(
        "DELETE FROM song_labels WHERE library_id = ? AND song_id = ? AND label_id = ?;",
        (library_id, song_id, label_id),
    )
    return cursor.rowcount


async def delete_song_labels_for_label(
    conn: aiosqlite.Connection, library_id: str, label_id: str
) -> int:
    cursor = await conn.execute(
        "DELETE FROM song_labels WHERE library_id = ? AND label_id = ?;",
        (library_id, label_id),
    )
    return cursor.rowcount


async def list_song_labels(
    conn: aiosqlite.Connection, library_id: str, song_id: str
) -> list[SongLabelRow]:
    cursor = await conn.execute(
        """
        SELECT * FROM song_labels
        WHERE library_id = ? AND song_id = ?
        ORDER BY label_id;
        """,
        (library_id, song_id),
    )
    rows = await cursor.fetchall()
    return [_row_to_edge(r) for r in rows]


async def find_song_label_edges_for_labels(
    conn: aiosqlite.Connection,
    library_id: str,
    label_ids: Sequence[str],
) -> list[SongLabelRow]:
    ids = list(dict.fromkeys(label_ids))
    if not ids:
        return []
    placeholders = ", ".join("?" for _ in ids)
    cursor = await conn.execute(
        f"""
        SELECT * FROM song_labels
        WHERE library_id = ? AND label_id IN ({placeholders});
        """,
        (library_id, *ids),
    )
    rows = await cursor.fetchall()
    return [_row_to_edge(r) for r in rows]


async def delete_song_labels_for_song(
    conn: aiosqlite.Connection, library_id: str, song_id: str
) -> int:
    cursor = await conn.execute(
        "DELETE FROM song_labels WHERE library_id = ? AND song_id = ?;",
        (library_id, song_id),
    )
    return cursor.rowcount


async def list_library_song_labels(
    conn: aiosqlite.Connection, library_id: str
) -> list[SongLabelRow]:
    cursor = await conn.execute(
        """
        SELECT * FROM song_labels
        WHERE library_id = ?
        ORDER BY song_id, label_id;
        """,
        (library_id,),
    )
    rows = await cursor.fetchall()
    return [_row_to_edge(r) for r in rows]
