"""
Label mode queries (`label_modes` and the `label_mode_labels` join table).

Mode edges may point at REGULAR or SUPER labels. Inserts are
`INSERT OR IGNORE` against the composite primary key, so attaching a label
to a mode twice is a no-op.
"""

from __future__ import annotations

import aiosqlite

from songtags.core.db.models import LabelModeLabelRow, LabelModeRow


def _row_to_mode(row: aiosqlite.Row) -> LabelModeRow:
    return LabelModeRow(
        library_id=str(row["library_id"]),
        mode_id=str(row["mode_id"]),
        name=row["name"],
        norm_name=row["norm_name"],
        created_at=row["created_at"],
    )


def _row_to_mode_label(row: aiosqlite.Row) -> LabelModeLabelRow:
    return LabelModeLabelRow(
        library_id=str(row["library_id"]),
        mode_id=str(row["mode_id"]),
        label_id=str(row["label_id"]),
    )


# ---------------------------------------------------------------------------
# Modes
# ---------------------------------------------------------------------------


async def insert_mode(conn: aiosqlite.Connection, mode: LabelModeRow) -> None:
    await conn.execute(
        "INSERT INTO label_modes(mode_id, library_id, name, norm_name) VALUES (?, ?, ?, ?);",
        (mode.mode_id, mode.library_id, mode.name, mode.norm_name),
    )


async def get_mode(
    conn: aiosqlite.Connection, library_id: str, mode_id: str
) -> LabelModeRow | None:
    cursor = await conn.execute(
        "SELECT * FROM label_modes WHERE library_id = ? AND mode_id = ?;",
        (library_id, mode_id),
    )
    row = await cursor.fetchone()
    return _row_to_mode(row) if row else None


async def get_mode_by_norm_name(
    conn: aiosqlite.Connection, library_id: str, norm_name: str
) -> LabelModeRow | None:
    cursor = await conn.execute(
        "SELECT * FROM label_modes WHERE library_id = ? AND norm_name = ?;",
        (library_id, norm_name),
    )
    row = await cursor.fetchone()
    return _row_to_mode(row) if row else None


async def list_modes(conn: aiosqlite.Connection, library_id: str) -> list[LabelModeRow]:
    cursor = await conn.execute(
        "SELECT * FROM label_modes WHERE library_id = ? ORDER BY name COLLATE NOCASE, mode_id;",
        (library_id,),
    )
    rows = await cursor.fetchall()
    return [_row_to_mode(r) for r in rows]


async def delete_mode(conn: aiosqlite.Connection, library_id: str, mode_id: str) -> int:
    cursor = await conn.execute(
        "DELETE FROM label_modes WHERE library_id = ? AND mode_id = ?;",
        (library_id, mode_id),
    )
    return cursor.rowcount


# ---------------------------------------------------------------------------
# Mode <-> label edges
# ---------------------------------------------------------------------------


async def insert_mode_label(
    conn: aiosqlite.Connection, library_id: str, mode_id: str, label_id: str
) -> bool:
    """Insert an edge. Returns False if it already existed."""
    cursor = await conn.execute(
        "INSERT OR IGNORE INTO label_mode_labels(library_id, mode_id, label_id) VALUES (?, ?, ?);",
        (library_id, mode_id, label_id),
    )
    return cursor.rowcount > 0


async def delete_mode_label(
    conn: aiosqlite.Connection, library_id: str, mode_id: str, label_id: str
) -> int:
    cursor = await conn.execute(
        "DELETE FROM label_mode_labels WHERE library_id = ? AND mode_id = ? AND label_id = ?;",
        (library_id, mode_id, label_id),
    )
    return cursor.rowcount


async def delete_mode_labels_for_mode(
    conn: aiosqlite.Connection, library_id: str, mode_id: str
) -> int:
    cursor = await conn.execute(
        "DELETE FROM label_mode_labels WHERE library_id = ? AND mode_id = ?;",
        (library_id, mode_id),
    )
    return cursor.rowcount


async def delete_mode_labels_for_label(
    conn: aiosqlite.Connection, library_id: str, label_id: str
) -> int:
    cursor = await conn.execute(
        "DELETE FROM label_mode_labels WHERE library_id = ? AND label_id = ?;",
        (library_id, label_id),
    )
    return cursor.rowcount


async def list_mode_labels(
    conn: aiosqlite.Connection, library_id: str, mode_id: str | None = None
) -> list[LabelModeLabelRow]:
    """Edges of one mode, or of every mode in the library when `mode_id` is None."""
    if mode_id is None:
        cursor = await conn.execute(
            "SELECT * FROM label_mode_labels WHERE library_id = ? ORDER BY mode_id, label_id;",
            (library_id,),
        )
    else:
        cursor = await conn.execute(
            """
            SELECT * FROM label_mode_labels
            WHERE library_id = ? AND mode_id = ?
            ORDER BY label_id;
            """,
            (library_id, mode_id),
        )
    rows = await cursor.fetchall()
    return [_row_to_mode_label(r) for r in rows]
