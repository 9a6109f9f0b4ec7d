"""
Library-related DB queries.
"""

from __future__ import annotations

import aiosqlite

from songtags.core.db.models import LibraryRow


def _row_to_library(row: aiosqlite.Row) -> LibraryRow:
    return LibraryRow(
        library_id=str(row["library_id"]),
        name=row["name"],
        created_at=row["created_at"],
    )


async def insert_library(conn: aiosqlite.Connection, library_id: str, name: str) -> None:
    await conn.execute(
        "INSERT INTO libraries(library_id, name) VALUES (?, ?);",
        (library_id, name),
    )


async def get_library(conn: aiosqlite.Connection, library_id: str) -> LibraryRow | None:
    cursor = await conn.execute("SELECT * FROM libraries WHERE library_id = ?;", (library_id,))
    row = await cursor.fetchone()
    return _row_to_library(row) if row else None


async def list_libraries(conn: aiosqlite.Connection) -> list[LibraryRow]:
    cursor = await conn.execute("SELECT * FROM libraries ORDER BY name COLLATE NOCASE, library_id;")
    rows = await cursor.fetchall()
    return [_row_to_library(r) for r in rows]
