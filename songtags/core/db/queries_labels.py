"""
Label and SUPER-label component queries.

Design:
- Functions are *pure DB helpers*: they take an open `aiosqlite.Connection`
  and return materialized dataclasses.
- Labels come back as the `RegularLabel | SuperLabel` variant.
- These functions assume `conn.row_factory = aiosqlite.Row`.
"""

from __future__ import annotations

from typing import Iterable, Sequence

import aiosqlite

from songtags.core.db.models import (
    Label,
    LabelType,
    SuperLabelComponentRow,
    label_from_row_values,
)
from songtags.core.db.ordering import LabelsOrderBy, labels_order_clause


def _row_to_label(row: aiosqlite.Row) -> Label:
    return label_from_row_values(
        library_id=str(row["library_id"]),
        label_id=str(row["label_id"]),
        name=row["name"],
        norm_name=row["norm_name"],
        type=row["type"],
    )


def _row_to_component(row: aiosqlite.Row) -> SuperLabelComponentRow:
    return SuperLabelComponentRow(
        library_id=str(row["library_id"]),
        super_label_id=str(row["super_label_id"]),
        regular_label_id=str(row["regular_label_id"]),
    )


def _placeholders(count: int) -> str:
    return ", ".join("?" for _ in range(count))


# ---------------------------------------------------------------------------
# Labels
# ---------------------------------------------------------------------------


async def insert_label(conn: aiosqlite.Connection, label: Label) -> None:
    await conn.execute(
        """
        INSERT INTO labels(label_id, library_id, name, norm_name, type)
        VALUES (?, ?, ?, ?, ?)
        """,
        (label.label_id, label.library_id, label.name, label.norm_name, label.type.value),
    )


async def get_label(conn: aiosqlite.Connection, library_id: str, label_id: str) -> Label | None:
    cursor = await conn.execute(
        "SELECT * FROM labels WHERE library_id = ? AND label_id = ?;",
        (library_id, label_id),
    )
    row = await cursor.fetchone()
    return _row_to_label(row) if row else None


async def get_label_by_norm_name(
    conn: aiosqlite.Connection, library_id: str, norm_name: str
) -> Label | None:
    cursor = await conn.execute(
        "SELECT * FROM labels WHERE library_id = ? AND norm_name = ?;",
        (library_id, norm_name),
    )
    row = await cursor.fetchone()
    return _row_to_label(row) if row else None


async def list_labels(
    conn: aiosqlite.Connection,
    library_id: str,
    *,
    label_type: LabelType | None = None,
    order_by: LabelsOrderBy = "name",
) -> list[Label]:
    order_clause = labels_order_clause(order_by)
    if label_type is None:
        cursor = await conn.execute(
            f"SELECT * FROM labels l WHERE l.library_id = ? {order_clause};",
            (library_id,),
        )
    else:
        cursor = await conn.execute(
            f"SELECT * FROM labels l WHERE l.library_id = ? AND l.type = ? {order_clause};",
            (library_id, label_type.value),
        )
    rows = await cursor.fetchall()
    return [_row_to_label(r) for r in rows]


async def find_labels_by_ids(
    conn: aiosqlite.Connection,
    library_id: str,
    label_ids: Sequence[str],
) -> list[Label]:
    ids = list(dict.fromkeys(label_ids))
    if not ids:
        return []
    cursor = await conn.execute(
        f"""
        SELECT * FROM labels
        WHERE library_id = ? AND label_id IN ({_placeholders(len(ids))});
        """,
        (library_id, *ids),
    )
    rows = await cursor.fetchall()
    return [_row_to_label(r) for r in rows]


async def delete_label(conn: aiosqlite.Connection, library_id: str, label_id: str) -> int:
    cursor = await conn.execute(
        "DELETE FROM labels WHERE library_id = ? AND label_id = ?;",
        (library_id, label_id),
    )
    return cursor.rowcount


# ---------------------------------------------------------------------------
# SUPER label components
# ---------------------------------------------------------------------------


async def find_super_label_components(
    conn: aiosqlite.Connection,
    library_id: str,
    super_label_id: str,
) -> list[SuperLabelComponentRow]:
    cursor = await conn.execute(
        """
        SELECT * FROM super_label_components
        WHERE library_id = ? AND super_label_id = ?
        ORDER BY regular_label_id;
        """,
        (library_id, super_label_id),
    )
    rows = await cursor.fetchall()
    return [_row_to_component(r) for r in rows]


async def insert_components(
    conn: aiosqlite.Connection,
    library_id: str,
    super_label_id: str,
    regular_label_ids: Iterable[str],
) -> None:
    await conn.executemany(
        """
        INSERT OR IGNORE INTO super_label_components(library_id, super_label_id, regular_label_id)
        VALUES (?, ?, ?)
        """,
        [(library_id, super_label_id, rid) for rid in regular_label_ids],
    )


async def delete_components_of_super(
    conn: aiosqlite.Connection, library_id: str, super_label_id: str
) -> int:
    cursor = await conn.execute(
        "DELETE FROM super_label_components WHERE library_id = ? AND super_label_id = ?;",
        (library_id, super_label_id),
    )
    return cursor.rowcount


async def delete_components_using_regular(
    conn: aiosqlite.Connection, library_id: str, regular_label_id: str
) -> int:
    cursor = await conn.execute(
        "DELETE FROM super_label_components WHERE library_id = ? AND regular_label_id = ?;",
        (library_id, regular_label_id),
    )
    return cursor.rowcount


async def list_library_components(
    conn: aiosqlite.Connection, library_id: str
) -> list[SuperLabelComponentRow]:
    cursor = await conn.execute(
        """
        SELECT * FROM super_label_components
        WHERE library_id = ?
        ORDER BY super_label_id, regular_label_id;
        """,
        (library_id,),
    )
    rows = await cursor.fetchall()
    return [_row_to_component(r) for r in rows]
