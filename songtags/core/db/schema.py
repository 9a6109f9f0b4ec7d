"""
Database schema + migrations for songtags.

- Connection management and the public `LibraryDb` facade live in `library_db.py`
- Schema creation, schema versioning, and forward-only migrations live here

Design notes:
- We use SQLite `PRAGMA user_version` as the schema version.
- Migrations are forward-only (no downgrade support).
- Every table carries `library_id`; all lookups are partitioned by it.
- Edge tables use composite primary keys. For `song_labels` this is what
  guarantees at most one edge per (song, label), which the AND filter
  relies on when counting edges.
"""

from __future__ import annotations

from typing import Final

import aiosqlite

# Bump when you change the schema and add a migration in `migrate()`.
SCHEMA_VERSION: Final[int] = 3


async def ensure_schema(conn: aiosqlite.Connection) -> None:
    """
    Create or migrate schema to current version.

    This function assumes:
    - `conn` is an open aiosqlite connection
    - foreign_keys pragma is enabled by the caller
    """
    cursor = await conn.execute("PRAGMA user_version;")
    row = await cursor.fetchone()
    current = int(row[0]) if row is not None else 0

    if current > SCHEMA_VERSION:
        raise RuntimeError(
            f"Database schema version {current} is newer than supported {SCHEMA_VERSION}."
        )

    if current == SCHEMA_VERSION:
        return

    await migrate(conn, from_version=current, to_version=SCHEMA_VERSION)
    await conn.execute(f"PRAGMA user_version = {SCHEMA_VERSION};")
    await conn.commit()


async def migrate(conn: aiosqlite.Connection, *, from_version: int, to_version: int) -> None:
    """
    Perform forward-only migrations.

    Keep migrations small. If you need a big refactor, create a new DB.
    """
    # v0 -> v1
    if from_version == 0 and to_version >= 1:
        await conn.execute(
            """
            CREATE TABLE IF NOT EXISTS libraries (
                library_id TEXT PRIMARY KEY,
                name TEXT NOT NULL,
                created_at INTEGER NOT NULL DEFAULT (strftime('%s', 'now'))
            )
            """
        )

        await conn.execute(
            """
            CREATE TABLE IF NOT EXISTS songs (
                song_id TEXT PRIMARY KEY,
                library_id TEXT NOT NULL REFERENCES libraries(library_id) ON DELETE CASCADE,

                display_title TEXT NOT NULL,
                display_artist TEXT NOT NULL,
                official_title TEXT,
                official_artist TEXT,

                norm_title TEXT NOT NULL,
                norm_artist TEXT NOT NULL,
                norm_key TEXT NOT NULL,

                UNIQUE(library_id, norm_key)
            )
            """
        )
        await conn.execute("CREATE INDEX IF NOT EXISTS idx_songs_library ON songs(library_id);")
        await conn.execute(
            "CREATE INDEX IF NOT EXISTS idx_songs_norm_title ON songs(library_id, norm_title);"
        )
        await conn.execute(
            "CREATE INDEX IF NOT EXISTS idx_songs_norm_artist ON songs(library_id, norm_artist);"
        )

        await conn.execute(
            """
            CREATE TABLE IF NOT EXISTS labels (
                label_id TEXT PRIMARY KEY,
                library_id TEXT NOT NULL REFERENCES libraries(library_id) ON DELETE CASCADE,
                name TEXT NOT NULL,
                norm_name TEXT NOT NULL,
                type TEXT NOT NULL CHECK (type IN ('REGULAR', 'SUPER')),
                UNIQUE(library_id, norm_name)
            )
            """
        )
        await conn.execute(
            "CREATE INDEX IF NOT EXISTS idx_labels_library_type ON labels(library_id, type);"
        )

        await conn.execute(
            """
            CREATE TABLE IF NOT EXISTS super_label_components (
                library_id TEXT NOT NULL,
                super_label_id TEXT NOT NULL REFERENCES labels(label_id) ON DELETE CASCADE,
                regular_label_id TEXT NOT NULL REFERENCES labels(label_id) ON DELETE CASCADE,
                PRIMARY KEY (library_id, super_label_id, regular_label_id)
            )
            """
        )
        await conn.execute(
            "CREATE INDEX IF NOT EXISTS idx_components_regular "
            "ON super_label_components(library_id, regular_label_id);"
        )

        await conn.execute(
            """
            CREATE TABLE IF NOT EXISTS song_labels (
                library_id TEXT NOT NULL,
                song_id TEXT NOT NULL REFERENCES songs(song_id) ON DELETE CASCADE,
                label_id TEXT NOT NULL REFERENCES labels(label_id) ON DELETE CASCADE,
                PRIMARY KEY (library_id, song_id, label_id)
            )
            """
        )

        await conn.commit()
        from_version = 1

    # v1 -> v2
    if from_version == 1 and to_version >= 2:
        # Free-form song metadata (genre, year, BPM, ...) stored as JSON text.
        await conn.execute("ALTER TABLE songs ADD COLUMN metadata TEXT NOT NULL DEFAULT '{}';")
        # The AND filter scans edges by label, not by song.
        await conn.execute(
            "CREATE INDEX IF NOT EXISTS idx_song_labels_label ON song_labels(library_id, label_id);"
        )

        await conn.commit()
        from_version = 2

    # v2 -> v3
    if from_version == 2 and to_version >= 3:
        # Label modes: named subsets of labels shown together in the UI.
        await conn.execute(
            """
            CREATE TABLE IF NOT EXISTS label_modes (
                mode_id TEXT PRIMARY KEY,
                library_id TEXT NOT NULL REFERENCES libraries(library_id) ON DELETE CASCADE,
                name TEXT NOT NULL,
                norm_name TEXT NOT NULL,
                created_at INTEGER NOT NULL DEFAULT (strftime('%s', 'now')),
                UNIQUE(library_id, norm_name)
            )
            """
        )
        await conn.execute(
            """
            CREATE TABLE IF NOT EXISTS label_mode_labels (
                library_id TEXT NOT NULL,
                mode_id TEXT NOT NULL REFERENCES label_modes(mode_id) ON DELETE CASCADE,
                label_id TEXT NOT NULL REFERENCES labels(label_id) ON DELETE CASCADE,
                PRIMARY KEY (library_id, mode_id, label_id)
            )
            """
        )
        await conn.execute(
            "CREATE INDEX IF NOT EXISTS idx_mode_labels_label "
            "ON label_mode_labels(library_id, label_id);"
        )

        await conn.commit()
        from_version = 3

    if from_version != to_version:
        raise RuntimeError(f"No migration path from {from_version} to {to_version}.")
