"""
Shared ORDER BY clause helpers for LibraryDb queries.

Important:
- The returned strings are *static SQL fragments* selected from a small
  whitelist. Do NOT concatenate user input into ORDER BY.
"""

from __future__ import annotations

from typing import Literal

SongsOrderBy = Literal[
    "title",
    "artist",
    "id",
]

LabelsOrderBy = Literal[
    "name",
    "id",
]


def songs_order_clause(order_by: SongsOrderBy) -> str:
    """
    Return an ORDER BY clause for song list queries.

    Unknown values fall back to title ordering.
    """
    if order_by == "artist":
        return (
            "ORDER BY "
            "s.display_artist COLLATE NOCASE ASC, "
            "s.display_title COLLATE NOCASE ASC, "
            "s.song_id ASC"
        )
    if order_by == "id":
        return "ORDER BY s.song_id ASC"
    return "ORDER BY s.display_title COLLATE NOCASE ASC, s.song_id ASC"


def labels_order_clause(order_by: LabelsOrderBy) -> str:
    """Return an ORDER BY clause for label list queries."""
    if order_by == "id":
        return "ORDER BY l.label_id ASC"
    return "ORDER BY l.name COLLATE NOCASE ASC, l.label_id ASC"
