"""
Internal DB subpackage for songtags.

This package splits storage into focused units (models, schema/migrations,
and query groups) while keeping `LibraryDb` as the single public interface
that the rest of the codebase imports.

Re-exports here are primarily for convenience inside the `core` package.
External code should import `LibraryDb` from `songtags.core.library_db`.
"""

from __future__ import annotations

# Models / DTOs
from .models import (
    Label,
    LabelModeLabelRow,
    LabelModeRow,
    LabelType,
    LibraryRow,
    NewSong,
    RegularLabel,
    SongLabelRow,
    SongRow,
    SuperLabel,
    SuperLabelComponentRow,
)

# Schema / migrations
from .schema import ensure_schema, migrate

__all__ = [
    # models
    "Label",
    "LabelModeLabelRow",
    "LabelModeRow",
    "LabelType",
    "LibraryRow",
    "NewSong",
    "RegularLabel",
    "SongLabelRow",
    "SongRow",
    "SuperLabel",
    "SuperLabelComponentRow",
    # schema
    "ensure_schema",
    "migrate",
]
