"""
DB models (DTOs) and small normalization helpers.

This module is intentionally lightweight:
- No DB connection knowledge
- No SQL
- Pure dataclasses + helper functions

Labels are a tagged variant: a row from the `labels` table materializes as
either `RegularLabel` or `SuperLabel`, never as a label with a free-form
type string. Use `label_from_row_values()` to build the right variant.
"""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Union


class LabelType(str, Enum):
    """Persisted discriminator for the `labels.type` column."""

    REGULAR = "REGULAR"
    SUPER = "SUPER"


@dataclass(frozen=True, slots=True)
class LibraryRow:
    """Library record as stored in SQLite."""

    library_id: str
    name: str
    created_at: int | None = None


@dataclass(frozen=True, slots=True)
class SongRow:
    """
    Canonical song record as stored in SQLite.

    Notes:
    - `song_id` is the stable identifier; it never changes.
    - `display_*` fields are user-editable and used for UI.
    - `norm_key` is unique per library and used for duplicate detection.
    """

    library_id: str
    song_id: str
    display_title: str
    display_artist: str
    official_title: str | None = None
    official_artist: str | None = None
    norm_title: str = ""
    norm_artist: str = ""
    norm_key: str = ""
    metadata: dict[str, Any] = field(default_factory=dict)


@dataclass(frozen=True, slots=True)
class RegularLabel:
    """Atomic label, directly assignable to songs."""

    library_id: str
    label_id: str
    name: str
    norm_name: str = ""

    @property
    def type(self) -> LabelType:
        return LabelType.REGULAR


@dataclass(frozen=True, slots=True)
class SuperLabel:
    """Composite label standing for a set of REGULAR labels (its components)."""

    library_id: str
    label_id: str
    name: str
    norm_name: str = ""

    @property
    def type(self) -> LabelType:
        return LabelType.SUPER


Label = Union[RegularLabel, SuperLabel]


@dataclass(frozen=True, slots=True)
class SuperLabelComponentRow:
    """Edge recording that a SUPER label is composed of a REGULAR label."""

    library_id: str
    super_label_id: str
    regular_label_id: str


@dataclass(frozen=True, slots=True)
class SongLabelRow:
    """
    Edge recording that a song carries a REGULAR label.

    At most one edge exists per (library_id, song_id, label_id); the schema
    enforces this with a composite primary key.
    """

    library_id: str
    song_id: str
    label_id: str


@dataclass(frozen=True, slots=True)
class LabelModeRow:
    """
    Named subset of labels shown together in the UI.

    Modes are display configuration only; they never change songs or labels.
    """

    library_id: str
    mode_id: str
    name: str
    norm_name: str = ""
    created_at: int | None = None


@dataclass(frozen=True, slots=True)
class LabelModeLabelRow:
    """Edge recording that a mode includes a label (REGULAR or SUPER)."""

    library_id: str
    mode_id: str
    label_id: str


@dataclass(frozen=True, slots=True)
class NewSong:
    """Input record used when creating a song."""

    display_title: str
    display_artist: str
    official_title: str | None = None
    official_artist: str | None = None
    metadata: dict[str, Any] = field(default_factory=dict)


def label_from_row_values(
    *, library_id: str, label_id: str, name: str, norm_name: str, type: str
) -> Label:
    """Build the label variant matching the persisted `type` value."""
    label_type = LabelType(type)
    if label_type is LabelType.REGULAR:
        return RegularLabel(
            library_id=library_id, label_id=label_id, name=name, norm_name=norm_name
        )
    return SuperLabel(library_id=library_id, label_id=label_id, name=name, norm_name=norm_name)


def normalize_text(value: str | None) -> str | None:
    """
    Normalize optional text fields:
    - strip whitespace
    - coerce empty strings to None
    """
    if value is None:
        return None
    v = value.strip()
    return v if v else None


_WHITESPACE_RE = re.compile(r"\s+")
_DISALLOWED_RE = re.compile(r"[^a-z0-9_]")
_UNDERSCORES_RE = re.compile(r"_+")


def normalize_name(value: str | None) -> str:
    """
    Normalize a name for matching and uniqueness checks.

    Lowercase, whitespace to underscores, keep only a-z/0-9/_, collapse
    repeated underscores and trim them from the edges.
    """
    if not value:
        return ""
    v = _WHITESPACE_RE.sub("_", value.lower())
    v = _DISALLOWED_RE.sub("", v)
    v = _UNDERSCORES_RE.sub("_", v)
    return v.strip("_")


def song_norm_key(title: str | None, artist: str | None) -> str:
    """Composite duplicate-detection key for a song: "<title>_<artist>"."""
    norm_title = normalize_name(title)
    norm_artist = normalize_name(artist)
    if norm_title and norm_artist:
        return f"{norm_title}_{norm_artist}"
    return norm_title or norm_artist
