"""
JSON serialization helpers for the web layer.

Core dataclasses use snake_case; HTTP payloads use camelCase keys.
"""

from __future__ import annotations

from dataclasses import asdict, is_dataclass
from typing import Any

from songtags.core.db.models import Label, LibraryRow
from songtags.core.filtering import FilterResult
from songtags.core.labels import LabelDeletion, LabelDetail
from songtags.core.libraries import LibraryBootstrap
from songtags.core.modes import ModeDeletion, ModeDetail, ModeListing
from songtags.core.songs import SongDeletion


def camel_case(name: str) -> str:
    """snake_case -> camelCase ("super_label_id" -> "superLabelId")."""
    head, *rest = name.split("_")
    return head + "".join(part[:1].upper() + part[1:] for part in rest)


def to_dict(row: Any) -> dict[str, Any]:
    """
    Convert a row (dict or dataclass) to a camelCase dictionary.

    Only top-level keys are renamed; nested values (e.g. song metadata)
    are passed through untouched.
    """
    if isinstance(row, dict):
        data = row
    elif is_dataclass(row) and not isinstance(row, type):
        data = asdict(row)
    else:
        raise TypeError(f"Cannot serialize {type(row).__name__}")
    return {camel_case(k): v for k, v in data.items()}


def label_to_dict(label: Label) -> dict[str, Any]:
    data = to_dict(label)
    data["type"] = label.type.value
    return data


def label_detail_to_dict(detail: LabelDetail) -> dict[str, Any]:
    return {
        "label": label_to_dict(detail.label),
        "components": [to_dict(c) for c in detail.components],
    }


def label_deletion_to_dict(deletion: LabelDeletion) -> dict[str, Any]:
    return {
        "deletedLabelId": deletion.deleted_label_id,
        "deleted": {
            "songLabels": deletion.song_labels,
            "superLabelComponents": deletion.super_label_components,
            "labelModeLabels": deletion.label_mode_labels,
        },
    }


def library_to_dict(library: LibraryRow) -> dict[str, Any]:
    return to_dict(library)


def filter_result_to_dict(result: FilterResult) -> dict[str, Any]:
    return {
        "inputLabelIds": list(result.input_label_ids),
        "requiredRegularLabelIds": list(result.required_regular_label_ids),
        "songs": [to_dict(s) for s in result.songs],
    }


def song_deletion_to_dict(deletion: SongDeletion) -> dict[str, Any]:
    return {
        "deletedSongId": deletion.deleted_song_id,
        "deleted": {"songLabels": deletion.song_labels},
    }


def bootstrap_to_dict(bootstrap: LibraryBootstrap) -> dict[str, Any]:
    return {
        "library": library_to_dict(bootstrap.library),
        "songs": [to_dict(s) for s in bootstrap.songs],
        "labels": [label_to_dict(label) for label in bootstrap.labels],
        "songLabels": [to_dict(e) for e in bootstrap.song_labels],
        "superLabelComponents": [to_dict(c) for c in bootstrap.super_label_components],
        "labelModes": [to_dict(m) for m in bootstrap.label_modes],
        "labelModeLabels": [to_dict(e) for e in bootstrap.label_mode_labels],
    }


def mode_listing_to_dict(listing: ModeListing) -> dict[str, Any]:
    return {
        "modes": [to_dict(m) for m in listing.modes],
        "modeLabels": [to_dict(e) for e in listing.mode_labels],
    }


def mode_detail_to_dict(detail: ModeDetail) -> dict[str, Any]:
    return {
        "mode": to_dict(detail.mode),
        "modeLabels": [to_dict(e) for e in detail.mode_labels],
    }


def mode_deletion_to_dict(deletion: ModeDeletion) -> dict[str, Any]:
    return {
        "deletedModeId": deletion.deleted_mode_id,
        "deleted": {"modeLabels": deletion.mode_labels},
    }
