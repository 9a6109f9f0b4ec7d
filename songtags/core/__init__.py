"""
Core domain package.

This package contains business logic which should be independent of any UI layer
(web, CLI, etc.). The goal is to keep this layer small, testable, and free of
networking concerns.

We intentionally keep exports minimal; consumers should usually import from the
specific module they need (e.g. `songtags.core.filtering`).
"""

from __future__ import annotations

from typing import Iterable

__all__: list[str] = [
    "CoreError",
    "NotFoundError",
    "LabelNotFoundError",
    "ValidationError",
    "SuperLabelEmptyComponentsError",
    "ConflictError",
]


class CoreError(Exception):
    """Base class for core-layer exceptions."""


class NotFoundError(CoreError):
    """Raised when an entity (library/song/label) cannot be found."""


class LabelNotFoundError(NotFoundError):
    """
    Raised when a label selection references labels that do not exist
    in the library.

    `missing_label_ids` is the requested set minus the matched set.
    """

    def __init__(self, library_id: str, missing_label_ids: Iterable[str]) -> None:
        self.library_id = library_id
        self.missing_label_ids = tuple(sorted(set(missing_label_ids)))
        super().__init__("One or more labels not found in this library")


class ValidationError(CoreError):
    """Raised when input to a core operation is malformed."""


class SuperLabelEmptyComponentsError(ValidationError):
    """Raised when a SUPER label has no REGULAR components at filter time."""

    def __init__(self, label_id: str, label_name: str) -> None:
        self.label_id = label_id
        self.label_name = label_name
        super().__init__(f'SUPER label "{label_name}" has no components')


class ConflictError(CoreError):
    """Raised when a write would violate a uniqueness constraint."""
