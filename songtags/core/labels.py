"""
Label management: REGULAR and SUPER labels.

Rules enforced here (the filtering engine relies on them):
- SUPER label components must be existing REGULAR labels of the same library.
  SUPER labels never contain other SUPER labels.
- A SUPER label is created and updated with at least one component.
- Label names are unique per library after normalization.
- A label's type never changes.
"""

from __future__ import annotations

import logging
import uuid
from dataclasses import dataclass
from typing import Sequence

import aiosqlite

from songtags.core import ConflictError, NotFoundError, ValidationError
from songtags.core.db.models import (
    Label,
    LabelType,
    RegularLabel,
    SuperLabel,
    SuperLabelComponentRow,
    normalize_name,
    normalize_text,
)
from songtags.core.library_db import LibraryDb

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class LabelDetail:
    label: Label
    components: tuple[SuperLabelComponentRow, ...] = ()


@dataclass(frozen=True, slots=True)
class LabelDeletion:
    deleted_label_id: str
    song_labels: int
    super_label_components: int
    label_mode_labels: int = 0


def new_label_id() -> str:
    return f"label_{uuid.uuid4()}"


class LabelService:
    def __init__(self, *, db: LibraryDb) -> None:
        self._db = db

    async def list_labels(
        self, library_id: str, *, label_type: str | LabelType | None = None
    ) -> list[Label]:
        parsed_type: LabelType | None = None
        if label_type is not None:
            try:
                parsed_type = LabelType(label_type)
            except ValueError:
                raise ValidationError("Invalid type filter. Must be REGULAR or SUPER") from None
        return await self._db.list_labels(library_id, label_type=parsed_type)

    async def create_regular_label(self, library_id: str, name: str | None) -> RegularLabel:
        await self._require_library(library_id)
        clean_name = self._require_name(name)
        label = RegularLabel(
            library_id=library_id,
            label_id=new_label_id(),
            name=clean_name,
            norm_name=normalize_name(clean_name),
        )
        await self._insert(label)
        logger.info("Created REGULAR label %s (%s) in %s", label.label_id, label.name, library_id)
        return label

    async def create_super_label(
        self, library_id: str, name: str | None, component_label_ids: Sequence[str] | None
    ) -> LabelDetail:
        await self._require_library(library_id)
        clean_name = self._require_name(name)
        component_ids = await self._validate_components(library_id, component_label_ids)

        label = SuperLabel(
            library_id=library_id,
            label_id=new_label_id(),
            name=clean_name,
            norm_name=normalize_name(clean_name),
        )
        await self._insert(label, component_ids)
        logger.info(
            "Created SUPER label %s (%s) with %d components in %s",
            label.label_id,
            label.name,
            len(component_ids),
            library_id,
        )
        components = await self._db.find_super_label_components(library_id, label.label_id)
        return LabelDetail(label=label, components=tuple(components))

    async def get_label(self, library_id: str, label_id: str) -> LabelDetail:
        label = await self._require_label(library_id, label_id)
        if isinstance(label, RegularLabel):
            return LabelDetail(label=label)
        components = await self._db.find_super_label_components(library_id, label_id)
        return LabelDetail(label=label, components=tuple(components))

    async def replace_super_components(
        self, library_id: str, super_label_id: str, component_label_ids: Sequence[str] | None
    ) -> LabelDetail:
        label = await self._require_label(library_id, super_label_id)
        if not isinstance(label, SuperLabel):
            raise ValidationError("Can only update components for SUPER labels")

        component_ids = await self._validate_components(library_id, component_label_ids)
        components = await self._db.replace_super_label_components(
            library_id, super_label_id, component_ids
        )
        logger.info("Replaced components of SUPER label %s (%d)", super_label_id, len(components))
        return LabelDetail(label=label, components=tuple(components))

    async def delete_label(self, library_id: str, label_id: str) -> LabelDeletion:
        label = await self._require_label(library_id, label_id)
        counts = await self._db.delete_label(label)
        logger.info("Deleted label %s from %s: %s", label_id, library_id, counts)
        return LabelDeletion(
            deleted_label_id=label_id,
            song_labels=counts["song_labels"],
            super_label_components=counts["super_label_components"],
            label_mode_labels=counts["label_mode_labels"],
        )

    # ---- helpers ----

    @staticmethod
    def _require_name(name: str | None) -> str:
        clean = normalize_text(name) if isinstance(name, str) else None
        if clean is None:
            raise ValidationError("name is required and must be a non-empty string")
        if not normalize_name(clean):
            raise ValidationError("name must contain at least one letter or digit")
        return clean

    async def _require_library(self, library_id: str) -> None:
        if await self._db.get_library(library_id) is None:
            raise NotFoundError("Library not found")

    async def _require_label(self, library_id: str, label_id: str) -> Label:
        label = await self._db.get_label(library_id, label_id)
        if label is None:
            raise NotFoundError("Label not found in this library")
        return label

    async def _validate_components(
        self, library_id: str, component_label_ids: Sequence[str] | None
    ) -> list[str]:
        if not component_label_ids:
            raise ValidationError("componentLabelIds must be a non-empty array")

        unique_ids = list(dict.fromkeys(component_label_ids))
        labels = await self._db.find_labels_by_ids(library_id, unique_ids)
        if len(labels) != len(unique_ids):
            raise ValidationError("One or more component labels not found in this library")

        if any(isinstance(label, SuperLabel) for label in labels):
            raise ValidationError(
                "Cannot use SUPER labels as components. Only REGULAR labels allowed."
            )
        return unique_ids

    async def _insert(self, label: Label, component_ids: Sequence[str] = ()) -> None:
        existing = await self._db.get_label_by_norm_name(label.library_id, label.norm_name)
        if existing is not None:
            raise ConflictError("A label with this name already exists in this library")
        try:
            await self._db.insert_label(label, component_label_ids=component_ids)
        except aiosqlite.IntegrityError as e:
            raise ConflictError("A label with this name already exists in this library") from e
