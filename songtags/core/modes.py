"""
Label modes: named subsets of labels the UI shows together.

Modes are display configuration only. Attaching or detaching labels never
changes songs, labels, or filtering results. A mode may include REGULAR and
SUPER labels alike.
"""

from __future__ import annotations

import logging
import uuid
from dataclasses import dataclass

import aiosqlite

from songtags.core import ConflictError, NotFoundError, ValidationError
from songtags.core.db.models import LabelModeLabelRow, LabelModeRow, normalize_name, normalize_text
from songtags.core.library_db import LibraryDb

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class ModeDetail:
    mode: LabelModeRow
    mode_labels: tuple[LabelModeLabelRow, ...] = ()


@dataclass(frozen=True, slots=True)
class ModeListing:
    modes: tuple[LabelModeRow, ...]
    mode_labels: tuple[LabelModeLabelRow, ...]


@dataclass(frozen=True, slots=True)
class ModeLabelResult:
    mode_label: LabelModeLabelRow
    created: bool


@dataclass(frozen=True, slots=True)
class ModeDeletion:
    deleted_mode_id: str
    mode_labels: int


def new_mode_id() -> str:
    return f"mode_{uuid.uuid4()}"


class LabelModeService:
    def __init__(self, *, db: LibraryDb) -> None:
        self._db = db

    async def list_modes(self, library_id: str) -> ModeListing:
        await self._require_library(library_id)
        modes = await self._db.list_modes(library_id)
        mode_labels = await self._db.list_mode_labels(library_id)
        return ModeListing(modes=tuple(modes), mode_labels=tuple(mode_labels))

    async def create_mode(self, library_id: str, name: str | None) -> LabelModeRow:
        await self._require_library(library_id)
        clean = normalize_text(name) if isinstance(name, str) else None
        if clean is None:
            raise ValidationError("name is required and must be a non-empty string")
        norm_name = normalize_name(clean)
        if not norm_name:
            raise ValidationError("name must contain at least one letter or digit")

        if await self._db.get_mode_by_norm_name(library_id, norm_name) is not None:
            raise ConflictError("A mode with this name already exists in this library")

        mode = LabelModeRow(
            library_id=library_id, mode_id=new_mode_id(), name=clean, norm_name=norm_name
        )
        try:
            await self._db.insert_mode(mode)
        except aiosqlite.IntegrityError as e:
            raise ConflictError("A mode with this name already exists in this library") from e

        logger.info("Created label mode %s (%s) in %s", mode.mode_id, mode.name, library_id)
        return await self._require_mode(library_id, mode.mode_id)

    async def get_mode(self, library_id: str, mode_id: str) -> ModeDetail:
        mode = await self._require_mode(library_id, mode_id)
        mode_labels = await self._db.list_mode_labels(library_id, mode_id)
        return ModeDetail(mode=mode, mode_labels=tuple(mode_labels))

    async def attach_label(self, library_id: str, mode_id: str, label_id: str) -> ModeLabelResult:
        """Include a label in a mode. Idempotent; `created` tells whether the edge is new."""
        await self._require_mode(library_id, mode_id)
        if await self._db.get_label(library_id, label_id) is None:
            raise NotFoundError("Label not found in this library")

        created = await self._db.add_mode_label(library_id, mode_id, label_id)
        return ModeLabelResult(
            mode_label=LabelModeLabelRow(library_id=library_id, mode_id=mode_id, label_id=label_id),
            created=created,
        )

    async def detach_label(self, library_id: str, mode_id: str, label_id: str) -> int:
        return await self._db.remove_mode_label(library_id, mode_id, label_id)

    async def delete_mode(self, library_id: str, mode_id: str) -> ModeDeletion:
        await self._require_mode(library_id, mode_id)
        counts = await self._db.delete_mode(library_id, mode_id)
        logger.info("Deleted label mode %s from %s: %s", mode_id, library_id, counts)
        return ModeDeletion(deleted_mode_id=mode_id, mode_labels=counts["mode_labels"])

    async def _require_library(self, library_id: str) -> None:
        if await self._db.get_library(library_id) is None:
            raise NotFoundError("Library not found")

    async def _require_mode(self, library_id: str, mode_id: str) -> LabelModeRow:
        mode = await self._db.get_mode(library_id, mode_id)
        if mode is None:
            raise NotFoundError("Mode not found in this library")
        return mode
