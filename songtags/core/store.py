"""
Read contracts consumed by the filtering engine.

`LibraryDb` implements these; tests may pass any object with the same
async methods. Every method is scoped by `library_id`.
"""

from __future__ import annotations

from typing import Protocol, Sequence

from songtags.core.db.models import Label, SongLabelRow, SongRow, SuperLabelComponentRow


class LabelStore(Protocol):
    async def find_labels_by_ids(self, library_id: str, label_ids: Sequence[str]) -> list[Label]:
        ...

    async def find_super_label_components(
        self, library_id: str, super_label_id: str
    ) -> list[SuperLabelComponentRow]:
        ...

    async def find_song_label_edges_for_labels(
        self, library_id: str, label_ids: Sequence[str]
    ) -> list[SongLabelRow]:
        ...

    async def find_songs_by_ids(self, library_id: str, song_ids: Sequence[str]) -> list[SongRow]:
        ...

    async def find_all_songs(self, library_id: str) -> list[SongRow]:
        ...
