from __future__ import annotations

from collections import Counter
from typing import AbstractSet

from songtags.core.store import LabelStore


class SongLabelIndex:
    """AND-matching over song/label edges."""

    def __init__(self, store: LabelStore) -> None:
        self._store = store

    async def songs_with_all_labels(self, library_id: str, required: AbstractSet[str]) -> set[str]:
        """
        Return ids of songs carrying every label in `required`.

        Counts edges per song among those whose label is required. Since a
        (song, label) pair has at most one edge, a song's count is the number
        of distinct required labels it carries, and it matches iff that count
        equals len(required).
        """
        if not required:
            return set()

        edges = await self._store.find_song_label_edges_for_labels(library_id, sorted(required))

        counts: Counter[str] = Counter(
            edge.song_id for edge in edges if edge.label_id in required
        )
        return {song_id for song_id, count in counts.items() if count == len(required)}
