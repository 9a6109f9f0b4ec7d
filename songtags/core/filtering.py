"""
AND-based song filtering by label selection.

Pipeline: validate (LabelCatalog) -> expand SUPER labels (SuperLabelExpander)
-> intersect (SongLabelIndex) -> fetch songs.

The engine is stateless and read-only. Steps are separate reads, so a
concurrent tagging or label edit between them can be observed part-way;
each step sees committed data, but the whole call is not a snapshot.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Sequence

from songtags.core import LabelNotFoundError, SuperLabelEmptyComponentsError
from songtags.core.catalog import LabelCatalog
from songtags.core.db.models import SongRow
from songtags.core.expander import SuperLabelExpander
from songtags.core.song_index import SongLabelIndex
from songtags.core.store import LabelStore

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class FilterResult:
    """
    Outcome of a filter call.

    `input_label_ids` echoes the caller's selection. `required_regular_label_ids`
    is the expanded REGULAR set; it is sorted only for stable output.
    """

    input_label_ids: tuple[str, ...]
    required_regular_label_ids: tuple[str, ...]
    songs: tuple[SongRow, ...]


class FilterEngine:
    def __init__(
        self,
        store: LabelStore,
        *,
        catalog: LabelCatalog | None = None,
        expander: SuperLabelExpander | None = None,
        index: SongLabelIndex | None = None,
    ) -> None:
        self._store = store
        self._catalog = catalog or LabelCatalog(store)
        self._expander = expander or SuperLabelExpander(store)
        self._index = index or SongLabelIndex(store)

    async def filter_songs_by_labels(
        self, library_id: str, label_ids: Sequence[str] | None = None
    ) -> FilterResult:
        """
        Return the songs in `library_id` that carry every REGULAR label the
        selection expands to.

        An empty selection means no filter: every song is returned.

        Raises:
            LabelNotFoundError: a selected label does not exist in the library.
            SuperLabelEmptyComponentsError: a selected SUPER label has no components.
        """
        input_label_ids = tuple(label_ids or ())

        if not input_label_ids:
            songs = await self._store.find_all_songs(library_id)
            return FilterResult(input_label_ids=(), required_regular_label_ids=(), songs=tuple(songs))

        try:
            labels = await self._catalog.validate_labels(library_id, input_label_ids)
            required = await self._expander.expand(library_id, labels)
        except (LabelNotFoundError, SuperLabelEmptyComponentsError) as e:
            logger.info("Rejected label filter for library %s: %s", library_id, e)
            raise

        if not required:
            songs = await self._store.find_all_songs(library_id)
            return FilterResult(
                input_label_ids=input_label_ids,
                required_regular_label_ids=(),
                songs=tuple(songs),
            )

        song_ids = await self._index.songs_with_all_labels(library_id, required)
        logger.debug(
            "Library %s: %d labels -> %d required -> %d songs",
            library_id,
            len(input_label_ids),
            len(required),
            len(song_ids),
        )

        songs = await self._store.find_songs_by_ids(library_id, sorted(song_ids)) if song_ids else []

        return FilterResult(
            input_label_ids=input_label_ids,
            required_regular_label_ids=tuple(sorted(required)),
            songs=tuple(songs),
        )
