from __future__ import annotations

import logging
from typing import Sequence

from songtags.core import LabelNotFoundError
from songtags.core.db.models import Label
from songtags.core.store import LabelStore

logger = logging.getLogger(__name__)


class LabelCatalog:
    """Resolves label identifiers to labels within one library."""

    def __init__(self, store: LabelStore) -> None:
        self._store = store

    async def validate_labels(self, library_id: str, label_ids: Sequence[str]) -> list[Label]:
        """
        Fetch the labels for `label_ids`, failing if any id is unknown.

        Duplicates in `label_ids` are treated as one id. Raises
        `LabelNotFoundError` naming the ids with no match in this library.
        """
        requested = set(label_ids)
        labels = await self._store.find_labels_by_ids(library_id, list(dict.fromkeys(label_ids)))

        matched = {label.label_id for label in labels}
        if len(matched) < len(requested):
            missing = requested - matched
            logger.debug("Unknown labels in library %s: %s", library_id, sorted(missing))
            raise LabelNotFoundError(library_id, missing)

        return labels
