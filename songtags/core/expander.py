from __future__ import annotations

import logging
from typing import Iterable

from songtags.core import SuperLabelEmptyComponentsError
from songtags.core.db.models import Label, RegularLabel, SuperLabel
from songtags.core.store import LabelStore

logger = logging.getLogger(__name__)


class SuperLabelExpander:
    """
    Expands a label selection into the set of REGULAR label ids it requires.

    REGULAR labels stand for themselves; SUPER labels stand for their
    components. Components are always REGULAR (no nesting), so a single
    level of lookup is enough.
    """

    def __init__(self, store: LabelStore) -> None:
        self._store = store

    async def expand(self, library_id: str, labels: Iterable[Label]) -> set[str]:
        required: set[str] = set()

        for label in labels:
            if isinstance(label, RegularLabel):
                required.add(label.label_id)
            elif isinstance(label, SuperLabel):
                components = await self._store.find_super_label_components(
                    library_id, label.label_id
                )
                if not components:
                    raise SuperLabelEmptyComponentsError(label.label_id, label.name)
                required.update(c.regular_label_id for c in components)
                logger.debug(
                    "Expanded SUPER label %s into %d components", label.label_id, len(components)
                )
            else:
                raise TypeError(f"Unsupported label variant: {type(label).__name__}")

        return required
