import logging
from dataclasses import dataclass
from typing import Any, Dict, Iterable, Optional, FrozenSet

from ..models.diff import Diff

logger = logging.getLogger(__name__)


def _normalise(keys: Optional[Iterable[str]]) -> Optional[FrozenSet[str]]:
    if keys is None:
        return None
    return frozenset(str(k).strip().upper() for k in keys)


@dataclass
class Selection:
    """
    Display keys the caller accepted from a preview.

    None means "everything computed" for that set; an empty collection
    selects nothing.
    """

    add: Optional[Iterable[str]] = None
    update: Optional[Iterable[str]] = None
    delete: Optional[Iterable[str]] = None

    @classmethod
    def everything(cls) -> 'Selection':
        return cls()

    @classmethod
    def nothing(cls) -> 'Selection':
        return cls(add=[], update=[], delete=[])


class SelectionFilter:
    """Narrows a recomputed diff to the caller's selection."""

    def apply(self, diff: Diff, selection: Optional[Selection] = None) -> Diff:
        """
        Intersect each diff set with the selected keys.

        Keys are compared case-insensitively. Selected keys that are not in
        the recomputed diff (the store changed since the preview) are
        ignored.

        Args:
            diff: Freshly computed diff
            selection: Accepted keys; None keeps the whole diff

        Returns:
            New Diff holding only the selected entries
        """
        selection = selection or Selection()
        narrowed = Diff(kind=diff.kind, fir_id=diff.fir_id)
        narrowed.to_add = self._narrow(diff.to_add, selection.add, 'add')
        narrowed.to_update = self._narrow(diff.to_update, selection.update, 'update')
        narrowed.to_delete = self._narrow(diff.to_delete, selection.delete, 'delete')
        narrowed.changes = {k: v for k, v in diff.changes.items() if k in narrowed.to_update}

        logger.debug(f"Selection narrowed {diff} to {narrowed}")
        return narrowed

    @staticmethod
    def _narrow(entries: Dict[str, Any], keys: Optional[Iterable[str]], label: str) -> Dict[str, Any]:
        wanted = _normalise(keys)
        if wanted is None:
            return dict(entries)

        kept = {key: record for key, record in entries.items() if key.upper() in wanted}
        stale = wanted - {key.upper() for key in kept}
        if stale:
            logger.debug(f"Ignoring {len(stale)} selected {label} key(s) not in the current diff: {sorted(stale)}")
        return kept
