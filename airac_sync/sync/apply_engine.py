import dataclasses
import logging
import sqlite3
from dataclasses import dataclass
from typing import Optional

from ..errors import ApplyTransactionError
from ..models.diff import Diff, ImportKind
from ..storage.database_storage import AiracStorage

logger = logging.getLogger(__name__)


@dataclass
class ApplyResult:
    """Row counts written by one apply call."""

    kind: ImportKind
    fir_id: Optional[str] = None
    added: int = 0
    updated: int = 0
    deleted: int = 0

    @property
    def total(self) -> int:
        return self.added + self.updated + self.deleted

    def to_dict(self) -> dict:
        return {
            'applied': True,
            'added': self.added,
            'updated': self.updated,
            'deleted': self.deleted,
        }

    def __str__(self) -> str:
        scope = self.fir_id or "global"
        return f"{self.kind.value} [{scope}] added={self.added} updated={self.updated} deleted={self.deleted}"


class ApplyEngine:
    """
    Writes a narrowed diff to the store.

    Each call is one transaction: either every selected change is committed
    or none is.
    """

    def __init__(self, storage: AiracStorage):
        self.storage = storage

    def apply(self, diff: Diff) -> ApplyResult:
        """Dispatch on the diff's import kind."""
        if diff.kind is ImportKind.BOUNDARY:
            return self.apply_boundaries(diff)
        if diff.kind is ImportKind.AIRPORT:
            return self.apply_airports(diff)
        return self.apply_navaids(diff)

    def apply_navaids(self, diff: Diff) -> ApplyResult:
        """
        Delete stale nav aids, then insert new ones.

        Raises:
            ApplyTransactionError: If the store rejects a write; nothing is kept
        """
        kind = diff.kind.navaid_type
        if kind is None:
            raise ValueError(f"Not a nav aid diff: {diff.kind}")
        result = ApplyResult(kind=diff.kind, fir_id=diff.fir_id)
        if diff.is_empty:
            return result

        current = None
        try:
            with self.storage.transaction() as conn:
                for key, record in sorted(diff.to_delete.items()):
                    current = key
                    result.deleted += self.storage.delete_navaid(conn, kind, record.ident, diff.fir_id)
                for key, record in sorted(diff.to_add.items()):
                    current = key
                    self.storage.insert_navaid(conn, dataclasses.replace(record, fir_id=diff.fir_id))
                    result.added += 1
        except sqlite3.Error as e:
            raise self._failed(diff, current, e) from e

        logger.info(f"Applied {result}")
        return result

    def apply_boundaries(self, diff: Diff) -> ApplyResult:
        """
        Replace boundary groups.

        For every affected group the points go first, then the header row;
        new groups are inserted header first, then points in order. A group
        in to_add that already exists in the scope is replaced and counted
        as updated.

        Raises:
            ApplyTransactionError: If the store rejects a write; nothing is kept
        """
        result = ApplyResult(kind=diff.kind, fir_id=diff.fir_id)
        if diff.is_empty:
            return result

        storage = self.storage
        current = None
        try:
            with storage.transaction() as conn:
                for key, record in sorted(diff.to_delete.items()):
                    current = key
                    boundary_id = storage.find_boundary_id(conn, record.station, record.frequency, diff.fir_id)
                    if boundary_id is None:
                        continue
                    storage.delete_boundary_points(conn, boundary_id)
                    storage.delete_boundary_row(conn, boundary_id)
                    result.deleted += 1

                for key, record in sorted(diff.to_add.items()):
                    current = key
                    boundary_id = storage.find_boundary_id(conn, record.station, record.frequency, diff.fir_id)
                    if boundary_id is not None:
                        storage.delete_boundary_points(conn, boundary_id)
                        storage.delete_boundary_row(conn, boundary_id)
                        result.updated += 1
                    else:
                        result.added += 1
                    new_id = storage.insert_boundary(conn, dataclasses.replace(record, fir_id=diff.fir_id))
                    for point in sorted(record.points, key=lambda p: p.order):
                        storage.insert_boundary_point(conn, new_id, point)
        except sqlite3.Error as e:
            raise self._failed(diff, current, e) from e

        logger.info(f"Applied {result}")
        return result

    def apply_airports(self, diff: Diff) -> ApplyResult:
        """
        Insert new airports and update existing ones.

        Runways and frequencies of an updated airport are replaced only
        when the file listed some. Airports are never deleted and the
        curated columns are never written.

        Raises:
            ApplyTransactionError: If the store rejects a write; nothing is kept
        """
        result = ApplyResult(kind=diff.kind, fir_id=diff.fir_id)
        if diff.is_empty:
            return result

        storage = self.storage
        current = None
        try:
            with storage.transaction() as conn:
                for icao, record in sorted(diff.to_add.items()):
                    current = icao
                    storage.insert_airport(conn, record)
                    result.added += 1
                for icao, record in sorted(diff.to_update.items()):
                    current = icao
                    storage.update_airport(conn, record)
                    if record.runways:
                        storage.replace_runways(conn, icao, record.runways)
                    if record.frequencies:
                        storage.replace_frequencies(conn, icao, record.frequencies)
                    result.updated += 1
        except sqlite3.Error as e:
            raise self._failed(diff, current, e) from e

        logger.info(f"Applied {result}")
        return result

    @staticmethod
    def _failed(diff: Diff, key: Optional[str], error: sqlite3.Error) -> ApplyTransactionError:
        scope = diff.fir_id or "global"
        logger.error(f"{diff.kind.value} apply [{scope}] rolled back at {key}: {error}")
        return ApplyTransactionError(
            f"{diff.kind.value} import could not be applied, no changes were saved",
            group=key,
            details=str(error),
        )
