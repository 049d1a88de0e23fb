import logging
from typing import Dict, Iterable, List, Optional

from ..models.airport import AirportRecord
from ..models.boundary import BoundaryRecord, COORDINATE_PRECISION
from ..models.diff import Diff, ImportKind
from ..models.navaid import NavAidRecord, NavAidType
from .scope import GLOBAL_SCOPE, ScopeToken

logger = logging.getLogger(__name__)

# Elevations closer than this are the same published value
ELEVATION_TOLERANCE_FT = 0.5


def _float_differs(a: Optional[float], b: Optional[float], digits: int = COORDINATE_PRECISION) -> bool:
    if a is None or b is None:
        return a is not b
    return round(a, digits) != round(b, digits)


def _frequency_signature(airport: AirportRecord) -> tuple:
    return tuple(sorted((f.station, f.frequency, f.name or '') for f in airport.frequencies))


class DiffEngine:
    """
    Compares candidate records from a file with the persisted records of a scope.

    Pure: nothing here reads or writes the store. Nav aids and boundaries
    are diffed as an authoritative replace of their scope; airports only
    ever gain or update records.
    """

    def diff_navaids(self, candidates: Iterable[NavAidRecord], persisted: Iterable[NavAidRecord],
                     kind: NavAidType, scope: ScopeToken = GLOBAL_SCOPE) -> Diff:
        """
        Diff nav aids by identifier.

        An identifier present on both sides is left alone even if its
        coordinates or frequency changed.

        Args:
            candidates: Parsed records for the scope
            persisted: Stored records of the same kind in the scope
            kind: Nav aid type being diffed
            scope: Scope the records belong to

        Returns:
            Diff with to_add and to_delete
        """
        incoming: Dict[str, NavAidRecord] = {r.ident.upper(): r for r in candidates}
        existing: Dict[str, NavAidRecord] = {r.ident.upper(): r for r in persisted}

        diff = Diff(kind=ImportKind(kind.value), fir_id=scope.fir_id)
        diff.to_add = {ident: r for ident, r in incoming.items() if ident not in existing}
        diff.to_delete = {ident: r for ident, r in existing.items() if ident not in incoming}

        logger.debug(f"{diff} ({len(incoming)} in file, {len(existing)} stored)")
        return diff

    def diff_boundaries(self, candidates: Iterable[BoundaryRecord], persisted: Iterable[BoundaryRecord],
                        scope: ScopeToken = GLOBAL_SCOPE) -> Diff:
        """
        Diff boundaries by station and frequency.

        A group whose limits, restricted flag or points changed goes to
        to_add; applying it replaces the stored group as a whole.
        """
        incoming: Dict[str, BoundaryRecord] = {r.key.upper(): r for r in candidates}
        existing: Dict[str, BoundaryRecord] = {r.key.upper(): r for r in persisted}

        diff = Diff(kind=ImportKind.BOUNDARY, fir_id=scope.fir_id)
        for key, record in incoming.items():
            stored = existing.get(key)
            if stored is None:
                diff.to_add[record.key] = record
            elif stored.geometry_signature() != record.geometry_signature():
                logger.debug(f"Boundary {record.key} changed, will be replaced")
                diff.to_add[record.key] = record
        diff.to_delete = {r.key: r for key, r in existing.items() if key not in incoming}

        logger.debug(f"{diff} ({len(incoming)} in file, {len(existing)} stored)")
        return diff

    def diff_airports(self, candidates: Iterable[AirportRecord], persisted: Dict[str, AirportRecord],
                      scope: ScopeToken = GLOBAL_SCOPE) -> Diff:
        """
        Diff airports by ICAO code.

        Args:
            candidates: Parsed airports
            persisted: Stored airports keyed by ICAO code (at least those in the file)
            scope: FIR of the import; the global scope never reassigns airports

        Returns:
            Diff with to_add, to_update and the changed field names per airport
        """
        diff = Diff(kind=ImportKind.AIRPORT, fir_id=scope.fir_id)
        for record in candidates:
            stored = persisted.get(record.icao)
            if stored is None:
                diff.to_add[record.icao] = record
                continue
            changes = self.airport_changes(record, stored, scope)
            if changes:
                diff.to_update[record.icao] = record
                diff.changes[record.icao] = changes

        logger.debug(f"{diff}")
        return diff

    @staticmethod
    def airport_changes(candidate: AirportRecord, stored: AirportRecord,
                        scope: ScopeToken = GLOBAL_SCOPE) -> List[str]:
        """Names of the displayed fields that differ between a file airport and the stored one."""
        changes = []
        if candidate.display_name != stored.display_name:
            changes.append('name')
        if _float_differs(candidate.latitude, stored.latitude) or _float_differs(candidate.longitude, stored.longitude):
            changes.append('coordinates')
        if candidate.elevation_ft is not None and (
                stored.elevation_ft is None
                or abs(candidate.elevation_ft - stored.elevation_ft) >= ELEVATION_TOLERANCE_FT):
            changes.append('elevation')
        if candidate.iata_code and candidate.iata_code != stored.iata_code:
            changes.append('iata')
        if not scope.is_global and stored.fir_id != scope.fir_id:
            changes.append('fir')
        if candidate.runways and candidate.runway_signature() != stored.runway_signature():
            changes.append('runways')
        if candidate.frequencies and _frequency_signature(candidate) != _frequency_signature(stored):
            changes.append('frequencies')
        return changes
