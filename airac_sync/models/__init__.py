"""
Data models for the airac_sync library.

Candidate records produced by the parsers and the persisted records read
back from storage share these types, so both sides of a diff compare like
with like.
"""

from .navaid import NavAidType, NavAidRecord
from .boundary import BoundaryPoint, BoundaryRecord, MIN_BOUNDARY_POINTS
from .airport import AirportRecord, RunwayRecord, AirportFrequency, ICAO_PATTERN
from .diff import Diff, ImportKind
from .validation import ParseResult, PartialParseWarning, SkippedLine

__all__ = [
    # Records
    'NavAidType',
    'NavAidRecord',
    'BoundaryPoint',
    'BoundaryRecord',
    'MIN_BOUNDARY_POINTS',
    'AirportRecord',
    'RunwayRecord',
    'AirportFrequency',
    'ICAO_PATTERN',
    # Diff
    'Diff',
    'ImportKind',
    # Parse results
    'ParseResult',
    'PartialParseWarning',
    'SkippedLine',
]
