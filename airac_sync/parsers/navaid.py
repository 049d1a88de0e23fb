import logging
import re
from typing import Any, Dict, List, Optional, Sequence

from ..models.navaid import NavAidRecord, NavAidType
from ..models.validation import ParseResult
from .base import ImportParser, split_fields, format_frequency, parse_optional_float
from .coordinates import LAT, LON, parse_coordinate

logger = logging.getLogger(__name__)

IDENT_PATTERN = re.compile(r'^[A-Z0-9]{1,8}$')


class NavAidParser(ImportParser):
    """
    Parser for FIX, VOR and NDB files, one record per line.

    Column layouts:
        FIX:  IDENT, LAT, LON
        VOR:  IDENT, LAT, LON, FREQ[, ELEV_FT]   (or IDENT, FREQ, LAT, LON[, ELEV_FT])
        NDB:  IDENT, LAT, LON, FREQ              (or IDENT, FREQ, LAT, LON)
    """

    def __init__(self, kind: NavAidType):
        self.kind = kind

    @property
    def min_fields(self) -> int:
        return 4 if self.kind.has_frequency else 3

    def parse(self, lines: Sequence[str], fir_id: Optional[str] = None, **kwargs: Any) -> ParseResult:
        """
        Parse nav aid lines.

        Args:
            lines: Trimmed, non-empty lines in file order
            fir_id: FIR the nav aids belong to (None for global)

        Returns:
            ParseResult of NavAidRecord; duplicate identifiers keep the last line
        """
        result = ParseResult()
        by_ident: Dict[str, NavAidRecord] = {}

        for line in lines:
            fields = split_fields(line)
            if len(fields) < self.min_fields:
                result.skip(line, f"expected at least {self.min_fields} fields, got {len(fields)}")
                continue

            ident = fields[0].upper()
            if not IDENT_PATTERN.match(ident):
                result.skip(line, f"invalid identifier {fields[0]!r}")
                continue

            if self.kind is NavAidType.FIX:
                parsed = self._parse_fix(fields)
            else:
                parsed = self._parse_with_frequency(fields)
            if isinstance(parsed, str):
                result.skip(line, parsed)
                continue

            try:
                record = NavAidRecord(kind=self.kind, ident=ident, fir_id=fir_id, **parsed)
            except ValueError as e:
                result.skip(line, str(e))
                continue

            if ident in by_ident:
                logger.debug(f"Duplicate {self.kind.value} {ident}, keeping the last occurrence")
            by_ident[ident] = record

        result.records = list(by_ident.values())
        if result.skipped:
            logger.warning(f"{self.kind.value} parse: {len(result.records)} records, {result.skipped} lines skipped")
        else:
            logger.debug(f"{self.kind.value} parse: {len(result.records)} records")
        return result

    def _parse_fix(self, fields: List[str]):
        """Return the record fields, or an error message."""
        latitude = parse_coordinate(fields[1], LAT)
        longitude = parse_coordinate(fields[2], LON)
        if latitude is None or longitude is None:
            # Some publications put extra columns before the coordinates
            coords = [c for c in (self._any_coordinate(f) for f in fields[1:]) if c is not None]
            if len(coords) < 2:
                return "coordinates could not be parsed"
            latitude = parse_coordinate(coords[0][0], LAT)
            longitude = parse_coordinate(coords[1][0], LON)
            if latitude is None or longitude is None:
                return "coordinates could not be parsed"
        return {'latitude': latitude, 'longitude': longitude}

    @staticmethod
    def _any_coordinate(token: str):
        value = parse_coordinate(token)
        return (token, value) if value is not None else None

    def _parse_with_frequency(self, fields: List[str]):
        """Try IDENT,LAT,LON,FREQ then IDENT,FREQ,LAT,LON; return fields or an error message."""
        layouts = ((1, 2, 3), (2, 3, 1))
        for lat_idx, lon_idx, freq_idx in layouts:
            latitude = parse_coordinate(fields[lat_idx], LAT)
            longitude = parse_coordinate(fields[lon_idx], LON)
            frequency = format_frequency(fields[freq_idx])
            if latitude is None or longitude is None or frequency is None:
                continue
            parsed = {'latitude': latitude, 'longitude': longitude, 'frequency': frequency}
            if self.kind is NavAidType.VOR and len(fields) > 4:
                parsed['elevation_ft'] = parse_optional_float(fields[4])
            return parsed
        return "coordinates or frequency could not be parsed"
