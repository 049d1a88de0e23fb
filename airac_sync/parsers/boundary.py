import logging
from typing import Any, Dict, List, Mapping, Optional, Sequence, Tuple

from ..models.boundary import BoundaryRecord, MIN_BOUNDARY_POINTS
from ..models.validation import ParseResult
from .base import ImportParser, split_fields, format_frequency
from .coordinates import LAT, LON, parse_coordinate

logger = logging.getLogger(__name__)

RESTRICTED_VALUES = {'Y', 'YES', 'TRUE', '1', 'R', 'RESTRICTED'}


class BoundaryParser(ImportParser):
    """
    Parser for frequency boundary files.

    A group starts with a header line and continues with one lateral point
    per line:

        LPPC_CTR;#125.550;GND;FL245;N
        N039.00.00.000;W009.00.00.000
        ABLAN
        N040.00.00.000;W008.00.00.000

    A point is a coordinate pair or the identifier of a known nav aid. Rows
    may also carry their own key, STATION;FREQ;LAT;LON, in which case
    contiguous rows with the same station and frequency form one group.
    """

    def parse(self, lines: Sequence[str], fir_id: Optional[str] = None,
              navaids: Optional[Mapping[str, Tuple[float, float]]] = None, **kwargs: Any) -> ParseResult:
        """
        Parse boundary lines.

        Args:
            lines: Trimmed, non-empty lines in file order
            fir_id: FIR the boundaries belong to (None for global)
            navaids: Nav aid identifier -> (latitude, longitude), for named points

        Returns:
            ParseResult of BoundaryRecord; every record has at least 3 points
        """
        navaids = {k.upper(): v for k, v in (navaids or {}).items()}
        result = ParseResult()
        groups: Dict[str, BoundaryRecord] = {}
        current: Optional[BoundaryRecord] = None
        # True while the lines belong to a header that was rejected
        discarding = False

        def close():
            nonlocal current
            if current is None:
                return
            if current.is_valid:
                if current.key in groups:
                    logger.warning(f"Boundary {current.key} appears twice, keeping the later group")
                    del groups[current.key]
                groups[current.key] = current
            else:
                result.skip(f"{current.station};#{current.frequency}",
                            f"boundary has {len(current.points)} points, at least {MIN_BOUNDARY_POINTS} required")
            current = None

        for line in lines:
            raw_fields = split_fields(line)
            fields = [f for f in raw_fields if f]

            if len(fields) >= 2 and fields[1].startswith('#'):
                close()
                header_fields = raw_fields if raw_fields[1:2] and raw_fields[1].startswith('#') else fields
                header = self._parse_header(header_fields, fir_id)
                if isinstance(header, str):
                    result.skip(line, header)
                    discarding = True
                else:
                    current = header
                    discarding = False
                continue

            inline = self._parse_inline(fields)
            if inline is not None:
                station, frequency, latitude, longitude = inline
                key = BoundaryRecord.make_key(station, frequency)
                if current is None or current.key != key:
                    close()
                    current = BoundaryRecord(station=station, frequency=frequency, fir_id=fir_id)
                discarding = False
                current.add_point(latitude, longitude)
                continue

            if current is None:
                reason = "point belongs to a rejected header" if discarding else "point before any boundary header"
                result.skip(line, reason)
                continue

            point = self._parse_point(fields, navaids)
            if isinstance(point, str):
                result.skip(line, point)
                continue
            latitude, longitude, navaid_ident = point
            current.add_point(latitude, longitude, navaid_ident)

        close()

        result.records = list(groups.values())
        if result.skipped:
            logger.warning(f"Boundary parse: {len(result.records)} records, {result.skipped} lines skipped")
        else:
            logger.debug(f"Boundary parse: {len(result.records)} records")
        return result

    def _parse_header(self, fields: List[str], fir_id: Optional[str]):
        """Return a new BoundaryRecord, or an error message."""
        station = fields[0].upper()
        frequency = format_frequency(fields[1].lstrip('#'))
        if not station:
            return "missing station"
        if frequency is None:
            return f"invalid frequency {fields[1]!r} for station {station}"
        lower = (fields[2].upper() or None) if len(fields) > 2 else None
        upper = (fields[3].upper() or None) if len(fields) > 3 else None
        restricted = len(fields) > 4 and fields[4].upper() in RESTRICTED_VALUES
        return BoundaryRecord(
            station=station,
            frequency=frequency,
            lower_limit=lower,
            upper_limit=upper,
            restricted=restricted,
            fir_id=fir_id,
        )

    @staticmethod
    def _parse_inline(fields: List[str]):
        """Recognise STATION;FREQ;LAT;LON rows."""
        if len(fields) != 4:
            return None
        frequency = format_frequency(fields[1])
        latitude = parse_coordinate(fields[2], LAT)
        longitude = parse_coordinate(fields[3], LON)
        if frequency is None or latitude is None or longitude is None:
            return None
        return fields[0].upper(), frequency, latitude, longitude

    @staticmethod
    def _parse_point(fields: List[str], navaids: Mapping[str, Tuple[float, float]]):
        """Return (lat, lon, navaid_ident) or an error message."""
        if len(fields) >= 2:
            latitude = parse_coordinate(fields[0], LAT)
            longitude = parse_coordinate(fields[1], LON)
            if latitude is not None and longitude is not None:
                return latitude, longitude, None

        name = fields[0].upper() if fields else ''
        if name in navaids:
            latitude, longitude = navaids[name]
            return latitude, longitude, name
        return f"unknown point {name!r}" if name else "empty point"
