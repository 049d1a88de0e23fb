import logging
import re
from typing import Any, Dict, List, Optional, Sequence

from ..models.airport import AirportFrequency, AirportRecord, ICAO_PATTERN, RunwayRecord
from ..models.validation import ParseResult
from .base import ImportParser, split_fields, format_frequency, parse_optional_float
from .coordinates import LAT, LON, parse_coordinate

logger = logging.getLogger(__name__)

RUNWAY_TAGS = ('RWY', 'RUNWAY')
FREQUENCY_TAGS = ('FRQ', 'FREQ')

RUNWAY_IDENT = re.compile(r'^\d{2}[LRC]?$')
IATA_PATTERN = re.compile(r'^[A-Z0-9]{3}$')


class AirportParser(ImportParser):
    """
    Parser for AIRAC airport files.

    Each airport is a block: an airport line followed by its runways and
    frequencies.

        LPPT;374;LIS;N038.46.53.000;W009.08.09.000;Lisboa
        RWY;03;21;12484;148;ASP
        FRQ;LPPT_TWR;118.100;Lisboa Tower
    """

    def parse(self, lines: Sequence[str], fir_id: Optional[str] = None, **kwargs: Any) -> ParseResult:
        """
        Parse airport blocks.

        Args:
            lines: Trimmed, non-empty lines in file order
            fir_id: FIR assigned to the airports (None leaves it unset)

        Returns:
            ParseResult of AirportRecord; a repeated ICAO keeps the last block
        """
        result = ParseResult()
        airports: Dict[str, AirportRecord] = {}
        current: Optional[AirportRecord] = None

        for line in lines:
            fields = split_fields(line)
            tag = fields[0].upper()

            if tag in RUNWAY_TAGS or tag in FREQUENCY_TAGS:
                if current is None:
                    result.skip(line, "runway or frequency outside an airport block")
                    continue
                error = (self._add_runway(current, fields) if tag in RUNWAY_TAGS
                         else self._add_frequency(current, fields))
                if error:
                    result.skip(line, error)
                continue

            parsed = self._parse_airport(fields, fir_id)
            if isinstance(parsed, str):
                result.skip(line, parsed)
                current = None
                continue

            if parsed.icao in airports:
                logger.debug(f"Duplicate airport {parsed.icao}, keeping the last block")
                del airports[parsed.icao]
            airports[parsed.icao] = parsed
            current = parsed

        result.records = list(airports.values())
        if result.skipped:
            logger.warning(f"Airport parse: {len(result.records)} records, {result.skipped} lines skipped")
        else:
            logger.debug(f"Airport parse: {len(result.records)} records")
        return result

    def _parse_airport(self, fields: List[str], fir_id: Optional[str]):
        """Return an AirportRecord, or an error message."""
        if len(fields) < 5:
            return f"expected at least 5 fields, got {len(fields)}"
        icao = fields[0].upper()
        if not ICAO_PATTERN.match(icao):
            return f"invalid ICAO code {fields[0]!r}"

        latitude = parse_coordinate(fields[3], LAT)
        longitude = parse_coordinate(fields[4], LON)
        if latitude is None or longitude is None:
            return f"coordinates could not be parsed for {icao}"

        iata = fields[2].upper()
        return AirportRecord(
            icao=icao,
            name=fields[5] if len(fields) > 5 else "",
            iata_code=iata if IATA_PATTERN.match(iata) else None,
            latitude=latitude,
            longitude=longitude,
            elevation_ft=parse_optional_float(fields[1]),
            fir_id=fir_id,
        )

    @staticmethod
    def _add_runway(airport: AirportRecord, fields: List[str]) -> Optional[str]:
        if len(fields) < 2:
            return "runway line without designator"
        le_ident = fields[1].upper()
        he_ident = fields[2].upper() if len(fields) > 2 and fields[2] else None
        if not RUNWAY_IDENT.match(le_ident):
            return f"invalid runway designator {fields[1]!r}"
        if he_ident is not None and not RUNWAY_IDENT.match(he_ident):
            return f"invalid runway designator {fields[2]!r}"
        surface = fields[5].upper() if len(fields) > 5 and fields[5] else None
        airport.add_runway(RunwayRecord(
            le_ident=le_ident,
            he_ident=he_ident,
            length_ft=parse_optional_float(fields[3]) if len(fields) > 3 else None,
            width_ft=parse_optional_float(fields[4]) if len(fields) > 4 else None,
            surface=surface,
        ))
        return None

    @staticmethod
    def _add_frequency(airport: AirportRecord, fields: List[str]) -> Optional[str]:
        if len(fields) < 3 or not fields[1]:
            return "frequency line needs a station and a frequency"
        frequency = format_frequency(fields[2])
        if frequency is None:
            return f"invalid frequency {fields[2]!r}"
        airport.add_frequency(AirportFrequency(
            station=fields[1].upper(),
            frequency=frequency,
            name=fields[3] if len(fields) > 3 and fields[3] else None,
        ))
        return None
