import re
from dataclasses import dataclass, field
from typing import List, Optional

from .navaid import validate_coordinates

ICAO_PATTERN = re.compile(r'^[A-Z]{4}$')


@dataclass
class RunwayRecord:
    """Data class for storing runway information."""

    le_ident: str
    he_ident: Optional[str] = None
    length_ft: Optional[float] = None
    width_ft: Optional[float] = None
    surface: Optional[str] = None

    @property
    def designator(self) -> str:
        if self.he_ident:
            return f"{self.le_ident}/{self.he_ident}"
        return self.le_ident

    def signature(self) -> tuple:
        return (self.le_ident, self.he_ident, self.length_ft, self.width_ft, self.surface)

    def to_dict(self) -> dict:
        """Convert to dictionary for JSON serialization."""
        return {
            'le_ident': self.le_ident,
            'he_ident': self.he_ident,
            'length_ft': self.length_ft,
            'width_ft': self.width_ft,
            'surface': self.surface,
        }


@dataclass
class AirportFrequency:
    """A published frequency of an airport (TWR, GND, ATIS...)."""

    station: str
    frequency: str
    name: Optional[str] = None

    def to_dict(self) -> dict:
        return {'station': self.station, 'frequency': self.frequency, 'name': self.name}


@dataclass
class AirportRecord:
    """
    Airport as published in an AIRAC file.

    Only the AIRAC-owned fields live here. Operator-curated content
    (stands, charts, notes) exists in the store only and is never carried
    by a candidate record.
    """

    icao: str
    name: str = ""
    iata_code: Optional[str] = None
    latitude: float = 0.0
    longitude: float = 0.0
    elevation_ft: Optional[float] = None
    fir_id: Optional[str] = None
    runways: List[RunwayRecord] = field(default_factory=list)
    frequencies: List[AirportFrequency] = field(default_factory=list)

    def __post_init__(self):
        if not ICAO_PATTERN.match(self.icao or ''):
            raise ValueError(f"Invalid ICAO code: {self.icao!r}")
        validate_coordinates(self.latitude, self.longitude)

    @property
    def key(self) -> str:
        return self.icao

    @property
    def display_name(self) -> str:
        """Name as stored: airports without a published name use their ICAO code."""
        return self.name or self.icao

    def add_runway(self, runway: RunwayRecord) -> None:
        """Add a runway, replacing one with the same designator."""
        for i, existing in enumerate(self.runways):
            if existing.le_ident == runway.le_ident and existing.he_ident == runway.he_ident:
                self.runways[i] = runway
                return
        self.runways.append(runway)

    def add_frequency(self, frequency: AirportFrequency) -> None:
        self.frequencies.append(frequency)

    def runway_signature(self) -> tuple:
        return tuple(sorted(
            (r.signature() for r in self.runways),
            key=lambda sig: tuple('' if v is None else str(v) for v in sig),
        ))

    def to_dict(self) -> dict:
        """Convert to dictionary for JSON serialization."""
        return {
            'icao': self.icao,
            'name': self.name,
            'iata_code': self.iata_code,
            'latitude': self.latitude,
            'longitude': self.longitude,
            'elevation_ft': self.elevation_ft,
            'fir_id': self.fir_id,
            'runways': [r.to_dict() for r in self.runways],
            'frequencies': [f.to_dict() for f in self.frequencies],
        }

    def __repr__(self):
        return f"AirportRecord(icao='{self.icao}', name='{self.name}', runways={len(self.runways)})"
