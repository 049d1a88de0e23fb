from dataclasses import dataclass
from enum import Enum
from typing import Optional, Tuple


class NavAidType(Enum):
    """The three kinds of navigation aid published per FIR."""
    FIX = "FIX"
    VOR = "VOR"
    NDB = "NDB"

    @property
    def has_frequency(self) -> bool:
        return self is not NavAidType.FIX


def validate_coordinates(latitude: float, longitude: float) -> None:
    """Raise ValueError if the coordinates are out of range."""
    if not -90 <= latitude <= 90:
        raise ValueError(f"Latitude must be between -90 and 90 degrees, got {latitude}")
    if not -180 <= longitude <= 180:
        raise ValueError(f"Longitude must be between -180 and 180 degrees, got {longitude}")


@dataclass
class NavAidRecord:
    """
    A FIX, VOR or NDB within a FIR scope.

    All coordinates are stored in decimal degrees. Frequencies are kept as
    strings normalised to three decimals (e.g. "112.300").
    """

    kind: NavAidType
    ident: str
    latitude: float
    longitude: float
    frequency: Optional[str] = None
    elevation_ft: Optional[float] = None
    fir_id: Optional[str] = None  # None for the global scope

    def __post_init__(self):
        """Validate the record after initialization."""
        if not self.ident:
            raise ValueError("Nav aid identifier must not be empty")
        validate_coordinates(self.latitude, self.longitude)
        if self.kind is NavAidType.FIX and self.frequency is not None:
            raise ValueError(f"FIX {self.ident} cannot carry a frequency")

    @property
    def key(self) -> str:
        """Display key, unique within one kind and scope."""
        return self.ident

    @property
    def identity(self) -> Tuple[str, str, Optional[str]]:
        """Full identity key (type, identifier, scope)."""
        return (self.kind.value, self.ident, self.fir_id)

    def to_dict(self) -> dict:
        """Convert to dictionary for JSON serialization."""
        return {
            'kind': self.kind.value,
            'ident': self.ident,
            'latitude': self.latitude,
            'longitude': self.longitude,
            'frequency': self.frequency,
            'elevation_ft': self.elevation_ft,
            'fir_id': self.fir_id,
        }

    def __str__(self) -> str:
        freq = f" {self.frequency}" if self.frequency else ""
        return f"{self.kind.value} {self.ident}{freq} ({self.latitude}, {self.longitude})"
