from dataclasses import dataclass, field
from typing import List, Optional, Tuple

from .navaid import validate_coordinates

# Minimum number of lateral points needed to close an area
MIN_BOUNDARY_POINTS = 3

# Decimal places used when comparing geometry (about 1 cm)
COORDINATE_PRECISION = 7


@dataclass
class BoundaryPoint:
    """A lateral point of a frequency boundary."""

    latitude: float
    longitude: float
    order: int = 0
    navaid_ident: Optional[str] = None  # Set when the point was given as a nav aid

    def __post_init__(self):
        validate_coordinates(self.latitude, self.longitude)

    def to_dict(self) -> dict:
        return {
            'order': self.order,
            'latitude': self.latitude,
            'longitude': self.longitude,
            'navaid_ident': self.navaid_ident,
        }


@dataclass
class BoundaryRecord:
    """
    Lateral and vertical area of responsibility of an ATC frequency.

    The points form a closed polygon in file order; a record is only valid
    with at least MIN_BOUNDARY_POINTS points.
    """

    station: str
    frequency: str
    lower_limit: Optional[str] = None
    upper_limit: Optional[str] = None
    restricted: bool = False
    points: List[BoundaryPoint] = field(default_factory=list)
    fir_id: Optional[str] = None

    @staticmethod
    def make_key(station: str, frequency: str) -> str:
        return f"{station}/{frequency}"

    @property
    def key(self) -> str:
        """Display key, unique within one scope."""
        return self.make_key(self.station, self.frequency)

    @property
    def identity(self) -> Tuple[str, str, Optional[str]]:
        return (self.station, self.frequency, self.fir_id)

    @property
    def is_valid(self) -> bool:
        return len(self.points) >= MIN_BOUNDARY_POINTS

    def add_point(self, latitude: float, longitude: float, navaid_ident: Optional[str] = None) -> None:
        """Append a point, its order being its position in the list."""
        self.points.append(BoundaryPoint(
            latitude=latitude,
            longitude=longitude,
            order=len(self.points),
            navaid_ident=navaid_ident,
        ))

    def geometry_signature(self) -> tuple:
        """Everything that makes two versions of a boundary different."""
        return (
            self.lower_limit,
            self.upper_limit,
            bool(self.restricted),
            tuple(
                (round(p.latitude, COORDINATE_PRECISION), round(p.longitude, COORDINATE_PRECISION))
                for p in sorted(self.points, key=lambda p: p.order)
            ),
        )

    def to_dict(self) -> dict:
        return {
            'station': self.station,
            'frequency': self.frequency,
            'lower_limit': self.lower_limit,
            'upper_limit': self.upper_limit,
            'restricted': self.restricted,
            'fir_id': self.fir_id,
            'points': [p.to_dict() for p in self.points],
        }

    def __repr__(self):
        return f"BoundaryRecord(station='{self.station}', frequency='{self.frequency}', points={len(self.points)})"
