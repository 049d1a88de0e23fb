from .base import ImportParser, split_fields, format_frequency, DEFAULT_COMMENT_PREFIXES
from .coordinates import parse_coordinate, is_coordinate, LAT, LON
from .navaid import NavAidParser
from .boundary import BoundaryParser
from .airport import AirportParser
from .factory import ParserFactory

__all__ = [
    'ImportParser',
    'split_fields',
    'format_frequency',
    'DEFAULT_COMMENT_PREFIXES',
    'parse_coordinate',
    'is_coordinate',
    'LAT',
    'LON',
    'NavAidParser',
    'BoundaryParser',
    'AirportParser',
    'ParserFactory',
]
