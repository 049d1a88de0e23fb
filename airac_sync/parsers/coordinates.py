"""
Coordinate parsing for AIRAC text files.

Accepted forms (hemisphere letter before or after the number):
    N038.45.59.210   dotted degrees.minutes.seconds
    N384559.21       compact DDMMSS / DDDMMSS
    N3845.5          compact DDMM.m / DDDMM.m
    38°45'59.2"N     symbol or space separated
    39.5N            decimal degrees with hemisphere
    -9.0000, 39,5    signed decimal degrees
"""

import re
from typing import Optional

LAT = 'lat'
LON = 'lon'

DMS_DOTTED = re.compile(r'^(\d{1,3})\.(\d{1,2})\.(\d{1,2}(?:\.\d+)?)$')
COMPACT = re.compile(r'^(\d+)(?:\.(\d+))?$')
DMS_SEPARATED = re.compile(
    r'^(\d{1,3})\s*[°\s]\s*(\d{1,2})\s*[\'′\s]\s*(\d{1,2}(?:[.,]\d+)?)\s*(?:"|″|\'\')?$'
)
DECIMAL = re.compile(r'^[+-]?\d+(?:[.,]\d+)?$')

HEMISPHERES = {'N': LAT, 'S': LAT, 'E': LON, 'W': LON}


def _split_hemisphere(raw: str):
    """Return (hemisphere or None, numeric body)."""
    if raw[:1] in HEMISPHERES:
        return raw[0], raw[1:].strip()
    if raw[-1:] in HEMISPHERES:
        return raw[-1], raw[:-1].strip()
    return None, raw


def _from_dms(degrees: float, minutes: float, seconds: float = 0.0) -> Optional[float]:
    if minutes >= 60 or seconds >= 60:
        return None
    return degrees + minutes / 60 + seconds / 3600


def _parse_compact(body: str, axis: str) -> Optional[float]:
    """Parse an undelimited DDMMSS-style body; degree width depends on the axis."""
    match = COMPACT.match(body)
    if not match:
        return None
    int_part, frac = match.group(1), match.group(2)
    if len(int_part) <= 3:
        return float(body)

    widths = (2, 3) if axis == LAT else (3, 2)
    for width in widths:
        rest = int_part[width:]
        degrees = float(int_part[:width])
        if len(rest) == 2:
            minutes = float(rest + ('.' + frac if frac else ''))
            return _from_dms(degrees, minutes)
        if len(rest) == 4:
            seconds = float(rest[2:] + ('.' + frac if frac else ''))
            return _from_dms(degrees, float(rest[:2]), seconds)
    return None


def _in_range(value: float, axis: Optional[str]) -> bool:
    limit = 90 if axis == LAT else 180
    return -limit <= value <= limit


def parse_coordinate(raw, axis: Optional[str] = None) -> Optional[float]:
    """
    Parse a latitude or longitude into signed decimal degrees.

    Args:
        raw: Text token (numbers are accepted as-is)
        axis: LAT or LON to enforce hemisphere letters and range; None accepts both

    Returns:
        Decimal degrees, or None if the token is not a valid coordinate
    """
    if raw is None:
        return None
    if isinstance(raw, (int, float)):
        value = float(raw)
        return value if _in_range(value, axis) else None

    text = str(raw).strip().upper()
    if not text:
        return None

    hemisphere, body = _split_hemisphere(text)
    if hemisphere is None:
        if not DECIMAL.match(body):
            return None
        value = float(body.replace(',', '.'))
        return value if _in_range(value, axis) else None

    hemisphere_axis = HEMISPHERES[hemisphere]
    if axis is not None and axis != hemisphere_axis:
        return None

    value = None
    dotted = DMS_DOTTED.match(body)
    separated = DMS_SEPARATED.match(body)
    if dotted:
        value = _from_dms(float(dotted.group(1)), float(dotted.group(2)), float(dotted.group(3)))
    elif separated:
        value = _from_dms(float(separated.group(1)), float(separated.group(2)),
                          float(separated.group(3).replace(',', '.')))
    else:
        value = _parse_compact(body, hemisphere_axis)

    if value is None:
        return None
    if hemisphere in ('S', 'W'):
        value = -value
    return value if _in_range(value, hemisphere_axis) else None


def is_coordinate(raw, axis: Optional[str] = None) -> bool:
    return parse_coordinate(raw, axis) is not None
