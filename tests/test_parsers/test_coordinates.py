import pytest

from airac_sync.parsers.coordinates import LAT, LON, parse_coordinate, is_coordinate

LISBON_LAT = 38 + 45 / 60 + 59.21 / 3600


class TestParseCoordinate:
    """Coordinate formats found in AIRAC files."""

    @pytest.mark.parametrize("raw", [
        'N038.45.59.210',
        'N384559.21',
        '384559.21N',
        'n038.45.59.210',
    ])
    def test_dms_latitude(self, raw):
        assert parse_coordinate(raw, LAT) == pytest.approx(LISBON_LAT, abs=1e-6)

    def test_symbol_separated(self):
        assert parse_coordinate('38°45\'59.21"N', LAT) == pytest.approx(LISBON_LAT, abs=1e-6)

    def test_western_longitude_is_negative(self):
        expected = -(9 + 8 / 60 + 9 / 3600)
        assert parse_coordinate('W009.08.09.000', LON) == pytest.approx(expected)

    def test_compact_longitude_uses_three_degree_digits(self):
        assert parse_coordinate('W0090000', LON) == pytest.approx(-9.0)
        assert parse_coordinate('E0123000', LON) == pytest.approx(12.5)

    def test_compact_minutes_with_decimals(self):
        assert parse_coordinate('N3845.5', LAT) == pytest.approx(38 + 45.5 / 60)

    @pytest.mark.parametrize("raw,axis,expected", [
        ('39.0000', LAT, 39.0),
        ('-9.0000', LON, -9.0),
        ('39,5', LAT, 39.5),
        ('39.5N', LAT, 39.5),
        ('9.25W', LON, -9.25),
        (12.5, LON, 12.5),
    ])
    def test_decimal_forms(self, raw, axis, expected):
        assert parse_coordinate(raw, axis) == pytest.approx(expected)

    @pytest.mark.parametrize("raw,axis", [
        ('E039.00.00.000', LAT),   # hemisphere of the wrong axis
        ('N039.00.00.000', LON),
        ('91.0', LAT),
        ('-181', LON),
        ('N038.61.00.000', LAT),   # 61 minutes
        ('bad', LAT),
        ('', LAT),
        (None, LAT),
        ('ABLAN', None),
    ])
    def test_invalid_values(self, raw, axis):
        assert parse_coordinate(raw, axis) is None

    def test_is_coordinate(self):
        assert is_coordinate('N039.00.00.000')
        assert not is_coordinate('VOR')
