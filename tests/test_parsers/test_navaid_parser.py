import pytest

from airac_sync.models import NavAidType
from airac_sync.parsers import NavAidParser, ParserFactory
from airac_sync.models.diff import ImportKind


class TestNavAidParser:
    """FIX, VOR and NDB line parsing."""

    def test_vor_comma_layout_with_bad_line(self):
        parser = NavAidParser(NavAidType.VOR)
        result = parser.parse(['ABC,39.0000,-9.0000,112.300', 'XYZ,bad,data'], fir_id='LPPC')

        assert len(result.records) == 1
        assert result.skipped == 1
        record = result.records[0]
        assert record.ident == 'ABC'
        assert record.frequency == '112.300'
        assert record.latitude == pytest.approx(39.0)
        assert record.longitude == pytest.approx(-9.0)
        assert record.fir_id == 'LPPC'
        assert result.warning.message == "1 line could not be parsed and was omitted"

    def test_vor_frequency_before_coordinates(self):
        parser = NavAidParser(NavAidType.VOR)
        result = parser.parse(['FTM;112.3;N038.46.51.000;W009.17.34.000;2000'])

        assert result.skipped == 0
        record = result.records[0]
        assert record.frequency == '112.300'
        assert record.latitude == pytest.approx(38 + 46 / 60 + 51 / 3600)
        assert record.elevation_ft == 2000.0

    def test_vor_elevation_after_frequency(self):
        parser = NavAidParser(NavAidType.VOR)
        result = parser.parse(['FTM;N038.46.51.000;W009.17.34.000;112.30;1500'])
        assert result.records[0].elevation_ft == 1500.0

    def test_ndb_frequency_normalised(self):
        parser = NavAidParser(NavAidType.NDB)
        result = parser.parse(['CP\tN039.00.00.000\tW009.00.00.000\t375'])

        assert result.records[0].ident == 'CP'
        assert result.records[0].frequency == '375.000'
        assert result.records[0].elevation_ft is None

    def test_fix_has_no_frequency(self):
        parser = NavAidParser(NavAidType.FIX)
        result = parser.parse(['ABLAN;N039.00.00.000;W009.00.00.000'])

        assert result.records[0].frequency is None
        assert result.records[0].kind is NavAidType.FIX

    def test_fix_finds_coordinates_after_extra_columns(self):
        parser = NavAidParser(NavAidType.FIX)
        result = parser.parse(['ABLAN;WPT;N039.00.00.000;W009.30.00.000'])

        assert result.skipped == 0
        assert result.records[0].latitude == pytest.approx(39.0)
        assert result.records[0].longitude == pytest.approx(-9.5)

    def test_identifier_upper_cased_and_validated(self):
        parser = NavAidParser(NavAidType.FIX)
        result = parser.parse([
            'ablan;N039.00.00.000;W009.00.00.000',
            'AB-LAN;N039.00.00.000;W009.00.00.000',
        ])
        assert [r.ident for r in result.records] == ['ABLAN']
        assert result.skipped == 1
        assert 'invalid identifier' in result.skipped_lines[0].reason

    def test_duplicates_keep_last_occurrence(self):
        parser = NavAidParser(NavAidType.FIX)
        result = parser.parse([
            'ABLAN;N039.00.00.000;W009.00.00.000',
            'ABLAN;N040.00.00.000;W009.00.00.000',
        ])
        assert len(result.records) == 1
        assert result.records[0].latitude == pytest.approx(40.0)

    @pytest.mark.parametrize("line", [
        'ABC;N039.00.00.000;W009.00.00.000',        # no frequency
        'ABC;N039.00.00.000;W009.00.00.000;0',      # frequency not positive
        'ABC;N099.00.00.000;W009.00.00.000;112.3',  # latitude out of range
        'ABC;W009.00.00.000;N039.00.00.000;112.3',  # axes swapped
    ])
    def test_invalid_vor_lines_are_skipped(self, line):
        result = NavAidParser(NavAidType.VOR).parse([line])
        assert result.records == []
        assert result.skipped == 1

    def test_factory_builds_parser_per_kind(self):
        assert ParserFactory.get_parser(ImportKind.NDB).kind is NavAidType.NDB
        assert set(ParserFactory.get_supported_kinds()) == set(ImportKind)
