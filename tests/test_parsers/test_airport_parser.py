import pytest

from airac_sync.parsers import AirportParser

LPPT = 'LPPT;374;LIS;N038.46.53.000;W009.08.09.000;Lisboa'


class TestAirportParser:
    """Airport blocks with nested runway and frequency lines."""

    @pytest.fixture
    def parser(self):
        return AirportParser()

    def test_airport_blocks(self, parser):
        lines = [
            LPPT,
            'RWY;03;21;12484;148;asp',
            'RWY;17;35;7861;148;ASP',
            'FRQ;lppt_twr;118.1;Lisboa Tower',
            'lppr;228;OPO;N041.14.54.000;W008.40.41.000',
            'RWY;17;35',
        ]
        result = parser.parse(lines, fir_id='LPPC')

        assert result.skipped == 0
        airports = {a.icao: a for a in result.records}
        assert set(airports) == {'LPPT', 'LPPR'}

        lppt = airports['LPPT']
        assert lppt.name == 'Lisboa'
        assert lppt.iata_code == 'LIS'
        assert lppt.elevation_ft == 374.0
        assert lppt.fir_id == 'LPPC'
        assert lppt.latitude == pytest.approx(38 + 46 / 60 + 53 / 3600)
        assert [r.designator for r in lppt.runways] == ['03/21', '17/35']
        assert lppt.runways[0].length_ft == 12484.0
        assert lppt.runways[0].surface == 'ASP'
        assert lppt.frequencies[0].station == 'LPPT_TWR'
        assert lppt.frequencies[0].frequency == '118.100'

        lppr = airports['LPPR']
        assert lppr.name == ''
        assert lppr.display_name == 'LPPR'
        assert lppr.runways[0].length_ft is None

    def test_invalid_icao_skips_the_block(self, parser):
        result = parser.parse(['LP1T;374;LIS;N038.46.53.000;W009.08.09.000', 'RWY;03;21', LPPT])

        assert [a.icao for a in result.records] == ['LPPT']
        assert result.skipped == 2
        assert result.skipped_lines[1].reason == "runway or frequency outside an airport block"

    def test_nested_line_before_any_airport(self, parser):
        result = parser.parse(['FRQ;LPPT_TWR;118.1', LPPT])
        assert result.skipped == 1
        assert result.records[0].frequencies == []

    def test_bad_runway_keeps_airport(self, parser):
        result = parser.parse([LPPT, 'RWY;3X;21', 'RWY;03;21'])

        assert result.skipped == 1
        assert [r.le_ident for r in result.records[0].runways] == ['03']

    def test_blank_iata_and_short_lines(self, parser):
        result = parser.parse([
            'LPCS;325;;N038.43.31.000;W009.21.19.000;Cascais',
            'LPFR;24;FAO',
        ])

        assert len(result.records) == 1
        assert result.records[0].iata_code is None
        assert result.skipped == 1

    def test_duplicate_icao_keeps_last_block(self, parser):
        result = parser.parse([LPPT, 'RWY;03;21', LPPT.replace('Lisboa', 'Humberto Delgado')])

        assert len(result.records) == 1
        assert result.records[0].name == 'Humberto Delgado'
        assert result.records[0].runways == []
