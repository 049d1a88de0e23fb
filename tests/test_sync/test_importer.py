import pytest

from airac_sync.errors import EncodingError, InputError, ScopeNotFoundError
from airac_sync.models import AirportRecord, ImportKind, NavAidRecord, NavAidType
from airac_sync.sync import Selection

VOR_FILE = b"ABC,39.0000,-9.0000,112.300\nXYZ,bad,data\n"

FIX_FILE = """# LPPC fixes, AIRAC 2410
ABLAN;N039.00.00.000;W009.00.00.000
BUSEN;N040.00.00.000;W009.00.00.000
// temporarily withdrawn
CANDI;N040.00.00.000;W008.00.00.000
"""

BOUNDARY_FILE = """LPPC_CTR;#125.550;GND;FL245
ABLAN
BUSEN
CANDI
N039.30.00.000;W008.30.00.000
"""

AIRPORT_FILE = """LPPT;374;LIS;N038.46.53.000;W009.08.09.000;Lisboa
RWY;03;21;12484;148;ASP
LPPR;228;OPO;N041.14.54.000;W008.40.41.000;Porto
"""


class TestVorScenario:
    """A VOR file with one bad line against a store holding OLD and ABC."""

    @pytest.fixture(autouse=True)
    def seeded(self, seed_navaids, make_vor):
        seed_navaids(make_vor('OLD'), make_vor('ABC', frequency='112.100'))

    def test_preview(self, importer):
        preview = importer.preview(ImportKind.VOR, VOR_FILE, fir_id='LPPC')

        assert preview.to_dict() == {
            'toAdd': [],
            'toDelete': ['OLD'],
            'skipped': 1,
            'warnings': ['1 line could not be parsed and was omitted'],
        }
        assert preview.parsed == 1

    def test_preview_writes_nothing(self, importer, storage):
        importer.preview(ImportKind.VOR, VOR_FILE, fir_id='LPPC')
        assert storage.count_navaids() == 2

    def test_confirm(self, importer, storage):
        result = importer.confirm(ImportKind.VOR, VOR_FILE, fir_id='LPPC',
                                  selection=Selection(add=[], delete=['OLD']))

        assert (result.added, result.deleted) == (0, 1)
        vors = storage.get_navaids(NavAidType.VOR, 'LPPC')
        assert [(v.ident, v.frequency) for v in vors] == [('ABC', '112.100')]

    def test_fir_given_by_icao_code(self, importer, storage):
        storage.add_fir('fir-9', icao_code='GCCC')
        preview = importer.preview(ImportKind.VOR, VOR_FILE, fir_id='gccc')
        assert preview.diff.fir_id == 'fir-9'
        assert list(preview.diff.to_add) == ['ABC']


class TestNavAidImport:

    def test_full_apply_is_idempotent(self, importer, storage):
        importer.confirm(ImportKind.FIX, FIX_FILE, fir_id='LPPC')

        assert importer.preview(ImportKind.FIX, FIX_FILE, fir_id='LPPC').diff.is_empty
        assert [f.ident for f in storage.get_navaids(NavAidType.FIX, 'LPPC')] == ['ABLAN', 'BUSEN', 'CANDI']

    def test_empty_selection_writes_nothing(self, importer, storage, seed_navaids):
        seed_navaids(NavAidRecord(kind=NavAidType.FIX, ident='OLDFX', latitude=38.0, longitude=-9.0, fir_id='LPPC'))

        result = importer.confirm(ImportKind.FIX, FIX_FILE, fir_id='LPPC', selection=Selection.nothing())

        assert result.total == 0
        assert [f.ident for f in storage.get_navaids(NavAidType.FIX, 'LPPC')] == ['OLDFX']

    def test_stale_selection_is_ignored(self, importer, storage):
        result = importer.confirm(ImportKind.FIX, FIX_FILE, fir_id='LPPC',
                                  selection=Selection(add=['ablan', 'GONE'], delete=[]))
        assert result.added == 1
        assert [f.ident for f in storage.get_navaids(NavAidType.FIX, 'LPPC')] == ['ABLAN']

    def test_global_scope_is_separate(self, importer, storage):
        importer.confirm(ImportKind.FIX, FIX_FILE, fir_id='LPPC')
        importer.confirm(ImportKind.FIX, "ZULU;N030.00.00.000;W010.00.00.000\n")

        assert [f.ident for f in storage.get_navaids(NavAidType.FIX, None)] == ['ZULU']
        assert len(storage.get_navaids(NavAidType.FIX, 'LPPC')) == 3

    def test_file_without_entries(self, importer, storage, seed_navaids, make_vor):
        seed_navaids(make_vor('OLD'))
        with pytest.raises(InputError, match="No entries parsed from file"):
            importer.confirm(ImportKind.VOR, b"# nothing\nXYZ,bad,data\n", fir_id='LPPC')
        assert storage.count_navaids() == 1

    def test_unknown_fir(self, importer):
        with pytest.raises(ScopeNotFoundError):
            importer.preview(ImportKind.FIX, FIX_FILE, fir_id='XXXX')

    def test_binary_upload(self, importer):
        with pytest.raises(EncodingError):
            importer.preview(ImportKind.FIX, b"ABLAN\x00;N039;W009")


class TestBoundaryImport:

    def test_named_points_resolved_from_store(self, importer, storage):
        importer.confirm(ImportKind.FIX, FIX_FILE, fir_id='LPPC')

        preview = importer.preview(ImportKind.BOUNDARY, BOUNDARY_FILE, fir_id='LPPC')
        assert preview.to_dict()['toAdd'] == ['LPPC_CTR/125.550']
        assert preview.skipped == 0

        result = importer.confirm(ImportKind.BOUNDARY, BOUNDARY_FILE, fir_id='LPPC',
                                  selection=Selection(add=['LPPC_CTR/125.550']))
        assert result.added == 1
        stored = storage.get_boundaries('LPPC')[0]
        assert [p.navaid_ident for p in stored.points] == ['ABLAN', 'BUSEN', 'CANDI', None]
        assert importer.preview(ImportKind.BOUNDARY, BOUNDARY_FILE, fir_id='LPPC').diff.is_empty

    def test_group_missing_from_file_is_deleted(self, importer, storage):
        two_groups = BOUNDARY_FILE.replace('ABLAN\nBUSEN\nCANDI\n', 'N039.00.00.000;W009.00.00.000\n'
                                           'N040.00.00.000;W009.00.00.000\n') + (
            "LPPC_APP;#119.100\n"
            "N038.00.00.000;W009.00.00.000\n"
            "N038.50.00.000;W009.00.00.000\n"
            "N038.50.00.000;W008.50.00.000\n"
        )
        importer.confirm(ImportKind.BOUNDARY, two_groups, fir_id='LPPC')
        assert storage.count_boundary_rows() == (2, 6)

        preview = importer.preview(ImportKind.BOUNDARY, two_groups.split('LPPC_APP')[0], fir_id='LPPC')
        assert preview.to_dict()['toDelete'] == ['LPPC_APP/119.100']


class TestAirportImport:

    def test_add_then_update_keeps_curated_content(self, importer, storage):
        importer.confirm(ImportKind.AIRPORT, AIRPORT_FILE, fir_id='LPPC')
        storage.update_curated_fields('LPPT', notes='Follow-me required')

        renamed = AIRPORT_FILE.replace('Lisboa', 'Humberto Delgado')
        preview = importer.preview(ImportKind.AIRPORT, renamed, fir_id='LPPC')
        assert preview.to_dict() == {
            'toAdd': [],
            'toUpdate': ['LPPT'],
            'changes': {'LPPT': ['name']},
            'skipped': 0,
            'warnings': [],
        }

        result = importer.confirm(ImportKind.AIRPORT, renamed, fir_id='LPPC',
                                  selection=Selection(add=[], update=['LPPT']))
        assert result.updated == 1
        assert storage.get_airport('LPPT').name == 'Humberto Delgado'
        assert storage.get_curated_fields('LPPT')['notes'] == 'Follow-me required'

    def test_airports_absent_from_file_are_kept(self, importer, storage, seed_airports):
        seed_airports(AirportRecord(icao='LPFR', name='Faro', latitude=37.01, longitude=-7.97))

        importer.confirm(ImportKind.AIRPORT, AIRPORT_FILE)

        assert storage.count_airports() == 3

    def test_empty_selection_writes_nothing(self, importer, storage):
        result = importer.confirm(ImportKind.AIRPORT, AIRPORT_FILE, selection=Selection(add=[], update=[]))
        assert result.total == 0
        assert storage.count_airports() == 0

    def test_full_apply_is_idempotent(self, importer, storage):
        content = AIRPORT_FILE + """RWY;17;35;7861;148;asp
FRQ;lppt_twr;118.1;Lisboa Tower
FRQ;LPPT_GND;121.750
"""
        first = importer.confirm(ImportKind.AIRPORT, content, fir_id='LPPC')
        assert first.added == 2

        preview = importer.preview(ImportKind.AIRPORT, content, fir_id='LPPC')
        assert preview.diff.is_empty
        assert preview.diff.total_changes == 0

        second = importer.confirm(ImportKind.AIRPORT, content, fir_id='LPPC')
        assert second.total == 0
        assert len(storage.get_airport('LPPR').frequencies) == 2
