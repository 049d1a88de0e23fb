import pytest

from airac_sync.models import NavAidRecord, NavAidType, BoundaryRecord, AirportRecord
from airac_sync.storage import AiracStorage
from airac_sync.sync import AiracImporter


@pytest.fixture
def temp_db_path(tmp_path) -> str:
    """Return a path for a fresh SQLite database."""
    return str(tmp_path / 'airac.db')


@pytest.fixture
def storage(temp_db_path) -> AiracStorage:
    """Create an AiracStorage with two FIRs."""
    storage = AiracStorage(temp_db_path)
    storage.add_fir('LPPC', icao_code='LPPC', name='Lisboa')
    storage.add_fir('LPPO', icao_code='LPPO', name='Santa Maria')
    return storage


@pytest.fixture
def importer(storage) -> AiracImporter:
    return AiracImporter(storage)


@pytest.fixture
def seed_navaids(storage):
    """Return a function writing nav aids straight to the store."""
    def seed(*records: NavAidRecord):
        with storage.transaction() as conn:
            for record in records:
                storage.insert_navaid(conn, record)
    return seed


@pytest.fixture
def seed_boundary(storage):
    """Return a function writing a boundary and its points straight to the store."""
    def seed(record: BoundaryRecord):
        with storage.transaction() as conn:
            boundary_id = storage.insert_boundary(conn, record)
            for point in record.points:
                storage.insert_boundary_point(conn, boundary_id, point)
    return seed


@pytest.fixture
def seed_airports(storage):
    def seed(*records: AirportRecord):
        with storage.transaction() as conn:
            for record in records:
                storage.insert_airport(conn, record)
    return seed


def vor(ident: str, frequency: str = '112.300', fir_id: str = 'LPPC',
        latitude: float = 39.0, longitude: float = -9.0) -> NavAidRecord:
    return NavAidRecord(kind=NavAidType.VOR, ident=ident, latitude=latitude, longitude=longitude,
                        frequency=frequency, fir_id=fir_id)


@pytest.fixture
def make_vor():
    """Return the VOR record builder."""
    return vor
