#!/usr/bin/env python3

import sqlite3
import logging
from pathlib import Path
from typing import Dict, Iterable, List, Optional, Tuple
from datetime import datetime
from contextlib import contextmanager

from ..models.navaid import NavAidRecord, NavAidType
from ..models.boundary import BoundaryPoint, BoundaryRecord
from ..models.airport import AirportFrequency, AirportRecord, RunwayRecord
from .field_definitions import (
    AirportFields, AirportFrequencyFields, BoundaryFields, BoundaryPointFields,
    FirFields, NavAidFields, RunwayFields, SchemaManager,
)

logger = logging.getLogger(__name__)

# Keeps IN (...) lists below SQLite's host parameter limit
QUERY_CHUNK_SIZE = 500


class AiracStorage:
    """
    SQLite store for FIRs, nav aids, boundaries and airports.

    Every read opens its own connection. Writes go through `transaction()`,
    which yields one connection and commits or rolls back as a unit; the
    write helpers all take that connection as first argument so a caller
    can group any number of them.
    """

    def __init__(self, database_path: str, timeout: Optional[float] = None):
        """
        Initialize the database storage.

        Args:
            database_path: Path to the SQLite database file
            timeout: Seconds to wait on a locked database (SQLite default if None)
        """
        self.database_path = Path(database_path)
        self.timeout = timeout
        self.schema_manager = SchemaManager()
        self._create_schema()

    @contextmanager
    def _get_connection(self):
        """Get database connection with context manager."""
        if self.timeout is not None:
            conn = sqlite3.connect(str(self.database_path), timeout=self.timeout)
        else:
            conn = sqlite3.connect(str(self.database_path))
        conn.row_factory = sqlite3.Row
        conn.execute("PRAGMA foreign_keys = ON")
        try:
            yield conn
            conn.commit()
        except Exception:
            conn.rollback()
            raise
        finally:
            conn.close()

    def transaction(self):
        """
        Open a write transaction.

        Usage:
            with storage.transaction() as conn:
                storage.delete_navaid(conn, NavAidType.VOR, 'OLD', 'LPPC')
                storage.insert_navaid(conn, record)
        """
        return self._get_connection()

    def _create_schema(self):
        """Create the database schema using field definitions."""
        sm = self.schema_manager
        with self._get_connection() as conn:
            conn.execute(sm.get_create_table_sql("firs", FirFields.get_all_fields(), primary_key="id"))
            conn.execute(sm.get_create_table_sql(
                "navaids",
                NavAidFields.get_all_fields(),
                autoincrement_id=True,
                foreign_keys=[("fir_id", "firs (id)")],
            ))
            conn.execute(sm.get_create_table_sql(
                "boundaries",
                BoundaryFields.get_all_fields(),
                autoincrement_id=True,
                foreign_keys=[("fir_id", "firs (id)")],
            ))
            # No ON DELETE CASCADE: points must be removed before their boundary
            conn.execute(sm.get_create_table_sql(
                "boundary_points",
                BoundaryPointFields.get_all_fields(),
                autoincrement_id=True,
                foreign_keys=[("boundary_id", "boundaries (id)")],
            ))
            conn.execute(sm.get_create_table_sql(
                "airports",
                AirportFields.get_all_fields(),
                primary_key="icao_code",
                foreign_keys=[("fir_id", "firs (id)")],
            ))
            conn.execute(sm.get_create_table_sql(
                "runways",
                RunwayFields.get_all_fields(),
                autoincrement_id=True,
                foreign_keys=[("airport_icao", "airports (icao_code)")],
            ))
            conn.execute(sm.get_create_table_sql(
                "airport_frequencies",
                AirportFrequencyFields.get_all_fields(),
                autoincrement_id=True,
                foreign_keys=[("airport_icao", "airports (icao_code)")],
            ))
            conn.execute('''
                CREATE TABLE IF NOT EXISTS model_metadata (
                    key TEXT PRIMARY KEY,
                    value TEXT,
                    updated_at TEXT
                )
            ''')

            # The global scope is fir_id NULL, which a plain UNIQUE would not collapse
            conn.execute('''
                CREATE UNIQUE INDEX IF NOT EXISTS idx_navaids_identity
                ON navaids (kind, ident, IFNULL(fir_id, ''))
            ''')
            conn.execute('''
                CREATE UNIQUE INDEX IF NOT EXISTS idx_boundaries_identity
                ON boundaries (station, frequency, IFNULL(fir_id, ''))
            ''')
            conn.execute('CREATE INDEX IF NOT EXISTS idx_boundary_points_boundary ON boundary_points (boundary_id, point_order)')
            conn.execute('CREATE INDEX IF NOT EXISTS idx_runways_airport ON runways (airport_icao)')
            conn.execute('CREATE INDEX IF NOT EXISTS idx_airport_frequencies_airport ON airport_frequencies (airport_icao)')

            conn.execute('''
                INSERT OR REPLACE INTO model_metadata (key, value, updated_at)
                VALUES ('schema_version', ?, ?)
            ''', (str(sm.version), datetime.now().isoformat()))

        logger.debug(f"Schema ready in {self.database_path}")

    def get_schema_version(self) -> Optional[int]:
        with self._get_connection() as conn:
            row = conn.execute("SELECT value FROM model_metadata WHERE key = 'schema_version'").fetchone()
            return int(row['value']) if row else None

    # FIRs

    def add_fir(self, fir_id: str, icao_code: Optional[str] = None, name: Optional[str] = None) -> None:
        """Create or replace a FIR."""
        with self._get_connection() as conn:
            conn.execute(
                "INSERT OR REPLACE INTO firs (id, icao_code, name) VALUES (?, ?, ?)",
                (fir_id, icao_code.upper() if icao_code else None, name),
            )

    def get_fir(self, fir_id: str) -> Optional[Dict[str, Optional[str]]]:
        with self._get_connection() as conn:
            row = conn.execute("SELECT id, icao_code, name FROM firs WHERE id = ?", (fir_id,)).fetchone()
            return dict(row) if row else None

    def find_fir_by_icao(self, icao_code: str) -> Optional[Dict[str, Optional[str]]]:
        """Look a FIR up by ICAO code, ignoring case."""
        with self._get_connection() as conn:
            row = conn.execute(
                "SELECT id, icao_code, name FROM firs WHERE UPPER(icao_code) = UPPER(?)",
                (icao_code,),
            ).fetchone()
            return dict(row) if row else None

    def list_firs(self) -> List[Dict[str, Optional[str]]]:
        with self._get_connection() as conn:
            return [dict(row) for row in conn.execute("SELECT id, icao_code, name FROM firs ORDER BY id")]

    # Nav aids

    def get_navaids(self, kind: NavAidType, fir_id: Optional[str]) -> List[NavAidRecord]:
        """
        Get the nav aids of one kind in a scope.

        Args:
            kind: FIX, VOR or NDB
            fir_id: FIR identifier, None for the global scope (records without FIR)
        """
        with self._get_connection() as conn:
            rows = conn.execute(
                "SELECT * FROM navaids WHERE kind = ? AND fir_id IS ? ORDER BY ident",
                (kind.value, fir_id),
            ).fetchall()
            return [self._row_to_navaid(row) for row in rows]

    def count_navaids(self, kind: Optional[NavAidType] = None) -> int:
        """Count nav aids across all scopes."""
        with self._get_connection() as conn:
            if kind is None:
                row = conn.execute("SELECT COUNT(*) AS n FROM navaids").fetchone()
            else:
                row = conn.execute("SELECT COUNT(*) AS n FROM navaids WHERE kind = ?", (kind.value,)).fetchone()
            return row['n']

    def get_navaid_positions(self, fir_id: Optional[str] = None) -> Dict[str, Tuple[float, float]]:
        """
        Map nav aid identifiers to coordinates, for resolving named boundary points.

        Global nav aids are included; a nav aid of the FIR wins over a global
        one with the same identifier.
        """
        with self._get_connection() as conn:
            rows = conn.execute(
                "SELECT ident, latitude_deg, longitude_deg, fir_id FROM navaids "
                "WHERE fir_id IS ? OR fir_id IS NULL "
                "ORDER BY CASE WHEN fir_id IS NULL THEN 0 ELSE 1 END",
                (fir_id,),
            ).fetchall()
        return {row['ident']: (row['latitude_deg'], row['longitude_deg']) for row in rows}

    def insert_navaid(self, conn: sqlite3.Connection, record: NavAidRecord) -> None:
        conn.execute('''
            INSERT INTO navaids (kind, ident, latitude_deg, longitude_deg, frequency, elevation_ft, fir_id, updated_at)
            VALUES (?, ?, ?, ?, ?, ?, ?, ?)
        ''', (
            record.kind.value,
            record.ident,
            record.latitude,
            record.longitude,
            record.frequency,
            record.elevation_ft,
            record.fir_id,
            datetime.now().isoformat(),
        ))

    def delete_navaid(self, conn: sqlite3.Connection, kind: NavAidType, ident: str, fir_id: Optional[str]) -> int:
        """Delete one nav aid by identity; returns the number of rows removed."""
        cursor = conn.execute(
            "DELETE FROM navaids WHERE kind = ? AND ident = ? AND fir_id IS ?",
            (kind.value, ident, fir_id),
        )
        return cursor.rowcount

    def _row_to_navaid(self, row: sqlite3.Row) -> NavAidRecord:
        return NavAidRecord(
            kind=NavAidType(row['kind']),
            ident=row['ident'],
            latitude=row['latitude_deg'],
            longitude=row['longitude_deg'],
            frequency=row['frequency'],
            elevation_ft=row['elevation_ft'],
            fir_id=row['fir_id'],
        )

    # Boundaries

    def get_boundaries(self, fir_id: Optional[str]) -> List[BoundaryRecord]:
        """Get the boundaries of a scope with their points in order."""
        with self._get_connection() as conn:
            rows = conn.execute(
                "SELECT * FROM boundaries WHERE fir_id IS ? ORDER BY station, frequency",
                (fir_id,),
            ).fetchall()
            boundaries = []
            for row in rows:
                points = conn.execute(
                    "SELECT * FROM boundary_points WHERE boundary_id = ? ORDER BY point_order",
                    (row['id'],),
                ).fetchall()
                boundaries.append(BoundaryRecord(
                    station=row['station'],
                    frequency=row['frequency'],
                    lower_limit=row['lower_limit'],
                    upper_limit=row['upper_limit'],
                    restricted=BoundaryFields.RESTRICTED.format_from_storage(row['restricted']),
                    fir_id=row['fir_id'],
                    points=[
                        BoundaryPoint(
                            latitude=p['latitude_deg'],
                            longitude=p['longitude_deg'],
                            order=p['point_order'],
                            navaid_ident=p['navaid_ident'],
                        )
                        for p in points
                    ],
                ))
            return boundaries

    def count_boundary_rows(self) -> Tuple[int, int]:
        """Return (boundaries, boundary points) across all scopes."""
        with self._get_connection() as conn:
            headers = conn.execute("SELECT COUNT(*) AS n FROM boundaries").fetchone()['n']
            points = conn.execute("SELECT COUNT(*) AS n FROM boundary_points").fetchone()['n']
            return headers, points

    def find_boundary_id(self, conn: sqlite3.Connection, station: str, frequency: str,
                         fir_id: Optional[str]) -> Optional[int]:
        row = conn.execute(
            "SELECT id FROM boundaries WHERE station = ? AND frequency = ? AND fir_id IS ?",
            (station, frequency, fir_id),
        ).fetchone()
        return row['id'] if row else None

    def delete_boundary_points(self, conn: sqlite3.Connection, boundary_id: int) -> int:
        return conn.execute("DELETE FROM boundary_points WHERE boundary_id = ?", (boundary_id,)).rowcount

    def delete_boundary_row(self, conn: sqlite3.Connection, boundary_id: int) -> int:
        """Delete a boundary header; fails on the foreign key while points remain."""
        return conn.execute("DELETE FROM boundaries WHERE id = ?", (boundary_id,)).rowcount

    def insert_boundary(self, conn: sqlite3.Connection, record: BoundaryRecord) -> int:
        """Insert a boundary header row and return its id. Points are inserted separately."""
        cursor = conn.execute('''
            INSERT INTO boundaries (station, frequency, lower_limit, upper_limit, restricted, fir_id, updated_at)
            VALUES (?, ?, ?, ?, ?, ?, ?)
        ''', (
            record.station,
            record.frequency,
            record.lower_limit,
            record.upper_limit,
            BoundaryFields.RESTRICTED.format_for_storage(record.restricted),
            record.fir_id,
            datetime.now().isoformat(),
        ))
        return cursor.lastrowid

    def insert_boundary_point(self, conn: sqlite3.Connection, boundary_id: int, point: BoundaryPoint) -> None:
        conn.execute('''
            INSERT INTO boundary_points (boundary_id, point_order, latitude_deg, longitude_deg, navaid_ident)
            VALUES (?, ?, ?, ?, ?)
        ''', (boundary_id, point.order, point.latitude, point.longitude, point.navaid_ident))

    # Airports

    def get_airports(self, icao_codes: Iterable[str]) -> Dict[str, AirportRecord]:
        """
        Load airports by ICAO code.

        Args:
            icao_codes: Codes to look up; unknown codes are ignored

        Returns:
            ICAO code -> AirportRecord, with runways and frequencies
        """
        codes = sorted({c.upper() for c in icao_codes})
        airports: Dict[str, AirportRecord] = {}
        with self._get_connection() as conn:
            for start in range(0, len(codes), QUERY_CHUNK_SIZE):
                chunk = codes[start:start + QUERY_CHUNK_SIZE]
                placeholders = ",".join("?" * len(chunk))
                for row in conn.execute(f"SELECT * FROM airports WHERE icao_code IN ({placeholders})", chunk):
                    airports[row['icao_code']] = self._row_to_airport(row)
                for row in conn.execute(
                    f"SELECT * FROM runways WHERE airport_icao IN ({placeholders}) ORDER BY id", chunk
                ):
                    airports[row['airport_icao']].runways.append(RunwayRecord(
                        le_ident=row['le_ident'],
                        he_ident=row['he_ident'],
                        length_ft=row['length_ft'],
                        width_ft=row['width_ft'],
                        surface=row['surface'],
                    ))
                for row in conn.execute(
                    f"SELECT * FROM airport_frequencies WHERE airport_icao IN ({placeholders}) ORDER BY id", chunk
                ):
                    airports[row['airport_icao']].frequencies.append(AirportFrequency(
                        station=row['station'],
                        frequency=row['frequency'],
                        name=row['name'],
                    ))
        return airports

    def get_airport(self, icao_code: str) -> Optional[AirportRecord]:
        return self.get_airports([icao_code]).get(icao_code.upper())

    def count_airports(self) -> int:
        with self._get_connection() as conn:
            return conn.execute("SELECT COUNT(*) AS n FROM airports").fetchone()['n']

    def get_curated_fields(self, icao_code: str) -> Optional[Dict[str, Optional[str]]]:
        """Operator-maintained content of an airport (stands, charts, notes)."""
        names = ", ".join(f.name for f in AirportFields.get_curated_fields())
        with self._get_connection() as conn:
            row = conn.execute(f"SELECT {names} FROM airports WHERE icao_code = ?", (icao_code.upper(),)).fetchone()
            return dict(row) if row else None

    def update_curated_fields(self, icao_code: str, **values: Optional[str]) -> None:
        """
        Set operator-maintained content of an airport.

        Raises:
            ValueError: If a key is not a curated field
        """
        allowed = {f.name for f in AirportFields.get_curated_fields()}
        unknown = set(values) - allowed
        if unknown:
            raise ValueError(f"Not curated airport fields: {', '.join(sorted(unknown))}")
        if not values:
            return
        assignments = ", ".join(f"{name} = ?" for name in values)
        with self._get_connection() as conn:
            conn.execute(
                f"UPDATE airports SET {assignments}, updated_at = ? WHERE icao_code = ?",
                list(values.values()) + [datetime.now().isoformat(), icao_code.upper()],
            )

    def insert_airport(self, conn: sqlite3.Connection, record: AirportRecord) -> None:
        """Insert an airport with its runways and frequencies."""
        now = datetime.now().isoformat()
        conn.execute('''
            INSERT INTO airports (icao_code, name, iata_code, latitude_deg, longitude_deg, elevation_ft,
                                  fir_id, created_at, updated_at)
            VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?)
        ''', (
            record.icao,
            record.display_name,
            record.iata_code,
            record.latitude,
            record.longitude,
            record.elevation_ft,
            record.fir_id,
            now,
            now,
        ))
        self.replace_runways(conn, record.icao, record.runways)
        self.replace_frequencies(conn, record.icao, record.frequencies)

    def update_airport(self, conn: sqlite3.Connection, record: AirportRecord) -> None:
        """
        Update the AIRAC-owned columns of an existing airport.

        IATA code, elevation and FIR keep their stored value when the record
        leaves them unset. Curated columns, runways and frequencies are not
        touched here.
        """
        conn.execute('''
            UPDATE airports SET
                name = ?,
                latitude_deg = ?,
                longitude_deg = ?,
                iata_code = COALESCE(?, iata_code),
                elevation_ft = COALESCE(?, elevation_ft),
                fir_id = COALESCE(?, fir_id),
                updated_at = ?
            WHERE icao_code = ?
        ''', (
            record.display_name,
            record.latitude,
            record.longitude,
            record.iata_code,
            record.elevation_ft,
            record.fir_id,
            datetime.now().isoformat(),
            record.icao,
        ))

    def replace_runways(self, conn: sqlite3.Connection, icao_code: str, runways: List[RunwayRecord]) -> None:
        conn.execute("DELETE FROM runways WHERE airport_icao = ?", (icao_code,))
        conn.executemany('''
            INSERT INTO runways (airport_icao, le_ident, he_ident, length_ft, width_ft, surface)
            VALUES (?, ?, ?, ?, ?, ?)
        ''', [(icao_code, r.le_ident, r.he_ident, r.length_ft, r.width_ft, r.surface) for r in runways])

    def replace_frequencies(self, conn: sqlite3.Connection, icao_code: str,
                            frequencies: List[AirportFrequency]) -> None:
        conn.execute("DELETE FROM airport_frequencies WHERE airport_icao = ?", (icao_code,))
        conn.executemany('''
            INSERT INTO airport_frequencies (airport_icao, station, frequency, name)
            VALUES (?, ?, ?, ?)
        ''', [(icao_code, f.station, f.frequency, f.name) for f in frequencies])

    def _row_to_airport(self, row: sqlite3.Row) -> AirportRecord:
        return AirportRecord(
            icao=row['icao_code'],
            name=row['name'] or "",
            iata_code=row['iata_code'],
            latitude=row['latitude_deg'] if row['latitude_deg'] is not None else 0.0,
            longitude=row['longitude_deg'] if row['longitude_deg'] is not None else 0.0,
            elevation_ft=row['elevation_ft'],
            fir_id=row['fir_id'],
        )
