#!/usr/bin/env python3

from typing import Any, List, Tuple
from dataclasses import dataclass
from enum import Enum


class FieldType(Enum):
    """Supported column types."""
    STRING = "TEXT"
    INTEGER = "INTEGER"
    FLOAT = "REAL"
    BOOLEAN = "INTEGER"  # SQLite doesn't have BOOLEAN, use INTEGER
    DATETIME = "TEXT"    # Store as ISO format string


@dataclass
class FieldDefinition:
    """Definition of a stored column."""
    name: str
    field_type: FieldType
    nullable: bool = True
    default_value: Any = None
    description: str = ""

    def get_sql_type(self) -> str:
        """Get SQL type for this field."""
        return self.field_type.value

    def format_for_storage(self, value: Any) -> Any:
        """Format value for storage in database."""
        if value is None:
            return None

        if self.field_type is FieldType.BOOLEAN:
            return 1 if value else 0
        elif self.field_type is FieldType.DATETIME:
            if hasattr(value, 'isoformat'):
                return value.isoformat()
            return str(value)
        elif self.field_type is FieldType.STRING:
            return str(value)
        elif self.field_type is FieldType.INTEGER:
            return int(value)
        elif self.field_type is FieldType.FLOAT:
            return float(value)

        return value

    def format_from_storage(self, value: Any) -> Any:
        """Convert a stored value back to its Python type."""
        if value is None:
            return None
        if self.field_type is FieldType.BOOLEAN:
            return bool(value)
        return value


class FirFields:
    """Flight Information Regions that scope nav aids and boundaries."""

    ID = FieldDefinition("id", FieldType.STRING, nullable=False, description="FIR identifier")
    ICAO_CODE = FieldDefinition("icao_code", FieldType.STRING, description="FIR ICAO code (e.g. LPPC)")
    NAME = FieldDefinition("name", FieldType.STRING, description="FIR name")

    @classmethod
    def get_all_fields(cls) -> List[FieldDefinition]:
        return [cls.ID, cls.ICAO_CODE, cls.NAME]


class NavAidFields:
    """Centralized definition of nav aid fields."""

    KIND = FieldDefinition("kind", FieldType.STRING, nullable=False, description="FIX, VOR or NDB")
    IDENT = FieldDefinition("ident", FieldType.STRING, nullable=False, description="Identifier")
    LATITUDE_DEG = FieldDefinition("latitude_deg", FieldType.FLOAT, nullable=False, description="Latitude in degrees")
    LONGITUDE_DEG = FieldDefinition("longitude_deg", FieldType.FLOAT, nullable=False, description="Longitude in degrees")
    FREQUENCY = FieldDefinition("frequency", FieldType.STRING, description="Frequency, three decimals")
    ELEVATION_FT = FieldDefinition("elevation_ft", FieldType.FLOAT, description="Elevation in feet (VOR)")
    FIR_ID = FieldDefinition("fir_id", FieldType.STRING, description="Owning FIR, NULL for global")
    UPDATED_AT = FieldDefinition("updated_at", FieldType.DATETIME, description="Last write timestamp")

    @classmethod
    def get_all_fields(cls) -> List[FieldDefinition]:
        """Get all field definitions."""
        return [
            cls.KIND, cls.IDENT, cls.LATITUDE_DEG, cls.LONGITUDE_DEG, cls.FREQUENCY,
            cls.ELEVATION_FT, cls.FIR_ID, cls.UPDATED_AT
        ]


class BoundaryFields:
    """Boundary header fields; the points live in their own table."""

    STATION = FieldDefinition("station", FieldType.STRING, nullable=False, description="ATC station")
    FREQUENCY = FieldDefinition("frequency", FieldType.STRING, nullable=False, description="Frequency, three decimals")
    LOWER_LIMIT = FieldDefinition("lower_limit", FieldType.STRING, description="Lower vertical limit")
    UPPER_LIMIT = FieldDefinition("upper_limit", FieldType.STRING, description="Upper vertical limit")
    RESTRICTED = FieldDefinition("restricted", FieldType.BOOLEAN, nullable=False, default_value=0,
                                 description="Restricted area flag")
    FIR_ID = FieldDefinition("fir_id", FieldType.STRING, description="Owning FIR, NULL for global")
    UPDATED_AT = FieldDefinition("updated_at", FieldType.DATETIME, description="Last write timestamp")

    @classmethod
    def get_all_fields(cls) -> List[FieldDefinition]:
        return [
            cls.STATION, cls.FREQUENCY, cls.LOWER_LIMIT, cls.UPPER_LIMIT, cls.RESTRICTED,
            cls.FIR_ID, cls.UPDATED_AT
        ]


class BoundaryPointFields:
    BOUNDARY_ID = FieldDefinition("boundary_id", FieldType.INTEGER, nullable=False, description="Owning boundary row")
    POINT_ORDER = FieldDefinition("point_order", FieldType.INTEGER, nullable=False, description="Position in polygon")
    LATITUDE_DEG = FieldDefinition("latitude_deg", FieldType.FLOAT, nullable=False, description="Latitude in degrees")
    LONGITUDE_DEG = FieldDefinition("longitude_deg", FieldType.FLOAT, nullable=False, description="Longitude in degrees")
    NAVAID_IDENT = FieldDefinition("navaid_ident", FieldType.STRING, description="Nav aid the point was given as")

    @classmethod
    def get_all_fields(cls) -> List[FieldDefinition]:
        return [cls.BOUNDARY_ID, cls.POINT_ORDER, cls.LATITUDE_DEG, cls.LONGITUDE_DEG, cls.NAVAID_IDENT]


class AirportFields:
    """Centralized definition of airport fields."""

    # AIRAC-owned fields, rewritten by imports
    ICAO_CODE = FieldDefinition("icao_code", FieldType.STRING, nullable=False, description="ICAO airport code")
    NAME = FieldDefinition("name", FieldType.STRING, description="Airport name")
    IATA_CODE = FieldDefinition("iata_code", FieldType.STRING, description="IATA code")
    LATITUDE_DEG = FieldDefinition("latitude_deg", FieldType.FLOAT, description="Latitude in degrees")
    LONGITUDE_DEG = FieldDefinition("longitude_deg", FieldType.FLOAT, description="Longitude in degrees")
    ELEVATION_FT = FieldDefinition("elevation_ft", FieldType.FLOAT, description="Elevation in feet")
    FIR_ID = FieldDefinition("fir_id", FieldType.STRING, description="FIR the airport belongs to")

    # Operator-curated fields, never written by imports
    STANDS = FieldDefinition("stands", FieldType.STRING, description="Stand allocation (JSON)")
    CHARTS = FieldDefinition("charts", FieldType.STRING, description="Chart links (JSON)")
    NOTES = FieldDefinition("notes", FieldType.STRING, description="Free-text controller notes")

    # Metadata
    CREATED_AT = FieldDefinition("created_at", FieldType.DATETIME, description="Creation timestamp")
    UPDATED_AT = FieldDefinition("updated_at", FieldType.DATETIME, description="Last update timestamp")

    @classmethod
    def get_all_fields(cls) -> List[FieldDefinition]:
        """Get all field definitions."""
        return cls.get_airac_fields() + cls.get_curated_fields() + [cls.CREATED_AT, cls.UPDATED_AT]

    @classmethod
    def get_airac_fields(cls) -> List[FieldDefinition]:
        """Fields an AIRAC import may write."""
        return [
            cls.ICAO_CODE, cls.NAME, cls.IATA_CODE, cls.LATITUDE_DEG, cls.LONGITUDE_DEG,
            cls.ELEVATION_FT, cls.FIR_ID
        ]

    @classmethod
    def get_curated_fields(cls) -> List[FieldDefinition]:
        return [cls.STANDS, cls.CHARTS, cls.NOTES]


class RunwayFields:
    """Centralized definition of runway fields."""

    AIRPORT_ICAO = FieldDefinition("airport_icao", FieldType.STRING, nullable=False, description="Airport ICAO code")
    LE_IDENT = FieldDefinition("le_ident", FieldType.STRING, nullable=False, description="Lower end identifier")
    HE_IDENT = FieldDefinition("he_ident", FieldType.STRING, description="Higher end identifier")
    LENGTH_FT = FieldDefinition("length_ft", FieldType.FLOAT, description="Length in feet")
    WIDTH_FT = FieldDefinition("width_ft", FieldType.FLOAT, description="Width in feet")
    SURFACE = FieldDefinition("surface", FieldType.STRING, description="Surface type")

    @classmethod
    def get_all_fields(cls) -> List[FieldDefinition]:
        return [cls.AIRPORT_ICAO, cls.LE_IDENT, cls.HE_IDENT, cls.LENGTH_FT, cls.WIDTH_FT, cls.SURFACE]


class AirportFrequencyFields:
    AIRPORT_ICAO = FieldDefinition("airport_icao", FieldType.STRING, nullable=False, description="Airport ICAO code")
    STATION = FieldDefinition("station", FieldType.STRING, nullable=False, description="Station callsign")
    FREQUENCY = FieldDefinition("frequency", FieldType.STRING, nullable=False, description="Frequency, three decimals")
    NAME = FieldDefinition("name", FieldType.STRING, description="Station name")

    @classmethod
    def get_all_fields(cls) -> List[FieldDefinition]:
        return [cls.AIRPORT_ICAO, cls.STATION, cls.FREQUENCY, cls.NAME]


class SchemaManager:
    """Builds the database schema from field definitions."""

    def __init__(self):
        self.version = 1  # Current schema version

    def get_create_table_sql(self, table_name: str, fields: List[FieldDefinition], primary_key: str = None,
                             autoincrement_id: bool = False, foreign_keys: List[Tuple[str, str]] = None) -> str:
        """
        Generate CREATE TABLE SQL from field definitions.

        Args:
            table_name: Table to create
            fields: Column definitions, in order
            primary_key: Column(s) of the primary key, if not an id column
            autoincrement_id: Prepend an `id INTEGER PRIMARY KEY AUTOINCREMENT` column
            foreign_keys: (column, referenced "table (column)") pairs
        """
        field_definitions = []
        if autoincrement_id:
            field_definitions.append("id INTEGER PRIMARY KEY AUTOINCREMENT")

        for field in fields:
            field_sql = f"{field.name} {field.get_sql_type()}"
            if not field.nullable:
                field_sql += " NOT NULL"
            if field.default_value is not None:
                if field.field_type == FieldType.STRING:
                    field_sql += f" DEFAULT '{field.default_value}'"
                else:
                    field_sql += f" DEFAULT {field.default_value}"
            field_definitions.append(field_sql)

        if primary_key:
            field_definitions.append(f"PRIMARY KEY ({primary_key})")

        for column, reference in foreign_keys or []:
            field_definitions.append(f"FOREIGN KEY ({column}) REFERENCES {reference}")

        return f"CREATE TABLE IF NOT EXISTS {table_name} (\n    " + ",\n    ".join(field_definitions) + "\n)"

