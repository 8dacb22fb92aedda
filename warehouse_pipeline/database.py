"""
Database provisioning for the layered warehouse.

The warehouse database is a main SQLite file and each namespace (bronze,
silver, gold) is its own SQLite file attached under the namespace name, so
tables are addressed as ``bronze.<table>``.

All operations here are destructive. Failures are not caught: a failed
provisioning step propagates to the caller.
"""

import logging
import sqlite3
from pathlib import Path
from typing import Iterable, List, Tuple

from warehouse_pipeline.config import SCHEMAS, Settings
from warehouse_pipeline.errors import (
    DatabaseExistsError,
    DatabaseNotFoundError,
    SchemaExistsError,
)
from warehouse_pipeline.tables import BRONZE_TABLES, TableSchema

logger = logging.getLogger(__name__)

_SIDE_FILE_SUFFIXES = ("", "-journal", "-wal", "-shm")


def _remove_database_file(path: Path) -> bool:
    removed = False
    for suffix in _SIDE_FILE_SUFFIXES:
        candidate = path.with_name(path.name + suffix)
        if candidate.exists():
            candidate.unlink()
            removed = True
    return removed


def _materialize(path: Path) -> None:
    # An empty SQLite file is only written once the header is; user_version forces it.
    conn = sqlite3.connect(path)
    try:
        conn.execute("PRAGMA user_version = 1")
        conn.commit()
    finally:
        conn.close()


def connect(settings: Settings) -> sqlite3.Connection:
    """
    Open the warehouse database and attach every existing namespace.

    Args:
        settings: Pipeline settings locating the database files

    Returns:
        SQLite connection with bronze/silver/gold attached where present
    """
    path = settings.database_path
    if not path.exists():
        raise DatabaseNotFoundError(
            f"Database '{settings.database_name}' does not exist at {path}"
        )
    conn = sqlite3.connect(f"{path.resolve().as_uri()}?mode=rw", uri=True)
    for schema in list_schemas(settings):
        conn.execute(
            "ATTACH DATABASE ? AS " + schema,
            (f"{settings.schema_path(schema).resolve().as_uri()}?mode=rw",),
        )
    return conn


def list_schemas(settings: Settings) -> List[str]:
    """Return the namespaces whose files exist, in creation order."""
    return [schema for schema in SCHEMAS if settings.schema_path(schema).exists()]


def drop_database(settings: Settings) -> bool:
    """
    Remove the database and all of its namespace files.

    There are no server sessions to disconnect with SQLite; removing the
    files discards the database for every open connection.

    Returns:
        True if anything was removed
    """
    removed = _remove_database_file(settings.database_path)
    for schema in SCHEMAS:
        removed = _remove_database_file(settings.schema_path(schema)) or removed
    if removed:
        logger.info(f"Dropped database '{settings.database_name}'")
    return removed


def create_database(settings: Settings) -> Path:
    path = settings.database_path
    if path.exists():
        raise DatabaseExistsError(f"Database '{settings.database_name}' already exists")
    path.parent.mkdir(parents=True, exist_ok=True)
    _materialize(path)
    logger.info(f"Created database '{settings.database_name}' at {path}")
    return path


def create_schema(settings: Settings, schema: str) -> Path:
    if not settings.database_path.exists():
        raise DatabaseNotFoundError(f"Database '{settings.database_name}' does not exist")
    path = settings.schema_path(schema)
    if path.exists():
        raise SchemaExistsError(f"Schema '{schema}' already exists")
    _materialize(path)
    logger.info(f"Created schema '{schema}'")
    return path


def init_database(settings: Settings) -> None:
    """Drop and recreate the warehouse database with the bronze, silver and gold schemas."""
    drop_database(settings)
    create_database(settings)
    for schema in SCHEMAS:
        create_schema(settings, schema)


def init_bronze_schema(conn: sqlite3.Connection, tables: Iterable[TableSchema] = BRONZE_TABLES) -> None:
    """
    Drop and recreate the bronze staging tables.

    Args:
        conn: Connection with the bronze schema attached
        tables: Table definitions to (re)create
    """
    cursor = conn.cursor()
    for table in tables:
        cursor.execute(table.drop_sql())
        cursor.execute(table.create_sql())
        logger.info(f"Created table {table.qualified_name}")
    conn.commit()


def table_columns(conn: sqlite3.Connection, table: TableSchema) -> List[Tuple[str, str]]:
    """Return (name, declared type) for each column of a table, in order."""
    rows = conn.execute(f"PRAGMA {table.schema}.table_info({table.name})").fetchall()
    return [(row[1], row[2]) for row in rows]
