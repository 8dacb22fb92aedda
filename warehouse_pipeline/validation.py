"""
Advisory checks on the bronze tables.

Nothing here compares against expected values; the output is meant for an
operator to confirm column alignment and completeness by eye.
"""

import sqlite3
from dataclasses import dataclass
from typing import Iterable, List, Optional, Tuple

import pandas as pd

from warehouse_pipeline.tables import BRONZE_TABLES, TableSchema


@dataclass
class TableCheck:
    table: str
    row_count: int
    columns: Tuple[str, ...]


def preview_table(conn: sqlite3.Connection, table: TableSchema, limit: Optional[int] = None) -> pd.DataFrame:
    """
    Return the full projection of a table.

    Args:
        conn: Connection with the table's schema attached
        table: Table to read
        limit: Optional maximum number of rows

    Returns:
        DataFrame with the table's columns in stored order
    """
    query = f"SELECT * FROM {table.qualified_name}"
    if limit is not None:
        query += f" LIMIT {int(limit)}"
    return pd.read_sql(query, conn)


def count_rows(conn: sqlite3.Connection, table: TableSchema) -> int:
    return conn.execute(f"SELECT COUNT(*) FROM {table.qualified_name}").fetchone()[0]


def validate_bronze(conn: sqlite3.Connection, tables: Iterable[TableSchema] = BRONZE_TABLES) -> List[TableCheck]:
    checks = []
    for table in tables:
        columns = tuple(preview_table(conn, table, limit=0).columns)
        checks.append(TableCheck(table.qualified_name, count_rows(conn, table), columns))
    return checks


def format_checks(checks: Iterable[TableCheck]) -> str:
    df = pd.DataFrame(
        [
            {"table": check.table, "rows": check.row_count, "columns": ", ".join(check.columns)}
            for check in checks
        ],
        columns=["table", "rows", "columns"],
    )
    return df.to_string(index=False)
