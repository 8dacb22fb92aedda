"""
Truncate and bulk-load primitives for the bronze tables.

Source files are plain comma separated text. Quote characters have no
special meaning and a delimiter inside a field is not supported: the row
then has too many fields and the load fails.
"""

import csv
import logging
import sqlite3
from pathlib import Path
from typing import Iterator, List, Union

from warehouse_pipeline.errors import BulkLoadError, ColumnCountError
from warehouse_pipeline.tables import TableSchema

logger = logging.getLogger(__name__)

DEFAULT_FIRST_ROW = 2
DEFAULT_FIELD_TERMINATOR = ","


def truncate_table(conn: sqlite3.Connection, table: TableSchema) -> None:
    """Remove all rows from a table, keeping its definition."""
    with conn:
        conn.execute(f"DELETE FROM {table.qualified_name}")


def _read_rows(
    path: Union[str, Path],
    first_row: int,
    field_terminator: str,
    encoding: str,
) -> Iterator[tuple]:
    with open(path, newline="", encoding=encoding) as f:
        reader = csv.reader(f, delimiter=field_terminator, quoting=csv.QUOTE_NONE)
        while True:
            try:
                fields = next(reader)
            except StopIteration:
                return
            except csv.Error as exc:
                raise BulkLoadError(f"Malformed line: {exc}", row=reader.line_num) from None
            if reader.line_num < first_row or not fields:
                continue
            yield reader.line_num, fields


def _convert_rows(table: TableSchema, rows: Iterator[tuple]) -> Iterator[List]:
    width = len(table.columns)
    for line_num, fields in rows:
        if len(fields) != width:
            raise ColumnCountError(
                f"Expected {width} fields for {table.qualified_name}, found {len(fields)}",
                row=line_num,
            )
        try:
            yield [column.convert(raw) for column, raw in zip(table.columns, fields)]
        except BulkLoadError as exc:
            raise exc.at_row(line_num) from None


def bulk_insert(
    conn: sqlite3.Connection,
    table: TableSchema,
    path: Union[str, Path],
    first_row: int = DEFAULT_FIRST_ROW,
    field_terminator: str = DEFAULT_FIELD_TERMINATOR,
    encoding: str = "utf-8",
) -> int:
    """
    Load a delimited file into a table as a single unit.

    Args:
        conn: Connection with the table's schema attached
        table: Destination table definition
        path: Source file path
        first_row: First file line holding data (2 skips a header line)
        field_terminator: Field delimiter
        encoding: Text encoding of the file

    Returns:
        Number of rows inserted

    Raises:
        OSError: The file is missing or unreadable
        BulkLoadError: A row has the wrong shape or an unconvertible value
        sqlite3.Error: The table is missing or the engine rejected the insert
    """
    rows = _convert_rows(table, _read_rows(path, first_row, field_terminator, encoding))
    inserted = 0

    def counted():
        nonlocal inserted
        for row in rows:
            inserted += 1
            yield row

    with conn:
        conn.executemany(table.insert_sql(), counted())
    logger.debug(f"Inserted {inserted} rows into {table.qualified_name} from {path}")
    return inserted


def count_source_rows(
    path: Union[str, Path],
    first_row: int = DEFAULT_FIRST_ROW,
    encoding: str = "utf-8",
) -> int:
    """Count the non-blank data lines of a source file."""
    return sum(1 for _ in _read_rows(path, first_row, DEFAULT_FIELD_TERMINATOR, encoding))
