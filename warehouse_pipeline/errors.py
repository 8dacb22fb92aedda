"""
Warehouse error types and the diagnostic triple reported on failure.

Every failure surfaced to the operator is reduced to an ``ErrorDetail``:
a human-readable message, a numeric error code and an error-state code.
"""

import sqlite3
from dataclasses import dataclass
from typing import Optional, Union


class WarehouseError(Exception):
    """Base class for errors raised by the warehouse pipeline."""

    number = 50000
    state = "WAREHOUSE_ERROR"

    def __init__(self, message: str, number: Optional[int] = None, state: Optional[str] = None):
        super().__init__(message)
        self.message = message
        if number is not None:
            self.number = number
        if state is not None:
            self.state = state


class DatabaseNotFoundError(WarehouseError):
    number = 911
    state = "DATABASE_NOT_FOUND"


class DatabaseExistsError(WarehouseError):
    number = 1801
    state = "DATABASE_EXISTS"


class SchemaExistsError(WarehouseError):
    number = 2714
    state = "SCHEMA_EXISTS"


class BulkLoadError(WarehouseError):
    """A source file could not be loaded into its table."""

    number = 4860
    state = "BULK_LOAD"

    def __init__(self, message: str, row: Optional[int] = None, column: Optional[str] = None, **kwargs):
        self.reason = message
        self.row = row
        self.column = column
        if row is not None:
            message = f"{message} (row {row}" + (f", column {column})" if column else ")")
        super().__init__(message, **kwargs)

    def at_row(self, row: int) -> "BulkLoadError":
        """Return a copy of this error located at the given file row."""
        return type(self)(self.reason, row=row, column=self.column)


class ColumnCountError(BulkLoadError):
    number = 4832
    state = "COLUMN_COUNT_MISMATCH"


class DataConversionError(BulkLoadError):
    number = 4864
    state = "DATA_CONVERSION"


class TruncationError(BulkLoadError):
    number = 4863
    state = "DATA_TRUNCATION"


@dataclass(frozen=True)
class ErrorDetail:
    message: str
    number: int
    state: Union[str, int]

    @classmethod
    def from_exception(cls, exc: BaseException) -> "ErrorDetail":
        """Build the diagnostic triple from an engine, file or pipeline error."""
        if isinstance(exc, WarehouseError):
            return cls(exc.message, exc.number, exc.state)
        if isinstance(exc, sqlite3.Error):
            return cls(
                str(exc),
                getattr(exc, "sqlite_errorcode", None) or 1,
                getattr(exc, "sqlite_errorname", None) or type(exc).__name__,
            )
        if isinstance(exc, OSError):
            message = exc.strerror or str(exc)
            if exc.filename:
                message = f"{message}: '{exc.filename}'"
            return cls(message, exc.errno or 0, type(exc).__name__)
        return cls(str(exc), 0, type(exc).__name__)

    def __str__(self) -> str:
        return f"[{self.number}/{self.state}] {self.message}"
