"""
Bronze layer table definitions.

The column order of every table matches the header row of the CSV extract
it is loaded from. No keys or constraints are declared at this layer.
"""

import re
from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from typing import Optional, Tuple, Union

from warehouse_pipeline.errors import DataConversionError, TruncationError

INT_MIN = -2147483648
INT_MAX = 2147483647

_INTEGER_PATTERN = re.compile(r"\s*[+-]?[0-9]+\s*")


class ColumnType(Enum):
    INTEGER = "INT"
    TEXT = "NVARCHAR"
    DATE = "DATE"


@dataclass(frozen=True)
class Column:
    name: str
    type: ColumnType
    length: Optional[int] = None

    @property
    def ddl_type(self) -> str:
        if self.type is ColumnType.TEXT:
            return f"NVARCHAR({self.length or 50})"
        return self.type.value

    def convert(self, raw: str) -> Union[int, str, None]:
        """
        Convert one raw CSV field into the value stored for this column.

        Args:
            raw: Field text exactly as read from the file

        Returns:
            None for an empty field, otherwise an int (INTEGER), an ISO
            date string (DATE) or the unchanged text (TEXT)
        """
        if raw == "":
            return None
        if self.type is ColumnType.INTEGER:
            if not _INTEGER_PATTERN.fullmatch(raw):
                raise DataConversionError(f"Cannot convert '{raw}' to INT", column=self.name)
            value = int(raw)
            if not INT_MIN <= value <= INT_MAX:
                raise DataConversionError(f"Value '{raw.strip()}' is out of range for INT", column=self.name)
            return value
        if self.type is ColumnType.DATE:
            try:
                return datetime.strptime(raw.strip(), "%Y-%m-%d").date().isoformat()
            except ValueError:
                raise DataConversionError(f"Cannot convert '{raw}' to DATE", column=self.name) from None
        limit = self.length or 50
        if len(raw) > limit:
            raise TruncationError(
                f"Value of length {len(raw)} exceeds NVARCHAR({limit})", column=self.name
            )
        return raw


@dataclass(frozen=True)
class TableSchema:
    schema: str
    name: str
    columns: Tuple[Column, ...]
    description: str = ""

    @property
    def qualified_name(self) -> str:
        return f"{self.schema}.{self.name}"

    @property
    def column_names(self) -> Tuple[str, ...]:
        return tuple(column.name for column in self.columns)

    def create_sql(self) -> str:
        body = ",\n".join(f"    {column.name} {column.ddl_type}" for column in self.columns)
        return f"CREATE TABLE {self.qualified_name} (\n{body}\n)"

    def drop_sql(self) -> str:
        return f"DROP TABLE IF EXISTS {self.qualified_name}"

    def insert_sql(self) -> str:
        placeholders = ", ".join("?" for _ in self.columns)
        names = ", ".join(self.column_names)
        return f"INSERT INTO {self.qualified_name} ({names}) VALUES ({placeholders})"


def _text(name: str, length: int = 50) -> Column:
    return Column(name, ColumnType.TEXT, length)


def _int(name: str) -> Column:
    return Column(name, ColumnType.INTEGER)


def _date(name: str) -> Column:
    return Column(name, ColumnType.DATE)


# CRM customer master data
CRM_CUST_INFO = TableSchema(
    "bronze",
    "crm_cust_info",
    (
        _int("cst_id"),
        _text("cst_key"),
        _text("cst_firstname"),
        _text("cst_lastname"),
        _text("cst_marital_status"),
        _text("cst_gndr"),
        _date("cst_create_date"),
    ),
    "CRM customer data",
)

CRM_PRD_INFO = TableSchema(
    "bronze",
    "crm_prd_info",
    (
        _int("prd_id"),
        _text("prd_key"),
        _text("prd_nm", 100),
        _int("prd_cost"),
        _text("prd_line"),
        _date("prd_start_dt"),
        _date("prd_end_dt"),
    ),
    "CRM product data",
)

# Order, ship and due dates arrive as YYYYMMDD integers and stay that way here.
CRM_SALES_DETAILS = TableSchema(
    "bronze",
    "crm_sales_details",
    (
        _text("sls_ord_num"),
        _text("sls_prd_key"),
        _int("sls_cust_id"),
        _int("sls_order_dt"),
        _int("sls_ship_dt"),
        _int("sls_due_dt"),
        _int("sls_sales"),
        _int("sls_quantity"),
        _int("sls_price"),
    ),
    "CRM sales transaction data",
)

ERP_CUST_AZ12 = TableSchema(
    "bronze",
    "erp_cust_az12",
    (_text("CID"), _date("BDATE"), _text("GEN")),
    "ERP customer demographic data",
)

ERP_LOC_A101 = TableSchema(
    "bronze",
    "erp_loc_a101",
    (_text("CID"), _text("CNTRY")),
    "ERP customer location data",
)

ERP_PX_CAT_G1V2 = TableSchema(
    "bronze",
    "erp_px_cat_g1v2",
    (_text("ID"), _text("CAT"), _text("SUBCAT"), _text("MAINTENANCE")),
    "ERP product category data",
)

BRONZE_TABLES = (
    CRM_CUST_INFO,
    CRM_PRD_INFO,
    CRM_SALES_DETAILS,
    ERP_CUST_AZ12,
    ERP_LOC_A101,
    ERP_PX_CAT_G1V2,
)
