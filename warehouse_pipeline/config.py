"""
Configuration for the warehouse pipeline.

Paths and names are environment specific. They are read from the process
environment after loading a ``.env`` file, and every value has a default
suitable for a local checkout.

Environment variables:
    DWH_WAREHOUSE_DIR  - Directory holding the database and schema files
    DWH_DATABASE_NAME  - Database name (file stem of the main database)
    DWH_SOURCE_DIR     - Root directory of the CRM and ERP extracts
    DWH_LOG_DIR        - Directory for log files
    DWH_LOG_LEVEL      - Logging level name
    DWH_CSV_ENCODING   - Text encoding of the source CSV files
"""

import os
from dataclasses import dataclass
from pathlib import Path
from typing import List, Optional

from dotenv import load_dotenv

from warehouse_pipeline.tables import (
    CRM_CUST_INFO,
    CRM_PRD_INFO,
    CRM_SALES_DETAILS,
    ERP_CUST_AZ12,
    ERP_LOC_A101,
    ERP_PX_CAT_G1V2,
    TableSchema,
)

DEFAULT_WAREHOUSE_DIR = "database"
DEFAULT_DATABASE_NAME = "DataWareHouse"
DEFAULT_SOURCE_DIR = "datasets"
DEFAULT_LOG_DIR = "logs"
DEFAULT_LOG_LEVEL = "INFO"
DEFAULT_CSV_ENCODING = "utf-8"

# Namespaces of the layered warehouse, created in this order.
SCHEMAS = ("bronze", "silver", "gold")


@dataclass(frozen=True)
class Settings:
    warehouse_dir: Path = Path(DEFAULT_WAREHOUSE_DIR)
    database_name: str = DEFAULT_DATABASE_NAME
    source_dir: Path = Path(DEFAULT_SOURCE_DIR)
    log_dir: Path = Path(DEFAULT_LOG_DIR)
    log_level: str = DEFAULT_LOG_LEVEL
    csv_encoding: str = DEFAULT_CSV_ENCODING

    @classmethod
    def from_env(cls, env_file: Optional[str] = None) -> "Settings":
        """
        Build settings from the environment.

        Args:
            env_file: Optional path of a .env file (default: search from cwd)

        Returns:
            Settings populated from environment variables and defaults
        """
        load_dotenv(env_file)
        return cls(
            warehouse_dir=Path(os.environ.get("DWH_WAREHOUSE_DIR", DEFAULT_WAREHOUSE_DIR)),
            database_name=os.environ.get("DWH_DATABASE_NAME", DEFAULT_DATABASE_NAME),
            source_dir=Path(os.environ.get("DWH_SOURCE_DIR", DEFAULT_SOURCE_DIR)),
            log_dir=Path(os.environ.get("DWH_LOG_DIR", DEFAULT_LOG_DIR)),
            log_level=os.environ.get("DWH_LOG_LEVEL", DEFAULT_LOG_LEVEL).upper(),
            csv_encoding=os.environ.get("DWH_CSV_ENCODING", DEFAULT_CSV_ENCODING),
        )

    @property
    def database_path(self) -> Path:
        return self.warehouse_dir / f"{self.database_name}.db"

    def schema_path(self, schema: str) -> Path:
        return self.warehouse_dir / f"{self.database_name}.{schema}.db"


@dataclass(frozen=True)
class LoadSource:
    """One source extract and the bronze table it is loaded into."""

    system: str
    path: Path
    table: TableSchema

    @property
    def description(self) -> str:
        return self.table.description or self.table.name


def bronze_sources(source_dir: Path) -> List[LoadSource]:
    """
    Return the bronze load steps in execution order.

    Args:
        source_dir: Directory containing the source_crm and source_erp folders

    Returns:
        List of LoadSource entries, CRM extracts first, then ERP
    """
    source_dir = Path(source_dir)
    crm = source_dir / "source_crm"
    erp = source_dir / "source_erp"
    return [
        LoadSource("crm", crm / "cust_info.csv", CRM_CUST_INFO),
        LoadSource("crm", crm / "prd_info.csv", CRM_PRD_INFO),
        LoadSource("crm", crm / "sales_details.csv", CRM_SALES_DETAILS),
        LoadSource("erp", erp / "cust_az12.csv", ERP_CUST_AZ12),
        LoadSource("erp", erp / "loc_a101.csv", ERP_LOC_A101),
        LoadSource("erp", erp / "px_cat_g1v2.csv", ERP_PX_CAT_G1V2),
    ]
