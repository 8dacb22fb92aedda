import csv
from pathlib import Path

import pytest

from warehouse_pipeline.config import Settings, bronze_sources
from warehouse_pipeline.database import connect, init_bronze_schema, init_database

SAMPLE_ROWS = {
    "cust_info.csv": [
        ["cst_id", "cst_key", "cst_firstname", "cst_lastname", "cst_marital_status", "cst_gndr", "cst_create_date"],
        ["11000", "AW00011000", " Jon", "Yang ", "M", "M", "2025-10-06"],
        ["11001", "AW00011001", "Eugene", "Huang", "S", "M", "2025-10-06"],
        ["11002", "AW00011002", "Ruben", "Torres", "", "", ""],
    ],
    "prd_info.csv": [
        ["prd_id", "prd_key", "prd_nm", "prd_cost", "prd_line", "prd_start_dt", "prd_end_dt"],
        ["210", "CO-RF-FR-R92B-58", "HL Road Frame - Black- 58", "", "R", "2003-07-01", ""],
        ["211", "CO-RF-FR-R92R-58", "HL Road Frame - Red- 58", "", "R", "2003-07-01", ""],
    ],
    "sales_details.csv": [
        ["sls_ord_num", "sls_prd_key", "sls_cust_id", "sls_order_dt", "sls_ship_dt",
         "sls_due_dt", "sls_sales", "sls_quantity", "sls_price"],
        ["SO43697", "BK-R93R-62", "21768", "20210115", "20210122", "20210127", "3578", "1", "3578"],
        ["SO43698", "BK-M82S-44", "28389", "20101229", "20110105", "20110110", "3400", "1", "3400"],
        ["SO43699", "BK-M82S-44", "25863", "0", "20110105", "20110110", "3400", "1", "3400"],
    ],
    "cust_az12.csv": [
        ["CID", "BDATE", "GEN"],
        ["NASAW00011000", "1971-10-06", "Male"],
        ["NASAW00011001", "1976-05-10", "Male"],
    ],
    "loc_a101.csv": [
        ["CID", "CNTRY"],
        ["AW-00011000", "Australia"],
        ["AW-00011001", "DE"],
        ["AW-00011002", ""],
    ],
    "px_cat_g1v2.csv": [
        ["ID", "CAT", "SUBCAT", "MAINTENANCE"],
        ["AC_BR", "Accessories", "Bike Racks", "Yes"],
    ],
}


def write_csv(path: Path, rows) -> Path:
    path.parent.mkdir(parents=True, exist_ok=True)
    with open(path, "w", newline="", encoding="utf-8") as f:
        writer = csv.writer(f, lineterminator="\n")
        writer.writerows(rows)
    return path


@pytest.fixture
def settings(tmp_path):
    return Settings(
        warehouse_dir=tmp_path / "warehouse",
        source_dir=tmp_path / "datasets",
        log_dir=tmp_path / "logs",
    )


@pytest.fixture
def conn(settings):
    init_database(settings)
    connection = connect(settings)
    init_bronze_schema(connection)
    yield connection
    connection.close()


@pytest.fixture
def sources(settings):
    entries = bronze_sources(settings.source_dir)
    for source in entries:
        write_csv(source.path, SAMPLE_ROWS[source.path.name])
    return entries
