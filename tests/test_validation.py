from warehouse_pipeline.bronze import load_bronze
from warehouse_pipeline.tables import BRONZE_TABLES, CRM_CUST_INFO, CRM_SALES_DETAILS
from warehouse_pipeline.validation import count_rows, format_checks, preview_table, validate_bronze


def test_preview_returns_columns_in_table_order(conn, sources):
    load_bronze(conn, sources)

    df = preview_table(conn, CRM_CUST_INFO)

    assert list(df.columns) == [
        "cst_id", "cst_key", "cst_firstname", "cst_lastname",
        "cst_marital_status", "cst_gndr", "cst_create_date",
    ]
    assert len(df) == 3


def test_preview_limit(conn, sources):
    load_bronze(conn, sources)

    assert len(preview_table(conn, CRM_SALES_DETAILS, limit=2)) == 2


def test_preview_of_empty_table_keeps_columns(conn):
    df = preview_table(conn, CRM_SALES_DETAILS)

    assert df.empty
    assert tuple(df.columns) == CRM_SALES_DETAILS.column_names


def test_count_rows(conn, sources):
    assert count_rows(conn, CRM_CUST_INFO) == 0
    load_bronze(conn, sources)
    assert count_rows(conn, CRM_CUST_INFO) == 3


def test_validate_bronze_reports_every_table(conn, sources):
    load_bronze(conn, sources)

    checks = validate_bronze(conn)

    assert [check.table for check in checks] == [t.qualified_name for t in BRONZE_TABLES]
    assert [check.row_count for check in checks] == [3, 2, 3, 2, 3, 1]
    assert checks[4].columns == ("CID", "CNTRY")


def test_format_checks(conn, sources):
    load_bronze(conn, sources)

    text = format_checks(validate_bronze(conn))

    assert "bronze.crm_cust_info" in text
    assert "CID, CNTRY" in text
