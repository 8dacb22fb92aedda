import sqlite3

import pytest

from warehouse_pipeline.config import SCHEMAS
from warehouse_pipeline.database import (
    connect,
    create_database,
    create_schema,
    drop_database,
    init_bronze_schema,
    init_database,
    list_schemas,
    table_columns,
)
from warehouse_pipeline.errors import DatabaseExistsError, DatabaseNotFoundError, SchemaExistsError
from warehouse_pipeline.tables import BRONZE_TABLES, CRM_CUST_INFO, CRM_SALES_DETAILS


def test_init_database_creates_three_schemas(settings):
    init_database(settings)

    assert settings.database_path.exists()
    assert list_schemas(settings) == ["bronze", "silver", "gold"]


def test_init_database_discards_existing_data(settings):
    init_database(settings)
    conn = connect(settings)
    init_bronze_schema(conn)
    conn.execute("INSERT INTO bronze.erp_loc_a101 VALUES ('AW-1', 'DE')")
    conn.commit()
    conn.close()

    init_database(settings)
    conn = connect(settings)
    tables = conn.execute("SELECT name FROM bronze.sqlite_master WHERE type = 'table'").fetchall()
    conn.close()

    assert tables == []


def test_connect_requires_existing_database(settings):
    with pytest.raises(DatabaseNotFoundError):
        connect(settings)
    assert not settings.database_path.exists()


def test_create_database_twice_fails(settings):
    create_database(settings)
    with pytest.raises(DatabaseExistsError):
        create_database(settings)


def test_create_schema_twice_fails(settings):
    create_database(settings)
    create_schema(settings, "bronze")
    with pytest.raises(SchemaExistsError):
        create_schema(settings, "bronze")


def test_drop_database_removes_all_files(settings):
    init_database(settings)

    assert drop_database(settings) is True
    assert not settings.database_path.exists()
    assert not any(settings.schema_path(schema).exists() for schema in SCHEMAS)
    assert drop_database(settings) is False


def test_bronze_tables_match_declared_columns(conn):
    for table in BRONZE_TABLES:
        columns = table_columns(conn, table)
        assert [name for name, _ in columns] == list(table.column_names)
        assert [ddl for _, ddl in columns] == [column.ddl_type for column in table.columns]


def test_customer_table_column_order(conn):
    assert [name for name, _ in table_columns(conn, CRM_CUST_INFO)] == [
        "cst_id", "cst_key", "cst_firstname", "cst_lastname",
        "cst_marital_status", "cst_gndr", "cst_create_date",
    ]


def test_init_bronze_schema_is_repeatable(conn):
    init_bronze_schema(conn)
    init_bronze_schema(conn)

    for table in BRONZE_TABLES:
        assert [name for name, _ in table_columns(conn, table)] == list(table.column_names)
    names = {row[0] for row in conn.execute("SELECT name FROM bronze.sqlite_master WHERE type = 'table'")}
    assert names == {table.name for table in BRONZE_TABLES}


def test_init_bronze_schema_empties_tables(conn):
    conn.execute("INSERT INTO bronze.crm_sales_details (sls_ord_num) VALUES ('SO1')")
    conn.commit()

    init_bronze_schema(conn)

    assert conn.execute("SELECT COUNT(*) FROM bronze.crm_sales_details").fetchone()[0] == 0


def test_provisioning_errors_propagate(settings):
    create_database(settings)
    conn = connect(settings)
    # bronze schema was never created
    with pytest.raises(sqlite3.OperationalError):
        init_bronze_schema(conn, [CRM_SALES_DETAILS])
    conn.close()
