import sqlite3

from warehouse_pipeline.errors import DataConversionError, ErrorDetail, WarehouseError


def test_detail_from_warehouse_error():
    detail = ErrorDetail.from_exception(DataConversionError("bad value", row=7, column="cst_id"))

    assert detail.message == "bad value (row 7, column cst_id)"
    assert detail.number == 4864
    assert detail.state == "DATA_CONVERSION"


def test_detail_overrides():
    detail = ErrorDetail.from_exception(WarehouseError("boom", number=1, state="X"))

    assert (detail.number, detail.state) == (1, "X")


def test_detail_from_sqlite_error():
    conn = sqlite3.connect(":memory:")
    try:
        conn.execute("SELECT * FROM nowhere")
    except sqlite3.Error as e:
        detail = ErrorDetail.from_exception(e)
    finally:
        conn.close()

    assert "no such table" in detail.message
    assert detail.number >= 1


def test_detail_from_os_error(tmp_path):
    missing = tmp_path / "missing.csv"
    try:
        open(missing)
    except OSError as e:
        detail = ErrorDetail.from_exception(e)

    assert detail.number == 2
    assert detail.state == "FileNotFoundError"
    assert str(missing) in detail.message
