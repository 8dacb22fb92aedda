#!/usr/bin/env python3
"""
Command-line entry point for the warehouse pipeline.

Commands:
    init-db      Drop and recreate the database, its schemas and the bronze tables
    init-bronze  Drop and recreate the bronze tables only
    load-bronze  Truncate and reload every bronze table from the source extracts
    validate     Print row counts and column lists of the bronze tables
    all          init-db, load-bronze and validate in sequence
"""

import argparse
import logging
import sys
from dataclasses import replace
from pathlib import Path
from typing import List, Optional

from utils.logger import setup_logger
from warehouse_pipeline.bronze import load_bronze
from warehouse_pipeline.config import Settings, bronze_sources
from warehouse_pipeline.database import connect, init_bronze_schema, init_database
from warehouse_pipeline.errors import ErrorDetail, WarehouseError
from warehouse_pipeline.tables import BRONZE_TABLES
from warehouse_pipeline.validation import format_checks, preview_table, validate_bronze

logger = logging.getLogger("warehouse_pipeline.run_pipeline")


def provision(settings: Settings) -> None:
    init_database(settings)
    conn = connect(settings)
    try:
        init_bronze_schema(conn)
    finally:
        conn.close()


def recreate_bronze(settings: Settings) -> None:
    conn = connect(settings)
    try:
        init_bronze_schema(conn)
    finally:
        conn.close()


def run_bronze_load(settings: Settings) -> bool:
    conn = connect(settings)
    try:
        result = load_bronze(conn, bronze_sources(settings.source_dir), encoding=settings.csv_encoding)
    finally:
        conn.close()
    return result.succeeded


def show_validation(settings: Settings, preview_rows: int = 0) -> None:
    conn = connect(settings)
    try:
        print(format_checks(validate_bronze(conn)))
        if preview_rows:
            for table in BRONZE_TABLES:
                print(f"\n{table.qualified_name}")
                print(preview_table(conn, table, limit=preview_rows).to_string(index=False))
    finally:
        conn.close()


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description='Provision and load the bronze layer of the data warehouse')
    parser.add_argument('command', choices=['init-db', 'init-bronze', 'load-bronze', 'validate', 'all'])
    parser.add_argument('--env-file', type=str, help='Path to a .env file with DWH_* settings')
    parser.add_argument('--source-dir', type=str, help='Directory containing source_crm/ and source_erp/')
    parser.add_argument('--warehouse-dir', type=str, help='Directory for the database files')
    parser.add_argument('--preview', type=int, default=0, help='Rows per table to print when validating')
    return parser


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)

    settings = Settings.from_env(args.env_file)
    if args.source_dir:
        settings = replace(settings, source_dir=Path(args.source_dir))
    if args.warehouse_dir:
        settings = replace(settings, warehouse_dir=Path(args.warehouse_dir))

    setup_logger("warehouse_pipeline", log_file="warehouse_pipeline.log",
                 level=settings.log_level, log_dir=str(settings.log_dir))

    try:
        if args.command in ('init-db', 'all'):
            provision(settings)
            logger.info("Database initialized")
        elif args.command == 'init-bronze':
            recreate_bronze(settings)
            logger.info("Bronze tables recreated")

        if args.command in ('load-bronze', 'all'):
            if not run_bronze_load(settings):
                return 1

        if args.command in ('validate', 'all'):
            show_validation(settings, preview_rows=args.preview)
    except WarehouseError as e:
        logger.error(f"{args.command} failed: {ErrorDetail.from_exception(e)}")
        return 1

    return 0


if __name__ == "__main__":
    sys.exit(main())
