"""
Bronze Layer Warehouse Package

Modules:
    config.py       - Settings from .env/environment and the source-to-table mapping.
    tables.py       - Bronze table definitions (column order matches the CSV headers).
    database.py     - Drops and recreates the database, schemas and bronze tables.
    bulk_insert.py  - Truncate and bulk-load primitives.
    bronze.py       - Runs the six truncate-and-load steps with timing and error reporting.
    validation.py   - Row counts and table previews for operator review.
    run_pipeline.py - Command-line entry point.

Version: 1.0.0
"""

__version__ = "1.0.0"
