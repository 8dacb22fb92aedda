"""
Bronze layer load runner.

Each configured source is loaded in order: the destination table is
emptied, the CSV extract is bulk loaded into it, and the step duration is
reported. The first failing step ends the run. Tables loaded by earlier
steps keep their new contents and the failing table is left truncated.

Readers querying a table while it is being reloaded see it empty or
partially loaded; concurrent runs against the same tables are not supported.
"""

import logging
import sqlite3
import time
from dataclasses import dataclass, field
from enum import Enum
from typing import Callable, List, Optional, Sequence

from warehouse_pipeline.bulk_insert import bulk_insert, truncate_table
from warehouse_pipeline.config import LoadSource
from warehouse_pipeline.errors import ErrorDetail, WarehouseError

logger = logging.getLogger(__name__)

# Failures that mark a step as failed; anything else is a bug and propagates.
LOAD_ERRORS = (WarehouseError, sqlite3.Error, OSError, UnicodeError)


class RunState(Enum):
    NOT_STARTED = "not_started"
    RUNNING = "running"
    COMPLETED = "completed"
    FAILED = "failed"


@dataclass
class StepResult:
    source: LoadSource
    rows_loaded: int = 0
    duration_seconds: float = 0.0
    error: Optional[ErrorDetail] = None

    @property
    def ok(self) -> bool:
        return self.error is None

    @property
    def table(self) -> str:
        return self.source.table.qualified_name


@dataclass
class BronzeLoadResult:
    state: RunState = RunState.NOT_STARTED
    steps: List[StepResult] = field(default_factory=list)
    batch_duration_seconds: float = 0.0

    @property
    def succeeded(self) -> bool:
        return self.state is RunState.COMPLETED

    @property
    def failed_step(self) -> Optional[StepResult]:
        return next((step for step in self.steps if not step.ok), None)

    @property
    def error(self) -> Optional[ErrorDetail]:
        step = self.failed_step
        return step.error if step else None

    @property
    def rows_loaded(self) -> int:
        return sum(step.rows_loaded for step in self.steps)


class BronzeLoader:
    """Runs the truncate-and-load steps for the bronze layer."""

    def __init__(
        self,
        conn: sqlite3.Connection,
        sources: Sequence[LoadSource],
        encoding: str = "utf-8",
        clock: Callable[[], float] = time.perf_counter,
    ):
        """
        Args:
            conn: Connection with the bronze schema attached
            sources: Load steps in execution order
            encoding: Text encoding of the source files
            clock: Monotonic clock returning seconds
        """
        self.conn = conn
        self.sources = list(sources)
        self.encoding = encoding
        self.clock = clock
        self.state = RunState.NOT_STARTED

    def load_step(self, source: LoadSource) -> StepResult:
        start = self.clock()
        logger.info(f"Loading {source.description}...")
        try:
            truncate_table(self.conn, source.table)
            rows = bulk_insert(self.conn, source.table, source.path, encoding=self.encoding)
        except LOAD_ERRORS as e:
            return StepResult(source, 0, self.clock() - start, ErrorDetail.from_exception(e))
        duration = self.clock() - start
        logger.info(f"Loaded {rows} rows into {source.table.qualified_name}")
        logger.info(f"Step duration = {duration:.2f} seconds")
        return StepResult(source, rows, duration)

    def run(self) -> BronzeLoadResult:
        """
        Load every source in order, stopping at the first failure.

        Returns:
            BronzeLoadResult with one StepResult per executed step
        """
        if self.state is RunState.RUNNING:
            raise RuntimeError("Bronze load is already running")

        self.state = RunState.RUNNING
        try:
            result = self._run_steps()
        finally:
            # an unexpected exception must not leave the loader stuck in RUNNING
            if self.state is RunState.RUNNING:
                self.state = RunState.FAILED
        return result

    def _run_steps(self) -> BronzeLoadResult:
        result = BronzeLoadResult(state=RunState.RUNNING)
        logger.info("Starting Bronze layer load process...")
        batch_start = self.clock()

        for source in self.sources:
            step = self.load_step(source)
            result.steps.append(step)
            if not step.ok:
                break

        result.batch_duration_seconds = self.clock() - batch_start
        error = result.error
        if error is None:
            result.state = RunState.COMPLETED
            logger.info(f"Batch duration = {result.batch_duration_seconds:.2f} seconds")
            logger.info("Bronze layer load process completed successfully.")
        else:
            result.state = RunState.FAILED
            logger.error("ERROR OCCURRED DURING BRONZE LAYER LOADING")
            logger.error(f"Failed step: {result.failed_step.table}")
            logger.error(f"Error message: {error.message}")
            logger.error(f"Error number: {error.number}")
            logger.error(f"Error state: {error.state}")
        self.state = result.state
        return result


def load_bronze(
    conn: sqlite3.Connection,
    sources: Sequence[LoadSource],
    encoding: str = "utf-8",
    clock: Callable[[], float] = time.perf_counter,
) -> BronzeLoadResult:
    """Run the full bronze load once."""
    return BronzeLoader(conn, sources, encoding=encoding, clock=clock).run()
