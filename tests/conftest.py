"""
Pytest fixtures for the textile production test suite.

Provides:
- Structured logging setup and log capture
- An in-memory SQLite engine shared by the whole run, with tables created
  once and emptied after every test
- A deterministic clock

Pure engine and domain tests need none of the database fixtures.
"""

import json
import logging
from collections.abc import Generator
from datetime import date, datetime, timezone
from io import StringIO

import pytest
from sqlalchemy import delete
from sqlalchemy.orm import Session

from textile_kernel.db.base import Base
from textile_kernel.db.engine import (
    create_tables,
    get_session,
    init_engine_from_url,
    reset_engine,
)
from textile_kernel.domain.clock import DeterministicClock
from textile_kernel.logging_config import (
    LogContext,
    StructuredFormatter,
    configure_logging,
    reset_logging,
)


# =============================================================================
# Logging fixtures
# =============================================================================


@pytest.fixture(autouse=True, scope="session")
def _configure_test_logging():
    """Configure structured logging for the test suite."""
    reset_logging()
    configure_logging(level=logging.DEBUG)
    yield
    reset_logging()


@pytest.fixture(autouse=True)
def _clear_log_context():
    """Clear LogContext between tests to prevent cross-test contamination."""
    LogContext.clear()
    yield
    LogContext.clear()


@pytest.fixture
def captured_logs():
    """
    Capture textile_kernel logs as parsed JSON dicts.

    Usage::

        def test_something(captured_logs):
            StockAllocationEngine().allocate(...)
            logs = captured_logs()
            assert any(r["message"] == "allocation_completed" for r in logs)
    """
    stream = StringIO()
    handler = logging.StreamHandler(stream)
    handler.setFormatter(StructuredFormatter())
    root = logging.getLogger("textile_kernel")
    previous_level = root.level
    root.setLevel(logging.DEBUG)
    root.addHandler(handler)

    def _get_records() -> list[dict]:
        lines = stream.getvalue().strip().split("\n")
        return [json.loads(line) for line in lines if line]

    yield _get_records

    root.removeHandler(handler)
    root.setLevel(previous_level)


# =============================================================================
# Clock
# =============================================================================


@pytest.fixture
def deterministic_clock() -> DeterministicClock:
    """Clock fixed at 2024-03-20 12:00 UTC."""
    return DeterministicClock(datetime(2024, 3, 20, 12, 0, 0, tzinfo=timezone.utc))


# =============================================================================
# Database
# =============================================================================


@pytest.fixture(scope="session")
def db_engine():
    """Single in-memory SQLite engine for the entire test session."""
    eng = init_engine_from_url("sqlite://", echo=False)
    create_tables()
    yield eng
    reset_engine()


def _clear_all_tables(engine) -> None:
    """Delete every row, children first."""
    with engine.begin() as conn:
        for table in reversed(Base.metadata.sorted_tables):
            conn.execute(delete(table))


@pytest.fixture
def session(db_engine) -> Generator[Session, None, None]:
    """Provide a database session for testing.

    Services only flush, so most tests never commit; anything that does
    (``session_scope()`` in script tests) is wiped at teardown together
    with the rolled-back work.
    """
    sess = get_session()
    try:
        yield sess
    finally:
        sess.rollback()
        sess.close()
        _clear_all_tables(db_engine)


# =============================================================================
# Production data factories (persisted through the kernel services)
# =============================================================================


@pytest.fixture
def create_order(session):
    """Create one unassigned, pending-cut order row through OrderService."""
    from textile_kernel.domain.validation import validate_order_draft
    from textile_kernel.services.order_service import OrderService

    service = OrderService(session)

    def _create(
        product_name: str = "T-SHIRT",
        color: str = "SİYAH",
        created_date: date = date(2025, 3, 5),
        sizes: dict | None = None,
    ):
        draft = validate_order_draft(
            product_name=product_name,
            color=color,
            created_date=created_date,
            sizes=sizes or {"s": 20, "m": 30},
        )
        (order,) = service.add_orders([draft])
        return order

    return _create


@pytest.fixture
def create_stock_entry(session):
    """Create one stock entry through StockEntryService.

    Without quantities the entry receives one normal unit of size s.
    """
    from textile_kernel.domain.validation import validate_stock_entry_draft
    from textile_kernel.services.stock_entry_service import StockEntryService

    service = StockEntryService(session)

    def _create(
        entry_date: date = date(2025, 3, 14),
        normal: dict | None = None,
        defective: dict | None = None,
        defect_reason: str | None = None,
        producer: str | None = None,
        product_name: str = "T-SHIRT",
        color: str = "SİYAH",
    ):
        if normal is None and defective is None:
            normal = {"s": 1}
        draft = validate_stock_entry_draft(
            entry_date=entry_date,
            product_name=product_name,
            color=color,
            normal_sizes=normal,
            defective_sizes=defective,
            producer=producer,
            defect_reason=defect_reason,
        )
        (entry,) = service.add_entries([draft])
        return entry

    return _create
