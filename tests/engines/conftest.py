"""
Engine-specific test fixtures.

Provides factories for the immutable domain records the engines consume.
No database is involved.
"""

from datetime import date
from itertools import count

import pytest

from textile_kernel.domain.entities import (
    CuttingReport,
    Order,
    ProductionStatus,
    StockEntry,
)
from textile_kernel.domain.sizes import Sizes

DAY_1 = date(2025, 3, 1)

PRODUCT = "T-SHIRT"
COLOR = "SİYAH"


@pytest.fixture
def make_order():
    """Factory for Order records; ids are sequential per test."""
    seq = count(1)

    def _make(
        group_id: str = "g1",
        sizes: Sizes | dict | None = None,
        producer: str | None = None,
        created: date = DAY_1,
        status: ProductionStatus = ProductionStatus.IN_PROGRESS,
        completion_date: date | None = None,
        product_name: str = PRODUCT,
        color: str = COLOR,
        order_id: str | None = None,
    ) -> Order:
        return Order(
            id=order_id or f"{group_id}-o{next(seq)}",
            group_id=group_id,
            created_date=created,
            product_name=product_name,
            color=color,
            sizes=sizes if isinstance(sizes, Sizes) else Sizes.of(sizes),
            status=status,
            producer=producer,
            completion_date=completion_date,
        )

    return _make


@pytest.fixture
def make_entry():
    """Factory for StockEntry records."""
    seq = count(1)

    def _make(
        entry_date: date = DAY_1,
        normal: Sizes | dict | None = None,
        defective: Sizes | dict | None = None,
        defect_reason: str | None = None,
        producer: str | None = None,
        product_name: str = PRODUCT,
        color: str = COLOR,
        is_archived: bool = False,
        entry_id: str | None = None,
    ) -> StockEntry:
        return StockEntry(
            id=entry_id or f"e{next(seq)}",
            date=entry_date,
            product_name=product_name,
            color=color,
            normal_sizes=normal if isinstance(normal, Sizes) else Sizes.of(normal),
            defective_sizes=defective if isinstance(defective, Sizes) else Sizes.of(defective),
            producer=producer,
            defect_reason=defect_reason,
            is_archived=is_archived,
        )

    return _make


@pytest.fixture
def make_cut():
    """Factory for CuttingReport records (confirmed unless told otherwise)."""
    seq = count(1)

    def _make(
        group_id: str = "g1",
        sizes: Sizes | dict | None = None,
        cut_date: date = DAY_1,
        is_confirmed: bool = True,
        product_name: str = PRODUCT,
        color: str = COLOR,
    ) -> CuttingReport:
        return CuttingReport(
            id=f"c{next(seq)}",
            date=cut_date,
            group_id=group_id,
            product_name=product_name,
            color=color,
            sizes=sizes if isinstance(sizes, Sizes) else Sizes.of(sizes),
            is_confirmed=is_confirmed,
        )

    return _make
