"""
Module: textile_kernel.selectors.snapshot_selector
Responsibility: Load the complete production dataset as one immutable
    ProductionSnapshot.  Every derived view (allocation, status, reports)
    is computed from this snapshot.
Architecture position: Kernel > Selectors.

Invariants enforced:
    - Row order is deterministic: orders by insertion sequence,
      stock entries by (date, insertion sequence), cutting reports by
      (date, id), lookup tables by name.  Allocation serves orders of a
      group in this order.
    - Archived stock entries are included; consumers filter with
      ``snapshot.active_stock_entries``.
"""

from __future__ import annotations

from sqlalchemy import select

from textile_kernel.domain.entities import CuttingReport, Order, StockEntry
from textile_kernel.domain.snapshot import ProductionSnapshot
from textile_kernel.logging_config import get_logger
from textile_kernel.models.cutting_report import CuttingReportRecord
from textile_kernel.models.order import OrderRecord
from textile_kernel.models.reference import ColorRecord, DefectReasonRecord, ProducerRecord
from textile_kernel.models.stock_entry import StockEntryRecord
from textile_kernel.selectors.base import BaseSelector

logger = get_logger("selectors.snapshot")


class SnapshotSelector(BaseSelector[OrderRecord]):
    """Read the full dataset (orders, stock, cuts and lookups) in one pass."""

    def orders(self) -> tuple[Order, ...]:
        stmt = select(OrderRecord).order_by(OrderRecord.row_order, OrderRecord.id)
        return tuple(r.to_domain() for r in self.session.scalars(stmt))

    def orders_in_group(self, group_id: str) -> tuple[Order, ...]:
        stmt = (
            select(OrderRecord)
            .where(OrderRecord.group_id == group_id)
            .order_by(OrderRecord.row_order, OrderRecord.id)
        )
        return tuple(r.to_domain() for r in self.session.scalars(stmt))

    def stock_entries(self, include_archived: bool = True) -> tuple[StockEntry, ...]:
        stmt = select(StockEntryRecord).order_by(
            StockEntryRecord.date, StockEntryRecord.row_order, StockEntryRecord.id
        )
        if not include_archived:
            stmt = stmt.where(StockEntryRecord.is_archived.is_(False))
        return tuple(r.to_domain() for r in self.session.scalars(stmt))

    def cutting_reports(self) -> tuple[CuttingReport, ...]:
        stmt = select(CuttingReportRecord).order_by(
            CuttingReportRecord.date, CuttingReportRecord.id
        )
        return tuple(r.to_domain() for r in self.session.scalars(stmt))

    def load(self) -> ProductionSnapshot:
        """The whole dataset as an immutable snapshot."""
        snapshot = ProductionSnapshot(
            orders=self.orders(),
            stock_entries=self.stock_entries(),
            cutting_reports=self.cutting_reports(),
            producers=tuple(
                r.to_domain()
                for r in self.session.scalars(select(ProducerRecord).order_by(ProducerRecord.name))
            ),
            colors=tuple(
                r.to_domain()
                for r in self.session.scalars(select(ColorRecord).order_by(ColorRecord.name))
            ),
            defect_reasons=tuple(
                r.to_domain()
                for r in self.session.scalars(
                    select(DefectReasonRecord).order_by(DefectReasonRecord.name)
                )
            ),
        )
        logger.debug("snapshot_loaded", extra={
            "order_count": len(snapshot.orders),
            "stock_entry_count": len(snapshot.stock_entries),
            "cutting_report_count": len(snapshot.cutting_reports),
        })
        return snapshot
