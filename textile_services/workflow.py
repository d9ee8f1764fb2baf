"""
textile_services.workflow -- Production mutations that rewrite order groups.

Responsibility:
    Carry out the edits an operator makes: moving order parts between
    producers, resizing an order group, and saving an edited record.
    Each mutation reads current rows, runs the pure engine, and writes
    the result back through the kernel services.

Architecture position:
    Services -- orchestration over selectors, engines and kernel services.
    Flushes only; the caller owns the transaction, so a group rewrite is
    all-or-nothing.

Failure modes:
    - OrderGroupNotFoundError when resizing a group with no rows.
    - EmptyQuantityError when resizing to a zero total.
    - ValidationError subclasses from edited stock entries.
    - NotFoundError subclasses propagated from the kernel services.
"""

from __future__ import annotations

from collections.abc import Iterable
from datetime import date

from sqlalchemy.orm import Session

from textile_engines.reassignment import ReassignmentResult, reassign_parts, resize_group
from textile_kernel.domain.clock import Clock, SystemClock
from textile_kernel.domain.entities import (
    CuttingReport,
    EditableItem,
    EditableKind,
    Order,
    StockEntry,
)
from textile_kernel.domain.sizes import Size, Sizes, sum_sizes
from textile_kernel.domain.validation import validate_stock_entry_draft
from textile_kernel.exceptions import EmptyQuantityError, OrderGroupNotFoundError
from textile_kernel.logging_config import LogContext, get_logger
from textile_kernel.selectors.snapshot_selector import SnapshotSelector
from textile_kernel.services.cutting_report_service import CuttingReportService
from textile_kernel.services.order_service import OrderService
from textile_kernel.services.stock_entry_service import StockEntryService

logger = get_logger("services.workflow")


class ProductionWorkflow:
    """
    Operator-facing mutations.

    Contract:
        Every method leaves the database consistent within the caller's
        transaction.  Derived status is not written here; run
        StatusSyncService after the mutation when stored status should
        follow.
    """

    def __init__(self, session: Session, clock: Clock | None = None):
        self._session = session
        self._clock = clock or SystemClock()
        self._selector = SnapshotSelector(session)
        self._orders = OrderService(session)
        self._stock = StockEntryService(session)
        self._cuts = CuttingReportService(session)

    def reassign(
        self,
        parts: Iterable[tuple[str, Size | str]],
        target_producer: str | None,
    ) -> ReassignmentResult:
        """
        Move (order id, size) parts to ``target_producer`` and persist
        every affected group.
        """
        result = reassign_parts(self._selector.orders(), parts, target_producer)
        for group_id in result.affected_group_ids:
            self._orders.replace_group(group_id, result.orders_in_group(group_id))
        return result

    def resize_group(
        self,
        group_id: str,
        new_total_sizes: Sizes,
        created_date: date | None = None,
    ) -> tuple[Order, ...]:
        """
        Change a group's per-size total, keeping each producer's share.

        Raises:
            OrderGroupNotFoundError: If the group has no rows.
            EmptyQuantityError: If the new total is zero.
        """
        group_orders = self._selector.orders_in_group(group_id)
        if not group_orders:
            raise OrderGroupNotFoundError(group_id)
        if new_total_sizes.is_zero:
            raise EmptyQuantityError(f"order group {group_id}")

        rows = resize_group(group_orders, new_total_sizes, created_date)
        with LogContext.bind(group_id=group_id):
            return self._orders.replace_group(group_id, rows)

    def confirm_cut(
        self,
        group_id: str,
        sizes: Sizes,
        cut_date: date | None = None,
    ) -> CuttingReport:
        """Confirm a group's cut, dated today unless a date is given."""
        if sizes.is_zero:
            raise EmptyQuantityError(f"cut of group {group_id}")
        return self._cuts.confirm_cut(group_id, sizes, cut_date or self._clock.today())

    def save_edit(self, item: EditableItem) -> Order | StockEntry | CuttingReport | tuple[Order, ...]:
        """
        Persist an edited record.

        The payload holds the edited values:
            ORDER            -- an order of the group with the new total
                                sizes and creation date; the group is
                                resized.
            STOCK_ENTRY      -- the entry with its new values; re-validated
                                and saved under the same id.
            CUTTING_REPORTS  -- the group's reports with the cut quantities;
                                their sum is confirmed as the group's cut,
                                dated on the latest report.
        """
        logger.info("edit_dispatched", extra={"kind": item.kind.value, "group_id": item.group_id})
        match item.kind:
            case EditableKind.ORDER:
                order: Order = item.payload
                return self.resize_group(order.group_id, order.sizes, order.created_date)
            case EditableKind.STOCK_ENTRY:
                entry: StockEntry = item.payload
                draft = validate_stock_entry_draft(
                    entry_date=entry.date,
                    product_name=entry.product_name,
                    color=entry.color,
                    normal_sizes=entry.normal_sizes,
                    defective_sizes=entry.defective_sizes,
                    producer=entry.producer,
                    defect_reason=entry.defect_reason,
                )
                return self._stock.update_entry(entry.id, draft)
            case EditableKind.CUTTING_REPORTS:
                reports: tuple[CuttingReport, ...] = item.payload
                if not reports:
                    raise EmptyQuantityError("cutting reports")
                return self.confirm_cut(
                    reports[0].group_id,
                    sum_sizes(r.sizes for r in reports),
                    max(r.date for r in reports),
                )
