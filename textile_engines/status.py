"""
Module: textile_engines.status
Responsibility:
    Derive each order's effective production status and completion date
    from the allocation result and the cutting confirmation state.

Architecture position:
    Engines -- pure calculation layer.  The only time input is the injected
    Clock, consulted solely when a completed group has no dated stock.

Invariants enforced:
    - A cancelled order is never reclassified.
    - The resolver returns new Order values; stored status is only changed
      by the explicit write-back (``textile_services.status_sync``).
    - Missing lookups (a usage whose order or stock entry is unknown) are
      skipped, never fatal.

Rules, per order whose stored status is not cancelled:
    1. cut confirmed, total cut > 0 and total produced >= total cut
         -> completed; completion date = latest date among stock entries
            that contributed to the group (clock date when none).  An order
            already completed keeps its stored completion date, even when
            none is stored.
    2. otherwise, stored completed -> in-progress, completion date cleared.
    3. otherwise, cut confirmed and stored pending-cut -> in-progress.
    4. otherwise unchanged.
"""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass
from datetime import date

from textile_engines.tracer import traced_engine
from textile_kernel.domain.clock import Clock, SystemClock
from textile_kernel.domain.entities import (
    CuttingReport,
    Order,
    ProductionStatus,
    StockEntry,
    StockUsage,
)
from textile_kernel.domain.numbers import whole_percentage
from textile_kernel.logging_config import get_logger

logger = get_logger("engines.status")


@dataclass(frozen=True)
class GroupProgress:
    """Production progress of one order group."""

    group_id: str
    total_cut: int
    total_produced: int
    is_cut_confirmed: bool
    latest_stock_date: date | None

    @property
    def is_complete(self) -> bool:
        return (
            self.is_cut_confirmed
            and self.total_cut > 0
            and self.total_produced >= self.total_cut
        )

    @property
    def percentage(self) -> int:
        """Produced as a rounded percentage of cut; 0 when nothing was cut."""
        return whole_percentage(self.total_produced, self.total_cut)


@dataclass(frozen=True)
class StatusTransition:
    """A difference between an order's stored and derived state."""

    order_id: str
    group_id: str
    from_status: ProductionStatus
    to_status: ProductionStatus
    previous_completion_date: date | None
    completion_date: date | None


_EMPTY_PROGRESS = GroupProgress(
    group_id="",
    total_cut=0,
    total_produced=0,
    is_cut_confirmed=False,
    latest_stock_date=None,
)


class StatusResolver:
    """
    Recompute order status from production facts.

    Contract:
        ``resolve`` maps every input order to its derived state, in input
        order.  Orders whose state does not change are returned as the
        same object.
    """

    def __init__(self, clock: Clock | None = None):
        self._clock = clock or SystemClock()

    def group_progress(
        self,
        orders: Sequence[Order],
        stock_usages: Sequence[StockUsage],
        stock_entries: Sequence[StockEntry],
        cutting_reports: Sequence[CuttingReport],
    ) -> dict[str, GroupProgress]:
        """Cut, produced and latest contributing stock date per group."""
        group_of_order = {o.id: o.group_id for o in orders}
        entry_dates = {e.id: e.date for e in stock_entries}

        produced: dict[str, int] = {}
        latest: dict[str, date] = {}
        for usage in stock_usages:
            group_id = group_of_order.get(usage.order_id)
            if group_id is None:
                continue
            produced[group_id] = produced.get(group_id, 0) + usage.total_used
            entry_date = entry_dates.get(usage.stock_entry_id)
            if entry_date is not None and (
                group_id not in latest or entry_date > latest[group_id]
            ):
                latest[group_id] = entry_date

        cut: dict[str, int] = {}
        confirmed: set[str] = set()
        for report in cutting_reports:
            if report.is_confirmed:
                confirmed.add(report.group_id)
                cut[report.group_id] = cut.get(report.group_id, 0) + report.sizes.total

        group_ids = dict.fromkeys(o.group_id for o in orders)
        return {
            gid: GroupProgress(
                group_id=gid,
                total_cut=cut.get(gid, 0),
                total_produced=produced.get(gid, 0),
                is_cut_confirmed=gid in confirmed,
                latest_stock_date=latest.get(gid),
            )
            for gid in group_ids
        }

    @traced_engine(
        "status_resolver",
        "1.0",
        fingerprint_fields=("orders", "stock_usages", "cutting_reports"),
    )
    def resolve(
        self,
        orders: Sequence[Order],
        stock_usages: Sequence[StockUsage],
        stock_entries: Sequence[StockEntry],
        cutting_reports: Sequence[CuttingReport],
    ) -> tuple[Order, ...]:
        """
        Derive status and completion date for every order.

        Args:
            orders: Stored orders.
            stock_usages: Allocation output for the same snapshot.
            stock_entries: Entries referenced by the usages (for dates).
            cutting_reports: All cutting reports of the snapshot.

        Returns:
            Orders with derived status, in input order.
        """
        progress = self.group_progress(orders, stock_usages, stock_entries, cutting_reports)
        resolved = tuple(
            self._resolve_order(order, progress.get(order.group_id, _EMPTY_PROGRESS))
            for order in orders
        )
        changed = sum(1 for before, after in zip(orders, resolved) if before is not after)
        logger.info("status_resolution_completed", extra={
            "order_count": len(orders),
            "changed_count": changed,
        })
        return resolved

    def transitions(
        self,
        orders: Sequence[Order],
        stock_usages: Sequence[StockUsage],
        stock_entries: Sequence[StockEntry],
        cutting_reports: Sequence[CuttingReport],
    ) -> tuple[StatusTransition, ...]:
        """Orders whose derived state differs from what is stored."""
        resolved = self.resolve(orders, stock_usages, stock_entries, cutting_reports)
        return tuple(
            StatusTransition(
                order_id=before.id,
                group_id=before.group_id,
                from_status=before.status,
                to_status=after.status,
                previous_completion_date=before.completion_date,
                completion_date=after.completion_date,
            )
            for before, after in zip(orders, resolved)
            if before is not after
        )

    def _resolve_order(self, order: Order, progress: GroupProgress) -> Order:
        if order.status == ProductionStatus.CANCELLED:
            return order

        status = order.status
        completion = order.completion_date

        if progress.is_complete:
            if status != ProductionStatus.COMPLETED:
                status = ProductionStatus.COMPLETED
                completion = progress.latest_stock_date or self._clock.today()
        elif status == ProductionStatus.COMPLETED:
            status = ProductionStatus.IN_PROGRESS
            completion = None
        elif progress.is_cut_confirmed and status == ProductionStatus.PENDING_CUT:
            status = ProductionStatus.IN_PROGRESS

        if status == order.status and completion == order.completion_date:
            return order
        logger.debug("order_status_derived", extra={
            "order_id": order.id,
            "group_id": order.group_id,
            "from_status": order.status.value,
            "to_status": status.value,
        })
        return order.with_status(status, completion)
