"""
textile_services.production_view -- Derived production state per snapshot.

Responsibility:
    Run the full derivation pipeline over a ProductionSnapshot: filter
    archived stock, allocate stock to orders, resolve order status, and
    build the reports the dashboard shows.  Results are memoized per
    snapshot fingerprint and clock date.

Architecture position:
    Services -- orchestration over engines.  No persistence: callers load
    the snapshot (``SnapshotSelector``) and pass it in.

Invariants enforced:
    - Derived state is always a function of the snapshot it was computed
      from; a changed snapshot has a new fingerprint and is recomputed.
    - A completion date that falls back to the clock is never served from
      a previous day.
    - Archived stock entries never reach the allocation engine.

Usage:
    view = ProductionView(clock=SystemClock(), unassigned_label="Atanmamış")
    state = view.compute(SnapshotSelector(session).load())
    state.dashboard.completed_orders
"""

from __future__ import annotations

from collections import OrderedDict
from dataclasses import dataclass
from datetime import date

from textile_engines.allocation import AllocationResult, StockAllocationEngine
from textile_engines.reporting import (
    CompletionProgress,
    DashboardSummary,
    DefectRateReport,
    DefectReasonTotal,
    ProducerPerformanceStat,
    SizeProgressRow,
    completion_progress,
    dashboard_summary,
    defect_breakdown,
    defect_rate,
    group_status,
    order_size_progress,
    producer_performance,
)
from textile_engines.status import GroupProgress, StatusResolver
from textile_kernel.domain.clock import Clock, SystemClock
from textile_kernel.domain.entities import Order, ProductionStatus, StockEntry, StockUsage
from textile_kernel.domain.identifiers import UNASSIGNED
from textile_kernel.domain.sizes import Size, Sizes
from textile_kernel.domain.snapshot import ProductionSnapshot
from textile_kernel.logging_config import LogContext, get_logger

logger = get_logger("services.production_view")


@dataclass(frozen=True)
class ProductionState:
    """
    Everything derived from one snapshot.

    ``orders`` carry resolved status and completion dates; the stored
    values remain in ``snapshot.orders``.
    """

    snapshot: ProductionSnapshot
    fingerprint: str
    active_stock_entries: tuple[StockEntry, ...]
    allocation: AllocationResult
    orders: tuple[Order, ...]
    group_progress: dict[str, GroupProgress]
    producer_stats: tuple[ProducerPerformanceStat, ...]
    defect_totals: tuple[DefectReasonTotal, ...]
    dashboard: DashboardSummary
    unassigned_label: str = UNASSIGNED

    @property
    def stock_usages(self) -> tuple[StockUsage, ...]:
        return self.allocation.usages

    def orders_in_group(self, group_id: str) -> tuple[Order, ...]:
        return tuple(o for o in self.orders if o.group_id == group_id)

    def group_ids(self) -> tuple[str, ...]:
        return tuple(dict.fromkeys(o.group_id for o in self.orders))

    def status_of_group(self, group_id: str) -> ProductionStatus | None:
        rows = self.orders_in_group(group_id)
        return group_status(rows) if rows else None

    def order_detail(self, group_id: str) -> tuple[SizeProgressRow, ...]:
        """Per-size progress rows of one group."""
        return order_size_progress(
            self.orders_in_group(group_id),
            self.stock_usages,
            self.active_stock_entries,
            self.allocation.cut_by_group.get(group_id, Sizes()),
            unassigned_label=self.unassigned_label,
        )

    def defect_rate(
        self,
        producer: str | None = None,
        start: date | None = None,
        end: date | None = None,
    ) -> DefectRateReport:
        return defect_rate(
            self.stock_usages,
            self.active_stock_entries,
            self.orders,
            self.snapshot.cutting_reports,
            producer=producer,
            start=start,
            end=end,
        )

    def completion_progress(
        self,
        product_name: str | None = None,
        color: str | None = None,
        size: Size | str | None = None,
    ) -> CompletionProgress:
        return completion_progress(
            self.orders,
            self.stock_usages,
            self.snapshot.cutting_reports,
            product_name=product_name,
            color=color,
            size=size,
        )


class ProductionView:
    """
    Memoizing front for the derivation pipeline.

    Contract:
        ``compute(snapshot)`` returns the same ProductionState object for
        snapshots with the same fingerprint on the same clock date, up to ``cache_size``
        distinct snapshots (least recently used evicted first).
    Non-goals:
        - Does not persist derived status; see StatusSyncService.
    """

    def __init__(
        self,
        clock: Clock | None = None,
        unassigned_label: str = UNASSIGNED,
        cache_size: int = 8,
    ):
        self._clock = clock or SystemClock()
        self._unassigned_label = unassigned_label
        self._cache_size = cache_size
        self._cache: OrderedDict[tuple[str, date], ProductionState] = OrderedDict()
        self._allocator = StockAllocationEngine()
        self._resolver = StatusResolver(self._clock)

    def compute(self, snapshot: ProductionSnapshot) -> ProductionState:
        fingerprint = snapshot.fingerprint()
        key = (fingerprint, self._clock.today())
        cached = self._cache.get(key)
        if cached is not None:
            self._cache.move_to_end(key)
            logger.debug("production_state_cache_hit", extra={"fingerprint": fingerprint[:16]})
            return cached

        with LogContext.bind(correlation_id=fingerprint[:16]):
            state = self._derive(snapshot, fingerprint)

        self._cache[key] = state
        while len(self._cache) > self._cache_size:
            self._cache.popitem(last=False)
        return state

    def invalidate(self) -> None:
        self._cache.clear()

    def _derive(self, snapshot: ProductionSnapshot, fingerprint: str) -> ProductionState:
        active = snapshot.active_stock_entries
        allocation = self._allocator.allocate(
            orders=snapshot.orders,
            stock_entries=active,
            cutting_reports=snapshot.cutting_reports,
        )
        orders = self._resolver.resolve(
            snapshot.orders, allocation.usages, active, snapshot.cutting_reports
        )
        progress = self._resolver.group_progress(
            snapshot.orders, allocation.usages, active, snapshot.cutting_reports
        )

        state = ProductionState(
            snapshot=snapshot,
            fingerprint=fingerprint,
            active_stock_entries=active,
            allocation=allocation,
            orders=orders,
            group_progress=progress,
            producer_stats=producer_performance(snapshot.producers, orders),
            defect_totals=defect_breakdown(
                allocation.usages, active, orders, unassigned_label=self._unassigned_label
            ),
            dashboard=dashboard_summary(orders),
            unassigned_label=self._unassigned_label,
        )
        logger.info("production_state_computed", extra={
            "order_count": len(orders),
            "usage_count": len(allocation.usages),
            "overflow_count": len(allocation.overflow),
            "group_count": state.dashboard.total_orders,
        })
        return state
