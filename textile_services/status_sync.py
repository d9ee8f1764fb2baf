"""
textile_services.status_sync -- Explicit write-back of derived order status.

Responsibility:
    Load the snapshot, recompute allocation and status, and persist every
    order whose derived status or completion date differs from what is
    stored.  This is the only path by which derived status reaches the
    database.

Architecture position:
    Services -- orchestration over selectors, engines and kernel services.
    Flushes through OrderService; the caller owns the transaction.

Invariants enforced:
    - Cancelled orders are never written (the resolver never moves them).
    - Running sync twice in a row writes nothing the second time.
"""

from __future__ import annotations

from sqlalchemy.orm import Session

from textile_engines.allocation import StockAllocationEngine
from textile_engines.status import StatusResolver, StatusTransition
from textile_kernel.domain.clock import Clock, SystemClock
from textile_kernel.logging_config import LogContext, get_logger
from textile_kernel.selectors.snapshot_selector import SnapshotSelector
from textile_kernel.services.order_service import OrderService

logger = get_logger("services.status_sync")


class StatusSyncService:
    """Persist derived order status."""

    def __init__(self, session: Session, clock: Clock | None = None):
        self._session = session
        self._clock = clock or SystemClock()
        self._selector = SnapshotSelector(session)
        self._orders = OrderService(session)
        self._allocator = StockAllocationEngine()
        self._resolver = StatusResolver(self._clock)

    def pending_transitions(self) -> tuple[StatusTransition, ...]:
        """Transitions that ``sync`` would write, without writing them."""
        snapshot = self._selector.load()
        active = snapshot.active_stock_entries
        usages = self._allocator.allocate(
            orders=snapshot.orders,
            stock_entries=active,
            cutting_reports=snapshot.cutting_reports,
        ).usages
        return self._resolver.transitions(
            snapshot.orders, usages, active, snapshot.cutting_reports
        )

    def sync(self) -> tuple[StatusTransition, ...]:
        """
        Write every pending transition.

        Returns:
            The transitions written, in order-list order.
        """
        transitions = self.pending_transitions()
        for transition in transitions:
            with LogContext.bind(order_id=transition.order_id, group_id=transition.group_id):
                self._orders.apply_status(
                    transition.order_id,
                    transition.to_status,
                    transition.completion_date,
                )
                logger.info("order_status_synced", extra={
                    "from_status": transition.from_status.value,
                    "to_status": transition.to_status.value,
                    "completion_date": transition.completion_date,
                })
        logger.info("status_sync_completed", extra={"transition_count": len(transitions)})
        return transitions
