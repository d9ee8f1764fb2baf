"""
Service layer for order rows and order groups.

Creates order groups from validated drafts, replaces a group's rows after
a resize or reassignment, deletes groups and writes derived status back.
Returns domain ``Order`` records, never ORM rows.
"""

from __future__ import annotations

from collections.abc import Sequence
from datetime import date
from uuid import uuid4

from sqlalchemy import delete, select

from textile_kernel.domain.entities import CuttingReport, Order, ProductionStatus
from textile_kernel.domain.identifiers import make_group_id, make_order_id
from textile_kernel.domain.sizes import Sizes
from textile_kernel.domain.validation import OrderDraft
from textile_kernel.exceptions import OrderGroupNotFoundError, OrderNotFoundError
from textile_kernel.logging_config import LogContext, get_logger
from textile_kernel.models.cutting_report import CuttingReportRecord
from textile_kernel.models.order import OrderRecord
from textile_kernel.services.base import BaseService

logger = get_logger("services.orders")


class OrderService(BaseService[OrderRecord]):
    """
    Service for order rows.

    New orders are always unassigned and pending cut.  Producers are
    attached later through reassignment, which rewrites the group through
    ``replace_group``.
    """

    def _get(self, order_id: str) -> OrderRecord:
        record = self.session.get(OrderRecord, order_id)
        if record is None:
            raise OrderNotFoundError(order_id)
        return record

    def _group_records(self, group_id: str) -> list[OrderRecord]:
        stmt = (
            select(OrderRecord)
            .where(OrderRecord.group_id == group_id)
            .order_by(OrderRecord.row_order, OrderRecord.id)
        )
        return list(self.session.scalars(stmt))

    def get(self, order_id: str) -> Order:
        return self._get(order_id).to_domain()

    def add_orders(
        self,
        drafts: Sequence[OrderDraft],
        locale: str = "tr",
    ) -> tuple[Order, ...]:
        """
        Create one unassigned, pending-cut row per draft.

        The group id is derived from the creation date, product and color,
        so drafts for the same product and color on the same day land in
        one group.  Every group that has no cutting report yet gets one
        unconfirmed, empty report dated on the order's creation date.

        Returns:
            The created orders, in draft order.
        """
        existing_groups = set(self.session.scalars(select(CuttingReportRecord.group_id)))
        next_row = self._next_row_order(OrderRecord)
        created: list[Order] = []

        for offset, draft in enumerate(drafts):
            group_id = make_group_id(draft.created_date, draft.product_name, draft.color, locale)
            order = Order(
                id=make_order_id(group_id, None),
                group_id=group_id,
                created_date=draft.created_date,
                product_name=draft.product_name,
                color=draft.color,
                sizes=draft.sizes,
                status=ProductionStatus.PENDING_CUT,
            )
            record = OrderRecord.from_domain(order)
            record.row_order = next_row + offset
            self.session.add(record)
            created.append(order)

            if group_id not in existing_groups:
                self.session.add(CuttingReportRecord.from_domain(CuttingReport(
                    id=str(uuid4()),
                    date=draft.created_date,
                    group_id=group_id,
                    product_name=draft.product_name,
                    color=draft.color,
                    sizes=Sizes(),
                    is_confirmed=False,
                )))
                existing_groups.add(group_id)

        self.session.flush()
        logger.info("orders_added", extra={
            "order_count": len(created),
            "group_count": len({o.group_id for o in created}),
        })
        return tuple(created)

    def replace_group(self, group_id: str, orders: Sequence[Order]) -> tuple[Order, ...]:
        """
        Replace every row of a group with ``orders``.

        Used to write back a resize or reassignment.  The new rows are
        appended to the insertion sequence in the given order, so the group
        moves to the end of the order list.  Cutting reports are not
        touched.

        Raises:
            OrderGroupNotFoundError: If the group has no rows.
        """
        old = self._group_records(group_id)
        if not old:
            raise OrderGroupNotFoundError(group_id)

        for record in old:
            self.session.delete(record)
        self.session.flush()

        start = self._next_row_order(OrderRecord)

        for offset, order in enumerate(orders):
            record = OrderRecord.from_domain(order)
            record.row_order = start + offset
            self.session.add(record)
        self.session.flush()

        with LogContext.bind(group_id=group_id):
            logger.info("order_group_replaced", extra={
                "removed_count": len(old),
                "added_count": len(orders),
            })
        return tuple(orders)

    def delete_group(self, group_id: str) -> int:
        """
        Delete a group's orders and cutting reports.

        Returns:
            Number of order rows deleted.

        Raises:
            OrderGroupNotFoundError: If the group has no rows.
        """
        rows = self._group_records(group_id)
        if not rows:
            raise OrderGroupNotFoundError(group_id)
        for record in rows:
            self.session.delete(record)
        self.session.execute(
            delete(CuttingReportRecord).where(CuttingReportRecord.group_id == group_id)
        )
        self.session.flush()
        with LogContext.bind(group_id=group_id):
            logger.info("order_group_deleted", extra={"order_count": len(rows)})
        return len(rows)

    def apply_status(
        self,
        order_id: str,
        status: ProductionStatus,
        completion_date: date | None,
    ) -> Order:
        """Persist a derived status and completion date on one row."""
        record = self._get(order_id)
        record.status = status.value
        record.completion_date = completion_date
        self.session.flush()
        return record.to_domain()

    def cancel_order(self, order_id: str) -> Order:
        """
        Mark a row cancelled.  The status resolver never reclassifies it.
        """
        record = self._get(order_id)
        record.status = ProductionStatus.CANCELLED.value
        record.completion_date = None
        self.session.flush()
        with LogContext.bind(order_id=order_id, group_id=record.group_id):
            logger.info("order_cancelled")
        return record.to_domain()
