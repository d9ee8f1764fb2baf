"""
Service layer for cutting reports.

Confirming a cut replaces whatever reports a group has (the placeholder
created with the order, or an earlier confirmation) with a single
confirmed report carrying the total cut per size.
"""

from __future__ import annotations

from datetime import date
from uuid import uuid4

from sqlalchemy import select

from textile_kernel.domain.entities import CuttingReport
from textile_kernel.domain.sizes import Sizes
from textile_kernel.exceptions import OrderGroupNotFoundError
from textile_kernel.logging_config import LogContext, get_logger
from textile_kernel.models.cutting_report import CuttingReportRecord
from textile_kernel.models.order import OrderRecord
from textile_kernel.services.base import BaseService

logger = get_logger("services.cutting_reports")


class CuttingReportService(BaseService[CuttingReportRecord]):

    def confirm_cut(self, group_id: str, sizes: Sizes, cut_date: date) -> CuttingReport:
        """
        Record the confirmed cut of a group.

        Product and color are taken from the group's existing report, or
        from its orders when it has none.

        Raises:
            OrderGroupNotFoundError: If the group has neither reports nor
                orders.
        """
        existing = list(self.session.scalars(
            select(CuttingReportRecord).where(CuttingReportRecord.group_id == group_id)
        ))
        if existing:
            product_name, color = existing[0].product_name, existing[0].color
        else:
            order = self.session.scalars(
                select(OrderRecord).where(OrderRecord.group_id == group_id).limit(1)
            ).first()
            if order is None:
                raise OrderGroupNotFoundError(group_id)
            product_name, color = order.product_name, order.color

        for record in existing:
            self.session.delete(record)
        self.session.flush()

        report = CuttingReport(
            id=str(uuid4()),
            date=cut_date,
            group_id=group_id,
            product_name=product_name,
            color=color,
            sizes=sizes,
            is_confirmed=True,
        )
        self.session.add(CuttingReportRecord.from_domain(report))
        self.session.flush()

        with LogContext.bind(group_id=group_id):
            logger.info("cut_confirmed", extra={
                "replaced_count": len(existing),
                "total_cut": sizes.total,
            })
        return report
