"""
Module: textile_kernel.models.cutting_report
Responsibility: ORM persistence for cutting reports.  Each new order group
    gets an unconfirmed empty report; confirming the cut replaces the
    group's reports with a single confirmed one.
Architecture position: Kernel > Models.
"""

import datetime as dt

from sqlalchemy import Boolean, Index, String
from sqlalchemy.orm import Mapped, mapped_column

from textile_kernel.db.base import TrackedBase
from textile_kernel.db.types import SizesJSON
from textile_kernel.domain.entities import CuttingReport
from textile_kernel.domain.sizes import Sizes


class CuttingReportRecord(TrackedBase):
    __tablename__ = "cutting_reports"

    __table_args__ = (
        Index("idx_cutting_reports_group", "group_id"),
    )

    id: Mapped[str] = mapped_column(String(64), primary_key=True)
    date: Mapped[dt.date] = mapped_column(nullable=False)
    group_id: Mapped[str] = mapped_column(String(120), nullable=False)
    product_name: Mapped[str] = mapped_column(nullable=False)
    color: Mapped[str] = mapped_column(String(100), nullable=False)
    sizes: Mapped[Sizes] = mapped_column(SizesJSON, nullable=False)
    is_confirmed: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)

    @classmethod
    def from_domain(cls, report: CuttingReport) -> "CuttingReportRecord":
        return cls(
            id=report.id,
            date=report.date,
            group_id=report.group_id,
            product_name=report.product_name,
            color=report.color,
            sizes=report.sizes,
            is_confirmed=report.is_confirmed,
        )

    def to_domain(self) -> CuttingReport:
        return CuttingReport(
            id=self.id,
            date=self.date,
            group_id=self.group_id,
            product_name=self.product_name,
            color=self.color,
            sizes=self.sizes or Sizes(),
            is_confirmed=bool(self.is_confirmed),
        )
