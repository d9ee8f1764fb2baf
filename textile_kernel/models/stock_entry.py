"""
Module: textile_kernel.models.stock_entry
Responsibility: ORM persistence for stock receipts (normal and defective
    units per size).
Architecture position: Kernel > Models.

Invariants enforced:
    - Stock entries are never hard-deleted; ``is_archived`` takes them out
      of allocation and can be reversed.
"""

import datetime as dt

from sqlalchemy import Boolean, Index, String
from sqlalchemy.orm import Mapped, mapped_column

from textile_kernel.db.base import TrackedBase
from textile_kernel.db.types import SizesJSON
from textile_kernel.domain.entities import StockEntry
from textile_kernel.domain.sizes import Sizes


class StockEntryRecord(TrackedBase):
    __tablename__ = "stock_entries"

    __table_args__ = (
        Index("idx_stock_entries_key", "product_name", "color"),
        Index("idx_stock_entries_date", "date"),
    )

    id: Mapped[str] = mapped_column(String(64), primary_key=True)
    date: Mapped[dt.date] = mapped_column(nullable=False)
    product_name: Mapped[str] = mapped_column(nullable=False)
    color: Mapped[str] = mapped_column(String(100), nullable=False)
    producer: Mapped[str | None] = mapped_column(nullable=True)
    normal_sizes: Mapped[Sizes] = mapped_column(SizesJSON, nullable=False)
    defective_sizes: Mapped[Sizes] = mapped_column(SizesJSON, nullable=False)
    defect_reason: Mapped[str | None] = mapped_column(nullable=True)
    is_archived: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    # Insertion sequence; breaks ties between entries of the same date.
    row_order: Mapped[int] = mapped_column(nullable=False, default=0)

    @classmethod
    def from_domain(cls, entry: StockEntry) -> "StockEntryRecord":
        return cls(
            id=entry.id,
            date=entry.date,
            product_name=entry.product_name,
            color=entry.color,
            producer=entry.producer,
            normal_sizes=entry.normal_sizes,
            defective_sizes=entry.defective_sizes,
            defect_reason=entry.defect_reason,
            is_archived=entry.is_archived,
        )

    def to_domain(self) -> StockEntry:
        return StockEntry(
            id=self.id,
            date=self.date,
            product_name=self.product_name,
            color=self.color,
            normal_sizes=self.normal_sizes or Sizes(),
            defective_sizes=self.defective_sizes or Sizes(),
            producer=self.producer,
            defect_reason=self.defect_reason,
            is_archived=bool(self.is_archived),
        )
