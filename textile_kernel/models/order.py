"""
Module: textile_kernel.models.order
Responsibility: ORM persistence for order rows (one row per producer share
    of an order group).
Architecture position: Kernel > Models.  May import from db/ and the pure
    domain layer.  MUST NOT import from services/, selectors/, or outer layers.

Invariants enforced:
    - total_quantity is written from sizes on every save; it is stored for
      reporting queries only and never read back into the domain.
    - All rows of one group_id share product_name and color (maintained by
      OrderService, not by a constraint).
"""

from datetime import date

from sqlalchemy import Index, String
from sqlalchemy.orm import Mapped, mapped_column

from textile_kernel.db.base import TrackedBase
from textile_kernel.db.types import SizesJSON
from textile_kernel.domain.entities import Order, ProductionStatus
from textile_kernel.domain.sizes import Sizes


class OrderRecord(TrackedBase):
    """
    One producer's share of an order group.

    Contract:
        ``producer`` NULL means unassigned.  ``status`` holds the
        ProductionStatus value string.
    """

    __tablename__ = "orders"

    __table_args__ = (
        Index("idx_orders_group", "group_id"),
        Index("idx_orders_producer", "producer"),
    )

    id: Mapped[str] = mapped_column(String(160), primary_key=True)
    group_id: Mapped[str] = mapped_column(String(120), nullable=False)
    created_date: Mapped[date] = mapped_column(nullable=False)
    completion_date: Mapped[date | None] = mapped_column(nullable=True)
    product_name: Mapped[str] = mapped_column(nullable=False)
    color: Mapped[str] = mapped_column(String(100), nullable=False)
    producer: Mapped[str | None] = mapped_column(nullable=True)
    sizes: Mapped[Sizes] = mapped_column(SizesJSON, nullable=False)
    total_quantity: Mapped[int] = mapped_column(nullable=False, default=0)
    status: Mapped[str] = mapped_column(
        String(20),
        nullable=False,
        default=ProductionStatus.PENDING_CUT.value,
    )
    # Insertion sequence; rows of a group are served in this order.
    row_order: Mapped[int] = mapped_column(nullable=False, default=0)

    @classmethod
    def from_domain(cls, order: Order) -> "OrderRecord":
        return cls(
            id=order.id,
            group_id=order.group_id,
            created_date=order.created_date,
            completion_date=order.completion_date,
            product_name=order.product_name,
            color=order.color,
            producer=order.producer,
            sizes=order.sizes,
            total_quantity=order.total_quantity,
            status=order.status.value,
        )

    def to_domain(self) -> Order:
        return Order(
            id=self.id,
            group_id=self.group_id,
            created_date=self.created_date,
            product_name=self.product_name,
            color=self.color,
            sizes=self.sizes or Sizes(),
            status=ProductionStatus(self.status),
            producer=self.producer,
            completion_date=self.completion_date,
        )

    def __repr__(self) -> str:
        return f"<OrderRecord {self.id} {self.status}>"
