"""
Entities -- immutable records of the production snapshot.

Responsibility:
    Typed records for orders, cutting reports, stock entries, derived stock
    usage and the lookup entities (producers, colors, defect reasons).
    Relationships are by key only (group id, product+color, order id,
    stock entry id); no record holds a pointer to another.

Architecture position:
    Kernel > Domain -- pure functional core, zero I/O.
    The ORM layer (``textile_kernel.models``) converts to and from these
    records; engines only ever see these.

Invariants enforced:
    - ``Order.total_quantity`` is always the sum of ``Order.sizes``.
    - ``StockUsage.used_sizes`` is always normal + defective per size.
    - ``StockUsage.id`` is derived from (order id, stock entry id), so the
      same attribution always carries the same id.
"""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from datetime import date
from enum import Enum
from uuid import NAMESPACE_URL, uuid5

from textile_kernel.domain.sizes import Sizes

_USAGE_NAMESPACE = uuid5(NAMESPACE_URL, "textile-kernel/stock-usage")


class ProductionStatus(str, Enum):
    """Order production lifecycle.

    Only PENDING_CUT (on creation) and CANCELLED are ever set directly;
    the other transitions are derived by the status resolver.
    """

    PENDING_CUT = "pending-cut"
    IN_PROGRESS = "in-progress"
    COMPLETED = "completed"
    CANCELLED = "cancelled"


@dataclass(frozen=True, slots=True)
class Order:
    """
    One producer's share of a customer order.

    All rows sharing ``group_id`` describe the same logical order and share
    product and color; they differ in ``producer`` and ``sizes``.
    ``producer`` None means the row is not yet assigned to a workshop.
    """

    id: str
    group_id: str
    created_date: date
    product_name: str
    color: str
    sizes: Sizes
    status: ProductionStatus = ProductionStatus.PENDING_CUT
    producer: str | None = None
    completion_date: date | None = None

    @property
    def total_quantity(self) -> int:
        return self.sizes.total

    @property
    def stock_key(self) -> tuple[str, str]:
        return (self.product_name, self.color)

    def with_status(
        self, status: ProductionStatus, completion_date: date | None
    ) -> Order:
        return replace(self, status=status, completion_date=completion_date)


@dataclass(frozen=True, slots=True)
class CuttingReport:
    """Cut quantities for an order group. Unconfirmed reports count as zero."""

    id: str
    date: date
    group_id: str
    product_name: str
    color: str
    sizes: Sizes
    is_confirmed: bool = False


@dataclass(frozen=True, slots=True)
class StockEntry:
    """A receipt of produced goods, split into normal and defective units."""

    id: str
    date: date
    product_name: str
    color: str
    normal_sizes: Sizes = field(default_factory=Sizes)
    defective_sizes: Sizes = field(default_factory=Sizes)
    producer: str | None = None
    defect_reason: str | None = None
    is_archived: bool = False

    @property
    def stock_key(self) -> tuple[str, str]:
        return (self.product_name, self.color)

    @property
    def total_quantity(self) -> int:
        return self.normal_sizes.total + self.defective_sizes.total


def usage_id_for(order_id: str, stock_entry_id: str) -> str:
    """Deterministic id of the usage record for an (order, stock entry) pair."""
    return str(uuid5(_USAGE_NAMESPACE, f"{order_id}|{stock_entry_id}"))


@dataclass(frozen=True, slots=True)
class StockUsage:
    """
    Derived attribution of a stock entry's units to an order.

    Never user-created and never persisted; recomputed from scratch by the
    allocation engine on every snapshot.
    """

    id: str
    order_id: str
    stock_entry_id: str
    used_normal_sizes: Sizes
    used_defective_sizes: Sizes

    @property
    def used_sizes(self) -> Sizes:
        return self.used_normal_sizes + self.used_defective_sizes

    @property
    def total_used(self) -> int:
        return self.used_sizes.total

    @property
    def total_defective(self) -> int:
        return self.used_defective_sizes.total


@dataclass(frozen=True, slots=True)
class Producer:
    """Workshop that manufactures order quantities."""

    name: str
    id: int | None = None
    contact_person: str | None = None
    phone: str | None = None
    address: str | None = None


@dataclass(frozen=True, slots=True)
class Color:
    name: str
    id: int | None = None


@dataclass(frozen=True, slots=True)
class DefectReason:
    name: str
    id: int | None = None


# ---------------------------------------------------------------------------
# Editable items
# ---------------------------------------------------------------------------


class EditableKind(str, Enum):
    """What an edit form is working on."""

    ORDER = "order"
    STOCK_ENTRY = "stock_entry"
    CUTTING_REPORTS = "cutting_reports"


@dataclass(frozen=True, slots=True)
class EditableItem:
    """
    A record (or set of records) opened for editing.

    The kind tag is explicit; consumers dispatch on it with ``match``
    instead of guessing the payload type from its attributes.
    Cutting reports are always edited as the whole set of one group.
    """

    kind: EditableKind
    payload: Order | StockEntry | tuple[CuttingReport, ...]

    @classmethod
    def for_order(cls, order: Order) -> EditableItem:
        return cls(EditableKind.ORDER, order)

    @classmethod
    def for_stock_entry(cls, entry: StockEntry) -> EditableItem:
        return cls(EditableKind.STOCK_ENTRY, entry)

    @classmethod
    def for_cutting_reports(cls, reports: tuple[CuttingReport, ...] | list[CuttingReport]) -> EditableItem:
        return cls(EditableKind.CUTTING_REPORTS, tuple(reports))

    @property
    def group_id(self) -> str | None:
        """Order group the item belongs to (stock entries belong to none)."""
        match self.kind:
            case EditableKind.ORDER:
                return self.payload.group_id
            case EditableKind.CUTTING_REPORTS:
                return self.payload[0].group_id if self.payload else None
            case EditableKind.STOCK_ENTRY:
                return None
