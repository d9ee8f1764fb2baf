"""
Pure domain layer of the textile kernel: value objects, entities,
identifiers, validation, snapshot and clock. Zero I/O.
"""

from textile_kernel.domain.clock import Clock, DeterministicClock, SystemClock
from textile_kernel.domain.entities import (
    Color,
    CuttingReport,
    DefectReason,
    EditableItem,
    EditableKind,
    Order,
    Producer,
    ProductionStatus,
    StockEntry,
    StockUsage,
    usage_id_for,
)
from textile_kernel.domain.identifiers import (
    UNASSIGNED,
    make_group_id,
    make_order_id,
    producer_or_none,
    slugify,
)
from textile_kernel.domain.sizes import SIZE_ORDER, Size, Sizes, parse_size, sum_sizes
from textile_kernel.domain.snapshot import ProductionSnapshot

__all__ = [
    "Clock",
    "Color",
    "CuttingReport",
    "DefectReason",
    "DeterministicClock",
    "EditableItem",
    "EditableKind",
    "Order",
    "Producer",
    "ProductionSnapshot",
    "ProductionStatus",
    "SIZE_ORDER",
    "Size",
    "Sizes",
    "StockEntry",
    "StockUsage",
    "SystemClock",
    "UNASSIGNED",
    "make_group_id",
    "make_order_id",
    "parse_size",
    "producer_or_none",
    "slugify",
    "sum_sizes",
    "usage_id_for",
]
