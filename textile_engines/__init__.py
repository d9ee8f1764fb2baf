"""
Module: textile_engines
Responsibility:
    Package entrypoint that re-exports the public symbols of the pure
    calculation engines.  This is the import surface for higher layers
    (textile_services, scripts).

Architecture position:
    Engines -- pure calculation layer, zero I/O.
    May only import textile_kernel.domain, textile_kernel.logging_config
    and sibling engine modules.  MUST NOT import textile_services or the
    persistence layer.

Invariants enforced:
    - Purity: engines never read the wall clock.  The status resolver takes
      an injected Clock; everything else is a function of its arguments.
    - Determinism: identical inputs always produce identical outputs.
    - No domain exceptions: inconsistent data is clamped, zero divisors
      give 0 and missing lookups are skipped.

Audit relevance:
    Engine entrypoints are traced via ``@traced_engine`` (see
    ``textile_engines.tracer``), emitting TEXTILE_ENGINE_TRACE records with
    engine name, version, input fingerprint and duration.

Usage:
    from textile_engines import StockAllocationEngine, StatusResolver
    from textile_engines import reassign_parts, defect_rate
"""

from textile_kernel.logging_config import get_logger

logger = get_logger("engines")

from textile_engines.allocation import (
    AllocationResult,
    EntryConsumption,
    OverflowRecord,
    StockAllocationEngine,
    calculate_stock_usage,
)
from textile_engines.reassignment import (
    PartMove,
    ReassignmentResult,
    reassign_parts,
    resize_group,
)
from textile_engines.reporting import (
    CompletionProgress,
    DashboardSummary,
    DefectRateReport,
    DefectReasonTotal,
    DefectShare,
    ProducerPerformanceStat,
    SizeProgressRow,
    UsageDetail,
    completion_progress,
    dashboard_summary,
    defect_breakdown,
    defect_rate,
    group_status,
    order_size_progress,
    producer_performance,
)
from textile_engines.status import GroupProgress, StatusResolver, StatusTransition
from textile_engines.tracer import compute_input_fingerprint, traced_engine

__all__ = [
    # allocation
    "AllocationResult",
    "EntryConsumption",
    "OverflowRecord",
    "StockAllocationEngine",
    "calculate_stock_usage",
    # status
    "GroupProgress",
    "StatusResolver",
    "StatusTransition",
    # reporting
    "CompletionProgress",
    "DashboardSummary",
    "DefectRateReport",
    "DefectReasonTotal",
    "DefectShare",
    "ProducerPerformanceStat",
    "SizeProgressRow",
    "UsageDetail",
    "completion_progress",
    "dashboard_summary",
    "defect_breakdown",
    "defect_rate",
    "group_status",
    "order_size_progress",
    "producer_performance",
    # reassignment
    "PartMove",
    "ReassignmentResult",
    "reassign_parts",
    "resize_group",
    # tracer
    "compute_input_fingerprint",
    "traced_engine",
]
