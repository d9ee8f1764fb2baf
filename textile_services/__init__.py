"""
textile_services -- orchestration over the engines and the kernel.

    ProductionView       derived state (allocation, status, reports) per snapshot
    StatusSyncService    explicit write-back of derived order status
    ProductionWorkflow   reassignment, group resize and edit dispatch
"""

from textile_services.production_view import ProductionState, ProductionView
from textile_services.status_sync import StatusSyncService
from textile_services.workflow import ProductionWorkflow

__all__ = [
    "ProductionState",
    "ProductionView",
    "ProductionWorkflow",
    "StatusSyncService",
]
