"""Kernel write services. Each flushes only; the caller owns the transaction."""

from textile_kernel.services.base import BaseService
from textile_kernel.services.cutting_report_service import CuttingReportService
from textile_kernel.services.order_service import OrderService
from textile_kernel.services.reference_data_service import ReferenceDataService
from textile_kernel.services.stock_entry_service import StockEntryService

__all__ = [
    "BaseService",
    "CuttingReportService",
    "OrderService",
    "ReferenceDataService",
    "StockEntryService",
]
