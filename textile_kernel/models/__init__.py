"""ORM models. Importing this package registers every table on Base.metadata."""

from textile_kernel.models.cutting_report import CuttingReportRecord
from textile_kernel.models.order import OrderRecord
from textile_kernel.models.reference import ColorRecord, DefectReasonRecord, ProducerRecord
from textile_kernel.models.stock_entry import StockEntryRecord

__all__ = [
    "ColorRecord",
    "CuttingReportRecord",
    "DefectReasonRecord",
    "OrderRecord",
    "ProducerRecord",
    "StockEntryRecord",
]
