"""
Service layer for stock receipts.

Stock entries are added in batches from the entry form, edited in place,
and archived or restored instead of deleted.  Archiving takes an entry out
of allocation on the next recomputation without losing its history.
"""

from __future__ import annotations

from collections.abc import Sequence
from uuid import uuid4

from textile_kernel.domain.entities import StockEntry
from textile_kernel.domain.validation import StockEntryDraft
from textile_kernel.exceptions import StockEntryNotFoundError
from textile_kernel.logging_config import LogContext, get_logger
from textile_kernel.models.stock_entry import StockEntryRecord
from textile_kernel.services.base import BaseService

logger = get_logger("services.stock_entries")


class StockEntryService(BaseService[StockEntryRecord]):
    """Write access to stock entries. Returns domain ``StockEntry`` records."""

    def _get(self, stock_entry_id: str) -> StockEntryRecord:
        record = self.session.get(StockEntryRecord, stock_entry_id)
        if record is None:
            raise StockEntryNotFoundError(stock_entry_id)
        return record

    def get(self, stock_entry_id: str) -> StockEntry:
        return self._get(stock_entry_id).to_domain()

    def add_entries(self, drafts: Sequence[StockEntryDraft]) -> tuple[StockEntry, ...]:
        """Insert one entry per draft with a fresh id, in draft order."""
        next_row = self._next_row_order(StockEntryRecord)
        created: list[StockEntry] = []
        for offset, draft in enumerate(drafts):
            entry = StockEntry(
                id=str(uuid4()),
                date=draft.date,
                product_name=draft.product_name,
                color=draft.color,
                normal_sizes=draft.normal_sizes,
                defective_sizes=draft.defective_sizes,
                producer=draft.producer,
                defect_reason=draft.defect_reason,
            )
            record = StockEntryRecord.from_domain(entry)
            record.row_order = next_row + offset
            self.session.add(record)
            created.append(entry)
        self.session.flush()
        logger.info("stock_entries_added", extra={
            "entry_count": len(created),
            "normal_total": sum(e.normal_sizes.total for e in created),
            "defective_total": sum(e.defective_sizes.total for e in created),
        })
        return tuple(created)

    def update_entry(self, stock_entry_id: str, draft: StockEntryDraft) -> StockEntry:
        """Overwrite an entry's data.  The archived flag is left as is."""
        record = self._get(stock_entry_id)
        record.date = draft.date
        record.product_name = draft.product_name
        record.color = draft.color
        record.normal_sizes = draft.normal_sizes
        record.defective_sizes = draft.defective_sizes
        record.producer = draft.producer
        record.defect_reason = draft.defect_reason
        self.session.flush()
        with LogContext.bind(stock_entry_id=stock_entry_id):
            logger.info("stock_entry_updated")
        return record.to_domain()

    def archive(self, stock_entry_id: str) -> StockEntry:
        return self._set_archived(stock_entry_id, True)

    def restore(self, stock_entry_id: str) -> StockEntry:
        return self._set_archived(stock_entry_id, False)

    def _set_archived(self, stock_entry_id: str, archived: bool) -> StockEntry:
        record = self._get(stock_entry_id)
        record.is_archived = archived
        self.session.flush()
        with LogContext.bind(stock_entry_id=stock_entry_id):
            logger.info("stock_entry_archived" if archived else "stock_entry_restored")
        return record.to_domain()
