"""
Service layer for lookup data: colors, producers and defect reasons.

Responsibility:
    Add, rename and delete lookup rows, keeping the production records
    that refer to them by name consistent.

Invariants enforced:
    - Names are stored trimmed and upper-case, and are unique per kind.
    - Renaming a producer rewrites ``producer`` on orders and stock
      entries; renaming a defect reason rewrites ``defect_reason`` on
      stock entries.
    - Deleting a producer unassigns its orders; deleting a defect reason
      clears it from stock entries.  Colors are not cascaded: group ids
      embed the color they were created with.

Failure modes:
    - MissingFieldError on an empty name.
    - DuplicateNameError when the normalized name already exists.
    - ReferenceNotFoundError on an unknown id.
"""

from __future__ import annotations

from sqlalchemy import select, update

from textile_kernel.db.base import Base
from textile_kernel.domain.entities import Color, DefectReason, Producer
from textile_kernel.domain.validation import normalize_name
from textile_kernel.exceptions import DuplicateNameError, ReferenceNotFoundError
from textile_kernel.logging_config import get_logger
from textile_kernel.models.order import OrderRecord
from textile_kernel.models.reference import ColorRecord, DefectReasonRecord, ProducerRecord
from textile_kernel.models.stock_entry import StockEntryRecord
from textile_kernel.services.base import BaseService

logger = get_logger("services.reference_data")

_KIND_COLOR = "color"
_KIND_PRODUCER = "producer"
_KIND_DEFECT_REASON = "defect_reason"


class ReferenceDataService(BaseService[Base]):
    """CRUD for the three lookup tables."""

    # -- helpers ---------------------------------------------------------

    def _get(self, model: type, kind: str, reference_id: int):
        record = self.session.get(model, reference_id)
        if record is None:
            raise ReferenceNotFoundError(kind, reference_id)
        return record

    def _ensure_unique(self, model: type, kind: str, name: str, exclude_id: int | None = None) -> None:
        stmt = select(model.id).where(model.name == name)
        if exclude_id is not None:
            stmt = stmt.where(model.id != exclude_id)
        if self.session.scalar(stmt) is not None:
            raise DuplicateNameError(kind, name)

    def _add(self, model: type, kind: str, name: str, **fields):
        normalized = normalize_name(name)
        self._ensure_unique(model, kind, normalized)
        record = model(name=normalized, **fields)
        self.session.add(record)
        self.session.flush()
        logger.info("reference_added", extra={"kind": kind, "reference_name": normalized})
        return record

    def _rename(self, record, model: type, kind: str, name: str) -> tuple[str, str]:
        """Rename ``record``; returns (old, new) names."""
        normalized = normalize_name(name)
        self._ensure_unique(model, kind, normalized, exclude_id=record.id)
        old = record.name
        record.name = normalized
        return old, normalized

    # -- colors ----------------------------------------------------------

    def add_color(self, name: str) -> Color:
        return self._add(ColorRecord, _KIND_COLOR, name).to_domain()

    def update_color(self, color_id: int, name: str) -> Color:
        record = self._get(ColorRecord, _KIND_COLOR, color_id)
        self._rename(record, ColorRecord, _KIND_COLOR, name)
        self.session.flush()
        return record.to_domain()

    def delete_color(self, color_id: int) -> None:
        record = self._get(ColorRecord, _KIND_COLOR, color_id)
        self.session.delete(record)
        self.session.flush()
        logger.info("reference_deleted", extra={"kind": _KIND_COLOR, "reference_name": record.name})

    # -- producers -------------------------------------------------------

    def add_producer(
        self,
        name: str,
        contact_person: str | None = None,
        phone: str | None = None,
        address: str | None = None,
    ) -> Producer:
        return self._add(
            ProducerRecord,
            _KIND_PRODUCER,
            name,
            contact_person=contact_person,
            phone=phone,
            address=address,
        ).to_domain()

    def update_producer(
        self,
        producer_id: int,
        name: str | None = None,
        contact_person: str | None = None,
        phone: str | None = None,
        address: str | None = None,
    ) -> Producer:
        """Update the given fields; a rename is cascaded to orders and stock entries."""
        record = self._get(ProducerRecord, _KIND_PRODUCER, producer_id)
        if name is not None:
            old, new = self._rename(record, ProducerRecord, _KIND_PRODUCER, name)
            if old != new:
                self.session.execute(
                    update(OrderRecord).where(OrderRecord.producer == old).values(producer=new)
                )
                self.session.execute(
                    update(StockEntryRecord)
                    .where(StockEntryRecord.producer == old)
                    .values(producer=new)
                )
                logger.info("producer_renamed", extra={"old_name": old, "new_name": new})
        if contact_person is not None:
            record.contact_person = contact_person
        if phone is not None:
            record.phone = phone
        if address is not None:
            record.address = address
        self.session.flush()
        return record.to_domain()

    def delete_producer(self, producer_id: int) -> int:
        """
        Delete a producer and unassign its orders.

        Returns:
            Number of order rows unassigned.
        """
        record = self._get(ProducerRecord, _KIND_PRODUCER, producer_id)
        result = self.session.execute(
            update(OrderRecord).where(OrderRecord.producer == record.name).values(producer=None)
        )
        self.session.delete(record)
        self.session.flush()
        logger.info("reference_deleted", extra={
            "kind": _KIND_PRODUCER,
            "reference_name": record.name,
            "unassigned_count": result.rowcount,
        })
        return result.rowcount

    # -- defect reasons --------------------------------------------------

    def add_defect_reason(self, name: str) -> DefectReason:
        return self._add(DefectReasonRecord, _KIND_DEFECT_REASON, name).to_domain()

    def update_defect_reason(self, reason_id: int, name: str) -> DefectReason:
        record = self._get(DefectReasonRecord, _KIND_DEFECT_REASON, reason_id)
        old, new = self._rename(record, DefectReasonRecord, _KIND_DEFECT_REASON, name)
        if old != new:
            self.session.execute(
                update(StockEntryRecord)
                .where(StockEntryRecord.defect_reason == old)
                .values(defect_reason=new)
            )
        self.session.flush()
        return record.to_domain()

    def delete_defect_reason(self, reason_id: int) -> int:
        """
        Delete a defect reason and clear it from stock entries.

        Returns:
            Number of stock entries cleared.
        """
        record = self._get(DefectReasonRecord, _KIND_DEFECT_REASON, reason_id)
        result = self.session.execute(
            update(StockEntryRecord)
            .where(StockEntryRecord.defect_reason == record.name)
            .values(defect_reason=None)
        )
        self.session.delete(record)
        self.session.flush()
        logger.info("reference_deleted", extra={
            "kind": _KIND_DEFECT_REASON,
            "reference_name": record.name,
            "cleared_count": result.rowcount,
        })
        return result.rowcount
