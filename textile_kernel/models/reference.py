"""
Module: textile_kernel.models.reference
Responsibility: ORM persistence for the lookup tables: producers
    (workshops), colors and defect reasons.
Architecture position: Kernel > Models.

Invariants enforced:
    - Names are unique per table (uq_* constraints).  Names are stored
      upper-case by ReferenceDataService; the constraint is the backstop.
    - Orders and stock entries refer to these rows by name, not by id, so a
      rename is cascaded by the service layer.
"""

from sqlalchemy import UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column

from textile_kernel.db.base import Base
from textile_kernel.domain.entities import Color, DefectReason, Producer


class ProducerRecord(Base):
    __tablename__ = "producers"

    __table_args__ = (UniqueConstraint("name", name="uq_producer_name"),)

    id: Mapped[int] = mapped_column(primary_key=True, autoincrement=True)
    name: Mapped[str] = mapped_column(nullable=False)
    contact_person: Mapped[str | None] = mapped_column(nullable=True)
    phone: Mapped[str | None] = mapped_column(nullable=True)
    address: Mapped[str | None] = mapped_column(nullable=True)

    def to_domain(self) -> Producer:
        return Producer(
            id=self.id,
            name=self.name,
            contact_person=self.contact_person,
            phone=self.phone,
            address=self.address,
        )


class ColorRecord(Base):
    __tablename__ = "colors"

    __table_args__ = (UniqueConstraint("name", name="uq_color_name"),)

    id: Mapped[int] = mapped_column(primary_key=True, autoincrement=True)
    name: Mapped[str] = mapped_column(nullable=False)

    def to_domain(self) -> Color:
        return Color(id=self.id, name=self.name)


class DefectReasonRecord(Base):
    __tablename__ = "defect_reasons"

    __table_args__ = (UniqueConstraint("name", name="uq_defect_reason_name"),)

    id: Mapped[int] = mapped_column(primary_key=True, autoincrement=True)
    name: Mapped[str] = mapped_column(nullable=False)

    def to_domain(self) -> DefectReason:
        return DefectReason(id=self.id, name=self.name)
