"""
BaseService -- abstract base for all kernel write services.

Responsibility:
    Provides the common constructor and session-handling contract for
    every write service in the kernel.  All concrete services receive a
    SQLAlchemy ``Session`` that they use via ``session.flush()`` -- never
    ``session.commit()``.

Architecture position:
    Kernel > Services -- imperative shell around the pure domain.

Invariants enforced:
    - Transaction boundaries: services flush within the caller's
      transaction and never commit or rollback themselves.  The caller
      (``session_scope()``, a workflow, or the test harness) owns
      commit/rollback, so multi-row writes such as replacing an order
      group are all-or-nothing.
"""

from abc import ABC
from typing import Generic, TypeVar

from sqlalchemy import func, select
from sqlalchemy.orm import Session

from textile_kernel.db.base import Base

ModelType = TypeVar("ModelType", bound=Base)


class BaseService(ABC, Generic[ModelType]):
    """
    Abstract base class for all kernel services.

    Contract:
        Accepts a SQLAlchemy ``Session`` from the caller and uses
        ``session.flush()`` to persist changes within the active
        transaction.

    Non-goals:
        - Does NOT manage transaction lifecycle (commit/rollback).
        - Does NOT provide read models -- those belong in
          ``textile_kernel/selectors/``.
    """

    def __init__(self, session: Session):
        self.session = session

    def _next_row_order(self, model: type[Base]) -> int:
        """Next value of a model's ``row_order`` insertion sequence."""
        current = self.session.scalar(select(func.max(model.row_order)))
        return (current or 0) + 1
