"""
Module: textile_kernel.selectors.base
Responsibility: Abstract base class for all read-only query selectors.
    Selectors are the read side of the kernel: they turn stored rows into
    frozen domain records without any mutation capability.
Architecture position: Kernel > Selectors.  May import from db/, models/
    and domain/.  MUST NOT import from services/ or outer layers.

Invariants enforced:
    - Read-only access: Selectors accept a Session from the caller but MUST NOT
      call session.add(), session.delete(), session.commit(), or session.flush().
    - Selectors return domain records, NOT ORM instances.
    - Selectors do NOT create or manage their own sessions.
"""

from abc import ABC
from typing import Generic, TypeVar

from sqlalchemy.orm import Session

from textile_kernel.db.base import Base

ModelType = TypeVar("ModelType", bound=Base)


class BaseSelector(ABC, Generic[ModelType]):
    """
    Abstract base class for all selectors.

    Contract:
        Selectors accept a Session from the caller, perform read-only queries,
        and return domain records or computed results.
    """

    def __init__(self, session: Session):
        self.session = session
