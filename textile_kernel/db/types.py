"""
Module: textile_kernel.db.types
Responsibility: Custom column types.  ``SizesJSON`` persists the per-size
    quantity vector as a JSON object in a text column, the way the
    production records have always been stored.
Architecture position: Kernel > DB.  May import textile_kernel.domain.sizes
    (pure value object).  MUST NOT import models/, services/ or selectors/.

Failure modes:
    - InvalidSizesError when a stored value holds an unknown bucket or a
      negative quantity.
"""

import json

from sqlalchemy import Text
from sqlalchemy.types import TypeDecorator

from textile_kernel.domain.sizes import Sizes


class SizesJSON(TypeDecorator):
    """
    ``Sizes`` stored as a JSON text column.

    Guarantees:
        - process_bind_param: Sizes (or a plain mapping) -> JSON text with
          every bucket present, in canonical order.
        - process_result_value: JSON text -> Sizes; missing buckets are 0.
        - cache_ok=True enables SQLAlchemy statement caching.
    """

    impl = Text
    cache_ok = True

    def process_bind_param(self, value, dialect):
        if value is None:
            return None
        if not isinstance(value, Sizes):
            value = Sizes.of(value)
        return json.dumps(value.to_dict())

    def process_result_value(self, value, dialect):
        if value is None:
            return None
        return Sizes.of(json.loads(value))
