"""
Typed exception hierarchy for the textile kernel.

Every error raised at a data-entry or persistence boundary has its own class
and a machine-readable ``code`` attribute, so callers catch by type and
report by code instead of parsing messages.

The calculation engines (``textile_engines``) never raise any of these.
Inconsistent production data is clamped there, not rejected; the exceptions
below guard the edges where data enters the system or is looked up by id.

    TextileKernelError (base)
    |
    +-- ValidationError
    |   +-- MissingFieldError
    |   +-- InvalidDateError
    |   +-- InvalidSizesError
    |   +-- EmptyQuantityError
    |   +-- DefectReasonRequiredError
    |
    +-- NotFoundError
    |   +-- OrderNotFoundError
    |   +-- OrderGroupNotFoundError
    |   +-- StockEntryNotFoundError
    |   +-- ReferenceNotFoundError
    |
    +-- DuplicateNameError
    |
    +-- ConfigError

Error codes:

    Category    | Code                      | When raised
    ------------|---------------------------|--------------------------------------
    Validation  | MISSING_FIELD             | Required text field empty
                | INVALID_DATE              | Date not in ISO format
                | INVALID_SIZES             | Unknown size bucket or negative qty
                | EMPTY_QUANTITY            | Order/stock entry totals zero
                | DEFECT_REASON_REQUIRED    | Defective qty without reason
    Lookup      | ORDER_NOT_FOUND           | Order id unknown
                | ORDER_GROUP_NOT_FOUND     | Group id has no orders
                | STOCK_ENTRY_NOT_FOUND     | Stock entry id unknown
                | REFERENCE_NOT_FOUND       | Color/producer/reason id unknown
    Reference   | DUPLICATE_NAME            | Unique name already taken
    Config      | CONFIG_ERROR              | Bad configuration file
"""


class TextileKernelError(Exception):
    """
    Base exception for all textile kernel errors.

    All subclasses carry a ``code`` class attribute.
    """

    code: str = "TEXTILE_KERNEL_ERROR"


# Validation errors


class ValidationError(TextileKernelError):
    """Base exception for rejected data entry."""

    code: str = "VALIDATION_ERROR"


class MissingFieldError(ValidationError):
    """A required text field is empty."""

    code: str = "MISSING_FIELD"

    def __init__(self, field_name: str):
        self.field_name = field_name
        super().__init__(f"Field is required: {field_name}")


class InvalidDateError(ValidationError):
    """A date value could not be parsed."""

    code: str = "INVALID_DATE"

    def __init__(self, value: object):
        self.value = str(value)
        super().__init__(f"Invalid date (expected YYYY-MM-DD): {value!r}")


class InvalidSizesError(ValidationError):
    """A size mapping has an unknown bucket or a negative quantity."""

    code: str = "INVALID_SIZES"

    def __init__(self, size: str, reason: str):
        self.size = size
        self.reason = reason
        super().__init__(f"Invalid size {size!r}: {reason}")


class EmptyQuantityError(ValidationError):
    """An order or stock entry carries no quantity at all."""

    code: str = "EMPTY_QUANTITY"

    def __init__(self, subject: str):
        self.subject = subject
        super().__init__(f"Total quantity must be greater than zero: {subject}")


class DefectReasonRequiredError(ValidationError):
    """Defective quantities were entered without a defect reason."""

    code: str = "DEFECT_REASON_REQUIRED"

    def __init__(self, defective_total: int):
        self.defective_total = defective_total
        super().__init__(
            f"Defect reason required for {defective_total} defective unit(s)"
        )


# Lookup errors


class NotFoundError(TextileKernelError):
    """Base exception for unknown identifiers."""

    code: str = "NOT_FOUND"


class OrderNotFoundError(NotFoundError):
    code: str = "ORDER_NOT_FOUND"

    def __init__(self, order_id: str):
        self.order_id = order_id
        super().__init__(f"Order not found: {order_id}")


class OrderGroupNotFoundError(NotFoundError):
    code: str = "ORDER_GROUP_NOT_FOUND"

    def __init__(self, group_id: str):
        self.group_id = group_id
        super().__init__(f"Order group not found: {group_id}")


class StockEntryNotFoundError(NotFoundError):
    code: str = "STOCK_ENTRY_NOT_FOUND"

    def __init__(self, stock_entry_id: str):
        self.stock_entry_id = stock_entry_id
        super().__init__(f"Stock entry not found: {stock_entry_id}")


class ReferenceNotFoundError(NotFoundError):
    """A color, producer or defect reason id is unknown."""

    code: str = "REFERENCE_NOT_FOUND"

    def __init__(self, kind: str, reference_id: int):
        self.kind = kind
        self.reference_id = reference_id
        super().__init__(f"{kind} not found: {reference_id}")


# Reference data


class DuplicateNameError(TextileKernelError):
    """A unique lookup name (color, producer, defect reason) already exists."""

    code: str = "DUPLICATE_NAME"

    def __init__(self, kind: str, name: str):
        self.kind = kind
        self.name = name
        super().__init__(f"{kind} already exists: {name}")


# Configuration


class ConfigError(TextileKernelError):
    """Configuration file is unreadable or has invalid content."""

    code: str = "CONFIG_ERROR"

    def __init__(self, message: str, source: str | None = None):
        self.source = source
        super().__init__(message if source is None else f"{source}: {message}")
