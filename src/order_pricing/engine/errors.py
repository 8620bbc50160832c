"""
Error taxonomy for the pricing engine.

Every error carries a stable ``code`` (used by the API layer and by form
validation messages) and a human-readable ``message``.
"""
from typing import Optional


class PricingError(ValueError):
    """Base class for all caller-visible pricing failures."""

    code = "PricingError"

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message

    def to_dict(self) -> dict:
        return {"code": self.code, "message": self.message}


class InvalidAreaInput(PricingError):
    """Area is missing, non-numeric, or not a positive integer."""

    code = "InvalidAreaInput"

    def __init__(self, area, bundle_id: Optional[str] = None):
        self.area = area
        self.bundle_id = bundle_id
        target = f" for bundle {bundle_id}" if bundle_id else ""
        super().__init__(f"Area must be a positive whole number{target}, got {area!r}")


class NoPricingTiersConfigured(PricingError):
    """A tiered bundle has an empty tier list."""

    code = "NoPricingTiersConfigured"

    def __init__(self, bundle_id: str):
        self.bundle_id = bundle_id
        super().__init__(f"No pricing tiers configured for bundle {bundle_id}")


class InvalidPercentage(PricingError):
    """Split percentage is missing or outside [0, 100]."""

    code = "InvalidPercentage"

    def __init__(self, percentage):
        self.percentage = percentage
        super().__init__(f"Split percentage must be between 0 and 100, got {percentage!r}")


class InvalidInvoiceTotal(PricingError):
    """Invoice total is missing, negative, or not a whole number of cents."""

    code = "InvalidInvoiceTotal"

    def __init__(self, total, reason: str = "must be a non-negative whole number of cents"):
        self.total = total
        super().__init__(f"Invoice total {reason}, got {total!r}")


class UnassignedLineItem(PricingError):
    """Line-item split strategy does not assign every line item."""

    code = "UnassignedLineItem"

    def __init__(self, line_item_ids: list[str]):
        self.line_item_ids = list(line_item_ids)
        super().__init__(
            "Every line item must be assigned to primary or secondary; "
            f"unassigned: {', '.join(self.line_item_ids)}"
        )


class InvalidSplitStrategy(PricingError):
    """Unknown split strategy or assignment value."""

    code = "InvalidSplitStrategy"

    def __init__(self, value, what: str = "split strategy"):
        self.value = value
        super().__init__(f"Unknown {what}: {value!r}")


class InvalidTaxRate(PricingError):
    code = "InvalidTaxRate"

    def __init__(self, rate):
        self.rate = rate
        super().__init__(f"Tax rate must be a non-negative percentage, got {rate!r}")


class CatalogError(PricingError):
    """A catalog record failed validation at the boundary."""

    code = "CatalogError"

    def __init__(self, record_id: Optional[str], problems: list[str]):
        self.record_id = record_id
        self.problems = list(problems)
        label = record_id or "<unknown>"
        super().__init__(f"Invalid catalog record {label}: " + "; ".join(self.problems))
