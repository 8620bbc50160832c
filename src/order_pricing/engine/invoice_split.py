"""
Invoice Split Calculator - partitions an invoice between agent and brokerage.

Strategies:
- none: everything to the agent (primary)
- percentage: brokerage (secondary) gets ``total * p / 100`` rounded half-up
- line_item: brokerage gets the sum of the line items assigned to it

The agent amount is always ``total - secondary``; it is never rounded on
its own, so the two amounts reconstruct the total exactly.
"""
from dataclasses import replace
from decimal import Decimal
from typing import Mapping, Optional, Sequence

from .errors import (
    InvalidInvoiceTotal, InvalidPercentage, InvalidSplitStrategy,
    UnassignedLineItem,
)
from .models import (
    PRIMARY, SECONDARY,
    SPLIT_LINE_ITEM, SPLIT_NONE, SPLIT_PERCENTAGE, SPLIT_STRATEGIES,
    InvoiceLineItem, InvoiceSplitResult, SplitDetail,
)
from .money import percent_of_cents, round_half_up, to_decimal


# Names used by invoice screens and older stored splits
STRATEGY_ALIASES = {
    "single": SPLIT_NONE,
    "split": SPLIT_PERCENTAGE,
    "dual": SPLIT_LINE_ITEM,
}

ASSIGNMENT_ALIASES = {
    PRIMARY: PRIMARY,
    SECONDARY: SECONDARY,
    "agent": PRIMARY,
    "brokerage": SECONDARY,
}


def parse_strategy(strategy: str) -> str:
    """Normalize a strategy name, raising InvalidSplitStrategy if unknown."""
    key = str(strategy).strip().lower()
    key = STRATEGY_ALIASES.get(key, key)
    if key not in SPLIT_STRATEGIES:
        raise InvalidSplitStrategy(strategy)
    return key


def parse_assignment(value: str) -> str:
    key = ASSIGNMENT_ALIASES.get(str(value).strip().lower())
    if key is None:
        raise InvalidSplitStrategy(value, what="line item assignment")
    return key


def _whole_cents(value) -> Optional[int]:
    """Non-negative whole cents as int, or None if ``value`` is not one."""
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, int):
        cents = value
    elif isinstance(value, (float, Decimal)) and to_decimal(value).is_finite() \
            and to_decimal(value) == to_decimal(value).to_integral_value():
        cents = int(value)
    else:
        return None
    return cents if cents >= 0 else None


def validate_total(total) -> int:
    """Return ``total`` as a non-negative int of cents."""
    value = _whole_cents(total)
    if value is None:
        raise InvalidInvoiceTotal(total)
    return value


def validate_percentage(percentage) -> Decimal:
    if percentage is None or isinstance(percentage, bool):
        raise InvalidPercentage(percentage)
    try:
        value = to_decimal(percentage)
    except ArithmeticError:
        raise InvalidPercentage(percentage)
    if not value.is_finite() or value < 0 or value > 100:
        raise InvalidPercentage(percentage)
    return value


def _coerce_line_items(line_items) -> list[InvoiceLineItem]:
    items = []
    for position, item in enumerate(line_items or []):
        if not isinstance(item, InvoiceLineItem):
            item_id = item.get("line_item_id", item.get("id"))
            if item_id is None or str(item_id).strip() == "":
                raise InvalidInvoiceTotal(
                    item.get("total_cents", item.get("totalCents")),
                    reason=f"of line item #{position + 1} has no line_item_id",
                )
            item = InvoiceLineItem(
                line_item_id=str(item_id),
                description=item.get("description", ""),
                total_cents=item.get("total_cents", item.get("totalCents")),
            )
        cents = _whole_cents(item.total_cents)
        if cents is None:
            raise InvalidInvoiceTotal(
                item.total_cents,
                reason=f"of line item {item.line_item_id} must be a non-negative whole number of cents",
            )
        if not isinstance(item.total_cents, int):
            item = replace(item, total_cents=cents)
        items.append(item)
    return items


def calculate_split(
    total_cents: Optional[int],
    strategy: str,
    percentage_to_secondary=None,
    line_items: Optional[Sequence] = None,
    line_item_assignments: Optional[Mapping[str, str]] = None,
) -> InvoiceSplitResult:
    """
    Split an invoice total between agent and brokerage.

    Args:
        total_cents: Invoice total; derived from ``line_items`` when None
        strategy: "none", "percentage" or "line_item"
        percentage_to_secondary: Brokerage share in [0, 100] (percentage)
        line_items: InvoiceLineItem objects or dicts with id/total_cents
        line_item_assignments: line_item_id -> "primary"/"secondary" (line_item)

    Returns:
        InvoiceSplitResult where agent + secondary == total
    """
    strategy = parse_strategy(strategy)
    items = _coerce_line_items(line_items)

    if total_cents is None and items:
        total = sum(item.total_cents for item in items)
    else:
        total = validate_total(total_cents)

    percentage = None
    details = []

    if strategy == SPLIT_NONE:
        secondary = 0
        details = [
            SplitDetail(item.line_item_id, item.description, item.total_cents, PRIMARY)
            for item in items
        ]

    elif strategy == SPLIT_PERCENTAGE:
        percentage = validate_percentage(percentage_to_secondary)
        secondary = percent_of_cents(total, percentage)
        # The primary invoice keeps every line; only the payout is split.
        details = [
            SplitDetail(item.line_item_id, item.description, item.total_cents, PRIMARY)
            for item in items
        ]

    else:
        assignments = {
            str(line_id): parse_assignment(value)
            for line_id, value in (line_item_assignments or {}).items()
        }
        missing = [item.line_item_id for item in items if item.line_item_id not in assignments]
        if missing:
            raise UnassignedLineItem(missing)

        secondary = 0
        for item in items:
            assigned_to = assignments[item.line_item_id]
            if assigned_to == SECONDARY:
                secondary += item.total_cents
            details.append(SplitDetail(item.line_item_id, item.description, item.total_cents, assigned_to))

        if secondary > total:
            raise InvalidInvoiceTotal(
                total,
                reason=f"is smaller than the {secondary} cents assigned to the brokerage",
            )

    return InvoiceSplitResult(
        strategy=strategy,
        total_cents=total,
        agent_amount_cents=total - secondary,
        secondary_amount_cents=secondary,
        percentage_to_secondary=float(percentage) if percentage is not None else None,
        details=details,
    )


def percentage_from_amounts(total_cents: int, secondary_amount_cents: int) -> int:
    """Recover the whole-number brokerage percentage of a stored split."""
    total = validate_total(total_cents)
    if total == 0:
        return 0
    return round_half_up(Decimal(secondary_amount_cents) * 100 / Decimal(total))
