"""
Cart Aggregator - ordered collection of priced line items.

The line list is the single source of truth: totals are derived from it on
every call. Bundles are singletons per cart; services collapse by id into a
quantity.
"""
from dataclasses import replace
from typing import Iterator, Optional

from ..config.settings import get_settings
from .errors import InvalidTaxRate
from .models import (
    FIXED, Bundle, BundleLine, CartLineItem, CartTotals, CheckoutSummary,
    OrderLine, Service, ServiceLine,
)
from .money import percent_of_cents, to_decimal
from .pricing_resolver import resolve_bundle_price, validate_area


class Cart:
    """
    A single session's cart.

    Operations are applied one at a time by the owning session; each either
    completes or raises before touching the line list.
    """

    def __init__(self):
        self._lines: list[CartLineItem] = []

    def __len__(self) -> int:
        return len(self._lines)

    def __iter__(self) -> Iterator[CartLineItem]:
        return iter(tuple(self._lines))

    def __repr__(self) -> str:
        totals = self.totals()
        return f"Cart(lines={len(self._lines)}, subtotal_cents={totals.subtotal_cents})"

    @property
    def lines(self) -> tuple[CartLineItem, ...]:
        """Snapshot of the ordered line items."""
        return tuple(self._lines)

    @property
    def is_empty(self) -> bool:
        return not self._lines

    def _find(self, kind: str, item_id: str) -> Optional[int]:
        for index, line in enumerate(self._lines):
            if line.kind == kind and line.item_id == item_id:
                return index
        return None

    # ------------------------------------------------------------------
    # Bundles
    # ------------------------------------------------------------------

    def add_bundle(self, bundle: Bundle, area=None) -> Optional[BundleLine]:
        """
        Add a bundle priced for ``area``.

        Re-adding a bundle already in the cart is a no-op, even with a
        different area; remove it first to re-price.

        Returns:
            The new line, or None if the bundle was already present
        """
        if self._find("bundle", bundle.bundle_id) is not None:
            return None

        price = resolve_bundle_price(bundle, area)
        line = BundleLine(
            bundle_id=bundle.bundle_id,
            name=bundle.name,
            price_cents=price.price_cents,
            area=None if bundle.pricing_method == FIXED else validate_area(area, bundle.bundle_id),
            area_used=price.area_used,
            matched_tier_id=price.matched_tier.tier_id if price.matched_tier else None,
            tier_label=price.matched_tier.tier_label if price.matched_tier else None,
        )
        self._lines.append(line)
        return line

    def remove_bundle(self, bundle_id: str) -> bool:
        """Remove a bundle line. Returns False if it was not in the cart."""
        index = self._find("bundle", bundle_id)
        if index is None:
            return False
        del self._lines[index]
        return True

    # ------------------------------------------------------------------
    # Services
    # ------------------------------------------------------------------

    def add_service(self, service: Service) -> ServiceLine:
        """Add one unit of a service, incrementing an existing line."""
        index = self._find("service", service.service_id)
        if index is None:
            line = ServiceLine(
                service_id=service.service_id,
                name=service.name,
                unit_price_cents=service.price_cents,
            )
            self._lines.append(line)
        else:
            line = replace(self._lines[index], quantity=self._lines[index].quantity + 1)
            self._lines[index] = line
        return line

    def set_service_quantity(self, service_id: str, quantity: int) -> Optional[ServiceLine]:
        """
        Set a service line's quantity exactly.

        The quantity is truncated to a whole number first; zero or less
        removes the line. Unknown ids are ignored.

        Returns:
            The updated line, or None if the line was removed or absent
        """
        index = self._find("service", service_id)
        if index is None:
            return None
        quantity = int(quantity)
        if quantity <= 0:
            del self._lines[index]
            return None
        line = replace(self._lines[index], quantity=quantity)
        self._lines[index] = line
        return line

    def clear(self):
        self._lines.clear()

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    def totals(self) -> CartTotals:
        """Subtotal and item count, recomputed from the line list."""
        subtotal = 0
        item_count = 0
        for line in self._lines:
            subtotal += line.total_cents
            item_count += line.quantity
        return CartTotals(subtotal_cents=subtotal, item_count=item_count)

    def checkout(self, tax_rate_percent=None) -> CheckoutSummary:
        """
        Build the order snapshot for the payment collaborator.

        Args:
            tax_rate_percent: Tax rate, defaults to the configured rate

        Returns:
            CheckoutSummary with order lines, subtotal, tax and total
        """
        if tax_rate_percent is None:
            tax_rate_percent = get_settings().default_tax_rate_percent
        if isinstance(tax_rate_percent, bool):
            raise InvalidTaxRate(tax_rate_percent)
        try:
            rate = to_decimal(tax_rate_percent)
        except ArithmeticError:
            raise InvalidTaxRate(tax_rate_percent)
        if not rate.is_finite() or rate < 0:
            raise InvalidTaxRate(tax_rate_percent)

        totals = self.totals()
        tax_cents = percent_of_cents(totals.subtotal_cents, rate)

        order_lines = [
            OrderLine(
                item_type=line.kind,
                item_id=line.item_id,
                name=line.name,
                quantity=line.quantity,
                unit_cents=line.unit_price_cents,
                total_cents=line.total_cents,
                sort_order=index,
            )
            for index, line in enumerate(self._lines)
        ]

        return CheckoutSummary(
            lines=order_lines,
            subtotal_cents=totals.subtotal_cents,
            tax_rate_percent=float(rate),
            tax_cents=tax_cents,
            total_cents=totals.subtotal_cents + tax_cents,
            item_count=totals.item_count,
        )
