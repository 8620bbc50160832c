"""
Data models for the pricing engine.

Uses dataclasses for structured, type-safe data representation. Catalog
records and cart lines are frozen; the cart replaces lines instead of
mutating them so snapshots handed to callers never change underneath them.
"""
from dataclasses import dataclass, field
from typing import Optional, Union


# Pricing methods (bundle discriminant)
FIXED = "fixed"
PER_AREA = "per_area"
TIERED = "tiered"
PRICING_METHODS = (FIXED, PER_AREA, TIERED)

# Split strategies
SPLIT_NONE = "none"
SPLIT_PERCENTAGE = "percentage"
SPLIT_LINE_ITEM = "line_item"
SPLIT_STRATEGIES = (SPLIT_NONE, SPLIT_PERCENTAGE, SPLIT_LINE_ITEM)

# Split recipients
PRIMARY = "primary"      # agent
SECONDARY = "secondary"  # brokerage


@dataclass
class TraceStep:
    """A single step in the pricing resolution trace."""
    step: str
    description: str
    value: Optional[str] = None


# ============================================================================
# CATALOG
# ============================================================================

@dataclass(frozen=True)
class PricingTier:
    """An area range mapped to a fixed price."""
    tier_id: str
    min_area: int
    max_area: Optional[int]  # None = open-ended
    tier_label: str
    price_cents: int
    sort_order: int = 0

    def contains(self, area: int) -> bool:
        return self.min_area <= area and (self.max_area is None or area <= self.max_area)

    def describe_range(self) -> str:
        if self.max_area is None:
            return f"{self.min_area}+"
        return f"{self.min_area}-{self.max_area}"


@dataclass(frozen=True)
class FixedBundle:
    bundle_id: str
    name: str
    price_cents: int
    original_price_cents: Optional[int] = None
    pricing_method: str = field(default=FIXED, init=False)


@dataclass(frozen=True)
class PerAreaBundle:
    bundle_id: str
    name: str
    price_per_area_unit_cents: int
    min_area: Optional[int] = None
    max_area: Optional[int] = None
    area_increment: Optional[int] = None
    original_price_cents: Optional[int] = None
    pricing_method: str = field(default=PER_AREA, init=False)


@dataclass(frozen=True)
class TieredBundle:
    bundle_id: str
    name: str
    tiers: tuple[PricingTier, ...] = ()
    original_price_cents: Optional[int] = None
    pricing_method: str = field(default=TIERED, init=False)


Bundle = Union[FixedBundle, PerAreaBundle, TieredBundle]


@dataclass(frozen=True)
class Service:
    """A single sellable service, added to carts by quantity."""
    service_id: str
    name: str
    price_cents: int


@dataclass
class PriceResult:
    """Outcome of resolving a bundle's price."""
    bundle_id: str
    pricing_method: str
    price_cents: int
    area_used: Optional[int] = None
    matched_tier: Optional[PricingTier] = None
    warnings: list[str] = field(default_factory=list)
    trace: list[TraceStep] = field(default_factory=list)

    def add_trace(self, step: str, description: str, value: str = None):
        """Add a step to the trace for this price."""
        self.trace.append(TraceStep(step=step, description=description, value=value))

    def add_warning(self, warning: str):
        self.warnings.append(warning)

    def get_trace_text(self) -> str:
        """Get human-readable trace as formatted text."""
        lines = []
        for t in self.trace:
            if t.value:
                lines.append(f"→ {t.step}: {t.description} = {t.value}")
            else:
                lines.append(f"→ {t.step}: {t.description}")
        return "\n".join(lines)


# ============================================================================
# CART
# ============================================================================

@dataclass(frozen=True)
class BundleLine:
    """A bundle in the cart. Always quantity 1."""
    bundle_id: str
    name: str
    price_cents: int
    area: Optional[int] = None
    area_used: Optional[int] = None
    matched_tier_id: Optional[str] = None
    tier_label: Optional[str] = None
    kind: str = field(default="bundle", init=False)

    @property
    def item_id(self) -> str:
        return self.bundle_id

    @property
    def quantity(self) -> int:
        return 1

    @property
    def unit_price_cents(self) -> int:
        return self.price_cents

    @property
    def total_cents(self) -> int:
        return self.price_cents


@dataclass(frozen=True)
class ServiceLine:
    """A service in the cart; repeats collapse into ``quantity``."""
    service_id: str
    name: str
    unit_price_cents: int
    quantity: int = 1
    kind: str = field(default="service", init=False)

    @property
    def item_id(self) -> str:
        return self.service_id

    @property
    def total_cents(self) -> int:
        return self.unit_price_cents * self.quantity


CartLineItem = Union[BundleLine, ServiceLine]


@dataclass(frozen=True)
class CartTotals:
    subtotal_cents: int
    item_count: int


@dataclass
class OrderLine:
    """Snapshot of a cart line handed to the order/payment collaborator."""
    item_type: str
    item_id: str
    name: str
    quantity: int
    unit_cents: int
    total_cents: int
    sort_order: int


@dataclass
class CheckoutSummary:
    """Complete result of checking out a cart."""
    lines: list[OrderLine]
    subtotal_cents: int
    tax_rate_percent: float
    tax_cents: int
    total_cents: int
    item_count: int


# ============================================================================
# INVOICE SPLITS
# ============================================================================

@dataclass(frozen=True)
class InvoiceLineItem:
    line_item_id: str
    description: str
    total_cents: int


@dataclass
class SplitDetail:
    line_item_id: str
    description: str
    amount_cents: int
    assigned_to: str


@dataclass
class InvoiceSplitResult:
    """Agent (primary) and brokerage (secondary) amounts for one invoice."""
    strategy: str
    total_cents: int
    agent_amount_cents: int
    secondary_amount_cents: int
    percentage_to_secondary: Optional[float] = None
    details: list[SplitDetail] = field(default_factory=list)

    @property
    def brokerage_amount_cents(self) -> int:
        return self.secondary_amount_cents
