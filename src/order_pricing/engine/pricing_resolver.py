"""
Pricing Resolver - maps (bundle, area) to a unit price.

Pricing methods:
- fixed: the bundle's list price, area is ignored
- per_area: area clamped to the bundle's min/max, rounded up to the next
  increment, multiplied by the per-unit price
- tiered: price of the first tier whose range contains the area

Tiered fallback policy: when no tier contains the area (below every
minimum, inside a configuration gap, or above every bounded tier) the LAST
tier is used and a warning is recorded. Checkout is never blocked by a tier
table that does not cover the measured area.
"""
from decimal import Decimal, InvalidOperation
from typing import Iterable, Optional

from .errors import InvalidAreaInput, NoPricingTiersConfigured, PricingError
from .models import (
    FIXED, PER_AREA, TIERED,
    Bundle, FixedBundle, PerAreaBundle, TieredBundle,
    PriceResult, Service,
)
from .money import ceil_div, round_half_up


def validate_area(area, bundle_id: Optional[str] = None) -> int:
    """
    Coerce a caller-supplied area to a positive int.

    Accepts ints, integral floats/Decimals and numeric strings from form
    input. Raises InvalidAreaInput for anything else.
    """
    if area is None or isinstance(area, bool):
        raise InvalidAreaInput(area, bundle_id)

    if isinstance(area, int):
        value = area
    else:
        try:
            number = Decimal(str(area).strip())
        except (InvalidOperation, ValueError):
            raise InvalidAreaInput(area, bundle_id)
        if not number.is_finite() or number != number.to_integral_value():
            raise InvalidAreaInput(area, bundle_id)
        value = int(number)

    if value <= 0:
        raise InvalidAreaInput(area, bundle_id)
    return value


def resolve_fixed_price(bundle: FixedBundle) -> int:
    """Return the fixed price of a bundle."""
    return bundle.price_cents


def resolve_per_area_price(bundle: PerAreaBundle, area) -> int:
    """Return the per-area price in cents for ``area``."""
    return _per_area(bundle, area)[0]


def resolve_tiered_price(bundle: TieredBundle, area) -> tuple[int, str]:
    """Return (price_cents, tier_label) for ``area``."""
    tier, _ = _match_tier(bundle, area)
    return tier.price_cents, tier.tier_label


def _per_area(bundle: PerAreaBundle, area) -> tuple[int, int]:
    """Compute (price_cents, rounded_area)."""
    area = validate_area(area, bundle.bundle_id)

    effective_area = max(area, bundle.min_area or 0)
    if bundle.max_area:
        effective_area = min(effective_area, bundle.max_area)

    increment = bundle.area_increment or 1
    rounded_area = ceil_div(effective_area, increment) * increment

    return rounded_area * (bundle.price_per_area_unit_cents or 0), rounded_area


def _match_tier(bundle: TieredBundle, area):
    """Find the tier for ``area``. Returns (tier, fell_back)."""
    if not bundle.tiers:
        raise NoPricingTiersConfigured(bundle.bundle_id)

    area = validate_area(area, bundle.bundle_id)

    for tier in bundle.tiers:
        if tier.contains(area):
            return tier, False

    return bundle.tiers[-1], True


def resolve_bundle_price(bundle: Bundle, area=None) -> PriceResult:
    """
    Resolve a bundle's price with trace.

    Args:
        bundle: A FixedBundle, PerAreaBundle or TieredBundle
        area: Measured area; required for per_area and tiered bundles

    Returns:
        PriceResult with price, area used, matched tier, trace and warnings
    """
    method = bundle.pricing_method
    result = PriceResult(bundle_id=bundle.bundle_id, pricing_method=method, price_cents=0)
    result.add_trace("Bundle", f"Pricing {bundle.name} using {method} pricing", bundle.bundle_id)

    if method == FIXED:
        result.price_cents = resolve_fixed_price(bundle)
        result.add_trace("Price Resolution", "Fixed bundle price", str(result.price_cents))

    elif method == PER_AREA:
        result.price_cents, result.area_used = _per_area(bundle, area)
        result.add_trace(
            "Area Rounding",
            f"Area {area} clamped to [{bundle.min_area or 0}, {bundle.max_area or '∞'}] "
            f"and rounded up to increment {bundle.area_increment or 1}",
            str(result.area_used),
        )
        result.add_trace(
            "Extension",
            f"{result.area_used} × {bundle.price_per_area_unit_cents or 0}¢",
            str(result.price_cents),
        )

    elif method == TIERED:
        tier, fell_back = _match_tier(bundle, area)
        result.area_used = validate_area(area, bundle.bundle_id)
        result.matched_tier = tier
        result.price_cents = tier.price_cents
        if fell_back:
            result.add_trace(
                "Tier Match",
                f"No tier contains area {result.area_used}, using last tier fallback",
                tier.tier_label,
            )
            result.add_warning(
                f"Area {result.area_used} is outside every tier of bundle {bundle.bundle_id}; "
                f"priced at last tier '{tier.tier_label}'"
            )
        else:
            result.add_trace(
                "Tier Match",
                f"Area {result.area_used} within {tier.describe_range()}",
                tier.tier_label,
            )
        result.add_trace("Price Resolution", f"Using {tier.tier_label} tier price", str(tier.price_cents))

    else:
        raise PricingError(f"Unknown pricing method {method!r} for bundle {bundle.bundle_id}")

    return result


def calculate_bundle_savings(
    bundle_price_cents: int,
    components: Iterable[tuple[Service, int]],
) -> tuple[int, float]:
    """
    Compare a bundle's price with buying its services separately.

    Args:
        bundle_price_cents: Price of the bundle
        components: (service, quantity) pairs included in the bundle

    Returns:
        (original_price_cents, savings_percent) - percent rounded to 2 places
    """
    original_price_cents = sum(service.price_cents * quantity for service, quantity in components)
    if original_price_cents <= 0:
        return original_price_cents, 0.0

    savings = Decimal(original_price_cents - bundle_price_cents) * 100 / Decimal(original_price_cents)
    return original_price_cents, round_half_up(savings, 2)
