"""Engine subpackage - core pricing, cart and invoice split logic."""
from .cart import Cart
from .errors import (
    PricingError, InvalidAreaInput, NoPricingTiersConfigured, InvalidPercentage,
    InvalidInvoiceTotal, UnassignedLineItem, InvalidSplitStrategy, InvalidTaxRate,
    CatalogError,
)
from .invoice_split import calculate_split, percentage_from_amounts
from .models import (
    PricingTier, FixedBundle, PerAreaBundle, TieredBundle, Bundle, Service,
    PriceResult, BundleLine, ServiceLine, CartTotals, CheckoutSummary, OrderLine,
    InvoiceLineItem, InvoiceSplitResult, SplitDetail,
)
from .pricing_resolver import (
    resolve_fixed_price, resolve_per_area_price, resolve_tiered_price,
    resolve_bundle_price, calculate_bundle_savings, validate_area,
)

__all__ = [
    'Cart',
    'PricingError', 'InvalidAreaInput', 'NoPricingTiersConfigured', 'InvalidPercentage',
    'InvalidInvoiceTotal', 'UnassignedLineItem', 'InvalidSplitStrategy', 'InvalidTaxRate',
    'CatalogError',
    'calculate_split', 'percentage_from_amounts',
    'PricingTier', 'FixedBundle', 'PerAreaBundle', 'TieredBundle', 'Bundle', 'Service',
    'PriceResult', 'BundleLine', 'ServiceLine', 'CartTotals', 'CheckoutSummary', 'OrderLine',
    'InvoiceLineItem', 'InvoiceSplitResult', 'SplitDetail',
    'resolve_fixed_price', 'resolve_per_area_price', 'resolve_tiered_price',
    'resolve_bundle_price', 'calculate_bundle_savings', 'validate_area',
]
