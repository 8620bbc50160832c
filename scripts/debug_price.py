#!/usr/bin/env python
"""
Print the pricing trace for one catalog bundle.

Usage:
    python scripts/debug_price.py BUNDLE_ID [AREA]
"""
import sys
from pathlib import Path

# Add src to path
src_path = Path(__file__).parent.parent / 'src'
sys.path.insert(0, str(src_path))

from order_pricing.data.catalog import load_catalog
from order_pricing.engine import PricingError, resolve_bundle_price


def debug():
    if len(sys.argv) < 2:
        print(__doc__)
        sys.exit(1)

    bundle_id = sys.argv[1]
    area = sys.argv[2] if len(sys.argv) > 2 else None

    catalog, report = load_catalog()
    for warning in report["warnings"]:
        print(f"WARNING: {warning}")

    bundle = catalog.get_bundle(bundle_id)
    if bundle is None:
        print(f"ERROR: bundle {bundle_id!r} not in catalog")
        print("Available:", ", ".join(b.bundle_id for b in catalog.bundles))
        sys.exit(1)

    try:
        result = resolve_bundle_price(bundle, area)
    except PricingError as e:
        print(f"❌ {e.code}: {e.message}")
        sys.exit(1)

    print(result.get_trace_text())
    print()
    print(f"Price: {result.price_cents} cents")
    for warning in result.warnings:
        print(f"⚠ {warning}")


if __name__ == "__main__":
    debug()
