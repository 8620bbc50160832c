"""
Generate golden test cases by running the current pricing resolver on the
sample catalog. This captures current behavior as a regression baseline.

The cases themselves (bundle, area, description) are curated in CASES;
only the expected columns are computed. Add a case here and re-run to
extend golden_cases.csv.
"""
import os
import sys

import pandas as pd

# Add src to path for imports
sys.path.insert(0, os.path.join(os.path.dirname(os.path.dirname(os.path.abspath(__file__))), 'src'))

from order_pricing.data.catalog import load_catalog
from order_pricing.engine import resolve_bundle_price


CASES = [
    ("essentials", None, "fixed price without area"),
    ("essentials", 1800, "fixed price ignores area"),
    ("luxury-sqft", 1100, "rounds up to next 250 increment"),
    ("luxury-sqft", 500, "clamped up to min area"),
    ("luxury-sqft", 1000, "exact increment boundary"),
    ("luxury-sqft", 1001, "one over boundary rounds up"),
    ("luxury-sqft", 9000, "clamped down to max area"),
    ("bicep-tiered", 2500, "open-ended top tier"),
    ("bicep-tiered", 1999, "upper bound is inclusive"),
    ("bicep-tiered", 2000, "lower bound is inclusive"),
    ("bicep-tiered", 1, "smallest area"),
    ("drone-tiered", 750, "first tier midpoint"),
    ("drone-tiered", 2250, "second tier midpoint"),
    ("drone-tiered", 4999, "last bounded tier"),
    ("drone-tiered", 7500, "above every tier falls back to last"),
]


def generate_golden_cases():
    catalog, report = load_catalog()
    if report["errors"]:
        print("Catalog errors:")
        for err in report["errors"]:
            print(f"  ❌ {err}")

    cases = []
    for bundle_id, area, description in CASES:
        bundle = catalog.get_bundle(bundle_id)
        if bundle is None:
            print(f"  ⚠️ Skipping {bundle_id}: not in catalog")
            continue
        result = resolve_bundle_price(bundle, area)
        cases.append({
            'bundle_id': bundle_id,
            'area': '' if area is None else area,
            'expected_price_cents': result.price_cents,
            'expected_tier': result.matched_tier.tier_label if result.matched_tier else '',
            'expected_fallback': 'true' if result.warnings else 'false',
            'description': description,
        })

    df = pd.DataFrame(cases)
    output_path = os.path.join(os.path.dirname(os.path.abspath(__file__)), 'golden_cases.csv')
    df.to_csv(output_path, index=False)
    print(f"Generated {len(cases)} golden test cases")
    print(f"Output: {output_path}")
    print()
    print("Sample cases:")
    print(df.head(10).to_string(index=False))

if __name__ == "__main__":
    generate_golden_cases()
