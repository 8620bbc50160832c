"""
Golden test cases for bundle pricing regression testing.
These tests capture the expected behavior of the pricing resolver against
the sample catalog and should fail if pricing logic changes unexpectedly.
"""
import csv
import os

import pytest

from order_pricing.engine import resolve_bundle_price

from generate_golden_cases import CASES


def load_golden_cases():
    """Load golden test cases from CSV."""
    cases_path = os.path.join(os.path.dirname(__file__), 'golden_cases.csv')

    if not os.path.exists(cases_path):
        pytest.skip(f"Golden cases file not found: {cases_path}. Run generate_golden_cases.py first.")

    cases = []
    with open(cases_path, 'r', newline='', encoding='utf-8') as f:
        reader = csv.DictReader(f)
        for row in reader:
            cases.append(row)

    return cases


@pytest.mark.parametrize("case", load_golden_cases(), ids=lambda c: f"{c['bundle_id']}-area{c['area'] or 'none'}")
def test_golden_case(catalog, case):
    """Test that pricing matches expected golden case."""
    bundle = catalog.get_bundle(case['bundle_id'])
    assert bundle is not None, f"Bundle {case['bundle_id']} not in sample catalog"

    area = int(case['area']) if case['area'] else None
    expected_price = int(case['expected_price_cents'])
    expected_tier = case['expected_tier'] or None
    expected_fallback = case['expected_fallback'] == 'true'

    result = resolve_bundle_price(bundle, area)

    assert result.price_cents == expected_price, \
        f"Price mismatch for {case['bundle_id']} ({case['description']}): " \
        f"expected {expected_price}, got {result.price_cents}"

    tier_label = result.matched_tier.tier_label if result.matched_tier else None
    assert tier_label == expected_tier, \
        f"Tier mismatch for {case['bundle_id']}: expected {expected_tier}, got {tier_label}"

    assert bool(result.warnings) == expected_fallback, \
        f"Fallback mismatch for {case['bundle_id']} area {area}: warnings={result.warnings}"


def test_every_sample_bundle_prices_with_trace(catalog):
    """Every bundle in the sample catalog resolves and records a trace."""
    for bundle in catalog.bundles:
        result = resolve_bundle_price(bundle, 2000)
        assert result.price_cents >= 0
        assert result.trace, f"No trace for {bundle.bundle_id}"
        assert result.trace[0].step == "Bundle"


def test_golden_file_matches_generator_cases():
    """golden_cases.csv holds exactly the curated generator cases, in order."""
    rows = [(c['bundle_id'], int(c['area']) if c['area'] else None, c['description'])
            for c in load_golden_cases()]
    assert rows == CASES
