import os
import sys
from pathlib import Path

import pytest

# Add src to path for internal imports
src_path = os.path.join(os.path.dirname(os.path.dirname(os.path.abspath(__file__))), 'src')
if src_path not in sys.path:
    sys.path.insert(0, src_path)

from order_pricing.config.settings import Settings, get_package_data_dir
from order_pricing.data.catalog import load_catalog
from order_pricing.engine import (
    FixedBundle, PerAreaBundle, PricingTier, Service, TieredBundle,
)


@pytest.fixture(scope="module")
def sample_settings():
    """Settings pointing at the bundled sample catalog."""
    return Settings.load(catalog_dir=get_package_data_dir())


@pytest.fixture(scope="module")
def catalog(sample_settings):
    """Create a single catalog instance for all tests in a module."""
    catalog, report = load_catalog(sample_settings, strict=True)
    assert report["status"] == "success", report["errors"]
    return catalog


@pytest.fixture
def fixed_bundle():
    return FixedBundle(bundle_id="essentials", name="Listing Essentials", price_cents=29900)


@pytest.fixture
def per_area_bundle():
    return PerAreaBundle(
        bundle_id="luxury-sqft",
        name="Luxury Listing",
        price_per_area_unit_cents=10,
        min_area=1000,
        max_area=6000,
        area_increment=250,
    )


@pytest.fixture
def tiered_bundle():
    return TieredBundle(
        bundle_id="bicep-tiered",
        name="BICEP Tiered Package",
        tiers=(
            PricingTier("bicep-small", 0, 1999, "Small", 20000, 0),
            PricingTier("bicep-large", 2000, None, "Large", 35000, 1),
        ),
    )


@pytest.fixture
def service():
    return Service(service_id="twilight", name="Twilight Photos", price_cents=7500)
