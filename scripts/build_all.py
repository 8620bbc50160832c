#!/usr/bin/env python
"""
Build pipeline - validates the catalog and runs the golden tests.

Usage:
    python scripts/build_all.py
"""
import subprocess
import sys
from pathlib import Path

# Add src to path
src_path = Path(__file__).parent.parent / 'src'
sys.path.insert(0, str(src_path))

from order_pricing.data.catalog import load_catalog


def main():
    print("=" * 60)
    print("ORDER PRICING BUILD PIPELINE")
    print("=" * 60)
    print()

    # Validate catalog
    print("[1/2] Validating catalog...")
    catalog, report = load_catalog(verbose=True, save_report=True)

    if report["status"] != "success":
        print("\n❌ BUILD FAILED")
        for error in report["errors"]:
            print(f"  ERROR: {error}")
        sys.exit(1)

    print()
    print("[2/2] Running tests...")

    test_result = subprocess.run(
        [sys.executable, '-m', 'pytest', 'tests', '-v', '--tb=short'],
        cwd=Path(__file__).parent.parent
    )

    if test_result.returncode != 0:
        print("\n❌ TESTS FAILED")
        sys.exit(1)

    print()
    print("=" * 60)
    print("✅ BUILD COMPLETE")
    print("=" * 60)
    print()
    print("Summary:")
    print(f"  Bundles: {report['metrics']['bundle_count']}")
    print(f"  Services: {report['metrics']['service_count']}")
    for warning in report["warnings"]:
        print(f"  WARNING: {warning}")
    print()
    print("Bundles by pricing method:")
    for method, count in report['metrics']['bundles_by_pricing_method'].items():
        print(f"  {method}: {count}")


if __name__ == "__main__":
    main()
