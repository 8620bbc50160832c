"""
Catalog Loader - validates bundle/service records where they enter the engine.

Records arrive either from the catalog CSV exports (bundles.csv,
pricing_tiers.csv, services.csv) or as dicts from the application's
database layer, in snake_case or the app's camelCase. Each record is checked
once here and turned into a FixedBundle / PerAreaBundle / TieredBundle /
Service; the engine trusts their shape afterwards.
"""
import hashlib
import json
from datetime import datetime
from pathlib import Path
from typing import Iterable, Optional

import pandas as pd

from ..config.settings import get_settings, Settings
from ..engine.errors import CatalogError
from ..engine.models import (
    FIXED, PER_AREA, PRICING_METHODS, TIERED,
    Bundle, FixedBundle, PerAreaBundle, PricingTier, Service, TieredBundle,
)


PRICING_METHOD_ALIASES = {
    **{method: method for method in PRICING_METHODS},
    "per_sqft": PER_AREA,
    "sqft_based": PER_AREA,
    "tiered_sqft": TIERED,
}

# Accepted spellings per field, first match wins
FIELD_KEYS = {
    "bundle_id": ("bundle_id", "bundleId", "id"),
    "service_id": ("service_id", "serviceId", "id"),
    "tier_id": ("tier_id", "tierId", "id"),
    "name": ("name",),
    "pricing_method": ("pricing_method", "pricingMethod"),
    "price_cents": ("price_cents", "priceCents"),
    "price_per_area_unit_cents": ("price_per_area_unit_cents", "pricePerAreaUnitCents", "pricePerSqftCents"),
    "min_area": ("min_area", "minArea", "minSqft"),
    "max_area": ("max_area", "maxArea", "maxSqft"),
    "area_increment": ("area_increment", "areaIncrement", "sqftIncrements"),
    "original_price_cents": ("original_price_cents", "originalPriceCents"),
    "tier_label": ("tier_label", "tierLabel", "tierName"),
    "sort_order": ("sort_order", "sortOrder"),
    "tiers": ("tiers", "pricingTiers", "pricing_tiers"),
}


def get_file_hash(path: Path) -> str:
    """Get SHA256 hash of a file."""
    if not path.exists():
        return ""
    with open(path, 'rb') as f:
        return hashlib.sha256(f.read()).hexdigest()[:12]


def _is_blank(value) -> bool:
    if value is None:
        return True
    if isinstance(value, str):
        return value.strip() == ''
    if isinstance(value, (list, tuple, dict)):
        return False
    try:
        return bool(pd.isna(value))
    except (TypeError, ValueError):
        return False


def _get(record: dict, field: str):
    for key in FIELD_KEYS.get(field, (field,)):
        if key in record and not _is_blank(record[key]):
            return record[key]
    return None


def _parse_int(record: dict, field: str, problems: list[str], required: bool = False,
               minimum: Optional[int] = None) -> Optional[int]:
    """Parse an optional integer field, collecting problems instead of raising."""
    raw = _get(record, field)
    if raw is None:
        if required:
            problems.append(f"{field} is required")
        return None

    if isinstance(raw, bool):
        problems.append(f"{field} must be an integer, got {raw!r}")
        return None
    try:
        number = float(raw)
    except (TypeError, ValueError):
        problems.append(f"{field} must be an integer, got {raw!r}")
        return None
    if not number.is_integer():
        problems.append(f"{field} must be a whole number, got {raw!r}")
        return None

    value = int(number)
    if minimum is not None and value < minimum:
        problems.append(f"{field} must be >= {minimum}, got {value}")
        return None
    return value


def _parse_str(record: dict, field: str) -> Optional[str]:
    raw = _get(record, field)
    return None if raw is None else str(raw).strip()


def validate_tiers(tiers: Iterable[PricingTier], bundle_id: Optional[str] = None) -> tuple[PricingTier, ...]:
    """
    Order tiers by min_area and check they do not overlap.

    Gaps between tiers are allowed; the resolver's last-tier fallback
    covers areas that fall into them.
    """
    ordered = sorted(tiers, key=lambda t: (t.min_area, t.sort_order))
    problems = []

    for tier in ordered:
        if tier.max_area is not None and tier.max_area < tier.min_area:
            problems.append(f"tier {tier.tier_label} has max_area {tier.max_area} below min_area {tier.min_area}")

    for current, following in zip(ordered, ordered[1:]):
        if current.max_area is None:
            problems.append(f"open-ended tier {current.tier_label} must be the last tier")
        elif current.max_area >= following.min_area:
            problems.append(
                f"Tier ranges overlap: {current.describe_range()} and {following.describe_range()}"
            )

    if problems:
        raise CatalogError(bundle_id, problems)
    return tuple(ordered)


def tier_from_record(record: dict, index: int = 0) -> PricingTier:
    problems = []
    min_area = _parse_int(record, "min_area", problems, required=True, minimum=0)
    max_area = _parse_int(record, "max_area", problems, minimum=0)
    price_cents = _parse_int(record, "price_cents", problems, required=True, minimum=0)
    sort_order = _parse_int(record, "sort_order", problems)
    tier_id = _parse_str(record, "tier_id")

    if problems:
        raise CatalogError(tier_id, problems)

    label = _parse_str(record, "tier_label") or (
        f"{min_area}+" if max_area is None else f"{min_area}-{max_area}"
    )
    return PricingTier(
        tier_id=tier_id or f"tier-{index}",
        min_area=min_area,
        max_area=max_area,
        tier_label=label,
        price_cents=price_cents,
        sort_order=index if sort_order is None else sort_order,
    )


def bundle_from_record(record: dict, tiers: Optional[Iterable] = None) -> Bundle:
    """
    Build a Bundle variant from a raw record.

    Args:
        record: Raw bundle record (snake_case or camelCase keys)
        tiers: Tier records or PricingTier objects; defaults to record["tiers"]

    Raises:
        CatalogError: If the record is malformed
    """
    bundle_id = _parse_str(record, "bundle_id")
    problems = []
    if not bundle_id:
        problems.append("bundle_id is required")

    name = _parse_str(record, "name") or bundle_id or ""
    raw_method = (_parse_str(record, "pricing_method") or FIXED).lower()
    method = PRICING_METHOD_ALIASES.get(raw_method)
    if method is None:
        problems.append(f"unknown pricing_method {raw_method!r}")

    original = _parse_int(record, "original_price_cents", problems, minimum=0)

    if method == FIXED:
        price_cents = _parse_int(record, "price_cents", problems, required=True, minimum=0)
        if problems:
            raise CatalogError(bundle_id, problems)
        return FixedBundle(bundle_id=bundle_id, name=name, price_cents=price_cents,
                           original_price_cents=original)

    if method == PER_AREA:
        unit_price = _parse_int(record, "price_per_area_unit_cents", problems, required=True, minimum=0)
        min_area = _parse_int(record, "min_area", problems, minimum=0)
        max_area = _parse_int(record, "max_area", problems, minimum=1)
        increment = _parse_int(record, "area_increment", problems, minimum=1)
        if min_area is not None and max_area is not None and max_area < min_area:
            problems.append(f"max_area {max_area} is below min_area {min_area}")
        if problems:
            raise CatalogError(bundle_id, problems)
        return PerAreaBundle(
            bundle_id=bundle_id,
            name=name,
            price_per_area_unit_cents=unit_price,
            min_area=min_area,
            max_area=max_area,
            area_increment=increment or 1,
            original_price_cents=original,
        )

    if problems:
        raise CatalogError(bundle_id, problems)

    raw_tiers = tiers if tiers is not None else (_get(record, "tiers") or [])
    parsed = []
    for index, tier in enumerate(raw_tiers):
        if isinstance(tier, PricingTier):
            parsed.append(tier)
            continue
        try:
            parsed.append(tier_from_record(tier, index))
        except CatalogError as e:
            raise CatalogError(bundle_id, [f"tier {index}: {p}" for p in e.problems])

    return TieredBundle(
        bundle_id=bundle_id,
        name=name,
        tiers=validate_tiers(parsed, bundle_id),
        original_price_cents=original,
    )


def service_from_record(record: dict) -> Service:
    service_id = _parse_str(record, "service_id")
    problems = []
    if not service_id:
        problems.append("service_id is required")
    price_cents = _parse_int(record, "price_cents", problems, required=True, minimum=0)
    if problems:
        raise CatalogError(service_id, problems)
    return Service(service_id=service_id, name=_parse_str(record, "name") or service_id,
                   price_cents=price_cents)


class Catalog:
    """Read-only lookup of validated bundles and services."""

    def __init__(self, bundles: Iterable[Bundle] = (), services: Iterable[Service] = ()):
        self._bundles = {b.bundle_id: b for b in bundles}
        self._services = {s.service_id: s for s in services}

    @property
    def bundles(self) -> list[Bundle]:
        return list(self._bundles.values())

    @property
    def services(self) -> list[Service]:
        return list(self._services.values())

    def get_bundle(self, bundle_id: str) -> Optional[Bundle]:
        return self._bundles.get(str(bundle_id).strip())

    def get_service(self, service_id: str) -> Optional[Service]:
        return self._services.get(str(service_id).strip())

    def __len__(self) -> int:
        return len(self._bundles) + len(self._services)


def _read_csv(path: Path) -> pd.DataFrame:
    df = pd.read_csv(path, dtype=str).fillna('')
    df.columns = [c.strip() for c in df.columns]
    for col in df.columns:
        df[col] = df[col].astype(str).str.strip()
    return df


def load_catalog(
    settings: Optional[Settings] = None,
    verbose: bool = False,
    strict: bool = False,
    save_report: bool = False,
) -> tuple[Catalog, dict]:
    """
    Load and validate the catalog CSVs.

    Args:
        settings: Optional settings override
        verbose: Print progress messages
        strict: Raise on the first invalid record instead of skipping it
        save_report: Write the load report to settings.load_report

    Returns:
        (catalog, report) - report mirrors the catalog build report format
    """
    settings = settings or get_settings()

    report = {
        "timestamp": datetime.now().isoformat(),
        "status": "pending",
        "input_files": {},
        "metrics": {},
        "warnings": [],
        "errors": []
    }

    def record_error(msg: str, exc: Optional[CatalogError] = None):
        if strict and exc is not None:
            raise exc
        report["errors"].append(msg)
        if verbose:
            print(f"ERROR: {msg}")

    for key, path in (("bundles", settings.bundles_csv), ("services", settings.services_csv)):
        if not path.exists():
            msg = f"CRITICAL ERROR: {path} not found."
            report["errors"].append(msg)
            report["status"] = "failed"
            if verbose:
                print(msg)
            return Catalog(), report
        report["input_files"][key] = {"path": str(path), "hash": get_file_hash(path)}

    tiers_by_bundle: dict[str, list[dict]] = {}
    if settings.tiers_csv.exists():
        report["input_files"]["pricing_tiers"] = {
            "path": str(settings.tiers_csv),
            "hash": get_file_hash(settings.tiers_csv)
        }
        df_tiers = _read_csv(settings.tiers_csv)
        if 'sort_order' in df_tiers.columns:
            df_tiers = df_tiers.sort_values('sort_order', key=lambda s: pd.to_numeric(s, errors='coerce'))
        for row in df_tiers.to_dict(orient="records"):
            tiers_by_bundle.setdefault(row.get('bundle_id', ''), []).append(row)
    else:
        report["warnings"].append(f"WARNING: {settings.tiers_csv.name} not found - tiered bundles have no tiers")
        if verbose:
            print(f"WARNING: {settings.tiers_csv.name} not found")

    bundles = []
    df_bundles = _read_csv(settings.bundles_csv)
    for row in df_bundles.to_dict(orient="records"):
        bundle_id = row.get('bundle_id', '')
        tier_rows = tiers_by_bundle.pop(bundle_id, [])
        try:
            bundle = bundle_from_record(row, tiers=tier_rows)
        except CatalogError as e:
            record_error(e.message, e)
            continue
        if bundle.pricing_method == TIERED and not bundle.tiers:
            report["warnings"].append(f"Tiered bundle {bundle.bundle_id} has no pricing tiers")
        elif bundle.pricing_method != TIERED and tier_rows:
            report["warnings"].append(
                f"Ignored {len(tier_rows)} pricing tiers on {bundle.pricing_method} bundle {bundle.bundle_id}"
            )
        bundles.append(bundle)

    for orphan_id in tiers_by_bundle:
        report["warnings"].append(f"Pricing tiers reference unknown bundle {orphan_id!r}")

    services = []
    df_services = _read_csv(settings.services_csv)
    for row in df_services.to_dict(orient="records"):
        try:
            services.append(service_from_record(row))
        except CatalogError as e:
            record_error(e.message, e)

    catalog = Catalog(bundles, services)

    by_method = {method: 0 for method in PRICING_METHODS}
    for bundle in bundles:
        by_method[bundle.pricing_method] += 1

    report["metrics"] = {
        "bundle_count": len(bundles),
        "service_count": len(services),
        "bundles_by_pricing_method": by_method,
        "rejected_records": len(report["errors"]),
    }
    report["status"] = "success" if not report["errors"] else "completed_with_errors"

    if verbose:
        print(f"\nCATALOG LOADED: {len(bundles)} bundles, {len(services)} services.")

    if save_report:
        report_path = settings.load_report
        report_path.parent.mkdir(parents=True, exist_ok=True)
        with open(report_path, 'w') as f:
            json.dump(report, f, indent=2)
        if verbose:
            print(f"Load report saved to: {report_path}")

    return catalog, report
