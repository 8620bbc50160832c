"""
Shared API state - one validated catalog per process.
"""
from typing import Optional

from ..data.catalog import Catalog, load_catalog


_catalog: Optional[Catalog] = None
_report: dict = {}


def get_catalog() -> Catalog:
    """Load the catalog on first use."""
    global _catalog, _report
    if _catalog is None:
        _catalog, _report = load_catalog()
    return _catalog


def get_load_report() -> dict:
    get_catalog()
    return _report


def set_catalog(catalog: Catalog, report: Optional[dict] = None):
    """Swap the catalog (reloads and tests)."""
    global _catalog, _report
    _catalog = catalog
    _report = report or {}


def reload_catalog() -> dict:
    global _catalog, _report
    _catalog, _report = load_catalog()
    return _report
