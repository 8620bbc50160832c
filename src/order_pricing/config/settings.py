"""
Centralized settings and path configuration for the order pricing engine.
"""
import os
from pathlib import Path
from dataclasses import dataclass
from typing import Optional


CATALOG_DIR_ENV = "ORDER_PRICING_CATALOG_DIR"
TAX_RATE_ENV = "ORDER_PRICING_TAX_RATE"


def get_project_root() -> Path:
    """Get the project root directory (where pyproject.toml lives)."""
    current = Path(__file__).resolve()
    for parent in current.parents:
        if (parent / 'pyproject.toml').exists():
            return parent
    # Fallback to 3 levels up from this file
    return Path(__file__).resolve().parent.parent.parent.parent


def get_package_data_dir() -> Path:
    """Directory holding the bundled sample catalog."""
    return Path(__file__).resolve().parent.parent / 'data' / 'sample_catalog'


@dataclass
class Settings:
    """Application settings with sensible defaults."""

    # Project paths
    project_root: Path
    catalog_dir: Path

    # Catalog input files
    bundles_csv: Path
    tiers_csv: Path
    services_csv: Path

    # Output files
    load_report: Path

    # Checkout
    default_tax_rate_percent: float = 0.0

    @classmethod
    def load(cls, project_root: Optional[Path] = None, catalog_dir: Optional[Path] = None) -> 'Settings':
        """Load settings from the project structure and environment."""
        root = project_root or get_project_root()

        env_dir = os.environ.get(CATALOG_DIR_ENV)
        catalog = Path(catalog_dir or env_dir or get_package_data_dir())

        tax_rate = 0.0
        env_rate = os.environ.get(TAX_RATE_ENV)
        if env_rate:
            try:
                tax_rate = float(env_rate)
            except ValueError:
                raise ValueError(f"{TAX_RATE_ENV} must be a number, got {env_rate!r}")

        return cls(
            project_root=root,
            catalog_dir=catalog,
            bundles_csv=catalog / 'bundles.csv',
            tiers_csv=catalog / 'pricing_tiers.csv',
            services_csv=catalog / 'services.csv',
            load_report=root / 'outputs' / 'catalog_report.json',
            default_tax_rate_percent=tax_rate,
        )


# Default settings instance
_settings: Optional[Settings] = None


def get_settings() -> Settings:
    """Get the global settings instance."""
    global _settings
    if _settings is None:
        _settings = Settings.load()
    return _settings


def reset_settings(settings: Optional[Settings] = None):
    """Replace (or clear) the global settings instance."""
    global _settings
    _settings = settings
