"""Catalogue adapter factory.

Provides get_catalog() / set_catalog() to swap implementations. The
``CATALOG_ADAPTER`` environment variable picks the default; only the
repository-backed adapter ships with the service.
"""

import os

from marketplace.catalogue.port import CatalogPort

_current_catalog: CatalogPort | None = None


def get_catalog() -> CatalogPort:
    """Return the configured catalogue adapter (singleton)."""
    global _current_catalog
    if _current_catalog is None:
        adapter = os.environ.get("CATALOG_ADAPTER", "repository")
        if adapter == "repository":
            from marketplace.catalogue.repository_adapter import RepositoryCatalog

            _current_catalog = RepositoryCatalog()
        else:
            raise ValueError(f"Unknown catalog adapter: {adapter}")
    return _current_catalog


def set_catalog(catalog: CatalogPort) -> None:
    """Override the active catalogue adapter (useful for tests)."""
    global _current_catalog
    _current_catalog = catalog


def reset_catalog() -> None:
    """Reset to the default adapter."""
    global _current_catalog
    _current_catalog = None
