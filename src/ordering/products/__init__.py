"""Product lookup factory.

Provides get_product_lookup() / set_product_lookup() to swap implementations:
- CatalogueProductLookup reads the catalogue domain (default)
- FakeProductLookup for development and testing
"""

import os

from ordering.products.port import ProductLookup, ProductRecord

_current_lookup: ProductLookup | None = None


def get_product_lookup() -> ProductLookup:
    """Return the configured product lookup (singleton)."""
    global _current_lookup
    if _current_lookup is None:
        adapter = os.environ.get("CATALOGUE_ADAPTER", "catalogue")
        if adapter == "catalogue":
            from ordering.products.catalogue_adapter import CatalogueProductLookup

            _current_lookup = CatalogueProductLookup()
        elif adapter == "fake":
            from ordering.products.fake_adapter import FakeProductLookup

            _current_lookup = FakeProductLookup()
        else:
            raise ValueError(f"Unknown catalogue adapter: {adapter}")
    return _current_lookup


def set_product_lookup(lookup: ProductLookup) -> None:
    """Override the active product lookup (useful for tests)."""
    global _current_lookup
    _current_lookup = lookup


def reset_product_lookup() -> None:
    global _current_lookup
    _current_lookup = None


__all__ = ["ProductLookup", "ProductRecord", "get_product_lookup", "set_product_lookup", "reset_product_lookup"]
