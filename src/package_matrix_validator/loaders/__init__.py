"""File and resource loading utilities.

Key modules:
    - catalog: Built-in and YAML image catalogs
"""

from .catalog import CatalogError, default_catalog, load_catalog

__all__ = [
    "CatalogError",
    "default_catalog",
    "load_catalog",
]
