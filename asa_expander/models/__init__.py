"""Configuration object models."""
from asa_expander.models.catalog import ObjectCatalog, find_reference

__all__ = [
    "ObjectCatalog",
    "find_reference",
]
