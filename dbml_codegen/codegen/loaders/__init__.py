"""
Schema loaders for live databases.
"""

from .base import LoaderRegistry, SchemaLoader, create_default_loader_registry
from .sqlite import SqliteSchemaLoader

__all__ = [
    "LoaderRegistry",
    "SchemaLoader",
    "SqliteSchemaLoader",
    "create_default_loader_registry",
]
