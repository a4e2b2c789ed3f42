"""
C# code generator module.

Generates an Entity Framework context, entity classes and an optional
repository layer from a database schema.
"""

from .generator import CSharpGenerator
from .naming import escape_identifier
from .types import CSharpType, map_column_type, map_storage_type

__all__ = [
    "CSharpGenerator",
    "CSharpType",
    "escape_identifier",
    "map_column_type",
    "map_storage_type",
]
