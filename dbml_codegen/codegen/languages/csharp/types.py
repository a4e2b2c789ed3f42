"""
C# type mapping for column storage types.

Storage types come either as CLR names (already usable, e.g.
"System.Int32") or as SQL declared types ("INTEGER", "varchar(50)").
"""

import re
from dataclasses import dataclass
from typing import Dict

from ...core.schema import Column

CLR_ALIASES: Dict[str, str] = {
    "System.Boolean": "bool",
    "System.Byte": "byte",
    "System.Byte[]": "byte[]",
    "System.Char": "char",
    "System.DateTime": "DateTime",
    "System.Decimal": "decimal",
    "System.Double": "double",
    "System.Guid": "Guid",
    "System.Int16": "short",
    "System.Int32": "int",
    "System.Int64": "long",
    "System.Single": "float",
    "System.String": "string",
}

SQL_TYPES: Dict[str, str] = {
    "bigint": "long",
    "binary": "byte[]",
    "bit": "bool",
    "blob": "byte[]",
    "bool": "bool",
    "boolean": "bool",
    "char": "string",
    "date": "DateTime",
    "datetime": "DateTime",
    "datetime2": "DateTime",
    "decimal": "decimal",
    "double": "double",
    "float": "double",
    "int": "int",
    "integer": "long",  # SQLite INTEGER is 64-bit
    "money": "decimal",
    "nchar": "string",
    "numeric": "decimal",
    "nvarchar": "string",
    "real": "double",
    "smallint": "short",
    "text": "string",
    "timestamp": "DateTime",
    "tinyint": "byte",
    "uniqueidentifier": "Guid",
    "varbinary": "byte[]",
    "varchar": "string",
}

VALUE_TYPES = {
    "bool", "byte", "char", "DateTime", "decimal", "double", "float", "Guid",
    "int", "long", "short",
}


@dataclass(frozen=True)
class CSharpType:
    name: str
    nullable: bool = False

    def __str__(self) -> str:
        return f"{self.name}?" if self.nullable else self.name


def map_storage_type(storage_type: str) -> str:
    """Map a declared storage type to a C# type name (object if unknown)."""
    if storage_type in CLR_ALIASES:
        return CLR_ALIASES[storage_type]
    if storage_type in CLR_ALIASES.values():
        return storage_type

    base = re.sub(r"\(.*\)", "", storage_type).strip().lower()
    return SQL_TYPES.get(base, "object")


def map_column_type(column: Column) -> CSharpType:
    """C# property type for a column; nullable value types get a '?'."""
    name = map_storage_type(column.storage_type)
    nullable = (
        column.can_be_null and not column.is_primary_key and name in VALUE_TYPES
    )
    return CSharpType(name, nullable)
