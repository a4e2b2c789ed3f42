"""
Core schema representation for code generation.

In-memory model of a database: tables, their row types, columns,
associations and stored functions. Loaders and the schema-file reader
build it once; validation and generators only read it.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import List, Optional


class Cardinality(Enum):
    """How many rows the related side of an association yields."""

    ONE = "One"
    MANY = "Many"


@dataclass
class Column:
    """A single column of a table type."""

    member: str
    storage_type: str
    name: Optional[str] = None
    is_primary_key: bool = False
    can_be_null: bool = True

    def __post_init__(self):
        if self.name is None:
            self.name = self.member


@dataclass
class Association:
    """A declared relationship from one table type to another."""

    name: str
    type: str  # Name of the related TableType
    this_key: str
    other_key: str
    cardinality: Optional[Cardinality] = None
    is_foreign_key: bool = False
    member: Optional[str] = None

    @property
    def cardinality_specified(self) -> bool:
        """True when cardinality was declared, even if declared as One."""
        return self.cardinality is not None


@dataclass
class TableType:
    """Row type of a table."""

    name: str
    columns: List[Column] = field(default_factory=list)
    associations: List[Association] = field(default_factory=list)

    @property
    def primary_keys(self) -> List[Column]:
        return [column for column in self.columns if column.is_primary_key]


@dataclass
class Table:
    """A table, possibly schema-qualified (e.g. "dbo.Customers")."""

    name: str
    type: TableType
    member: Optional[str] = None

    def __post_init__(self):
        if self.member is None:
            self.member = self.unqualified_name

    @property
    def unqualified_name(self) -> str:
        return self.name.split(".")[-1]


@dataclass
class Parameter:
    """A stored procedure/function parameter."""

    name: str
    type: str
    direction: str = "In"


@dataclass
class Function:
    """A stored procedure or function exposed by the database."""

    name: str
    method: str
    is_composable: bool = False
    parameters: List[Parameter] = field(default_factory=list)
    return_type: Optional[str] = None


@dataclass
class Database:
    """Root of the schema model."""

    name: str
    class_name: str = ""
    provider: Optional[str] = None
    tables: List[Table] = field(default_factory=list)
    functions: List[Function] = field(default_factory=list)
    context_namespace: Optional[str] = None
    entity_namespace: Optional[str] = None

    def sort(self):
        """
        Stable-sort tables by type name, columns by member and functions
        by method name.
        """
        self.tables.sort(key=lambda t: t.type.name)
        for table in self.tables:
            table.type.columns.sort(key=lambda c: c.member)
        self.functions.sort(key=lambda f: f.method)

    def remove_schema_qualifiers(self):
        """Drop the schema part of every table name ("dbo.Orders" -> "Orders")."""
        for table in self.tables:
            table.name = table.unqualified_name
