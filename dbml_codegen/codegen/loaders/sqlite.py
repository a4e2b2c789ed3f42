"""
SQLite schema loader.

Reads tables, columns and foreign keys through sqlite_master and the
table_info / foreign_key_list pragmas. Every foreign key becomes a pair
of associations: a single-valued one owning the key on the child table,
and a many-valued one on the parent.
"""

import re
import sqlite3
from contextlib import closing
from pathlib import Path
from typing import Dict, List, Optional

from pluralizer import Pluralizer

from ...errors import ConfigurationError
from ...logging_config import get_logger
from ..core.naming import NameAliases, NameFormat
from ..core.schema import Association, Cardinality, Column, Database, Table, TableType
from .base import SchemaLoader

logger = get_logger(__name__)

_pluralizer = Pluralizer()

# customer_id -> customer, ParentID -> Parent
_KEY_SUFFIX = re.compile(r"(?:(?i:_id)|(?<=[a-z0-9])I[dD])$")


class SqliteSchemaLoader(SchemaLoader):
    """Loads the schema of a SQLite database file."""

    vendor_name = "SQLite"

    def load(
        self,
        database: str,
        name_format: NameFormat,
        include_stored_procedures: bool = False,
        namespace: Optional[str] = None,
        context_name_mode: str = "context",
        aliases: Optional[NameAliases] = None,
    ) -> Database:
        path = Path(database.replace('"', ""))
        if not path.exists():
            raise ConfigurationError(f"SQLite database not found: {path}")

        aliases = aliases or NameAliases()
        name = path.stem
        class_name = name_format.format(name)
        if context_name_mode == "context":
            class_name += "Context"

        schema = Database(
            name=name,
            class_name=class_name,
            provider="sqlite",
            context_namespace=namespace,
            entity_namespace=namespace,
        )

        with closing(sqlite3.connect(str(path))) as connection:
            table_names = self._table_names(connection)
            tables = {
                table_name: self._load_table(connection, table_name, name_format, aliases)
                for table_name in table_names
            }
            for table_name in table_names:
                self._load_foreign_keys(connection, table_name, tables, name_format, aliases)

        schema.tables = [tables[table_name] for table_name in table_names]

        if include_stored_procedures:
            logger.info("SQLite has no stored procedures; none loaded")

        logger.debug("Loaded %d table(s) from %s", len(schema.tables), path)
        return schema

    def _table_names(self, connection: sqlite3.Connection) -> List[str]:
        rows = connection.execute(
            "SELECT name FROM sqlite_master "
            "WHERE type = 'table' AND name NOT LIKE 'sqlite_%' ORDER BY name"
        ).fetchall()
        return [row[0] for row in rows]

    def _load_table(
        self,
        connection: sqlite3.Connection,
        table_name: str,
        name_format: NameFormat,
        aliases: NameAliases,
    ) -> Table:
        source = aliases.table(table_name)
        if name_format.pluralize:
            type_name = name_format.format(_pluralizer.singular(source))
            member = name_format.format(_pluralizer.plural(source))
        else:
            type_name = member = name_format.format(source)

        columns = []
        for _cid, column_name, declared_type, not_null, _default, pk in connection.execute(
            f"PRAGMA table_info({_quote(table_name)})"
        ):
            columns.append(
                Column(
                    member=name_format.format(aliases.column(table_name, column_name)),
                    storage_type=declared_type or "TEXT",
                    name=column_name,
                    is_primary_key=pk > 0,
                    can_be_null=not not_null and pk == 0,
                )
            )

        return Table(name=table_name, type=TableType(type_name, columns), member=member)

    def _load_foreign_keys(
        self,
        connection: sqlite3.Connection,
        table_name: str,
        tables: Dict[str, Table],
        name_format: NameFormat,
        aliases: NameAliases,
    ):
        child = tables[table_name]
        rows = connection.execute(
            f"PRAGMA foreign_key_list({_quote(table_name)})"
        ).fetchall()

        by_id: Dict[int, list] = {}
        for row in rows:
            by_id.setdefault(row[0], []).append(row)

        # foreign_key_list numbers keys from the last declared; name in column order
        positions = {
            column.name.casefold(): i for i, column in enumerate(child.type.columns)
        }

        def column_order(item):
            fk_id, fk_rows = item
            return positions.get(fk_rows[0][3].casefold(), len(positions)), fk_id

        ordered = sorted(by_id.items(), key=column_order)

        for fk_id, fk_rows in ordered:
            if len(fk_rows) > 1:
                logger.warning(
                    "Skipping composite foreign key %d on %s", fk_id, table_name
                )
                continue

            # REFERENCES keeps the spelling of the DDL, which may differ in case
            _id, _seq, parent_name, from_column, to_column = fk_rows[0][:5]
            parent = self._find_table(tables, parent_name, name_format)
            if parent is None:
                logger.warning(
                    "Skipping foreign key on %s to unknown table %s",
                    table_name,
                    parent_name,
                )
                continue

            this_key = self._member_of(child.type, from_column, name_format)
            other_key = self._member_of(parent.type, to_column, name_format)
            if this_key is None or other_key is None:
                logger.warning(
                    "Skipping foreign key %d on %s: unresolved key columns",
                    fk_id,
                    table_name,
                )
                continue

            key_column = aliases.column(table_name, from_column)
            stripped = _KEY_SUFFIX.sub("", key_column)
            label = name_format.format(stripped or key_column)

            # customer_id -> Customer; billed_to -> the parent type name
            reference = label if stripped != key_column and stripped else parent.type.name
            if self._is_taken(child.type, reference, name_format):
                reference = name_format.format(f"{parent.type.name}_by_{label}")
            reference = self._unique_member(child.type, reference, name_format)

            collection = child.member
            if self._is_taken(parent.type, collection, name_format):
                collection = name_format.format(f"{child.member}_by_{label}")
            collection = self._unique_member(parent.type, collection, name_format)

            name = f"FK_{table_name}_{parent.name}_{fk_id}"
            child.type.associations.append(
                Association(
                    name=name,
                    type=parent.type.name,
                    this_key=this_key,
                    other_key=other_key,
                    cardinality=Cardinality.ONE,
                    is_foreign_key=True,
                    member=reference,
                )
            )
            parent.type.associations.append(
                Association(
                    name=name,
                    type=child.type.name,
                    this_key=other_key,
                    other_key=this_key,
                    cardinality=Cardinality.MANY,
                    is_foreign_key=False,
                    member=collection,
                )
            )

    def _find_table(
        self, tables: Dict[str, Table], name: str, name_format: NameFormat
    ) -> Optional[Table]:
        for table_name, table in tables.items():
            if name_format.same_identifier(table_name, name):
                return table
        return None

    def _member_of(
        self, table_type: TableType, column_name: Optional[str], name_format: NameFormat
    ) -> Optional[str]:
        """Member for a database column name; None means the primary key."""
        if column_name is None:
            keys = table_type.primary_keys
            return keys[0].member if len(keys) == 1 else None
        for column in table_type.columns:
            if name_format.same_identifier(column.name, column_name):
                return column.member
        return None

    def _is_taken(
        self, table_type: TableType, member: str, name_format: NameFormat
    ) -> bool:
        taken = [table_type.name]
        taken += [column.member for column in table_type.columns]
        taken += [a.member for a in table_type.associations if a.member]
        return any(name_format.same_identifier(member, t) for t in taken)

    def _unique_member(
        self, table_type: TableType, wanted: str, name_format: NameFormat
    ) -> str:
        """
        A member name not yet used by the type, its columns or its
        navigation properties (C# forbids both kinds of clash).
        """
        candidate = wanted
        suffix = 2
        while self._is_taken(table_type, candidate, name_format):
            candidate = f"{wanted}{suffix}"
            suffix += 1
        return candidate


def _quote(identifier: str) -> str:
    return '"' + identifier.replace('"', '""') + '"'
