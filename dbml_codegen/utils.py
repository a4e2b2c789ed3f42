"""Utility functions for reading and writing schema description files.

A schema description is a JSON document mirroring the schema model. It
lets a schema be exported once from a live database and regenerated
later without a connection. Name alias files are read here as well.
"""

import json
import os
import tempfile
from pathlib import Path
from typing import Any, Dict

from .codegen.core.naming import NameAliases
from .codegen.core.schema import (
    Association,
    Cardinality,
    Column,
    Database,
    Function,
    Parameter,
    Table,
    TableType,
)
from .errors import ConfigurationError
from .logging_config import get_logger

logger = get_logger(__name__)


class SchemaFileError(ConfigurationError):
    """Custom exception for schema description loading errors."""

    pass


def load_schema_file(file_path: str | Path) -> Database:
    """Load a schema description from a JSON file.

    Args:
        file_path: Path to the schema description.

    Returns:
        The Database it describes.

    Raises:
        SchemaFileError: If the file is missing, unreadable, not JSON, or
            not a valid schema description.
    """
    file_path = Path(file_path)
    logger.debug("Reading schema description from %s", file_path)

    if not file_path.exists():
        logger.error("File not found: %s", file_path)
        raise SchemaFileError(f"Schema file not found: {file_path}")

    try:
        with file_path.open("r", encoding="utf-8") as f:
            data = json.load(f)
    except json.JSONDecodeError as e:
        raise SchemaFileError(f"Invalid JSON in schema file {file_path}: {e}") from e
    except OSError as e:
        raise SchemaFileError(f"Error reading schema file {file_path}: {e}") from e

    try:
        return schema_from_dict(data)
    except (KeyError, TypeError, ValueError) as e:
        raise SchemaFileError(f"Invalid schema description in {file_path}: {e}") from e


def schema_from_dict(data: Dict[str, Any]) -> Database:
    """Build a Database from its JSON description."""
    if not isinstance(data, dict):
        raise TypeError("schema description must be a JSON object")

    return Database(
        name=data["name"],
        class_name=data.get("class", ""),
        provider=data.get("provider"),
        context_namespace=data.get("contextNamespace"),
        entity_namespace=data.get("entityNamespace"),
        tables=[_table_from_dict(t) for t in data.get("tables", [])],
        functions=[_function_from_dict(f) for f in data.get("functions", [])],
    )


def _table_from_dict(data: Dict[str, Any]) -> Table:
    type_data = data["type"]
    table_type = TableType(
        name=type_data["name"],
        columns=[
            Column(
                member=c["member"],
                storage_type=c["type"],
                name=c.get("name"),
                is_primary_key=c.get("isPrimaryKey", False),
                can_be_null=c.get("canBeNull", True),
            )
            for c in type_data.get("columns", [])
        ],
        associations=[
            Association(
                name=a["name"],
                type=a["type"],
                this_key=a["thisKey"],
                other_key=a["otherKey"],
                cardinality=Cardinality(a["cardinality"]) if a.get("cardinality") else None,
                is_foreign_key=a.get("isForeignKey", False),
                member=a.get("member"),
            )
            for a in type_data.get("associations", [])
        ],
    )
    return Table(name=data["name"], type=table_type, member=data.get("member"))


def _function_from_dict(data: Dict[str, Any]) -> Function:
    return Function(
        name=data["name"],
        method=data.get("method", data["name"]),
        is_composable=data.get("isComposable", False),
        parameters=[
            Parameter(p["name"], p["type"], p.get("direction", "In"))
            for p in data.get("parameters", [])
        ],
        return_type=data.get("returnType"),
    )


def dump_schema(database: Database) -> Dict[str, Any]:
    """Describe a Database as a JSON-serializable dict."""
    return {
        "name": database.name,
        "class": database.class_name,
        "provider": database.provider,
        "contextNamespace": database.context_namespace,
        "entityNamespace": database.entity_namespace,
        "tables": [
            {
                "name": table.name,
                "member": table.member,
                "type": {
                    "name": table.type.name,
                    "columns": [
                        {
                            "member": c.member,
                            "name": c.name,
                            "type": c.storage_type,
                            "isPrimaryKey": c.is_primary_key,
                            "canBeNull": c.can_be_null,
                        }
                        for c in table.type.columns
                    ],
                    "associations": [
                        {
                            "name": a.name,
                            "member": a.member,
                            "type": a.type,
                            "thisKey": a.this_key,
                            "otherKey": a.other_key,
                            "cardinality": a.cardinality.value if a.cardinality else None,
                            "isForeignKey": a.is_foreign_key,
                        }
                        for a in table.type.associations
                    ],
                },
            }
            for table in database.tables
        ],
        "functions": [
            {
                "name": f.name,
                "method": f.method,
                "isComposable": f.is_composable,
                "returnType": f.return_type,
                "parameters": [
                    {"name": p.name, "type": p.type, "direction": p.direction}
                    for p in f.parameters
                ],
            }
            for f in database.functions
        ],
    }


def write_schema_file(database: Database, file_path: str | Path) -> Path:
    """Write a schema description, replacing the target only once complete.

    Args:
        database: Schema to describe.
        file_path: Destination file.

    Returns:
        The path written.
    """
    file_path = Path(file_path)
    directory = file_path.parent if str(file_path.parent) else Path(".")
    content = json.dumps(dump_schema(database), indent=2, ensure_ascii=False)

    fd, temp_name = tempfile.mkstemp(
        prefix=f".{file_path.name}.", suffix=".tmp", dir=directory
    )
    try:
        with os.fdopen(fd, "w", encoding="utf-8") as f:
            f.write(content)
            f.write("\n")
        os.replace(temp_name, file_path)
    except BaseException:
        Path(temp_name).unlink(missing_ok=True)
        raise

    logger.info("Wrote schema description to %s", file_path)
    return file_path


class AliasFileError(ConfigurationError):
    """Custom exception for name alias file errors."""

    pass


def load_name_aliases(file_path: str | Path) -> NameAliases:
    """Load table and column aliases from a JSON file.

    The file holds a "tables" object mapping table names to aliases and a
    "columns" object mapping table names to column-to-alias objects.

    Args:
        file_path: Path to the alias file.

    Returns:
        The NameAliases it describes.

    Raises:
        AliasFileError: If the file is missing, not JSON, or malformed.
    """
    file_path = Path(file_path)
    logger.debug("Reading name aliases from %s", file_path)

    if not file_path.exists():
        logger.error("File not found: %s", file_path)
        raise AliasFileError(f"Alias file not found: {file_path}")

    try:
        with file_path.open("r", encoding="utf-8") as f:
            data = json.load(f)
    except json.JSONDecodeError as e:
        raise AliasFileError(f"Invalid JSON in alias file {file_path}: {e}") from e
    except OSError as e:
        raise AliasFileError(f"Error reading alias file {file_path}: {e}") from e

    if not isinstance(data, dict):
        raise AliasFileError(f"Alias file {file_path} must contain a JSON object")

    unknown = sorted(set(data) - {"tables", "columns"})
    if unknown:
        raise AliasFileError(
            f"Unknown keys in alias file {file_path}: {', '.join(unknown)}"
        )

    tables = data.get("tables", {})
    if not _is_name_map(tables):
        raise AliasFileError(f'"tables" in {file_path} must map names to names')

    columns = data.get("columns", {})
    if not isinstance(columns, dict) or not all(
        isinstance(table, str) and _is_name_map(names)
        for table, names in columns.items()
    ):
        raise AliasFileError(
            f'"columns" in {file_path} must map table names to name objects'
        )

    return NameAliases(tables=dict(tables), columns={t: dict(c) for t, c in columns.items()})


def _is_name_map(value: Any) -> bool:
    return isinstance(value, dict) and all(
        isinstance(k, str) and isinstance(v, str) and v for k, v in value.items()
    )
