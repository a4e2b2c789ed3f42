"""
Association integrity checks run before any code is generated.

Every association must point at an existing table type and column, and a
many-valued side may not own the foreign key. All violations are
collected in one pass so a single run reports every defect.
"""

from dataclasses import dataclass, field
from typing import List, Optional

from ...errors import SchemaResolutionDefect
from ...logging_config import get_logger
from .schema import Association, Cardinality, Column, Database, Table, TableType

logger = get_logger(__name__)

FOREIGN_KEY_ON_MANY = "DBML1059"


@dataclass(frozen=True)
class Diagnostic:
    """A schema defect located at one association of one table type."""

    code: str
    message: str
    table_type: str
    association: str

    def __str__(self) -> str:
        return f"Error {self.code}: {self.message}"


@dataclass
class ValidationResult:
    """Verdict plus every diagnostic produced while validating."""

    diagnostics: List[Diagnostic] = field(default_factory=list)

    @property
    def is_valid(self) -> bool:
        return not self.diagnostics

    def __bool__(self) -> bool:
        return self.is_valid


def _single(matches: list, description: str):
    if len(matches) != 1:
        problem = "no" if not matches else f"{len(matches)}"
        raise SchemaResolutionDefect(f"Found {problem} {description}")
    return matches[0]


def resolve_other_type(database: Database, association: Association) -> TableType:
    """Return the one table type named by the association."""
    matches = [t.type for t in database.tables if t.type.name == association.type]
    return _single(
        matches,
        f"table type named '{association.type}' for association '{association.name}'",
    )


def resolve_other_column(other_type: TableType, association: Association) -> Column:
    """Return the one column of the related type named by OtherKey."""
    matches = [c for c in other_type.columns if c.member == association.other_key]
    return _single(
        matches,
        f"column '{association.other_key}' in type '{other_type.name}' "
        f"for association '{association.name}'",
    )


def find_reciprocal(
    table: Table, other_type: TableType, association: Association
) -> Optional[Association]:
    """Find the association on the other side pointing back at this one, if any."""
    for candidate in other_type.associations:
        if (
            candidate.type == table.type.name
            and candidate.this_key == association.other_key
        ):
            return candidate
    return None


def check_association(
    database: Database, table: Table, association: Association
) -> Optional[Diagnostic]:
    """
    Check a single association.

    Raises:
        SchemaResolutionDefect: If the related type or column doesn't resolve

    Returns:
        A diagnostic if the association violates the cardinality rule
    """
    other_type = resolve_other_type(database, association)
    resolve_other_column(other_type, association)

    # Looked up for completeness; a missing reciprocal doesn't affect the verdict
    if find_reciprocal(table, other_type, association) is None:
        logger.debug(
            "Association %s of %s has no reciprocal on %s",
            association.name,
            table.type.name,
            other_type.name,
        )

    if (
        association.cardinality_specified
        and association.cardinality == Cardinality.MANY
        and association.is_foreign_key
    ):
        return Diagnostic(
            code=FOREIGN_KEY_ON_MANY,
            message=(
                f"The IsForeignKey attribute of the Association element "
                f"'{association.name}' of the Type element '{table.type.name}' "
                f"cannot be '{association.is_foreign_key}' when the Cardinality "
                f"attribute is '{association.cardinality.value}'."
            ),
            table_type=table.type.name,
            association=association.name,
        )
    return None


def validate_associations(database: Database) -> ValidationResult:
    """
    Validate every association of every table.

    Args:
        database: Schema to check

    Returns:
        ValidationResult; invalid if any association breaks the rule

    Raises:
        SchemaResolutionDefect: If the schema model itself is malformed
    """
    result = ValidationResult()

    for table in database.tables:
        for association in table.type.associations:
            diagnostic = check_association(database, table, association)
            if diagnostic is not None:
                logger.error(str(diagnostic))
                result.diagnostics.append(diagnostic)

    return result
