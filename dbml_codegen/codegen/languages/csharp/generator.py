"""
C# code generator implementation.

Renders the Entity Framework context, entity classes and the optional
repository layer from the schema model using Jinja2 templates.
"""

from pathlib import Path
from typing import Any, Dict, List, Optional

from ....logging_config import get_logger
from ...core.generator import (
    ArtifactGenerator,
    GenerationContext,
    GeneratorCapability,
    GeneratorError,
)
from ...core.naming import ArtifactKind, derive_artifact_names
from ...core.schema import Association, Cardinality, Database, Function, Table
from .naming import class_name_of, escape_identifier
from .types import map_column_type, map_storage_type

logger = get_logger(__name__)

TEMPLATES = {
    ArtifactKind.CONTEXT: "context.cs.j2",
    ArtifactKind.ENTITIES: "entities.cs.j2",
    ArtifactKind.REPOSITORY_INTERFACE: "repository_interface.cs.j2",
    ArtifactKind.REPOSITORY: "repository.cs.j2",
    ArtifactKind.MOCK_REPOSITORY: "mock_repository.cs.j2",
}


class CSharpGenerator(ArtifactGenerator):
    """Code generator for Entity Framework style C# data access code."""

    capability = GeneratorCapability("csharp", ".cs", aliases=("c#", "cs"))

    def get_template_directory(self) -> Optional[Path]:
        """Return the C# templates directory."""
        return Path(__file__).parent / "templates"

    def render_artifact(
        self, kind: ArtifactKind, database: Database, context: GenerationContext
    ) -> str:
        if kind not in TEMPLATES:
            raise GeneratorError(f"C# generator cannot render {kind}")

        template_context = self._build_context(database, context)
        logger.debug("Rendering %s for %s", TEMPLATES[kind], database.name)
        return self.render_template(TEMPLATES[kind], template_context)

    def _build_context(
        self, database: Database, context: GenerationContext
    ) -> Dict[str, Any]:
        names = derive_artifact_names(database.class_name, include_repository=True)
        options = context.options
        namespace = options.namespace or database.context_namespace or database.name

        functions: List[Function] = (
            database.functions if options.include_stored_procedures else []
        )

        return {
            "database": database,
            "namespace": namespace,
            "entity_namespace": options.namespace
            or database.entity_namespace
            or namespace,
            "context_class": class_name_of(names[ArtifactKind.CONTEXT]),
            "interface_class": class_name_of(names[ArtifactKind.REPOSITORY_INTERFACE]),
            "repository_class": class_name_of(names[ArtifactKind.REPOSITORY]),
            "mock_class": class_name_of(names[ArtifactKind.MOCK_REPOSITORY]),
            "entities": [self._entity_data(table) for table in database.tables],
            "functions": [self._function_data(f) for f in functions],
            "vendor": context.vendor_name or database.provider or "",
        }

    def _entity_data(self, table: Table) -> Dict[str, Any]:
        table_type = table.type
        keys = table_type.primary_keys

        return {
            "class_name": escape_identifier(table_type.name),
            "table_name": table.name,
            "set_name": escape_identifier(table.member),
            "key": escape_identifier(keys[0].member) if len(keys) == 1 else None,
            "columns": [
                {
                    "name": escape_identifier(column.member),
                    "column_name": column.name,
                    "type": str(map_column_type(column)),
                }
                for column in table_type.columns
            ],
            "collections": [
                self._navigation_data(a)
                for a in table_type.associations
                if self._is_collection(a)
            ],
            "references": [
                self._navigation_data(a)
                for a in table_type.associations
                if not self._is_collection(a)
            ],
        }

    def _is_collection(self, association: Association) -> bool:
        if association.cardinality_specified:
            return association.cardinality == Cardinality.MANY
        # An unspecified cardinality defaults to Many on the non-key side
        return not association.is_foreign_key

    def _navigation_data(self, association: Association) -> Dict[str, Any]:
        return {
            "name": escape_identifier(association.member or association.name),
            "type": escape_identifier(association.type),
        }

    def _function_data(self, function: Function) -> Dict[str, Any]:
        return {
            "name": function.name,
            "method": escape_identifier(function.method),
            "return_type": (
                map_storage_type(function.return_type)
                if function.return_type
                else "int"
            ),
            "parameters": [
                {
                    "name": escape_identifier(p.name.lstrip("@")),
                    "type": map_storage_type(p.type),
                }
                for p in function.parameters
            ],
        }
