"""
dbml-codegen Code Generation Module

Validates a database schema and generates Entity Framework artifacts
from it through pluggable language generators.
"""

from .registry import (
    GeneratorRegistry,
    RegistryError,
    create_default_registry,
    resolve_generator,
)
from .core.generator import ArtifactGenerator, CodeGenerator, GenerationContext
from .core.schema import (
    Association,
    Cardinality,
    Column,
    Database,
    Function,
    Parameter,
    Table,
    TableType,
)
from .core.config import GenerationOptions, ConfigManager, load_config
from .core.validation import Diagnostic, validate_associations

# Export main interfaces
__all__ = [
    "GeneratorRegistry",
    "RegistryError",
    "create_default_registry",
    "resolve_generator",
    "ArtifactGenerator",
    "CodeGenerator",
    "GenerationContext",
    "Association",
    "Cardinality",
    "Column",
    "Database",
    "Function",
    "Parameter",
    "Table",
    "TableType",
    "GenerationOptions",
    "ConfigManager",
    "load_config",
    "Diagnostic",
    "validate_associations",
]
