"""
Core code generation components.

Provides the schema model, naming, validation and post-processing used by
the processor and by every language generator.
"""

from .generator import (
    ArtifactGenerator,
    CodeGenerator,
    GenerationContext,
    GeneratorCapability,
    GeneratorError,
)
from .schema import (
    Association,
    Cardinality,
    Column,
    Database,
    Function,
    Parameter,
    Table,
    TableType,
)
from .naming import (
    ArtifactKind,
    ArtifactName,
    ArtifactNameSet,
    CasePolicy,
    NameFormat,
    derive_artifact_names,
    resolve_case,
)
from .validation import Diagnostic, ValidationResult, validate_associations
from .postprocess import normalize_file, normalize_text
from .config import GenerationOptions, ConfigManager, ConfigError, load_config
from .templates import TemplateEngine, TemplateError, create_template_engine

__all__ = [
    # Base generator interface
    "ArtifactGenerator",
    "CodeGenerator",
    "GenerationContext",
    "GeneratorCapability",
    "GeneratorError",
    # Schema model
    "Association",
    "Cardinality",
    "Column",
    "Database",
    "Function",
    "Parameter",
    "Table",
    "TableType",
    # Naming
    "ArtifactKind",
    "ArtifactName",
    "ArtifactNameSet",
    "CasePolicy",
    "NameFormat",
    "derive_artifact_names",
    "resolve_case",
    # Validation
    "Diagnostic",
    "ValidationResult",
    "validate_associations",
    # Post-processing
    "normalize_file",
    "normalize_text",
    # Configuration system
    "GenerationOptions",
    "ConfigManager",
    "ConfigError",
    "load_config",
    # Template system
    "TemplateEngine",
    "TemplateError",
    "create_template_engine",
]
