"""
Error taxonomy shared by the schema, generation and CLI layers.

Every failure a run can end with maps to one ErrorKind, which is what
RunResult reports back to callers.
"""

from enum import Enum
from typing import Any, List, Optional


class ErrorKind(Enum):
    """Categories of run-terminating failures."""

    CONFIGURATION = "configuration"
    SCHEMA_INTEGRITY = "schema_integrity"
    SCHEMA_RESOLUTION = "schema_resolution"
    EMISSION = "emission"


class DbmlCodegenError(Exception):
    """Base exception for all dbml-codegen errors."""

    kind: Optional[ErrorKind] = None


class ConfigurationError(DbmlCodegenError):
    """Malformed invocation, or no generator/loader for the requested target."""

    kind = ErrorKind.CONFIGURATION


class SchemaIntegrityViolation(DbmlCodegenError):
    """One or more associations break the cardinality/foreign-key rule."""

    kind = ErrorKind.SCHEMA_INTEGRITY

    def __init__(self, diagnostics: List[Any]):
        self.diagnostics = list(diagnostics)
        super().__init__(
            f"Schema has {len(self.diagnostics)} invalid association(s)"
        )


class SchemaResolutionDefect(DbmlCodegenError):
    """An association references a type or column that does not resolve."""

    kind = ErrorKind.SCHEMA_RESOLUTION


class EmissionError(DbmlCodegenError):
    """Writing or post-processing a single artifact failed."""

    kind = ErrorKind.EMISSION

    def __init__(self, filename: str, message: str):
        self.filename = filename
        super().__init__(f"Failed to write '{filename}': {message}")
