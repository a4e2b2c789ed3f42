"""
Base generator interface for all code generation targets.

Defines the capability descriptor the registry dispatches on and the
per-artifact emission contract the orchestrator drives.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, Optional, TextIO, Tuple

from .config import GenerationOptions
from .naming import ArtifactKind, NameFormat
from .schema import Database
from .templates import TemplateEngine, create_template_engine


class GeneratorError(Exception):
    """Base exception for code generation errors."""

    pass


@dataclass(frozen=True)
class GeneratorCapability:
    """What a generator declares it can produce."""

    language_code: str
    file_extension: str
    aliases: Tuple[str, ...] = ()

    def matches_language(self, language: str) -> bool:
        wanted = language.lower()
        return wanted == self.language_code.lower() or wanted in (
            alias.lower() for alias in self.aliases
        )

    def matches_extension(self, extension: str) -> bool:
        return extension.lower() == self.file_extension.lower()


@dataclass(frozen=True)
class GenerationContext:
    """Read-only settings shared by every artifact of a run."""

    options: GenerationOptions
    name_format: NameFormat
    vendor_name: Optional[str] = None

    @classmethod
    def from_options(
        cls, options: GenerationOptions, vendor_name: Optional[str] = None
    ) -> "GenerationContext":
        return cls(options, options.name_format, vendor_name)


class CodeGenerator(ABC):
    """Abstract base class for all code generators."""

    capability: GeneratorCapability

    def __init__(self, options: Optional[GenerationOptions] = None):
        """Initialize generator with optional run options."""
        self.options = options or GenerationOptions()
        self._template_engine = None

    def get_template_directory(self) -> Optional[Path]:
        """
        Return the directory containing templates for this generator.

        Subclasses should override this to provide their template directory.
        Return None for a generator that renders without template files.
        """
        return None

    @property
    def template_engine(self) -> TemplateEngine:
        """Get the template engine for this generator."""
        if self._template_engine is None:
            self._template_engine = create_template_engine(
                self.get_template_directory()
            )
        return self._template_engine

    def render_template(self, template_name: str, context: Dict[str, Any]) -> str:
        return self.template_engine.render_template(template_name, context)


class ArtifactGenerator(CodeGenerator):
    """Generator able to emit each artifact of the context/entities family."""

    @abstractmethod
    def render_artifact(
        self, kind: ArtifactKind, database: Database, context: GenerationContext
    ) -> str:
        """
        Render one artifact.

        Args:
            kind: Which artifact to render
            database: Validated schema
            context: Run-wide settings

        Returns:
            Source text of the artifact
        """
        pass

    def write_artifact(
        self,
        kind: ArtifactKind,
        stream: TextIO,
        database: Database,
        context: GenerationContext,
    ):
        """Render one artifact into an already opened output stream."""
        stream.write(self.render_artifact(kind, database, context))
