"""
Generator registry system for managing available code generators.

Generators are looked up by their declared capability: a language code
(or alias) when one is requested, otherwise the output file extension.
Registries are plain values built per run; there is no global instance.
"""

from pathlib import Path
from typing import Dict, List, Optional, Type

from ..errors import ConfigurationError
from ..logging_config import get_logger
from .core.generator import ArtifactGenerator, CodeGenerator

logger = get_logger(__name__)


class RegistryError(ConfigurationError):
    """Exception raised for registry-related errors."""

    pass


class GeneratorRegistry:
    """Registry for managing available code generators."""

    def __init__(self):
        """Initialize empty registry."""
        self._generators: Dict[str, Type[CodeGenerator]] = {}

    def register(self, generator_class: Type[CodeGenerator], replace: bool = False):
        """
        Register a generator class under its capability's language code.

        Args:
            generator_class: Generator class implementing CodeGenerator
            replace: If True, replace existing registration. If False, skip if exists.

        Raises:
            RegistryError: If generator class is invalid
        """
        if not isinstance(generator_class, type) or not issubclass(
            generator_class, CodeGenerator
        ):
            raise RegistryError("Generator class must inherit from CodeGenerator")

        capability = getattr(generator_class, "capability", None)
        if capability is None:
            raise RegistryError(
                f"{generator_class.__name__} does not declare a capability"
            )

        key = capability.language_code.lower()
        if key in self._generators and not replace:
            return

        self._generators[key] = generator_class
        logger.debug(
            "Registered %s for %s (%s)",
            generator_class.__name__,
            capability.language_code,
            capability.file_extension,
        )

    def __iter__(self):
        return iter(self._generators.values())

    def __len__(self) -> int:
        return len(self._generators)

    def find_by_language(self, language: str) -> Optional[Type[CodeGenerator]]:
        """
        Find the generator whose language code or alias matches.

        Returns:
            The generator class, or None if nothing matches

        Raises:
            RegistryError: If more than one generator matches
        """
        matches = [g for g in self if g.capability.matches_language(language)]
        return self._single(matches, f"language '{language}'")

    def find_by_extension(self, extension: str) -> Optional[Type[CodeGenerator]]:
        """
        Find the generator producing files with this extension (case-insensitive).

        Raises:
            RegistryError: If more than one generator matches
        """
        matches = [g for g in self if g.capability.matches_extension(extension)]
        return self._single(matches, f"extension '{extension}'")

    def find(
        self, language: Optional[str], filename: str
    ) -> Optional[Type[CodeGenerator]]:
        """
        Find a generator for the requested language, or by the filename's
        extension when no language is requested.
        """
        if language:
            return self.find_by_language(language)
        return self.find_by_extension(Path(filename).suffix)

    def _single(
        self, matches: List[Type[CodeGenerator]], description: str
    ) -> Optional[Type[CodeGenerator]]:
        if len(matches) > 1:
            names = ", ".join(sorted(g.__name__ for g in matches))
            raise RegistryError(f"Ambiguous generator for {description}: {names}")
        return matches[0] if matches else None

    def list_languages(self) -> List[str]:
        """Get list of registered language codes."""
        return sorted(self._generators.keys())

    def get_language_info(self, language: str) -> Dict[str, object]:
        """
        Get information about a registered language.

        Raises:
            RegistryError: If language not found
        """
        generator_class = self.find_by_language(language)
        if generator_class is None:
            raise RegistryError(
                f"No generator registered for language: {language}. "
                f"Available: {', '.join(self.list_languages())}"
            )

        capability = generator_class.capability
        return {
            "name": capability.language_code,
            "class": generator_class.__name__,
            "file_extension": capability.file_extension,
            "aliases": list(capability.aliases),
            "module": generator_class.__module__,
            "artifacts": issubclass(generator_class, ArtifactGenerator),
        }


def create_default_registry() -> GeneratorRegistry:
    """Build a registry holding the built-in generators."""
    from .languages.csharp import CSharpGenerator

    registry = GeneratorRegistry()
    registry.register(CSharpGenerator)
    return registry


def resolve_generator(
    plugins: GeneratorRegistry,
    baseline: GeneratorRegistry,
    language: Optional[str],
    filename: str,
) -> Type[ArtifactGenerator]:
    """
    Pick the generator for a run.

    Plugins are searched first; if none matches, the baseline registry is
    searched with the same criteria.

    Raises:
        ConfigurationError: If nothing matches, the match is ambiguous, or
            the generator cannot emit artifacts
    """
    generator_class = plugins.find(language, filename)
    if generator_class is None:
        generator_class = baseline.find(language, filename)

    if generator_class is None:
        target = f"language '{language}'" if language else f"file '{filename}'"
        available = sorted(set(plugins.list_languages() + baseline.list_languages()))
        raise ConfigurationError(
            f"No code generator found for {target}. "
            f"Available: {', '.join(available) or 'none'}"
        )

    if not issubclass(generator_class, ArtifactGenerator):
        raise ConfigurationError(
            f"Wrong code generator {generator_class.__name__}: "
            f"it cannot write context/entity artifacts"
        )

    return generator_class
