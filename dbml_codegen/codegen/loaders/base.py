"""
Schema loader interface and provider registry.

A loader introspects a live database and builds the schema model. The
registry maps provider identifiers to loader classes; one is created per
run and handed to whoever needs it.
"""

from abc import ABC, abstractmethod
from typing import Dict, List, Optional, Type

from ...errors import ConfigurationError
from ..core.naming import NameAliases, NameFormat
from ..core.schema import Database


class SchemaLoader(ABC):
    """Reads a database schema into the schema model."""

    vendor_name: str = ""

    @abstractmethod
    def load(
        self,
        database: str,
        name_format: NameFormat,
        include_stored_procedures: bool = False,
        namespace: Optional[str] = None,
        context_name_mode: str = "context",
        aliases: Optional[NameAliases] = None,
    ) -> Database:
        """
        Load the schema of a database.

        Args:
            database: Connection string or database file
            name_format: Naming settings applied to loaded identifiers
            include_stored_procedures: Also load functions/procedures
            namespace: Namespace recorded on the model for generated code
            context_name_mode: "context" appends "Context" to the class name,
                "database" uses the database name as is
            aliases: Replacement table and column names

        Returns:
            Fully built Database
        """
        pass


class LoaderRegistry:
    """Maps provider identifiers (case-insensitive) to loader classes."""

    def __init__(self):
        self._loaders: Dict[str, Type[SchemaLoader]] = {}

    def register(
        self,
        provider: str,
        loader_class: Type[SchemaLoader],
        aliases: Optional[List[str]] = None,
    ):
        if not issubclass(loader_class, SchemaLoader):
            raise ConfigurationError("Loader class must inherit from SchemaLoader")

        for name in [provider] + list(aliases or []):
            self._loaders[name.lower()] = loader_class

    def is_supported(self, provider: str) -> bool:
        return provider.lower() in self._loaders

    def list_providers(self) -> List[str]:
        return sorted(self._loaders.keys())

    def create(self, provider: Optional[str]) -> SchemaLoader:
        """
        Instantiate the loader for a provider.

        Raises:
            ConfigurationError: If no provider is given or none is registered
        """
        if not provider or not self.is_supported(provider):
            available = ", ".join(self.list_providers()) or "none"
            given = f"'{provider}' is not supported" if provider else "none given"
            raise ConfigurationError(
                f"Please provide a schema provider ({given}). Available: {available}"
            )
        return self._loaders[provider.lower()]()


def create_default_loader_registry() -> LoaderRegistry:
    """Build a registry holding the built-in loaders."""
    from .sqlite import SqliteSchemaLoader

    registry = LoaderRegistry()
    registry.register("sqlite", SqliteSchemaLoader, aliases=["sqlite3"])
    return registry
