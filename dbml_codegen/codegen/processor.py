"""
Generation orchestrator.

Runs one generation: read the schema, validate its associations, derive
the artifact names, pick a generator, then write and normalize each
artifact in turn. Failures come back as a RunResult rather than as
exceptions.
"""

from pathlib import Path
from typing import List, Optional, Tuple

from ..errors import (
    ConfigurationError,
    DbmlCodegenError,
    EmissionError,
    ErrorKind,
    SchemaIntegrityViolation,
    SchemaResolutionDefect,
)
from ..logging_config import get_logger
from ..utils import load_name_aliases, load_schema_file, write_schema_file
from .core.config import GenerationOptions
from .core.generator import ArtifactGenerator, GenerationContext
from .core.naming import CONTEXT_TOKEN, ArtifactName, derive_artifact_names
from .core.postprocess import normalize_file
from .core.schema import Database
from .core.validation import Diagnostic, validate_associations
from .loaders import LoaderRegistry, SchemaLoader, create_default_loader_registry
from .registry import GeneratorRegistry, create_default_registry, resolve_generator

logger = get_logger(__name__)


class RunResult:
    """Outcome of one run: files written, diagnostics, and any error."""

    def __init__(
        self,
        written: Optional[List[Path]] = None,
        diagnostics: Optional[List[Diagnostic]] = None,
    ):
        self.written = written or []
        self.diagnostics = diagnostics or []
        self.error_kind: Optional[ErrorKind] = None
        self.error_message: Optional[str] = None
        self.exception: Optional[BaseException] = None

    @property
    def success(self) -> bool:
        return self.error_kind is None

    def fail(
        self,
        kind: ErrorKind,
        message: str,
        exception: Optional[BaseException] = None,
    ) -> "RunResult":
        self.error_kind = kind
        self.error_message = message
        self.exception = exception
        return self

    @classmethod
    def error(
        cls, kind: ErrorKind, message: str, exception: Optional[BaseException] = None
    ) -> "RunResult":
        return cls().fail(kind, message, exception)


class Processor:
    """Sequences validation, naming, dispatch, emission and post-processing."""

    def __init__(
        self,
        generators: Optional[GeneratorRegistry] = None,
        baseline: Optional[GeneratorRegistry] = None,
        loaders: Optional[LoaderRegistry] = None,
    ):
        """
        Args:
            generators: Plugin generators, searched first
            baseline: Built-in generators used when no plugin matches
            loaders: Schema loaders by provider
        """
        self.generators = generators or GeneratorRegistry()
        self.baseline = baseline or create_default_registry()
        self.loaders = loaders or create_default_loader_registry()

    def run(self, options: GenerationOptions) -> RunResult:
        """Read the schema, then export it or generate code from it."""
        try:
            database, loader = self.read_schema(options)
        except DbmlCodegenError as e:
            logger.error(str(e))
            return RunResult.error(e.kind or ErrorKind.CONFIGURATION, str(e), e)

        if options.export_file:
            return self.export_schema(database, options.export_file)

        return self.generate(database, options, loader)

    def read_schema(
        self, options: GenerationOptions
    ) -> Tuple[Database, Optional[SchemaLoader]]:
        """
        Load the schema from a description file or a live database.

        Returns:
            The schema, and the loader when one was needed

        Raises:
            ConfigurationError: If neither source is usable
        """
        if options.schema_file:
            logger.info(">>> Reading schema from file '%s'", options.schema_file)
            database = load_schema_file(options.schema_file)
            if options.aliases:
                logger.warning(
                    "Ignoring aliases from '%s': a schema file is already named",
                    options.aliases,
                )
            provider = options.provider or database.provider
            # The loader only contributes its vendor name here, so a provider
            # without a registered loader is not fatal
            loader = None
            if provider and self.loaders.is_supported(provider):
                loader = self.loaders.create(provider)
            database.provider = provider
            return database, loader

        if not options.database:
            raise ConfigurationError(
                "Nothing to read: give a schema file or a database to connect to"
            )

        loader = self.loaders.create(options.provider)
        aliases = load_name_aliases(options.aliases) if options.aliases else None
        logger.info(">>> Reading schema from %s database", loader.vendor_name)
        database = loader.load(
            options.database,
            options.name_format,
            options.include_stored_procedures,
            options.namespace,
            options.context_name_mode,
            aliases=aliases,
        )
        database.provider = options.provider
        database.sort()
        return database, loader

    def export_schema(self, database: Database, export_file: str) -> RunResult:
        """Write the schema description instead of generating code."""
        logger.info("<<< Writing file '%s'", export_file)
        try:
            path = write_schema_file(database, export_file)
        except OSError as e:
            logger.error("Failed to write %s: %s", export_file, e)
            return RunResult.error(ErrorKind.EMISSION, str(e), e)
        return RunResult(written=[path])

    def generate(
        self,
        database: Database,
        options: GenerationOptions,
        loader: Optional[SchemaLoader] = None,
    ) -> RunResult:
        """
        Generate every enabled artifact for a schema.

        Nothing is written unless the schema validates. A failing artifact
        stops the run; artifacts already written stay on disk.
        """
        try:
            validation = validate_associations(database)
        except SchemaResolutionDefect as e:
            logger.error("Malformed schema: %s", e)
            return RunResult.error(ErrorKind.SCHEMA_RESOLUTION, str(e), e)

        result = RunResult(diagnostics=validation.diagnostics)
        if not validation.is_valid:
            violation = SchemaIntegrityViolation(validation.diagnostics)
            return result.fail(ErrorKind.SCHEMA_INTEGRITY, str(violation), violation)

        if not database.class_name:
            return result.fail(
                ErrorKind.CONFIGURATION,
                f"Database '{database.name}' has no class name to derive file names from",
            )

        if not options.include_schema_qualifier:
            database.remove_schema_qualifiers()

        names = derive_artifact_names(database.class_name, options.generate_repository)
        if len(set(names.filenames)) < len(names):
            logger.warning(
                "Class name '%s' has no '%s' token; artifacts share file names "
                "and later ones overwrite earlier ones",
                database.class_name,
                CONTEXT_TOKEN,
            )

        try:
            generator_class = resolve_generator(
                self.generators,
                self.baseline,
                options.language,
                options.output_filename(database.name),
            )
        except ConfigurationError as e:
            logger.error(str(e))
            return result.fail(ErrorKind.CONFIGURATION, str(e), e)

        generator = generator_class(options)
        context = GenerationContext.from_options(
            options, loader.vendor_name if loader else None
        )
        output_dir = Path(options.output_dir)

        for artifact in names:
            try:
                path = self._emit(generator, artifact, database, context, output_dir)
            except Exception as e:
                error = EmissionError(artifact.filename, str(e))
                logger.error(str(error), exc_info=options.debug)
                return result.fail(ErrorKind.EMISSION, str(error), e)
            if path not in result.written:
                result.written.append(path)

        return result

    def _emit(
        self,
        generator: ArtifactGenerator,
        artifact: ArtifactName,
        database: Database,
        context: GenerationContext,
        output_dir: Path,
    ) -> Path:
        path = output_dir / artifact.filename
        logger.info("<<< Writing %s into file '%s'", artifact.kind.value, path)

        with path.open("w", encoding="utf-8", newline="") as stream:
            generator.write_artifact(artifact.kind, stream, database, context)

        normalize_file(path, widen_access=artifact.widen_access)
        return path


def generate_code(
    database: Database, options: Optional[GenerationOptions] = None
) -> RunResult:
    """Generate code for a schema with the built-in generators."""
    return Processor().generate(database, options or GenerationOptions())
