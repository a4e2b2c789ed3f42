"""
Command-line interface for dbml-codegen.

Parses arguments into GenerationOptions, runs the processor and reports
the outcome with rich formatting.
"""

from __future__ import annotations

import argparse
import sys
from typing import Any

from rich import box
from rich.console import Console
from rich.table import Table

from . import __version__
from .codegen.core.config import (
    CONTEXT_NAME_MODES,
    ConfigError,
    GenerationOptions,
    load_config,
)
from .codegen.processor import Processor, RunResult
from .codegen.registry import create_default_registry
from .errors import ErrorKind
from .logging_config import configure_logging, get_logger

logger = get_logger(__name__)

EXIT_OK = 0
EXIT_FAILURE = 1
EXIT_USAGE = 2


class CLIError(Exception):
    """Exception raised for CLI-related errors."""

    pass


class _ArgumentParser(argparse.ArgumentParser):
    """ArgumentParser that raises instead of exiting on bad arguments."""

    def error(self, message: str):
        raise CLIError(message)


def build_parser() -> argparse.ArgumentParser:
    parser = _ArgumentParser(
        prog="dbml-codegen",
        add_help=False,
        description="Generate Entity Framework C# code from a database schema",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  dbml-codegen --provider sqlite --database northwind.db --code Northwind.cs --repository
  dbml-codegen --provider sqlite --database northwind.db --export northwind.json
  dbml-codegen --schema-file northwind.json -l csharp --namespace Northwind.Data
  dbml-codegen --list-languages
        """.strip(),
    )

    input_group = parser.add_argument_group("input")
    input_group.add_argument("--provider", help="Schema provider (e.g. sqlite)")
    input_group.add_argument(
        "--database", metavar="CONN", help="Database file or connection string"
    )
    input_group.add_argument(
        "--schema-file", metavar="FILE", help="Read the schema from a description file"
    )

    output_group = parser.add_argument_group("output")
    output_group.add_argument(
        "--export",
        dest="export_file",
        metavar="FILE",
        help="Write the schema description to FILE instead of generating code",
    )
    output_group.add_argument(
        "--code",
        dest="output_name",
        metavar="FILE",
        help="Output name; its extension selects the generator",
    )
    output_group.add_argument(
        "--language", "-l", help="Target language (overrides the extension)"
    )
    output_group.add_argument(
        "--output-dir", "-o", metavar="DIR", help="Directory for generated files"
    )
    output_group.add_argument("--namespace", help="Namespace for generated code")
    output_group.add_argument(
        "--repository",
        dest="generate_repository",
        action="store_true",
        default=None,
        help="Also generate repository interface, implementation and mock",
    )

    schema_group = parser.add_argument_group("schema")
    schema_group.add_argument(
        "--schema",
        dest="include_schema_qualifier",
        action="store_true",
        default=None,
        help="Keep schema names in table names (dbo.Orders)",
    )
    schema_group.add_argument(
        "--sprocs",
        dest="include_stored_procedures",
        action="store_true",
        default=None,
        help="Load and generate stored procedures",
    )
    schema_group.add_argument(
        "--pluralize",
        action="store_true",
        default=None,
        help="Pluralize table members, singularize entity names",
    )
    schema_group.add_argument(
        "--case", help="Identifier case: leave, camel, pascal (anything else: net)"
    )
    schema_group.add_argument("--culture", help="Culture for names (default en-US)")
    schema_group.add_argument(
        "--context-name-mode",
        choices=CONTEXT_NAME_MODES,
        help="Derive the context class as <Name>Context or <Name>",
    )
    schema_group.add_argument(
        "--aliases",
        metavar="FILE",
        help="JSON file renaming tables and columns before names are formatted",
    )

    misc_group = parser.add_argument_group("general")
    misc_group.add_argument("--config", metavar="FILE", help="JSON configuration file")
    misc_group.add_argument(
        "--list-languages", action="store_true", help="List code generators and exit"
    )
    misc_group.add_argument(
        "--debug", action="store_true", default=None, help="Show full error details"
    )
    misc_group.add_argument(
        "--verbose", "-v", action="store_true", default=None, help="Verbose logging"
    )
    misc_group.add_argument("--help", "-h", action="store_true", help="Show this help")

    return parser


OPTION_ARGS = (
    "provider",
    "database",
    "schema_file",
    "export_file",
    "output_name",
    "language",
    "output_dir",
    "namespace",
    "generate_repository",
    "include_schema_qualifier",
    "include_stored_procedures",
    "pluralize",
    "case",
    "culture",
    "context_name_mode",
    "aliases",
    "debug",
    "verbose",
)


def build_options(args: argparse.Namespace) -> GenerationOptions:
    """Merge the config file (if any) with explicitly given arguments."""
    overrides = {name: getattr(args, name) for name in OPTION_ARGS}
    return load_config(config_file=args.config, overrides=overrides)


class CLIHandler:
    """Run a generation from parsed options and report the outcome."""

    def __init__(self, console: Console | None = None, processor: Processor | None = None):
        self.console = console or Console()
        self.processor = processor or Processor()

    def run(self, options: GenerationOptions) -> int:
        """
        Run one generation.

        Returns:
            Exit code (0 for success, 1 for failure).
        """
        try:
            result = self.processor.run(options)
        except Exception as e:
            if options.debug:
                logger.exception("dbml-codegen: %s", e)
            else:
                logger.error("dbml-codegen: %s", e)
            return EXIT_FAILURE

        return self._report(result)

    def _report(self, result: RunResult) -> int:
        if result.error_kind == ErrorKind.SCHEMA_INTEGRITY:
            for diagnostic in result.diagnostics:
                self.console.print(f"[red]✗[/red] {diagnostic}", soft_wrap=True)
            self.console.print(
                f"[red]✗ {len(result.diagnostics)} schema error(s); nothing generated[/red]"
            )
            return EXIT_FAILURE

        if not result.success:
            self.console.print(f"[red]✗ Error:[/red] {result.error_message}", soft_wrap=True)
            if result.written:
                self.console.print(
                    f"[yellow]⚠️  {len(result.written)} file(s) were written before the failure[/yellow]"
                )
            return EXIT_FAILURE

        for path in result.written:
            self.console.print(f"[green]✓[/green] {path}", soft_wrap=True)
        return EXIT_OK


def _list_languages(console: Console) -> int:
    """List built-in generators."""
    registry = create_default_registry()

    table = Table(title="📋 Code Generators", box=box.ROUNDED, title_style="bold cyan")
    table.add_column("Language", style="bold green", no_wrap=True)
    table.add_column("Extension", style="cyan")
    table.add_column("Generator Class", style="dim")
    table.add_column("Aliases", style="blue")

    for language in registry.list_languages():
        info = registry.get_language_info(language)
        aliases = ", ".join(info["aliases"]) if info["aliases"] else "[dim]none[/dim]"
        table.add_row(f"🔧 {info['name']}", info["file_extension"], info["class"], aliases)

    console.print(table)
    return EXIT_OK


def _print_usage(console: Console, parser: argparse.ArgumentParser, full: bool = True):
    text = parser.format_help() if full else parser.format_usage()
    console.print(text, markup=False, highlight=False)


def main(argv: list[str] | None = None, console: Console | None = None) -> int:
    """Entry point for the dbml-codegen command."""
    argv = sys.argv[1:] if argv is None else argv
    console = console or Console()
    parser = build_parser()

    console.print(f"[dim]dbml-codegen {__version__}[/dim]")

    try:
        args: Any = parser.parse_args(argv)
    except CLIError as e:
        console.print(f"[red]✗ Error:[/red] {e}")
        _print_usage(console, parser, full=False)
        return EXIT_USAGE

    if not argv or args.help:
        _print_usage(console, parser)
        return EXIT_OK

    configure_logging(verbose=bool(args.verbose), debug=bool(args.debug))

    if args.list_languages:
        return _list_languages(console)

    try:
        options = build_options(args)
    except ConfigError as e:
        console.print(f"[red]✗ Configuration error:[/red] {e}")
        _print_usage(console, parser, full=False)
        return EXIT_USAGE

    return CLIHandler(console).run(options)


if __name__ == "__main__":
    sys.exit(main())
