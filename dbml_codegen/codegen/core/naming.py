"""
Naming utilities for code generation.

Resolves the configured identifier-casing policy, converts identifiers
to it, holds user-supplied name aliases and derives the file names of
the generated artifacts from a database's base class name.
"""

import re
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, Iterator, List, Optional


class CasePolicy(Enum):
    """Naming case styles for generated identifiers."""

    LEAVE = "leave"  # as in the database
    CAMEL = "camel"  # orderDetail
    PASCAL = "pascal"  # OrderDetail
    NET = "net"  # OrderDetail, IOPort (platform convention)


def resolve_case(value: Optional[str]) -> CasePolicy:
    """
    Map a configuration string to a case policy.

    Empty or missing means PascalCase; unrecognized values fall back to
    the platform-conventional NET policy rather than raising.
    """
    if not value:
        return CasePolicy.PASCAL

    lowered = value.lower()
    if lowered == "leave":
        return CasePolicy.LEAVE
    elif lowered == "camel":
        return CasePolicy.CAMEL
    elif lowered == "pascal":
        return CasePolicy.PASCAL
    else:
        return CasePolicy.NET


def split_words(name: str) -> List[str]:
    """Split an identifier into words, keeping each word's original case."""
    # Anything that is not a letter or digit separates words
    cleaned = re.sub(r"[^a-zA-Z0-9]+", "_", name)

    # orderDetail -> order_Detail, HTTPServer -> HTTP_Server
    cleaned = re.sub(r"([a-z0-9])([A-Z])", r"\1_\2", cleaned)
    cleaned = re.sub(r"([A-Z]+)([A-Z][a-z])", r"\1_\2", cleaned)

    return [word for word in cleaned.split("_") if word]


def apply_case(name: str, policy: CasePolicy) -> str:
    """
    Convert an identifier to the given case policy.

    Args:
        name: Identifier as found in the database
        policy: Target case policy

    Returns:
        Converted identifier (unchanged for LEAVE or when nothing to split)
    """
    if policy == CasePolicy.LEAVE:
        return name

    words = split_words(name)
    if not words:
        return name

    if policy == CasePolicy.CAMEL:
        return words[0].lower() + "".join(w.capitalize() for w in words[1:])
    elif policy == CasePolicy.PASCAL:
        return "".join(w.capitalize() for w in words)
    else:
        # Two-letter acronyms stay upper case (IO, DB), longer ones are
        # Pascal-cased (Http)
        return "".join(
            w if w.isupper() and len(w) <= 2 else w.capitalize() for w in words
        )


@dataclass(frozen=True)
class NameFormat:
    """Naming settings for one run, consumed by loaders and generators."""

    pluralize: bool = False
    case: CasePolicy = CasePolicy.PASCAL
    culture: str = "en-US"

    def format(self, name: str) -> str:
        return apply_case(name, self.case)

    def same_identifier(self, left: str, right: str) -> bool:
        """Case-insensitive identifier comparison."""
        return _same_identifier(left, right)


def _same_identifier(left: str, right: str) -> bool:
    return left.casefold() == right.casefold()


def _lookup(mapping: Dict[str, Any], key: str) -> Any:
    for candidate, value in mapping.items():
        if _same_identifier(candidate, key):
            return value
    return None


@dataclass(frozen=True)
class NameAliases:
    """
    Replacement names for database tables and columns.

    Loaders apply an alias before pluralization and case formatting, so an
    alias is written the way the database name would be. Lookups ignore
    case, like SQL identifiers.
    """

    tables: Dict[str, str] = field(default_factory=dict)
    columns: Dict[str, Dict[str, str]] = field(default_factory=dict)  # table -> column -> alias

    def table(self, name: str) -> str:
        return _lookup(self.tables, name) or name

    def column(self, table: str, name: str) -> str:
        return _lookup(_lookup(self.columns, table) or {}, name) or name


# Artifact naming

CONTEXT_TOKEN = "Context"


class ArtifactKind(Enum):
    """Generated output files, in the order they are written."""

    CONTEXT = "context"
    ENTITIES = "entities"
    REPOSITORY_INTERFACE = "repository_interface"
    REPOSITORY = "repository"
    MOCK_REPOSITORY = "mock_repository"


@dataclass(frozen=True)
class ArtifactName:
    kind: ArtifactKind
    filename: str

    @property
    def widen_access(self) -> bool:
        """Only the entities file gets "internal static" opened up."""
        return self.kind == ArtifactKind.ENTITIES


class ArtifactNameSet:
    """Ordered file names for the artifacts of one run."""

    def __init__(self, names: List[ArtifactName]):
        self._names = list(names)

    def __iter__(self) -> Iterator[ArtifactName]:
        return iter(self._names)

    def __len__(self) -> int:
        return len(self._names)

    def __getitem__(self, kind: ArtifactKind) -> str:
        for name in self._names:
            if name.kind == kind:
                return name.filename
        raise KeyError(kind)

    def __contains__(self, kind: object) -> bool:
        return any(name.kind == kind for name in self._names)

    @property
    def filenames(self) -> List[str]:
        return [name.filename for name in self._names]


def derive_artifact_names(
    base_class: str, include_repository: bool = False
) -> ArtifactNameSet:
    """
    Derive artifact file names by replacing the "Context" token in the
    base class name.

    A base class without the token is not an error: every replacement is
    then a no-op and the context and entities names collide.

    Args:
        base_class: Database class name, e.g. "NorthwindContext"
        include_repository: Also name the repository interface,
            implementation and mock

    Returns:
        ArtifactNameSet in write order
    """
    names = [
        ArtifactName(
            ArtifactKind.CONTEXT, base_class.replace(CONTEXT_TOKEN, "EfContext.cs")
        ),
        ArtifactName(
            ArtifactKind.ENTITIES, base_class.replace(CONTEXT_TOKEN, "Entities.cs")
        ),
    ]

    if include_repository:
        repository = base_class.replace(CONTEXT_TOKEN, "Repository.cs")
        names.extend(
            [
                ArtifactName(ArtifactKind.REPOSITORY_INTERFACE, "I" + repository),
                ArtifactName(ArtifactKind.REPOSITORY, repository),
                ArtifactName(ArtifactKind.MOCK_REPOSITORY, "Mock" + repository),
            ]
        )

    return ArtifactNameSet(names)
