"""
Language frontend contracts.

The build core never parses or binds source itself. It talks to a frontend
through the classes below: documents (syntax trees), compilations (bound tree
sets), semantic models (per-tree symbol queries) and the emitter.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import List, NamedTuple, Optional, Sequence, Tuple

from tree_sitter import Node

from .tree_sitter_support import TreeSitterDocument
from ..types import OutputKind, Platform, TargetVersion


class SymbolKind(str, Enum):
    MODULE = "module"
    CLASS = "class"
    FUNCTION = "function"
    VARIABLE = "variable"
    IMPORT = "import"       # name bound by an import statement
    EXTERNAL = "external"   # member of a module outside the corpus


@dataclass(frozen=True)
class TypeSymbol:
    """
    Normalized symbol identity.

    Equality and hashing use the qualified name only, so symbols produced by
    different compilations of the same sources compare equal.
    """
    qualified_name: str
    kind: SymbolKind = field(default=SymbolKind.CLASS, compare=False)

    @property
    def name(self) -> str:
        return self.qualified_name.rpartition(".")[2]

    @property
    def namespace(self) -> str:
        """Fully qualified containing namespace ('' for top-level modules)."""
        return self.qualified_name.rpartition(".")[0]

    def __str__(self) -> str:
        return self.qualified_name


class Location(NamedTuple):
    """Declaring syntax of a symbol."""
    tree: TreeSitterDocument
    node: Node


class Severity(str, Enum):
    ERROR = "error"
    WARNING = "warning"


@dataclass(frozen=True)
class Diagnostic:
    severity: Severity
    code: str
    message: str
    path: Optional[str] = None
    line: int = 0      # 1-based, 0 when unknown
    column: int = 0    # 1-based, 0 when unknown

    @property
    def is_error(self) -> bool:
        return self.severity is Severity.ERROR

    def __str__(self) -> str:
        where = ""
        if self.path:
            where = f"{self.path}({self.line},{self.column}): " if self.line else f"{self.path}: "
        return f"{where}{self.severity.value} {self.code}: {self.message}"


@dataclass(frozen=True)
class CompilationOptions:
    name: str
    output_kind: OutputKind = OutputKind.LIBRARY
    platform: Platform = Platform.ANY_CPU
    target_version: TargetVersion = TargetVersion.PY38


@dataclass(frozen=True)
class ReferenceFile:
    """Enabled reference resolved to a concrete file for the target version."""
    path: Path
    module: str


@dataclass(frozen=True)
class ResourceFile:
    """Resource to embed; the file is read only at emission time."""
    name: str
    path: Path


@dataclass(frozen=True)
class ImportDirective:
    """One import statement and the namespaces it refers to."""
    node: Node
    namespaces: Tuple[str, ...]
    text: str = ""


class SemanticModel(ABC):
    """Symbol queries against one tree of a compilation."""

    def __init__(self, compilation: Compilation, tree: TreeSitterDocument):
        self.compilation = compilation
        self.tree = tree

    @abstractmethod
    def symbols_at(self, node: Node) -> List[TypeSymbol]:
        """
        Every symbol the node may refer to, already lifted to its containing
        module-level declaration, the one Python would pick first. A name bound
        more than once yields a candidate per binding. Empty for literals,
        keywords, builtins and anything that does not resolve.
        """
        pass

    def symbol_at(self, node: Node) -> Optional[TypeSymbol]:
        """Most likely symbol referenced at the node, None if nothing resolves."""
        found = self.symbols_at(node)
        return found[0] if found else None

    @abstractmethod
    def declared_symbol(self, node: Node) -> Optional[TypeSymbol]:
        """Symbol declared by a declaration node, None for other nodes."""
        pass


class Compilation(ABC):
    """A bound set of trees. Owned by the frontend, one per binding pass."""

    def __init__(
        self,
        trees: Sequence[TreeSitterDocument],
        references: Sequence[ReferenceFile],
        options: CompilationOptions,
    ):
        self.trees: Tuple[TreeSitterDocument, ...] = tuple(trees)
        self.references: Tuple[ReferenceFile, ...] = tuple(references)
        self.options = options
        self.diagnostics: List[Diagnostic] = []

    def contains(self, tree: TreeSitterDocument) -> bool:
        return any(t is tree for t in self.trees)

    @abstractmethod
    def semantic_model(self, tree: TreeSitterDocument) -> SemanticModel:
        """
        Raises:
            ValueError: If the tree is not part of this compilation
        """
        pass

    @abstractmethod
    def declaring_locations(self, symbol: TypeSymbol) -> List[Location]:
        """All declaring locations inside this compilation, empty for external symbols."""
        pass


class Frontend(ABC):
    """Entry point of a language frontend."""

    name: str = ""
    extensions: set[str] = set()

    @abstractmethod
    def parse(self, text: str, path: str, module_name: str) -> TreeSitterDocument:
        pass

    @abstractmethod
    def bind(
        self,
        trees: Sequence[TreeSitterDocument],
        references: Sequence[ReferenceFile],
        options: CompilationOptions,
    ) -> Compilation:
        """
        Raises:
            BindingFailure: If the tree set cannot be bound
        """
        pass

    @abstractmethod
    def remove_nodes(self, tree: TreeSitterDocument, nodes: Sequence[Node]) -> TreeSitterDocument:
        """New tree with the given statements removed. The input tree is not modified."""
        pass

    @abstractmethod
    def emit(self, compilation: Compilation, resources: Sequence[ResourceFile]) -> bytes:
        """
        Raises:
            EmissionFailure: If the compilation cannot be turned into an artifact
        """
        pass


__all__ = [
    "SymbolKind",
    "TypeSymbol",
    "Location",
    "Severity",
    "Diagnostic",
    "CompilationOptions",
    "ReferenceFile",
    "ResourceFile",
    "ImportDirective",
    "SemanticModel",
    "Compilation",
    "Frontend",
]
