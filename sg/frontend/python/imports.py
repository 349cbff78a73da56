"""
Python import analysis and classification using Tree-sitter AST.
"""

from __future__ import annotations

import sys
from dataclasses import dataclass, field
from typing import Collection, List, Optional

from ..tree_sitter_support import TreeSitterDocument, Node


@dataclass
class ImportedName:
    """One name listed in an import statement."""
    name: str              # Dotted name as written: "a.b" in "import a.b", "x" in "from m import x"
    alias: Optional[str]   # "y" in "... as y"
    name_node: Node        # dotted_name node of the imported name
    bound_node: Node       # identifier that receives the binding


@dataclass
class ImportInfo:
    """Information about a single import statement."""
    node: Node                          # Tree-sitter node for the import
    import_type: str                    # "import" or "import_from"
    module_name: str = ""               # From-module as written, dots kept for relative imports
    module_node: Optional[Node] = None
    absolute_module: Optional[str] = None  # From-module resolved against the importing module
    names: List[ImportedName] = field(default_factory=list)
    is_wildcard: bool = False

    def bound_name(self, item: ImportedName) -> str:
        if item.alias:
            return item.alias
        if self.import_type == "import":
            # "import a.b.c" binds "a"
            return item.name.split(".")[0]
        return item.name

    @property
    def namespaces(self) -> List[str]:
        """Namespaces this statement refers to."""
        if self.import_type == "import":
            out = []
            for item in self.names:
                out.append(item.name)
                # "import a.b" also binds "a"
                if not item.alias and "." in item.name:
                    out.append(item.name.split(".")[0])
            return out
        return [self.absolute_module or self.module_name]


def absolute_module(raw: str, module_name: str, is_package: bool) -> Optional[str]:
    """
    Resolve a possibly relative module reference.

    Args:
        raw: Module as written: "pkg.mod", ".mod", "..", etc.
        module_name: Dotted name of the importing module
        is_package: True if the importing module is a package initializer

    Returns:
        Absolute dotted name, or None if the reference climbs above the top-level package
    """
    if not raw.startswith("."):
        return raw

    level = len(raw) - len(raw.lstrip("."))
    rest = raw[level:]

    base = module_name.split(".") if module_name else []
    if not is_package:
        base = base[:-1]
    if level - 1 >= len(base):
        return None
    if level > 1:
        base = base[:len(base) - (level - 1)]

    return ".".join(base + ([rest] if rest else []))


class PythonImportAnalyzer:
    """Python-specific Tree-sitter import analyzer."""

    def analyze_imports(self, doc: TreeSitterDocument) -> List[ImportInfo]:
        """
        Analyze all imports in a document using Tree-sitter queries.

        Returns:
            List of ImportInfo objects in source order
        """
        results = []
        for node, capture_name in doc.query("imports"):
            import_info = self.parse_import(doc, node)
            if import_info:
                results.append(import_info)
        return results

    def parse_import(self, doc: TreeSitterDocument, node: Node) -> Optional[ImportInfo]:
        """Parse one import_statement / import_from_statement node."""
        if node.type == "import_statement":
            return self._parse_import_statement(doc, node)
        if node.type == "import_from_statement":
            return self._parse_import_from_statement(doc, node)
        return None

    def _parse_import_statement(self, doc: TreeSitterDocument, node: Node) -> ImportInfo:
        """Parse 'import module' statements using AST."""
        info = ImportInfo(node=node, import_type="import")

        for child in node.children_by_field_name("name"):
            item = self._parse_imported_name(doc, child)
            if item:
                info.names.append(item)

        return info

    def _parse_import_from_statement(self, doc: TreeSitterDocument, node: Node) -> ImportInfo:
        """Parse 'from module import items' statements using AST."""
        info = ImportInfo(node=node, import_type="import_from")

        module_node = node.child_by_field_name("module_name")
        if module_node is not None:
            info.module_node = module_node
            info.module_name = doc.get_node_text(module_node)
            info.absolute_module = absolute_module(info.module_name, doc.module_name, doc.is_package)

        for child in node.children_by_field_name("name"):
            item = self._parse_imported_name(doc, child)
            if item:
                info.names.append(item)

        for child in node.children:
            if child.type == "wildcard_import":
                info.is_wildcard = True

        return info

    @staticmethod
    def _parse_imported_name(doc: TreeSitterDocument, child: Node) -> Optional[ImportedName]:
        if child.type == "dotted_name":
            # "import a.b" binds its first identifier
            return ImportedName(
                name=doc.get_node_text(child),
                alias=None,
                name_node=child,
                bound_node=child.named_children[0] if child.named_children else child,
            )
        if child.type == "aliased_import":
            name_node = child.child_by_field_name("name")
            alias_node = child.child_by_field_name("alias")
            if name_node is None or alias_node is None:
                return None
            return ImportedName(
                name=doc.get_node_text(name_node),
                alias=doc.get_node_text(alias_node),
                name_node=name_node,
                bound_node=alias_node,
            )
        return None


class PythonImportClassifier:
    """
    Classifies imported modules by origin: corpus, reference, stdlib or unknown.
    """

    def __init__(self, corpus_packages: Collection[str], reference_modules: Collection[str] = ()):
        self.corpus_packages = set(corpus_packages)
        self.reference_modules = set(reference_modules)
        self.python_stdlib = set(sys.stdlib_module_names)

    def classify(self, module_name: str) -> str:
        if module_name in self.corpus_packages:
            return "corpus"
        base_module = module_name.split(".")[0]
        if base_module in self.reference_modules:
            return "reference"
        if base_module in self.python_stdlib or base_module == "__future__":
            return "stdlib"
        return "unknown"

    def is_external(self, module_name: str) -> bool:
        """Determine if a module lives outside the corpus."""
        return self.classify(module_name) != "corpus"
