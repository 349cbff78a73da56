"""
Module-level name bindings of a Python document.

Purely syntactic: walks module statements (descending into if/try/with/for/while
blocks, never into function or class bodies) and records every name the module
defines or imports.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, List, Optional

from .imports import ImportInfo, PythonImportAnalyzer
from ..base import SymbolKind
from ..tree_sitter_support import TreeSitterDocument, Node

# Compound statements whose blocks still bind names in module scope
_TRANSPARENT = {
    "if_statement",
    "elif_clause",
    "else_clause",
    "try_statement",
    "except_clause",
    "except_group_clause",
    "finally_clause",
    "with_statement",
    "for_statement",
    "while_statement",
}

_TARGET_CONTAINERS = {
    "pattern_list",
    "tuple_pattern",
    "list_pattern",
    "list_splat_pattern",
    "parenthesized_expression",
    "as_pattern_target",
}


@dataclass
class Binding:
    """A name bound in module scope."""
    name: str
    kind: SymbolKind
    node: Node                            # Identifier that receives the binding
    target_module: Optional[str] = None   # Imports: absolute module the name comes from
    target_name: Optional[str] = None     # "from m import x": "x"; None for "import m"


@dataclass
class ModuleBindings:
    names: Dict[str, List[Binding]] = field(default_factory=dict)
    # Absolute modules of "from m import *" statements at module level
    stars: List[str] = field(default_factory=list)
    imports: List[ImportInfo] = field(default_factory=list)
    # Names bound by imports inside functions and classes
    local: Dict[str, List[Binding]] = field(default_factory=dict)

    def add(self, binding: Binding, local: bool = False) -> None:
        scope = self.local if local else self.names
        scope.setdefault(binding.name, []).append(binding)

    def last(self, name: str) -> Optional[Binding]:
        """Module-level binding that Python reads after the module has run."""
        # "global" names are collected after the module walk
        found = self.names.get(name)
        return max(found, key=lambda b: b.node.start_byte) if found else None

    def of(self, name: str) -> List[Binding]:
        """Module-level and local bindings of a name, last in source order first."""
        out = self.names.get(name, []) + self.local.get(name, [])
        out.sort(key=lambda b: b.node.start_byte, reverse=True)
        return out

    def all(self) -> List[Binding]:
        out = [b for bs in self.names.values() for b in bs]
        out.sort(key=lambda b: b.node.start_byte)
        return out


def collect_bindings(doc: TreeSitterDocument) -> ModuleBindings:
    """Collect module-level bindings of a document."""
    collector = _BindingCollector(doc)
    collector.visit_block(doc.root_node)

    # "global x" inside functions rebinds x in module scope
    for node, _ in doc.query("globals"):
        collector.bind(node, SymbolKind.VARIABLE)

    module_level = {TreeSitterDocument.node_key(info.node) for info in collector.result.imports}
    for info in collector.analyzer.analyze_imports(doc):
        if TreeSitterDocument.node_key(info.node) not in module_level:
            collector.bind_import(info, local=True)

    return collector.result


class _BindingCollector:

    def __init__(self, doc: TreeSitterDocument):
        self.doc = doc
        self.analyzer = PythonImportAnalyzer()
        self.result = ModuleBindings()

    def bind(self, node: Node, kind: SymbolKind, local: bool = False, **targets) -> None:
        self.result.add(Binding(self.doc.get_node_text(node), kind, node, **targets), local)

    def visit_block(self, block: Node) -> None:
        for stmt in block.named_children:
            self.visit_statement(stmt)

    def visit_statement(self, stmt: Node) -> None:
        t = stmt.type

        if t == "decorated_definition":
            definition = stmt.child_by_field_name("definition")
            if definition is not None:
                self.visit_statement(definition)
            return

        if t == "class_definition":
            self._bind_field(stmt, "name", SymbolKind.CLASS)
            return

        if t == "function_definition":
            self._bind_field(stmt, "name", SymbolKind.FUNCTION)
            return

        if t == "expression_statement":
            for child in stmt.named_children:
                self._visit_assignment(child)
            return

        if t in ("import_statement", "import_from_statement"):
            self._visit_import(stmt)
            return

        if t == "for_statement":
            left = stmt.child_by_field_name("left")
            if left is not None:
                self._bind_targets(left)

        if t == "with_statement":
            for target in _descendants_of_type(stmt, "as_pattern_target", stop={"block"}):
                self._bind_targets(target)

        if t in _TRANSPARENT:
            for child in stmt.named_children:
                if child.type == "block":
                    self.visit_block(child)
                elif child.type in _TRANSPARENT:
                    self.visit_statement(child)

    def _visit_assignment(self, node: Node) -> None:
        if node.type not in ("assignment", "augmented_assignment"):
            return
        left = node.child_by_field_name("left")
        if left is not None:
            self._bind_targets(left)
        # a = b = 1 nests the second assignment on the right
        right = node.child_by_field_name("right")
        if right is not None and right.type == "assignment":
            self._visit_assignment(right)

    def _bind_targets(self, node: Node) -> None:
        if node.type == "identifier":
            self.bind(node, SymbolKind.VARIABLE)
        elif node.type in _TARGET_CONTAINERS:
            for child in node.named_children:
                self._bind_targets(child)

    def _bind_field(self, stmt: Node, field_name: str, kind: SymbolKind) -> None:
        name = stmt.child_by_field_name(field_name)
        if name is not None:
            self.bind(name, kind)

    def _visit_import(self, stmt: Node) -> None:
        info = self.analyzer.parse_import(self.doc, stmt)
        if info is None:
            return
        self.result.imports.append(info)
        self.bind_import(info)

    def bind_import(self, info: ImportInfo, local: bool = False) -> None:
        if info.import_type == "import":
            for item in info.names:
                # "import a.b" binds the package "a", "import a.b as x" binds "a.b"
                target = item.name if item.alias else item.name.split(".")[0]
                self.bind(item.bound_node, SymbolKind.IMPORT, local, target_module=target)
            return

        if info.is_wildcard:
            if info.absolute_module and not local:
                self.result.stars.append(info.absolute_module)
            return

        for item in info.names:
            self.bind(
                item.bound_node,
                SymbolKind.IMPORT,
                local,
                target_module=info.absolute_module,
                target_name=item.name,
            )


def _descendants_of_type(node: Node, node_type: str, stop: set[str]) -> List[Node]:
    out: List[Node] = []
    for child in node.named_children:
        if child.type == node_type:
            out.append(child)
        elif child.type not in stop:
            out.extend(_descendants_of_type(child, node_type, stop))
    return out
