"""
Binding of Python documents.

A PythonCompilation indexes the modules of one tree set and answers symbol
queries for them. Resolution is name-based: a reference is mapped to every
module-level definition it may name, following imports, submodules and star
imports across the corpus. A name bound twice keeps both targets. Local
scopes are not modelled, so a local name that shadows a module-level one
still resolves to the module-level one.
"""

from __future__ import annotations

import builtins
import logging
from typing import Dict, List, Optional, Sequence, Set

from .bindings import Binding
from .document import PythonDocument
from .imports import PythonImportAnalyzer, PythonImportClassifier
from ..base import (
    Compilation,
    CompilationOptions,
    Diagnostic,
    Location,
    ReferenceFile,
    SemanticModel,
    Severity,
    SymbolKind,
    TypeSymbol,
)
from ..tree_sitter_support import Node, NodeKey, TreeSitterDocument

logger = logging.getLogger(__name__)

# Identifiers that name something rather than refer to something
_NAME_FIELD_PARENTS = {
    "function_definition",
    "class_definition",
    "keyword_argument",
    "default_parameter",
    "typed_default_parameter",
}

_PARAMETER_CONTAINERS = {
    "parameters",
    "lambda_parameters",
}

_SCOPE_STATEMENTS = {
    "global_statement",
    "nonlocal_statement",
}

_IMPORT_STATEMENTS = {
    "import_statement",
    "import_from_statement",
    "future_import_statement",
}


class PythonCompilation(Compilation):

    def __init__(
        self,
        trees: Sequence[PythonDocument],
        references: Sequence[ReferenceFile],
        options: CompilationOptions,
    ):
        super().__init__(trees, references, options)

        # module name -> trees (more than one only for duplicates)
        self.modules: Dict[str, List[PythonDocument]] = {}
        # every dotted prefix of a module name: "a", "a.b" for "a.b.c"
        self.packages: Set[str] = set()
        self.declarations: Dict[str, List[Location]] = {}
        self._models: Dict[int, PythonSemanticModel] = {}

        self._index()
        self.classifier = PythonImportClassifier(
            corpus_packages=set(self.modules) | self.packages,
            reference_modules={ref.module for ref in self.references},
        )
        self._check()

    # ---- indexing ----

    def _index(self) -> None:
        for tree in self.trees:
            module = tree.module_name
            self.modules.setdefault(module, []).append(tree)
            parts = module.split(".")
            for i in range(1, len(parts)):
                self.packages.add(".".join(parts[:i]))

            self._declare(module, Location(tree, tree.root_node))
            for binding in tree.bindings.all():
                self._declare(f"{module}.{binding.name}", Location(tree, binding.node))

        logger.debug("Indexed %d modules, %d declarations", len(self.modules), len(self.declarations))

    def _declare(self, qualified_name: str, location: Location) -> None:
        self.declarations.setdefault(qualified_name, []).append(location)

    def _check(self) -> None:
        for tree in self.trees:
            for node in tree.get_errors():
                self.diagnostics.append(_diagnostic(
                    Severity.ERROR, "SG1001",
                    "Missing syntax" if node.is_missing else "Invalid syntax",
                    tree, node,
                ))

        for ref in self.references:
            if not ref.path.is_file():
                self.diagnostics.append(Diagnostic(
                    Severity.ERROR, "SG1002",
                    f"Metadata file '{ref.path}' could not be found",
                ))

        analyzer = PythonImportAnalyzer()
        for tree in self.trees:
            for info in analyzer.analyze_imports(tree):
                if info.import_type == "import_from":
                    if info.absolute_module is None:
                        self.diagnostics.append(_diagnostic(
                            Severity.WARNING, "SG2001",
                            f"Relative import '{info.module_name}' goes beyond the top-level package",
                            tree, info.node,
                        ))
                        continue
                    targets = [info.absolute_module]
                else:
                    targets = [item.name for item in info.names]

                for target in targets:
                    if self.classifier.classify(target) == "unknown":
                        self.diagnostics.append(_diagnostic(
                            Severity.WARNING, "SG2001",
                            f"The module '{target}' could not be found",
                            tree, info.node,
                        ))

    # ---- queries ----

    def semantic_model(self, tree: TreeSitterDocument) -> PythonSemanticModel:
        if not self.contains(tree):
            raise ValueError(f"{tree!r} is not part of this compilation")
        model = self._models.get(id(tree))
        if model is None:
            model = PythonSemanticModel(self, tree)
            self._models[id(tree)] = model
        return model

    def declaring_locations(self, symbol: TypeSymbol) -> List[Location]:
        if symbol.kind is SymbolKind.EXTERNAL:
            return []
        return list(self.declarations.get(symbol.qualified_name, ()))

    def is_corpus_module(self, name: str) -> bool:
        return name in self.modules or name in self.packages

    def module_symbol(self, name: str) -> TypeSymbol:
        return TypeSymbol(name, SymbolKind.MODULE)

    def resolve_name(self, tree: PythonDocument, name: str) -> List[TypeSymbol]:
        """
        Every symbol a bare name used anywhere in the tree may refer to.

        Python reads the last binding, but which one is last depends on
        control flow, and a later star import replaces an explicit binding.
        So each binding and each star module that exports the name yields a
        candidate: bindings from the last one up, then star modules from the
        last one up.
        """
        bindings = tree.bindings
        candidates: List[TypeSymbol] = []
        for binding in bindings.of(name):
            symbol = self._follow(tree, binding)
            if symbol is not None:
                candidates.append(symbol)

        for star in reversed(bindings.stars):
            found = self.export_of(star, name, strict=True)
            if found is not None:
                candidates.append(found)

        if candidates:
            return _unique(candidates)
        if hasattr(builtins, name):
            return []

        for star in reversed(bindings.stars):
            if not self.is_corpus_module(star):
                return [TypeSymbol(f"{star}.{name}", SymbolKind.EXTERNAL)]
        return []

    def _follow(self, tree: PythonDocument, binding: Binding) -> Optional[TypeSymbol]:
        if binding.kind is not SymbolKind.IMPORT:
            return TypeSymbol(f"{tree.module_name}.{binding.name}", binding.kind)
        if binding.target_module is None:
            return None
        if binding.target_name is None:
            return self.module_symbol(binding.target_module)
        return self.export_of(binding.target_module, binding.target_name, strict=False)

    def export_of(
        self,
        module: str,
        name: str,
        strict: bool,
        _seen: Optional[Set[str]] = None,
    ) -> Optional[TypeSymbol]:
        """
        Symbol that `from module import name` yields.

        Strict lookups model `from module import *`: private names are not
        exported and nothing is guessed for modules outside the corpus. A
        name found through the module's own star imports resolves to the
        module itself, which keeps the module and its star chain alive.
        """
        if strict and name.startswith("_"):
            return None

        trees = self.modules.get(module)
        if trees is None:
            if module in self.packages:
                submodule = f"{module}.{name}"
                return self.module_symbol(submodule) if self.is_corpus_module(submodule) else None
            return None if strict else TypeSymbol(f"{module}.{name}", SymbolKind.EXTERNAL)

        for tree in trees:
            binding = tree.bindings.last(name)
            if binding is not None:
                return TypeSymbol(f"{module}.{name}", binding.kind)

        submodule = f"{module}.{name}"
        if self.is_corpus_module(submodule):
            return self.module_symbol(submodule)

        if not strict:
            return self.module_symbol(module)

        seen = _seen if _seen is not None else set()
        seen.add(module)
        for tree in trees:
            for star in tree.bindings.stars:
                if star in seen:
                    continue
                if self.export_of(star, name, strict=True, _seen=seen) is not None:
                    return self.module_symbol(module)
        return None

    def member_of(self, base: TypeSymbol, attribute: str) -> Optional[TypeSymbol]:
        """Symbol of `base.attribute`: a module member, or the containing definition itself."""
        if base.kind is SymbolKind.MODULE:
            return self.export_of(base.qualified_name, attribute, strict=False)
        return base


class PythonSemanticModel(SemanticModel):

    compilation: PythonCompilation
    tree: PythonDocument

    def __init__(self, compilation: PythonCompilation, tree: PythonDocument):
        super().__init__(compilation, tree)
        self._cache: Dict[NodeKey, List[TypeSymbol]] = {}
        self._declared: Dict[NodeKey, Binding] = {
            TreeSitterDocument.node_key(b.node): b for b in tree.bindings.all()
        }

    def symbols_at(self, node: Node) -> List[TypeSymbol]:
        key = TreeSitterDocument.node_key(node)
        cached = self._cache.get(key)
        if cached is None:
            cached = self._resolve(node)
            self._cache[key] = cached
        return list(cached)

    def declared_symbol(self, node: Node) -> Optional[TypeSymbol]:
        if node.parent is None:
            return self.compilation.module_symbol(self.tree.module_name)
        binding = self._declared.get(TreeSitterDocument.node_key(node))
        if binding is None:
            return None
        return TypeSymbol(f"{self.tree.module_name}.{binding.name}", binding.kind)

    # ---- resolution by node type ----

    def _resolve(self, node: Node) -> List[TypeSymbol]:
        t = node.type
        if node.parent is None:
            return _listed(self._parent_package())
        if t == "identifier":
            if not _is_reference(node):
                return []
            return self.compilation.resolve_name(self.tree, self.tree.get_node_text(node))
        if t == "attribute":
            return self._resolve_attribute(node)
        if t == "dotted_name":
            return self._resolve_dotted_name(node)
        if t == "relative_import":
            info = PythonImportAnalyzer().parse_import(self.tree, node.parent)
            if info is None or info.absolute_module is None:
                return []
            return [self.compilation.module_symbol(info.absolute_module)]
        return []

    def _parent_package(self) -> Optional[TypeSymbol]:
        # Importing a module runs the initializer of its package first
        parent = self.tree.module_name.rpartition(".")[0]
        if parent and self.compilation.is_corpus_module(parent):
            return self.compilation.module_symbol(parent)
        return None

    def _members(self, bases: List[TypeSymbol], attribute: str) -> List[TypeSymbol]:
        found = [self.compilation.member_of(base, attribute) for base in bases]
        return _unique([symbol for symbol in found if symbol is not None])

    def _resolve_attribute(self, node: Node) -> List[TypeSymbol]:
        obj = node.child_by_field_name("object")
        attr = node.child_by_field_name("attribute")
        if obj is None or attr is None or obj.type not in ("identifier", "attribute"):
            return []
        return self._members(self.symbols_at(obj), self.tree.get_node_text(attr))

    def _resolve_dotted_name(self, node: Node) -> List[TypeSymbol]:
        parent = node.parent
        if parent.type == "relative_import":
            return []
        if parent.type == "aliased_import":
            statement = parent.parent
            is_name = TreeSitterDocument.same_node(parent.child_by_field_name("name"), node)
            if not is_name:
                return []
        else:
            statement = parent

        text = self.tree.get_node_text(node)
        if statement.type == "import_statement":
            return [self.compilation.module_symbol(text)]

        if statement.type == "import_from_statement":
            info = PythonImportAnalyzer().parse_import(self.tree, statement)
            if info is None or info.absolute_module is None:
                return []
            if TreeSitterDocument.same_node(info.module_node, node):
                return [self.compilation.module_symbol(info.absolute_module)]
            return _listed(self.compilation.export_of(info.absolute_module, text, strict=False))

        if statement.type == "future_import_statement":
            return []

        # Class patterns in match statements: Point(x=0)
        parts = [self.tree.get_node_text(c) for c in node.named_children]
        if not parts:
            return []
        symbols = self.compilation.resolve_name(self.tree, parts[0])
        for part in parts[1:]:
            symbols = self._members(symbols, part)
        return symbols


def _is_reference(node: Node) -> bool:
    """True if an identifier reads a name rather than declaring one."""
    parent = node.parent
    if parent is None:
        return True

    pt = parent.type
    if pt in _NAME_FIELD_PARENTS:
        return not TreeSitterDocument.same_node(parent.child_by_field_name("name"), node)
    if pt == "attribute":
        return not TreeSitterDocument.same_node(parent.child_by_field_name("attribute"), node)
    if pt in _PARAMETER_CONTAINERS or pt in _SCOPE_STATEMENTS:
        return False
    if pt == "typed_parameter":
        return False
    if pt in ("list_splat_pattern", "dictionary_splat_pattern"):
        grand = parent.parent
        if grand is not None and grand.type in _PARAMETER_CONTAINERS | {"typed_parameter"}:
            return False

    # Import names are resolved through their dotted_name nodes
    ancestor = parent
    for _ in range(3):
        if ancestor is None:
            break
        if ancestor.type in _IMPORT_STATEMENTS:
            return False
        ancestor = ancestor.parent
    return True


def _listed(symbol: Optional[TypeSymbol]) -> List[TypeSymbol]:
    return [symbol] if symbol is not None else []


def _unique(symbols: List[TypeSymbol]) -> List[TypeSymbol]:
    """Drop repeated qualified names, keeping the first occurrence."""
    seen: Set[str] = set()
    out: List[TypeSymbol] = []
    for symbol in symbols:
        if symbol.qualified_name not in seen:
            seen.add(symbol.qualified_name)
            out.append(symbol)
    return out


def _diagnostic(severity: Severity, code: str, message: str, tree: TreeSitterDocument, node: Node) -> Diagnostic:
    row, column = node.start_point
    return Diagnostic(severity, code, message, tree.path, row + 1, column + 1)
