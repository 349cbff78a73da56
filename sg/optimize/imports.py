"""
Removal of unused import statements from the entry unit.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Set, Tuple

from .usage import direct_uses
from ..corpus import SourceUnit
from ..frontend.base import Compilation, Frontend, SymbolKind
from ..frontend.tree_sitter_support import TreeSitterDocument

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class TrimResult:
    tree: TreeSitterDocument
    removed: Tuple[str, ...] = ()  # source text of removed statements


def used_namespaces(tree: TreeSitterDocument, compilation: Compilation) -> Set[str]:
    """
    Namespaces the tree's own code refers to: the containing namespace of each
    directly used symbol, plus the name of every directly used module.
    """
    used: Set[str] = set()
    for symbol in direct_uses(tree, compilation, skip_imports=True):
        if symbol.namespace:
            used.add(symbol.namespace)
        if symbol.kind in (SymbolKind.MODULE, SymbolKind.EXTERNAL):
            # an external member may itself be a module: "os.path"
            used.add(symbol.qualified_name)
    return used


def trim_imports(entry: SourceUnit, compilation: Compilation, frontend: Frontend) -> TrimResult:
    """
    Remove the entry's import statements whose namespaces its code never uses.

    Only direct uses of the entry count: a namespace needed solely by other
    corpus files is still removed from the entry.
    """
    used = used_namespaces(entry.tree, compilation)

    doomed = []
    for directive in entry.tree.import_directives():
        if not any(ns in used for ns in directive.namespaces):
            doomed.append(directive)

    if not doomed:
        return TrimResult(entry.tree)

    for directive in doomed:
        logger.debug("Removing unused import: %s", directive.text)

    tree = frontend.remove_nodes(entry.tree, [d.node for d in doomed])
    return TrimResult(tree, tuple(d.text for d in doomed))
