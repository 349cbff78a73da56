"""
Direct type uses of one syntax tree.
"""

from __future__ import annotations

from typing import Dict, Set

from ..frontend.base import Compilation, TypeSymbol
from ..frontend.tree_sitter_support import TreeSitterDocument

_IMPORT_NODES = {"import_statement", "import_from_statement", "future_import_statement"}


def direct_uses(tree: TreeSitterDocument, compilation: Compilation, skip_imports: bool = False) -> Set[TypeSymbol]:
    """
    Every module-level definition the tree references, deduplicated by qualified name.

    Args:
        tree: Tree of the compilation
        compilation: Bound compilation that contains the tree
        skip_imports: Ignore import statements. Used for the entry unit, whose
            imports are candidates for removal and must not justify themselves.

    Raises:
        ValueError: If the tree is not part of the compilation
    """
    model = compilation.semantic_model(tree)
    found: Dict[str, TypeSymbol] = {}

    stack = [tree.root_node]
    while stack:
        node = stack.pop()
        if skip_imports and node.type in _IMPORT_NODES:
            continue

        # All candidates count: which binding wins is only known at run time
        for symbol in model.symbols_at(node):
            found.setdefault(symbol.qualified_name, symbol)

        stack.extend(node.children)

    return set(found.values())
