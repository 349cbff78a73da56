from __future__ import annotations

from typing import Collection, List

from ..corpus import SourceUnit
from ..frontend.base import Compilation


def prune(corpus: List[SourceUnit], compilation: Compilation, reachable_names: Collection[str]) -> List[SourceUnit]:
    """
    Keep the files that declare at least one reachable symbol.

    Whole files are kept or dropped; order is preserved. The entry unit is not
    part of the corpus and is kept by the caller.
    """
    names = set(reachable_names)
    kept: List[SourceUnit] = []
    for unit in corpus:
        model = compilation.semantic_model(unit.tree)
        for node in unit.tree.declaration_nodes():
            symbol = model.declared_symbol(node)
            if symbol is not None and symbol.qualified_name in names:
                kept.append(unit)
                break
    return kept
