"""
Transitive closure of type uses across the corpus.
"""

from __future__ import annotations

import logging
from collections import deque
from typing import Deque, Dict, List, Set

from .usage import direct_uses
from ..corpus import SourceUnit
from ..frontend.base import Compilation, TypeSymbol

logger = logging.getLogger(__name__)


def find_reachable(entry: SourceUnit, corpus: List[SourceUnit], compilation: Compilation) -> Set[TypeSymbol]:
    """
    Symbols declared in the corpus that the entry unit needs, directly or through
    other corpus files.

    Breadth-first over declaring files. Each symbol is visited once by qualified
    name, so cyclic references terminate; each file's uses are computed once.

    The result is narrower than the set of visited symbols: symbols without a
    declaration in the corpus (external modules and their members, reference
    modules, the entry's own definitions) are visited but never returned.
    Pruning only ever asks about corpus declarations, and the build report
    lists exactly these names.
    """
    units: Dict[int, SourceUnit] = {id(u.tree): u for u in corpus}

    frontier: Deque[TypeSymbol] = deque(direct_uses(entry.tree, compilation, skip_imports=True))
    visited: Set[str] = set()
    processed: Set[int] = set()
    reachable: Set[TypeSymbol] = set()

    while frontier:
        symbol = frontier.popleft()
        if symbol.qualified_name in visited:
            continue
        visited.add(symbol.qualified_name)

        for location in compilation.declaring_locations(symbol):
            if location.tree is entry.tree:
                continue
            unit = units.get(id(location.tree))
            if unit is None:
                continue

            reachable.add(symbol)
            unit.declared_types.add(symbol)

            if id(unit) in processed:
                continue
            processed.add(id(unit))
            for used in direct_uses(unit.tree, compilation):
                if used.qualified_name not in visited:
                    frontier.append(used)

    if logger.isEnabledFor(logging.DEBUG):
        for name in sorted(s.qualified_name for s in reachable):
            logger.debug("Reachable: %s", name)
    return reachable
