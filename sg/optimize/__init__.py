"""
Corpus optimization passes.
Each module handles one step of the reduction: usage, reachability, pruning, import trimming.
"""

from .usage import direct_uses
from .reachability import find_reachable
from .pruner import prune
from .imports import TrimResult, trim_imports, used_namespaces

__all__ = [
    "direct_uses",
    "find_reachable",
    "prune",
    "TrimResult",
    "trim_imports",
    "used_namespaces",
]
