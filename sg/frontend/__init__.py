from __future__ import annotations

# Public API of frontend package:
#  • get_frontend: lazy retrieval of a language frontend by name
#  • base contracts used by the build core
from .base import (
    Compilation,
    CompilationOptions,
    Diagnostic,
    Frontend,
    Location,
    ReferenceFile,
    ResourceFile,
    SemanticModel,
    Severity,
    SymbolKind,
    TypeSymbol,
)
from .registry import get_frontend, list_frontends, register_lazy

__all__ = [
    "Compilation",
    "CompilationOptions",
    "Diagnostic",
    "Frontend",
    "Location",
    "ReferenceFile",
    "ResourceFile",
    "SemanticModel",
    "Severity",
    "SymbolKind",
    "TypeSymbol",
    "get_frontend",
    "list_frontends",
    "register_lazy",
]

# ---- Lightweight (lazy) registration of built-in frontends -------------------
register_lazy(module=".python", class_name="PythonFrontend", name="python")
