"""
Python frontend: tree-sitter documents, name-based binding and zip emission.
"""

from .compilation import PythonCompilation, PythonSemanticModel
from .document import PythonDocument
from .emitter import PythonEmitter, find_entry_point
from .frontend import PythonFrontend

__all__ = [
    "PythonCompilation",
    "PythonSemanticModel",
    "PythonDocument",
    "PythonEmitter",
    "PythonFrontend",
    "find_entry_point",
]
