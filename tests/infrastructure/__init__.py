"""
Unified test infrastructure for Snippet Generator.

Modules:
- file_utils: Utilities for creating files and directories
- cli_utils: Running the command line in a subprocess
- compile_utils: Parsing and binding through the Python frontend
- adapter_utils: Tree-sitter availability checks
- samples: Shared sample corpus and entry snippet
"""

from .file_utils import write, write_tree, write_yaml
from .cli_utils import run_cli, jload
from .compile_utils import ENTRY, build, entry_unit, parse, rel_paths
from .adapter_utils import is_tree_sitter_available, skip_if_no_tree_sitter
from .samples import SAMPLE_CORPUS, SAMPLE_ENTRY

__all__ = [
    "write", "write_tree", "write_yaml",
    "run_cli", "jload",
    "ENTRY", "build", "entry_unit", "parse", "rel_paths",
    "is_tree_sitter_available", "skip_if_no_tree_sitter",
    "SAMPLE_CORPUS", "SAMPLE_ENTRY",
]
