"""
Tree-sitter query definitions for Python language.
Contains S-expression queries for structural code analysis.
"""

from __future__ import annotations

QUERIES = {
    # Import statements (anywhere in the file, not only at module level)
    "imports": """
    (import_statement) @import

    (import_from_statement) @import_from
    """,

    "future_imports": """
    (future_import_statement) @future_import
    """,

    # Names rebound at module level from inside functions
    "globals": """
    (global_statement
      (identifier) @global_name)
    """,
}
