"""
Python syntax tree document.
"""

from __future__ import annotations

from functools import cached_property
from typing import Dict, List

from tree_sitter import Language

from .bindings import ModuleBindings, collect_bindings
from .imports import PythonImportAnalyzer
from ..base import ImportDirective
from ..tree_sitter_support import TreeSitterDocument, Node


class PythonDocument(TreeSitterDocument):

    def get_language(self) -> Language:
        import tree_sitter_python as tspython
        return Language(tspython.language())

    def get_query_definitions(self) -> Dict[str, str]:
        from .queries import QUERIES
        return QUERIES

    @cached_property
    def bindings(self) -> ModuleBindings:
        return collect_bindings(self)

    def declaration_nodes(self) -> List[Node]:
        return [self.root_node] + [b.node for b in self.bindings.all()]

    def import_directives(self) -> List[ImportDirective]:
        directives = []
        for info in PythonImportAnalyzer().analyze_imports(self):
            directives.append(ImportDirective(
                node=info.node,
                namespaces=tuple(info.namespaces),
                text=self.get_node_text(info.node),
            ))
        return directives
