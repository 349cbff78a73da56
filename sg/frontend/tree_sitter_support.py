"""
Tree-sitter infrastructure for language frontends.
Provides grammar loading, query management, and utilities for AST traversal.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from pathlib import PurePosixPath
from typing import TYPE_CHECKING, Dict, Iterator, List, Optional, Tuple

from tree_sitter import Tree, Node, Parser, Query, Language, QueryCursor

if TYPE_CHECKING:
    from .base import ImportDirective

NodeKey = Tuple[int, int, str]


class TreeSitterDocument(ABC):
    """
    Wrapper for Tree-sitter parsed source file with query system.

    Documents are immutable: edits produce a new document via with_text().
    Identity of the wrapper object is the identity of the syntax tree.
    """

    def __init__(self, text: str, path: str, module_name: str):
        self.text = text
        self.path = path
        self.module_name = module_name
        self.tree: Optional[Tree] = None
        self._text_bytes = text.encode('utf-8')
        self._query_cache: Dict[str, Query] = {}
        self._parse()

    @abstractmethod
    def get_language(self) -> Language:
        """
        Get Language instance for queries.

        Returns:
            Language instance
        """
        pass

    @abstractmethod
    def get_query_definitions(self) -> Dict[str, str]:
        """
        Get named query definitions for this language.

        Returns:
            Dict mapping query names to query strings
        """
        pass

    @abstractmethod
    def declaration_nodes(self) -> List[Node]:
        """Nodes that declare module-level symbols, root first."""
        pass

    @abstractmethod
    def import_directives(self) -> List[ImportDirective]:
        """All import statements of the document, in source order."""
        pass

    def get_parser(self) -> Parser:
        return Parser(self.get_language())

    def _parse(self):
        """Parse the document with Tree-sitter."""
        parser = self.get_parser()
        self.tree = parser.parse(self._text_bytes)

    def with_text(self, text: str) -> TreeSitterDocument:
        """New document of the same kind and identity attributes with other text."""
        return type(self)(text, self.path, self.module_name)

    @property
    def ext(self) -> str:
        return PurePosixPath(self.path).suffix

    @property
    def is_package(self) -> bool:
        """True for package initializers (__init__.py)."""
        return PurePosixPath(self.path).stem == "__init__"

    @property
    def root_node(self) -> Node:
        """Get the root node of the parsed tree."""
        if not self.tree:
            raise RuntimeError("Document not parsed")
        return self.tree.root_node

    def query(self, query_name: str) -> List[Tuple[Node, str]]:
        """
        Execute a named query on the document.

        Args:
            query_name: Name of the query to execute

        Returns:
            List of (node, capture_name) tuples

        Raises:
            ValueError: If query is not defined for this language
        """
        root_node = self.root_node

        query_definitions = self.get_query_definitions()
        if query_name not in query_definitions:
            raise ValueError(f"Unknown query: {query_name}")

        if query_name not in self._query_cache:
            self._query_cache[query_name] = Query(self.get_language(), query_definitions[query_name])

        cursor = QueryCursor(self._query_cache[query_name])

        results = []
        for pattern_index, captures in cursor.matches(root_node):
            for capture_name, nodes in captures.items():
                for node in nodes:
                    results.append((node, capture_name))

        # Matches are grouped by pattern; callers expect source order
        results.sort(key=lambda item: item[0].start_byte)
        return results

    def walk_tree(self, start_node: Optional[Node] = None) -> Iterator[Node]:
        """
        Walk the tree using TreeCursor for efficient traversal.

        Args:
            start_node: Node to start from (default: root)

        Yields:
            Node objects in depth-first order
        """
        if start_node is None:
            start_node = self.root_node

        cursor = start_node.walk()
        visited_children = False

        while True:
            if not visited_children:
                yield cursor.node

                if not cursor.goto_first_child():
                    visited_children = True
            elif cursor.goto_next_sibling():
                visited_children = False
            elif not cursor.goto_parent():
                break
            else:
                visited_children = True

    def get_node_text(self, node: Node) -> str:
        """Get text content for a node."""
        return self._text_bytes[node.start_byte:node.end_byte].decode('utf-8')

    def get_node_range(self, node: Node) -> Tuple[int, int]:
        """Get char range for a node."""
        start_char = self.byte_to_char_position(node.start_byte)
        end_char = self.byte_to_char_position(node.end_byte)
        return start_char, end_char

    @staticmethod
    def node_key(node: Node) -> NodeKey:
        """Stable key of a node within one tree."""
        return node.start_byte, node.end_byte, node.type

    @staticmethod
    def same_node(a: Optional[Node], b: Optional[Node]) -> bool:
        if a is None or b is None:
            return False
        return TreeSitterDocument.node_key(a) == TreeSitterDocument.node_key(b)

    @staticmethod
    def get_parent_of_type(node: Node, node_type: str) -> Optional[Node]:
        """
        Find the first parent of a specific type.

        Args:
            node: Starting node
            node_type: Type to search for

        Returns:
            Parent node of the specified type, or None
        """
        current = node.parent
        while current:
            if current.type == node_type:
                return current
            current = current.parent
        return None

    def has_error(self) -> bool:
        """Check if the tree has any syntax errors."""
        if not self.tree:
            return True
        return self.root_node.has_error

    def get_errors(self) -> List[Node]:
        """Get all error and missing nodes in the tree."""
        return [n for n in self.walk_tree() if n.type == "ERROR" or n.is_missing]

    def byte_to_char_position(self, byte_pos: int) -> int:
        """
        Correctly convert byte position to character position in Unicode text.
        Guarantees that if position points to the middle of a multi-byte character,
        returns position before that character.
        """
        if byte_pos <= 0:
            return 0
        if byte_pos >= len(self._text_bytes):
            return len(self.text)

        # UTF-8 guarantees maximum 4 bytes per character
        start = max(0, byte_pos - 4)
        for end in range(byte_pos, start - 1, -1):
            try:
                decoded = self._text_bytes[:end].decode('utf-8')
                return len(decoded)
            except UnicodeDecodeError:
                continue
        return 0

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self.path!r}, module={self.module_name!r})"
