"""
Python language frontend.
"""

from __future__ import annotations

import logging
from typing import Sequence, Tuple

from .compilation import PythonCompilation
from .document import PythonDocument
from .emitter import PythonEmitter
from ..base import CompilationOptions, Frontend, ReferenceFile, ResourceFile
from ..range_edits import RangeEditor
from ..tree_sitter_support import Node, TreeSitterDocument
from ...errors import BindingFailure

logger = logging.getLogger(__name__)


class PythonFrontend(Frontend):

    name = "python"
    extensions = {".py"}

    def parse(self, text: str, path: str, module_name: str) -> PythonDocument:
        return PythonDocument(text, path, module_name)

    def bind(
        self,
        trees: Sequence[PythonDocument],
        references: Sequence[ReferenceFile],
        options: CompilationOptions,
    ) -> PythonCompilation:
        compilation = PythonCompilation(trees, references, options)

        for diagnostic in compilation.diagnostics:
            if not diagnostic.is_error:
                logger.debug("%s", diagnostic)

        if any(d.is_error for d in compilation.diagnostics):
            raise BindingFailure(compilation.diagnostics)
        return compilation

    def remove_nodes(self, tree: TreeSitterDocument, nodes: Sequence[Node]) -> TreeSitterDocument:
        if not nodes:
            return tree

        removed = {TreeSitterDocument.node_key(n) for n in nodes}
        editor = RangeEditor(tree.text)
        emptied_blocks = set()

        for node in sorted(nodes, key=lambda n: n.start_byte):
            start, end = tree.get_node_range(node)
            parent = node.parent

            if parent is not None and parent.type == "block":
                statements = [c for c in parent.named_children if c.type != "comment"]
                block_key = TreeSitterDocument.node_key(parent)
                if all(TreeSitterDocument.node_key(s) in removed for s in statements):
                    if block_key not in emptied_blocks:
                        # A block cannot be empty
                        emptied_blocks.add(block_key)
                        editor.add_replacement(start, end, "pass", "import_removed")
                        continue

            start, end = _statement_span(tree.text, start, end)
            editor.add_deletion(start, end, "import_removed")

        text, stats = editor.apply_edits()
        logger.debug("Removed %d statements from %s (%d bytes)", len(nodes), tree.path, stats.get("bytes_saved", 0))
        return tree.with_text(text)

    def emit(self, compilation: PythonCompilation, resources: Sequence[ResourceFile]) -> bytes:
        return PythonEmitter(compilation).emit(resources)


def _statement_span(text: str, start: int, end: int) -> Tuple[int, int]:
    """Extend a statement range to whole-line or ';'-separated boundaries."""
    line_start = text.rfind("\n", 0, start) + 1
    own_line = text[line_start:start].strip() == ""

    j = end
    while j < len(text) and text[j] in " \t":
        j += 1

    if j < len(text) and text[j] == ";":
        # "import x; rest" keeps "rest"
        j += 1
        while j < len(text) and text[j] in " \t":
            j += 1
        return start, j

    if own_line:
        if text.startswith("\r\n", j):
            return line_start, j + 2
        if j < len(text) and text[j] == "\n":
            return line_start, j + 1
        return line_start, j

    # "rest; import x" drops the separator as well
    k = start
    while k > line_start and text[k - 1] in " \t":
        k -= 1
    if k > line_start and text[k - 1] == ";":
        k -= 1
    return k, end
