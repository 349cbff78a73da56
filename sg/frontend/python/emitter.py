"""
Archive emission for bound Python compilations.

Output is a ZIP archive that is byte-for-byte reproducible for the same
inputs: entries are sorted and carry a fixed timestamp. Console builds are
zipapps (shebang line, __main__.py that calls the entry point).
"""

from __future__ import annotations

import ast
import io
import logging
from typing import Dict, List, Optional, Sequence
from zipfile import ZipFile, ZipInfo, ZIP_DEFLATED

from .compilation import PythonCompilation
from .document import PythonDocument
from ..base import Diagnostic, ResourceFile, Severity
from ..tree_sitter_support import Node
from ...errors import EmissionFailure
from ...types import OutputKind

logger = logging.getLogger(__name__)

SHEBANG = b"#!/usr/bin/env python3\n"
RESOURCES_DIR = "__resources__"
# Earliest timestamp ZIP can store
_FIXED_DATE = (1980, 1, 1, 0, 0, 0)


def archive_name(tree: PythonDocument) -> str:
    """Path of a module inside the archive."""
    base = tree.module_name.replace(".", "/")
    return f"{base}/__init__.py" if tree.is_package else f"{base}.py"


def find_entry_point(tree: PythonDocument) -> Optional[str]:
    """
    Entry point of a module: a top-level `main` function, or `Class.main` for
    the first top-level class that defines a `main` method.
    """
    for node in tree.root_node.named_children:
        definition = _unwrap(node)
        if definition.type == "function_definition" and _name(tree, definition) == "main":
            return "main"
        if definition.type == "class_definition":
            body = definition.child_by_field_name("body")
            if body is None:
                continue
            for member in body.named_children:
                member = _unwrap(member)
                if member.type == "function_definition" and _name(tree, member) == "main":
                    return f"{_name(tree, definition)}.main"
    return None


def main_module(module: str, entry_point: str) -> str:
    head = entry_point.split(".")[0]
    return (
        "import sys\n"
        f"from {module} import {head}\n"
        f"sys.exit({entry_point}())\n"
    )


class PythonEmitter:

    def __init__(self, compilation: PythonCompilation):
        self.compilation = compilation
        self.options = compilation.options

    def emit(self, resources: Sequence[ResourceFile]) -> bytes:
        """
        Raises:
            EmissionFailure: On duplicate modules, code the target version
                cannot compile, a missing entry point or a missing resource file
        """
        diagnostics = self._validate(resources)
        if any(d.is_error for d in diagnostics):
            raise EmissionFailure(diagnostics)

        files: Dict[str, bytes] = {}
        for tree in self.compilation.trees:
            files[archive_name(tree)] = tree.text.encode("utf-8")

        for package in self._packages_without_init(files):
            files[f"{package.replace('.', '/')}/__init__.py"] = b""

        for res in resources:
            files[f"{RESOURCES_DIR}/{res.name}"] = res.path.read_bytes()

        buffer = io.BytesIO()
        if self.options.output_kind is OutputKind.CONSOLE:
            entry_point = find_entry_point(self._entry_tree())
            files["__main__.py"] = main_module(self.options.name, entry_point).encode("utf-8")
            buffer.write(SHEBANG)

        with ZipFile(buffer, "w", compression=ZIP_DEFLATED) as zf:
            for arcname in sorted(files):
                info = ZipInfo(arcname, date_time=_FIXED_DATE)
                info.compress_type = ZIP_DEFLATED
                info.external_attr = 0o644 << 16
                zf.writestr(info, files[arcname])

        logger.debug("Emitted %d archive entries for %s", len(files), self.options.name)
        return buffer.getvalue()

    # ---- validation ----

    def _validate(self, resources: Sequence[ResourceFile]) -> List[Diagnostic]:
        diagnostics: List[Diagnostic] = []

        for module, trees in self.compilation.modules.items():
            if len(trees) > 1:
                paths = ", ".join(t.path for t in trees)
                diagnostics.append(Diagnostic(
                    Severity.ERROR, "SG3001",
                    f"The module '{module}' is defined more than once ({paths})",
                    trees[1].path,
                ))

        feature_version = self.options.target_version.feature_version
        for tree in self.compilation.trees:
            try:
                ast.parse(tree.text, filename=tree.path, feature_version=feature_version)
            except SyntaxError as e:
                diagnostics.append(Diagnostic(
                    Severity.ERROR, "SG3002",
                    f"{e.msg} (target {self.options.target_version.value})",
                    tree.path, e.lineno or 0, e.offset or 0,
                ))
            except ValueError as e:
                diagnostics.append(Diagnostic(Severity.ERROR, "SG3002", str(e), tree.path))

        if self.options.output_kind is OutputKind.CONSOLE:
            entry = self._entry_tree()
            if entry is None or find_entry_point(entry) is None:
                diagnostics.append(Diagnostic(
                    Severity.ERROR, "SG3003",
                    "Program does not contain a 'main' entry point suitable for console output",
                    entry.path if entry is not None else None,
                ))

        for res in resources:
            if not res.path.is_file():
                diagnostics.append(Diagnostic(
                    Severity.ERROR, "SG3004",
                    f"Resource file '{res.path}' could not be found",
                ))

        return diagnostics

    def _entry_tree(self) -> Optional[PythonDocument]:
        trees = self.compilation.modules.get(self.options.name)
        return trees[0] if trees else None

    @staticmethod
    def _packages_without_init(files: Dict[str, bytes]) -> List[str]:
        packages = set()
        for arcname in files:
            parts = arcname.split("/")[:-1]
            for i in range(1, len(parts) + 1):
                packages.add(".".join(parts[:i]))
        return sorted(
            p for p in packages
            if f"{p.replace('.', '/')}/__init__.py" not in files
        )


def _unwrap(node: Node) -> Node:
    if node.type == "decorated_definition":
        definition = node.child_by_field_name("definition")
        if definition is not None:
            return definition
    return node


def _name(tree: PythonDocument, definition: Node) -> str:
    name = definition.child_by_field_name("name")
    return tree.get_node_text(name) if name is not None else ""
