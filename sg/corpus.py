"""
Corpus loading: source files of the library directory as SourceUnits.
"""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Iterable, List, Optional, Set, Tuple

import pathspec

from .frontend.base import Frontend, TypeSymbol
from .frontend.tree_sitter_support import TreeSitterDocument

logger = logging.getLogger(__name__)

IGNORE_FILE = ".sgignore"
SOURCE_EXTENSIONS = {".py"}


@dataclass(eq=False)
class SourceUnit:
    """
    One parsed source file.

    Compared by identity: two units with the same path from different loads are
    different units. declared_types is filled in by the reachability pass.
    """
    path: Path
    rel_path: str
    tree: TreeSitterDocument
    declared_types: Set[TypeSymbol] = field(default_factory=set)

    @property
    def module_name(self) -> str:
        return self.tree.module_name


def read_text(path: Path) -> str:
    with path.open(encoding="utf-8", errors="ignore") as f:
        return f.read()


def build_ignore_spec(root: Path) -> Optional[pathspec.PathSpec]:
    """
    Build PathSpec from .sgignore. Return None if the file is missing.
    """
    ignore = root / IGNORE_FILE
    if not ignore.is_file():
        return None
    lines = []
    for ln in read_text(ignore).splitlines():
        ln = ln.strip()
        if ln and not ln.startswith("#"):
            lines.append(ln)
    return pathspec.PathSpec.from_lines("gitwildmatch", lines)


def iter_source_files(root: Path, spec: Optional[pathspec.PathSpec]) -> Iterable[Tuple[Path, str]]:
    """Yield (path, rel_posix) for every source file below root."""
    root = root.resolve()
    for dirpath, dirnames, filenames in os.walk(root):
        keep = []
        for d in dirnames:
            if d == "__pycache__" or d.startswith("."):
                continue
            rel_dir = Path(dirpath, d).relative_to(root).as_posix()
            # the ignore file can hide a branch completely
            if spec and spec.match_file(rel_dir + "/"):
                continue
            keep.append(d)
        dirnames[:] = keep

        for fn in filenames:
            p = Path(dirpath, fn)
            if p.suffix.lower() not in SOURCE_EXTENSIONS:
                continue
            rel_posix = p.relative_to(root).as_posix()
            if spec and spec.match_file(rel_posix):
                continue
            yield p, rel_posix


def source_paths(directory: Path) -> List[Tuple[Path, str]]:
    """(path, rel_posix) of the corpus source files, sorted by relative path."""
    if not directory.is_dir():
        logger.warning("Source directory %s does not exist", directory)
        return []
    spec = build_ignore_spec(directory)
    return sorted(iter_source_files(directory, spec), key=lambda item: item[1])


def list_source_files(directory: Path) -> List[Tuple[str, str]]:
    """(rel_posix, text) of the corpus source files, sorted by relative path."""
    return [(rel_posix, read_text(path)) for path, rel_posix in source_paths(directory)]


def module_name_for(rel_posix: str) -> Optional[str]:
    """
    Dotted module name of a relative path.

    pkg/sub/mod.py → pkg.sub.mod, pkg/__init__.py → pkg.
    None if some part is not a valid identifier.
    """
    parts = rel_posix.split("/")
    parts[-1] = parts[-1].rsplit(".", 1)[0]
    if parts[-1] == "__init__":
        parts = parts[:-1]
    if not parts or not all(p.isidentifier() for p in parts):
        return None
    return ".".join(parts)


def load_corpus(directory: Path, frontend: Frontend) -> List[SourceUnit]:
    """Parse every source file of the corpus directory."""
    units: List[SourceUnit] = []
    for rel_posix, text in list_source_files(directory):
        module = module_name_for(rel_posix)
        if module is None:
            logger.warning("Skipping %s: not an importable module path", rel_posix)
            continue
        tree = frontend.parse(text, rel_posix, module)
        units.append(SourceUnit(path=directory / rel_posix, rel_path=rel_posix, tree=tree))

    logger.debug("Loaded %d corpus files from %s", len(units), directory)
    return units


def top_level_names(directory: Path) -> List[str]:
    """Importable top-level modules and packages of the corpus, sorted."""
    names = set()
    for _, rel_posix in source_paths(directory):
        module = module_name_for(rel_posix)
        if module:
            names.add(module.split(".")[0])
    return sorted(names)
