from __future__ import annotations

import os
from pathlib import Path
from typing import Optional

# Single source of truth for the home directory structure.
HOME_ENV = "SG_HOME"
SOURCE_DIR = "source"
REFERENCES_DIR = "references"
REFERENCES_FILE = "references.yaml"
RESOURCES_DIR = "resources"
RESOURCES_FILE = "resources.yaml"
OUTPUT_DIR = "output"


def home_root(explicit: Optional[Path] = None) -> Path:
    """Home directory: --root, then $SG_HOME, then the working directory."""
    if explicit is not None:
        return explicit.resolve()
    env = os.environ.get(HOME_ENV)
    if env:
        return Path(env).resolve()
    return Path.cwd().resolve()


def source_dir(root: Path) -> Path:
    """Corpus of library sources."""
    return root / SOURCE_DIR


def references_dir(root: Path) -> Path:
    """Per-target reference files live in references/<target>/."""
    return root / REFERENCES_DIR


def references_path(root: Path) -> Path:
    return references_dir(root) / REFERENCES_FILE


def resources_dir(root: Path) -> Path:
    return root / RESOURCES_DIR


def resources_path(root: Path) -> Path:
    return resources_dir(root) / RESOURCES_FILE


def output_dir(root: Path) -> Path:
    """Directory for built artifacts; created on demand."""
    return root / OUTPUT_DIR
