"""
Configuration loading for Snippet Generator.
"""

from __future__ import annotations

from .load import load_references, load_resources
from .paths import (
    home_root,
    output_dir,
    references_dir,
    references_path,
    resources_dir,
    resources_path,
    source_dir,
)
from .typed import ConfigLoadError, load_typed

__all__ = [
    "ConfigLoadError",
    "load_typed",
    "load_references",
    "load_resources",
    "home_root",
    "source_dir",
    "references_dir",
    "references_path",
    "resources_dir",
    "resources_path",
    "output_dir",
]
