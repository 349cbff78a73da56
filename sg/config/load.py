"""
Загрузка references.yaml и resources.yaml.

Оба файла: YAML-списки записей. Отсутствующий файл означает пустой список.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Any, List, Tuple

from ruamel.yaml import YAML
from ruamel.yaml.error import YAMLError

from .paths import references_path, resources_path
from .typed import ConfigLoadError, load_typed
from ..types import EmbeddedResource, Reference

logger = logging.getLogger(__name__)

_yaml = YAML(typ="safe")


def _read_yaml_list(path: Path) -> List[Any]:
    """Читает YAML-файл со списком записей."""
    if not path.is_file():
        logger.debug("%s not found, using an empty list", path)
        return []
    try:
        raw = _yaml.load(path.read_text(encoding="utf-8"))
    except YAMLError as e:
        raise ConfigLoadError(f"{path}: invalid YAML: {e}")
    if raw is None:
        return []
    if not isinstance(raw, list):
        raise ConfigLoadError(f"{path}: YAML must be a list of entries")
    return raw


def load_references(root: Path) -> Tuple[Reference, ...]:
    path = references_path(root)
    raw = _read_yaml_list(path)
    try:
        return tuple(load_typed(List[Reference], raw, path=path.name))
    except ConfigLoadError as e:
        raise ConfigLoadError(f"{path.parent.name}/{e}")


def load_resources(root: Path) -> Tuple[EmbeddedResource, ...]:
    path = resources_path(root)
    raw = _read_yaml_list(path)
    try:
        return tuple(load_typed(List[EmbeddedResource], raw, path=path.name))
    except ConfigLoadError as e:
        raise ConfigLoadError(f"{path.parent.name}/{e}")
