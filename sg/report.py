from __future__ import annotations

from typing import List, Optional

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel

from .types import OutputKind, Platform, TargetVersion


class BuildReport(BaseModel):
    """Итог одной сборки; в JSON ключи в camelCase."""
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    format_version: int = 1
    tool_version: str
    name: str
    output_kind: OutputKind
    target_version: TargetVersion
    platform: Platform
    optimized: bool

    source_files: int
    kept_files: List[str]
    pruned_files: List[str]
    # только объявленные в корпусе; внешние модули, builtins и сама точка входа не попадают
    reachable_symbols: List[str]
    removed_imports: List[str]
    resources: List[str]

    artifact_size: int
    artifact_path: Optional[str] = None


__all__ = ["BuildReport"]
