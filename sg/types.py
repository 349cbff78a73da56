from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import NewType, Optional, Tuple

# ---- Aliases for clarity ----
ModuleName = NewType("ModuleName", str)  # "pkg.sub.mod"
RelPath = NewType("RelPath", str)  # POSIX-путь относительно каталога исходников


class TargetVersion(str, Enum):
    """Версия Python, под которую собирается артефакт."""
    PY38 = "py38"
    PY39 = "py39"
    PY310 = "py310"
    PY311 = "py311"
    PY312 = "py312"
    PY313 = "py313"

    @property
    def feature_version(self) -> Tuple[int, int]:
        """(major, minor) для ast.parse(feature_version=...)."""
        return 3, int(self.value[3:])


class OutputKind(str, Enum):
    CONSOLE = "console"  # zipapp с __main__.py
    LIBRARY = "library"  # обычный zip-архив модулей


class Platform(str, Enum):
    ANY_CPU = "anycpu"
    X86 = "x86"
    X64 = "x64"


# ---- Ссылки и ресурсы ----

@dataclass(frozen=True)
class Reference:
    """
    Внешняя библиотека, доступная на целевой машине.

    Файл ищется в <references>/<target>/<file>. Символы из таких модулей
    не имеют объявлений в корпусе и не влияют на отсечение.
    """
    file: str
    target: TargetVersion = TargetVersion.PY38
    enabled: bool = False
    # Импортируемое имя верхнего уровня; по умолчанию выводится из имени файла
    module: Optional[str] = None

    def module_name(self) -> str:
        if self.module:
            return self.module
        # requests-2.31.0-py3-none-any.whl → requests; six.py → six
        stem = Path(self.file).name.split("-", 1)[0]
        stem = stem.split(".", 1)[0]
        return stem.replace("-", "_").lower()


@dataclass(frozen=True)
class EmbeddedResource:
    """Файл данных, упаковываемый в артефакт под __resources__/<name>."""
    name: str
    file: str
    platform: Platform = Platform.ANY_CPU
    enabled: bool = False

    def is_compatible(self, platform: Platform) -> bool:
        return platform is Platform.ANY_CPU or self.platform is Platform.ANY_CPU or self.platform is platform


# ---- Запрос на сборку ----

@dataclass(frozen=True)
class CompilationRequest:
    """
    Неизменяемый запрос на одну сборку.

    Ядро только читает поля запроса и никогда не пишет обратно.
    """
    source: str
    source_directory: Path
    resource_directory: Path
    reference_directory: Path

    target_version: TargetVersion = TargetVersion.PY38
    output_kind: OutputKind = OutputKind.LIBRARY
    platform: Platform = Platform.ANY_CPU
    optimize: bool = True

    assembly_name: Optional[str] = None
    references: Tuple[Reference, ...] = field(default_factory=tuple)
    embedded_resources: Tuple[EmbeddedResource, ...] = field(default_factory=tuple)


__all__ = [
    "ModuleName",
    "RelPath",
    "TargetVersion",
    "OutputKind",
    "Platform",
    "Reference",
    "EmbeddedResource",
    "CompilationRequest",
]
