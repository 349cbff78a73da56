from __future__ import annotations

import importlib
from dataclasses import dataclass
from typing import Dict, List, Type

from .base import Frontend

__all__ = [
    "register_lazy",
    "get_frontend",
    "list_frontends",
]


@dataclass(frozen=True)
class _LazySpec:
    module: str
    class_name: str
    name: str


# Ленивые спецификации: имя языка → где лежит класс фронтенда
_LAZY_BY_NAME: Dict[str, _LazySpec] = {}

# Уже загруженные классы
_CLASS_BY_NAME: Dict[str, Type[Frontend]] = {}


def register_lazy(*, module: str, class_name: str, name: str) -> None:
    """
    Зарегистрировать фронтенд «по строкам» без импорта модуля.
    Тяжёлые зависимости (грамматики tree-sitter) грузятся при первом запросе.
    """
    _LAZY_BY_NAME[name] = _LazySpec(module=module, class_name=class_name, name=name)


def _load_frontend_from_spec(spec: _LazySpec) -> Type[Frontend]:
    mod = importlib.import_module(spec.module, package=__package__)
    cls = getattr(mod, spec.class_name, None)
    if cls is None:
        raise RuntimeError(f"Frontend class '{spec.class_name}' not found in {spec.module}")
    if not issubclass(cls, Frontend):
        raise TypeError(f"{spec.module}.{spec.class_name} is not a subclass of Frontend")
    _CLASS_BY_NAME[spec.name] = cls
    return cls


def get_frontend(name: str = "python") -> Frontend:
    """
    Вернуть экземпляр фронтенда по имени языка.

    Raises:
        ValueError: Если язык не зарегистрирован
    """
    cls = _CLASS_BY_NAME.get(name)
    if cls is None:
        spec = _LAZY_BY_NAME.get(name)
        if spec is None:
            raise ValueError(f"Unknown frontend: {name}")
        cls = _load_frontend_from_spec(spec)
    return cls()


def list_frontends() -> List[str]:
    return sorted(_LAZY_BY_NAME)
