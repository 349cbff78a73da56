from __future__ import annotations

import dataclasses
import logging
import sys
import typing as t
from dataclasses import fields, is_dataclass
from enum import Enum
from types import UnionType
from typing import Any, get_args, get_origin

from pydantic import BaseModel

_LOG = logging.getLogger(__name__)

# -------------------- Public error --------------------

class ConfigLoadError(ValueError):
    """Ошибка типизированной загрузки конфигурации с указанием пути поля."""
    pass

# -------------------- Helpers --------------------

def _type_name(tp: Any) -> str:
    return getattr(tp, "__name__", str(tp))

def _err(path: str, msg: str) -> ConfigLoadError:
    _LOG.debug("RAISE at %s: %s", path, msg)
    return ConfigLoadError(f"{path}: {msg}")

def _is_base_model(tp: Any) -> bool:
    return isinstance(tp, type) and issubclass(tp, BaseModel)

def _coerce_enum(val: Any, tp: Any, path: str) -> Any:
    if isinstance(val, tp):
        return val
    if isinstance(val, str):
        # по значению без учёта регистра ("X64" → Platform.X64), затем по имени
        for member in tp:
            if isinstance(member.value, str) and member.value.lower() == val.lower():
                return member
        if val in tp.__members__:
            return tp[val]
    allowed = ", ".join(str(m.value) for m in tp)
    raise _err(path, f"expected one of [{allowed}], got {val!r}")

def _coerce_union(val: Any, tp: Any, path: str) -> Any:
    errs: list[str] = []
    for sub in get_args(tp):
        # NoneType матчится ТОЛЬКО при val is None
        if sub is type(None):
            if val is None:
                return None
            continue
        try:
            return load_typed(sub, val, path=path)
        except ConfigLoadError as e:
            errs.append(str(e))
    raise _err(path, " | ".join(errs) or f"no variant of {_type_name(tp)} matched")

def _coerce_sequence(val: Any, tp: Any, path: str) -> Any:
    origin = get_origin(tp)
    if not isinstance(val, (list, tuple)):
        raise _err(path, f"expected sequence, got {type(val).__name__}")
    args = get_args(tp)
    # Tuple[X, ...]
    et = args[0] if args else Any
    items = [load_typed(et, v, path=f"{path}[{i}]") for i, v in enumerate(val)]
    if origin in (tuple, t.Tuple):
        return tuple(items)
    return items

def _resolve_type_hints_for_class(tp: Any) -> dict[str, Any]:
    mod = sys.modules.get(tp.__module__)
    gns = dict(vars(mod)) if mod is not None else {}
    return t.get_type_hints(tp, globalns=gns, localns=None)

def _coerce_dataclass(val: Any, tp: Any, path: str) -> Any:
    if not isinstance(val, dict):
        raise _err(path, f"expected mapping for {_type_name(tp)}, got {type(val).__name__}")
    type_hints = _resolve_type_hints_for_class(tp)
    fld_map = {f.name: f for f in fields(tp) if f.init}
    extras = set(val.keys()) - set(fld_map.keys())
    if extras:
        raise _err(path, f"unknown key(s): {sorted(extras)}")
    kwargs: dict[str, Any] = {}
    for name, f in fld_map.items():
        sub_path = f"{path}.{name}"
        ftype = type_hints.get(name, f.type)
        if name in val:
            kwargs[name] = load_typed(ftype, val[name], path=sub_path)
        elif f.default is dataclasses.MISSING and f.default_factory is dataclasses.MISSING:
            raise _err(sub_path, "required field missing")
    return tp(**kwargs)

def _coerce_pydantic(val: Any, tp: Any, path: str) -> Any:
    try:
        return tp.model_validate(val)
    except Exception as e:
        raise _err(path, f"pydantic validation error: {e}")

# -------------------- Entry point --------------------

def load_typed(tp: Any, val: Any, *, path: str = "$") -> Any:
    """
    Рекурсивная коэрция raw→typed по аннотациям tp.
    Ошибка несёт путь до поля: "$[2].platform: expected one of [...]".
    """
    origin = get_origin(tp)

    if tp is Any or tp is object:
        return val

    if _is_base_model(tp):
        return _coerce_pydantic(val, tp, path)

    if isinstance(tp, type) and is_dataclass(tp):
        return _coerce_dataclass(val, tp, path)

    # Union / Optional (оба варианта: typing.Union и types.UnionType)
    if origin in (t.Union, UnionType):
        return _coerce_union(val, tp, path)

    if origin in (list, t.List, tuple, t.Tuple):
        return _coerce_sequence(val, tp, path)

    if isinstance(tp, type) and issubclass(tp, Enum):
        return _coerce_enum(val, tp, path)

    # Примитивы; bool не считается int
    if tp in (str, int, float, bool):
        if not isinstance(val, tp) or (tp is int and isinstance(val, bool)):
            raise _err(path, f"expected {_type_name(tp)}, got {type(val).__name__}")
        return val

    raise _err(path, f"unsupported type {_type_name(tp)}")
