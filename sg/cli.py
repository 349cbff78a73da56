from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path
from typing import Optional

from .compiler import compile_request
from .config import (
    home_root,
    load_references,
    load_resources,
    output_dir,
    references_dir,
    resources_dir,
    source_dir,
)
from .console import setup_logging
from .corpus import read_text, top_level_names
from .errors import BindingFailure, EmissionFailure
from .jsonic import dumps as jdumps
from .types import CompilationRequest, OutputKind, Platform, TargetVersion
from .version import tool_version
from .wrapper import is_identifier, wrap_source

logger = logging.getLogger("sg.cli")

# Синонимы --output-kind
_OUTPUT_KINDS = {
    "console": OutputKind.CONSOLE,
    "exe": OutputKind.CONSOLE,
    "app": OutputKind.CONSOLE,
    "library": OutputKind.LIBRARY,
    "lib": OutputKind.LIBRARY,
    "dll": OutputKind.LIBRARY,
}

# Вид артефакта по расширению выходного файла
_SUFFIX_KINDS = {
    ".pyz": OutputKind.CONSOLE,
    ".zip": OutputKind.LIBRARY,
}


def _identifier(value: str) -> str:
    if not is_identifier(value):
        raise argparse.ArgumentTypeError(f"not a valid identifier: {value!r}")
    return value


def _output_kind(value: str) -> OutputKind:
    kind = _OUTPUT_KINDS.get(value.lower())
    if kind is None:
        raise argparse.ArgumentTypeError(f"invalid output kind: {value!r} (console or library)")
    return kind


def _target(value: str) -> TargetVersion:
    try:
        return TargetVersion(value.lower())
    except ValueError:
        allowed = ", ".join(t.value for t in TargetVersion)
        raise argparse.ArgumentTypeError(f"invalid target: {value!r} (one of {allowed})")


def _platform(value: str) -> Platform:
    try:
        return Platform(value.lower())
    except ValueError:
        raise argparse.ArgumentTypeError(f"invalid platform: {value!r} (anycpu, x86 or x64)")


def _build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(
        prog="sg",
        description="Snippet Generator: build a pruned Python archive from a code snippet",
        add_help=True,
    )
    p.add_argument("--version", action="version", version=f"%(prog)s {tool_version()}")

    # Обязательный выход
    p.add_argument(
        "-f", "--file",
        required=True,
        metavar="OUTPUT_FILE",
        help="имя артефакта в каталоге output/ (.pyz: консольный, .zip: библиотека)",
    )

    # Параметры сборки
    p.add_argument("-t", "--target", type=_target, default=TargetVersion.PY38, help="версия Python: py38 … py313")
    p.add_argument("-o", "--output-kind", type=_output_kind, help="console | library")
    p.add_argument("-p", "--platform", type=_platform, default=Platform.ANY_CPU, help="anycpu | x86 | x64")
    p.add_argument("-n", "--no-optimization", action="store_true", help="не отсекать неиспользуемые файлы корпуса")
    p.add_argument("-a", "--assembly-name", type=_identifier, help="имя модуля точки входа")

    # Исходник
    p.add_argument("-s", "--source-file", type=Path, help="файл с кодом вместо аргументов командной строки")
    p.add_argument("-c", "--class-name", type=_identifier, help="имя генерируемого класса-обёртки")
    p.add_argument("code", nargs="*", help="код сниппета")

    # Окружение и вывод
    p.add_argument("--root", type=Path, help="домашний каталог (по умолчанию $SG_HOME или текущий)")
    p.add_argument("--json", action="store_true", help="напечатать JSON-отчёт о сборке в stdout")
    p.add_argument("-v", "--verbose", action="store_true", help="подробный лог в stderr")
    return p


def _resolve_output_kind(ns: argparse.Namespace) -> OutputKind:
    if ns.output_kind is not None:
        return ns.output_kind
    return _SUFFIX_KINDS.get(Path(ns.file).suffix.lower(), OutputKind.LIBRARY)


def _read_code(ns: argparse.Namespace) -> str:
    if ns.source_file is not None:
        if not ns.source_file.is_file():
            raise ValueError(f"Source file not found: {ns.source_file}")
        return read_text(ns.source_file)
    code = " ".join(ns.code).strip()
    if not code:
        raise ValueError("No source code given: pass code arguments or --source-file")
    return code


def _build_request(ns: argparse.Namespace, root: Path) -> CompilationRequest:
    output_kind = _resolve_output_kind(ns)
    source = wrap_source(
        _read_code(ns),
        output_kind,
        class_name=ns.class_name,
        modules=top_level_names(source_dir(root)),
    )
    return CompilationRequest(
        source=source,
        source_directory=source_dir(root),
        resource_directory=resources_dir(root),
        reference_directory=references_dir(root),
        target_version=ns.target,
        output_kind=output_kind,
        platform=ns.platform,
        optimize=not ns.no_optimization,
        assembly_name=ns.assembly_name,
        references=load_references(root),
        embedded_resources=load_resources(root),
    )


def main(argv: Optional[list[str]] = None) -> int:
    ns = _build_parser().parse_args(argv)
    setup_logging(verbose=ns.verbose)

    try:
        root = home_root(ns.root)
        request = _build_request(ns, root)
        result = compile_request(request)

        out_dir = output_dir(root)
        out_dir.mkdir(parents=True, exist_ok=True)
        path = out_dir / Path(ns.file).name
        path.write_bytes(result.artifact)
        logger.info("Compiled artifact written to: %s", path)

        if ns.json:
            report = result.report.model_copy(update={"artifact_path": str(path)})
            sys.stdout.write(jdumps(report.model_dump(mode="json", by_alias=True)))
        return 0

    except BindingFailure as e:
        logger.error("%s", e)
        return 3
    except EmissionFailure as e:
        logger.error("%s", e)
        return 4
    except ValueError as e:
        # ConfigLoadError тоже ValueError
        logger.error("%s", str(e).rstrip())
        return 2


if __name__ == "__main__":
    raise SystemExit(main())
