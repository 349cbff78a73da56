"""
Build driver: corpus + entry snippet → artifact bytes.

Two passes when optimization is on: the first compilation drives
reachability, pruning and import trimming; the second one binds the reduced
tree set and is the one emitted. Without optimization the first compilation
is emitted as is.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import List, Optional, Tuple

from .corpus import SourceUnit, load_corpus
from .frontend import get_frontend
from .frontend.base import CompilationOptions, Frontend, ReferenceFile, ResourceFile
from .optimize import find_reachable, prune, trim_imports
from .report import BuildReport
from .types import CompilationRequest
from .version import tool_version
from .wrapper import random_identifier

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class CompileResult:
    artifact: bytes
    report: BuildReport


def resolve_references(request: CompilationRequest) -> List[ReferenceFile]:
    """Enabled references of the requested target, as files under <references>/<target>/."""
    target = request.target_version
    out = []
    for ref in request.references:
        if not ref.enabled or ref.target is not target:
            continue
        path = request.reference_directory / target.value / ref.file
        out.append(ReferenceFile(path=path, module=ref.module_name()))
    return out


def resolve_resources(request: CompilationRequest) -> List[ResourceFile]:
    """Enabled resources compatible with the requested platform."""
    out = []
    for res in request.embedded_resources:
        if not res.enabled or not res.is_compatible(request.platform):
            continue
        out.append(ResourceFile(name=res.name, path=request.resource_directory / res.file))
    return out


def compile_request(request: CompilationRequest, frontend: Optional[Frontend] = None) -> CompileResult:
    """
    Build one artifact.

    Raises:
        BindingFailure: The corpus, the entry or the references cannot be bound
        EmissionFailure: The final compilation cannot be emitted
    """
    frontend = frontend or get_frontend("python")
    name = request.assembly_name or random_identifier()
    options = CompilationOptions(
        name=name,
        output_kind=request.output_kind,
        platform=request.platform,
        target_version=request.target_version,
    )
    references = resolve_references(request)
    resources = resolve_resources(request)

    corpus = load_corpus(request.source_directory, frontend)
    entry = SourceUnit(
        path=Path(f"{name}.py"),
        rel_path=f"{name}.py",
        tree=frontend.parse(request.source, f"{name}.py", name),
    )

    logger.info("Compiling source:\n%s", request.source)
    compilation = frontend.bind([u.tree for u in corpus] + [entry.tree], references, options)

    kept: List[SourceUnit] = corpus
    reachable_names: List[str] = []
    removed_imports: Tuple[str, ...] = ()

    if request.optimize:
        reachable = find_reachable(entry, corpus, compilation)
        reachable_names = sorted(s.qualified_name for s in reachable)
        kept = prune(corpus, compilation, reachable_names)

        trimmed = trim_imports(entry, compilation, frontend)
        removed_imports = trimmed.removed
        entry = SourceUnit(path=entry.path, rel_path=entry.rel_path, tree=trimmed.tree)

        logger.info("Compiling optimized source:\n%s", entry.tree.text)
        compilation = frontend.bind([u.tree for u in kept] + [entry.tree], references, options)

    artifact = frontend.emit(compilation, resources)

    kept_paths = {u.rel_path for u in kept}
    report = BuildReport(
        tool_version=tool_version(),
        name=name,
        output_kind=request.output_kind,
        target_version=request.target_version,
        platform=request.platform,
        optimized=request.optimize,
        source_files=len(corpus),
        kept_files=[u.rel_path for u in kept],
        pruned_files=[u.rel_path for u in corpus if u.rel_path not in kept_paths],
        reachable_symbols=reachable_names,
        removed_imports=list(removed_imports),
        resources=[r.name for r in resources],
        artifact_size=len(artifact),
    )
    logger.debug("Kept %d of %d corpus files", len(kept), len(corpus))
    return CompileResult(artifact=artifact, report=report)


__all__ = ["CompileResult", "compile_request", "resolve_references", "resolve_resources"]
