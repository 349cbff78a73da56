"""
End-to-end tests of the build driver: corpus + snippet → archive + report.
"""

import io
import logging
import subprocess
import sys
import zipfile

import pytest

from sg.compiler import compile_request, resolve_references, resolve_resources
from sg.config import load_references, load_resources, references_dir, resources_dir, source_dir
from sg.errors import BindingFailure, EmissionFailure
from sg.frontend.python.emitter import SHEBANG
from sg.types import CompilationRequest, EmbeddedResource, OutputKind, Platform, TargetVersion
from sg.wrapper import is_identifier, wrap_source
from tests.infrastructure import SAMPLE_CORPUS, SAMPLE_ENTRY, write_tree


def make_request(home, source=SAMPLE_ENTRY, **overrides) -> CompilationRequest:
    params = dict(
        source=source,
        source_directory=source_dir(home),
        resource_directory=resources_dir(home),
        reference_directory=references_dir(home),
        assembly_name="Entry",
        references=load_references(home),
        embedded_resources=load_resources(home),
    )
    params.update(overrides)
    return CompilationRequest(**params)


def entries(data: bytes) -> dict:
    with zipfile.ZipFile(io.BytesIO(data)) as zf:
        return {name: zf.read(name) for name in zf.namelist()}


class TestOptimizedBuild:

    def test_report(self, home):
        report = compile_request(make_request(home)).report
        assert report.name == "Entry"
        assert report.optimized is True
        assert report.source_files == 5
        assert report.kept_files == ["toolkit/__init__.py", "toolkit/helpers.py", "toolkit/inner.py"]
        assert report.pruned_files == ["netutil/__init__.py", "toolkit/dead.py"]
        assert report.reachable_symbols == [
            "toolkit",
            "toolkit.helpers.Helper",
            "toolkit.inner",
            "toolkit.inner.Inner",
        ]
        assert report.removed_imports == ["import json", "from netutil import ping"]
        assert report.resources == ["config.json", "native64.bin", "native86.bin"]
        assert report.target_version is TargetVersion.PY38

    def test_archive(self, home):
        result = compile_request(make_request(home))
        files = entries(result.artifact)
        assert sorted(files) == [
            "Entry.py",
            "__resources__/config.json",
            "__resources__/native64.bin",
            "__resources__/native86.bin",
            "toolkit/__init__.py",
            "toolkit/helpers.py",
            "toolkit/inner.py",
        ]
        assert files["Entry.py"] == b"from toolkit.helpers import Helper\n\n\ndef main():\n    return Helper().run()\n"
        assert result.report.artifact_size == len(result.artifact)

    def test_compile_is_deterministic(self, home):
        first = compile_request(make_request(home)).artifact
        second = compile_request(make_request(home)).artifact
        assert first == second

    def test_progress_is_logged(self, home, caplog):
        with caplog.at_level(logging.INFO, logger="sg.compiler"):
            compile_request(make_request(home))
        assert "Compiling source:\n" + SAMPLE_ENTRY in caplog.text
        assert "Compiling optimized source:\nfrom toolkit.helpers import Helper" in caplog.text

    def test_noop_optimization_is_byte_identical(self, tmp_path):
        home = tmp_path / "home"
        write_tree(home / "source", {
            k: v for k, v in SAMPLE_CORPUS.items()
            if k in ("toolkit/__init__.py", "toolkit/helpers.py", "toolkit/inner.py")
        })
        source = "from toolkit.helpers import Helper\n\n\ndef main():\n    return Helper().run()\n"
        optimized = compile_request(make_request(home, source))
        plain = compile_request(make_request(home, source, optimize=False))
        assert optimized.report.pruned_files == []
        assert optimized.report.removed_imports == []
        assert optimized.artifact == plain.artifact


class TestUnoptimizedBuild:

    def test_everything_is_kept(self, home):
        result = compile_request(make_request(home, optimize=False))
        report = result.report
        assert report.optimized is False
        assert report.kept_files == sorted(SAMPLE_CORPUS)
        assert report.pruned_files == []
        assert report.reachable_symbols == []
        assert report.removed_imports == []
        assert entries(result.artifact)["Entry.py"] == SAMPLE_ENTRY.encode("utf-8")


class TestOptions:

    def test_console_output(self, home):
        result = compile_request(make_request(home, output_kind=OutputKind.CONSOLE))
        assert result.artifact.startswith(SHEBANG)
        assert "__main__.py" in entries(result.artifact)

    @pytest.mark.parametrize("platform, expected", [
        (Platform.ANY_CPU, ["config.json", "native64.bin", "native86.bin"]),
        (Platform.X64, ["config.json", "native64.bin"]),
        (Platform.X86, ["config.json", "native86.bin"]),
    ])
    def test_resources_follow_platform(self, home, platform, expected):
        request = make_request(home, platform=platform)
        assert [r.name for r in resolve_resources(request)] == expected
        assert compile_request(request).report.resources == expected

    def test_references_follow_target(self, home):
        py38 = resolve_references(make_request(home))
        assert [(r.module, r.path) for r in py38] == [("six", references_dir(home) / "py38" / "six.py")]
        py311 = resolve_references(make_request(home, target_version=TargetVersion.PY311))
        assert [r.module for r in py311] == ["attrs"]

    def test_random_assembly_name(self, home):
        result = compile_request(make_request(home, assembly_name=None))
        name = result.report.name
        assert is_identifier(name)
        assert f"{name}.py" in entries(result.artifact)


def run_archive(tmp_path, data: bytes, name: str) -> str:
    """Write a console archive and run it with the current interpreter."""
    path = tmp_path / f"{name}.pyz"
    path.write_bytes(data)
    proc = subprocess.run([sys.executable, str(path)], capture_output=True, text=True, timeout=60)
    assert proc.returncode == 0, proc.stderr
    return proc.stdout


def optimized_and_plain_output(tmp_path, home, source):
    optimized = compile_request(make_request(home, source, output_kind=OutputKind.CONSOLE))
    plain = compile_request(make_request(home, source, output_kind=OutputKind.CONSOLE, optimize=False))
    return (
        optimized,
        run_archive(tmp_path, optimized.artifact, "optimized"),
        run_archive(tmp_path, plain.artifact, "plain"),
    )


class TestArchiveBehaviour:

    def test_pruned_archive_prints_the_same(self, tmp_path, home):
        source = "from toolkit.helpers import Helper\nimport json\n\n\ndef main():\n    print(Helper().run())\n"
        result, optimized, plain = optimized_and_plain_output(tmp_path, home, source)
        assert result.report.pruned_files == ["netutil/__init__.py", "toolkit/dead.py"]
        assert optimized == plain == '{"answer": 42}\n'

    def test_last_star_import_wins_after_pruning(self, tmp_path):
        home = tmp_path / "home"
        write_tree(home / "source", {
            "alpha/__init__.py": "def greet():\n    return 'alpha'\n",
            "beta/__init__.py": "def greet():\n    return 'beta'\n",
            "gamma.py": "class Unused:\n    pass\n",
        })
        source = wrap_source("print(greet())", OutputKind.CONSOLE, class_name="Program", modules=["alpha", "beta"])
        result, optimized, plain = optimized_and_plain_output(tmp_path, home, source)
        assert result.report.kept_files == ["alpha/__init__.py", "beta/__init__.py"]
        assert result.report.pruned_files == ["gamma.py"]
        assert optimized == plain == "beta\n"

    def test_rebound_import_wins_after_pruning(self, tmp_path):
        home = tmp_path / "home"
        write_tree(home / "source", {
            "a.py": "class X:\n    def __str__(self):\n        return 'a'\n",
            "b.py": "class X:\n    def __str__(self):\n        return 'b'\n",
        })
        source = "from a import X\nfrom b import X\n\n\ndef main():\n    print(X())\n"
        result, optimized, plain = optimized_and_plain_output(tmp_path, home, source)
        assert result.report.kept_files == ["a.py", "b.py"]
        assert result.report.removed_imports == []
        assert optimized == plain == "b\n"


class TestFailures:

    def test_syntax_error(self, home):
        with pytest.raises(BindingFailure) as ei:
            compile_request(make_request(home, "def main(:\n"))
        assert ei.value.diagnostics[0].code == "SG1001"

    def test_missing_reference(self, home):
        # attrs.py is enabled for py311 but not present on disk
        with pytest.raises(BindingFailure) as ei:
            compile_request(make_request(home, target_version=TargetVersion.PY311))
        assert [d.code for d in ei.value.diagnostics] == ["SG1002"]

    def test_missing_entry_point(self, home):
        with pytest.raises(EmissionFailure) as ei:
            compile_request(make_request(home, "X = 1\n", output_kind=OutputKind.CONSOLE))
        assert [d.code for d in ei.value.diagnostics] == ["SG3003"]

    def test_missing_resource(self, home):
        missing = EmbeddedResource(name="gone.bin", file="gone.bin", enabled=True)
        with pytest.raises(EmissionFailure) as ei:
            compile_request(make_request(home, embedded_resources=(missing,)))
        assert [d.code for d in ei.value.diagnostics] == ["SG3004"]
