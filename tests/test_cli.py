from tests.infrastructure import jload, run_cli, write_yaml


def test_library_build_with_json_report(home):
    cp = run_cli(home, "-f", "snippet.zip", "-a", "Snippet", "--json", "ping()")
    assert cp.returncode == 0, cp.stderr
    data = jload(cp.stdout)
    assert data["name"] == "Snippet"
    assert data["outputKind"] == "library"
    assert data["keptFiles"] == ["netutil/__init__.py"]
    assert data["reachableSymbols"] == ["netutil.ping"]
    assert data["removedImports"] == ["import os", "import sys", "from toolkit import *"]
    assert data["formatVersion"] == 1
    assert (home / "output" / "snippet.zip").is_file()
    assert data["artifactPath"].endswith("snippet.zip")
    assert data["artifactSize"] == (home / "output" / "snippet.zip").stat().st_size
    # лог идёт в stderr
    assert "[+] Compiling source:" in cp.stderr


def test_console_kind_from_suffix(home):
    cp = run_cli(home, "-f", "app.pyz", "-a", "App", "-c", "Program", "--json", "print(ping())")
    assert cp.returncode == 0, cp.stderr
    data = jload(cp.stdout)
    assert data["outputKind"] == "console"
    assert (home / "output" / "app.pyz").read_bytes().startswith(b"#!")


def test_output_kind_alias_and_platform(home):
    cp = run_cli(home, "-f", "out.bin", "-o", "exe", "-p", "x64", "-n", "--json", "pass")
    assert cp.returncode == 0, cp.stderr
    data = jload(cp.stdout)
    assert data["outputKind"] == "console"
    assert data["optimized"] is False
    assert data["resources"] == ["config.json", "native64.bin"]


def test_source_file(home):
    (home / "snippet.py").write_text("value = ping()\nreturn value\n", encoding="utf-8")
    cp = run_cli(home, "-f", "s.zip", "-s", "snippet.py", "--json")
    assert cp.returncode == 0, cp.stderr
    assert jload(cp.stdout)["keptFiles"] == ["netutil/__init__.py"]


def test_explicit_root(home, tmp_path):
    other = tmp_path / "other"
    other.mkdir()
    cp = run_cli(home, "--root", str(other), "-f", "x.zip", "1")
    assert cp.returncode == 0, cp.stderr
    assert (other / "output" / "x.zip").is_file()
    assert not (home / "output").exists()


def test_usage_errors(home):
    assert run_cli(home, "ping()").returncode == 2                         # нет -f
    assert run_cli(home, "-f", "a.zip", "-a", "1abc", "1").returncode == 2  # не идентификатор
    assert run_cli(home, "-f", "a.zip", "-t", "py27", "1").returncode == 2
    assert run_cli(home, "-f", "a.zip").returncode == 2                    # нет кода


def test_bad_config_exits_2(home):
    write_yaml(home / "references" / "references.yaml", "- file: six.py\n  bogus: 1\n")
    cp = run_cli(home, "-f", "a.zip", "1")
    assert cp.returncode == 2
    assert "bogus" in cp.stderr


def test_binding_errors_exit_3(home):
    cp = run_cli(home, "-f", "a.zip", "def (")
    assert cp.returncode == 3
    assert "SG1001" in cp.stderr
    assert not (home / "output" / "a.zip").exists()


def test_emission_errors_exit_4(home):
    write_yaml(home / "resources" / "resources.yaml", """
        - name: gone.bin
          file: gone.bin
          enabled: true
        """)
    cp = run_cli(home, "-f", "a.zip", "1")
    assert cp.returncode == 4
    assert "SG3004" in cp.stderr


def test_version(home):
    cp = run_cli(home, "--version")
    assert cp.returncode == 0
    assert cp.stdout.startswith("sg ")
