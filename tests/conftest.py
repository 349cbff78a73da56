from pathlib import Path

import pytest

from sg.frontend.python import PythonFrontend

# Импорт из унифицированной инфраструктуры
from tests.infrastructure.file_utils import write_tree, write_yaml
from tests.infrastructure.samples import SAMPLE_CORPUS
from tests.infrastructure.adapter_utils import skip_if_no_tree_sitter  # noqa: F401


@pytest.fixture
def frontend() -> PythonFrontend:
    return PythonFrontend()


@pytest.fixture
def sample_source(tmp_path: Path) -> Path:
    """Каталог source/ с SAMPLE_CORPUS."""
    return write_tree(tmp_path / "source", SAMPLE_CORPUS)


@pytest.fixture
def home(tmp_path: Path) -> Path:
    """
    Домашний каталог под схему sg:
    source/, references/references.yaml, resources/resources.yaml + файлы ресурсов.
    """
    root = tmp_path / "home"
    write_tree(root / "source", SAMPLE_CORPUS)
    write_yaml(root / "references" / "references.yaml", """
        - file: six.py
          target: py38
          enabled: true
        - file: attrs.py
          target: py311
          enabled: true
        """)
    write_tree(root / "references" / "py38", {"six.py": "# stub\n"})
    write_yaml(root / "resources" / "resources.yaml", """
        - name: config.json
          file: config.json
          platform: anycpu
          enabled: true
        - name: native64.bin
          file: native64.bin
          platform: x64
          enabled: true
        - name: native86.bin
          file: native86.bin
          platform: x86
          enabled: true
        - name: disabled.txt
          file: disabled.txt
          enabled: false
        """)
    write_tree(root / "resources", {
        "config.json": "{}\n",
        "native64.bin": "x64\n",
        "native86.bin": "x86\n",
    })
    return root
