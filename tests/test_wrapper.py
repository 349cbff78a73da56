import random

import pytest

from sg.types import OutputKind
from sg.wrapper import is_identifier, prelude, random_identifier, wrap_source


def test_library_one_liner_gets_return():
    src = wrap_source("ping()", OutputKind.LIBRARY, class_name="Snippet", modules=["netutil"])
    assert src == (
        "import os\n"
        "import sys\n"
        "from netutil import *\n"
        "\n"
        "class Snippet:\n"
        "    @staticmethod\n"
        "    def execute():\n"
        "        return ping()\n"
    )


def test_library_with_explicit_return_is_kept():
    src = wrap_source("return 1", OutputKind.LIBRARY, class_name="Snippet")
    assert "        return 1\n" in src
    assert "return return" not in src


def test_multiline_body_is_indented():
    code = "x = 1\nif x:\n    print(x)"
    src = wrap_source(code, OutputKind.LIBRARY, class_name="Snippet")
    assert "        x = 1\n        if x:\n            print(x)\n" in src
    assert "return x = 1" not in src


def test_console_uses_main():
    src = wrap_source("print('hi')", OutputKind.CONSOLE, class_name="Program")
    assert "    def main():\n        print('hi')\n" in src
    assert "return" not in src


def test_empty_snippet_becomes_pass():
    src = wrap_source("", OutputKind.CONSOLE, class_name="Program")
    assert "    def main():\n        pass\n" in src


def test_code_with_top_level_class_is_unchanged():
    code = "class Program:\n    @staticmethod\n    def main():\n        return 0\n"
    assert wrap_source(code, OutputKind.CONSOLE, class_name="Other") == code


def test_random_class_name():
    src = wrap_source("1", OutputKind.LIBRARY)
    class_line = next(ln for ln in src.splitlines() if ln.startswith("class "))
    assert is_identifier(class_line[len("class "):-1])


def test_prelude_imports_every_module():
    assert prelude(["a", "b"]).splitlines() == ["import os", "import sys", "from a import *", "from b import *"]


@pytest.mark.parametrize("value, ok", [
    ("Program", True),
    ("_x1", True),
    ("1abc", False),
    ("with-dash", False),
    ("", False),
])
def test_is_identifier(value, ok):
    assert is_identifier(value) is ok


def test_random_identifier_shape():
    rng = random.Random(7)
    for _ in range(50):
        name = random_identifier(rng)
        assert 11 <= len(name) <= 30
        assert name[0].isalpha()
        assert is_identifier(name)
