"""
Tests for removal of unused imports from the entry unit.
"""

from sg.frontend.python import PythonFrontend
from sg.optimize import find_reachable, trim_imports, used_namespaces
from tests.infrastructure import SAMPLE_CORPUS, SAMPLE_ENTRY, build


def trim(tmp_path, entry_text, files=SAMPLE_CORPUS):
    _, entry, compilation = build(tmp_path, files, entry_text)
    return entry, trim_imports(entry, compilation, PythonFrontend())


def test_unused_imports_are_removed(tmp_path):
    entry, result = trim(tmp_path, SAMPLE_ENTRY)
    assert result.removed == ("import json", "from netutil import ping")
    assert result.tree.text == "from toolkit.helpers import Helper\n\n\ndef main():\n    return Helper().run()\n"
    # the input unit keeps its original tree
    assert entry.tree.text == SAMPLE_ENTRY


def test_only_direct_uses_of_the_entry_count(tmp_path):
    # entry → toolkit/helpers.py → toolkit/inner.py → json: the entry itself never uses json
    corpus, entry, compilation = build(tmp_path, SAMPLE_CORPUS, "import json\nfrom toolkit.helpers import Helper\nHelper().run()\n")
    reachable = {s.qualified_name for s in find_reachable(entry, corpus, compilation)}
    assert "toolkit.inner.Inner" in reachable

    result = trim_imports(entry, compilation, PythonFrontend())
    assert result.removed == ("import json",)
    assert result.tree.text == "from toolkit.helpers import Helper\nHelper().run()\n"


def test_rebound_name_keeps_both_imports(tmp_path):
    files = {"a.py": "class X:\n    pass\n", "b.py": "class X:\n    pass\n"}
    _, result = trim(tmp_path, "from a import X\nfrom b import X\nprint(X())\n", files)
    assert result.removed == ()


def test_used_namespaces(tmp_path):
    _, entry, compilation = build(tmp_path, SAMPLE_CORPUS, """
        import os.path
        from toolkit.helpers import Helper

        os.path.join(Helper.__name__)
        """)
    used = used_namespaces(entry.tree, compilation)
    assert {"os", "os.path", "toolkit.helpers"} <= used


def test_dotted_and_aliased_imports_are_kept(tmp_path):
    _, result = trim(tmp_path, """
        import os.path
        import os.path as osp
        import sys

        os.path.join("a")
        osp.join("b")
        """)
    assert result.removed == ("import sys",)


def test_future_imports_are_kept(tmp_path):
    _, result = trim(tmp_path, """
        from __future__ import annotations
        import os

        X = 1
        """)
    assert result.tree.text == "from __future__ import annotations\n\nX = 1\n"


def test_star_import_in_use(tmp_path):
    _, result = trim(tmp_path, "from toolkit.inner import *\nInner()\n")
    assert result.removed == ()


def test_function_local_imports(tmp_path):
    _, result = trim(tmp_path, """
        def used():
            import json
            return json.dumps(1)

        def unused():
            import os
            return 1
        """)
    assert result.removed == ("import os",)
    assert "import json" in result.tree.text


def test_nothing_to_trim_returns_same_tree(tmp_path):
    entry, result = trim(tmp_path, "from toolkit.helpers import Helper\nHelper()\n")
    assert result.tree is entry.tree
    assert result.removed == ()
