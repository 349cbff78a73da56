"""
Tests for module-level name bindings.
"""

import pytest

from sg.frontend.base import SymbolKind
from tests.infrastructure import parse

pytestmark = pytest.mark.usefixtures("skip_if_no_tree_sitter")


def names_of(text: str, module: str = "Entry"):
    doc = parse(text, module)
    return {name: [b.kind for b in bs] for name, bs in doc.bindings.names.items()}


def test_definitions_and_assignments():
    names = names_of("""
        import os
        from toolkit import helpers as h

        VERSION = "1.0"
        a, (b, c) = 1, (2, 3)
        x = y = 0
        counter += 1

        class Widget:
            inner = 1

        def build(arg):
            local = arg
            return local

        @decorator
        def decorated():
            pass
        """)
    assert names["os"] == [SymbolKind.IMPORT]
    assert names["h"] == [SymbolKind.IMPORT]
    assert names["VERSION"] == [SymbolKind.VARIABLE]
    assert {"a", "b", "c", "x", "y", "counter"} <= set(names)
    assert names["Widget"] == [SymbolKind.CLASS]
    assert names["build"] == [SymbolKind.FUNCTION]
    assert names["decorated"] == [SymbolKind.FUNCTION]
    # Class and function scopes are not module scope
    assert "inner" not in names
    assert "local" not in names
    assert "arg" not in names


def test_compound_statements_bind_in_module_scope():
    names = names_of("""
        try:
            import ujson as json
        except ImportError:
            import json

        if True:
            FLAG = 1
        else:
            FLAG = 2

        for item in range(3):
            pass

        with open("f") as handle:
            pass
        """)
    assert names["json"] == [SymbolKind.IMPORT, SymbolKind.IMPORT]
    assert names["FLAG"] == [SymbolKind.VARIABLE, SymbolKind.VARIABLE]
    assert "item" in names
    assert "handle" in names


def test_global_statement_binds_module_name():
    names = names_of("""
        def configure():
            global SETTINGS
            SETTINGS = {}
        """)
    assert names["SETTINGS"] == [SymbolKind.VARIABLE]


def test_import_targets():
    doc = parse("""
        import a.b.c
        import a.b as ab
        from .sibling import thing
        from toolkit.inner import *
        """, module="pkg.mod")
    bindings = doc.bindings

    a = bindings.last("a")
    assert a.target_module == "a" and a.target_name is None

    ab = bindings.last("ab")
    assert ab.target_module == "a.b" and ab.target_name is None

    thing = bindings.last("thing")
    assert thing.target_module == "pkg.sibling"
    assert thing.target_name == "thing"

    assert bindings.stars == ["toolkit.inner"]
    assert len(bindings.imports) == 4


def test_rebound_name_lists_the_last_binding_first():
    doc = parse("""
        from a import X
        try:
            from b import X
        except ImportError:
            pass

        def use():
            from c import X
            return X
        """)
    bindings = doc.bindings
    assert bindings.last("X").target_module == "b"
    assert [b.target_module for b in bindings.of("X")] == ["c", "b", "a"]


def test_function_local_imports_are_kept_apart():
    doc = parse("""
        def load():
            import json
            from toolkit.inner import Inner
            return json, Inner
        """)
    bindings = doc.bindings
    assert bindings.last("json") is None
    assert bindings.of("json")[0].target_module == "json"
    assert bindings.of("Inner")[0].target_module == "toolkit.inner"
    # only module-level statements are recorded as module imports
    assert bindings.imports == []


def test_all_is_in_source_order():
    doc = parse("""
        class B:
            pass

        A = 1

        def c():
            pass
        """)
    assert [b.name for b in doc.bindings.all()] == ["B", "A", "c"]


def test_declaration_nodes_start_with_root():
    doc = parse("X = 1\n")
    nodes = doc.declaration_nodes()
    assert nodes[0].parent is None
    assert [doc.get_node_text(n) for n in nodes[1:]] == ["X"]
