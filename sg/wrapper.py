"""
Wrapping of bare code snippets into an entry module.

A snippet passed on the command line is usually a few statements, not a
module. It is placed into a static method of a generated class:
`main` for console output, `execute` for libraries.
"""

from __future__ import annotations

import random
import re
import string
import textwrap
from typing import Iterable, Optional

from .types import OutputKind

IDENTIFIER_RE = re.compile(r"^[A-Za-z_][A-Za-z0-9_]*$")
_CLASS_RE = re.compile(r"^class\s", re.MULTILINE)

_TEMPLATE = """\
{prelude}

class {class_name}:
    @staticmethod
    def {method}():
{body}
"""


def is_identifier(value: str) -> bool:
    return bool(IDENTIFIER_RE.match(value))


def random_identifier(rng: Optional[random.Random] = None) -> str:
    """Letter followed by 10 to 29 letters or digits."""
    rng = rng or random.Random()
    first = rng.choice(string.ascii_letters)
    rest = "".join(rng.choice(string.ascii_letters + string.digits) for _ in range(rng.randint(10, 29)))
    return first + rest


def prelude(modules: Iterable[str]) -> str:
    lines = ["import os", "import sys"]
    lines.extend(f"from {m} import *" for m in modules)
    return "\n".join(lines)


def wrap_source(
    code: str,
    output_kind: OutputKind,
    *,
    class_name: Optional[str] = None,
    modules: Iterable[str] = (),
) -> str:
    """
    Build the entry module for a snippet.

    Code that already declares a top-level class is returned unchanged.
    A one-line library snippet without `return` becomes `return <snippet>`.
    """
    if _CLASS_RE.search(code):
        return code

    body = textwrap.dedent(code).strip("\n")
    if output_kind is OutputKind.LIBRARY:
        method = "execute"
        if body and "\n" not in body and not re.search(r"\breturn\b", body):
            body = "return " + body.strip()
    else:
        method = "main"

    return _TEMPLATE.format(
        prelude=prelude(modules),
        class_name=class_name or random_identifier(),
        method=method,
        body=textwrap.indent(body or "pass", " " * 8),
    )


__all__ = ["IDENTIFIER_RE", "is_identifier", "random_identifier", "prelude", "wrap_source"]
