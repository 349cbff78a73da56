"""
Base exceptions for user-facing errors.

All expected errors that should be displayed to the user
as clean messages (without stack traces) must inherit from SGUserError.

Programming errors and bugs should NOT inherit from SGUserError:
they will propagate with full tracebacks.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Sequence, Tuple

if TYPE_CHECKING:
    from .frontend.base import Diagnostic


class SGUserError(Exception):
    """
    Base class for all user-facing errors in Snippet Generator.

    These errors indicate problems that the user can fix:
    invalid snippets, broken corpus files, missing references, etc.
    """
    pass


class CompilerError(SGUserError):
    """
    Build aborted by the language frontend.

    Carries the frontend diagnostics in the order they were reported.
    """

    kind = "CompilationErrors"

    def __init__(self, diagnostics: Sequence[Diagnostic]):
        self.diagnostics: Tuple[Diagnostic, ...] = tuple(diagnostics)
        lines = "\n".join(str(d) for d in self.diagnostics)
        super().__init__(f"{self.kind}:\n{lines}")


class BindingFailure(CompilerError):
    """The tree set could not be bound: syntax errors, missing references."""

    kind = "BindingErrors"


class EmissionFailure(CompilerError):
    """Binding succeeded but the artifact could not be produced."""

    kind = "EmissionErrors"


__all__ = ["SGUserError", "CompilerError", "BindingFailure", "EmissionFailure"]
