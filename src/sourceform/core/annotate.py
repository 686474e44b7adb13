"""
Source-form annotation for macro writers.

Marks which sub-form of the user's code an expansion function is working on,
so a diagnostic raised during expansion can point at that sub-form instead of
the outermost macro call.

Forms are given most-specific-first. When the most specific form has no
position of its own (a number, a name, an ast.Load), consumers fall back to
the next one:

    def expand_assert(node: ast.Call) -> ast.AST:
        for arg in node.args:
            with current_source_form(arg, node):
                check_argument(arg)
        ...

The annotation is advisory. Results and exceptions of the annotated code
pass through unchanged.
"""

from __future__ import annotations

import functools
from collections.abc import Callable
from contextlib import AbstractContextManager
from types import TracebackType
from typing import Any, TypeVar

from .environment import get_host
from .errors import UsageError
from .hosts import close_scope

T = TypeVar("T")


def _require_forms(forms: Any) -> tuple[Any, ...]:
    """Normalize ``forms`` to a non-empty tuple.

    A list or tuple is a candidate sequence; anything else is a single form.
    """
    if isinstance(forms, (list, tuple)):
        candidates = tuple(forms)
    else:
        candidates = (forms,)
    if not candidates:
        raise UsageError("with_current_source_form requires at least one source form")
    return candidates


def with_current_source_form(forms: Any, body: Callable[[], T]) -> T:
    """
    Run ``body`` with ``forms`` recorded as the current source forms.

    Args:
        forms: A form, or a list/tuple of forms ordered most-specific-first
        body: Zero-argument callable to run under the annotation

    Returns:
        Whatever ``body`` returns

    Raises:
        UsageError: If ``forms`` is empty or ``body`` is not callable.
            Raised before ``body`` runs.
    """
    candidates = _require_forms(forms)
    if not callable(body):
        raise UsageError(f"body must be callable, got {type(body).__name__}")
    return get_host().run(candidates, body)


class _SourceFormScope(AbstractContextManager):
    """Context manager returned by current_source_form()."""

    def __init__(self, forms: tuple[Any, ...]):
        self.forms = forms
        self._scope: AbstractContextManager[Any] | None = None

    def __enter__(self) -> tuple[Any, ...]:
        if self._scope is not None:
            raise UsageError("current_source_form scope is already active")
        scope = get_host().annotate(self.forms)
        scope.__enter__()
        self._scope = scope
        return self.forms

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        scope, self._scope = self._scope, None
        if scope is not None:
            close_scope(scope, exc)
        return None


def current_source_form(*forms: Any) -> _SourceFormScope:
    """
    Context-manager spelling of with_current_source_form().

    Raises UsageError at the call site when no form is given.
    """
    return _SourceFormScope(_require_forms(forms))


def source_form(select: Callable[..., Any]) -> Callable[[Callable[..., T]], Callable[..., T]]:
    """
    Decorate a function so each call runs under an annotation.

    ``select`` receives the call's arguments and returns the candidate forms,
    e.g. ``@source_form(lambda self, node: node)`` on a visitor method.
    """

    def decorator(func: Callable[..., T]) -> Callable[..., T]:
        @functools.wraps(func)
        def wrapper(*args: Any, **kwargs: Any) -> T:
            forms = select(*args, **kwargs)
            return with_current_source_form(forms, lambda: func(*args, **kwargs))

        return wrapper

    return decorator
