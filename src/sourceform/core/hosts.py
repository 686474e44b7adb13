"""
Host capability interface.

A host decides what annotating a scope means. CapableHost delegates to a
push primitive (by default the thread-local annotation stack); PlainHost
runs bodies unchanged. The host is chosen once, see environment.get_host().
"""

from __future__ import annotations

import ast
import logging
from collections.abc import Callable
from contextlib import AbstractContextManager, nullcontext
from typing import Any, TypeVar

from .context import annotation_frame

logger = logging.getLogger(__name__)

T = TypeVar("T")

PushPrimitive = Callable[[tuple[Any, ...]], AbstractContextManager[Any]]


def close_scope(scope: AbstractContextManager[Any], exc: BaseException | None) -> None:
    """
    Exit an annotation scope entered by hand.

    The scope's return value is ignored, so annotations never suppress the
    body's exception. While ``exc`` is propagating, a failure inside the
    scope's own exit is logged and ``exc`` is left to propagate.
    """
    if exc is None:
        scope.__exit__(None, None, None)
        return
    try:
        scope.__exit__(type(exc), exc, exc.__traceback__)
    except BaseException:
        logger.warning(
            "Annotation scope failed to close while %s was propagating",
            type(exc).__name__,
            exc_info=True,
        )


def detect_capability() -> bool:
    """Return True when the interpreter's parser records positions on expressions."""
    return "lineno" in getattr(ast.expr, "_attributes", ())


class Host:
    """Base class for hosts. Subclasses define how a scope is annotated."""

    name = "host"
    capable = False

    def annotate(self, forms: tuple[Any, ...]) -> AbstractContextManager[Any]:
        """Return a context manager that annotates its block with ``forms``."""
        raise NotImplementedError

    def run(self, forms: tuple[Any, ...], body: Callable[[], T]) -> T:
        """Run ``body`` under the annotation and return its result."""
        scope = self.annotate(forms)
        scope.__enter__()
        try:
            result = body()
        except BaseException as exc:
            close_scope(scope, exc)
            raise
        close_scope(scope, None)
        return result

    def __repr__(self) -> str:
        return f"{type(self).__name__}()"


class CapableHost(Host):
    """Host that records annotations through a push primitive."""

    name = "capable"
    capable = True

    def __init__(self, push: PushPrimitive | None = None):
        self.push = push or annotation_frame

    def annotate(self, forms: tuple[Any, ...]) -> AbstractContextManager[Any]:
        return self.push(forms)

    def __repr__(self) -> str:
        push_name = getattr(self.push, "__qualname__", repr(self.push))
        return f"CapableHost(push={push_name})"


class PlainHost(Host):
    """Host without source tracking: bodies run as if unannotated."""

    name = "plain"

    def annotate(self, forms: tuple[Any, ...]) -> AbstractContextManager[Any]:
        return nullcontext()

    def run(self, forms: tuple[Any, ...], body: Callable[[], T]) -> T:
        return body()
