"""
Ambient annotation stack.

Each thread owns a last-in-first-out stack of annotation frames. A frame
records the candidate forms a piece of expansion code is working on, ordered
most-specific-first. Frames are pushed on entry to an annotated scope and
popped on every exit path.

Usage:
    from sourceform.core.context import annotation_frame, candidate_forms

    with annotation_frame((node, parent)):
        candidate_forms()  # (node, parent)
"""

from __future__ import annotations

import logging
import threading
from collections.abc import Iterator
from contextlib import contextmanager
from dataclasses import dataclass
from typing import Any

from .errors import AnnotationStackError

logger = logging.getLogger(__name__)

_active = threading.local()


@dataclass(frozen=True, eq=False)
class AnnotationFrame:
    """One entry on the annotation stack.

    Frames compare by identity so that popping checks for the exact frame
    that was pushed, even if another frame holds equal forms.
    """

    forms: tuple[Any, ...]

    @property
    def primary(self) -> Any:
        """The most specific candidate form."""
        return self.forms[0]


def _stack() -> list[AnnotationFrame]:
    try:
        return _active.frames
    except AttributeError:
        _active.frames = []
        return _active.frames


def push_frame(forms: tuple[Any, ...]) -> AnnotationFrame:
    """Push a frame for ``forms`` and return it. Pair with pop_frame()."""
    frame = AnnotationFrame(forms)
    _stack().append(frame)
    return frame


def pop_frame(frame: AnnotationFrame) -> None:
    """Pop ``frame``, which must be the innermost frame on this thread."""
    stack = _stack()
    if not stack or stack[-1] is not frame:
        logger.error(
            "Annotation stack unwound out of order (depth %d, frame %r)",
            len(stack),
            frame,
        )
        # Drop the frame and everything nested inside it so the stack
        # returns to the state it had when the frame was pushed.
        for index in range(len(stack) - 1, -1, -1):
            if stack[index] is frame:
                del stack[index:]
                break
        raise AnnotationStackError(
            f"annotation frame for {frame.primary!r} is not the innermost frame"
        )
    stack.pop()


@contextmanager
def annotation_frame(forms: tuple[Any, ...]) -> Iterator[AnnotationFrame]:
    """
    Push a frame for the dynamic extent of the with-block.

    The frame is popped on normal exit and when an exception propagates.
    """
    frame = push_frame(forms)
    try:
        yield frame
    finally:
        pop_frame(frame)


def annotation_stack() -> tuple[AnnotationFrame, ...]:
    """Active frames on this thread, innermost first."""
    return tuple(reversed(_stack()))


def candidate_forms() -> tuple[Any, ...]:
    """All active forms on this thread, innermost frame first.

    Within a frame the original most-specific-first order is kept.
    """
    return tuple(form for frame in annotation_stack() for form in frame.forms)


def current_form() -> Any | None:
    """The most specific form of the innermost frame, or None."""
    stack = _stack()
    if not stack:
        return None
    return stack[-1].primary


def stack_depth() -> int:
    """Number of active frames on this thread."""
    return len(_stack())
