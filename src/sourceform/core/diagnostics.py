"""
Located diagnostics built from the active annotations.

This is the consumer side of the annotation stack. Frames are consulted
innermost first; inside a frame, forms are tried most-specific-first. The
first form with a position wins. When nothing resolves, errors are built
without a location.
"""

from __future__ import annotations

import logging
from typing import Any, TypeVar

from .context import annotation_stack
from .errors import ErrorContext, ExpansionError, SourceFormError
from .location import DEFAULT_FILENAME, SourceLocation, describe_form, resolve_form_location

logger = logging.getLogger(__name__)

E = TypeVar("E", bound=BaseException)


def _first_located(file: str) -> tuple[Any, SourceLocation] | None:
    for frame in annotation_stack():
        for form in frame.forms:
            location = resolve_form_location(form, file=file)
            if location is not None:
                return form, location
    return None


def current_location(file: str = DEFAULT_FILENAME) -> SourceLocation | None:
    """Location of the innermost active form that has one."""
    found = _first_located(file)
    return found[1] if found else None


def current_error_context(
    file: str = DEFAULT_FILENAME,
    source: str | None = None,
) -> ErrorContext | None:
    """ErrorContext for the innermost locatable active form, or None."""
    found = _first_located(file)
    if found is None:
        logger.debug("No active source form resolves to a location")
        return None
    form, location = found
    return ErrorContext.from_location(location, source=source, form=describe_form(form))


def located_error(
    message: str,
    *,
    file: str = DEFAULT_FILENAME,
    source: str | None = None,
    error_cls: type[SourceFormError] | None = None,
) -> SourceFormError:
    """
    Build an error located at the innermost active source form.

    Args:
        message: Error description
        file: File name to report
        source: Optional source text, used to show a snippet
        error_cls: SourceFormError subclass to build (default ExpansionError)

    Returns:
        The error, ready to raise
    """
    cls = error_cls or ExpansionError
    return cls(message, current_error_context(file=file, source=source))


def annotate_exception(exc: E, *, file: str = DEFAULT_FILENAME) -> E:
    """
    Attach the current location to ``exc`` as a note and return it.

    Leaves ``exc`` untouched when no active form has a location.
    """
    location = current_location(file=file)
    if location is not None:
        exc.add_note(f"while processing source form at {location}")
    return exc
