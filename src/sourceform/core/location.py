"""Source location resolution for candidate forms.

Maps a source form back to the position the host parser recorded for it.
Python's parser records positions on ``ast`` nodes; objects that carry a
``source`` attribute holding a :class:`SourceLocation` are also understood.
Atomic values (numbers, strings, names) have no unique position and resolve
to ``None``, which lets callers fall back to the next, less specific form.
"""

from __future__ import annotations

import ast
from collections.abc import Iterable
from typing import Any

from pydantic import BaseModel, ConfigDict

DEFAULT_FILENAME = "<unknown>"


class SourceLocation(BaseModel):
    """Source position of a form.

    Attributes:
        file: Path or pseudo-name of the source file
        line: 1-indexed line number
        column: 1-indexed column number
        end_line: 1-indexed line where the form ends, if known
        end_column: 1-indexed column just past the form's end, if known
    """

    file: str
    line: int
    column: int
    end_line: int | None = None
    end_column: int | None = None

    model_config = ConfigDict(frozen=True)

    def __str__(self) -> str:
        return f"{self.file}:{self.line}:{self.column}"


def resolve_form_location(form: Any, file: str = DEFAULT_FILENAME) -> SourceLocation | None:
    """Resolve a single form to its location, or None when it has none."""
    if isinstance(form, ast.AST):
        line = getattr(form, "lineno", None)
        if line is None:
            # Context nodes (Load, Store), operators and the like
            return None
        col = getattr(form, "col_offset", 0) or 0
        end_line = getattr(form, "end_lineno", None)
        end_col = getattr(form, "end_col_offset", None)
        return SourceLocation(
            file=file,
            line=line,
            column=col + 1,
            end_line=end_line,
            end_column=end_col + 1 if end_col is not None else None,
        )

    source = getattr(form, "source", None)
    if isinstance(source, SourceLocation):
        return source
    return None


def resolve_location(forms: Iterable[Any], file: str = DEFAULT_FILENAME) -> SourceLocation | None:
    """Resolve the first form in ``forms`` that has a location.

    ``forms`` is ordered most-specific-first.
    """
    for form in forms:
        location = resolve_form_location(form, file=file)
        if location is not None:
            return location
    return None


def describe_form(form: Any) -> str:
    """Short human-readable label for a form, used in diagnostics."""
    if isinstance(form, ast.AST):
        return type(form).__name__
    return repr(form)
