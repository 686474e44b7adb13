"""
Error types for source-form annotation and located macro-expansion errors.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, Optional

if TYPE_CHECKING:
    from .location import SourceLocation


class SourceFormError(Exception):
    """Base exception for all sourceform errors."""

    def __init__(self, message: str, context: Optional["ErrorContext"] = None):
        self.message = message
        self.context = context
        super().__init__(self._format_message())

    def _format_message(self) -> str:
        """Format error message with context if available."""
        if self.context:
            return f"{self.context.format()}\n{self.message}"
        return self.message


class UsageError(SourceFormError):
    """
    Raised when the annotator is called incorrectly.

    Examples:
    - No candidate source form supplied
    - Body is not callable
    - Unknown host name passed to configure_host()
    """

    pass


class AnnotationStackError(SourceFormError):
    """
    Raised when the annotation stack is unwound out of order.

    Examples:
    - A frame popped while a more deeply nested frame is still active
    - A frame popped on a thread that never pushed it
    """

    pass


class ExpansionError(SourceFormError):
    """
    Raised by macro writers when user code cannot be expanded.

    Usually built through diagnostics.located_error(), which attaches the
    location of the innermost active source form.
    """

    pass


@dataclass
class ErrorContext:
    """
    Context information for an error, including source location.

    Attributes:
        file: Name of the source file (or pseudo-file such as "<unknown>")
        line: Line number (1-indexed)
        column: Column number (1-indexed)
        snippet: Optional code snippet showing the error location
        form: Optional short description of the offending form
    """

    file: str
    line: int
    column: int
    snippet: str | None = None
    form: str | None = None

    @classmethod
    def from_location(
        cls,
        location: "SourceLocation",
        source: str | None = None,
        form: str | None = None,
    ) -> "ErrorContext":
        """Build a context from a resolved location, cutting a snippet from source."""
        snippet = None
        if source is not None:
            snippet = extract_snippet(source, location.line)
        return cls(
            file=location.file,
            line=location.line,
            column=location.column,
            snippet=snippet,
            form=form,
        )

    def format(self) -> str:
        """
        Format error context as a human-readable string.

        Returns:
            Formatted string like: "macro.py:10:5 in Call"
        """
        location = f"{self.file}:{self.line}:{self.column}"
        if self.form:
            location += f" in {self.form}"

        if self.snippet:
            return f"{location}\n{self._format_snippet()}"
        return location

    def _format_snippet(self) -> str:
        """Format code snippet with line numbers and error marker."""
        if not self.snippet:
            return ""

        lines = self.snippet.split("\n")
        formatted = []

        # Snippet shows up to 2 lines before and after the error line
        start_line = max(1, self.line - 2)

        for i, line in enumerate(lines):
            line_num = start_line + i
            prefix = f"{line_num:4d} | "
            formatted.append(prefix + line)

            if line_num == self.line:
                marker_pos = len(prefix) + self.column - 1
                formatted.append(" " * marker_pos + "^^^")

        return "\n".join(formatted)


def extract_snippet(source: str, line: int, radius: int = 2) -> str | None:
    """
    Cut the lines around ``line`` out of ``source``.

    Returns None when the line is outside the source text.
    """
    lines = source.splitlines()
    if line < 1 or line > len(lines):
        return None
    start = max(1, line - radius)
    end = min(len(lines), line + radius)
    return "\n".join(lines[start - 1 : end])
