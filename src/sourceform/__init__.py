"""
sourceform - mark the source form a macro is expanding.

Lets macro and code-transformer writers record which sub-form of the user's
code they are processing, so errors raised during expansion can be reported
at that sub-form rather than at the outermost macro call.
"""

from __future__ import annotations

from importlib.metadata import PackageNotFoundError
from importlib.metadata import version as _metadata_version

from .core.annotate import current_source_form, source_form, with_current_source_form
from .core.diagnostics import annotate_exception, current_location, located_error
from .core.environment import configure_host, get_host
from .core.errors import ExpansionError, SourceFormError, UsageError
from .core.location import SourceLocation
from .core.transformer import AnnotatingTransformer

try:
    __version__ = _metadata_version("sourceform")
except PackageNotFoundError:
    __version__ = "0.0.0"

__all__ = [
    "__version__",
    "with_current_source_form",
    "current_source_form",
    "source_form",
    "located_error",
    "current_location",
    "annotate_exception",
    "configure_host",
    "get_host",
    "SourceLocation",
    "AnnotatingTransformer",
    "SourceFormError",
    "UsageError",
    "ExpansionError",
]
