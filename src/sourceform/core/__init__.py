"""Core sourceform functionality: annotation scopes, host selection, located diagnostics."""

from .annotate import current_source_form, source_form, with_current_source_form
from .context import (
    AnnotationFrame,
    annotation_frame,
    annotation_stack,
    candidate_forms,
    current_form,
    stack_depth,
)
from .diagnostics import annotate_exception, current_error_context, current_location, located_error
from .environment import HostMode, configure_host, get_host, get_host_mode, reset_host
from .errors import (
    AnnotationStackError,
    ErrorContext,
    ExpansionError,
    SourceFormError,
    UsageError,
)
from .hosts import CapableHost, Host, PlainHost, detect_capability
from .location import SourceLocation, resolve_form_location, resolve_location
from .transformer import AnnotatingTransformer
