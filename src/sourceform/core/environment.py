"""
Host selection for sourceform.

The host is selected once per process and then reused, so the capability
check never runs on the annotation fast path.

The SOURCEFORM_HOST environment variable controls the selection:
    - auto (default): capable when the interpreter records source positions
    - capable: always record annotations
    - plain: never record annotations; annotated bodies run unchanged

Usage:
    from sourceform.core.environment import configure_host, get_host

    configure_host("plain")  # before first use, e.g. in a test fixture
    host = get_host()
"""

from __future__ import annotations

import logging
import os
import threading
from enum import StrEnum

from .errors import UsageError
from .hosts import CapableHost, Host, PlainHost, detect_capability

logger = logging.getLogger(__name__)


class HostMode(StrEnum):
    """Host selection modes."""

    AUTO = "auto"
    CAPABLE = "capable"
    PLAIN = "plain"


_DEFAULT_MODE = HostMode.AUTO

SOURCEFORM_HOST_VAR = "SOURCEFORM_HOST"

_ALIASES = {
    "": HostMode.AUTO,
    "auto": HostMode.AUTO,
    "capable": HostMode.CAPABLE,
    "on": HostMode.CAPABLE,
    "enabled": HostMode.CAPABLE,
    "plain": HostMode.PLAIN,
    "off": HostMode.PLAIN,
    "disabled": HostMode.PLAIN,
    "none": HostMode.PLAIN,
}

_host: Host | None = None
_lock = threading.Lock()


def get_host_mode() -> HostMode:
    """Get the requested host mode from SOURCEFORM_HOST.

    Returns:
        HostMode: The requested mode. Defaults to auto if SOURCEFORM_HOST is
        not set or invalid.

    Examples:
        >>> import os
        >>> os.environ["SOURCEFORM_HOST"] = "off"
        >>> get_host_mode()
        <HostMode.PLAIN: 'plain'>
    """
    env_value = os.environ.get(SOURCEFORM_HOST_VAR, "").lower().strip()
    mode = _ALIASES.get(env_value)
    if mode is None:
        logger.warning(
            "Unknown %s value '%s'. Using '%s'.",
            SOURCEFORM_HOST_VAR,
            env_value,
            _DEFAULT_MODE.value,
        )
        return _DEFAULT_MODE
    return mode


def host_for_mode(mode: HostMode | str) -> Host:
    """Build the host for ``mode``. Accepts the same aliases as SOURCEFORM_HOST."""
    if not isinstance(mode, HostMode):
        resolved = _ALIASES.get(str(mode).lower().strip())
        if resolved is None:
            raise UsageError(
                f"Unknown host mode '{mode}'. Expected one of: "
                + ", ".join(m.value for m in HostMode)
            )
        mode = resolved

    if mode is HostMode.AUTO:
        return CapableHost() if detect_capability() else PlainHost()
    if mode is HostMode.CAPABLE:
        return CapableHost()
    return PlainHost()


def get_host() -> Host:
    """Return the selected host, selecting it from the environment on first use."""
    global _host
    host = _host
    if host is not None:
        return host
    with _lock:
        if _host is None:
            mode = get_host_mode()
            _host = host_for_mode(mode)
            logger.debug(
                "Selected %s host for %s=%s", _host.name, SOURCEFORM_HOST_VAR, mode.value
            )
        return _host


def configure_host(host: Host | HostMode | str) -> Host:
    """Select the host explicitly, replacing any earlier selection."""
    global _host
    if not isinstance(host, Host):
        host = host_for_mode(host)
    with _lock:
        _host = host
    logger.debug("Configured %s host (%r)", host.name, host)
    return host


def reset_host() -> None:
    """Forget the selected host; the next get_host() selects again."""
    global _host
    with _lock:
        _host = None
