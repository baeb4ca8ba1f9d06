"""VR runtime backends and default selection."""

from __future__ import annotations

import importlib.util
import logging
from enum import Enum
from typing import Iterable

logger = logging.getLogger(__name__)


class Backend(Enum):
    """Supported VR runtimes."""

    OPENVR = "openvr"
    OPENXR = "openxr"


# Document spellings accepted for each backend
BACKEND_ALIASES: dict[str, Backend] = {
    "openvr": Backend.OPENVR,
    "steamvr": Backend.OPENVR,
    "openxr": Backend.OPENXR,
}

# Used when more than one backend is available
BACKEND_PREFERENCE: tuple[Backend, ...] = (Backend.OPENVR, Backend.OPENXR)

# Python module providing the bindings for each backend
BACKEND_MODULES: dict[Backend, str] = {
    Backend.OPENVR: "openvr",
    Backend.OPENXR: "xr",
}


def detect_backends() -> tuple[Backend, ...]:
    """Find the backends whose Python bindings are importable.

    Falls back to every known backend when none are installed, so that a
    configuration can still be authored and validated on a machine
    without a VR runtime.
    """
    found = tuple(
        backend for backend in BACKEND_PREFERENCE
        if importlib.util.find_spec(BACKEND_MODULES[backend]) is not None
    )
    if not found:
        logger.debug("No VR bindings installed, treating all backends as available")
        return BACKEND_PREFERENCE
    return found


def default_backend(available: Iterable[Backend]) -> Backend | None:
    """Pick the default backend out of the available ones.

    Returns:
        The single available backend, the first in preference order when
        there are several, or None when nothing is available
    """
    available = tuple(available)
    if len(available) == 1:
        return available[0]
    for backend in BACKEND_PREFERENCE:
        if backend in available:
            return backend
    return None
