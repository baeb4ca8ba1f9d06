"""Configuration schema, validation and loading."""

from .backends import Backend, default_backend, detect_backends
from .errors import (
    ConfigIOError,
    InvalidTransformError,
    MalformedConfigError,
    SchemaError,
    UnknownVariantError,
)
from .loader import CONFIG_FILE_NAME, ConfigLoader
from .schema import (
    Absolute,
    Button,
    Config,
    Direct,
    DisplayMode,
    Eye,
    Flat,
    HeadLocked,
    OverlayConfig,
    PositionMode,
    ProjectionMode,
    Stereo,
    Sticky,
)

__all__ = [
    "Absolute",
    "Backend",
    "Button",
    "CONFIG_FILE_NAME",
    "Config",
    "ConfigIOError",
    "ConfigLoader",
    "Direct",
    "DisplayMode",
    "Eye",
    "Flat",
    "HeadLocked",
    "InvalidTransformError",
    "MalformedConfigError",
    "OverlayConfig",
    "PositionMode",
    "ProjectionMode",
    "SchemaError",
    "Stereo",
    "Sticky",
    "UnknownVariantError",
    "default_backend",
    "detect_backends",
]
