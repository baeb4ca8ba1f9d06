"""Passthrough - camera passthrough overlay configuration and anchoring."""

from .config import Config, ConfigLoader, SchemaError
from .core import Affine3
from .overlay import AnchorResolver

__all__ = ["Affine3", "AnchorResolver", "Config", "ConfigLoader", "SchemaError"]
