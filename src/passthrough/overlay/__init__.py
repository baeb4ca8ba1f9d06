"""Overlay anchoring."""

from .anchor import AnchorResolver

__all__ = ["AnchorResolver"]
