"""Core geometry components."""

from .transform import Affine3, is_affine

__all__ = ["Affine3", "is_affine"]
