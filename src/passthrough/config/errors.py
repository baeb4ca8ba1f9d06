"""Errors raised while loading or saving the configuration document."""

from __future__ import annotations


class SchemaError(ValueError):
    """Base class for every configuration document error.

    Attributes:
        key: Dotted path of the offending key (e.g. ``overlay.position.mode``),
            or None when the error concerns the document as a whole
    """

    def __init__(self, message: str, key: str | None = None) -> None:
        self.key = key
        if key:
            message = f"{key}: {message}"
        super().__init__(message)


class InvalidTransformError(SchemaError):
    """A persisted transform is not affine."""


class UnknownVariantError(SchemaError):
    """A tag or enum value is not one of the known variants."""

    def __init__(self, value: object, expected: list[str], key: str | None = None) -> None:
        self.value = value
        self.expected = expected
        super().__init__(
            f"unknown variant {value!r}, expected one of {', '.join(expected)}",
            key,
        )


class MalformedConfigError(SchemaError):
    """The document does not have the expected structure or types."""


class ConfigIOError(SchemaError, OSError):
    """The document could not be read or written."""
