"""Exceptions raised while building or exporting a Swagger document."""


class SwagError(Exception):
    """Base class for swagdoc errors."""


class InvalidMethodError(SwagError, ValueError):
    """An endpoint was registered with an HTTP method outside the supported set."""


class InvalidLocationError(SwagError, ValueError):
    """A security scheme or parameter names an unsupported location."""


class UnsupportedTypeError(SwagError, TypeError):
    """A type cannot be rendered as a Swagger schema."""


class TargetError(SwagError):
    """A CLI target could not be resolved to an API document."""
