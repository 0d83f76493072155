"""
Failure kinds raised by the recipe store adapter and the recipe service.
Controllers translate these into HTTP status codes.
"""


class RecipeError(Exception):
    """Base class for all recipe failures."""


class ValidationError(RecipeError, ValueError):
    """Malformed request body or recipe id."""


class NotFound(RecipeError):
    """No recipe matched the given id."""


class StorageUnavailable(RecipeError):
    """The document store or the cache backend failed."""


class DecodeError(RecipeError):
    """A cached payload or a stored record could not be decoded."""
