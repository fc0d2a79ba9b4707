"""Custom exceptions for terrain synthesis and scattering."""


class TerrascatterError(Exception):
    """Base exception for terrascatter errors."""

    pass


class InvalidArgumentError(TerrascatterError, ValueError):
    """Raised when an algorithm is called with parameters it cannot honor."""

    pass
