"""Exception definitions module."""

from polygen.core.exceptions.errors import (
    ConfigurationError,
    GenerationFailedError,
    PolygenError,
    ProjectLoadError,
)

__all__ = ["PolygenError", "ConfigurationError", "GenerationFailedError", "ProjectLoadError"]
