"""Custom exception definitions for polygen."""

from typing import Any


class PolygenError(Exception):
    """Base exception for all polygen errors."""

    def __init__(
        self,
        message: str,
        details: dict[str, Any] | None = None,
    ) -> None:
        """Initialize the exception.

        Args:
            message: Error message.
            details: Additional error details.
        """
        super().__init__(message)
        self.message = message
        self.details = details or {}

    def __str__(self) -> str:
        """Return string representation of the error."""
        if self.details:
            return f"{self.message} - Details: {self.details}"
        return self.message


class ConfigurationError(PolygenError):
    """Exception raised for configuration errors.

    Fatal for a generation run: raised before the engine is invoked.
    """

    def __init__(
        self,
        message: str,
        config_key: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        """Initialize configuration error.

        Args:
            message: Error message.
            config_key: Configuration key that caused the error.
            details: Additional error details.
        """
        details = details or {}
        if config_key:
            details["config_key"] = config_key
        super().__init__(message, details)


class GenerationFailedError(PolygenError):
    """Exception raised when the engine reports a severe validation error."""

    def __init__(
        self,
        message: str,
        language_ids: list[str] | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        """Initialize generation failure.

        Args:
            message: Error message.
            language_ids: Languages that took part in the failed launch.
            details: Additional error details.
        """
        details = details or {}
        if language_ids:
            details["languages"] = language_ids
        super().__init__(message, details)


class ProjectLoadError(PolygenError):
    """Exception raised when a project descriptor cannot be read."""

    def __init__(
        self,
        message: str,
        project_path: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        """Initialize project load error.

        Args:
            message: Error message.
            project_path: Path to the project descriptor.
            details: Additional error details.
        """
        details = details or {}
        if project_path:
            details["project_path"] = project_path
        super().__init__(message, details)
