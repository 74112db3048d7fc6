"""Exceptions raised by the model generator."""

from typing import Any, Dict, Optional


class ModelGenError(Exception):
    """Base exception for all generator errors."""

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None) -> None:
        self.message = message
        self.details = details or {}
        super().__init__(self.message)

    def __str__(self) -> str:
        if self.details:
            return f"{self.message} - Details: {self.details}"
        return self.message


class ConfigError(ModelGenError):
    """Raised when the generator configuration is invalid."""

    pass


class DocumentLoadError(ModelGenError):
    """Raised when the OpenAPI document cannot be loaded."""

    def __init__(
        self,
        source: str,
        message: Optional[str] = None,
        details: Optional[Dict[str, Any]] = None,
    ) -> None:
        self.source = source
        super().__init__(message or f"Could not load OpenAPI document: {source}", details)


class SchemaNotFoundError(ModelGenError):
    """Raised when a named schema, operation or operation body is absent."""

    def __init__(
        self,
        name: str,
        message: Optional[str] = None,
        details: Optional[Dict[str, Any]] = None,
    ) -> None:
        self.name = name
        super().__init__(message or f"Schema not found: {name}", details)


class ResourceGenerationError(ModelGenError):
    """Raised when the model for one resource cannot be built."""

    def __init__(self, resource_name: str, cause: Exception) -> None:
        self.resource_name = resource_name
        self.cause = cause
        super().__init__(f"Failed to generate resource {resource_name}: {cause}")
