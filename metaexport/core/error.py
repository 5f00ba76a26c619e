"""Unified error handling for metaexport.

Every failure raised by the exporter derives from ``MetaExportError`` and keeps
the underlying exception as ``cause``, so callers of ``export`` can tell which
stage of the run aborted and why.
"""

from typing import Optional


class MetaExportError(Exception):
    """Base exception for all metaexport errors."""

    def __init__(self, message: str, cause: Optional[Exception] = None) -> None:
        super().__init__(message)
        self.message = message
        self.cause = cause

    def __str__(self) -> str:
        if self.cause:
            return f"{self.message}: {self.cause}"
        return self.message

    def __repr__(self) -> str:
        if self.cause:
            return f"{self.__class__.__name__}('{self.message}', cause={self.cause!r})"
        return f"{self.__class__.__name__}('{self.message}')"


class ResourceAcquisitionError(MetaExportError):
    """Error that occurs when the output folder or an output file cannot be created.

    Examples:
        ```python
        try:
            os.makedirs(folder, exist_ok=True)
        except OSError as e:
            raise ResourceAcquisitionError(f"folder {folder} could not be created", e)
        ```
    """

    def __init__(self, message: str, cause: Optional[Exception] = None) -> None:
        super().__init__(f"resource acquisition failed: {message}", cause)


class MetadataQueryError(MetaExportError):
    """Error that occurs while listing tables, columns or keys from a metadata provider."""

    def __init__(self, message: str, cause: Optional[Exception] = None) -> None:
        super().__init__(f"metadata query failed: {message}", cause)


class SerializationError(MetaExportError):
    """Error that occurs while rendering or writing generated sources."""

    def __init__(self, message: str, cause: Optional[Exception] = None) -> None:
        super().__init__(f"serialization failed: {message}", cause)


class ModelDefinitionError(MetaExportError):
    """Error in the entity model, such as a duplicate property name."""
    pass


class ExportError(MetaExportError):
    """Error that aborts an export run for any other reason."""

    def __init__(self, message: str, cause: Optional[Exception] = None) -> None:
        super().__init__(f"export failed: {message}", cause)


class ConfigError(MetaExportError):
    """Error that occurs due to configuration issues.

    Examples:
        ```python
        try:
            config = ExporterConfig.from_env()
        except ValidationError as e:
            raise ConfigError("Failed to load configuration", cause=e)
        ```
    """

    def __init__(self, message: str, cause: Optional[Exception] = None) -> None:
        super().__init__(f"configuration error: {message}", cause)

    @classmethod
    def missing_env_var(cls, var_name: str) -> "ConfigError":
        """Create a ConfigError for a missing environment variable."""
        return cls(f"missing environment variable: {var_name}")

    @classmethod
    def invalid_config(cls, message: str) -> "ConfigError":
        """Create a ConfigError for invalid configuration."""
        return cls(f"invalid configuration: {message}")
