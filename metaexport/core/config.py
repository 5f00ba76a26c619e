"""Configuration management for metaexport.

This module provides the exporter configuration model with validation and
default values, loadable from a dictionary or from ``METAEXPORT_*``
environment variables (optionally seeded from a ``.env`` file).
"""

import os
import re
from pathlib import Path
from typing import Any, Dict, Optional

from dotenv import load_dotenv
from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from .error import ConfigError


_PACKAGE_NAME = re.compile(r"^(?:[A-Za-z_][A-Za-z0-9_]*(?:\.[A-Za-z_][A-Za-z0-9_]*)*)?$")

_BOOL_FIELDS = ("inner_classes_for_keys", "create_stubs")


class ExporterConfig(BaseModel):
    """Settings for one metadata export."""

    model_config = ConfigDict(validate_assignment=True, extra="forbid")

    # Matching
    schema_pattern: Optional[str] = Field(default=None, description="Schema name pattern (SQL LIKE)")
    table_name_pattern: Optional[str] = Field(default=None, description="Table name pattern (SQL LIKE)")

    # Output location
    target_folder: Path = Field(..., description="Root folder for generated sources")
    package_name: str = Field(default="com.example", description="Package of the query types")
    bean_package_name: Optional[str] = Field(default=None, description="Package of the bean types")

    # Naming
    name_prefix: str = Field(default="Q", description="Prefix for query types")
    name_suffix: str = Field(default="", description="Suffix for query types")
    bean_prefix: str = Field(default="", description="Prefix for bean types")
    bean_suffix: str = Field(default="", description="Suffix for bean types")

    # Rendering
    inner_classes_for_keys: bool = Field(default=False, description="Emit key metadata as nested classes")
    create_stubs: bool = Field(default=False, description="Emit .pyi stubs instead of .py modules")

    @field_validator("package_name", "bean_package_name")
    @classmethod
    def validate_package_name(cls, v):
        """Package names must be dotted identifiers."""
        if v is not None and not _PACKAGE_NAME.match(v):
            raise ValueError(f"'{v}' is not a valid package name")
        return v

    @field_validator("target_folder", mode="before")
    @classmethod
    def validate_target_folder(cls, v):
        """Reject empty target folders."""
        if v is None or str(v).strip() == "":
            raise ValueError("target folder is required")
        return v

    @property
    def effective_bean_package_name(self) -> str:
        """Bean package, defaulting to the main package."""
        if self.bean_package_name is None:
            return self.package_name
        return self.bean_package_name

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "ExporterConfig":
        """Create configuration from dictionary."""
        try:
            return cls(**data)
        except ValidationError as e:
            raise ConfigError.invalid_config(str(e))

    @classmethod
    def from_env(cls, prefix: str = "METAEXPORT_", dotenv_path: Optional[str] = None) -> "ExporterConfig":
        """Create configuration from environment variables.

        Variables are named after the fields with ``prefix`` prepended, e.g.
        ``METAEXPORT_TARGET_FOLDER``. A ``.env`` file is loaded first without
        overriding variables that are already set.

        Args:
            prefix: Environment variable prefix
            dotenv_path: Optional path of the .env file to load

        Returns:
            The loaded configuration

        Raises:
            ConfigError: If the target folder is missing or a value is invalid
        """
        load_dotenv(dotenv_path)

        data: Dict[str, Any] = {}
        for name in cls.model_fields:
            value = os.getenv(f"{prefix}{name.upper()}")
            if value is None:
                continue
            if name in _BOOL_FIELDS:
                data[name] = value.lower() in ("true", "1", "yes", "on")
            else:
                data[name] = value

        if "target_folder" not in data:
            raise ConfigError.missing_env_var(f"{prefix}TARGET_FOLDER")

        return cls.from_dict(data)

    def to_dict(self) -> Dict[str, Any]:
        """Convert configuration to dictionary."""
        return self.model_dump()
