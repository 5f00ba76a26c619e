"""Tests for core metaexport functionality."""

import json
import logging
import os
from pathlib import Path

import pytest
from pydantic import ValidationError

from metaexport.core.error import (
    MetaExportError,
    ResourceAcquisitionError,
    MetadataQueryError,
    SerializationError,
    ModelDefinitionError,
    ExportError,
    ConfigError,
)
from metaexport.core.logging import (
    JSONFormatter,
    SecretRedactionFilter,
    init_logging,
    get_logger,
    register_secret_for_redaction,
    redact_secrets,
    clear_secret_registry,
    get_registered_secrets_count,
)
from metaexport.core.config import ExporterConfig


class TestErrors:
    """Test error handling functionality."""

    def test_metaexport_error_creation(self):
        """Test creating MetaExportError instances."""
        error = MetaExportError("test error")
        assert str(error) == "test error"
        assert error.message == "test error"
        assert error.cause is None

    def test_metaexport_error_with_cause(self):
        """Test creating MetaExportError with cause."""
        cause = ValueError("original error")
        error = MetaExportError("wrapper error", cause)
        assert str(error) == "wrapper error: original error"
        assert error.cause is cause

    def test_error_repr(self):
        """Test repr includes the cause."""
        error = MetaExportError("wrapper", KeyError("k"))
        assert repr(error) == "MetaExportError('wrapper', cause=KeyError('k'))"
        assert repr(MetaExportError("plain")) == "MetaExportError('plain')"

    def test_subclass_messages(self):
        """Test each error kind prefixes its message."""
        assert str(ResourceAcquisitionError("folder x")) == "resource acquisition failed: folder x"
        assert str(MetadataQueryError("listing tables")) == "metadata query failed: listing tables"
        assert str(SerializationError("rendering y")) == "serialization failed: rendering y"
        assert str(ExportError("table person")) == "export failed: table person"
        assert str(ModelDefinitionError("duplicate")) == "duplicate"

    def test_hierarchy(self):
        """Test all errors derive from MetaExportError."""
        for error_type in (
            ResourceAcquisitionError,
            MetadataQueryError,
            SerializationError,
            ModelDefinitionError,
            ExportError,
            ConfigError,
        ):
            assert issubclass(error_type, MetaExportError)

    def test_config_error_helpers(self):
        """Test ConfigError factory methods."""
        error = ConfigError.missing_env_var("METAEXPORT_TARGET_FOLDER")
        assert "missing environment variable: METAEXPORT_TARGET_FOLDER" in str(error)

        error = ConfigError.invalid_config("bad value")
        assert str(error) == "configuration error: invalid configuration: bad value"


class TestLogging:
    """Test logging functionality."""

    def setup_method(self):
        """Clear secret registry before each test."""
        clear_secret_registry()

    def teardown_method(self):
        clear_secret_registry()
        package_logger = logging.getLogger("metaexport")
        for handler in package_logger.handlers[:]:
            package_logger.removeHandler(handler)
        package_logger.setLevel(logging.NOTSET)

    def test_register_and_redact_secret(self):
        """Test registering and redacting secrets."""
        register_secret_for_redaction("s3cret")
        assert get_registered_secrets_count() == 1
        assert redact_secrets("password is s3cret") == "password is [REDACTED]"

    def test_blank_secrets_ignored(self):
        """Test that empty and None secrets are not registered."""
        register_secret_for_redaction("")
        register_secret_for_redaction("   ")
        register_secret_for_redaction(None)
        assert get_registered_secrets_count() == 0

    def test_redact_without_secrets(self):
        """Test redaction is a no-op without registered secrets."""
        assert redact_secrets("nothing to hide") == "nothing to hide"
        assert redact_secrets("") == ""

    def test_filter_redacts_message_and_args(self):
        """Test the filter redacts both the message and its arguments."""
        register_secret_for_redaction("hunter2")
        record = logging.LogRecord(
            "metaexport", logging.INFO, __file__, 1, "connecting with hunter2 to %s", ("db hunter2",), None
        )
        assert SecretRedactionFilter().filter(record) is True
        assert record.getMessage() == "connecting with [REDACTED] to db [REDACTED]"

    def test_json_formatter(self):
        """Test records are formatted as JSON objects."""
        record = logging.LogRecord("metaexport.test", logging.WARNING, __file__, 42, "hello %s", ("world",), None)
        record.extra_fields = {"table": "person"}
        entry = json.loads(JSONFormatter().format(record))
        assert entry["level"] == "WARNING"
        assert entry["logger"] == "metaexport.test"
        assert entry["message"] == "hello world"
        assert entry["line"] == 42
        assert entry["table"] == "person"

    def test_init_logging_level_from_env(self, monkeypatch):
        """Test the log level is read from the environment."""
        monkeypatch.setenv("METAEXPORT_LOG_LEVEL", "debug")
        init_logging()
        package_logger = logging.getLogger("metaexport")
        assert package_logger.level == logging.DEBUG
        assert len(package_logger.handlers) == 1
        assert isinstance(package_logger.handlers[0].formatter, JSONFormatter)

    def test_init_logging_invalid_level(self, monkeypatch):
        """Test an invalid level falls back to INFO."""
        monkeypatch.setenv("METAEXPORT_LOG_LEVEL", "chatty")
        init_logging()
        assert logging.getLogger("metaexport").level == logging.INFO

    def test_init_logging_replaces_handlers(self):
        """Test repeated initialization does not duplicate handlers."""
        init_logging("WARNING")
        init_logging("WARNING")
        assert len(logging.getLogger("metaexport").handlers) == 1

    def test_get_logger_adds_filter_once(self):
        """Test get_logger attaches a single redaction filter."""
        logger = get_logger("metaexport.test_filter")
        logger = get_logger("metaexport.test_filter")
        filters = [f for f in logger.filters if isinstance(f, SecretRedactionFilter)]
        assert len(filters) == 1


class TestConfig:
    """Test configuration functionality."""

    def test_config_defaults(self, tmp_path):
        """Test default configuration values."""
        config = ExporterConfig(target_folder=tmp_path)
        assert config.target_folder == tmp_path
        assert config.package_name == "com.example"
        assert config.bean_package_name is None
        assert config.name_prefix == "Q"
        assert config.name_suffix == ""
        assert config.bean_prefix == ""
        assert config.bean_suffix == ""
        assert config.schema_pattern is None
        assert config.table_name_pattern is None
        assert config.inner_classes_for_keys is False
        assert config.create_stubs is False

    def test_target_folder_coerced_to_path(self):
        """Test string target folders become paths."""
        config = ExporterConfig(target_folder="generated")
        assert config.target_folder == Path("generated")

    def test_effective_bean_package_name(self, tmp_path):
        """Test the bean package defaults to the main package."""
        config = ExporterConfig(target_folder=tmp_path, package_name="app.query")
        assert config.effective_bean_package_name == "app.query"

        config.bean_package_name = "app.model"
        assert config.effective_bean_package_name == "app.model"

    def test_invalid_package_name(self, tmp_path):
        """Test package names must be dotted identifiers."""
        with pytest.raises(ValidationError):
            ExporterConfig(target_folder=tmp_path, package_name="com..example")
        with pytest.raises(ValidationError):
            ExporterConfig(target_folder=tmp_path, bean_package_name="1model")

    def test_empty_package_name_allowed(self, tmp_path):
        """Test the empty package is valid."""
        assert ExporterConfig(target_folder=tmp_path, package_name="").package_name == ""

    def test_from_dict(self, tmp_path):
        """Test creating config from dictionary."""
        config = ExporterConfig.from_dict({
            "target_folder": str(tmp_path),
            "package_name": "query",
            "inner_classes_for_keys": True,
        })
        assert config.package_name == "query"
        assert config.inner_classes_for_keys is True

    def test_from_dict_invalid(self):
        """Test validation failures surface as ConfigError."""
        with pytest.raises(ConfigError) as exc_info:
            ExporterConfig.from_dict({"target_folder": ""})
        assert "invalid configuration" in str(exc_info.value)

        with pytest.raises(ConfigError):
            ExporterConfig.from_dict({"target_folder": "out", "unknown_option": 1})

    def test_from_env(self, tmp_path, monkeypatch):
        """Test loading configuration from environment variables."""
        monkeypatch.setenv("METAEXPORT_TARGET_FOLDER", str(tmp_path))
        monkeypatch.setenv("METAEXPORT_PACKAGE_NAME", "app.query")
        monkeypatch.setenv("METAEXPORT_CREATE_STUBS", "yes")
        monkeypatch.setenv("METAEXPORT_INNER_CLASSES_FOR_KEYS", "off")

        config = ExporterConfig.from_env(dotenv_path=str(tmp_path / "missing.env"))
        assert config.target_folder == tmp_path
        assert config.package_name == "app.query"
        assert config.create_stubs is True
        assert config.inner_classes_for_keys is False

    def test_from_env_missing_target_folder(self, tmp_path, monkeypatch):
        """Test the target folder variable is required."""
        monkeypatch.delenv("METAEXPORT_TARGET_FOLDER", raising=False)
        with pytest.raises(ConfigError) as exc_info:
            ExporterConfig.from_env(dotenv_path=str(tmp_path / "missing.env"))
        assert "METAEXPORT_TARGET_FOLDER" in str(exc_info.value)

    def test_from_env_reads_dotenv(self, tmp_path):
        """Test variables are read from a .env file."""
        dotenv_file = tmp_path / ".env"
        dotenv_file.write_text(
            f"METAEXPORTTEST_TARGET_FOLDER={tmp_path}\nMETAEXPORTTEST_NAME_PREFIX=T\n"
        )
        try:
            config = ExporterConfig.from_env(prefix="METAEXPORTTEST_", dotenv_path=str(dotenv_file))
        finally:
            os.environ.pop("METAEXPORTTEST_TARGET_FOLDER", None)
            os.environ.pop("METAEXPORTTEST_NAME_PREFIX", None)
        assert config.target_folder == tmp_path
        assert config.name_prefix == "T"

    def test_to_dict(self, tmp_path):
        """Test converting config to dictionary."""
        data = ExporterConfig(target_folder=tmp_path, bean_suffix="Row").to_dict()
        assert data["target_folder"] == tmp_path
        assert data["bean_suffix"] == "Row"
        assert data["name_prefix"] == "Q"
