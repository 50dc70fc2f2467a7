"""Configuration loading and validation tests"""

import json
import os
import tempfile

import pytest
from pydantic import ValidationError

from logsink.config.loader import config_summary, load_config, parse_config, substitute_env_vars
from logsink.config.models import LogSinkConfig, SinkConfig
from logsink.config.validator import validate_config_constraints
from logsink.core.constants import DEFAULT_MAX_BYTES, Severity


def create_temp_config(config_data: dict) -> str:
    """Create a temporary config file"""
    temp_file = tempfile.NamedTemporaryFile(mode='w', delete=False, suffix='.json')
    json.dump(config_data, temp_file)
    temp_file.close()
    return temp_file.name


@pytest.fixture
def valid_config_data():
    """Valid configuration data"""
    return {
        "sink": {
            "directory": "/var/log/myapp",
            "file_name": "my app.log",
            "app_name": "myapp",
            "max_bytes": 5242880,
            "min_level": "DEBUG",
            "flush_interval_ms": 500,
            "truncate_on_open": False
        },
        "console": {
            "enabled": True,
            "level": "WARNING"
        },
        "dashboard": {
            "enabled": False,
            "host": "127.0.0.1",
            "port": 8081
        },
        "logger_name": None
    }


def test_defaults():
    """Defaults match the documented configuration surface"""
    config = LogSinkConfig()
    assert config.sink.max_bytes == DEFAULT_MAX_BYTES == 10 * 1024 * 1024
    assert config.sink.min_level == "INFO"
    assert config.sink.min_severity is Severity.INFO
    assert config.sink.flush_interval_ms == 1000
    assert config.sink.directory == ""
    assert config.console.enabled is False
    assert config.dashboard.enabled is False


def test_load_valid_config(valid_config_data):
    """Test loading a valid configuration"""
    config_path = create_temp_config(valid_config_data)

    try:
        config = load_config(config_path, load_env=False)
        assert isinstance(config, LogSinkConfig)
        assert config.sink.file_name == "my app.log"
        assert config.sink.max_bytes == 5242880
        assert config.sink.min_severity is Severity.DEBUG
        assert config.console.level == "WARNING"
        assert config.dashboard.port == 8081
    finally:
        os.unlink(config_path)


def test_env_var_substitution(valid_config_data, monkeypatch):
    """Test environment variable substitution"""
    monkeypatch.setenv("LOGSINK_TEST_DIR", "/srv/logs")
    valid_config_data["sink"]["directory"] = "${LOGSINK_TEST_DIR}/app"
    config_path = create_temp_config(valid_config_data)

    try:
        config = load_config(config_path, load_env=False)
        assert config.sink.directory == "/srv/logs/app"
    finally:
        os.unlink(config_path)


def test_missing_env_var_fails(valid_config_data, monkeypatch):
    """Missing environment variable should fail"""
    monkeypatch.delenv("LOGSINK_MISSING_VAR", raising=False)
    valid_config_data["sink"]["directory"] = "${LOGSINK_MISSING_VAR}"

    with pytest.raises(ValueError, match="LOGSINK_MISSING_VAR"):
        parse_config(valid_config_data)


def test_substitute_env_vars_nested(monkeypatch):
    """Substitution walks dicts and lists"""
    monkeypatch.setenv("LOGSINK_NAME", "svc")
    data = {"a": ["${LOGSINK_NAME}.log", 3], "b": {"c": "x-${LOGSINK_NAME}"}}
    assert substitute_env_vars(data) == {"a": ["svc.log", 3], "b": {"c": "x-svc"}}


def test_config_summary_lists_effective_settings(valid_config_data):
    lines = config_summary(LogSinkConfig(**valid_config_data))
    assert "  Directory: /var/log/myapp" in lines
    assert "  Max bytes: 5242880" in lines
    assert "  Logger: (root)" in lines
    assert config_summary(LogSinkConfig())[0] == "  Directory: (app data)"


def test_missing_file():
    """Missing config file should raise FileNotFoundError"""
    with pytest.raises(FileNotFoundError):
        load_config("does/not/exist.json", load_env=False)


def test_non_json_path_rejected():
    with pytest.raises(ValueError, match=".json"):
        load_config("config/logsink.yaml", load_env=False)


def test_path_traversal_rejected():
    with pytest.raises(ValueError, match="traversal"):
        load_config("../secrets/logsink.json", load_env=False)


@pytest.mark.parametrize("level,expected", [
    ("debug", "DEBUG"),
    ("Warning", "WARNING"),
    ("CRITICAL", "FATAL"),
    ("fatal", "FATAL"),
])
def test_min_level_normalized(level, expected):
    assert SinkConfig(min_level=level).min_level == expected


def test_invalid_min_level():
    with pytest.raises(ValidationError):
        SinkConfig(min_level="VERBOSE")


def test_empty_file_name_rejected():
    with pytest.raises(ValidationError):
        SinkConfig(file_name="   ")


def test_invalid_max_bytes():
    with pytest.raises(ValidationError):
        SinkConfig(max_bytes=0)


def test_invalid_flush_interval(valid_config_data):
    valid_config_data["sink"]["flush_interval_ms"] = 0
    with pytest.raises(ValueError, match="Config validation failed"):
        parse_config(valid_config_data)


def test_blank_logger_name_rejected():
    with pytest.raises(ValidationError):
        LogSinkConfig(logger_name="  ")


class TestConstraints:
    def test_valid(self, valid_config_data):
        validate_config_constraints(LogSinkConfig(**valid_config_data))

    def test_file_name_with_separator(self):
        config = LogSinkConfig(sink=SinkConfig(file_name="logs/app.log"))
        with pytest.raises(ValueError, match="path separators"):
            validate_config_constraints(config)

    def test_file_name_with_rotation_suffix(self):
        config = LogSinkConfig(sink=SinkConfig(file_name="app.log.old"))
        with pytest.raises(ValueError, match="rotation suffix"):
            validate_config_constraints(config)

    def test_tiny_max_bytes(self):
        config = LogSinkConfig(sink=SinkConfig(max_bytes=100))
        with pytest.raises(ValueError, match="max_bytes"):
            validate_config_constraints(config)

    def test_directory_is_a_file(self, tmp_path):
        blocker = tmp_path / "file.txt"
        blocker.write_text("x")
        config = LogSinkConfig(sink=SinkConfig(directory=str(blocker)))
        with pytest.raises(ValueError, match="existing file"):
            validate_config_constraints(config)

    def test_internal_logger_name(self):
        config = LogSinkConfig(logger_name="logsink.app")
        with pytest.raises(ValueError, match="namespace"):
            validate_config_constraints(config)
