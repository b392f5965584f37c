"""
Tests for config.py module.

Tests configuration precedence, boolean token parsing and validation.
"""

import pytest
from unittest.mock import MagicMock, patch

from build_version.config import (
    Config,
    InvalidBooleanValue,
    get_config_value,
    load_config,
    parse_bool,
)


def make_cli_args(**overrides):
    """Create CLI args with every option unset."""
    cli_args = MagicMock()
    cli_args.path = None
    cli_args.append_timestamp = None
    cli_args.timeout = None
    cli_args.log_level = None
    for name, value in overrides.items():
        setattr(cli_args, name, value)
    return cli_args


class TestParseBool:
    """Test boolean token parsing."""

    @pytest.mark.parametrize('value', ['true', 't', 'yes', 'y', '1', 'True', 'YES', ' y ', 1, True])
    def test_truthy(self, value):
        assert parse_bool(value) is True

    @pytest.mark.parametrize('value', ['false', 'f', 'no', 'n', '0', 'False', 'NO', ' n ', 0, False])
    def test_falsey(self, value):
        assert parse_bool(value) is False

    @pytest.mark.parametrize('value', ['', 'maybe', 'on', 'off', '2', 'yess'])
    def test_invalid(self, value):
        with pytest.raises(InvalidBooleanValue):
            parse_bool(value)


class TestGetConfigValue:
    """Test config value precedence."""

    def test_get_config_value_cli_precedence(self):
        """Test that CLI args take precedence over env vars."""
        cli_args = MagicMock()
        cli_args.test_field = "cli_value"

        with patch.dict('os.environ', {'TEST_FIELD': 'env_value'}):
            result = get_config_value(cli_args, 'test_field', 'TEST_FIELD', 'default')
            assert result == "cli_value"

    def test_get_config_value_env_fallback(self):
        """Test that env vars are used when CLI args are None."""
        cli_args = MagicMock()
        cli_args.test_field = None

        with patch.dict('os.environ', {'TEST_FIELD': 'env_value'}):
            result = get_config_value(cli_args, 'test_field', 'TEST_FIELD', 'default')
            assert result == "env_value"

    def test_get_config_value_default_fallback(self):
        """Test that defaults are used when neither CLI nor env are set."""
        with patch.dict('os.environ', {}, clear=True):
            result = get_config_value(None, 'test_field', 'TEST_FIELD', 'default')
            assert result == "default"

    def test_get_config_value_no_env_key(self):
        """Test the environment is skipped when no key is given."""
        with patch.dict('os.environ', {'TEST_FIELD': 'env_value'}):
            result = get_config_value(None, 'test_field', None, 'default')
            assert result == "default"

    def test_get_config_value_boolean_conversion(self):
        """Test boolean value conversion."""
        for value in ['true', 'True', '1', 'yes', 'y', 't']:
            with patch.dict('os.environ', {'BOOL_FIELD': value}):
                assert get_config_value(None, 'bool_field', 'BOOL_FIELD', False, bool) is True

        for value in ['false', 'False', '0', 'no', 'n', 'f']:
            with patch.dict('os.environ', {'BOOL_FIELD': value}):
                assert get_config_value(None, 'bool_field', 'BOOL_FIELD', True, bool) is False

    def test_get_config_value_boolean_invalid(self):
        """Test unknown boolean tokens are rejected."""
        with patch.dict('os.environ', {'BOOL_FIELD': 'sometimes'}):
            with pytest.raises(InvalidBooleanValue):
                get_config_value(None, 'bool_field', 'BOOL_FIELD', True, bool)

    def test_get_config_value_int_conversion(self):
        """Test integer value conversion and fallback on bad input."""
        with patch.dict('os.environ', {'INT_FIELD': '42'}):
            assert get_config_value(None, 'int_field', 'INT_FIELD', 0, int) == 42

        with patch.dict('os.environ', {'INT_FIELD': 'forty-two'}):
            assert get_config_value(None, 'int_field', 'INT_FIELD', 7, int) == 7


class TestConfig:
    """Test the Config defaults."""

    def test_defaults(self):
        config = Config(project_root='/project')
        assert config.append_timestamp is True
        assert config.log_level == 'INFO'
        assert config.describe_timeout is None


class TestLoadConfig:
    """Test configuration loading and validation."""

    def test_load_config_defaults(self, tmp_path, monkeypatch):
        """Test defaults when nothing is configured."""
        monkeypatch.chdir(tmp_path)
        config = load_config(make_cli_args())

        assert config is not None
        assert config.project_root == str(tmp_path)
        assert config.append_timestamp is True
        assert config.log_level == 'INFO'
        assert config.describe_timeout is None

    def test_load_config_without_cli_args(self):
        """Test loading works with no CLI args object."""
        assert load_config() is not None

    def test_load_config_from_cli(self, tmp_path):
        """Test CLI values are applied."""
        config = load_config(make_cli_args(
            path=str(tmp_path),
            append_timestamp=False,
            timeout=10,
            log_level='debug'
        ))

        assert config.project_root == str(tmp_path)
        assert config.append_timestamp is False
        assert config.describe_timeout == 10
        assert config.log_level == 'DEBUG'

    def test_load_config_from_env(self, tmp_path, monkeypatch):
        """Test environment values are applied when the CLI is silent."""
        monkeypatch.setenv('PROJECT_ROOT', str(tmp_path))
        monkeypatch.setenv('GIT_DESCRIBE_TIMEOUT', '3')
        monkeypatch.setenv('LOG_LEVEL', 'warning')

        config = load_config(make_cli_args())

        assert config.project_root == str(tmp_path)
        assert config.describe_timeout == 3
        assert config.log_level == 'WARNING'

    def test_append_timestamp_env_not_baked_in(self, monkeypatch):
        """Test the append timestamp override is left for format time."""
        monkeypatch.setenv('BUILD_VERSION_APPEND_TIMESTAMP', 'false')
        config = load_config(make_cli_args())
        assert config.append_timestamp is True

    def test_invalid_log_level(self):
        """Test an unknown log level fails validation."""
        assert load_config(make_cli_args(log_level='VERBOSE')) is None

    def test_negative_timeout(self):
        """Test a negative timeout fails validation."""
        assert load_config(make_cli_args(timeout=-1)) is None

    def test_missing_project_root(self, tmp_path):
        """Test a project root that does not exist fails validation."""
        assert load_config(make_cli_args(path=str(tmp_path / 'missing'))) is None
