"""
Configuration management for the build version resolver.

Handles environment variable loading, validation, and provides a centralized
configuration object for the resolver and the command line front end.
"""

import os
from dataclasses import dataclass, field
from typing import Optional
from dotenv import load_dotenv
from loguru import logger

# Load environment variables from .env file
load_dotenv()

# Environment override for timestamp appending, read at format time
APPEND_TIMESTAMP_ENV = 'BUILD_VERSION_APPEND_TIMESTAMP'
# Build identifier override for the timestamp itself, e.g. 2012-12-25_16-41-40
BUILD_ID_ENV = 'BUILD_ID'

TRUTHY_VALUES = ('true', 't', 'yes', 'y', '1')
FALSEY_VALUES = ('false', 'f', 'no', 'n', '0')

VALID_LOG_LEVELS = ['DEBUG', 'INFO', 'WARNING', 'ERROR', 'CRITICAL']


class InvalidBooleanValue(ValueError):
    """Raised when a boolean-like setting holds a token outside the known sets."""
    pass


def parse_bool(value) -> bool:
    """
    Interpret a boolean-like token.

    Args:
        value: Token such as 'yes', 'F', '1' or an int/bool

    Returns:
        bool: The interpreted value

    Raises:
        InvalidBooleanValue: If the token is neither truthy nor falsey
    """
    token = str(value).strip().lower()
    if token in TRUTHY_VALUES:
        return True
    if token in FALSEY_VALUES:
        return False
    raise InvalidBooleanValue(
        f"Expected one of {TRUTHY_VALUES + FALSEY_VALUES} (got: {value!r})"
    )


def get_config_value(cli_args, field_name: str, env_key: str, default, value_type: type = str):
    """
    Get configuration value with proper precedence: CLI args > env vars > defaults.

    Args:
        cli_args: CLI arguments object or None
        field_name: Name of the CLI argument field
        env_key: Environment variable key, or None to skip the environment
        default: Default value if neither CLI nor env var is set
        value_type: Type to convert the value to (str, int, bool)

    Returns:
        The configuration value converted to the specified type
    """
    cli_value = getattr(cli_args, field_name, None) if cli_args else None
    if cli_value is not None:
        return cli_value

    env_value = os.environ.get(env_key, '').strip() if env_key else ''
    if not env_value:
        return default

    if value_type == bool:
        return parse_bool(env_value)

    try:
        return value_type(env_value)
    except (ValueError, TypeError):
        return default


def get_config_value_str(cli_args, field_name: str, env_key: Optional[str], default: str = '') -> str:
    """Get string configuration value."""
    return get_config_value(cli_args, field_name, env_key, default, str)


def get_config_value_int(cli_args, field_name: str, env_key: Optional[str], default: int = 0) -> int:
    """Get integer configuration value."""
    return get_config_value(cli_args, field_name, env_key, default, int)


def get_config_value_bool(cli_args, field_name: str, env_key: Optional[str], default: bool = False) -> bool:
    """Get boolean configuration value."""
    return get_config_value(cli_args, field_name, env_key, default, bool)


@dataclass
class Config:
    """Configuration object containing all resolver settings."""

    # Directory `git describe` runs in
    project_root: str = field(default_factory=os.getcwd)

    # Default for timestamp appending when the environment does not override it
    append_timestamp: bool = True

    # Logging
    log_level: str = 'INFO'

    # Seconds before `git describe` is abandoned, None waits forever
    describe_timeout: Optional[int] = None


def load_config(cli_args=None) -> Optional[Config]:
    """
    Load and validate configuration from CLI arguments and environment variables.
    CLI arguments take precedence over environment variables.

    The append_timestamp flag is only taken from the CLI here. Its environment
    override is applied by the resolver each time a version is formatted.

    Args:
        cli_args: Parsed CLI arguments or None

    Returns:
        Config: Validated configuration object, or None if validation failed
    """
    project_root = get_config_value_str(cli_args, 'path', 'PROJECT_ROOT', os.getcwd())
    append_timestamp = get_config_value_bool(cli_args, 'append_timestamp', None, True)
    describe_timeout = get_config_value_int(cli_args, 'timeout', 'GIT_DESCRIBE_TIMEOUT', 0)

    # Handle log_level (case insensitive)
    log_level = get_config_value_str(cli_args, 'log_level', 'LOG_LEVEL', 'INFO').upper()

    validation_errors = []

    if log_level not in VALID_LOG_LEVELS:
        validation_errors.append(f'LOG_LEVEL must be one of {VALID_LOG_LEVELS} (got: {log_level})')

    if describe_timeout < 0:
        validation_errors.append(f'GIT_DESCRIBE_TIMEOUT must be 0 or more seconds (got: {describe_timeout})')

    if not os.path.isdir(project_root):
        validation_errors.append(f'PROJECT_ROOT ({project_root}) is not a directory')

    if validation_errors:
        logger.error('❌ Configuration Error:')
        for i, error_msg in enumerate(validation_errors, 1):
            logger.error(f'   {i}. {error_msg}')
        return None

    config = Config(
        project_root=project_root,
        append_timestamp=append_timestamp,
        log_level=log_level,
        describe_timeout=describe_timeout or None,
    )

    logger.debug(f'PROJECT_ROOT = {config.project_root}')
    logger.debug(f'APPEND_TIMESTAMP = {config.append_timestamp}')
    logger.debug(f'GIT_DESCRIBE_TIMEOUT = {config.describe_timeout}')

    return config
