"""
Pytest configuration and shared fixtures for test suite.

Provides a clean environment for every test, fake `git describe` results,
a BuildVersion factory with the subprocess replaced, and a loguru capture.
"""

import subprocess
import pytest
from unittest.mock import MagicMock
from loguru import logger

from build_version.config import Config
from build_version.resolver import BuildVersion

ENV_KEYS = (
    'BUILD_ID',
    'BUILD_VERSION_APPEND_TIMESTAMP',
    'PROJECT_ROOT',
    'GIT_DESCRIBE_TIMEOUT',
    'LOG_LEVEL',
)


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    """Remove every environment variable the resolver reads."""
    for key in ENV_KEYS:
        monkeypatch.delenv(key, raising=False)


def completed_describe(stdout: str = '', returncode: int = 0, stderr: str = '') -> subprocess.CompletedProcess:
    """Build the result of a `git describe --tags` run."""
    return subprocess.CompletedProcess(
        args=['git', 'describe', '--tags'],
        returncode=returncode,
        stdout=stdout,
        stderr=stderr
    )


@pytest.fixture
def describe_output():
    """Factory for fake `git describe` results."""
    return completed_describe


@pytest.fixture
def make_build_version(tmp_path):
    """Create a BuildVersion whose shellout returns the given describe text."""
    def _make(describe: str = '11.0.0-alpha1-207-g694b062', returncode: int = 0,
              stderr: str = '', config: Config = None) -> BuildVersion:
        build_version = BuildVersion(str(tmp_path), config=config)
        build_version.shellout = MagicMock(
            return_value=completed_describe(describe + '\n', returncode, stderr)
        )
        return build_version
    return _make


@pytest.fixture
def log_messages():
    """Capture loguru messages emitted during the test."""
    messages = []
    handler_id = logger.add(lambda msg: messages.append(msg.record["message"]), level="DEBUG")
    yield messages
    logger.remove(handler_id)
