"""
Build version resolver.

Runs `git describe --tags` once per instance and derives two version strings
from it: the describe text itself, and a SemVer 2.0 string whose build
metadata carries the build timestamp and commit provenance.
"""

import os
import re
import subprocess
from datetime import datetime, timezone
from typing import List, Optional, Tuple
from loguru import logger

from .config import APPEND_TIMESTAMP_ENV, BUILD_ID_ENV, Config, parse_bool
from .describe import DescribeResult, MalformedDescribeText, parse_describe
from .legacy import LegacyAccessors

DESCRIBE_COMMAND = ['git', 'describe', '--tags']

BUILD_ID_FORMAT = '%Y-%m-%d_%H-%M-%S'
BUILD_ID_PATTERN = re.compile(r'^\d{4}-\d{2}-\d{2}_\d{2}-\d{2}-\d{2}$')
TIMESTAMP_FORMAT = '%Y%m%d%H%M%S'


class MalformedBuildIdentifier(ValueError):
    """Raised when BUILD_ID is set but is not a YYYY-MM-DD_HH-MM-SS timestamp."""
    pass


class BuildVersion(LegacyAccessors):
    """
    Version information for the project checked out at a given path.

    The describe command is not run until a field is first read, and then
    only once. Environment and configuration lookups made while formatting
    are not cached.
    """

    def __init__(self, path: Optional[str] = None, config: Optional[Config] = None):
        self.config = config if config is not None else Config()
        self.path = path or self.config.project_root
        self._describe_result: Optional[DescribeResult] = None
        self._describe_error: Optional[MalformedDescribeText] = None

    def __repr__(self) -> str:
        describe = self._describe_result.text if self._describe_result else None
        return f"BuildVersion(path={self.path!r}, describe={describe!r})"

    def __str__(self) -> str:
        return self.semver()

    def shellout(self, command: List[str], cwd: str) -> subprocess.CompletedProcess:
        """Run a command in cwd and capture its output as text."""
        return subprocess.run(
            command,
            capture_output=True,
            text=True,
            cwd=cwd,
            timeout=self.config.describe_timeout
        )

    @property
    def describe_result(self) -> DescribeResult:
        """
        Parsed `git describe` output, computed on first access.

        Unparseable output is remembered too, so later reads re-raise the
        same error without running git again.
        """
        if self._describe_error is not None:
            raise self._describe_error
        if self._describe_result is None:
            try:
                self._describe_result = self._run_describe()
            except MalformedDescribeText as e:
                self._describe_error = e
                raise
        return self._describe_result

    def _run_describe(self) -> DescribeResult:
        try:
            result = self.shellout(DESCRIBE_COMMAND, cwd=self.path)
        except FileNotFoundError:
            logger.warning("git executable not found, using fallback version 0.0.0")
            return DescribeResult.fallback()
        except subprocess.TimeoutExpired:
            logger.warning(f"git describe timed out in {self.path}, using fallback version 0.0.0")
            return DescribeResult.fallback()

        if result.returncode != 0:
            stderr = (result.stderr or '').strip()
            logger.warning(f"git describe failed in {self.path} (exit code {result.returncode}): {stderr}")
            logger.warning("Using fallback version 0.0.0")
            return DescribeResult.fallback()

        logger.debug(f"git describe output: {result.stdout.strip()}")
        parsed = parse_describe(result.stdout)
        logger.debug(f"Parsed version: {parsed}")
        return parsed

    @property
    def version_tag(self) -> str:
        return self.describe_result.version_tag

    @property
    def prerelease_tag(self) -> Optional[str]:
        return self.describe_result.prerelease_tag

    @property
    def git_sha_tag(self) -> Optional[str]:
        return self.describe_result.git_sha_tag

    @property
    def commits_since_tag(self) -> int:
        return self.describe_result.commits_since_tag

    @property
    def version_composition(self) -> Tuple[int, int, int]:
        return self.describe_result.version_composition

    def is_prerelease_version(self) -> bool:
        """Check if the tag carries a prerelease designation."""
        return bool(self.prerelease_tag)

    def is_development_version(self) -> bool:
        """
        Check if the tag is a development version.

        Release trains ship on even patch numbers, so an odd patch number
        marks a development build.
        """
        patch = self.version_composition[2]
        return patch % 2 == 1

    def build_start_time(self) -> str:
        """
        Timestamp for the build as YYYYMMDDHHMMSS.

        Taken from BUILD_ID when it is set, otherwise the current UTC time.

        Raises:
            MalformedBuildIdentifier: If BUILD_ID is not YYYY-MM-DD_HH-MM-SS
        """
        build_id = os.environ.get(BUILD_ID_ENV, '').strip()
        if not build_id:
            return datetime.now(timezone.utc).strftime(TIMESTAMP_FORMAT)

        if not BUILD_ID_PATTERN.match(build_id):
            raise MalformedBuildIdentifier(
                f"{BUILD_ID_ENV} environment variable must be formatted as "
                f"YYYY-MM-DD_HH-MM-SS (got: {build_id!r})"
            )
        try:
            start_time = datetime.strptime(build_id, BUILD_ID_FORMAT)
        except ValueError as e:
            raise MalformedBuildIdentifier(f"Invalid {BUILD_ID_ENV} {build_id!r}: {e}") from e
        return start_time.strftime(TIMESTAMP_FORMAT)

    def should_append_timestamp(self) -> bool:
        """
        Decide whether the semver build metadata starts with a timestamp.

        Precedence: BUILD_VERSION_APPEND_TIMESTAMP > config.append_timestamp > True.
        """
        env_value = os.environ.get(APPEND_TIMESTAMP_ENV, '').strip()
        if env_value:
            return parse_bool(env_value)
        return bool(self.config.append_timestamp)

    def semver(self) -> str:
        """
        Generate a SemVer 2.0 version string.

        Format: MAJOR.MINOR.PATCH[-PRERELEASE][+TIMESTAMP[.git.COMMITS.SHA]]
        Dashes in the prerelease are converted to dots.

        Returns:
            str: Version string such as 11.0.0-alpha.3+20121225164140.git.207.694b062
        """
        version = self.version_tag

        if self.prerelease_tag:
            version += '-' + self.prerelease_tag.replace('-', '.')

        build_metadata = []
        if self.should_append_timestamp():
            build_metadata.append(self.build_start_time())
        if self.commits_since_tag > 0 and self.git_sha_tag:
            build_metadata.append(f"git.{self.commits_since_tag}.{self.git_sha_tag}")

        if build_metadata:
            version += '+' + '.'.join(build_metadata)

        return version

    def git_describe(self) -> str:
        """Return the raw describe text, or 0.0.0 if `git describe` failed."""
        return self.describe_result.format()
