"""
Build Version

Derives build version strings from `git describe --tags` output: the raw
describe text and a SemVer 2.0 string carrying the build timestamp and
commit provenance in its build metadata.
"""

from ._version import __version__
from .config import Config, InvalidBooleanValue, load_config
from .describe import DescribeResult, MalformedDescribeText, parse_describe
from .resolver import BuildVersion, MalformedBuildIdentifier

__description__ = "Derive SemVer build versions from git describe output"

__all__ = [
    "BuildVersion",
    "Config",
    "DescribeResult",
    "InvalidBooleanValue",
    "MalformedBuildIdentifier",
    "MalformedDescribeText",
    "load_config",
    "parse_describe",
]
