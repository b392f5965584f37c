"""
Parsing of `git describe --tags` output.

Historical tagging conventions are not consistent, so a describe string can
arrive in several shapes:

- 11.0.0-alpha.3-59-gf55b180   (prerelease tag plus commits since it)
- 11.0.1-5-g1a2b3c4            (release tag plus commits since it)
- 11.0.0-alpha.2, 10.16.0.rc.0 (prerelease tag, dash or dot separated)
- 11.0.1                       (release tag)

Each shape is a regex in DESCRIBE_PATTERNS, tried most specific first. All of
them produce the same DescribeResult.
"""

import re
from dataclasses import dataclass
from typing import Optional, Tuple

FALLBACK_VERSION = "0.0.0"

_VERSION = r'(?P<version>\d+\.\d+\.\d+)'
_PRERELEASE = r'[-.](?P<prerelease>[A-Za-z0-9.-]+)'
_COMMITS = r'-(?P<commits>\d+)-g(?P<sha>[0-9a-f]+)'

DESCRIBE_PATTERNS = (
    re.compile(rf'^{_VERSION}{_PRERELEASE}{_COMMITS}$'),
    re.compile(rf'^{_VERSION}{_COMMITS}$'),
    re.compile(rf'^{_VERSION}{_PRERELEASE}$'),
    re.compile(rf'^{_VERSION}$'),
)


class MalformedDescribeText(ValueError):
    """
    Raised when describe output matches none of the known tag grammars.

    The parser never guesses a version out of text it does not understand.
    """
    pass


@dataclass(frozen=True)
class DescribeResult:
    """
    Fields parsed out of a single describe string.

    text holds the stripped describe output the fields came from. It is None
    for results built directly from fields, e.g. by tooling that knows a tag
    without running git.
    """

    version_tag: str
    prerelease_tag: Optional[str] = None
    commits_since_tag: int = 0
    git_sha_tag: Optional[str] = None
    text: Optional[str] = None

    @classmethod
    def fallback(cls) -> 'DescribeResult':
        """Result used when `git describe` could not run or found no tag."""
        return cls(text=FALLBACK_VERSION, version_tag=FALLBACK_VERSION)

    @property
    def version_composition(self) -> Tuple[int, int, int]:
        major, minor, patch = self.version_tag.split('.')
        return (int(major), int(minor), int(patch))

    def format(self) -> str:
        """
        Rebuild the describe string from the parsed fields.

        The separator between the version and the prerelease is not kept by
        the parse, so the raw text is returned when it is available and
        dashes are used otherwise.
        """
        if self.text is not None:
            return self.text
        describe = self.version_tag
        if self.prerelease_tag:
            describe += f'-{self.prerelease_tag}'
        if self.git_sha_tag:
            describe += f'-{self.commits_since_tag}-g{self.git_sha_tag}'
        return describe


def parse_describe(text: str) -> DescribeResult:
    """
    Parse raw describe output into a DescribeResult.

    Args:
        text: Output of `git describe --tags`, trailing newline allowed

    Returns:
        DescribeResult: Parsed fields

    Raises:
        MalformedDescribeText: If the text matches no known tag grammar
    """
    describe = text.strip()

    for pattern in DESCRIBE_PATTERNS:
        match = pattern.match(describe)
        if not match:
            continue

        fields = match.groupdict()
        commits = fields.get('commits')
        return DescribeResult(
            text=describe,
            version_tag=fields['version'],
            prerelease_tag=fields.get('prerelease'),
            commits_since_tag=int(commits) if commits else 0,
            git_sha_tag=fields.get('sha'),
        )

    raise MalformedDescribeText(f"Unrecognized git describe output: {describe!r}")
