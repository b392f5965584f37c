"""
Command-line interface for the build version resolver.

Prints the SemVer or describe version of a git checkout, or a table of
every parsed field with --details.
"""

import sys
import argparse
from loguru import logger
from rich.console import Console
from rich.table import Table

from . import __version__
from .config import VALID_LOG_LEVELS, load_config
from .logging_config import setup_logging
from .resolver import BuildVersion

# Logs go to stderr, versions to stdout
console = Console(stderr=True)
output_console = Console()

OUTPUT_FORMATS = ('semver', 'git-describe')


def parse_arguments(argv=None) -> argparse.Namespace:
    """Parse command-line arguments."""
    parser = argparse.ArgumentParser(
        prog='build-version',
        description='Derive a SemVer build version from git describe output'
    )

    parser.add_argument('--path', help='Git checkout to describe (default: PROJECT_ROOT or the current directory)')
    parser.add_argument('--format', choices=OUTPUT_FORMATS, default='semver', help='Version format to print (default: semver)')
    parser.add_argument('--details', action='store_true', help='Print every parsed field instead of a single version')
    parser.add_argument(
        '--append-timestamp',
        action=argparse.BooleanOptionalAction,
        default=None,
        help='Start semver build metadata with a timestamp (default: true, '
             'BUILD_VERSION_APPEND_TIMESTAMP overrides)'
    )
    parser.add_argument('--timeout', type=int, help='Seconds to wait for git describe (default: no limit)')

    # Logging
    log_levels = VALID_LOG_LEVELS + [level.lower() for level in VALID_LOG_LEVELS]
    parser.add_argument('--log-level', choices=log_levels, help='Logging level (default: INFO)')
    parser.add_argument('--version', action='version', version=f'%(prog)s {__version__}')

    return parser.parse_args(argv)


def build_details_table(build_version: BuildVersion) -> Table:
    """Render every parsed field and predicate of a BuildVersion."""
    table = Table(title=f"git describe in {build_version.path}")
    table.add_column("Field", style="cyan")
    table.add_column("Value")

    rows = [
        ('git_describe', build_version.git_describe()),
        ('semver', build_version.semver()),
        ('version_tag', build_version.version_tag),
        ('prerelease_tag', build_version.prerelease_tag),
        ('commits_since_tag', build_version.commits_since_tag),
        ('git_sha_tag', build_version.git_sha_tag),
        ('prerelease_version', build_version.is_prerelease_version()),
        ('development_version', build_version.is_development_version()),
    ]
    for name, value in rows:
        table.add_row(name, '-' if value is None else str(value))
    return table


def setup_application(argv=None) -> tuple:
    """Set up logging, parse arguments, and load configuration."""
    setup_logging(console=console)

    args = parse_arguments(argv)

    if args.log_level:
        setup_logging(args.log_level.upper(), console=console)

    config = load_config(args)
    if config is None:
        sys.exit(1)

    setup_logging(config.log_level, console=console)

    return args, config


def main(argv=None) -> None:
    """Main entry point for the application."""
    args, config = setup_application(argv)

    build_version = BuildVersion(config=config)

    try:
        if args.details:
            output_console.print(build_details_table(build_version))
        elif args.format == 'git-describe':
            output_console.print(build_version.git_describe(), highlight=False, soft_wrap=True)
        else:
            output_console.print(build_version.semver(), highlight=False, soft_wrap=True)
    except ValueError as e:
        logger.error(f"❌ {e}")
        sys.exit(1)


if __name__ == '__main__':
    main()
