"""
Deprecated accessors kept for older call sites.

Nothing in this package uses them. Remove the mixin from BuildVersion's bases
to drop them.
"""

from loguru import logger


class LegacyAccessors:
    """Class-level shortcuts from before BuildVersion took a path."""

    @classmethod
    def full(cls) -> str:
        """Describe string for the default project root. Deprecated."""
        logger.warning("BuildVersion.full is DEPRECATED. Please use BuildVersion.git_describe.")
        return cls().git_describe()
