"""Error codes for CLI exit status.

The release flow has a single failure exit status: every step that cannot
complete (missing registry, declined confirmation, version lineage mismatch,
failed build or publish) terminates the process with ``FAILURE``.
"""

from enum import IntEnum

__all__ = ["ErrorCode"]


class ErrorCode(IntEnum):
    """Exit codes for CLI commands.

    These values are used as process exit codes and should remain stable.
    """

    OK = 0
    FAILURE = 1

    def __str__(self) -> str:
        """Return human-readable name."""
        return self.name.lower().replace("_", " ")

    @property
    def is_success(self) -> bool:
        """Check if this code indicates success."""
        return self == ErrorCode.OK

    @property
    def is_error(self) -> bool:
        """Check if this code indicates an error."""
        return self != ErrorCode.OK
