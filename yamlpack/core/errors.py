"""Exit codes for yamlpack commands.

The values are process exit codes and should remain stable:
- 0: Success
- 1: User error (bad arguments, unknown task)
- 2: Environment error (no project root, missing tools, bad config)
- 3: Build error (compile, bundle or minify failed)
- 5: I/O error (sources missing, artifact could not be written)
"""

from enum import IntEnum

__all__ = ["ErrorCode"]


class ErrorCode(IntEnum):
    """Exit codes for CLI commands."""

    OK = 0
    USER_ERROR = 1
    ENV_ERROR = 2
    BUILD_ERROR = 3
    IO_ERROR = 5
