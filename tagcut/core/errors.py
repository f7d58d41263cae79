"""Process exit codes.

- 0: success
- 1: something the user can fix (bad version, dirty tree, manifest or ref conflicts)
- 2: git command failed, or the config file is invalid
- 4: publishing to the remote failed
- 5: the manifest could not be read or written
"""

from enum import IntEnum

__all__ = ["ErrorCode"]


class ErrorCode(IntEnum):
    OK = 0
    USER_ERROR = 1
    ENV_ERROR = 2
    NETWORK_ERROR = 4
    IO_ERROR = 5
