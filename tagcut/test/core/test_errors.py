from __future__ import annotations

from tagcut.core.errors import ErrorCode


def test_exit_code_values_are_stable() -> None:
    assert int(ErrorCode.OK) == 0
    assert int(ErrorCode.USER_ERROR) == 1
    assert int(ErrorCode.ENV_ERROR) == 2
    assert int(ErrorCode.NETWORK_ERROR) == 4
    assert int(ErrorCode.IO_ERROR) == 5
