# src/eunit_runner/utils/utils_system.py

import shutil
from pathlib import Path

from eunit_runner.logs import getAppLogger


def find_executable(
    tool_name: str,
    custom_path: str | None = None,
) -> str | None:
    """Locate an OTP executable such as ``erl`` or ``erlc``.

    An explicit `custom_path` wins when it points at a file; otherwise the
    tool is looked up on PATH. Returns None when neither finds it.
    """
    if custom_path:
        path = Path(custom_path)
        if path.is_file():
            return str(path.resolve())
        getAppLogger().warning(
            "%s not found at %s; falling back to PATH", tool_name, custom_path
        )

    return shutil.which(tool_name)
