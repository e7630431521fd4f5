# src/eunit_runner/actions.py
import re
import subprocess
from contextlib import suppress
from importlib.metadata import PackageNotFoundError, version as dist_version
from pathlib import Path

from .logs import getAppLogger
from .meta import PROGRAM_SCRIPT, Metadata


def get_metadata() -> Metadata:
    """Return (version, commit) for this tool.

    - Source checkout → read pyproject.toml + git
    - Installed distribution → package metadata, commit "unknown"
    """
    logger = getAppLogger()
    logger.trace(f"get_metadata ran from: {Path(__file__).resolve()}")

    version = "unknown"
    commit = "unknown"

    # Try pyproject.toml for version (source checkout)
    root = Path(__file__).resolve().parents[2]
    pyproject = root / "pyproject.toml"
    if pyproject.exists():
        logger.trace(f"trying to read metadata from {pyproject}")
        text = pyproject.read_text(encoding="utf-8")
        match = re.search(r'(?m)^\s*version\s*=\s*["\']([^"\']+)["\']', text)
        if match:
            version = match.group(1)

    if version == "unknown":
        with suppress(PackageNotFoundError):
            version = dist_version(PROGRAM_SCRIPT)

    # Try git for commit
    with suppress(Exception):
        logger.trace("trying to get commit from git")
        result = subprocess.run(
            ["git", "rev-parse", "--short", "HEAD"],  # noqa: S607
            cwd=root,
            capture_output=True,
            text=True,
            check=True,
        )
        commit = result.stdout.strip()

    logger.trace(f"got package version {version} with commit {commit}")
    return Metadata(version, commit)
