# src/eunit_runner/meta.py
"""Program identity shared by the CLI, logger, and config loader."""

from typing import NamedTuple


PROGRAM_PACKAGE = "eunit_runner"
PROGRAM_SCRIPT = "eunit-runner"
PROGRAM_DISPLAY = "EUnit Runner"
PROGRAM_ENV = "EUNIT_RUNNER"
PROGRAM_CONFIG = "eunit"


class Metadata(NamedTuple):
    version: str
    commit: str

    def __str__(self) -> str:
        return f"{self.version} ({self.commit})"
