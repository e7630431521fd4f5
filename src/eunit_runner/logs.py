# src/eunit_runner/logs.py
"""App logger for the eunit runner.

Everything the runner prints goes through `getAppLogger()`. Routine progress
lands on stdout and problems on stderr, so EUnit's own report and the
runner's warnings can be redirected separately.
"""

import logging
from typing import cast

from apathetic_logging import (
    Logger,
    registerDefaultLogLevel,
    registerLogger,
    registerLogLevelEnvVars,
)

from .constants import DEFAULT_ENV_LOG_LEVEL, DEFAULT_LOG_LEVEL
from .meta import PROGRAM_ENV, PROGRAM_PACKAGE


class AppLogger(Logger):
    """Logger for the eunit runner CLI."""

    def setColor(self, enable_color: bool) -> None:  # noqa: N802, FBT001
        """Switch colored tags on or off, including on the root's handlers.

        Records propagate to the root logger, whose handler does the writing.
        """
        for logger in (self, logging.getLogger()):
            logger.enable_color = enable_color  # type: ignore[attr-defined]
            for handler in logger.handlers:
                if hasattr(handler, "enable_color"):
                    handler.enable_color = enable_color  # type: ignore[attr-defined]


# --- Logger initialization ---------------------------------------------------

# must run before the first getLogger() of the app logger
logging.setLoggerClass(AppLogger)
AppLogger.extendLoggingModule()

# EUNIT_RUNNER_LOG_LEVEL is consulted before the generic LOG_LEVEL
registerLogLevelEnvVars(
    [f"{PROGRAM_ENV}_{DEFAULT_ENV_LOG_LEVEL}", DEFAULT_ENV_LOG_LEVEL]
)
registerDefaultLogLevel(DEFAULT_LOG_LEVEL)
registerLogger(PROGRAM_PACKAGE)

_APP_LOGGER = cast("AppLogger", logging.getLogger(PROGRAM_PACKAGE))


def getAppLogger() -> AppLogger:  # noqa: N802
    return _APP_LOGGER
