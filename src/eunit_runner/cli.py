# src/eunit_runner/cli.py

import argparse
import platform
import sys
from dataclasses import dataclass
from difflib import get_close_matches
from pathlib import Path

from apathetic_logging import LEVEL_ORDER, safeLog
from apathetic_utils import get_sys_version_info

from .actions import get_metadata
from .config import (
    EunitOptions,
    ProjectConfig,
    ProjectConfigResolved,
    load_and_validate_config,
    resolve_options,
    resolve_project_config,
)
from .logs import getAppLogger
from .meta import PROGRAM_DISPLAY, PROGRAM_SCRIPT
from .task import default_collaborators, run_eunit
from .utils import shorten_path_for_display


# --------------------------------------------------------------------------- #
# CLI setup and helpers
# --------------------------------------------------------------------------- #


class HintingArgumentParser(argparse.ArgumentParser):
    """ArgumentParser that suggests the closest flag for a mistyped one."""

    def _flag_hints(self, message: str) -> list[str]:
        _, marker, rest = message.partition("unrecognized arguments:")
        if not marker:
            return []
        known = [flag for action in self._actions for flag in action.option_strings]
        hints: list[str] = []
        for token in rest.split():
            if not token.startswith("-"):
                continue
            close = get_close_matches(token, known, n=1, cutoff=0.6)
            if close:
                hints.append(f"Hint: did you mean {close[0]}?")
        return hints

    def error(self, message: str) -> None:  # type: ignore[override]
        self.print_usage(sys.stderr)
        lines = [f"{self.prog}: error: {message}", *self._flag_hints(message)]
        self.exit(2, "\n".join(lines) + "\n")


def _add_switch(
    parser: argparse.ArgumentParser | argparse._MutuallyExclusiveGroup,  # pyright: ignore[reportPrivateUsage]
    *flags: str,
    dest: str,
    const: bool,
    help_text: str,
) -> None:
    """Flags default to None so "not given" stays distinguishable."""
    parser.add_argument(
        *flags,
        dest=dest,
        action="store_const",
        const=const,
        default=None,
        help=help_text,
    )


def _setup_parser() -> argparse.ArgumentParser:
    parser = HintingArgumentParser(
        prog=PROGRAM_SCRIPT,
        description=(
            "Compile an Erlang project for test and run its EUnit tests. "
            'Patterns select test modules by name; ".erl" is appended.'
        ),
    )

    # --- Positional patterns ---
    parser.add_argument(
        "patterns",
        nargs="*",
        metavar="PATTERN",
        help='Glob(s) selecting modules to test, without ".erl" (default: *).',
    )

    # --- Test run switches ---
    _add_switch(
        parser,
        "-v",
        "--verbose",
        dest="verbose",
        const=True,
        help_text="Run eunit with the verbose option.",
    )
    _add_switch(
        parser,
        "-c",
        "--cover",
        dest="cover",
        const=True,
        help_text="Collect coverage and write a report.",
    )
    _add_switch(
        parser,
        "-p",
        "--profile",
        dest="profile",
        const=True,
        help_text="List the slowest tests after the run.",
    )
    _add_switch(
        parser,
        "--start",
        dest="start",
        const=True,
        help_text="Start the application before running the tests.",
    )
    _add_switch(
        parser,
        "--force",
        dest="force",
        const=True,
        help_text="Recompile every source file.",
    )

    # --- Color ---
    color = parser.add_mutually_exclusive_group()
    _add_switch(
        color,
        "--no-color",
        dest="color",
        const=False,
        help_text="Disable ANSI color output.",
    )
    _add_switch(
        color,
        "--color",
        dest="color",
        const=True,
        help_text="Force-enable ANSI color output (overrides auto-detect).",
    )

    # --- Build checks ---
    _add_switch(
        parser,
        "--no-compile",
        dest="compile",
        const=False,
        help_text="Run the tests without compiling first.",
    )
    _add_switch(
        parser,
        "--no-deps-check",
        dest="deps_check",
        const=False,
        help_text="Skip checking that dependencies are available.",
    )
    _add_switch(
        parser,
        "--no-archives-check",
        dest="archives_check",
        const=False,
        help_text="Skip checking that configured archives exist.",
    )
    _add_switch(
        parser,
        "--no-elixir-version-check",
        "--no-version-check",
        dest="version_check",
        const=False,
        help_text="Skip checking the OTP release against otp_version.",
    )

    # --- Config, version and log level ---
    parser.add_argument("--config", help="Path to config file.")
    parser.add_argument("--version", action="store_true", help="Show version info.")

    log_level = parser.add_mutually_exclusive_group()
    log_level.add_argument(
        "-q",
        "--quiet",
        action="store_const",
        const="warning",
        dest="log_level",
        help="Suppress non-critical output (same as --log-level warning).",
    )
    log_level.add_argument(
        "--log-level",
        choices=LEVEL_ORDER,
        default=None,
        dest="log_level",
        help="Set log verbosity level.",
    )
    return parser


# --------------------------------------------------------------------------- #
# Main entry helpers
# --------------------------------------------------------------------------- #


@dataclass
class _LoadedProject:
    """The project a run operates on, plus the merged switches."""

    config_path: Path | None
    project: ProjectConfigResolved
    options: EunitOptions
    cwd: Path


def _initialize_logger(args: argparse.Namespace) -> None:
    """First pass at the log level and color, before any config is read."""
    logger = getAppLogger()
    log_level = logger.determineLogLevel(args=args)
    logger.setLevel(log_level)
    color = getattr(args, "color", None)
    logger.setColor(color if color is not None else logger.determineColorEnabled())
    logger.trace("[BOOT] log-level initialized: %s", logger.levelName)

    logger.debug(
        "Runtime: Python %s (%s)\n    %s",
        platform.python_version(),
        platform.python_implementation(),
        sys.version.replace("\n", " "),
    )


def _handle_early_exits(args: argparse.Namespace) -> int | None:
    """Exit code for runs that stop before loading config, else None."""
    logger = getAppLogger()

    # --- Version flag ---
    if getattr(args, "version", None):
        logger.info("%s %s", PROGRAM_DISPLAY, get_metadata())
        return 0

    # --- Python version check ---
    if get_sys_version_info() < (3, 10):
        logger.error("%s requires Python 3.10 or newer.", PROGRAM_DISPLAY)
        return 1

    return None


def _load_project(args: argparse.Namespace) -> _LoadedProject:
    """Load config and merge it with CLI switches and defaults."""
    logger = getAppLogger()
    cwd = Path.cwd().resolve()

    # --- Load configuration ---
    config_path: Path | None = None
    project_cfg: ProjectConfig | None = None
    config_result = load_and_validate_config(args)
    if config_result is not None:
        config_path, project_cfg, _validation_summary = config_result

    root = config_path.parent if config_path else cwd
    if project_cfg is None:
        logger.debug("No config file found; using defaults with root %s", root)

    # --- log level: arg -> env -> config -> default ---
    log_level = logger.determineLogLevel(
        args=args,
        root_log_level=(project_cfg or {}).get("log_level"),
    )
    logger.setLevel(log_level)
    logger.trace("[CONFIG] log-level re-resolved from config: %s", logger.levelName)

    project = resolve_project_config(project_cfg, root, config_path)
    options = resolve_options(args, project)
    return _LoadedProject(
        config_path=config_path,
        project=project,
        options=options,
        cwd=cwd,
    )


# --------------------------------------------------------------------------- #
# Main entry
# --------------------------------------------------------------------------- #


def main(argv: list[str] | None = None) -> int:
    logger = getAppLogger()  # init (use env + defaults)

    try:
        parser = _setup_parser()
        args = parser.parse_args(argv)

        # --- logger from CLI + env ---
        _initialize_logger(args)

        # --- --version and interpreter check ---
        early_exit_code = _handle_early_exits(args)
        if early_exit_code is not None:
            return early_exit_code

        # --- config + switches ---
        loaded = _load_project(args)

        # --- Config summary ---
        if loaded.config_path:
            logger.debug(
                "Using config: %s",
                shorten_path_for_display(loaded.config_path, cwd=loaded.cwd),
            )
        logger.debug("Project root: %s", loaded.project["root"])

        # --- Run ---
        collaborators = default_collaborators(loaded.project)
        passed = run_eunit(loaded.project, loaded.options, collaborators)

    except (FileNotFoundError, ValueError, TypeError, RuntimeError) as e:
        # controlled termination
        silent = getattr(e, "silent", False)
        if not silent:
            try:
                logger.errorIfNotDebug(str(e))
            except Exception:  # noqa: BLE001
                safeLog(f"[FATAL] Logging failed while reporting: {e}")
        return getattr(e, "code", 1)

    except Exception as e:  # noqa: BLE001
        # unexpected internal error
        try:
            logger.criticalIfNotDebug("Unexpected internal error: %s", e)
        except Exception:  # noqa: BLE001
            safeLog(f"[FATAL] Logging failed while reporting: {e}")

        return getattr(e, "code", 1)

    else:
        return 0 if passed else 1
