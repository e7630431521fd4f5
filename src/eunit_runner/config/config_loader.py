# src/eunit_runner/config/config_loader.py


import argparse
import sys
import traceback
from pathlib import Path
from typing import Any, cast

from apathetic_utils import (
    cast_hint,
    load_jsonc,
    load_toml,
    plural,
    remove_path_in_error_message,
)

from eunit_runner.logs import getAppLogger
from eunit_runner.meta import PROGRAM_CONFIG

from .config_types import ProjectConfig
from .config_validate import ValidationSummary, validate_config


PYPROJECT_NAME = "pyproject.toml"

# .py > .jsonc > .json when several sit side by side
CONFIG_PRIORITY = {".py": 0, ".jsonc": 1, ".json": 2}


def _candidate_names() -> list[str]:
    return [
        f".{PROGRAM_CONFIG}.py",
        f".{PROGRAM_CONFIG}.jsonc",
        f".{PROGRAM_CONFIG}.json",
    ]


def _pyproject_has_table(pyproject: Path) -> bool:
    """True if pyproject.toml carries a [tool.<PROGRAM_CONFIG>] table."""
    logger = getAppLogger()
    try:
        data = load_toml(pyproject, required=True) or {}
    except (ValueError, OSError) as e:
        logger.debug("Could not read %s: %s", pyproject, e)
        return False
    tool = data.get("tool")
    return isinstance(tool, dict) and PROGRAM_CONFIG in tool


def find_config_in_dir(directory: Path) -> Path | None:
    """Locate a config file in `directory` only (no parent search).

    Dotfiles win over pyproject.toml. Several dotfiles: warn and prefer
    .py > .jsonc > .json.
    """
    logger = getAppLogger()
    found = [directory / n for n in _candidate_names() if (directory / n).exists()]

    if len(found) > 1:
        found_sorted = sorted(found, key=lambda p: CONFIG_PRIORITY.get(p.suffix, 99))
        logger.warning(
            "Multiple config files detected (%s); using %s.",
            ", ".join(p.name for p in found_sorted),
            found_sorted[0].name,
        )
        return found_sorted[0]
    if found:
        return found[0]

    pyproject = directory / PYPROJECT_NAME
    if pyproject.is_file() and _pyproject_has_table(pyproject):
        return pyproject
    return None


def find_config(
    args: argparse.Namespace,
    cwd: Path,
    *,
    missing_level: str = "debug",
) -> Path | None:
    """Locate a configuration file.

    missing_level: log-level for failing to find a configuration file.

    Search order:
      1. Explicit path from CLI (--config)
      2. Candidates in the current working directory, then its parents:
         .{PROGRAM_CONFIG}.py, .{PROGRAM_CONFIG}.jsonc, .{PROGRAM_CONFIG}.json,
         then pyproject.toml with a [tool.{PROGRAM_CONFIG}] table

    Returns the first matching path, or None if no config was found.
    """
    logger = getAppLogger()

    # --- 1. Explicit config path ---
    if getattr(args, "config", None):
        config = Path(args.config).expanduser().resolve()
        logger.trace(f"[find_config] Checking explicit path: {config}")
        if not config.exists():
            xmsg = f"Specified config file not found: {config}"
            raise FileNotFoundError(xmsg)
        if config.is_dir():
            xmsg = f"Specified config path is a directory, not a file: {config}"
            raise ValueError(xmsg)
        return config

    # --- 2. Search cwd and parents, closest first ---
    current = cwd
    while True:
        found = find_config_in_dir(current)
        if found is not None:
            return found
        parent = current.parent
        if parent == current:  # Reached filesystem root
            break
        current = parent

    # Expected absence: defaults apply
    logger.logDynamic(missing_level, f"No config file found in {cwd} or parents")
    return None


def load_config(config_path: Path) -> dict[str, Any] | None:
    """Load configuration data from a file.

    Supports:
      - Python configs: .py files exporting `config`
      - JSON/JSONC configs: .json, .jsonc files
      - pyproject.toml: the [tool.{PROGRAM_CONFIG}] table

    Returns:
        The raw mapping, or None for intentionally empty configs
        (e.g. empty files or `config = None`).

    Raises:
        ValueError if a .py config does not define `config`, or a file
        cannot be parsed.
        TypeError if the config root is not a mapping.
    """
    logger = getAppLogger()
    logger.trace(f"[load_config] Loading from {config_path} ({config_path.suffix})")

    raw: Any
    # --- Python config ---
    if config_path.suffix == ".py":
        config_globals: dict[str, Any] = {}

        # Allow local imports in Python configs (e.g. from ./helpers import foo)
        parent_dir = str(config_path.parent)
        added_to_sys_path = parent_dir not in sys.path
        if added_to_sys_path:
            sys.path.insert(0, parent_dir)

        try:
            source = config_path.read_text(encoding="utf-8")
            exec(compile(source, str(config_path), "exec"), config_globals)  # noqa: S102
        except Exception as e:
            tb = traceback.format_exc()
            xmsg = (
                f"Error while executing Python config: {config_path.name}\n"
                f"{type(e).__name__}: {e}\n{tb}"
            )
            # Raise a generic runtime error for main() to catch and print cleanly
            raise RuntimeError(xmsg) from e
        finally:
            if added_to_sys_path and sys.path[0] == parent_dir:
                sys.path.pop(0)

        if "config" not in config_globals:
            xmsg = f"{config_path.name} did not define `config`"
            raise ValueError(xmsg)
        raw = config_globals["config"]

    # --- pyproject.toml ---
    elif config_path.suffix == ".toml":
        try:
            data = load_toml(config_path, required=True) or {}
        except ValueError as e:
            xmsg = (
                f"Error while loading configuration file '{config_path.name}': {e}"
            )
            raise ValueError(xmsg) from e
        raw = data.get("tool", {}).get(PROGRAM_CONFIG)

    # --- JSONC / JSON ---
    else:
        try:
            raw = load_jsonc(config_path)
        except ValueError as e:
            clean_msg = remove_path_in_error_message(str(e), config_path)
            xmsg = (
                f"Error while loading configuration file '{config_path.name}': "
                f"{clean_msg}"
            )
            raise ValueError(xmsg) from e

    if raw is None or raw == {}:
        return None
    if not isinstance(raw, dict):
        xmsg = (
            f"Invalid top-level value in {config_path.name}: "
            f"{type(raw).__name__} (expected an object)"
        )
        raise TypeError(xmsg)
    return cast("dict[str, Any]", raw)


def _validation_summary(
    summary: ValidationSummary,
    config_path: Path,
) -> None:
    """Pretty-print a validation summary using the standard log() interface."""
    logger = getAppLogger()
    mode = "strict mode" if summary.strict else "lenient mode"

    counts: list[str] = []
    if summary.errors:
        counts.append(f"{len(summary.errors)} error{plural(summary.errors)}")
    if summary.strict_warnings:
        counts.append(
            f"{len(summary.strict_warnings)} strict warning"
            f"{plural(summary.strict_warnings)}",
        )
    if summary.warnings:
        counts.append(
            f"{len(summary.warnings)} normal warning{plural(summary.warnings)}",
        )
    counts_msg = f"\nFound {', '.join(counts)}." if counts else ""

    if not summary.valid:
        logger.error(
            "Failed to validate configuration file %s (%s).%s",
            config_path.name,
            mode,
            counts_msg,
        )
    elif counts:
        logger.warning(
            "Validated configuration file %s (%s) with warnings.%s",
            config_path.name,
            mode,
            counts_msg,
        )
    else:
        logger.debug("Validated %s (%s) successfully.", config_path.name, mode)

    if summary.errors:
        logger.error("\nErrors:\n  • %s", "\n  • ".join(summary.errors))
    if summary.strict_warnings:
        logger.error(
            "\nStrict warnings (treated as errors):\n  • %s",
            "\n  • ".join(summary.strict_warnings),
        )
    if summary.warnings:
        logger.warning("\nWarnings (non-fatal):\n  • %s", "\n  • ".join(summary.warnings))


def load_and_validate_file(
    config_path: Path,
    *,
    args: argparse.Namespace | None = None,
) -> tuple[ProjectConfig, ValidationSummary] | None:
    """Load, validate and type a single config file.

    Returns None for empty configs. Raises a silent ValueError when
    validation fails (the summary has already been logged).
    """
    logger = getAppLogger()

    raw_config = load_config(config_path)
    if raw_config is None:
        return None

    # --- Early peek for log_level before validation output ---
    raw_log_level = raw_config.get("log_level")
    if args is not None and isinstance(raw_log_level, str) and raw_log_level:
        logger.setLevel(
            logger.determineLogLevel(args=args, root_log_level=raw_log_level)
        )

    validation_result = validate_config(raw_config)
    _validation_summary(validation_result, config_path)
    if not validation_result.valid:
        xmsg = f"Configuration file {config_path.name} contains validation errors."
        exception = ValueError(xmsg)
        exception.silent = True  # type: ignore[attr-defined]
        exception.data = validation_result  # type: ignore[attr-defined]
        raise exception

    return cast_hint(ProjectConfig, raw_config), validation_result


def load_and_validate_config(
    args: argparse.Namespace,
) -> tuple[Path, ProjectConfig, ValidationSummary] | None:
    """Find, load, and validate the user's configuration.

    Also determines the effective log level (from CLI/env/config/default)
    early, so logging can initialize as soon as possible.

    Returns:
        (config_path, project_cfg, validation_summary) if a config file was
        found, or None if no config was found (or it was empty).
    """
    logger = getAppLogger()
    cwd = Path.cwd().resolve()
    if not cwd.exists():
        logger.warning("Working directory does not exist: %s", cwd)

    config_path = find_config(args, cwd)
    if config_path is None:
        return None

    loaded = load_and_validate_file(config_path, args=args)
    if loaded is None:
        return None

    project_cfg, summary = loaded
    return config_path, project_cfg, summary
