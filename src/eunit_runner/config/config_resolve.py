# src/eunit_runner/config/config_resolve.py


import argparse
from pathlib import Path
from typing import Any, cast

from eunit_runner.constants import (
    BUILD_ENV_SEGMENT,
    DEFAULT_ARCHIVES_CHECK,
    DEFAULT_BUILD_PATH,
    DEFAULT_COLOR,
    DEFAULT_COMPILE,
    DEFAULT_COVER,
    DEFAULT_COVER_EXPORT_NAME,
    DEFAULT_COVER_OUTPUT,
    DEFAULT_DEPS_CHECK,
    DEFAULT_DEPS_PATH,
    DEFAULT_ERLC_INCLUDE_PATH,
    DEFAULT_ERLC_OPTIONS,
    DEFAULT_ERLC_PATHS,
    DEFAULT_FORCE,
    DEFAULT_PATTERNS,
    DEFAULT_PROFILE,
    DEFAULT_START,
    DEFAULT_TEST_PATHS,
    DEFAULT_VERBOSE,
    DEFAULT_VERSION_CHECK,
    EUNIT_ENV_SEGMENT,
    TEST_MACRO,
)
from eunit_runner.logs import getAppLogger
from eunit_runner.terms import terms_from_config
from eunit_runner.utils import replace_path_segment

from .config_types import (
    CoverOptions,
    EunitOptions,
    OriginType,
    ProjectConfig,
    ProjectConfigResolved,
    SwitchName,
)


# Built-in values for every recognised switch, lowest precedence
SWITCH_DEFAULTS: dict[SwitchName, bool | None] = {
    "verbose": DEFAULT_VERBOSE,
    "cover": DEFAULT_COVER,
    "profile": DEFAULT_PROFILE,
    "start": DEFAULT_START,
    "color": DEFAULT_COLOR,
    "force": DEFAULT_FORCE,
    "compile": DEFAULT_COMPILE,
    "deps_check": DEFAULT_DEPS_CHECK,
    "archives_check": DEFAULT_ARCHIVES_CHECK,
    "version_check": DEFAULT_VERSION_CHECK,
}


def switch_default(name: SwitchName) -> bool:
    """Built-in value of a switch; an undecided default is detected."""
    default = SWITCH_DEFAULTS[name]
    if default is None:
        return getAppLogger().determineColorEnabled()
    return default


# --------------------------------------------------------------------------- #
# helpers
# --------------------------------------------------------------------------- #


def _under_root(raw: Path | str, root: Path) -> Path:
    """Absolute paths stay as given; relative ones hang off the project root."""
    path = Path(raw).expanduser()
    if path.is_absolute():
        return path
    return root / path


def _dedupe(items: list[Any]) -> list[Any]:
    """Drop repeated items, keeping the first occurrence's position."""
    out: list[Any] = []
    for item in items:
        if item not in out:
            out.append(item)
    return out


def _resolve_cover(raw: ProjectConfig, root: Path) -> CoverOptions:
    cover_cfg = raw.get("test_coverage", {})
    output = _under_root(cover_cfg.get("output", DEFAULT_COVER_OUTPUT), root)
    export_raw = cover_cfg.get("export")
    export = (
        _under_root(export_raw, root)
        if export_raw
        else output / DEFAULT_COVER_EXPORT_NAME
    )
    return {"output": output, "export": export, "tool": cover_cfg.get("tool")}


# --------------------------------------------------------------------------- #
# project config
# --------------------------------------------------------------------------- #


def resolve_project_config(
    raw: ProjectConfig | None,
    root: Path,
    config_path: Path | None = None,
) -> ProjectConfigResolved:
    """Fill in defaults and anchor every path at `root`.

    The switch values a project declares are kept aside in ``declared`` so
    the CLI can still override them later.
    """
    logger = getAppLogger()
    raw = cast("ProjectConfig", dict(raw or {}))
    root = root.resolve()

    apps_path_raw = raw.get("apps_path")
    resolved: ProjectConfigResolved = {
        "root": root,
        "config_path": config_path,
        "app": raw.get("app") or root.name,
        "erlc_paths": [
            _under_root(p, root) for p in raw.get("erlc_paths", DEFAULT_ERLC_PATHS)
        ],
        "erlc_include_path": _under_root(
            raw.get("erlc_include_path", DEFAULT_ERLC_INCLUDE_PATH), root
        ),
        "erlc_options": terms_from_config(
            raw.get("erlc_options", DEFAULT_ERLC_OPTIONS)
        ),
        "test_paths": [
            _under_root(p, root) for p in raw.get("test_paths", DEFAULT_TEST_PATHS)
        ],
        "build_path": _under_root(raw.get("build_path", DEFAULT_BUILD_PATH), root),
        "deps_path": _under_root(raw.get("deps_path", DEFAULT_DEPS_PATH), root),
        "deps": list(raw.get("deps", [])),
        "archives": [_under_root(p, root) for p in raw.get("archives", [])],
        "otp_version": raw.get("otp_version"),
        "apps_path": _under_root(apps_path_raw, root) if apps_path_raw else None,
        "test_coverage": _resolve_cover(raw, root),
        "eunit_opts": terms_from_config(raw.get("eunit_opts", [])),
        "declared": {
            name: cast("bool", raw[name])  # type: ignore[literal-required]
            for name in SWITCH_DEFAULTS
            if name in raw
        },
    }

    logger.trace(
        f"[resolve_project_config] app={resolved['app']} root={root} "
        f"declared={resolved['declared']}"
    )
    return resolved


def _eunit_build_path(build_path: Path, root: Path) -> Path:
    """Swap the `dev` environment segment for `eunit`, below `root` only.

    A build path outside the project only has its last segment swapped.
    """
    try:
        relative = build_path.relative_to(root)
    except ValueError:
        if build_path.name == BUILD_ENV_SEGMENT:
            return build_path.with_name(EUNIT_ENV_SEGMENT)
        return build_path
    return root / replace_path_segment(
        str(relative), BUILD_ENV_SEGMENT, EUNIT_ENV_SEGMENT
    )


def derive_eunit_config(project: ProjectConfigResolved) -> ProjectConfigResolved:
    """Return the configuration used to compile for a test run.

    A new mapping is returned; `project` is left untouched.
      - test paths are compiled together with the sources
      - ``{d, 'TEST'}`` is defined exactly once
      - the ``dev`` build environment becomes ``eunit``
    """
    logger = getAppLogger()
    derived = cast("ProjectConfigResolved", dict(project))

    derived["erlc_paths"] = _dedupe([*project["erlc_paths"], *project["test_paths"]])

    test_define = ("d", TEST_MACRO)
    erlc_options = list(project["erlc_options"])
    if test_define not in erlc_options:
        erlc_options.append(test_define)
    derived["erlc_options"] = erlc_options

    derived["build_path"] = _eunit_build_path(project["build_path"], project["root"])

    # lists are copied so callers cannot reach back into `project`
    derived["test_paths"] = list(project["test_paths"])
    derived["eunit_opts"] = list(project["eunit_opts"])
    derived["declared"] = dict(project["declared"])

    logger.trace(f"[derive_eunit_config] build_path={derived['build_path']}")
    return derived


# --------------------------------------------------------------------------- #
# options
# --------------------------------------------------------------------------- #


def resolve_options(
    args: argparse.Namespace,
    project: ProjectConfigResolved,
) -> EunitOptions:
    """Merge switches: CLI value, else project-declared value, else default.

    A CLI attribute that is missing or None counts as "not given".
    """
    logger = getAppLogger()
    declared = project["declared"]

    values: dict[str, bool] = {}
    origin: dict[str, OriginType] = {}
    for name in SWITCH_DEFAULTS:
        cli_value = getattr(args, name, None)
        if cli_value is not None:
            values[name] = bool(cli_value)
            origin[name] = "cli"
        elif name in declared:
            values[name] = declared[name]
            origin[name] = "config"
        else:
            values[name] = switch_default(name)
            origin[name] = "default"

    patterns = list(getattr(args, "patterns", None) or DEFAULT_PATTERNS)

    options: EunitOptions = {
        "verbose": values["verbose"],
        "cover": values["cover"],
        "profile": values["profile"],
        "start": values["start"],
        "color": values["color"],
        "force": values["force"],
        "compile": values["compile"],
        "deps_check": values["deps_check"],
        "archives_check": values["archives_check"],
        "version_check": values["version_check"],
        "patterns": patterns,
        "eunit_opts": list(project["eunit_opts"]),
        "origin": origin,
    }
    logger.trace(f"[resolve_options] {values} patterns={patterns}")
    return options
