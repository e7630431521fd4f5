# src/eunit_runner/config/config_types.py


from pathlib import Path
from typing import Any, Literal, TypedDict

from typing_extensions import NotRequired


OriginType = Literal["cli", "config", "default"]

SwitchName = Literal[
    "verbose",
    "cover",
    "profile",
    "start",
    "color",
    "force",
    "compile",
    "deps_check",
    "archives_check",
    "version_check",
]


class CoverConfig(TypedDict, total=False):
    output: str  # report directory, relative to the project root
    export: str  # coverage data file shared by the engine and the report
    tool: str  # "package.module:factory" returning a CoverageTool


class ProjectConfig(TypedDict, total=False):
    # project layout
    app: str
    erlc_paths: list[str]
    erlc_include_path: str
    erlc_options: list[Any]
    test_paths: list[str]
    build_path: str
    deps_path: str
    deps: list[str]
    archives: list[str]
    otp_version: str
    apps_path: str  # umbrella projects: directory holding child apps
    test_coverage: CoverConfig

    # runtime behavior
    log_level: str
    strict_config: bool

    # declared switch defaults (overridden by CLI flags)
    verbose: bool
    cover: bool
    profile: bool
    start: bool
    color: bool
    force: bool
    compile: bool
    deps_check: bool
    archives_check: bool
    version_check: bool
    eunit_opts: list[Any]


# Resolved types - all fields are guaranteed to be present with final values
class CoverOptions(TypedDict):
    output: Path
    export: Path
    tool: str | None


class ProjectConfigResolved(TypedDict):
    root: Path
    config_path: Path | None
    app: str
    erlc_paths: list[Path]
    erlc_include_path: Path
    erlc_options: list[Any]  # Erlang terms
    test_paths: list[Path]
    build_path: Path
    deps_path: Path
    deps: list[str]
    archives: list[Path]
    otp_version: str | None
    apps_path: Path | None
    test_coverage: CoverOptions
    eunit_opts: list[Any]  # Erlang terms
    # switch values the project declared; absent keys fall back to defaults
    declared: dict[str, bool]


class EunitOptions(TypedDict):
    verbose: bool
    cover: bool
    profile: bool
    start: bool
    color: bool
    force: bool
    compile: bool
    deps_check: bool
    archives_check: bool
    version_check: bool
    patterns: list[str]
    eunit_opts: list[Any]  # Erlang terms

    # meta only
    origin: NotRequired[dict[str, OriginType]]
