# src/eunit_runner/task.py
"""The eunit task: compile for test, resolve modules, run them."""

from pathlib import Path
from typing import cast

from apathetic_logging import ANSIColors

from .build_system import ErlcBuildSystem
from .collaborators import (
    Collaborators,
    CompileRequest,
    CoverageTool,
    TestRunContext,
    dependency_ebin_paths,
    ebin_path_for,
    load_coverage_tool,
)
from .config import (
    SWITCH_DEFAULTS,
    EunitOptions,
    ProjectConfigResolved,
    derive_eunit_config,
    find_config_in_dir,
    load_and_validate_file,
    resolve_project_config,
    switch_default,
)
from .coverage import ErlCoverTool
from .discovery import resolve_test_modules
from .eunit_options import compose_eunit_options
from .logs import getAppLogger
from .test_engine import ErlEunitEngine


def coverage_tool_for(project: ProjectConfigResolved) -> CoverageTool:
    reference = project["test_coverage"]["tool"]
    if reference:
        return load_coverage_tool(reference)
    return ErlCoverTool()


def default_collaborators(project: ProjectConfigResolved) -> Collaborators:
    """The Erlang/OTP-backed collaborators used by the CLI."""
    return Collaborators(
        build_system=ErlcBuildSystem(),
        test_engine=ErlEunitEngine(),
        coverage_tool=coverage_tool_for(project),
    )


def load_app_project(app_dir: Path) -> ProjectConfigResolved:
    """Config for one umbrella child: its own config file, or defaults."""
    logger = getAppLogger()
    config_path = find_config_in_dir(app_dir)
    loaded = load_and_validate_file(config_path) if config_path else None
    if loaded is None:
        logger.debug("No config in %s; using defaults", app_dir)
        return resolve_project_config(None, app_dir, config_path)
    project_cfg, _summary = loaded
    return resolve_project_config(project_cfg, app_dir, config_path)


def options_for_app(
    options: EunitOptions,
    project: ProjectConfigResolved,
) -> EunitOptions:
    """Re-merge `options` under another project's declared switches.

    Values that came from the command line stay; the rest are taken from
    `project`, falling back to built-in defaults.
    """
    origin = dict(options.get("origin", {}))
    merged = cast("EunitOptions", dict(options))
    declared = project["declared"]

    for name in SWITCH_DEFAULTS:
        if origin.get(name) == "cli":
            continue
        if name in declared:
            merged[name] = declared[name]  # type: ignore[literal-required]
            origin[name] = "config"
        else:
            merged[name] = switch_default(name)  # type: ignore[literal-required]
            origin[name] = "default"

    merged["eunit_opts"] = list(project["eunit_opts"])
    merged["origin"] = origin
    return merged


# --------------------------------------------------------------------------- #
# run
# --------------------------------------------------------------------------- #


def _run_app(
    project: ProjectConfigResolved,
    options: EunitOptions,
    collaborators: Collaborators,
) -> bool:
    logger = getAppLogger()
    eunit_config = derive_eunit_config(project)
    ebin_path = ebin_path_for(eunit_config)

    # --- compile ---
    if options["compile"]:
        request = CompileRequest(
            config=eunit_config,
            force=options["force"],
            deps_check=options["deps_check"],
            archives_check=options["archives_check"],
            version_check=options["version_check"],
        )
        # CompileError propagates: no tests run after a failed build
        ebin_path = collaborators.build_system.compile(request).ebin_path
    else:
        logger.debug("Skipping compilation (--no-compile)")

    # --- resolve ---
    modules = resolve_test_modules(eunit_config["erlc_paths"], options["patterns"])
    if not modules:
        logger.warning(
            "No test modules found for %s matching %s",
            project["app"],
            " ".join(options["patterns"]),
        )
        return True

    eunit_opts = compose_eunit_options(options)

    # --- coverage ---
    report = None
    cover_export = None
    if options["cover"]:
        tool = collaborators.coverage_tool
        if tool is None:
            logger.warning("Coverage requested but no coverage tool is configured.")
        else:
            cover = eunit_config["test_coverage"]
            report = tool.start(ebin_path, cover)
            cover_export = cover["export"]

    # --- run ---
    context = TestRunContext(
        root=eunit_config["root"],
        app=eunit_config["app"],
        ebin_path=ebin_path,
        code_paths=dependency_ebin_paths(eunit_config),
        start=options["start"],
        cover_export=cover_export,
    )
    passed = collaborators.test_engine.run_tests(modules, eunit_opts, context)

    if report is not None:
        report()

    if passed:
        passed_msg = logger.colorize("All eunit tests passed (%s)", ANSIColors.GREEN)
        logger.info(passed_msg, project["app"])
    else:
        failed_msg = logger.colorize("eunit reported failures (%s)", ANSIColors.RED)
        logger.error(failed_msg, project["app"])
    return passed


def run_eunit(
    project: ProjectConfigResolved,
    options: EunitOptions,
    collaborators: Collaborators,
) -> bool:
    """Run the eunit task for `project`; True when every test passed.

    Umbrella projects (``apps_path`` pointing at an existing directory) run
    the task once per child app, in name order, and pass only if all do.
    Every child runs even after an earlier one failed.
    """
    logger = getAppLogger()
    apps_path = project["apps_path"]

    if apps_path is None:
        return _run_app(project, options, collaborators)

    if not apps_path.is_dir():
        logger.warning("apps_path %s does not exist; running as a single app", apps_path)
        return _run_app(project, options, collaborators)

    children = sorted(
        p for p in apps_path.iterdir() if p.is_dir() and not p.name.startswith(".")
    )
    if not children:
        logger.warning("No apps found in %s", apps_path)
        return True

    all_passed = True
    for child in children:
        logger.info("==> %s", child.name)
        child_project = load_app_project(child)
        child_options = options_for_app(options, child_project)
        all_passed &= run_eunit(child_project, child_options, collaborators)
    return all_passed
