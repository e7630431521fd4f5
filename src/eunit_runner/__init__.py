# src/eunit_runner/__init__.py

"""EUnit Runner: compile an Erlang project for test and run its EUnit suite.

Full developer API
==================
This package re-exports the public symbols of its submodules, making it
suitable for programmatic use and for plugging in alternate collaborators.
Anything prefixed with "_" is considered internal and may change.

Highlights:
    - main()                  → CLI entrypoint
    - run_eunit()             → Run the eunit task for a resolved project
    - resolve_test_modules()  → Patterns + directories → test modules
    - compose_eunit_options() → Engine option list from merged switches
"""

from .actions import get_metadata
from .build_system import ErlcBuildSystem, erlc_flags, otp_version_satisfies
from .cli import main
from .collaborators import (
    BuildSystem,
    Collaborators,
    CompileError,
    CompileRequest,
    CompileResult,
    CoverageTool,
    TestEngine,
    TestRunContext,
    load_coverage_tool,
)
from .config import (
    EunitOptions,
    ProjectConfig,
    ProjectConfigResolved,
    derive_eunit_config,
    find_config,
    load_and_validate_config,
    load_config,
    resolve_options,
    resolve_project_config,
    validate_config,
)
from .constants import (
    DEFAULT_ENV_LOG_LEVEL,
    DEFAULT_LOG_LEVEL,
    DEFAULT_PATTERNS,
    DEFAULT_STRICT_CONFIG,
    SOURCE_EXTENSION,
    TEST_SUFFIX,
)
from .coverage import ErlCoverTool
from .discovery import (
    find_source_files,
    is_tests_module,
    module_name_from_path,
    remove_test_duplicates,
    resolve_test_modules,
    without_test_suffix,
)
from .eunit_options import compose_eunit_options
from .logs import getAppLogger
from .meta import (
    PROGRAM_CONFIG,
    PROGRAM_DISPLAY,
    PROGRAM_ENV,
    PROGRAM_PACKAGE,
    PROGRAM_SCRIPT,
    Metadata,
)
from .task import default_collaborators, run_eunit
from .terms import ErlString, format_term, term_from_config
from .test_engine import ErlEunitEngine


__all__ = [  # noqa: RUF022
    # actions
    "get_metadata",
    # build_system
    "ErlcBuildSystem",
    "erlc_flags",
    "otp_version_satisfies",
    # cli
    "main",
    # collaborators
    "BuildSystem",
    "Collaborators",
    "CompileError",
    "CompileRequest",
    "CompileResult",
    "CoverageTool",
    "TestEngine",
    "TestRunContext",
    "load_coverage_tool",
    # config
    "EunitOptions",
    "ProjectConfig",
    "ProjectConfigResolved",
    "derive_eunit_config",
    "find_config",
    "load_and_validate_config",
    "load_config",
    "resolve_options",
    "resolve_project_config",
    "validate_config",
    # constants
    "DEFAULT_ENV_LOG_LEVEL",
    "DEFAULT_LOG_LEVEL",
    "DEFAULT_PATTERNS",
    "DEFAULT_STRICT_CONFIG",
    "SOURCE_EXTENSION",
    "TEST_SUFFIX",
    # coverage
    "ErlCoverTool",
    # discovery
    "find_source_files",
    "is_tests_module",
    "module_name_from_path",
    "remove_test_duplicates",
    "resolve_test_modules",
    "without_test_suffix",
    # eunit_options
    "compose_eunit_options",
    # logs
    "getAppLogger",
    # meta
    "Metadata",
    "PROGRAM_CONFIG",
    "PROGRAM_DISPLAY",
    "PROGRAM_ENV",
    "PROGRAM_PACKAGE",
    "PROGRAM_SCRIPT",
    # task
    "default_collaborators",
    "run_eunit",
    # terms
    "ErlString",
    "format_term",
    "term_from_config",
    # test_engine
    "ErlEunitEngine",
]
