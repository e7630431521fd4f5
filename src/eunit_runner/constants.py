# src/eunit_runner/constants.py
"""Central constants used across the project."""

# --- env keys ---
DEFAULT_ENV_LOG_LEVEL: str = "LOG_LEVEL"

# --- program defaults ---
DEFAULT_LOG_LEVEL: str = "info"

# --- config defaults ---
DEFAULT_STRICT_CONFIG: bool = True

# --- discovery ---
SOURCE_EXTENSION: str = ".erl"
BEAM_EXTENSION: str = ".beam"
HEADER_EXTENSION: str = ".hrl"
APP_EXTENSION: str = ".app"
APP_SRC_EXTENSION: str = ".app.src"
TEST_SUFFIX: str = "_tests"
DEFAULT_PATTERNS: list[str] = ["*"]

# --- switch defaults (lowest precedence, below project config and CLI) ---
DEFAULT_VERBOSE: bool = False
DEFAULT_COVER: bool = False
DEFAULT_PROFILE: bool = False
DEFAULT_START: bool = False
# None: decided by NO_COLOR, FORCE_COLOR and whether stdout is a TTY
DEFAULT_COLOR: bool | None = None
DEFAULT_FORCE: bool = False
DEFAULT_COMPILE: bool = True
DEFAULT_DEPS_CHECK: bool = True
DEFAULT_ARCHIVES_CHECK: bool = True
DEFAULT_VERSION_CHECK: bool = True

# --- project defaults ---
DEFAULT_ERLC_PATHS: list[str] = ["src"]
DEFAULT_ERLC_INCLUDE_PATH: str = "include"
# cover:compile_beam_directory needs the abstract code debug_info keeps
DEFAULT_ERLC_OPTIONS: list[str] = ["debug_info"]
DEFAULT_TEST_PATHS: list[str] = ["test"]
DEFAULT_BUILD_PATH: str = "_build/dev"
DEFAULT_DEPS_PATH: str = "deps"
DEFAULT_COVER_OUTPUT: str = "cover"
DEFAULT_COVER_EXPORT_NAME: str = "eunit.coverdata"

# build_path segment swapped out when deriving the eunit build directory
BUILD_ENV_SEGMENT: str = "dev"
EUNIT_ENV_SEGMENT: str = "eunit"

# --- engine ---
TEST_MACRO: str = "TEST"
DEFAULT_REPORTER: str = "eunit_progress"
