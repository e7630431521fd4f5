# src/eunit_runner/collaborators.py
"""Interfaces the eunit task delegates to.

The task itself never compiles or runs Erlang code: it hands a derived
configuration to a `BuildSystem`, a module list to a `TestEngine`, and
optionally wraps the run with a `CoverageTool`. Tests substitute fakes for
all three.
"""

import importlib
from collections.abc import Callable, Sequence
from dataclasses import dataclass, field
from pathlib import Path
from typing import Protocol, runtime_checkable

from .config.config_types import CoverOptions, ProjectConfigResolved
from .terms import Term


ReportCallback = Callable[[], None]


class CompileError(RuntimeError):
    """Compilation (or a pre-compile check) failed; no tests should run."""

    def __init__(self, message: str, *, output: str = "") -> None:
        super().__init__(message)
        self.output = output


# --------------------------------------------------------------------------- #
# records
# --------------------------------------------------------------------------- #


def ebin_path_for(config: ProjectConfigResolved) -> Path:
    """Where compiled modules of the project's own app end up."""
    return config["build_path"] / "lib" / config["app"] / "ebin"


def dependency_ebin_paths(config: ProjectConfigResolved) -> list[Path]:
    """Code paths of the declared dependencies, in declaration order."""
    return [config["deps_path"] / dep / "ebin" for dep in config["deps"]]


@dataclass(frozen=True)
class CompileRequest:
    """Everything a build system needs for one compile.

    `config` is the derived test configuration, passed explicitly rather than
    installed anywhere global.
    """

    config: ProjectConfigResolved
    force: bool = False
    deps_check: bool = True
    archives_check: bool = True
    version_check: bool = True

    @property
    def ebin_path(self) -> Path:
        return ebin_path_for(self.config)


@dataclass
class CompileResult:
    ebin_path: Path
    compiled: list[Path] = field(default_factory=list)
    up_to_date: int = 0
    app_file: Path | None = None


@dataclass(frozen=True)
class TestRunContext:
    """Runtime details the engine needs beyond modules and options."""

    __test__ = False  # not a pytest test class

    root: Path
    app: str
    ebin_path: Path
    code_paths: list[Path] = field(default_factory=list)
    start: bool = False
    # set when coverage runs: the engine cover-compiles and exports here
    cover_export: Path | None = None


# --------------------------------------------------------------------------- #
# protocols
# --------------------------------------------------------------------------- #


@runtime_checkable
class BuildSystem(Protocol):
    def compile(self, request: CompileRequest) -> CompileResult:
        """Compile the sources named by `request.config`.

        Raises:
            CompileError: if a check or the compiler fails.
        """
        ...


@runtime_checkable
class TestEngine(Protocol):
    def run_tests(
        self,
        modules: Sequence[str],
        options: list[Term],
        context: TestRunContext,
    ) -> bool:
        """Run every module once and return the aggregate result."""
        ...


@runtime_checkable
class CoverageTool(Protocol):
    def start(self, compile_path: Path, options: CoverOptions) -> ReportCallback:
        """Prepare coverage for a run; the returned callback writes the report."""
        ...


@dataclass
class Collaborators:
    build_system: BuildSystem
    test_engine: TestEngine
    coverage_tool: CoverageTool | None = None


def load_coverage_tool(reference: str) -> CoverageTool:
    """Instantiate a coverage tool from a ``package.module:factory`` reference.

    The factory is called without arguments.
    """
    module_name, sep, attr = reference.partition(":")
    if not sep or not module_name or not attr:
        xmsg = f"Coverage tool must look like 'package.module:factory', got {reference!r}"
        raise ValueError(xmsg)

    try:
        module = importlib.import_module(module_name)
    except ImportError as e:
        xmsg = f"Cannot import coverage tool module {module_name!r}: {e}"
        raise RuntimeError(xmsg) from e

    factory = getattr(module, attr, None)
    if not callable(factory):
        xmsg = f"Coverage tool factory {attr!r} not found in {module_name!r}"
        raise RuntimeError(xmsg)

    tool = factory()
    if not isinstance(tool, CoverageTool):
        xmsg = (
            f"{reference} returned {type(tool).__name__}, "
            "which has no start(compile_path, options) method"
        )
        raise TypeError(xmsg)
    return tool
