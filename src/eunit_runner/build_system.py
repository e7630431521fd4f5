# src/eunit_runner/build_system.py
"""Compile Erlang sources with ``erlc``."""

import operator
import re
import shutil
import subprocess
from collections.abc import Callable
from pathlib import Path

from apathetic_utils import plural

from .collaborators import (
    CompileError,
    CompileRequest,
    CompileResult,
    dependency_ebin_paths,
)
from .config.config_types import ProjectConfigResolved
from .constants import (
    APP_EXTENSION,
    APP_SRC_EXTENSION,
    BEAM_EXTENSION,
    HEADER_EXTENSION,
)
from .discovery import find_source_files, module_name_from_path
from .logs import getAppLogger
from .terms import ErlString, Term, format_term
from .utils import find_executable, is_hidden_below, shorten_path_for_display


_OTP_RELEASE_SCRIPT = (
    'io:format("~s", [erlang:system_info(otp_release)]), halt().'
)

_VERSION_OPERATORS: dict[str, Callable[[tuple[int, ...], tuple[int, ...]], bool]] = {
    ">=": operator.ge,
    "<=": operator.le,
    ">": operator.gt,
    "<": operator.lt,
    "==": operator.eq,
    "=": operator.eq,
}

_REQUIREMENT_CLAUSE = re.compile(r"^\s*(>=|<=|==|>|<|=)?\s*(\d+(?:\.\d+)*)\s*$")


# --------------------------------------------------------------------------- #
# pure helpers
# --------------------------------------------------------------------------- #


def erlc_flags(options: list[Term]) -> list[str]:
    """Translate compile option terms into erlc command-line flags.

    ``{d, M}`` → ``-DM``, ``{d, M, V}`` → ``-DM=V``, ``{i, Dir}`` → ``-I Dir``;
    anything else is passed through as ``+Term``.
    """
    flags: list[str] = []
    for opt in options:
        if isinstance(opt, tuple) and len(opt) == 2 and opt[0] == "d":  # noqa: PLR2004
            flags.append(f"-D{opt[1]}")
        elif isinstance(opt, tuple) and len(opt) == 3 and opt[0] == "d":  # noqa: PLR2004
            flags.append(f"-D{opt[1]}={format_term(opt[2])}")
        elif isinstance(opt, tuple) and len(opt) == 2 and opt[0] == "i":  # noqa: PLR2004
            flags.extend(["-I", str(opt[1])])
        else:
            flags.append(f"+{format_term(opt)}")
    return flags


def _parse_version(text: str) -> tuple[int, ...]:
    return tuple(int(part) for part in text.split("."))


def _pad(version: tuple[int, ...], length: int) -> tuple[int, ...]:
    return version + (0,) * (length - len(version))


def otp_version_satisfies(release: str, requirement: str) -> bool:
    """Check an OTP release (e.g. ``"26"``) against ``">= 24"``.

    Several clauses may be joined with ``and``. A clause without an operator
    means ``==``.

    Raises:
        ValueError: if the requirement or release cannot be parsed.
    """
    release = release.strip()
    if not re.fullmatch(r"\d+(?:\.\d+)*", release):
        xmsg = f"Unrecognised OTP release {release!r}"
        raise ValueError(xmsg)
    current = _parse_version(release)

    for clause in requirement.split(" and "):
        match = _REQUIREMENT_CLAUSE.match(clause)
        if not match:
            xmsg = f"Invalid otp_version requirement: {requirement!r}"
            raise ValueError(xmsg)
        op_text, version_text = match.groups()
        wanted = _parse_version(version_text)
        length = max(len(current), len(wanted))
        compare = _VERSION_OPERATORS[op_text or "=="]
        if not compare(_pad(current, length), _pad(wanted, length)):
            return False
    return True


def newest_header_mtime(config: ProjectConfigResolved) -> float:
    """Latest mtime of any ``.hrl`` under the include path or source dirs.

    Returns 0.0 when there are no headers.
    """
    directories = [config["erlc_include_path"], *config["erlc_paths"]]
    newest = 0.0
    for directory in directories:
        if not directory.is_dir():
            continue
        for header in directory.rglob("*" + HEADER_EXTENSION):
            if header.is_file() and not is_hidden_below(header, directory):
                newest = max(newest, header.stat().st_mtime)
    return newest


def is_stale(source: Path, ebin_path: Path, header_mtime: float = 0.0) -> bool:
    """True when the beam for `source` is missing or out of date.

    The beam is out of date when it is older than the source, or older than
    `header_mtime`. Headers are not traced per module: touching any header
    recompiles every source.
    """
    beam = ebin_path / (module_name_from_path(source) + BEAM_EXTENSION)
    if not beam.exists():
        return True
    beam_mtime = beam.stat().st_mtime
    return beam_mtime < source.stat().st_mtime or beam_mtime < header_mtime


def find_app_src(config: ProjectConfigResolved) -> Path | None:
    """The project's ``<app>.app.src``, searched for in the source dirs."""
    name = config["app"] + APP_SRC_EXTENSION
    for directory in config["erlc_paths"]:
        candidate = directory / name
        if candidate.is_file():
            return candidate
    return None


def render_app_file(app: str, modules: list[str]) -> str:
    """Minimal application resource for projects without an ``.app.src``."""
    term = (
        "application",
        app,
        [
            ("description", ErlString(app)),
            ("vsn", ErlString("0.0.0")),
            ("modules", sorted(modules)),
            ("registered", []),
            ("applications", ["kernel", "stdlib"]),
        ],
    )
    return format_term(term) + ".\n"


# --------------------------------------------------------------------------- #
# build system
# --------------------------------------------------------------------------- #


class ErlcBuildSystem:
    """Compile stale ``.erl`` files into the project's ebin directory."""

    def __init__(
        self,
        *,
        erlc_path: str | None = None,
        erl_path: str | None = None,
    ) -> None:
        self.erlc_path = erlc_path
        self.erl_path = erl_path

    # --- checks ---

    def check_deps(self, config: ProjectConfigResolved) -> None:
        missing = [p for p in dependency_ebin_paths(config) if not p.is_dir()]
        if missing:
            names = ", ".join(p.parent.name for p in missing)
            xmsg = (
                f"Unavailable dependenc{'ies' if len(missing) > 1 else 'y'}: {names}. "
                "Fetch and build them first, or pass --no-deps-check."
            )
            raise CompileError(xmsg)

    def check_archives(self, config: ProjectConfigResolved) -> None:
        missing = [p for p in config["archives"] if not p.exists()]
        if missing:
            shown = ", ".join(
                shorten_path_for_display(p, cwd=config["root"]) for p in missing
            )
            xmsg = f"Missing archive{plural(missing)}: {shown}. Pass --no-archives-check to skip."
            raise CompileError(xmsg)

    def otp_release(self) -> str:
        erl = find_executable("erl", self.erl_path)
        if not erl:
            xmsg = "Cannot find `erl` on PATH; is Erlang/OTP installed?"
            raise RuntimeError(xmsg)
        result = subprocess.run(  # noqa: S603
            [erl, "-noshell", "-eval", _OTP_RELEASE_SCRIPT],
            capture_output=True,
            text=True,
            check=False,
        )
        if result.returncode != 0:
            xmsg = f"Could not read the OTP release from {erl}: {result.stderr.strip()}"
            raise RuntimeError(xmsg)
        return result.stdout.strip()

    def check_version(self, config: ProjectConfigResolved) -> None:
        logger = getAppLogger()
        requirement = config["otp_version"]
        if not requirement:
            return
        release = self.otp_release()
        logger.debug("OTP release %s (requirement %s)", release, requirement)
        if not otp_version_satisfies(release, requirement):
            xmsg = (
                f"OTP release {release} does not satisfy otp_version {requirement!r}. "
                "Pass --no-elixir-version-check to skip this check."
            )
            raise CompileError(xmsg)

    # --- compile ---

    def build_command(
        self,
        erlc: str,
        config: ProjectConfigResolved,
        ebin_path: Path,
        sources: list[Path],
    ) -> list[str]:
        return [
            erlc,
            "-o",
            str(ebin_path),
            "-I",
            str(config["erlc_include_path"]),
            *erlc_flags(config["erlc_options"]),
            *(str(s) for s in sources),
        ]

    def write_app_file(
        self,
        config: ProjectConfigResolved,
        ebin_path: Path,
        sources: list[Path],
    ) -> Path:
        """Put ``<app>.app`` in ebin so the application can be started.

        An ``.app.src`` is copied when the ebin copy is missing or older;
        otherwise a minimal resource listing `sources` is rendered.
        """
        logger = getAppLogger()
        app_file = ebin_path / (config["app"] + APP_EXTENSION)
        app_src = find_app_src(config)
        ebin_path.mkdir(parents=True, exist_ok=True)

        if app_src is not None:
            if app_file.exists() and app_file.stat().st_mtime >= app_src.stat().st_mtime:
                return app_file
            shutil.copyfile(app_src, app_file)
            logger.debug(
                "Copied %s to %s",
                shorten_path_for_display(app_src, cwd=config["root"]),
                app_file.name,
            )
            return app_file

        content = render_app_file(config["app"], [module_name_from_path(s) for s in sources])
        if not app_file.exists() or app_file.read_text(encoding="utf-8") != content:
            app_file.write_text(content, encoding="utf-8")
            logger.debug("Wrote %s", app_file.name)
        return app_file

    def compile(self, request: CompileRequest) -> CompileResult:
        logger = getAppLogger()
        config = request.config

        if request.deps_check:
            self.check_deps(config)
        if request.archives_check:
            self.check_archives(config)
        if request.version_check:
            self.check_version(config)

        ebin_path = request.ebin_path
        sources = find_source_files(config["erlc_paths"])
        header_mtime = newest_header_mtime(config)
        stale = [
            s for s in sources if request.force or is_stale(s, ebin_path, header_mtime)
        ]
        result = CompileResult(ebin_path=ebin_path, up_to_date=len(sources) - len(stale))

        if not stale:
            logger.debug("All %d source file(s) up to date in %s", len(sources), ebin_path)
            result.app_file = self.write_app_file(config, ebin_path, sources)
            return result

        erlc = find_executable("erlc", self.erlc_path)
        if not erlc:
            xmsg = "Cannot find `erlc` on PATH; is Erlang/OTP installed?"
            raise RuntimeError(xmsg)

        ebin_path.mkdir(parents=True, exist_ok=True)
        command = self.build_command(erlc, config, ebin_path, stale)
        logger.trace(f"[erlc] {' '.join(command)}")

        proc = subprocess.run(  # noqa: S603
            command,
            cwd=config["root"],
            capture_output=True,
            text=True,
            check=False,
        )
        output = (proc.stdout + proc.stderr).strip()
        if proc.returncode != 0:
            xmsg = f"Compilation failed (erlc exited with {proc.returncode})"
            if output:
                xmsg += f":\n{output}"
            raise CompileError(xmsg, output=output)
        if output:
            # erlc warnings
            logger.warning("%s", output)

        result.compiled = stale
        result.app_file = self.write_app_file(config, ebin_path, sources)
        logger.info("Compiled %d file%s (%s)", len(stale), plural(stale), config["app"])
        return result
