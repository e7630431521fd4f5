# src/eunit_runner/coverage.py
"""Coverage reports from Erlang's ``cover`` tool.

The test run and the report happen in different ``erl`` nodes: the engine
exports coverage data to a file and the report callback imports it again.
"""

import subprocess
from pathlib import Path
from typing import NamedTuple

from .collaborators import ReportCallback
from .config.config_types import CoverOptions
from .logs import getAppLogger
from .terms import format_string
from .utils import find_executable, shorten_path_for_display


class ModuleCoverage(NamedTuple):
    module: str
    covered: int
    not_covered: int

    @property
    def percent(self) -> float:
        total = self.covered + self.not_covered
        return 100.0 * self.covered / total if total else 100.0


def build_report_script(export: Path, output: Path) -> str:
    """Import `export`, write one HTML file per module, print line counts."""
    out_dir = format_string(str(output) + "/")
    return " ".join(
        [
            "{ok, _} = cover:start(),",
            f"ok = cover:import({format_string(str(export))}),",
            "Mods = lists:sort(cover:imported_modules()),",
            "lists:foreach(fun(M) ->",
            f"{{ok, _}} = cover:analyse_to_file(M, {out_dir} ++ atom_to_list(M)"
            ' ++ ".html", [html]) end, Mods),',
            "lists:foreach(fun(M) ->",
            "{ok, {_, {Cov, NotCov}}} = cover:analyse(M, coverage, module),",
            'io:format("~s ~b ~b~n", [M, Cov, NotCov]) end, Mods),',
            "halt(0).",
        ]
    )


def parse_coverage_lines(text: str) -> list[ModuleCoverage]:
    """Parse ``module covered not_covered`` lines; anything else is ignored."""
    rows: list[ModuleCoverage] = []
    for line in text.splitlines():
        parts = line.split()
        if len(parts) != 3 or not parts[1].isdigit() or not parts[2].isdigit():  # noqa: PLR2004
            continue
        rows.append(ModuleCoverage(parts[0], int(parts[1]), int(parts[2])))
    return rows


def format_coverage_table(rows: list[ModuleCoverage]) -> str:
    if not rows:
        return "No modules were cover-compiled."
    width = max(len("Total"), *(len(r.module) for r in rows))
    lines = [f"{'Percentage':>10} | Module", f"{'-' * 10}-|-{'-' * width}"]
    lines.extend(f"{r.percent:>9.2f}% | {r.module}" for r in rows)

    covered = sum(r.covered for r in rows)
    not_covered = sum(r.not_covered for r in rows)
    total = ModuleCoverage("Total", covered, not_covered)
    lines.append(f"{'-' * 10}-|-{'-' * width}")
    lines.append(f"{total.percent:>9.2f}% | Total")
    return "\n".join(lines)


class ErlCoverTool:
    """Default coverage tool backed by ``cover``."""

    def __init__(self, *, erl_path: str | None = None) -> None:
        self.erl_path = erl_path

    def start(self, compile_path: Path, options: CoverOptions) -> ReportCallback:
        logger = getAppLogger()
        output = options["output"]
        export = options["export"]

        output.mkdir(parents=True, exist_ok=True)
        export.parent.mkdir(parents=True, exist_ok=True)
        if export.exists():
            logger.trace(f"[cover] Removing stale export {export}")
            export.unlink()

        logger.debug("Cover enabled for %s", compile_path)

        def report() -> None:
            self.write_report(compile_path, options)

        return report

    def write_report(self, compile_path: Path, options: CoverOptions) -> list[ModuleCoverage]:
        logger = getAppLogger()
        export = options["export"]
        output = options["output"]

        if not export.exists():
            logger.warning(
                "No coverage data at %s; skipping the coverage report.",
                shorten_path_for_display(export, cwd=Path.cwd()),
            )
            return []

        erl = find_executable("erl", self.erl_path)
        if not erl:
            xmsg = "Cannot find `erl` on PATH; is Erlang/OTP installed?"
            raise RuntimeError(xmsg)

        proc = subprocess.run(  # noqa: S603
            [
                erl,
                "-noshell",
                "-pa",
                str(compile_path),
                "-eval",
                build_report_script(export, output),
            ],
            capture_output=True,
            text=True,
            check=False,
        )
        if proc.returncode != 0:
            xmsg = f"Coverage report failed: {(proc.stderr or proc.stdout).strip()}"
            raise RuntimeError(xmsg)

        rows = parse_coverage_lines(proc.stdout)
        logger.info("Coverage report:\n%s", format_coverage_table(rows))
        logger.info(
            "Generated HTML coverage results in %s",
            shorten_path_for_display(output, cwd=Path.cwd()),
        )
        return rows
