# src/eunit_runner/config/config_validate.py


from typing import Any

from apathetic_schema import (
    ApatheticSchema_ValidationSummary as ValidationSummary,
    check_schema_conformance,
    collect_msg,
    warn_keys_once,
)
from apathetic_utils import schema_from_typeddict

from eunit_runner.constants import DEFAULT_STRICT_CONFIG
from eunit_runner.logs import getAppLogger
from eunit_runner.terms import term_from_config

from .config_types import ProjectConfig


# --- constants ------------------------------------------------------

CLI_ONLY_KEYS = {"patterns", "pattern", "config"}
CLI_ONLY_MSG = (
    "Ignored config key(s) {keys} {ctx}: this tool has no config option for it. "
    "Pass test patterns and --config on the command line instead."
)

# Field-specific type examples for better error messages
FIELD_EXAMPLES: dict[str, str] = {
    "root.erlc_paths": '["src", "lib"]',
    "root.test_paths": '["test"]',
    "root.erlc_options": '["debug_info", {"d": "DEBUG"}]',
    "root.eunit_opts": '["verbose", {"report": {"$tuple": ["eunit_surefire", []]}}]',
    "root.build_path": '"_build/dev"',
    "root.otp_version": '">= 25"',
    "root.test_coverage": '{"output": "cover"}',
    "root.log_level": '"debug"',
    "root.strict_config": "true",
}

# Keys whose values are Erlang terms and must convert cleanly
TERM_KEYS = ("erlc_options", "eunit_opts")

__all__ = ["ValidationSummary", "validate_config"]


# --- helpers --------------------------------------------------------


def _validate_terms(
    cfg: dict[str, Any],
    context: str,
    *,
    summary: ValidationSummary,  # modified
) -> None:
    for key in TERM_KEYS:
        values = cfg.get(key)
        if not isinstance(values, list):
            continue
        for i, value in enumerate(values):
            try:
                term_from_config(value)
            except (TypeError, ValueError) as e:
                collect_msg(
                    f"{context}: key `{key}[{i}]` is not a valid Erlang term: {e}",
                    strict=True,
                    summary=summary,
                    is_error=True,
                )


def _validate_coverage_tool(
    cfg: dict[str, Any],
    context: str,
    *,
    summary: ValidationSummary,  # modified
) -> None:
    coverage = cfg.get("test_coverage")
    if not isinstance(coverage, dict) or not isinstance(coverage.get("tool"), str):
        return
    tool = coverage["tool"]
    if ":" not in tool:
        collect_msg(
            f"{context}: `test_coverage.tool` must look like "
            f"'package.module:factory', got {tool!r}",
            strict=True,
            summary=summary,
            is_error=True,
        )


# ---------------------------------------------------------------------------
# main validator
# ---------------------------------------------------------------------------


def validate_config(
    parsed_cfg: dict[str, Any],
    *,
    strict: bool | None = None,
    context: str = "in configuration",
) -> ValidationSummary:
    """Validate a project config.

    strict=True  →  warnings become fatal, but still listed separately
    strict=False →  warnings remain non-fatal
    strict=None  →  use the config's own `strict_config` (default true)
    """
    logger = getAppLogger()
    logger.trace(f"[validate_config] Validating {len(parsed_cfg)} keys")

    strict_config = DEFAULT_STRICT_CONFIG
    strict_from_cfg: Any = parsed_cfg.get("strict_config")
    if strict is not None:
        strict_config = strict
    elif isinstance(strict_from_cfg, bool):
        strict_config = strict_from_cfg

    summary = ValidationSummary(
        valid=True,
        errors=[],
        strict_warnings=[],
        warnings=[],
        strict=strict_config,
    )

    # reported once here, then skipped as unknown keys
    _, prewarn = warn_keys_once(
        "cli-only",
        CLI_ONLY_KEYS,
        parsed_cfg,
        context,
        CLI_ONLY_MSG,
        strict_config=strict_config,
        summary=summary,
        agg=None,
    )

    check_schema_conformance(
        parsed_cfg,
        schema_from_typeddict(ProjectConfig),
        context,
        strict_config=strict_config,
        summary=summary,
        prewarn=prewarn,
        field_examples=FIELD_EXAMPLES,
    )
    _validate_terms(parsed_cfg, context, summary=summary)
    _validate_coverage_tool(parsed_cfg, context, summary=summary)

    summary.valid = not summary.errors and not summary.strict_warnings
    return summary
