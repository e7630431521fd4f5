# tests/50_core/test_validate_config.py

from typing import Any

import pytest

import eunit_runner.config.config_validate as mod_validate
from tests.utils import make_summary


def test_validate_config_accepts_a_full_config() -> None:
    # --- setup ---
    cfg: dict[str, Any] = {
        "app": "demo",
        "erlc_paths": ["src"],
        "erlc_include_path": "include",
        "erlc_options": ["debug_info", {"d": "DEBUG"}],
        "test_paths": ["test"],
        "build_path": "_build/dev",
        "deps_path": "deps",
        "deps": ["jsx"],
        "archives": [],
        "otp_version": ">= 24",
        "apps_path": "apps",
        "test_coverage": {"output": "cover", "tool": "my_pkg.cover:make_tool"},
        "log_level": "debug",
        "strict_config": True,
        "verbose": True,
        "cover": False,
        "eunit_opts": [{"report": {"$tuple": ["eunit_surefire", []]}}],
    }

    # --- execute ---
    summary = mod_validate.validate_config(cfg)

    # --- verify ---
    assert summary == make_summary()


def test_validate_config_unknown_key_is_fatal_when_strict() -> None:
    # --- execute ---
    summary = mod_validate.validate_config({"covr": True})

    # --- verify ---
    assert not summary.valid
    assert summary.strict_warnings
    assert "Unknown key `covr`" in summary.strict_warnings[0]
    assert "did you mean 'covr' → 'cover'" in summary.strict_warnings[0]


def test_validate_config_unknown_key_is_a_warning_when_lenient() -> None:
    # --- execute ---
    summary = mod_validate.validate_config({"covr": True, "strict_config": False})

    # --- verify ---
    assert summary.valid
    assert summary.warnings
    assert not summary.strict_warnings


def test_validate_config_strict_argument_overrides_config() -> None:
    summary = mod_validate.validate_config(
        {"covr": True, "strict_config": True}, strict=False
    )
    assert summary.valid
    assert summary.strict is False


@pytest.mark.parametrize(
    ("cfg", "fragment"),
    [
        ({"verbose": "yes"}, "`verbose` expected bool"),
        ({"erlc_paths": "src"}, "`erlc_paths` expected list[str]"),
        ({"test_paths": ["test", 3]}, "`test_paths[1]` expected str"),
        ({"test_coverage": "cover"}, "expected an object"),
        ({"test_coverage": {"output": 1}}, "`output` expected str"),
    ],
)
def test_validate_config_type_errors(cfg: dict[str, Any], fragment: str) -> None:
    # --- execute ---
    summary = mod_validate.validate_config(cfg)

    # --- verify ---
    assert not summary.valid
    assert any(fragment in e for e in summary.errors), summary.errors


def test_validate_config_unknown_nested_key() -> None:
    summary = mod_validate.validate_config({"test_coverage": {"outptu": "x"}})
    assert not summary.valid
    assert "Unknown key `outptu` in configuration.test_coverage" in (
        summary.strict_warnings[0]
    )


def test_validate_config_bad_erlang_terms() -> None:
    # --- execute ---
    summary = mod_validate.validate_config(
        {"eunit_opts": ["verbose", {"a": 1, "b": 2}]}
    )

    # --- verify ---
    assert not summary.valid
    assert "`eunit_opts[1]` is not a valid Erlang term" in summary.errors[0]


def test_validate_config_coverage_tool_reference() -> None:
    summary = mod_validate.validate_config({"test_coverage": {"tool": "just_a_module"}})
    assert not summary.valid
    assert "package.module:factory" in summary.errors[0]


def test_validate_config_cli_only_keys() -> None:
    # --- execute ---
    summary = mod_validate.validate_config({"patterns": ["foo*"]})

    # --- verify ---
    assert not summary.valid
    assert "command line" in summary.strict_warnings[0]
    # reported once, not again as an unknown key
    assert len(summary.strict_warnings) == 1
