# tests/50_core/test_resolve_test_modules.py

import os
from pathlib import Path

import pytest

import eunit_runner.discovery as mod_discovery
from tests.utils import write_erl


def test_resolve_pairs_module_with_companion_tests(tmp_path: Path) -> None:
    """alpha + alpha_tests collapse to alpha; lone beta_tests stays."""
    # --- setup ---
    write_erl(tmp_path, "src/alpha.erl", "test/alpha_tests.erl", "test/beta_tests.erl")
    dirs = [tmp_path / "src", tmp_path / "test"]

    # --- execute ---
    result = mod_discovery.resolve_test_modules(dirs, ["*"])

    # --- verify ---
    assert result == ["alpha", "beta_tests"]


def test_resolve_pattern_selects_module_and_drops_companion(tmp_path: Path) -> None:
    # --- setup ---
    write_erl(tmp_path, "src/gamma.erl", "src/gamma_tests.erl", "src/other.erl")

    # --- execute ---
    result = mod_discovery.resolve_test_modules([tmp_path / "src"], ["gamma*"])

    # --- verify ---
    assert result == ["gamma"]


def test_resolve_keeps_tests_module_without_base(tmp_path: Path) -> None:
    write_erl(tmp_path, "test/delta_tests.erl")
    assert mod_discovery.resolve_test_modules([tmp_path / "test"], ["*"]) == [
        "delta_tests"
    ]


@pytest.mark.parametrize("patterns", [None, []])
def test_resolve_empty_patterns_behave_like_wildcard(
    tmp_path: Path,
    patterns: list[str] | None,
) -> None:
    # --- setup ---
    write_erl(tmp_path, "src/a.erl", "src/b.erl", "test/b_tests.erl")
    dirs = [tmp_path / "src", tmp_path / "test"]

    # --- execute ---
    default = mod_discovery.resolve_test_modules(dirs, patterns)
    wildcard = mod_discovery.resolve_test_modules(dirs, ["*"])

    # --- verify ---
    assert default == wildcard == ["a", "b"]


def test_resolve_missing_directory_contributes_nothing(tmp_path: Path) -> None:
    # --- setup ---
    write_erl(tmp_path, "src/solo.erl")
    dirs = [tmp_path / "src", tmp_path / "test", tmp_path / "nope" / "deeper"]

    # --- execute ---
    result = mod_discovery.resolve_test_modules(dirs)

    # --- verify ---
    assert result == ["solo"]


def test_resolve_only_missing_directories_is_empty(tmp_path: Path) -> None:
    assert mod_discovery.resolve_test_modules([tmp_path / "ghost"]) == []


def test_resolve_requires_directories() -> None:
    with pytest.raises(ValueError, match="at least one directory"):
        mod_discovery.resolve_test_modules([], ["*"])


def test_resolve_has_no_duplicates_across_patterns_and_dirs(tmp_path: Path) -> None:
    """Overlapping patterns, repeated dirs and same-named files in two dirs."""
    # --- setup ---
    write_erl(
        tmp_path,
        "src/foo.erl",
        "src/nested/foo_bar.erl",
        "test/foo.erl",
        "test/foo_tests.erl",
    )
    src, test = tmp_path / "src", tmp_path / "test"

    # --- execute ---
    result = mod_discovery.resolve_test_modules(
        [src, test, src], ["foo*", "*", "foo"]
    )

    # --- verify ---
    assert result == ["foo", "foo_bar"]
    assert len(result) == len(set(result))


def test_resolve_is_idempotent(tmp_path: Path) -> None:
    # --- setup ---
    write_erl(tmp_path, "src/z.erl", "src/m.erl", "test/a_tests.erl", "test/m_tests.erl")
    dirs = [tmp_path / "src", tmp_path / "test"]

    # --- execute ---
    first = mod_discovery.resolve_test_modules(dirs, ["*"])
    second = mod_discovery.resolve_test_modules(dirs, ["*"])

    # --- verify ---
    assert first == second == ["a_tests", "m", "z"]


def test_resolve_is_case_sensitive_and_preserves_case(tmp_path: Path) -> None:
    # --- setup ---
    write_erl(tmp_path, "src/Upper.erl", "src/lower.erl")

    # --- execute ---
    upper_only = mod_discovery.resolve_test_modules([tmp_path / "src"], ["U*"])

    # --- verify ---
    assert upper_only == ["Upper"]


def test_resolve_ignores_other_extensions(tmp_path: Path) -> None:
    # --- setup ---
    write_erl(tmp_path, "src/real.erl")
    (tmp_path / "src" / "header.hrl").write_text("")
    (tmp_path / "src" / "real.beam").write_text("")

    # --- execute and verify ---
    assert mod_discovery.resolve_test_modules([tmp_path / "src"]) == ["real"]


def test_resolve_accepts_a_file_entry(tmp_path: Path) -> None:
    # --- setup ---
    (only,) = write_erl(tmp_path, "extra/only.erl")
    write_erl(tmp_path, "extra/skipped.erl")

    # --- execute ---
    result = mod_discovery.resolve_test_modules([only])

    # --- verify ---
    assert result == ["only"]


def test_resolve_skips_empty_module_names(tmp_path: Path) -> None:
    # --- setup ---
    src = tmp_path / "src"
    write_erl(tmp_path, "src/ok.erl")
    (src / ".erl").write_text("")

    # --- execute and verify ---
    assert mod_discovery.resolve_test_modules([src], ["*"]) == ["ok"]


@pytest.mark.skipif(not hasattr(os, "symlink"), reason="needs symlinks")
def test_resolve_does_not_resolve_symlinks(tmp_path: Path) -> None:
    """A symlink is named after its own base name, not its target's."""
    # --- setup ---
    (target,) = write_erl(tmp_path, "elsewhere/target.erl")
    src = tmp_path / "src"
    src.mkdir()
    (src / "alias.erl").symlink_to(target)

    # --- execute and verify ---
    assert mod_discovery.resolve_test_modules([src]) == ["alias"]


def test_find_source_files_dedupes_exact_paths(tmp_path: Path) -> None:
    # --- setup ---
    write_erl(tmp_path, "src/one.erl", "src/two.erl")
    src = tmp_path / "src"

    # --- execute ---
    files = mod_discovery.find_source_files([src, src], ["*", "one", "t*"])

    # --- verify ---
    assert [f.name for f in files] == ["one.erl", "two.erl"]


def test_remove_test_duplicates() -> None:
    assert mod_discovery.remove_test_duplicates(
        ["foo_tests", "foo", "bar_tests", "baz", "baz", "_tests"]
    ) == ["_tests", "bar_tests", "baz", "foo"]


@pytest.mark.parametrize(
    ("name", "expected"),
    [
        ("foo_tests", True),
        ("foo_bar_tests", True),
        ("foo", False),
        ("foo_tests_helper", False),
        ("_tests", False),
    ],
)
def test_is_tests_module(name: str, expected: bool) -> None:
    assert mod_discovery.is_tests_module(name) is expected


def test_without_test_suffix() -> None:
    assert mod_discovery.without_test_suffix("foo_tests") == "foo"
    assert mod_discovery.without_test_suffix("foo") == "foo"
    assert mod_discovery.without_test_suffix("foo_tests_tests") == "foo_tests"


def test_module_name_from_path() -> None:
    assert mod_discovery.module_name_from_path("/x/y/Mixed_Case.erl") == "Mixed_Case"
    assert mod_discovery.module_name_from_path(Path("plain")) == "plain"


def test_resolve_skips_dotfiles_and_hidden_directories(tmp_path: Path) -> None:
    # --- setup ---
    write_erl(
        tmp_path,
        "src/alpha.erl",
        "src/.hidden.erl",
        "src/.cache/zeta.erl",
        "test/beta_tests.erl",
    )
    dirs = [tmp_path / "src", tmp_path / "test"]

    # --- execute ---
    result = mod_discovery.resolve_test_modules(dirs, None)

    # --- verify ---
    assert result == ["alpha", "beta_tests"]


def test_find_source_files_skips_hidden_sources(tmp_path: Path) -> None:
    # --- setup ---
    write_erl(tmp_path, "src/alpha.erl", "src/.#alpha.erl", "src/.git/stray.erl")

    # --- execute ---
    files = mod_discovery.find_source_files([tmp_path / "src"])

    # --- verify ---
    assert files == [(tmp_path / "src" / "alpha.erl").absolute()]
