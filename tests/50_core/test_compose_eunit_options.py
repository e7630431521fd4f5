# tests/50_core/test_compose_eunit_options.py

import eunit_runner.eunit_options as mod_eunit_options
from tests.utils import make_options


def test_compose_injects_progress_reporter_with_color() -> None:
    # --- execute ---
    result = mod_eunit_options.compose_eunit_options(make_options())

    # --- verify ---
    assert result == ["no_tty", ("report", ("eunit_progress", ["colored"]))]


def test_compose_reporter_sub_options_follow_switches() -> None:
    assert mod_eunit_options.compose_eunit_options(
        make_options(color=False, profile=True)
    ) == ["no_tty", ("report", ("eunit_progress", ["profile"]))]

    assert mod_eunit_options.compose_eunit_options(
        make_options(color=True, profile=True)
    ) == ["no_tty", ("report", ("eunit_progress", ["colored", "profile"]))]

    assert mod_eunit_options.compose_eunit_options(
        make_options(color=False)
    ) == ["no_tty", ("report", ("eunit_progress", []))]


def test_compose_verbose_goes_after_reporter_and_before_declared() -> None:
    # --- setup ---
    options = make_options(verbose=True, color=False, eunit_opts=[("timeout", 30)])

    # --- execute ---
    result = mod_eunit_options.compose_eunit_options(options)

    # --- verify ---
    assert result == [
        "no_tty",
        ("report", ("eunit_progress", [])),
        "verbose",
        ("timeout", 30),
    ]


def test_compose_keeps_declared_reporter() -> None:
    # --- setup ---
    declared = [("report", ("eunit_surefire", [("dir", "out")]))]
    options = make_options(verbose=True, profile=True, eunit_opts=declared)

    # --- execute ---
    result = mod_eunit_options.compose_eunit_options(options)

    # --- verify ---
    assert result == ["verbose", *declared]
    assert "no_tty" not in result


def test_compose_bare_report_atom_is_not_a_reporter() -> None:
    result = mod_eunit_options.compose_eunit_options(make_options(eunit_opts=["report"]))
    assert result[0] == "no_tty"
    assert result[-1] == "report"


def test_compose_does_not_mutate_input() -> None:
    # --- setup ---
    declared = ["verbose"]
    options = make_options(eunit_opts=declared)

    # --- execute ---
    mod_eunit_options.compose_eunit_options(options)

    # --- verify ---
    assert declared == ["verbose"]
    assert options["eunit_opts"] == ["verbose"]
