# tests/50_core/test_resolve_project_config.py

from pathlib import Path

import eunit_runner.config.config_resolve as mod_resolve
from eunit_runner.terms import ErlString


def test_resolve_project_config_defaults(tmp_path: Path) -> None:
    # --- setup ---
    root = tmp_path / "my_app"
    root.mkdir()

    # --- execute ---
    project = mod_resolve.resolve_project_config(None, root)

    # --- verify ---
    assert project["root"] == root.resolve()
    assert project["config_path"] is None
    assert project["app"] == "my_app"
    assert project["erlc_paths"] == [root.resolve() / "src"]
    assert project["erlc_include_path"] == root.resolve() / "include"
    assert project["erlc_options"] == ["debug_info"]
    assert project["test_paths"] == [root.resolve() / "test"]
    assert project["build_path"] == root.resolve() / "_build" / "dev"
    assert project["deps_path"] == root.resolve() / "deps"
    assert project["deps"] == []
    assert project["archives"] == []
    assert project["otp_version"] is None
    assert project["apps_path"] is None
    assert project["test_coverage"] == {
        "output": root.resolve() / "cover",
        "export": root.resolve() / "cover" / "eunit.coverdata",
        "tool": None,
    }
    assert project["eunit_opts"] == []
    assert project["declared"] == {}


def test_resolve_project_config_anchors_paths_and_converts_terms(
    tmp_path: Path,
) -> None:
    # --- setup ---
    raw = {
        "app": "svc",
        "erlc_paths": ["lib", "/opt/shared/src"],
        "erlc_options": ["debug_info", {"i": {"$string": "inc"}}],
        "apps_path": "apps",
        "test_coverage": {"output": "_cover", "export": "data/run.coverdata"},
        "eunit_opts": [{"report": {"$tuple": ["eunit_surefire", []]}}],
        "cover": True,
        "color": False,
    }

    # --- execute ---
    project = mod_resolve.resolve_project_config(raw, tmp_path)  # type: ignore[arg-type]

    # --- verify ---
    root = tmp_path.resolve()
    assert project["app"] == "svc"
    assert project["erlc_paths"] == [root / "lib", Path("/opt/shared/src")]
    assert project["erlc_options"] == ["debug_info", ("i", "inc")]
    assert isinstance(project["erlc_options"][1][1], ErlString)
    assert project["apps_path"] == root / "apps"
    assert project["test_coverage"]["output"] == root / "_cover"
    assert project["test_coverage"]["export"] == root / "data" / "run.coverdata"
    assert project["eunit_opts"] == [("report", ("eunit_surefire", []))]
    assert project["declared"] == {"cover": True, "color": False}
