# tests/test_config.py
"""
Tests for workspace seeding, profile loading and the runtime settings store.

Run: pytest -v
"""

from __future__ import annotations

import pytest

from numfields.config import has_profile, list_profiles_with_descriptions, load_settings
from numfields.errors import UserInputError
from numfields.runtime import APPLY, CFG, current
from numfields.workspace import ensure_workspace_seeded, seed_workspace, workspace_dir


def test_workspace_follows_environment(isolated_workspace):
    assert workspace_dir() == isolated_workspace.resolve()


def test_seeding_copies_packaged_profiles_once(isolated_workspace):
    root, seeded, copied = ensure_workspace_seeded()
    assert seeded
    assert copied["profiles"] >= 2
    assert (root / "profiles" / "default.toml").exists()
    assert (root / "profiles" / "tex.toml").exists()

    _, seeded_again, copied_again = ensure_workspace_seeded()
    assert not seeded_again
    assert copied_again["profiles"] == 0


def test_forced_seed_restores_edited_profile(isolated_workspace):
    ensure_workspace_seeded()
    path = isolated_workspace / "profiles" / "default.toml"
    path.write_text("[DISPLAY]\nSTYLE = \"ascii\"\n", encoding="utf-8")
    _, copied = seed_workspace(overwrite=True)
    assert copied["profiles"] >= 2
    assert "unicode" in path.read_text(encoding="utf-8")


def test_load_default_profile():
    settings = load_settings(None)
    assert settings.name == "default"
    assert settings.description != "(no description)"
    assert settings.data["DISPLAY"]["STYLE"] == "unicode"
    assert "PROFILE" not in settings.data


def test_apply_profile_and_dotted_lookup():
    APPLY(load_settings("tex"))
    assert current().profile_name == "tex"
    assert CFG("DISPLAY.STYLE") == "tex"
    assert CFG("DISPLAY.BLACKBOARD_BOLD") is True
    assert CFG("DISPLAY.SORT_BOUNDS") == "norm"
    assert CFG("DISPLAY.MISSING", 5) == 5
    assert CFG("NOPE.KEY", "x") == "x"


def test_debug_flag_syncs_from_profile():
    APPLY({"BEHAVIOUR": {"DEBUG": True}})
    assert current().debug is True


def test_plain_dict_settings_are_copied():
    cfg = {"DISPLAY": {"STYLE": "ascii"}}
    APPLY(cfg)
    cfg["EXTRA"] = 1
    assert current().profile_name == "default"
    assert CFG("DISPLAY.STYLE") == "ascii"
    assert CFG("EXTRA") is None


def _write_profile(ws, name: str, text: str) -> None:
    ensure_workspace_seeded()
    (ws / "profiles" / f"{name}.toml").write_text(text, encoding="utf-8")


def test_toml_syntax_error_names_location(isolated_workspace):
    _write_profile(isolated_workspace, "broken", "[DISPLAY\nSTYLE = \n")
    with pytest.raises(UserInputError, match="line"):
        load_settings("broken")


@pytest.mark.parametrize(
    "body",
    [
        '[DISPLAY]\nSTYLE = "rtf"\n',
        '[DISPLAY]\nBLACKBOARD_BOLD = "yes"\n',
        '[DISPLAY]\nSORT_BOUNDS = "size"\n',
        '[BEHAVIOUR]\nDEBUG = 1\n',
    ],
    ids=["style", "blackboard-bold", "sort-bounds", "debug"],
)
def test_invalid_values_are_user_errors(isolated_workspace, body):
    _write_profile(isolated_workspace, "odd", body)
    with pytest.raises(UserInputError):
        load_settings("odd")


def test_style_is_normalized(isolated_workspace):
    _write_profile(isolated_workspace, "loud", '[DISPLAY]\nSTYLE = " HTML "\n')
    assert load_settings("loud").data["DISPLAY"]["STYLE"] == "html"


def test_unknown_profile():
    with pytest.raises(UserInputError):
        load_settings("does-not-exist")
    assert not has_profile("does-not-exist")


def test_list_profiles_with_descriptions(isolated_workspace):
    _write_profile(isolated_workspace, "bare", "[DISPLAY]\n")
    names = dict(list_profiles_with_descriptions())
    assert {"default", "tex", "bare"} <= set(names)
    assert names["bare"] == "(no description)"
