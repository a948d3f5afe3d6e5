from __future__ import annotations

import tomllib
from dataclasses import dataclass
from pathlib import Path
from typing import Any

from numfields.errors import UserInputError
from numfields.workspace import ensure_workspace_seeded, workspace_dir

STYLES = ("unicode", "ascii", "tex", "html")
SORT_BOUNDS = ("none", "norm", "abs")


@dataclass
class Settings:
    """
    Wrap the full TOML dict (without the [PROFILE] section).
    .as_dict() feeds runtime.apply().

      - name:        resolved profile name (file stem if not given in [PROFILE])
      - description: one-line description from [PROFILE] or "(no description)"
    """
    data: dict[str, Any]
    name: str
    description: str
    _source: Path | None = None

    def as_dict(self) -> dict[str, Any]:
        return self.data


# --- Paths -----------------------------------------------------------------

def _profiles_dir() -> Path:
    return workspace_dir() / "profiles"


def _profile_path(name: str) -> Path:
    return _profiles_dir() / f"{name}.toml"


# --- I/O -------------------------------------------------------------------


def _load_toml(path: Path) -> dict[str, Any]:
    try:
        with path.open("rb") as f:
            return tomllib.load(f)
    except tomllib.TOMLDecodeError as e:
        lineno = getattr(e, "lineno", None)
        colno = getattr(e, "colno", None)
        msg = getattr(e, "msg", str(e))
        where = []
        if lineno is not None:
            where.append(f"line {lineno}")
        if colno is not None:
            where.append(f"column {colno}")
        loc = f" (at {', '.join(where)})" if where else ""
        # No traceback chaining
        raise UserInputError(f"reading {path.name}: {msg}{loc}.") from None


# --- Metadata handling -----------------------------------------------------


def _sanitize_oneline(s: str) -> str:
    return " ".join(str(s).split()) or "(no description)"


def _split_profile_data(raw: dict[str, Any], fallback_name: str) -> tuple[dict[str, Any], str, str]:
    """
    Extract [PROFILE] meta (name, description) and return:
      (settings_without_profile, resolved_name, resolved_description)
    """
    meta = raw.get("PROFILE") or {}
    data = {k: v for k, v in raw.items() if k != "PROFILE"}
    name = str(meta.get("name") or fallback_name)
    description = _sanitize_oneline(str(meta.get("description") or ""))
    return data, name, description


def _normalize_display(data: dict[str, Any], source: str) -> None:
    display = data.setdefault("DISPLAY", {})
    if not isinstance(display, dict):
        raise UserInputError(f"{source}: [DISPLAY] must be a table.")

    style = str(display.get("STYLE", "unicode")).strip().lower()
    if style not in STYLES:
        raise UserInputError(f"{source}: DISPLAY.STYLE must be one of {', '.join(STYLES)}, got {style!r}.")
    display["STYLE"] = style

    bb = display.get("BLACKBOARD_BOLD", False)
    if not isinstance(bb, bool):
        raise UserInputError(f"{source}: DISPLAY.BLACKBOARD_BOLD must be true or false.")

    order = str(display.get("SORT_BOUNDS", "none")).strip().lower()
    if order not in SORT_BOUNDS:
        raise UserInputError(
            f"{source}: DISPLAY.SORT_BOUNDS must be one of {', '.join(SORT_BOUNDS)}, got {order!r}."
        )
    display["SORT_BOUNDS"] = order


# --- Public API ------------------------------------------------------------


def list_profiles_with_descriptions() -> list[tuple[str, str]]:
    """
    Return [(name, description), ...] for all profiles.
    Profiles lacking [PROFILE] get "(no description)".
    """
    items: list[tuple[str, str]] = []
    for p in _profiles_dir().glob("*.toml"):
        try:
            raw = _load_toml(p)
        except UserInputError:
            # Best-effort listing; fall back to filename
            items.append((p.stem, "(unreadable)"))
            continue
        _, nm, desc = _split_profile_data(raw, p.stem)
        items.append((nm, desc))
    return sorted(items, key=lambda t: t[0].lower())


def has_profile(name: str) -> bool:
    return _profile_path(name).exists()


def load_settings(name: str | None) -> Settings:
    """
    Load a profile by name (default 'default'), strip the [PROFILE] metadata,
    validate the [DISPLAY] table, and return Settings(...).
    """
    if not name:
        name = "default"

    ensure_workspace_seeded()
    path = _profile_path(name)
    if not path.exists():
        raise UserInputError(f"Profile '{name}' not found at {path}")

    raw = _load_toml(path)
    data, resolved_name, description = _split_profile_data(raw, path.stem)
    _normalize_display(data, path.name)

    behaviour = data.get("BEHAVIOUR", {}) or {}
    if "DEBUG" in behaviour and not isinstance(behaviour["DEBUG"], bool):
        raise UserInputError(f"{path.name}: BEHAVIOUR.DEBUG must be true or false.")

    return Settings(
        data=data,
        name=resolved_name,
        description=description,
        _source=path,
    )
