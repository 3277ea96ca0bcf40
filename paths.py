# -*- coding: utf-8 -*-
########################
# paths.py
########################
# Purpose:
# - Central filesystem path helpers for the app.
# - Defines where bundled assets (character sprite) live relative to the project root.
#
# Design notes:
# - Keep path derivation consistent across modules.
# - No Qt usage. Return pathlib.Path only.
#
########################
# Interfaces:
# Public functions:
# - app_root_dir() -> pathlib.Path
# - assets_dir() -> pathlib.Path
# - sprite_path(configured_path: str = "") -> pathlib.Path
#
########################

from __future__ import annotations

from pathlib import Path

DEFAULT_SPRITE_NAME = "pc.png"


def app_root_dir() -> Path:
    """Return the directory holding the game modules."""
    return Path(__file__).resolve().parent


def assets_dir() -> Path:
    """Return the bundled assets directory (not created automatically)."""
    return app_root_dir() / "assets"


def sprite_path(configured_path: str = "") -> Path:
    """Resolve the character sprite path. Relative paths are taken from the app root."""
    text = str(configured_path or "").strip()
    if not text:
        return assets_dir() / DEFAULT_SPRITE_NAME

    candidate = Path(text).expanduser()
    if candidate.is_absolute():
        return candidate
    return (app_root_dir() / candidate).resolve()
