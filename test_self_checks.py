# test_self_checks.py
from __future__ import annotations

import importlib

import pytest

PURE_MODULES = [
    "field_models",
    "scroll_clock",
    "row_generator",
    "row_window",
    "path_tracker",
    "collision",
    "goal_machine",
    "character_motion",
    "game_engine",
]


@pytest.mark.parametrize("module_name", PURE_MODULES)
def test_module_self_check(module_name: str) -> None:
    importlib.import_module(module_name)._run_unit_tests()
