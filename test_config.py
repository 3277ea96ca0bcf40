# test_config.py
from __future__ import annotations

import json
import logging
from pathlib import Path

import pytest
from pydantic import ValidationError

import config
from config import FieldConfig, GameConfig, GoalConfig, NodesConfig, NodeTypeConfig

ENV_NAMES = (
    "NODEFALL_CONFIG_PATH",
    "NODEFALL_SEED",
    "NODEFALL_GOAL_NODE_PERCENT",
    "NODEFALL_TOLERANCE",
    "NODEFALL_FRAME_INTERVAL_MS",
)


@pytest.fixture(autouse=True)
def clean_environment(monkeypatch: pytest.MonkeyPatch) -> None:
    for name in ENV_NAMES:
        monkeypatch.delenv(name, raising=False)
    monkeypatch.setattr(config, "_default_config_candidates", lambda: [])


def _write(tmp_path: Path, payload) -> Path:
    path = tmp_path / "nodefall_config.json"
    path.write_text(json.dumps(payload), encoding="utf-8")
    return path


def test_default_geometry() -> None:
    game_config = GameConfig()
    assert game_config.field.canvas_size() == 660.0
    assert game_config.field.half_spacing() == 50.0
    assert game_config.field.gravity == pytest.approx(0.49)
    assert game_config.character_start_x() == 330.0
    assert game_config.character_start_y() == 200.0
    assert [t.type for t in game_config.nodes.goal_types] == ["blue", "red"]


def test_active_row_must_sit_inside_window() -> None:
    with pytest.raises(ValidationError):
        FieldConfig(row_capacity=14, active_row_index=14)


def test_gravity_must_stay_below_half_spacing() -> None:
    with pytest.raises(ValidationError):
        FieldConfig(gravity=60.0)


@pytest.mark.parametrize("min_length, max_length", [(0, 3), (-1, 2), (5, 3)])
def test_goal_length_range(min_length: int, max_length: int) -> None:
    with pytest.raises(ValidationError):
        GoalConfig(min_length=min_length, max_length=max_length)


def test_goal_types_are_normalized_and_checked() -> None:
    assert NodeTypeConfig(type="  Blue ").type == "blue"
    with pytest.raises(ValidationError):
        NodeTypeConfig(type="empty")
    with pytest.raises(ValidationError):
        NodeTypeConfig(type="   ")
    with pytest.raises(ValidationError):
        NodesConfig(goal_types=[])
    with pytest.raises(ValidationError):
        NodesConfig(goal_types=[{"type": "blue"}, {"type": "BLUE"}])


def test_goal_node_percent_bounds() -> None:
    with pytest.raises(ValidationError):
        NodesConfig(goal_node_percent=101)


def test_character_must_meet_the_active_row() -> None:
    with pytest.raises(ValidationError):
        GameConfig.model_validate({"player": {"start_y_fraction": 0.9}})


def test_character_must_sit_on_the_handover_line() -> None:
    # Row 4 would hand over at y=150, the default character snaps to y=200.
    with pytest.raises(ValidationError, match="hands over"):
        GameConfig.model_validate({"field": {"active_row_index": 4}})


def test_gravity_above_tolerance_is_rejected() -> None:
    with pytest.raises(ValidationError, match="exceeds player tolerance"):
        GameConfig.model_validate({"field": {"gravity": 1.0}})
    with pytest.raises(ValidationError, match="exceeds player tolerance"):
        GameConfig.model_validate({"player": {"tolerance": 0.3}})


def test_gravity_equal_to_tolerance_is_accepted() -> None:
    game_config = GameConfig.model_validate({"field": {"gravity": 0.6}, "player": {"tolerance": 0.6}})
    assert game_config.field.gravity == game_config.player.tolerance


def test_load_config_reads_file(tmp_path: Path) -> None:
    path = _write(tmp_path, {"seed": 5, "nodes": {"goal_node_percent": 10}, "goal": {"min_length": 2, "max_length": 4}})
    game_config, resolved = config.load_config(path)
    assert resolved == path
    assert game_config.seed == 5
    assert game_config.nodes.goal_node_percent == 10.0
    assert game_config.goal.max_length == 4


def test_load_config_defaults_without_file() -> None:
    game_config, resolved = config.load_config()
    assert resolved is None
    assert game_config == GameConfig()


def test_config_path_from_environment(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    path = _write(tmp_path, {"seed": 77})
    monkeypatch.setenv("NODEFALL_CONFIG_PATH", str(path))
    game_config, resolved = config.load_config()
    assert resolved == path
    assert game_config.seed == 77


def test_environment_overrides_file_values(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    path = _write(tmp_path, {"seed": 1, "player": {"tolerance": 0.5}})
    monkeypatch.setenv("NODEFALL_SEED", "42")
    monkeypatch.setenv("NODEFALL_TOLERANCE", "0.7")
    monkeypatch.setenv("NODEFALL_GOAL_NODE_PERCENT", "25")
    monkeypatch.setenv("NODEFALL_FRAME_INTERVAL_MS", "20")
    game_config, _ = config.load_config(path)
    assert game_config.seed == 42
    assert game_config.player.tolerance == 0.7
    assert game_config.nodes.goal_node_percent == 25.0
    assert game_config.display.frame_interval_ms == 20


def test_unparseable_environment_values_are_ignored(
    tmp_path: Path, monkeypatch: pytest.MonkeyPatch, caplog: pytest.LogCaptureFixture
) -> None:
    monkeypatch.setenv("NODEFALL_SEED", "not-a-number")
    monkeypatch.setenv("NODEFALL_TOLERANCE", "wide")
    with caplog.at_level(logging.WARNING, logger="config"):
        game_config, _ = config.load_config(_write(tmp_path, {}))
    assert game_config.seed is None
    assert game_config.player.tolerance == 0.6
    messages = [record.getMessage() for record in caplog.records]
    assert any("NODEFALL_SEED" in message and "expected int" in message for message in messages)
    assert any("NODEFALL_TOLERANCE" in message and "expected float" in message for message in messages)


def test_invalid_json_is_reported(tmp_path: Path) -> None:
    path = tmp_path / "broken.json"
    path.write_text("{not json", encoding="utf-8")
    with pytest.raises(ValueError, match="not valid JSON"):
        config.load_config(path)


def test_json_root_must_be_object(tmp_path: Path) -> None:
    with pytest.raises(ValueError, match="JSON object"):
        config.load_config(_write(tmp_path, [1, 2, 3]))


def test_validation_failure_is_fatal(tmp_path: Path) -> None:
    path = _write(tmp_path, {"field": {"active_row_index": 20}})
    with pytest.raises(ValueError, match="Config validation failed"):
        config.load_config(path)


def test_missing_explicit_file_raises(tmp_path: Path) -> None:
    with pytest.raises(FileNotFoundError):
        config.load_config(tmp_path / "missing.json")


def test_to_json_round_trips_through_model() -> None:
    game_config = GameConfig(seed=3)
    assert GameConfig.model_validate(json.loads(config.to_json(game_config))) == game_config


def test_sprite_path_resolution(tmp_path: Path) -> None:
    import paths

    assert paths.sprite_path() == paths.assets_dir() / "pc.png"
    assert paths.sprite_path("  ") == paths.assets_dir() / "pc.png"
    absolute = tmp_path / "hero.png"
    assert paths.sprite_path(str(absolute)) == absolute
    assert paths.sprite_path("art/hero.png") == (paths.app_root_dir() / "art" / "hero.png").resolve()
