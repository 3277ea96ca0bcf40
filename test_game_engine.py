# test_game_engine.py
from __future__ import annotations

import json
import logging
from typing import List

import pytest

import config
import field_models
import game_engine
import goal_machine
import nodefall
from config import GameConfig

LEFT = field_models.Direction.LEFT
RIGHT = field_models.Direction.RIGHT


@pytest.fixture(autouse=True)
def no_config_file(monkeypatch: pytest.MonkeyPatch) -> None:
    for name in ("NODEFALL_CONFIG_PATH", "NODEFALL_SEED", "NODEFALL_GOAL_NODE_PERCENT", "NODEFALL_TOLERANCE"):
        monkeypatch.delenv(name, raising=False)
    monkeypatch.setattr(config, "_default_config_candidates", lambda: [])


def _blue_only_config() -> GameConfig:
    return GameConfig.model_validate(
        {
            "seed": 4,
            "nodes": {"goal_node_percent": 100, "goal_types": [{"type": "blue", "color": "#3c8cf0"}]},
        }
    )


def test_initial_state() -> None:
    scores: List[int] = []
    engine = game_engine.GameEngine(GameConfig(seed=1), score_sink=scores.append)
    assert scores == [0]
    assert engine.character().x == 330.0
    assert engine.character().y == 200.0
    assert engine.character().direction is field_models.Direction.NONE
    assert engine.character().waypoint_index == 6
    assert len(engine.rows()) == 14
    assert engine.rows()[0].layout is field_models.LayoutKind.A
    assert len(engine.waypoints()) == 12
    assert 3 <= len(engine.goal().pattern) <= 7


def test_rows_roll_on_half_cycles() -> None:
    engine = game_engine.GameEngine(GameConfig(seed=2))
    rolls = 0
    for _ in range(1000):
        report = engine.tick()
        rolls += int(report.rolled)
        rows = engine.rows()
        assert len(rows) == 14
        for previous_row, row in zip(rows, rows[1:]):
            assert row.layout is previous_row.layout.flipped()
    assert rolls == 9
    assert engine.tick_count() == 1000


def test_stationary_character_completes_goal_on_a_rows() -> None:
    scores: List[int] = []
    engine = game_engine.GameEngine(
        _blue_only_config(),
        score_sink=scores.append,
        initial_pattern=("blue", "blue", "blue"),
    )
    events = []
    for _ in range(700):
        report = engine.tick()
        if report.hit_node is not None:
            assert report.hit_node.is_consumed
            assert engine.character().x == 330.0
            events.append(report.goal_event)

    assert [event.outcome for event in events] == [
        goal_machine.GoalOutcome.ADVANCED,
        goal_machine.GoalOutcome.ADVANCED,
        goal_machine.GoalOutcome.COMPLETED,
    ]
    assert engine.score() == 3
    assert scores == [0, 3]
    assert engine.summary().goals_completed == 1
    assert engine.summary().hits == 3


def test_empty_hits_do_not_score() -> None:
    game_config = GameConfig.model_validate({"seed": 8, "nodes": {"goal_node_percent": 0}})
    engine = game_engine.GameEngine(game_config, initial_pattern=("blue",))
    for _ in range(1500):
        report = engine.tick()
        if report.goal_event is not None:
            assert report.goal_event.outcome is goal_machine.GoalOutcome.IGNORED
    assert engine.summary().hits > 0
    assert engine.score() == 0


def test_nodes_are_hit_at_most_once_and_bounds_hold() -> None:
    engine = game_engine.GameEngine(GameConfig(seed=13))
    seen = set()
    commands = {300: "move-right", 1200: "move-left", 2400: "move-right"}
    for tick_number in range(4000):
        if tick_number in commands:
            engine.apply_command(commands[tick_number])
        report = engine.tick()
        if report.hit_node is not None:
            assert id(report.hit_node) not in seen
            seen.add(id(report.hit_node))
        x = engine.character().x
        assert 30.0 <= x <= 630.0
    # About one row passes every 102 ticks; turns must not stall the hits.
    assert len(seen) >= 25


def test_commands_only_request_a_direction() -> None:
    engine = game_engine.GameEngine(GameConfig(seed=1))
    assert engine.apply_command("move-right")
    assert engine.character().requested_direction is field_models.Direction.RIGHT
    assert engine.character().direction is field_models.Direction.NONE
    assert engine.apply_command(field_models.Command.MOVE_LEFT)
    assert engine.character().requested_direction is field_models.Direction.LEFT


def test_pause_freezes_the_field() -> None:
    engine = game_engine.GameEngine(GameConfig(seed=1))
    for _ in range(10):
        engine.tick()
    offset = engine.scroll_offset()

    engine.apply_command("toggle-pause")
    assert engine.is_paused()
    for _ in range(5):
        assert not engine.tick().ticked
    assert engine.scroll_offset() == offset
    assert engine.tick_count() == 10

    engine.set_paused(False)
    assert engine.tick().ticked
    assert engine.tick_count() == 11


def test_unknown_command_is_logged_and_ignored(caplog: pytest.LogCaptureFixture) -> None:
    engine = game_engine.GameEngine(GameConfig(seed=1))
    with caplog.at_level(logging.WARNING, logger="game_engine"):
        assert not engine.apply_command("jump")
    assert "jump" in caplog.text
    assert engine.character().requested_direction is field_models.Direction.NONE
    assert not engine.is_paused()


def test_run_headless_summary() -> None:
    summary = game_engine.run_headless(GameConfig(seed=6), 500)
    assert summary.ticks == 500
    assert summary.score >= 0

    paused = game_engine.run_headless(GameConfig(seed=6), 50, commands={0: "toggle-pause"})
    assert paused.ticks == 0


def test_entrypoint_headless_run(capsys: pytest.CaptureFixture) -> None:
    assert nodefall.main(["--headless-ticks", "300", "--seed", "5"]) == 0
    payload = json.loads(capsys.readouterr().out)
    assert payload["ok"] is True
    assert payload["summary"]["ticks"] == 300


def test_entrypoint_reports_bad_config(tmp_path, capsys: pytest.CaptureFixture) -> None:
    path = tmp_path / "nodefall_config.json"
    path.write_text(json.dumps({"goal": {"min_length": 0}}), encoding="utf-8")
    assert nodefall.main(["--config", str(path), "--headless-ticks", "10"]) == 2
    payload = json.loads(capsys.readouterr().out)
    assert payload["ok"] is False


def _hits_after_command(command: str, ticks: int) -> List[tuple]:
    engine = game_engine.GameEngine(GameConfig(seed=21))
    engine.apply_command(command)
    hits = []
    for tick_number in range(ticks):
        x_before = engine.character().x
        report = engine.tick()
        if report.hit_node is not None:
            hits.append((tick_number, x_before, engine.character().direction))
    return hits


@pytest.mark.parametrize(
    "command, expected_xs, expected_directions",
    [
        (
            "move-left",
            [330, 280, 230, 180, 130, 80, 30, 80, 30],
            [LEFT, LEFT, LEFT, LEFT, LEFT, LEFT, RIGHT, LEFT, RIGHT],
        ),
        (
            "move-right",
            [330, 380, 430, 480, 530, 580, 630, 580, 630],
            [RIGHT, RIGHT, RIGHT, RIGHT, RIGHT, RIGHT, LEFT, RIGHT, LEFT],
        ),
    ],
)
def test_moving_character_hits_a_node_on_every_row(command: str, expected_xs, expected_directions) -> None:
    hits = _hits_after_command(command, 1100)
    assert len(hits) >= len(expected_xs)
    hits = hits[: len(expected_xs)]

    assert [x for _, x, _ in hits] == pytest.approx(expected_xs, abs=0.61)
    assert [direction for _, _, direction in hits] == expected_directions
    # One row passes the character every spacing / gravity ticks.
    gaps = [later[0] - earlier[0] for earlier, later in zip(hits, hits[1:])]
    assert all(gap <= 103 for gap in gaps)


def test_moving_character_keeps_scoring_past_the_first_row() -> None:
    engine = game_engine.GameEngine(_blue_only_config(), initial_pattern=("blue", "blue", "blue"))
    engine.apply_command("move-left")
    for _ in range(700):
        engine.tick()
    assert engine.summary().hits >= 5
    assert engine.summary().goals_completed >= 1
