# -*- coding: utf-8 -*-
########################
# game_engine.py
########################
# Purpose:
# - Owns the whole in-process game state and runs one gameplay tick at a time.
# - Integrates ScrollClock + RowWindow + PathTracker + CollisionResolver + GoalMachine + CharacterMotion.
#
# Design notes:
# - No Qt usage. The presentation layer drives tick() once per frame and reads state back.
# - All mutation happens synchronously inside tick() or apply_command(); no locking needed.
# - Pause is a flag checked at the top of tick(). A paused tick does nothing.
# - Tick order:
#   1) scroll clock advances
#   2) row window rolls on a half-cycle crossing
#   3) path waypoints drift with the field
#   4) active row collision check; on hit: goal update, direction update, node consumed
#   5) character motion integrates
#
########################
# Interfaces:
# Public dataclasses:
# - TickReport(ticked: bool, rolled: bool, hit_node: Optional[Node], goal_event: Optional[GoalEvent],
#              direction: Direction)
# - EngineSummary(ticks: int, score: int, goals_completed: int, hits: int, pattern: tuple[str, ...], next_index: int)
#
# Public classes:
# - class GameEngine
#   - __init__(config: GameConfig, *, rng: Optional[random.Random] = None,
#              score_sink: Optional[Callable[[int], None]] = None,
#              initial_pattern: Optional[Sequence[str]] = None)
#   - tick() -> TickReport
#   - apply_command(command: str) -> bool
#   - set_paused(is_paused: bool) -> None
#   - is_paused() -> bool
#   - score() -> int
#   - goal() -> GoalSnapshot
#   - rows() -> list[Row]
#   - placed_rows() -> list[PlacedRow]
#   - character() -> Character
#   - waypoints() -> list[PathWaypoint]
#   - scroll_offset() -> float
#   - summary() -> EngineSummary
#
# Public functions:
# - run_headless(config: GameConfig, ticks: int, *, commands: Optional[dict[int, str]] = None) -> EngineSummary
#
########################

from __future__ import annotations

from dataclasses import dataclass, field as dataclass_field
import logging
import random
from typing import Callable, Dict, List, Optional, Sequence, Tuple, Union

import character_motion
import collision
import field_models
import goal_machine
import path_tracker
import row_generator
import row_window
import scroll_clock
from config import GameConfig

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class TickReport:
    ticked: bool
    rolled: bool = False
    hit_node: Optional[field_models.Node] = None
    goal_event: Optional[goal_machine.GoalEvent] = None
    direction: field_models.Direction = field_models.Direction.NONE


@dataclass(frozen=True)
class EngineSummary:
    ticks: int
    score: int
    goals_completed: int
    hits: int
    pattern: Tuple[str, ...] = dataclass_field(default_factory=tuple)
    next_index: int = 0


class GameEngine:
    def __init__(
        self,
        config: GameConfig,
        *,
        rng: Optional[random.Random] = None,
        score_sink: Optional[Callable[[int], None]] = None,
        initial_pattern: Optional[Sequence[str]] = None,
    ) -> None:
        self._config = config
        self._rng = rng if rng is not None else random.Random(config.seed)
        self._score_sink = score_sink
        self._is_paused = False
        self._tick_count = 0
        self._hit_count = 0

        field_config = config.field
        self._tolerance = float(config.player.tolerance)

        self._clock = scroll_clock.ScrollClock(spacing=field_config.line_spacing, rate=field_config.gravity)
        self._generator = row_generator.build_row_generator(config, self._rng)
        self._window = row_window.RowWindow(
            self._generator,
            active_index=field_config.active_row_index,
            row_height=field_config.half_spacing(),
        )
        self._window.initialize(field_config.row_capacity, field_models.LayoutKind(field_config.first_layout))

        self._resolver = collision.CollisionResolver(self._generator.layouts())
        self._motion = character_motion.CharacterMotion(
            gravity=field_config.gravity,
            x_margin=field_config.x_margin,
            canvas_size=field_config.canvas_size(),
        )
        self._tracker = path_tracker.PathTracker(
            grid_count=field_config.grid_count,
            line_spacing=field_config.line_spacing,
            gravity=field_config.gravity,
        )

        self._character = field_models.Character(x=config.character_start_x(), y=config.character_start_y())
        self._character.waypoint_index = self._tracker.initialize(self._character.x)

        goal_config = config.goal
        self._goals = goal_machine.GoalMachine(
            lambda: self._generator.random_pattern(goal_config.min_length, goal_config.max_length),
            initial_pattern=initial_pattern,
        )
        self._goals.add_completion_listener(self._on_goal_completed)
        self._publish_score()

    # -----------------
    # Tick loop
    # -----------------

    def tick(self) -> TickReport:
        if self._is_paused:
            return TickReport(ticked=False, direction=self._character.direction)

        self._tick_count += 1

        self._clock.tick()
        rolled = self._clock.did_cross_half_cycle()
        if rolled:
            self._window.advance()

        active_row = self._window.active_row()
        self._tracker.step(path_tracker.row_sign_for(active_row.layout))

        phase = self._clock.phase()
        hit_node = self._resolver.check(
            self._character,
            active_row,
            self._window.active_row_y(phase),
            self._tolerance,
        )

        goal_event: Optional[goal_machine.GoalEvent] = None
        if hit_node is not None:
            self._hit_count += 1
            goal_event = self._goals.on_node_hit(hit_node)
            self._motion.change_direction(
                self._character,
                hit_node,
                self._tracker,
                next_row_sign=path_tracker.row_sign_for(active_row.layout.flipped()),
            )
            hit_node.consume()

        self._character.waypoint_index = self._tracker.index()
        self._motion.integrate(self._character, self._tracker.current_waypoint().x, self._tolerance)

        return TickReport(
            ticked=True,
            rolled=rolled,
            hit_node=hit_node,
            goal_event=goal_event,
            direction=self._character.direction,
        )

    # -----------------
    # Commands
    # -----------------

    def apply_command(self, command: Union[str, field_models.Command]) -> bool:
        try:
            parsed = field_models.Command(command)
        except ValueError:
            logger.warning("unrecognized command ignored: %r", command)
            return False

        if parsed is field_models.Command.MOVE_LEFT:
            self._character.requested_direction = field_models.Direction.LEFT
        elif parsed is field_models.Command.MOVE_RIGHT:
            self._character.requested_direction = field_models.Direction.RIGHT
        elif parsed is field_models.Command.TOGGLE_PAUSE:
            self.set_paused(not self._is_paused)
        return True

    def set_paused(self, is_paused: bool) -> None:
        self._is_paused = bool(is_paused)
        logger.info("paused" if self._is_paused else "resumed")

    def is_paused(self) -> bool:
        return self._is_paused

    # -----------------
    # Read-only accessors
    # -----------------

    def config(self) -> GameConfig:
        return self._config

    def score(self) -> int:
        return self._goals.score()

    def goal(self) -> goal_machine.GoalSnapshot:
        return self._goals.snapshot()

    def rows(self) -> List[field_models.Row]:
        return self._window.rows()

    def active_index(self) -> int:
        return self._window.active_index()

    def placed_rows(self) -> List[row_window.PlacedRow]:
        return self._window.placed_rows(self._clock.phase())

    def character(self) -> field_models.Character:
        return self._character

    def waypoints(self) -> List[path_tracker.PathWaypoint]:
        return self._tracker.waypoints()

    def scroll_offset(self) -> float:
        return self._clock.offset()

    def tick_count(self) -> int:
        return self._tick_count

    def summary(self) -> EngineSummary:
        snapshot = self._goals.snapshot()
        return EngineSummary(
            ticks=self._tick_count,
            score=snapshot.score,
            goals_completed=snapshot.completed_count,
            hits=self._hit_count,
            pattern=snapshot.pattern,
            next_index=snapshot.next_index,
        )

    # -----------------
    # Score display
    # -----------------

    def _on_goal_completed(self, event: goal_machine.GoalEvent) -> None:
        self._publish_score()

    def _publish_score(self) -> None:
        if self._score_sink is not None:
            self._score_sink(self._goals.score())


def run_headless(
    config: GameConfig,
    ticks: int,
    *,
    commands: Optional[Dict[int, str]] = None,
) -> EngineSummary:
    """Run the tick loop without a window. commands maps a tick number to a command string."""
    engine = GameEngine(config)
    scheduled = dict(commands or {})
    for tick_number in range(int(ticks)):
        command = scheduled.get(tick_number)
        if command is not None:
            engine.apply_command(command)
        engine.tick()
    return engine.summary()


def _run_unit_tests() -> None:
    config = GameConfig(seed=11)
    scores: List[int] = []
    engine = GameEngine(config, score_sink=scores.append)
    assert scores == [0]
    assert engine.character().y == 200.0
    assert engine.character().x == 330.0

    for _ in range(2000):
        report = engine.tick()
        assert report.ticked
        assert len(engine.rows()) == config.field.row_capacity
        x = engine.character().x
        assert config.field.x_margin <= x <= config.field.canvas_size() - config.field.x_margin

    assert engine.summary().hits > 0
    assert scores == sorted(scores)

    engine.apply_command("toggle-pause")
    assert not engine.tick().ticked
    assert not engine.apply_command("jump")
    engine.apply_command(field_models.Command.TOGGLE_PAUSE)
    assert engine.tick().ticked


if __name__ == "__main__":
    _run_unit_tests()
    print("game_engine.py: ok")
