# -*- coding: utf-8 -*-
########################
# character_motion.py
########################
# Purpose:
# - Lateral motion of the player character.
# - Integrates the movement direction, pulls the character toward its tracked waypoint,
#   and decides direction changes on node hits.
#
# Design notes:
# - No Qt usage. Pure gameplay logic.
# - Lateral speed equals the scroll rate, so a moving character follows the grid diagonals.
# - Path correction only kicks in beyond tolerance * 100 and closes 1/20 of the gap per tick.
# - x always stays inside [x_margin, canvas_size - x_margin].
# - Player input only sets requested_direction. The moving direction changes on node hits.
# - A changed direction retargets the tracked waypoint; an unchanged one advances it.
#
########################
# Interfaces:
# Public classes:
# - class CharacterMotion
#   - __init__(*, gravity: float, x_margin: float, canvas_size: float)
#   - clamp_x(x: float) -> float
#   - integrate(character: Character, waypoint_x: float, tolerance: float) -> float
#   - change_direction(character: Character, node: Node, tracker: PathTracker, *, next_row_sign: int) -> Direction
#
# Public functions:
# - tilt_degrees(direction: Direction) -> float
#
########################

from __future__ import annotations

import field_models
import path_tracker

CORRECTION_THRESHOLD_FACTOR = 100.0
CORRECTION_FRACTION = 1.0 / 20.0
TILT_DEGREES = 45.0


def tilt_degrees(direction: field_models.Direction) -> float:
    # Sprite leans into the direction of travel.
    return -TILT_DEGREES * direction.sign()


class CharacterMotion:
    def __init__(self, *, gravity: float, x_margin: float, canvas_size: float) -> None:
        self._gravity = float(gravity)
        self._min_x = float(x_margin)
        self._max_x = float(canvas_size) - float(x_margin)

    def bounds(self) -> tuple[float, float]:
        return self._min_x, self._max_x

    def clamp_x(self, x: float) -> float:
        return min(max(float(x), self._min_x), self._max_x)

    def integrate(self, character: field_models.Character, waypoint_x: float, tolerance: float) -> float:
        character.x = self.clamp_x(character.x + self._gravity * character.direction.sign())

        gap = float(waypoint_x) - character.x
        if abs(gap) > float(tolerance) * CORRECTION_THRESHOLD_FACTOR:
            character.x = self.clamp_x(character.x + gap * CORRECTION_FRACTION)
        return character.x

    def change_direction(
        self,
        character: field_models.Character,
        node: field_models.Node,
        tracker: path_tracker.PathTracker,
        *,
        next_row_sign: int,
    ) -> field_models.Direction:
        previous_direction = character.direction
        if node.x <= self._min_x:
            new_direction = field_models.Direction.RIGHT
        elif node.x >= self._max_x:
            new_direction = field_models.Direction.LEFT
        else:
            new_direction = character.requested_direction

        character.direction = new_direction
        if new_direction is previous_direction:
            character.waypoint_index = tracker.advance_index(new_direction)
        else:
            character.waypoint_index = tracker.retarget(node.x, new_direction, next_row_sign)
        return new_direction


def _run_unit_tests() -> None:
    motion = CharacterMotion(gravity=0.5, x_margin=30.0, canvas_size=660.0)
    tracker = path_tracker.PathTracker(grid_count=6, line_spacing=100.0, gravity=0.5)
    tracker.initialize(330.0)

    character = field_models.Character(x=30.0, y=200.0, requested_direction=field_models.Direction.LEFT)
    node = field_models.Node(x=30.0, kind=field_models.EmptyKind(color="#c8c8c8"))
    assert motion.change_direction(character, node, tracker, next_row_sign=-1) is field_models.Direction.RIGHT

    character.direction = field_models.Direction.LEFT
    motion.integrate(character, waypoint_x=30.0, tolerance=0.5)
    assert character.x == 30.0

    drifting = field_models.Character(x=100.0, y=200.0)
    gaps = []
    for _ in range(10):
        motion.integrate(drifting, waypoint_x=300.0, tolerance=0.5)
        gaps.append(300.0 - drifting.x)
    assert all(later < earlier for earlier, later in zip(gaps, gaps[1:]))
    assert abs(gaps[0] - 190.0) < 1e-9

    assert tilt_degrees(field_models.Direction.RIGHT) == -45.0
    assert tilt_degrees(field_models.Direction.NONE) == 0.0


if __name__ == "__main__":
    _run_unit_tests()
    print("character_motion.py: ok")
