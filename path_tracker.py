# -*- coding: utf-8 -*-
########################
# path_tracker.py
########################
# Purpose:
# - Zig-zag lattice of lateral waypoints that mirrors the alternating row offsets.
# - Holds the waypoint index the character is currently pulled toward.
#
# Design notes:
# - No Qt usage. Pure gameplay logic.
# - Waypoints sit half a grid unit apart and alternate drift groups (-1, +1).
# - While an A row is active every waypoint drifts by gravity * group; while a B row is
#   active the drift reverses. Each waypoint therefore weaves between A and B node slots.
# - The index is clamped, never an error.
# - A direction change retargets the index: the waypoint drifting with the new direction during the
#   next row that stays nearest the character, preferring one whose neighbor ahead meets the
#   character at the following row. Same-direction hits then step the index one waypoint at a time.
#
########################
# Interfaces:
# Public dataclasses:
# - PathWaypoint(x: float, group: int)
#
# Public classes:
# - class PathTracker
#   - __init__(*, grid_count: int, line_spacing: float, gravity: float)
#   - initialize(character_x: float) -> int
#   - step(row_sign: int) -> None
#   - advance_index(direction: Direction) -> int
#   - retarget(node_x: float, direction: Direction, next_row_sign: int) -> int
#   - waypoints() -> list[PathWaypoint]
#   - index() -> int
#   - set_index(index: int) -> int
#   - current_waypoint() -> PathWaypoint
#
# Public functions:
# - row_sign_for(layout_kind: LayoutKind) -> int
#
########################

from __future__ import annotations

from dataclasses import dataclass
from typing import List, Optional

import field_models


@dataclass
class PathWaypoint:
    x: float
    group: int


def row_sign_for(layout_kind: field_models.LayoutKind) -> int:
    return 1 if layout_kind is field_models.LayoutKind.A else -1


class PathTracker:
    def __init__(self, *, grid_count: int, line_spacing: float, gravity: float) -> None:
        self._grid_count = int(grid_count)
        self._line_spacing = float(line_spacing)
        self._gravity = float(gravity)
        self._waypoints: List[PathWaypoint] = []
        self._index = 0

    def initialize(self, character_x: float) -> int:
        start_x = float(character_x)
        half = self._line_spacing / 2.0
        self._waypoints = [
            PathWaypoint(x=start_x + (index - self._grid_count) * half, group=-1 if index % 2 == 0 else 1)
            for index in range(2 * self._grid_count)
        ]
        self._index = 0
        for index, waypoint in enumerate(self._waypoints):
            if waypoint.x == start_x:
                self._index = index
                break
        return self._index

    def step(self, row_sign: int) -> None:
        shift = self._gravity * (1 if int(row_sign) >= 0 else -1)
        for waypoint in self._waypoints:
            waypoint.x += shift * waypoint.group

    def advance_index(self, direction: field_models.Direction) -> int:
        return self.set_index(self._index + direction.sign())

    def retarget(self, node_x: float, direction: field_models.Direction, next_row_sign: int) -> int:
        step = direction.sign()
        if step == 0 or not self._waypoints:
            return self._index

        drift_sign = 1 if int(next_row_sign) >= 0 else -1
        next_node_x = float(node_x) + step * self._line_spacing
        last_index = len(self._waypoints) - 1
        best_index = self._index
        best_score: Optional[float] = None
        for index, waypoint in enumerate(self._waypoints):
            if waypoint.group * drift_sign != step:
                continue
            neighbor = self._waypoints[max(0, min(last_index, index + step))]
            # The neighbor drifts against the direction for one row and meets the character at its next node.
            score = abs(waypoint.x - float(node_x)) + abs(neighbor.x - next_node_x)
            if best_score is None or score < best_score:
                best_index = index
                best_score = score
        self._index = best_index
        return self._index

    def set_index(self, index: int) -> int:
        if not self._waypoints:
            self._index = 0
            return 0
        self._index = max(0, min(len(self._waypoints) - 1, int(index)))
        return self._index

    def waypoints(self) -> List[PathWaypoint]:
        return list(self._waypoints)

    def index(self) -> int:
        return self._index

    def current_waypoint(self) -> PathWaypoint:
        return self._waypoints[self._index]


def _run_unit_tests() -> None:
    tracker = PathTracker(grid_count=6, line_spacing=100.0, gravity=0.5)
    assert tracker.initialize(330.0) == 6
    waypoints = tracker.waypoints()
    assert len(waypoints) == 12
    assert [w.group for w in waypoints[:4]] == [-1, 1, -1, 1]
    assert waypoints[0].x == 30.0

    tracker.step(row_sign_for(field_models.LayoutKind.A))
    assert tracker.current_waypoint().x == 329.5
    tracker.step(row_sign_for(field_models.LayoutKind.B))
    assert tracker.current_waypoint().x == 330.0

    for _ in range(20):
        tracker.advance_index(field_models.Direction.RIGHT)
    assert tracker.index() == 11
    tracker.advance_index(field_models.Direction.NONE)
    assert tracker.index() == 11

    tracker.initialize(330.0)
    assert tracker.retarget(330.0, field_models.Direction.LEFT, next_row_sign=-1) == 5
    assert tracker.retarget(330.0, field_models.Direction.RIGHT, next_row_sign=-1) == 6
    assert tracker.retarget(330.0, field_models.Direction.NONE, next_row_sign=-1) == 6


if __name__ == "__main__":
    _run_unit_tests()
    print("path_tracker.py: ok")
