# -*- coding: utf-8 -*-
########################
# collision.py
########################
# Purpose:
# - Decide each tick whether the character touches a node of the active row.
#
# Design notes:
# - No Qt usage. Pure gameplay logic.
# - Nearest-slot heuristic: the character x is mapped linearly onto the row layout and rounded
#   half up to a slot index. This assumes uniform spacing and a tolerance small against it.
# - A node exactly `tolerance` away still hits.
# - Consumed nodes sit far off-screen, so their slot can never hit again.
# - The resolver returns the Node by reference; the caller consumes it.
#
########################
# Interfaces:
# Public classes:
# - class CollisionResolver
#   - __init__(layouts: dict[LayoutKind, LayoutSpec])
#   - layout_for_row(row: Row) -> LayoutSpec
#   - nearest_slot(x: float, layout: LayoutSpec) -> int
#   - has_arrived(character: Character, row_y: float, tolerance: float) -> bool
#   - check(character: Character, active_row: Row, row_y: float, tolerance: float) -> Optional[Node]
#
# Public functions:
# - round_half_up(value: float) -> int
#
########################

from __future__ import annotations

import math
from typing import Dict, Optional

import field_models


def round_half_up(value: float) -> int:
    return int(math.floor(float(value) + 0.5))


class CollisionResolver:
    def __init__(self, layouts: Dict[field_models.LayoutKind, field_models.LayoutSpec]) -> None:
        self._layouts = dict(layouts)
        self._layouts_by_count = {int(spec.count): spec for spec in self._layouts.values()}

    def layout_for_row(self, row: field_models.Row) -> field_models.LayoutSpec:
        layout = self._layouts_by_count.get(len(row.nodes))
        if layout is None:
            # Counts can only collide on a degenerate grid; fall back to the row's own tag.
            layout = self._layouts[row.layout]
        return layout

    def nearest_slot(self, x: float, layout: field_models.LayoutSpec) -> int:
        count = int(layout.count)
        if count <= 1:
            return 0
        span = (count - 1) * float(layout.spacing)
        # percent * (count - 1), multiplied out first so slot midpoints stay exact.
        index = round_half_up((float(x) - float(layout.start)) * (count - 1) / span)
        return max(0, min(count - 1, index))

    def has_arrived(self, character: field_models.Character, row_y: float, tolerance: float) -> bool:
        return float(character.y) >= float(row_y) - float(tolerance)

    def check(
        self,
        character: field_models.Character,
        active_row: field_models.Row,
        row_y: float,
        tolerance: float,
    ) -> Optional[field_models.Node]:
        if not active_row.nodes:
            return None
        if not self.has_arrived(character, row_y, tolerance):
            return None

        layout = self.layout_for_row(active_row)
        index = self.nearest_slot(character.x, layout)
        if index >= len(active_row.nodes):
            return None

        node = active_row.nodes[index]
        if abs(float(character.x) - float(node.x)) > float(tolerance):
            return None
        return node


def _run_unit_tests() -> None:
    layouts = field_models.layout_specs(line_spacing=100.0, grid_count=6, x_margin=30.0)
    resolver = CollisionResolver(layouts)
    empty = field_models.EmptyKind(color="#c8c8c8")
    row = field_models.Row(
        layout=field_models.LayoutKind.A,
        nodes=[field_models.Node(x=layouts[field_models.LayoutKind.A].slot_x(i), kind=empty) for i in range(7)],
    )

    character = field_models.Character(x=330.5, y=200.0)
    hit = resolver.check(character, row, row_y=200.25, tolerance=0.5)
    assert hit is row.nodes[3]

    character.x = 330.75
    assert resolver.check(character, row, row_y=200.25, tolerance=0.5) is None

    character.x = 330.0
    assert resolver.check(character, row, row_y=230.0, tolerance=0.5) is None

    row.nodes[3].consume()
    assert resolver.check(character, row, row_y=200.0, tolerance=0.5) is None

    assert resolver.nearest_slot(80.0, layouts[field_models.LayoutKind.A]) == 1
    assert resolver.nearest_slot(-500.0, layouts[field_models.LayoutKind.A]) == 0


if __name__ == "__main__":
    _run_unit_tests()
    print("collision.py: ok")
