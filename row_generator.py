# -*- coding: utf-8 -*-
########################
# row_generator.py
########################
# Purpose:
# - Procedural generation of node rows and goal patterns.
# - Each slot of a row is drawn as a goal node or an empty node, weighted by goal_node_percent.
#
# Design notes:
# - No Qt usage. Pure gameplay logic.
# - The generator holds no layout toggle. Callers pass the layout kind explicitly.
# - Node kinds are immutable values; every generated Node is a new object so consuming one
#   never leaks into another row or into the type templates.
# - Randomness comes from an injected random.Random for reproducible fields.
#
########################
# Interfaces:
# Public classes:
# - class RowGenerator
#   - __init__(*, layouts: dict[LayoutKind, LayoutSpec], goal_kinds: Sequence[GoalKind], empty_kind: EmptyKind,
#              goal_node_percent: float, rng: random.Random)
#   - layouts() -> dict[LayoutKind, LayoutSpec]
#   - goal_kinds() -> list[GoalKind]
#   - draw_node_kind() -> NodeKind
#   - generate(layout_kind: LayoutKind) -> Row
#   - generate_sequence(count: int, first_kind: LayoutKind) -> list[Row]
#   - random_pattern(min_length: int, max_length: int) -> tuple[str, ...]
#
# Public functions:
# - build_row_generator(config: GameConfig, rng: random.Random) -> RowGenerator
#
########################

from __future__ import annotations

import random
from typing import Dict, List, Sequence, Tuple

import field_models
from config import GameConfig


class RowGenerator:
    def __init__(
        self,
        *,
        layouts: Dict[field_models.LayoutKind, field_models.LayoutSpec],
        goal_kinds: Sequence[field_models.GoalKind],
        empty_kind: field_models.EmptyKind,
        goal_node_percent: float,
        rng: random.Random,
    ) -> None:
        if not goal_kinds:
            raise ValueError("at least one goal kind is required")
        self._layouts = dict(layouts)
        self._goal_kinds = list(goal_kinds)
        self._empty_kind = empty_kind
        self._goal_node_percent = float(goal_node_percent)
        self._rng = rng

    def layouts(self) -> Dict[field_models.LayoutKind, field_models.LayoutSpec]:
        return dict(self._layouts)

    def goal_kinds(self) -> List[field_models.GoalKind]:
        return list(self._goal_kinds)

    def draw_node_kind(self) -> field_models.NodeKind:
        if self._rng.random() * 100.0 < self._goal_node_percent:
            return self._rng.choice(self._goal_kinds)
        return self._empty_kind

    def generate(self, layout_kind: field_models.LayoutKind) -> field_models.Row:
        layout = self._layouts[layout_kind]
        nodes = [
            field_models.Node(x=layout.slot_x(index), kind=self.draw_node_kind())
            for index in range(int(layout.count))
        ]
        return field_models.Row(layout=layout_kind, nodes=nodes)

    def generate_sequence(self, count: int, first_kind: field_models.LayoutKind) -> List[field_models.Row]:
        rows: List[field_models.Row] = []
        layout_kind = first_kind
        for _ in range(int(count)):
            rows.append(self.generate(layout_kind))
            layout_kind = layout_kind.flipped()
        return rows

    def random_pattern(self, min_length: int, max_length: int) -> Tuple[str, ...]:
        if int(min_length) <= 0 or int(max_length) < int(min_length):
            raise ValueError(f"invalid goal length range: {min_length}..{max_length}")
        length = self._rng.randint(int(min_length), int(max_length))
        return tuple(self._rng.choice(self._goal_kinds).type for _ in range(length))


def build_row_generator(config: GameConfig, rng: random.Random) -> RowGenerator:
    field_config = config.field
    layouts = field_models.layout_specs(
        line_spacing=field_config.line_spacing,
        grid_count=field_config.grid_count,
        x_margin=field_config.x_margin,
    )
    goal_kinds = [
        field_models.GoalKind(type=node_type.type, color=node_type.color, score=int(node_type.score))
        for node_type in config.nodes.goal_types
    ]
    return RowGenerator(
        layouts=layouts,
        goal_kinds=goal_kinds,
        empty_kind=field_models.EmptyKind(color=config.nodes.empty_color),
        goal_node_percent=config.nodes.goal_node_percent,
        rng=rng,
    )


def _run_unit_tests() -> None:
    generator = build_row_generator(GameConfig(), random.Random(7))

    rows = generator.generate_sequence(6, field_models.LayoutKind.A)
    assert [row.layout for row in rows] == [field_models.LayoutKind.A, field_models.LayoutKind.B] * 3
    assert [len(row) for row in rows] == [7, 6, 7, 6, 7, 6]
    assert [node.x for node in rows[1].nodes] == [80.0, 180.0, 280.0, 380.0, 480.0, 580.0]

    all_nodes = [node for row in rows for node in row.nodes]
    assert len({id(node) for node in all_nodes}) == len(all_nodes)

    pattern = generator.random_pattern(3, 7)
    assert 3 <= len(pattern) <= 7
    assert set(pattern) <= {"blue", "red"}


if __name__ == "__main__":
    _run_unit_tests()
    print("row_generator.py: ok")
