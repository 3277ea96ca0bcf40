# -*- coding: utf-8 -*-
########################
# field_models.py
########################
# Purpose:
# - Core data models for the scrolling node field.
# - Defines nodes, node kinds, row layouts, rows, the character and logical commands.
#
# Design notes:
# - Keep these models stable. Prefer extending with new optional fields rather than breaking changes.
# - No Qt usage. Plain dataclasses and enums.
# - Node is the only mutable field object: collision consumption moves it off-screen.
#
########################
# Interfaces:
# Public enums:
# - class NodeCategory(enum.Enum): GOAL | EMPTY
# - class LayoutKind(enum.Enum): A | B
#   - flipped() -> LayoutKind
# - class Direction(enum.Enum): LEFT | RIGHT | NONE
#   - sign() -> int
# - class Command(str, enum.Enum): MOVE_LEFT | MOVE_RIGHT | TOGGLE_PAUSE
#
# Public dataclasses:
# - GoalKind(type: str, color: str, score: int)
# - EmptyKind(color: str)
# - Node(x: float, kind: NodeKind)
#   - category, type, color, score, is_consumed, consume()
# - LayoutSpec(kind: LayoutKind, start: float, count: int, spacing: float)
# - Row(layout: LayoutKind, nodes: list[Node])
# - Character(x: float, y: float, direction: Direction, requested_direction: Direction, waypoint_index: int)
#
# Public functions:
# - layout_specs(*, line_spacing: float, grid_count: int, x_margin: float) -> dict[LayoutKind, LayoutSpec]
#
########################

from __future__ import annotations

from dataclasses import dataclass, field
import enum
from typing import Dict, List, Union

CONSUMED_X = -1_000_000.0
EMPTY_TYPE = "empty"


class NodeCategory(enum.Enum):
    GOAL = "goal"
    EMPTY = "empty"


class LayoutKind(enum.Enum):
    A = "A"
    B = "B"

    def flipped(self) -> "LayoutKind":
        return LayoutKind.B if self is LayoutKind.A else LayoutKind.A


class Direction(enum.Enum):
    LEFT = "LEFT"
    RIGHT = "RIGHT"
    NONE = "NONE"

    def sign(self) -> int:
        if self is Direction.RIGHT:
            return 1
        if self is Direction.LEFT:
            return -1
        return 0


class Command(str, enum.Enum):
    MOVE_LEFT = "move-left"
    MOVE_RIGHT = "move-right"
    TOGGLE_PAUSE = "toggle-pause"


@dataclass(frozen=True)
class GoalKind:
    type: str
    color: str
    score: int


@dataclass(frozen=True)
class EmptyKind:
    color: str
    type: str = EMPTY_TYPE
    score: int = 0


NodeKind = Union[GoalKind, EmptyKind]


@dataclass
class Node:
    x: float
    kind: NodeKind

    @property
    def category(self) -> NodeCategory:
        return NodeCategory.GOAL if isinstance(self.kind, GoalKind) else NodeCategory.EMPTY

    @property
    def type(self) -> str:
        return self.kind.type

    @property
    def color(self) -> str:
        return self.kind.color

    @property
    def score(self) -> int:
        return int(self.kind.score)

    @property
    def is_consumed(self) -> bool:
        return self.x == CONSUMED_X

    def consume(self) -> None:
        # Moved off-screen instead of removed so row slot indices stay stable.
        self.x = CONSUMED_X


@dataclass(frozen=True)
class LayoutSpec:
    kind: LayoutKind
    start: float
    count: int
    spacing: float

    def slot_x(self, index: int) -> float:
        return float(self.start) + float(index) * float(self.spacing)

    def end(self) -> float:
        return self.slot_x(self.count - 1)


@dataclass
class Row:
    layout: LayoutKind
    nodes: List[Node] = field(default_factory=list)

    def __len__(self) -> int:
        return len(self.nodes)


@dataclass
class Character:
    x: float
    y: float
    direction: Direction = Direction.NONE
    requested_direction: Direction = Direction.NONE
    waypoint_index: int = 0


def layout_specs(*, line_spacing: float, grid_count: int, x_margin: float) -> Dict[LayoutKind, LayoutSpec]:
    spacing = float(line_spacing)
    return {
        LayoutKind.A: LayoutSpec(kind=LayoutKind.A, start=float(x_margin), count=int(grid_count) + 1, spacing=spacing),
        LayoutKind.B: LayoutSpec(
            kind=LayoutKind.B,
            start=float(x_margin) + spacing / 2.0,
            count=int(grid_count),
            spacing=spacing,
        ),
    }


def _run_unit_tests() -> None:
    specs = layout_specs(line_spacing=100.0, grid_count=6, x_margin=30.0)
    assert specs[LayoutKind.A].count == 7
    assert specs[LayoutKind.B].count == 6
    assert specs[LayoutKind.B].start == 80.0
    assert specs[LayoutKind.A].end() == 630.0
    assert LayoutKind.A.flipped() is LayoutKind.B

    node = Node(x=130.0, kind=GoalKind(type="blue", color="#3c8cf0", score=1))
    assert node.category is NodeCategory.GOAL
    node.consume()
    assert node.is_consumed
    assert Node(x=0.0, kind=EmptyKind(color="#c8c8c8")).category is NodeCategory.EMPTY


if __name__ == "__main__":
    _run_unit_tests()
    print("field_models.py: ok")
