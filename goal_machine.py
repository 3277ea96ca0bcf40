# -*- coding: utf-8 -*-
########################
# goal_machine.py
########################
# Purpose:
# - Goal pattern state machine and score keeping.
# - Advances on matching node hits, restarts on mismatches, awards score on completion.
#
# Design notes:
# - No Qt usage. Pure gameplay logic.
# - Empty nodes never change goal state.
# - Completion is transient: score += len(pattern), listeners notified, then a new pattern is drawn.
# - Score only ever grows.
#
########################
# Interfaces:
# Public enums:
# - class GoalOutcome(enum.Enum): IGNORED | ADVANCED | RESET | COMPLETED
#
# Public dataclasses:
# - GoalSnapshot(pattern: tuple[str, ...], next_index: int, score: int, completed_count: int)
# - GoalEvent(outcome: GoalOutcome, node_type: str, pattern: tuple[str, ...], next_index: int, awarded: int)
#
# Public classes:
# - class GoalMachine
#   - __init__(pattern_factory: Callable[[], Sequence[str]], initial_pattern: Optional[Sequence[str]] = None)
#   - on_node_hit(node: Node) -> GoalEvent
#   - add_completion_listener(listener: Callable[[GoalEvent], None]) -> None
#   - pattern() -> tuple[str, ...]
#   - next_index() -> int
#   - expected_type() -> str
#   - score() -> int
#   - snapshot() -> GoalSnapshot
#
########################

from __future__ import annotations

from dataclasses import dataclass
import enum
import logging
from typing import Callable, List, Optional, Sequence, Tuple

import field_models

logger = logging.getLogger(__name__)


class GoalOutcome(enum.Enum):
    IGNORED = "ignored"
    ADVANCED = "advanced"
    RESET = "reset"
    COMPLETED = "completed"


@dataclass(frozen=True)
class GoalSnapshot:
    pattern: Tuple[str, ...]
    next_index: int
    score: int
    completed_count: int


@dataclass(frozen=True)
class GoalEvent:
    outcome: GoalOutcome
    node_type: str
    pattern: Tuple[str, ...]
    next_index: int
    awarded: int = 0


class GoalMachine:
    def __init__(
        self,
        pattern_factory: Callable[[], Sequence[str]],
        initial_pattern: Optional[Sequence[str]] = None,
    ) -> None:
        self._pattern_factory = pattern_factory
        self._listeners: List[Callable[[GoalEvent], None]] = []
        self._score = 0
        self._completed_count = 0
        self._next_index = 0
        self._pattern: Tuple[str, ...] = ()
        self._install_pattern(initial_pattern if initial_pattern is not None else pattern_factory())

    def _install_pattern(self, pattern: Sequence[str]) -> None:
        normalized = tuple(str(item) for item in pattern)
        if not normalized:
            raise ValueError("goal pattern must not be empty")
        self._pattern = normalized
        self._next_index = 0

    def add_completion_listener(self, listener: Callable[[GoalEvent], None]) -> None:
        self._listeners.append(listener)

    def pattern(self) -> Tuple[str, ...]:
        return self._pattern

    def next_index(self) -> int:
        return self._next_index

    def expected_type(self) -> str:
        return self._pattern[self._next_index]

    def score(self) -> int:
        return self._score

    def completed_count(self) -> int:
        return self._completed_count

    def snapshot(self) -> GoalSnapshot:
        return GoalSnapshot(
            pattern=self._pattern,
            next_index=self._next_index,
            score=self._score,
            completed_count=self._completed_count,
        )

    def on_node_hit(self, node: field_models.Node) -> GoalEvent:
        node_type = str(node.type)

        if node.category is field_models.NodeCategory.EMPTY:
            return GoalEvent(GoalOutcome.IGNORED, node_type, self._pattern, self._next_index)

        if node_type != self.expected_type():
            self._next_index = 0
            return GoalEvent(GoalOutcome.RESET, node_type, self._pattern, self._next_index)

        self._next_index += 1
        if self._next_index < len(self._pattern):
            return GoalEvent(GoalOutcome.ADVANCED, node_type, self._pattern, self._next_index)

        completed_pattern = self._pattern
        awarded = len(completed_pattern)
        self._score += awarded
        self._completed_count += 1
        event = GoalEvent(GoalOutcome.COMPLETED, node_type, completed_pattern, self._next_index, awarded=awarded)
        logger.info("goal %s completed, +%d (score %d)", "-".join(completed_pattern), awarded, self._score)

        for listener in list(self._listeners):
            listener(event)

        self._install_pattern(self._pattern_factory())
        logger.info("new goal: %s", "-".join(self._pattern))
        return event


def _run_unit_tests() -> None:
    blue = field_models.GoalKind(type="blue", color="#3c8cf0", score=1)
    red = field_models.GoalKind(type="red", color="#e8483c", score=1)
    empty = field_models.EmptyKind(color="#c8c8c8")

    completions: List[GoalEvent] = []
    machine = GoalMachine(lambda: ("red", "red", "red"), initial_pattern=("blue", "blue", "red"))
    machine.add_completion_listener(completions.append)

    assert machine.on_node_hit(field_models.Node(x=0.0, kind=empty)).outcome is GoalOutcome.IGNORED
    assert machine.on_node_hit(field_models.Node(x=0.0, kind=blue)).outcome is GoalOutcome.ADVANCED
    assert machine.on_node_hit(field_models.Node(x=0.0, kind=blue)).outcome is GoalOutcome.ADVANCED
    event = machine.on_node_hit(field_models.Node(x=0.0, kind=red))
    assert event.outcome is GoalOutcome.COMPLETED
    assert machine.score() == 3
    assert len(completions) == 1
    assert machine.pattern() == ("red", "red", "red")
    assert machine.next_index() == 0

    machine.on_node_hit(field_models.Node(x=0.0, kind=red))
    assert machine.on_node_hit(field_models.Node(x=0.0, kind=blue)).outcome is GoalOutcome.RESET
    assert machine.next_index() == 0
    assert machine.score() == 3


if __name__ == "__main__":
    _run_unit_tests()
    print("goal_machine.py: ok")
