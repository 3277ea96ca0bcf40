# -*- coding: utf-8 -*-
########################
# row_window.py
########################
# Purpose:
# - Sliding buffer of the node rows currently on screen.
# - Drops the oldest row and appends a fresh one each time the scroll clock crosses a half cycle.
#
# Design notes:
# - No Qt usage. Pure gameplay logic.
# - Row 0 is the oldest row, nearest the top edge; the field scrolls upward.
# - Length is constant after initialize(). Layout kinds alternate along the window.
# - Only the row at the active index is eligible for collision tests.
#
########################
# Interfaces:
# Public dataclasses:
# - PlacedRow(index: int, y: float, row: Row)
#
# Public classes:
# - class RowWindow
#   - __init__(generator: RowGenerator, *, active_index: int, row_height: float)
#   - initialize(capacity: int, first_kind: LayoutKind) -> None
#   - advance() -> Row
#   - rows() -> list[Row]
#   - capacity() -> int
#   - active_index() -> int
#   - active_row() -> Row
#   - row_y(index: int, phase: float) -> float
#   - placed_rows(phase: float) -> list[PlacedRow]
#
# Inputs:
# - RowGenerator for new rows, scroll phase from ScrollClock for placement.
#
# Outputs:
# - Rows for CollisionResolver (active row) and the renderer (all rows).
#
########################

from __future__ import annotations

from collections import deque
from dataclasses import dataclass
import random
from typing import Deque, List

import field_models
import row_generator


@dataclass(frozen=True)
class PlacedRow:
    index: int
    y: float
    row: field_models.Row


class RowWindow:
    def __init__(self, generator: row_generator.RowGenerator, *, active_index: int, row_height: float) -> None:
        self._generator = generator
        self._active_index = int(active_index)
        self._row_height = float(row_height)
        self._rows: Deque[field_models.Row] = deque()
        self._capacity = 0

    def initialize(self, capacity: int, first_kind: field_models.LayoutKind) -> None:
        if int(capacity) <= 0:
            raise ValueError("row window capacity must be positive")
        if not 0 <= self._active_index < int(capacity):
            raise ValueError(f"active row index {self._active_index} is outside a window of {capacity} rows")
        self._capacity = int(capacity)
        self._rows = deque(self._generator.generate_sequence(self._capacity, first_kind))

    def advance(self) -> field_models.Row:
        if not self._rows:
            raise RuntimeError("row window is not initialized")
        next_kind = self._rows[-1].layout.flipped()
        self._rows.popleft()
        new_row = self._generator.generate(next_kind)
        self._rows.append(new_row)
        return new_row

    def rows(self) -> List[field_models.Row]:
        return list(self._rows)

    def capacity(self) -> int:
        return self._capacity

    def active_index(self) -> int:
        return self._active_index

    def active_row(self) -> field_models.Row:
        return self._rows[self._active_index]

    def row_height(self) -> float:
        return self._row_height

    def row_y(self, index: int, phase: float) -> float:
        return float(index) * self._row_height - float(phase)

    def active_row_y(self, phase: float) -> float:
        return self.row_y(self._active_index, phase)

    def placed_rows(self, phase: float) -> List[PlacedRow]:
        return [
            PlacedRow(index=index, y=self.row_y(index, phase), row=row)
            for index, row in enumerate(self._rows)
        ]


def _run_unit_tests() -> None:
    from config import GameConfig

    generator = row_generator.build_row_generator(GameConfig(), random.Random(3))
    window = RowWindow(generator, active_index=5, row_height=50.0)
    window.initialize(14, field_models.LayoutKind.A)

    for _ in range(25):
        window.advance()
        rows = window.rows()
        assert len(rows) == 14
        for previous_row, row in zip(rows, rows[1:]):
            assert row.layout is previous_row.layout.flipped()
        active = window.active_row()
        expected_count = 7 if active.layout is field_models.LayoutKind.A else 6
        assert len(active) == expected_count

    assert window.row_y(5, 10.0) == 240.0

    try:
        RowWindow(generator, active_index=14, row_height=50.0).initialize(14, field_models.LayoutKind.A)
    except ValueError:
        pass
    else:
        raise AssertionError("active index outside the window must be rejected")


if __name__ == "__main__":
    _run_unit_tests()
    print("row_window.py: ok")
