# -*- coding: utf-8 -*-
########################
# scroll_clock.py
########################
# Purpose:
# - Single source of truth for how far the field has scrolled.
# - Advances a scroll offset each tick, wrapping at the row spacing.
# - Derives the half-cycle crossing event that rolls the row window.
#
# Design notes:
# - No Qt usage. Keep this module pure and deterministic.
# - The crossing test is deliberately dual: wrap past zero OR crossing the half spacing.
#   That yields two row rolls per full spacing cycle, one per node row.
# - Rate must stay below half the spacing so one tick never spans two crossings.
#
########################
# Interfaces:
# Public dataclasses:
# - ScrollSnapshot(offset: float, previous_offset: float, phase: float, total_distance: float)
#
# Public classes:
# - class ScrollClock
#   - __init__(*, spacing: float, rate: float, offset: float = 0.0)
#   - tick() -> None
#   - did_cross_half_cycle() -> bool
#   - offset() -> float
#   - previous_offset() -> float
#   - phase() -> float
#   - total_distance() -> float
#   - snapshot() -> ScrollSnapshot
#
# Inputs:
# - spacing and rate from GameConfig.field.
#
# Outputs:
# - Offset and phase used by RowWindow placement, PathTracker and the renderer.
#
########################

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class ScrollSnapshot:
    offset: float
    previous_offset: float
    phase: float
    total_distance: float


class ScrollClock:
    def __init__(self, *, spacing: float, rate: float, offset: float = 0.0) -> None:
        if float(spacing) <= 0.0:
            raise ValueError("scroll spacing must be positive")
        if not 0.0 < float(rate) < float(spacing) / 2.0:
            raise ValueError("scroll rate must be in (0, spacing / 2)")
        self._spacing = float(spacing)
        self._rate = float(rate)
        self._initial_offset = float(offset) % self._spacing
        self._offset = self._initial_offset
        self._previous_offset = self._initial_offset
        self._total_distance = 0.0

    def spacing(self) -> float:
        return self._spacing

    def half_spacing(self) -> float:
        return self._spacing / 2.0

    def rate(self) -> float:
        return self._rate

    def offset(self) -> float:
        return float(self._offset)

    def previous_offset(self) -> float:
        return float(self._previous_offset)

    def phase(self) -> float:
        """Distance scrolled since the last half-cycle crossing."""
        return self._offset % self.half_spacing()

    def total_distance(self) -> float:
        return float(self._total_distance)

    def tick(self) -> None:
        self._previous_offset = self._offset
        self._offset = (self._offset + self._rate) % self._spacing
        self._total_distance += self._rate

    def did_cross_half_cycle(self) -> bool:
        if self._offset < self._previous_offset:
            return True
        half = self.half_spacing()
        return self._previous_offset < half <= self._offset

    def snapshot(self) -> ScrollSnapshot:
        return ScrollSnapshot(
            offset=self.offset(),
            previous_offset=self.previous_offset(),
            phase=self.phase(),
            total_distance=self.total_distance(),
        )


def _run_unit_tests() -> None:
    clock = ScrollClock(spacing=100.0, rate=0.49)
    crossings = 0
    for _ in range(1000):
        clock.tick()
        assert 0.0 <= clock.offset() < 100.0
        if clock.did_cross_half_cycle():
            crossings += 1
    assert crossings == int(clock.total_distance() // 50.0)

    even = ScrollClock(spacing=100.0, rate=12.5)
    fired = []
    for _ in range(8):
        even.tick()
        fired.append(even.did_cross_half_cycle())
    assert fired == [False, False, False, True, False, False, False, True]


if __name__ == "__main__":
    _run_unit_tests()
    print("scroll_clock.py: ok")
