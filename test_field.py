# test_field.py
from __future__ import annotations

import random

import pytest

import field_models
import row_generator
import row_window
import scroll_clock
from config import GameConfig

A = field_models.LayoutKind.A
B = field_models.LayoutKind.B


def _generator(seed: int = 1, **nodes) -> row_generator.RowGenerator:
    config = GameConfig.model_validate({"nodes": nodes}) if nodes else GameConfig()
    return row_generator.build_row_generator(config, random.Random(seed))


# -----------------
# Scroll clock
# -----------------


@pytest.mark.parametrize("rate", [12.5, 0.5, 7.0, 3.0, 0.75])
def test_scroll_offset_wraps_and_crossings_match_distance(rate: float) -> None:
    clock = scroll_clock.ScrollClock(spacing=100.0, rate=rate)
    crossings = 0
    for _ in range(2000):
        clock.tick()
        assert 0.0 <= clock.offset() < 100.0
        assert 0.0 <= clock.phase() < 50.0
        if clock.did_cross_half_cycle():
            crossings += 1
    assert crossings == int(clock.total_distance() // 50.0)


def test_scroll_crossing_fires_on_half_and_on_wrap() -> None:
    clock = scroll_clock.ScrollClock(spacing=100.0, rate=12.5)
    fired = []
    for _ in range(8):
        clock.tick()
        fired.append((clock.offset(), clock.did_cross_half_cycle()))
    assert fired[3] == (50.0, True)
    assert fired[7] == (0.0, True)
    assert [flag for _, flag in fired].count(True) == 2


def test_scroll_snapshot_tracks_previous_offset() -> None:
    clock = scroll_clock.ScrollClock(spacing=100.0, rate=0.75, offset=99.5)
    clock.tick()
    snapshot = clock.snapshot()
    assert snapshot.previous_offset == 99.5
    assert snapshot.offset == 0.25
    assert snapshot.phase == 0.25
    assert snapshot.total_distance == 0.75


@pytest.mark.parametrize("rate", [0.0, -1.0, 50.0, 80.0])
def test_scroll_rate_must_stay_below_half_spacing(rate: float) -> None:
    with pytest.raises(ValueError):
        scroll_clock.ScrollClock(spacing=100.0, rate=rate)


# -----------------
# Row generator
# -----------------


def test_layout_specs_reference_geometry() -> None:
    specs = field_models.layout_specs(line_spacing=100.0, grid_count=6, x_margin=30.0)
    assert [specs[A].slot_x(i) for i in range(specs[A].count)] == [30.0, 130.0, 230.0, 330.0, 430.0, 530.0, 630.0]
    assert [specs[B].slot_x(i) for i in range(specs[B].count)] == [80.0, 180.0, 280.0, 380.0, 480.0, 580.0]


@pytest.mark.parametrize("first_kind", [A, B])
def test_generated_sequence_alternates_layouts(first_kind: field_models.LayoutKind) -> None:
    rows = _generator().generate_sequence(9, first_kind)
    assert rows[0].layout is first_kind
    for previous_row, row in zip(rows, rows[1:]):
        assert row.layout is previous_row.layout.flipped()
    for row in rows:
        assert len(row) == (7 if row.layout is A else 6)


def test_generated_nodes_are_fresh_objects() -> None:
    generator = _generator(goal_node_percent=100)
    first = generator.generate(A)
    second = generator.generate(A)
    assert all(left is not right for left, right in zip(first.nodes, second.nodes))
    first.nodes[0].consume()
    assert not second.nodes[0].is_consumed


def test_goal_node_percent_extremes() -> None:
    all_empty = _generator(goal_node_percent=0).generate_sequence(10, A)
    all_goal = _generator(goal_node_percent=100).generate_sequence(10, A)
    assert all(node.category is field_models.NodeCategory.EMPTY for row in all_empty for node in row.nodes)
    assert all(node.category is field_models.NodeCategory.GOAL for row in all_goal for node in row.nodes)
    assert {node.type for row in all_goal for node in row.nodes} <= {"blue", "red"}


def test_same_seed_gives_same_rows() -> None:
    left = [node.type for row in _generator(seed=9).generate_sequence(6, A) for node in row.nodes]
    right = [node.type for row in _generator(seed=9).generate_sequence(6, A) for node in row.nodes]
    assert left == right


def test_random_pattern_length_and_range_check() -> None:
    generator = _generator()
    for _ in range(50):
        pattern = generator.random_pattern(3, 7)
        assert 3 <= len(pattern) <= 7
    with pytest.raises(ValueError):
        generator.random_pattern(0, 3)
    with pytest.raises(ValueError):
        generator.random_pattern(4, 2)


# -----------------
# Row window
# -----------------


def test_row_window_advance_keeps_capacity_and_alternation() -> None:
    window = row_window.RowWindow(_generator(), active_index=5, row_height=50.0)
    window.initialize(14, A)
    before = window.rows()
    appended = window.advance()
    after = window.rows()

    assert len(after) == 14
    assert after[:-1] == before[1:]
    assert after[-1] is appended
    assert appended.layout is before[-1].layout.flipped()

    for _ in range(40):
        window.advance()
        rows = window.rows()
        assert len(rows) == 14
        for previous_row, row in zip(rows, rows[1:]):
            assert row.layout is previous_row.layout.flipped()
        assert window.active_row() is rows[5]


def test_row_window_placement() -> None:
    window = row_window.RowWindow(_generator(), active_index=5, row_height=50.0)
    window.initialize(14, A)
    placed = window.placed_rows(10.0)
    assert [p.y for p in placed[:3]] == [-10.0, 40.0, 90.0]
    assert window.active_row_y(10.0) == 240.0


def test_row_window_rejects_bad_bounds() -> None:
    with pytest.raises(ValueError):
        row_window.RowWindow(_generator(), active_index=14, row_height=50.0).initialize(14, A)
    with pytest.raises(ValueError):
        row_window.RowWindow(_generator(), active_index=0, row_height=50.0).initialize(0, A)
    with pytest.raises(RuntimeError):
        row_window.RowWindow(_generator(), active_index=0, row_height=50.0).advance()
