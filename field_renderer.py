# -*- coding: utf-8 -*-
########################
# field_renderer.py
########################
# Purpose:
# - Play field Qt widget.
# - Renders the scrolling diagonal grid, node rows, the character and the HUD.
#
########################
# Key Logic:
# - The grid is drawn translated up by the scroll offset, so diagonals slide with the rows.
# - Rows come from GameEngine.placed_rows(); consumed nodes sit off-screen and are skipped.
# - The character sprite is tilted by character_motion.tilt_degrees(direction).
# - HUD: score, goal pattern with the next expected type outlined, pause banner.
# - Strict boundaries:
#   - The widget only reads engine state. It never ticks or mutates the engine.
#   - GameController calls update() after each tick.
#
########################
# Interfaces:
# Public dataclasses:
# - FieldStyle(background: str, grid_color: str, node_radius_pixels: float, ...)
#
# Public classes:
# - class GameFieldWidget(PyQt6.QtWidgets.QWidget)
#   - set_engine(engine: Optional[GameEngine]) -> None
#   - set_sprite_pack(sprite_pack: Optional[SpritePack]) -> None
#   - set_state_text(state_text: str) -> None
#
# Inputs:
# - GameEngine read-only accessors.
#
# Outputs:
# - Painted field visuals on the widget surface.
#
########################

from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, Optional

from PyQt6.QtCore import QPointF, QRectF, Qt
from PyQt6.QtGui import QBrush, QColor, QFont, QPainter, QPen
from PyQt6.QtWidgets import QWidget

import character_motion
import game_engine
import sprite_pack


@dataclass(frozen=True)
class FieldStyle:
    background: str = "#0a0a0c"
    grid_color: str = "#2c2c38"
    node_stroke_color: str = "#141418"
    node_radius_pixels: float = 9.0
    node_stroke_pixels: float = 2.0
    hud_text_color: str = "#f0f0f0"
    hud_goal_radius_pixels: float = 8.0
    hud_goal_spacing_pixels: float = 22.0


class GameFieldWidget(QWidget):
    def __init__(
        self,
        *,
        style: Optional[FieldStyle] = None,
        hud_offset_pixels: float = 25.0,
        parent: Optional[QWidget] = None,
    ) -> None:
        super().__init__(parent)
        self._style = style or FieldStyle()
        self._hud_offset_pixels = float(hud_offset_pixels)
        self._engine: Optional[game_engine.GameEngine] = None
        self._sprite_pack: Optional[sprite_pack.SpritePack] = None
        self._state_text = ""
        self._goal_colors: Dict[str, QColor] = {}

    def set_engine(self, engine: Optional[game_engine.GameEngine]) -> None:
        self._engine = engine
        self._goal_colors = {}
        if engine is not None:
            canvas_size = int(round(engine.config().field.canvas_size()))
            self.setFixedSize(canvas_size, canvas_size)
            for node_type in engine.config().nodes.goal_types:
                self._goal_colors[node_type.type] = QColor(node_type.color)

    def set_sprite_pack(self, sprite_pack_obj: Optional[sprite_pack.SpritePack]) -> None:
        self._sprite_pack = sprite_pack_obj

    def set_state_text(self, state_text: str) -> None:
        self._state_text = str(state_text or "")

    def paintEvent(self, event) -> None:  # type: ignore[override]
        painter = QPainter(self)
        painter.setRenderHint(QPainter.RenderHint.Antialiasing, True)
        painter.fillRect(self.rect(), QBrush(QColor(self._style.background)))

        if self._engine is not None:
            self._paint_grid(painter)
            self._paint_nodes(painter)
            self._paint_character(painter)
            self._paint_hud(painter)

        self._paint_state_text(painter)
        painter.end()

    def _paint_grid(self, painter: QPainter) -> None:
        assert self._engine is not None
        field_config = self._engine.config().field
        spacing = float(field_config.line_spacing)
        rows_of_cells = int(field_config.canvas_size() // spacing) + 1

        painter.save()
        painter.setPen(QPen(QColor(self._style.grid_color), 1.0))
        painter.translate(float(field_config.x_margin), -self._engine.scroll_offset())
        for column in range(int(field_config.grid_count)):
            left = column * spacing
            for cell_row in range(rows_of_cells + 1):
                top = cell_row * spacing
                painter.drawLine(QPointF(left, top), QPointF(left + spacing, top + spacing))
                painter.drawLine(QPointF(left + spacing, top), QPointF(left, top + spacing))
        painter.restore()

    def _paint_nodes(self, painter: QPainter) -> None:
        assert self._engine is not None
        radius = float(self._style.node_radius_pixels)

        painter.save()
        painter.setPen(QPen(QColor(self._style.node_stroke_color), float(self._style.node_stroke_pixels)))
        for placed in self._engine.placed_rows():
            if placed.y < -radius or placed.y > float(self.height()) + radius:
                continue
            for node in placed.row.nodes:
                if node.is_consumed:
                    continue
                painter.setBrush(QBrush(QColor(node.color)))
                painter.drawEllipse(QPointF(float(node.x), float(placed.y)), radius, radius)
        painter.restore()

    def _paint_character(self, painter: QPainter) -> None:
        assert self._engine is not None
        character = self._engine.character()
        center = QPointF(float(character.x), float(character.y))
        tilt = character_motion.tilt_degrees(character.direction)

        if self._sprite_pack is not None:
            self._sprite_pack.draw_character(painter, center=center, tilt_degrees=tilt)
            return

        painter.save()
        painter.setPen(Qt.PenStyle.NoPen)
        painter.setBrush(QBrush(QColor(250, 200, 60)))
        painter.drawEllipse(center, 14.0, 14.0)
        painter.restore()

    def _paint_hud(self, painter: QPainter) -> None:
        assert self._engine is not None
        style = self._style
        goal = self._engine.goal()
        top = self._hud_offset_pixels

        painter.save()
        painter.setPen(QPen(QColor(style.hud_text_color)))
        painter.setFont(QFont("Arial", 14, weight=QFont.Weight.Bold))
        painter.drawText(
            QRectF(10.0, top - 18.0, 200.0, 24.0),
            int(Qt.AlignmentFlag.AlignLeft),
            f"Score {goal.score}",
        )

        radius = float(style.hud_goal_radius_pixels)
        spacing = float(style.hud_goal_spacing_pixels)
        right = float(self.width()) - 10.0 - radius
        first_x = right - spacing * (len(goal.pattern) - 1)
        for index, node_type in enumerate(goal.pattern):
            center = QPointF(first_x + index * spacing, top - 6.0)
            color = QColor(self._goal_colors.get(node_type, QColor(style.hud_text_color)))
            if index < goal.next_index:
                color.setAlpha(80)
            painter.setBrush(QBrush(color))
            if index == goal.next_index:
                painter.setPen(QPen(QColor(style.hud_text_color), 2.5))
            else:
                painter.setPen(QPen(QColor(style.node_stroke_color), 1.0))
            painter.drawEllipse(center, radius, radius)
        painter.restore()

        if self._engine.is_paused():
            painter.save()
            painter.setPen(QPen(QColor(style.hud_text_color)))
            painter.setFont(QFont("Arial", 28, weight=QFont.Weight.Bold))
            painter.drawText(
                QRectF(0.0, float(self.height()) * 0.45, float(self.width()), 40.0),
                int(Qt.AlignmentFlag.AlignHCenter),
                "PAUSED",
            )
            painter.restore()

    def _paint_state_text(self, painter: QPainter) -> None:
        text = str(self._state_text or "").strip()
        if not text:
            return
        painter.save()
        painter.setPen(QPen(QColor(220, 220, 220)))
        painter.setFont(QFont("Arial", 12))
        painter.drawText(
            QRectF(0.0, float(self.height()) - 28.0, float(self.width()), 20.0),
            int(Qt.AlignmentFlag.AlignHCenter),
            text,
        )
        painter.restore()
