# -*- coding: utf-8 -*-
########################
# sprite_pack.py
########################
# Purpose:
# - Character sprite loader and renderer for the play field.
# - Draws the character image centered on its hexagon and tilted toward its direction.
#
# Design notes:
# - Treat draw_character as a strict rendering contract.
# - A missing or unreadable image falls back to a painted hexagon so the game stays playable.
# - Pixmaps need a running QGuiApplication, so loading is deferred to the first draw.
#
########################
# Interfaces:
# Public dataclasses:
# - SpriteSpec(file_path: pathlib.Path, center_x: float, center_y: float)
#
# Public classes:
# - class SpritePack
#   - __init__(sprite_spec: SpriteSpec)
#   - sprite_spec() -> SpriteSpec
#   - has_image() -> bool
#   - draw_character(painter: QPainter, *, center: QPointF, tilt_degrees: float) -> None
#
# Public functions:
# - default_sprite_spec(configured_path: str = "") -> SpriteSpec
#
########################

from __future__ import annotations

from dataclasses import dataclass
import math
from pathlib import Path
from typing import Optional

from PyQt6.QtCore import QPointF
from PyQt6.QtGui import QBrush, QColor, QPainter, QPen, QPixmap, QPolygonF

import paths

# Center of the main hexagon inside pc.png.
SPRITE_CENTER_X = 33.0
SPRITE_CENTER_Y = 55.0
FALLBACK_RADIUS = 18.0


@dataclass(frozen=True)
class SpriteSpec:
    file_path: Path
    center_x: float = SPRITE_CENTER_X
    center_y: float = SPRITE_CENTER_Y


def default_sprite_spec(configured_path: str = "") -> SpriteSpec:
    return SpriteSpec(file_path=paths.sprite_path(configured_path))


class SpritePack:
    def __init__(self, sprite_spec: SpriteSpec) -> None:
        self._sprite_spec = sprite_spec
        self._pixmap: Optional[QPixmap] = None
        self._load_attempted = False

    def sprite_spec(self) -> SpriteSpec:
        return self._sprite_spec

    def _ensure_loaded(self) -> None:
        if self._load_attempted:
            return
        self._load_attempted = True
        if not self._sprite_spec.file_path.exists():
            return
        pixmap = QPixmap(str(self._sprite_spec.file_path))
        if not pixmap.isNull():
            self._pixmap = pixmap

    def has_image(self) -> bool:
        self._ensure_loaded()
        return self._pixmap is not None

    def draw_character(self, painter: QPainter, *, center: QPointF, tilt_degrees: float) -> None:
        self._ensure_loaded()

        painter.save()
        painter.translate(center)
        painter.rotate(float(tilt_degrees))

        if self._pixmap is not None:
            painter.translate(-float(self._sprite_spec.center_x), -float(self._sprite_spec.center_y))
            painter.drawPixmap(0, 0, self._pixmap)
        else:
            self._draw_fallback_hexagon(painter)

        painter.restore()

    def _draw_fallback_hexagon(self, painter: QPainter) -> None:
        polygon = QPolygonF()
        for corner in range(6):
            angle = math.radians(60.0 * corner - 90.0)
            polygon.append(QPointF(FALLBACK_RADIUS * math.cos(angle), FALLBACK_RADIUS * math.sin(angle)))

        painter.setPen(QPen(QColor(20, 20, 24), 2.0))
        painter.setBrush(QBrush(QColor(250, 200, 60)))
        painter.drawPolygon(polygon)
        # Nose on the leading side.
        painter.setBrush(QBrush(QColor(20, 20, 24)))
        painter.drawEllipse(QPointF(0.0, FALLBACK_RADIUS * 0.45), 3.0, 3.0)
