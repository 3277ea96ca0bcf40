# -*- coding: utf-8 -*-
########################
# game_window.py
########################
# Purpose:
# - Desktop window for playing Nodefall.
# - Integrates GameEngine + InputRouter + GameFieldWidget + SpritePack behind one frame loop.
#
# Design notes:
# - GameController owns the frame loop: one QTimer.singleShot per presented frame, one engine tick per frame.
# - Pause semantics:
#   - A frame that lands while paused is a no-op and schedules nothing.
#   - Unpausing re-enters the loop explicitly.
# - The controller is the only place that forwards commands into the engine.
#
########################
# Interfaces:
# Public dataclasses:
# - SessionState(frames: int, last_command: str, is_running: bool)
#
# Public classes:
# - class GameController(PyQt6.QtCore.QObject)
#   - Signals:
#     - scoreChanged(int)
#     - goalCompleted(object)
#     - pausedChanged(bool)
#   - start() -> None
#   - toggle_pause() -> None
#   - apply_command(command: str) -> None
#   - engine -> GameEngine
#   - state -> SessionState
#
# - class GameWindow(PyQt6.QtWidgets.QMainWindow)
#   - controller -> GameController
#
# Public functions:
# - run_app(config: GameConfig) -> int
#
# Inputs:
# - QKeyEvent stream via eventFilter (delegated to InputRouter).
# - Pause button clicks.
#
# Outputs:
# - Repainted GameFieldWidget and score label.
# - Status bar messages for goal completion and pause.
#
########################

from __future__ import annotations

from dataclasses import dataclass
import logging
import sys
from typing import Optional

from PyQt6.QtCore import QEvent, QObject, Qt, QTimer, pyqtSignal
from PyQt6.QtGui import QKeyEvent
from PyQt6.QtWidgets import QApplication, QHBoxLayout, QLabel, QMainWindow, QPushButton, QVBoxLayout, QWidget

import field_renderer
import game_engine
import goal_machine
import input_router
import sprite_pack
from config import GameConfig

logger = logging.getLogger(__name__)


@dataclass
class SessionState:
    frames: int = 0
    last_command: str = ""
    is_running: bool = False


class GameController(QObject):
    scoreChanged = pyqtSignal(int)
    goalCompleted = pyqtSignal(object)
    pausedChanged = pyqtSignal(bool)

    def __init__(
        self,
        *,
        config: GameConfig,
        field_widget: field_renderer.GameFieldWidget,
        parent: Optional[QObject] = None,
    ) -> None:
        super().__init__(parent)
        self._config = config
        self._state = SessionState()
        self._frame_pending = False

        self._engine = game_engine.GameEngine(config, score_sink=self._on_score_changed)

        self._field = field_widget
        self._field.set_engine(self._engine)
        pack = sprite_pack.SpritePack(sprite_pack.default_sprite_spec(config.display.sprite_path))
        if not pack.has_image():
            logger.info("character sprite not found at %s, drawing the fallback", pack.sprite_spec().file_path)
        self._field.set_sprite_pack(pack)

        self._router = input_router.InputRouter(parent=self)
        self._router.commandIssued.connect(self.apply_command)

    @property
    def engine(self) -> game_engine.GameEngine:
        return self._engine

    @property
    def state(self) -> SessionState:
        return self._state

    # -----------------
    # Frame loop
    # -----------------

    def start(self) -> None:
        self._state.is_running = True
        self._schedule_next_tick()

    def _schedule_next_tick(self) -> None:
        if self._frame_pending or not self._state.is_running:
            return
        self._frame_pending = True
        QTimer.singleShot(int(self._config.display.frame_interval_ms), self._on_frame)

    def _on_frame(self) -> None:
        self._frame_pending = False
        report = self._engine.tick()
        self._state.frames += 1
        self._field.update()

        if not report.ticked:
            return
        if report.goal_event is not None and report.goal_event.outcome is goal_machine.GoalOutcome.COMPLETED:
            self.goalCompleted.emit(report.goal_event)
        self._schedule_next_tick()

    # -----------------
    # Commands
    # -----------------

    def apply_command(self, command: str) -> None:
        self._state.last_command = str(command)
        was_paused = self._engine.is_paused()
        self._engine.apply_command(command)
        self._after_pause_change(was_paused)

    def toggle_pause(self) -> None:
        self._state.last_command = "pause-button"
        was_paused = self._engine.is_paused()
        self._engine.set_paused(not was_paused)
        self._after_pause_change(was_paused)

    def _after_pause_change(self, was_paused: bool) -> None:
        is_paused = self._engine.is_paused()
        if is_paused == was_paused:
            return
        self._field.set_state_text("Paused" if is_paused else "")
        self._field.update()
        self.pausedChanged.emit(is_paused)
        if not is_paused:
            self._schedule_next_tick()

    def _on_score_changed(self, score: int) -> None:
        self.scoreChanged.emit(int(score))

    # -----------------
    # Event filter
    # -----------------

    def eventFilter(self, watched: QObject, event: QEvent) -> bool:  # noqa: N802
        if event.type() == QEvent.Type.KeyPress:
            if isinstance(event, QKeyEvent) and self._router.handle_key_press(event):
                return True
        if event.type() == QEvent.Type.KeyRelease:
            if isinstance(event, QKeyEvent) and self._router.handle_key_release(event):
                return True
        if event.type() in (QEvent.Type.WindowDeactivate, QEvent.Type.FocusOut):
            self._router.clear_pressed_keys()
        return super().eventFilter(watched, event)


class GameWindow(QMainWindow):
    def __init__(self, *, config: GameConfig) -> None:
        super().__init__()
        self.setWindowTitle("Nodefall")

        root_widget = QWidget(self)
        root_layout = QVBoxLayout(root_widget)

        controls = QWidget(root_widget)
        controls_layout = QHBoxLayout(controls)
        self._score_label = QLabel("Score 0", controls)
        self._pause_button = QPushButton("Pause", controls)
        self._pause_button.setFocusPolicy(Qt.FocusPolicy.NoFocus)
        controls_layout.addWidget(self._score_label)
        controls_layout.addStretch(1)
        controls_layout.addWidget(self._pause_button)

        self._field = field_renderer.GameFieldWidget(
            hud_offset_pixels=float(config.display.hud_offset_pixels),
            parent=root_widget,
        )
        self._field.setFocusPolicy(Qt.FocusPolicy.StrongFocus)

        root_layout.addWidget(controls)
        root_layout.addWidget(self._field, alignment=Qt.AlignmentFlag.AlignHCenter)
        self.setCentralWidget(root_widget)

        self._controller = GameController(config=config, field_widget=self._field, parent=self)
        self._controller.scoreChanged.connect(self._on_score_changed)
        self._controller.pausedChanged.connect(self._on_paused_changed)
        self._controller.goalCompleted.connect(self._on_goal_completed)
        self._pause_button.clicked.connect(self._controller.toggle_pause)
        self._on_score_changed(self._controller.engine.score())

        self.installEventFilter(self._controller)
        self._field.installEventFilter(self._controller)
        self._field.setFocus()

    @property
    def controller(self) -> GameController:
        return self._controller

    def _on_score_changed(self, score: int) -> None:
        self._score_label.setText(f"Score {int(score)}")

    def _on_paused_changed(self, is_paused: bool) -> None:
        self._pause_button.setText("Resume" if is_paused else "Pause")
        state = self._controller.state
        if is_paused:
            self.statusBar().showMessage(f"Paused at frame {state.frames} via {state.last_command}")
        else:
            self.statusBar().clearMessage()

    def _on_goal_completed(self, event: goal_machine.GoalEvent) -> None:
        self.statusBar().showMessage(f"Goal {'-'.join(event.pattern)} complete, +{event.awarded}", 4000)


def run_app(config: GameConfig) -> int:
    app = QApplication(sys.argv)
    window = GameWindow(config=config)
    window.show()
    window.controller.start()
    return int(app.exec())
