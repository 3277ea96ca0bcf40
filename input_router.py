# -*- coding: utf-8 -*-
########################
# input_router.py
########################
# Purpose:
# - Single keyboard listener for gameplay commands.
# - Translates QKeyEvent into logical command strings and emits a Qt signal.
#
# Design notes:
# - This must be the only command input source. No duplicate key mapping elsewhere.
# - Debounce rules:
#   - Ignore auto repeat.
#   - A held key issues its command once, until it is released.
# - Keys outside the map are not consumed, so they never reach the engine. They are logged at debug.
#
########################
# Interfaces:
# Public classes:
# - class InputRouter(PyQt6.QtCore.QObject)
#   - Signals:
#     - commandIssued(str)
#   - Methods:
#     - handle_key_press(event: QKeyEvent) -> bool
#     - handle_key_release(event: QKeyEvent) -> bool
#     - clear_pressed_keys() -> None
#     - command_for_key(key_code: int) -> Optional[str]
#
# Inputs:
# - Raw QKeyEvent from the Qt event loop.
#
# Outputs:
# - Command strings consumed by GameEngine.apply_command.
#
########################

from __future__ import annotations

import logging
from typing import Dict, Optional, Set

from PyQt6.QtCore import QObject, Qt, pyqtSignal
from PyQt6.QtGui import QKeyEvent

import field_models

logger = logging.getLogger(__name__)


def _build_default_key_to_command_map() -> Dict[int, str]:
    """
    Default key mapping.

    Accepted keys:
      - move-left: A, Left arrow
      - move-right: D, Right arrow
      - toggle-pause: Space, P
    """
    key_to_command: Dict[int, str] = {}

    def bind(key_constant: int, command: field_models.Command) -> None:
        key_to_command[int(key_constant)] = command.value

    bind(Qt.Key.Key_A, field_models.Command.MOVE_LEFT)
    bind(Qt.Key.Key_Left, field_models.Command.MOVE_LEFT)
    bind(Qt.Key.Key_D, field_models.Command.MOVE_RIGHT)
    bind(Qt.Key.Key_Right, field_models.Command.MOVE_RIGHT)
    bind(Qt.Key.Key_Space, field_models.Command.TOGGLE_PAUSE)
    bind(Qt.Key.Key_P, field_models.Command.TOGGLE_PAUSE)

    return key_to_command


class InputRouter(QObject):
    """
    Central keyboard router for gameplay commands.

    This object never touches game state. Its only job is to map keys to
    command strings and emit one commandIssued signal per valid press.
    """

    commandIssued = pyqtSignal(str)

    def __init__(
        self,
        parent: Optional[QObject] = None,
        key_to_command_map: Optional[Dict[int, str]] = None,
    ) -> None:
        super().__init__(parent)

        self._key_to_command: Dict[int, str] = (
            dict(key_to_command_map) if key_to_command_map is not None else _build_default_key_to_command_map()
        )
        self._held_keys: Set[int] = set()

    def command_for_key(self, key_code: int) -> Optional[str]:
        return self._key_to_command.get(int(key_code))

    def handle_key_press(self, event: QKeyEvent) -> bool:
        """
        Issue the bound command for a fresh key press.

        Returns True for bound keys, so the field widget never sees them.
        """
        key_code = int(event.key())

        if event.isAutoRepeat():
            return key_code in self._key_to_command

        if key_code in self._held_keys:
            return key_code in self._key_to_command

        command = self._key_to_command.get(key_code)
        if command is None:
            logger.debug("unbound key ignored: %s", key_code)
            return False

        self._held_keys.add(key_code)
        self.commandIssued.emit(command)
        return True

    def handle_key_release(self, event: QKeyEvent) -> bool:
        key_code = int(event.key())

        if event.isAutoRepeat():
            return key_code in self._key_to_command

        self._held_keys.discard(key_code)
        return key_code in self._key_to_command

    def clear_pressed_keys(self) -> None:
        """Called by the controller on focus loss or window deactivation."""
        self._held_keys.clear()

    @property
    def key_to_command_map(self) -> Dict[int, str]:
        return dict(self._key_to_command)


def _run_unit_tests() -> None:
    router = InputRouter()

    assert router.command_for_key(int(Qt.Key.Key_A)) == "move-left"
    assert router.command_for_key(int(Qt.Key.Key_Left)) == "move-left"
    assert router.command_for_key(int(Qt.Key.Key_D)) == "move-right"
    assert router.command_for_key(int(Qt.Key.Key_Space)) == "toggle-pause"
    assert router.command_for_key(int(Qt.Key.Key_Q)) is None


if __name__ == "__main__":
    _run_unit_tests()
    print("input_router.py: ok")
