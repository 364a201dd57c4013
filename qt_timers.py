# -*- coding: utf-8 -*-
########################
# qt_timers.py
########################
# Purpose:
# - TimerBackend for TimerCoordinator that runs on the Qt event loop.
#
# Design notes:
# - One single-shot QTimer per scheduled timer, parented to the backend so Qt owns cleanup.
# - cancel() stops the QTimer before it can post its timeout.
# - now_ms() comes from a QElapsedTimer started with the backend.
#
########################
# Interfaces:
# Public classes:
# - class QtTimerBackend(PyQt6.QtCore.QObject)
#   - now_ms() -> int
#   - start(delay_ms: int, callback) -> QTimer
#   - cancel(handle: QTimer) -> None
#   - active_count() -> int
#
########################

from __future__ import annotations

from typing import Callable, Optional, Set

from PyQt6.QtCore import QElapsedTimer, QObject, QTimer


class QtTimerBackend(QObject):
    def __init__(self, parent: Optional[QObject] = None) -> None:
        super().__init__(parent)
        self._clock = QElapsedTimer()
        self._clock.start()
        self._active: Set[QTimer] = set()

    def now_ms(self) -> int:
        return int(self._clock.elapsed())

    def start(self, delay_ms: int, callback: Callable[[], None]) -> object:
        timer = QTimer(self)
        timer.setSingleShot(True)

        def on_timeout() -> None:
            self._discard(timer)
            callback()

        timer.timeout.connect(on_timeout)
        self._active.add(timer)
        timer.start(max(0, int(delay_ms)))
        return timer

    def cancel(self, handle: object) -> None:
        if not isinstance(handle, QTimer):
            return
        handle.stop()
        self._discard(handle)

    def active_count(self) -> int:
        return len(self._active)

    def _discard(self, timer: QTimer) -> None:
        if timer in self._active:
            self._active.discard(timer)
            timer.deleteLater()
