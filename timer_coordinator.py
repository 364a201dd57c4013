# -*- coding: utf-8 -*-
########################
# timer_coordinator.py
########################
# Purpose:
# - Owns every delayed transition of the card: envelope auto-advance and flip-card auto-revert.
# - Makes each one cancellable by (kind, subject) so user actions and reset can supersede it.
#
# Design notes:
# - One scheduled timer per (kind, subject_id). Scheduling again cancels the prior one first.
# - Lifecycle per timer: SCHEDULED -> FIRED or SCHEDULED -> CANCELLED. Both terminal.
# - A backend callback whose token no longer matches the stored timer is discarded.
# - No Qt usage. The clock and the actual delay come from an injected TimerBackend.
#   ManualTimerBackend (here) drives simulated time; qt_timers.QtTimerBackend drives QTimer.
#
########################
# Interfaces:
# Public protocols:
# - TimerBackend
#   - now_ms() -> int
#   - start(delay_ms: int, callback: Callable[[], None]) -> object
#   - cancel(handle: object) -> None
#
# Public classes:
# - class ManualTimerBackend
#   - advance(delta_ms: int) -> int
#   - pending_count() -> int
# - class TimerCoordinator
#   - schedule(kind, subject_id, delay_ms, action) -> PendingTimer
#   - cancel(kind, subject_id) -> bool
#   - cancel_all() -> int
#   - is_scheduled(kind, subject_id) -> bool
#   - pending() -> list[PendingTimer]
#
# Inputs:
# - Schedule and cancel requests from CardController and SessionState.
#
# Outputs:
# - Calls the scheduled action exactly once, unless cancelled first.
#
########################

from __future__ import annotations

import itertools
import logging
from typing import Callable, Dict, List, Optional, Protocol, Tuple

from card_models import PendingTimer, TimerKind, TimerState

logger = logging.getLogger(__name__)

TimerKey = Tuple[TimerKind, str]


class TimerBackend(Protocol):
    def now_ms(self) -> int:
        ...

    def start(self, delay_ms: int, callback: Callable[[], None]) -> object:
        ...

    def cancel(self, handle: object) -> None:
        ...


class ManualTimerBackend:
    """Simulated clock. Nothing fires until advance() moves time past the deadline."""

    def __init__(self, start_ms: int = 0) -> None:
        self._now_ms = int(start_ms)
        self._sequence = itertools.count(1)
        # handle -> (fire_at_ms, sequence, callback)
        self._entries: Dict[int, Tuple[int, int, Callable[[], None]]] = {}

    def now_ms(self) -> int:
        return self._now_ms

    def start(self, delay_ms: int, callback: Callable[[], None]) -> object:
        handle = next(self._sequence)
        self._entries[handle] = (self._now_ms + max(0, int(delay_ms)), handle, callback)
        return handle

    def cancel(self, handle: object) -> None:
        self._entries.pop(handle, None)  # type: ignore[arg-type]

    def pending_count(self) -> int:
        return len(self._entries)

    def advance(self, delta_ms: int) -> int:
        """Move the clock forward, firing due callbacks in deadline order. Returns fired count."""
        target_ms = self._now_ms + max(0, int(delta_ms))
        fired = 0
        while True:
            due = [entry for entry in self._entries.items() if entry[1][0] <= target_ms]
            if not due:
                break
            handle, (fire_at_ms, _sequence, callback) = min(due, key=lambda item: (item[1][0], item[1][1]))
            del self._entries[handle]
            self._now_ms = max(self._now_ms, fire_at_ms)
            callback()
            fired += 1
        self._now_ms = target_ms
        return fired


class TimerCoordinator:
    def __init__(self, backend: TimerBackend) -> None:
        self._backend = backend
        self._tokens = itertools.count(1)
        self._timers: Dict[TimerKey, PendingTimer] = {}
        self._handles: Dict[int, object] = {}

    @property
    def backend(self) -> TimerBackend:
        return self._backend

    def schedule(
        self,
        kind: TimerKind,
        subject_id: str,
        delay_ms: int,
        action: Callable[[], None],
    ) -> PendingTimer:
        key: TimerKey = (kind, str(subject_id))
        self.cancel(*key)

        token = next(self._tokens)
        delay_value = max(0, int(delay_ms))
        pending_timer = PendingTimer(
            kind=kind,
            subject_id=str(subject_id),
            fire_at_ms=int(self._backend.now_ms()) + delay_value,
            cancel_token=token,
        )
        self._timers[key] = pending_timer
        self._handles[token] = self._backend.start(delay_value, lambda: self._on_fire(key, token, action))
        logger.debug("scheduled %s/%s in %d ms (token %d)", kind.value, subject_id, delay_value, token)
        return pending_timer

    def cancel(self, kind: TimerKind, subject_id: str) -> bool:
        pending_timer = self._timers.pop((kind, str(subject_id)), None)
        if pending_timer is None:
            return False
        self._release(pending_timer, TimerState.CANCELLED)
        logger.debug("cancelled %s/%s (token %d)", kind.value, subject_id, pending_timer.cancel_token)
        return True

    def cancel_all(self) -> int:
        cancelled = 0
        for key in list(self._timers.keys()):
            if self.cancel(*key):
                cancelled += 1
        return cancelled

    def is_scheduled(self, kind: TimerKind, subject_id: str) -> bool:
        return (kind, str(subject_id)) in self._timers

    def pending(self) -> List[PendingTimer]:
        return sorted(self._timers.values(), key=lambda item: (item.fire_at_ms, item.cancel_token))

    def _release(self, pending_timer: PendingTimer, final_state: TimerState) -> None:
        pending_timer.state = final_state
        handle: Optional[object] = self._handles.pop(pending_timer.cancel_token, None)
        if handle is not None and final_state == TimerState.CANCELLED:
            self._backend.cancel(handle)

    def _on_fire(self, key: TimerKey, token: int, action: Callable[[], None]) -> None:
        pending_timer = self._timers.get(key)
        if pending_timer is None or pending_timer.cancel_token != token:
            # Superseded or cancelled after the backend queued the callback.
            return
        del self._timers[key]
        self._release(pending_timer, TimerState.FIRED)
        logger.debug("fired %s/%s (token %d)", key[0].value, key[1], token)
        action()


def _run_unit_tests() -> None:
    backend = ManualTimerBackend()
    coordinator = TimerCoordinator(backend)
    calls: List[str] = []

    first = coordinator.schedule(TimerKind.FLIP_REVERT, "a", 500, lambda: calls.append("a1"))
    backend.advance(300)
    second = coordinator.schedule(TimerKind.FLIP_REVERT, "a", 500, lambda: calls.append("a2"))
    assert first.state == TimerState.CANCELLED
    backend.advance(300)
    assert calls == []
    backend.advance(200)
    assert calls == ["a2"]
    assert second.state == TimerState.FIRED

    coordinator.schedule(TimerKind.ENVELOPE_ADVANCE, "envelope", 100, lambda: calls.append("env"))
    assert coordinator.cancel_all() == 1
    backend.advance(1000)
    assert calls == ["a2"]
    assert backend.pending_count() == 0


if __name__ == "__main__":
    _run_unit_tests()
    print("timer_coordinator.py: ok")
