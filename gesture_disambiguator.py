# -*- coding: utf-8 -*-
########################
# gesture_disambiguator.py
########################
# Purpose:
# - Single classifier for raw tap input on card surfaces.
# - Collapses two quick taps on the same surface into one canonical double-tap.
#
# Design notes:
# - Windows are scoped per surface. Two taps on different surfaces never pair up.
# - A first tap never produces an event. Single-tap effects arrive separately as control clicks.
# - After a double-tap the surface window starts fresh, so a third rapid tap does not chain.
# - Pointer double-click is folded into the same signal. If the platform reports the same
#   physical gesture both as two touch ends and as a double-click, only one event fires.
# - A pointer double-click that follows a tap is held to the same window as a touch tap,
#   so the platform double-click interval never widens it.
# - No Qt usage. Timestamps come in on the TapEvent.
#
########################
# Interfaces:
# Public dataclasses:
# - TapWindowState(last_tap_ms: Optional[int], last_double_ms: Optional[int])
#
# Public classes:
# - class GestureDisambiguator
#   - __init__(window_ms: int = 300)
#   - on_tap(event: TapEvent) -> Optional[GestureKind]
#   - reset() -> None
#
# Inputs:
# - card_models.TapEvent from the input capture layer.
#
# Outputs:
# - GestureKind.DOUBLE_TAP or None, consumed by CardController.
#
########################

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Dict, Optional

from card_models import GestureKind, TapEvent, TapKind

logger = logging.getLogger(__name__)

DEFAULT_DOUBLE_TAP_WINDOW_MS = 300


@dataclass
class TapWindowState:
    last_tap_ms: Optional[int] = None
    last_double_ms: Optional[int] = None


class GestureDisambiguator:
    """
    Per-surface double-tap detector.

    This object never decides what a double-tap does. Its only job is to:
      - keep one tap window per surface id
      - report DOUBLE_TAP when a tap closes a window
      - drop duplicate reports of the same gesture
    """

    def __init__(self, window_ms: int = DEFAULT_DOUBLE_TAP_WINDOW_MS) -> None:
        if int(window_ms) <= 0:
            raise ValueError("window_ms must be positive")
        self._window_ms: int = int(window_ms)
        self._windows: Dict[str, TapWindowState] = {}

        self._total_taps: int = 0
        self._double_taps: int = 0
        self._suppressed: int = 0

    # ------------------------------------------------------------------
    # Public API used by CardController
    # ------------------------------------------------------------------

    def on_tap(self, event: TapEvent) -> Optional[GestureKind]:
        surface_id = str(event.surface_id or "").strip()
        if not surface_id:
            return None

        self._total_taps += 1
        window = self._windows.setdefault(surface_id, TapWindowState())
        timestamp_ms = int(event.timestamp_ms)

        if event.kind == TapKind.POINTER_DOUBLE_CLICK:
            if window.last_double_ms is not None and self._within_window(window.last_double_ms, timestamp_ms):
                # Same gesture already reported through touch ends.
                self._suppressed += 1
                window.last_tap_ms = None
                return None
            if window.last_tap_ms is None or self._within_window(window.last_tap_ms, timestamp_ms):
                return self._fire(surface_id, window, timestamp_ms)
            # Platform double-click interval is longer than ours: count it as a plain tap.
            window.last_tap_ms = timestamp_ms
            return None

        if window.last_tap_ms is not None and self._within_window(window.last_tap_ms, timestamp_ms):
            return self._fire(surface_id, window, timestamp_ms)

        window.last_tap_ms = timestamp_ms
        return None

    def reset(self) -> None:
        """
        Forget every tap window. Does not change stats.
        """
        self._windows.clear()

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    def _within_window(self, earlier_ms: int, later_ms: int) -> bool:
        gap_ms = int(later_ms) - int(earlier_ms)
        return 0 <= gap_ms < self._window_ms

    def _fire(self, surface_id: str, window: TapWindowState, timestamp_ms: int) -> GestureKind:
        window.last_tap_ms = None
        window.last_double_ms = timestamp_ms
        self._double_taps += 1
        logger.debug("double tap on %s at %d ms", surface_id, timestamp_ms)
        return GestureKind.DOUBLE_TAP

    # ------------------------------------------------------------------
    # Introspection helpers
    # ------------------------------------------------------------------

    @property
    def window_ms(self) -> int:
        return self._window_ms

    @property
    def total_taps(self) -> int:
        return self._total_taps

    @property
    def double_taps(self) -> int:
        return self._double_taps

    @property
    def suppressed(self) -> int:
        return self._suppressed


def _run_unit_tests() -> None:
    detector = GestureDisambiguator(300)

    assert detector.on_tap(TapEvent("page:cover", 0, 1000)) is None
    assert detector.on_tap(TapEvent("page:cover", 0, 1200)) == GestureKind.DOUBLE_TAP
    # Third rapid tap opens a fresh window.
    assert detector.on_tap(TapEvent("page:cover", 0, 1300)) is None

    # Split across surfaces.
    assert detector.on_tap(TapEvent("envelope", 1, 5000)) is None
    assert detector.on_tap(TapEvent("page:envelope", 1, 5100)) is None

    # Exactly at the window edge is not a double-tap.
    assert detector.on_tap(TapEvent("page:letter", 2, 9000)) is None
    assert detector.on_tap(TapEvent("page:letter", 2, 9300)) is None

    # Slow pointer double-click after a tap.
    assert detector.on_tap(TapEvent("page:songs", 4, 12000)) is None
    assert detector.on_tap(TapEvent("page:songs", 4, 12450, TapKind.POINTER_DOUBLE_CLICK)) is None


if __name__ == "__main__":
    _run_unit_tests()
    print("gesture_disambiguator.py: ok")
