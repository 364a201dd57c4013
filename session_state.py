# -*- coding: utf-8 -*-
########################
# session_state.py
########################
# Purpose:
# - Holds the transient selections of one run through the card, independent of the visible page.
# - Owns reset_all, the single authoritative rollback used by replay and keyboard reset.
#
# Design notes:
# - Every mutation pushes the matching render call in the same step.
# - reset_all cancels timers first, so nothing can fire into half-cleared state.
# - reset_all pushes the clean state to the renderer even when nothing changed, which repairs
#   any stuck indicator. Calling it twice leaves the same state as calling it once.
# - No Qt usage.
#
########################
# Interfaces:
# Public classes:
# - class SessionState
#   - __init__(card_ids, artwork_count, audio_channel, timers, renderer)
#   - selection() -> SelectionState
#   - envelope_opened -> bool
#   - selected_artwork_index -> Optional[int]
#   - is_card_flipped(card_id: str) -> bool
#   - open_envelope() -> bool
#   - select_artwork(index: int) -> bool
#   - toggle_card(card_id: str) -> Optional[bool]
#   - revert_card(card_id: str) -> bool
#   - reset_all() -> None
#
########################

from __future__ import annotations

import logging
from typing import Iterable, Optional, Set, Tuple

from audio_channel import AudioChannel
from card_models import SelectionState
from render_port import RenderPort
from timer_coordinator import TimerCoordinator

logger = logging.getLogger(__name__)


class SessionState:
    def __init__(
        self,
        *,
        card_ids: Iterable[str],
        artwork_count: int,
        audio_channel: AudioChannel,
        timers: TimerCoordinator,
        renderer: RenderPort,
    ) -> None:
        self._card_ids: Tuple[str, ...] = tuple(str(card_id) for card_id in card_ids)
        self._artwork_count = max(0, int(artwork_count))
        self._audio_channel = audio_channel
        self._timers = timers
        self._renderer = renderer

        self._selected_artwork_index: Optional[int] = None
        self._flipped_card_ids: Set[str] = set()
        self._envelope_opened: bool = False

    def selection(self) -> SelectionState:
        return SelectionState(
            selected_artwork_index=self._selected_artwork_index,
            flipped_card_ids=frozenset(self._flipped_card_ids),
            envelope_opened=self._envelope_opened,
        )

    @property
    def envelope_opened(self) -> bool:
        return self._envelope_opened

    @property
    def selected_artwork_index(self) -> Optional[int]:
        return self._selected_artwork_index

    def is_card_flipped(self, card_id: str) -> bool:
        return card_id in self._flipped_card_ids

    def open_envelope(self) -> bool:
        """Returns True only on the closed -> open transition."""
        if self._envelope_opened:
            return False
        self._envelope_opened = True
        self._renderer.set_envelope_open(True)
        return True

    def select_artwork(self, index: int) -> bool:
        artwork_index = int(index)
        if not 0 <= artwork_index < self._artwork_count:
            logger.debug("artwork index %d out of range, dropped", artwork_index)
            return False
        self._selected_artwork_index = artwork_index
        self._renderer.set_artwork_selected(artwork_index)
        return True

    def toggle_card(self, card_id: str) -> Optional[bool]:
        """Flip or unflip one card. Returns the new flipped state, or None for an unknown card."""
        if card_id not in self._card_ids:
            logger.debug("unknown flip card %r, dropped", card_id)
            return None
        if card_id in self._flipped_card_ids:
            self._flipped_card_ids.discard(card_id)
            self._renderer.set_card_flipped(card_id, False)
            return False
        self._flipped_card_ids.add(card_id)
        self._renderer.set_card_flipped(card_id, True)
        return True

    def revert_card(self, card_id: str) -> bool:
        if card_id not in self._flipped_card_ids:
            return False
        self._flipped_card_ids.discard(card_id)
        self._renderer.set_card_flipped(card_id, False)
        return True

    def reset_all(self) -> None:
        cancelled = self._timers.cancel_all()
        self._audio_channel.stop_all()

        self._flipped_card_ids.clear()
        for card_id in self._card_ids:
            self._renderer.set_card_flipped(card_id, False)

        self._selected_artwork_index = None
        self._renderer.set_artwork_selected(None)

        self._envelope_opened = False
        self._renderer.set_envelope_open(False)

        logger.info("session reset (%d pending timers cancelled)", cancelled)
