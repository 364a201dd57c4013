# -*- coding: utf-8 -*-
########################
# card_controller.py
########################
# Purpose:
# - Card-level orchestrator. Owns the flow of one run through the card.
# - Routes normalized input (taps, control clicks, keys, visibility) to the navigator,
#   the session selections, the audio channel and the timers.
#
# Stable notes:
# - Single writer per piece of state:
#   - page index: PageNavigator
#   - selections: SessionState
#   - playback: AudioChannel
#   - delayed transitions: TimerCoordinator
# - Deterministic behavior on replay: reset_all runs before the first page is shown again.
#
########################
# Design notes:
# - Gesture meaning comes from the PagePolicyTable, never from inline page checks.
# - User navigation supersedes the envelope auto-advance. Leaving the envelope page
#   cancels it inside the same page change, so the timer can never navigate a second time.
# - A double-tap on the envelope is judged against the envelope state from before its
#   first tap. The first tap's click may already have opened it; that gesture still only
#   opens the envelope and leaves the auto-advance running.
# - Leaving the songs page stops all audio.
# - Flip-card policy: one revert timer per card. Flipping restarts that card's timer,
#   un-flipping by click cancels it. Sibling cards are never touched.
# - Events tagged with a page other than the visible one, and clicks on controls of
#   another page, are dropped without mutation.
# - No Qt usage. card_window.CardWindow provides input capture and rendering.
#
########################
# Interfaces:
# Public classes:
# - class CardController
#   - start() -> None
#   - tap(event: TapEvent) -> bool
#   - click(control_id: str) -> bool
#   - key_press(key: str) -> bool
#   - set_visible(is_visible: bool) -> None
#   - on_track_ended(track_id: str) -> None
#   - on_playback_rejected(track_id: str) -> None
#   - go_next() -> bool, go_to(index: int) -> int, go_to_first() -> None, reset_all() -> None
#   - snapshot() -> CardSnapshot
#
# Inputs:
# - TapEvent, control ids and key names from the input capture layer.
# - Track ended and playback rejected reports from audio devices.
#
# Outputs:
# - RenderPort calls and AudioDevicePort commands.
#
########################

from __future__ import annotations

import logging
from typing import Dict, Optional

from audio_channel import AudioChannel, AudioDeviceFactory
from card_deck import CardDeck
from card_models import CardSnapshot, PageAction, TapEvent, TimerKind
from config import TimingConfig
from gesture_disambiguator import GestureDisambiguator
from page_navigator import PageNavigator
from page_policy import PAGE_ENVELOPE, PAGE_SONGS, PagePolicyTable, default_gesture_policy
from render_port import RenderPort
from session_state import SessionState
from timer_coordinator import TimerBackend, TimerCoordinator

logger = logging.getLogger(__name__)

ENVELOPE_TIMER_SUBJECT = "envelope"

NEXT_KEYS = frozenset({"ArrowRight", "Enter"})
FIRST_PAGE_KEYS = frozenset({"Escape", "Home"})


class CardController:
    def __init__(
        self,
        *,
        deck: CardDeck,
        renderer: RenderPort,
        device_factory: AudioDeviceFactory,
        timer_backend: TimerBackend,
        timing: Optional[TimingConfig] = None,
        policy: Optional[PagePolicyTable] = None,
    ) -> None:
        self._deck = deck
        self._renderer = renderer
        self._timing = timing if timing is not None else TimingConfig()
        self._policy = policy if policy is not None else default_gesture_policy()

        self._timers = TimerCoordinator(timer_backend)

        self._audio = AudioChannel(device_factory, renderer)
        for track in deck.tracks:
            self._audio.register_track(track.track_id, str(track.source_path))

        self._session = SessionState(
            card_ids=deck.card_ids(),
            artwork_count=len(deck.artworks),
            audio_channel=self._audio,
            timers=self._timers,
            renderer=renderer,
        )
        self._gestures = GestureDisambiguator(self._timing.double_tap_window_ms)
        # surface id -> envelope state when that surface's pending first tap arrived
        self._envelope_open_before_tap: Dict[str, bool] = {}
        self._navigator = PageNavigator(
            deck.total_pages,
            on_page_changed=self._on_page_changed,
            on_reset=self.reset_all,
        )

    # -----------------
    # Accessors
    # -----------------

    @property
    def deck(self) -> CardDeck:
        return self._deck

    @property
    def navigator(self) -> PageNavigator:
        return self._navigator

    @property
    def session(self) -> SessionState:
        return self._session

    @property
    def audio(self) -> AudioChannel:
        return self._audio

    @property
    def timers(self) -> TimerCoordinator:
        return self._timers

    @property
    def gestures(self) -> GestureDisambiguator:
        return self._gestures

    def current_page_id(self) -> str:
        return self._deck.page_id_at(self._navigator.current_index)

    def snapshot(self) -> CardSnapshot:
        pending_keys = tuple(
            sorted((timer.kind, timer.subject_id) for timer in self._timers.pending())
        )
        return CardSnapshot(
            current_index=self._navigator.current_index,
            page_id=self.current_page_id(),
            selection=self._session.selection(),
            playback=self._audio.state(),
            pending_timer_keys=pending_keys,
        )

    # -----------------
    # Public API
    # -----------------

    def start(self) -> None:
        self._navigator.go_to_first()

    def go_next(self) -> bool:
        return self._navigator.go_next()

    def go_to(self, index: int) -> int:
        return self._navigator.go_to(index)

    def go_to_first(self) -> None:
        self._navigator.go_to_first()

    def reset_all(self) -> None:
        self._session.reset_all()
        self._gestures.reset()
        self._envelope_open_before_tap.clear()

    # -----------------
    # Input handlers
    # -----------------

    def tap(self, event: TapEvent) -> bool:
        """Feed one raw tap. Returns True if it completed a gesture with an action on this page."""
        if int(event.page_index) != self._navigator.current_index:
            logger.debug("tap on %s for page %d while page %d is visible, dropped",
                         event.surface_id, event.page_index, self._navigator.current_index)
            return False

        surface_id = str(event.surface_id or "").strip()
        envelope_was_open = self._session.envelope_opened
        gesture_kind = self._gestures.on_tap(event)
        if gesture_kind is None:
            self._envelope_open_before_tap[surface_id] = envelope_was_open
            return False
        envelope_was_open = self._envelope_open_before_tap.pop(surface_id, envelope_was_open)

        action = self._policy.action_for(self.current_page_id(), gesture_kind)
        if action is None:
            return False

        self._perform(action, None, envelope_was_open=envelope_was_open)
        return True

    def click(self, control_id: str) -> bool:
        binding = self._deck.control(control_id)
        if binding is None:
            logger.debug("unknown control %r, dropped", control_id)
            return False
        if binding.page_id != self.current_page_id():
            logger.debug("control %r is not on page %s, dropped", control_id, self.current_page_id())
            return False

        self._perform(binding.action, binding.argument)
        return True

    def key_press(self, key: str) -> bool:
        key_name = str(key or "")
        if key_name in NEXT_KEYS:
            self.go_next()
            return True
        if key_name in FIRST_PAGE_KEYS:
            self.go_to_first()
            return True
        return False

    def set_visible(self, is_visible: bool) -> None:
        if not is_visible:
            self._audio.stop_all()

    def on_track_ended(self, track_id: str) -> None:
        self._audio.on_track_ended(track_id)

    def on_playback_rejected(self, track_id: str) -> None:
        self._audio.on_playback_rejected(track_id)

    # -----------------
    # Actions
    # -----------------

    def _perform(
        self,
        action: PageAction,
        argument: Optional[str],
        *,
        envelope_was_open: Optional[bool] = None,
    ) -> None:
        if envelope_was_open is None:
            envelope_was_open = self._session.envelope_opened
        if action == PageAction.ADVANCE:
            self.go_next()
        elif action == PageAction.ADVANCE_STOP_AUDIO:
            self._audio.stop_all()
            self.go_next()
        elif action == PageAction.OPEN_ENVELOPE:
            self._open_envelope()
        elif action == PageAction.OPEN_OR_ADVANCE_ENVELOPE:
            if envelope_was_open:
                self._timers.cancel(TimerKind.ENVELOPE_ADVANCE, ENVELOPE_TIMER_SUBJECT)
                self.go_next()
            else:
                self._open_envelope()
        elif action == PageAction.SELECT_ARTWORK:
            if argument is not None:
                self._session.select_artwork(int(argument))
        elif action == PageAction.PLAY_TRACK:
            if argument is not None:
                self._audio.play_track(argument)
        elif action == PageAction.FLIP_CARD:
            if argument is not None:
                self._flip_card(argument)
        elif action == PageAction.REPLAY:
            self.go_to_first()

    def _open_envelope(self) -> None:
        if not self._session.open_envelope():
            return
        self._timers.schedule(
            TimerKind.ENVELOPE_ADVANCE,
            ENVELOPE_TIMER_SUBJECT,
            self._timing.envelope_advance_delay_ms,
            self.go_next,
        )

    def _flip_card(self, card_id: str) -> None:
        is_flipped = self._session.toggle_card(card_id)
        if is_flipped is None:
            return
        if is_flipped:
            self._timers.schedule(
                TimerKind.FLIP_REVERT,
                card_id,
                self._timing.flip_revert_delay_ms,
                lambda: self._session.revert_card(card_id),
            )
        else:
            self._timers.cancel(TimerKind.FLIP_REVERT, card_id)

    # -----------------
    # Page change hook
    # -----------------

    def _on_page_changed(self, previous_index: int, new_index: int) -> None:
        previous_page_id = self._deck.page_id_at(previous_index)
        new_page_id = self._deck.page_id_at(new_index)

        if previous_index != new_index:
            if previous_page_id == PAGE_ENVELOPE:
                self._timers.cancel(TimerKind.ENVELOPE_ADVANCE, ENVELOPE_TIMER_SUBJECT)
            if previous_page_id == PAGE_SONGS:
                self._audio.stop_all()

        self._renderer.set_page_visible(new_index)

        if new_page_id == PAGE_ENVELOPE and not self._session.envelope_opened:
            self._renderer.play_envelope_hint()
        elif new_page_id == PAGE_SONGS:
            artwork_index = self._session.selected_artwork_index
            if artwork_index is not None:
                track_id = self._deck.artwork_track_id(artwork_index)
                if track_id is not None:
                    self._renderer.pulse_track(track_id)

        logger.debug("card state: %s", self.snapshot())
