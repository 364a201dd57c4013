# -*- coding: utf-8 -*-
########################
# card_models.py
########################
# Purpose:
# - Core data models for the card flow controller.
# - Defines tap events, gesture kinds, timer records, page actions and state snapshots.
#
# Design notes:
# - Keep these models stable. Prefer extending with new optional fields rather than breaking changes.
# - No Qt usage. These are plain dataclasses and enums.
#
########################
# Interfaces:
# Public enums:
# - TapKind: TOUCH_END, POINTER_DOUBLE_CLICK
# - GestureKind: DOUBLE_TAP
# - TimerKind: ENVELOPE_ADVANCE, FLIP_REVERT
# - TimerState: SCHEDULED, FIRED, CANCELLED
# - PageAction: ADVANCE, ADVANCE_STOP_AUDIO, OPEN_OR_ADVANCE_ENVELOPE, OPEN_ENVELOPE,
#               SELECT_ARTWORK, PLAY_TRACK, FLIP_CARD, REPLAY
#
# Public dataclasses:
# - TapEvent(surface_id: str, page_index: int, timestamp_ms: int, kind: TapKind)
# - PlaybackState(active_track_id: Optional[str], is_playing: bool)
# - SelectionState(selected_artwork_index: Optional[int], flipped_card_ids: frozenset, envelope_opened: bool)
# - PendingTimer(kind, subject_id, fire_at_ms, cancel_token, state)
# - CardSnapshot(current_index, page_id, selection, playback, pending_timer_keys)
#
# Inputs/Outputs:
# - These types are exchanged between GestureDisambiguator, AudioChannel, SessionState,
#   PageNavigator, TimerCoordinator and CardController.
#
########################

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import FrozenSet, Optional, Tuple


class TapKind(str, Enum):
    TOUCH_END = "TOUCH_END"
    POINTER_DOUBLE_CLICK = "POINTER_DOUBLE_CLICK"


class GestureKind(str, Enum):
    DOUBLE_TAP = "DOUBLE_TAP"


class TimerKind(str, Enum):
    ENVELOPE_ADVANCE = "ENVELOPE_ADVANCE"
    FLIP_REVERT = "FLIP_REVERT"


class TimerState(str, Enum):
    SCHEDULED = "SCHEDULED"
    FIRED = "FIRED"
    CANCELLED = "CANCELLED"


class PageAction(str, Enum):
    ADVANCE = "ADVANCE"
    ADVANCE_STOP_AUDIO = "ADVANCE_STOP_AUDIO"
    OPEN_OR_ADVANCE_ENVELOPE = "OPEN_OR_ADVANCE_ENVELOPE"
    OPEN_ENVELOPE = "OPEN_ENVELOPE"
    SELECT_ARTWORK = "SELECT_ARTWORK"
    PLAY_TRACK = "PLAY_TRACK"
    FLIP_CARD = "FLIP_CARD"
    REPLAY = "REPLAY"


@dataclass(frozen=True)
class TapEvent:
    surface_id: str
    page_index: int
    timestamp_ms: int
    kind: TapKind = TapKind.TOUCH_END


@dataclass(frozen=True)
class PlaybackState:
    active_track_id: Optional[str] = None
    is_playing: bool = False


@dataclass(frozen=True)
class SelectionState:
    selected_artwork_index: Optional[int] = None
    flipped_card_ids: FrozenSet[str] = field(default_factory=frozenset)
    envelope_opened: bool = False


@dataclass
class PendingTimer:
    kind: TimerKind
    subject_id: str
    fire_at_ms: int
    cancel_token: int
    state: TimerState = TimerState.SCHEDULED

    @property
    def key(self) -> Tuple[TimerKind, str]:
        return (self.kind, self.subject_id)


@dataclass(frozen=True)
class CardSnapshot:
    current_index: int
    page_id: str
    selection: SelectionState
    playback: PlaybackState
    pending_timer_keys: Tuple[Tuple[TimerKind, str], ...]
