# -*- coding: utf-8 -*-
########################
# audio_channel.py
########################
# Purpose:
# - Single owner of the card's audio output.
# - Enforces that at most one track is playing, with toggle semantics on the active track.
#
# Design notes:
# - Only AudioChannel starts playback. Page handlers call play_track and nothing else.
# - Starting a different track stops everything first (pause + seek 0, indicators cleared),
#   so the previous track is reported not-playing before the new one is reported playing.
# - Playback start is best effort. A PlaybackRejectedError from the device, or a later
#   on_playback_rejected report, is swallowed and leaves the channel idle.
# - No Qt usage. Devices are created by an injected factory; media_player_bridge provides the Qt one.
#
########################
# Interfaces:
# Public protocols:
# - AudioDevicePort: load(source), play(), pause(), seek(position_ms)
# - TrackIndicatorSink: set_track_playing_indicator(track_id, is_playing)
#
# Public classes:
# - class PlaybackRejectedError(RuntimeError)
# - class AudioChannel
#   - register_track(track_id: str, source: str) -> None
#   - track_ids() -> list[str]
#   - play_track(track_id: str) -> bool
#   - stop_all() -> None
#   - on_track_ended(track_id: str) -> None
#   - on_playback_rejected(track_id: str) -> None
#   - state() -> PlaybackState
#
# Inputs:
# - Track registrations from the deck and play requests from CardController.
#
# Outputs:
# - Device commands (load, play, pause, seek) and track indicator updates.
#
########################

from __future__ import annotations

import logging
from typing import Callable, Dict, List, Optional, Protocol

from card_models import PlaybackState

logger = logging.getLogger(__name__)


class PlaybackRejectedError(RuntimeError):
    pass


class AudioDevicePort(Protocol):
    def load(self, source: str) -> None:
        ...

    def play(self) -> None:
        ...

    def pause(self) -> None:
        ...

    def seek(self, position_ms: int) -> None:
        ...


class TrackIndicatorSink(Protocol):
    def set_track_playing_indicator(self, track_id: str, is_playing: bool) -> None:
        ...


AudioDeviceFactory = Callable[[str], AudioDevicePort]


class AudioChannel:
    def __init__(self, device_factory: AudioDeviceFactory, indicator_sink: TrackIndicatorSink) -> None:
        self._device_factory = device_factory
        self._indicator_sink = indicator_sink
        self._devices: Dict[str, AudioDevicePort] = {}
        self._active_track_id: Optional[str] = None
        self._is_playing: bool = False

    def register_track(self, track_id: str, source: str) -> None:
        cleaned_track_id = str(track_id or "").strip()
        if not cleaned_track_id:
            raise ValueError("track_id must be non-empty")
        if cleaned_track_id in self._devices:
            raise ValueError(f"Track already registered: {cleaned_track_id}")

        device = self._device_factory(cleaned_track_id)
        device.load(str(source))
        self._devices[cleaned_track_id] = device

    def track_ids(self) -> List[str]:
        return list(self._devices.keys())

    def state(self) -> PlaybackState:
        return PlaybackState(active_track_id=self._active_track_id, is_playing=self._is_playing)

    def play_track(self, track_id: str) -> bool:
        """
        Toggle or switch playback.

        Returns True if the track is playing after the call, False otherwise.
        """
        device = self._devices.get(str(track_id))
        if device is None:
            logger.debug("play request for unknown track %r dropped", track_id)
            return False

        if self._is_playing and self._active_track_id == track_id:
            device.pause()
            self._set_idle()
            self._indicator_sink.set_track_playing_indicator(track_id, False)
            return False

        self.stop_all()

        self._active_track_id = track_id
        self._is_playing = True
        self._indicator_sink.set_track_playing_indicator(track_id, True)

        try:
            device.seek(0)
            device.play()
        except PlaybackRejectedError as exc:
            logger.debug("playback of %s rejected: %s", track_id, exc)
            self.on_playback_rejected(track_id)
            return False

        return self._is_playing and self._active_track_id == track_id

    def stop_all(self) -> None:
        for device in self._devices.values():
            device.pause()
            device.seek(0)
        self._set_idle()
        for track_id in self._devices.keys():
            self._indicator_sink.set_track_playing_indicator(track_id, False)

    def on_track_ended(self, track_id: str) -> None:
        if track_id not in self._devices:
            return
        if self._active_track_id != track_id:
            return
        self._set_idle()
        self._indicator_sink.set_track_playing_indicator(track_id, False)

    def on_playback_rejected(self, track_id: str) -> None:
        if self._active_track_id != track_id or not self._is_playing:
            return
        logger.debug("playback of %s did not start; channel idle", track_id)
        self._set_idle()
        self._indicator_sink.set_track_playing_indicator(track_id, False)

    def _set_idle(self) -> None:
        self._active_track_id = None
        self._is_playing = False
