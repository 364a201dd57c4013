# -*- coding: utf-8 -*-
########################
# media_player_bridge.py
########################
# Purpose:
# - Qt audio devices for AudioChannel, one QMediaPlayer + QAudioOutput per track.
# - Provides a stable device port (load, play, pause, seek) and normalized end / failure reports.
#
########################
# Key Logic:
# - A missing source file is reported as PlaybackRejectedError from play(), which AudioChannel absorbs.
# - Player errors after play() are reported through playbackRejected(track_id).
# - EndOfMedia is reported through trackEnded(track_id).
#
########################
# Interfaces:
# Public classes:
# - class QtAudioDevice(PyQt6.QtCore.QObject)
#   - Signals: ended(str), rejected(str)
#   - Methods: load(source), play(), pause(), seek(position_ms)
#
# - class QtAudioDeviceFactory(PyQt6.QtCore.QObject)
#   - Signals: trackEnded(str), playbackRejected(str)
#   - __call__(track_id: str) -> QtAudioDevice
#
# Inputs:
# - Source file paths and playback commands from AudioChannel.
#
# Outputs:
# - trackEnded and playbackRejected signals, wired to CardController by heartnote.py.
#
########################

from __future__ import annotations

import logging
from pathlib import Path
from typing import Optional

from PyQt6.QtCore import QObject, QUrl, pyqtSignal
from PyQt6.QtMultimedia import QAudioOutput, QMediaPlayer

from audio_channel import PlaybackRejectedError

logger = logging.getLogger(__name__)


class QtAudioDevice(QObject):
    ended = pyqtSignal(str)
    rejected = pyqtSignal(str)

    def __init__(self, track_id: str, parent: Optional[QObject] = None) -> None:
        super().__init__(parent)
        self._track_id = str(track_id)
        self._source_path: Optional[Path] = None

        self._audio_output = QAudioOutput(self)
        self._player = QMediaPlayer(self)
        self._player.setAudioOutput(self._audio_output)
        self._player.mediaStatusChanged.connect(self._on_media_status_changed)
        self._player.errorOccurred.connect(self._on_error_occurred)

    @property
    def track_id(self) -> str:
        return self._track_id

    def load(self, source: str) -> None:
        self._source_path = Path(str(source))
        if not self._source_path.exists():
            logger.warning("audio source for track %s not found: %s", self._track_id, self._source_path)
            return
        self._player.setSource(QUrl.fromLocalFile(str(self._source_path)))

    def play(self) -> None:
        if self._source_path is None or not self._source_path.exists():
            raise PlaybackRejectedError(f"No playable source for track {self._track_id}")
        self._player.play()

    def pause(self) -> None:
        self._player.pause()

    def seek(self, position_ms: int) -> None:
        self._player.setPosition(max(0, int(position_ms)))

    def _on_media_status_changed(self, status: QMediaPlayer.MediaStatus) -> None:
        if status == QMediaPlayer.MediaStatus.EndOfMedia:
            self.ended.emit(self._track_id)

    def _on_error_occurred(self, error: QMediaPlayer.Error, error_text: str) -> None:
        if error == QMediaPlayer.Error.NoError:
            return
        logger.debug("player error on track %s: %s", self._track_id, error_text)
        self.rejected.emit(self._track_id)


class QtAudioDeviceFactory(QObject):
    trackEnded = pyqtSignal(str)
    playbackRejected = pyqtSignal(str)

    def __call__(self, track_id: str) -> QtAudioDevice:
        device = QtAudioDevice(track_id, parent=self)
        device.ended.connect(self.trackEnded.emit)
        device.rejected.connect(self.playbackRejected.emit)
        return device
