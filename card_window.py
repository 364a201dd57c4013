# -*- coding: utf-8 -*-
########################
# card_window.py
########################
# Purpose:
# - Primary Qt window for the card. Implements the RenderPort and captures input.
# - Hosts one page widget per deck page in a QStackedWidget.
#
# Design notes:
# - CardWindow decides nothing. It paints what the controller tells it and forwards
#   normalized input through signals: taps, control clicks, key names, visibility.
# - Each tap surface reports only its own taps. Nested surfaces accept mouse events so
#   a tap on the envelope is not also a tap on the envelope page.
# - Qt reports a pointer double-click between the two releases. The release that follows
#   a double-click is not reported as a tap, so a double-click never chains into a second one.
#
########################
# Interfaces:
# Public classes:
# - class TapSurface(PyQt6.QtWidgets.QFrame)
#   - Signals: tapped(TapEvent), clicked(str)
# - class CardWindow(PyQt6.QtWidgets.QMainWindow)
#   - Signals: tapOccurred(TapEvent), controlClicked(str), keyNamed(str), visibilityChanged(bool)
#   - RenderPort methods (see render_port.py)
#
# Inputs:
# - Mouse and key events from the Qt event loop, render calls from CardController.
#
# Outputs:
# - Normalized input signals wired to CardController by heartnote.py.
#
########################

from __future__ import annotations

from typing import Dict, List, Optional

from PyQt6.QtCore import QEvent, Qt, QTimer, pyqtSignal
from PyQt6.QtGui import QHideEvent, QKeyEvent, QMouseEvent, QShowEvent
from PyQt6.QtWidgets import (
    QFrame,
    QHBoxLayout,
    QLabel,
    QMainWindow,
    QPushButton,
    QStackedWidget,
    QVBoxLayout,
    QWidget,
)

import card_deck
from card_models import TapEvent, TapKind
from page_policy import PAGE_ARTWORK, PAGE_COVER, PAGE_ENVELOPE, PAGE_FINALE, PAGE_LETTER, PAGE_SONGS


THEME_BACKGROUND = "#FFF4F8"
THEME_ROSE = "#D92287"
THEME_BLUSH = "#F7C6DC"
THEME_INK = "#3A1030"

TRACK_PULSE_MS = 900

_KEY_NAMES: Dict[int, str] = {
    int(Qt.Key.Key_Right): "ArrowRight",
    int(Qt.Key.Key_Return): "Enter",
    int(Qt.Key.Key_Enter): "Enter",
    int(Qt.Key.Key_Escape): "Escape",
    int(Qt.Key.Key_Home): "Home",
}


class TapSurface(QFrame):
    tapped = pyqtSignal(object)
    clicked = pyqtSignal(str)

    def __init__(
        self,
        surface_id: str,
        page_index: int,
        *,
        control_id: Optional[str] = None,
        parent: Optional[QWidget] = None,
    ) -> None:
        super().__init__(parent)
        self.setObjectName(surface_id.replace(":", "_"))
        self._surface_id = str(surface_id)
        self._page_index = int(page_index)
        self._control_id = control_id
        self._skip_next_release = False

    @property
    def surface_id(self) -> str:
        return self._surface_id

    def mousePressEvent(self, event: Optional[QMouseEvent]) -> None:
        if event is not None:
            event.accept()

    def mouseDoubleClickEvent(self, event: Optional[QMouseEvent]) -> None:
        if event is None:
            return
        event.accept()
        self._skip_next_release = True
        self.tapped.emit(self._tap_event(int(event.timestamp()), TapKind.POINTER_DOUBLE_CLICK))

    def mouseReleaseEvent(self, event: Optional[QMouseEvent]) -> None:
        if event is None:
            return
        event.accept()
        if self._skip_next_release:
            self._skip_next_release = False
        else:
            self.tapped.emit(self._tap_event(int(event.timestamp()), TapKind.TOUCH_END))
        if self._control_id is not None and self.rect().contains(event.position().toPoint()):
            self.clicked.emit(self._control_id)

    def _tap_event(self, timestamp_ms: int, kind: TapKind) -> TapEvent:
        return TapEvent(
            surface_id=self._surface_id,
            page_index=self._page_index,
            timestamp_ms=timestamp_ms,
            kind=kind,
        )


class CardWindow(QMainWindow):
    tapOccurred = pyqtSignal(object)
    controlClicked = pyqtSignal(str)
    keyNamed = pyqtSignal(str)
    visibilityChanged = pyqtSignal(bool)

    def __init__(
        self,
        deck: card_deck.CardDeck,
        *,
        title: str = "HeartNote",
        track_pulse_ms: int = TRACK_PULSE_MS,
        parent: Optional[QWidget] = None,
    ) -> None:
        super().__init__(parent)
        self._deck = deck
        self._track_pulse_ms = int(track_pulse_ms)

        self.setWindowTitle(title)
        self.setStyleSheet(f"QMainWindow {{ background: {THEME_BACKGROUND}; }} QLabel {{ color: {THEME_INK}; }}")

        self._stack = QStackedWidget(self)
        self.setCentralWidget(self._stack)

        self._envelope_label: Optional[QLabel] = None
        self._envelope_hint_label: Optional[QLabel] = None
        self._artwork_surfaces: List[TapSurface] = []
        self._artwork_caption_label: Optional[QLabel] = None
        self._track_rows: Dict[str, QFrame] = {}
        self._track_buttons: Dict[str, QPushButton] = {}
        self._track_now_playing_labels: Dict[str, QLabel] = {}
        self._flip_labels: Dict[str, QLabel] = {}

        builders = {
            PAGE_COVER: self._build_cover_page,
            PAGE_ENVELOPE: self._build_envelope_page,
            PAGE_LETTER: self._build_letter_page,
            PAGE_ARTWORK: self._build_artwork_page,
            PAGE_SONGS: self._build_songs_page,
            PAGE_FINALE: self._build_finale_page,
        }
        for page_index, page_id in enumerate(deck.page_ids):
            page_surface = self._new_surface(card_deck.page_surface_id(page_id), page_index, parent=self._stack)
            page_layout = QVBoxLayout(page_surface)
            page_layout.setContentsMargins(48, 40, 48, 40)
            page_layout.setSpacing(18)
            builders[page_id](page_surface, page_layout, page_index)
            self._stack.addWidget(page_surface)

    # -----------------
    # RenderPort
    # -----------------

    def set_page_visible(self, index: int) -> None:
        self._stack.setCurrentIndex(int(index))
        current = self._stack.currentWidget()
        if current is not None:
            current.setFocus()

    def set_card_flipped(self, card_id: str, is_flipped: bool) -> None:
        label = self._flip_labels.get(card_id)
        card = next((item for item in self._deck.flip_cards if item.card_id == card_id), None)
        if label is None or card is None:
            return
        label.setText(card.back if is_flipped else card.front)
        label.setStyleSheet(self._tile_style(selected=bool(is_flipped)))

    def set_track_playing_indicator(self, track_id: str, is_playing: bool) -> None:
        button = self._track_buttons.get(track_id)
        if button is not None:
            button.setText("Pause" if is_playing else "Play")
        now_playing_label = self._track_now_playing_labels.get(track_id)
        if now_playing_label is not None:
            now_playing_label.setText("Now Playing... ♪" if is_playing else "")

    def set_artwork_selected(self, index: Optional[int]) -> None:
        for surface_index, surface in enumerate(self._artwork_surfaces):
            surface.setStyleSheet(self._tile_style(selected=surface_index == index))
        if self._artwork_caption_label is None:
            return
        if index is None or not 0 <= index < len(self._deck.artworks):
            self._artwork_caption_label.setText("")
            self._artwork_caption_label.setVisible(False)
            return
        self._artwork_caption_label.setText(self._deck.artworks[index].caption)
        self._artwork_caption_label.setVisible(True)

    def set_envelope_open(self, is_open: bool) -> None:
        if self._envelope_label is not None:
            self._envelope_label.setText("\U0001f48c" if is_open else "✉")
        if self._envelope_hint_label is not None and is_open:
            self._envelope_hint_label.setVisible(False)

    def play_envelope_hint(self) -> None:
        if self._envelope_hint_label is not None:
            self._envelope_hint_label.setVisible(True)

    def pulse_track(self, track_id: str) -> None:
        row = self._track_rows.get(track_id)
        if row is None:
            return
        row.setStyleSheet(f"QFrame {{ background: {THEME_BLUSH}; border-radius: 10px; }}")
        QTimer.singleShot(self._track_pulse_ms, lambda: row.setStyleSheet(""))

    # -----------------
    # Qt events
    # -----------------

    def keyPressEvent(self, event: Optional[QKeyEvent]) -> None:
        if event is None:
            return

        if event.key() == Qt.Key.Key_F11:
            if self.isFullScreen():
                self.showNormal()
            else:
                self.showFullScreen()
            event.accept()
            return

        key_name = _KEY_NAMES.get(int(event.key()))
        if key_name is not None and not event.isAutoRepeat():
            self.keyNamed.emit(key_name)
            event.accept()
            return

        super().keyPressEvent(event)

    def showEvent(self, event: Optional[QShowEvent]) -> None:
        super().showEvent(event)
        self.visibilityChanged.emit(True)

    def hideEvent(self, event: Optional[QHideEvent]) -> None:
        super().hideEvent(event)
        self.visibilityChanged.emit(False)

    def changeEvent(self, event: Optional[QEvent]) -> None:
        super().changeEvent(event)
        if event is not None and event.type() == QEvent.Type.WindowStateChange:
            self.visibilityChanged.emit(not self.isMinimized())

    # -----------------
    # Page builders
    # -----------------

    def _build_cover_page(self, page: TapSurface, layout: QVBoxLayout, page_index: int) -> None:
        layout.addStretch(1)
        layout.addWidget(self._title_label(f"For {self._deck.recipient}", point_size=30))
        layout.addWidget(self._control_button("Open ❤", card_deck.CONTROL_OPEN_HEART, page))
        layout.addStretch(1)

    def _build_envelope_page(self, page: TapSurface, layout: QVBoxLayout, page_index: int) -> None:
        envelope = self._new_surface(
            card_deck.CONTROL_ENVELOPE, page_index, control_id=card_deck.CONTROL_ENVELOPE, parent=page
        )
        envelope.setMinimumSize(240, 160)
        envelope_layout = QVBoxLayout(envelope)
        self._envelope_label = self._title_label("✉", point_size=72)
        envelope_layout.addWidget(self._envelope_label)

        self._envelope_hint_label = self._title_label("Tap the envelope", point_size=14)
        self._envelope_hint_label.setVisible(False)

        layout.addStretch(1)
        layout.addWidget(envelope, 0, Qt.AlignmentFlag.AlignHCenter)
        layout.addWidget(self._envelope_hint_label)
        layout.addStretch(1)

    def _build_letter_page(self, page: TapSurface, layout: QVBoxLayout, page_index: int) -> None:
        layout.addStretch(1)
        layout.addWidget(self._title_label(f"Dear {self._deck.recipient},", point_size=22))
        letter_label = self._title_label(self._deck.letter_text, point_size=16)
        letter_label.setWordWrap(True)
        layout.addWidget(letter_label)
        if self._deck.sender:
            layout.addWidget(self._title_label(f"Love, {self._deck.sender}", point_size=16))
        layout.addWidget(self._control_button("Continue", card_deck.CONTROL_CONTINUE_FROM_LETTER, page))
        layout.addStretch(1)

    def _build_artwork_page(self, page: TapSurface, layout: QVBoxLayout, page_index: int) -> None:
        layout.addWidget(self._title_label("Pick a picture", point_size=22))

        row = QHBoxLayout()
        row.setSpacing(16)
        for artwork in self._deck.artworks:
            control_id = card_deck.artwork_control_id(artwork.index)
            surface = self._new_surface(control_id, page_index, control_id=control_id, parent=page)
            surface.setMinimumSize(160, 120)
            surface.setStyleSheet(self._tile_style(selected=False))
            surface_layout = QVBoxLayout(surface)
            surface_layout.addWidget(self._title_label(artwork.title, point_size=16))
            self._artwork_surfaces.append(surface)
            row.addWidget(surface)
        layout.addLayout(row)

        self._artwork_caption_label = self._title_label("", point_size=14)
        self._artwork_caption_label.setVisible(False)
        layout.addWidget(self._artwork_caption_label)
        layout.addStretch(1)
        layout.addWidget(self._control_button("Continue", card_deck.CONTROL_CONTINUE_TO_SONGS, page))

    def _build_songs_page(self, page: TapSurface, layout: QVBoxLayout, page_index: int) -> None:
        layout.addWidget(self._title_label("Songs for you", point_size=22))
        for track in self._deck.tracks:
            row = QFrame(page)
            row_layout = QHBoxLayout(row)
            title_text = track.title if not track.artist else f"{track.title} · {track.artist}"
            row_layout.addWidget(self._title_label(title_text, point_size=15, centered=False), 1)

            now_playing_label = self._title_label("", point_size=12, centered=False)
            row_layout.addWidget(now_playing_label)

            button = self._control_button("Play", card_deck.play_control_id(track.track_id), row)
            row_layout.addWidget(button)

            self._track_rows[track.track_id] = row
            self._track_buttons[track.track_id] = button
            self._track_now_playing_labels[track.track_id] = now_playing_label
            layout.addWidget(row)
        layout.addStretch(1)
        layout.addWidget(self._control_button("Continue", card_deck.CONTROL_CONTINUE_FROM_PLAYER, page))

    def _build_finale_page(self, page: TapSurface, layout: QVBoxLayout, page_index: int) -> None:
        layout.addWidget(self._title_label("Things I love", point_size=22))

        row = QHBoxLayout()
        row.setSpacing(16)
        for card in self._deck.flip_cards:
            control_id = card_deck.flip_control_id(card.card_id)
            surface = self._new_surface(control_id, page_index, control_id=control_id, parent=page)
            surface.setMinimumSize(140, 180)
            surface_layout = QVBoxLayout(surface)
            label = self._title_label(card.front, point_size=16)
            label.setStyleSheet(self._tile_style(selected=False))
            surface_layout.addWidget(label)
            self._flip_labels[card.card_id] = label
            row.addWidget(surface)
        layout.addLayout(row)
        layout.addStretch(1)
        layout.addWidget(self._control_button("Replay ❤", card_deck.CONTROL_REPLAY, page))

    # -----------------
    # Widget helpers
    # -----------------

    def _new_surface(
        self,
        surface_id: str,
        page_index: int,
        *,
        control_id: Optional[str] = None,
        parent: Optional[QWidget] = None,
    ) -> TapSurface:
        surface = TapSurface(surface_id, page_index, control_id=control_id, parent=parent)
        surface.tapped.connect(self.tapOccurred.emit)
        surface.clicked.connect(self.controlClicked.emit)
        return surface

    def _control_button(self, text: str, control_id: str, parent: QWidget) -> QPushButton:
        button = QPushButton(text, parent)
        button.setCursor(Qt.CursorShape.PointingHandCursor)
        button.setStyleSheet(
            f"QPushButton {{ background: {THEME_ROSE}; color: white; border-radius: 14px; padding: 8px 22px; }}"
        )
        button.clicked.connect(lambda _checked=False, value=control_id: self.controlClicked.emit(value))
        return button

    def _title_label(self, text: str, *, point_size: int, centered: bool = True) -> QLabel:
        label = QLabel(text)
        font = label.font()
        font.setPointSize(int(point_size))
        label.setFont(font)
        if centered:
            label.setAlignment(Qt.AlignmentFlag.AlignCenter)
        label.setAttribute(Qt.WidgetAttribute.WA_TransparentForMouseEvents, True)
        return label

    @staticmethod
    def _tile_style(*, selected: bool) -> str:
        border_color = THEME_ROSE if selected else THEME_BLUSH
        return f"background: white; border: 3px solid {border_color}; border-radius: 12px;"
