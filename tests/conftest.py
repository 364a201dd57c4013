import os

os.environ.setdefault("QT_QPA_PLATFORM", "offscreen")

from typing import Dict, List, Optional, Set, Tuple

import pytest

import card_deck
from audio_channel import PlaybackRejectedError
from card_controller import CardController
from config import TimingConfig
from timer_coordinator import ManualTimerBackend


class RecordingRenderer:
    """RenderPort that keeps the last painted state plus the ordered call log."""

    def __init__(self) -> None:
        self.calls: List[Tuple] = []
        self.visible_page: Optional[int] = None
        self.flipped: Dict[str, bool] = {}
        self.playing: Dict[str, bool] = {}
        self.artwork_selected: Optional[int] = None
        self.envelope_open: bool = False
        self.hint_count: int = 0
        self.pulses: List[str] = []

    def set_page_visible(self, index: int) -> None:
        self.calls.append(("page", index))
        self.visible_page = index

    def set_card_flipped(self, card_id: str, is_flipped: bool) -> None:
        self.calls.append(("flip", card_id, is_flipped))
        self.flipped[card_id] = is_flipped

    def set_track_playing_indicator(self, track_id: str, is_playing: bool) -> None:
        self.calls.append(("indicator", track_id, is_playing))
        self.playing[track_id] = is_playing

    def set_artwork_selected(self, index: Optional[int]) -> None:
        self.calls.append(("artwork", index))
        self.artwork_selected = index

    def set_envelope_open(self, is_open: bool) -> None:
        self.calls.append(("envelope", is_open))
        self.envelope_open = is_open

    def play_envelope_hint(self) -> None:
        self.calls.append(("hint",))
        self.hint_count += 1

    def pulse_track(self, track_id: str) -> None:
        self.calls.append(("pulse", track_id))
        self.pulses.append(track_id)

    def active_indicators(self) -> Set[str]:
        return {track_id for track_id, is_playing in self.playing.items() if is_playing}


class FakeAudioDevice:
    def __init__(self, track_id: str) -> None:
        self.track_id = track_id
        self.source: Optional[str] = None
        self.is_playing = False
        self.position_ms = 0
        self.reject_play = False
        self.commands: List[str] = []

    def load(self, source: str) -> None:
        self.commands.append("load")
        self.source = source

    def play(self) -> None:
        self.commands.append("play")
        if self.reject_play:
            raise PlaybackRejectedError("autoplay blocked")
        self.is_playing = True

    def pause(self) -> None:
        self.commands.append("pause")
        self.is_playing = False

    def seek(self, position_ms: int) -> None:
        self.commands.append(f"seek:{position_ms}")
        self.position_ms = position_ms


class FakeDeviceFactory:
    def __init__(self) -> None:
        self.devices: Dict[str, FakeAudioDevice] = {}

    def __call__(self, track_id: str) -> FakeAudioDevice:
        device = FakeAudioDevice(track_id)
        self.devices[track_id] = device
        return device


PAGE_INDEX = {page_id: index for index, page_id in enumerate(card_deck.build_default_deck().page_ids)}


@pytest.fixture(autouse=True)
def clean_heartnote_environment(monkeypatch):
    for name in list(os.environ):
        if name.startswith("HEARTNOTE_"):
            monkeypatch.delenv(name, raising=False)


@pytest.fixture
def deck():
    return card_deck.build_default_deck()


@pytest.fixture
def renderer():
    return RecordingRenderer()


@pytest.fixture
def device_factory():
    return FakeDeviceFactory()


@pytest.fixture
def timer_backend():
    return ManualTimerBackend()


@pytest.fixture
def timing():
    return TimingConfig()


@pytest.fixture
def controller(deck, renderer, device_factory, timer_backend, timing):
    card_controller = CardController(
        deck=deck,
        renderer=renderer,
        device_factory=device_factory,
        timer_backend=timer_backend,
        timing=timing,
    )
    card_controller.start()
    return card_controller


@pytest.fixture
def page_index():
    return dict(PAGE_INDEX)
