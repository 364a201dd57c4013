# -*- coding: utf-8 -*-
########################
# render_port.py
########################
# Purpose:
# - Rendering contract between the card core and whatever paints it.
#
# Design notes:
# - Calls are fire-and-forget. The renderer never calls back into state from these methods.
# - NullRenderPort is used for headless runs where nothing is painted.
#
########################
# Interfaces:
# Public protocols:
# - RenderPort
#   - set_page_visible(index: int) -> None
#   - set_card_flipped(card_id: str, is_flipped: bool) -> None
#   - set_track_playing_indicator(track_id: str, is_playing: bool) -> None
#   - set_artwork_selected(index: Optional[int]) -> None
#   - set_envelope_open(is_open: bool) -> None
#   - play_envelope_hint() -> None
#   - pulse_track(track_id: str) -> None
#
# Public classes:
# - class NullRenderPort
#
########################

from __future__ import annotations

from typing import Optional, Protocol, runtime_checkable


@runtime_checkable
class RenderPort(Protocol):
    def set_page_visible(self, index: int) -> None:
        ...

    def set_card_flipped(self, card_id: str, is_flipped: bool) -> None:
        ...

    def set_track_playing_indicator(self, track_id: str, is_playing: bool) -> None:
        ...

    def set_artwork_selected(self, index: Optional[int]) -> None:
        ...

    def set_envelope_open(self, is_open: bool) -> None:
        ...

    def play_envelope_hint(self) -> None:
        ...

    def pulse_track(self, track_id: str) -> None:
        ...


class NullRenderPort:
    def set_page_visible(self, index: int) -> None:
        pass

    def set_card_flipped(self, card_id: str, is_flipped: bool) -> None:
        pass

    def set_track_playing_indicator(self, track_id: str, is_playing: bool) -> None:
        pass

    def set_artwork_selected(self, index: Optional[int]) -> None:
        pass

    def set_envelope_open(self, is_open: bool) -> None:
        pass

    def play_envelope_hint(self) -> None:
        pass

    def pulse_track(self, track_id: str) -> None:
        pass
