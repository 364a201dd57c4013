# -*- coding: utf-8 -*-
########################
# card_deck.py
########################
# Purpose:
# - The card's fixed page sequence plus its content (tracks, artworks, flip cards).
# - Maps every control id to the page it lives on and the action it triggers.
#
# Design notes:
# - Built once from ContentConfig. Frozen afterwards.
# - Control ids are stable strings: artwork:<i>, play:<track_id>, flip:<card_id>.
# - Relative track sources resolve against the configured media directory.
# - No Qt usage.
#
########################
# Interfaces:
# Public dataclasses:
# - TrackSpec, ArtworkSpec, FlipCardSpec, CardDeck
#
# Public functions:
# - artwork_control_id(index), play_control_id(track_id), flip_control_id(card_id), page_surface_id(page_id)
# - build_deck(content: ContentConfig) -> CardDeck
# - build_default_deck() -> CardDeck
#
# Inputs:
# - config.ContentConfig.
#
# Outputs:
# - CardDeck consumed by CardController and CardWindow.
#
########################

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, Optional, Tuple

import paths
from card_models import PageAction
from config import ContentConfig
from page_policy import (
    PAGE_ARTWORK,
    PAGE_COVER,
    PAGE_ENVELOPE,
    PAGE_FINALE,
    PAGE_LETTER,
    PAGE_SEQUENCE,
    PAGE_SONGS,
    ControlBinding,
)

CONTROL_OPEN_HEART = "open-heart"
CONTROL_ENVELOPE = "envelope"
CONTROL_CONTINUE_FROM_LETTER = "continue-from-letter"
CONTROL_CONTINUE_TO_SONGS = "continue-to-songs"
CONTROL_CONTINUE_FROM_PLAYER = "continue-from-player"
CONTROL_REPLAY = "replay"


def artwork_control_id(index: int) -> str:
    return f"artwork:{int(index)}"


def play_control_id(track_id: str) -> str:
    return f"play:{track_id}"


def flip_control_id(card_id: str) -> str:
    return f"flip:{card_id}"


def page_surface_id(page_id: str) -> str:
    return f"page:{page_id}"


@dataclass(frozen=True)
class TrackSpec:
    track_id: str
    title: str
    artist: str
    source_path: Path


@dataclass(frozen=True)
class ArtworkSpec:
    index: int
    title: str
    caption: str
    track_id: Optional[str]


@dataclass(frozen=True)
class FlipCardSpec:
    card_id: str
    front: str
    back: str


@dataclass(frozen=True)
class CardDeck:
    recipient: str
    sender: str
    letter_text: str
    tracks: Tuple[TrackSpec, ...]
    artworks: Tuple[ArtworkSpec, ...]
    flip_cards: Tuple[FlipCardSpec, ...]
    page_ids: Tuple[str, ...] = PAGE_SEQUENCE
    controls: Dict[str, ControlBinding] = field(default_factory=dict)

    @property
    def total_pages(self) -> int:
        return len(self.page_ids)

    def page_id_at(self, index: int) -> str:
        return self.page_ids[int(index)]

    def page_index(self, page_id: str) -> int:
        return self.page_ids.index(page_id)

    def control(self, control_id: str) -> Optional[ControlBinding]:
        return self.controls.get(str(control_id))

    def artwork_track_id(self, index: int) -> Optional[str]:
        if 0 <= int(index) < len(self.artworks):
            return self.artworks[int(index)].track_id
        return None

    def card_ids(self) -> Tuple[str, ...]:
        return tuple(card.card_id for card in self.flip_cards)


def build_deck(content: ContentConfig) -> CardDeck:
    tracks = tuple(
        TrackSpec(
            track_id=track.track_id,
            title=track.title or f"Track {track.track_id}",
            artist=track.artist,
            source_path=paths.resolve_track_source(track.source, content.media_dir),
        )
        for track in content.tracks
    )
    artworks = tuple(
        ArtworkSpec(index=index, title=artwork.title, caption=artwork.caption, track_id=artwork.track_id)
        for index, artwork in enumerate(content.artworks)
    )
    flip_cards = tuple(
        FlipCardSpec(card_id=card.card_id, front=card.front, back=card.back) for card in content.flip_cards
    )

    bindings = [
        ControlBinding(CONTROL_OPEN_HEART, PAGE_COVER, PageAction.ADVANCE),
        ControlBinding(CONTROL_ENVELOPE, PAGE_ENVELOPE, PageAction.OPEN_ENVELOPE),
        ControlBinding(CONTROL_CONTINUE_FROM_LETTER, PAGE_LETTER, PageAction.ADVANCE),
        ControlBinding(CONTROL_CONTINUE_TO_SONGS, PAGE_ARTWORK, PageAction.ADVANCE),
        ControlBinding(CONTROL_CONTINUE_FROM_PLAYER, PAGE_SONGS, PageAction.ADVANCE_STOP_AUDIO),
        ControlBinding(CONTROL_REPLAY, PAGE_FINALE, PageAction.REPLAY),
    ]
    for artwork in artworks:
        bindings.append(
            ControlBinding(artwork_control_id(artwork.index), PAGE_ARTWORK, PageAction.SELECT_ARTWORK, str(artwork.index))
        )
    for track in tracks:
        bindings.append(ControlBinding(play_control_id(track.track_id), PAGE_SONGS, PageAction.PLAY_TRACK, track.track_id))
    for card in flip_cards:
        bindings.append(ControlBinding(flip_control_id(card.card_id), PAGE_FINALE, PageAction.FLIP_CARD, card.card_id))

    return CardDeck(
        recipient=content.recipient,
        sender=content.sender,
        letter_text=content.letter_text,
        tracks=tracks,
        artworks=artworks,
        flip_cards=flip_cards,
        controls={binding.control_id: binding for binding in bindings},
    )


def build_default_deck() -> CardDeck:
    return build_deck(ContentConfig())
