# -*- coding: utf-8 -*-
########################
# page_policy.py
########################
# Purpose:
# - Declares what a gesture or a control click means on each page.
# - The (page_id, gesture_kind) -> action table is the only place where gestures meet page semantics.
#
# Design notes:
# - The envelope page maps DOUBLE_TAP to OPEN_OR_ADVANCE_ENVELOPE: open a closed envelope,
#   or skip the auto-advance and move on when it is already open.
# - The finale page has no double-tap entry, so a double-tap there does nothing.
# - Controls belong to exactly one page. CardController drops clicks for controls
#   that are not on the current page.
# - No Qt usage.
#
########################
# Interfaces:
# Public constants:
# - PAGE_COVER, PAGE_ENVELOPE, PAGE_LETTER, PAGE_ARTWORK, PAGE_SONGS, PAGE_FINALE
# - PAGE_SEQUENCE: tuple of page ids in display order
#
# Public dataclasses:
# - ControlBinding(control_id: str, page_id: str, action: PageAction, argument: Optional[str])
#
# Public classes:
# - class PagePolicyTable
#   - action_for(page_id: str, gesture_kind: GestureKind) -> Optional[PageAction]
#
# Public functions:
# - default_gesture_policy() -> PagePolicyTable
#
########################

from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, Mapping, Optional, Tuple

from card_models import GestureKind, PageAction

PAGE_COVER = "cover"
PAGE_ENVELOPE = "envelope"
PAGE_LETTER = "letter"
PAGE_ARTWORK = "artwork"
PAGE_SONGS = "songs"
PAGE_FINALE = "finale"

PAGE_SEQUENCE: Tuple[str, ...] = (
    PAGE_COVER,
    PAGE_ENVELOPE,
    PAGE_LETTER,
    PAGE_ARTWORK,
    PAGE_SONGS,
    PAGE_FINALE,
)

PolicyKey = Tuple[str, GestureKind]


@dataclass(frozen=True)
class ControlBinding:
    control_id: str
    page_id: str
    action: PageAction
    argument: Optional[str] = None


class PagePolicyTable:
    def __init__(self, gesture_actions: Mapping[PolicyKey, PageAction]) -> None:
        self._gesture_actions: Dict[PolicyKey, PageAction] = dict(gesture_actions)

    def action_for(self, page_id: str, gesture_kind: GestureKind) -> Optional[PageAction]:
        return self._gesture_actions.get((str(page_id), gesture_kind))


def default_gesture_policy() -> PagePolicyTable:
    double_tap = GestureKind.DOUBLE_TAP
    return PagePolicyTable(
        {
            (PAGE_COVER, double_tap): PageAction.ADVANCE,
            (PAGE_ENVELOPE, double_tap): PageAction.OPEN_OR_ADVANCE_ENVELOPE,
            (PAGE_LETTER, double_tap): PageAction.ADVANCE,
            (PAGE_ARTWORK, double_tap): PageAction.ADVANCE,
            (PAGE_SONGS, double_tap): PageAction.ADVANCE_STOP_AUDIO,
        }
    )
