# -*- coding: utf-8 -*-
########################
# page_navigator.py
########################
# Purpose:
# - Single writer of the current page index.
# - Keeps the index inside [0, total - 1] and reports every page change to one hook.
#
# Design notes:
# - Requests outside the bounds are clamped, never rejected. go_next saturates on the last page.
# - go_to_first runs the reset callback before the first page becomes visible again,
#   so the change hook never observes stale selections.
# - The hook receives (previous_index, new_index). It must not navigate.
# - No Qt usage.
#
########################
# Interfaces:
# Public classes:
# - class PageNavigator
#   - __init__(total: int, on_page_changed: Callable[[int, int], None], on_reset: Callable[[], None])
#   - current_index -> int
#   - total -> int
#   - is_last_page() -> bool
#   - go_next() -> bool
#   - go_to(index: int) -> int
#   - go_to_first() -> None
#
########################

from __future__ import annotations

import logging
from typing import Callable, List, Optional, Tuple

logger = logging.getLogger(__name__)

PageChangedHook = Callable[[int, int], None]


def _noop_reset() -> None:
    return None


class PageNavigator:
    def __init__(
        self,
        total: int,
        on_page_changed: Optional[PageChangedHook] = None,
        on_reset: Optional[Callable[[], None]] = None,
    ) -> None:
        if int(total) < 1:
            raise ValueError("A card needs at least one page")
        self._total = int(total)
        self._current_index = 0
        self._on_page_changed = on_page_changed
        self._on_reset = on_reset if on_reset is not None else _noop_reset

    @property
    def current_index(self) -> int:
        return self._current_index

    @property
    def total(self) -> int:
        return self._total

    def is_last_page(self) -> bool:
        return self._current_index >= self._total - 1

    def clamp(self, index: int) -> int:
        return max(0, min(self._total - 1, int(index)))

    def go_next(self) -> bool:
        """Advance by exactly one page. Returns False on the last page."""
        if self.is_last_page():
            return False
        self._set_index(self._current_index + 1)
        return True

    def go_to(self, index: int) -> int:
        clamped_index = self.clamp(index)
        self._set_index(clamped_index)
        return clamped_index

    def go_to_first(self) -> None:
        self._on_reset()
        self.go_to(0)

    def _set_index(self, new_index: int) -> None:
        previous_index = self._current_index
        self._current_index = new_index
        logger.info("page %d -> %d", previous_index, new_index)
        if self._on_page_changed is not None:
            self._on_page_changed(previous_index, new_index)


def _run_unit_tests() -> None:
    changes: List[Tuple[int, int]] = []
    navigator = PageNavigator(6, on_page_changed=lambda old, new: changes.append((old, new)))

    for _ in range(5):
        assert navigator.go_next()
    assert navigator.current_index == 5
    assert not navigator.go_next()
    assert navigator.current_index == 5
    assert len(changes) == 5

    assert navigator.go_to(-3) == 0
    assert navigator.go_to(99) == 5

    order: List[str] = []
    navigator = PageNavigator(
        3,
        on_page_changed=lambda old, new: order.append(f"page {new}"),
        on_reset=lambda: order.append("reset"),
    )
    navigator.go_to(2)
    order.clear()
    navigator.go_to_first()
    assert order == ["reset", "page 0"]


if __name__ == "__main__":
    _run_unit_tests()
    print("page_navigator.py: ok")
