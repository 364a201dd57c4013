import pytest

from card_models import GestureKind, TapEvent, TapKind
from gesture_disambiguator import GestureDisambiguator


def touch(surface_id, timestamp_ms, page_index=0):
    return TapEvent(surface_id=surface_id, page_index=page_index, timestamp_ms=timestamp_ms, kind=TapKind.TOUCH_END)


def pointer_double(surface_id, timestamp_ms, page_index=0):
    return TapEvent(
        surface_id=surface_id, page_index=page_index, timestamp_ms=timestamp_ms, kind=TapKind.POINTER_DOUBLE_CLICK
    )


class TestGestureDisambiguator:

    def test_two_quick_taps_make_exactly_one_double_tap(self):
        detector = GestureDisambiguator(300)
        results = [detector.on_tap(touch("page:cover", 1000)), detector.on_tap(touch("page:cover", 1120))]
        assert results == [None, GestureKind.DOUBLE_TAP]
        assert detector.double_taps == 1

    @pytest.mark.parametrize("gap_ms, expected", [(0, GestureKind.DOUBLE_TAP), (299, GestureKind.DOUBLE_TAP), (300, None), (450, None)])
    def test_window_boundary(self, gap_ms, expected):
        detector = GestureDisambiguator(300)
        detector.on_tap(touch("s", 10_000))
        assert detector.on_tap(touch("s", 10_000 + gap_ms)) == expected

    def test_third_rapid_tap_starts_a_fresh_window(self):
        detector = GestureDisambiguator(300)
        assert detector.on_tap(touch("s", 0 + 5000)) is None
        assert detector.on_tap(touch("s", 100 + 5000)) == GestureKind.DOUBLE_TAP
        assert detector.on_tap(touch("s", 200 + 5000)) is None
        # The third tap opened a new window, so a fourth quick tap pairs with it.
        assert detector.on_tap(touch("s", 300 + 5000)) == GestureKind.DOUBLE_TAP

    def test_taps_on_different_surfaces_never_pair(self):
        detector = GestureDisambiguator(300)
        assert detector.on_tap(touch("envelope", 2000, page_index=1)) is None
        assert detector.on_tap(touch("page:envelope", 2050, page_index=1)) is None
        assert detector.double_taps == 0

    def test_interleaved_surfaces_keep_separate_windows(self):
        detector = GestureDisambiguator(300)
        assert detector.on_tap(touch("a", 1000)) is None
        assert detector.on_tap(touch("b", 1050)) is None
        assert detector.on_tap(touch("a", 1100)) == GestureKind.DOUBLE_TAP
        assert detector.on_tap(touch("b", 1150)) == GestureKind.DOUBLE_TAP

    def test_first_tap_at_time_zero_is_not_a_double_tap(self):
        detector = GestureDisambiguator(300)
        assert detector.on_tap(touch("s", 0)) is None
        assert detector.on_tap(touch("s", 100)) == GestureKind.DOUBLE_TAP

    def test_out_of_order_timestamps_do_not_pair(self):
        detector = GestureDisambiguator(300)
        detector.on_tap(touch("s", 5000))
        assert detector.on_tap(touch("s", 4900)) is None

    def test_pointer_double_click_fires_directly(self):
        detector = GestureDisambiguator(300)
        assert detector.on_tap(pointer_double("s", 1000)) == GestureKind.DOUBLE_TAP

    def test_same_gesture_reported_twice_fires_once(self):
        detector = GestureDisambiguator(300)
        results = [
            detector.on_tap(touch("s", 1000)),
            detector.on_tap(touch("s", 1150)),
            detector.on_tap(pointer_double("s", 1160)),
        ]
        assert results.count(GestureKind.DOUBLE_TAP) == 1
        assert detector.suppressed == 1

    def test_slow_pointer_double_click_after_tap_is_not_a_double_tap(self):
        detector = GestureDisambiguator(300)
        assert detector.on_tap(touch("s", 1000)) is None
        assert detector.on_tap(pointer_double("s", 1450)) is None
        assert detector.double_taps == 0

    def test_slow_pointer_double_click_opens_a_new_window(self):
        detector = GestureDisambiguator(300)
        detector.on_tap(touch("s", 1000))
        detector.on_tap(pointer_double("s", 1450))
        assert detector.on_tap(touch("s", 1600)) == GestureKind.DOUBLE_TAP

    def test_quick_pointer_double_click_after_tap_fires(self):
        detector = GestureDisambiguator(300)
        assert detector.on_tap(touch("s", 1000)) is None
        assert detector.on_tap(pointer_double("s", 1200)) == GestureKind.DOUBLE_TAP

    def test_pointer_double_click_after_window_fires_again(self):
        detector = GestureDisambiguator(300)
        assert detector.on_tap(pointer_double("s", 1000)) == GestureKind.DOUBLE_TAP
        assert detector.on_tap(pointer_double("s", 1400)) == GestureKind.DOUBLE_TAP

    def test_blank_surface_is_ignored(self):
        detector = GestureDisambiguator(300)
        assert detector.on_tap(touch("", 1000)) is None
        assert detector.on_tap(touch("", 1010)) is None
        assert detector.total_taps == 0

    def test_reset_forgets_open_windows(self):
        detector = GestureDisambiguator(300)
        detector.on_tap(touch("s", 1000))
        detector.reset()
        assert detector.on_tap(touch("s", 1100)) is None

    def test_non_positive_window_is_rejected(self):
        with pytest.raises(ValueError):
            GestureDisambiguator(0)
