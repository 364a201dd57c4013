import pytest

from page_navigator import PageNavigator


class TestPageNavigator:

    @pytest.mark.parametrize("requested, expected", [(-10, 0), (-1, 0), (0, 0), (3, 3), (5, 5), (6, 5), (100, 5)])
    def test_go_to_clamps_into_bounds(self, requested, expected):
        navigator = PageNavigator(6)
        assert navigator.go_to(requested) == expected
        assert navigator.current_index == expected

    def test_go_next_saturates_on_last_page(self):
        changes = []
        navigator = PageNavigator(6, on_page_changed=lambda old, new: changes.append((old, new)))

        for _ in range(5):
            assert navigator.go_next() is True
        assert navigator.current_index == 5
        assert changes == [(0, 1), (1, 2), (2, 3), (3, 4), (4, 5)]

        assert navigator.go_next() is False
        assert navigator.current_index == 5
        assert len(changes) == 5

    def test_go_to_reports_previous_and_new_index(self):
        changes = []
        navigator = PageNavigator(4, on_page_changed=lambda old, new: changes.append((old, new)))
        navigator.go_to(2)
        navigator.go_to(2)
        assert changes == [(0, 2), (2, 2)]

    def test_go_to_first_resets_before_page_is_shown(self):
        order = []
        navigator = PageNavigator(
            6,
            on_page_changed=lambda old, new: order.append(("page", new)),
            on_reset=lambda: order.append(("reset",)),
        )
        navigator.go_to(4)
        order.clear()

        navigator.go_to_first()

        assert order == [("reset",), ("page", 0)]
        assert navigator.current_index == 0

    def test_single_page_card_never_moves(self):
        navigator = PageNavigator(1)
        assert navigator.go_next() is False
        assert navigator.go_to(7) == 0
        assert navigator.is_last_page()

    def test_empty_card_is_rejected(self):
        with pytest.raises(ValueError):
            PageNavigator(0)
