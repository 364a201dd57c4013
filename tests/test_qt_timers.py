from card_models import TimerKind
from qt_timers import QtTimerBackend
from timer_coordinator import TimerCoordinator


class TestQtTimerBackend:

    def test_callback_fires_on_event_loop(self, qtbot):
        backend = QtTimerBackend()
        calls = []

        backend.start(10, lambda: calls.append("fired"))
        assert backend.active_count() == 1

        qtbot.waitUntil(lambda: calls == ["fired"], timeout=2000)
        assert backend.active_count() == 0

    def test_cancelled_timer_never_fires(self, qtbot):
        backend = QtTimerBackend()
        calls = []

        handle = backend.start(20, lambda: calls.append("fired"))
        backend.cancel(handle)
        qtbot.wait(100)

        assert calls == []
        assert backend.active_count() == 0

    def test_clock_moves_forward(self, qtbot):
        backend = QtTimerBackend()
        first = backend.now_ms()
        qtbot.wait(30)
        assert backend.now_ms() >= first + 20

    def test_coordinator_reschedule_on_qt_backend(self, qtbot):
        coordinator = TimerCoordinator(QtTimerBackend())
        calls = []

        coordinator.schedule(TimerKind.FLIP_REVERT, "laugh", 20, lambda: calls.append("old"))
        coordinator.schedule(TimerKind.FLIP_REVERT, "laugh", 40, lambda: calls.append("new"))

        qtbot.waitUntil(lambda: calls == ["new"], timeout=2000)
        qtbot.wait(50)
        assert calls == ["new"]
        assert coordinator.pending() == []
