from lottie_engine.services.render_scheduler import DebouncedScheduler, ImmediateScheduler


class FakeClock:
    def __init__(self):
        self.now = 0.0

    def __call__(self):
        return self.now


def test_only_last_work_runs_after_window():
    clock = FakeClock()
    scheduler = DebouncedScheduler(window_ms=50, clock=clock)
    runs = []

    for value in range(5):
        scheduler.schedule(lambda value=value: runs.append(value))
        clock.now += 0.01

    assert scheduler.pending
    assert not scheduler.poll()
    clock.now += 0.05
    assert scheduler.poll()
    assert runs == [4]
    assert not scheduler.pending
    assert not scheduler.poll()


def test_flush_runs_immediately():
    scheduler = DebouncedScheduler(window_ms=1000, clock=FakeClock())
    runs = []
    scheduler.schedule(lambda: runs.append("render"))
    assert scheduler.flush()
    assert runs == ["render"]
    assert not scheduler.flush()


def test_cancel_drops_pending_work():
    scheduler = DebouncedScheduler(window_ms=0, clock=FakeClock())
    runs = []
    scheduler.schedule(lambda: runs.append("render"))
    scheduler.cancel()
    assert not scheduler.poll()
    assert runs == []


def test_default_window_from_settings():
    assert DebouncedScheduler().window == 0.05


def test_immediate_scheduler_runs_synchronously():
    runs = []
    ImmediateScheduler().schedule(lambda: runs.append(1))
    assert runs == [1]
