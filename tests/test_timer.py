import io
import threading

import pytest

from ossim.timer import Timer


def test_attach_after_start_is_rejected():
    timer = Timer(out=io.StringIO())
    event = timer.attach_event()
    timer.start()
    with pytest.raises(RuntimeError):
        timer.attach_event()
    event.detach()
    timer.stop()
    assert timer.current_time() >= 1


def test_single_event_advances_time():
    out = io.StringIO()
    timer = Timer(out=out)
    event = timer.attach_event()
    timer.start()
    seen = []
    for _ in range(3):
        event.next_slot()
        seen.append(timer.current_time())
    assert seen == [1, 2, 3]
    event.detach()
    timer.stop()
    lines = out.getvalue().splitlines()
    assert lines[:3] == [f"Time slot {t:3d}" for t in range(3)]


def test_events_move_in_lockstep():
    timer = Timer(out=io.StringIO())
    events = [timer.attach_event(), timer.attach_event()]
    results = {}

    def worker(name, event, slots):
        times = []
        for _ in range(slots):
            event.next_slot()
            times.append(timer.current_time())
        event.detach()
        results[name] = times

    threads = [
        threading.Thread(target=worker, args=("short", events[0], 3)),
        threading.Thread(target=worker, args=("long", events[1], 5)),
    ]
    timer.start()
    for thread in threads:
        thread.start()
    for thread in threads:
        thread.join(timeout=10)
    timer.stop()
    assert results["short"] == [1, 2, 3]
    assert results["long"] == [1, 2, 3, 4, 5]
    assert timer.current_time() >= 5