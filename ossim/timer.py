"""Global time-slot clock that advances once every attached device is done."""

from __future__ import annotations

import sys
import threading
from typing import Optional, TextIO


class TimerEvent:
    """A device's handle on the clock."""

    def __init__(self) -> None:
        self._cond = threading.Condition()
        self.done = False
        self.fsh = False

    def next_slot(self) -> None:
        """Report this slot's work done and block until the next slot begins."""
        with self._cond:
            self.done = True
            self._cond.notify_all()
            while self.done:
                self._cond.wait()

    def detach(self) -> None:
        """Tell the clock this device has finished for good."""
        with self._cond:
            self.fsh = True
            self._cond.notify_all()

    def _wait_done(self) -> bool:
        with self._cond:
            while not self.done and not self.fsh:
                self._cond.wait()
            return self.fsh

    def _release(self) -> None:
        with self._cond:
            self.done = False
            self._cond.notify_all()


class Timer:
    """Clock thread that ticks when every attached event finished its slot."""

    def __init__(self, out: Optional[TextIO] = None) -> None:
        self.out = out if out is not None else sys.stdout
        self._events: list[TimerEvent] = []
        self._time = 0
        self._started = False
        self._stop = False
        self._thread: Optional[threading.Thread] = None

    def attach_event(self) -> TimerEvent:
        """Register a new device; only allowed before the clock starts."""
        if self._started:
            raise RuntimeError("cannot attach an event to a running timer")
        event = TimerEvent()
        self._events.insert(0, event)
        return event

    def _routine(self) -> None:
        while not self._stop:
            self.out.write(f"Time slot {self._time:3d}\n")
            finished = sum(event._wait_done() for event in self._events)
            self._time += 1
            for event in self._events:
                event._release()
            if finished == len(self._events):
                break

    def start(self) -> None:
        """Start the clock thread."""
        self._started = True
        self._thread = threading.Thread(target=self._routine, name="timer", daemon=True)
        self._thread.start()

    def stop(self) -> None:
        """Stop the clock, wait for its thread and drop all events."""
        self._stop = True
        if self._thread is not None:
            self._thread.join()
        self._events.clear()

    def current_time(self) -> int:
        """Return the number of completed slots."""
        return self._time