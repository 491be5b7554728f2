"""Multi-level queue scheduler with per-priority slot budgets."""

from __future__ import annotations

import threading
from typing import Any, Optional

from .common import MAX_PRIO
from .procqueue import ProcessQueue


class Scheduler:
    """Ready queues, one per priority; lower numbers run first.

    Each priority level ``p`` may hand out ``MAX_PRIO - p`` processes before
    every budget is refilled. Budgets start at zero, so the first request
    after processes arrive only refills them.
    """

    def __init__(self) -> None:
        self._lock = threading.RLock()
        self.ready_queue = ProcessQueue()
        self.run_queue = ProcessQueue()
        self.mlq_ready_queue = [ProcessQueue() for _ in range(MAX_PRIO)]

    def queue_empty(self) -> bool:
        """True when no process waits in any queue."""
        with self._lock:
            if any(not queue.empty() for queue in self.mlq_ready_queue):
                return False
            return self.ready_queue.empty() and self.run_queue.empty()

    def get_proc(self) -> Optional[Any]:
        """Take the next process to run, or ``None`` if none may run now."""
        with self._lock:
            for queue in self.mlq_ready_queue:
                if not queue.empty() and queue.fixed_slot != 0:
                    queue.fixed_slot -= 1
                    return queue.dequeue()
            if not self.queue_empty():
                for prio, queue in enumerate(self.mlq_ready_queue):
                    queue.fixed_slot = MAX_PRIO - prio
            return None

    def _queue_for(self, proc: Any) -> ProcessQueue:
        if not 0 <= proc.prio < MAX_PRIO:
            raise ValueError(f"priority {proc.prio} outside 0..{MAX_PRIO - 1}")
        return self.mlq_ready_queue[proc.prio]

    def put_proc(self, proc: Any) -> None:
        """Return a preempted process to its ready queue."""
        with self._lock:
            self._queue_for(proc).enqueue(proc)

    def add_proc(self, proc: Any) -> None:
        """Admit a new process to its ready queue."""
        with self._lock:
            self._queue_for(proc).enqueue(proc)