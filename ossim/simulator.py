"""Operating-system simulation: loader, CPUs, scheduler, clock and paged memory."""

from __future__ import annotations

import contextlib
import sys
import threading
from dataclasses import dataclass, field
from pathlib import Path
from typing import NamedTuple, Optional, TextIO, Union

from .common import PAGING_MAX_MMSWP, Process
from .cpu import run as run_instruction
from .loader import Loader, LoaderError
from .memphy import MemoryAccessError, MemPhy, OutOfFramesError
from .mm import MemoryManager
from .scheduler import Scheduler
from .timer import Timer, TimerEvent

_USAGE = "Usage: os [path to configure file]"


class _ProcessEntry(NamedTuple):
    start_time: int
    name: str
    prio: int


@dataclass
class SimConfig:
    """Parsed simulation configuration."""

    time_slot: int
    num_cpus: int
    memramsz: int
    memswpsz: list[int]
    processes: list[_ProcessEntry] = field(default_factory=list)

    @property
    def num_processes(self) -> int:
        return len(self.processes)


def _take_int(tokens, what: str) -> int:
    token = next(tokens, None)
    if token is None:
        raise ValueError(f"configuration ends before {what}")
    try:
        return int(token)
    except ValueError:
        raise ValueError(f"expected a number for {what}, got {token!r}") from None


def parse_config(text: str) -> SimConfig:
    """Parse the text of a configuration file.

    The layout is ``time_slot num_cpus num_processes``, the RAM size, the
    sizes of the swap devices, then ``start_time name prio`` per process.
    The number of CPUs is limited to the number of processes.
    """
    tokens = iter(text.split())
    time_slot = _take_int(tokens, "the time slot")
    num_cpus = _take_int(tokens, "the number of CPUs")
    num_processes = _take_int(tokens, "the number of processes")
    if num_cpus < 0 or num_processes < 0:
        raise ValueError("numbers of CPUs and processes must not be negative")
    num_cpus = min(num_cpus, num_processes)

    memramsz = _take_int(tokens, "the RAM size")
    memswpsz = [_take_int(tokens, f"swap size {i}") for i in range(PAGING_MAX_MMSWP)]
    if memramsz < 0 or any(size < 0 for size in memswpsz):
        raise ValueError("memory sizes must not be negative")

    processes = []
    for index in range(num_processes):
        start_time = _take_int(tokens, f"the start time of process {index}")
        name = next(tokens, None)
        if name is None:
            raise ValueError(f"configuration ends before the name of process {index}")
        prio = _take_int(tokens, f"the priority of process {index}")
        processes.append(_ProcessEntry(start_time, name, prio))

    return SimConfig(time_slot, num_cpus, memramsz, memswpsz, processes)


def read_config(path: Union[str, Path]) -> SimConfig:
    """Read and parse the configuration file at ``path``."""
    try:
        text = Path(path).read_text()
    except OSError:
        raise FileNotFoundError(f"Cannot find configure file at {path}") from None
    return parse_config(text)


class Simulator:
    """Runs the processes of a configuration on simulated CPUs."""

    def __init__(
        self,
        config: SimConfig,
        proc_dir: Union[str, Path] = "input/proc",
        out: Optional[TextIO] = None,
    ) -> None:
        self.config = config
        self.proc_dir = Path(proc_dir)
        self.out = out
        self._done = threading.Event()
        self._errors: list[BaseException] = []
        self._finished: list[Process] = []

    def run(self) -> list[Process]:
        """Run the simulation to the end; return processes in the order they finished."""
        out = self.out if self.out is not None else sys.stdout
        with contextlib.redirect_stdout(out):
            return self._run(out)

    def _run(self, out: TextIO) -> list[Process]:
        cfg = self.config
        self._done.clear()
        self._errors = []
        self._finished = []

        timer = Timer(out)
        cpu_events = [timer.attach_event() for _ in range(cfg.num_cpus)]
        ld_event = timer.attach_event()
        timer.start()

        mram = MemPhy(cfg.memramsz, True)
        mswp = [MemPhy(size, True) for size in cfg.memswpsz]
        scheduler = Scheduler()
        loader = Loader()

        ld = threading.Thread(
            target=self._ld_routine,
            args=(ld_event, timer, scheduler, loader, mram, mswp),
            name="loader",
        )
        cpus = [
            threading.Thread(
                target=self._cpu_routine, args=(cpu_id, event, scheduler), name=f"cpu-{cpu_id}"
            )
            for cpu_id, event in enumerate(cpu_events)
        ]
        ld.start()
        for cpu in cpus:
            cpu.start()
        for cpu in cpus:
            cpu.join()
        ld.join()
        timer.stop()

        if self._errors:
            raise self._errors[0]
        return list(self._finished)

    def _ld_routine(
        self,
        event: TimerEvent,
        timer: Timer,
        scheduler: Scheduler,
        loader: Loader,
        mram: MemPhy,
        mswp: list[MemPhy],
    ) -> None:
        try:
            print("ld_routine")
            for entry in self.config.processes:
                path = self.proc_dir / entry.name
                proc = loader.load(path)
                proc.prio = entry.prio
                while timer.current_time() < entry.start_time:
                    event.next_slot()
                proc.mm = MemoryManager()
                proc.mram = mram
                proc.mswp = mswp
                proc.active_mswp = mswp[0]
                print(f"\tLoaded a process at {path}, PID: {proc.pid} PRIO: {entry.prio}")
                scheduler.add_proc(proc)
                event.next_slot()
        except Exception as exc:
            self._errors.append(exc)
        finally:
            self._done.set()
            event.detach()

    def _cpu_routine(self, cpu_id: int, event: TimerEvent, scheduler: Scheduler) -> None:
        time_left = 0
        proc: Optional[Process] = None
        try:
            while True:
                if proc is None:
                    proc = scheduler.get_proc()
                elif proc.pc == len(proc.code):
                    print(f"\tCPU {cpu_id}: Processed {proc.pid:2d} has finished")
                    self._finished.append(proc)
                    proc = scheduler.get_proc()
                    time_left = 0
                elif time_left == 0:
                    print(f"\tCPU {cpu_id}: Put process {proc.pid:2d} to run queue")
                    scheduler.put_proc(proc)
                    proc = scheduler.get_proc()

                if proc is None:
                    if self._done.is_set() and scheduler.queue_empty():
                        print(f"\tCPU {cpu_id} stopped")
                        break
                    event.next_slot()
                    continue
                if time_left == 0:
                    print(f"\tCPU {cpu_id}: Dispatched process {proc.pid:2d}")
                    time_left = self.config.time_slot

                try:
                    run_instruction(proc)
                except (MemoryAccessError, OutOfFramesError, ValueError, IndexError) as exc:
                    print(f"\tCPU {cpu_id}: process {proc.pid:2d} fault: {exc}")
                time_left -= 1
                event.next_slot()
        except Exception as exc:
            self._errors.append(exc)
        finally:
            event.detach()


def main(argv: Optional[list[str]] = None) -> int:
    """Command entry point: ``<configuration file name under input/>``."""
    args = sys.argv[1:] if argv is None else argv
    if len(args) != 1:
        print(_USAGE)
        return 1
    path = "input/" + args[0]
    try:
        config = read_config(path)
    except OSError as exc:
        print(exc)
        return 1
    except ValueError as exc:
        print(f"Invalid configure file at {path}: {exc}")
        return 1
    try:
        Simulator(config).run()
    except LoaderError as exc:
        print(exc)
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())