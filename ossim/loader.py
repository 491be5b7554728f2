"""Reading process descriptions into process control blocks."""

from __future__ import annotations

import itertools
import threading
from pathlib import Path
from typing import Iterator, Union

from .common import Instruction, Opcode, Process

_U32 = 0xFFFFFFFF

_ARG_COUNT = {
    Opcode.CALC: 0,
    Opcode.ALLOC: 2,
    Opcode.FREE: 1,
    Opcode.READ: 3,
    Opcode.WRITE: 3,
}


class LoaderError(Exception):
    """Raised when a process description cannot be read or parsed."""


class Loader:
    """Builds processes from descriptions, handing out increasing PIDs from 1."""

    def __init__(self) -> None:
        self._pids = itertools.count(1)
        self._lock = threading.Lock()

    def _next_pid(self) -> int:
        with self._lock:
            return next(self._pids)

    @staticmethod
    def _take_int(tokens: Iterator[str]) -> int:
        token = next(tokens, None)
        if token is None:
            raise LoaderError("unexpected end of process description")
        try:
            return int(token) & _U32
        except ValueError:
            raise LoaderError(f"expected a number, got {token!r}") from None

    def parse(self, text: str) -> Process:
        """Build a process from the text of a description."""
        pid = self._next_pid()
        tokens = iter(text.split())
        priority = self._take_int(tokens)
        size = self._take_int(tokens)
        code = []
        for _ in range(size):
            name = next(tokens, None)
            if name is None:
                raise LoaderError("unexpected end of process description")
            try:
                opcode = Opcode.from_name(name)
            except ValueError as exc:
                raise LoaderError(str(exc)) from None
            args = [self._take_int(tokens) for _ in range(_ARG_COUNT[opcode])]
            code.append(Instruction(opcode, *args))
        return Process(pid=pid, priority=priority, code=code)

    def load(self, path: Union[str, Path]) -> Process:
        """Read and parse the description stored at ``path``."""
        try:
            text = Path(path).read_text()
        except OSError:
            raise LoaderError(f"Cannot find process description at '{path}'") from None
        return self.parse(text)