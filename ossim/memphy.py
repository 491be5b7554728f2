"""Physical memory devices: RAM and swap made of fixed-size frames."""

from __future__ import annotations

import threading
from collections import deque

from .bitops import PAGING_PAGESZ


class MemoryAccessError(Exception):
    """Raised for an access the device cannot serve."""


class OutOfFramesError(Exception):
    """Raised when a device has no free frame left."""


class MemPhy:
    """A byte-addressed memory device with a list of free frames."""

    def __init__(self, max_size: int, random_access: bool = True) -> None:
        self.max_size = max_size
        self.storage = bytearray(max(max_size, 0))
        self.random_access = bool(random_access)
        self.cursor = 0
        self.free_frames: deque[int] = deque()
        self._lock = threading.Lock()
        if max_size // PAGING_PAGESZ > 0:
            self.format(PAGING_PAGESZ)

    def format(self, page_size: int) -> None:
        """Reset the free-frame list to every frame of ``page_size`` bytes."""
        if page_size <= 0:
            raise ValueError(f"invalid page size {page_size}")
        numfp = self.max_size // page_size
        if numfp <= 0:
            raise ValueError(f"device of {self.max_size} bytes holds no frame of {page_size}")
        with self._lock:
            self.free_frames = deque(range(numfp))

    def _check(self, addr: int) -> None:
        if not self.random_access:
            raise MemoryAccessError("sequential access is not supported by this device")
        if not 0 <= addr < self.max_size:
            raise MemoryAccessError(f"address {addr} outside device of {self.max_size} bytes")

    def read(self, addr: int) -> int:
        """Return the signed byte stored at ``addr``."""
        self._check(addr)
        value = self.storage[addr]
        return value - 256 if value > 127 else value

    def write(self, addr: int, value: int) -> None:
        """Store the low byte of ``value`` at ``addr``."""
        self._check(addr)
        self.storage[addr] = value & 0xFF

    def get_free_frame(self) -> int:
        """Take the first free frame number."""
        with self._lock:
            if not self.free_frames:
                raise OutOfFramesError("no free frame")
            return self.free_frames.popleft()

    def put_free_frame(self, fpn: int) -> None:
        """Return a frame to the head of the free list."""
        with self._lock:
            self.free_frames.appendleft(fpn)

    def dump(self) -> str:
        """Return a listing of every non-zero byte."""
        lines = ["RAM content:\n"]
        for addr in range(self.max_size):
            if self.storage[addr]:
                value = self.read(addr) if self.random_access else self.storage[addr]
                lines.append(f"Byte {addr}: {value & 0xFFFFFFFF:X}\n")
        return "".join(lines)