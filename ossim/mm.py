"""Paging memory manager: page table, virtual areas and frame mapping."""

from __future__ import annotations

from collections import deque
from dataclasses import dataclass, field
from typing import Any, Optional

from .bitops import (
    PAGING_MAX_PGN,
    PAGING_PAGESZ,
    page_number,
    pte_fpn,
    pte_set_fpn,
    pte_set_swap,
    pte_swapped,
)
from .common import PAGING_MAX_SYMTBL_SZ
from .memphy import MemPhy, OutOfFramesError


@dataclass
class Region:
    """A half-open range of virtual addresses ``[rg_start, rg_end)``."""

    rg_start: int = 0
    rg_end: int = 0

    @property
    def size(self) -> int:
        return self.rg_end - self.rg_start


@dataclass
class VmArea:
    """A virtual memory area with its break pointer and free regions."""

    vm_id: int
    vm_start: int = 0
    vm_end: int = 0
    sbrk: int = 0
    free_regions: list[Region] = field(default_factory=list)


class MemoryManager:
    """Per-process memory state: page directory, areas, symbols and FIFO of pages."""

    def __init__(self) -> None:
        self.pgd: list[int] = [0] * PAGING_MAX_PGN
        area = VmArea(vm_id=1)
        area.free_regions.insert(0, Region(area.vm_start, area.vm_end))
        self.mmap: list[VmArea] = [area]
        self.symrgtbl: list[Region] = [Region() for _ in range(PAGING_MAX_SYMTBL_SZ)]
        # Newest page on the left, oldest on the right.
        self.fifo_pgn: deque[int] = deque()

    def vma(self, vmaid: int) -> Optional[VmArea]:
        """Return the area numbered ``vmaid``, or ``None``."""
        if 0 <= vmaid < len(self.mmap):
            return self.mmap[vmaid]
        return None

    def symbol(self, rgid: int) -> Optional[Region]:
        """Return the region bound to symbol ``rgid``, or ``None`` if out of range."""
        if 0 <= rgid < len(self.symrgtbl):
            return self.symrgtbl[rgid]
        return None

    def enlist_pgn(self, pgn: int) -> None:
        """Record ``pgn`` as the most recently mapped page."""
        self.fifo_pgn.appendleft(pgn)

    def find_victim_page(self) -> Optional[int]:
        """Remove and return the oldest mapped page, or ``None`` if there is none."""
        if not self.fifo_pgn:
            return None
        return self.fifo_pgn.pop()


def swap_copy_page(src: MemPhy, srcfpn: int, dst: MemPhy, dstfpn: int) -> None:
    """Copy one page-sized frame from ``src`` to ``dst``."""
    src_base = srcfpn * PAGING_PAGESZ
    dst_base = dstfpn * PAGING_PAGESZ
    for cell in range(PAGING_PAGESZ):
        dst.write(dst_base + cell, src.read(src_base + cell))


def alloc_pages_range(proc: Any, req_pgnum: int) -> list[int]:
    """Obtain ``req_pgnum`` RAM frames, swapping out victim pages when RAM is full."""
    mm: MemoryManager = proc.mm
    frames: list[int] = []
    for _ in range(req_pgnum):
        try:
            fpn = proc.mram.get_free_frame()
        except OutOfFramesError:
            vicpgn = mm.find_victim_page()
            if vicpgn is None:
                raise OutOfFramesError("no free frame and no page to swap out") from None
            vicfpn = pte_fpn(mm.pgd[vicpgn])
            swpfpn = proc.active_mswp.get_free_frame()
            swap_copy_page(proc.mram, vicfpn, proc.active_mswp, swpfpn)
            mm.pgd[vicpgn] = pte_set_swap(mm.pgd[vicpgn], 0, swpfpn)
            fpn = vicfpn
        frames.append(fpn)
    return frames


def vmap_page_range(proc: Any, addr: int, pgnum: int, frames: list[int]) -> Region:
    """Map ``pgnum`` pages starting at page-aligned ``addr`` onto ``frames``."""
    if len(frames) < pgnum:
        raise ValueError(f"{pgnum} pages requested but only {len(frames)} frames given")
    mm: MemoryManager = proc.mm
    pgn = page_number(addr)
    for fpn in frames[:pgnum]:
        if not pte_swapped(mm.pgd[pgn]):
            mm.pgd[pgn] = pte_set_fpn(mm.pgd[pgn], fpn)
            mm.enlist_pgn(pgn)
        pgn += 1
    return Region(addr, addr)


def vm_map_ram(proc: Any, astart: int, aend: int, mapstart: int, incpgnum: int) -> Region:
    """Allocate frames for ``incpgnum`` pages and map them from ``mapstart``."""
    frames = alloc_pages_range(proc, incpgnum)
    return vmap_page_range(proc, mapstart, incpgnum, frames)


def format_page_table(proc: Any, start: int, end: Optional[int] = -1) -> str:
    """Return a listing of page table entries between ``start`` and ``end``.

    An ``end`` of -1 (or ``None``) means the end of the first area.
    """
    if proc is None:
        return f"print_pgtbl: {start} - {end}NULL caller\n"
    if end is None or end == -1:
        end = proc.mm.vma(0).vm_end
    lines = [f"print_pgtbl: {start} - {end}\n"]
    for pgit in range(page_number(start), page_number(end)):
        lines.append(f"{pgit * 4:08d}: {proc.mm.pgd[pgit]:08x}\n")
    return "".join(lines)