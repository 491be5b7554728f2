"""Virtual memory operations: region allocation, paging and swapping."""

from __future__ import annotations

from typing import Any, Optional

from .bitops import (
    PAGING_ADDR_FPN_LOBIT,
    PAGING_PAGESZ,
    page_align,
    page_number,
    page_offset,
    pte_fpn,
    pte_present,
    pte_set_fpn,
    pte_set_swap,
    pte_swap_offset,
    pte_swapped,
)
from .memphy import MemoryAccessError, OutOfFramesError
from .mm import MemoryManager, Region, VmArea, format_page_table, swap_copy_page, vm_map_ram

_U32 = 0xFFFFFFFF


def _signed_byte(value: int) -> int:
    value &= 0xFF
    return value - 256 if value > 127 else value


def _area(mm: MemoryManager, vmaid: int) -> VmArea:
    area = mm.vma(vmaid)
    if area is None:
        raise ValueError(f"no virtual memory area {vmaid}")
    return area


def _symbol(mm: MemoryManager, rgid: int) -> Region:
    region = mm.symbol(rgid)
    if region is None:
        raise ValueError(f"region id {rgid} outside the symbol table")
    return region


def enlist_vm_freerg_list(mm: MemoryManager, region: Region) -> None:
    """Put ``region`` at the head of the first area's free list."""
    if region.rg_start >= region.rg_end:
        raise ValueError(f"empty region [{region.rg_start}, {region.rg_end})")
    _area(mm, 0).free_regions.insert(0, Region(region.rg_start, region.rg_end))


def get_free_vmrg_area(proc: Any, vmaid: int, size: int) -> Optional[Region]:
    """Carve ``size`` bytes from the first free region that fits, or return ``None``."""
    area = _area(proc.mm, vmaid)
    for index, free in enumerate(area.free_regions):
        if free.rg_start + size <= free.rg_end:
            found = Region(free.rg_start, free.rg_start + size)
            if found.rg_end < free.rg_end:
                free.rg_start = found.rg_end
            else:
                del area.free_regions[index]
            return found
    return None


def inc_vma_limit(proc: Any, vmaid: int, inc_sz: int) -> Region:
    """Grow the area's break by ``inc_sz`` bytes, mapping new pages as needed."""
    area = _area(proc.mm, vmaid)
    inc_amt = page_align(inc_sz)
    new_region = Region(area.sbrk, area.sbrk + inc_sz)
    old_end = area.vm_end

    area.sbrk += inc_sz
    if area.sbrk > area.vm_end:
        area.vm_end += inc_amt
    incnumpage = (area.vm_end - old_end) // PAGING_PAGESZ
    vm_map_ram(proc, new_region.rg_start, new_region.rg_end, old_end, incnumpage)
    return new_region


def alloc_region(proc: Any, vmaid: int, rgid: int, size: int) -> int:
    """Allocate ``size`` bytes for symbol ``rgid`` and return its start address."""
    mm: MemoryManager = proc.mm
    symbol = _symbol(mm, rgid)
    found = get_free_vmrg_area(proc, vmaid, size)
    if found is None:
        found = inc_vma_limit(proc, vmaid, size)
    symbol.rg_start = found.rg_start
    symbol.rg_end = found.rg_end
    return found.rg_start


def free_region(proc: Any, vmaid: int, rgid: int) -> None:
    """Return the region of symbol ``rgid`` to the free list."""
    symbol = _symbol(proc.mm, rgid)
    if symbol.rg_start < symbol.rg_end:
        enlist_vm_freerg_list(proc.mm, symbol)


def pg_getpage(mm: MemoryManager, pgn: int, proc: Any) -> int:
    """Return the RAM frame of page ``pgn``, swapping it in if needed."""
    pte = mm.pgd[pgn]
    if not pte_present(pte):
        raise MemoryAccessError(f"page {pgn} is not mapped")
    if not pte_swapped(pte):
        return pte_fpn(pte)

    tgtfpn = pte_swap_offset(pte)
    vicpgn = mm.find_victim_page()
    if vicpgn is None:
        raise OutOfFramesError("no page in RAM to swap out")
    vicfpn = pte_fpn(mm.pgd[vicpgn])
    swpfpn = proc.active_mswp.get_free_frame()

    swap_copy_page(proc.mram, vicfpn, proc.active_mswp, swpfpn)
    swap_copy_page(proc.active_mswp, tgtfpn, proc.mram, vicfpn)

    mm.pgd[vicpgn] = pte_set_swap(mm.pgd[vicpgn], 0, swpfpn)
    mm.pgd[pgn] = pte_set_fpn(mm.pgd[pgn], vicfpn)
    mm.enlist_pgn(pgn)
    return vicfpn


def _physical_address(mm: MemoryManager, addr: int, proc: Any) -> int:
    fpn = pg_getpage(mm, page_number(addr), proc)
    return (fpn << PAGING_ADDR_FPN_LOBIT) + page_offset(addr)


def pg_getval(mm: MemoryManager, addr: int, proc: Any) -> int:
    """Read the byte at virtual address ``addr``."""
    return proc.mram.read(_physical_address(mm, addr, proc))


def pg_setval(mm: MemoryManager, addr: int, value: int, proc: Any) -> None:
    """Write ``value`` to the byte at virtual address ``addr``."""
    proc.mram.write(_physical_address(mm, addr, proc), value)


def read_region(proc: Any, vmaid: int, rgid: int, offset: int) -> int:
    """Read the byte at ``offset`` within the region of symbol ``rgid``."""
    symbol = _symbol(proc.mm, rgid)
    _area(proc.mm, vmaid)
    return pg_getval(proc.mm, symbol.rg_start + offset, proc)


def write_region(proc: Any, vmaid: int, rgid: int, offset: int, value: int) -> None:
    """Write ``value`` at ``offset`` within the region of symbol ``rgid``."""
    symbol = _symbol(proc.mm, rgid)
    _area(proc.mm, vmaid)
    pg_setval(proc.mm, symbol.rg_start + offset, value, proc)


def pgalloc(proc: Any, size: int, reg_index: int) -> int:
    """Allocate ``size`` bytes for register region ``reg_index`` and report it."""
    addr = alloc_region(proc, 0, reg_index, size)
    print(f"alloc region={reg_index} size={size} for process {proc.pid}")
    print(format_page_table(proc, 0, -1), end="")
    return addr


def pgfree_data(proc: Any, reg_index: int) -> None:
    """Free the region of register ``reg_index``."""
    free_region(proc, 0, reg_index)


def pgread(proc: Any, source: int, offset: int, destination: int) -> int:
    """Read a byte of region ``source`` into register ``destination`` and report it."""
    if not 0 <= destination < len(proc.regs):
        raise ValueError(f"no register {destination}")
    data = read_region(proc, 0, source, offset)
    proc.regs[destination] = data & _U32
    print(f"read region={source} offset={offset} value={data}")
    print(format_page_table(proc, 0, -1), end="")
    print(proc.mram.dump(), end="")
    return data


def pgwrite(proc: Any, data: int, destination: int, offset: int) -> None:
    """Report, then write the byte ``data`` into region ``destination``."""
    value = _signed_byte(data)
    print(f"write region={destination} offset={offset} value={value}")
    print(format_page_table(proc, 0, -1), end="")
    print(proc.mram.dump(), end="")
    write_region(proc, 0, destination, offset, value)


def free_pcb_memph(proc: Any) -> None:
    """Release every RAM and swap frame mapped by the process and clear its table."""
    mm: MemoryManager = proc.mm
    for pte in mm.pgd:
        if not pte_present(pte):
            continue
        if pte_swapped(pte):
            proc.active_mswp.put_free_frame(pte_swap_offset(pte))
        else:
            proc.mram.put_free_frame(pte_fpn(pte))
    mm.pgd = [0] * len(mm.pgd)
    mm.fifo_pgn.clear()