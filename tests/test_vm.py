import pytest

from ossim.bitops import PAGING_PAGESZ, page_align, pte_present, pte_swapped
from ossim.common import Process
from ossim.memphy import MemoryAccessError, MemPhy, OutOfFramesError
from ossim.mm import MemoryManager, Region
from ossim import vm


def make_proc(ram_size=4 * PAGING_PAGESZ, swap_size=16 * PAGING_PAGESZ):
    proc = Process(pid=1, priority=0)
    proc.mm = MemoryManager()
    proc.mram = MemPhy(ram_size)
    proc.mswp = [MemPhy(swap_size)]
    proc.active_mswp = proc.mswp[0]
    return proc


def test_alloc_grows_break_and_maps_pages():
    proc = make_proc()
    addr = vm.alloc_region(proc, 0, 0, 300)
    area = proc.mm.vma(0)
    assert addr == 0
    assert area.sbrk == 300
    assert area.vm_end == page_align(300)
    assert proc.mm.symbol(0) == Region(0, 300)
    assert pte_present(proc.mm.pgd[0]) and pte_present(proc.mm.pgd[1])
    assert not pte_present(proc.mm.pgd[2])


def test_second_alloc_within_mapped_page_maps_nothing_new():
    proc = make_proc()
    vm.alloc_region(proc, 0, 0, 300)
    free_before = len(proc.mram.free_frames)
    addr = vm.alloc_region(proc, 0, 1, 100)
    assert addr == 300
    assert proc.mm.symbol(1) == Region(300, 400)
    assert len(proc.mram.free_frames) == free_before


def test_write_then_read_round_trip():
    proc = make_proc()
    vm.alloc_region(proc, 0, 0, 300)
    vm.alloc_region(proc, 0, 1, 100)
    vm.write_region(proc, 0, 1, 5, 42)
    vm.write_region(proc, 0, 0, 7, -3)
    assert vm.read_region(proc, 0, 1, 5) == 42
    assert vm.read_region(proc, 0, 0, 7) == -3


def test_freed_region_is_reused_first_fit():
    proc = make_proc()
    vm.alloc_region(proc, 0, 0, 300)
    vm.free_region(proc, 0, 0)
    assert proc.mm.vma(0).free_regions[0] == Region(0, 300)
    assert vm.alloc_region(proc, 0, 1, 100) == 0
    assert proc.mm.vma(0).free_regions[0] == Region(100, 300)
    assert vm.alloc_region(proc, 0, 2, 200) == 100
    assert proc.mm.vma(0).free_regions == [Region(0, 0)]
    assert proc.mm.vma(0).sbrk == 300


def test_get_free_vmrg_area_none_when_nothing_fits():
    proc = make_proc()
    assert vm.get_free_vmrg_area(proc, 0, 10) is None


def test_enlist_rejects_empty_region():
    mm = MemoryManager()
    with pytest.raises(ValueError):
        vm.enlist_vm_freerg_list(mm, Region(5, 5))


def test_enlist_puts_region_at_head():
    mm = MemoryManager()
    vm.enlist_vm_freerg_list(mm, Region(10, 20))
    vm.enlist_vm_freerg_list(mm, Region(30, 40))
    assert mm.vma(0).free_regions[:2] == [Region(30, 40), Region(10, 20)]


def test_invalid_ids_raise():
    proc = make_proc()
    with pytest.raises(ValueError):
        vm.alloc_region(proc, 0, 30, 10)
    with pytest.raises(ValueError):
        vm.read_region(proc, 1, 0, 0)
    with pytest.raises(ValueError):
        vm.free_region(proc, 0, -1)


def test_read_unmapped_page_raises():
    proc = make_proc()
    with pytest.raises(MemoryAccessError):
        vm.read_region(proc, 0, 5, 0)


def test_swapping_preserves_contents():
    proc = make_proc(ram_size=2 * PAGING_PAGESZ)
    vm.alloc_region(proc, 0, 0, 2 * PAGING_PAGESZ)
    vm.write_region(proc, 0, 0, 0, 11)
    vm.write_region(proc, 0, 0, PAGING_PAGESZ, 22)

    vm.alloc_region(proc, 0, 1, PAGING_PAGESZ)
    assert pte_swapped(proc.mm.pgd[0])
    vm.write_region(proc, 0, 1, 0, 33)

    assert vm.read_region(proc, 0, 0, 0) == 11
    assert not pte_swapped(proc.mm.pgd[0])
    assert vm.read_region(proc, 0, 0, PAGING_PAGESZ) == 22
    assert vm.read_region(proc, 0, 1, 0) == 33
    assert vm.read_region(proc, 0, 0, 0) == 11


def test_out_of_frames_when_swap_is_full():
    proc = make_proc(ram_size=PAGING_PAGESZ, swap_size=0)
    vm.alloc_region(proc, 0, 0, PAGING_PAGESZ)
    with pytest.raises(OutOfFramesError):
        vm.alloc_region(proc, 0, 1, PAGING_PAGESZ)


def test_pgalloc_reports(capsys):
    proc = make_proc()
    addr = vm.pgalloc(proc, 300, 0)
    out = capsys.readouterr().out
    assert addr == 0
    assert "alloc region=0 size=300 for process 1" in out
    assert f"print_pgtbl: 0 - {page_align(300)}" in out


def test_pgread_stores_register_and_reports(capsys):
    proc = make_proc()
    vm.alloc_region(proc, 0, 0, 50)
    vm.write_region(proc, 0, 0, 3, 9)
    assert vm.pgread(proc, 0, 3, 4) == 9
    assert proc.regs[4] == 9
    out = capsys.readouterr().out
    assert "read region=0 offset=3 value=9" in out
    assert "RAM content:" in out


def test_pgread_rejects_bad_register():
    proc = make_proc()
    vm.alloc_region(proc, 0, 0, 50)
    with pytest.raises(ValueError):
        vm.pgread(proc, 0, 0, len(proc.regs))


def test_pgwrite_then_pgread(capsys):
    proc = make_proc()
    vm.pgalloc(proc, 50, 2)
    vm.pgwrite(proc, 65, 2, 3)
    out = capsys.readouterr().out
    assert "write region=2 offset=3 value=65" in out
    assert vm.read_region(proc, 0, 2, 3) == 65


def test_pgfree_data_enlists_region():
    proc = make_proc()
    vm.alloc_region(proc, 0, 3, 120)
    vm.pgfree_data(proc, 3)
    assert proc.mm.vma(0).free_regions[0] == Region(0, 120)


def test_free_pcb_memph_returns_all_frames():
    proc = make_proc()
    total = len(proc.mram.free_frames)
    vm.alloc_region(proc, 0, 0, 2 * PAGING_PAGESZ)
    assert len(proc.mram.free_frames) == total - 2
    vm.free_pcb_memph(proc)
    assert sorted(proc.mram.free_frames) == list(range(total))
    assert not any(proc.mm.pgd)
    assert proc.mm.find_victim_page() is None