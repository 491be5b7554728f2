import pytest

from ossim.bitops import PAGING_PAGESZ
from ossim.common import Instruction, Opcode, Process
from ossim.cpu import run
from ossim.memphy import MemoryAccessError, MemPhy
from ossim.mm import MemoryManager, Region


def make_proc(code):
    proc = Process(pid=7, priority=0, code=list(code))
    proc.mm = MemoryManager()
    proc.mram = MemPhy(4 * PAGING_PAGESZ)
    proc.mswp = [MemPhy(16 * PAGING_PAGESZ)]
    proc.active_mswp = proc.mswp[0]
    return proc


def test_calc_advances_pc_only():
    proc = make_proc([Instruction(Opcode.CALC)])
    regs = list(proc.regs)
    ins = run(proc)
    assert ins.opcode == Opcode.CALC
    assert proc.pc == 1
    assert proc.regs == regs


def test_run_past_end_raises():
    proc = make_proc([Instruction(Opcode.CALC)])
    run(proc)
    with pytest.raises(IndexError):
        run(proc)


def test_program_alloc_write_read_free(capsys):
    proc = make_proc(
        [
            Instruction(Opcode.ALLOC, 300, 0),
            Instruction(Opcode.WRITE, 100, 0, 20),
            Instruction(Opcode.READ, 0, 20, 3),
            Instruction(Opcode.FREE, 0),
        ]
    )
    executed = [run(proc).opcode for _ in range(4)]
    assert executed == [Opcode.ALLOC, Opcode.WRITE, Opcode.READ, Opcode.FREE]
    assert proc.regs[3] == 100
    assert proc.mm.vma(0).free_regions[0] == Region(0, 300)
    out = capsys.readouterr().out
    assert "alloc region=0 size=300 for process 7" in out
    assert "write region=0 offset=20 value=100" in out
    assert "read region=0 offset=20 value=100" in out


def test_read_unallocated_region_raises_and_advances_pc():
    proc = make_proc([Instruction(Opcode.READ, 1, 0, 2)])
    with pytest.raises(MemoryAccessError):
        run(proc)
    assert proc.pc == 1