import pytest

from ossim.common import (
    NUM_REGS,
    PAGE_SIZE,
    Instruction,
    Opcode,
    Process,
)


@pytest.mark.parametrize(
    "name,expected",
    [
        ("calc", Opcode.CALC),
        ("alloc", Opcode.ALLOC),
        ("free", Opcode.FREE),
        ("read", Opcode.READ),
        ("write", Opcode.WRITE),
    ],
)
def test_opcode_from_name(name, expected):
    assert Opcode.from_name(name) is expected


@pytest.mark.parametrize("name", ["jump", "CALC", "", "Alloc"])
def test_opcode_from_name_rejects_unknown(name):
    with pytest.raises(ValueError):
        Opcode.from_name(name)


def test_opcode_order_matches_encoding():
    names = ["calc", "alloc", "free", "read", "write"]
    assert [Opcode.from_name(name) for name in names] == list(Opcode)


def test_instruction_defaults():
    ins = Instruction(Opcode.CALC)
    assert (ins.arg_0, ins.arg_1, ins.arg_2) == (0, 0, 0)


def test_process_defaults():
    proc = Process(pid=1, priority=3)
    assert proc.regs == [0] * NUM_REGS
    assert proc.pc == 0
    assert proc.bp == PAGE_SIZE
    assert proc.code == []


def test_process_registers_are_independent():
    a = Process(pid=1, priority=0)
    b = Process(pid=2, priority=0)
    a.regs[0] = 99
    assert b.regs[0] == 0