"""Execution of one instruction of a process."""

from __future__ import annotations

from typing import Any

from .common import Instruction, Opcode
from .vm import pgalloc, pgfree_data, pgread, pgwrite


def run(proc: Any) -> Instruction:
    """Execute the instruction at the program counter and return it.

    Raises ``IndexError`` when the program counter is past the end of the code.
    """
    if proc.pc >= len(proc.code):
        raise IndexError(f"process {proc.pid} has no instruction at {proc.pc}")
    ins = proc.code[proc.pc]
    proc.pc += 1

    if ins.opcode == Opcode.CALC:
        pass
    elif ins.opcode == Opcode.ALLOC:
        pgalloc(proc, ins.arg_0, ins.arg_1)
    elif ins.opcode == Opcode.FREE:
        pgfree_data(proc, ins.arg_0)
    elif ins.opcode == Opcode.READ:
        pgread(proc, ins.arg_0, ins.arg_1, ins.arg_2)
    elif ins.opcode == Opcode.WRITE:
        pgwrite(proc, ins.arg_0, ins.arg_1, ins.arg_2)
    else:
        raise ValueError(f"unknown opcode {ins.opcode!r}")
    return ins