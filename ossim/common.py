"""Shared configuration, instructions and the process control block."""

from __future__ import annotations

import enum
from dataclasses import dataclass, field
from typing import Any, Optional

# Address layout
ADDRESS_SIZE = 20
OFFSET_LEN = 10
FIRST_LV_LEN = 5
SECOND_LV_LEN = 5
SEGMENT_LEN = FIRST_LV_LEN
PAGE_LEN = SECOND_LV_LEN

NUM_PAGES = 1 << (ADDRESS_SIZE - OFFSET_LEN)
PAGE_SIZE = 1 << OFFSET_LEN

# Simulator configuration
MAX_PRIO = 140
PAGING_MAX_MMSWP = 4
PAGING_MAX_SYMTBL_SZ = 30
NUM_REGS = 10


class Opcode(enum.IntEnum):
    """Instructions a simulated CPU can execute."""

    CALC = 0
    ALLOC = 1
    FREE = 2
    READ = 3
    WRITE = 4

    @classmethod
    def from_name(cls, name: str) -> "Opcode":
        """Return the opcode spelt ``name`` in a process description."""
        for member in cls:
            if member.name.lower() == name:
                return member
        raise ValueError(f"Opcode: {name}")


@dataclass
class Instruction:
    """One instruction with up to three unsigned arguments."""

    opcode: Opcode
    arg_0: int = 0
    arg_1: int = 0
    arg_2: int = 0


@dataclass
class Process:
    """Process control block."""

    pid: int
    priority: int
    code: list[Instruction] = field(default_factory=list)
    regs: list[int] = field(default_factory=lambda: [0] * NUM_REGS)
    pc: int = 0
    prio: int = 0
    mm: Optional[Any] = None
    mram: Optional[Any] = None
    mswp: list[Any] = field(default_factory=list)
    active_mswp: Optional[Any] = None
    bp: int = PAGE_SIZE