"""Bit-field helpers and the paging address and page-table-entry layout."""

BITS_PER_LONG = 32
BITS_PER_BYTE = 8

_WORD = (1 << BITS_PER_LONG) - 1


def _bit(nr: int) -> int:
    return 1 << nr


def _div_round_up(n: int, d: int) -> int:
    return (n + d - 1) // d


def genmask(h: int, l: int) -> int:
    """Return a 32-bit mask with bits ``l`` through ``h`` (inclusive) set."""
    if not 0 <= l <= h < BITS_PER_LONG:
        raise ValueError(f"invalid mask bounds h={h}, l={l}")
    return ((_WORD << l) & _WORD) & (_WORD >> (BITS_PER_LONG - h - 1))


def nbits(n: int) -> int:
    """Return the index of the highest set bit of a 32-bit value (0 for 0)."""
    n &= _WORD
    return max(n.bit_length() - 1, 0)


def extract_nbits(nr: int, h: int, l: int) -> int:
    """Return the field stored in bits ``l`` through ``h`` of ``nr``."""
    return (nr & genmask(h, l)) >> l


# CPU bus and paging geometry
PAGING_CPU_BUS_WIDTH = 22
PAGING_PAGESZ = 256
PAGING_MEMRAMSZ = _bit(10)
PAGING_MEMSWPSZ = _bit(14)
PAGING_SWPFPN_OFFSET = 5
PAGING_MAX_PGN = 16384
PAGING_SBRK_INIT_SZ = PAGING_PAGESZ

# Page table entry flag bits
PAGING_PTE_PRESENT_MASK = _bit(31)
PAGING_PTE_SWAPPED_MASK = _bit(30)
PAGING_PTE_RESERVE_MASK = _bit(29)
PAGING_PTE_DIRTY_MASK = _bit(28)
PAGING_PTE_EMPTY01_MASK = _bit(14)
PAGING_PTE_EMPTY02_MASK = _bit(13)

# Page table entry fields
PAGING_PTE_USRNUM_LOBIT = 15
PAGING_PTE_USRNUM_HIBIT = 27
PAGING_PTE_FPN_LOBIT = 0
PAGING_PTE_FPN_HIBIT = 12
PAGING_PTE_SWPTYP_LOBIT = 0
PAGING_PTE_SWPTYP_HIBIT = 4
PAGING_PTE_SWPOFF_LOBIT = 5
PAGING_PTE_SWPOFF_HIBIT = 25

PAGING_PTE_USRNUM_MASK = genmask(PAGING_PTE_USRNUM_HIBIT, PAGING_PTE_USRNUM_LOBIT)
PAGING_PTE_FPN_MASK = genmask(PAGING_PTE_FPN_HIBIT, PAGING_PTE_FPN_LOBIT)
PAGING_PTE_SWPTYP_MASK = genmask(PAGING_PTE_SWPTYP_HIBIT, PAGING_PTE_SWPTYP_LOBIT)
PAGING_PTE_SWPOFF_MASK = genmask(PAGING_PTE_SWPOFF_HIBIT, PAGING_PTE_SWPOFF_LOBIT)

# Virtual and physical address fields
PAGING_ADDR_OFFST_LOBIT = 0
PAGING_ADDR_OFFST_HIBIT = nbits(PAGING_PAGESZ) - 1
PAGING_ADDR_PGN_LOBIT = nbits(PAGING_PAGESZ)
PAGING_ADDR_PGN_HIBIT = PAGING_CPU_BUS_WIDTH - 1
PAGING_ADDR_FPN_LOBIT = nbits(PAGING_PAGESZ)
PAGING_ADDR_FPN_HIBIT = nbits(PAGING_MEMRAMSZ) - 1
PAGING_SWP_LOBIT = nbits(PAGING_PAGESZ)
PAGING_SWP_HIBIT = nbits(PAGING_MEMSWPSZ) - 1

PAGING_OFFST_MASK = genmask(PAGING_ADDR_OFFST_HIBIT, PAGING_ADDR_OFFST_LOBIT)
PAGING_PGN_MASK = genmask(PAGING_ADDR_PGN_HIBIT, PAGING_ADDR_PGN_LOBIT)
PAGING_FPN_MASK = genmask(PAGING_ADDR_FPN_HIBIT, PAGING_ADDR_FPN_LOBIT)
PAGING_SWP_MASK = genmask(PAGING_SWP_HIBIT, PAGING_SWP_LOBIT)


def _setval(v: int, value: int, mask: int, offst: int) -> int:
    return ((v & ~mask) | ((value << offst) & mask)) & _WORD


def _getval(v: int, mask: int, offst: int) -> int:
    return (v & mask) >> offst


def page_align(size: int) -> int:
    """Round ``size`` up to a whole number of pages."""
    return _div_round_up(size, PAGING_PAGESZ) * PAGING_PAGESZ


def page_number(addr: int) -> int:
    """Return the page number of a virtual address."""
    return _getval(addr, PAGING_PGN_MASK, PAGING_ADDR_PGN_LOBIT)


def page_offset(addr: int) -> int:
    """Return the offset of a virtual address within its page."""
    return _getval(addr, PAGING_OFFST_MASK, PAGING_ADDR_OFFST_LOBIT)


def pte_present(pte: int) -> bool:
    """True when the entry maps a page (in RAM or in swap)."""
    return bool(pte & PAGING_PTE_PRESENT_MASK)


def pte_swapped(pte: int) -> bool:
    """True when the mapped page lives in swap."""
    return bool(pte & PAGING_PTE_SWAPPED_MASK)


def pte_fpn(pte: int) -> int:
    """Return the RAM frame number held by an entry."""
    return _getval(pte, PAGING_PTE_FPN_MASK, PAGING_PTE_FPN_LOBIT)


def pte_swap_offset(pte: int) -> int:
    """Return the swap offset field of an entry."""
    return _getval(pte, PAGING_PTE_SWPOFF_MASK, PAGING_PTE_SWPOFF_LOBIT)


def pte_swap_frame(pte: int) -> int:
    """Return the swap frame selected by the swap-address bits of an entry."""
    return (pte & PAGING_SWP_MASK) >> PAGING_SWPFPN_OFFSET


def pte_set_fpn(pte: int, fpn: int) -> int:
    """Return ``pte`` marked present in RAM at frame ``fpn``."""
    pte = (pte | PAGING_PTE_PRESENT_MASK) & ~PAGING_PTE_SWAPPED_MASK & _WORD
    return _setval(pte, fpn, PAGING_PTE_FPN_MASK, PAGING_PTE_FPN_LOBIT)


def pte_set_swap(pte: int, swptyp: int, swpoff: int) -> int:
    """Return ``pte`` marked present in swap with the given type and offset."""
    pte = (pte | PAGING_PTE_PRESENT_MASK | PAGING_PTE_SWAPPED_MASK) & _WORD
    pte = _setval(pte, swptyp, PAGING_PTE_SWPTYP_MASK, PAGING_PTE_SWPTYP_LOBIT)
    return _setval(pte, swpoff, PAGING_PTE_SWPOFF_MASK, PAGING_PTE_SWPOFF_LOBIT)


def init_pte(pte: int, pre, fpn: int, drt, swp, swptyp: int, swpoff: int) -> int:
    """Return an initialised entry; an online page needs a non-zero frame."""
    if not pre:
        return pte
    pte |= PAGING_PTE_PRESENT_MASK
    if not swp:
        if fpn == 0:
            raise ValueError("an online page entry needs a non-zero frame number")
        pte &= ~(PAGING_PTE_SWAPPED_MASK | PAGING_PTE_DIRTY_MASK)
        return _setval(pte, fpn, PAGING_PTE_FPN_MASK, PAGING_PTE_FPN_LOBIT)
    pte |= PAGING_PTE_SWAPPED_MASK
    pte &= ~PAGING_PTE_DIRTY_MASK
    pte = _setval(pte, swptyp, PAGING_PTE_SWPTYP_MASK, PAGING_PTE_SWPTYP_LOBIT)
    return _setval(pte, swpoff, PAGING_PTE_SWPOFF_MASK, PAGING_PTE_SWPOFF_LOBIT)