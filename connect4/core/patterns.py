# connect4/core/patterns.py
"""
Win pattern table.

Every four-in-a-row geometry that fits on the board is stored as a single
bit mask in the board's column layout. A color has won when one of the masks
is fully contained in its occupancy word.
"""
from typing import Dict, List, Optional

from .constants import ROWS, COLS, HEIGHT

# (column step, row step): horizontal, vertical, diagonal /, diagonal \
DIRECTIONS = [(1, 0), (0, 1), (1, 1), (1, -1)]


def cell_bit(col: int, row: int) -> int:
    """Bit of the cell at (col, row), row 0 being the bottom."""
    return 1 << (col * HEIGHT + row)


def _build_table() -> List[int]:
    masks = []
    for dc, dr in DIRECTIONS:
        for c in range(COLS):
            for r in range(ROWS):
                end_c, end_r = c + 3 * dc, r + 3 * dr
                if not (0 <= end_c < COLS and 0 <= end_r < ROWS):
                    continue
                mask = 0
                for i in range(4):
                    mask |= cell_bit(c + i * dc, r + i * dr)
                masks.append(mask)
    return masks


def _index_by_cell(masks: List[int]) -> Dict[int, List[int]]:
    index: Dict[int, List[int]] = {}
    for mask in masks:
        bits = mask
        while bits:
            low = bits & -bits
            index.setdefault(low, []).append(mask)
            bits ^= low
    return index


WIN_MASKS: List[int] = _build_table()
# Masks keyed by each cell bit they cover
MASKS_BY_CELL: Dict[int, List[int]] = _index_by_cell(WIN_MASKS)


def has_four(occupancy: int, last_cell: Optional[int] = None) -> bool:
    """
    Checks whether 'occupancy' contains a four-in-a-row.
    When 'last_cell' (a single cell bit) is given, only the patterns through
    that cell are tested.
    """
    masks = WIN_MASKS if last_cell is None else MASKS_BY_CELL.get(last_cell, ())
    for mask in masks:
        if occupancy & mask == mask:
            return True
    return False
