from typing import List

from connect4.core.bitboard import Bitboard
from connect4.core.constants import ROWS, COLS

def board_matrix(board: Bitboard) -> List[List[int]]:
    """
    Row 0 is the TOP of the board, Row 5 the BOTTOM.
    Values: 0=Empty, 1=Red, 2=Blue
    """
    matrix = []
    for y in range(ROWS - 1, -1, -1):
        row = []
        for x in range(COLS):
            slot = board.slot_at(x, y)
            row.append(0 if slot is None else int(slot))
        matrix.append(row)
    return matrix

def get_visual_board(board: Bitboard) -> str:
    """ASCII grid with a column header."""
    header = " " + " ".join(str(i) for i in range(COLS))
    grid = board.display("X", "O", ".", "|", "|", "|", "\n")
    return header + grid.rstrip("\n")

def describe_status(board: Bitboard) -> str:
    status = board.game_status()
    if not status.is_over:
        return f"{status.turn.name.title()} to play"
    if status.result.is_tie:
        return "Game over: tie"
    return f"Game over: {status.result.winner.name.title()} wins"
