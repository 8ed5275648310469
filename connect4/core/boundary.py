# connect4/core/boundary.py
"""
Narrow call surface of the move-selection engine.

'c4_ai_move' speaks the two-word wire format and answers with a column index
or NO_MOVE; it never raises. 'ai_move' is the thin board-level wrapper that
refuses finished games before spending any budget.
"""
import logging
import random
from typing import Optional

from .bitboard import Bitboard
from .constants import NO_MOVE, MAX_U64, MAX_U32
from .errors import SearchUnavailable
from .mcts import MonteCarloEngine

logger = logging.getLogger(__name__)


def c4_ai_move(red_pieces: int, blue_pieces: int, tree_size: int,
               rng: Optional[random.Random] = None) -> int:
    if not (0 <= red_pieces <= MAX_U64 and 0 <= blue_pieces <= MAX_U64):
        logger.warning("Board words out of 64-bit range")
        return NO_MOVE
    if not 0 <= tree_size <= MAX_U32:
        logger.warning("Iteration budget out of 32-bit range: %d", tree_size)
        return NO_MOVE

    try:
        board = Bitboard.deserialize(red_pieces, blue_pieces)
    except ValueError as e:
        logger.warning("Rejected board words %#x / %#x: %s", red_pieces, blue_pieces, e)
        return NO_MOVE

    column = MonteCarloEngine(rng).best_move(board, tree_size)
    return column if 0 <= column < NO_MOVE else NO_MOVE


def ai_move(board: Bitboard, rollout_number: int,
            rng: Optional[random.Random] = None) -> int:
    """
    Best column for the side to move on 'board'.
    Raises SearchUnavailable for finished games or when no move comes back.
    """
    if board.game_status().is_over:
        raise SearchUnavailable("Game is already over")

    red_pieces, blue_pieces = board.serialize()
    column = c4_ai_move(red_pieces, blue_pieces, rollout_number, rng)
    if column == NO_MOVE:
        raise SearchUnavailable(f"Engine found no move with {rollout_number} rollouts")
    return column
