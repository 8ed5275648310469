import asyncio
import logging
import time
from typing import Optional

from backend.app.core.level_registry import registry
from connect4.core.bitboard import Bitboard
from connect4.core.boundary import ai_move

logger = logging.getLogger(__name__)


class ConnectFourAI:
    """Bot player backed by the MCTS engine, with its budget taken from the level config."""

    def __init__(self, level: Optional[int] = None):
        config = registry.get(level)
        self.level = level
        self.label = config.label
        self.rollouts = config.rollouts

    def get_move(self, board: Bitboard) -> int:
        """
        Blocking search on a snapshot of 'board'.
        Raises SearchUnavailable when the engine cannot answer.
        """
        start_time = time.time()
        column = ai_move(board.copy(), self.rollouts)
        duration = round(time.time() - start_time, 3)
        logger.info(
            "Bot (%s, %d rollouts) plays column %d in %.3fs",
            self.label, self.rollouts, column, duration,
        )
        return column

    async def get_move_async(self, board: Bitboard) -> int:
        # The search is pure CPU work; keep it off the event loop
        return await asyncio.to_thread(self.get_move, board)
