# connect4/core/mcts.py
import logging
import random
from typing import Optional

from .bitboard import Bitboard
from .constants import NO_MOVE
from .search_tree import SearchTree

logger = logging.getLogger(__name__)


class MonteCarloEngine:
    """
    Runs a fixed number of MCTS iterations from a board and picks the most
    visited root child. Every call builds and discards its own tree.
    """

    def __init__(self, rng: Optional[random.Random] = None):
        self.rng = rng or random.Random()

    def search(self, board: Bitboard, iterations: int) -> SearchTree:
        """Grows a fresh tree rooted at 'board' with exactly 'iterations' iterations."""
        tree = SearchTree(board, self.rng)
        for _ in range(iterations):
            self._iterate(tree)
        return tree

    def best_move(self, board: Bitboard, iterations: int) -> int:
        """
        Returns a legal column, or NO_MOVE when the tree never got a child
        (zero budget or no legal move on the board).
        """
        tree = self.search(board, iterations)
        column = tree.most_visited_column()

        if column is None:
            logger.debug("No move found after %d iterations", iterations)
            return NO_MOVE

        child = tree.nodes[tree.root.children[column]]
        logger.debug(
            "MCTS picked column %d (%d visits, %.3f value) over %d iterations, %d nodes",
            column, child.visits, child.value / child.visits, iterations, len(tree),
        )
        return column

    def _iterate(self, tree: SearchTree) -> None:
        # 1. Selection
        leaf = tree.select()
        # 2. Expansion (no-op on terminal nodes)
        node = tree.expand(leaf)
        # 3. Simulation
        result = tree.rollout(node)
        # 4. Backpropagation
        tree.backpropagate(node, result)
