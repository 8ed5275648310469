# connect4/core/search_tree.py
"""
Monte Carlo search tree stored as an arena.

Nodes live in one list and refer to each other by index: 'parent' is a
non-owning back-reference used only to walk back up during backpropagation,
and 'children' holds one optional index per column. The arena is built for a
single search and dropped as a whole afterwards.
"""
import math
import random
from typing import List, Optional

from .bitboard import Bitboard, GameResult, Player
from .constants import COLS, EXPLORATION_CONSTANT, WIN_REWARD, TIE_REWARD, LOSS_REWARD


class SearchNode:
    __slots__ = ("board", "parent", "mover", "children", "visits", "value", "untried")

    def __init__(self, board: Bitboard, parent: Optional[int], mover: Optional[Player]):
        self.board = board
        self.parent = parent
        # Player who made the move leading here (None for the root)
        self.mover = mover
        self.children: List[Optional[int]] = [None] * COLS
        self.visits = 0
        self.value = 0.0
        self.untried: List[int] = board.legal_moves()

    @property
    def has_children(self) -> bool:
        return any(child is not None for child in self.children)


def reward_for(result: GameResult, mover: Optional[Player]) -> float:
    """Value of a finished rollout seen by the player who moved into a node."""
    if result.is_tie:
        return TIE_REWARD
    return WIN_REWARD if result.winner == mover else LOSS_REWARD


class SearchTree:
    ROOT = 0

    def __init__(self, board: Bitboard, rng: random.Random):
        self.rng = rng
        # The caller's board is never touched
        self.nodes: List[SearchNode] = [SearchNode(board.copy(), None, None)]

    def __len__(self) -> int:
        return len(self.nodes)

    @property
    def root(self) -> SearchNode:
        return self.nodes[self.ROOT]

    # --- Selection ---

    def uct_score(self, node: SearchNode, parent_visits: int) -> float:
        exploitation = node.value / node.visits
        exploration = EXPLORATION_CONSTANT * math.sqrt(math.log(parent_visits) / node.visits)
        return exploitation + exploration

    def best_uct_child(self, index: int) -> int:
        parent = self.nodes[index]
        best_index = None
        best_score = -math.inf
        # Strict comparison keeps the lowest column on ties
        for child_index in parent.children:
            if child_index is None:
                continue
            score = self.uct_score(self.nodes[child_index], parent.visits)
            if score > best_score:
                best_score = score
                best_index = child_index
        return best_index

    def select(self) -> int:
        """Descends from the root through fully expanded nodes."""
        index = self.ROOT
        node = self.nodes[index]
        while not node.untried and node.has_children:
            index = self.best_uct_child(index)
            node = self.nodes[index]
        return index

    # --- Expansion ---

    def expand(self, index: int) -> int:
        """
        Materializes one unexpanded column of the node and returns the new
        child's index. Terminal nodes have nothing to expand and are returned
        unchanged.
        """
        node = self.nodes[index]
        if not node.untried:
            return index

        column = node.untried.pop(self.rng.randrange(len(node.untried)))
        board = node.board.copy()
        mover = board.active_player()
        board.play_move(column)

        self.nodes.append(SearchNode(board, index, mover))
        child_index = len(self.nodes) - 1
        node.children[column] = child_index
        return child_index

    # --- Simulation ---

    def rollout(self, index: int) -> GameResult:
        """Plays uniformly random moves on a scratch board until the game ends."""
        board = self.nodes[index].board.copy()
        status = board.game_status()
        while not status.is_over:
            board.play_move(self.rng.choice(board.legal_moves()))
            status = board.game_status()
        return status.result

    # --- Backpropagation ---

    def backpropagate(self, index: int, result: GameResult) -> None:
        stack = [index]
        parent = self.nodes[index].parent
        while parent is not None:
            stack.append(parent)
            parent = self.nodes[parent].parent

        while stack:
            node = self.nodes[stack.pop()]
            node.visits += 1
            if node.mover is not None:
                node.value += reward_for(result, node.mover)

    # --- Final choice ---

    def most_visited_column(self) -> Optional[int]:
        best_column = None
        best_visits = -1
        for column, child_index in enumerate(self.root.children):
            if child_index is None:
                continue
            visits = self.nodes[child_index].visits
            if visits > best_visits:
                best_visits = visits
                best_column = column
        return best_column
