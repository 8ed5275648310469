import random
import unittest

from connect4.core.bitboard import Bitboard, GameResult, Player, TIE
from connect4.core.boundary import c4_ai_move, ai_move
from connect4.core.constants import NO_MOVE, COLS, PLAYABLE_MASK, TURN_BIT
from connect4.core.errors import SearchUnavailable
from connect4.core.mcts import MonteCarloEngine
from connect4.core.patterns import cell_bit
from connect4.core.search_tree import SearchTree, reward_for


def play_game(moves):
    board = Bitboard.empty()
    for col in moves:
        board.play_move(col)
    return board


class TestSearchTree(unittest.TestCase):
    def setUp(self):
        self.rng = random.Random(3)

    def test_root_is_a_copy(self):
        board = play_game([3])
        tree = SearchTree(board, self.rng)
        tree.root.board.play_move(4)
        self.assertIsNone(board.slot_at(4, 0))

    def test_expand_creates_child_for_column(self):
        board = Bitboard.empty()
        tree = SearchTree(board, self.rng)
        child_index = tree.expand(SearchTree.ROOT)

        self.assertEqual(len(tree), 2)
        self.assertEqual(len(tree.root.untried), COLS - 1)
        column = tree.root.children.index(child_index)
        child = tree.nodes[child_index]
        self.assertEqual(child.parent, SearchTree.ROOT)
        self.assertEqual(child.mover, Player.RED)
        self.assertEqual(child.board.slot_at(column, 0), Player.RED)

    def test_terminal_node_is_not_expanded(self):
        board = play_game([0, 1, 0, 1, 0, 1, 0])
        tree = SearchTree(board, self.rng)
        self.assertEqual(tree.root.untried, [])
        self.assertEqual(tree.expand(SearchTree.ROOT), SearchTree.ROOT)
        self.assertEqual(tree.rollout(SearchTree.ROOT), GameResult(Player.RED))

    def test_rollout_leaves_node_untouched(self):
        tree = SearchTree(Bitboard.empty(), self.rng)
        result = tree.rollout(SearchTree.ROOT)
        self.assertIsInstance(result, GameResult)
        self.assertEqual(tree.root.board, Bitboard.empty())
        self.assertEqual(len(tree), 1)

    def test_backpropagate_walks_to_root(self):
        tree = SearchTree(Bitboard.empty(), self.rng)
        first = tree.expand(SearchTree.ROOT)
        tree.nodes[first].untried = tree.nodes[first].untried[:1]
        second = tree.expand(first)

        # Blue moved into 'second', Red moved into 'first'
        tree.backpropagate(second, GameResult(Player.BLUE))
        self.assertEqual(tree.root.visits, 1)
        self.assertEqual(tree.nodes[first].visits, 1)
        self.assertEqual(tree.nodes[first].value, 0.0)
        self.assertEqual(tree.nodes[second].visits, 1)
        self.assertEqual(tree.nodes[second].value, 1.0)

        tree.backpropagate(second, TIE)
        self.assertEqual(tree.nodes[first].value, 0.5)
        self.assertEqual(tree.nodes[second].value, 1.5)

    def test_backpropagate_deep_chain(self):
        """A long line of nodes is updated without recursion."""
        tree = SearchTree(Bitboard.empty(), self.rng)
        index = SearchTree.ROOT
        for _ in range(30):
            if tree.nodes[index].board.game_status().is_over:
                break
            index = tree.expand(index)
        depth = len(tree)
        tree.backpropagate(index, TIE)
        self.assertTrue(all(node.visits == 1 for node in tree.nodes[:depth]))

    def test_reward_perspective(self):
        self.assertEqual(reward_for(GameResult(Player.RED), Player.RED), 1.0)
        self.assertEqual(reward_for(GameResult(Player.RED), Player.BLUE), 0.0)
        self.assertEqual(reward_for(TIE, Player.BLUE), 0.5)

    def test_selection_tie_goes_to_lowest_column(self):
        tree = SearchTree(Bitboard.empty(), self.rng)
        while tree.root.untried:
            tree.expand(SearchTree.ROOT)
        for child_index in tree.root.children:
            tree.backpropagate(child_index, TIE)
        self.assertEqual(tree.select(), tree.root.children[0])

    def test_most_visited_column(self):
        tree = SearchTree(Bitboard.empty(), self.rng)
        self.assertIsNone(tree.most_visited_column())
        while tree.root.untried:
            tree.expand(SearchTree.ROOT)
        tree.nodes[tree.root.children[5]].visits = 9
        tree.nodes[tree.root.children[2]].visits = 9
        self.assertEqual(tree.most_visited_column(), 2)


class TestMonteCarloEngine(unittest.TestCase):
    def setUp(self):
        self.engine = MonteCarloEngine(random.Random(11))

    def test_zero_budget_returns_sentinel(self):
        self.assertEqual(self.engine.best_move(Bitboard.empty(), 0), NO_MOVE)

    def test_finished_board_returns_sentinel(self):
        board = play_game([0, 1, 0, 1, 0, 1, 0])
        self.assertEqual(self.engine.best_move(board, 50), NO_MOVE)

    def test_single_iteration_returns_legal_column(self):
        board = Bitboard.empty()
        self.assertTrue(board.is_move_legal(self.engine.best_move(board, 1)))

    def test_budget_is_exact_iteration_count(self):
        """A budget of N visits the root exactly N times, split among its children."""
        for iterations in (1, 2, 37, 200):
            tree = self.engine.search(play_game([3, 2]), iterations)
            self.assertEqual(tree.root.visits, iterations)
            child_visits = sum(tree.nodes[child].visits for child in tree.root.children if child is not None)
            self.assertEqual(child_visits, iterations)

    def test_does_not_mutate_input(self):
        board = play_game([3, 3, 4])
        before = board.serialize()
        self.engine.best_move(board, 100)
        self.assertEqual(board.serialize(), before)

    def test_legality_closure(self):
        """Any reachable running position gets a legal answer."""
        rng = random.Random(5)
        for _ in range(20):
            board = Bitboard.empty()
            for _ in range(rng.randrange(0, 30)):
                if board.game_status().is_over:
                    break
                board.play_move(rng.choice(board.legal_moves()))
            if board.game_status().is_over:
                continue
            column = self.engine.best_move(board, 30)
            self.assertTrue(board.is_move_legal(column))

    def test_only_one_legal_column(self):
        """
        Scenario: every column but 6 is full and nobody has won; the engine
        must answer 6.
        """
        # Alternate pairs of rows so no color lines up four
        red = 0
        for c in range(6):
            for r in range(6):
                if (r // 2 + c) % 2 == 0:
                    red |= cell_bit(c, r)
        blue = PLAYABLE_MASK & ~red & ~sum(cell_bit(6, r) for r in range(6))
        board = Bitboard.deserialize(red, blue)
        self.assertFalse(board.game_status().is_over)
        self.assertEqual(self.engine.best_move(board, 20), 6)

    def test_finds_immediate_win(self):
        """Red has three on the bottom row; column 3 wins on the spot."""
        board = play_game([0, 0, 1, 1, 2, 2])
        self.assertEqual(self.engine.best_move(board, 400), 3)

    def test_beats_random_player(self):
        """Statistical check: a modest budget wins most games against random play."""
        rng = random.Random(2024)
        wins = 0
        games = 6
        for game in range(games):
            board = Bitboard.empty()
            engine_side = Player.RED if game % 2 == 0 else Player.BLUE
            while not board.game_status().is_over:
                if board.active_player() == engine_side:
                    board.play_move(self.engine.best_move(board, 150))
                else:
                    board.play_move(rng.choice(board.legal_moves()))
            if board.game_status().result.winner == engine_side:
                wins += 1
        self.assertGreaterEqual(wins, games - 1)


class TestBoundary(unittest.TestCase):
    def test_wire_call_returns_column(self):
        red, blue = play_game([3, 3]).serialize()
        column = c4_ai_move(red, blue, 50, random.Random(1))
        self.assertTrue(0 <= column < COLS)

    def test_out_of_range_inputs_return_sentinel(self):
        self.assertEqual(c4_ai_move(1 << 64, 0, 10), NO_MOVE)
        self.assertEqual(c4_ai_move(0, -1, 10), NO_MOVE)
        self.assertEqual(c4_ai_move(0, 0, 1 << 32), NO_MOVE)

    def test_malformed_board_returns_sentinel(self):
        self.assertEqual(c4_ai_move(TURN_BIT, 0, 10), NO_MOVE)

    def test_zero_budget_returns_sentinel(self):
        self.assertEqual(c4_ai_move(0, 0, 0), NO_MOVE)

    def test_ai_move_rejects_finished_game(self):
        board = play_game([0, 1, 0, 1, 0, 1, 0])
        with self.assertRaises(SearchUnavailable):
            ai_move(board, 100)

    def test_ai_move_zero_budget_is_unavailable(self):
        with self.assertRaises(SearchUnavailable):
            ai_move(Bitboard.empty(), 0)

    def test_ai_move_returns_legal_column(self):
        board = play_game([3, 2, 3])
        column = ai_move(board, 100, random.Random(9))
        self.assertTrue(board.is_move_legal(column))


if __name__ == '__main__':
    unittest.main()
