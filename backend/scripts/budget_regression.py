#!/usr/bin/env python3
"""
Budget Regression Check

Plays the MCTS engine against a uniformly random opponent at several
iteration budgets and prints the score at each one. A larger budget should
never score noticeably worse; the check is statistical, so it reports a
warning instead of failing on small dips.

Exit Codes:
  0: Scores do not decrease beyond the tolerance
  1: A larger budget scored clearly worse than a smaller one
"""

import argparse
import random
import sys
import time

from connect4.core.bitboard import Bitboard, Player
from connect4.core.mcts import MonteCarloEngine

# --- Configuration ---
DEFAULT_BUDGETS = [10, 50, 200, 800]
TOLERANCE = 0.05  # allowed score drop between consecutive budgets


def play_one(engine: MonteCarloEngine, budget: int, engine_side: Player, rng: random.Random) -> float:
    """Returns 1 for an engine win, 0.5 for a tie, 0 for a loss."""
    board = Bitboard.empty()
    while not board.game_status().is_over:
        if board.active_player() == engine_side:
            board.play_move(engine.best_move(board, budget))
        else:
            board.play_move(rng.choice(board.legal_moves()))

    result = board.game_status().result
    if result.is_tie:
        return 0.5
    return 1.0 if result.winner == engine_side else 0.0


def run(budgets, games: int, seed: int) -> bool:
    rng = random.Random(seed)
    engine = MonteCarloEngine(random.Random(seed + 1))
    scores = []

    for budget in budgets:
        start_time = time.time()
        total = 0.0
        for game in range(games):
            side = Player.RED if game % 2 == 0 else Player.BLUE
            total += play_one(engine, budget, side, rng)
        score = total / games
        scores.append(score)
        print(f"budget={budget:>6}  score={score:.3f}  ({time.time() - start_time:.1f}s)")

    ok = True
    for (low_budget, low), (high_budget, high) in zip(zip(budgets, scores), zip(budgets[1:], scores[1:])):
        if high + TOLERANCE < low:
            print(f"⚠️ budget {high_budget} scored {high:.3f}, below budget {low_budget} ({low:.3f})")
            ok = False
    return ok


def main():
    parser = argparse.ArgumentParser(description=__doc__.strip().splitlines()[0])
    parser.add_argument("--budgets", type=int, nargs="+", default=DEFAULT_BUDGETS)
    parser.add_argument("--games", type=int, default=40)
    parser.add_argument("--seed", type=int, default=0)
    args = parser.parse_args()

    ok = run(sorted(args.budgets), args.games, args.seed)
    print("✅ Budget monotonicity holds" if ok else "❌ Budget monotonicity violated")
    sys.exit(0 if ok else 1)


if __name__ == "__main__":
    main()
