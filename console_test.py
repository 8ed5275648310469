import logging
import sys

from backend.app.engine.ai import ConnectFourAI
from backend.app.engine.game import get_visual_board, describe_status
from connect4.core.bitboard import Bitboard, Player

def main():
    level = int(sys.argv[1]) if len(sys.argv) > 1 else None
    ai_agent = ConnectFourAI(level)

    print("=======================================")
    print(f"   CONNECT FOUR: Human vs MCTS ({ai_agent.label})")
    print("=======================================")

    board = Bitboard.empty()
    print(get_visual_board(board))

    while not board.game_status().is_over:

        # --- Human Turn (Red) ---
        if board.active_player() is Player.RED:
            valid_moves = board.legal_moves()
            try:
                user_input = input(f"\nYour Move (Columns {valid_moves}): ")
                col = int(user_input)
            except ValueError:
                print("Please enter a valid number.")
                continue
            if not board.play_move(col):
                print("Invalid column. Try again.")
                continue

        # --- AI Turn (Blue) ---
        else:
            print(f"\nAI is thinking ({ai_agent.rollouts} rollouts)...")
            col = ai_agent.get_move(board)
            print(f"AI plays Column: {col}")
            board.play_move(col)

        # Show Board
        print("\n" + get_visual_board(board))

    # --- End Game ---
    print(f"\n{describe_status(board)}")

if __name__ == "__main__":
    logging.basicConfig(level=logging.INFO)
    main()
