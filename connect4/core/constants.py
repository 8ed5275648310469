# connect4/core/constants.py

# --- Board Dimensions ---
ROWS = 6
COLS = 7
# Height includes a guard row so an upward scan never bleeds into the next column
HEIGHT = ROWS + 1

# --- Bit Layout (shared by both color words) ---
# Column c occupies bits [c * HEIGHT, c * HEIGHT + ROWS]; the last one is the guard.
COLUMN_BASES = [1 << (c * HEIGHT) for c in range(COLS)]
TURN_BIT = 1 << (COLS * HEIGHT)        # 0 = first color to move, 1 = second
GAME_OVER_BIT = 1 << (COLS * HEIGHT + 1)

# Top playable cell of every column
TOP_ROW_MASK = sum(base << (ROWS - 1) for base in COLUMN_BASES)
# Every playable cell (guards and flags excluded)
PLAYABLE_MASK = sum(((1 << ROWS) - 1) << (c * HEIGHT) for c in range(COLS))

# --- Native Boundary ---
# Returned instead of a column when no move can be produced
NO_MOVE = COLS
MAX_U64 = (1 << 64) - 1
MAX_U32 = (1 << 32) - 1

# --- Search ---
# UCT exploration weight for rewards in [0, 1]
EXPLORATION_CONSTANT = 1.25
WIN_REWARD = 1.0
TIE_REWARD = 0.5
LOSS_REWARD = 0.0
