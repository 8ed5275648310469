# connect4/core/bitboard.py
"""
Bit-packed Connect Four board.

The board is two integers, one per color. A set bit marks a piece of that
color. Bits are assigned LSB first from the bottom-left cell, going up each
column; every column carries one extra guard bit above its top row so an
upward scan can never run into the next column.

Bit 49 holds the turn (mirrored in both words): 0 when Red moves, 1 when Blue
moves. Bit 50 marks the game as over: it is set on the winner's word, or on
both words for a tie.
"""
from dataclasses import dataclass
from enum import IntEnum
from typing import List, Optional, Tuple

from .constants import (
    ROWS, COLS, HEIGHT, COLUMN_BASES, TURN_BIT, GAME_OVER_BIT,
    TOP_ROW_MASK, PLAYABLE_MASK, MAX_U64,
)
from .errors import IllegalMove
from .patterns import has_four


class Player(IntEnum):
    RED = 1   # moves first
    BLUE = 2

    @property
    def other(self) -> "Player":
        return Player.BLUE if self is Player.RED else Player.RED


# A slot is either None (empty) or the Player occupying it
Slot = Optional[Player]


@dataclass(frozen=True)
class GameResult:
    winner: Optional[Player] = None  # None means a tie

    @property
    def is_tie(self) -> bool:
        return self.winner is None


TIE = GameResult()


@dataclass(frozen=True)
class GameStatus:
    """Either 'turn' is set (game running) or 'result' is set (game over)."""
    turn: Optional[Player] = None
    result: Optional[GameResult] = None

    @classmethod
    def turn_of(cls, player: Player) -> "GameStatus":
        return cls(turn=player)

    @classmethod
    def game_over(cls, result: GameResult) -> "GameStatus":
        return cls(result=result)

    @property
    def is_over(self) -> bool:
        return self.result is not None


class Bitboard:
    __slots__ = ("red_pieces", "blue_pieces")

    def __init__(self, red_pieces: int = 0, blue_pieces: int = 0):
        self.red_pieces = red_pieces
        self.blue_pieces = blue_pieces

    @classmethod
    def empty(cls) -> "Bitboard":
        return cls(0, 0)

    @classmethod
    def deserialize(cls, red_pieces: int, blue_pieces: int) -> "Bitboard":
        """
        Rebuilds a board from its two-word wire format.
        Raises ValueError for words that no legal game can produce.
        """
        for word in (red_pieces, blue_pieces):
            if not 0 <= word <= MAX_U64:
                raise ValueError(f"Board word out of 64-bit range: {word}")
            if word & ~(PLAYABLE_MASK | TURN_BIT | GAME_OVER_BIT):
                raise ValueError(f"Board word has guard or unused bits set: {word:#x}")
        if red_pieces & blue_pieces & PLAYABLE_MASK:
            raise ValueError("Both colors occupy the same cell")
        if (red_pieces ^ blue_pieces) & TURN_BIT:
            raise ValueError("Turn flag differs between the two words")

        occupied = red_pieces | blue_pieces
        for c in range(COLS):
            # Pieces must be stacked from the bottom without gaps
            column = (occupied >> (c * HEIGHT)) & ((1 << ROWS) - 1)
            if column & (column + 1):
                raise ValueError("Floating piece in column")
        return cls(red_pieces, blue_pieces)

    def serialize(self) -> Tuple[int, int]:
        return self.red_pieces, self.blue_pieces

    def copy(self) -> "Bitboard":
        return Bitboard(self.red_pieces, self.blue_pieces)

    # --- Queries ---

    def active_player(self) -> Player:
        """Player designated by the turn flag (meaningless once the game is over)."""
        return Player.BLUE if self.red_pieces & TURN_BIT else Player.RED

    def game_status(self) -> GameStatus:
        red_done = self.red_pieces & GAME_OVER_BIT
        blue_done = self.blue_pieces & GAME_OVER_BIT
        if red_done and blue_done:
            return GameStatus.game_over(TIE)
        if red_done:
            return GameStatus.game_over(GameResult(Player.RED))
        if blue_done:
            return GameStatus.game_over(GameResult(Player.BLUE))
        return GameStatus.turn_of(self.active_player())

    def is_game_over(self) -> bool:
        return bool((self.red_pieces | self.blue_pieces) & GAME_OVER_BIT)

    def is_move_legal(self, column: int) -> bool:
        if column < 0 or column >= COLS:
            return False
        if self.is_game_over():
            return False
        top_cell = COLUMN_BASES[column] << (ROWS - 1)
        return not (self.red_pieces | self.blue_pieces) & top_cell

    def require_legal(self, column: int) -> None:
        """Raises IllegalMove unless 'column' can be played right now."""
        if column < 0 or column >= COLS:
            raise IllegalMove(column, "out of range")
        if self.is_game_over():
            raise IllegalMove(column, "game is over")
        if not self.is_move_legal(column):
            raise IllegalMove(column, "column is full")

    def legal_moves(self) -> List[int]:
        if self.is_game_over():
            return []
        occupied = self.red_pieces | self.blue_pieces
        return [c for c in range(COLS) if not occupied & (COLUMN_BASES[c] << (ROWS - 1))]

    def slot_at(self, x: int, y: int) -> Slot:
        """Content of column x, row y (row 0 is the bottom)."""
        if not (0 <= x < COLS and 0 <= y < ROWS):
            raise IndexError(f"Slot ({x}, {y}) is outside the board")
        location = COLUMN_BASES[x] << y
        if self.red_pieces & location:
            return Player.RED
        if self.blue_pieces & location:
            return Player.BLUE
        return None

    def column_height(self, column: int) -> int:
        height = 0
        occupied = self.red_pieces | self.blue_pieces
        while height < ROWS and occupied & (COLUMN_BASES[column] << height):
            height += 1
        return height

    # --- Mutation ---

    def play_move(self, column: int) -> bool:
        """
        Drops a piece for the active player into 'column' and updates status.
        Illegal targets leave the board untouched and return False.
        """
        if column < 0 or column >= COLS or self.is_game_over():
            return False

        player = self.active_player()
        cell = self._drop_piece(column, player)
        if cell is None:
            return False

        self._update_status(player, cell)
        return True

    def _drop_piece(self, column: int, player: Player) -> Optional[int]:
        row = COLUMN_BASES[column]
        guard = row << ROWS
        occupied = self.red_pieces | self.blue_pieces
        while row & occupied and row != guard:
            row <<= 1

        if row == guard:
            return None

        if player is Player.RED:
            self.red_pieces |= row
        else:
            self.blue_pieces |= row
        return row

    def _update_status(self, player: Player, cell: int) -> None:
        # Only the mover can have completed a line on this turn
        if player is Player.RED:
            if has_four(self.red_pieces, cell):
                self.red_pieces |= GAME_OVER_BIT
                return
        elif has_four(self.blue_pieces, cell):
            self.blue_pieces |= GAME_OVER_BIT
            return

        if (self.red_pieces | self.blue_pieces) & TOP_ROW_MASK == TOP_ROW_MASK:
            self.red_pieces |= GAME_OVER_BIT
            self.blue_pieces |= GAME_OVER_BIT
        else:
            self.red_pieces ^= TURN_BIT
            self.blue_pieces ^= TURN_BIT

    # --- Formatting ---

    def display(self, red: str, blue: str, empty: str, separator: str,
                line_start: str, line_end: str, line_separator: str) -> str:
        """Renders the grid top row first, using the given tokens."""
        tokens = {Player.RED: red, Player.BLUE: blue, None: empty}
        parts = []
        for y in range(ROWS - 1, -1, -1):
            cells = [tokens[self.slot_at(x, y)] for x in range(COLS)]
            parts.append(line_separator + line_start + separator.join(cells) + line_end)
        parts.append(line_separator)
        return "".join(parts)

    def __eq__(self, other) -> bool:
        if not isinstance(other, Bitboard):
            return NotImplemented
        return self.serialize() == other.serialize()

    # Mutable in place, so not hashable; key on serialize() instead
    __hash__ = None

    def __repr__(self) -> str:
        return f"Bitboard(red_pieces={self.red_pieces:#x}, blue_pieces={self.blue_pieces:#x})"
