# connect4/core/errors.py


class IllegalMove(ValueError):
    """Column is out of range, full, or the game is already over."""

    def __init__(self, column: int, reason: str):
        self.column = column
        self.reason = reason
        super().__init__(f"Illegal move in column {column}: {reason}")


class SearchUnavailable(RuntimeError):
    """The engine could not produce a move for this board."""
