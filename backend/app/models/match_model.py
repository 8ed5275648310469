from sqlalchemy import Column, Integer, BigInteger, String, DateTime
from sqlalchemy.sql import func
from backend.app.core.database import Base
from backend.app.models.enums import MatchStatus
from connect4.core.bitboard import Bitboard, Player

class Match(Base):
    __tablename__ = "matches"

    id = Column(Integer, primary_key=True, index=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now())

    # Where the match is played (chat server / channel)
    server_id = Column(BigInteger, nullable=False, index=True)

    # NULL marks the side played by the bot
    red_player_id = Column(BigInteger, nullable=True, index=True)
    blue_player_id = Column(BigInteger, nullable=True, index=True)
    ai_level = Column(Integer, nullable=True)  # NULL for human vs human

    # Board state in its two-word wire format
    red_pieces = Column(BigInteger, nullable=False, default=0)
    blue_pieces = Column(BigInteger, nullable=False, default=0)

    status = Column(String, default=MatchStatus.IN_PROGRESS)
    winner = Column(Integer, nullable=True)  # 1 = red, 2 = blue
    last_move = Column(Integer, nullable=True)

    @property
    def is_computer_match(self) -> bool:
        return self.ai_level is not None

    @property
    def board(self) -> Bitboard:
        return Bitboard.deserialize(self.red_pieces or 0, self.blue_pieces or 0)

    def store_board(self, board: Bitboard):
        self.red_pieces, self.blue_pieces = board.serialize()

    def player_id_for(self, player: Player):
        return self.red_player_id if player is Player.RED else self.blue_player_id

    def side_of(self, player_id: int):
        """Player color of 'player_id' in this match, or None."""
        if self.red_player_id == player_id:
            return Player.RED
        if self.blue_player_id == player_id:
            return Player.BLUE
        return None
