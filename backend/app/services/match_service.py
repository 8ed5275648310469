"""
Match Service - Centralized Match Logic

This service is the single source of truth for all match state modifications.
It handles:
- Match creation (human vs human, human vs bot)
- Turn ownership and move legality
- Bot moves through the MCTS engine
- Database updates and match completion

The board itself is stored as its two-word wire format, so every operation
loads a Bitboard from the row, applies one move and writes the words back.
"""

import logging
import random
from typing import Iterable, Optional
from sqlalchemy import or_
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.future import select

from backend.app.core.level_registry import registry
from backend.app.engine.ai import ConnectFourAI
from backend.app.engine.game import board_matrix, get_visual_board, describe_status
from backend.app.models.enums import MatchStatus, PlayOrder
from backend.app.models.match_model import Match
from backend.app.schemas.match_schema import MatchResponse
from connect4.core.bitboard import Bitboard

logger = logging.getLogger(__name__)


class MatchError(ValueError):
    """Base class for requests the match layer refuses."""


class MatchNotFound(MatchError):
    pass


class PlayerAlreadyPlaying(MatchError):
    pass


class PlayerNotPlaying(MatchError):
    pass


class NotYourTurn(MatchError):
    pass


def decide_play_order(play_order: PlayOrder) -> PlayOrder:
    if play_order == PlayOrder.RANDOM:
        return PlayOrder.GO_FIRST if random.random() < 0.5 else PlayOrder.GO_SECOND
    return play_order


def build_response(match: Match) -> MatchResponse:
    """Snapshot of a match for API responses"""
    board = match.board
    status = board.game_status()
    return MatchResponse(
        id=match.id,
        server_id=match.server_id,
        status=match.status,
        winner=match.winner,
        current_turn=None if status.is_over else int(status.turn),
        last_move=match.last_move,
        red_player_id=match.red_player_id,
        blue_player_id=match.blue_player_id,
        ai_level=match.ai_level,
        red_pieces=match.red_pieces,
        blue_pieces=match.blue_pieces,
        board=board_matrix(board),
        visual=get_visual_board(board),
        description=describe_status(board),
        created_at=match.created_at,
    )


class MatchService:
    """Centralized service for all match operations"""

    async def new_human_match(self, db: AsyncSession, server_id: int, challenger_id: int,
                              challenged_id: int, play_order: PlayOrder = PlayOrder.GO_FIRST) -> Match:
        if challenger_id == challenged_id:
            raise MatchError("A player cannot challenge themselves")
        await self._ensure_not_playing(db, server_id, [challenger_id, challenged_id])

        if decide_play_order(play_order) == PlayOrder.GO_FIRST:
            red_id, blue_id = challenger_id, challenged_id
        else:
            red_id, blue_id = challenged_id, challenger_id

        match = self._new_match(server_id, red_id, blue_id, ai_level=None)
        db.add(match)
        await self._commit(db, match)
        logger.info("Match %s created on server %s: %s vs %s", match.id, server_id, red_id, blue_id)
        return match

    async def new_computer_match(self, db: AsyncSession, server_id: int, player_id: int,
                                 ai_level: Optional[int] = None,
                                 play_order: PlayOrder = PlayOrder.RANDOM) -> Match:
        await self._ensure_not_playing(db, server_id, [player_id])

        level = ai_level if ai_level in registry.levels else registry.default_level

        player_is_red = decide_play_order(play_order) == PlayOrder.GO_FIRST
        if player_is_red:
            match = self._new_match(server_id, player_id, None, ai_level=level)
        else:
            match = self._new_match(server_id, None, player_id, ai_level=level)
        db.add(match)
        await self._commit(db, match)
        logger.info("Computer match %s created on server %s for %s (level %s, %s)",
                    match.id, server_id, player_id, level, registry.get(level).label)

        if not player_is_red:
            # Bot is Red and opens the game
            match = await self.play_bot_move(db, match.id)
        return match

    async def get_match(self, db: AsyncSession, match_id: int) -> Match:
        result = await db.execute(select(Match).where(Match.id == match_id))
        match = result.scalar_one_or_none()
        if not match:
            raise MatchNotFound(f"Match {match_id} not found")
        return match

    async def retrieve_match_by_player(self, db: AsyncSession, server_id: int, player_id: int) -> Match:
        """The in-progress match of 'player_id' on 'server_id'."""
        query = select(Match).where(
            Match.server_id == server_id,
            Match.status == MatchStatus.IN_PROGRESS,
            or_(Match.red_player_id == player_id, Match.blue_player_id == player_id),
        )
        result = await db.execute(query)
        match = result.scalars().first()
        if not match:
            raise PlayerNotPlaying(f"Player {player_id} has no match on server {server_id}")
        return match

    async def play_move(self, db: AsyncSession, server_id: int, player_id: int, column: int) -> Match:
        """
        Plays 'column' for 'player_id' in their current match.
        In a computer match the bot answers in the same call.
        """
        match = await self.retrieve_match_by_player(db, server_id, player_id)
        match = await self._get_match_for_update(db, match.id)
        board = match.board

        status = board.game_status()
        if status.is_over or match.player_id_for(status.turn) != player_id:
            raise NotYourTurn(f"It is not player {player_id}'s turn")

        # Raises IllegalMove before anything is written
        board.require_legal(column)
        board.play_move(column)
        await self._save_move(db, match, board, column)

        if match.is_computer_match and match.status == MatchStatus.IN_PROGRESS:
            match = await self.play_bot_move(db, match.id)
        return match

    async def play_bot_move(self, db: AsyncSession, match_id: int) -> Match:
        """Execute one bot turn and return the updated match"""
        # 1. READ (No Lock) - Get snapshot for the engine to think
        snapshot = await self.get_match(db, match_id)
        board = snapshot.board
        status = board.game_status()

        if snapshot.status != MatchStatus.IN_PROGRESS or status.is_over:
            return snapshot
        if not snapshot.is_computer_match or snapshot.player_id_for(status.turn) is not None:
            return snapshot

        # 2. THINK (Slow Operation - No DB Lock held)
        ai = ConnectFourAI(snapshot.ai_level)
        column = await ai.get_move_async(board)

        # 3. WRITE (Acquire Lock) - Re-validate and Save
        match = await self._get_match_for_update(db, match_id)
        if match.board != board:
            logger.warning("Match %s changed while the bot was thinking", match_id)
            return match

        board.play_move(column)
        await self._save_move(db, match, board, column)
        return match

    async def resign(self, db: AsyncSession, server_id: int, player_id: int) -> Match:
        match = await self.retrieve_match_by_player(db, server_id, player_id)
        match = await self._get_match_for_update(db, match.id)
        side = match.side_of(player_id)

        match.status = MatchStatus.RESIGNED
        match.winner = int(side.other)
        await self._commit(db, match)
        logger.info("Player %s resigned match %s", player_id, match.id)
        return match

    # --- Internals ---

    @staticmethod
    def _new_match(server_id: int, red_id: Optional[int], blue_id: Optional[int],
                   ai_level: Optional[int]) -> Match:
        red_pieces, blue_pieces = Bitboard.empty().serialize()
        return Match(
            server_id=server_id,
            red_player_id=red_id,
            blue_player_id=blue_id,
            ai_level=ai_level,
            red_pieces=red_pieces,
            blue_pieces=blue_pieces,
            status=MatchStatus.IN_PROGRESS,
        )

    async def _ensure_not_playing(self, db: AsyncSession, server_id: int, player_ids: Iterable[int]):
        for player_id in player_ids:
            try:
                await self.retrieve_match_by_player(db, server_id, player_id)
            except PlayerNotPlaying:
                continue
            raise PlayerAlreadyPlaying(f"Player {player_id} is already playing on server {server_id}")

    async def _get_match_for_update(self, db: AsyncSession, match_id: int) -> Match:
        """
        Load match from DB with row locking (FOR UPDATE).
        This prevents other transactions from modifying the match while we process a move.
        populate_existing overwrites the copy cached in the session with the row as read.
        """
        query = (
            select(Match)
            .where(Match.id == match_id)
            .with_for_update()
            .execution_options(populate_existing=True)
        )
        result = await db.execute(query)
        match = result.scalar_one_or_none()
        if not match:
            raise MatchNotFound(f"Match {match_id} not found")
        return match

    async def _save_move(self, db: AsyncSession, match: Match, board: Bitboard, column: int):
        match.store_board(board)
        match.last_move = column

        status = board.game_status()
        if status.is_over:
            if status.result.is_tie:
                match.status = MatchStatus.DRAW
            else:
                match.status = MatchStatus.COMPLETED
                match.winner = int(status.result.winner)
            logger.info("Match %s finished: %s", match.id, describe_status(board))

        await self._commit(db, match)

    async def _commit(self, db: AsyncSession, match: Match):
        """Commit with transaction safety"""
        try:
            await db.commit()
            await db.refresh(match)
        except Exception as e:
            logger.error("DB Save Error: %s", e)
            await db.rollback()
            raise ValueError(f"Failed to save match: {e}")


# Singleton instance
match_service = MatchService()
