from pydantic import BaseModel, Field
from typing import List, Optional
from datetime import datetime

from backend.app.models.enums import PlayOrder

U64_LIMIT = 2 ** 64
U32_LIMIT = 2 ** 32

class ChallengeCreate(BaseModel):
    server_id: int
    challenger_id: int
    challenged_id: int
    play_order: PlayOrder = PlayOrder.GO_FIRST

class BotChallengeCreate(BaseModel):
    server_id: int
    player_id: int
    ai_level: Optional[int] = None  # None -> configured default level
    play_order: PlayOrder = PlayOrder.RANDOM

class MoveCreate(BaseModel):
    column: int

class MatchResponse(BaseModel):
    id: int
    server_id: int
    status: str
    winner: Optional[int] = None
    current_turn: Optional[int] = None
    last_move: Optional[int] = None

    red_player_id: Optional[int] = None
    blue_player_id: Optional[int] = None
    ai_level: Optional[int] = None

    # Wire format plus two renderings of the same board
    red_pieces: int
    blue_pieces: int
    board: List[List[int]]
    visual: str
    description: str

    created_at: Optional[datetime] = None

class LevelResponse(BaseModel):
    level: int
    label: str
    rollouts: int

class AIMoveRequest(BaseModel):
    red_pieces: int = Field(ge=0, lt=U64_LIMIT)
    blue_pieces: int = Field(ge=0, lt=U64_LIMIT)
    rollouts: int = Field(ge=0, lt=U32_LIMIT)

class AIMoveResponse(BaseModel):
    column: int
    found: bool
