from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.ext.asyncio import AsyncSession

from backend.app.core.database import get_db
from backend.app.schemas.match_schema import (
    ChallengeCreate, BotChallengeCreate, MoveCreate, MatchResponse,
)
from backend.app.services.match_service import (
    match_service, build_response,
    MatchError, MatchNotFound, PlayerAlreadyPlaying, PlayerNotPlaying, NotYourTurn,
)
from connect4.core.errors import IllegalMove, SearchUnavailable

router = APIRouter()

def to_http_error(e: Exception) -> HTTPException:
    if isinstance(e, (MatchNotFound, PlayerNotPlaying)):
        return HTTPException(status_code=404, detail=str(e))
    if isinstance(e, (PlayerAlreadyPlaying, NotYourTurn)):
        return HTTPException(status_code=409, detail=str(e))
    if isinstance(e, SearchUnavailable):
        return HTTPException(status_code=503, detail=str(e))
    return HTTPException(status_code=400, detail=str(e))

@router.post("/matches", response_model=MatchResponse)
async def challenge(payload: ChallengeCreate, db: AsyncSession = Depends(get_db)):
    try:
        match = await match_service.new_human_match(
            db, payload.server_id, payload.challenger_id, payload.challenged_id, payload.play_order
        )
    except MatchError as e:
        raise to_http_error(e)
    return build_response(match)

@router.post("/matches/bot", response_model=MatchResponse)
async def challenge_bot(payload: BotChallengeCreate, db: AsyncSession = Depends(get_db)):
    try:
        match = await match_service.new_computer_match(
            db, payload.server_id, payload.player_id, payload.ai_level, payload.play_order
        )
    except (MatchError, SearchUnavailable) as e:
        raise to_http_error(e)
    return build_response(match)

@router.get("/matches/{match_id}", response_model=MatchResponse)
async def get_match(match_id: int, db: AsyncSession = Depends(get_db)):
    try:
        match = await match_service.get_match(db, match_id)
    except MatchNotFound as e:
        raise to_http_error(e)
    return build_response(match)

@router.get("/servers/{server_id}/players/{player_id}/match", response_model=MatchResponse)
async def get_current_match(server_id: int, player_id: int, db: AsyncSession = Depends(get_db)):
    try:
        match = await match_service.retrieve_match_by_player(db, server_id, player_id)
    except PlayerNotPlaying as e:
        raise to_http_error(e)
    return build_response(match)

@router.post("/servers/{server_id}/players/{player_id}/moves", response_model=MatchResponse)
async def play_move(server_id: int, player_id: int, payload: MoveCreate,
                    db: AsyncSession = Depends(get_db)):
    try:
        match = await match_service.play_move(db, server_id, player_id, payload.column)
    except (MatchError, IllegalMove, SearchUnavailable) as e:
        raise to_http_error(e)
    return build_response(match)

@router.post("/servers/{server_id}/players/{player_id}/resign", response_model=MatchResponse)
async def resign(server_id: int, player_id: int, db: AsyncSession = Depends(get_db)):
    try:
        match = await match_service.resign(db, server_id, player_id)
    except MatchError as e:
        raise to_http_error(e)
    return build_response(match)
