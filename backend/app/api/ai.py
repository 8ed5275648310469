import asyncio
from fastapi import APIRouter

from backend.app.schemas.match_schema import AIMoveRequest, AIMoveResponse
from connect4.core.boundary import c4_ai_move
from connect4.core.constants import NO_MOVE

router = APIRouter()

@router.post("/move", response_model=AIMoveResponse)
async def suggest_move(payload: AIMoveRequest):
    """
    Raw engine call on a board in its two-word format.
    'column' equals the board width (7) when no move could be produced.
    The board must not be finished; that check is the caller's job.
    """
    column = await asyncio.to_thread(
        c4_ai_move, payload.red_pieces, payload.blue_pieces, payload.rollouts
    )
    return AIMoveResponse(column=column, found=column != NO_MOVE)
