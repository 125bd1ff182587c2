"""Interactive play API endpoints."""

from typing import Annotated

from fastapi import APIRouter, Header, HTTPException

from api.schemas import (
    NewPlayRequest,
    NewPlayResponse,
    PlayRoundRequest,
    PlayRoundResponse,
    PlayStateResponse,
    RoundResponse,
    RulesModel,
)
from api.session import create_session, get_session
from bjsim.game.session import PlaySession
from config import config

router = APIRouter()


def _require_session(session_id: str) -> PlaySession:
    table = get_session(session_id)
    if table is None:
        raise HTTPException(status_code=404, detail="Session not found")
    return table


@router.post("/new")
async def new_table(request: NewPlayRequest | None = None) -> NewPlayResponse:
    """Sit down at a new table."""
    request = request or NewPlayRequest()
    rules = request.rules.to_rules() if request.rules else config.game.rules
    bankroll = (
        request.bankroll
        if request.bankroll is not None
        else config.game.starting_bankroll
    )

    table = PlaySession(rules=rules, bankroll=bankroll, seed=request.seed)
    session_id = create_session(table)

    return NewPlayResponse(
        session_id=session_id,
        bankroll=table.bankroll,
        rules=RulesModel.from_rules(rules),
    )


@router.post("/round")
async def play_round(
    request: PlayRoundRequest,
    x_session_id: Annotated[str, Header()],
) -> PlayRoundResponse:
    """Play one round of basic strategy."""
    table = _require_session(x_session_id)
    if not table.can_bet(request.bet):
        raise HTTPException(status_code=400, detail="Insufficient bankroll")

    result = table.play(request.bet)
    return PlayRoundResponse(
        round=RoundResponse.from_round(result),
        bankroll=table.bankroll,
        hands_played=table.hands_played,
    )


@router.get("/state")
async def play_state(
    x_session_id: Annotated[str, Header()],
) -> PlayStateResponse:
    """Current bankroll and shoe state."""
    table = _require_session(x_session_id)
    return PlayStateResponse(
        bankroll=table.bankroll,
        profit=table.profit,
        hands_played=table.hands_played,
        cards_remaining=table.shoe.remaining(),
        rules=RulesModel.from_rules(table.rules),
    )
