"""Strategy and rules API endpoints."""

from fastapi import APIRouter, HTTPException

from api.schemas import DecideRequest, DecideResponse, RulesModel
from bjsim.cards import Card
from bjsim.hand import Hand
from bjsim.strategy import PRESETS, decide

router = APIRouter()


@router.get("/rules/presets")
async def list_presets() -> dict[str, RulesModel]:
    """Named rule presets."""
    return {name: RulesModel.from_rules(factory()) for name, factory in PRESETS.items()}


@router.post("/strategy/decide")
async def strategy_decide(request: DecideRequest) -> DecideResponse:
    """Basic strategy action for a hand against a dealer upcard."""
    try:
        hand = Hand(cards=[Card.from_string(c) for c in request.player_cards])
        upcard = Card.from_string(request.dealer_upcard)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))

    action = decide(
        hand,
        upcard,
        request.rules.to_rules(),
        allow_split=request.allow_split,
        allow_double=request.allow_double,
    )
    return DecideResponse(
        action=action.name.lower(),
        player_value=hand.value,
        is_soft=hand.is_soft,
        is_pair=hand.is_pair,
    )
