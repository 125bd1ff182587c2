"""Monte-Carlo simulation API endpoints."""

import logging

from fastapi import APIRouter, HTTPException

from api.schemas import (
    HistogramResponse,
    SimulateRequest,
    SimulateResponse,
    StatsResponse,
    TrialResponse,
)
from bjsim.simulator import SimulationConfig, simulate
from config import config

logger = logging.getLogger(__name__)

router = APIRouter()


@router.post("")
def run_simulation(request: SimulateRequest) -> SimulateResponse:
    """Run a seeded (or unseeded) Monte-Carlo simulation."""
    limits = config.simulation
    if request.trials > limits.max_trials:
        raise HTTPException(
            status_code=400,
            detail=f"trials must be at most {limits.max_trials}",
        )
    if request.hands > limits.max_hands:
        raise HTTPException(
            status_code=400,
            detail=f"hands must be at most {limits.max_hands}",
        )

    sim_config = SimulationConfig(
        rules=request.rules.to_rules(),
        bet=request.bet,
        hands=request.hands,
        seed=request.seed,
        trials=request.trials,
        capture_first_trial=request.capture_first_trial,
        histogram_bins=request.histogram_bins,
    )
    result = simulate(sim_config, request.starting_bankroll)

    return SimulateResponse(
        results=[TrialResponse.from_trial(t) for t in result.results],
        stats=StatsResponse.from_stats(result.stats),
        histogram=HistogramResponse.from_histogram(result.histogram),
    )
