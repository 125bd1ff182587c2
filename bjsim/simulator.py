"""Monte-Carlo simulation of flat-bet basic strategy."""

import logging
from dataclasses import dataclass, field
from random import Random
from typing import Callable

from bjsim.cards import Shoe
from bjsim.game.engine import RoundEngine
from bjsim.game.results import RoundResult
from bjsim.rng import create_rng
from bjsim.statistics import (
    Histogram,
    RunningStats,
    build_histogram,
    confidence_interval,
    default_bin_count,
    risk_of_ruin,
)
from bjsim.strategy.rules import RuleSet

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class SimulationConfig:
    """
    What to simulate.

    Attributes:
        rules: Table rules
        bet: Flat bet per hand
        hands: Hands per trial (a trial ends early if the bankroll drops below one bet)
        seed: Seed for the single RNG stream shared by every trial
        trials: Number of trials
        capture_first_trial: Keep every round of trial 0 for replay
        histogram_bins: Histogram bin count (11 to 41 depending on trials if None)
    """

    rules: RuleSet = field(default_factory=RuleSet)
    bet: float = 10
    hands: int = 100
    seed: int | None = None
    trials: int = 1
    capture_first_trial: bool = False
    histogram_bins: int | None = None

    def __post_init__(self) -> None:
        """Validate the run parameters."""
        if self.bet <= 0:
            raise ValueError("bet must be positive")
        if self.hands < 0:
            raise ValueError("hands cannot be negative")
        if self.trials < 1:
            raise ValueError("trials must be at least 1")
        if self.histogram_bins is not None and self.histogram_bins < 1:
            raise ValueError("histogram_bins must be at least 1")

    @property
    def bin_count(self) -> int:
        """Histogram bin count actually used."""
        if self.histogram_bins is not None:
            return self.histogram_bins
        return default_bin_count(self.trials)


@dataclass
class TrialResult:
    """One trial: a bankroll played down a fresh shoe."""

    starting_bankroll: float
    ending_bankroll: float
    hands_played: int
    bankroll_history: list[float]
    rounds: list[RoundResult] | None = None

    @property
    def profit(self) -> float:
        """Ending minus starting bankroll."""
        return self.ending_bankroll - self.starting_bankroll


@dataclass(frozen=True)
class Stats:
    """Aggregate results across trials."""

    ev_per_hand: float
    stdev_per_hand: float
    ev_run: float
    stdev_run: float
    ci95: tuple[float, float]
    risk_of_ruin: float


@dataclass
class SimulationResult:
    """Trials plus their aggregate statistics."""

    results: list[TrialResult]
    stats: Stats
    histogram: Histogram

    @property
    def profits(self) -> list[float]:
        """Profit of each trial, in trial order."""
        return [trial.profit for trial in self.results]


TrialObserver = Callable[[int, TrialResult], None]


def run_trial(
    config: SimulationConfig,
    starting_bankroll: float,
    rng: Random,
    hand_stats: RunningStats | None = None,
    capture: bool = False,
) -> TrialResult:
    """
    Play one trial on a fresh shoe.

    Args:
        config: Simulation parameters
        starting_bankroll: Bankroll the trial starts with
        rng: Random source, continued from any earlier trials
        hand_stats: Accumulator fed each hand's net result
        capture: Keep every RoundResult

    Returns:
        The trial summary
    """
    shoe = Shoe(config.rules, rng)
    engine = RoundEngine(shoe, config.rules)

    bankroll = starting_bankroll
    hands_played = 0
    history = [bankroll]
    rounds: list[RoundResult] | None = [] if capture else None

    while hands_played < config.hands and bankroll >= config.bet:
        result = engine.play(config.bet, bankroll)
        bankroll += result.net
        history.append(bankroll)
        hands_played += 1
        if hand_stats is not None:
            hand_stats.push(result.net)
        if rounds is not None:
            rounds.append(result)

    return TrialResult(
        starting_bankroll=starting_bankroll,
        ending_bankroll=bankroll,
        hands_played=hands_played,
        bankroll_history=history,
        rounds=rounds,
    )


def simulate(
    config: SimulationConfig,
    starting_bankroll: float,
    on_trial: TrialObserver | None = None,
) -> SimulationResult:
    """
    Run ``config.trials`` trials and aggregate them.

    Trials run in index order against one continuous RNG stream, so a
    given seed always reproduces the whole run, and trial N depends on
    every card drawn before it.

    Args:
        config: Simulation parameters
        starting_bankroll: Bankroll each trial starts with
        on_trial: Called with (index, trial) after each trial, for progress

    Returns:
        Per-trial results, statistics and a histogram of trial profits
    """
    if starting_bankroll < 0:
        raise ValueError("starting_bankroll cannot be negative")

    logger.info(
        "Simulating %d trials x %d hands (bet %s, seed %s)",
        config.trials,
        config.hands,
        config.bet,
        config.seed,
    )

    rng = create_rng(config.seed)
    hand_stats = RunningStats()
    run_stats = RunningStats()
    results: list[TrialResult] = []

    for index in range(config.trials):
        trial = run_trial(
            config,
            starting_bankroll,
            rng,
            hand_stats=hand_stats,
            capture=config.capture_first_trial and index == 0,
        )
        run_stats.push(trial.profit)
        results.append(trial)
        logger.debug(
            "Trial %d: %d hands, profit %.2f",
            index,
            trial.hands_played,
            trial.profit,
        )
        if on_trial is not None:
            on_trial(index, trial)

    stats = _summarize(hand_stats, run_stats, starting_bankroll, config.bet)
    histogram = build_histogram([trial.profit for trial in results], config.bin_count)

    logger.info(
        "Simulation done: EV/hand %.4f, EV/run %.2f, risk of ruin %.4f",
        stats.ev_per_hand,
        stats.ev_run,
        stats.risk_of_ruin,
    )
    return SimulationResult(results=results, stats=stats, histogram=histogram)


def _summarize(
    hand_stats: RunningStats,
    run_stats: RunningStats,
    starting_bankroll: float,
    bet: float,
) -> Stats:
    """Derive the reported statistics from the two accumulators."""
    ev_per_hand = hand_stats.mean if hand_stats.count > 0 else 0.0
    ev_run = run_stats.mean if run_stats.count > 0 else 0.0
    stdev_run = run_stats.stdev

    return Stats(
        ev_per_hand=ev_per_hand,
        stdev_per_hand=hand_stats.stdev,
        ev_run=ev_run,
        stdev_run=stdev_run,
        ci95=confidence_interval(ev_run, stdev_run, run_stats.count),
        risk_of_ruin=risk_of_ruin(ev_per_hand, hand_stats.variance, starting_bankroll, bet),
    )
