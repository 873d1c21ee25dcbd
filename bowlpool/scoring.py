# -*- coding: utf-8 -*-

from typing import NamedTuple
from collections.abc import Iterable, Sequence
from operator import attrgetter

from .core import DataError
from .game import GameOutcome
from .prediction import UserPrediction

TITLE_BONUS = 5  # for correctly picking the overall champion
PICK_POINTS = 1  # per game pick naming a winner

###############
# ScoreResult #
###############

class ScoreResult(NamedTuple):
    """Pool score for a single participant.  `timestamp` identifies the poll
    submission (used only as the key for first insert when persisting).
    """
    first_name: str
    last_name:  str
    score:      int
    timestamp:  str | None = None

    def as_row(self) -> list[str | int]:
        return [self.first_name, self.last_name, self.score]

##################
# Scoring Engine #
##################

def winning_teams(outcomes: Iterable[GameOutcome]) -> frozenset[str]:
    """Return the winners of all outcomes; tied games have no winner, and thus
    contribute nothing
    """
    winners = set()
    for outcome in outcomes:
        if not isinstance(outcome.home_points, int) or not isinstance(outcome.away_points, int):
            raise DataError(f"Non-integer points for outcome {outcome}")
        if winner := outcome.winner:
            winners.add(winner)
    return frozenset(winners)

def title_bonus(pick: str, champion: str | None) -> int:
    if not champion:
        return 0
    return TITLE_BONUS if pick == champion else 0

def score_prediction(pred: UserPrediction, winners: frozenset[str],
                     champion: str | None = None) -> ScoreResult:
    """Compute score for an individual prediction against the set of winning teams.
    Each game pick naming any winner gets credit (outcomes are not "used up", so
    multiple picks can match the same game).
    """
    if isinstance(pred.game_picks, str) or not isinstance(pred.game_picks, Sequence):
        raise DataError(f"`game_picks` must be a sequence for {pred.identity}")
    if not all(isinstance(g, str) for g in pred.game_picks):
        raise DataError(f"`game_picks` must contain only team names for {pred.identity}")

    score = title_bonus(pred.title_winner_pick, champion)
    score += sum(PICK_POINTS for g in pred.game_picks if g in winners)

    ident = pred.identity
    return ScoreResult(ident.first_name, ident.last_name, score, ident.timestamp)

def score(outcomes: Iterable[GameOutcome], predictions: Iterable[UserPrediction],
          champion: str | None = None) -> list[ScoreResult]:
    """Score all predictions against the game outcomes.  This is a pure function of
    its inputs; each prediction is scored independently, and results are returned
    in the same order as `predictions`.

    :param outcomes: completed games in the pool (may be empty)
    :param predictions: one per participant (duplicates are scored independently)
    :param champion: overall champion for title bonus, `None` (or empty) if unresolved
    :return: list of `ScoreResult`, one per prediction
    """
    winners = winning_teams(outcomes)
    return [score_prediction(p, winners, champion) for p in predictions]

####################
# Ranker/Formatter #
####################

def rank(results: Iterable[ScoreResult]) -> list[ScoreResult]:
    """Return results ordered by score (descending); ties retain their relative
    input order (the sort is stable), and position implies rank
    """
    return sorted(results, key=attrgetter('score'), reverse=True)

def rank_rows(results: Iterable[ScoreResult]) -> list[list[str | int]]:
    """Ranked `[first_name, last_name, score]` rows, suitable for publishing
    """
    return [r.as_row() for r in rank(results)]
