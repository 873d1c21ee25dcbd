#!/usr/bin/env python
# -*- coding: utf-8 -*-

import sys
from typing import NamedTuple
from collections.abc import Iterable
from pprint import pformat

from .core import log, DataError

# default note patterns for postseason games (see `data_sources.cfbd` config)
DFLT_EXCLUDE_NOTES = 'College Football Playoff'
DFLT_CHAMP_NOTES   = 'College Football Playoff National Championship'

###############
# GameOutcome #
###############

class GameOutcome(NamedTuple):
    """Final result of a single (completed) postseason game.  `category` holds the
    game notes/title from the data source (e.g. "Rose Bowl"), used for determining
    which games are in scope for the pool.
    """
    home_team:   str
    away_team:   str
    home_points: int
    away_points: int
    category:    str

    @property
    def is_tie(self) -> bool:
        return self.home_points == self.away_points

    @property
    def winner(self) -> str | None:
        """Team with strictly more points; `None` for a tie (no resolvable winner)
        """
        if self.home_points > self.away_points:
            return self.home_team
        if self.away_points > self.home_points:
            return self.away_team
        return None

    @property
    def matchup(self) -> str:
        return f"{self.away_team} vs {self.home_team}"

######################
# Outcome Normalizer #
######################

# data source field names (CFBD API v2 uses camelCase, v1 used snake_case)
REC_FIELDS = {'home_team':   ('homeTeam', 'home_team'),
              'away_team':   ('awayTeam', 'away_team'),
              'home_points': ('homePoints', 'home_points'),
              'away_points': ('awayPoints', 'away_points'),
              'category':    ('notes',)}

def rec_value(rec: dict, field: str):
    for key in REC_FIELDS[field]:
        if key in rec:
            return rec[key]
    return None

def outcome_from_record(rec: dict) -> GameOutcome | None:
    """Build `GameOutcome` from a raw game record; returns `None` if the game has
    not been completed (no points reported)

    :raises DataError: if team names are missing or points are not integral
    """
    home_team = rec_value(rec, 'home_team')
    away_team = rec_value(rec, 'away_team')
    if not home_team or not away_team:
        raise DataError(f"Team name(s) missing from game record: {rec}")

    home_pts = rec_value(rec, 'home_points')
    away_pts = rec_value(rec, 'away_points')
    if home_pts is None or away_pts is None:
        return None
    # JSON numbers may come through as floats (e.g. 24.0)
    try:
        integral = int(home_pts) == home_pts and int(away_pts) == away_pts
    except (TypeError, ValueError) as e:
        raise DataError(f"Bad points value for {away_team} vs {home_team}: {e}") from e
    if not integral:
        raise DataError(f"Non-integral points for {away_team} vs {home_team}")

    return GameOutcome(home_team, away_team, int(home_pts), int(away_pts),
                       rec_value(rec, 'category') or '')

def normalize_outcomes(records: Iterable[dict],
                       exclude_notes: str = DFLT_EXCLUDE_NOTES) -> set[GameOutcome]:
    """Convert raw game records into the set of completed outcomes in scope for the
    pool--that is, games with notes (bowl games), excluding those in the specified
    category (playoff games, by default).  Tied games are kept, but have no winner
    and will not match any pick.
    """
    outcomes = set()
    for rec in records:
        notes = rec_value(rec, 'category')
        if not notes or exclude_notes in notes:
            continue
        outcome = outcome_from_record(rec)
        if not outcome:
            log.debug(f"Game '{notes}' not yet completed, skipping...")
            continue
        if outcome.is_tie:
            log.info(f"Game '{notes}' ({outcome.matchup}) is tied, no winner to match")
        outcomes.add(outcome)

    log.debug(f"{len(outcomes)} outcomes normalized")
    return outcomes

#####################
# Champion Resolver #
#####################

def resolve_champion(records: Iterable[dict],
                     champ_notes: str = DFLT_CHAMP_NOTES,
                     override: str = None) -> str | None:
    """Determine the overall champion for the title bonus.  A configured override
    takes precedence; otherwise the winner of the (completed) championship game is
    used.  Returns `None` if the champion cannot be resolved, in which case the
    title bonus is not awarded.
    """
    if override:
        log.info(f"Using configured champion '{override}'")
        return override

    for rec in records:
        notes = rec_value(rec, 'category')
        if not notes or champ_notes not in notes:
            continue
        outcome = outcome_from_record(rec)
        if outcome and outcome.winner:
            log.info(f"Champion resolved from '{notes}': {outcome.winner}")
            return outcome.winner

    log.info("Champion unresolved, title bonus will not be awarded")
    return None

########
# Main #
########

def main() -> int:
    """Print normalized outcomes for a season (from previously fetched data)

    Usage: game.py <year>
    """
    from .cfbd import get_outcomes, get_champion

    if len(sys.argv) != 2:
        print("Usage: game.py <year>", file=sys.stderr)
        return -1
    year = int(sys.argv[1])

    pp_params = {'sort_dicts': False}
    for outcome in sorted(get_outcomes(year), key=lambda o: o.category):
        print(pformat(outcome._asdict() | {'winner': outcome.winner}, **pp_params))
    print(f"\nChampion: {get_champion(year) or '-unresolved-'}")
    return 0

if __name__ == '__main__':
    sys.exit(main())
