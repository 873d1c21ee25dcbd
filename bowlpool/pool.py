#!/usr/bin/env python
# -*- coding: utf-8 -*-

import sys
from os import environ
from typing import TextIO
from concurrent.futures import ThreadPoolExecutor

from .utils import parse_argv
from .core import cfg, log, ConfigError, LogicError, DataError, PublishError
from .game import GameOutcome
from .prediction import UserPrediction
from .scoring import ScoreResult, score, rank
from .cfbd import get_outcomes, get_champion
from .sheets import get_predictions, publish_scores
from .pool_score import save_scores

POOL_CONFIG = environ.get('BOWL_POOL_CONFIG') or 'pools.yml'
cfg.load(POOL_CONFIG)

# used in reporting
NAME_COL  = "Name"
SCORE_COL = "Score"

########
# Pool #
########

class Pool:
    """Bowl game prediction pool for a season.  A scoring run loads game outcomes
    and poll predictions (both must be fully available before scoring), computes
    and ranks the scores, then (optionally) persists and publishes them.
    """
    name:        str
    season:      int
    champion:    str | None  # config override for the title bonus

    outcomes:    set[GameOutcome]
    predictions: list[UserPrediction]
    champ_team:  str | None
    results:     list[ScoreResult]
    ranked:      list[ScoreResult]

    def __init__(self, name: str, **kwargs):
        """Note that pool parameters are generally specified in the config file
        entry, but may be overridden in `kwargs`
        """
        pools = cfg.config('pools')
        if not pools or name not in pools:
            raise RuntimeError(f"Pool '{name}' is not known")
        pool_info = (pools[name] or {}) | kwargs

        season = pool_info.get('season')
        if not season:
            raise ConfigError(f"`season` not specified for pool '{name}'")

        self.name     = name
        self.season   = int(season)
        self.champion = pool_info.get('champion')
        # populated by `load()`
        self.outcomes    = None
        self.predictions = None
        self.champ_team  = None
        # populated by `run()`
        self.results = None
        self.ranked  = None

    def load(self, fetch: bool = False) -> None:
        """Load outcomes and predictions concurrently; both must complete before we
        return (no partial loads)

        :raises InputUnavailable: if either source fails
        :raises DataError: if source data cannot be interpreted
        :raises ConfigError: if credentials for a fetch are not configured
        """
        with ThreadPoolExecutor(max_workers=2) as executor:
            outcomes_fut = executor.submit(get_outcomes, self.season, fetch)
            predictions_fut = executor.submit(get_predictions, fetch)
            try:
                outcomes = outcomes_fut.result()
                predictions = predictions_fut.result()
            except (ConfigError, DataError):
                log.error(f"Pool '{self.name}' inputs not available, aborting run")
                raise

        self.outcomes    = outcomes
        self.predictions = predictions
        self.champ_team  = get_champion(self.season, self.champion)
        log.info(f"Pool '{self.name}' loaded {len(outcomes)} outcomes, "
                 f"{len(predictions)} predictions")

    def run(self, fetch: bool = False) -> list[ScoreResult]:
        """Compute and rank scores for the pool (loading inputs, if needed)
        """
        if self.outcomes is None or self.predictions is None:
            self.load(fetch)

        self.results = score(self.outcomes, self.predictions, self.champ_team)
        self.ranked  = rank(self.results)
        return self.ranked

    def save(self) -> int:
        if self.results is None:
            raise LogicError("Results not yet computed")
        return save_scores(self.results)

    def publish(self) -> int:
        if self.ranked is None:
            raise LogicError("Results not yet computed")
        return publish_scores(r.as_row() for r in self.ranked)

    def print_results(self, file: TextIO = None) -> None:
        """Print ranked results (tab-separated)
        """
        if self.ranked is None:
            raise LogicError("Results not yet computed")
        title = f"{self.name} ({self.season})"
        print(f"{title}\n{'-' * len(title)}", file=file)
        print("\t".join([NAME_COL, SCORE_COL]), file=file)
        for result in self.ranked:
            print(f"{result.first_name} {result.last_name}\t{result.score}", file=file)

########
# Main #
########

def main() -> int:
    """Built-in driver to run the scoring for a pool

    Usage: pool.py <pool_name> [fetch=<bool>] [save=<bool>] [publish=<bool>]

    where `fetch` indicates whether to download current data (otherwise previously
    fetched data is used), and `save` and `publish` indicate whether to persist the
    scores and write them to the score sheet, respectively.
    """
    if len(sys.argv) < 2:
        print("Pool name not specified", file=sys.stderr)
        return -1

    name = sys.argv[1]
    args, kwargs = parse_argv(sys.argv[2:])
    if args:
        raise RuntimeError("Unexpected positional arguments")
    fetch   = kwargs.pop('fetch', False)
    save    = kwargs.pop('save', True)
    publish = kwargs.pop('publish', False)

    try:
        pool = Pool(name, **kwargs)
        pool.run(fetch)
    except (ConfigError, DataError) as e:
        log.error(f"Scoring run for '{name}' aborted: {e}")
        print(f"Scoring run aborted: {e}", file=sys.stderr)
        return 1

    pool.print_results()
    if save:
        pool.save()
    if publish:
        try:
            pool.publish()
        except (ConfigError, PublishError) as e:
            log.error(f"Publishing scores for '{name}' failed: {e}")
            print(f"Publishing scores failed: {e}", file=sys.stderr)
            return 1

    return 0

if __name__ == '__main__':
    sys.exit(main())
