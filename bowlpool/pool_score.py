#!/usr/bin/env python
# -*- coding: utf-8 -*-

import sys
from collections.abc import Iterable

from peewee import *

from .utils import parse_argv
from .core import log
from .db_core import db, BaseModel
from .scoring import ScoreResult

#############
# PoolScore #
#############

class PoolScore(BaseModel):
    """Persisted pool score for a participant (one row per name).  `timestamp` is
    the poll submission timestamp, recorded only when the participant is first
    inserted.
    """
    timestamp  = TextField()
    first_name = TextField()
    last_name  = TextField()
    score      = IntegerField()

    class Meta:
        table_name = 'pool_score'
        indexes = (
            # upsert key
            (('first_name', 'last_name'), True),
        )

    @property
    def full_name(self) -> str:
        return f"{self.first_name} {self.last_name}"

##########
# Schema #
##########

def create_schema(force: bool = False) -> int:
    """Create the `PoolScore` table, if it does not already exist; if `force` is
    specified, an existing table (and all of its data) is dropped first

    :return: 0 (for use as a utility function)
    """
    if db.is_closed():
        db.connect()
    if force:
        log.info(f"Dropping table '{PoolScore._meta.table_name}'")
        db.drop_tables([PoolScore])
    db.create_tables([PoolScore], safe=True)
    return 0

###############
# save_scores #
###############

def score_data_iter(results: Iterable[ScoreResult]) -> dict:
    """Iterator for score results, yields a dict suitable for feeding into
    `PoolScore`; results repeating an earlier submission timestamp are skipped
    """
    seen = set()
    for result in results:
        if result.timestamp:
            if result.timestamp in seen:
                log.warning(f"Duplicate submission '{result.timestamp}' for "
                            f"{result.first_name} {result.last_name}, skipping...")
                continue
            seen.add(result.timestamp)
        yield {'timestamp' : result.timestamp or '',
               'first_name': result.first_name,
               'last_name' : result.last_name,
               'score'     : result.score}

def save_scores(results: Iterable[ScoreResult]) -> int:
    """Upsert scores, keyed by participant name: new participants are inserted
    (with submission timestamp), existing ones only have `score` updated.  Saving
    the same results again is a no-op.

    :return: number of score records written
    """
    scores_data = list(score_data_iter(results))
    if not scores_data:
        return 0

    create_schema()
    with db.atomic():
        (PoolScore
         .insert_many(scores_data)
         .on_conflict(conflict_target=[PoolScore.first_name, PoolScore.last_name],
                      preserve=[PoolScore.score])
         .execute())

    log.info(f"Saved {len(scores_data)} pool scores")
    return len(scores_data)

def get_scores() -> list[PoolScore]:
    """Return all persisted scores, highest first (ties in order of insertion)
    """
    query = PoolScore.select().order_by(PoolScore.score.desc(), PoolScore.id)
    return list(query.execute())

########
# Main #
########

def main() -> int:
    """Built-in driver to invoke various utility functions for the module

    Usage: pool_score.py <util_func> [<args> ...]

    Functions/usage:
      - create_schema [force=<bool>]
    """
    if len(sys.argv) < 2:
        print(f"Utility function not specified", file=sys.stderr)
        return -1
    elif sys.argv[1] not in globals():
        print(f"Unknown utility function '{sys.argv[1]}'", file=sys.stderr)
        return -1

    util_func = globals()[sys.argv[1]]
    args, kwargs = parse_argv(sys.argv[2:])

    return util_func(*args, **kwargs)

if __name__ == '__main__':
    sys.exit(main())
