# -*- coding: utf-8 -*-

from typing import NamedTuple
from collections.abc import Iterable, Sequence

from .core import log, MalformedPrediction

# poll sheet column layout: identity fields, title winner pick, then one column
# per bowl game (in the order presented by the poll)
TIMESTAMP_COL  = 0
FIRST_NAME_COL = 1
LAST_NAME_COL  = 2
TITLE_COL      = 3
FIRST_GAME_COL = 4

############
# Identity #
############

class Identity(NamedTuple):
    timestamp:  str  # unique per poll submission
    first_name: str
    last_name:  str

    @property
    def full_name(self) -> str:
        return f"{self.first_name} {self.last_name}"

##################
# UserPrediction #
##################

class UserPrediction(NamedTuple):
    """All picks for a single poll participant.  Note that `game_picks` is ordered by
    poll question slot, and is not associated with any specific game outcome (a pick
    is judged correct if it names the winner of any game in the pool).
    """
    identity:          Identity
    title_winner_pick: str
    game_picks:        tuple[str, ...]

#########################
# Prediction Normalizer #
#########################

def cell(row: Sequence[str], idx: int) -> str:
    """Return stripped cell value (the poll service omits trailing empty cells)
    """
    return str(row[idx]).strip() if idx < len(row) and row[idx] is not None else ''

def prediction_from_row(row: Sequence[str], num_slots: int = None) -> UserPrediction:
    """Build `UserPrediction` from a poll response row.  If `num_slots` is specified,
    `game_picks` is padded (with empty picks) or truncated to that length.

    :raises MalformedPrediction: if any identity field is missing
    """
    identity = Identity(cell(row, TIMESTAMP_COL),
                        cell(row, FIRST_NAME_COL),
                        cell(row, LAST_NAME_COL))
    missing = [f for f, v in identity._asdict().items() if not v]
    if missing:
        raise MalformedPrediction(f"Missing identity field(s) {missing} in row {list(row)}")

    if num_slots is None:
        num_slots = max(len(row) - FIRST_GAME_COL, 0)
    game_picks = tuple(cell(row, FIRST_GAME_COL + i) for i in range(num_slots))
    return UserPrediction(identity, cell(row, TITLE_COL), game_picks)

def normalize_predictions(rows: Iterable[Sequence[str]]) -> list[UserPrediction]:
    """Convert raw poll rows (including the header row, which is used to determine
    the number of game slots) into `UserPrediction` records, one per response row.
    Malformed responses are dropped (and logged).
    """
    rows = iter(rows)
    header = next(rows, None)
    if header is None:
        log.info("No poll header row, no predictions")
        return []
    num_slots = max(len(header) - FIRST_GAME_COL, 0)

    predictions = []
    for i, row in enumerate(rows, start=2):  # sheet row number, for diagnostics
        try:
            predictions.append(prediction_from_row(row, num_slots))
        except MalformedPrediction as e:
            log.warning(f"Dropping poll row {i}: {e}")

    log.debug(f"{len(predictions)} predictions normalized ({num_slots} game slots)")
    return predictions
