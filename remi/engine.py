import logging
import string
from dataclasses import replace
from datetime import datetime
from typing import Callable, List, Optional, Sequence, Union

from remi.config import DEFAULT_TARGET_SCORE, INT32_MAX, MATCH_NAME_DATE_FORMAT
from remi.exceptions import MatchFinishedError, MatchValidationError
from remi.generators import Clock, RandomIdGenerator, system_clock
from remi.models import Match, Round

logger = logging.getLogger(__name__)


# =========================================================
# AGGREGATION
# =========================================================

def totals(match: Match) -> List[int]:
    return [
        sum(r.scores[i] for r in match.rounds)
        for i in range(len(match.players))
    ]


def ranking(match: Match) -> List[int]:
    """
    Player indices, best (lowest total) first.
    sorted() is stable, so equal totals keep player index order.
    """
    current = totals(match)
    return sorted(range(len(match.players)), key=lambda i: current[i])


def winner_index(match: Match) -> int:
    """
    Index of the lowest total, smallest index on ties.

    A match with no rounds returns 0 with everyone tied at 0;
    check has_winner() before treating this as a real result.
    """
    return ranking(match)[0]


def has_winner(match: Match) -> bool:
    """
    True once any total reaches target_score.

    Reaching the target ends the match, it does not win it:
    the winner is still winner_index(), the lowest total.
    """
    if not match.rounds:
        return False

    return any(t >= match.target_score for t in totals(match))


# =========================================================
# INPUT COERCION
# =========================================================

def _to_int(text: Union[str, int, None]) -> Optional[int]:
    """
    ASCII digits of text as an int, None when empty or above INT32_MAX.
    """
    if text is None:
        return None

    digits = "".join(ch for ch in str(text) if ch in string.digits)
    if not digits:
        return None

    digits = digits.lstrip("0") or "0"

    # Length check first, int() refuses very long strings
    if len(digits) > len(str(INT32_MAX)):
        return None

    value = int(digits)
    return value if value <= INT32_MAX else None


def parse_score(text: Union[str, int, None]) -> int:
    value = _to_int(text)
    return value if value is not None else 0


def parse_target_score(text: Union[str, int, None]) -> int:
    value = _to_int(text)
    return value if value else DEFAULT_TARGET_SCORE


# =========================================================
# MATCH CONSTRUCTION
# =========================================================

def default_match_name(start_timestamp: int) -> str:
    started = datetime.fromtimestamp(start_timestamp / 1000)
    return f"Remi match {started.strftime(MATCH_NAME_DATE_FORMAT)}"


def create_match(
    name: str,
    players: Sequence[str],
    target_score: Union[str, int, None] = DEFAULT_TARGET_SCORE,
    id_generator: Optional[Callable[[], int]] = None,
    clock: Clock = system_clock,
) -> Match:
    """
    Build a new match from raw form input.

    Blank names are replaced: the match gets a dated default name,
    players get "Player N".
    """
    id_generator = id_generator or RandomIdGenerator()
    start = clock()

    safe_players = [
        p.strip() if p and p.strip() else f"Player {i + 1}"
        for i, p in enumerate(players)
    ]

    title = name.strip() if name and name.strip() else default_match_name(start)

    match = Match(
        id=id_generator(),
        name=title,
        start_timestamp=start,
        target_score=parse_target_score(target_score),
        players=tuple(safe_players),
    )

    logger.info("Created match %s (%s) with %d players", match.id, match.name, len(match.players))
    return match


# =========================================================
# MATCH UPDATES
# =========================================================

class ScoreEngine:
    """
    Functional score updates for one match.

    Responsibilities:
    - Append / undo rounds
    - Enforce round shape and the finished lock
    - Never mutate the wrapped match, always return a new one
    """

    def __init__(self, match: Match):
        self.match = match

    def add_round(self, scores: Sequence[int]) -> Match:
        if self.match.finished:
            raise MatchFinishedError(f"Match {self.match.id} is already finished")

        if len(scores) != len(self.match.players):
            raise MatchValidationError(
                f"Expected {len(self.match.players)} scores, got {len(scores)}"
            )

        updated = replace(self.match, rounds=self.match.rounds + (Round(tuple(int(s) for s in scores)),))
        logger.debug("Match %s: round %d added %s", updated.id, len(updated.rounds), list(scores))
        return updated

    def undo_last_round(self) -> Match:
        if not self.match.rounds:
            return self.match

        if self.match.finished:
            raise MatchFinishedError(f"Match {self.match.id} is already finished")

        return replace(self.match, rounds=self.match.rounds[:-1])

    def finish(self) -> Match:
        return replace(self.match, finished=True)
