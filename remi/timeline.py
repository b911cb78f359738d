from dataclasses import dataclass, replace
from typing import List, Tuple

from remi.engine import has_winner, ranking, totals
from remi.models import Match


@dataclass(frozen=True)
class RoundSnapshot:
    round_number: int
    scores: Tuple[int, ...]
    totals: Tuple[int, ...]
    ranking: Tuple[int, ...]
    leader: int
    has_winner: bool


def build_match_timeline(match: Match) -> List[RoundSnapshot]:
    """
    Replays a match round by round.
    Returns one snapshot after each round.
    Does NOT mutate the given match.
    """
    timeline: List[RoundSnapshot] = []

    for index in range(len(match.rounds)):
        partial = replace(match, rounds=match.rounds[: index + 1])
        order = ranking(partial)

        timeline.append(
            RoundSnapshot(
                round_number=index + 1,
                scores=match.rounds[index].scores,
                totals=tuple(totals(partial)),
                ranking=tuple(order),
                leader=order[0],
                has_winner=has_winner(partial),
            )
        )

    return timeline
