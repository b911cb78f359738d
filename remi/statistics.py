from typing import Dict, Iterable, List, Optional, Tuple

from remi.engine import totals, winner_index
from remi.models import Match, PlayerStats


def compute_player_stats(history: Iterable[Match]) -> List[PlayerStats]:
    """
    Per-player statistics over finished matches.

    - Players are identified by exact name; equal names are merged,
      also when they sit at the same table.
    - Sorted by win rate, best first. Ties keep first-appearance
      order (history is most recent first, then player index).
    """
    participations: Dict[str, List[Tuple[Match, int]]] = {}

    for match in history:
        if not match.finished:
            continue

        for idx, name in enumerate(match.players):
            participations.setdefault(name, []).append((match, idx))

    stats = [_stats_for(name, entries) for name, entries in participations.items()]
    stats.sort(key=lambda s: s.win_rate_percent, reverse=True)
    return stats


def player_stats(history: Iterable[Match], name: str) -> Optional[PlayerStats]:
    for s in compute_player_stats(history):
        if s.name == name:
            return s
    return None


def _stats_for(name: str, entries: List[Tuple[Match, int]]) -> PlayerStats:
    matches_won = 0
    rounds_played = 0
    rounds_won = 0
    points = 0
    match_totals: List[int] = []

    for match, idx in entries:
        player_total = totals(match)[idx]

        if idx == winner_index(match):
            matches_won += 1

        rounds_played += len(match.rounds)
        rounds_won += sum(1 for r in match.rounds if r.scores[idx] == 0)
        points += player_total
        match_totals.append(player_total)

    matches_played = len(entries)

    return PlayerStats(
        name=name,
        matches_played=matches_played,
        matches_won=matches_won,
        rounds_played=rounds_played,
        rounds_won=rounds_won,
        average_per_round=points / rounds_played if rounds_played else 0.0,
        # 0 doubles as "no participations", see DESIGN.md
        best_match_total=min(match_totals) if match_totals else 0,
        win_rate_percent=matches_won * 100.0 / matches_played if matches_played else 0.0,
    )
