from dataclasses import dataclass, field
from typing import Optional, Tuple

from remi.config import MIN_PLAYERS, MAX_PLAYERS
from remi.exceptions import MatchValidationError


@dataclass(frozen=True)
class Round:
    scores: Tuple[int, ...]

    def __post_init__(self):
        # Accept any sequence from callers, store as tuple
        object.__setattr__(self, "scores", tuple(self.scores))


@dataclass(frozen=True)
class Match:
    """
    One Remi game session.

    - players: index is identity, order matters
    - rounds: chronological, one score per player each
    - lower total is better
    """
    id: int
    name: str
    start_timestamp: int
    target_score: int
    players: Tuple[str, ...]
    rounds: Tuple[Round, ...] = ()
    finished: bool = False

    def __post_init__(self):
        object.__setattr__(self, "players", tuple(self.players))
        object.__setattr__(self, "rounds", tuple(self.rounds))
        self._validate()

    def _validate(self):
        if not MIN_PLAYERS <= len(self.players) <= MAX_PLAYERS:
            raise MatchValidationError(
                f"players must have {MIN_PLAYERS} to {MAX_PLAYERS} entries, got {len(self.players)}"
            )

        if self.target_score <= 0:
            raise MatchValidationError("target_score must be positive")

        for idx, r in enumerate(self.rounds):
            if len(r.scores) != len(self.players):
                raise MatchValidationError(
                    f"rounds[{idx}] has {len(r.scores)} scores, expected {len(self.players)}"
                )


@dataclass(frozen=True)
class AppState:
    active_match: Optional[Match] = None
    # Most recent first
    history: Tuple[Match, ...] = field(default_factory=tuple)

    def __post_init__(self):
        object.__setattr__(self, "history", tuple(self.history))


@dataclass(frozen=True)
class PlayerStats:
    name: str
    matches_played: int
    matches_won: int
    rounds_played: int
    rounds_won: int
    average_per_round: float
    best_match_total: int
    win_rate_percent: float
