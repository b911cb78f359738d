import logging
from dataclasses import dataclass, replace
from typing import Callable, List, Optional, Sequence, Union

from remi.config import DEFAULT_TARGET_SCORE
from remi.engine import ScoreEngine, create_match, parse_score
from remi.exceptions import NoActiveMatchError, StorageError
from remi.generators import Clock, RandomIdGenerator, RandomNameGenerator, system_clock
from remi.models import AppState, Match, PlayerStats
from remi.statistics import compute_player_stats
from remi.storage import KeyValueStore, load_state, save_state

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class StateChange:
    state: AppState
    error: Optional[StorageError] = None


Listener = Callable[[StateChange], None]


class StateStore:
    """
    Single owner of the application state.

    Responsibilities:
    - Load state once, save the full state after every mutation
    - Compute every new AppState without touching the previous one
    - Notify subscribers with the new state (and a save error, if any)
    """

    def __init__(
        self,
        store: KeyValueStore,
        id_generator: Optional[Callable[[], int]] = None,
        name_generator: Optional[Callable[[], str]] = None,
        clock: Clock = system_clock,
    ):
        self._store = store
        self._id_generator = id_generator or RandomIdGenerator()
        self._name_generator = name_generator or RandomNameGenerator()
        self._clock = clock
        self._listeners: List[Listener] = []
        self._state = self.load()

    # ---------------------------------------------------------
    # Persistence
    # ---------------------------------------------------------

    def load(self) -> AppState:
        return load_state(self._store)

    def save(self, state: AppState) -> None:
        save_state(self._store, state)

    @property
    def state(self) -> AppState:
        return self._state

    # ---------------------------------------------------------
    # Subscriptions
    # ---------------------------------------------------------

    def subscribe(self, listener: Listener) -> Callable[[], None]:
        self._listeners.append(listener)

        def unsubscribe():
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def _commit(self, new_state: AppState) -> StateChange:
        self._state = new_state

        error = None
        try:
            self.save(new_state)
        except StorageError as e:
            # Keep the in-memory state, let the UI offer a retry
            logger.error("Saving state failed: %s", e)
            error = e

        change = StateChange(state=new_state, error=error)
        for listener in list(self._listeners):
            listener(change)

        return change

    # ---------------------------------------------------------
    # Mutations
    # ---------------------------------------------------------

    def _require_active(self) -> Match:
        if self._state.active_match is None:
            raise NoActiveMatchError("No active match")
        return self._state.active_match

    def start_match(
        self,
        name: str,
        players: Sequence[str],
        target_score: Union[str, int, None] = DEFAULT_TARGET_SCORE,
    ) -> Match:
        match = create_match(
            name,
            players,
            target_score,
            id_generator=self._id_generator,
            clock=self._clock,
        )

        previous = self._state.active_match
        if previous is not None:
            logger.warning("Discarding unfinished match %s (%s)", previous.id, previous.name)

        self._commit(replace(self._state, active_match=match))
        return match

    def add_round(self, scores: Sequence[Union[str, int, None]]) -> Match:
        active = self._require_active()
        updated = ScoreEngine(active).add_round([parse_score(s) for s in scores])
        self._commit(replace(self._state, active_match=updated))
        return updated

    def undo_last_round(self) -> Match:
        active = self._require_active()

        if not active.rounds:
            return active

        updated = ScoreEngine(active).undo_last_round()
        self._commit(replace(self._state, active_match=updated))
        return updated

    def finish_match(self) -> Match:
        active = self._require_active()
        finished = ScoreEngine(active).finish()

        self._commit(AppState(active_match=None, history=(finished,) + self._state.history))
        logger.info("Match %s finished after %d rounds", finished.id, len(finished.rounds))
        return finished

    def delete_match(self, match_id: int) -> None:
        remaining = tuple(m for m in self._state.history if m.id != match_id)

        if len(remaining) == len(self._state.history):
            return

        self._commit(replace(self._state, history=remaining))

    # ---------------------------------------------------------
    # Queries
    # ---------------------------------------------------------

    def get_match(self, match_id: int) -> Optional[Match]:
        for m in self._state.history:
            if m.id == match_id:
                return m
        return None

    def statistics(self) -> List[PlayerStats]:
        return compute_player_stats(self._state.history)

    def generate_match_name(self) -> str:
        return self._name_generator()
