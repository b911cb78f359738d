import logging
import random

from remi.config import QUICK_SCORES, TARGET_SCORE_PRESETS
from remi.engine import has_winner, totals, winner_index
from remi.generators import CounterIdGenerator, RandomNameGenerator
from remi.state_store import StateStore
from remi.storage import MemoryKeyValueStore

logging.basicConfig(level=logging.INFO, format="%(levelname)s %(name)s: %(message)s")

store = StateStore(
    MemoryKeyValueStore(),
    id_generator=CounterIdGenerator(),
    name_generator=RandomNameGenerator(random.Random(7)),
)


def print_totals(change):
    if change.state.active_match is not None:
        print("totals:", totals(change.state.active_match))


store.subscribe(print_totals)

store.start_match(store.generate_match_name(), ["Ana", "Bo", "Cici"], target_score="100")

store.add_round(["0", "25", "40"])
store.add_round(["30", "0", "45"])
store.add_round(["abc", "10", "5"])  # non-numeric -> 0

# Oops, wrong round
store.undo_last_round()
store.add_round(["", "10", "25"])

# Quick button: everyone gets the same score
store.add_round([QUICK_SCORES[2]] * 3)

active = store.state.active_match
print("Target reached:", has_winner(active))
print("Leader:", active.players[winner_index(active)])
print("Target presets for the next match:", ", ".join(str(t) for t in TARGET_SCORE_PRESETS))

store.finish_match()

for s in store.statistics():
    print(f"{s.name}: won {s.matches_won}/{s.matches_played}, avg {s.average_per_round:.2f}, best {s.best_match_total}")
