import pytest

from remi.config import QUICK_SCORES, TARGET_SCORE_PRESETS
from remi.engine import (
    ScoreEngine,
    create_match,
    has_winner,
    parse_score,
    parse_target_score,
    ranking,
    totals,
    winner_index,
)
from remi.exceptions import MatchFinishedError, MatchValidationError
from remi.generators import CounterIdGenerator
from remi.models import Match, Round


# ---------------------------------------------------------
# Helpers
# ---------------------------------------------------------

def make_match(players=("Ana", "Bo"), rounds=(), target_score=1000):
    return Match(
        id=1,
        name="Test",
        start_timestamp=0,
        target_score=target_score,
        players=players,
        rounds=tuple(Round(r) for r in rounds),
    )


def fixed_clock():
    return 1_700_000_000_000


# ---------------------------------------------------------
# Model invariants
# ---------------------------------------------------------

@pytest.mark.parametrize("players", [("A",), ("A", "B", "C", "D", "E")])
def test_player_count_must_be_2_to_4(players):
    with pytest.raises(MatchValidationError):
        make_match(players=players)


def test_target_score_must_be_positive():
    with pytest.raises(ValueError):
        make_match(target_score=0)


def test_round_length_must_match_players():
    with pytest.raises(MatchValidationError):
        make_match(rounds=[[1, 2, 3]])


# ---------------------------------------------------------
# Aggregation
# ---------------------------------------------------------

def test_no_rounds_all_zero_and_no_winner():
    match = make_match(players=("A", "B", "C"))

    assert totals(match) == [0, 0, 0]
    assert has_winner(match) is False
    assert winner_index(match) == 0


def test_totals_preserve_sum():
    rounds = [[5, 10, 0, 7], [0, 3, 40, 2], [12, 0, 1, 9]]
    match = make_match(players=("A", "B", "C", "D"), rounds=rounds)

    assert totals(match) == [17, 13, 41, 18]
    assert sum(totals(match)) == sum(sum(r) for r in rounds)


def test_ranking_is_sorted_permutation():
    match = make_match(players=("A", "B", "C", "D"), rounds=[[30, 10, 20, 10]])

    order = ranking(match)
    current = totals(match)

    assert sorted(order) == [0, 1, 2, 3]
    assert [current[i] for i in order] == sorted(current)
    # Ties keep player index order
    assert order == [1, 3, 2, 0]


def test_winner_index_is_first_ranked():
    match = make_match(players=("A", "B", "C"), rounds=[[10, 5, 5]])

    assert winner_index(match) == ranking(match)[0] == 1


def test_win_detection_crossing_target():
    engine = ScoreEngine(make_match(target_score=100))

    after_first = engine.add_round([50, 20])
    assert totals(after_first) == [50, 20]
    assert has_winner(after_first) is False

    after_second = ScoreEngine(after_first).add_round([60, 30])
    assert totals(after_second) == [110, 50]
    assert has_winner(after_second) is True
    # Player 0 crossed the target, player 1 wins with the lowest total
    assert winner_index(after_second) == 1


def test_exactly_target_counts_as_reached():
    match = make_match(rounds=[[100, 0]], target_score=100)

    assert has_winner(match) is True


# ---------------------------------------------------------
# Updates
# ---------------------------------------------------------

def test_add_round_does_not_mutate():
    match = make_match()

    updated = ScoreEngine(match).add_round([1, 2])

    assert match.rounds == ()
    assert updated.rounds == (Round((1, 2)),)
    assert updated.id == match.id


def test_add_round_wrong_length():
    with pytest.raises(MatchValidationError):
        ScoreEngine(make_match()).add_round([1, 2, 3])


def test_add_round_after_finish():
    finished = ScoreEngine(make_match()).finish()

    assert finished.finished is True
    with pytest.raises(MatchFinishedError):
        ScoreEngine(finished).add_round([1, 2])


def test_rounds_allowed_after_target_reached():
    match = make_match(rounds=[[150, 0]], target_score=100)

    updated = ScoreEngine(match).add_round([0, 10])

    assert len(updated.rounds) == 2


def test_undo_last_round():
    match = make_match(rounds=[[1, 2], [3, 4], [5, 6]])

    undone = ScoreEngine(match).undo_last_round()

    assert [r.scores for r in undone.rounds] == [(1, 2), (3, 4)]
    assert totals(undone) == [4, 6]


def test_undo_on_empty_is_noop():
    match = make_match()

    assert ScoreEngine(match).undo_last_round() is match


# ---------------------------------------------------------
# Input coercion
# ---------------------------------------------------------

@pytest.mark.parametrize("text, expected", [
    ("25", 25),
    ("", 0),
    (None, 0),
    ("abc", 0),
    ("1a2", 12),
    (40, 40),
    ("²", 0),
    ("1²", 1),
    ("٣", 0),
    ("007", 7),
    ("2147483647", 2147483647),
    ("2147483648", 0),
    ("5" * 5000, 0),
    ("0" * 5000 + "9", 9),
])
def test_parse_score(text, expected):
    assert parse_score(text) == expected


@pytest.mark.parametrize("text, expected", [
    ("500", 500),
    ("", 1000),
    ("x", 1000),
    ("0", 1000),
    (1500, 1500),
    ("²", 1000),
    ("9999999999", 1000),
    ("5" * 5000, 1000),
])
def test_parse_target_score(text, expected):
    assert parse_target_score(text) == expected


def test_presets_are_valid_inputs():
    assert all(parse_target_score(str(t)) == t for t in TARGET_SCORE_PRESETS)
    assert all(parse_score(str(s)) == s for s in QUICK_SCORES)


# ---------------------------------------------------------
# Match construction
# ---------------------------------------------------------

def test_create_match_defaults():
    match = create_match("  ", ["Ana", "", "  "], "", id_generator=CounterIdGenerator(42), clock=fixed_clock)

    assert match.id == 42
    assert match.name.startswith("Remi match ")
    assert match.players == ("Ana", "Player 2", "Player 3")
    assert match.target_score == 1000
    assert match.start_timestamp == fixed_clock()
    assert match.rounds == ()
    assert match.finished is False


def test_create_match_keeps_given_values():
    match = create_match("Friday", ["Ana", "Bo"], "1500", id_generator=CounterIdGenerator(), clock=fixed_clock)

    assert match.name == "Friday"
    assert match.target_score == 1500


def test_create_match_rejects_too_many_players():
    with pytest.raises(MatchValidationError):
        create_match("x", ["a", "b", "c", "d", "e"], clock=fixed_clock)
