from remi.models import Match, Round
from remi.timeline import build_match_timeline


# -------------------------------------------------
# Helpers
# -------------------------------------------------

def make_match(rounds, target_score=100):
    return Match(
        id=7,
        name="Timeline",
        start_timestamp=0,
        target_score=target_score,
        players=("Ana", "Bo"),
        rounds=tuple(Round(r) for r in rounds),
    )


# -------------------------------------------------
# Basic Timeline Build
# -------------------------------------------------

def test_empty_timeline():
    assert build_match_timeline(make_match([])) == []


def test_timeline_tracks_running_totals():
    timeline = build_match_timeline(make_match([[50, 20], [60, 30]]))

    assert [s.round_number for s in timeline] == [1, 2]
    assert timeline[0].totals == (50, 20)
    assert timeline[0].has_winner is False
    assert timeline[1].totals == (110, 50)
    assert timeline[1].has_winner is True
    assert timeline[1].leader == 1


def test_leader_changes_over_rounds():
    timeline = build_match_timeline(make_match([[0, 10], [30, 0]], target_score=1000))

    assert timeline[0].leader == 0
    assert timeline[0].ranking == (0, 1)
    assert timeline[1].leader == 1
    assert timeline[1].scores == (30, 0)


def test_timeline_does_not_mutate_match():
    match = make_match([[1, 2], [3, 4]])

    build_match_timeline(match)

    assert len(match.rounds) == 2
