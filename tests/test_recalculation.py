import pytest

from app.models import PredictionType, Round
from app.services.predictions import upsert_match_prediction, upsert_team_prediction
from app.services.recalculation import (
    calculate_user_totals,
    get_user_points,
    recalculate_all,
    recalculate_user,
    run_global_recalculation,
)
from app.services.tournament import NotFoundError, record_match_result


@pytest.fixture(name="group_stage")
def group_stage_fixture(session, make_team, make_match):
    """Two groups with one result each, plus a pending final."""
    teams = {
        "usa": make_team("United States", "A"),
        "mexico": make_team("Mexico", "A"),
        "brazil": make_team("Brazil", "B"),
        "argentina": make_team("Argentina", "B"),
    }
    matches = {
        "a1": make_match(teams["usa"], teams["mexico"], score=(2, 1)),
        "b1": make_match(teams["brazil"], teams["argentina"], score=(0, 1)),
        "final": make_match(teams["usa"], teams["argentina"], Round.FINAL),
    }
    return teams, matches


def test_user_without_predictions_scores_zero(session, user):
    points = recalculate_user(session, user.id)

    assert points.total_points == 0
    assert points.match_points == 0


def test_totals_add_up(session, user, group_stage):
    teams, matches = group_stage
    upsert_team_prediction(session, user.id, PredictionType.TP2, teams["usa"].id, teams["mexico"].id, "A")
    upsert_match_prediction(session, user.id, matches["a1"].id, 2, 1)  # exact
    upsert_match_prediction(session, user.id, matches["b1"].id, 1, 3)  # outcome

    points = recalculate_user(session, user.id)

    assert points.tp2_points == 300
    assert points.match_points == 25 + 5
    assert points.total_points == points.tp1_points + points.tp2_points + points.tp3_points + points.match_points


def test_tp2_is_summed_over_groups(session, user, group_stage):
    teams, _ = group_stage
    upsert_team_prediction(session, user.id, PredictionType.TP2, teams["usa"].id, teams["mexico"].id, "A")
    upsert_team_prediction(session, user.id, PredictionType.TP2, teams["argentina"].id, teams["brazil"].id, "B")

    assert calculate_user_totals(session, user.id)["tp2_points"] == 600


def test_recalculation_is_idempotent(session, user, group_stage):
    teams, matches = group_stage
    upsert_team_prediction(session, user.id, PredictionType.TP2, teams["usa"].id, teams["mexico"].id, "A")
    upsert_match_prediction(session, user.id, matches["a1"].id, 2, 1)

    first = recalculate_user(session, user.id)
    first_totals = (first.total_points, first.tp2_points, first.match_points)
    second = recalculate_user(session, user.id)

    assert (second.total_points, second.tp2_points, second.match_points) == first_totals
    assert first.id == second.id


def test_result_correction_overwrites_summary(session, user, group_stage):
    teams, matches = group_stage
    upsert_match_prediction(session, user.id, matches["a1"].id, 2, 1)
    assert recalculate_user(session, user.id).match_points == 25

    record_match_result(session, matches["a1"], 0, 1)

    assert recalculate_user(session, user.id).match_points == 0


def test_unknown_user(session):
    with pytest.raises(NotFoundError):
        recalculate_user(session, 12345)


def test_recalculate_all_continues_after_failure(session, make_user, group_stage, monkeypatch):
    teams, matches = group_stage
    alice_id = make_user("alice").id
    bob_id = make_user("bob").id
    for user_id in (alice_id, bob_id):
        upsert_match_prediction(session, user_id, matches["a1"].id, 2, 1)

    assert recalculate_all(session) == {"updated": 2, "failed": []}

    # Bob's next recalculation blows up; Alice's still goes through
    record_match_result(session, matches["a1"], 1, 1)

    def flaky_totals(db, user_id):
        if user_id == bob_id:
            raise RuntimeError("boom")
        return calculate_user_totals(db, user_id)

    monkeypatch.setattr("app.services.recalculation.calculate_user_totals", flaky_totals)

    report = recalculate_all(session)

    assert report == {"updated": 1, "failed": [bob_id]}
    assert get_user_points(session, alice_id).match_points == 0
    # Previous summary stays in place
    assert get_user_points(session, bob_id).match_points == 25


def test_global_recalculation_in_fresh_session(session, user, group_stage):
    _, matches = group_stage
    upsert_match_prediction(session, user.id, matches["a1"].id, 2, 1)

    report = run_global_recalculation(session.get_bind())

    assert report == {"updated": 1, "failed": []}
    assert get_user_points(session, user.id).match_points == 25
