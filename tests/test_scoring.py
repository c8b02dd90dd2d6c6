from datetime import datetime

from app.models import Match, MatchPrediction, MultiplierType, Outcome, PredictionType, Round
from app.services.multipliers import activate_multiplier
from app.services.predictions import upsert_match_prediction, upsert_team_prediction
from app.services.scoring import (
    ROUND_POINTS,
    calculate_match_prediction_points,
    calculate_points,
    compute_prediction_points,
)

KICKOFF = datetime(2026, 6, 11, 12, 0)


def completed_match(round: Round, team1_score: int, team2_score: int) -> Match:
    return Match(
        round=round,
        team1_id=1,
        team2_id=2,
        scheduled_datetime=KICKOFF,
        team1_score=team1_score,
        team2_score=team2_score,
        is_completed=True
    )


def prediction(team1_score: int, team2_score: int, outcome: Outcome) -> MatchPrediction:
    return MatchPrediction(
        user_id=1,
        match_id=1,
        predicted_team1_score=team1_score,
        predicted_team2_score=team2_score,
        predicted_outcome=outcome
    )


def test_round_points_increase_with_round_importance():
    rounds = [Round.QUALIFYING, Round.ROUND_OF_16, Round.QUARTERFINALS, Round.SEMIFINALS, Round.FINAL]
    outcome_awards = [ROUND_POINTS[r]["outcome"] for r in rounds]
    exact_awards = [ROUND_POINTS[r]["exact"] for r in rounds]

    assert outcome_awards == sorted(outcome_awards)
    assert exact_awards == sorted(exact_awards)
    for r in rounds:
        assert ROUND_POINTS[r]["exact"] > ROUND_POINTS[r]["outcome"] > 0


def test_calculate_points_exact_score():
    match = completed_match(Round.QUALIFYING, 2, 1)
    assert calculate_points(prediction(2, 1, Outcome.TEAM1), match) == 25


def test_calculate_points_correct_outcome_only():
    match = completed_match(Round.QUARTERFINALS, 2, 1)
    assert calculate_points(prediction(3, 0, Outcome.TEAM1), match) == 15


def test_calculate_points_draw_outcome():
    match = completed_match(Round.ROUND_OF_16, 1, 1)
    assert calculate_points(prediction(2, 2, Outcome.DRAW), match) == 10


def test_calculate_points_wrong_outcome():
    # Predicted 1-1, actual 2-0: draw is not a team1 win
    match = completed_match(Round.QUALIFYING, 2, 0)
    assert calculate_points(prediction(1, 1, Outcome.DRAW), match) == 0


def test_calculate_points_semifinal_exact_score():
    match = completed_match(Round.SEMIFINALS, 3, 1)
    assert calculate_points(prediction(3, 1, Outcome.TEAM1), match) == 100


def test_calculate_points_incomplete_match():
    match = Match(round=Round.FINAL, team1_id=1, team2_id=2, scheduled_datetime=KICKOFF)
    assert calculate_points(prediction(1, 0, Outcome.TEAM1), match) == 0


def test_match_points_use_larger_team_multiplier(session, user, make_team, make_match):
    france = make_team("France", "D")
    brazil = make_team("Brazil", "B")
    match = make_match(france, brazil, Round.FINAL, score=(2, 0))
    upsert_match_prediction(session, user.id, match.id, 2, 0)

    activate_multiplier(session, user.id, france.id, MultiplierType.DOUBLE_UP)
    assert calculate_match_prediction_points(session, user.id, match.id) == 125 * 2

    # A multiplier on the other team too does not compound
    activate_multiplier(session, user.id, brazil.id, MultiplierType.DOUBLE_UP)
    assert calculate_match_prediction_points(session, user.id, match.id) == 125 * 2

    # Both multiplier types on one team stack to x4
    activate_multiplier(session, user.id, france.id, MultiplierType.RE_DOUBLE_UP)
    assert calculate_match_prediction_points(session, user.id, match.id) == 125 * 4


def test_match_points_without_prediction_or_result(session, user, make_team, make_match):
    spain = make_team("Spain", "C")
    germany = make_team("Germany", "C")
    played = make_match(spain, germany, score=(1, 0))
    pending = make_match(spain, germany)
    upsert_match_prediction(session, user.id, pending.id, 1, 0)

    assert calculate_match_prediction_points(session, user.id, played.id) == 0
    assert calculate_match_prediction_points(session, user.id, pending.id) == 0


def test_tp1_winner_and_runner_up_with_double_up(session, user, make_team, make_match):
    team_x = make_team("Team X", "A")
    team_y = make_team("Team Y", "B")
    make_match(team_x, team_y, Round.FINAL, score=(2, 0))

    upsert_team_prediction(session, user.id, PredictionType.TP1, team_x.id, team_y.id)
    activate_multiplier(session, user.id, team_x.id, MultiplierType.DOUBLE_UP)

    points = compute_prediction_points(session, user.id, prediction_type=PredictionType.TP1)
    assert points == (500 + 300) * 2


def test_tp3_runner_up_only_uses_winner_multiplier(session, user, make_team, make_match):
    team_x = make_team("Team X", "A")
    team_y = make_team("Team Y", "B")
    team_z = make_team("Team Z", "C")
    make_match(team_x, team_y, Round.FINAL, score=(1, 3))

    # Predicted Z to win (wrong) and X runner-up (right); the multiplier on X is ignored
    upsert_team_prediction(session, user.id, PredictionType.TP3, team_z.id, team_x.id)
    activate_multiplier(session, user.id, team_x.id, MultiplierType.DOUBLE_UP)

    assert compute_prediction_points(session, user.id, prediction_type=PredictionType.TP3) == 300


def test_tp1_scores_zero_without_completed_final(session, user, make_team, make_match):
    team_x = make_team("Team X", "A")
    team_y = make_team("Team Y", "B")
    make_match(team_x, team_y, Round.FINAL)
    upsert_team_prediction(session, user.id, PredictionType.TP1, team_x.id, team_y.id)

    assert compute_prediction_points(session, user.id, prediction_type=PredictionType.TP1) == 0


def test_drawn_final_decided_on_penalties(session, user, make_team, make_match):
    team_x = make_team("Team X", "A")
    team_y = make_team("Team Y", "B")
    make_match(team_x, team_y, Round.FINAL, score=(1, 1), penalty_winner=team_y)
    upsert_team_prediction(session, user.id, PredictionType.TP1, team_y.id, team_x.id)

    assert compute_prediction_points(session, user.id, prediction_type=PredictionType.TP1) == 800


def test_tp2_group_winner_and_runner_up(session, user, make_team, make_match):
    usa = make_team("United States", "A")
    mexico = make_team("Mexico", "A")
    canada = make_team("Canada", "A")
    make_match(usa, mexico, score=(2, 0))
    make_match(mexico, canada, score=(1, 0))

    upsert_team_prediction(session, user.id, PredictionType.TP2, usa.id, mexico.id, "A")
    assert compute_prediction_points(
        session, user.id, prediction_type=PredictionType.TP2, group_letter="A"
    ) == 300

    activate_multiplier(session, user.id, usa.id, MultiplierType.DOUBLE_UP)
    assert compute_prediction_points(
        session, user.id, prediction_type=PredictionType.TP2, group_letter="A"
    ) == 600


def test_tp2_scores_zero_before_group_results(session, user, make_team, make_match):
    usa = make_team("United States", "A")
    mexico = make_team("Mexico", "A")
    make_match(usa, mexico)

    upsert_team_prediction(session, user.id, PredictionType.TP2, usa.id, mexico.id, "A")
    assert compute_prediction_points(
        session, user.id, prediction_type=PredictionType.TP2, group_letter="A"
    ) == 0


def test_missing_team_prediction_scores_zero(session, user):
    assert compute_prediction_points(session, user.id, prediction_type=PredictionType.TP3) == 0


def test_scoring_failure_falls_back_to_zero(session, user, make_team, make_match, monkeypatch):
    team_x = make_team("Team X", "A")
    team_y = make_team("Team Y", "B")
    make_match(team_x, team_y, Round.FINAL, score=(2, 0))
    upsert_team_prediction(session, user.id, PredictionType.TP1, team_x.id, team_y.id)

    def broken(db, prediction):
        raise RuntimeError("dependent data missing")

    monkeypatch.setattr("app.services.scoring.calculate_team_prediction_points", broken)

    assert compute_prediction_points(session, user.id, prediction_type=PredictionType.TP1) == 0
