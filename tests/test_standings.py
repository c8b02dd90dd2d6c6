from app.models import Round
from app.services.standings import (
    calculate_group_standings,
    get_qualifying_round_leaders,
    get_team_qualifying_record,
    get_tournament_result,
    is_eliminated_in_qualifying,
)


def test_calculate_group_standings(session, make_team, make_match):
    # Setup Teams for Group A
    qatar = make_team("Qatar", "A")
    ecuador = make_team("Ecuador", "A")
    senegal = make_team("Senegal", "A")
    netherlands = make_team("Netherlands", "A")

    # Scenario: Qatar beats Ecuador 2-0, Senegal draws Netherlands 1-1
    make_match(qatar, ecuador, score=(2, 0))
    make_match(senegal, netherlands, score=(1, 1))

    standings = calculate_group_standings(session, "A")
    assert len(standings) == 4

    by_team = {s["team_id"]: s for s in standings}

    # Check Qatar: 3 points, GD +2
    assert by_team[qatar.id]["points"] == 3
    assert by_team[qatar.id]["goal_diff"] == 2
    assert by_team[qatar.id]["won"] == 1

    # Check Ecuador: 0 points, GD -2
    assert by_team[ecuador.id]["points"] == 0
    assert by_team[ecuador.id]["goal_diff"] == -2
    assert by_team[ecuador.id]["lost"] == 1

    # Check Senegal and Netherlands: 1 point each
    assert by_team[senegal.id]["points"] == 1
    assert by_team[senegal.id]["drawn"] == 1
    assert by_team[netherlands.id]["points"] == 1

    # Verify order: Qatar first, Ecuador last; the drawn pair is ordered by team id
    assert [s["team_id"] for s in standings] == [qatar.id, senegal.id, netherlands.id, ecuador.id]
    assert [s["position"] for s in standings] == [1, 2, 3, 4]


def test_goal_difference_breaks_points_tie(session, make_team, make_match):
    spain = make_team("Spain", "C")
    germany = make_team("Germany", "C")
    belgium = make_team("Belgium", "C")
    make_match(spain, belgium, score=(1, 0))
    make_match(germany, belgium, score=(4, 0))

    leaders = get_qualifying_round_leaders(session, "C")
    assert [leader["team_id"] for leader in leaders] == [germany.id, spain.id]


def test_only_completed_qualifying_matches_count(session, make_team, make_match):
    japan = make_team("Japan", "F")
    korea = make_team("South Korea", "F")
    make_match(japan, korea)  # not played yet
    make_match(japan, korea, Round.ROUND_OF_16, score=(0, 3))

    standings = calculate_group_standings(session, "F")
    assert all(s["played"] == 0 and s["points"] == 0 for s in standings)


def test_unknown_group_has_no_standings(session):
    assert calculate_group_standings(session, "Z") == []


def test_team_qualifying_record(session, make_team, make_match):
    morocco = make_team("Morocco", "G")
    senegal = make_team("Senegal", "G")
    ghana = make_team("Ghana", "G")
    make_match(morocco, senegal, score=(1, 1))
    make_match(ghana, morocco, score=(0, 2))
    make_match(senegal, ghana)

    assert get_team_qualifying_record(session, morocco.id) == (2, 4)
    assert get_team_qualifying_record(session, ghana.id) == (1, 0)


def test_eliminated_only_after_group_is_finished(session, make_team, make_match):
    poland = make_team("Poland", "H")
    sweden = make_team("Sweden", "H")
    serbia = make_team("Serbia", "H")
    make_match(poland, sweden, score=(2, 0))
    make_match(sweden, serbia, score=(1, 0))
    last = make_match(poland, serbia)

    assert is_eliminated_in_qualifying(session, serbia.id) is False

    last.team1_score, last.team2_score, last.is_completed = 0, 0, True
    session.add(last)
    session.commit()

    assert is_eliminated_in_qualifying(session, serbia.id) is True
    assert is_eliminated_in_qualifying(session, poland.id) is False


def test_tournament_result_from_latest_final(session, make_team, make_match):
    argentina = make_team("Argentina", "B")
    france = make_team("France", "D")

    assert get_tournament_result(session) is None

    make_match(argentina, france, Round.FINAL, score=(0, 1))
    assert get_tournament_result(session) == (france.id, argentina.id)


def test_drawn_final_without_penalty_winner_is_undecided(session, make_team, make_match):
    argentina = make_team("Argentina", "B")
    france = make_team("France", "D")
    make_match(argentina, france, Round.FINAL, score=(3, 3))

    assert get_tournament_result(session) is None
