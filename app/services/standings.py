from typing import List, Dict, Any, Optional, Tuple
from sqlmodel import Session, select, or_

from ..models.enums import Round
from ..models.match import Match
from ..models.team import Team

WIN_POINTS = 3
DRAW_POINTS = 1


def _completed_qualifying_matches(db: Session, team_ids: List[int]) -> List[Match]:
    query = select(Match).where(
        Match.round == Round.QUALIFYING,
        Match.is_completed == True,
        or_(Match.team1_id.in_(team_ids), Match.team2_id.in_(team_ids))
    )
    return list(db.exec(query).all())


def _apply_result(stats: Dict[str, Any], goals_for: int, goals_against: int) -> None:
    stats["played"] += 1
    stats["goals_for"] += goals_for
    stats["goals_against"] += goals_against

    if goals_for > goals_against:
        stats["won"] += 1
        stats["points"] += WIN_POINTS
    elif goals_for < goals_against:
        stats["lost"] += 1
    else:
        stats["drawn"] += 1
        stats["points"] += DRAW_POINTS


def calculate_group_standings(db: Session, group_letter: str) -> List[Dict[str, Any]]:
    """
    Calculate official group standings from completed qualifying matches.
    Returns teams sorted by: Points > Goal Diff > Team id
    """
    teams = db.exec(select(Team).where(Team.group_letter == group_letter)).all()
    if not teams:
        return []

    teams_stats: Dict[int, Dict[str, Any]] = {}
    for team in teams:
        teams_stats[team.id] = {
            "team_id": team.id,
            "team_name": team.name,
            "country_code": team.country_code,
            "played": 0,
            "won": 0,
            "drawn": 0,
            "lost": 0,
            "goals_for": 0,
            "goals_against": 0,
            "goal_diff": 0,
            "points": 0
        }

    for match in _completed_qualifying_matches(db, list(teams_stats)):
        if match.team1_id in teams_stats:
            _apply_result(teams_stats[match.team1_id], match.team1_score, match.team2_score)
        if match.team2_id in teams_stats:
            _apply_result(teams_stats[match.team2_id], match.team2_score, match.team1_score)

    for stats in teams_stats.values():
        stats["goal_diff"] = stats["goals_for"] - stats["goals_against"]

    # Team id is the final key so fully tied teams keep a stable order
    sorted_standings = sorted(
        teams_stats.values(),
        key=lambda x: (-x["points"], -x["goal_diff"], x["team_id"])
    )

    for i, standing in enumerate(sorted_standings):
        standing["position"] = i + 1

    return sorted_standings


def get_qualifying_round_leaders(db: Session, group_letter: str) -> List[Dict[str, Any]]:
    """Top 2 teams of a group: the group winner and runner-up."""
    return calculate_group_standings(db, group_letter)[:2]


def group_has_results(db: Session, group_letter: str) -> bool:
    """Whether any qualifying match of the group has been completed."""
    team_ids = db.exec(select(Team.id).where(Team.group_letter == group_letter)).all()
    if not team_ids:
        return False
    return len(_completed_qualifying_matches(db, list(team_ids))) > 0


def get_team_qualifying_record(db: Session, team_id: int) -> Tuple[int, int]:
    """(completed qualifying matches, standings points) for one team."""
    stats = {"played": 0, "won": 0, "drawn": 0, "lost": 0,
             "goals_for": 0, "goals_against": 0, "points": 0}

    for match in _completed_qualifying_matches(db, [team_id]):
        if match.team1_id == team_id:
            _apply_result(stats, match.team1_score, match.team2_score)
        else:
            _apply_result(stats, match.team2_score, match.team1_score)

    return stats["played"], stats["points"]


def is_eliminated_in_qualifying(db: Session, team_id: int) -> bool:
    """
    A team is out once every qualifying match of its group is played
    and it did not finish in the top 2.
    """
    team = db.get(Team, team_id)
    if not team or not team.group_letter:
        return False

    team_ids = db.exec(select(Team.id).where(Team.group_letter == team.group_letter)).all()
    pending = db.exec(
        select(Match).where(
            Match.round == Round.QUALIFYING,
            Match.is_completed == False,
            or_(Match.team1_id.in_(team_ids), Match.team2_id.in_(team_ids))
        )
    ).first()
    if pending:
        return False

    leaders = get_qualifying_round_leaders(db, team.group_letter)
    return team_id not in {leader["team_id"] for leader in leaders}


def get_tournament_result(db: Session) -> Optional[Tuple[int, int]]:
    """
    (winner_id, runner_up_id) from the most recent completed final.

    A drawn final is decided by its penalty winner; without one there is
    no decisive result yet.
    """
    final_match = db.exec(
        select(Match)
        .where(Match.round == Round.FINAL, Match.is_completed == True)
        .order_by(Match.scheduled_datetime.desc())
        .limit(1)
    ).first()

    if not final_match:
        return None

    if final_match.team1_score > final_match.team2_score:
        return final_match.team1_id, final_match.team2_id
    if final_match.team2_score > final_match.team1_score:
        return final_match.team2_id, final_match.team1_id
    if final_match.penalty_winner_id == final_match.team1_id:
        return final_match.team1_id, final_match.team2_id
    if final_match.penalty_winner_id == final_match.team2_id:
        return final_match.team2_id, final_match.team1_id
    return None
