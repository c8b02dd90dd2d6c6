"""
Admin utilities for managing the fantasy league.

Usage:
    python scripts/admin_utils.py leaderboard
    python scripts/admin_utils.py update-match 1 2 1
    python scripts/admin_utils.py user john_doe
"""
import argparse
import sys
from pathlib import Path

# Add parent directory to path
sys.path.insert(0, str(Path(__file__).parent.parent))

from sqlmodel import Session, select

from app.config import LOG_LEVEL
from app.database import engine, create_db_and_tables
from app.logging_config import setup_logging
from app.models import Match, Team, User
from app.services.leaderboard import get_league_stats, get_leaderboard
from app.services.predictions import get_match_predictions, get_team_predictions
from app.services.recalculation import get_user_points, recalculate_all
from app.services.tournament import get_matches, record_match_result

MEDALS = {1: "🥇", 2: "🥈", 3: "🥉"}


def team_name(session: Session, team_id) -> str:
    team = session.get(Team, team_id) if team_id else None
    return team.name if team else "TBD"


def show_leaderboard(session: Session, limit: int = 20) -> None:
    print("\n🏆 CURRENT LEADERBOARD\n")
    print("═" * 60)
    for row in get_leaderboard(session, limit):
        medal = MEDALS.get(row["rank"], "  ")
        print(f"{medal} {row['rank']:>2}. {row['username']:<20} | {row['total_points']:>6} pts")
        print(f"     TP1: {row['tp1_points']}  TP2: {row['tp2_points']}  "
              f"TP3: {row['tp3_points']}  Match: {row['match_points']}")
    print("═" * 60)


def update_match(session: Session, match_id: int, team1_score: int, team2_score: int) -> None:
    print(f"\n⚽ Updating match {match_id}: {team1_score} - {team2_score}\n")

    match = session.get(Match, match_id)
    if not match:
        print("❌ Match not found")
        return

    print(f"Match: {team_name(session, match.team1_id)} vs {team_name(session, match.team2_id)}")
    print(f"Round: {match.round.value}")

    record_match_result(session, match, team1_score, team2_score)
    print("✅ Match updated")

    print("\n📊 Recalculating all user points...\n")
    report = recalculate_all(session)
    print(f"✅ Points recalculated for {report['updated']} users")
    if report["failed"]:
        print(f"⚠️  Failed for user ids: {report['failed']}")


def list_upcoming(session: Session, limit: int = 20) -> None:
    print("\n📅 UPCOMING MATCHES\n")
    print("═" * 80)
    for match in get_matches(session, upcoming_only=True)[:limit]:
        print(f"ID: {match.id:>3} | {team_name(session, match.team1_id):<20} vs "
              f"{team_name(session, match.team2_id):<20} | "
              f"{match.scheduled_datetime:%Y-%m-%d %H:%M} | {match.round.value}")
    print("═" * 80)


def show_user(session: Session, username: str) -> None:
    print(f"\n📊 USER STATISTICS: {username}\n")
    print("═" * 60)

    user = session.exec(select(User).where(User.username == username)).first()
    if not user:
        print("❌ User not found")
        return

    points = get_user_points(session, user.id)
    print(f"Username: {user.username}")
    print(f"Email: {user.email}")
    print(f"Total Points: {points.total_points if points else 0}")
    if points:
        print(f"  - TP1 Points: {points.tp1_points}")
        print(f"  - TP2 Points: {points.tp2_points}")
        print(f"  - TP3 Points: {points.tp3_points}")
        print(f"  - Match Points: {points.match_points}")

    team_predictions = get_team_predictions(session, user.id)
    if team_predictions:
        print("\nTeam Predictions:")
        for pred in team_predictions:
            label = pred.prediction_type.value
            if pred.group_letter:
                label += f" (Group {pred.group_letter})"
            print(f"  {label}: Winner: {team_name(session, pred.winner_team_id)}, "
                  f"Runner-up: {team_name(session, pred.runner_up_team_id)}")

    print(f"\nMatch Predictions Made: {len(get_match_predictions(session, user.id))}")
    print("═" * 60)


def show_stats(session: Session) -> None:
    print("\n📈 LEAGUE STATISTICS\n")
    print("═" * 60)
    stats = get_league_stats(session)
    print(f"Total Users: {stats['users']}")
    print(f"Total Teams: {stats['teams']}")
    print(f"Total Matches: {stats['matches']}")
    print(f"Completed Matches: {stats['completed_matches']}")
    print(f"Match Predictions: {stats['match_predictions']}")
    print(f"Team Predictions: {stats['team_predictions']}")
    print("═" * 60)


def main():
    """Main entry point."""
    parser = argparse.ArgumentParser(description="Fantasy league admin utilities")
    subparsers = parser.add_subparsers(dest="command", required=True)

    subparsers.add_parser("leaderboard", help="Show current leaderboard")

    update_parser = subparsers.add_parser("update-match", help="Record a match result")
    update_parser.add_argument("match_id", type=int)
    update_parser.add_argument("team1_score", type=int)
    update_parser.add_argument("team2_score", type=int)

    subparsers.add_parser("upcoming", help="List upcoming matches")

    user_parser = subparsers.add_parser("user", help="View user statistics")
    user_parser.add_argument("username")

    subparsers.add_parser("recalculate", help="Recalculate all points")
    subparsers.add_parser("stats", help="Show league statistics")

    args = parser.parse_args()

    setup_logging(LOG_LEVEL)
    create_db_and_tables()

    with Session(engine) as session:
        if args.command == "leaderboard":
            show_leaderboard(session)
        elif args.command == "update-match":
            update_match(session, args.match_id, args.team1_score, args.team2_score)
        elif args.command == "upcoming":
            list_upcoming(session)
        elif args.command == "user":
            show_user(session, args.username)
        elif args.command == "recalculate":
            print("\n🔄 RECALCULATING ALL POINTS\n")
            report = recalculate_all(session)
            print(f"✅ All points recalculated ({report['updated']} users)\n")
        elif args.command == "stats":
            show_stats(session)


if __name__ == "__main__":
    main()
