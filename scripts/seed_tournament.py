"""Seed the 48 teams, qualifying round-robin and knockout fixtures."""
import argparse
import logging
import sys
from datetime import datetime, timedelta
from itertools import combinations
from pathlib import Path

# Add parent directory to path
sys.path.insert(0, str(Path(__file__).parent.parent))

from sqlmodel import Session, select
from app.config import ADMIN_PASSWORD, ADMIN_USERNAME, LOG_LEVEL
from app.database import engine, create_db_and_tables
from app.logging_config import setup_logging
from app.models import Match, Round, Team
from app.services.auth import create_user, get_user_by_username

logger = logging.getLogger(__name__)

# 48 teams, 8 groups of 6
TEAMS = [
    # Group A
    {"name": "United States", "country_code": "USA", "group_letter": "A"},
    {"name": "Mexico", "country_code": "MEX", "group_letter": "A"},
    {"name": "Canada", "country_code": "CAN", "group_letter": "A"},
    {"name": "Uruguay", "country_code": "URU", "group_letter": "A"},
    {"name": "Chile", "country_code": "CHI", "group_letter": "A"},
    {"name": "Panama", "country_code": "PAN", "group_letter": "A"},

    # Group B
    {"name": "Brazil", "country_code": "BRA", "group_letter": "B"},
    {"name": "Argentina", "country_code": "ARG", "group_letter": "B"},
    {"name": "Colombia", "country_code": "COL", "group_letter": "B"},
    {"name": "Ecuador", "country_code": "ECU", "group_letter": "B"},
    {"name": "Peru", "country_code": "PER", "group_letter": "B"},
    {"name": "Paraguay", "country_code": "PAR", "group_letter": "B"},

    # Group C
    {"name": "Germany", "country_code": "GER", "group_letter": "C"},
    {"name": "Spain", "country_code": "ESP", "group_letter": "C"},
    {"name": "Netherlands", "country_code": "NED", "group_letter": "C"},
    {"name": "Belgium", "country_code": "BEL", "group_letter": "C"},
    {"name": "Costa Rica", "country_code": "CRC", "group_letter": "C"},
    {"name": "Czech Republic", "country_code": "CZE", "group_letter": "C"},

    # Group D
    {"name": "France", "country_code": "FRA", "group_letter": "D"},
    {"name": "England", "country_code": "ENG", "group_letter": "D"},
    {"name": "Portugal", "country_code": "POR", "group_letter": "D"},
    {"name": "Croatia", "country_code": "CRO", "group_letter": "D"},
    {"name": "Jamaica", "country_code": "JAM", "group_letter": "D"},
    {"name": "Wales", "country_code": "WAL", "group_letter": "D"},

    # Group E
    {"name": "Italy", "country_code": "ITA", "group_letter": "E"},
    {"name": "Switzerland", "country_code": "SUI", "group_letter": "E"},
    {"name": "Denmark", "country_code": "DEN", "group_letter": "E"},
    {"name": "Austria", "country_code": "AUT", "group_letter": "E"},
    {"name": "Turkey", "country_code": "TUR", "group_letter": "E"},
    {"name": "Norway", "country_code": "NOR", "group_letter": "E"},

    # Group F
    {"name": "Japan", "country_code": "JPN", "group_letter": "F"},
    {"name": "South Korea", "country_code": "KOR", "group_letter": "F"},
    {"name": "Australia", "country_code": "AUS", "group_letter": "F"},
    {"name": "Saudi Arabia", "country_code": "KSA", "group_letter": "F"},
    {"name": "Iran", "country_code": "IRN", "group_letter": "F"},
    {"name": "Qatar", "country_code": "QAT", "group_letter": "F"},

    # Group G
    {"name": "Morocco", "country_code": "MAR", "group_letter": "G"},
    {"name": "Senegal", "country_code": "SEN", "group_letter": "G"},
    {"name": "Nigeria", "country_code": "NGA", "group_letter": "G"},
    {"name": "Ghana", "country_code": "GHA", "group_letter": "G"},
    {"name": "Egypt", "country_code": "EGY", "group_letter": "G"},
    {"name": "Cameroon", "country_code": "CMR", "group_letter": "G"},

    # Group H
    {"name": "Poland", "country_code": "POL", "group_letter": "H"},
    {"name": "Sweden", "country_code": "SWE", "group_letter": "H"},
    {"name": "Ukraine", "country_code": "UKR", "group_letter": "H"},
    {"name": "Serbia", "country_code": "SRB", "group_letter": "H"},
    {"name": "Tunisia", "country_code": "TUN", "group_letter": "H"},
    {"name": "Algeria", "country_code": "ALG", "group_letter": "H"},
]

QUALIFYING_START = datetime(2026, 6, 11, 12, 0)

# (round, number of matches, first kickoff, hours between kickoffs)
KNOCKOUT_ROUNDS = [
    (Round.ROUND_OF_16, 8, datetime(2026, 6, 28, 12, 0), 6),
    (Round.QUARTERFINALS, 4, datetime(2026, 7, 4, 12, 0), 6),
    (Round.SEMIFINALS, 2, datetime(2026, 7, 10, 15, 0), 24),
    (Round.FINAL, 1, datetime(2026, 7, 15, 18, 0), 0),
]


def qualifying_fixtures(teams_by_group):
    """
    Round robin inside each group, interleaved across groups so every
    group plays its n-th fixture on the same day.
    """
    pairs_by_group = {
        group_letter: list(combinations(team_ids, 2))
        for group_letter, team_ids in sorted(teams_by_group.items())
    }
    rounds = max(len(pairs) for pairs in pairs_by_group.values())
    for i in range(rounds):
        for pairs in pairs_by_group.values():
            if i < len(pairs):
                yield pairs[i]


def clear_tournament(session: Session):
    for model in (Match, Team):
        for row in session.exec(select(model)).all():
            session.delete(row)
    session.commit()
    logger.info("Removed existing teams and matches")


def seed_tournament(force: bool = False):
    create_db_and_tables()

    with Session(engine) as session:
        if not get_user_by_username(session, ADMIN_USERNAME):
            create_user(session, ADMIN_USERNAME, f"{ADMIN_USERNAME}@localhost", ADMIN_PASSWORD, is_admin=True)
            print(f"Created admin user '{ADMIN_USERNAME}'.")

        if force:
            clear_tournament(session)
        elif session.exec(select(Team)).first():
            print("Tournament already seeded. Use --force to re-seed.")
            return

        teams = [Team(**team_data) for team_data in TEAMS]
        session.add_all(teams)
        session.commit()
        print(f"Seeded {len(teams)} teams.")

        teams_by_group = {}
        for team in teams:
            teams_by_group.setdefault(team.group_letter, []).append(team.id)

        match_number = 0
        for team1_id, team2_id in qualifying_fixtures(teams_by_group):
            session.add(Match(
                match_number=match_number + 1,
                round=Round.QUALIFYING,
                team1_id=team1_id,
                team2_id=team2_id,
                scheduled_datetime=QUALIFYING_START + timedelta(hours=3 * match_number)
            ))
            match_number += 1
        print(f"Seeded {match_number} qualifying matches.")

        # Knockout fixtures start without teams
        for round_, count, first_kickoff, spacing in KNOCKOUT_ROUNDS:
            for i in range(count):
                match_number += 1
                session.add(Match(
                    match_number=match_number,
                    round=round_,
                    scheduled_datetime=first_kickoff + timedelta(hours=spacing * i)
                ))
            print(f"Seeded {count} {round_.value} matches.")

        session.commit()


if __name__ == "__main__":
    parser = argparse.ArgumentParser(description="Seed teams and fixtures")
    parser.add_argument("--force", action="store_true", help="Delete existing teams and matches first")
    args = parser.parse_args()

    setup_logging(LOG_LEVEL)
    seed_tournament(force=args.force)
