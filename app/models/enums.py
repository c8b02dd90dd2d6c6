from enum import Enum


class Round(str, Enum):
    QUALIFYING = "qualifying"
    ROUND_OF_16 = "round_of_16"
    QUARTERFINALS = "quarterfinals"
    SEMIFINALS = "semifinals"
    FINAL = "final"


class PredictionType(str, Enum):
    TP1 = "TP1"  # pre-tournament winner / runner-up
    TP2 = "TP2"  # group winner / runner-up, one per group
    TP3 = "TP3"  # revised winner / runner-up after qualifying


class MultiplierType(str, Enum):
    DOUBLE_UP = "double_up"
    RE_DOUBLE_UP = "re_double_up"


class Outcome(str, Enum):
    TEAM1 = "team1"
    TEAM2 = "team2"
    DRAW = "draw"


def outcome_from_scores(team1_score: int, team2_score: int) -> Outcome:
    """Outcome of a scoreline from team1's point of view."""
    if team1_score > team2_score:
        return Outcome.TEAM1
    if team2_score > team1_score:
        return Outcome.TEAM2
    return Outcome.DRAW
