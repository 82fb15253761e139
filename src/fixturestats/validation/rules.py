"""Declarative rule tables for the panel consistency checks."""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Dict, Tuple


SECTION_LABELS: Dict[str, str] = {
    "match": "Match",
    "h2h": "H2H",
    "corners": "Corners",
    "cards": "Cards",
    "btts": "BTTS",
    "players": "Players",
}
CONSISTENCY_SECTION = "Consistency"

STATISTICS_SECTIONS: Tuple[str, ...] = ("corners", "cards", "btts")
TEAM_BLOCKS: Tuple[str, ...] = ("homeStats", "awayStats", "combinedStats", "refereeStats")
PLAYER_TEAMS: Dict[str, Tuple[str, ...]] = {
    "homeStats": ("homeTeam", "homeTeamPlayers"),
    "awayStats": ("awayTeam", "awayTeamPlayers"),
}

REQUIRED_MATCH_FIELDS: Tuple[str, ...] = ("homeTeam", "awayTeam", "league", "date")


@dataclass(frozen=True)
class AverageRule:
    total: str
    count: str
    average: str


@dataclass(frozen=True)
class CompositeBound:
    first: str
    second: str


@dataclass(frozen=True)
class PeriodBreakdown:
    breakdown: str
    total: str


@dataclass(frozen=True)
class CrossSectionTotal:
    player_fields: Tuple[str, ...]
    section: str
    total: str


DISTRIBUTION_FIELDS: Tuple[str, ...] = (
    "overUnderProbabilities",
    "resultProbabilities",
    "outcomeProbabilities",
)

AVERAGE_RULES: Tuple[AverageRule, ...] = (
    AverageRule("totalCorners", "matchCount", "averageCorners"),
    AverageRule("totalCards", "matchesAnalyzed", "averageCardsPerMatch"),
    AverageRule("totalCards", "matchCount", "averageCards"),
    AverageRule("totalYellowCards", "matchesAnalyzed", "averageYellowCardsPerMatch"),
    AverageRule("totalRedCards", "matchesAnalyzed", "averageRedCardsPerMatch"),
    AverageRule("totalGoals", "matchCount", "averageGoals"),
    AverageRule("totalCards", "totalMatches", "averageCardsPerMatch"),
    AverageRule("totalYellowCards", "totalMatches", "averageYellowCardsPerMatch"),
    AverageRule("totalRedCards", "totalMatches", "averageRedCardsPerMatch"),
)

POISSON_LAMBDA_PATH: Tuple[str, ...] = ("_debug", "poissonLambda")
POISSON_EXPECTED_FIELDS: Tuple[str, ...] = ("expectedCards", "expectedCorners", "expectedGoals")

PERCENTAGE_FIELDS: Tuple[str, ...] = (
    "bttsPercentage",
    "cleanSheetPercentage",
    "failedToScorePercentage",
    "winPercentage",
    "drawPercentage",
    "lossPercentage",
)

OVER_RATE_FIELDS: Tuple[str, ...] = ("overRates", "goalOverRates", "cornerOverRates", "cardOverRates")

COMPOSITE_BOUNDS: Tuple[CompositeBound, ...] = (
    CompositeBound("bttsPercentage", "cleanSheetPercentage"),
    CompositeBound("bttsPercentage", "failedToScorePercentage"),
)

PERIOD_BREAKDOWNS: Tuple[PeriodBreakdown, ...] = (
    PeriodBreakdown("cardsByPeriod", "totalCards"),
    PeriodBreakdown("cornersByPeriod", "totalCorners"),
    PeriodBreakdown("goalsByPeriod", "totalGoals"),
    PeriodBreakdown("goalsByMinuteRange", "totalGoals"),
)

CROSS_SECTION_TOTALS: Tuple[CrossSectionTotal, ...] = (
    CrossSectionTotal(("goals", "playerGoals"), "btts", "totalGoals"),
    CrossSectionTotal(("cards", "totalCards"), "cards", "totalCards"),
)

GOALKEEPER_POSITIONS = frozenset({"goalkeeper", "goalkeepers", "gk"})

PLAYER_LIST_FIELDS: Tuple[str, ...] = ("players", "mostCardedPlayers")
PLAYER_ID_FIELDS: Tuple[str, ...] = ("playerId", "id")
PLAYER_NAME_FIELDS: Tuple[str, ...] = ("name", "playerName")
PLAYER_GAMES_FIELDS: Tuple[str, ...] = ("gamesPlayed", "appearances", "matchesPlayed")


@dataclass(frozen=True)
class PlaceholderPatterns:
    identifiers: Tuple[re.Pattern[str], ...]
    names: Tuple[re.Pattern[str], ...]

    def is_placeholder_id(self, value: str) -> bool:
        return any(pattern.search(value) for pattern in self.identifiers)

    def is_placeholder_name(self, value: str) -> bool:
        text = value.strip()
        return any(pattern.fullmatch(text) for pattern in self.names)


PLACEHOLDER_PATTERNS = PlaceholderPatterns(
    identifiers=(re.compile(r"undefined", re.IGNORECASE), re.compile(r"\bnull\b", re.IGNORECASE)),
    names=(
        re.compile(r"player\s*#?\d*", re.IGNORECASE),
        re.compile(r"unknown(\s+(home|away|player|team))?", re.IGNORECASE),
        re.compile(r"team\s+[a-z]", re.IGNORECASE),
        re.compile(r"tbd|tba", re.IGNORECASE),
    ),
)
