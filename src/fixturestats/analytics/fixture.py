"""Fixture-level analysis: windows for both sides, head-to-head and expected stats."""

from __future__ import annotations

import logging
from typing import Any, Dict, Iterable, List, Mapping, Optional, Union

from pydantic import BaseModel, Field
from pydantic.config import ConfigDict

from fixturestats.config import ValidationSettings
from fixturestats.config_loader import AnalysisProfile
from fixturestats.ingest import normalize_many
from fixturestats.models import ExpectedStats, NormalizedMatch, StatisticsBlock, ValidationReport, VenueRole
from fixturestats.pool import head_to_head, parse_match_date
from fixturestats.validation import validate

from .blocks import build_statistics_blocks
from .thresholds import aggregate, expected_statistics, over_rates


logger = logging.getLogger(__name__)


class FixtureAnalysis(BaseModel):
    home_team_id: str
    away_team_id: str
    blocks: List[StatisticsBlock] = Field(default_factory=list)
    head_to_head: List[NormalizedMatch] = Field(default_factory=list)
    expected: ExpectedStats = Field(default_factory=ExpectedStats)
    excluded_fixtures: int = Field(default=0, ge=0)

    model_config = ConfigDict(frozen=True)

    def block(self, role: Union[VenueRole, str], window_size: int) -> Optional[StatisticsBlock]:
        venue_role = VenueRole.coerce(role)
        for candidate in self.blocks:
            if candidate.role is venue_role and candidate.window_size == window_size:
                return candidate
        return None

    def largest_block(self, role: Union[VenueRole, str]) -> Optional[StatisticsBlock]:
        venue_role = VenueRole.coerce(role)
        candidates = [candidate for candidate in self.blocks if candidate.role is venue_role]
        if not candidates:
            return None
        return max(candidates, key=lambda candidate: candidate.window_size)


def analyze_fixture(
    raw_matches: Iterable[Mapping[str, Any]],
    home_team_id: Union[str, int],
    away_team_id: Union[str, int],
    profile: Optional[AnalysisProfile] = None,
) -> FixtureAnalysis:
    """Normalize a raw corpus and build both sides' windows for one fixture.

    The home side is analysed in its home matches and the away side in its
    away matches; head-to-head meetings cover both venue configurations.
    """

    profile = profile or AnalysisProfile()
    matches = normalize_many(raw_matches)
    home_id, away_id = str(home_team_id), str(away_team_id)

    blocks = build_statistics_blocks(
        matches,
        [(home_id, VenueRole.HOME), (away_id, VenueRole.AWAY)],
        profile.window_sizes,
        profile.field_configs(),
        require_completed=profile.require_completed,
        exclude_non_representative=profile.exclude_non_representative,
    )
    meetings = head_to_head(matches, home_id, away_id, require_completed=profile.require_completed)

    analysis = FixtureAnalysis(
        home_team_id=home_id,
        away_team_id=away_id,
        blocks=blocks,
        head_to_head=meetings,
        excluded_fixtures=sum(1 for match in matches if not match.representative),
    )
    analysis = analysis.model_copy(update={"expected": expected_statistics(_combined_matches(analysis))})
    logger.info(
        "Analysed fixture %s vs %s: %s blocks, %s meetings",
        home_id,
        away_id,
        len(blocks),
        len(meetings),
    )
    return analysis


def _combined_matches(analysis: FixtureAnalysis) -> List[NormalizedMatch]:
    combined: List[NormalizedMatch] = []
    for role in (VenueRole.HOME, VenueRole.AWAY):
        block = analysis.largest_block(role)
        if block is not None:
            combined.extend(block.matches)
    return combined


def _average(total: int, count: int) -> float:
    return round(total / count, 2) if count else 0.0


def _percentage(count: int, total: int) -> float:
    return round(count / total * 100, 1) if total else 0.0


def _team_panel(block: StatisticsBlock, stat: str) -> Dict[str, Any]:
    matches = block.matches
    count = len(matches)
    role = block.role.value
    panel: Dict[str, Any] = {"teamId": block.team_id}
    results = block.statistics.get(stat)

    if stat == "corners":
        total = sum(getattr(match, f"{role}_corners") for match in matches)
        panel.update(matchCount=count, totalCorners=total, averageCorners=_average(total, count))
    elif stat == "cards":
        total = sum(getattr(match, f"{role}_cards") for match in matches)
        panel.update(matchesAnalyzed=count, totalCards=total, averageCardsPerMatch=_average(total, count))
    else:
        scored = [match.team_goals(block.role) for match in matches]
        conceded = [match.conceded_goals(block.role) for match in matches]
        total = sum(scored)
        panel.update(
            matchCount=count,
            totalGoals=total,
            averageGoals=_average(total, count),
            bttsPercentage=_percentage(sum(1 for match in matches if match.home_goals and match.away_goals), count),
            cleanSheetPercentage=_percentage(sum(1 for goals in conceded if goals == 0), count),
            failedToScorePercentage=_percentage(sum(1 for goals in scored if goals == 0), count),
        )
    if results is not None:
        panel["overRates"] = over_rates(results)
    return panel


def _meeting(match: NormalizedMatch) -> Dict[str, Any]:
    moment = parse_match_date(match.date)
    return {
        "date": moment.date().isoformat() if moment is not None else match.date,
        "homeTeam": {"id": match.home_team_id, "name": match.home_team_name},
        "awayTeam": {"id": match.away_team_id, "name": match.away_team_name},
        "score": {"home": match.home_goals, "away": match.away_goals},
    }


def _combined_panel(analysis: FixtureAnalysis, stat: str, field: str) -> Dict[str, Any]:
    combined = _combined_matches(analysis)
    thresholds: List[float] = []
    for role in (VenueRole.HOME, VenueRole.AWAY):
        block = analysis.largest_block(role)
        if block is not None and block.statistics.get(stat):
            thresholds = [result.threshold for result in block.statistics[stat]]
            break
    panel: Dict[str, Any] = {"matchCount": len(combined)}
    if thresholds:
        panel["overRates"] = over_rates(aggregate(combined, field, thresholds))
    return panel


def panels_from_analysis(analysis: FixtureAnalysis) -> Dict[str, Dict[str, Any]]:
    """Render an analysis as ``h2h``/``corners``/``cards``/``btts`` panels the validator understands.

    Team blocks come from each side's largest window; ``combinedStats`` pools
    both windows.
    """

    panels: Dict[str, Dict[str, Any]] = {}
    panels["h2h"] = {"matches": [_meeting(match) for match in analysis.head_to_head]}
    for section, stat, field, expected_key in (
        ("corners", "corners", "total_corners", "expectedCorners"),
        ("cards", "cards", "total_cards", "expectedCards"),
        ("btts", "goals", "total_goals", "expectedGoals"),
    ):
        panel: Dict[str, Any] = {}
        for key, role in (("homeStats", VenueRole.HOME), ("awayStats", VenueRole.AWAY)):
            block = analysis.largest_block(role)
            if block is not None:
                panel[key] = _team_panel(block, stat)
        combined = _combined_panel(analysis, stat, field)
        expected_value = getattr(analysis.expected, stat)
        if expected_value is not None:
            combined[expected_key] = expected_value
        panel["combinedStats"] = combined
        panels[section] = panel
    return panels


def validate_fixture(
    analysis: FixtureAnalysis,
    panels: Optional[Mapping[str, Any]] = None,
    profile: Optional[AnalysisProfile] = None,
    settings: Optional[ValidationSettings] = None,
) -> ValidationReport:
    """Validate an analysis together with externally fetched panels.

    External panels replace the analysis-derived section of the same name;
    the profile's reference fixtures drive the historical check.
    """

    profile = profile or AnalysisProfile()
    bundle: Dict[str, Any] = dict(panels_from_analysis(analysis))
    bundle.update(panels or {})
    return validate(bundle, profile.reference_fixtures, settings)
