"""Cross-panel consistency checks that turn data-quality problems into issues."""

from __future__ import annotations

import logging
import math
import re
from typing import Any, Iterable, List, Mapping, Optional, Sequence, Tuple, Union

from fixturestats.config import ValidationSettings
from fixturestats.ingest import resolve_field
from fixturestats.models import IssueKind, ReferenceFixture, ValidationIssue, ValidationReport
from fixturestats.pool import parse_match_date

from . import rules


logger = logging.getLogger(__name__)

_THRESHOLD_PATTERN = re.compile(r"\d+(?:\.\d+)?")


def _as_number(value: Any) -> Optional[float]:
    if isinstance(value, bool):
        return None
    if isinstance(value, (int, float)):
        return float(value) if math.isfinite(value) else None
    if isinstance(value, str):
        text = value.strip().rstrip("%").strip()
        if not text:
            return None
        try:
            number = float(text)
        except ValueError:
            return None
        return number if math.isfinite(number) else None
    return None


def _threshold_of(key: Any) -> Optional[float]:
    if isinstance(key, bool):
        return None
    if isinstance(key, (int, float)):
        return float(key)
    if isinstance(key, str):
        found = _THRESHOLD_PATTERN.search(key)
        if found:
            return float(found.group())
    return None


def _values_of(container: Any) -> List[Any]:
    if isinstance(container, Mapping):
        return list(container.values())
    if isinstance(container, (list, tuple)):
        return list(container)
    return []


def _unwrap_panel(panel: Any) -> Optional[Mapping[str, Any]]:
    if not isinstance(panel, Mapping):
        return None
    inner = panel.get("result")
    if isinstance(inner, Mapping):
        return inner
    return panel


def _nested(block: Mapping[str, Any], path: Sequence[str]) -> Any:
    current: Any = block
    for part in path:
        if not isinstance(current, Mapping):
            return None
        current = current.get(part)
    return current


def _is_empty(value: Any) -> bool:
    if value is None:
        return True
    if isinstance(value, str):
        return not value.strip()
    if isinstance(value, (Mapping, list, tuple)):
        return len(value) == 0
    return False


def _first(record: Mapping[str, Any], fields: Sequence[str]) -> Any:
    for field in fields:
        value = record.get(field)
        if value is not None:
            return value
    return None


def _team_name(value: Any) -> Optional[str]:
    if isinstance(value, Mapping):
        value = value.get("name")
    if isinstance(value, str) and value.strip():
        return value.strip()
    return None


def _same_day(reported: Any, expected: str) -> bool:
    left = parse_match_date(reported)
    right = parse_match_date(expected)
    if left is not None and right is not None:
        return left.date() == right.date()
    return str(reported).strip() == expected.strip()


def _format(value: float) -> str:
    return f"{value:g}"


class _IssueLog:
    def __init__(self) -> None:
        self.issues: List[ValidationIssue] = []

    def add(self, kind: IssueKind, section: str, message: str) -> None:
        self.issues.append(ValidationIssue(kind=kind, section=section, message=message))

    def count(self, section: str) -> int:
        return sum(1 for issue in self.issues if issue.section == section)


class ConsistencyValidator:
    """Apply the declared rule tables to a bundle of statistic panels.

    Every section is checked independently: a missing or malformed section
    yields a single ``MissingData`` issue and the remaining sections are
    still validated. Nothing here raises for bad data.
    """

    def __init__(
        self,
        settings: Optional[ValidationSettings] = None,
        reference_fixtures: Optional[Iterable[Union[ReferenceFixture, Mapping[str, Any]]]] = None,
    ) -> None:
        self.settings = settings or ValidationSettings()
        self.reference_fixtures: Tuple[ReferenceFixture, ...] = tuple(
            fixture if isinstance(fixture, ReferenceFixture) else ReferenceFixture.model_validate(fixture)
            for fixture in (reference_fixtures or ())
        )

    def validate(self, panels: Mapping[str, Any]) -> ValidationReport:
        if not isinstance(panels, Mapping):
            panels = {}
        log = _IssueLog()
        sections = {key: _unwrap_panel(panels.get(key)) for key in rules.SECTION_LABELS}

        for key, label in rules.SECTION_LABELS.items():
            if sections[key] is None:
                log.add(IssueKind.MISSING_DATA, label, f"No {key} data available")
                logger.debug("Section %s missing or malformed", key)

        if sections["match"] is not None:
            self._check_match(sections["match"], log)

        meetings = None
        if sections["h2h"] is not None:
            meetings = self._check_h2h(sections["h2h"], log)

        for key in rules.STATISTICS_SECTIONS:
            panel = sections[key]
            if panel is None:
                continue
            label = rules.SECTION_LABELS[key]
            for block_name, block in self._stat_blocks(panel):
                self._check_block(block, label, block_name, log)

        if sections["players"] is not None:
            self._check_players_panel(sections["players"], log)

        self._check_cross_sections(sections, log)

        if meetings is not None:
            self._check_history(meetings, log)

        return self._build_report(log)

    @staticmethod
    def _stat_blocks(panel: Mapping[str, Any]) -> List[Tuple[str, Mapping[str, Any]]]:
        blocks: List[Tuple[str, Mapping[str, Any]]] = [("panel", panel)]
        for key in rules.TEAM_BLOCKS:
            block = panel.get(key)
            if isinstance(block, Mapping):
                blocks.append((key, block))
        return blocks

    def _check_match(self, match: Mapping[str, Any], log: _IssueLog) -> None:
        label = rules.SECTION_LABELS["match"]
        for field in rules.REQUIRED_MATCH_FIELDS:
            if _is_empty(match.get(field)):
                log.add(IssueKind.MISSING_DATA, label, f"Missing or empty field: {field}")

        home = _team_name(match.get("homeTeam"))
        away = _team_name(match.get("awayTeam"))
        if home and away and home.casefold() == away.casefold():
            log.add(IssueKind.LOGICAL_ERROR, label, f"Home and away teams have the same name: {home}")

        for side in ("homeTeam", "awayTeam"):
            name = _team_name(match.get(side))
            if name and rules.PLACEHOLDER_PATTERNS.is_placeholder_name(name):
                log.add(IssueKind.PLACEHOLDER_DATA, label, f"{side} has placeholder name: {name}")
            team = match.get(side)
            if isinstance(team, Mapping) and team.get("id") is not None:
                if rules.PLACEHOLDER_PATTERNS.is_placeholder_id(str(team["id"])):
                    log.add(IssueKind.PLACEHOLDER_DATA, label, f"{side} has placeholder id: {team['id']}")

    def _check_h2h(self, h2h: Mapping[str, Any], log: _IssueLog) -> Optional[List[Mapping[str, Any]]]:
        label = rules.SECTION_LABELS["h2h"]
        raw_meetings = h2h.get("matches")
        if not isinstance(raw_meetings, list):
            log.add(IssueKind.MISSING_DATA, label, "No head-to-head meetings available")
            return None

        meetings: List[Mapping[str, Any]] = []
        for index, meeting in enumerate(raw_meetings, start=1):
            if not isinstance(meeting, Mapping):
                log.add(IssueKind.MISSING_DATA, label, f"Meeting {index} is not a record")
                continue
            meetings.append(meeting)
            home = resolve_field(meeting, "home_team_name")
            away = resolve_field(meeting, "away_team_name")
            if home is None or away is None:
                log.add(IssueKind.MISSING_DATA, label, f"Meeting {index} missing team data")
            for name in (home, away):
                if name is not None and rules.PLACEHOLDER_PATTERNS.is_placeholder_name(name):
                    log.add(IssueKind.PLACEHOLDER_DATA, label, f"Meeting {index} has placeholder team name: {name}")
            for field in ("home_team_id", "away_team_id"):
                identifier = resolve_field(meeting, field)
                if identifier is not None and rules.PLACEHOLDER_PATTERNS.is_placeholder_id(identifier):
                    log.add(IssueKind.PLACEHOLDER_DATA, label, f"Meeting {index} has placeholder team id: {identifier}")
            if resolve_field(meeting, "home_goals") is None or resolve_field(meeting, "away_goals") is None:
                log.add(IssueKind.MISSING_DATA, label, f"Meeting {index} missing score data")
        return meetings

    def _check_block(self, block: Mapping[str, Any], label: str, name: str, log: _IssueLog) -> None:
        settings = self.settings

        for field in rules.DISTRIBUTION_FIELDS:
            values = _values_of(block.get(field))
            if not values:
                continue
            total = sum(_as_number(value) or 0.0 for value in values)
            if abs(total - 100.0) > settings.probability_tolerance:
                log.add(
                    IssueKind.PROBABILITY_ERROR,
                    label,
                    f"{name} {field} sum to {total:.2f}% instead of 100%",
                )

        for rule in rules.AVERAGE_RULES:
            total = _as_number(block.get(rule.total))
            count = _as_number(block.get(rule.count))
            average = _as_number(block.get(rule.average))
            if total is None or count is None or average is None or count <= 0:
                continue
            calculated = total / count
            if abs(calculated - average) > settings.average_tolerance:
                log.add(
                    IssueKind.CALCULATION_ERROR,
                    label,
                    f"{name} {rule.average} mismatch: calculated {calculated:.2f}, reported {_format(average)}",
                )

        poisson_lambda = _as_number(_nested(block, rules.POISSON_LAMBDA_PATH))
        if poisson_lambda is not None:
            for field in rules.POISSON_EXPECTED_FIELDS:
                expected = _as_number(block.get(field))
                if expected is None:
                    continue
                if abs(poisson_lambda - expected) > settings.average_tolerance:
                    log.add(
                        IssueKind.CALCULATION_ERROR,
                        label,
                        f"{name} Poisson lambda {_format(poisson_lambda)} does not match {field} {_format(expected)}",
                    )
                break

        for field in rules.PERCENTAGE_FIELDS:
            value = _as_number(block.get(field))
            if value is not None and not 0.0 <= value <= 100.0:
                log.add(IssueKind.PROBABILITY_ERROR, label, f"{name} {field} {_format(value)}% is outside 0-100%")

        for family in rules.OVER_RATE_FIELDS:
            rates = block.get(family)
            if isinstance(rates, Mapping):
                self._check_over_rates(rates, label, f"{name} {family}", log)

        for bound in rules.COMPOSITE_BOUNDS:
            first = _as_number(block.get(bound.first))
            second = _as_number(block.get(bound.second))
            if first is None or second is None:
                continue
            if first + second > settings.composite_bound:
                log.add(
                    IssueKind.LOGICAL_ERROR,
                    label,
                    f"{name} {bound.first} ({_format(first)}%) + {bound.second} ({_format(second)}%) exceeds 100%",
                )

        for breakdown in rules.PERIOD_BREAKDOWNS:
            values = _values_of(block.get(breakdown.breakdown))
            reported = _as_number(block.get(breakdown.total))
            if not values or reported is None:
                continue
            summed = sum(_as_number(value) or 0.0 for value in values)
            if not math.isclose(summed, reported, rel_tol=0.0, abs_tol=1e-9):
                log.add(
                    IssueKind.AGGREGATION_ERROR,
                    label,
                    f"{name} {breakdown.breakdown} sums to {_format(summed)} but {breakdown.total} is {_format(reported)}",
                )

        for field in rules.PLAYER_LIST_FIELDS:
            players = block.get(field)
            if isinstance(players, list):
                self._check_players(players, label, name, log)

    def _check_over_rates(self, rates: Mapping[Any, Any], label: str, name: str, log: _IssueLog) -> None:
        indexed: List[Tuple[float, float, Any]] = []
        for key, value in rates.items():
            rate = _as_number(value)
            if rate is None:
                continue
            if not 0.0 <= rate <= 100.0:
                log.add(
                    IssueKind.PROBABILITY_ERROR,
                    label,
                    f"{name} over {key} rate {_format(rate)}% is outside 0-100%",
                )
            threshold = _threshold_of(key)
            if threshold is not None:
                indexed.append((threshold, rate, key))

        indexed.sort(key=lambda item: item[0])
        for (lower, lower_rate, lower_key), (higher, higher_rate, higher_key) in zip(indexed, indexed[1:]):
            if higher > lower and higher_rate > lower_rate:
                log.add(
                    IssueKind.LOGICAL_ERROR,
                    label,
                    f"{name} over {lower_key} rate ({_format(lower_rate)}%) is lower than "
                    f"over {higher_key} rate ({_format(higher_rate)}%)",
                )

    def _check_players(self, players: List[Any], label: str, team: str, log: _IssueLog) -> None:
        settings = self.settings
        patterns = rules.PLACEHOLDER_PATTERNS
        for index, player in enumerate(players, start=1):
            if not isinstance(player, Mapping):
                continue
            name = _first(player, rules.PLAYER_NAME_FIELDS)
            display = name if isinstance(name, str) and name.strip() else f"#{index}"

            if isinstance(name, str) and patterns.is_placeholder_name(name):
                log.add(IssueKind.PLACEHOLDER_DATA, label, f"{team} has placeholder player name: {name}")
            for field in rules.PLAYER_ID_FIELDS:
                identifier = player.get(field)
                if identifier is not None and patterns.is_placeholder_id(str(identifier)):
                    log.add(IssueKind.PLACEHOLDER_DATA, label, f"{team} has placeholder player id: {identifier}")
                    break

            cards_per_match = _as_number(player.get("cardsPerMatch"))
            if cards_per_match is not None and cards_per_match > settings.max_cards_per_match:
                log.add(
                    IssueKind.UNREALISTIC_DATA,
                    label,
                    f"{team} player {display} has {_format(cards_per_match)} cards per match",
                )

            games = _as_number(_first(player, rules.PLAYER_GAMES_FIELDS))
            if games is None:
                continue
            goals = _as_number(_first(player, ("goals", "playerGoals")))
            if goals is not None and goals > settings.max_goals_per_game * games:
                log.add(
                    IssueKind.UNREALISTIC_DATA,
                    label,
                    f"{team} player {display} has {_format(goals)} goals in {_format(games)} games",
                )
            position = player.get("position")
            minutes = _as_number(player.get("minutesPlayed"))
            if (
                isinstance(position, str)
                and position.strip().lower() in rules.GOALKEEPER_POSITIONS
                and minutes is not None
                and minutes > settings.max_minutes_per_game * games
            ):
                log.add(
                    IssueKind.UNREALISTIC_DATA,
                    label,
                    f"{team} goalkeeper {display} has {_format(minutes)} minutes in {_format(games)} games",
                )

    @staticmethod
    def _team_players(players_panel: Mapping[str, Any], team_block: str) -> Optional[List[Any]]:
        for key in rules.PLAYER_TEAMS[team_block]:
            team = players_panel.get(key)
            if isinstance(team, Mapping) and isinstance(team.get("players"), list):
                return team["players"]
        return None

    def _check_players_panel(self, players_panel: Mapping[str, Any], log: _IssueLog) -> None:
        label = rules.SECTION_LABELS["players"]
        for team_block in rules.PLAYER_TEAMS:
            players = self._team_players(players_panel, team_block)
            if players is not None:
                self._check_players(players, label, team_block, log)

    def _check_cross_sections(self, sections: Mapping[str, Optional[Mapping[str, Any]]], log: _IssueLog) -> None:
        players_panel = sections.get("players")
        if players_panel is None:
            return
        for rule in rules.CROSS_SECTION_TOTALS:
            panel = sections.get(rule.section)
            if panel is None:
                continue
            for team_block in rules.PLAYER_TEAMS:
                players = self._team_players(players_panel, team_block)
                block = panel.get(team_block)
                if players is None or not isinstance(block, Mapping):
                    continue
                reported = _as_number(block.get(rule.total))
                player_values = []
                for player in players:
                    if not isinstance(player, Mapping):
                        continue
                    for field in rule.player_fields:
                        value = _as_number(player.get(field))
                        if value is not None:
                            player_values.append(value)
                            break
                if reported is None or not player_values:
                    continue
                summed = sum(player_values)
                if not math.isclose(summed, reported, rel_tol=0.0, abs_tol=1e-9):
                    log.add(
                        IssueKind.CROSS_SECTION_INCONSISTENCY,
                        rules.CONSISTENCY_SECTION,
                        f"{team_block} {rule.total}: players report {_format(summed)}, "
                        f"{rules.SECTION_LABELS[rule.section]} reports {_format(reported)}",
                    )

    def _check_history(self, meetings: List[Mapping[str, Any]], log: _IssueLog) -> None:
        label = rules.SECTION_LABELS["h2h"]
        for reference in self.reference_fixtures:
            found = None
            for meeting in meetings:
                home = resolve_field(meeting, "home_team_name")
                away = resolve_field(meeting, "away_team_name")
                if home is None or away is None:
                    continue
                if home.casefold() != reference.home_team.casefold():
                    continue
                if away.casefold() != reference.away_team.casefold():
                    continue
                if _same_day(resolve_field(meeting, "date"), reference.date):
                    found = meeting
                    break

            fixture = f"{reference.home_team} vs {reference.away_team} on {reference.date}"
            if found is None:
                log.add(IssueKind.MISSING_HISTORICAL_DATA, label, f"Known meeting {fixture} not found")
                continue
            home_goals = resolve_field(found, "home_goals")
            away_goals = resolve_field(found, "away_goals")
            if home_goals != reference.home_goals or away_goals != reference.away_goals:
                log.add(
                    IssueKind.HISTORICAL_DATA_ERROR,
                    label,
                    f"{fixture}: expected {reference.scoreline}, got {home_goals}-{away_goals}",
                )

    def _build_report(self, log: _IssueLog) -> ValidationReport:
        settings = self.settings
        issues = log.issues
        section_scores = {}
        sections = list(rules.SECTION_LABELS.values())
        for issue in issues:
            if issue.section not in sections:
                sections.append(issue.section)
        for section in sections:
            section_scores[section] = max(0.0, 100.0 - settings.section_issue_penalty * log.count(section))
        accuracy = max(0.0, 100.0 - settings.issue_penalty * len(issues))

        report = ValidationReport(issues=issues, accuracy_score=accuracy, section_scores=section_scores)
        logger.info(
            "Validation finished: %s issues (%s critical), accuracy %.1f",
            len(issues),
            len(report.critical_issues),
            accuracy,
        )
        return report


def validate(
    panels: Mapping[str, Any],
    reference_fixtures: Optional[Iterable[Union[ReferenceFixture, Mapping[str, Any]]]] = None,
    settings: Optional[ValidationSettings] = None,
) -> ValidationReport:
    """Validate a bundle of panels keyed by ``match``, ``h2h``, ``corners``, ``cards``, ``btts`` and ``players``."""

    return ConsistencyValidator(settings=settings, reference_fixtures=reference_fixtures).validate(panels)
