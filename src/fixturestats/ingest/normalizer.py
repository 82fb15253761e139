"""Map heterogeneous raw match records onto the canonical match shape."""

from __future__ import annotations

import logging
import math
from collections import Counter
from dataclasses import dataclass
from typing import Any, Dict, FrozenSet, Iterable, List, Mapping, Optional, Tuple

from fixturestats.models import UNKNOWN_AWAY, UNKNOWN_HOME, NormalizedMatch


logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class FieldSpec:
    """Ordered fallback chain for one canonical field.

    ``candidates`` are tried left to right; dotted entries walk nested
    mappings. ``tally_of`` names already-resolved fields that are summed when
    no candidate is present.
    """

    name: str
    candidates: Tuple[str, ...]
    kind: str
    category: str
    tally_of: Tuple[str, ...] = ()


MATCH_FIELDS: Tuple[FieldSpec, ...] = (
    FieldSpec("id", ("id", "match_id", "matchId"), "identifier", "identity"),
    FieldSpec("home_team_id", ("homeTeamId", "homeID", "home_id", "homeTeam.id", "team_a_id"), "identifier", "team"),
    FieldSpec("away_team_id", ("awayTeamId", "awayID", "away_id", "awayTeam.id", "team_b_id"), "identifier", "team"),
    FieldSpec("home_team_name", ("homeTeamName", "home_name", "homeTeam.name", "homeTeam"), "text", "team"),
    FieldSpec("away_team_name", ("awayTeamName", "away_name", "awayTeam.name", "awayTeam"), "text", "team"),
    FieldSpec("home_goals", ("homeGoals", "homeGoalCount", "home_goals", "score.home"), "count", "goals"),
    FieldSpec("away_goals", ("awayGoals", "awayGoalCount", "away_goals", "score.away"), "count", "goals"),
    FieldSpec("home_yellow_cards", ("homeYellowCards", "team_a_yellow_cards", "home_yellow_cards"), "count", "cards"),
    FieldSpec("away_yellow_cards", ("awayYellowCards", "team_b_yellow_cards", "away_yellow_cards"), "count", "cards"),
    FieldSpec("home_red_cards", ("homeRedCards", "team_a_red_cards", "home_red_cards"), "count", "cards"),
    FieldSpec("away_red_cards", ("awayRedCards", "team_b_red_cards", "away_red_cards"), "count", "cards"),
    FieldSpec(
        "home_cards",
        ("homeCards", "home_cards"),
        "count",
        "cards",
        tally_of=("home_yellow_cards", "home_red_cards"),
    ),
    FieldSpec(
        "away_cards",
        ("awayCards", "away_cards"),
        "count",
        "cards",
        tally_of=("away_yellow_cards", "away_red_cards"),
    ),
    FieldSpec("home_corners", ("homeCorners", "team_a_corners", "home_corners"), "count", "corners"),
    FieldSpec("away_corners", ("awayCorners", "team_b_corners", "away_corners"), "count", "corners"),
    FieldSpec("season", ("season", "season_id"), "identifier", "competition"),
    FieldSpec("competition_id", ("competitionId", "competition_id"), "identifier", "competition"),
    FieldSpec("date", ("dateUnixOrString", "date_unix", "date", "datetime", "kickoff_time"), "moment", "schedule"),
    FieldSpec("status", ("status",), "text", "schedule"),
    FieldSpec("venue", ("venue", "stadium_name"), "text", "schedule"),
)

_FIELDS_BY_NAME: Dict[str, FieldSpec] = {spec.name: spec for spec in MATCH_FIELDS}

_DEFAULTS: Dict[str, Any] = {
    "home_team_name": UNKNOWN_HOME,
    "away_team_name": UNKNOWN_AWAY,
}

IMAGE_FIELDS: Tuple[str, ...] = (
    "image",
    "logo",
    "home_image",
    "away_image",
    "homeLogo",
    "awayLogo",
    "team_a_logo",
    "team_b_logo",
)

# Derived totals are recognized so dumped records classify cleanly.
_DERIVED_FIELDS: Dict[str, str] = {
    "totalGoals": "goals",
    "totalCards": "cards",
    "totalCorners": "corners",
    "totalGoalCount": "goals",
    "representative": "competition",
}


def _build_field_categories() -> Dict[str, str]:
    categories: Dict[str, str] = {}
    for spec in MATCH_FIELDS:
        for candidate in spec.candidates:
            categories.setdefault(candidate.split(".", 1)[0], spec.category)
    for key, category in _DERIVED_FIELDS.items():
        categories.setdefault(key, category)
    for key in IMAGE_FIELDS:
        categories.setdefault(key, "image")
    return categories


FIELD_CATEGORIES: Mapping[str, str] = _build_field_categories()

FINISHED_STATUSES: FrozenSet[str] = frozenset(
    {"complete", "completed", "finished", "ft", "full-time", "fulltime", "ended", "aet", "pen"}
)


@dataclass(frozen=True)
class FixtureExclusionRules:
    """Rules that mark a fixture as unsuitable for statistical windows."""

    name_markers: Tuple[str, ...] = ("(",)
    no_season_values: FrozenSet[str] = frozenset({"-1"})
    excluded_competitions: FrozenSet[str] = frozenset({"5874"})


DEFAULT_EXCLUSION_RULES = FixtureExclusionRules()


def _unwrap(raw: Any) -> Mapping[str, Any]:
    if not isinstance(raw, Mapping):
        return {}
    inner = raw.get("data")
    if isinstance(inner, Mapping):
        return inner
    return raw


def _lookup(record: Mapping[str, Any], path: str) -> Any:
    current: Any = record
    for part in path.split("."):
        if not isinstance(current, Mapping):
            return None
        current = current.get(part)
        if current is None:
            return None
    return current


def _parse_count(value: Any) -> Optional[int]:
    if isinstance(value, bool):
        return None
    if isinstance(value, int):
        return max(0, value)
    if isinstance(value, float):
        if not math.isfinite(value):
            return None
        return max(0, int(round(value)))
    if isinstance(value, str):
        text = value.strip()
        if not text:
            return None
        try:
            number = float(text)
        except ValueError:
            return None
        return _parse_count(number)
    return None


def _parse_identifier(value: Any) -> Optional[str]:
    if isinstance(value, bool):
        return None
    if isinstance(value, int):
        return str(value)
    if isinstance(value, float):
        if math.isfinite(value) and value.is_integer():
            return str(int(value))
        return None
    if isinstance(value, str):
        text = value.strip()
        return text or None
    return None


def _parse_text(value: Any) -> Optional[str]:
    if isinstance(value, str):
        text = value.strip()
        return text or None
    return None


def _parse_moment(value: Any) -> Any:
    if isinstance(value, bool):
        return None
    if isinstance(value, (int, float)):
        return value if math.isfinite(value) else None
    return _parse_text(value)


_PARSERS = {
    "count": _parse_count,
    "identifier": _parse_identifier,
    "text": _parse_text,
    "moment": _parse_moment,
}


def _resolve(record: Mapping[str, Any], spec: FieldSpec) -> Any:
    parser = _PARSERS[spec.kind]
    for candidate in spec.candidates:
        value = _lookup(record, candidate)
        if value is None:
            continue
        parsed = parser(value)
        if parsed is not None:
            return parsed
    return None


def resolve_field(raw: Mapping[str, Any], name: str) -> Any:
    """Resolve one canonical field from ``raw`` without applying defaults.

    Returns ``None`` when no candidate in the field's chain is usable. Tallied
    fields fall back to the sum of their parts only when a part is present.
    """

    spec = _FIELDS_BY_NAME.get(name)
    if spec is None:
        raise KeyError(f"Unknown canonical field {name!r}")
    record = _unwrap(raw)
    value = _resolve(record, spec)
    if value is None and spec.tally_of:
        parts = [resolve_field(record, part) for part in spec.tally_of]
        if any(part is not None for part in parts):
            value = sum(part or 0 for part in parts)
    return value


def classify_field(key: str) -> Optional[str]:
    """Return the category of a raw top-level key, or None if it is unknown."""

    return FIELD_CATEGORIES.get(key)


def classify_keys(raw: Mapping[str, Any]) -> Dict[str, List[str]]:
    grouped: Dict[str, List[str]] = {}
    for key in _unwrap(raw):
        category = classify_field(key) or "unrecognized"
        grouped.setdefault(category, []).append(key)
    return grouped


def is_finished(status: Optional[str]) -> bool:
    if not status:
        return False
    return status.strip().lower() in FINISHED_STATUSES


def exclusion_reasons(
    raw: Mapping[str, Any],
    rules: FixtureExclusionRules = DEFAULT_EXCLUSION_RULES,
) -> List[str]:
    """List the exclusion rules a raw fixture triggers (empty when representative)."""

    record = _unwrap(raw)
    reasons: List[str] = []

    names = [resolve_field(record, "home_team_name"), resolve_field(record, "away_team_name")]
    if any(marker in name for name in names if name for marker in rules.name_markers):
        reasons.append("parenthetical_name")

    season = resolve_field(record, "season")
    if season is not None and season in rules.no_season_values:
        reasons.append("no_season")

    competition = resolve_field(record, "competition_id")
    if competition is not None and competition in rules.excluded_competitions:
        reasons.append("excluded_competition")

    return reasons


def is_representative_fixture(
    raw: Mapping[str, Any],
    rules: FixtureExclusionRules = DEFAULT_EXCLUSION_RULES,
) -> bool:
    return not exclusion_reasons(raw, rules)


def normalize(
    raw: Mapping[str, Any],
    *,
    rules: FixtureExclusionRules = DEFAULT_EXCLUSION_RULES,
) -> NormalizedMatch:
    """Build a NormalizedMatch from a raw record; missing fields take defaults."""

    record = _unwrap(raw)
    values: Dict[str, Any] = {}
    for spec in MATCH_FIELDS:
        value = _resolve(record, spec)
        if value is None and spec.tally_of:
            value = sum(values.get(part, 0) for part in spec.tally_of)
        if value is None:
            if spec.kind == "count":
                value = 0
            else:
                value = _DEFAULTS.get(spec.name)
        values[spec.name] = value
    values["representative"] = is_representative_fixture(record, rules)
    return NormalizedMatch(**values)


def normalize_many(
    records: Iterable[Mapping[str, Any]],
    *,
    rules: FixtureExclusionRules = DEFAULT_EXCLUSION_RULES,
) -> List[NormalizedMatch]:
    matches: List[NormalizedMatch] = []
    unrecognized: Counter[str] = Counter()
    for raw in records:
        if not isinstance(raw, Mapping):
            logger.debug("Skipping non-mapping record of type %s", type(raw).__name__)
            continue
        unrecognized.update(classify_keys(raw).get("unrecognized", []))
        matches.append(normalize(raw, rules=rules))
    if unrecognized:
        logger.debug("Unrecognized raw keys: %s", ", ".join(sorted(unrecognized)))
    excluded = sum(1 for match in matches if not match.representative)
    logger.info("Normalized %s matches (%s non-representative)", len(matches), excluded)
    return matches
