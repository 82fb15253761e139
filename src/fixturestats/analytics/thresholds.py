"""Over/under threshold distributions over a set of matches."""

from __future__ import annotations

import math
from numbers import Real
from typing import Callable, Dict, Iterable, List, Mapping, Sequence, Union

from fixturestats.models import ExpectedStats, NormalizedMatch, ThresholdResult


class InvalidThresholdsError(ValueError):
    """Raised when a threshold list is empty, negative or non-numeric."""


FieldSelector = Union[str, Callable[[NormalizedMatch], float]]

NUMERIC_FIELDS: Mapping[str, str] = {
    "total_goals": "total_goals",
    "totalGoals": "total_goals",
    "total_cards": "total_cards",
    "totalCards": "total_cards",
    "total_corners": "total_corners",
    "totalCorners": "total_corners",
    "home_goals": "home_goals",
    "homeGoals": "home_goals",
    "away_goals": "away_goals",
    "awayGoals": "away_goals",
    "home_cards": "home_cards",
    "homeCards": "home_cards",
    "away_cards": "away_cards",
    "awayCards": "away_cards",
    "home_yellow_cards": "home_yellow_cards",
    "homeYellowCards": "home_yellow_cards",
    "away_yellow_cards": "away_yellow_cards",
    "awayYellowCards": "away_yellow_cards",
    "home_red_cards": "home_red_cards",
    "homeRedCards": "home_red_cards",
    "away_red_cards": "away_red_cards",
    "awayRedCards": "away_red_cards",
    "home_corners": "home_corners",
    "homeCorners": "home_corners",
    "away_corners": "away_corners",
    "awayCorners": "away_corners",
}


def _field_getter(field: FieldSelector) -> Callable[[NormalizedMatch], float]:
    if callable(field):
        return field
    attribute = NUMERIC_FIELDS.get(field)
    if attribute is None:
        raise KeyError(f"Unknown numeric match field {field!r}")
    return lambda match: getattr(match, attribute)


def _validate_thresholds(thresholds: Sequence[float]) -> List[float]:
    values = list(thresholds)
    if not values:
        raise InvalidThresholdsError("at least one threshold is required")
    checked: List[float] = []
    for value in values:
        if isinstance(value, bool) or not isinstance(value, Real) or not math.isfinite(value):
            raise InvalidThresholdsError(f"threshold must be a finite number, got {value!r}")
        if value < 0:
            raise InvalidThresholdsError(f"threshold must be non-negative, got {value!r}")
        checked.append(float(value))
    return checked


def _percentage(count: int, total: int) -> float:
    if total == 0:
        return 0.0
    return round(count / total * 100, 1)


def aggregate(
    matches: Iterable[NormalizedMatch],
    field: FieldSelector,
    thresholds: Sequence[float],
) -> List[ThresholdResult]:
    """Count matches strictly over each threshold, plus the complementary under count.

    Every threshold is evaluated on its own against the full match set; an
    integer threshold is not special-cased, so pushes count as under.
    """

    checked = _validate_thresholds(thresholds)
    getter = _field_getter(field)
    values = [getter(match) for match in matches]
    total = len(values)

    results: List[ThresholdResult] = []
    for threshold in checked:
        over = sum(1 for value in values if value > threshold)
        under = total - over
        over_pct = _percentage(over, total)
        under_pct = round(100.0 - over_pct, 1) if total else 0.0
        results.append(
            ThresholdResult(
                threshold=threshold,
                over_count=over,
                over_pct=over_pct,
                under_count=under,
                under_pct=under_pct,
            )
        )
    return results


def _threshold_key(threshold: float) -> str:
    return f"{threshold:g}"


def over_under_mapping(results: Iterable[ThresholdResult]) -> Dict[str, Dict[str, float]]:
    """Flatten results into ``over_2.5`` / ``under_2.5`` keyed count/percentage pairs."""

    mapping: Dict[str, Dict[str, float]] = {}
    for result in results:
        key = _threshold_key(result.threshold)
        mapping[f"over_{key}"] = {"count": result.over_count, "percentage": result.over_pct}
        mapping[f"under_{key}"] = {"count": result.under_count, "percentage": result.under_pct}
    return mapping


def over_rates(results: Iterable[ThresholdResult]) -> Dict[str, float]:
    return {_threshold_key(result.threshold): result.over_pct for result in results}


def _average(values: Sequence[int]) -> float | None:
    if not values:
        return None
    return round(sum(values) / len(values), 2)


def expected_statistics(matches: Iterable[NormalizedMatch]) -> ExpectedStats:
    match_list = list(matches)
    return ExpectedStats(
        matches_analyzed=len(match_list),
        goals=_average([match.total_goals for match in match_list]),
        corners=_average([match.total_corners for match in match_list]),
        cards=_average([match.total_cards for match in match_list]),
    )
