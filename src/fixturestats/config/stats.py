"""Threshold configuration for the statistics that get over/under analysis."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, Iterable, Tuple


@dataclass(frozen=True)
class StatFieldConfig:
    name: str
    field: str
    thresholds: Tuple[float, ...]


_LOW_SCORING_THRESHOLDS: Tuple[float, ...] = (0.5, 1.5, 2.5, 3.5, 4.5, 5.5)

_STAT_FIELDS: Dict[str, StatFieldConfig] = {
    "GOALS": StatFieldConfig(
        name="goals",
        field="total_goals",
        thresholds=_LOW_SCORING_THRESHOLDS,
    ),
    "CARDS": StatFieldConfig(
        name="cards",
        field="total_cards",
        thresholds=_LOW_SCORING_THRESHOLDS,
    ),
    "CORNERS": StatFieldConfig(
        name="corners",
        field="total_corners",
        thresholds=(6.5, 7.5, 8.5, 9.5, 10.5, 11.5, 12.5, 13.5),
    ),
}

DEFAULT_WINDOW_SIZES: Tuple[int, ...] = (5, 10)


def iter_field_configs() -> Iterable[StatFieldConfig]:
    """Return an iterator over the configured statistic fields."""

    return _STAT_FIELDS.values()


def get_field_config(name: str) -> StatFieldConfig:
    """Fetch the config for a statistic name, raising KeyError if missing."""

    key = name.upper()
    if key not in _STAT_FIELDS:
        raise KeyError(f"No threshold config for statistic {name!r}")
    return _STAT_FIELDS[key]
