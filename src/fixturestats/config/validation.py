"""Tolerances and plausibility bounds used by the consistency validator."""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass


logger = logging.getLogger(__name__)

_ENV_PREFIX = "FIXTURESTATS_"


def _env_float(name: str, default: float, *, clamp_min: float | None = None) -> float:
    raw = os.getenv(_ENV_PREFIX + name)
    if raw is None:
        return default
    try:
        value = float(raw)
    except ValueError:
        logger.warning("Invalid float for %s%s: %s; using default %.2f", _ENV_PREFIX, name, raw, default)
        return default
    if clamp_min is not None:
        value = max(clamp_min, value)
    return value


@dataclass(frozen=True)
class ValidationSettings:
    average_tolerance: float = 0.1
    probability_tolerance: float = 0.1
    composite_bound: float = 100.1
    max_cards_per_match: float = 10.0
    max_goals_per_game: float = 3.0
    max_minutes_per_game: float = 90.0
    issue_penalty: float = 3.0
    section_issue_penalty: float = 10.0

    @classmethod
    def from_env(cls) -> "ValidationSettings":
        """Build settings from ``FIXTURESTATS_*`` variables, falling back to defaults."""

        defaults = cls()
        return cls(
            average_tolerance=_env_float("AVERAGE_TOLERANCE", defaults.average_tolerance, clamp_min=0.0),
            probability_tolerance=_env_float(
                "PROBABILITY_TOLERANCE", defaults.probability_tolerance, clamp_min=0.0
            ),
            composite_bound=_env_float("COMPOSITE_BOUND", defaults.composite_bound, clamp_min=0.0),
            max_cards_per_match=_env_float("MAX_CARDS_PER_MATCH", defaults.max_cards_per_match, clamp_min=0.0),
            max_goals_per_game=_env_float("MAX_GOALS_PER_GAME", defaults.max_goals_per_game, clamp_min=0.0),
            max_minutes_per_game=_env_float(
                "MAX_MINUTES_PER_GAME", defaults.max_minutes_per_game, clamp_min=0.0
            ),
            issue_penalty=_env_float("ISSUE_PENALTY", defaults.issue_penalty, clamp_min=0.0),
            section_issue_penalty=_env_float(
                "SECTION_ISSUE_PENALTY", defaults.section_issue_penalty, clamp_min=0.0
            ),
        )
