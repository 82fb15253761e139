"""Result models emitted by the threshold aggregator."""

from __future__ import annotations

from typing import Dict, List, Optional

from pydantic import BaseModel, Field
from pydantic.config import ConfigDict

from .match import NormalizedMatch, VenueRole


class ThresholdResult(BaseModel):
    """Over/under distribution of one field at one threshold."""

    threshold: float
    over_count: int = Field(..., ge=0)
    over_pct: float = Field(..., ge=0.0, le=100.0)
    under_count: int = Field(..., ge=0)
    under_pct: float = Field(..., ge=0.0, le=100.0)

    model_config = ConfigDict(frozen=True)

    @property
    def total(self) -> int:
        return self.over_count + self.under_count


class ExpectedStats(BaseModel):
    """Per-match averages over a window; ``None`` when the window is empty."""

    matches_analyzed: int = Field(default=0, ge=0)
    goals: Optional[float] = None
    corners: Optional[float] = None
    cards: Optional[float] = None

    model_config = ConfigDict(frozen=True)


class StatisticsBlock(BaseModel):
    """Threshold statistics for one (team, venue role, window size) combination."""

    name: str
    team_id: str
    role: VenueRole
    window_size: int = Field(..., ge=0)
    matches: List[NormalizedMatch] = Field(default_factory=list)
    statistics: Dict[str, List[ThresholdResult]] = Field(default_factory=dict)
    expected: ExpectedStats = Field(default_factory=ExpectedStats)

    model_config = ConfigDict(frozen=True)

    @property
    def matches_used(self) -> int:
        return len(self.matches)
