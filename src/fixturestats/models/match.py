"""Canonical match models shared across ingestion, windowing and analytics."""

from __future__ import annotations

from enum import Enum
from typing import Optional, Union

from pydantic import BaseModel, Field, computed_field
from pydantic.alias_generators import to_camel
from pydantic.config import ConfigDict


UNKNOWN_HOME = "Unknown Home"
UNKNOWN_AWAY = "Unknown Away"


class VenueRole(str, Enum):
    HOME = "home"
    AWAY = "away"

    @classmethod
    def coerce(cls, value: Union["VenueRole", str]) -> "VenueRole":
        """Accept the enum itself or a case-insensitive ``home``/``away`` string."""

        if isinstance(value, cls):
            return value
        if isinstance(value, str):
            try:
                return cls(value.strip().lower())
            except ValueError:
                pass
        raise ValueError(f"venue role must be 'home' or 'away', got {value!r}")


class NormalizedMatch(BaseModel):
    """Normalized match payload built from one raw record.

    Totals are computed from their home/away components and cannot be set on
    their own, so ``total_goals == home_goals + away_goals`` always holds.
    """

    id: Optional[str] = None
    home_team_id: Optional[str] = None
    away_team_id: Optional[str] = None
    home_team_name: str = UNKNOWN_HOME
    away_team_name: str = UNKNOWN_AWAY
    home_goals: int = Field(default=0, ge=0)
    away_goals: int = Field(default=0, ge=0)
    home_yellow_cards: int = Field(default=0, ge=0)
    away_yellow_cards: int = Field(default=0, ge=0)
    home_red_cards: int = Field(default=0, ge=0)
    away_red_cards: int = Field(default=0, ge=0)
    home_cards: int = Field(default=0, ge=0)
    away_cards: int = Field(default=0, ge=0)
    home_corners: int = Field(default=0, ge=0)
    away_corners: int = Field(default=0, ge=0)
    season: Optional[str] = None
    competition_id: Optional[str] = None
    date: Union[int, float, str, None] = Field(default=None, alias="dateUnixOrString")
    status: Optional[str] = None
    venue: Optional[str] = None
    representative: bool = True

    model_config = ConfigDict(frozen=True, alias_generator=to_camel, populate_by_name=True)

    @computed_field(alias="totalGoals")
    @property
    def total_goals(self) -> int:
        return self.home_goals + self.away_goals

    @computed_field(alias="totalCards")
    @property
    def total_cards(self) -> int:
        return self.home_cards + self.away_cards

    @computed_field(alias="totalCorners")
    @property
    def total_corners(self) -> int:
        return self.home_corners + self.away_corners

    def team_goals(self, role: VenueRole) -> int:
        return self.home_goals if role is VenueRole.HOME else self.away_goals

    def conceded_goals(self, role: VenueRole) -> int:
        return self.away_goals if role is VenueRole.HOME else self.home_goals


class ReferenceFixture(BaseModel):
    """Known historical result used to cross-check head-to-head panels."""

    home_team: str = Field(..., min_length=1)
    away_team: str = Field(..., min_length=1)
    date: str = Field(..., min_length=1)
    home_goals: int = Field(..., ge=0)
    away_goals: int = Field(..., ge=0)

    model_config = ConfigDict(frozen=True)

    @property
    def scoreline(self) -> str:
        return f"{self.home_goals}-{self.away_goals}"
