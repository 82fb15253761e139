"""Select the recent matches a team played in a given venue role."""

from __future__ import annotations

import logging
import math
from collections.abc import Iterable
from datetime import datetime, timezone
from typing import Any, List, Optional, Union

from fixturestats.ingest import is_finished
from fixturestats.models import NormalizedMatch, VenueRole


logger = logging.getLogger(__name__)

_DAY_FIRST_FORMATS = ("%d/%m/%Y", "%d/%m/%Y %H:%M")


def parse_match_date(value: Any) -> Optional[datetime]:
    """Parse unix seconds, numeric strings or ISO-8601 text into an aware UTC datetime."""

    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, (int, float)):
        if not math.isfinite(value) or value <= 0:
            return None
        try:
            return datetime.fromtimestamp(value, tz=timezone.utc)
        except (OverflowError, OSError, ValueError):
            return None
    if not isinstance(value, str):
        return None

    text = value.strip()
    if not text:
        return None
    try:
        return parse_match_date(float(text))
    except ValueError:
        pass

    try:
        parsed = datetime.fromisoformat(text.replace("Z", "+00:00"))
    except ValueError:
        parsed = None
        for fmt in _DAY_FIRST_FORMATS:
            try:
                parsed = datetime.strptime(text, fmt)
                break
            except ValueError:
                continue
    if parsed is None:
        return None
    if parsed.tzinfo is None:
        return parsed.replace(tzinfo=timezone.utc)
    return parsed.astimezone(timezone.utc)


def _order_recent_first(matches: List[NormalizedMatch]) -> List[NormalizedMatch]:
    dated = []
    undated = []
    for match in matches:
        moment = parse_match_date(match.date)
        if moment is None:
            undated.append(match)
        else:
            dated.append((moment, match))
    dated.sort(key=lambda item: item[0], reverse=True)
    return [match for _, match in dated] + undated


def _plays_as(match: NormalizedMatch, team_id: str, role: VenueRole) -> bool:
    match_team = match.home_team_id if role is VenueRole.HOME else match.away_team_id
    return match_team is not None and match_team == team_id


def select_window(
    matches: Iterable[NormalizedMatch],
    team_id: Union[str, int],
    role: Union[VenueRole, str],
    limit: int,
    require_completed: bool = True,
    *,
    exclude_non_representative: bool = False,
) -> List[NormalizedMatch]:
    """Return up to ``limit`` of the team's most recent matches in ``role``.

    Undated matches sort after every dated one and keep their input order.
    Returning fewer than ``limit`` matches is expected for short histories.
    """

    if isinstance(matches, (str, bytes)) or not isinstance(matches, Iterable):
        raise TypeError(f"matches must be an iterable of NormalizedMatch, got {type(matches).__name__}")
    if isinstance(limit, bool) or not isinstance(limit, int):
        raise TypeError(f"limit must be an integer, got {limit!r}")
    if limit < 0:
        raise ValueError(f"limit must be non-negative, got {limit}")

    venue_role = VenueRole.coerce(role)
    wanted = str(team_id)

    candidates = []
    for match in matches:
        if not _plays_as(match, wanted, venue_role):
            continue
        if require_completed and not is_finished(match.status):
            continue
        if exclude_non_representative and not match.representative:
            continue
        candidates.append(match)

    window = _order_recent_first(candidates)[:limit]
    logger.debug(
        "Selected %s/%s %s matches for team %s (limit %s)",
        len(window),
        len(candidates),
        venue_role.value,
        wanted,
        limit,
    )
    return window


def head_to_head(
    matches: Iterable[NormalizedMatch],
    team_a: Union[str, int],
    team_b: Union[str, int],
    limit: Optional[int] = None,
    require_completed: bool = True,
) -> List[NormalizedMatch]:
    """Meetings between two teams in either venue configuration, most recent first."""

    pair = {str(team_a), str(team_b)}
    meetings = [
        match
        for match in matches
        if {match.home_team_id, match.away_team_id} == pair
        and (not require_completed or is_finished(match.status))
    ]
    ordered = _order_recent_first(meetings)
    if limit is not None:
        if limit < 0:
            raise ValueError(f"limit must be non-negative, got {limit}")
        ordered = ordered[:limit]
    return ordered
