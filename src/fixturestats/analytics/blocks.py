"""Build named statistics blocks per team, venue role and window size."""

from __future__ import annotations

import logging
from typing import Iterable, List, Sequence, Tuple, Union

from fixturestats.config import DEFAULT_WINDOW_SIZES, StatFieldConfig, iter_field_configs
from fixturestats.models import NormalizedMatch, StatisticsBlock, VenueRole
from fixturestats.pool import select_window

from .thresholds import aggregate, expected_statistics


logger = logging.getLogger(__name__)

Selection = Tuple[Union[str, int], Union[VenueRole, str]]


def block_name(role: VenueRole, window_size: int) -> str:
    return f"{role.value}_last_{window_size}"


def build_statistics_blocks(
    matches: Iterable[NormalizedMatch],
    selections: Sequence[Selection],
    window_sizes: Sequence[int] = DEFAULT_WINDOW_SIZES,
    fields: Sequence[StatFieldConfig] | None = None,
    *,
    require_completed: bool = True,
    exclude_non_representative: bool = False,
) -> List[StatisticsBlock]:
    """Return one block per (team, role, window size) with threshold results per field."""

    corpus = list(matches)
    field_configs = list(fields) if fields is not None else list(iter_field_configs())

    blocks: List[StatisticsBlock] = []
    for team_id, role in selections:
        venue_role = VenueRole.coerce(role)
        for size in window_sizes:
            window = select_window(
                corpus,
                team_id,
                venue_role,
                size,
                require_completed,
                exclude_non_representative=exclude_non_representative,
            )
            statistics = {
                config.name: aggregate(window, config.field, config.thresholds)
                for config in field_configs
            }
            blocks.append(
                StatisticsBlock(
                    name=block_name(venue_role, size),
                    team_id=str(team_id),
                    role=venue_role,
                    window_size=size,
                    matches=window,
                    statistics=statistics,
                    expected=expected_statistics(window),
                )
            )
            if len(window) < size:
                logger.debug(
                    "Window %s for team %s holds %s of %s matches",
                    block_name(venue_role, size),
                    team_id,
                    len(window),
                    size,
                )
    logger.info("Built %s statistics blocks from %s matches", len(blocks), len(corpus))
    return blocks
