from datetime import datetime, timezone

import pytest

from fixturestats.models import NormalizedMatch, VenueRole
from fixturestats.pool import head_to_head, parse_match_date, select_window


def _match(match_id, home="1", away="2", date=None, status="complete", representative=True, **kwargs):
    return NormalizedMatch(
        id=str(match_id),
        home_team_id=home,
        away_team_id=away,
        date=date,
        status=status,
        representative=representative,
        **kwargs,
    )


def test_select_window_filters_role_and_sorts_recent_first():
    matches = [
        _match("a", date=1_600_000_000),
        _match("b", home="3", away="1", date=1_700_000_000),
        _match("c", date="2023-05-01T18:00:00Z"),
        _match("d", date=1_500_000_000),
    ]

    window = select_window(matches, "1", VenueRole.HOME, 2)
    assert [match.id for match in window] == ["c", "a"]

    away = select_window(matches, 1, "away", 5)
    assert [match.id for match in away] == ["b"]


def test_select_window_undated_after_dated_in_input_order():
    matches = [
        _match("x"),
        _match("y", date=1_600_000_000),
        _match("z", date="not a date"),
    ]

    window = select_window(matches, "1", "home", 10)
    assert [match.id for match in window] == ["y", "x", "z"]


def test_select_window_requires_completed_by_default():
    matches = [
        _match("done", date=1_600_000_000),
        _match("pending", date=1_700_000_000, status="incomplete"),
    ]

    assert [m.id for m in select_window(matches, "1", "home", 5)] == ["done"]
    assert [m.id for m in select_window(matches, "1", "home", 5, require_completed=False)] == ["pending", "done"]


def test_select_window_can_drop_non_representative():
    matches = [
        _match("cup", date=1_700_000_000, representative=False),
        _match("league", date=1_600_000_000),
    ]

    assert len(select_window(matches, "1", "home", 5)) == 2
    window = select_window(matches, "1", "home", 5, exclude_non_representative=True)
    assert [match.id for match in window] == ["league"]


def test_select_window_short_history_and_zero_limit():
    matches = [_match("only", date=1_600_000_000)]

    assert len(select_window(matches, "1", "home", 10)) == 1
    assert select_window(matches, "1", "home", 0) == []
    assert select_window([], "1", "home", 5) == []


def test_select_window_contract_violations():
    with pytest.raises(TypeError):
        select_window(None, "1", "home", 5)  # type: ignore[arg-type]
    with pytest.raises(ValueError):
        select_window([], "1", "home", -1)
    with pytest.raises(ValueError):
        select_window([], "1", "neutral", 5)


def test_parse_match_date_formats():
    expected = datetime(2014, 6, 16, tzinfo=timezone.utc)

    assert parse_match_date(1402876800) == expected
    assert parse_match_date("1402876800") == expected
    assert parse_match_date("2014-06-16") == expected
    assert parse_match_date("2014-06-16T00:00:00Z") == expected
    assert parse_match_date("16/06/2014") == expected
    assert parse_match_date("soon") is None
    assert parse_match_date(0) is None
    assert parse_match_date(True) is None


def test_head_to_head_covers_both_venues():
    matches = [
        _match("h", home="1", away="2", date=1_600_000_000),
        _match("r", home="2", away="1", date=1_700_000_000),
        _match("other", home="1", away="3", date=1_650_000_000),
    ]

    meetings = head_to_head(matches, "1", "2")
    assert [match.id for match in meetings] == ["r", "h"]
    assert [match.id for match in head_to_head(matches, 2, 1, limit=1)] == ["r"]
