import pytest

from fixturestats.analytics import (
    InvalidThresholdsError,
    aggregate,
    expected_statistics,
    over_rates,
    over_under_mapping,
)
from fixturestats.models import NormalizedMatch


def _match(home_goals=0, away_goals=0, home_corners=0, away_corners=0, home_cards=0, away_cards=0):
    return NormalizedMatch(
        home_goals=home_goals,
        away_goals=away_goals,
        home_corners=home_corners,
        away_corners=away_corners,
        home_cards=home_cards,
        away_cards=away_cards,
    )


def _goal_totals(*totals):
    return [_match(home_goals=total) for total in totals]


def test_goal_totals_over_half_and_two_and_a_half():
    results = aggregate(_goal_totals(3, 1, 2, 4, 0), "total_goals", [0.5, 2.5])

    assert results[0].threshold == 0.5
    assert results[0].over_count == 4
    assert results[0].over_pct == pytest.approx(80.0)
    assert results[0].under_pct == pytest.approx(20.0)
    assert results[1].over_count == 2
    assert results[1].over_pct == pytest.approx(40.0)
    assert results[1].under_pct == pytest.approx(60.0)


def test_counts_always_cover_the_match_set():
    matches = _goal_totals(0, 1, 1, 2, 3, 5, 7)

    for result in aggregate(matches, "totalGoals", [0.5, 1, 1.5, 2.5, 6.5]):
        assert result.over_count + result.under_count == len(matches)
        assert result.over_pct + result.under_pct == pytest.approx(100.0, abs=1e-9)


def test_over_and_under_percentages_are_complementary_after_rounding():
    matches = _goal_totals(*([3] * 23 + [0] * 57))

    result = aggregate(matches, "total_goals", [2.5])[0]

    assert result.over_pct == pytest.approx(28.7)
    assert result.under_pct == pytest.approx(71.3)
    assert result.over_pct + result.under_pct == pytest.approx(100.0, abs=1e-9)


def test_integer_threshold_counts_pushes_as_under():
    results = aggregate(_goal_totals(2, 2, 3), "total_goals", [2])

    assert results[0].over_count == 1
    assert results[0].under_count == 2


def test_empty_match_set_yields_zeroes():
    results = aggregate([], "total_goals", [2.5])

    assert len(results) == 1
    result = results[0]
    assert (result.threshold, result.over_count, result.over_pct, result.under_count, result.under_pct) == (
        2.5,
        0,
        0,
        0,
        0,
    )


def test_percentages_round_to_one_decimal():
    results = aggregate(_goal_totals(3, 0, 0), "total_goals", [2.5])

    assert results[0].over_pct == pytest.approx(33.3)
    assert results[0].under_pct == pytest.approx(66.7)


def test_callable_field_selector():
    matches = [_match(home_corners=6, away_corners=1), _match(home_corners=2, away_corners=2)]

    results = aggregate(matches, lambda match: match.home_corners, [4.5])
    assert results[0].over_count == 1


@pytest.mark.parametrize("thresholds", [[], [-0.5], ["2.5"], [float("nan")], [True]])
def test_invalid_thresholds_raise(thresholds):
    with pytest.raises(InvalidThresholdsError):
        aggregate(_goal_totals(1), "total_goals", thresholds)


def test_invalid_thresholds_error_is_value_error():
    with pytest.raises(ValueError):
        aggregate([], "total_goals", [])


def test_unknown_field_raises_key_error():
    with pytest.raises(KeyError):
        aggregate([], "possession", [0.5])


def test_over_under_mapping_shape():
    mapping = over_under_mapping(aggregate(_goal_totals(3, 1, 2, 4, 0), "total_goals", [2.5]))

    assert mapping == {
        "over_2.5": {"count": 2, "percentage": 40.0},
        "under_2.5": {"count": 3, "percentage": 60.0},
    }


def test_over_rates_keyed_by_threshold():
    rates = over_rates(aggregate(_goal_totals(3, 1, 2, 4, 0), "total_goals", [0.5, 2.5, 3]))

    assert rates == {"0.5": 80.0, "2.5": 40.0, "3": 20.0}


def test_expected_statistics_averages():
    matches = [
        _match(home_goals=2, away_goals=1, home_corners=5, away_corners=4, home_cards=2, away_cards=1),
        _match(home_goals=0, away_goals=0, home_corners=3, away_corners=3, home_cards=1, away_cards=3),
        _match(home_goals=1, away_goals=1, home_corners=6, away_corners=2, home_cards=0, away_cards=0),
    ]

    expected = expected_statistics(matches)
    assert expected.matches_analyzed == 3
    assert expected.goals == pytest.approx(1.67)
    assert expected.corners == pytest.approx(7.67)
    assert expected.cards == pytest.approx(2.33)


def test_expected_statistics_empty_window():
    expected = expected_statistics([])

    assert expected.matches_analyzed == 0
    assert expected.goals is None
