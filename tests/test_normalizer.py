import logging

import pytest

from fixturestats.ingest import (
    FixtureExclusionRules,
    classify_field,
    classify_keys,
    exclusion_reasons,
    is_finished,
    is_representative_fixture,
    normalize,
    normalize_many,
    resolve_field,
)


def _raw(**overrides):
    record = {
        "id": 101,
        "homeID": 10,
        "awayID": 20,
        "home_name": "Germany",
        "away_name": "Portugal",
        "homeGoalCount": 4,
        "awayGoalCount": 0,
        "team_a_yellow_cards": 2,
        "team_b_yellow_cards": 3,
        "team_a_red_cards": 0,
        "team_b_red_cards": 1,
        "team_a_corners": 7,
        "team_b_corners": 2,
        "season": "2014",
        "competition_id": 1425,
        "date_unix": 1402934400,
        "status": "complete",
    }
    record.update(overrides)
    return record


def test_normalize_resolves_alternate_spellings():
    match = normalize(_raw())

    assert match.id == "101"
    assert match.home_team_id == "10"
    assert match.away_team_id == "20"
    assert match.home_team_name == "Germany"
    assert match.home_goals == 4
    assert match.away_goals == 0
    assert match.home_cards == 2
    assert match.away_cards == 4
    assert match.total_cards == 6
    assert match.total_corners == 9
    assert match.competition_id == "1425"
    assert match.date == 1402934400
    assert match.representative is True


def test_normalize_empty_record_defaults():
    match = normalize({})

    assert match.home_team_name == "Unknown Home"
    assert match.away_team_name == "Unknown Away"
    assert match.home_team_id is None
    assert match.total_goals == match.home_goals + match.away_goals == 0
    assert match.total_cards == 0
    assert match.total_corners == 0


def test_normalize_non_mapping_returns_defaults():
    match = normalize(None)  # type: ignore[arg-type]

    assert match.total_goals == 0
    assert match.home_team_name == "Unknown Home"


def test_normalize_unwraps_data_envelope():
    match = normalize({"data": _raw(homeGoalCount=1)})

    assert match.home_goals == 1
    assert match.home_team_name == "Germany"


def test_normalize_nested_team_objects_and_score():
    raw = {
        "homeTeam": {"id": 5, "name": "Spain"},
        "awayTeam": {"id": 6, "name": "Italy"},
        "score": {"home": "2", "away": 1.0},
    }
    match = normalize(raw)

    assert match.home_team_id == "5"
    assert match.away_team_name == "Italy"
    assert match.home_goals == 2
    assert match.away_goals == 1


def test_normalize_coerces_bad_values_to_defaults():
    match = normalize(_raw(homeGoalCount="n/a", awayGoalCount=True, team_a_corners=-3))

    assert match.home_goals == 0
    assert match.away_goals == 0
    assert match.home_corners == 0


def test_first_present_candidate_wins():
    match = normalize(_raw(homeGoals=3, homeGoalCount=1))

    assert match.home_goals == 3


def test_explicit_card_total_beats_tally():
    match = normalize(_raw(homeCards=5))

    assert match.home_cards == 5
    assert match.total_cards == 9


def test_normalize_is_idempotent_on_dumped_shape():
    first = normalize(_raw(home_name="Iran (W)"))
    second = normalize(first.model_dump(by_alias=True))

    assert second == first
    assert second.representative is False


def test_totals_cannot_be_injected():
    match = normalize(_raw(totalGoals=99))

    assert match.total_goals == 4


def test_resolve_field_without_defaults():
    assert resolve_field({}, "home_goals") is None
    assert resolve_field({"team_a_red_cards": 1}, "home_cards") == 1
    assert resolve_field({"homeTeam": "Brazil"}, "home_team_name") == "Brazil"
    with pytest.raises(KeyError):
        resolve_field({}, "possession")


def test_classify_field_and_keys():
    assert classify_field("homeGoalCount") == "goals"
    assert classify_field("team_a_corners") == "corners"
    assert classify_field("home_image") == "image"
    assert classify_field("possession") is None

    grouped = classify_keys({"homeID": 1, "status": "complete", "odds_ft_1": 1.8})
    assert grouped["team"] == ["homeID"]
    assert grouped["schedule"] == ["status"]
    assert grouped["unrecognized"] == ["odds_ft_1"]


def test_is_finished_closed_table():
    assert is_finished("complete")
    assert is_finished("FT")
    assert not is_finished("incomplete")
    assert not is_finished(None)


def test_exclusion_reasons_cover_each_rule():
    assert exclusion_reasons(_raw()) == []
    assert exclusion_reasons(_raw(away_name="Portugal (U21)")) == ["parenthetical_name"]
    assert exclusion_reasons(_raw(season=-1)) == ["no_season"]
    assert exclusion_reasons(_raw(competition_id=5874)) == ["excluded_competition"]


def test_exclusion_rules_are_extensible():
    rules = FixtureExclusionRules(excluded_competitions=frozenset({"1425"}))

    assert not is_representative_fixture(_raw(), rules)
    assert is_representative_fixture(_raw(competition_id=5874), rules)


def test_normalize_many_skips_non_mappings(caplog):
    with caplog.at_level(logging.INFO):
        matches = normalize_many([_raw(), "junk", _raw(season="-1")])

    assert len(matches) == 2
    assert [match.representative for match in matches] == [True, False]
    assert "Normalized 2 matches (1 non-representative)" in caplog.text
