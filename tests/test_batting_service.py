import pytest

from conftest import ANDERSON, AUSTRALIA, COOK, ENGLAND, LYON, PAINE, ROOT, SMITH, sample_criteria

from cricstats.services.batting_service import BattingService
from cricstats.services.records.criteria import Pagination, SortDirection, SortSpec
from cricstats.services.records.dimensions import LABEL_COLUMNS, Dimension
from cricstats.services.records.sort_order import SortOrder


def _by_player(result):
    return {row["player_id"]: row for row in result.rows}


def test_career_summary(db):
    result = BattingService(db).summary(sample_criteria(), Dimension.CAREER)
    rows = _by_player(result)

    assert result.total_count == 6
    cook = rows[COOK]
    assert cook["name"] == "Alastair Cook"
    assert cook["matches"] == 2
    assert cook["innings"] == 4
    assert cook["not_outs"] == 0
    assert cook["runs"] == 225
    assert cook["balls"] == 450
    assert cook["avg"] == pytest.approx(56.25)
    assert cook["sr"] == pytest.approx(50.0)
    assert cook["bi"] == pytest.approx((56.25 * 50.0) ** 0.5)
    assert cook["highest_score"] == 100
    assert cook["highest_score_not_out"] is False
    assert cook["hundreds"] == 1
    assert cook["fifties"] == 1
    assert cook["teams"] == "England"
    assert cook["debut"] == 2019
    assert cook["end"] == 2019


def test_career_summary_labels_are_always_present(db):
    result = BattingService(db).summary(sample_criteria(), Dimension.CAREER)
    for row in result.rows:
        for column in LABEL_COLUMNS:
            assert column in row
            assert row[column] is None
        assert not any(key.startswith("_") for key in row)


def test_team_total_rows_are_never_reported(db):
    result = BattingService(db).summary(sample_criteria(), Dimension.CAREER)
    assert 1 not in _by_player(result)


def test_not_out_highest_score_and_ducks(db):
    rows = _by_player(BattingService(db).summary(sample_criteria(), Dimension.CAREER))

    assert rows[SMITH]["highest_score"] == 120
    assert rows[SMITH]["highest_score_not_out"] is True
    assert rows[SMITH]["avg"] == pytest.approx(88.33)
    assert rows[ANDERSON]["innings"] == 2
    assert rows[ANDERSON]["ducks"] == 1
    assert rows[LYON]["ducks"] == 1
    assert rows[ROOT]["not_outs"] == 2
    assert rows[ROOT]["avg"] == pytest.approx(80.0)


def test_did_not_bat_entries_do_not_hide_the_ball_count(db):
    rows = _by_player(BattingService(db).summary(sample_criteria(), Dimension.CAREER))

    assert rows[ANDERSON]["balls"] == 15
    assert rows[LYON]["balls"] == 35


def test_missing_ball_count_makes_balls_and_strike_rate_unknown(db):
    paine = _by_player(BattingService(db).summary(sample_criteria(), Dimension.CAREER))[PAINE]

    assert paine["balls"] is None
    assert paine["sr"] is None
    assert paine["avg"] == pytest.approx(30.0)


def test_substitute_appearances_are_not_counted(db):
    rows = _by_player(BattingService(db).summary(sample_criteria(), Dimension.CAREER))
    assert all(row["matches"] == 2 for row in rows.values())


def test_threshold_and_default_sort(db):
    result = BattingService(db).summary(sample_criteria(minimum_threshold=100), Dimension.CAREER)

    assert result.total_count == 3
    assert [row["player_id"] for row in result.rows] == [SMITH, COOK, ROOT]


def test_grounds_dimension(db):
    criteria = sample_criteria(team_id=ENGLAND)
    result = BattingService(db).summary(criteria, Dimension.GROUND)
    cook = {row["ground"]: row for row in result.rows if row["player_id"] == COOK}

    assert cook["Lord's"]["runs"] == 120
    assert cook["Melbourne Cricket Ground"]["runs"] == 105
    assert cook["Lord's"]["matches"] == 1
    assert cook["Lord's"]["country_name"] is None


def test_seasons_dimension(db):
    result = BattingService(db).summary(sample_criteria(), Dimension.SEASON)
    smith = {row["series_date"]: row["runs"] for row in result.rows if row["player_id"] == SMITH}
    assert smith == {"2019": 140, "2019/20": 125}


def test_opponents_dimension_labels_each_row(db):
    result = BattingService(db).summary(sample_criteria(), Dimension.OPPONENT)
    rows = _by_player(result)

    assert rows[COOK]["opponents"] == "Australia"
    assert rows[SMITH]["opponents"] == "England"


def test_requested_opponent_labels_career_rows(db):
    result = BattingService(db).summary(sample_criteria(opponents_id=AUSTRALIA), Dimension.CAREER)

    assert {row["player_id"] for row in result.rows} == {COOK, ROOT, ANDERSON}
    assert {row["opponents"] for row in result.rows} == {"Australia"}


def test_innings_by_innings_ranks_not_outs_above_equal_scores(db):
    criteria = sample_criteria(sort=SortSpec(field=SortOrder.RUNS))
    result = BattingService(db).innings_by_innings(criteria)

    assert result.total_count == 21
    top = result.rows[0]
    assert (top["player_id"], top["score"], top["not_out"]) == (SMITH, 120, True)
    assert "_not_out_adjusted_score" not in top


def test_innings_by_innings_threshold(db):
    result = BattingService(db).innings_by_innings(sample_criteria(minimum_threshold=100))
    assert sorted(row["score"] for row in result.rows) == [100, 120]


def test_match_totals_keep_each_innings(db):
    criteria = sample_criteria(minimum_threshold=120)
    result = BattingService(db).match_totals(criteria)
    rows = {(row["player_id"], row["match_id"]): row for row in result.rows}

    assert rows[(COOK, 1)]["runs"] == 120
    assert rows[(COOK, 1)]["bat1"] == 100
    assert rows[(COOK, 1)]["bat2"] == 20
    assert rows[(SMITH, 1)]["runs"] == 140
    assert rows[(SMITH, 2)]["bat1_not_out"] is True


def test_match_totals_count_a_missing_innings_as_zero(db):
    result = BattingService(db).match_totals(sample_criteria())
    anderson = {row["match_id"]: row for row in result.rows if row["player_id"] == ANDERSON}

    assert anderson[1]["runs"] == 0
    assert anderson[1]["bat2"] is None
    assert anderson[2]["runs"] == 2


def test_match_totals_with_an_unknown_ball_count(db):
    result = BattingService(db).match_totals(sample_criteria())
    paine = {row["match_id"]: row for row in result.rows if row["player_id"] == PAINE}

    assert paine[2]["runs"] == 50
    assert paine[2]["balls"] is None
    assert paine[2]["sr"] is None
    assert paine[1]["balls"] == 80
    assert paine[1]["sr"] == pytest.approx(50.0)


def test_pages_are_cut_after_sorting(db):
    criteria = sample_criteria(
        sort=SortSpec(field=SortOrder.SORT_NAME_PART, direction=SortDirection.ASC),
        pagination=Pagination(offset=2, page_size=2),
    )
    result = BattingService(db).summary(criteria, Dimension.CAREER)

    assert result.total_count == 6
    assert [row["sort_name_part"] for row in result.rows] == ["Lyon", "Paine"]


def test_host_countries_dimension(db):
    result = BattingService(db).summary(sample_criteria(), Dimension.HOST_COUNTRY)
    cook = {row["country_name"]: row for row in result.rows if row["player_id"] == COOK}

    assert {country: row["runs"] for country, row in cook.items()} == {"England": 120, "Australia": 105}
    assert cook["Australia"]["matches"] == 1
    assert cook["England"]["ground"] is None


def test_years_dimension(db):
    result = BattingService(db).summary(sample_criteria(), Dimension.YEAR_STARTED)
    cook = [row for row in result.rows if row["player_id"] == COOK]

    assert [(row["match_start_year"], row["runs"], row["matches"]) for row in cook] == [(2019, 225, 2)]


def test_series_dimension(db):
    result = BattingService(db).summary(sample_criteria(), Dimension.SERIES)
    cook = {row["series_number"]: row for row in result.rows if row["player_id"] == COOK}

    assert cook[1]["runs"] == 120
    assert cook[1]["series_date"] == "2019"
    assert cook[2]["runs"] == 105
    assert cook[2]["series_date"] == "2019/20"


def test_repeated_query_returns_the_same_page(db):
    criteria = sample_criteria(sort=SortSpec(field=SortOrder.RUNS))
    service = BattingService(db)

    first = service.summary(criteria, Dimension.GROUND)
    second = service.summary(criteria, Dimension.GROUND)

    assert first.total_count == second.total_count
    assert first.rows == second.rows
