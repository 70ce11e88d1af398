from datetime import date

from conftest import AUSTRALIA, ENGLAND, sample_criteria

from cricstats.services.records.criteria import DateRange
from cricstats.services.records.match_universe import MatchUniverseResolver
from cricstats.services.records.staging import request_staging


def _universe(db, **overrides):
    with request_staging(db) as staging:
        table = MatchUniverseResolver(sample_criteria(**overrides)).stage(staging)
        return sorted(staging.read(table)["match_id"].tolist())


def test_match_type_alone(db):
    assert _universe(db) == [1, 2]
    assert _universe(db, match_type="odi") == [3]


def test_wildcards_do_not_restrict(db):
    assert _universe(db, team_id=0, opponents_id=0, ground_id=0, host_country_id=0, season="All Seasons") == [1, 2]
    assert _universe(db, season="0") == [1, 2]


def test_ground_and_host_country(db):
    assert _universe(db, ground_id=2) == [2]
    assert _universe(db, host_country_id=1) == [1]


def test_season_takes_precedence_over_the_date_range(db):
    in_2020 = DateRange(date(2020, 1, 1), date(2020, 12, 31))
    assert _universe(db, season="2019/20", date_range=in_2020) == [2]
    assert _universe(db, date_range=DateRange(date(2019, 8, 1), date(2019, 8, 31))) == [1]


def test_sub_type_membership(db):
    assert _universe(db, match_sub_type="wtc") == [1]
    assert _universe(db, match_sub_type="") == [1, 2]


def test_result_and_venue_masks_apply_to_the_requested_team(db):
    assert _universe(db, team_id=ENGLAND, result_mask=1) == [1, 2]
    assert _universe(db, team_id=AUSTRALIA, result_mask=1) == []
    assert _universe(db, team_id=ENGLAND, venue_mask=2) == [2]
    assert _universe(db, opponents_id=ENGLAND, venue_mask=1) == [2]
