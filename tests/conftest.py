import os

# Point the engine at in-memory SQLite before any cricstats module builds it
os.environ["DATABASE_URL"] = "sqlite://"
os.environ.setdefault("ENVIRONMENT", "test")

from datetime import date  # noqa: E402

import pytest  # noqa: E402

from cricstats.db import models  # noqa: E402
from cricstats.db.base import Base  # noqa: E402
from cricstats.db.session import SessionLocal, engine  # noqa: E402
from cricstats.services.records.criteria import Pagination, QualificationFilter, SortSpec  # noqa: E402

ENGLAND = 1
AUSTRALIA = 2

COOK = 10
ROOT = 11
ANDERSON = 12
SUBSTITUTE = 13
SMITH = 20
LYON = 21
PAINE = 22

DID_NOT_BAT = 14


def _sample_reference_data():
    return [
        models.Country(id=1, name="England"),
        models.Country(id=2, name="Australia"),
        models.Ground(id=1, known_as="Lord's", country_id=1),
        models.Ground(id=2, known_as="Melbourne Cricket Ground", country_id=2),
        models.Team(id=ENGLAND, name="England"),
        models.Team(id=AUSTRALIA, name="Australia"),
        models.Player(id=models.TEAM_TOTAL_PLAYER_ID, full_name="Team Total", sort_name_part="Total"),
        models.Player(id=COOK, full_name="Alastair Cook", sort_name_part="Cook"),
        models.Player(id=ROOT, full_name="Joe Root", sort_name_part="Root"),
        models.Player(id=ANDERSON, full_name="James Anderson", sort_name_part="Anderson"),
        models.Player(id=SUBSTITUTE, full_name="Sam Sub", sort_name_part="Sub"),
        models.Player(id=SMITH, full_name="Steve Smith", sort_name_part="Smith"),
        models.Player(id=LYON, full_name="Nathan Lyon", sort_name_part="Lyon"),
        models.Player(id=PAINE, full_name="Tim Paine", sort_name_part="Paine"),
    ]


def _sample_matches():
    return [
        models.Match(
            id=1, match_type="t", match_title="England v Australia, 2nd Test",
            home_team_id=ENGLAND, away_team_id=AUSTRALIA, location_id=1, home_country_id=1,
            series_date="2019", series_number=1, match_start_date=date(2019, 8, 14),
            match_start_year=2019, balls_per_over=6, victory_type=models.VictoryType.RUNS,
            how_much=50, who_won_id=ENGLAND, who_lost_id=AUSTRALIA, result_string="England won by 50 runs",
        ),
        models.Match(
            id=2, match_type="t", match_title="Australia v England, 3rd Test",
            home_team_id=AUSTRALIA, away_team_id=ENGLAND, location_id=2, home_country_id=2,
            series_date="2019/20", series_number=2, match_start_date=date(2019, 12, 26),
            match_start_year=2019, balls_per_over=6, victory_type=models.VictoryType.WICKETS,
            how_much=5, who_won_id=ENGLAND, who_lost_id=AUSTRALIA, result_string="England won by 5 wickets",
        ),
        models.Match(
            id=3, match_type="odi", match_title="England v Australia, 1st ODI",
            home_team_id=ENGLAND, away_team_id=AUSTRALIA, location_id=1, home_country_id=1,
            series_date="2020", series_number=3, match_start_date=date(2020, 6, 1),
            match_start_year=2020, balls_per_over=6, victory_type=models.VictoryType.RUNS,
            how_much=20, who_won_id=ENGLAND, who_lost_id=AUSTRALIA, result_string="England won by 20 runs",
        ),
        models.MatchSubType(match_id=1, match_type="wtc"),
    ]


def _sample_team_details():
    rows = []
    for match_id, home, away in ((1, ENGLAND, AUSTRALIA), (2, AUSTRALIA, ENGLAND), (3, ENGLAND, AUSTRALIA)):
        for team, opponents in ((home, away), (away, home)):
            rows.append(
                models.ExtraMatchDetail(
                    match_id=match_id,
                    team_id=team,
                    opponents_id=opponents,
                    result=models.MatchResult.WON if team == ENGLAND else models.MatchResult.LOST,
                    home_away=models.HomeAway.HOME if team == home else models.HomeAway.AWAY,
                )
            )
    return rows


def _sample_appearances():
    rows = []
    for match_id in (1, 2):
        for player_id in (COOK, ROOT, ANDERSON):
            rows.append(models.PlayerMatch(match_id=match_id, player_id=player_id, team_id=ENGLAND))
        for player_id in (SMITH, LYON, PAINE):
            rows.append(models.PlayerMatch(match_id=match_id, player_id=player_id, team_id=AUSTRALIA))
    rows.append(models.PlayerMatch(match_id=1, player_id=SUBSTITUTE, team_id=ENGLAND, is_substitute_fielder=1))
    rows.append(models.PlayerMatch(match_id=3, player_id=ROOT, team_id=ENGLAND))
    return rows


def _bat(match_id, player_id, team_id, innings_number, innings_order, score, balls, not_out=0, dismissal_type=1, match_type="t", position=1):
    return models.BattingDetail(
        match_id=match_id, match_type=match_type, player_id=player_id, team_id=team_id,
        opponents_id=AUSTRALIA if team_id == ENGLAND else ENGLAND,
        innings_number=innings_number, innings_order=innings_order, position=position,
        dismissal_type=dismissal_type, dismissal="not out" if not_out else "",
        score=score, not_out=not_out, balls=balls, minutes=None, fours=0, sixes=0,
    )


def _sample_batting():
    return [
        # Match 1: England bat first
        _bat(1, COOK, ENGLAND, 1, 1, 100, 200, position=1),
        _bat(1, COOK, ENGLAND, 2, 3, 20, 40, position=1),
        _bat(1, ROOT, ENGLAND, 1, 1, 50, 100, position=2),
        _bat(1, ROOT, ENGLAND, 2, 3, 30, 45, not_out=1, position=2),
        _bat(1, ANDERSON, ENGLAND, 1, 1, 0, 5, position=11),
        _bat(1, ANDERSON, ENGLAND, 2, 3, None, None, dismissal_type=DID_NOT_BAT, position=11),
        _bat(1, models.TEAM_TOTAL_PLAYER_ID, ENGLAND, 1, 1, 999, 999),
        _bat(1, SMITH, AUSTRALIA, 1, 2, 80, 160, position=4),
        _bat(1, SMITH, AUSTRALIA, 2, 4, 60, 100, position=4),
        _bat(1, LYON, AUSTRALIA, 1, 2, 10, 20, not_out=1, position=10),
        _bat(1, LYON, AUSTRALIA, 2, 4, 0, 3, position=10),
        _bat(1, PAINE, AUSTRALIA, 1, 2, 25, 50, position=7),
        _bat(1, PAINE, AUSTRALIA, 2, 4, 15, 30, position=7),
        # Match 2: Australia bat first
        _bat(2, SMITH, AUSTRALIA, 1, 1, 120, 220, not_out=1, position=4),
        _bat(2, SMITH, AUSTRALIA, 2, 3, 5, 10, position=4),
        _bat(2, LYON, AUSTRALIA, 1, 1, 4, 12, position=10),
        _bat(2, LYON, AUSTRALIA, 2, 3, None, None, dismissal_type=DID_NOT_BAT, position=10),
        _bat(2, PAINE, AUSTRALIA, 1, 1, 40, 70, position=7),
        _bat(2, PAINE, AUSTRALIA, 2, 3, 10, None, not_out=1, position=7),
        _bat(2, COOK, ENGLAND, 1, 2, 60, 130, position=1),
        _bat(2, COOK, ENGLAND, 2, 4, 45, 80, position=1),
        _bat(2, ROOT, ENGLAND, 1, 2, 10, 20, position=2),
        _bat(2, ROOT, ENGLAND, 2, 4, 70, 100, not_out=1, position=2),
        _bat(2, ANDERSON, ENGLAND, 1, 2, 2, 10, not_out=1, position=11),
        _bat(2, ANDERSON, ENGLAND, 2, 4, None, None, dismissal_type=DID_NOT_BAT, position=11),
        # One day international
        _bat(3, ROOT, ENGLAND, 1, 1, 150, 120, match_type="odi", position=3),
    ]


def _bowl(match_id, player_id, team_id, innings_number, innings_order, balls, runs, wickets, did_bowl=1):
    return models.BowlingDetail(
        match_id=match_id, match_type="t", player_id=player_id, team_id=team_id,
        opponents_id=AUSTRALIA if team_id == ENGLAND else ENGLAND,
        innings_number=innings_number, innings_order=innings_order, did_bowl=did_bowl,
        balls=balls, maidens=0, dots=None, runs=runs, wickets=wickets,
    )


def _sample_bowling():
    return [
        _bowl(1, ANDERSON, ENGLAND, 1, 2, 120, 40, 5),
        _bowl(1, ANDERSON, ENGLAND, 2, 4, 90, 30, 3),
        _bowl(1, ROOT, ENGLAND, 1, 2, 30, 20, 0),
        _bowl(1, ROOT, ENGLAND, 2, 4, None, 0, 0, did_bowl=0),
        _bowl(1, LYON, AUSTRALIA, 1, 1, 150, 60, 4),
        _bowl(1, LYON, AUSTRALIA, 2, 3, 100, 35, 2),
        _bowl(1, SMITH, AUSTRALIA, 1, 1, 12, 10, 0),
        _bowl(2, ANDERSON, ENGLAND, 1, 1, 132, 45, 5),
        _bowl(2, ANDERSON, ENGLAND, 2, 3, 60, 20, 2),
        _bowl(2, LYON, AUSTRALIA, 1, 2, 160, 70, 6),
        _bowl(2, LYON, AUSTRALIA, 2, 4, 80, 40, 4),
    ]


def _field(match_id, player_id, team_id, innings_number, innings_order, caught_fielder=0, caught_keeper=0, stumped=0):
    return models.FieldingDetail(
        match_id=match_id, match_type="t", player_id=player_id, team_id=team_id,
        opponents_id=AUSTRALIA if team_id == ENGLAND else ENGLAND,
        innings_number=innings_number, innings_order=innings_order,
        caught_fielder=caught_fielder, caught_keeper=caught_keeper, stumped=stumped,
    )


def _sample_fielding():
    return [
        _field(1, PAINE, AUSTRALIA, 1, 1, caught_fielder=1, caught_keeper=3, stumped=1),
        _field(1, PAINE, AUSTRALIA, 2, 3, caught_keeper=2),
        _field(2, PAINE, AUSTRALIA, 1, 2, caught_keeper=3),
        _field(2, PAINE, AUSTRALIA, 2, 4, caught_keeper=4, stumped=1),
        _field(1, ROOT, ENGLAND, 1, 2, caught_fielder=2),
        _field(1, SMITH, AUSTRALIA, 2, 3, caught_fielder=1),
    ]


def _innings(match_id, team_id, innings_number, innings_order, total, wickets, balls, complete=1, declared=0, extras=0, byes=0, leg_byes=0, wides=0, no_balls=0):
    return models.Innings(
        match_id=match_id, match_type="t", team_id=team_id,
        opponents_id=AUSTRALIA if team_id == ENGLAND else ENGLAND,
        innings_number=innings_number, innings_order=innings_order, total=total, wickets=wickets,
        balls=balls, declared=declared, complete=complete, extras=extras, byes=byes,
        leg_byes=leg_byes, wides=wides, no_balls=no_balls, penalties=0,
    )


def _sample_innings():
    return [
        _innings(1, ENGLAND, 1, 1, 300, 10, 540, extras=15, byes=5, leg_byes=4, wides=3, no_balls=3),
        _innings(1, AUSTRALIA, 1, 2, 250, 10, 500, extras=10, byes=2, leg_byes=3, wides=2, no_balls=3),
        _innings(1, ENGLAND, 2, 3, 200, 8, 400, complete=0, declared=1, extras=8, byes=8),
        _innings(1, AUSTRALIA, 2, 4, 200, 10, 420, extras=12, byes=6, leg_byes=6),
        _innings(2, AUSTRALIA, 1, 1, 400, 10, 700, extras=20, byes=10, leg_byes=10),
        _innings(2, ENGLAND, 1, 2, 250, 10, 520, extras=9, byes=9),
        _innings(2, AUSTRALIA, 2, 3, 100, 10, 200, extras=3, byes=3),
        _innings(2, ENGLAND, 2, 4, 251, 5, 300, complete=0, extras=6, byes=6),
    ]


def _partnership(partnership_id, match_id, innings_order, wicket, runs, batters, unbroken=0, multiple=0):
    first, second = sorted(batters)
    return [
        models.Partnership(
            id=partnership_id, match_id=match_id, match_type="t", team_id=ENGLAND, opponents_id=AUSTRALIA,
            innings_number=1 if innings_order <= 2 else 2, innings_order=innings_order, wicket=wicket,
            partnership=runs, unbroken=unbroken, multiple=multiple, partial=0, previous_wicket=wicket - 1,
            previous_score=0, current_score=runs, player_ids=f"{first:08d}{second:08d}",
            player_names=" & ".join(PLAYER_NAMES[player] for player in sorted(batters)),
        ),
        *[
            models.PartnershipPlayer(id=partnership_id * 10 + order, partnership_id=partnership_id, player_id=player)
            for order, player in enumerate(batters)
        ],
    ]


PLAYER_NAMES = {COOK: "Alastair Cook", ROOT: "Joe Root", ANDERSON: "James Anderson"}


def _sample_partnerships():
    return [
        *_partnership(1, 1, 1, 1, 120, (COOK, ROOT)),
        *_partnership(2, 1, 1, 2, 30, (ROOT, ANDERSON)),
        *_partnership(3, 2, 2, 1, 60, (COOK, ROOT)),
        *_partnership(4, 2, 4, 4, 80, (ROOT, COOK), unbroken=1),
        *_partnership(5, 1, 3, 1, 500, (COOK, ROOT), multiple=1),
    ]


def _sample_fall_of_wickets():
    return [
        models.FallOfWicket(match_id=1, innings_order=1, team_id=ENGLAND, wicket=1, score=120, player_id=COOK, overs="40.0"),
        models.FallOfWicket(match_id=1, innings_order=1, team_id=ENGLAND, wicket=2, score=150, player_id=ROOT, overs="52.3"),
    ]


def sample_criteria(**overrides) -> QualificationFilter:
    values = dict(
        match_type="t",
        minimum_threshold=0,
        pagination=Pagination(offset=0, page_size=50),
        sort=SortSpec(),
    )
    values.update(overrides)
    return QualificationFilter(**values)


@pytest.fixture()
def db():
    Base.metadata.create_all(engine)
    session = SessionLocal()
    for build in (
        _sample_reference_data,
        _sample_matches,
        _sample_team_details,
        _sample_appearances,
        _sample_batting,
        _sample_bowling,
        _sample_fielding,
        _sample_innings,
        _sample_partnerships,
        _sample_fall_of_wickets,
    ):
        session.add_all(build())
        session.flush()
    session.commit()
    try:
        yield session
    finally:
        session.close()
        Base.metadata.drop_all(engine)


@pytest.fixture()
def client(db):
    from fastapi.testclient import TestClient

    from cricstats.main import create_application

    with TestClient(create_application()) as test_client:
        yield test_client
