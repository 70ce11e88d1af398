"""Sortable fields and the per-category allow-lists that map them to columns."""
from __future__ import annotations

import enum
from dataclasses import dataclass
from typing import Dict, Mapping

from cricstats.services.records.errors import InvalidSortFieldError


class SortOrder(enum.IntEnum):
    """Sort fields as clients send them; the integer values are part of the API."""

    UNKNOWN = 0
    SORT_NAME_PART = 1
    TEAMS = 2
    OPPONENTS = 3
    RUNS = 4
    WICKETS = 5
    BALLS = 6
    YEAR = 7
    MATCHES = 8
    WON = 9
    LOST = 10
    TIED = 11
    DRAWN = 12
    BYES = 13
    LEG_BYES = 14
    WIDES = 15
    NO_BALLS = 16
    MATCH_START_DATE_AS_OFFSET = 17
    VICTORY_MARGIN = 18
    SERIES_DATE = 19
    KNOWN_AS = 20
    COUNTRY_NAME = 21
    MATCH_START_YEAR = 22
    PENALTIES = 23
    EXTRAS = 24
    PERCENTAGE = 25
    DISMISSALS = 26
    CAUGHT = 27
    STUMPINGS = 28
    BEST_CAUGHT_KEEPER = 29
    BEST_CAUGHT_FIELDER = 30
    BEST_DISMISSALS = 31
    INNINGS = 32
    FOURS = 33
    SIXES = 34
    INNINGS_ORDER = 35
    BAT1 = 36
    BAT2 = 37
    MINUTES = 38
    NOT_OUTS = 39
    HIGHEST_SCORE = 40
    AVG = 41
    FIFTIES = 42
    HUNDREDS = 43
    DUCKS = 44
    BBI = 45
    BBM = 46
    MAIDENS = 47
    DOTS = 48
    TEN_FOR = 49
    FIVE_FOR = 50
    RPO = 51
    SR = 52
    BALLS_PER_OVER = 53
    BI = 54
    RESULT = 55
    MARGIN = 56
    LS = 57
    WICKET = 58
    IN = 59
    OUT = 60
    DEBUT_AS_OFFSET = 61
    ACTIVE_UNTIL_AS_OFFSET = 62
    WICKET_KEEPER_DISMISSALS = 63
    TOTALS = 64
    GROUND = 65
    CAUGHT_KEEPER = 66
    CAUGHT_FIELDER = 67


@dataclass(frozen=True)
class SortableFields:
    """Allow-list of sort fields for one category.

    ``columns`` maps each accepted :class:`SortOrder` onto a result column and
    ``secondary`` is the name column used to break ties.
    """

    columns: Mapping[SortOrder, str]
    secondary: str

    def resolve(self, sort_field: SortOrder) -> str:
        try:
            return self.columns[sort_field]
        except KeyError:
            raise InvalidSortFieldError(sort_field) from None

    def extend(self, extra: Dict[SortOrder, str]) -> "SortableFields":
        return SortableFields({**self.columns, **extra}, self.secondary)


# Dimension label columns every aggregated category can sort on
_DIMENSION_SORTS: Dict[SortOrder, str] = {
    SortOrder.KNOWN_AS: "ground",
    SortOrder.GROUND: "ground",
    SortOrder.COUNTRY_NAME: "country_name",
    SortOrder.SERIES_DATE: "series_date",
    SortOrder.YEAR: "match_start_year",
    SortOrder.MATCH_START_YEAR: "match_start_year",
}

_PLAYER_SORTS: Dict[SortOrder, str] = {
    SortOrder.SORT_NAME_PART: "sort_name_part",
    SortOrder.TEAMS: "teams",
    SortOrder.OPPONENTS: "opponents",
    SortOrder.MATCHES: "matches",
    SortOrder.DEBUT_AS_OFFSET: "debut",
    SortOrder.ACTIVE_UNTIL_AS_OFFSET: "end",
    **_DIMENSION_SORTS,
}

_MATCH_ROW_SORTS: Dict[SortOrder, str] = {
    SortOrder.SORT_NAME_PART: "sort_name_part",
    SortOrder.TEAMS: "team",
    SortOrder.OPPONENTS: "opponents",
    SortOrder.GROUND: "ground",
    SortOrder.KNOWN_AS: "ground",
    SortOrder.MATCH_START_DATE_AS_OFFSET: "match_date",
}

BATTING_SUMMARY_SORTS = SortableFields(
    {
        **_PLAYER_SORTS,
        SortOrder.INNINGS: "innings",
        SortOrder.NOT_OUTS: "not_outs",
        SortOrder.RUNS: "runs",
        SortOrder.BALLS: "balls",
        SortOrder.HIGHEST_SCORE: "_highest_score",
        SortOrder.AVG: "avg",
        SortOrder.SR: "sr",
        SortOrder.BI: "bi",
        SortOrder.HUNDREDS: "hundreds",
        SortOrder.FIFTIES: "fifties",
        SortOrder.DUCKS: "ducks",
        SortOrder.FOURS: "fours",
        SortOrder.SIXES: "sixes",
    },
    secondary="sort_name_part",
)

BATTING_INNINGS_SORTS = SortableFields(
    {
        **_MATCH_ROW_SORTS,
        SortOrder.RUNS: "_not_out_adjusted_score",
        SortOrder.BALLS: "balls",
        SortOrder.FOURS: "fours",
        SortOrder.SIXES: "sixes",
        SortOrder.MINUTES: "minutes",
        SortOrder.INNINGS_ORDER: "innings_order",
        SortOrder.SR: "sr",
    },
    secondary="sort_name_part",
)

BATTING_MATCH_SORTS = BATTING_INNINGS_SORTS.extend(
    {
        SortOrder.RUNS: "runs",
        SortOrder.BAT1: "bat1",
        SortOrder.BAT2: "bat2",
    }
)

BOWLING_SUMMARY_SORTS = SortableFields(
    {
        **_PLAYER_SORTS,
        SortOrder.INNINGS: "innings",
        SortOrder.BALLS: "balls",
        SortOrder.MAIDENS: "maidens",
        SortOrder.DOTS: "dots",
        SortOrder.RUNS: "runs",
        SortOrder.WICKETS: "wickets",
        SortOrder.AVG: "avg",
        SortOrder.RPO: "rpo",
        SortOrder.SR: "sr",
        SortOrder.BI: "bi",
        SortOrder.FOURS: "fours",
        SortOrder.SIXES: "sixes",
        SortOrder.WIDES: "wides",
        SortOrder.NO_BALLS: "no_balls",
        SortOrder.FIVE_FOR: "five_for",
        SortOrder.TEN_FOR: "ten_for",
        SortOrder.BBI: "_bbi",
        SortOrder.BBM: "_bbm",
    },
    secondary="sort_name_part",
)

BOWLING_ROW_SORTS = SortableFields(
    {
        **_MATCH_ROW_SORTS,
        SortOrder.BALLS: "balls",
        SortOrder.MAIDENS: "maidens",
        SortOrder.DOTS: "dots",
        SortOrder.RUNS: "runs",
        SortOrder.WICKETS: "wickets",
        SortOrder.RPO: "rpo",
        SortOrder.INNINGS_ORDER: "innings_order",
        SortOrder.BALLS_PER_OVER: "balls_per_over",
    },
    secondary="sort_name_part",
)

_FIELDING_COUNTS: Dict[SortOrder, str] = {
    SortOrder.DISMISSALS: "dismissals",
    SortOrder.WICKET_KEEPER_DISMISSALS: "wicket_keeper_dismissals",
    SortOrder.CAUGHT: "caught",
    SortOrder.STUMPINGS: "stumped",
    SortOrder.CAUGHT_KEEPER: "caught_keeper",
    SortOrder.CAUGHT_FIELDER: "caught_fielder",
}

FIELDING_SUMMARY_SORTS = SortableFields(
    {
        **_PLAYER_SORTS,
        **_FIELDING_COUNTS,
        SortOrder.INNINGS: "innings",
        SortOrder.BEST_DISMISSALS: "best_dismissals",
        SortOrder.BEST_CAUGHT_KEEPER: "best_caught_keeper",
        SortOrder.BEST_CAUGHT_FIELDER: "best_caught_fielder",
    },
    secondary="sort_name_part",
)

FIELDING_ROW_SORTS = SortableFields(
    {
        **_MATCH_ROW_SORTS,
        **_FIELDING_COUNTS,
        SortOrder.INNINGS_ORDER: "innings_order",
    },
    secondary="sort_name_part",
)

PARTNERSHIP_SUMMARY_SORTS = SortableFields(
    {
        SortOrder.TEAMS: "team",
        SortOrder.OPPONENTS: "opponents",
        SortOrder.RUNS: "runs",
        SortOrder.INNINGS: "innings",
        SortOrder.NOT_OUTS: "not_outs",
        SortOrder.AVG: "avg",
        SortOrder.HUNDREDS: "hundreds",
        SortOrder.FIFTIES: "fifties",
        SortOrder.HIGHEST_SCORE: "_highest",
        **_DIMENSION_SORTS,
    },
    secondary="player_names",
)

PARTNERSHIP_INNINGS_SORTS = SortableFields(
    {
        SortOrder.TEAMS: "team",
        SortOrder.OPPONENTS: "opponents",
        SortOrder.GROUND: "ground",
        SortOrder.KNOWN_AS: "ground",
        SortOrder.MATCH_START_DATE_AS_OFFSET: "match_date",
        SortOrder.RUNS: "runs",
        SortOrder.WICKET: "wicket",
        SortOrder.INNINGS_ORDER: "innings_order",
    },
    secondary="player_names",
)

TEAM_SUMMARY_SORTS = SortableFields(
    {
        SortOrder.TEAMS: "team",
        SortOrder.OPPONENTS: "opponents",
        SortOrder.MATCHES: "played",
        SortOrder.WON: "won",
        SortOrder.LOST: "lost",
        SortOrder.DRAWN: "drawn",
        SortOrder.TIED: "tied",
        SortOrder.INNINGS: "innings",
        SortOrder.RUNS: "total_runs",
        SortOrder.WICKETS: "wickets",
        SortOrder.BALLS: "total_balls",
        SortOrder.HIGHEST_SCORE: "hs",
        SortOrder.LS: "ls",
        SortOrder.AVG: "avg",
        SortOrder.RPO: "rpo",
        SortOrder.SR: "sr",
        **_DIMENSION_SORTS,
    },
    secondary="team",
)

TEAM_INNINGS_SORTS = SortableFields(
    {
        SortOrder.TEAMS: "team",
        SortOrder.OPPONENTS: "opponents",
        SortOrder.GROUND: "ground",
        SortOrder.KNOWN_AS: "ground",
        SortOrder.MATCH_START_DATE_AS_OFFSET: "match_date",
        SortOrder.TOTALS: "total",
        SortOrder.RUNS: "total",
        SortOrder.WICKETS: "wickets",
        SortOrder.BALLS: "balls",
        SortOrder.RPO: "rpo",
        SortOrder.INNINGS_ORDER: "innings_order",
    },
    secondary="team",
)

_EXTRAS_COUNTS: Dict[SortOrder, str] = {
    SortOrder.RUNS: "runs",
    SortOrder.EXTRAS: "extras",
    SortOrder.BYES: "byes",
    SortOrder.LEG_BYES: "leg_byes",
    SortOrder.WIDES: "wides",
    SortOrder.NO_BALLS: "no_balls",
    SortOrder.PENALTIES: "penalties",
    SortOrder.WICKETS: "wickets",
    SortOrder.BALLS: "balls",
    SortOrder.PERCENTAGE: "percentage",
}

TEAM_EXTRAS_SORTS = SortableFields(
    {
        SortOrder.TEAMS: "team",
        SortOrder.MATCHES: "played",
        **_EXTRAS_COUNTS,
    },
    secondary="team",
)

TEAM_EXTRAS_INNINGS_SORTS = SortableFields(
    {
        SortOrder.TEAMS: "team",
        SortOrder.OPPONENTS: "opponents",
        SortOrder.GROUND: "ground",
        SortOrder.MATCH_START_DATE_AS_OFFSET: "match_date",
        SortOrder.TOTALS: "runs",
        **_EXTRAS_COUNTS,
    },
    secondary="team",
)

TARGET_SORTS = SortableFields(
    {
        SortOrder.TEAMS: "winning_team",
        SortOrder.OPPONENTS: "losing_team",
        SortOrder.GROUND: "ground",
        SortOrder.KNOWN_AS: "ground",
        SortOrder.SERIES_DATE: "series_date",
        SortOrder.MATCH_START_DATE_AS_OFFSET: "match_date",
        SortOrder.RUNS: "target",
        SortOrder.TOTALS: "target",
    },
    secondary="winning_team",
)

