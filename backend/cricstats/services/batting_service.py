"""Batting records service."""
from __future__ import annotations

from dataclasses import dataclass

import pandas as pd

from cricstats.services.records import formulas
from cricstats.services.records.aggregator import (
    BATTING_PLAN,
    DimensionAggregator,
    apply_threshold,
    int_columns,
    prepare_batting,
)
from cricstats.services.records.criteria import QualificationFilter
from cricstats.services.records.dimensions import Dimension, dimension_key
from cricstats.services.records.extractor import DetailExtractor, combine_match_innings
from cricstats.services.records.paginator import PagedResult
from cricstats.services.records.sort_order import (
    BATTING_INNINGS_SORTS,
    BATTING_MATCH_SORTS,
    BATTING_SUMMARY_SORTS,
)
from cricstats.services.records_service import (
    INNINGS_TIE_BREAKERS,
    MATCH_TIE_BREAKERS,
    RecordsService,
    select_columns,
    summary_tie_breakers,
)

MATCH_CONTEXT = ["name", "sort_name_part", "team", "opponents", "ground", "match_date", "match_type"]

INNINGS_COLUMNS = [
    "player_id", "match_id", *MATCH_CONTEXT, "innings_number", "innings_order", "position",
    "dismissal_type", "score", "not_out", "balls", "minutes", "fours", "sixes", "sr",
    "_not_out_adjusted_score",
]

MATCH_COLUMNS = [
    "player_id", "match_id", *MATCH_CONTEXT, "innings_order", "runs", "bat1", "bat1_not_out",
    "bat2", "bat2_not_out", "balls", "minutes", "fours", "sixes", "sr",
]


def batting_innings(details: pd.DataFrame, threshold: int = 0) -> pd.DataFrame:
    """One row per innings batted; ``Runs`` sorts a not out 50 above a dismissed 50."""
    if details.empty:
        return details
    frame = prepare_batting(details)
    frame = frame[frame["innings"] == 1].copy()
    frame["not_out"] = frame["not_out"].fillna(0).astype(bool)
    frame["sr"] = formulas.batting_strike_rate(frame["runs"], frame["balls"])
    frame["_not_out_adjusted_score"] = formulas.flag_encode(frame["runs"], frame["not_out"])
    frame = apply_threshold(frame, "runs", threshold)
    return int_columns(select_columns(frame, INNINGS_COLUMNS).copy(), ("score", "balls", "minutes"))


def batting_match_totals(details: pd.DataFrame, threshold: int = 0) -> pd.DataFrame:
    """Both innings of a match added together, keeping each innings as ``bat1``/``bat2``."""
    if details.empty:
        return details
    frame = prepare_batting(details)
    frame = frame[frame["innings"] == 1].copy()
    frame["_balls_missing"] = frame["balls"].isna().astype(int)
    combined = combine_match_innings(
        frame,
        ["player_id", "match_id"],
        ["runs", "not_outs", "balls", "_balls_missing", "minutes", "fours", "sixes"],
        carry=[*MATCH_CONTEXT, "innings_order"],
    )
    combined = combined.rename(columns={"runs_1": "bat1", "runs_2": "bat2"})
    combined["bat1_not_out"] = combined["not_outs_1"].fillna(0) > 0
    combined["bat2_not_out"] = combined["not_outs_2"].fillna(0) > 0
    # One unknown ball count makes the match total unknown
    combined["balls"] = combined["balls"].mask(combined["_balls_missing"] > 0)
    combined["sr"] = formulas.batting_strike_rate(combined["runs"], combined["balls"])
    combined = apply_threshold(combined, "runs", threshold)
    return int_columns(
        select_columns(combined, MATCH_COLUMNS).copy(),
        ("runs", "bat1", "bat2", "balls", "minutes", "fours", "sixes"),
    )


@dataclass
class BattingService(RecordsService):
    def summary(self, criteria: QualificationFilter, dimension: Dimension) -> PagedResult:
        key = dimension_key(dimension)

        def build(extractor: DetailExtractor) -> pd.DataFrame:
            frame = DimensionAggregator(key).aggregate(
                BATTING_PLAN,
                extractor.batting(),
                extractor.appearances(key),
                threshold=criteria.minimum_threshold,
                opponents_id=criteria.opponents_id,
            )
            return int_columns(frame, ("highest_score", "balls", "runs", "innings", "not_outs"))

        return self.run(criteria, BATTING_SUMMARY_SORTS, summary_tie_breakers(key), build)

    def innings_by_innings(self, criteria: QualificationFilter) -> PagedResult:
        return self.run(
            criteria,
            BATTING_INNINGS_SORTS,
            INNINGS_TIE_BREAKERS,
            lambda extractor: batting_innings(extractor.batting(), criteria.minimum_threshold),
        )

    def match_totals(self, criteria: QualificationFilter) -> PagedResult:
        return self.run(
            criteria,
            BATTING_MATCH_SORTS,
            MATCH_TIE_BREAKERS,
            lambda extractor: batting_match_totals(extractor.batting(), criteria.minimum_threshold),
        )
