"""Bowling records service."""
from __future__ import annotations

from dataclasses import dataclass

import pandas as pd

from cricstats.core.config import settings
from cricstats.services.records import formulas
from cricstats.services.records.aggregator import (
    DimensionAggregator,
    apply_threshold,
    bowling_plan,
    int_columns,
    prepare_bowling,
)
from cricstats.services.records.criteria import QualificationFilter
from cricstats.services.records.dimensions import Dimension, dimension_key
from cricstats.services.records.extractor import DetailExtractor, combine_match_innings
from cricstats.services.records.paginator import PagedResult
from cricstats.services.records.sort_order import BOWLING_ROW_SORTS, BOWLING_SUMMARY_SORTS
from cricstats.services.records_service import (
    INNINGS_TIE_BREAKERS,
    MATCH_TIE_BREAKERS,
    RecordsService,
    select_columns,
    summary_tie_breakers,
)

MATCH_CONTEXT = ["name", "sort_name_part", "team", "opponents", "ground", "match_date", "match_type"]

ROW_COLUMNS = [
    "player_id", "match_id", *MATCH_CONTEXT, "innings_number", "innings_order", "overs",
    "balls", "maidens", "dots", "runs", "wickets", "wides", "no_balls", "fours", "sixes", "rpo",
    "balls_per_over",
]

MATCH_VALUES = ["balls", "maidens", "dots", "runs", "wickets", "wides", "no_balls", "fours", "sixes"]


def _with_rates(frame: pd.DataFrame) -> pd.DataFrame:
    frame["rpo"] = formulas.economy_rate(frame["runs"], frame["balls"])
    frame["overs"] = formulas.overs_from_balls(frame["balls"], frame["balls_per_over"].fillna(6))
    return frame


def bowling_innings(details: pd.DataFrame, threshold: int = 0) -> pd.DataFrame:
    if details.empty:
        return details
    frame = prepare_bowling(details)
    frame = _with_rates(frame[frame["innings"] > 0].copy())
    frame = apply_threshold(frame, "wickets", threshold)
    return int_columns(select_columns(frame, ROW_COLUMNS).copy(), MATCH_VALUES)


def bowling_match_totals(details: pd.DataFrame, threshold: int = 0) -> pd.DataFrame:
    if details.empty:
        return details
    frame = prepare_bowling(details)
    frame = frame[frame["innings"] > 0]
    combined = combine_match_innings(
        frame,
        ["player_id", "match_id"],
        MATCH_VALUES,
        carry=[*MATCH_CONTEXT, "innings_order", "balls_per_over"],
    )
    combined = apply_threshold(_with_rates(combined), "wickets", threshold)
    return int_columns(select_columns(combined, ROW_COLUMNS).copy(), MATCH_VALUES)


@dataclass
class BowlingService(RecordsService):
    five_wicket_limit: int = settings.FIVE_WICKET_LIMIT

    def summary(self, criteria: QualificationFilter, dimension: Dimension) -> PagedResult:
        key = dimension_key(dimension)

        def build(extractor: DetailExtractor) -> pd.DataFrame:
            frame = DimensionAggregator(key).aggregate(
                bowling_plan(self.five_wicket_limit),
                extractor.bowling(),
                extractor.appearances(key),
                threshold=criteria.minimum_threshold,
                opponents_id=criteria.opponents_id,
            )
            return int_columns(
                frame,
                (*MATCH_VALUES, "innings", "bbi_wickets", "bbi_runs", "bbm_wickets", "bbm_runs"),
            )

        return self.run(criteria, BOWLING_SUMMARY_SORTS, summary_tie_breakers(key), build)

    def innings_by_innings(self, criteria: QualificationFilter) -> PagedResult:
        return self.run(
            criteria,
            BOWLING_ROW_SORTS,
            INNINGS_TIE_BREAKERS,
            lambda extractor: bowling_innings(extractor.bowling(), criteria.minimum_threshold),
        )

    def match_totals(self, criteria: QualificationFilter) -> PagedResult:
        return self.run(
            criteria,
            BOWLING_ROW_SORTS,
            MATCH_TIE_BREAKERS,
            lambda extractor: bowling_match_totals(extractor.bowling(), criteria.minimum_threshold),
        )
