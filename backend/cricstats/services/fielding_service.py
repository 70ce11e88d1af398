"""Fielding records service."""
from __future__ import annotations

from dataclasses import dataclass

import pandas as pd

from cricstats.services.records.aggregator import (
    FIELDING_PLAN,
    DimensionAggregator,
    apply_threshold,
    int_columns,
    prepare_fielding,
)
from cricstats.services.records.criteria import QualificationFilter
from cricstats.services.records.dimensions import Dimension, dimension_key
from cricstats.services.records.extractor import DetailExtractor, combine_match_innings
from cricstats.services.records.paginator import PagedResult
from cricstats.services.records.sort_order import FIELDING_ROW_SORTS, FIELDING_SUMMARY_SORTS
from cricstats.services.records_service import (
    INNINGS_TIE_BREAKERS,
    MATCH_TIE_BREAKERS,
    RecordsService,
    select_columns,
    summary_tie_breakers,
)

MATCH_CONTEXT = ["name", "sort_name_part", "team", "opponents", "ground", "match_date", "match_type"]

COUNTS = ["caught_fielder", "caught_keeper", "stumped", "dismissals", "caught", "wicket_keeper_dismissals"]

ROW_COLUMNS = ["player_id", "match_id", *MATCH_CONTEXT, "innings_number", "innings_order", *COUNTS]


def fielding_innings(details: pd.DataFrame, threshold: int = 0) -> pd.DataFrame:
    if details.empty:
        return details
    frame = apply_threshold(prepare_fielding(details), "dismissals", threshold)
    return int_columns(select_columns(frame, ROW_COLUMNS).copy(), COUNTS)


def fielding_match_totals(details: pd.DataFrame, threshold: int = 0) -> pd.DataFrame:
    if details.empty:
        return details
    combined = combine_match_innings(
        prepare_fielding(details),
        ["player_id", "match_id"],
        COUNTS,
        carry=[*MATCH_CONTEXT, "innings_order"],
    )
    combined = apply_threshold(combined, "dismissals", threshold)
    return int_columns(select_columns(combined, ROW_COLUMNS).copy(), COUNTS)


@dataclass
class FieldingService(RecordsService):
    def summary(self, criteria: QualificationFilter, dimension: Dimension) -> PagedResult:
        key = dimension_key(dimension)

        def build(extractor: DetailExtractor) -> pd.DataFrame:
            frame = DimensionAggregator(key).aggregate(
                FIELDING_PLAN,
                extractor.fielding(),
                extractor.appearances(key),
                threshold=criteria.minimum_threshold,
                opponents_id=criteria.opponents_id,
            )
            return int_columns(
                frame,
                (*COUNTS, "innings", "best_dismissals", "best_caught_keeper", "best_caught_fielder", "best_stumpings"),
            )

        return self.run(criteria, FIELDING_SUMMARY_SORTS, summary_tie_breakers(key), build)

    def innings_by_innings(self, criteria: QualificationFilter) -> PagedResult:
        return self.run(
            criteria,
            FIELDING_ROW_SORTS,
            INNINGS_TIE_BREAKERS,
            lambda extractor: fielding_innings(extractor.fielding(), criteria.minimum_threshold),
        )

    def match_totals(self, criteria: QualificationFilter) -> PagedResult:
        return self.run(
            criteria,
            FIELDING_ROW_SORTS,
            MATCH_TIE_BREAKERS,
            lambda extractor: fielding_match_totals(extractor.fielding(), criteria.minimum_threshold),
        )
